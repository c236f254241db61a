from flask import jsonify


ERROR_STATUS = {
    'INVALID_REQUEST': 400,
    'INVALID_NAME': 400,
    'INVALID_GAME': 400,
    'INVALID_SETTING': 400,
    'INVALID_SWAP': 400,
    'INVALID_SUBMISSION': 400,
    'INVALID_SUIT': 400,
    'MUST_CALL': 400,
    'INVALID_CARD': 400,
    'MUST_FOLLOW_SUIT': 400,
    'UNAUTHORIZED': 401,
    'NOT_OWNER': 403,
    'GAME_IN_PROGRESS': 403,
    'NOT_YOUR_TURN': 403,
    'NOT_DEALER': 403,
    'INACTIVE_PARTNER': 403,
    'ROOM_NOT_FOUND': 404,
    'INVALID_PHASE': 409,
    'ALREADY_SUBMITTED': 409,
    'RACE_CONDITION': 409,
    'ROOM_FULL': 410,
    'INTERNAL_ERROR': 500,
}


class GameError(Exception):
    """A rejected request: carries a human message and a stable machine code.

    Raised by rule engines and services; the app-level handler renders it as
    ``{'error': message, 'code': code}`` with the mapped HTTP status.
    """

    def __init__(self, message, code, status=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status or ERROR_STATUS.get(code, 400)

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


def room_not_found():
    return GameError('Room not found', 'ROOM_NOT_FOUND')


def unauthorized(message='You are not in this room'):
    return GameError(message, 'UNAUTHORIZED')


def invalid_request(message):
    return GameError(message, 'INVALID_REQUEST')


def handle_game_error(err: GameError):
    return jsonify(err.to_dict()), err.status
