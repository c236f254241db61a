from flask import Blueprint, jsonify, request
from flask_login import login_user, logout_user, current_user

from gamenight.errors import invalid_request, room_not_found
from gamenight.services import lobby, presence, store


rooms = Blueprint('rooms', __name__)


def json_fields(*names):
    """Pull required fields from the JSON body or fail with INVALID_REQUEST."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise invalid_request('Request body must be a JSON object')
    missing = [n for n in names if data.get(n) in (None, '')]
    if missing:
        raise invalid_request(f"Missing required fields: {', '.join(missing)}")
    return data


@rooms.route('/create', methods=['POST'])
def create_room():
    data = json_fields('name', 'game_id')
    room, player = lobby.create_room(data['name'], data['game_id'])
    login_user(store.get_session(player['id']), remember=True)
    return jsonify({
        'room_code': room['room_code'],
        'player_id': player['id'],
        'room': lobby.room_view(room, player['id']),
    }), 201


@rooms.route('/join', methods=['POST'])
def join_room():
    data = json_fields('room_code', 'name')
    room, player = lobby.join_room(data['room_code'], data['name'])
    login_user(store.get_session(player['id']), remember=True)
    return jsonify({
        'room_code': room['room_code'],
        'player_id': player['id'],
        'room': lobby.room_view(room, player['id']),
    })


@rooms.route('/leave', methods=['POST'])
def leave_room():
    data = json_fields('room_code', 'player_id')
    presence.leave_room(data['room_code'], data['player_id'])
    if current_user.is_authenticated and current_user.get_id() == data['player_id']:
        logout_user()
    return jsonify({'success': True})


@rooms.route('/heartbeat', methods=['POST'])
def heartbeat():
    data = json_fields('room_code', 'player_id')
    room = presence.heartbeat(data['room_code'], data['player_id'])
    if room is None:
        raise room_not_found()
    return jsonify({'success': True, 'room': lobby.room_view(room, data['player_id'])})


@rooms.route('/<string:room_code>', methods=['GET'])
def get_room(room_code):
    room = lobby.load_room(room_code)
    return jsonify(lobby.room_view(room, request.args.get('player_id')))
