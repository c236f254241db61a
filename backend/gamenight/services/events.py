"""Best-effort event publishing over Socket.IO channels.

State changes are committed before anything is published here; a failure to
publish is logged and dropped, never raised back into the request.
"""

from flask import current_app

from gamenight import socketio


NAMESPACE = '/ws'


def room_channel(room_code: str) -> str:
    return f"room:{room_code}"


def player_channel(player_id: str) -> str:
    return f"player:{player_id}"


def envelope(room: dict, event: str, data: dict) -> dict:
    return {
        'event': event,
        'room_code': room['room_code'],
        'game_id': room.get('game_id'),
        'data': data,
    }


def publish(channel: str, event: str, message: dict) -> bool:
    try:
        socketio.emit(event, message, to=channel, namespace=NAMESPACE)
        return True
    except Exception as exc:
        current_app.logger.warning(f"[publish-failed] channel={channel} event={event} error={exc}")
        return False


def publish_room_event(room: dict, event: str, data: dict) -> bool:
    return publish(room_channel(room['room_code']), event, envelope(room, event, data))


def publish_player_event(room: dict, player_id: str, event: str, data: dict) -> bool:
    return publish(player_channel(player_id), event, envelope(room, event, data))


def publish_events(room: dict, events) -> None:
    """Publish an ``Events`` bundle: room-wide first, then private deliveries."""
    if events is None:
        return
    for event, data in events.room:
        publish_room_event(room, event, data)
    for player_id, event, data in events.private:
        publish_player_event(room, player_id, event, data)
