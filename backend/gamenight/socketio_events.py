from flask_login import current_user
from flask_socketio import join_room, leave_room, emit

from gamenight.services import store
from gamenight.services.games.base import find_player


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def _authorized(channel: str) -> bool:
    """Room channels need a seat in that room; player channels only your own id."""
    if not current_user.is_authenticated:
        return False
    player_id = current_user.get_id()
    kind, _, key = channel.partition(':')
    if kind == 'player':
        return key == player_id
    if kind == 'room':
        room = store.get_room(key.upper())
        return room is not None and find_player(room['players'], player_id) is not None
    return False


def handle_subscribe(data):
    channel = (data or {}).get('channel')
    if not isinstance(channel, str) or not channel:
        emit('error', {'message': 'channel is required', 'code': 'INVALID_REQUEST'})
        return
    if not _authorized(channel):
        emit('error', {'message': f'Not allowed to subscribe to {channel}', 'code': 'UNAUTHORIZED'})
        return
    join_room(channel)
    emit('subscribed', {'channel': channel})


def handle_unsubscribe(data):
    channel = (data or {}).get('channel')
    if not isinstance(channel, str) or not channel:
        emit('error', {'message': 'channel is required', 'code': 'INVALID_REQUEST'})
        return
    leave_room(channel)
    emit('unsubscribed', {'channel': channel})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    from gamenight import socketio

    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('subscribe', handle_subscribe, namespace=namespace)
        socketio.on_event('unsubscribe', handle_unsubscribe, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
