import copy
import random

import pytest

from gamenight.errors import GameError
from gamenight.services import dispatch, lobby, presence, store


NOW = 1_700_000_000.0


def two_human_room(game_id):
    room, owner = lobby.create_room('Ada', game_id, NOW)
    code = room['room_code']
    _, guest = lobby.join_room(code, 'Grace', NOW)
    return code, owner, guest


def events_named(published, name):
    return [message['data'] for _, event, message in published if event == name]


def test_idle_player_is_marked_disconnected_then_reconnects(flask_app, published):
    code, owner, guest = two_human_room('4-kate')
    presence.heartbeat(code, owner['id'], NOW + 20)
    seated = {p['id']: p for p in store.get_room(code)['players']}
    assert seated[guest['id']]['is_connected'] is False
    assert events_named(published, 'player-disconnected') == [{'player_id': guest['id']}]

    room = presence.heartbeat(code, guest['id'], NOW + 21)
    seated = {p['id']: p for p in room['players']}
    assert seated[guest['id']]['is_connected'] is True
    assert events_named(published, 'player-reconnected') == [{'player_id': guest['id']}]


def test_long_idle_player_is_replaced_mid_game(flask_app, published):
    rng = random.Random(3)
    code, owner, guest = two_human_room('4-kate')
    lobby.start_game(code, owner['id'], NOW, rng)
    dispatch.process_action(code, owner['id'], 'drop', {'column': 3}, None, NOW, rng)

    presence.heartbeat(code, owner['id'], NOW + 70, rng)
    room = store.get_room(code)
    bot = room['players'][1]
    assert bot['is_bot'] is True
    assert room['owner_id'] == owner['id']
    game = room['game']
    assert game['players']['yellow'] == bot['id']
    assert game['board'][3][0] == 'red'
    assert game['bot_action_at'] == NOW + 70 + 1.0

    assert store.get_session(guest['id']) is None
    left = events_named(published, 'player-left')
    assert left[0]['player_id'] == guest['id']
    assert left[0]['new_owner_id'] is None
    assert left[0]['replacement_bot']['id'] == bot['id']

    with pytest.raises(GameError) as exc:
        presence.heartbeat(code, guest['id'], NOW + 71)
    assert exc.value.code == 'UNAUTHORIZED'


def test_leaving_owner_hands_over_room_and_score(flask_app, published):
    rng = random.Random(5)
    code, owner, guest = two_human_room('terrible-people')
    lobby.start_game(code, owner['id'], NOW, rng)

    def award(room):
        updated = copy.deepcopy(room)
        updated['game']['scores'][owner['id']] = 3
        updated['players'][0]['score'] = 3
        return updated
    store.atomic_room_update(code, award)

    presence.leave_room(code, owner['id'], NOW, rng)
    room = store.get_room(code)
    bot = room['players'][0]
    assert bot['is_bot'] and bot['score'] == 3
    assert room['owner_id'] == guest['id']
    assert room['game']['seats'][0] == bot['id']
    assert room['game']['scores'][bot['id']] == 3
    assert owner['id'] not in room['game']['hands']
    assert events_named(published, 'player-left')[0]['new_owner_id'] == guest['id']


def test_lobby_replacement_keeps_team_seat(flask_app, published):
    code, owner, guest = two_human_room('whos-deal')
    presence.leave_room(code, guest['id'], NOW)
    room = store.get_room(code)
    bot_id = room['players'][1]['id']
    assert room['settings']['teams']['b'][0] == bot_id
    assert events_named(published, 'teams-updated')


def test_last_human_leaving_destroys_room(flask_app, published):
    room, owner = lobby.create_room('Ada', '4-kate', NOW)
    code = room['room_code']
    assert presence.leave_room(code, owner['id'], NOW) is None
    assert store.get_room(code) is None
    assert store.get_session(owner['id']) is None
    assert events_named(published, 'room-destroyed') == [{'reason': 'empty'}]
    with pytest.raises(GameError) as exc:
        lobby.load_room(code)
    assert exc.value.code == 'ROOM_NOT_FOUND'


def test_last_human_timing_out_destroys_room(flask_app, published):
    rng = random.Random(6)
    room, owner = lobby.create_room('Ada', '4-kate', NOW)
    code = room['room_code']
    lobby.start_game(code, owner['id'], NOW, rng)

    assert presence.sweep_stale_rooms(NOW + 30, rng) == 0
    seated = {p['id']: p for p in store.get_room(code)['players']}
    assert seated[owner['id']]['is_connected'] is False

    assert presence.sweep_stale_rooms(NOW + 61, rng) == 1
    assert store.get_room(code) is None
    assert store.get_session(owner['id']) is None
    assert store.get_heartbeat(code, owner['id']) is None
    assert events_named(published, 'room-destroyed') == [{'reason': 'empty'}]
    assert events_named(published, 'player-left') == []
    with pytest.raises(GameError) as exc:
        presence.heartbeat(code, owner['id'], NOW + 62)
    assert exc.value.code == 'ROOM_NOT_FOUND'


def test_sweep_replaces_one_idle_human_and_keeps_the_room(flask_app, published):
    code, owner, guest = two_human_room('4-kate')
    store.set_heartbeat(code, owner['id'], NOW + 60)
    assert presence.sweep_stale_rooms(NOW + 70) == 0
    room = store.get_room(code)
    assert room['players'][1]['is_bot'] is True
    assert room['owner_id'] == owner['id']
    assert events_named(published, 'player-left')[0]['player_id'] == guest['id']
