"""Room lifecycle: create, join, start, play again, and per-viewer room views."""

import random
import time
from typing import Optional, Tuple

from flask import current_app

from gamenight.errors import GameError, room_not_found, unauthorized
from gamenight.services import store
from gamenight.services.events import publish_events, publish_room_event
from gamenight.services.games.base import Events, find_player
from gamenight.services.games.registry import get_game_module
from gamenight.services.games.scheduler import run_advancement, sync_player_scores
from gamenight.utils import (
    fill_with_bots, generate_room_code, make_player, normalize_room_code, validate_name,
)


def race_condition(room_code: Optional[str] = None):
    """Error for a lost compare-and-swap write, or ROOM_NOT_FOUND when the room
    was deleted underneath the request."""
    if room_code is not None and not store.room_exists(room_code):
        return room_not_found()
    return GameError('The room changed while your request was processing, please retry', 'RACE_CONDITION')


def load_room(room_code: str) -> dict:
    room = store.get_room(normalize_room_code(room_code))
    if room is None:
        raise room_not_found()
    return room


def require_human(room: dict, player_id: str) -> dict:
    player = find_player(room['players'], player_id) if player_id else None
    if player is None or player['is_bot']:
        raise unauthorized()
    return player


def require_owner(room: dict, player_id: str) -> None:
    if room['owner_id'] != player_id:
        raise GameError('Only the room owner can do that', 'NOT_OWNER')


def room_view(room: dict, player_id: Optional[str]) -> dict:
    """The room as ``player_id`` may see it: hidden game data stripped."""
    view = dict(room)
    if room.get('game') is not None:
        module = get_game_module(room['game_id'])
        view['game'] = module.sanitize_for_player(room['game'], player_id)
    return view


def create_room(name, game_id, now: Optional[float] = None) -> Tuple[dict, dict]:
    name = validate_name(name)
    module = get_game_module(game_id)
    now = time.time() if now is None else now

    creator = make_player(name, now=now)
    players = fill_with_bots([creator], module.max_players, now)
    code = generate_room_code(store.room_exists)
    room = {
        'room_code': code,
        'created_at': now,
        'status': 'waiting',
        'owner_id': creator['id'],
        'game_id': module.game_id,
        'players': players,
        'settings': module.default_settings(players, current_app.config),
        'game': None,
    }
    store.create_room(room)
    store.create_session(creator['id'], name, code)
    store.set_heartbeat(code, creator['id'], now)

    current_app.logger.info(f"[room-create] room={code} game={module.game_id} owner={creator['id']}")
    publish_room_event(room, 'room-created', {'room_code': code, 'game_id': module.game_id,
                                              'owner_id': creator['id']})
    return room, creator


def join_room(room_code, name, now: Optional[float] = None) -> Tuple[dict, dict]:
    name = validate_name(name)
    room = load_room(room_code)
    code = room['room_code']
    if room['status'] != 'waiting':
        raise GameError('Game already in progress', 'GAME_IN_PROGRESS')
    if not any(p['is_bot'] for p in room['players']):
        raise GameError('Room is full', 'ROOM_FULL')

    module = get_game_module(room['game_id'])
    now = time.time() if now is None else now
    joiner = make_player(name, now=now)
    claimed = {}

    def claim_seat(current):
        if current['status'] != 'waiting':
            raise GameError('Game already in progress', 'GAME_IN_PROGRESS')
        seat = next((i for i, p in enumerate(current['players']) if p['is_bot']), None)
        if seat is None:
            raise GameError('Room is full', 'ROOM_FULL')
        bot_id = current['players'][seat]['id']
        players = list(current['players'])
        players[seat] = joiner
        updated = dict(current)
        updated['players'] = players
        updated['settings'] = module.replace_in_settings(current['settings'], bot_id, joiner['id'])
        claimed['seat_index'] = seat
        return updated

    stored = store.atomic_room_update(code, claim_seat)
    if stored is None:
        # one more try against the fresh room before giving up
        stored = store.atomic_room_update(code, claim_seat)
    if stored is None:
        raise race_condition(code)

    store.create_session(joiner['id'], name, code)
    store.set_heartbeat(code, joiner['id'], now)
    current_app.logger.info(f"[join] room={code} player={joiner['id']} seat={claimed['seat_index']}")

    events = Events().to_room('player-joined', {'player': joiner, 'seat_index': claimed['seat_index']})
    if 'teams' in stored['settings']:
        events.to_room('teams-updated', {'teams': stored['settings']['teams']})
    publish_events(stored, events)
    return stored, joiner


def _fresh_scores(players):
    return [dict(p, score=0) for p in players]


def start_game(room_code, player_id, now: Optional[float] = None,
               rng: Optional[random.Random] = None) -> dict:
    room = load_room(room_code)
    code = room['room_code']
    require_human(room, player_id)
    require_owner(room, player_id)
    if room['status'] == 'playing':
        return room

    module = get_game_module(room['game_id'])
    now = time.time() if now is None else now
    rng = rng or random.Random()

    def begin(current):
        if current['status'] == 'playing':
            return current
        require_owner(current, player_id)
        updated = dict(current)
        updated['players'] = _fresh_scores(current['players'])
        updated['game'] = module.initialize(updated['players'], current['settings'], now, rng)
        updated['status'] = 'playing'
        return sync_player_scores(updated, module)

    stored = store.atomic_room_update(code, begin)
    if stored is None:
        raise race_condition(code)

    current_app.logger.info(f"[start] room={code} game={room['game_id']}")
    events = Events().to_room('game-started', {'game_id': stored['game_id'], 'players': stored['players']})
    publish_events(stored, events.extend(module.private_updates(stored['game'], stored['players'])))
    run_advancement(code, now, rng)
    return store.get_room(code) or stored


def play_again(room_code, player_id, now: Optional[float] = None,
               rng: Optional[random.Random] = None) -> dict:
    room = load_room(room_code)
    code = room['room_code']
    require_human(room, player_id)
    require_owner(room, player_id)
    module = get_game_module(room['game_id'])
    now = time.time() if now is None else now
    rng = rng or random.Random()

    def restart(current):
        if current['status'] != 'playing' or current.get('game') is None \
                or not module.check_game_over(current['game']):
            raise GameError('The game is not over yet', 'INVALID_PHASE')
        updated = dict(current)
        updated['players'] = _fresh_scores(current['players'])
        state = None
        if module.restart_in_place:
            state = module.play_again(current['game'], updated['players'], current['settings'], now, rng)
        if state is None:
            updated['status'] = 'waiting'
            updated['game'] = None
            return updated
        updated['game'] = state
        return sync_player_scores(updated, module)

    stored = store.atomic_room_update(code, restart)
    if stored is None:
        raise race_condition(code)

    if stored['game'] is None:
        current_app.logger.info(f"[play-again] room={code} back to lobby")
        publish_room_event(stored, 'returned-to-lobby', {'settings': stored['settings']})
        return stored

    current_app.logger.info(f"[play-again] room={code} restarted in place")
    events = Events().to_room('game-started', {'game_id': stored['game_id'], 'players': stored['players']})
    publish_events(stored, events.extend(module.private_updates(stored['game'], stored['players'])))
    run_advancement(code, now, rng)
    return store.get_room(code) or stored
