"""Player actions: validate the caller, apply the rule engine under a
compare-and-swap write, publish what happened, then let due bot turns run."""

import random
import time
from typing import Optional

from flask import current_app

from gamenight.errors import GameError, invalid_request
from gamenight.services import store, lobby
from gamenight.services.events import publish_events
from gamenight.services.games.registry import get_game_module
from gamenight.services.games.scheduler import run_advancement, sync_player_scores

LOBBY_ACTIONS = ('swap-teams', 'set-target-score', 'update-settings')


def process_action(room_code, player_id, action_type, payload=None, action_id=None,
                   now: Optional[float] = None, rng: Optional[random.Random] = None) -> dict:
    if not isinstance(action_type, str) or not action_type:
        raise invalid_request('Action type is required')
    if payload is not None and not isinstance(payload, dict):
        raise invalid_request('Payload must be an object')

    room = lobby.load_room(room_code)
    code = room['room_code']
    lobby.require_human(room, player_id)
    now = time.time() if now is None else now
    rng = rng or random.Random()
    action = {'type': action_type, 'payload': payload or {}}

    if action_type == 'play-again':
        lobby.play_again(code, player_id, now, rng)
        return {'success': True}

    module = get_game_module(room['game_id'])
    if action_type in LOBBY_ACTIONS:
        return _process_lobby_action(room, module, player_id, action)

    if action_id and store.get_last_action_id(code, player_id) == action_id:
        current_app.logger.info(f"[action-dup] room={code} player={player_id} action_id={action_id}")
        return {'success': True, 'duplicate': True}

    if room['status'] != 'playing' or room.get('game') is None:
        raise GameError('No game is running in this room', 'INVALID_PHASE')

    outcome = {}

    def apply(current):
        if current['status'] != 'playing' or current.get('game') is None:
            raise GameError('No game is running in this room', 'INVALID_PHASE')
        lobby.require_human(current, player_id)
        before = current['game']
        after = module.process_action(before, player_id, action, current['players'], now, rng)
        outcome['before'], outcome['after'] = before, after
        if after is before:
            return current
        updated = dict(current)
        updated['game'] = after
        return sync_player_scores(updated, module)

    stored = store.atomic_room_update(code, apply)
    if stored is None:
        raise lobby.race_condition(code)
    if action_id:
        store.record_action_id(code, player_id, action_id)

    before, after = outcome['before'], outcome['after']
    changed = after is not before
    current_app.logger.info(
        f"[action] room={code} player={player_id} type={action_type} changed={changed}"
    )
    if changed:
        publish_events(stored, module.describe_action(before, after, player_id, action, stored['players']))
    else:
        store.refresh_room_ttl(code)

    run_advancement(code, now, rng)
    return {'success': True, 'changed': changed}


def _process_lobby_action(room: dict, module, player_id: str, action: dict) -> dict:
    if room['status'] != 'waiting':
        raise GameError('Settings can only change in the lobby', 'INVALID_PHASE')
    lobby.require_owner(room, player_id)
    outcome = {}

    def apply(current):
        if current['status'] != 'waiting':
            raise GameError('Settings can only change in the lobby', 'INVALID_PHASE')
        lobby.require_owner(current, player_id)
        settings, events = module.process_lobby_action(current['settings'], current['players'], action)
        outcome['events'] = events
        updated = dict(current)
        updated['settings'] = settings
        return updated

    stored = store.atomic_room_update(room['room_code'], apply)
    if stored is None:
        raise lobby.race_condition(room['room_code'])
    current_app.logger.info(f"[lobby] room={room['room_code']} type={action['type']}")
    publish_events(stored, outcome['events'])
    return {'success': True, 'settings': stored['settings']}
