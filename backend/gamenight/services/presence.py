"""Heartbeats, disconnect detection and bot replacement.

A human whose heartbeat is older than ``DISCONNECT_TIMEOUT_SEC`` is marked
disconnected; past ``BOT_REPLACEMENT_TIMEOUT_SEC`` a bot takes the seat. Both
checks run on the heartbeats of the other players in the room, and over
every live room from the ``sweep-presence`` command.
"""

import random
import time
from typing import Optional

from flask import current_app

from gamenight.errors import GameError
from gamenight.services import store, lobby
from gamenight.services.events import publish_events, publish_room_event
from gamenight.services.games.base import Events, find_player
from gamenight.services.games.registry import get_game_module
from gamenight.services.games.scheduler import run_advancement
from gamenight.utils import create_bot_for_seat, humans


def heartbeat(room_code, player_id, now: Optional[float] = None,
              rng: Optional[random.Random] = None) -> Optional[dict]:
    room = lobby.load_room(room_code)
    code = room['room_code']
    lobby.require_human(room, player_id)
    now = time.time() if now is None else now
    rng = rng or random.Random()

    store.set_heartbeat(code, player_id, now)
    store.refresh_room_ttl(code)
    if room['status'] == 'playing':
        run_advancement(code, now, rng)

    check_stale_players(code, player_id, now, rng)

    me = find_player((store.get_room(code) or {'players': []})['players'], player_id)
    if me is not None and not me['is_connected']:
        set_connected(code, player_id, True)
    return store.get_room(code)


def check_stale_players(room_code: str, caller_id: Optional[str], now: float, rng: random.Random) -> None:
    room = store.get_room(room_code)
    if room is None:
        return
    disconnect_after = current_app.config.get('DISCONNECT_TIMEOUT_SEC', 15)
    replace_after = current_app.config.get('BOT_REPLACEMENT_TIMEOUT_SEC', 60)

    for player in humans(room['players']):
        if player['id'] == caller_id:
            continue
        last_seen = store.get_heartbeat(room_code, player['id'])
        if last_seen is None:
            continue
        elapsed = now - last_seen
        if elapsed > replace_after:
            current_app.logger.info(f"[stale] room={room_code} player={player['id']} idle={elapsed:.0f}s")
            replace_player(room_code, player['id'], now, rng)
            if not store.room_exists(room_code):
                return
        elif elapsed > disconnect_after and player['is_connected']:
            current_app.logger.info(f"[disconnect] room={room_code} player={player['id']} idle={elapsed:.0f}s")
            set_connected(room_code, player['id'], False)


def sweep_stale_rooms(now: Optional[float] = None, rng: Optional[random.Random] = None) -> int:
    """Run the stale checks over every live room. Returns how many rooms were destroyed."""
    now = time.time() if now is None else now
    rng = rng or random.Random()
    destroyed = 0
    for code in store.list_room_codes():
        check_stale_players(code, None, now, rng)
        if not store.room_exists(code):
            destroyed += 1
    return destroyed


def set_connected(room_code: str, player_id: str, connected: bool) -> Optional[dict]:
    def toggle(current):
        player = find_player(current['players'], player_id)
        if player is None or player['is_connected'] == connected:
            return current
        updated = dict(current)
        updated['players'] = [
            dict(p, is_connected=connected) if p['id'] == player_id else p
            for p in current['players']
        ]
        return updated

    before = store.get_room(room_code)
    stored = store.atomic_room_update(room_code, toggle)
    if stored is None or before is None:
        return stored
    was = find_player(before['players'], player_id)
    if was is not None and was['is_connected'] != connected:
        event = 'player-reconnected' if connected else 'player-disconnected'
        publish_room_event(stored, event, {'player_id': player_id})
    return stored


def _next_owner(players, departing_id: str) -> Optional[str]:
    remaining = sorted(
        (p for p in players if not p['is_bot'] and p['id'] != departing_id),
        key=lambda p: p['joined_at'],
    )
    return remaining[0]['id'] if remaining else None


def replace_player(room_code: str, departing_id: str, now: Optional[float] = None,
                   rng: Optional[random.Random] = None) -> Optional[dict]:
    """Seat a bot in place of ``departing_id``, or destroy the room if they
    were the last human. Returns the stored room, or ``None`` when the room
    is gone or the write lost a race."""
    room = store.get_room(room_code)
    if room is None:
        return None
    departing = find_player(room['players'], departing_id)
    if departing is None or departing['is_bot']:
        return room
    if _next_owner(room['players'], departing_id) is None:
        destroy_room(room_code, reason='empty')
        return None

    now = time.time() if now is None else now
    rng = rng or random.Random()
    module = get_game_module(room['game_id'])
    outcome = {}

    def substitute(current):
        players = current['players']
        seat = next((i for i, p in enumerate(players) if p['id'] == departing_id), None)
        if seat is None or players[seat]['is_bot']:
            return current
        new_owner = _next_owner(players, departing_id)
        if new_owner is None:
            return None
        bot = create_bot_for_seat(players, now)
        bot['score'] = players[seat]['score']
        seated = list(players)
        seated[seat] = bot

        updated = dict(current)
        updated['players'] = seated
        if current['owner_id'] == departing_id:
            updated['owner_id'] = new_owner
        updated['settings'] = module.replace_in_settings(current['settings'], departing_id, bot['id'])
        if current.get('game') is not None:
            updated['game'] = module.process_player_replacement(
                current['game'], departing_id, bot['id'], seat, seated, now, rng)
        outcome['bot'] = bot
        return updated

    stored = store.atomic_room_update(room_code, substitute)
    if stored is None:
        return None
    bot = outcome.get('bot')
    if bot is None:
        return stored

    store.delete_session(departing_id)
    store.delete_heartbeat(room_code, departing_id)
    current_app.logger.info(f"[replace] room={room_code} player={departing_id} bot={bot['id']}")

    events = Events().to_room('player-left', {
        'player_id': departing_id,
        'new_owner_id': stored['owner_id'] if stored['owner_id'] != room['owner_id'] else None,
        'replacement_bot': bot,
    })
    if 'teams' in stored['settings']:
        events.to_room('teams-updated', {'teams': stored['settings']['teams']})
    publish_events(stored, events)

    if stored['status'] == 'playing':
        run_advancement(room_code, now, rng)
    return stored


def destroy_room(room_code: str, reason: str = 'empty') -> None:
    room = store.get_room(room_code)
    if room is None:
        return
    for player in room['players']:
        if not player['is_bot']:
            store.delete_session(player['id'])
        store.delete_heartbeat(room_code, player['id'])
    store.delete_action_records(room_code)
    store.delete_room(room_code)
    current_app.logger.info(f"[destroy] room={room_code} reason={reason}")
    publish_room_event(room, 'room-destroyed', {'reason': reason})


def leave_room(room_code, player_id, now: Optional[float] = None,
               rng: Optional[random.Random] = None) -> Optional[dict]:
    room = lobby.load_room(room_code)
    lobby.require_human(room, player_id)
    code = room['room_code']
    if len(humans(room['players'])) <= 1:
        destroy_room(code, reason='empty')
        return None
    stored = replace_player(code, player_id, now, rng)
    if stored is None and store.room_exists(code):
        raise GameError('The room changed while you were leaving, please retry', 'RACE_CONDITION')
    return stored
