"""Battleship for two seats: ``setup -> playing -> game_over``.

Each board keeps its own ships and the shots it has received. Misfires
(wrong turn, off-grid, repeated cell) are no-ops; bad fleet layouts raise.
"""

import random
from typing import List, Optional

from gamenight.errors import GameError
from ..base import clone, is_bot, random_delay
from .constants import (
    SHIP_SETS, VALID_COMBOS, DEFAULT_GRID_SIZE, DEFAULT_SHIP_SET,
    BOT_SETUP_DELAY, BOT_SHOT_DELAY,
)


def ship_templates(ship_set: str) -> List[dict]:
    return SHIP_SETS.get(ship_set) or SHIP_SETS[DEFAULT_SHIP_SET]


def valid_combo(grid_size, ship_set) -> bool:
    return ship_set in VALID_COMBOS.get(grid_size, ())


def opponent_of(state: dict, player_id: str) -> str:
    first, second = state['turn_order']
    return second if player_id == first else first


def expand(placement: dict, size: int) -> List[dict]:
    row, col = placement['row'], placement['col']
    vertical = placement.get('orientation') == 'vertical'
    return [
        {'row': row + i if vertical else row, 'col': col if vertical else col + i}
        for i in range(size)
    ]


def validate_placements(placements, grid_size: int, templates: List[dict]) -> Optional[List[dict]]:
    """Build ships from a layout, or ``None`` if any rule is broken."""
    if not isinstance(placements, list) or len(placements) != len(templates):
        return None
    remaining = {t['id']: t for t in templates}
    occupied = set()
    ships = []
    for placement in placements:
        if not isinstance(placement, dict):
            return None
        ship_id = placement.get('ship_id')
        if not isinstance(ship_id, str):
            return None
        template = remaining.pop(ship_id, None)
        row, col = placement.get('row'), placement.get('col')
        if template is None or not isinstance(row, int) or not isinstance(col, int):
            return None
        if placement.get('orientation') not in ('horizontal', 'vertical'):
            return None
        positions = expand(placement, template['size'])
        for pos in positions:
            key = (pos['row'], pos['col'])
            if not (0 <= pos['row'] < grid_size and 0 <= pos['col'] < grid_size) or key in occupied:
                return None
            occupied.add(key)
        ships.append({
            'id': template['id'],
            'name': template['name'],
            'size': template['size'],
            'positions': positions,
            'hits': [],
            'sunk': False,
        })
    if remaining:
        return None
    return ships


def initialize_game(players: List[dict], settings: dict, now: float, rng: random.Random) -> dict:
    settings = settings or {}
    grid_size = settings.get('grid_size', DEFAULT_GRID_SIZE)
    ship_set = settings.get('ship_set', DEFAULT_SHIP_SET)
    if not valid_combo(grid_size, ship_set):
        grid_size, ship_set = DEFAULT_GRID_SIZE, DEFAULT_SHIP_SET

    turn_order = [players[0]['id'], players[1]['id']]
    has_bot = any(p['is_bot'] for p in players[:2])
    return {
        'phase': 'setup',
        'grid_size': grid_size,
        'ship_set': ship_set,
        'boards': {pid: {'ships': [], 'shots_received': []} for pid in turn_order},
        'turn_order': turn_order,
        'current_turn': turn_order[0],
        'winner': None,
        'setup_ready': [],
        'last_shot': None,
        'shot_history': [],
        'bot_action_at': now + random_delay(rng, BOT_SETUP_DELAY) if has_bot else None,
    }


def place_ships(state: dict, player_id: str, placements, players: List[dict],
                now: float, rng: random.Random) -> dict:
    if state['phase'] != 'setup' or player_id not in state['boards']:
        return state
    if player_id in state['setup_ready']:
        raise GameError('Fleet already placed', 'ALREADY_SUBMITTED')
    ships = validate_placements(placements, state['grid_size'], ship_templates(state['ship_set']))
    if ships is None:
        raise GameError('Invalid ship placement', 'INVALID_SUBMISSION')

    new = clone(state)
    new['boards'][player_id]['ships'] = ships
    new['setup_ready'].append(player_id)
    if len(new['setup_ready']) == 2:
        new['phase'] = 'playing'
        new['current_turn'] = new['turn_order'][0]
        new['bot_action_at'] = _shot_due(new, players, now, rng)
    return new


def _shot_due(state: dict, players: List[dict], now: float, rng: random.Random):
    if state['phase'] == 'playing' and is_bot(players, state['current_turn']):
        return now + random_delay(rng, BOT_SHOT_DELAY)
    return None


def fire(state: dict, player_id: str, row, col, players: List[dict],
         now: float, rng: random.Random) -> dict:
    if state['phase'] != 'playing' or state['current_turn'] != player_id:
        return state
    if not isinstance(row, int) or not isinstance(col, int):
        return state
    size = state['grid_size']
    if not (0 <= row < size and 0 <= col < size):
        return state
    defender = opponent_of(state, player_id)
    board = state['boards'][defender]
    if any(s['row'] == row and s['col'] == col for s in board['shots_received']):
        return state

    new = clone(state)
    board = new['boards'][defender]
    hit_ship = None
    for ship in board['ships']:
        if not ship['sunk'] and any(p['row'] == row and p['col'] == col for p in ship['positions']):
            hit_ship = ship
            break

    sunk = False
    if hit_ship is not None:
        hit_ship['hits'].append({'row': row, 'col': col})
        sunk = len(hit_ship['hits']) == hit_ship['size']
        hit_ship['sunk'] = sunk
    board['shots_received'].append({
        'row': row,
        'col': col,
        'result': 'hit' if hit_ship else 'miss',
        'ship_id': hit_ship['id'] if hit_ship else None,
    })
    shot = {
        'attacker_id': player_id,
        'defender_id': defender,
        'row': row,
        'col': col,
        'result': 'sunk' if sunk else ('hit' if hit_ship else 'miss'),
        'ship_name': hit_ship['name'] if sunk else None,
        'ship_positions': hit_ship['positions'] if sunk else None,
    }
    new['last_shot'] = shot
    new['shot_history'].append(shot)

    if all(s['sunk'] for s in board['ships']):
        new['phase'] = 'game_over'
        new['winner'] = player_id
        new['bot_action_at'] = None
        return new
    new['current_turn'] = defender
    new['bot_action_at'] = _shot_due(new, players, now, rng)
    return new


def process_action(state: dict, player_id: str, action: dict, players: List[dict],
                   now: float, rng: random.Random) -> dict:
    kind = action.get('type')
    payload = action.get('payload') or {}
    if kind == 'place-ships':
        new = place_ships(state, player_id, payload.get('ships'), players, now, rng)
        if new is not state and new['phase'] == 'setup':
            new['bot_action_at'] = _setup_due(new, players, now, rng)
        return new
    if kind == 'fire':
        return fire(state, player_id, payload.get('row'), payload.get('col'), players, now, rng)
    return state


def _setup_due(state: dict, players: List[dict], now: float, rng: random.Random):
    pending = [pid for pid in state['turn_order']
               if pid not in state['setup_ready'] and is_bot(players, pid)]
    if not pending:
        return None
    return state.get('bot_action_at') or now + random_delay(rng, BOT_SETUP_DELAY)


def replace_player(state: dict, departing_id: str, bot_id: str, players: List[dict],
                   now: float, rng: random.Random) -> dict:
    def swap(pid):
        return bot_id if pid == departing_id else pid

    new = clone(state)
    new['turn_order'] = [swap(pid) for pid in new['turn_order']]
    if departing_id in new['boards']:
        new['boards'][bot_id] = new['boards'].pop(departing_id)
    new['setup_ready'] = [swap(pid) for pid in new['setup_ready']]
    new['current_turn'] = swap(new['current_turn'])
    new['winner'] = swap(new['winner'])
    for shot in new['shot_history'] + ([new['last_shot']] if new['last_shot'] else []):
        shot['attacker_id'] = swap(shot['attacker_id'])
        shot['defender_id'] = swap(shot['defender_id'])

    if new['phase'] == 'setup' and bot_id not in new['setup_ready'] and not new['bot_action_at']:
        new['bot_action_at'] = now + random_delay(rng, BOT_SETUP_DELAY)
    elif new['phase'] == 'playing' and new['current_turn'] == bot_id and not new['bot_action_at']:
        new['bot_action_at'] = now + random_delay(rng, BOT_SHOT_DELAY)
    return new


def sanitize(state: dict, player_id: str) -> dict:
    opponent = opponent_of(state, player_id)
    mine = state['boards'].get(player_id) or {'ships': [], 'shots_received': []}
    theirs = state['boards'].get(opponent) or {'ships': [], 'shots_received': []}
    view = {
        'phase': state['phase'],
        'grid_size': state['grid_size'],
        'ship_set': state['ship_set'],
        'my_board': clone(mine),
        'opponent_board': {
            'shots_received': clone(theirs['shots_received']),
            'sunk_ships': [clone(s) for s in theirs['ships'] if s['sunk']],
            'ships_remaining': sum(1 for s in theirs['ships'] if not s['sunk']),
        },
        'current_turn': state['current_turn'],
        'is_my_turn': state['current_turn'] == player_id,
        'last_shot': clone(state['last_shot']),
        'winner': state['winner'],
        'turn_order': list(state['turn_order']),
        'setup_ready': list(state['setup_ready']),
        'bot_action_at': state.get('bot_action_at'),
    }
    if state['phase'] == 'game_over':
        view['opponent_ships'] = clone(theirs['ships'])
    return view
