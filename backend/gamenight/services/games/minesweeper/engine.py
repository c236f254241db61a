"""Server-side minesweeper for a single player.

Cells are a flat list indexed ``row * cols + col``. Mines are laid on the
first reveal so the clicked cell and its neighbours are always safe.
"""

import random
from collections import deque
from typing import List, Set

from ..base import clone

MIN_ROWS, MAX_ROWS = 10, 24
MIN_COLS, MAX_COLS = 8, 20
DEFAULT_ROWS = 16
DEFAULT_COLS = 12
DEFAULT_DIFFICULTY = 'easy'

MINE_DENSITY = {
    'easy': 0.12,
    'medium': 0.16,
    'hard': 0.20,
}


def mine_count_for(rows: int, cols: int, difficulty: str) -> int:
    total = rows * cols
    # half-up rounding
    return max(1, min(total - 9, int(total * MINE_DENSITY[difficulty] + 0.5)))


def neighbours(index: int, rows: int, cols: int) -> List[int]:
    r, c = divmod(index, cols)
    found = []
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            nr, nc = r + dr, c + dc
            if 0 <= nr < rows and 0 <= nc < cols:
                found.append(nr * cols + nc)
    return found


def initialize_game(settings: dict, now: float) -> dict:
    settings = settings or {}
    rows = settings.get('rows', DEFAULT_ROWS)
    cols = settings.get('cols', DEFAULT_COLS)
    difficulty = settings.get('difficulty', DEFAULT_DIFFICULTY)
    return {
        'phase': 'ready',
        'difficulty': difficulty,
        'rows': rows,
        'cols': cols,
        'mine_count': mine_count_for(rows, cols, difficulty),
        'cells': [
            {'mine': False, 'revealed': False, 'flagged': False, 'adjacent': 0}
            for _ in range(rows * cols)
        ],
        'mine_positions': None,
        'revealed_count': 0,
        'flag_count': 0,
        'started_at': None,
        'ended_at': None,
        'triggered_mine_index': None,
    }


def generate_mines(state: dict, safe_index: int, rng: random.Random) -> None:
    rows, cols = state['rows'], state['cols']
    excluded: Set[int] = {safe_index, *neighbours(safe_index, rows, cols)}
    eligible = [i for i in range(rows * cols) if i not in excluded]
    positions = rng.sample(eligible, min(state['mine_count'], len(eligible)))
    cells = state['cells']
    for pos in positions:
        cells[pos]['mine'] = True
        for n in neighbours(pos, rows, cols):
            cells[n]['adjacent'] += 1
    state['mine_positions'] = sorted(positions)


def flood_reveal(state: dict, start: int) -> List[int]:
    cells = state['cells']
    opened = []
    queue = deque([start])
    while queue:
        idx = queue.popleft()
        cell = cells[idx]
        if cell['revealed'] or cell['flagged']:
            continue
        cell['revealed'] = True
        opened.append(idx)
        if cell['adjacent'] == 0 and not cell['mine']:
            for n in neighbours(idx, state['rows'], state['cols']):
                if not cells[n]['revealed'] and not cells[n]['flagged']:
                    queue.append(n)
    state['revealed_count'] += len(opened)
    return opened


def _index_of(state: dict, payload: dict):
    row, col = payload.get('row'), payload.get('col')
    if not isinstance(row, int) or not isinstance(col, int):
        return None
    if not (0 <= row < state['rows'] and 0 <= col < state['cols']):
        return None
    return row * state['cols'] + col


def _settle(state: dict, opened: List[int], now: float) -> None:
    cells = state['cells']
    for idx in opened:
        if cells[idx]['mine']:
            state['phase'] = 'lost'
            state['triggered_mine_index'] = idx
            state['ended_at'] = now
            return
    safe = state['rows'] * state['cols'] - state['mine_count']
    if state['revealed_count'] >= safe:
        state['phase'] = 'won'
        state['ended_at'] = now


def reveal(state: dict, index: int, now: float, rng: random.Random) -> dict:
    cell = state['cells'][index]
    if cell['revealed'] or cell['flagged']:
        return state
    new = clone(state)
    if new['phase'] == 'ready':
        generate_mines(new, index, rng)
        new['phase'] = 'playing'
        new['started_at'] = now
    _settle(new, flood_reveal(new, index), now)
    return new


def toggle_flag(state: dict, index: int) -> dict:
    if state['cells'][index]['revealed']:
        return state
    new = clone(state)
    cell = new['cells'][index]
    cell['flagged'] = not cell['flagged']
    new['flag_count'] += 1 if cell['flagged'] else -1
    return new


def chord(state: dict, index: int, now: float) -> dict:
    cell = state['cells'][index]
    if state['phase'] != 'playing' or not cell['revealed'] or cell['adjacent'] == 0:
        return state
    around = neighbours(index, state['rows'], state['cols'])
    flags = sum(1 for n in around if state['cells'][n]['flagged'])
    closed = [n for n in around if not state['cells'][n]['revealed'] and not state['cells'][n]['flagged']]
    if flags != cell['adjacent'] or not closed:
        return state
    new = clone(state)
    opened = []
    for n in closed:
        opened.extend(flood_reveal(new, n))
    _settle(new, opened, now)
    return new


def process_action(state: dict, action: dict, now: float, rng: random.Random) -> dict:
    if state['phase'] in ('won', 'lost'):
        return state
    index = _index_of(state, action.get('payload') or {})
    if index is None:
        return state
    kind = action.get('type')
    if kind == 'reveal':
        return reveal(state, index, now, rng)
    if kind == 'flag':
        return toggle_flag(state, index)
    if kind == 'chord':
        return chord(state, index, now)
    return state


def sanitize(state: dict) -> dict:
    view = clone(state)
    if view['phase'] in ('won', 'lost'):
        return view
    view['mine_positions'] = None
    view['cells'] = [
        {
            'revealed': c['revealed'],
            'flagged': c['flagged'],
            'adjacent': c['adjacent'] if c['revealed'] else None,
        }
        for c in state['cells']
    ]
    return view
