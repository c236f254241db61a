import random
from typing import List, Optional, Set, Tuple

from .constants import PLACEMENT_ATTEMPTS

NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))

Cell = Tuple[int, int]


def place_fleet(grid_size: int, templates: List[dict], rng: random.Random) -> List[dict]:
    """Random non-overlapping layout, largest ship first."""
    while True:
        occupied: Set[Cell] = set()
        placements = []
        for ship in sorted(templates, key=lambda t: -t['size']):
            spot = _random_spot(grid_size, ship['size'], occupied, rng)
            if spot is None:
                break
            row, col, orientation, cells = spot
            occupied.update(cells)
            placements.append({'ship_id': ship['id'], 'row': row, 'col': col,
                               'orientation': orientation})
        else:
            return placements


def _random_spot(grid_size, size, occupied, rng):
    for _ in range(PLACEMENT_ATTEMPTS):
        orientation = 'horizontal' if rng.random() < 0.5 else 'vertical'
        vertical = orientation == 'vertical'
        row = rng.randint(0, grid_size - size if vertical else grid_size - 1)
        col = rng.randint(0, grid_size - 1 if vertical else grid_size - size)
        cells = [(row + i, col) if vertical else (row, col + i) for i in range(size)]
        if not occupied.intersection(cells):
            return row, col, orientation, cells
    return None


def unsunk_hits(board: dict) -> List[Cell]:
    sunk = {(p['row'], p['col']) for s in board['ships'] if s['sunk'] for p in s['positions']}
    return [(s['row'], s['col']) for s in board['shots_received']
            if s['result'] == 'hit' and (s['row'], s['col']) not in sunk]


def _line_shot(hits: List[Cell], fired: Set[Cell], grid_size: int, vertical: bool) -> Optional[Cell]:
    hit_set = set(hits)
    for row, col in hits:
        line = [(row, col)]
        for sign in (1, -1):
            step = 1
            while True:
                cell = (row + sign * step, col) if vertical else (row, col + sign * step)
                if cell not in hit_set:
                    break
                line.append(cell)
                step += 1
        if len(line) < 2:
            continue
        axis = sorted(c[0] if vertical else c[1] for c in line)
        for end in (axis[-1] + 1, axis[0] - 1):
            cell = (end, col) if vertical else (row, end)
            if 0 <= end < grid_size and cell not in fired:
                return cell
    return None


def target_shot(hits: List[Cell], fired: Set[Cell], grid_size: int, rng: random.Random) -> Optional[Cell]:
    shot = _line_shot(hits, fired, grid_size, vertical=False)
    if shot is None:
        shot = _line_shot(hits, fired, grid_size, vertical=True)
    if shot is not None:
        return shot
    adjacent = []
    for row, col in hits:
        for dr, dc in NEIGHBOURS:
            r, c = row + dr, col + dc
            if 0 <= r < grid_size and 0 <= c < grid_size and (r, c) not in fired:
                adjacent.append((r, c))
    return rng.choice(adjacent) if adjacent else None


def hunt_shot(fired: Set[Cell], grid_size: int, rng: random.Random) -> Cell:
    open_cells = [(r, c) for r in range(grid_size) for c in range(grid_size) if (r, c) not in fired]
    parity = [(r, c) for r, c in open_cells if (r + c) % 2 == 0]
    return rng.choice(parity or open_cells)


def choose_shot(board: dict, grid_size: int, rng: random.Random) -> Cell:
    """Hunt-and-target against the opponent's ``board``."""
    fired = {(s['row'], s['col']) for s in board['shots_received']}
    hits = unsunk_hits(board)
    if hits:
        shot = target_shot(hits, fired, grid_size, rng)
        if shot is not None:
            return shot
    return hunt_shot(fired, grid_size, rng)
