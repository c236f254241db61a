"""4 Kate: two-player connect four.

``board[col][row]`` with row 0 at the bottom. Out-of-turn or impossible drops
are no-ops: the same state object comes back.
"""

from typing import List, Optional

from ..base import clone, is_bot

BOARD_COLS = 7
BOARD_ROWS = 6
WIN_LENGTH = 4
BOT_MOVE_DELAY = 1.0

DIRECTIONS = ((1, 0), (0, 1), (1, 1), (1, -1))


def empty_board() -> List[list]:
    return [[None] * BOARD_ROWS for _ in range(BOARD_COLS)]


def lowest_open_row(board, col: int) -> int:
    for row in range(BOARD_ROWS):
        if board[col][row] is None:
            return row
    return -1


def winning_cells(board, col: int, row: int, color) -> Optional[List[List[int]]]:
    if not color:
        return None
    for dc, dr in DIRECTIONS:
        cells = [[col, row]]
        for sign in (1, -1):
            for i in range(1, WIN_LENGTH):
                c, r = col + sign * dc * i, row + sign * dr * i
                if not (0 <= c < BOARD_COLS and 0 <= r < BOARD_ROWS) or board[c][r] != color:
                    break
                cells.append([c, r])
        if len(cells) >= WIN_LENGTH:
            return cells
    return None


def board_full(board) -> bool:
    return all(board[col][BOARD_ROWS - 1] is not None for col in range(BOARD_COLS))


def color_of(state: dict, player_id: str) -> Optional[str]:
    for color in ('red', 'yellow'):
        if state['players'][color] == player_id:
            return color
    return None


def other(color: str) -> str:
    return 'yellow' if color == 'red' else 'red'


def _bot_due(state: dict, players: List[dict], now: float) -> Optional[float]:
    if state['phase'] != 'playing':
        return None
    if is_bot(players, state['players'][state['current_turn']]):
        return now + BOT_MOVE_DELAY
    return None


def initialize_game(players: List[dict], now: float, games_played: int = 0, colors=None) -> dict:
    colors = colors or {'red': players[0]['id'], 'yellow': players[1]['id']}
    first = 'red' if games_played % 2 == 0 else 'yellow'
    state = {
        'board': empty_board(),
        'players': dict(colors),
        'current_turn': first,
        'first_turn': first,
        'phase': 'playing',
        'turn_started_at': now,
        'bot_action_at': None,
        'winner': None,
        'winning_cells': None,
        'moves': [],
        'games_played': games_played,
        'is_draw': False,
    }
    state['bot_action_at'] = _bot_due(state, players, now)
    return state


def drop(state: dict, player_id: str, column, players: List[dict], now: float) -> dict:
    if state['phase'] != 'playing':
        return state
    color = color_of(state, player_id)
    if color is None or color != state['current_turn']:
        return state
    if not isinstance(column, int) or isinstance(column, bool) or not 0 <= column < BOARD_COLS:
        return state
    row = lowest_open_row(state['board'], column)
    if row == -1:
        return state

    new = clone(state)
    new['board'][column][row] = color
    new['moves'].append({'col': column, 'row': row, 'color': color})
    cells = winning_cells(new['board'], column, row, color)
    if cells:
        new.update({'phase': 'game_over', 'winner': player_id, 'winning_cells': cells,
                    'bot_action_at': None})
        return new
    if board_full(new['board']):
        new.update({'phase': 'game_over', 'is_draw': True, 'bot_action_at': None})
        return new
    new['current_turn'] = other(color)
    new['turn_started_at'] = now
    new['bot_action_at'] = _bot_due(new, players, now)
    return new


def replace_player(state: dict, departing_id: str, bot_id: str, players: List[dict], now: float) -> dict:
    new = clone(state)
    for color in ('red', 'yellow'):
        if new['players'][color] == departing_id:
            new['players'][color] = bot_id
    if new['winner'] == departing_id:
        new['winner'] = bot_id
    if new['phase'] == 'playing' and new['players'][new['current_turn']] == bot_id \
            and not new['bot_action_at']:
        new['bot_action_at'] = now + BOT_MOVE_DELAY
    return new
