import random
from typing import Optional

from .engine import BOARD_COLS, BOARD_ROWS, lowest_open_row, winning_cells, other

CENTER_PREFERENCE = [3, 2, 4, 1, 5, 0, 6]


def valid_columns(board):
    return [col for col in range(BOARD_COLS) if lowest_open_row(board, col) != -1]


def simulate_drop(board, col, color):
    row = lowest_open_row(board, col)
    if row == -1:
        return None, -1
    copy = [list(c) for c in board]
    copy[col][row] = color
    return copy, row


def find_winning_column(board, color) -> Optional[int]:
    for col in range(BOARD_COLS):
        after, row = simulate_drop(board, col, color)
        if after is not None and winning_cells(after, col, row, color):
            return col
    return None


def find_double_threat_column(board, color) -> Optional[int]:
    for col in range(BOARD_COLS):
        after, _ = simulate_drop(board, col, color)
        if after is None:
            continue
        threats = 0
        for nxt in range(BOARD_COLS):
            again, row = simulate_drop(after, nxt, color)
            if again is not None and winning_cells(again, nxt, row, color):
                threats += 1
        if threats >= 2:
            return col
    return None


def gives_opponent_win(board, col, color) -> bool:
    """True if dropping here lets the opponent win by stacking on top."""
    row = lowest_open_row(board, col)
    if row == -1 or row + 1 >= BOARD_ROWS:
        return False
    test = [list(c) for c in board]
    test[col][row] = color
    test[col][row + 1] = other(color)
    return winning_cells(test, col, row + 1, other(color)) is not None


def choose_column(board, color, rng: random.Random) -> int:
    cols = valid_columns(board)
    if not cols:
        return 0
    if len(cols) == 1:
        return cols[0]

    win = find_winning_column(board, color)
    if win is not None:
        return win
    block = find_winning_column(board, other(color))
    if block is not None:
        return block
    double = find_double_threat_column(board, color)
    if double is not None and not gives_opponent_win(board, double, color):
        return double

    safe = [col for col in cols if not gives_opponent_win(board, col, color)]
    for col in CENTER_PREFERENCE:
        if col in safe:
            return col
    return rng.choice(cols)
