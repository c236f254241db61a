import random

from conftest import make_players
from gamenight.services.games.four_kate import module, engine, bots


NOW = 100.0


def drop(state, pid, column, players):
    return module.process_action(state, pid, {'type': 'drop', 'payload': {'column': column}},
                                 players, NOW, random.Random(0))


def test_gravity_and_turns():
    players = make_players(2)
    state = engine.initialize_game(players, NOW)
    assert state['current_turn'] == 'red'
    state = drop(state, 'p0', 3, players)
    state = drop(state, 'p1', 3, players)
    assert state['board'][3][0] == 'red'
    assert state['board'][3][1] == 'yellow'
    assert state['current_turn'] == 'red'


def test_invalid_drops_are_noops():
    players = make_players(2)
    state = engine.initialize_game(players, NOW)
    assert drop(state, 'p1', 0, players) is state
    assert drop(state, 'p0', 7, players) is state
    assert drop(state, 'p0', 'x', players) is state
    full = state
    for i in range(engine.BOARD_ROWS):
        full = drop(full, 'p0' if i % 2 == 0 else 'p1', 0, players)
    assert engine.lowest_open_row(full['board'], 0) == -1
    assert drop(full, 'p0', 0, players) is full


def test_vertical_win():
    players = make_players(2)
    state = engine.initialize_game(players, NOW)
    for _ in range(3):
        state = drop(state, 'p0', 0, players)
        state = drop(state, 'p1', 1, players)
    before = state
    state = drop(state, 'p0', 0, players)
    assert state['phase'] == 'game_over'
    assert state['winner'] == 'p0'
    assert sorted(state['winning_cells']) == [[0, 0], [0, 1], [0, 2], [0, 3]]
    names = module.describe_action(before, state, 'p0', {'type': 'drop'}, players).names()
    assert names == ['move-made', 'game-over']


def test_bot_takes_win_then_blocks():
    board = engine.empty_board()
    for col in (0, 1, 2):
        board[col][0] = 'yellow'
    assert bots.choose_column(board, 'yellow', random.Random(1)) == 3
    assert bots.choose_column(board, 'red', random.Random(1)) == 3


def test_bot_moves_when_due():
    players = make_players(2, bots=(1,))
    state = engine.initialize_game(players, NOW)
    state = drop(state, 'p0', 3, players)
    assert state['bot_action_at'] == NOW + engine.BOT_MOVE_DELAY
    assert module.process_advancement(state, players, NOW, random.Random(2)) is None
    adv = module.process_advancement(state, players, state['bot_action_at'], random.Random(2))
    assert len(adv.state['moves']) == 2
    assert adv.state['current_turn'] == 'red'


def test_play_again_alternates_first_turn():
    players = make_players(2)
    state = engine.initialize_game(players, NOW)
    state['phase'] = 'game_over'
    again = module.play_again(state, players, {}, NOW, random.Random(0))
    assert again['games_played'] == 1
    assert again['current_turn'] == 'yellow'
    assert again['players'] == state['players']
