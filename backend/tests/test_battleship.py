import copy
import random

import pytest

from conftest import make_players
from gamenight.errors import GameError
from gamenight.services.games.battleship import module, engine, bots


NOW = 200.0

BLITZ_LAYOUT = [
    {'ship_id': 'cruiser', 'row': 0, 'col': 0, 'orientation': 'horizontal'},
    {'ship_id': 'submarine', 'row': 2, 'col': 0, 'orientation': 'vertical'},
    {'ship_id': 'destroyer', 'row': 6, 'col': 5, 'orientation': 'horizontal'},
]


def act(state, pid, kind, players, rng=None, **payload):
    return module.process_action(state, pid, {'type': kind, 'payload': payload}, players, NOW,
                                 rng or random.Random(0))


def blitz_game(players):
    state = module.initialize(players, {'grid_size': 7, 'ship_set': 'blitz'}, NOW, random.Random(0))
    state = act(state, 'p0', 'place-ships', players, ships=BLITZ_LAYOUT)
    return act(state, 'p1', 'place-ships', players, ships=BLITZ_LAYOUT)


def test_placement_validation():
    players = make_players(2)
    state = module.initialize(players, {'grid_size': 7, 'ship_set': 'blitz'}, NOW, random.Random(0))

    overlapping = copy.deepcopy(BLITZ_LAYOUT)
    overlapping[1].update({'row': 0, 'col': 1})
    off_grid = copy.deepcopy(BLITZ_LAYOUT)
    off_grid[2].update({'col': 6})
    missing = BLITZ_LAYOUT[:2]
    duplicate = BLITZ_LAYOUT[:2] + [dict(BLITZ_LAYOUT[0], row=4)]
    for bad in (overlapping, off_grid, missing, duplicate):
        with pytest.raises(GameError) as exc:
            act(state, 'p0', 'place-ships', players, ships=bad)
        assert exc.value.code == 'INVALID_SUBMISSION'

    for ship_id in (['cruiser'], {'id': 'cruiser'}, None, 3):
        bad = copy.deepcopy(BLITZ_LAYOUT)
        bad[0]['ship_id'] = ship_id
        with pytest.raises(GameError) as exc:
            act(state, 'p0', 'place-ships', players, ships=bad)
        assert exc.value.code == 'INVALID_SUBMISSION'

    placed = act(state, 'p0', 'place-ships', players, ships=BLITZ_LAYOUT)
    assert placed['setup_ready'] == ['p0']
    assert placed['phase'] == 'setup'
    with pytest.raises(GameError) as exc:
        act(placed, 'p0', 'place-ships', players, ships=BLITZ_LAYOUT)
    assert exc.value.code == 'ALREADY_SUBMITTED'


def test_both_ready_starts_play():
    players = make_players(2)
    state = blitz_game(players)
    assert state['phase'] == 'playing'
    assert state['current_turn'] == 'p0'


def test_misfires_are_noops():
    players = make_players(2)
    state = blitz_game(players)
    assert act(state, 'p1', 'fire', players, row=0, col=0) is state
    assert act(state, 'p0', 'fire', players, row=7, col=0) is state
    shot = act(state, 'p0', 'fire', players, row=5, col=5)
    shot = act(shot, 'p1', 'fire', players, row=5, col=5)
    assert act(shot, 'p0', 'fire', players, row=5, col=5) is shot


def test_sinking_every_ship_wins():
    players = make_players(2)
    state = blitz_game(players)
    targets = [(0, 0), (0, 1), (0, 2), (2, 0), (3, 0), (6, 5), (6, 6)]
    misses = iter([(r, c) for r in range(4, 7) for c in range(1, 5)])
    sunk_seen = 0
    for i, (row, col) in enumerate(targets):
        before = state
        state = act(state, 'p0', 'fire', players, row=row, col=col)
        names = module.describe_action(before, state, 'p0', {'type': 'fire'}, players).names()
        if state['last_shot']['result'] == 'sunk':
            sunk_seen += 1
            assert 'ship-sunk' in names
        if state['phase'] == 'game_over':
            assert i == len(targets) - 1
            assert 'game-over' in names
            break
        miss_row, miss_col = next(misses)
        state = act(state, 'p1', 'fire', players, row=miss_row, col=miss_col)
    assert state['winner'] == 'p0'
    assert sunk_seen == 3


def test_sanitize_hides_opponent_ships_until_game_over():
    players = make_players(2)
    state = blitz_game(players)
    state = act(state, 'p0', 'fire', players, row=0, col=0)
    view = module.sanitize_for_player(state, 'p1')
    assert len(view['my_board']['ships']) == 3
    assert 'opponent_ships' not in view
    assert view['opponent_board']['ships_remaining'] == 3
    assert 'ships' not in view['opponent_board']
    assert view['is_my_turn'] is True


def test_lobby_settings_validated():
    players = make_players(2)
    settings = module.default_settings(players)
    for payload in ({'grid_size': 7, 'ship_set': 'classic'}, {'grid_size': [10]}, {'ship_set': ['blitz']}):
        with pytest.raises(GameError) as exc:
            module.process_lobby_action(settings, players, {'type': 'update-settings', 'payload': payload})
        assert exc.value.code == 'INVALID_SETTING'
    updated, events = module.process_lobby_action(
        settings, players, {'type': 'update-settings', 'payload': {'grid_size': 8}})
    assert updated == {'grid_size': 8, 'ship_set': 'classic'}
    assert events.names() == ['settings-updated']


def test_bot_fleet_is_always_legal():
    for seed in range(25):
        rng = random.Random(seed)
        templates = engine.ship_templates('classic')
        layout = bots.place_fleet(7, engine.ship_templates('quick'), rng)
        assert engine.validate_placements(layout, 7, engine.ship_templates('quick')) is not None
        layout = bots.place_fleet(10, templates, rng)
        assert engine.validate_placements(layout, 10, templates) is not None


def test_bot_extends_a_line_of_hits():
    board = {
        'ships': [{'id': 'cruiser', 'sunk': False, 'positions': []}],
        'shots_received': [
            {'row': 4, 'col': 4, 'result': 'hit', 'ship_id': 'cruiser'},
            {'row': 4, 'col': 5, 'result': 'hit', 'ship_id': 'cruiser'},
        ],
    }
    assert bots.choose_shot(board, 10, random.Random(0)) == (4, 6)
    board['shots_received'].append({'row': 4, 'col': 6, 'result': 'miss', 'ship_id': None})
    assert bots.choose_shot(board, 10, random.Random(0)) == (4, 3)


def test_bot_tries_around_isolated_hit_then_hunts_on_parity():
    board = {
        'ships': [],
        'shots_received': [{'row': 0, 'col': 0, 'result': 'hit', 'ship_id': 'x'}],
    }
    assert bots.choose_shot(board, 10, random.Random(5)) in ((1, 0), (0, 1))
    for seed in range(10):
        row, col = bots.choose_shot({'ships': [], 'shots_received': []}, 10, random.Random(seed))
        assert (row + col) % 2 == 0


def test_bot_setup_and_turns_run_through_advancement():
    players = make_players(2, bots=(1,))
    rng = random.Random(9)
    state = module.initialize(players, {}, NOW, rng)
    assert state['bot_action_at'] is not None
    adv = module.process_advancement(state, players, state['bot_action_at'], rng)
    state = adv.state
    assert state['setup_ready'] == ['p1']
    assert 'setup-ready' in adv.events.names()

    layout = bots.place_fleet(10, engine.ship_templates('classic'), rng)
    state = act(state, 'p0', 'place-ships', players, ships=layout)
    assert state['phase'] == 'playing'
    state = act(state, 'p0', 'fire', players, row=0, col=0)
    assert state['current_turn'] == 'p1'
    adv = module.process_advancement(state, players, state['bot_action_at'], rng)
    assert adv.state['current_turn'] == 'p0'
    assert len(adv.state['boards']['p0']['shots_received']) == 1
