import random

import pytest

from conftest import make_players
from gamenight.errors import GameError
from gamenight.services.games.minesweeper import module, engine


NOW = 50.0


def act(state, kind, row, col, now=NOW, seed=0):
    return module.process_action(state, 'p0', {'type': kind, 'payload': {'row': row, 'col': col}},
                                 make_players(1), now, random.Random(seed))


def small_board(mines):
    """A 10x8 playing board with mines at explicit indexes."""
    state = engine.initialize_game({'rows': 10, 'cols': 8}, NOW)
    state['phase'] = 'playing'
    state['started_at'] = NOW
    state['mine_count'] = len(mines)
    for pos in mines:
        state['cells'][pos]['mine'] = True
        for n in engine.neighbours(pos, 10, 8):
            state['cells'][n]['adjacent'] += 1
    state['mine_positions'] = sorted(mines)
    return state


@pytest.mark.parametrize('rows,cols', [(10, 8), (16, 12), (24, 20)])
@pytest.mark.parametrize('difficulty', ['easy', 'medium', 'hard'])
def test_first_click_is_always_safe(rows, cols, difficulty):
    for seed in range(5):
        state = engine.initialize_game({'rows': rows, 'cols': cols, 'difficulty': difficulty}, NOW)
        row, col = seed % rows, (seed * 3) % cols
        state = act(state, 'reveal', row, col, seed=seed)
        first = row * cols + col
        assert state['phase'] in ('playing', 'won')
        assert len(state['mine_positions']) == engine.mine_count_for(rows, cols, difficulty)
        for idx in [first] + engine.neighbours(first, rows, cols):
            assert not state['cells'][idx]['mine']
        assert state['cells'][first]['adjacent'] == 0


def test_mine_count_rounds_half_up():
    assert engine.mine_count_for(16, 12, 'easy') == 23
    assert engine.mine_count_for(10, 8, 'hard') == 16
    assert engine.mine_count_for(24, 20, 'medium') == 77


def test_flag_toggles_and_blocks_reveal():
    state = small_board([0])
    flagged = act(state, 'flag', 0, 0)
    assert flagged['cells'][0]['flagged'] and flagged['flag_count'] == 1
    assert act(flagged, 'reveal', 0, 0) is flagged
    unflagged = act(flagged, 'flag', 0, 0)
    assert unflagged['flag_count'] == 0


def test_invalid_coordinates_are_noops():
    state = small_board([0])
    assert act(state, 'reveal', 10, 0) is state
    assert act(state, 'reveal', 'a', 0) is state
    assert act(state, 'explode', 1, 1) is state


def test_revealing_a_mine_loses():
    state = small_board([0])
    before = state
    state = act(state, 'reveal', 0, 0, now=NOW + 12)
    assert state['phase'] == 'lost'
    assert state['triggered_mine_index'] == 0
    names = module.describe_action(before, state, 'p0', {'type': 'reveal'}, make_players(1)).names()
    assert names == ['game-over', 'board-updated']
    assert act(state, 'reveal', 5, 5) is state


def test_flood_fill_clears_board_and_wins():
    state = small_board([0])
    state = act(state, 'reveal', 9, 7)
    assert state['phase'] == 'won'
    assert state['revealed_count'] == 10 * 8 - 1
    assert not state['cells'][0]['revealed']


def test_chord_opens_neighbours_when_flags_match():
    # mine at (0, 0); (1, 1) touches it
    state = small_board([0, 79])
    state = act(state, 'reveal', 1, 1)
    assert state['cells'][9]['revealed'] and not state['cells'][1]['revealed']
    assert act(state, 'chord', 1, 1) is state

    state = act(state, 'flag', 0, 0)
    chorded = act(state, 'chord', 1, 1)
    for idx in (1, 2, 8, 10, 16, 17, 18):
        assert chorded['cells'][idx]['revealed']
    # the open corner floods everything except the two mines
    assert chorded['phase'] == 'won'
    assert not chorded['cells'][79]['revealed']


def test_wrong_flag_makes_chord_lose():
    state = small_board([0])
    state = act(state, 'reveal', 1, 1)
    state = act(state, 'flag', 0, 1)
    chorded = act(state, 'chord', 1, 1)
    assert chorded['phase'] == 'lost'
    assert chorded['triggered_mine_index'] == 0


def test_sanitize_hides_mines_until_finished():
    state = small_board([0])
    view = module.sanitize_for_player(state, 'p0')
    assert view['mine_positions'] is None
    assert all('mine' not in c for c in view['cells'])
    assert all(c['adjacent'] is None for c in view['cells'])
    lost = act(state, 'reveal', 0, 0)
    assert module.sanitize_for_player(lost, 'p0')['mine_positions'] == [0]


def test_update_settings_validation():
    players = make_players(1)
    settings = module.default_settings(players)
    for payload in ({'difficulty': 'insane'}, {'rows': 9}, {'cols': 21}, {'rows': '12'},
                    {'difficulty': ['easy']}):
        with pytest.raises(GameError) as exc:
            module.process_lobby_action(settings, players, {'type': 'update-settings', 'payload': payload})
        assert exc.value.code == 'INVALID_SETTING'
    updated, _ = module.process_lobby_action(
        settings, players, {'type': 'update-settings', 'payload': {'difficulty': 'hard', 'rows': 24}})
    assert updated == {'difficulty': 'hard', 'rows': 24, 'cols': 12}


def test_finished_game_returns_to_lobby():
    assert module.play_again({'phase': 'won'}, make_players(1), {}, NOW, random.Random(0)) is None
    assert module.restart_in_place is False
