import copy
import random

import pytest

from conftest import make_players
from gamenight.errors import GameError
from gamenight.services.games.terrible_people import module, engine


NOW = 500.0
SINGLE_PICK = [{'id': 'b1', 'text': 'What is that smell?', 'pick': 1}]


def new_game(bots=(), seed=3, target=7):
    players = make_players(4, bots=bots)
    rng = random.Random(seed)
    state = engine.initialize_game(players, {'target_score': target}, NOW, rng, black_cards=SINGLE_PICK * 3)
    return state, players, rng


def submitting(state, players, rng):
    adv = module.process_advancement(state, players, state['phase_ends_at'], rng)
    assert adv is not None
    return adv.state


def submit(state, pid, players, rng, card_ids=None):
    card_ids = card_ids or [state['hands'][pid][0]['id']]
    return module.process_action(state, pid, {'type': 'submit', 'payload': {'card_ids': card_ids}},
                                 players, NOW, rng)


def test_initial_state():
    state, _, _ = new_game()
    assert state['phase'] == 'czar_reveal'
    assert engine.czar_id(state) == 'p0'
    assert all(len(h) == engine.HAND_SIZE for h in state['hands'].values())
    assert state['phase_ends_at'] == NOW + engine.CZAR_REVEAL_DURATION


def test_czar_reveal_waits_for_deadline():
    state, players, rng = new_game()
    assert module.process_advancement(state, players, NOW + 1, rng) is None
    assert submitting(state, players, rng)['phase'] == 'submitting'


def test_submission_validation_order():
    state, players, rng = new_game()
    with pytest.raises(GameError) as exc:
        submit(state, 'p1', players, rng)
    assert exc.value.code == 'INVALID_PHASE'

    state = submitting(state, players, rng)
    with pytest.raises(GameError) as exc:
        submit(state, 'p0', players, rng, ['w1'])
    assert exc.value.code == 'INVALID_SUBMISSION'

    hand = state['hands']['p1']
    with pytest.raises(GameError) as exc:
        submit(state, 'p1', players, rng, [hand[0]['id'], hand[1]['id']])
    assert exc.value.code == 'INVALID_SUBMISSION'

    not_mine = state['hands']['p2'][0]['id']
    with pytest.raises(GameError) as exc:
        submit(state, 'p1', players, rng, [not_mine])
    assert exc.value.code == 'INVALID_SUBMISSION'

    state = submit(state, 'p1', players, rng)
    assert len(state['hands']['p1']) == engine.HAND_SIZE - 1
    with pytest.raises(GameError) as exc:
        submit(state, 'p1', players, rng)
    assert exc.value.code == 'ALREADY_SUBMITTED'


def test_reveal_order_is_permutation_of_submitters():
    for seed in range(10):
        state, players, rng = new_game(seed=seed)
        state = submitting(state, players, rng)
        for pid in ('p1', 'p2', 'p3'):
            state = submit(state, pid, players, rng)
        assert state['phase'] == 'judging'
        assert sorted(state['reveal_order']) == ['p1', 'p2', 'p3']


def test_judging_awards_point_and_rotates_czar():
    state, players, rng = new_game()
    state = submitting(state, players, rng)
    for pid in ('p1', 'p2', 'p3'):
        state = submit(state, pid, players, rng)

    with pytest.raises(GameError) as exc:
        module.process_action(state, 'p1', {'type': 'judge', 'payload': {'winner_id': 'p2'}}, players, NOW, rng)
    assert exc.value.code == 'UNAUTHORIZED'

    before = copy.deepcopy(state)
    judged = module.process_action(state, 'p0', {'type': 'judge', 'payload': {'winner_id': 'p2'}},
                                   players, NOW, rng)
    assert state == before
    assert judged['scores']['p2'] == 1
    assert judged['phase'] == 'round_result'
    events = module.describe_action(state, judged, 'p0', {'type': 'judge'}, players)
    assert events.names() == ['round-result']

    adv = module.process_advancement(judged, players, judged['phase_ends_at'], rng)
    nxt = adv.state
    assert nxt['phase'] == 'czar_reveal'
    assert engine.czar_id(nxt) == 'p1'
    assert all(len(h) == engine.HAND_SIZE for h in nxt['hands'].values())


def test_malformed_submit_and_judge_payloads_are_rejected():
    state, players, rng = new_game()
    state = submitting(state, players, rng)
    for card_ids in (5, 'w1', None, [['w1']], {'id': 'w1'}):
        with pytest.raises(GameError) as exc:
            module.process_action(state, 'p1', {'type': 'submit', 'payload': {'card_ids': card_ids}},
                                  players, NOW, rng)
        assert exc.value.code == 'INVALID_SUBMISSION'
    assert 'p1' not in state['submissions']

    for pid in ('p1', 'p2', 'p3'):
        state = submit(state, pid, players, rng)
    for winner_id in (['p1'], {'p1': 1}, 7, None):
        with pytest.raises(GameError) as exc:
            module.process_action(state, 'p0', {'type': 'judge', 'payload': {'winner_id': winner_id}},
                                  players, NOW, rng)
        assert exc.value.code == 'INVALID_SUBMISSION'
    assert state['round_winner_id'] is None


def test_reaching_target_ends_game():
    state, players, rng = new_game(target=1)
    state = submitting(state, players, rng)
    for pid in ('p1', 'p2', 'p3'):
        state = submit(state, pid, players, rng)
    judged = module.process_action(state, 'p0', {'type': 'judge', 'payload': {'winner_id': 'p3'}},
                                   players, NOW, rng)
    assert judged['phase'] == 'game_over'
    assert module.check_game_over(judged)
    assert module.player_scores(judged)['p3'] == 1


def test_sanitize_hides_authors_until_judging():
    state, players, rng = new_game()
    state = submitting(state, players, rng)
    state = submit(state, 'p1', players, rng)
    view = module.sanitize_for_player(state, 'p2')
    assert view['submissions'] == []
    assert view['submitted_player_ids'] == ['p1']
    assert 'hands' not in view and 'white_deck' not in view
    assert module.sanitize_for_player(state, 'p1')['my_submission'] == state['submissions']['p1']


def test_bots_submit_together_and_bot_czar_judges():
    state, players, rng = new_game(bots=(0, 2, 3))
    state = submitting(state, players, rng)
    assert state['bot_action_at'] is not None

    adv = module.process_advancement(state, players, state['bot_action_at'], rng)
    state = adv.state
    assert set(state['submissions']) == {'p2', 'p3'}
    assert state['bot_action_at'] is None

    state = submit(state, 'p1', players, rng)
    assert state['phase'] == 'judging'
    assert state['bot_action_at'] == NOW + engine.BOT_JUDGE_DELAY
    adv = module.process_advancement(state, players, state['bot_action_at'], rng)
    assert adv.state['phase'] == 'round_result'
    assert adv.state['round_winner_id'] in ('p1', 'p2', 'p3')


def test_replacement_moves_hand_score_and_submission():
    state, players, rng = new_game()
    state = submitting(state, players, rng)
    state = submit(state, 'p1', players, rng)
    state['scores']['p1'] = 2
    seated = [dict(p) for p in players]
    seated[1] = dict(seated[1], id='bot1', is_bot=True)
    replaced = module.process_player_replacement(state, 'p1', 'bot1', 1, seated, NOW, rng)
    assert replaced['seats'][1] == 'bot1'
    assert replaced['scores']['bot1'] == 2
    assert replaced['submissions']['bot1'] == state['submissions']['p1']
    assert replaced['hands']['bot1'] == state['hands']['p1']
