"""Terrible People: one czar per round judges anonymous white-card answers.

Phases: ``czar_reveal -> submitting -> judging -> round_result`` and back,
until someone reaches ``target_score`` (``game_over``). The czar is
``seats[czar_index]``; seats keep room order and only change identity on a
bot replacement.
"""

import random
from typing import List

from gamenight.errors import GameError
from ..base import clone, is_bot, random_delay
from ..cards import shuffle, draw
from .deck import BLACK_CARDS, WHITE_CARDS

HAND_SIZE = 7
DEFAULT_TARGET_SCORE = 7
# Seconds
CZAR_REVEAL_DURATION = 3.0
ROUND_RESULT_DURATION = 5.0
BOT_SUBMIT_DELAY = (2.0, 6.0)
BOT_JUDGE_DELAY = 3.0


def czar_id(state: dict) -> str:
    return state['seats'][state['czar_index']]


def initialize_game(players: List[dict], settings: dict, now: float, rng: random.Random,
                    black_cards=None, white_cards=None) -> dict:
    black_deck = shuffle(black_cards or BLACK_CARDS, rng)
    white_deck = shuffle(white_cards or WHITE_CARDS, rng)
    seats = [p['id'] for p in players]
    hands = {}
    for pid in seats:
        hands[pid], white_deck = draw(white_deck, HAND_SIZE)
    black_card, black_deck = black_deck[0], black_deck[1:]
    return {
        'phase': 'czar_reveal',
        'seats': seats,
        'current_round': 1,
        'target_score': int((settings or {}).get('target_score', DEFAULT_TARGET_SCORE)),
        'czar_index': 0,
        'phase_ends_at': now + CZAR_REVEAL_DURATION,
        'bot_action_at': None,
        'black_card': black_card,
        'submissions': {},
        'reveal_order': [],
        'round_winner_id': None,
        'scores': {pid: 0 for pid in seats},
        'hands': hands,
        'black_deck': black_deck,
        'white_deck': white_deck,
        'discard_white': [],
        'discard_black': [],
    }


def next_bot_submit_at(state: dict, players: List[dict], now: float, rng: random.Random):
    """Earliest submit time across bots that still owe a submission."""
    due = None
    czar = czar_id(state)
    for pid in state['seats']:
        if pid == czar or pid in state['submissions'] or not is_bot(players, pid):
            continue
        at = now + random_delay(rng, BOT_SUBMIT_DELAY)
        if due is None or at < due:
            due = at
    return due


def start_submitting(state: dict, players: List[dict], now: float, rng: random.Random) -> dict:
    new = clone(state)
    new['phase'] = 'submitting'
    new['phase_ends_at'] = None
    new['bot_action_at'] = next_bot_submit_at(new, players, now, rng)
    return new


def submit_cards(state: dict, player_id: str, card_ids, players: List[dict],
                 now: float, rng: random.Random) -> dict:
    if state['phase'] != 'submitting':
        raise GameError('Not in submitting phase', 'INVALID_PHASE')
    if czar_id(state) == player_id:
        raise GameError('The czar cannot submit cards', 'INVALID_SUBMISSION')
    if player_id in state['submissions']:
        raise GameError('Already submitted', 'ALREADY_SUBMITTED')
    if not isinstance(card_ids, list) or not all(isinstance(cid, str) for cid in card_ids):
        raise GameError('Card ids must be a list of strings', 'INVALID_SUBMISSION')
    pick = state['black_card']['pick']
    if len(card_ids) != pick or len(set(card_ids)) != pick:
        raise GameError(f'Must submit exactly {pick} card(s)', 'INVALID_SUBMISSION')
    hand = state['hands'].get(player_id)
    if hand is None:
        raise GameError('Player has no hand', 'INVALID_SUBMISSION')
    by_id = {c['id']: c for c in hand}
    for cid in card_ids:
        if cid not in by_id:
            raise GameError(f'Card {cid} not in hand', 'INVALID_SUBMISSION')

    new = clone(state)
    new['submissions'][player_id] = [by_id[cid] for cid in card_ids]
    new['hands'][player_id] = [c for c in hand if c['id'] not in card_ids]

    czar = czar_id(new)
    if all(pid in new['submissions'] for pid in new['seats'] if pid != czar):
        return transition_to_judging(new, players, now, rng)
    return new


def transition_to_judging(state: dict, players: List[dict], now: float, rng: random.Random) -> dict:
    czar = czar_id(state)
    state['reveal_order'] = shuffle([pid for pid in state['seats'] if pid != czar], rng)
    state['phase'] = 'judging'
    state['phase_ends_at'] = None
    state['bot_action_at'] = now + BOT_JUDGE_DELAY if is_bot(players, czar) else None
    return state


def judge_winner(state: dict, player_id: str, winner_id: str, now: float) -> dict:
    if state['phase'] != 'judging':
        raise GameError('Not in judging phase', 'INVALID_PHASE')
    if czar_id(state) != player_id:
        raise GameError('Only the czar can judge', 'UNAUTHORIZED')
    if state['round_winner_id'] is not None:
        raise GameError('Winner already selected', 'ALREADY_SUBMITTED')
    if not isinstance(winner_id, str) or winner_id not in state['submissions']:
        raise GameError('Invalid winner', 'INVALID_SUBMISSION')

    new = clone(state)
    new['scores'][winner_id] = new['scores'].get(winner_id, 0) + 1
    new['round_winner_id'] = winner_id
    game_over = new['scores'][winner_id] >= new['target_score']
    new['phase'] = 'game_over' if game_over else 'round_result'
    new['phase_ends_at'] = None if game_over else now + ROUND_RESULT_DURATION
    new['bot_action_at'] = None
    return new


def advance_round(state: dict, now: float, rng: random.Random) -> dict:
    new = clone(state)
    discarded = new['discard_white']
    for cards in new['submissions'].values():
        discarded.extend(cards)
    deck = new['white_deck']
    for pid in new['seats']:
        hand = new['hands'].setdefault(pid, [])
        needed = HAND_SIZE - len(hand)
        if needed <= 0:
            continue
        if len(deck) < needed:
            deck = deck + shuffle(discarded, rng)
            discarded = []
        drawn, deck = draw(deck, needed)
        hand.extend(drawn)

    discard_black = new['discard_black'] + [new['black_card']]
    black_deck = new['black_deck']
    if not black_deck:
        black_deck = shuffle(discard_black, rng)
        discard_black = []

    new.update({
        'current_round': new['current_round'] + 1,
        'czar_index': (new['czar_index'] + 1) % len(new['seats']),
        'phase': 'czar_reveal',
        'phase_ends_at': now + CZAR_REVEAL_DURATION,
        'bot_action_at': None,
        'black_card': black_deck[0],
        'black_deck': black_deck[1:],
        'submissions': {},
        'reveal_order': [],
        'round_winner_id': None,
        'white_deck': deck,
        'discard_white': discarded,
        'discard_black': discard_black,
    })
    return new


def process_action(state: dict, player_id: str, action: dict, players: List[dict],
                   now: float, rng: random.Random) -> dict:
    kind = action.get('type')
    payload = action.get('payload') or {}
    if kind == 'submit':
        return submit_cards(state, player_id, payload.get('card_ids'), players, now, rng)
    if kind == 'judge':
        return judge_winner(state, player_id, payload.get('winner_id'), now)
    return state


def replace_player(state: dict, departing_id: str, bot_id: str, players: List[dict],
                   now: float, rng: random.Random) -> dict:
    new = clone(state)
    new['seats'] = [bot_id if pid == departing_id else pid for pid in new['seats']]
    for key in ('hands', 'submissions', 'scores'):
        if departing_id in new[key]:
            new[key][bot_id] = new[key].pop(departing_id)
    new['reveal_order'] = [bot_id if pid == departing_id else pid for pid in new['reveal_order']]
    if new['round_winner_id'] == departing_id:
        new['round_winner_id'] = bot_id

    czar = czar_id(new)
    if new['phase'] == 'submitting' and bot_id != czar and bot_id not in new['submissions']:
        due = next_bot_submit_at(new, players, now, rng)
        if new['bot_action_at'] is None or (due is not None and due < new['bot_action_at']):
            new['bot_action_at'] = due
    elif new['phase'] == 'judging' and bot_id == czar and new['round_winner_id'] is None:
        new['bot_action_at'] = now + BOT_JUDGE_DELAY
    return new


def sanitize(state: dict, player_id: str) -> dict:
    view = clone(state)
    hands = view.pop('hands')
    for key in ('black_deck', 'white_deck', 'discard_white', 'discard_black'):
        view.pop(key, None)
    view['my_hand'] = hands.get(player_id, [])
    view['czar_id'] = czar_id(state)
    submissions = view.pop('submissions')
    view['submitted_player_ids'] = sorted(submissions)
    if view['phase'] in ('judging', 'round_result', 'game_over'):
        view['submissions'] = [
            {'id': pid, 'cards': submissions[pid]}
            for pid in view['reveal_order'] if pid in submissions
        ]
    else:
        view['submissions'] = []
        if player_id in submissions:
            view['my_submission'] = submissions[player_id]
    return view
