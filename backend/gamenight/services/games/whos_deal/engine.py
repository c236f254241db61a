"""Who's Deal: four-seat partnership Euchre.

Seats run ``[a0, b0, a1, b1]`` so partners sit opposite. A round moves
through ``round1 -> round2 -> dealer_discard -> playing -> round_over`` on
``round['trump_phase']``; the top-level ``phase`` is only ``playing`` or
``game_over``. Every handler returns the input object untouched for a no-op
and a fresh dict otherwise.
"""

import random
from typing import List, Optional

from gamenight.errors import GameError
from ..base import clone, is_bot, random_delay
from ..cards import shuffle, deal
from .constants import (
    SUITS, SEAT_COUNT, CARDS_PER_HAND, KITTY_SIZE, TRICKS_PER_ROUND,
    DEFAULT_TARGET_SCORE, MARCH_POINTS, ALONE_MARCH_POINTS, MADE_POINTS,
    EUCHRE_POINTS, BOT_ACTION_DELAY, ROUND_RESULT_DISPLAY,
)
from .rules import (
    create_deck, effective_suit, playable_cards, trick_winner, team_for_seat,
    partner_seat, expected_cards_this_trick, next_active_seat, led_suit_of,
)


def seat_of(state: dict, player_id: str) -> int:
    try:
        return state['seats'].index(player_id)
    except ValueError:
        return -1


def seats_from_settings(players: List[dict], settings: dict) -> List[str]:
    teams = (settings or {}).get('teams')
    if teams and len(teams.get('a', [])) == 2 and len(teams.get('b', [])) == 2:
        return [teams['a'][0], teams['b'][0], teams['a'][1], teams['b'][1]]
    return [p['id'] for p in players[:SEAT_COUNT]]


def deal_round(state: dict, rng: random.Random) -> dict:
    """Deal a fresh round from the current dealer. Does not schedule bots."""
    deck = shuffle(create_deck(), rng)
    hands, rest = deal(deck, state['seats'], CARDS_PER_HAND)
    kitty = rest[:KITTY_SIZE]
    new = clone(state)
    new['round'] = {
        'hands': hands,
        'kitty': kitty,
        'trump_phase': 'round1',
        'trump_suit': None,
        'calling_player_id': None,
        'calling_team': None,
        'going_alone': False,
        'alone_player_id': None,
        'inactive_partner_seat_index': None,
        'face_up_card': kitty[0],
        'dealer_discarded': False,
        'current_turn_seat_index': (state['dealer_seat_index'] + 1) % SEAT_COUNT,
        'passed_players': [],
        'current_trick': [],
        'trick_lead_seat_index': (state['dealer_seat_index'] + 1) % SEAT_COUNT,
        'tricks_won': {'a': 0, 'b': 0},
        'tricks_played': 0,
        'dealer_picked_up': None,
        'last_trick': None,
        'points_awarded': None,
    }
    new['bot_action_at'] = None
    new['phase_ends_at'] = None
    return new


def with_bot_timing(state: dict, players: List[dict], now: float, rng: random.Random) -> dict:
    """Set ``bot_action_at`` when the seat on turn belongs to a bot."""
    round_ = state.get('round')
    due = None
    if round_ and state['phase'] != 'game_over' and round_['trump_phase'] != 'round_over':
        on_turn = state['seats'][round_['current_turn_seat_index']]
        if is_bot(players, on_turn):
            due = now + random_delay(rng, BOT_ACTION_DELAY)
    if state.get('bot_action_at') == due:
        return state
    new = dict(state)
    new['bot_action_at'] = due
    return new


def initialize_game(players: List[dict], settings: dict, now: float, rng: random.Random) -> dict:
    settings = settings or {}
    seats = seats_from_settings(players, settings)
    state = {
        'phase': 'playing',
        'seats': seats,
        'teams': {
            'a': {'player_ids': [seats[0], seats[2]], 'score': 0},
            'b': {'player_ids': [seats[1], seats[3]], 'score': 0},
        },
        'target_score': int(settings.get('target_score', DEFAULT_TARGET_SCORE)),
        'round2_all_pass': settings.get('round2_all_pass', 'stick'),
        'dealer_seat_index': 0,
        'rounds_played': 1,
        'round': None,
        'winning_team': None,
        'bot_action_at': None,
        'phase_ends_at': None,
    }
    return with_bot_timing(deal_round(state, rng), players, now, rng)


def _require_turn(state: dict, player_id: str) -> int:
    seat = seat_of(state, player_id)
    if seat != state['round']['current_turn_seat_index']:
        raise GameError('Not your turn', 'NOT_YOUR_TURN')
    return seat


def _start_play(round_: dict, lead_seat: int) -> None:
    round_['trump_phase'] = 'playing'
    round_['current_trick'] = []
    round_['tricks_won'] = {'a': 0, 'b': 0}
    round_['tricks_played'] = 0
    round_['trick_lead_seat_index'] = lead_seat
    round_['current_turn_seat_index'] = lead_seat
    round_['passed_players'] = []


def _fix_trump(round_: dict, player_id: str, seat: int, suit: str, go_alone: bool) -> None:
    round_['trump_suit'] = suit
    round_['calling_player_id'] = player_id
    round_['calling_team'] = team_for_seat(seat)
    round_['going_alone'] = go_alone
    round_['alone_player_id'] = player_id if go_alone else None
    round_['inactive_partner_seat_index'] = partner_seat(seat) if go_alone else None


def call_trump_round1(state: dict, player_id: str, payload: dict) -> dict:
    seat = _require_turn(state, player_id)
    if payload.get('pick_up') is not True:
        return state

    new = clone(state)
    r = new['round']
    face_up = r['face_up_card']
    _fix_trump(r, player_id, seat, face_up['suit'], bool(payload.get('go_alone')))
    dealer_id = new['seats'][new['dealer_seat_index']]
    r['hands'][dealer_id].append(face_up)
    r['dealer_picked_up'] = face_up
    r['trump_phase'] = 'dealer_discard'
    r['current_turn_seat_index'] = new['dealer_seat_index']
    r['passed_players'] = []
    new['bot_action_at'] = None
    return new


def call_trump_round2(state: dict, player_id: str, payload: dict) -> dict:
    round_ = state['round']
    seat = _require_turn(state, player_id)
    suit = payload.get('suit')
    if suit not in SUITS:
        raise GameError('Choose a suit', 'INVALID_SUIT')
    if suit == round_['face_up_card']['suit']:
        raise GameError('That suit was turned down', 'INVALID_SUIT')

    new = clone(state)
    r = new['round']
    _fix_trump(r, player_id, seat, suit, bool(payload.get('go_alone')))
    _start_play(r, next_active_seat(new['dealer_seat_index'], r))
    new['bot_action_at'] = None
    return new


def pass_trump_round1(state: dict, player_id: str) -> dict:
    round_ = state['round']
    _require_turn(state, player_id)
    if player_id in round_['passed_players']:
        return state

    new = clone(state)
    r = new['round']
    r['passed_players'].append(player_id)
    if len(r['passed_players']) >= SEAT_COUNT:
        r['trump_phase'] = 'round2'
        r['passed_players'] = []
        r['current_turn_seat_index'] = (new['dealer_seat_index'] + 1) % SEAT_COUNT
    else:
        r['current_turn_seat_index'] = (r['current_turn_seat_index'] + 1) % SEAT_COUNT
    new['bot_action_at'] = None
    return new


def pass_trump_round2(state: dict, player_id: str, rng: random.Random) -> dict:
    round_ = state['round']
    seat = _require_turn(state, player_id)
    if player_id in round_['passed_players']:
        return state

    if seat == state['dealer_seat_index'] and len(round_['passed_players']) >= SEAT_COUNT - 1:
        if state.get('round2_all_pass', 'stick') == 'stick':
            raise GameError('Dealer must call', 'MUST_CALL')
        return redeal(state, rng)

    new = clone(state)
    r = new['round']
    r['passed_players'].append(player_id)
    r['current_turn_seat_index'] = (r['current_turn_seat_index'] + 1) % SEAT_COUNT
    new['bot_action_at'] = None
    return new


def redeal(state: dict, rng: random.Random) -> dict:
    """Everyone passed twice: throw the hand in and deal from the next seat."""
    moved = dict(state)
    moved['dealer_seat_index'] = (state['dealer_seat_index'] + 1) % SEAT_COUNT
    moved['redeals'] = int(state.get('redeals', 0)) + 1
    return deal_round(moved, rng)


def discard(state: dict, player_id: str, payload: dict) -> dict:
    round_ = state['round']
    if round_['trump_phase'] != 'dealer_discard':
        return state
    seat = seat_of(state, player_id)
    if seat != state['dealer_seat_index']:
        raise GameError('Only the dealer discards', 'NOT_DEALER')
    card_id = payload.get('card_id')
    hand = round_['hands'][player_id]
    if not card_id or not any(c['id'] == card_id for c in hand):
        raise GameError('Card not in hand', 'INVALID_CARD')

    new = clone(state)
    r = new['round']
    kept = [c for c in r['hands'][player_id] if c['id'] != card_id]
    dropped = [c for c in r['hands'][player_id] if c['id'] == card_id]
    r['hands'][player_id] = kept
    r['kitty'] = r['kitty'][1:] + dropped
    r['dealer_discarded'] = True
    r['dealer_picked_up'] = None
    _start_play(r, next_active_seat(new['dealer_seat_index'], r))
    new['bot_action_at'] = None
    return new


def play_card(state: dict, player_id: str, payload: dict, now: float) -> dict:
    round_ = state['round']
    if round_['trump_phase'] != 'playing':
        return state
    seat = seat_of(state, player_id)
    if seat == -1:
        raise GameError('You are not seated', 'UNAUTHORIZED')
    if round_['going_alone'] and seat == round_['inactive_partner_seat_index']:
        raise GameError('Partner is going alone', 'INACTIVE_PARTNER')
    if seat != round_['current_turn_seat_index']:
        raise GameError('Not your turn', 'NOT_YOUR_TURN')

    card_id = payload.get('card_id')
    hand = round_['hands'][player_id]
    card = next((c for c in hand if c['id'] == card_id), None)
    if card is None:
        raise GameError('Card not in hand', 'INVALID_CARD')

    trump = round_['trump_suit']
    led = led_suit_of(round_['current_trick'], trump)
    if not any(c['id'] == card_id for c in playable_cards(hand, led, trump)):
        raise GameError('Must follow suit', 'MUST_FOLLOW_SUIT')

    new = clone(state)
    r = new['round']
    r['hands'][player_id] = [c for c in hand if c['id'] != card_id]
    r['current_trick'].append({'player_id': player_id, 'seat_index': seat, 'card': card})
    new['bot_action_at'] = None

    if len(r['current_trick']) < expected_cards_this_trick(r):
        r['current_turn_seat_index'] = next_active_seat(seat, r)
        return new
    return complete_trick(new, now)


def complete_trick(state: dict, now: float) -> dict:
    """Resolve a full trick in place on an already-cloned state."""
    r = state['round']
    winner = trick_winner(r['current_trick'], r['trump_suit'])
    team = team_for_seat(winner['seat_index'])
    r['tricks_won'][team] += 1
    r['tricks_played'] += 1
    r['last_trick'] = {
        'cards': r['current_trick'],
        'winning_seat_index': winner['seat_index'],
        'winning_team': team,
    }
    r['current_trick'] = []
    r['trick_lead_seat_index'] = winner['seat_index']
    r['current_turn_seat_index'] = winner['seat_index']
    if r['tricks_played'] >= TRICKS_PER_ROUND:
        return score_round(state, now)
    return state


def round_points(calling_team: str, tricks_won: dict, going_alone: bool):
    """Return ``(team, points)`` awarded for a finished round."""
    defending = 'b' if calling_team == 'a' else 'a'
    made = tricks_won[calling_team]
    if made == TRICKS_PER_ROUND:
        return calling_team, ALONE_MARCH_POINTS if going_alone else MARCH_POINTS
    if made >= 3:
        return calling_team, MADE_POINTS
    return defending, EUCHRE_POINTS


def score_round(state: dict, now: float) -> dict:
    r = state['round']
    team, points = round_points(r['calling_team'], r['tricks_won'], r['going_alone'])
    state['teams'][team]['score'] += points
    r['points_awarded'] = {'a': points if team == 'a' else 0, 'b': points if team == 'b' else 0}
    r['trump_phase'] = 'round_over'
    game_over = state['teams'][team]['score'] >= state['target_score']
    state['phase'] = 'game_over' if game_over else 'playing'
    state['winning_team'] = team if game_over else None
    state['bot_action_at'] = None
    state['phase_ends_at'] = None if game_over else now + ROUND_RESULT_DISPLAY
    return state


def advance_to_next_round(state: dict, players: List[dict], now: float, rng: random.Random) -> dict:
    round_ = state.get('round')
    if state['phase'] == 'game_over' or not round_ or round_['trump_phase'] != 'round_over':
        return state
    moved = dict(state)
    moved['dealer_seat_index'] = (state['dealer_seat_index'] + 1) % SEAT_COUNT
    moved['rounds_played'] = int(state.get('rounds_played', 1)) + 1
    return with_bot_timing(deal_round(moved, rng), players, now, rng)


def restart(state: dict, players: List[dict], now: float, rng: random.Random) -> Optional[dict]:
    if state['phase'] != 'game_over':
        return None
    fresh = clone(state)
    fresh['teams']['a']['score'] = 0
    fresh['teams']['b']['score'] = 0
    fresh['dealer_seat_index'] = 0
    fresh['rounds_played'] = 1
    fresh['phase'] = 'playing'
    fresh['winning_team'] = None
    fresh['round'] = None
    return with_bot_timing(deal_round(fresh, rng), players, now, rng)


def process_action(state: dict, player_id: str, action: dict, players: List[dict],
                   now: float, rng: random.Random) -> dict:
    round_ = state.get('round')
    if not round_ or state['phase'] == 'game_over':
        return state
    kind = action.get('type')
    payload = action.get('payload') or {}
    phase = round_['trump_phase']

    if kind == 'call-trump' and phase == 'round1':
        new = call_trump_round1(state, player_id, payload)
    elif kind == 'call-trump' and phase == 'round2':
        new = call_trump_round2(state, player_id, payload)
    elif kind == 'pass-trump' and phase == 'round1':
        new = pass_trump_round1(state, player_id)
    elif kind == 'pass-trump' and phase == 'round2':
        new = pass_trump_round2(state, player_id, rng)
    elif kind == 'discard':
        new = discard(state, player_id, payload)
    elif kind == 'play-card':
        new = play_card(state, player_id, payload, now)
    else:
        return state

    if new is state:
        return state
    return with_bot_timing(new, players, now, rng)


def replace_player(state: dict, departing_id: str, bot_id: str, players: List[dict],
                   now: float, rng: random.Random) -> dict:
    """Hand the departing player's seat, cards and roles to ``bot_id``."""
    def swap(pid):
        return bot_id if pid == departing_id else pid

    new = clone(state)
    new['seats'] = [swap(pid) for pid in new['seats']]
    for team in new['teams'].values():
        team['player_ids'] = [swap(pid) for pid in team['player_ids']]

    r = new.get('round')
    if r:
        if departing_id in r['hands']:
            r['hands'][bot_id] = r['hands'].pop(departing_id)
        r['passed_players'] = [swap(pid) for pid in r['passed_players']]
        for played in r['current_trick']:
            played['player_id'] = swap(played['player_id'])
        if r.get('last_trick'):
            for played in r['last_trick']['cards']:
                played['player_id'] = swap(played['player_id'])
        r['calling_player_id'] = swap(r['calling_player_id'])
        r['alone_player_id'] = swap(r['alone_player_id'])

        on_turn = new['seats'][r['current_turn_seat_index']]
        if on_turn == bot_id and not new.get('bot_action_at'):
            return with_bot_timing(new, players, now, rng)
    return new


def sanitize(state: dict, player_id: str) -> dict:
    view = clone(state)
    r = view.get('round')
    if r:
        hands = r.pop('hands')
        r.pop('kitty', None)
        r['my_hand'] = hands.get(player_id, [])
        r['hand_counts'] = {pid: len(cards) for pid, cards in hands.items()}
    return view
