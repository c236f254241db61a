"""Heuristic Euchre bot. Deterministic for a given state."""

from typing import List, Optional

from .constants import SUITS, SEAT_COUNT
from .rules import (
    is_trump, is_right_bower, is_left_bower, card_strength, compare_cards,
    playable_cards, trick_winner, led_suit_of, partner_seat,
)

FACE_RANKS = ('J', 'Q', 'K', 'A')


def _trumps(hand: List[dict], trump: str) -> List[dict]:
    return [c for c in hand if is_trump(c, trump)]


def should_order_up(hand: List[dict], face_up: dict, is_dealer: bool) -> bool:
    trump = face_up['suit']
    cards = hand + [face_up] if is_dealer else hand
    trumps = _trumps(cards, trump)
    if any(is_right_bower(c, trump) for c in trumps):
        return True
    if any(is_left_bower(c, trump) for c in trumps) and len(trumps) >= 3:
        return True
    if len(trumps) >= 3 and any(c['rank'] in FACE_RANKS for c in trumps):
        return True
    return is_dealer and len(trumps) >= 2


def suit_score(hand: List[dict], suit: str) -> int:
    trumps = _trumps(hand, suit)
    score = len(trumps)
    if any(is_right_bower(c, suit) for c in trumps):
        score += 3
    if any(is_left_bower(c, suit) for c in trumps):
        score += 2
    return score


def best_round2_suit(hand: List[dict], turned_down: str):
    """Return ``(suit, score)`` for the strongest callable suit."""
    best = None
    for suit in SUITS:
        if suit == turned_down:
            continue
        score = suit_score(hand, suit)
        if best is None or score > best[1]:
            best = (suit, score)
    return best


def should_go_alone(hand: List[dict], trump: str) -> bool:
    trumps = _trumps(hand, trump)
    right = any(is_right_bower(c, trump) for c in trumps)
    left = any(is_left_bower(c, trump) for c in trumps)
    off_ace = any(c['rank'] == 'A' and not is_trump(c, trump) for c in hand)
    if right and left and len(trumps) >= 3 and off_ace:
        return True
    return right and len(trumps) >= 4


def choose_discard(hand: List[dict], trump: str) -> dict:
    plain = [c for c in hand if not is_trump(c, trump)]
    if plain:
        return min(plain, key=lambda c: card_strength(c, trump))
    non_bowers = [c for c in hand if not is_right_bower(c, trump) and not is_left_bower(c, trump)]
    return min(non_bowers or hand, key=lambda c: card_strength(c, trump))


def choose_lead(hand: List[dict], trump: str) -> dict:
    for c in hand:
        if is_right_bower(c, trump):
            return c
    for c in hand:
        if c['rank'] == 'A' and not is_trump(c, trump):
            return c
    trumps = _trumps(hand, trump)
    if len(trumps) >= 2:
        return max(trumps, key=lambda c: card_strength(c, trump))
    return min(hand, key=lambda c: card_strength(c, trump))


def choose_follow(hand: List[dict], trick: List[dict], seat: int, trump: str) -> dict:
    led = led_suit_of(trick, trump)
    options = playable_cards(hand, led, trump)
    lowest = min(options, key=lambda c: card_strength(c, trump))
    winning = trick_winner(trick, trump)
    if winning['seat_index'] == partner_seat(seat):
        return lowest
    beaters = [c for c in options if compare_cards(c, winning['card'], led, trump) > 0]
    if beaters:
        return min(beaters, key=lambda c: card_strength(c, trump))
    return lowest


def choose_bot_action(state: dict, bot_id: str) -> Optional[dict]:
    """Pick the bot's move when its seat is on turn, else ``None``."""
    r = state.get('round')
    if not r or state['phase'] == 'game_over':
        return None
    seat = state['seats'].index(bot_id) if bot_id in state['seats'] else -1
    if seat != r['current_turn_seat_index']:
        return None
    hand = r['hands'][bot_id]
    phase = r['trump_phase']
    is_dealer = seat == state['dealer_seat_index']

    if phase == 'round1':
        face_up = r['face_up_card']
        if should_order_up(hand, face_up, is_dealer):
            go_alone = should_go_alone(hand, face_up['suit'])
            return {'type': 'call-trump', 'payload': {'pick_up': True, 'go_alone': go_alone}}
        return {'type': 'pass-trump', 'payload': {}}

    if phase == 'round2':
        suit, score = best_round2_suit(hand, r['face_up_card']['suit'])
        forced = (
            is_dealer
            and len(r['passed_players']) >= SEAT_COUNT - 1
            and state.get('round2_all_pass', 'stick') == 'stick'
        )
        if score >= 3 or forced:
            return {'type': 'call-trump',
                    'payload': {'suit': suit, 'go_alone': should_go_alone(hand, suit)}}
        return {'type': 'pass-trump', 'payload': {}}

    if phase == 'dealer_discard':
        return {'type': 'discard', 'payload': {'card_id': choose_discard(hand, r['trump_suit'])['id']}}

    if phase == 'playing':
        trump = r['trump_suit']
        if r['current_trick']:
            card = choose_follow(hand, r['current_trick'], seat, trump)
        else:
            card = choose_lead(hand, trump)
        return {'type': 'play-card', 'payload': {'card_id': card['id']}}
    return None
