"""Card ordering rules for Euchre.

The left bower (jack of the suit sharing trump's colour) belongs to trump for
every purpose: following suit, ranking and voids.
"""

from typing import List, Optional

from .constants import SUITS, RANKS

PARTNER_SUIT = {
    'spades': 'clubs',
    'clubs': 'spades',
    'hearts': 'diamonds',
    'diamonds': 'hearts',
}

TRUMP_RANKS = {'A': 6, 'K': 5, 'Q': 4, '10': 3, '9': 2}
STANDARD_RANKS = {'A': 6, 'K': 5, 'Q': 4, 'J': 3, '10': 2, '9': 1}


def make_card(rank: str, suit: str) -> dict:
    return {'suit': suit, 'rank': rank, 'id': f"{rank}{suit[0].upper()}"}


def create_deck() -> List[dict]:
    return [make_card(rank, suit) for suit in SUITS for rank in RANKS]


def is_same_color(a: str, b: str) -> bool:
    return a == b or PARTNER_SUIT[a] == b


def is_right_bower(card: dict, trump: str) -> bool:
    return card['rank'] == 'J' and card['suit'] == trump


def is_left_bower(card: dict, trump: str) -> bool:
    return card['rank'] == 'J' and card['suit'] == PARTNER_SUIT[trump]


def effective_suit(card: dict, trump: str) -> str:
    if is_left_bower(card, trump):
        return trump
    return card['suit']


def is_trump(card: dict, trump: str) -> bool:
    return effective_suit(card, trump) == trump


def trump_rank(card: dict, trump: str) -> int:
    if is_right_bower(card, trump):
        return 8
    if is_left_bower(card, trump):
        return 7
    return TRUMP_RANKS.get(card['rank'], 0)


def standard_rank(card: dict) -> int:
    return STANDARD_RANKS[card['rank']]


def compare_cards(a: dict, b: dict, led_suit: str, trump: str) -> int:
    """Positive when ``a`` beats ``b`` within a trick led in ``led_suit``."""
    a_trump = is_trump(a, trump)
    b_trump = is_trump(b, trump)
    if a_trump and not b_trump:
        return 1
    if b_trump and not a_trump:
        return -1
    if a_trump and b_trump:
        return trump_rank(a, trump) - trump_rank(b, trump)

    a_follows = effective_suit(a, trump) == led_suit
    b_follows = effective_suit(b, trump) == led_suit
    if a_follows and not b_follows:
        return 1
    if b_follows and not a_follows:
        return -1
    if not a_follows and not b_follows:
        return 0
    return standard_rank(a) - standard_rank(b)


def card_strength(card: dict, trump: str) -> int:
    """Single ordering across a hand: every trump outranks every plain card."""
    if is_trump(card, trump):
        return 100 + trump_rank(card, trump)
    return standard_rank(card)


def led_suit_of(trick: List[dict], trump: str) -> Optional[str]:
    if not trick:
        return None
    return effective_suit(trick[0]['card'], trump)


def trick_winner(trick: List[dict], trump: str) -> dict:
    led = led_suit_of(trick, trump)
    best = trick[0]
    for played in trick[1:]:
        if compare_cards(played['card'], best['card'], led, trump) > 0:
            best = played
    return best


def playable_cards(hand: List[dict], led_suit: Optional[str], trump: str) -> List[dict]:
    if not led_suit:
        return list(hand)
    follow = [c for c in hand if effective_suit(c, trump) == led_suit]
    return follow or list(hand)


def team_for_seat(seat_index: int) -> str:
    return 'a' if seat_index in (0, 2) else 'b'


def partner_seat(seat_index: int) -> int:
    return (seat_index + 2) % 4


def expected_cards_this_trick(round_: dict) -> int:
    return 3 if round_['going_alone'] else 4


def next_active_seat(seat_index: int, round_: dict) -> int:
    nxt = (seat_index + 1) % 4
    if round_['going_alone'] and nxt == round_['inactive_partner_seat_index']:
        nxt = (nxt + 1) % 4
    return nxt
