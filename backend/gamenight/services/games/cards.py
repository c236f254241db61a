"""Deck helpers shared by the card games."""

import random
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar('T')


def shuffle(items: Sequence[T], rng: random.Random) -> List[T]:
    """Fisher-Yates shuffle into a new list; ``items`` is left untouched."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out


def deal(deck: Sequence[T], seats: Sequence[str], per_seat: int) -> Tuple[dict, List[T]]:
    """Deal ``per_seat`` consecutive cards to each seat in order.

    Returns ``(hands, rest)`` where ``rest`` is what remains of the deck.
    """
    hands = {}
    idx = 0
    for seat in seats:
        hands[seat] = list(deck[idx:idx + per_seat])
        idx += per_seat
    return hands, list(deck[idx:])


def draw(deck: List[T], count: int) -> Tuple[List[T], List[T]]:
    return list(deck[:count]), list(deck[count:])
