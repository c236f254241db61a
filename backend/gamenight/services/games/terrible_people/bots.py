import random
from typing import List


def select_random_cards(hand: List[dict], pick: int, rng: random.Random) -> List[str]:
    return [c['id'] for c in rng.sample(hand, min(pick, len(hand)))]


def select_random_winner(reveal_order: List[str], rng: random.Random) -> str:
    return rng.choice(reveal_order)
