import copy
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from gamenight.errors import GameError


@dataclass
class Events:
    """Outbound events produced by one transition.

    ``room`` entries go to the room channel, ``private`` entries only to the
    named player's channel.
    """
    room: List[Tuple[str, dict]] = field(default_factory=list)
    private: List[Tuple[str, str, dict]] = field(default_factory=list)

    def to_room(self, event: str, data: dict) -> 'Events':
        self.room.append((event, data))
        return self

    def to_player(self, player_id: str, event: str, data: dict) -> 'Events':
        self.private.append((player_id, event, data))
        return self

    def extend(self, other: Optional['Events']) -> 'Events':
        if other is not None:
            self.room.extend(other.room)
            self.private.extend(other.private)
        return self

    def names(self) -> List[str]:
        return [name for name, _ in self.room] + [name for _, name, _ in self.private]


@dataclass
class Advancement:
    """A timer-driven transition computed from a snapshot.

    ``can_apply`` re-checks the triggering deadline against whatever state is
    current when the compare-and-swap mutator runs.
    """
    state: dict
    events: Events
    can_apply: Callable[[dict], bool]
    recurse: bool = True


def clone(state: dict) -> dict:
    return copy.deepcopy(state)


def random_delay(rng: random.Random, window: Tuple[float, float]) -> float:
    low, high = window
    return low + rng.random() * (high - low)


def find_player(players: List[dict], player_id: str) -> Optional[dict]:
    for p in players:
        if p['id'] == player_id:
            return p
    return None


def is_bot(players: List[dict], player_id: Optional[str]) -> bool:
    p = find_player(players, player_id) if player_id else None
    return bool(p and p.get('is_bot'))


def deadline_passed(deadline: Optional[float], now: float) -> bool:
    return deadline is not None and now >= deadline


def unchanged_since(snapshot: dict) -> Callable[[dict], bool]:
    """``can_apply`` check: nobody wrote the game after ``snapshot`` was read."""
    def check(current: Optional[dict]) -> bool:
        return current == snapshot
    return check


class GameModule:
    """Lifecycle contract shared by every rule engine."""

    game_id = ''
    name = ''
    min_players = 1
    max_players = 1
    # single-player games go back to the lobby instead of restarting in place
    restart_in_place = True

    def catalog_entry(self) -> Dict[str, Any]:
        return {
            'id': self.game_id,
            'name': self.name,
            'min_players': self.min_players,
            'max_players': self.max_players,
        }

    def default_settings(self, players, config=None) -> dict:
        return {}

    def initialize(self, players, settings, now, rng) -> dict:
        raise NotImplementedError

    def process_action(self, state, player_id, action, players, now, rng) -> dict:
        raise NotImplementedError

    def describe_action(self, before, after, player_id, action, players) -> Events:
        return Events()

    def sanitize_for_player(self, state, player_id) -> dict:
        return clone(state)

    def check_game_over(self, state) -> bool:
        return state.get('phase') == 'game_over'

    def get_bot_action(self, state, bot_id, players, rng) -> Optional[dict]:
        return None

    def process_advancement(self, state, players, now, rng) -> Optional[Advancement]:
        return None

    def run_bot(self, state, bot_id, players, now, rng) -> Optional[Advancement]:
        """Play ``bot_id``'s chosen move through the same path as a human action."""
        action = self.get_bot_action(state, bot_id, players, rng)
        if action is None:
            return None
        new = self.process_action(state, bot_id, action, players, now, rng)
        if new is state:
            return None
        events = self.describe_action(state, new, bot_id, action, players)
        return Advancement(new, events, unchanged_since(state))

    def process_player_replacement(self, state, departing_id, bot_id, seat_index, players, now, rng) -> dict:
        return state

    def replace_in_settings(self, settings, departing_id, bot_id) -> dict:
        return settings

    def process_lobby_action(self, settings, players, action) -> Tuple[dict, Events]:
        raise GameError(f"Unknown lobby action: {action.get('type')}", 'INVALID_REQUEST')

    def play_again(self, state, players, settings, now, rng) -> Optional[dict]:
        return self.initialize(players, settings, now, rng)

    def private_updates(self, state, players) -> Events:
        return Events()

    def player_scores(self, state) -> Optional[Dict[str, int]]:
        return None
