"""Timer-free scheduling: due transitions are discovered on every request.

Each game keeps its own ``phase_ends_at`` and ``bot_action_at`` deadlines in
the stored state. Heartbeats, actions and game start call ``run_advancement``,
which applies whatever is due, one compare-and-swap write per step, until the
game is blocked on a human or on a deadline still in the future.
"""

import random
import time
from typing import Optional

from flask import current_app

from gamenight.services import store
from gamenight.services.events import publish_events
from .registry import find_game_module


def sync_player_scores(room: dict, module) -> dict:
    """Mirror engine-held scores onto ``room['players']`` (in place)."""
    game = room.get('game')
    scores = module.player_scores(game) if game is not None else None
    if scores:
        room['players'] = [
            dict(p, score=scores[p['id']]) if p['id'] in scores else p
            for p in room['players']
        ]
    return room


def run_advancement(room_code: str, now: Optional[float] = None,
                    rng: Optional[random.Random] = None) -> int:
    """Apply due advancements for ``room_code``; returns how many were written."""
    rng = rng or random.Random()
    limit = int(current_app.config.get('MAX_ADVANCEMENT_STEPS', 50))
    steps = 0

    while steps < limit:
        at = time.time() if now is None else now
        room = store.get_room(room_code)
        if not room or room['status'] != 'playing' or room.get('game') is None:
            break
        module = find_game_module(room['game_id'])
        if module is None:
            break

        adv = module.process_advancement(room['game'], room['players'], at, rng)
        if adv is None:
            break

        def mutator(current):
            if current['status'] != 'playing' or not adv.can_apply(current.get('game')):
                return None
            updated = dict(current)
            updated['game'] = adv.state
            return sync_player_scores(updated, module)

        stored = store.atomic_room_update(room_code, mutator)
        if stored is None:
            current_app.logger.info(f"[advance-skip] room={room_code} step={steps} state moved on")
            break

        steps += 1
        current_app.logger.info(
            f"[advance] room={room_code} game={room['game_id']} step={steps} "
            f"phase={adv.state.get('phase')} events={','.join(adv.events.names())}"
        )
        publish_events(stored, adv.events)
        if not adv.recurse:
            break

    if steps >= limit:
        current_app.logger.warning(f"[advance-limit] room={room_code} stopped after {steps} steps")
    return steps
