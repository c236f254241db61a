import random
import time
import uuid
from typing import List, Optional

from gamenight.errors import GameError


ROOM_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
ROOM_CODE_LENGTH = 6
MAX_NAME_LENGTH = 30
BOT_NAMES = ['Bot Alice', 'Bot Bob', 'Bot Charlie']

_system_random = random.SystemRandom()


def new_player_id() -> str:
    return uuid.uuid4().hex


def generate_room_code(exists=None, attempts: int = 20) -> str:
    """Random room code; ``exists(code)`` is consulted to avoid collisions."""
    for _ in range(attempts):
        code = ''.join(_system_random.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))
        if exists is None or not exists(code):
            return code
    raise RuntimeError('Could not allocate a free room code')


def normalize_room_code(code) -> str:
    return code.strip().upper() if isinstance(code, str) else ''


def validate_name(name) -> str:
    name = name.strip() if isinstance(name, str) else ''
    if not name or len(name) > MAX_NAME_LENGTH:
        raise GameError(f'Name must be 1-{MAX_NAME_LENGTH} characters', 'INVALID_NAME')
    return name


def make_player(name: str, is_bot: bool = False, player_id: Optional[str] = None,
                now: Optional[float] = None) -> dict:
    return {
        'id': player_id or new_player_id(),
        'name': name,
        'is_bot': is_bot,
        'is_connected': True,
        'joined_at': time.time() if now is None else now,
        'score': 0,
    }


def next_bot_name(players: List[dict]) -> str:
    taken = {p['name'] for p in players}
    for name in BOT_NAMES:
        if name not in taken:
            return name
    n = len(BOT_NAMES) + 1
    while f'Bot {n}' in taken:
        n += 1
    return f'Bot {n}'


def create_bot_for_seat(players: List[dict], now: Optional[float] = None) -> dict:
    return make_player(next_bot_name(players), is_bot=True, now=now)


def fill_with_bots(players: List[dict], seats: int, now: Optional[float] = None) -> List[dict]:
    filled = list(players)
    while len(filled) < seats:
        filled.append(create_bot_for_seat(filled, now))
    return filled


def humans(players: List[dict]) -> List[dict]:
    return [p for p in players if not p['is_bot']]
