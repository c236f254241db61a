from typing import Dict, List, Optional

from gamenight.errors import GameError
from .base import GameModule
from .whos_deal import module as whos_deal
from .terrible_people import module as terrible_people
from .four_kate import module as four_kate
from .battleship import module as battleship
from .minesweeper import module as minesweeper
from .wordle import module as wordle


GAMES: Dict[str, GameModule] = {
    m.game_id: m
    for m in (whos_deal, terrible_people, four_kate, battleship, minesweeper, wordle)
}


def find_game_module(game_id: Optional[str]) -> Optional[GameModule]:
    return GAMES.get(game_id) if game_id else None


def get_game_module(game_id: Optional[str]) -> GameModule:
    module = find_game_module(game_id)
    if module is None:
        raise GameError(f'Unknown game: {game_id}', 'INVALID_GAME')
    return module


def seat_count(game_id: str) -> int:
    return get_game_module(game_id).max_players


def catalog() -> List[dict]:
    return [m.catalog_entry() for m in GAMES.values()]
