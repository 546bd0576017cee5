import random
from typing import Optional, Sequence

from .engine import WINNING_TRIPLES, opponent_of

NO_MOVE = -1
CENTER = 4
CORNERS = (0, 2, 6, 8)

DIFFICULTY_EASY = 'easy'
DIFFICULTY_NORMAL = 'normal'
DIFFICULTIES = (DIFFICULTY_EASY, DIFFICULTY_NORMAL)


def _completing_cell(cells: Sequence[Optional[str]], mark: str) -> int:
    for triple in WINNING_TRIPLES:
        owned = [i for i in triple if cells[i] == mark]
        empty = [i for i in triple if cells[i] is None]
        if len(owned) == 2 and len(empty) == 1:
            return empty[0]
    return NO_MOVE


def choose_move(cells: Sequence[Optional[str]], own_mark: str, rng: Optional[random.Random] = None) -> int:
    """Pick a cell for `own_mark` without lookahead.

    Win if possible, otherwise block, otherwise take the center, otherwise a
    random free corner. Returns NO_MOVE when none of those apply.
    """
    rng = rng or random
    move = _completing_cell(cells, own_mark)
    if move != NO_MOVE:
        return move
    move = _completing_cell(cells, opponent_of(own_mark))
    if move != NO_MOVE:
        return move
    if cells[CENTER] is None:
        return CENTER
    corners = [i for i in CORNERS if cells[i] is None]
    if corners:
        return rng.choice(corners)
    return NO_MOVE


def choose_random_move(cells: Sequence[Optional[str]], rng: Optional[random.Random] = None) -> int:
    rng = rng or random
    empty = [i for i, cell in enumerate(cells) if cell is None]
    return rng.choice(empty) if empty else NO_MOVE


def pick_move(cells: Sequence[Optional[str]], own_mark: str, difficulty: str, rng: Optional[random.Random] = None) -> int:
    if difficulty == DIFFICULTY_EASY:
        return choose_random_move(cells, rng)
    return choose_move(cells, own_mark, rng)
