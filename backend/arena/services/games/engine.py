from dataclasses import dataclass
from typing import List, Optional, Tuple

MARK_X = 'X'
MARK_O = 'O'
MARKS = (MARK_X, MARK_O)

# rows, then columns, then diagonals
WINNING_TRIPLES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

STATUS_IN_PROGRESS = 'in_progress'
STATUS_WON = 'won'
STATUS_DRAW = 'draw'

REASON_NORMAL = 'normal'
REASON_RESIGNATION = 'resignation'


def opponent_of(mark: str) -> str:
    return MARK_O if mark == MARK_X else MARK_X


@dataclass(frozen=True)
class Outcome:
    status: str = STATUS_IN_PROGRESS
    winner: Optional[str] = None
    reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != STATUS_IN_PROGRESS

    def to_dict(self):
        return {'status': self.status, 'winner': self.winner, 'reason': self.reason}


class Match:
    """Authoritative state of one game: board, turn and outcome.

    Cells hold 'X', 'O' or None. Once the outcome is terminal the match is
    frozen until reset().
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.cells: List[Optional[str]] = [None] * 9
        self.turn: str = MARK_X
        self.outcome: Outcome = Outcome()
        self.winning_triple: Optional[Tuple[int, int, int]] = None

    @property
    def is_over(self) -> bool:
        return self.outcome.is_terminal

    def apply_move(self, index) -> bool:
        """Place the current turn's mark on `index`.

        Returns False, leaving the match untouched, for an out-of-range or
        non-integer index, an occupied cell, or a finished match.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        if index < 0 or index > 8 or self.cells[index] is not None or self.is_over:
            return False

        self.cells[index] = self.turn
        self.evaluate_termination()
        if not self.is_over:
            self.turn = opponent_of(self.turn)
        return True

    def evaluate_termination(self) -> None:
        for a, b, c in WINNING_TRIPLES:
            mark = self.cells[a]
            if mark is not None and mark == self.cells[b] == self.cells[c]:
                self.outcome = Outcome(STATUS_WON, mark, REASON_NORMAL)
                self.winning_triple = (a, b, c)
                return
        if None not in self.cells:
            self.outcome = Outcome(STATUS_DRAW)

    def resign(self, mark: str) -> bool:
        if self.is_over or mark not in MARKS:
            return False
        self.outcome = Outcome(STATUS_WON, opponent_of(mark), REASON_RESIGNATION)
        return True
