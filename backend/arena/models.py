from dataclasses import dataclass, field
from typing import Dict, Optional

from arena.services.games.engine import MARK_X, MARKS, Match, opponent_of
from arena.services.games.scheduler import ScheduledTask

MODE_VERSUS = 'human_vs_human'
MODE_SOLO = 'human_vs_scripted'

STATE_WAITING = 'waiting'
STATE_ACTIVE = 'active'
STATE_GRACE = 'disconnect_grace'
STATE_FINISHED = 'finished'


@dataclass
class Room:
    id: str
    mode: str = MODE_VERSUS
    match: Match = field(default_factory=Match)
    members: Dict[str, str] = field(default_factory=dict)  # sid -> mark
    readiness: Dict[str, bool] = field(default_factory=dict)  # sid -> ready
    difficulty: Optional[str] = None
    pending_expiry: Optional[ScheduledTask] = None
    pending_reply: Optional[ScheduledTask] = None

    @property
    def is_solo(self) -> bool:
        return self.mode == MODE_SOLO

    @property
    def scripted_mark(self) -> Optional[str]:
        if not self.is_solo:
            return None
        human = next(iter(self.members.values()), MARK_X)
        return opponent_of(human)

    @property
    def effective_member_count(self) -> int:
        return 2 if self.is_solo else len(self.members)

    @property
    def capacity(self) -> int:
        return 1 if self.is_solo else 2

    @property
    def has_full_complement(self) -> bool:
        return len(self.members) == self.capacity

    @property
    def all_ready(self) -> bool:
        return self.has_full_complement and all(self.readiness.get(sid) for sid in self.members)

    def unclaimed_mark(self) -> str:
        taken = set(self.members.values())
        return next(mark for mark in MARKS if mark not in taken)

    @property
    def state(self) -> str:
        if self.match.is_over:
            return STATE_FINISHED
        if self.pending_expiry is not None:
            return STATE_GRACE
        if self.effective_member_count < 2:
            return STATE_WAITING
        return STATE_ACTIVE

    def cancel_expiry(self) -> bool:
        if self.pending_expiry is None:
            return False
        self.pending_expiry.cancel()
        self.pending_expiry = None
        return True

    def cancel_reply(self) -> None:
        if self.pending_reply is not None:
            self.pending_reply.cancel()
            self.pending_reply = None

    def to_summary(self):
        return {
            'roomId': self.id,
            'mode': self.mode,
            'state': self.state,
            'members': len(self.members),
            'effectiveMemberCount': self.effective_member_count,
        }


def readiness_by_mark(room: Room) -> Dict[str, bool]:
    ready = {mark: room.readiness.get(sid, False) for sid, mark in room.members.items()}
    if room.is_solo:
        ready[room.scripted_mark] = True
    return ready


def serialize_match_state(room: Room) -> dict:
    """Build the outbound match_state payload for a room."""
    match = room.match
    return {
        'roomId': room.id,
        'cells': list(match.cells),
        'turn': match.turn,
        'outcome': match.outcome.to_dict(),
        'winningTriple': list(match.winning_triple) if match.winning_triple else None,
        'readiness': readiness_by_mark(room),
        'effectiveMemberCount': room.effective_member_count,
    }
