import logging
import random
import threading
import uuid
from typing import Dict, List, Optional, Tuple

from arena.errors import (
    HINT_RELOAD_CLIENT,
    NotReady,
    NotYourTurn,
    RoomFull,
    RoomNotFound,
    SingleplayerSlotTaken,
)
from arena.models import MODE_SOLO, MODE_VERSUS, Room, serialize_match_state
from arena.services.games.engine import MARK_X
from arena.services.games.opponent import (
    DIFFICULTIES,
    DIFFICULTY_NORMAL,
    NO_MOVE,
    choose_random_move,
    pick_move,
)
from arena.services.games.scheduler import ScheduledTask

EVENT_MATCH_STATE = 'match_state'
EVENT_OPPONENT_DISCONNECTED = 'opponent_disconnected'
EVENT_MATCH_ENDED_BY_TIMEOUT = 'match_ended_by_timeout'

MSG_OPPONENT_LEFT = 'Opponent left the room. You Win!'
MSG_OPPONENT_TIMED_OUT = 'Opponent disconnected. You Win!'


class SessionRegistry:
    """Owns every live room and the connection -> room lookup.

    All public operations take the registry lock for their whole duration,
    so each inbound message and each timer callback mutates rooms atomically
    with respect to the others. A connection sits in at most one room.

    Timers (grace expiry, scripted replies) are ScheduledTask handles kept on
    the Room; any rejoin or leave cancels a pending expiry before touching
    the room, and every callback re-checks that its room is still the live
    one before acting.
    """

    def __init__(self, transport, scheduler, grace_period: float = 15, reply_delay: float = 0.5,
                 default_difficulty: str = DIFFICULTY_NORMAL, logger=None, rng: Optional[random.Random] = None):
        self.transport = transport
        self.scheduler = scheduler
        self.grace_period = grace_period
        self.reply_delay = reply_delay
        self.default_difficulty = default_difficulty
        self.logger = logger or logging.getLogger(__name__)
        self.rng = rng or random.Random()
        self._rooms: Dict[str, Room] = {}
        self._room_of: Dict[str, str] = {}
        self._lock = threading.RLock()

    # ---- lookups ----

    def get_room(self, room_id: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def room_id_for(self, sid: str) -> Optional[str]:
        with self._lock:
            return self._room_of.get(sid)

    def rooms(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    # ---- matchmaking ----

    def search_match(self, sid: str) -> Tuple[str, str]:
        with self._lock:
            self._release(sid)
            room = self._find_waiting_room()
            if room is None:
                room = self._new_room(sid, MODE_VERSUS)
                mark = MARK_X
            else:
                mark = room.unclaimed_mark()
            self._seat(room, sid, mark)
            self._register(room)
            self.logger.info(f"[room-join] room={room.id} sid={sid} mark={mark} via=search")
            self.broadcast_state(room.id)
            return mark, room.id

    def start_solo_match(self, sid: str, difficulty: Optional[str] = None) -> Tuple[str, str]:
        if difficulty not in DIFFICULTIES:
            difficulty = self.default_difficulty
        with self._lock:
            self._release(sid)
            room = self._new_room(sid, MODE_SOLO, difficulty=difficulty)
            self._seat(room, sid, MARK_X)
            self._register(room)
            self.logger.info(f"[room-join] room={room.id} sid={sid} mark={MARK_X} via=solo difficulty={difficulty}")
            self.broadcast_state(room.id)
            return MARK_X, room.id

    def cancel_search(self, sid: str, room_id: str) -> None:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None or sid not in room.members:
                if self._room_of.get(sid) == room_id:
                    del self._room_of[sid]
                return
            if room.is_solo or len(room.members) > 1:
                # opponent already seated: this is a real leave
                self._leave(room, sid)
                return
            room.cancel_expiry()
            self._unseat(room, sid)
            self.transport.leave(sid, room.id)
            self.logger.info(f"[room-leave] room={room.id} sid={sid} via=cancel_search")
            if not room.members:
                self._delete_room(room, 'search cancelled')

    def join_room(self, sid: str, room_id: str) -> Tuple[str, str]:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                raise RoomNotFound()
            if sid in room.members:
                mark = room.members[sid]
                self.broadcast_state(room.id)
                return mark, room.id
            if room.is_solo and room.members:
                raise SingleplayerSlotTaken()
            if len(room.members) >= 2:
                raise RoomFull()

            self._release(sid)
            mark = room.unclaimed_mark()
            self._seat(room, sid, mark)
            if room.cancel_expiry():
                self.logger.info(f"[grace-cancel] room={room.id} sid={sid}")
            self.logger.info(f"[room-join] room={room.id} sid={sid} mark={mark} via=join")
            self.broadcast_state(room.id)
            return mark, room.id

    # ---- play ----

    def submit_move(self, sid: str, room_id: str, index) -> bool:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                raise RoomNotFound('This match is no longer valid. Reload your game.', HINT_RELOAD_CLIENT)
            if not room.all_ready:
                raise NotReady()
            if room.members.get(sid) != room.match.turn:
                raise NotYourTurn()
            if not room.match.apply_move(index):
                self.logger.debug(f"[move-ignored] room={room.id} sid={sid} index={index!r}")
                return False

            self.broadcast_state(room.id)
            if room.is_solo and not room.match.is_over:
                self._schedule_reply(room)
            return True

    def resign(self, sid: str, room_id: str) -> bool:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                raise RoomNotFound('This match is no longer valid.')
            mark = room.members.get(sid)
            if mark is None or not room.match.resign(mark):
                return False
            room.cancel_reply()
            self.logger.info(f"[resign] room={room.id} sid={sid} mark={mark}")
            self.broadcast_state(room.id)
            return True

    def reset_match(self, sid: str, room_id: str) -> bool:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None or sid not in room.members or not room.has_full_complement:
                return False
            room.cancel_reply()
            room.match.reset()
            self.logger.info(f"[reset] room={room.id} sid={sid}")
            self.broadcast_state(room.id)
            return True

    # ---- departures ----

    def leave_room(self, sid: str, room_id: str) -> None:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None or sid not in room.members:
                if self._room_of.get(sid) == room_id:
                    del self._room_of[sid]
                return
            self._leave(room, sid)

    def disconnect(self, sid: str) -> None:
        with self._lock:
            room_id = self._room_of.pop(sid, None)
            self.logger.info(f"[disconnect] sid={sid} room={room_id}")
            if room_id is None:
                return
            room = self._rooms.get(room_id)
            if room is None or sid not in room.members:
                return

            room.cancel_expiry()
            self._unseat(room, sid)
            if not room.members:
                self._schedule_expiry(room, forfeit=False)
                return
            if room.match.is_over:
                return
            self.transport.broadcast(room.id, EVENT_OPPONENT_DISCONNECTED, {'gracePeriodSeconds': self.grace_period})
            self._schedule_expiry(room, forfeit=True)

    # ---- broadcasting ----

    def broadcast_state(self, room_id: str) -> None:
        room = self._rooms.get(room_id)
        if room is None:
            return
        self.transport.broadcast(room.id, EVENT_MATCH_STATE, serialize_match_state(room))

    # ---- internals ----

    def _find_waiting_room(self) -> Optional[Room]:
        for room in self._rooms.values():
            if (room.mode == MODE_VERSUS and not room.match.is_over
                    and room.pending_expiry is None and len(room.members) < 2):
                return room
        return None

    def _fresh_room_id(self, sid: str) -> str:
        room_id = sid
        while room_id in self._rooms:
            room_id = f"{sid}-{uuid.uuid4().hex[:6]}"
        return room_id

    def _new_room(self, sid: str, mode: str, difficulty: Optional[str] = None) -> Room:
        return Room(id=self._fresh_room_id(sid), mode=mode, difficulty=difficulty)

    def _register(self, room: Room) -> None:
        if room.id not in self._rooms:
            self._rooms[room.id] = room
            self.logger.info(f"[room-create] room={room.id} mode={room.mode}")

    def _seat(self, room: Room, sid: str, mark: str) -> None:
        # join the broadcast group first so a transport failure leaves no trace
        self.transport.enter(sid, room.id)
        room.members[sid] = mark
        room.readiness[sid] = True
        self._room_of[sid] = room.id

    def _unseat(self, room: Room, sid: str) -> Optional[str]:
        mark = room.members.pop(sid, None)
        room.readiness.pop(sid, None)
        if self._room_of.get(sid) == room.id:
            del self._room_of[sid]
        return mark

    def _release(self, sid: str) -> None:
        """Take `sid` out of whatever room it currently sits in."""
        room_id = self._room_of.get(sid)
        if room_id is None:
            return
        room = self._rooms.get(room_id)
        if room is not None and sid in room.members:
            self._leave(room, sid)
        else:
            del self._room_of[sid]

    def _leave(self, room: Room, sid: str) -> None:
        if room.cancel_expiry():
            self.logger.info(f"[grace-cancel] room={room.id} sid={sid}")
        mark = self._unseat(room, sid)
        self.transport.leave(sid, room.id)
        self.logger.info(f"[room-leave] room={room.id} sid={sid} mark={mark}")

        if not room.members:
            self._delete_room(room, 'last member left')
            return
        if not room.match.is_over:
            room.match.resign(mark)
            room.cancel_reply()
            self.transport.broadcast(room.id, EVENT_MATCH_ENDED_BY_TIMEOUT, {'message': MSG_OPPONENT_LEFT})
        self.broadcast_state(room.id)

    def _delete_room(self, room: Room, reason: str) -> None:
        room.cancel_expiry()
        room.cancel_reply()
        for sid in list(room.members):
            if self._room_of.get(sid) == room.id:
                del self._room_of[sid]
        if self._rooms.get(room.id) is room:
            del self._rooms[room.id]
        self.transport.close(room.id)
        self.logger.info(f"[room-clear] room={room.id} reason={reason}")

    def _schedule_expiry(self, room: Room, forfeit: bool) -> None:
        room.pending_expiry = self.scheduler.call_later(
            f"grace:{room.id}", self.grace_period, self._on_grace_expired, room.id, forfeit
        )
        self.logger.info(
            f"[grace-set] room={room.id} members={len(room.members)} duration={self.grace_period}s"
        )

    def _on_grace_expired(self, task: ScheduledTask, room_id: str, forfeit: bool) -> None:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None or room.pending_expiry is not task:
                self.logger.debug(f"[grace-stale] room={room_id}")
                return
            room.pending_expiry = None
            self.logger.info(f"[grace-fire] room={room.id} members={len(room.members)}")
            if forfeit and room.members and not room.match.is_over:
                room.match.resign(room.unclaimed_mark())
                self.broadcast_state(room.id)
                self.transport.broadcast(room.id, EVENT_MATCH_ENDED_BY_TIMEOUT, {'message': MSG_OPPONENT_TIMED_OUT})
            self._delete_room(room, 'grace period expired')

    def _schedule_reply(self, room: Room) -> None:
        room.cancel_reply()
        room.pending_reply = self.scheduler.call_later(
            f"reply:{room.id}", self.reply_delay, self._on_reply_due, room.id
        )

    def _on_reply_due(self, task: ScheduledTask, room_id: str) -> None:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None or room.pending_reply is not task:
                self.logger.debug(f"[scripted-stale] room={room_id}")
                return
            room.pending_reply = None
            mark = room.scripted_mark
            if room.match.is_over or room.match.turn != mark:
                return

            move = pick_move(room.match.cells, mark, room.difficulty, self.rng)
            if move == NO_MOVE:
                move = choose_random_move(room.match.cells, self.rng)
            if move == NO_MOVE or not room.match.apply_move(move):
                return
            self.logger.info(f"[scripted-move] room={room.id} mark={mark} index={move}")
            self.broadcast_state(room.id)
