def group_for(room_id: str) -> str:
    """Broadcast group name for a room.

    Socket.IO keeps a private room per connection named after its sid, and
    room ids are derived from the creator's sid, so the two are kept apart.
    """
    return f"room:{room_id}"


class SocketIOTransport:
    """Room-scoped broadcast and group membership over Flask-SocketIO.

    Uses the server-level calls (no request context needed) so it also works
    from background tasks such as grace timers and scripted replies.
    """

    def __init__(self, socketio, namespace: str = '/ws'):
        self.socketio = socketio
        self.namespace = namespace

    def broadcast(self, room_id: str, event: str, data) -> None:
        self.socketio.emit(event, data, to=group_for(room_id), namespace=self.namespace)

    def enter(self, sid: str, room_id: str) -> None:
        self.socketio.server.enter_room(sid, group_for(room_id), namespace=self.namespace)

    def leave(self, sid: str, room_id: str) -> None:
        self.socketio.server.leave_room(sid, group_for(room_id), namespace=self.namespace)

    def close(self, room_id: str) -> None:
        self.socketio.close_room(group_for(room_id), namespace=self.namespace)
