from flask import current_app, request
from flask_socketio import emit

from arena import socketio
from arena.errors import HINT_NONE, SessionError

NAMESPACE = '/ws'


def _registry():
    return current_app.extensions['arena_registry']


def _get_sid() -> str:
    return request.sid  # type: ignore


def _room_id_from(data):
    # clients send either the bare room id or {'roomId': ...}
    if isinstance(data, dict):
        data = data.get('roomId')
    return data if isinstance(data, str) and data else None


def _reject(exc: SessionError) -> None:
    if not exc.surfaced:
        current_app.logger.debug(f"[ignored] sid={_get_sid()} reason={exc.message}")
        return
    emit('error', exc.to_dict())


def _ack(mark: str, room_id: str) -> dict:
    return {'mark': mark, 'roomId': room_id}


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    _registry().disconnect(_get_sid())


def handle_search_match(data=None):
    mark, room_id = _registry().search_match(_get_sid())
    return _ack(mark, room_id)


def handle_start_solo_match(data=None):
    difficulty = data.get('difficulty') if isinstance(data, dict) else None
    mark, room_id = _registry().start_solo_match(_get_sid(), difficulty)
    return _ack(mark, room_id)


def handle_cancel_search(data=None):
    room_id = _room_id_from(data)
    if room_id:
        _registry().cancel_search(_get_sid(), room_id)


def handle_join_room(data=None):
    room_id = _room_id_from(data)
    if not room_id:
        emit('error', {'message': 'roomId is required', 'hint': HINT_NONE})
        return None
    try:
        mark, room_id = _registry().join_room(_get_sid(), room_id)
    except SessionError as exc:
        _reject(exc)
        return None
    return _ack(mark, room_id)


def handle_submit_move(data=None):
    room_id = _room_id_from(data)
    index = data.get('index') if isinstance(data, dict) else None
    if not room_id or isinstance(index, bool) or not isinstance(index, int):
        return
    try:
        _registry().submit_move(_get_sid(), room_id, index)
    except SessionError as exc:
        _reject(exc)


def handle_resign(data=None):
    room_id = _room_id_from(data)
    if not room_id:
        return
    try:
        _registry().resign(_get_sid(), room_id)
    except SessionError as exc:
        _reject(exc)


def handle_leave_room(data=None):
    room_id = _room_id_from(data)
    if room_id:
        _registry().leave_room(_get_sid(), room_id)


def handle_reset_match(data=None):
    room_id = _room_id_from(data)
    if room_id:
        _registry().reset_match(_get_sid(), room_id)


def register_socketio_handlers(namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers on the game namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('search_match', handle_search_match, namespace=namespace)
    socketio.on_event('start_solo_match', handle_start_solo_match, namespace=namespace)
    socketio.on_event('cancel_search', handle_cancel_search, namespace=namespace)
    socketio.on_event('join_room', handle_join_room, namespace=namespace)
    socketio.on_event('submit_move', handle_submit_move, namespace=namespace)
    socketio.on_event('resign', handle_resign, namespace=namespace)
    socketio.on_event('leave_room', handle_leave_room, namespace=namespace)
    socketio.on_event('reset_match', handle_reset_match, namespace=namespace)
