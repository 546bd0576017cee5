from flask import Blueprint, current_app, jsonify
from arena.models import serialize_match_state


rooms = Blueprint('rooms', __name__)


def _registry():
    return current_app.extensions['arena_registry']


@rooms.route('', methods=['GET'])
def list_rooms():
    """Summaries of every live room, for lobby screens and debugging."""
    return jsonify({'rooms': [room.to_summary() for room in _registry().rooms()]})


@rooms.route('/<string:room_id>/state', methods=['GET'])
def get_room_state(room_id):
    """The same payload the room's connections receive as match_state.

    Lets a client opened from a shared room URL check the room still exists
    before it tries join_room.
    """
    room = _registry().get_room(room_id)
    if room is None:
        return jsonify({'error': 'Room not found'}), 404
    payload = serialize_match_state(room)
    payload['state'] = room.state
    return jsonify(payload)
