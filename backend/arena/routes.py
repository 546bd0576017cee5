from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    registry = current_app.extensions['arena_registry']
    return jsonify({
        'message': 'Welcome to the tic-tac-toe arena!',
        'rooms': len(registry.rooms()),
    })
