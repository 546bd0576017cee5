from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config['CORS_ORIGINS']
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from arena.registry import SessionRegistry
    from arena.services.games.scheduler import TaskScheduler
    from arena.socketio_events import NAMESPACE, register_socketio_handlers
    from arena.transport import SocketIOTransport

    registry = SessionRegistry(
        transport=SocketIOTransport(socketio, namespace=NAMESPACE),
        scheduler=TaskScheduler(socketio, logger=flask_app.logger),
        grace_period=flask_app.config['GRACE_PERIOD_SEC'],
        reply_delay=flask_app.config['SCRIPTED_MOVE_DELAY_SEC'],
        default_difficulty=flask_app.config['DEFAULT_DIFFICULTY'],
        logger=flask_app.logger,
    )
    flask_app.extensions['arena_registry'] = registry

    from arena.routes import main
    flask_app.register_blueprint(main)

    from arena.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    register_socketio_handlers()

    @click.command('rooms')
    def rooms_command():
        """Lists the rooms currently held by the session registry."""
        active = registry.rooms()
        if not active:
            click.echo('No active rooms.')
            return
        for room in active:
            summary = room.to_summary()
            click.echo(
                f"{summary['roomId']}  mode={summary['mode']}  state={summary['state']}  "
                f"members={summary['members']}"
            )

    flask_app.cli.add_command(rooms_command)

    return flask_app
