from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
from guessgame.config import Config
from guessgame.services.sessions import GameSessionManager

# The session store guards state with an OS lock held across emits, so
# cooperative eventlet/gevent workers are not supported
socketio = SocketIO(async_mode='threading')


def _parse_origins(value):
    if not value or value == '*':
        return '*'
    if isinstance(value, str):
        return [o.strip() for o in value.split(',') if o.strip()]
    return list(value)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _parse_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, resources={r"/api/*": {"origins": allowed_origins}})

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One session table per application instance
    flask_app.extensions['guessgame'] = GameSessionManager(
        max_attempts=flask_app.config.get('MAX_ATTEMPTS', 3),
        winner_bonus=flask_app.config.get('WINNER_BONUS', 10),
        min_players=flask_app.config.get('MIN_PLAYERS', 2),
        logger=flask_app.logger,
    )

    from guessgame.api.sessions import api
    flask_app.register_blueprint(api, url_prefix='/api')

    from guessgame.routes import main
    flask_app.register_blueprint(main)

    from guessgame.socketio_events import register_socketio_handlers
    register_socketio_handlers(flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    return flask_app


def get_session_manager(app=None) -> GameSessionManager:
    return (app or current_app).extensions['guessgame']
