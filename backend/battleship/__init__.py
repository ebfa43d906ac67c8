from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('ALLOWED_ORIGINS', [])
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from battleship.main import main
    flask_app.register_blueprint(main)

    from battleship.server import GameServer
    from battleship.socketio_events import make_transport, register_socketio_handlers
    namespace = flask_app.config.get('WS_NAMESPACE', '/ws')
    game_server = GameServer(
        make_transport(namespace),
        strict_ship_length=flask_app.config.get('STRICT_SHIP_LENGTH', False),
    )
    game_server.seed_players(flask_app.config.get('SEED_PLAYERS', ''))
    flask_app.extensions['battleship'] = game_server

    # Bind socket events to this app's game server
    register_socketio_handlers(game_server, namespace=namespace)

    flask_app.logger.info(f"[startup] namespace={namespace} front={flask_app.config.get('FRONT_DIR')}")
    return flask_app
