from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.security import generate_password_hash
from config import Config

socketio = SocketIO(cors_allowed_origins='*', async_mode=None)


def create_app(config_class=Config, timers=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or ['*']
    if '*' in allowed_origins:
        allowed_origins = '*'
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from gameshow.services.games import GameEngine, SessionStore, StageTimers, VenueRegistry
    from gameshow.socketio_events import Gateway, SocketIONotifier, register_socketio_handlers

    venues = VenueRegistry(
        flask_app.config.get('VENUES'),
        default_capacity=int(flask_app.config.get('VENUE_CAPACITY', 25)),
    )
    hash_method = flask_app.config.get('ADMIN_PASSWORD_HASH_METHOD')
    admin_hash = (
        generate_password_hash(flask_app.config['ADMIN_PASSWORD'], method=hash_method)
        if hash_method else generate_password_hash(flask_app.config['ADMIN_PASSWORD'])
    )
    store = SessionStore(
        venues.ids(),
        admin_password_hash=admin_hash,
        capacities={v.id: v.capacity for v in venues.all()},
    )
    if timers is None:
        timers = StageTimers(socketio.start_background_task, socketio.sleep, logger=flask_app.logger)
    engine = GameEngine(
        store,
        venues,
        timers,
        SocketIONotifier(socketio),
        config=flask_app.config,
        logger=flask_app.logger,
    )
    flask_app.extensions['game_engine'] = engine

    register_socketio_handlers(Gateway(engine))

    from gameshow.api.games import games
    # Mount game routes under /api to match the browser client
    flask_app.register_blueprint(games, url_prefix='/api')

    flask_app.logger.info(
        f"[startup] venues={','.join(venues.ids())} default={engine.default_venue_id}"
    )
    return flask_app
