from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import time
import click
from config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from gamenight.errors import GameError, handle_game_error
    flask_app.register_error_handler(GameError, handle_game_error)

    from gamenight.main import main
    flask_app.register_blueprint(main)

    from gamenight.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    from gamenight.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api/game')

    from gamenight.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    # Flask-Login session loader: the cookie identifies a seated player
    from gamenight.models import PlayerSession

    @login_manager.user_loader
    def load_session(player_id):
        session = db.session.get(PlayerSession, player_id)
        if session is None or session.is_expired():
            return None
        return session

    @click.command('purge-expired')
    def purge_expired_command():
        """Deletes expired rooms, sessions, heartbeats and action ids."""
        from gamenight.services.store import purge_expired
        with flask_app.app_context():
            counts = purge_expired(time.time())
            click.echo(', '.join(f'{name}={count}' for name, count in counts.items()))

    @click.command('sweep-presence')
    def sweep_presence_command():
        """Replaces idle players and destroys rooms with no humans left."""
        from gamenight.services.presence import sweep_stale_rooms
        with flask_app.app_context():
            destroyed = sweep_stale_rooms()
            click.echo(f'Rooms destroyed: {destroyed}')

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the room store tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            click.echo('Room store has been reset!')

    flask_app.cli.add_command(purge_expired_command)
    flask_app.cli.add_command(sweep_presence_command)
    flask_app.cli.add_command(db_reset_command)

    return flask_app
