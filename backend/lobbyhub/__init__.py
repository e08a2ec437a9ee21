from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from sqlalchemy import text
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    # Identity comes from the bearer token on every request, never the cookie session
    login_manager.session_protection = None
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS', []))

    from lobbyhub.errors import register_error_handlers
    register_error_handlers(flask_app)

    # Bearer token loader for Flask-Login
    import lobbyhub.auth  # noqa: F401

    from lobbyhub.main import main
    flask_app.register_blueprint(main)

    from lobbyhub.api.auth import auth
    flask_app.register_blueprint(auth, url_prefix='/api/auth')

    from lobbyhub.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from lobbyhub.api.lobbies import lobbies
    flask_app.register_blueprint(lobbies, url_prefix='/api/lobbies')

    from lobbyhub.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from lobbyhub.api.players import players
    flask_app.register_blueprint(players, url_prefix='/api/players')

    @click.command('seed-catalog')
    def seed_catalog_command():
        """Inserts the demo game catalog (skips games already present)."""
        from lobbyhub.services.catalog import seed_demo_catalog
        with flask_app.app_context():
            created = seed_demo_catalog()
            click.echo(f'Seeded {len(created)} game(s).')

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from lobbyhub.services.catalog import seed_demo_catalog
        from lobbyhub.services.players import register_player
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            seed_demo_catalog()
            for n in ['testuser1', 'testuser2', 'testuser3']:
                register_player(name=n, email=f'{n}@example.com', password='password')

            click.echo('Database has been reset and seeded!')

    flask_app.cli.add_command(seed_catalog_command)
    flask_app.cli.add_command(db_reset_command)

    return flask_app


def check_database_connection(flask_app):
    """Runs a trivial query; raises if the database is unreachable."""
    with flask_app.app_context():
        db.session.execute(text('SELECT 1'))
        flask_app.logger.info('[startup] database connection ok')
