import os
import sys
import pytest

# Ensure the backend root (containing the `lobbyhub` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from lobbyhub import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    TOKEN_MAX_AGE_SEC = 3600
    MIN_PASSWORD_LENGTH = 8
    DEFAULT_LIST_LIMIT = 10
    # Cheapest bcrypt cost so the suite stays fast
    BCRYPT_LOG_ROUNDS = 4
    BCRYPT_HANDLE_LONG_PASSWORDS = True
    CORS_ORIGINS = []
    LOG_LEVEL = 'WARNING'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import lobbyhub.models  # noqa: F401
        db.create_all()
    # No context is held open between requests: Flask-Login caches the
    # identity on `g`, which would otherwise leak from one request to the next
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture()
def register(client):
    """Registers a player and returns (player, token)."""
    counter = {'n': 0}

    def _register(name='Alice', email=None, password='password123'):
        counter['n'] += 1
        email = email or f"{name.lower()}{counter['n']}@example.com"
        res = client.post('/api/auth/register', json={'name': name, 'email': email, 'password': password})
        assert res.status_code == 201, res.get_json()
        body = res.get_json()
        return body['player'], body['token']

    return _register


@pytest.fixture()
def auth_headers(register):
    _, token = register('Admin')
    return bearer(token)


@pytest.fixture()
def game(client, auth_headers):
    """A catalog game with a 2-player duel mode and a 4-player mode with a minimum wager."""
    res = client.post('/api/games', headers=auth_headers, json={
        'name': 'Coin Flip',
        'description': 'Heads or tails',
        'thumbnail': 'https://example.com/coin.png',
        'modes': [
            {'id': 'duel', 'name': 'Duel', 'description': 'One on one', 'players': 2, 'minWager': 0},
            {'id': 'table', 'name': 'Table', 'description': 'Four players', 'players': 4, 'minWager': 5},
        ],
    })
    assert res.status_code == 201, res.get_json()
    return res.get_json()['game']
