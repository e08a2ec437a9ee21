import time

from itsdangerous import URLSafeTimedSerializer

from lobbyhub.auth import TOKEN_SALT
from lobbyhub.models import Player


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


def test_health(client):
    res = client.get('/health')
    assert res.status_code == 200
    assert res.get_json() == {'status': 'ok'}


def test_register_returns_token_and_hides_password(flask_app, client):
    res = client.post('/api/auth/register', json={
        'name': 'Alice', 'email': 'alice@example.com', 'password': 'password123',
    })
    assert res.status_code == 201
    body = res.get_json()
    assert body['token']
    assert body['player']['name'] == 'Alice'
    assert body['player']['stats'] == {'gamesPlayed': 0, 'gamesWon': 0, 'totalWagered': 0, 'totalWon': 0}
    assert 'password' not in body['player']

    with flask_app.app_context():
        stored = Player.query.filter_by(email='alice@example.com').first()
        assert stored.password_hash != 'password123'
        assert 'password123' not in stored.password_hash
        assert stored.check_password('password123')
        assert not stored.check_password('password124')


def test_register_validation(client):
    assert client.post('/api/auth/register', json={'email': 'a@example.com', 'password': 'password123'}).status_code == 400
    res = client.post('/api/auth/register', json={'name': 'A', 'email': 'not-an-email', 'password': 'password123'})
    assert res.status_code == 400
    assert res.get_json()['message'] == 'Invalid email format'
    res = client.post('/api/auth/register', json={'name': 'A', 'email': 'a@example.com', 'password': 'short'})
    assert res.status_code == 400
    assert 'at least 8' in res.get_json()['message']
    # No way to log in afterwards
    assert client.post('/api/auth/register', json={'name': 'A'}).status_code == 400


def test_register_duplicate_email_or_wallet(client):
    assert client.post('/api/auth/register', json={
        'name': 'A', 'email': 'dup@example.com', 'password': 'password123',
    }).status_code == 201
    res = client.post('/api/auth/register', json={
        'name': 'Someone Else', 'email': 'dup@example.com', 'password': 'different123',
    })
    assert res.status_code == 400
    assert res.get_json()['message'] == 'Player already exists'

    assert client.post('/api/auth/register', json={'name': 'W', 'walletAddress': '0xabc123456789'}).status_code == 201
    res = client.post('/api/auth/register', json={
        'name': 'W2', 'email': 'w2@example.com', 'password': 'password123', 'walletAddress': '0xabc123456789',
    })
    assert res.status_code == 400


def test_login_uniform_failure(client):
    client.post('/api/auth/register', json={'name': 'Bob', 'email': 'bob@example.com', 'password': 'password123'})

    ok = client.post('/api/auth/login', json={'email': 'bob@example.com', 'password': 'password123'})
    assert ok.status_code == 200
    assert ok.get_json()['token']

    wrong_pw = client.post('/api/auth/login', json={'email': 'bob@example.com', 'password': 'nope-nope'})
    unknown = client.post('/api/auth/login', json={'email': 'nobody@example.com', 'password': 'password123'})
    assert wrong_pw.status_code == unknown.status_code == 400
    assert wrong_pw.get_json() == unknown.get_json() == {'message': 'Invalid credentials'}

    assert client.post('/api/auth/login', json={'email': 'bob@example.com'}).status_code == 400


def test_wallet_auth_provisions_once(flask_app, client):
    res = client.post('/api/auth/wallet', json={'walletAddress': '0xDEADBEEF1234', 'signature': 'ignored'})
    assert res.status_code == 200
    first = res.get_json()['player']
    assert first['name'] == 'Player_0xDEADBE'
    assert first['walletAddress'] == '0xDEADBEEF1234'

    again = client.post('/api/auth/wallet', json={'walletAddress': '0xDEADBEEF1234'}).get_json()['player']
    assert again['id'] == first['id']
    with flask_app.app_context():
        assert Player.query.filter_by(wallet_address='0xDEADBEEF1234').count() == 1

    assert client.post('/api/auth/wallet', json={}).status_code == 400


def test_me_requires_valid_token(client, register):
    player, token = register('Cara')

    res = client.get('/api/auth/me')
    assert res.status_code == 401
    assert res.get_json()['message'] == 'No authentication token, access denied'

    res = client.get('/api/auth/me', headers=bearer('garbage'))
    assert res.status_code == 401
    assert res.get_json()['message'] == 'Token is not valid'

    res = client.get('/api/auth/me', headers=bearer(token))
    assert res.status_code == 200
    assert res.get_json()['player']['id'] == player['id']


def test_expired_token_rejected(flask_app, client, register):
    player, _ = register('Dan')
    serializer = URLSafeTimedSerializer(flask_app.config['SECRET_KEY'], salt=TOKEN_SALT)
    token = serializer.dumps({'id': player['id'], 'name': player['name']})
    flask_app.config['TOKEN_MAX_AGE_SEC'] = 1
    time.sleep(2.1)
    res = client.get('/api/auth/me', headers=bearer(token))
    assert res.status_code == 401


def test_token_signed_with_other_key_rejected(client, register):
    player, _ = register('Eve')
    forged = URLSafeTimedSerializer('other-secret', salt=TOKEN_SALT).dumps({'id': player['id'], 'name': 'Eve'})
    assert client.get('/api/auth/me', headers=bearer(forged)).status_code == 401


def test_unknown_route_is_json(client):
    res = client.get('/api/nope')
    assert res.status_code == 404
    assert 'message' in res.get_json()


def test_non_object_body_rejected(client):
    res = client.post('/api/auth/register', json=['x'])
    assert res.status_code == 400
    assert res.get_json()['message'] == 'Request body must be a JSON object'
    assert client.post('/api/auth/login', json='alice@example.com').status_code == 400
    assert client.post('/api/auth/wallet', json=42).status_code == 400
