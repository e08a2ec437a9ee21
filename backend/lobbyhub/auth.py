"""Bearer-token identity for Flask-Login.

Tokens are signed and timestamped with the app's SECRET_KEY and carry the
player's id and display name. ``login_required`` rejects requests without a
valid token; public endpoints check ``current_user.is_authenticated``.
"""
from flask import current_app, jsonify, request
from flask_login import UserMixin, current_user
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from lobbyhub import login_manager

TOKEN_SALT = 'lobbyhub-access-token'


class Identity(UserMixin):
    """The player asserted by a verified token. Not a database row."""

    def __init__(self, player_id, name):
        self.id = player_id
        self.name = name

    def __repr__(self):
        return f'<Identity {self.id}>'


def _serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)


def issue_token(player) -> str:
    return _serializer().dumps({'id': player.id, 'name': player.name})


def verify_token(token: str):
    """Returns the Identity for a token, or None if it is invalid or expired."""
    max_age = int(current_app.config.get('TOKEN_MAX_AGE_SEC', 7 * 24 * 3600))
    try:
        claims = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        current_app.logger.warning('[auth] expired token')
        return None
    except BadSignature:
        current_app.logger.warning('[auth] invalid token')
        return None
    if not isinstance(claims, dict) or not claims.get('id'):
        return None
    return Identity(claims['id'], claims.get('name'))


def _bearer_token(req):
    header = req.headers.get('Authorization', '')
    if not header.startswith('Bearer '):
        return None
    return header[len('Bearer '):].strip() or None


@login_manager.request_loader
def load_identity_from_request(req):
    token = _bearer_token(req)
    if not token:
        return None
    return verify_token(token)


@login_manager.unauthorized_handler
def unauthorized():
    if _bearer_token(request):
        return jsonify({'message': 'Token is not valid'}), 401
    return jsonify({'message': 'No authentication token, access denied'}), 401


def optional_identity():
    """The authenticated Identity, or None for anonymous callers."""
    if current_user.is_authenticated:
        return current_user._get_current_object()
    return None
