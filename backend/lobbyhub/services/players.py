from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from lobbyhub import db
from lobbyhub.errors import ValidationError, StateConflict, NotFoundError
from lobbyhub.models import Player
from lobbyhub.validation import is_valid_email, is_valid_password, sanitize

PROFILE_FIELDS = ('name',)


def _commit_new_player(player: Player) -> Player:
    db.session.add(player)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with another registration for the same email/wallet
        db.session.rollback()
        raise StateConflict('Player already exists')
    return player


def register_player(name, email=None, password=None, wallet_address=None) -> Player:
    if not name or not isinstance(name, str):
        raise ValidationError('Name is required')
    if wallet_address is not None and not isinstance(wallet_address, str):
        raise ValidationError('Invalid wallet address')
    if email and not is_valid_email(email):
        raise ValidationError('Invalid email format')
    if password and not is_valid_password(password):
        min_length = current_app.config.get('MIN_PASSWORD_LENGTH', 8)
        raise ValidationError(f'Password must be at least {min_length} characters')
    if not ((email and password) or wallet_address):
        raise ValidationError('Email and password, or a wallet address, are required')

    claims = []
    if email:
        claims.append(Player.email == email)
    if wallet_address:
        claims.append(Player.wallet_address == wallet_address)
    if Player.query.filter(or_(*claims)).first():
        raise StateConflict('Player already exists')

    player = Player(name=name, email=email or None, wallet_address=wallet_address or None)
    if password:
        player.set_password(password)
    _commit_new_player(player)
    current_app.logger.info(f"[register] player={player.id} email={bool(email)} wallet={bool(wallet_address)}")
    return player


def authenticate(email, password) -> Player:
    """Same error for unknown email and wrong password."""
    player = None
    if isinstance(email, str) and isinstance(password, str):
        player = Player.query.filter_by(email=email).first()
    if not player or not player.check_password(password):
        current_app.logger.warning('[login] rejected credentials')
        raise ValidationError('Invalid credentials')
    return player


def authenticate_wallet(wallet_address) -> Player:
    # No proof of wallet ownership is checked here.
    player = Player.query.filter_by(wallet_address=wallet_address).first()
    if player:
        return player
    player = _commit_new_player(Player(name=f'Player_{wallet_address[:8]}', wallet_address=wallet_address))
    current_app.logger.info(f"[wallet-provision] player={player.id}")
    return player


def get_player(player_id) -> Player:
    player = Player.query.filter_by(id=player_id).first()
    if not player:
        raise NotFoundError('Player not found')
    return player


def update_profile(player_id, patch: dict) -> Player:
    player = get_player(player_id)
    updates = sanitize(patch or {}, PROFILE_FIELDS)
    if 'name' in updates:
        name = updates['name']
        if not isinstance(name, str) or not name.strip():
            raise ValidationError('Name cannot be empty')
        player.name = name.strip()
    db.session.commit()
    current_app.logger.info(f"[profile-update] player={player.id} fields={sorted(updates)}")
    return player


def top_players(limit=None):
    if not limit or limit < 1:
        limit = current_app.config.get('DEFAULT_LIST_LIMIT', 10)
    return (Player.query
            .order_by(Player.games_won.desc(), Player.created_at.asc())
            .limit(limit)
            .all())
