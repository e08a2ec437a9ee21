from typing import List

from flask import current_app

from lobbyhub import db
from lobbyhub.errors import ValidationError, NotFoundError
from lobbyhub.models import Game, GameMode
from lobbyhub.validation import as_text, is_number, is_positive_int

GAME_STATUSES = ('active', 'maintenance', 'deprecated')

DEMO_CATALOG = [
    {
        'name': 'Coin Flip',
        'description': 'Call heads or tails against another player.',
        'thumbnail': '/static/thumbnails/coin-flip.png',
        'modes': [
            {'id': 'duel', 'name': 'Duel', 'description': 'One on one, winner takes the pot.', 'players': 2, 'minWager': 0},
        ],
    },
    {
        'name': 'Dice Royale',
        'description': 'Highest roll after three rounds wins.',
        'thumbnail': '/static/thumbnails/dice-royale.png',
        'modes': [
            {'id': 'classic', 'name': 'Classic', 'description': 'Four players, three rounds.', 'players': 4, 'minWager': 0},
            {'id': 'high-roller', 'name': 'High Roller', 'description': 'Two players, higher stakes.', 'players': 2, 'minWager': 10},
        ],
    },
]


def build_modes(raw_modes) -> List[GameMode]:
    if not isinstance(raw_modes, list) or not raw_modes:
        raise ValidationError('Modes must be a non-empty list')
    modes = []
    seen = set()
    for raw in raw_modes:
        if not isinstance(raw, dict):
            raise ValidationError('Each mode must be an object')
        if not all([raw.get('id'), raw.get('name'), raw.get('description')]):
            raise ValidationError('Each mode requires id, name and description')
        if not is_positive_int(raw.get('players')):
            raise ValidationError('Mode players must be a positive integer')
        min_wager = raw.get('minWager', 0)
        if min_wager is None:
            min_wager = 0
        if not is_number(min_wager) or min_wager < 0:
            raise ValidationError('Mode minWager must be a non-negative number')
        mode_id = as_text(raw['id'], 'Mode id')
        if mode_id in seen:
            raise ValidationError(f'Duplicate mode id: {mode_id}')
        seen.add(mode_id)
        modes.append(GameMode(
            mode_id=mode_id,
            name=as_text(raw['name'], 'Mode name'),
            description=as_text(raw['description'], 'Mode description'),
            players=raw['players'],
            min_wager=min_wager,
        ))
    return modes


def list_games(status=None):
    query = Game.query
    if status:
        if status not in GAME_STATUSES:
            raise ValidationError(f'Unknown status: {status}')
        query = query.filter_by(status=status)
    return query.order_by(Game.name.asc()).all()


def get_game(game_id) -> Game:
    game = Game.query.filter_by(id=game_id).first()
    if not game:
        raise NotFoundError('Game not found')
    return game


def create_game(name, description, thumbnail, modes) -> Game:
    if not all([name, description, thumbnail, modes]):
        raise ValidationError('Missing required game information')
    game = Game(
        name=as_text(name, 'name'),
        description=as_text(description, 'description'),
        thumbnail=as_text(thumbnail, 'thumbnail'),
        modes=build_modes(modes),
        status='active',
    )
    db.session.add(game)
    db.session.commit()
    current_app.logger.info(f"[game-create] game={game.id} modes={len(game.modes)}")
    return game


def update_game(game_id, fields: dict) -> Game:
    """Applies only truthy fields; an update cannot clear a value."""
    game = get_game(game_id)
    status = fields.get('status')
    if status and (not isinstance(status, str) or status not in GAME_STATUSES):
        raise ValidationError(f'Unknown status: {status}')

    if fields.get('name'):
        game.name = as_text(fields['name'], 'name')
    if fields.get('description'):
        game.description = as_text(fields['description'], 'description')
    if fields.get('thumbnail'):
        game.thumbnail = as_text(fields['thumbnail'], 'thumbnail')
    if fields.get('modes'):
        new_modes = build_modes(fields['modes'])
        # Delete old rows first so reused mode ids don't hit the unique constraint
        game.modes = []
        db.session.flush()
        game.modes = new_modes
    if status:
        game.status = status
    db.session.commit()
    current_app.logger.info(f"[game-update] game={game.id}")
    return game


def seed_demo_catalog() -> List[Game]:
    created = []
    for entry in DEMO_CATALOG:
        if Game.query.filter_by(name=entry['name']).first():
            continue
        created.append(create_game(entry['name'], entry['description'], entry['thumbnail'], entry['modes']))
    return created
