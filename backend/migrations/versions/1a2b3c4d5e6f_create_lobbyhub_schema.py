"""create player, game, lobby and session tables

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    # Databases bootstrapped with db.create_all() already have the tables
    existing_tables = set(insp.get_table_names())

    if 'player' not in existing_tables:
        op.create_table(
            'player',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('email', sa.String(length=254), nullable=True),
            sa.Column('password_hash', sa.String(length=128), nullable=True),
            sa.Column('wallet_address', sa.String(length=128), nullable=True),
            sa.Column('games_played', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('games_won', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('total_wagered', sa.Float(), nullable=False, server_default='0'),
            sa.Column('total_won', sa.Float(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_player_email', 'player', ['email'], unique=True)
        op.create_index('ix_player_wallet_address', 'player', ['wallet_address'], unique=True)
        op.create_index('ix_player_games_won', 'player', ['games_won'])

    if 'game' not in existing_tables:
        op.create_table(
            'game',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('thumbnail', sa.String(length=512), nullable=False),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_game_name', 'game', ['name'])

    if 'game_mode' not in existing_tables:
        op.create_table(
            'game_mode',
            sa.Column('pk', sa.Integer(), primary_key=True),
            sa.Column('game_id', sa.String(length=36), sa.ForeignKey('game.id'), nullable=False),
            sa.Column('mode_id', sa.String(length=64), nullable=False),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('players', sa.Integer(), nullable=False),
            sa.Column('min_wager', sa.Float(), nullable=False, server_default='0'),
            sa.UniqueConstraint('game_id', 'mode_id', name='uq_game_mode_game_id_mode_id'),
        )

    if 'lobby' not in existing_tables:
        op.create_table(
            'lobby',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('game_id', sa.String(length=36), nullable=False),
            sa.Column('host_id', sa.String(length=64), nullable=False),
            sa.Column('host_name', sa.String(length=64), nullable=False),
            sa.Column('game_mode', sa.String(length=64), nullable=False),
            sa.Column('game_mode_name', sa.String(length=128), nullable=False),
            sa.Column('max_players', sa.Integer(), nullable=False),
            sa.Column('wager', sa.Float(), nullable=False, server_default='0'),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='waiting'),
            sa.Column('session_id', sa.String(length=36), nullable=True),
            sa.Column('version_id', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_lobby_game_id', 'lobby', ['game_id'])
        op.create_index('ix_lobby_status', 'lobby', ['status'])

    if 'lobby_member' not in existing_tables:
        op.create_table(
            'lobby_member',
            sa.Column('pk', sa.Integer(), primary_key=True),
            sa.Column('lobby_id', sa.String(length=36), sa.ForeignKey('lobby.id'), nullable=False),
            sa.Column('player_id', sa.String(length=64), nullable=False),
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('is_ready', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.UniqueConstraint('lobby_id', 'player_id', name='uq_lobby_member_lobby_id_player_id'),
        )

    if 'game_session' not in existing_tables:
        op.create_table(
            'game_session',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('game_id', sa.String(length=36), nullable=False),
            sa.Column('lobby_id', sa.String(length=36), nullable=True),
            sa.Column('state_json', sa.Text(), nullable=False),
            sa.Column('results_json', sa.Text(), nullable=True),
            sa.Column('started_at', sa.DateTime(), nullable=False),
            sa.Column('ended_at', sa.DateTime(), nullable=True),
        )
        op.create_index('ix_game_session_game_id', 'game_session', ['game_id'])
        op.create_index('ix_game_session_started_at', 'game_session', ['started_at'])

    if 'session_participant' not in existing_tables:
        op.create_table(
            'session_participant',
            sa.Column('pk', sa.Integer(), primary_key=True),
            sa.Column('session_id', sa.String(length=36), sa.ForeignKey('game_session.id'), nullable=False),
            sa.Column('player_id', sa.String(length=64), nullable=False),
            sa.Column('name', sa.String(length=64), nullable=False),
        )
        op.create_index('ix_session_participant_player_id', 'session_participant', ['player_id'])


def downgrade():
    op.drop_table('session_participant')
    op.drop_table('game_session')
    op.drop_table('lobby_member')
    op.drop_table('lobby')
    op.drop_table('game_mode')
    op.drop_table('game')
    op.drop_table('player')
