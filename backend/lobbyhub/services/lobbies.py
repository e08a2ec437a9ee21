"""Lobby lifecycle.

States: waiting <-> full as members join and leave, and waiting|full ->
in-progress on start. Outside of in-progress, status is derived from the
member count, and the host is always a member.

Every mutation bumps ``Lobby.version_id``; a commit that lost a race with
another request raises ``StaleDataError``, reported as a state conflict.
"""
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from lobbyhub import db
from lobbyhub.errors import ValidationError, StateConflict, PermissionDenied, NotFoundError
from lobbyhub.models import Lobby, LobbyMember, generate_id, utcnow
from lobbyhub.services.catalog import get_game
from lobbyhub.validation import is_number, is_positive_int

WAITING = 'waiting'
FULL = 'full'
IN_PROGRESS = 'in-progress'
LOBBY_STATUSES = (WAITING, FULL, IN_PROGRESS)


def _status_for(lobby: Lobby) -> str:
    return FULL if len(lobby.members) >= lobby.max_players else WAITING


def _commit(lobby_id) -> None:
    try:
        db.session.commit()
    except (StaleDataError, IntegrityError):
        db.session.rollback()
        current_app.logger.warning(f"[lobby-conflict] lobby={lobby_id}")
        raise StateConflict('Lobby was modified by another request, please retry')


def _save(lobby: Lobby) -> None:
    # Member rows change without touching the lobby row; force the versioned UPDATE
    lobby.updated_at = utcnow()
    _commit(lobby.id)


def list_lobbies(game_id=None, status=None):
    query = Lobby.query
    if game_id:
        query = query.filter_by(game_id=game_id)
    if status:
        if status not in LOBBY_STATUSES:
            raise ValidationError(f'Unknown status: {status}')
        query = query.filter_by(status=status)
    return query.order_by(Lobby.created_at.desc()).all()


def get_lobby(lobby_id) -> Lobby:
    lobby = Lobby.query.filter_by(id=lobby_id).first()
    if not lobby:
        raise NotFoundError('Lobby not found')
    return lobby


def create_lobby(game_id, host_id, host_name, mode_id, max_players, wager=0) -> Lobby:
    if not is_positive_int(max_players):
        raise ValidationError('maxPlayers must be a positive integer')
    if wager is None:
        wager = 0
    if not is_number(wager) or wager < 0:
        raise ValidationError('Wager must be a non-negative number')

    game = get_game(game_id)
    mode = game.find_mode(mode_id)
    if not mode:
        raise NotFoundError('Game mode not found')
    if wager < (mode.min_wager or 0):
        raise ValidationError(f'Wager must be at least {mode.min_wager} for this mode')

    host_name = host_name or 'Anonymous'
    lobby = Lobby(
        game_id=game.id,
        host_id=host_id,
        host_name=host_name,
        game_mode=mode.mode_id,
        game_mode_name=mode.name,
        max_players=max_players,
        wager=wager,
        members=[LobbyMember(player_id=host_id, name=host_name, is_ready=True)],
    )
    lobby.status = _status_for(lobby)
    db.session.add(lobby)
    db.session.commit()
    current_app.logger.info(f"[lobby-create] lobby={lobby.id} game={game.id} mode={mode.mode_id} host={host_id}")
    return lobby


def join_lobby(lobby_id, player_id, player_name) -> Lobby:
    lobby = get_lobby(lobby_id)
    if lobby.status != WAITING:
        raise StateConflict(f'Cannot join lobby: {lobby.status}')
    if lobby.find_member(player_id):
        raise StateConflict('Player already in lobby')

    lobby.members.append(LobbyMember(player_id=player_id, name=player_name or 'Anonymous', is_ready=False))
    lobby.status = _status_for(lobby)
    _save(lobby)
    current_app.logger.info(f"[lobby-join] lobby={lobby.id} player={player_id} count={len(lobby.members)}/{lobby.max_players}")
    return lobby


def leave_lobby(lobby_id, player_id) -> Optional[Lobby]:
    """Removes a member. Returns None when the lobby was deleted."""
    lobby = get_lobby(lobby_id)
    member = lobby.find_member(player_id)
    if not member:
        raise NotFoundError('Player not in lobby')

    lobby.members.remove(member)

    if player_id == lobby.host_id:
        if not lobby.members:
            db.session.delete(lobby)
            _commit(lobby_id)
            current_app.logger.info(f"[lobby-delete] lobby={lobby_id} (no players left)")
            return None
        new_host = lobby.members[0]
        lobby.host_id = new_host.player_id
        lobby.host_name = new_host.name
        new_host.is_ready = True
        current_app.logger.info(f"[lobby-host] lobby={lobby.id} new_host={new_host.player_id}")

    if lobby.status == FULL and len(lobby.members) < lobby.max_players:
        lobby.status = WAITING
    _save(lobby)
    current_app.logger.info(f"[lobby-leave] lobby={lobby.id} player={player_id} count={len(lobby.members)}/{lobby.max_players}")
    return lobby


def set_ready(lobby_id, player_id, is_ready=None) -> Lobby:
    lobby = get_lobby(lobby_id)
    member = lobby.find_member(player_id)
    if not member:
        raise NotFoundError('Player not in lobby')
    member.is_ready = (not member.is_ready) if is_ready is None else is_ready
    _save(lobby)
    current_app.logger.info(f"[lobby-ready] lobby={lobby.id} player={player_id} ready={member.is_ready}")
    return lobby


def start_lobby(lobby_id, host_id):
    """Moves the lobby to in-progress and mints its session id.

    The Session record itself is created by a separate call to
    ``sessions.create_session`` with this lobby's id.
    """
    lobby = get_lobby(lobby_id)
    if host_id != lobby.host_id:
        raise PermissionDenied('Only the host can start the game')
    if lobby.status == IN_PROGRESS:
        raise StateConflict('Game already started')
    if not all(m.is_ready for m in lobby.members):
        raise StateConflict('Not all players are ready')

    lobby.status = IN_PROGRESS
    lobby.session_id = generate_id()
    _save(lobby)
    current_app.logger.info(f"[lobby-start] lobby={lobby.id} session={lobby.session_id} players={len(lobby.members)}")
    return lobby.session_id, lobby
