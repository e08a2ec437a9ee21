"""Game sessions and the end-of-session stat settlement."""
from flask import current_app

from lobbyhub import db
from lobbyhub.errors import ValidationError, StateConflict, NotFoundError
from lobbyhub.models import GameSession, SessionParticipant, Player, Lobby, utcnow
from lobbyhub.validation import as_text, is_number

INITIAL_STATE = {'status': 'initializing'}


def _build_participants(players):
    if not isinstance(players, list) or not players:
        raise ValidationError('Missing required session information')
    participants = []
    seen = set()
    for p in players:
        if not isinstance(p, dict) or not p.get('id') or not p.get('name'):
            raise ValidationError('Each player requires an id and a name')
        pid = as_text(p['id'], 'Player id')
        name = as_text(p['name'], 'Player name')
        if pid in seen:
            raise ValidationError(f'Duplicate player in session: {pid}')
        seen.add(pid)
        participants.append(SessionParticipant(player_id=pid, name=name))
    return participants


def _is_player_id(value):
    return isinstance(value, str) and bool(value)


def _validate_results(results):
    if not isinstance(results, dict):
        raise ValidationError('Results must be an object')
    winner = results.get('winner')
    if winner is not None and not isinstance(winner, str):
        raise ValidationError('Winner must be a player id')
    for entry in results.get('scores') or []:
        if not isinstance(entry, dict) or not _is_player_id(entry.get('playerId')) or not is_number(entry.get('score')):
            raise ValidationError('Each score requires a playerId and a numeric score')
    for entry in results.get('rewards') or []:
        if not isinstance(entry, dict) or not _is_player_id(entry.get('playerId')) or not is_number(entry.get('amount')):
            raise ValidationError('Each reward requires a playerId and a numeric amount')


def create_session(game_id, players, lobby_id=None) -> GameSession:
    game_id = as_text(game_id, 'gameId')
    lobby_id = as_text(lobby_id, 'lobbyId')
    if not game_id:
        raise ValidationError('Missing required session information')
    participants = _build_participants(players)

    session_id = None
    if lobby_id:
        # Adopt the id minted when the lobby was started
        lobby = Lobby.query.filter_by(id=lobby_id).first()
        if lobby and lobby.game_id != game_id:
            raise ValidationError('Session game does not match the lobby game')
        if lobby and lobby.session_id:
            if GameSession.query.filter_by(id=lobby.session_id).first():
                raise StateConflict('Session already created for this lobby')
            session_id = lobby.session_id

    game_session = GameSession(
        game_id=game_id,
        lobby_id=lobby_id,
        participants=participants,
        started_at=utcnow(),
    )
    if session_id:
        game_session.id = session_id
    game_session.state = dict(INITIAL_STATE)
    db.session.add(game_session)
    db.session.commit()
    current_app.logger.info(f"[session-create] session={game_session.id} game={game_id} lobby={lobby_id} players={len(participants)}")
    return game_session


def get_session(session_id) -> GameSession:
    game_session = GameSession.query.filter_by(id=session_id).first()
    if not game_session:
        raise NotFoundError('Session not found')
    return game_session


def update_state(session_id, state) -> GameSession:
    """Replaces the whole state value; no merge and no schema."""
    game_session = get_session(session_id)
    game_session.state = state
    db.session.commit()
    current_app.logger.debug(f"[session-state] session={game_session.id}")
    return game_session


def end_session(session_id, results) -> GameSession:
    """Stores results and settles player stats in one transaction."""
    _validate_results(results)
    game_session = get_session(session_id)
    if game_session.ended_at is not None:
        raise StateConflict('Session already ended')

    game_session.results = results
    game_session.ended_at = utcnow()

    winner_id = results.get('winner')
    if winner_id:
        winner = Player.query.filter_by(id=winner_id).first()
        if winner:
            winner.games_won = (winner.games_won or 0) + 1

    rewards = {}
    for r in results.get('rewards') or []:
        rewards[r['playerId']] = rewards.get(r['playerId'], 0) + r['amount']

    wager = 0
    if game_session.lobby_id:
        lobby = Lobby.query.filter_by(id=game_session.lobby_id).first()
        wager = (lobby.wager or 0) if lobby else 0

    for participant in game_session.participants:
        player = Player.query.filter_by(id=participant.player_id).first()
        if not player:
            continue
        player.games_played = (player.games_played or 0) + 1
        player.total_wagered = (player.total_wagered or 0) + wager
        if participant.player_id in rewards:
            player.total_won = (player.total_won or 0) + rewards[participant.player_id]

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info(f"[session-end] session={game_session.id} winner={winner_id} players={len(game_session.participants)}")
    return game_session


def list_for_player(player_id, limit=None):
    if not limit or limit < 1:
        limit = current_app.config.get('DEFAULT_LIST_LIMIT', 10)
    return (GameSession.query
            .join(SessionParticipant)
            .filter(SessionParticipant.player_id == player_id)
            .order_by(GameSession.started_at.desc())
            .limit(limit)
            .all())
