from lobbyhub import db, bcrypt
from datetime import datetime, timezone
import json
import uuid


def generate_id():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    name = db.Column(db.String(64), nullable=False)
    email = db.Column(db.String(254), unique=True, nullable=True, index=True)
    password_hash = db.Column(db.String(128), nullable=True)
    wallet_address = db.Column(db.String(128), unique=True, nullable=True, index=True)
    games_played = db.Column(db.Integer, default=0, nullable=False)
    games_won = db.Column(db.Integer, default=0, nullable=False, index=True)
    total_wagered = db.Column(db.Float, default=0, nullable=False)
    total_won = db.Column(db.Float, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        if not self.password_hash:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    def stats(self):
        return {
            'gamesPlayed': self.games_played or 0,
            'gamesWon': self.games_won or 0,
            'totalWagered': self.total_wagered or 0,
            'totalWon': self.total_won or 0,
        }

    def to_dict(self, private=False):
        data = {
            'id': self.id,
            'name': self.name,
            'stats': self.stats(),
        }
        if private:
            data['email'] = self.email
            data['walletAddress'] = self.wallet_address
        return data


class GameMode(db.Model):
    __tablename__ = 'game_mode'
    __table_args__ = (db.UniqueConstraint('game_id', 'mode_id', name='uq_game_mode_game_id_mode_id'),)
    pk = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.String(36), db.ForeignKey('game.id'), nullable=False)
    mode_id = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text, nullable=False)
    players = db.Column(db.Integer, nullable=False)
    min_wager = db.Column(db.Float, default=0, nullable=False)

    def to_dict(self):
        return {
            'id': self.mode_id,
            'name': self.name,
            'description': self.description,
            'players': self.players,
            'minWager': self.min_wager or 0,
        }


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    name = db.Column(db.String(128), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    thumbnail = db.Column(db.String(512), nullable=False)
    status = db.Column(db.String(16), default='active', nullable=False)  # active, maintenance, deprecated
    modes = db.relationship('GameMode', order_by='GameMode.pk', cascade='all, delete-orphan', backref='game')
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def find_mode(self, mode_id):
        return next((m for m in self.modes if m.mode_id == str(mode_id)), None)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'thumbnail': self.thumbnail,
            'modes': [m.to_dict() for m in self.modes],
            'status': self.status,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }


class LobbyMember(db.Model):
    __tablename__ = 'lobby_member'
    __table_args__ = (db.UniqueConstraint('lobby_id', 'player_id', name='uq_lobby_member_lobby_id_player_id'),)
    # Autoincrement pk doubles as join order
    pk = db.Column(db.Integer, primary_key=True)
    lobby_id = db.Column(db.String(36), db.ForeignKey('lobby.id'), nullable=False)
    player_id = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(64), nullable=False)
    is_ready = db.Column(db.Boolean, default=False, nullable=False)

    def to_dict(self):
        return {
            'id': self.player_id,
            'name': self.name,
            'isReady': bool(self.is_ready),
        }


class Lobby(db.Model):
    __tablename__ = 'lobby'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    game_id = db.Column(db.String(36), nullable=False, index=True)
    host_id = db.Column(db.String(64), nullable=False)
    host_name = db.Column(db.String(64), nullable=False)
    game_mode = db.Column(db.String(64), nullable=False)
    # Snapshot of the mode name at creation; not kept in sync with the catalog
    game_mode_name = db.Column(db.String(128), nullable=False)
    max_players = db.Column(db.Integer, nullable=False)
    wager = db.Column(db.Float, default=0, nullable=False)
    status = db.Column(db.String(16), default='waiting', nullable=False, index=True)  # waiting, full, in-progress
    session_id = db.Column(db.String(36), nullable=True)
    members = db.relationship('LobbyMember', order_by='LobbyMember.pk', cascade='all, delete-orphan', backref='lobby')
    version_id = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    __mapper_args__ = {'version_id_col': version_id}

    def find_member(self, player_id):
        return next((m for m in self.members if m.player_id == player_id), None)

    def to_dict(self):
        return {
            'id': self.id,
            'gameId': self.game_id,
            'hostId': self.host_id,
            'hostName': self.host_name,
            'gameMode': self.game_mode,
            'gameModeName': self.game_mode_name,
            'maxPlayers': self.max_players,
            'wager': self.wager or 0,
            'players': [m.to_dict() for m in self.members],
            'status': self.status,
            'sessionId': self.session_id,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }


class SessionParticipant(db.Model):
    __tablename__ = 'session_participant'
    pk = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.String(36), db.ForeignKey('game_session.id'), nullable=False)
    player_id = db.Column(db.String(64), nullable=False, index=True)
    name = db.Column(db.String(64), nullable=False)

    def to_dict(self):
        return {'id': self.player_id, 'name': self.name}


class GameSession(db.Model):
    __tablename__ = 'game_session'
    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    game_id = db.Column(db.String(36), nullable=False, index=True)
    lobby_id = db.Column(db.String(36), nullable=True)
    participants = db.relationship('SessionParticipant', order_by='SessionParticipant.pk', cascade='all, delete-orphan', backref='session')
    state_json = db.Column(db.Text, nullable=False, default='{}')  # free-form, per game type
    results_json = db.Column(db.Text, nullable=True)
    started_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    ended_at = db.Column(db.DateTime, nullable=True)

    @property
    def state(self):
        return json.loads(self.state_json) if self.state_json else None

    @state.setter
    def state(self, value):
        self.state_json = json.dumps(value)

    @property
    def results(self):
        return json.loads(self.results_json) if self.results_json else None

    @results.setter
    def results(self, value):
        self.results_json = json.dumps(value) if value is not None else None

    def to_dict(self):
        return {
            'id': self.id,
            'gameId': self.game_id,
            'lobbyId': self.lobby_id,
            'players': [p.to_dict() for p in self.participants],
            'state': self.state,
            'results': self.results,
            'startedAt': _iso(self.started_at),
            'endedAt': _iso(self.ended_at),
        }
