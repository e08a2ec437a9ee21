from flask import Blueprint, jsonify, request

from lobbyhub.auth import optional_identity
from lobbyhub.services import lobbies as lobby_service
from lobbyhub.validation import as_text, json_body

lobbies = Blueprint('lobbies', __name__)


def _acting_player(data, id_key, name_key=None):
    """Player id/name from the body, falling back to the token identity."""
    identity = optional_identity()
    player_id = as_text(data.get(id_key), id_key) or (identity.id if identity else None)
    player_name = None
    if name_key:
        player_name = as_text(data.get(name_key), name_key) or (identity.name if identity else None)
    return player_id, player_name


@lobbies.route('', methods=['GET'])
def list_lobbies():
    found = lobby_service.list_lobbies(
        game_id=request.args.get('gameId'),
        status=request.args.get('status'),
    )
    return jsonify({'lobbies': [lobby.to_dict() for lobby in found]})


@lobbies.route('/<string:lobby_id>', methods=['GET'])
def get_lobby(lobby_id):
    return jsonify({'lobby': lobby_service.get_lobby(lobby_id).to_dict()})


@lobbies.route('', methods=['POST'])
def create_lobby():
    data = json_body()
    host_id, host_name = _acting_player(data, 'hostId', 'hostName')
    if not all([data.get('gameId'), host_id, data.get('gameMode'), data.get('maxPlayers')]):
        return jsonify({'message': 'Missing required lobby information'}), 400

    lobby = lobby_service.create_lobby(
        game_id=as_text(data['gameId'], 'gameId'),
        host_id=host_id,
        host_name=host_name,
        mode_id=as_text(data['gameMode'], 'gameMode'),
        max_players=data['maxPlayers'],
        wager=data.get('wager', 0),
    )
    return jsonify({'message': 'Lobby created successfully', 'lobby': lobby.to_dict()}), 201


@lobbies.route('/<string:lobby_id>/join', methods=['POST'])
def join_lobby(lobby_id):
    data = json_body()
    player_id, player_name = _acting_player(data, 'playerId', 'playerName')
    if not player_id:
        return jsonify({'message': 'Player ID is required'}), 400

    lobby = lobby_service.join_lobby(lobby_id, player_id, player_name)
    return jsonify({'message': 'Joined lobby successfully', 'lobby': lobby.to_dict()})


@lobbies.route('/<string:lobby_id>/leave', methods=['POST'])
def leave_lobby(lobby_id):
    """
    Removes a player. When the host leaves, the next player in join order
    becomes host; when nobody is left the lobby is deleted.
    """
    data = json_body()
    player_id, _ = _acting_player(data, 'playerId')
    if not player_id:
        return jsonify({'message': 'Player ID is required'}), 400

    lobby = lobby_service.leave_lobby(lobby_id, player_id)
    if lobby is None:
        return jsonify({'message': 'Lobby deleted (no players left)', 'lobbyId': lobby_id})
    return jsonify({'message': 'Left lobby successfully', 'lobby': lobby.to_dict()})


@lobbies.route('/<string:lobby_id>/ready', methods=['POST'])
def set_ready(lobby_id):
    data = json_body()
    player_id, _ = _acting_player(data, 'playerId')
    if not player_id:
        return jsonify({'message': 'Player ID is required'}), 400
    is_ready = data.get('isReady')
    if is_ready is not None and not isinstance(is_ready, bool):
        return jsonify({'message': 'isReady must be a boolean'}), 400

    lobby = lobby_service.set_ready(lobby_id, player_id, is_ready)
    return jsonify({'message': 'Player ready status updated', 'lobby': lobby.to_dict()})


@lobbies.route('/<string:lobby_id>/start', methods=['POST'])
def start_lobby(lobby_id):
    data = json_body()
    host_id, _ = _acting_player(data, 'hostId')
    if not host_id:
        return jsonify({'message': 'Host ID is required'}), 400

    session_id, lobby = lobby_service.start_lobby(lobby_id, host_id)
    return jsonify({'message': 'Game started', 'sessionId': session_id, 'lobby': lobby.to_dict()})
