from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from lobbyhub.services import players as player_service
from lobbyhub.validation import json_body

players = Blueprint('players', __name__)


@players.route('/top', methods=['GET'])
def top_players():
    limit = request.args.get('limit', type=int)
    ranked = player_service.top_players(limit)
    return jsonify({'topPlayers': [p.to_dict() for p in ranked]})


@players.route('/me', methods=['PUT'])
@login_required
def update_me():
    """
    Updates the caller's own profile. Only ``name`` can change; other keys
    are ignored.
    """
    data = json_body()
    player = player_service.update_profile(current_user.id, data)
    return jsonify({'message': 'Player updated successfully', 'player': player.to_dict(private=True)})


@players.route('/<string:player_id>', methods=['GET'])
def get_player(player_id):
    return jsonify({'player': player_service.get_player(player_id).to_dict()})


@players.route('/<string:player_id>/stats', methods=['GET'])
def get_stats(player_id):
    player = player_service.get_player(player_id)
    return jsonify({
        'playerId': player.id,
        'playerName': player.name,
        'stats': player.stats(),
    })
