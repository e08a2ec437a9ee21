from flask import Blueprint, jsonify, request
from flask_login import login_required

from lobbyhub.services import sessions as session_service
from lobbyhub.validation import json_body

sessions = Blueprint('sessions', __name__)


@sessions.route('', methods=['POST'])
@login_required
def create_session():
    data = json_body()
    players = data.get('players')
    if not data.get('gameId') or not isinstance(players, list) or not players:
        return jsonify({'message': 'Missing required session information'}), 400

    game_session = session_service.create_session(data['gameId'], players, lobby_id=data.get('lobbyId'))
    return jsonify({
        'message': 'Session created successfully',
        'sessionId': game_session.id,
        'session': game_session.to_dict(),
    }), 201


@sessions.route('/player/<string:player_id>', methods=['GET'])
def player_sessions(player_id):
    limit = request.args.get('limit', type=int)
    found = session_service.list_for_player(player_id, limit)
    return jsonify({'sessions': [s.to_dict() for s in found]})


@sessions.route('/<string:session_id>', methods=['GET'])
def get_session(session_id):
    return jsonify({'session': session_service.get_session(session_id).to_dict()})


@sessions.route('/<string:session_id>/state', methods=['PUT'])
@login_required
def update_state(session_id):
    data = json_body()
    if data.get('state') is None:
        return jsonify({'message': 'State is required'}), 400

    game_session = session_service.update_state(session_id, data['state'])
    return jsonify({'message': 'Session state updated', 'sessionId': game_session.id})


@sessions.route('/<string:session_id>/end', methods=['POST'])
@login_required
def end_session(session_id):
    """
    Records results and updates every participant's stats.
    """
    data = json_body()
    results = data.get('results')
    if results is None:
        return jsonify({'message': 'Results are required'}), 400

    game_session = session_service.end_session(session_id, results)
    return jsonify({
        'message': 'Session ended',
        'sessionId': game_session.id,
        'results': game_session.results,
    })
