from flask import Blueprint, jsonify, request
from flask_login import login_required

from lobbyhub.services import catalog
from lobbyhub.validation import json_body

games = Blueprint('games', __name__)


@games.route('', methods=['GET'])
def list_games():
    status = request.args.get('status')
    return jsonify({'games': [g.to_dict() for g in catalog.list_games(status)]})


@games.route('/<string:game_id>', methods=['GET'])
def get_game(game_id):
    return jsonify({'game': catalog.get_game(game_id).to_dict()})


@games.route('', methods=['POST'])
@login_required
def create_game():
    """
    Adds a game to the catalog. Any authenticated player may do this.
    """
    data = json_body()
    if not all([data.get('name'), data.get('description'), data.get('thumbnail'), data.get('modes')]):
        return jsonify({'message': 'Missing required game information'}), 400

    game = catalog.create_game(data['name'], data['description'], data['thumbnail'], data['modes'])
    return jsonify({'message': 'Game created successfully', 'game': game.to_dict()}), 201


@games.route('/<string:game_id>', methods=['PUT'])
@login_required
def update_game(game_id):
    data = json_body()
    game = catalog.update_game(game_id, data)
    return jsonify({'message': 'Game updated successfully', 'game': game.to_dict()})
