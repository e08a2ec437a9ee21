from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from lobbyhub.auth import issue_token
from lobbyhub.services.players import register_player, authenticate, authenticate_wallet, get_player
from lobbyhub.validation import json_body

auth = Blueprint('auth', __name__)


@auth.route('/register', methods=['POST'])
def register():
    data = json_body()
    player = register_player(
        name=data.get('name'),
        email=data.get('email'),
        password=data.get('password'),
        wallet_address=data.get('walletAddress'),
    )
    return jsonify({
        'message': 'Player registered successfully',
        'token': issue_token(player),
        'player': player.to_dict(private=True),
    }), 201


@auth.route('/login', methods=['POST'])
def login():
    data = json_body()
    email = data.get('email')
    password = data.get('password')
    if not all([email, password]):
        return jsonify({'message': 'Email and password are required'}), 400

    player = authenticate(email, password)
    return jsonify({
        'message': 'Login successful',
        'token': issue_token(player),
        'player': player.to_dict(private=True),
    })


@auth.route('/wallet', methods=['POST'])
def wallet_login():
    """
    Logs in by wallet address, creating the player on first use.
    The optional ``signature`` field is not verified.
    """
    data = json_body()
    wallet_address = data.get('walletAddress')
    if not wallet_address or not isinstance(wallet_address, str):
        return jsonify({'message': 'Wallet address is required'}), 400

    player = authenticate_wallet(wallet_address)
    return jsonify({
        'message': 'Wallet authentication successful',
        'token': issue_token(player),
        'player': player.to_dict(private=True),
    })


@auth.route('/me', methods=['GET'])
@login_required
def me():
    player = get_player(current_user.id)
    return jsonify({'player': player.to_dict(private=True)})
