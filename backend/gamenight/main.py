from flask import Blueprint, jsonify

from gamenight.services.games.registry import catalog

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the gamenight server!'})


@main.route('/api/games')
def list_games():
    return jsonify({'games': catalog()})
