from flask import Blueprint, jsonify

from gamenight.api.rooms import json_fields
from gamenight.services import dispatch, lobby


game = Blueprint('game', __name__)


@game.route('/start', methods=['POST'])
def start_game():
    data = json_fields('room_code', 'player_id')
    room = lobby.start_game(data['room_code'], data['player_id'])
    return jsonify({'success': True, 'room': lobby.room_view(room, data['player_id'])})


@game.route('/action', methods=['POST'])
def game_action():
    data = json_fields('room_code', 'player_id', 'type')
    result = dispatch.process_action(
        data['room_code'],
        data['player_id'],
        data['type'],
        data.get('payload'),
        action_id=data.get('action_id'),
    )
    return jsonify(result)


@game.route('/play-again', methods=['POST'])
def play_again():
    data = json_fields('room_code', 'player_id')
    room = lobby.play_again(data['room_code'], data['player_id'])
    return jsonify({'success': True, 'room': lobby.room_view(room, data['player_id'])})
