from gamenight.services import store


def create(client, game_id='4-kate', name='Ada'):
    res = client.post('/api/rooms/create', json={'name': name, 'game_id': game_id})
    assert res.status_code == 201
    return res.get_json()


def action(client, code, player_id, kind, payload=None, action_id=None):
    body = {'room_code': code, 'player_id': player_id, 'type': kind, 'payload': payload or {}}
    if action_id:
        body['action_id'] = action_id
    return client.post('/api/game/action', json=body)


def test_index_and_catalog(client):
    assert client.get('/').status_code == 200
    games = client.get('/api/games').get_json()['games']
    assert {g['id'] for g in games} == {
        'whos-deal', 'terrible-people', '4-kate', 'battleship', 'minesweeper', 'wordle'}
    seats = {g['id']: g['max_players'] for g in games}
    assert seats['whos-deal'] == 4 and seats['wordle'] == 1


def test_create_room(client):
    data = create(client)
    room = data['room']
    assert len(data['room_code']) == 6
    assert room['status'] == 'waiting'
    assert room['owner_id'] == data['player_id']
    assert [p['is_bot'] for p in room['players']] == [False, True]
    assert room['players'][1]['name'] == 'Bot Alice'


def test_create_rejects_bad_input(client):
    cases = [
        ({'name': '', 'game_id': '4-kate'}, 'INVALID_REQUEST'),
        ({'name': 'x' * 31, 'game_id': '4-kate'}, 'INVALID_NAME'),
        ({'name': 'Ada', 'game_id': 'chess'}, 'INVALID_GAME'),
    ]
    for body, code in cases:
        res = client.post('/api/rooms/create', json=body)
        assert res.status_code == 400
        assert res.get_json()['code'] == code
    res = client.post('/api/rooms/create', data='not json')
    assert res.get_json()['code'] == 'INVALID_REQUEST'


def test_join_fills_bot_seats_until_full(client, flask_app):
    host = create(client, 'terrible-people')
    code = host['room_code'].lower()
    guests = []
    for name in ('Grace', 'Linus', 'Ken'):
        res = flask_app.test_client().post('/api/rooms/join', json={'room_code': code, 'name': name})
        assert res.status_code == 200
        guests.append(res.get_json())
    assert guests[0]['room']['players'][1]['name'] == 'Grace'
    assert not any(p['is_bot'] for p in guests[-1]['room']['players'])

    res = flask_app.test_client().post('/api/rooms/join', json={'room_code': code, 'name': 'Late'})
    assert res.status_code == 410
    assert res.get_json()['code'] == 'ROOM_FULL'

    res = client.post('/api/rooms/join', json={'room_code': 'NOROOM', 'name': 'Ada'})
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Room not found', 'code': 'ROOM_NOT_FOUND'}


def test_start_is_owner_only_and_closes_joining(client, flask_app):
    host = create(client, 'whos-deal')
    code = host['room_code']
    guest = flask_app.test_client().post(
        '/api/rooms/join', json={'room_code': code, 'name': 'Grace'}).get_json()

    res = client.post('/api/game/start', json={'room_code': code, 'player_id': guest['player_id']})
    assert res.status_code == 403
    assert res.get_json()['code'] == 'NOT_OWNER'

    res = client.post('/api/game/start', json={'room_code': code, 'player_id': host['player_id']})
    assert res.status_code == 200
    room = res.get_json()['room']
    assert room['status'] == 'playing'
    assert 'hands' not in room['game']['round']
    assert len(room['game']['round']['my_hand']) == 5

    again = client.post('/api/game/start', json={'room_code': code, 'player_id': host['player_id']})
    assert again.status_code == 200

    res = flask_app.test_client().post('/api/rooms/join', json={'room_code': code, 'name': 'Late'})
    assert res.status_code == 403
    assert res.get_json()['code'] == 'GAME_IN_PROGRESS'


def test_actions_over_http(client):
    host = create(client)
    code, pid = host['room_code'], host['player_id']
    res = action(client, code, pid, 'drop', {'column': 2})
    assert res.status_code == 409
    assert res.get_json()['code'] == 'INVALID_PHASE'

    client.post('/api/game/start', json={'room_code': code, 'player_id': pid})
    res = action(client, code, pid, 'drop', {'column': 2}, action_id='x1')
    assert res.get_json() == {'success': True, 'changed': True}
    assert action(client, code, pid, 'drop', {'column': 2}, action_id='x1').get_json()['duplicate'] is True

    res = client.post('/api/game/action', json={'room_code': code, 'player_id': pid})
    assert res.status_code == 400

    res = action(client, code, 'intruder', 'drop', {'column': 2})
    assert res.status_code == 401
    assert res.get_json()['code'] == 'UNAUTHORIZED'

    res = client.post('/api/game/play-again', json={'room_code': code, 'player_id': pid})
    assert res.status_code == 409


def test_single_player_game_returns_to_lobby(client):
    host = create(client, 'minesweeper')
    code, pid = host['room_code'], host['player_id']
    client.post('/api/game/start', json={'room_code': code, 'player_id': pid})
    action(client, code, pid, 'reveal', {'row': 0, 'col': 0})

    game = store.get_room(code)['game']
    mine_row, mine_col = divmod(game['mine_positions'][0], game['cols'])
    action(client, code, pid, 'reveal', {'row': mine_row, 'col': mine_col})
    view = client.get(f'/api/rooms/{code}?player_id={pid}').get_json()
    assert view['game']['phase'] == 'lost'

    res = client.post('/api/game/play-again', json={'room_code': code, 'player_id': pid})
    assert res.status_code == 200
    room = res.get_json()['room']
    assert room['status'] == 'waiting'
    assert room['game'] is None


def test_heartbeat_and_leave(client):
    host = create(client)
    code, pid = host['room_code'], host['player_id']
    res = client.post('/api/rooms/heartbeat', json={'room_code': code, 'player_id': pid})
    assert res.status_code == 200
    assert res.get_json()['room']['room_code'] == code

    res = client.post('/api/rooms/leave', json={'room_code': code, 'player_id': pid})
    assert res.get_json() == {'success': True}
    res = client.get(f'/api/rooms/{code}')
    assert res.status_code == 404
