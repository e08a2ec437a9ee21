def test_create_game_requires_auth(client):
    res = client.post('/api/games', json={'name': 'X', 'description': 'd', 'thumbnail': 't', 'modes': []})
    assert res.status_code == 401


def test_create_and_fetch_game(client, game):
    assert game['status'] == 'active'
    assert [m['id'] for m in game['modes']] == ['duel', 'table']
    assert game['modes'][1]['minWager'] == 5

    res = client.get(f"/api/games/{game['id']}")
    assert res.status_code == 200
    assert res.get_json()['game']['name'] == 'Coin Flip'

    assert client.get('/api/games/does-not-exist').status_code == 404


def test_create_game_validation(client, auth_headers):
    res = client.post('/api/games', headers=auth_headers, json={'name': 'X', 'description': 'd', 'thumbnail': 't'})
    assert res.status_code == 400
    assert res.get_json()['message'] == 'Missing required game information'

    bad_mode = {'name': 'X', 'description': 'd', 'thumbnail': 't', 'modes': [{'id': 'm', 'name': 'M'}]}
    assert client.post('/api/games', headers=auth_headers, json=bad_mode).status_code == 400

    dup_modes = {'name': 'X', 'description': 'd', 'thumbnail': 't', 'modes': [
        {'id': 'm', 'name': 'M', 'description': 'x', 'players': 2},
        {'id': 'm', 'name': 'M2', 'description': 'y', 'players': 3},
    ]}
    assert client.post('/api/games', headers=auth_headers, json=dup_modes).status_code == 400


def test_list_games_sorted_and_filtered(client, auth_headers):
    for name in ['Zeta', 'Alpha']:
        client.post('/api/games', headers=auth_headers, json={
            'name': name, 'description': 'd', 'thumbnail': 't',
            'modes': [{'id': 'm', 'name': 'M', 'description': 'x', 'players': 2}],
        })
    listed = client.get('/api/games').get_json()['games']
    assert [g['name'] for g in listed] == ['Alpha', 'Zeta']

    zeta = listed[1]
    client.put(f"/api/games/{zeta['id']}", headers=auth_headers, json={'status': 'maintenance'})
    active = client.get('/api/games?status=active').get_json()['games']
    assert [g['name'] for g in active] == ['Alpha']
    assert client.get('/api/games?status=bogus').status_code == 400


def test_update_applies_only_truthy_fields(client, auth_headers, game):
    res = client.put(f"/api/games/{game['id']}", headers=auth_headers, json={
        'name': 'Coin Flip Deluxe', 'description': '', 'modes': [],
    })
    assert res.status_code == 200
    updated = res.get_json()['game']
    assert updated['name'] == 'Coin Flip Deluxe'
    assert updated['description'] == 'Heads or tails'
    assert len(updated['modes']) == 2

    assert client.put(f"/api/games/{game['id']}", headers=auth_headers, json={'status': 'retired'}).status_code == 400
    assert client.put('/api/games/missing', headers=auth_headers, json={'name': 'x'}).status_code == 404


def test_update_replaces_modes(client, auth_headers, game):
    res = client.put(f"/api/games/{game['id']}", headers=auth_headers, json={'modes': [
        {'id': 'duel', 'name': 'Duel v2', 'description': 'Still one on one', 'players': 2, 'minWager': 1},
    ]})
    assert res.status_code == 200
    modes = res.get_json()['game']['modes']
    assert modes == [{'id': 'duel', 'name': 'Duel v2', 'description': 'Still one on one', 'players': 2, 'minWager': 1}]


def test_seed_catalog_command(flask_app, client):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['seed-catalog'])
    assert 'Seeded 2 game(s).' in result.output
    result = runner.invoke(args=['seed-catalog'])
    assert 'Seeded 0 game(s).' in result.output
    assert len(client.get('/api/games').get_json()['games']) == 2


def test_game_fields_must_be_well_formed(client, auth_headers, game):
    assert client.post('/api/games', headers=auth_headers, json=['Coin Flip']).status_code == 400
    res = client.post('/api/games', headers=auth_headers, json={
        'name': {'en': 'Dice'}, 'description': 'd', 'thumbnail': 't',
        'modes': [{'id': 'm', 'name': 'M', 'description': 'd', 'players': 2}],
    })
    assert res.status_code == 400
    res = client.post('/api/games', headers=auth_headers, json={
        'name': 'Dice', 'description': 'd', 'thumbnail': 't',
        'modes': [{'id': 'm', 'name': 'M', 'description': 'd', 'players': 2, 'minWager': float('inf')}],
    })
    assert res.status_code == 400
    assert client.put(f"/api/games/{game['id']}", headers=auth_headers, json={'status': ['active']}).status_code == 400
