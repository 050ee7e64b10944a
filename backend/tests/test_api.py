def test_ping(client):
    res = client.get('/api/ping')
    assert res.status_code == 200
    assert res.get_json() == {'message': 'pong'}


def test_game_scenarios(client):
    res = client.get('/api/game-scenarios')
    assert res.status_code == 200
    scenarios = res.get_json()
    assert [s['id'] for s in scenarios] == list(range(1, 26))
    mcq = next(s for s in scenarios if s['id'] == 1)
    assert mcq['type'] == 'mcq'
    assert len(mcq['options']) == 4
    short = next(s for s in scenarios if s['id'] == 8)
    assert short['type'] == 'short'
    assert 'options' not in short


def test_single_scenario(client):
    res = client.get('/api/game-scenarios/7')
    assert res.status_code == 200
    assert res.get_json()['title'].startswith('Types of Market')
    assert client.get('/api/game-scenarios/99').status_code == 404


def test_game_state_defaults_to_main_venue(client):
    res = client.get('/api/game-state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['venueId'] == 'main-hall'
    assert state['phase'] == 'lobby'
    assert state['usedScenarios'] == []
    assert state['players'] == {}
    assert state['durations']['question'] == 60
    assert set(state['venues']) == {'main-hall', 'annex'}


def test_game_state_for_venue(client):
    res = client.get('/api/game-state?venueId=annex')
    assert res.status_code == 200
    assert res.get_json()['settings'] == {'maxPlayers': 2}
    assert client.get('/api/game-state?venueId=nowhere').status_code == 404


def test_game_state_reflects_socket_joins(client, sio_client):
    sio_client.emit('joinGame', {'name': 'Alice', 'venueId': 'annex'})
    state = client.get('/api/game-state?venueId=annex').get_json()
    assert [p['name'] for p in state['players'].values()] == ['Alice']

    venues = {v['id']: v for v in client.get('/api/venues').get_json()}
    assert venues['annex']['currentPlayers'] == 1
    assert venues['annex']['maxPlayers'] == 2
    assert venues['main-hall']['currentPlayers'] == 0


def test_opportunity_cost_is_multiple_choice(client):
    scenario = client.get('/api/game-scenarios/5').get_json()
    assert scenario['type'] == 'mcq'
    assert [option[:2] for option in scenario['options']] == ['A.', 'B.']
