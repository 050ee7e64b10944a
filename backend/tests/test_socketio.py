def _events(test_client, name):
    return [pkt['args'] for pkt in test_client.get_received() if pkt['name'] == name]


def _join_admin(test_client, venue='main-hall'):
    test_client.emit('joinGame', {'name': 'Host', 'isAdmin': True, 'adminPassword': 'letmein', 'venueId': venue})
    return test_client.get_received()


def _join_player(test_client, name='Alice', venue='main-hall'):
    test_client.emit('joinGame', {'name': name, 'teamName': 'Team ' + name, 'venueId': venue})
    received = test_client.get_received()
    ack = next(pkt['args'][0] for pkt in received if pkt['name'] == 'playerJoined')
    return ack, received


def test_socket_connect(sio_client):
    assert sio_client.is_connected()
    received = sio_client.get_received()
    assert any(pkt['name'] == 'connected' for pkt in received)


def test_join_acknowledges_and_broadcasts(sio_factory):
    admin = sio_factory()
    player = sio_factory()
    admin.get_received()
    player.get_received()
    _join_admin(admin)

    ack, received = _join_player(player)
    assert ack['isAdmin'] is False
    assert ack['venueId'] == 'main-hall'
    states = [pkt['args'][0] for pkt in received if pkt['name'] == 'gameState']
    assert states[-1]['players'][ack['playerId']]['name'] == 'Alice'

    admin_states = _events(admin, 'gameState')
    assert admin_states
    assert ack['playerId'] in admin_states[-1][0]['players']
    # The private ack never reaches other connections
    assert _events(admin, 'playerJoined') == []


def test_non_admin_roll_is_rejected_privately(sio_factory):
    admin = sio_factory()
    player = sio_factory()
    _join_admin(admin)
    _join_player(player)
    admin.get_received()

    player.emit('rollDice', 5)
    errors = _events(player, 'error')
    assert len(errors) == 1
    assert 'Only admin' in errors[0][0]['message']
    assert errors[0][0]['code'] == 'unauthorized'
    assert admin.get_received() == []


def test_round_over_socket(sio_factory, runner):
    admin = sio_factory()
    player = sio_factory()
    _join_admin(admin)
    ack, _ = _join_player(player)

    admin.emit('rollDice', 8)
    rolling = _events(player, 'gameState')
    assert rolling[-1][0]['phase'] == 'rolling'

    runner.run_pending()
    question = _events(player, 'gameState')
    assert question[-1][0]['phase'] == 'question'
    assert question[-1][0]['currentScenario'] == 8
    admin.get_received()

    player.emit('submitAnswer', {'scenarioId': 8, 'justification': 'ok'})
    received = player.get_received()
    assert any(pkt['name'] == 'answerSubmitted' for pkt in received)

    answered = _events(admin, 'playerAnswered')
    assert answered[0][0]['playerId'] == ack['playerId']
    assert answered[0][0]['answer']['scenarioId'] == 8

    runner.run_pending()
    results = _events(player, 'gameState')
    assert results[-1][0]['phase'] == 'results'
    assert results[-1][0]['players'][ack['playerId']]['score'] == 10


def test_malformed_payload_is_a_validation_error(sio_factory):
    player = sio_factory()
    _join_player(player)
    player.emit('submitAnswer', {'scenarioId': 'five', 'justification': 'ok'})
    errors = _events(player, 'error')
    assert errors[0][0]['code'] == 'invalid_payload'


def test_action_before_join_is_rejected(sio_client):
    sio_client.get_received()
    sio_client.emit('endQuestion')
    errors = _events(sio_client, 'error')
    assert errors[0][0]['code'] == 'not_found'


def test_admin_gets_available_scenarios(sio_factory):
    admin = sio_factory()
    _join_admin(admin)
    admin.emit('getAvailableScenarios')
    available = _events(admin, 'availableScenarios')
    assert available[0][0] == list(range(1, 26))


def test_disconnect_marks_player_offline(sio_factory):
    admin = sio_factory()
    player = sio_factory()
    _join_admin(admin)
    ack, _ = _join_player(player)
    admin.get_received()

    player.disconnect()
    states = _events(admin, 'gameState')
    assert states[-1][0]['players'][ack['playerId']]['connected'] is False


def test_venues_do_not_see_each_other(sio_factory, runner):
    hall_admin = sio_factory()
    annex_player = sio_factory()
    _join_admin(hall_admin)
    _join_player(annex_player, name='Bob', venue='annex')

    hall_admin.emit('rollDice', 3)
    runner.run_pending()
    assert _events(annex_player, 'gameState') == []


def test_reset_drops_players_over_socket(sio_factory, flask_app):
    admin = sio_factory()
    player = sio_factory()
    _join_admin(admin)
    ack, _ = _join_player(player)

    admin.emit('resetGame')
    final = _events(player, 'gameState')
    assert len(final) == 1
    assert ack['playerId'] not in final[0][0]['players']

    # No longer in the venue room
    admin.emit('rollDice', 4)
    assert _events(player, 'gameState') == []
    engine = flask_app.extensions['game_engine']
    assert engine.venues.get('main-hall').occupants == []
