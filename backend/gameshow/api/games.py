from flask import Blueprint, current_app, jsonify, request

from gameshow.catalog import SCENARIOS, get_scenario
from gameshow.errors import NotFoundError

games = Blueprint('games', __name__)


def _engine():
    return current_app.extensions['game_engine']


@games.route('/ping', methods=['GET'])
def ping():
    return jsonify({'message': 'pong'})


@games.route('/game-scenarios', methods=['GET'])
def list_scenarios():
    return jsonify([s.to_dict() for s in SCENARIOS])


@games.route('/game-scenarios/<int:scenario_id>', methods=['GET'])
def get_game_scenario(scenario_id):
    scenario = get_scenario(scenario_id)
    if scenario is None:
        return jsonify({'error': f'Scenario {scenario_id} not found'}), 404
    return jsonify(scenario.to_dict())


@games.route('/game-state', methods=['GET'])
def get_game_state():
    """Snapshot for initial page load, before the socket connects."""
    venue_id = request.args.get('venueId')
    try:
        return jsonify(_engine().snapshot(venue_id))
    except NotFoundError as exc:
        return jsonify({'error': exc.message}), 404


@games.route('/venues', methods=['GET'])
def list_venues():
    return jsonify([v.to_dict() for v in _engine().venues.all()])
