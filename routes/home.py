"""Home: health check and player registration."""
import logging

from flask import Blueprint, request, jsonify

from config.settings import CATEGORIES
from models import player as player_model
from models import player_state
from models import question as question_model

logger = logging.getLogger(__name__)
home_bp = Blueprint('home', __name__)


@home_bp.route('/')
def index():
    return jsonify({
        'status': 'ok',
        'players': player_model.get_all(),
        'categories': list(CATEGORIES),
        'question_count': question_model.count(),
    })


@home_bp.route('/players', methods=['POST'])
def create_player():
    """Register a player with a name and a list of interest categories."""
    data = request.get_json(silent=True) or {}
    name = str(data.get('name', '')).strip()
    interests = data.get('interests') or []
    if not name:
        return jsonify({'error': 'name is required'}), 400
    if not isinstance(interests, list):
        return jsonify({'error': 'interests must be a list'}), 400
    unknown = [i for i in interests if i not in CATEGORIES]
    if unknown:
        return jsonify({'error': f'Unknown categories: {unknown}'}), 400
    if player_model.get_by_name(name):
        return jsonify({'error': f'Player {name!r} already exists'}), 409

    player_id = player_model.create(name, interests)
    logger.info('Created player %s (%s) interests=%s', player_id, name, interests)
    return jsonify(player_model.get_by_id(player_id)), 201


@home_bp.route('/players/<int:player_id>')
def get_player(player_id):
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    return jsonify(player)


@home_bp.route('/players/<int:player_id>', methods=['DELETE'])
def delete_player(player_id):
    """Remove a player along with their rating, difficulty, pool and baseline state."""
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    player_state.remove_all(player_id)
    player_model.delete(player_id)
    logger.info('Deleted player %s (%s)', player_id, player['name'])
    return jsonify({'status': 'deleted', 'id': player_id})
