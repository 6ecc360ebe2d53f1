"""Baseline assessment routes."""
from flask import Blueprint, request, jsonify

from models import player as player_model
from services import baseline_service

baseline_bp = Blueprint('baseline', __name__)


@baseline_bp.route('/<int:player_id>/start', methods=['POST'])
def start(player_id):
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    data = request.get_json(silent=True) or {}

    try:
        questions = baseline_service.start(player, data.get('questions_per_category'))
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    return jsonify({'questions': questions, 'total_questions': len(questions)})


@baseline_bp.route('/<int:player_id>/submit', methods=['POST'])
def submit(player_id):
    """Body: {"answers": [option index or null per question, in test order]}."""
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    data = request.get_json(silent=True) or {}

    try:
        results = baseline_service.submit(player, data.get('answers'))
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    return jsonify(results)


@baseline_bp.route('/<int:player_id>/skip', methods=['POST'])
def skip(player_id):
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    return jsonify(baseline_service.skip(player))


@baseline_bp.route('/<int:player_id>/result')
def result(player_id):
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    stored = baseline_service.result(player)
    if not stored:
        return jsonify({'error': 'No baseline result', 'status': player['baseline_status']}), 404
    return jsonify(stored)
