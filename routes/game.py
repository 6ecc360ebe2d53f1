"""Game routes: the question loop and game completion."""
import logging

from flask import Blueprint, request, jsonify

from models import player as player_model
from services import rating_service
from services.player_session import PlayerSession

logger = logging.getLogger(__name__)
game_bp = Blueprint('game', __name__)


@game_bp.route('/<int:player_id>/next', methods=['POST'])
def next_question(player_id):
    """Serve the next randomized question at the player's challenge tier.

    Optional body: {"config": {partial randomization config}}.
    """
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    data = request.get_json(silent=True) or {}

    try:
        session = PlayerSession.load(player, config=data.get('config'))
        question = session.next_question()
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    session.save()
    return jsonify(question)


@game_bp.route('/<int:player_id>/answer', methods=['POST'])
def answer(player_id):
    """Grade the pending question; body: {"question_id", "answer", "response_time"?}."""
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    data = request.get_json(silent=True) or {}

    try:
        session = PlayerSession.load(player)
        result = session.submit_answer(data.get('question_id'), data.get('answer'),
                                       response_time=data.get('response_time'))
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    session.save()
    return jsonify(result)


@game_bp.route('/<int:player_id>/complete', methods=['POST'])
def complete(player_id):
    """Finish a game: body {"category", "difficulty", "questions_answered", "correct_answers"}."""
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    data = request.get_json(silent=True) or {}

    missing = [f for f in ('category', 'difficulty', 'questions_answered', 'correct_answers')
               if data.get(f) is None]
    if missing:
        return jsonify({'error': f'Missing fields: {missing}'}), 400

    try:
        result = rating_service.record_game(
            player, data['category'], data['difficulty'],
            data['questions_answered'], data['correct_answers'])
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    return jsonify(result)


@game_bp.route('/<int:player_id>/stats')
def stats(player_id):
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    return jsonify(PlayerSession.load(player).stats())


@game_bp.route('/<int:player_id>/reset-difficulty', methods=['POST'])
def reset_difficulty(player_id):
    """Restart the difficulty window; optional body {"skill_level": 0..1}."""
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    data = request.get_json(silent=True) or {}

    try:
        session = PlayerSession.load(player)
        session.reset_difficulty(data.get('skill_level'))
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    session.save()
    return jsonify(session.stats())
