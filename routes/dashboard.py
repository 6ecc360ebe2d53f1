"""Dashboard routes: rank, rating history and answer-position analytics."""
from flask import Blueprint, Response, request, jsonify

from engine.difficulty import DifficultyController
from models import analytics as analytics_model
from models import player as player_model
from models import player_state
from services import rating_service
from services.rating_chart import render_rating_chart

dashboard_bp = Blueprint('dashboard', __name__)

HISTORY_PAGE_SIZE = 30


@dashboard_bp.route('/analytics')
def analytics():
    """Shared answer-position distribution and bias flags."""
    tally = analytics_model.load()
    return jsonify({
        **tally.to_dict(),
        'percentages': tally.percentages(),
        'recent_bias_detected': tally.recent_bias_detected(),
        'is_valid': tally.is_valid(),
    })


@dashboard_bp.route('/analytics/reset', methods=['POST'])
def reset_analytics():
    analytics_model.reset()
    return jsonify({'status': 'reset'})


@dashboard_bp.route('/<int:player_id>')
def overview(player_id):
    """Rank, rating summary and flow state for one player."""
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404

    controller = DifficultyController.from_dict(
        player_state.get(player_id, player_state.DIFFICULTY))
    return jsonify({
        'player': player,
        'rating': rating_service.summary(player),
        'flow_state': controller.flow_state(),
        'difficulty': controller.difficulty_recommendations(),
    })


@dashboard_bp.route('/<int:player_id>/history')
def history(player_id):
    """Paginated rating history, newest first."""
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404

    page = max(1, request.args.get('page', 1, type=int))
    offset = (page - 1) * HISTORY_PAGE_SIZE
    entries = rating_service.history(player, limit=HISTORY_PAGE_SIZE, offset=offset)
    return jsonify({'page': page, 'entries': entries})


@dashboard_bp.route('/<int:player_id>/rating-chart.svg')
def rating_chart(player_id):
    player = player_model.get_by_id(player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    entries = rating_service.get_rating(player).get('rating_history') or []
    return Response(render_rating_chart(entries), mimetype='image/svg+xml')
