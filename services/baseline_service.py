"""Baseline assessment flow: generate, grade, seed rating and difficulty."""
import logging
from datetime import datetime, timezone

from engine import baseline
from engine import rating as rating_engine
from engine.difficulty import DifficultyController, skill_for_difficulty
from engine.rank import rank_display
from models import player as player_model
from models import player_state
from services import question_bank
from services.player_session import public_question

logger = logging.getLogger(__name__)


def start(player, questions_per_category=None, rand=None):
    """Build and store a baseline test; returns the questions without answers."""
    bank = question_bank.bank_by_category(player.get('interests') or None)
    questions = baseline.generate_baseline_test(
        bank, player.get('interests') or list(bank), questions_per_category, rand)
    if not questions:
        raise ValueError('No baseline questions available for the selected interests')

    player_state.save(player['id'], player_state.BASELINE_TEST, questions)
    logger.info('Baseline started for player %s: %d questions', player['id'], len(questions))
    return [public_question(q) for q in questions]


def submit(player, answers):
    """Grade the stored test, then seed the rating and difficulty profile.

    Returns the graded results plus the seeded rank.
    """
    questions = player_state.get(player['id'], player_state.BASELINE_TEST)
    if not questions:
        raise ValueError('No baseline test in progress')
    results = baseline.calculate_baseline_results(questions, answers)

    rating = player_state.get(player['id'], player_state.RATING) or \
        rating_engine.default_rating(())
    seeded = rating_engine.initialize_from_baseline(rating, results['recommended_elo'])
    player_state.save(player['id'], player_state.RATING, seeded)

    controller = DifficultyController(skill_for_difficulty(results['recommended_difficulty']))
    player_state.save(player['id'], player_state.DIFFICULTY, controller.to_dict())

    results['completed_at'] = datetime.now(timezone.utc).isoformat()
    player_state.save(player['id'], player_state.BASELINE_RESULT, results)
    player_state.remove(player['id'], player_state.BASELINE_TEST)
    player_model.update_baseline_status(player['id'], 'completed')

    logger.info('Baseline completed for player %s: %.0f%% → %s, rating %d',
                player['id'], results['overall_accuracy'],
                results['recommended_difficulty'], seeded['current_rating'])
    return {**results, 'rank': rank_display(seeded['current_rating'])}


def skip(player):
    """Seed every interest at the starting rating without an assessment."""
    ratings = rating_engine.default_category_ratings(player.get('interests'))
    if ratings:
        seeded = rating_engine.initialize_from_baseline(rating_engine.default_rating(()), ratings)
    else:
        seeded = rating_engine.default_rating()
    player_state.save(player['id'], player_state.RATING, seeded)
    player_state.remove(player['id'], player_state.BASELINE_TEST)
    player_model.update_baseline_status(player['id'], 'skipped')
    logger.info('Baseline skipped for player %s', player['id'])
    return {'category_ratings': seeded['category_ratings'],
            'rank': rank_display(seeded['current_rating'])}


def result(player):
    return player_state.get(player['id'], player_state.BASELINE_RESULT)
