"""Competitive rating bookkeeping for finished games."""
import logging

from config.settings import CATEGORIES, DIFFICULTIES
from engine import rating as rating_engine
from engine.rank import rank_display
from models import player_state

logger = logging.getLogger(__name__)


def get_rating(player):
    """Stored rating record, or a fresh one over the player's interests."""
    stored = player_state.get(player['id'], player_state.RATING)
    if stored:
        return stored
    return rating_engine.default_rating(player.get('interests') or CATEGORIES)


def record_game(player, category, difficulty, questions_answered, correct_answers):
    """Grade a finished game and persist the new rating in one write.

    Returns dict: outcome, rating (current), rank (display block),
    description.
    """
    if category not in CATEGORIES:
        raise ValueError(f'Unknown category: {category!r}')
    if difficulty not in DIFFICULTIES:
        raise ValueError(f'Unknown difficulty: {difficulty!r}')
    questions_answered = int(questions_answered)
    correct_answers = int(correct_answers)
    accuracy = correct_answers / questions_answered * 100 if questions_answered > 0 else 0.0

    rating = get_rating(player)
    outcome = rating_engine.determine_game_outcome(
        accuracy, questions_answered, correct_answers, difficulty,
        rating['current_rating'],
        win_streak=rating.get('win_streak', 0),
        loss_streak=rating.get('loss_streak', 0),
    )
    updated = rating_engine.apply_game_result(rating, outcome, category, difficulty)
    player_state.save(player['id'], player_state.RATING, updated)

    logger.info('Player %s %s (%s/%s, %s): %d → %d (%+d)', player['id'],
                outcome['result'], correct_answers, questions_answered, difficulty,
                rating['current_rating'], updated['current_rating'], outcome['elo_change'])

    return {
        'outcome': outcome,
        'rating': updated['current_rating'],
        'category_rating': rating_engine.category_rating(updated, category),
        'rank': rank_display(updated['current_rating'], outcome['elo_change']),
        'description': rating_engine.performance_description(outcome['performance_score']),
    }


def summary(player):
    rating = get_rating(player)
    current = rating['current_rating']
    return {
        'current_rating': current,
        'peak_rating': rating.get('peak_rating', current),
        'overall_rating': rating_engine.overall_rating(rating),
        'category_ratings': rating.get('category_ratings', {}),
        'games_played': rating.get('games_played', 0),
        'wins': rating.get('wins', 0),
        'losses': rating.get('losses', 0),
        'draws': rating.get('draws', 0),
        'win_rate': rating_engine.win_rate(rating.get('wins', 0), rating.get('losses', 0)),
        'win_streak': rating.get('win_streak', 0),
        'best_win_streak': rating.get('best_win_streak', 0),
        'trend': rating_engine.performance_trend(rating.get('rating_history')),
        'suggested_difficulty': rating_engine.difficulty_from_elo(current),
        'rank': rank_display(current),
    }


def history(player, limit=None, offset=0):
    """Rating history, newest first."""
    entries = list(reversed(get_rating(player).get('rating_history') or []))
    if limit is None:
        return entries[offset:]
    return entries[offset:offset + limit]
