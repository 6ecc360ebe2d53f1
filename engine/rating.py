"""ELO-style rating: game outcomes, baseline seeding and bookkeeping.

Game result → performance score (0-100) → win/draw/loss → rating delta:

  delta = base(result) * perf_mod * difficulty_mod * rank_mod * streak_mod
  gains capped at +60, losses at -30; LP change is the delta 1:1.

Baseline seeding:
  rating = clamp(1200 + (accuracy - 50) / 10 * 100, 800, 1600)

All functions are pure: rating dicts are copied, never mutated in place,
so a game produces exactly one new state (rating + history entry together).
"""
import copy
from datetime import datetime, timedelta, timezone

from config.settings import RATING_DEFAULTS, CATEGORIES

STARTING_RATING = RATING_DEFAULTS['starting_rating']

RESULT_WIN = 'win'
RESULT_DRAW = 'draw'
RESULT_LOSS = 'loss'

_BASE_CHANGE = {RESULT_WIN: 25, RESULT_DRAW: 0, RESULT_LOSS: -25}

# (min performance score, modifier), checked top-down
_PERFORMANCE_MODIFIERS = [
    (95, 2.0), (85, 1.5), (75, 1.2), (65, 1.0), (55, 0.8),
    (45, 0.6), (35, 0.4), (25, 0.2),
]

_PERFORMANCE_DESCRIPTIONS = [
    (95, 'Perfect Performance!'), (85, 'Excellent Game!'),
    (75, 'Great Performance!'), (65, 'Good Game!'),
    (55, 'Decent Performance'), (45, 'Room for Improvement'),
    (35, 'Keep Practicing'), (25, 'Tough Game'),
]


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def default_rating(categories=CATEGORIES):
    """Fresh rating record with every category at the starting rating."""
    return {
        'current_rating': STARTING_RATING,
        'peak_rating': STARTING_RATING,
        'games_played': 0,
        'wins': 0,
        'losses': 0,
        'draws': 0,
        'win_streak': 0,
        'loss_streak': 0,
        'best_win_streak': 0,
        'last_updated': _now_iso(),
        'rating_history': [],
        'category_ratings': {c: STARTING_RATING for c in categories},
    }


def baseline_rating(accuracy_percent):
    """Seed rating for one category from baseline accuracy (0-100)."""
    adjustment = (accuracy_percent - 50) / 10 * RATING_DEFAULTS['points_per_ten_percent']
    seeded = round(STARTING_RATING + adjustment)
    return max(RATING_DEFAULTS['baseline_floor'],
               min(RATING_DEFAULTS['baseline_ceiling'], seeded))


def default_category_ratings(interests):
    """Flat starting rating for each interest (assessment skipped)."""
    if not interests:
        return {}
    return {category: STARTING_RATING for category in interests}


def category_rating(rating, category):
    """Rating for one category; missing or invalid data yields the default."""
    ratings = (rating or {}).get('category_ratings') or {}
    value = ratings.get(category)
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return STARTING_RATING
    return value


def overall_rating(rating):
    """Rounded mean of the category ratings (starting rating if none)."""
    ratings = [v for v in ((rating or {}).get('category_ratings') or {}).values()
               if isinstance(v, (int, float))]
    if not ratings:
        return STARTING_RATING
    return round(sum(ratings) / len(ratings))


# --- Game outcome ---

def performance_score(accuracy, questions_answered):
    """Accuracy (0-60 points) plus a volume bonus (0-40 points), max 100."""
    accuracy_score = accuracy / 100 * 60
    if questions_answered >= 20:
        volume = 40
    elif questions_answered >= 15:
        volume = 30
    elif questions_answered >= 10:
        volume = 20
    elif questions_answered >= 5:
        volume = 10
    else:
        volume = 0
    return min(100, accuracy_score + volume)


def result_for_score(score):
    if score >= RATING_DEFAULTS['win_threshold']:
        return RESULT_WIN
    if score >= RATING_DEFAULTS['draw_threshold']:
        return RESULT_DRAW
    return RESULT_LOSS


def performance_modifier(score):
    for threshold, modifier in _PERFORMANCE_MODIFIERS:
        if score >= threshold:
            return modifier
    return 0.1


def difficulty_modifier(difficulty, current_elo):
    """Low ranks are shielded on hard content; high ranks rewarded for it."""
    low_rank = current_elo < RATING_DEFAULTS['low_rank_ceiling']
    difficulty = (difficulty or '').lower()
    if difficulty == 'easy':
        return 1.0 if low_rank else 0.85
    if difficulty == 'medium':
        return 0.9 if low_rank else 1.0
    if difficulty == 'hard':
        return 0.8 if low_rank else 1.3
    return 1.0


def rank_modifier(current_elo):
    """+10% per 200 points below the Gold floor, capped."""
    pivot = RATING_DEFAULTS['rank_bonus_pivot']
    if current_elo >= pivot:
        return 1.0
    bonus = 1.0 + (pivot - current_elo) / 200 * 0.10
    return min(RATING_DEFAULTS['rank_bonus_cap'], bonus)


def streak_modifier(result, win_streak, loss_streak):
    if result == RESULT_WIN:
        if win_streak >= 10:
            return 1.5
        if win_streak >= 7:
            return 1.3
        if win_streak >= 5:
            return 1.2
        if win_streak >= 3:
            return 1.1
        return 1.0
    if result == RESULT_LOSS:
        if loss_streak >= 5:
            return 0.7
        if loss_streak >= 3:
            return 0.8
    return 1.0


def determine_game_outcome(accuracy, questions_answered, correct_answers,
                           difficulty, current_elo, win_streak=0, loss_streak=0):
    """Grade a finished game into a result and rating delta.

    Args:
        accuracy: percentage 0-100
        questions_answered: questions the player answered
        correct_answers: how many were right (reported, not re-derived)
        difficulty: 'easy' | 'medium' | 'hard'
        current_elo: rating before the game
        win_streak / loss_streak: streaks before the game

    Returns dict with result, performance_score, elo_change, lp_change, breakdown.
    """
    if accuracy is None or not 0 <= accuracy <= 100:
        raise ValueError(f'accuracy must be within 0-100, got {accuracy!r}')
    if questions_answered < 0 or correct_answers < 0:
        raise ValueError('question counts must be non-negative')
    if correct_answers > questions_answered:
        raise ValueError('correct_answers cannot exceed questions_answered')

    score = performance_score(accuracy, questions_answered)
    result = result_for_score(score)

    breakdown = {
        'base_change': _BASE_CHANGE[result],
        'performance_modifier': performance_modifier(score),
        'difficulty_modifier': difficulty_modifier(difficulty, current_elo),
        'rank_modifier': rank_modifier(current_elo),
        'streak_modifier': streak_modifier(result, win_streak, loss_streak),
    }
    raw = (breakdown['base_change'] * breakdown['performance_modifier']
           * breakdown['difficulty_modifier'] * breakdown['rank_modifier']
           * breakdown['streak_modifier'])

    if result == RESULT_LOSS:
        change = max(-RATING_DEFAULTS['max_loss'], round(raw))
    else:
        change = min(RATING_DEFAULTS['max_gain'], round(raw))

    return {
        'result': result,
        'performance_score': score,
        'correct_answers': correct_answers,
        'questions_answered': questions_answered,
        'elo_change': change,
        'lp_change': change,
        'breakdown': breakdown,
    }


def apply_game_result(rating, outcome, category, difficulty):
    """Return a new rating dict with the outcome applied.

    Rating, counters, streaks, peak and the history entry change together.
    """
    updated = copy.deepcopy(rating) if rating else default_rating()
    change = outcome['elo_change']
    result = outcome['result']

    before_category = category_rating(updated, category)
    updated.setdefault('category_ratings', {})[category] = max(0, before_category + change)
    updated['current_rating'] = max(0, updated.get('current_rating', STARTING_RATING) + change)

    updated['games_played'] = updated.get('games_played', 0) + 1
    if result == RESULT_WIN:
        updated['wins'] = updated.get('wins', 0) + 1
        updated['win_streak'] = updated.get('win_streak', 0) + 1
        updated['loss_streak'] = 0
        updated['best_win_streak'] = max(updated.get('best_win_streak', 0),
                                         updated['win_streak'])
    elif result == RESULT_LOSS:
        updated['losses'] = updated.get('losses', 0) + 1
        updated['loss_streak'] = updated.get('loss_streak', 0) + 1
        updated['win_streak'] = 0
    else:
        updated['draws'] = updated.get('draws', 0) + 1

    updated['peak_rating'] = max(updated.get('peak_rating', STARTING_RATING),
                                 updated['current_rating'])
    now = _now_iso()
    updated['last_updated'] = now
    updated.setdefault('rating_history', []).append({
        'rating': updated['current_rating'],
        'change': change,
        'result': result,
        'category': category,
        'difficulty': difficulty,
        'timestamp': now,
        'performance': outcome['performance_score'],
    })
    return updated


def initialize_from_baseline(rating, category_ratings):
    """Return a new rating seeded from per-category baseline ratings."""
    updated = copy.deepcopy(rating) if rating else default_rating(())
    updated['category_ratings'] = dict(category_ratings)
    if category_ratings:
        overall = round(sum(category_ratings.values()) / len(category_ratings))
        updated['current_rating'] = overall
        updated['peak_rating'] = overall
    updated['last_updated'] = _now_iso()
    return updated


# --- Derived stats ---

def win_rate(wins, losses):
    total = wins + losses
    return round(wins / total * 100) if total > 0 else 0


def performance_trend(history, days=7, now=None):
    """Rating direction over the last `days` of history entries."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)
    recent = [e for e in history or []
              if datetime.fromisoformat(e['timestamp']) >= cutoff]
    if len(recent) < 2:
        return {'trend': 'stable', 'change': 0}
    change = recent[-1]['rating'] - recent[0]['rating']
    if change > 20:
        return {'trend': 'up', 'change': change}
    if change < -20:
        return {'trend': 'down', 'change': change}
    return {'trend': 'stable', 'change': change}


def difficulty_from_elo(rating):
    if rating >= 1800:
        return 'very_hard'
    if rating >= 1600:
        return 'hard'
    if rating >= 1400:
        return 'medium_hard'
    if rating >= 1200:
        return 'medium'
    if rating >= 1000:
        return 'medium_easy'
    if rating >= 800:
        return 'easy'
    return 'very_easy'


def performance_description(score):
    for threshold, text in _PERFORMANCE_DESCRIPTIONS:
        if score >= threshold:
            return text
    return 'Better Luck Next Time'
