"""Tests for engine/rating.py: game outcomes, seeding and bookkeeping."""
from datetime import datetime, timedelta, timezone

import pytest

from engine import rating


# ---------------------------------------------------------------------------
# Baseline seeding
# ---------------------------------------------------------------------------

def test_baseline_rating_formula():
    assert rating.baseline_rating(50) == 1200
    assert rating.baseline_rating(70) == 1400
    assert rating.baseline_rating(55) == 1250
    assert rating.baseline_rating(30) == 1000


def test_baseline_rating_clamped():
    assert rating.baseline_rating(100) == 1600
    assert rating.baseline_rating(95) == 1600
    assert rating.baseline_rating(0) == 800


def test_default_category_ratings():
    assert rating.default_category_ratings(['tech', 'finance']) == {'tech': 1200, 'finance': 1200}
    assert rating.default_category_ratings([]) == {}


def test_category_rating_defaults():
    record = {'category_ratings': {'tech': 1350, 'bad': 'abc'}}
    assert rating.category_rating(record, 'tech') == 1350
    assert rating.category_rating(record, 'finance') == 1200
    assert rating.category_rating(record, 'bad') == 1200
    assert rating.category_rating(None, 'tech') == 1200


def test_overall_rating():
    assert rating.overall_rating({'category_ratings': {'a': 1000, 'b': 1401}}) == 1200
    assert rating.overall_rating({}) == 1200


def test_initialize_from_baseline():
    seeded = rating.initialize_from_baseline(rating.default_rating(()), {'tech': 1400, 'finance': 1000})
    assert seeded['current_rating'] == 1200
    assert seeded['peak_rating'] == 1200
    assert seeded['category_ratings'] == {'tech': 1400, 'finance': 1000}


# ---------------------------------------------------------------------------
# Game outcome
# ---------------------------------------------------------------------------

def test_performance_score_volume_bonus():
    assert rating.performance_score(100, 20) == 100
    assert rating.performance_score(80, 10) == pytest.approx(68)
    assert rating.performance_score(50, 4) == pytest.approx(30)
    assert rating.performance_score(100, 15) == 90


def test_result_thresholds():
    assert rating.result_for_score(70) == 'win'
    assert rating.result_for_score(69.9) == 'draw'
    assert rating.result_for_score(50) == 'draw'
    assert rating.result_for_score(49) == 'loss'


def test_rank_modifier():
    assert rating.rank_modifier(4160) == 1.0
    assert rating.rank_modifier(9000) == 1.0
    assert rating.rank_modifier(1200) == pytest.approx(2.48)
    assert rating.rank_modifier(-5000) == 3.5


def test_difficulty_modifier_depends_on_rank():
    assert rating.difficulty_modifier('hard', 1200) == 0.8
    assert rating.difficulty_modifier('hard', 2500) == 1.3
    assert rating.difficulty_modifier('easy', 2500) == 0.85
    assert rating.difficulty_modifier('unknown', 1200) == 1.0


def test_streak_modifier():
    assert rating.streak_modifier('win', 10, 0) == 1.5
    assert rating.streak_modifier('win', 3, 0) == 1.1
    assert rating.streak_modifier('loss', 0, 5) == 0.7
    assert rating.streak_modifier('draw', 10, 10) == 1.0


def test_win_capped_at_max_gain():
    # 25 * 1.5 * 0.9 * 2.48 ≈ 84, capped
    outcome = rating.determine_game_outcome(90, 20, 18, 'medium', 1200)
    assert outcome['result'] == 'win'
    assert outcome['elo_change'] == 60
    assert outcome['lp_change'] == 60
    assert outcome['breakdown']['performance_modifier'] == 1.5


def test_loss_change():
    # score 12 + 20 = 32 -> loss; -25 * 0.2 * 0.8 * 2.48 = -9.92
    outcome = rating.determine_game_outcome(20, 10, 2, 'hard', 1200)
    assert outcome['result'] == 'loss'
    assert outcome['elo_change'] == -10


def test_loss_capped_at_max_loss():
    # score 45 -> loss; -25 * 0.6 * 1.0 * 3.08 ≈ -46
    outcome = rating.determine_game_outcome(75, 0, 0, 'easy', 0)
    assert outcome['result'] == 'loss'
    assert outcome['elo_change'] == -30


def test_draw_has_no_change():
    outcome = rating.determine_game_outcome(80, 10, 8, 'medium', 1200)
    assert outcome['result'] == 'draw'
    assert outcome['elo_change'] == 0


def test_invalid_outcome_inputs():
    with pytest.raises(ValueError):
        rating.determine_game_outcome(120, 10, 5, 'easy', 1200)
    with pytest.raises(ValueError):
        rating.determine_game_outcome(50, 5, 6, 'easy', 1200)
    with pytest.raises(ValueError):
        rating.determine_game_outcome(50, -1, 0, 'easy', 1200)


# ---------------------------------------------------------------------------
# Applying results
# ---------------------------------------------------------------------------

def _outcome(result, change, score=80):
    return {'result': result, 'elo_change': change, 'performance_score': score}


def test_apply_win_updates_everything_together():
    start = rating.default_rating()
    updated = rating.apply_game_result(start, _outcome('win', 40), 'tech', 'medium')

    assert updated['current_rating'] == 1240
    assert updated['category_ratings']['tech'] == 1240
    assert updated['peak_rating'] == 1240
    assert updated['games_played'] == 1
    assert updated['wins'] == 1
    assert updated['win_streak'] == 1
    assert updated['best_win_streak'] == 1
    entry = updated['rating_history'][-1]
    assert entry['rating'] == 1240
    assert entry['change'] == 40
    assert entry['category'] == 'tech'
    assert entry['difficulty'] == 'medium'
    assert entry['performance'] == 80
    # Input untouched
    assert start['current_rating'] == 1200
    assert start['rating_history'] == []


def test_apply_loss_resets_win_streak_and_keeps_peak():
    record = rating.default_rating()
    record = rating.apply_game_result(record, _outcome('win', 30), 'tech', 'easy')
    record = rating.apply_game_result(record, _outcome('loss', -20), 'tech', 'easy')
    assert record['win_streak'] == 0
    assert record['loss_streak'] == 1
    assert record['best_win_streak'] == 1
    assert record['peak_rating'] == 1230
    assert record['current_rating'] == 1210


def test_apply_draw_leaves_streaks():
    record = dict(rating.default_rating(), win_streak=2)
    record = rating.apply_game_result(record, _outcome('draw', 0), 'tech', 'easy')
    assert record['draws'] == 1
    assert record['win_streak'] == 2


def test_rating_floors_at_zero():
    record = dict(rating.default_rating(), current_rating=10,
                  category_ratings={'tech': 5})
    record = rating.apply_game_result(record, _outcome('loss', -30), 'tech', 'easy')
    assert record['current_rating'] == 0
    assert record['category_ratings']['tech'] == 0


def test_history_not_truncated():
    record = rating.default_rating()
    for _ in range(120):
        record = rating.apply_game_result(record, _outcome('draw', 0), 'tech', 'easy')
    assert len(record['rating_history']) == 120


# ---------------------------------------------------------------------------
# Derived stats
# ---------------------------------------------------------------------------

def test_win_rate():
    assert rating.win_rate(0, 0) == 0
    assert rating.win_rate(3, 1) == 75


def test_performance_trend():
    now = datetime(2024, 5, 10, tzinfo=timezone.utc)

    def entry(days_ago, value):
        return {'rating': value, 'timestamp': (now - timedelta(days=days_ago)).isoformat()}

    assert rating.performance_trend([entry(3, 1200), entry(1, 1250)], now=now) == \
        {'trend': 'up', 'change': 50}
    assert rating.performance_trend([entry(3, 1200), entry(1, 1170)], now=now)['trend'] == 'down'
    assert rating.performance_trend([entry(3, 1200), entry(1, 1210)], now=now)['trend'] == 'stable'
    # Entries older than the window are ignored
    assert rating.performance_trend([entry(30, 900), entry(1, 1210)], now=now) == \
        {'trend': 'stable', 'change': 0}
    assert rating.performance_trend([], now=now) == {'trend': 'stable', 'change': 0}


def test_difficulty_from_elo():
    assert rating.difficulty_from_elo(1200) == 'medium'
    assert rating.difficulty_from_elo(1850) == 'very_hard'
    assert rating.difficulty_from_elo(500) == 'very_easy'


def test_performance_description():
    assert rating.performance_description(96) == 'Perfect Performance!'
    assert rating.performance_description(10) == 'Better Luck Next Time'
