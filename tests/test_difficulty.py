"""Tests for engine/difficulty.py."""
import pytest

from engine.difficulty import (
    DifficultyController, difficulty_level, question_difficulty_for, skill_for_difficulty,
)


def test_fresh_controller_defaults():
    c = DifficultyController()
    assert c.current_challenge == 0.5
    assert c.recent_accuracy() == 0.5
    assert c.performance_trend() == 'stable'


def test_high_accuracy_increases_monotonically():
    """Ten samples of 0.95 raise the challenge and never lower it."""
    c = DifficultyController()
    previous = c.current_challenge
    reasons = []
    for _ in range(10):
        result = c.update_performance(0.95)
        assert result['new_difficulty'] >= previous
        previous = result['new_difficulty']
        reasons.append(result['adjustment_reason'])
    assert 'increase' in reasons
    assert 'decrease' not in reasons
    assert c.current_challenge == 1.0


def test_first_sample_confidence():
    """One sample: zero variance, sample ratio 0.1 -> 0.73."""
    c = DifficultyController()
    result = c.update_performance(0.95)
    assert result['confidence'] == pytest.approx(0.73)
    assert result['adjustment_reason'] == 'increase'
    assert result['new_difficulty'] == 0.6


def test_low_accuracy_decreases():
    c = DifficultyController(0.5)
    result = c.update_performance(0.1)
    assert result['adjustment_reason'] == 'decrease'
    assert result['new_difficulty'] == 0.4


def test_challenge_floors_at_zero():
    c = DifficultyController(0.0)
    assert c.update_performance(0.0)['new_difficulty'] == 0.0


def test_mixed_results_maintain():
    """Mixed results stay inside the flow zone."""
    c = DifficultyController()
    for value in (0.6, 1.0, 0.0, 1.0, 0.0):
        result = c.update_performance(value)
    assert result['adjustment_reason'] == 'maintain'
    assert c.current_challenge == 0.5


def test_window_keeps_last_ten():
    c = DifficultyController()
    for _ in range(10):
        c.update_performance(0.0)
    for _ in range(10):
        c.update_performance(1.0)
    assert len(c.performance_history) == 10
    assert c.recent_accuracy() == 1.0


def test_confidence_formula():
    c = DifficultyController()
    for value in (1.0, 0.0):
        c.performance_history.append(value)
    # variance 0.25 -> 0.75 * 0.7 + 0.2 * 0.3
    assert c.calculate_confidence() == pytest.approx(0.585)


def test_trend_needs_six_samples():
    c = DifficultyController()
    for value in (0.0, 0.0, 1.0, 1.0, 1.0):
        c.performance_history.append(value)
    assert c.performance_trend() == 'stable'


def test_trend_improving_and_declining():
    c = DifficultyController()
    c.performance_history.extend([0.2, 0.2, 0.2, 0.8, 0.8, 0.8])
    assert c.performance_trend() == 'improving'
    c.performance_history.extend([0.2, 0.2, 0.2])
    assert c.performance_trend() == 'declining'


def test_invalid_accuracy_rejected():
    c = DifficultyController()
    with pytest.raises(ValueError):
        c.update_performance(1.5)
    with pytest.raises(ValueError):
        c.update_performance(None)
    assert len(c.performance_history) == 0


def test_flow_state_in_zone():
    c = DifficultyController()
    c.performance_history.extend([0.6, 0.6])
    flow = c.flow_state()
    assert flow['is_in_flow'] is True
    assert flow['flow_score'] == 100
    assert "optimal learning zone" in flow['recommendations'][0]


def test_flow_state_out_of_zone():
    c = DifficultyController()
    c.performance_history.extend([1.0, 1.0])
    flow = c.flow_state()
    assert flow['is_in_flow'] is False
    assert flow['flow_score'] == 0
    assert 'challenging' in flow['recommendations'][0]

    c.performance_history.clear()
    c.performance_history.extend([0.3])
    flow = c.flow_state()
    assert flow['flow_score'] == 25
    assert 'easier' in flow['recommendations'][0]


def test_reset_only_on_request():
    c = DifficultyController()
    for _ in range(5):
        c.update_performance(1.0)
    c.reset(0.3)
    assert c.current_challenge == 0.3
    assert len(c.performance_history) == 0
    c.reset()
    assert c.current_challenge == 0.5


def test_to_dict_round_trip():
    c = DifficultyController(0.7)
    c.update_performance(0.9)
    restored = DifficultyController.from_dict(c.to_dict())
    assert restored.current_challenge == c.current_challenge
    assert list(restored.performance_history) == [0.9]
    assert restored.adjustment_count == 1


def test_from_dict_empty():
    assert DifficultyController.from_dict(None).current_challenge == 0.5


def test_difficulty_recommendations():
    c = DifficultyController(0.2)
    rec = c.difficulty_recommendations()
    assert rec['current_level'] == 'Beginner'
    assert rec['next_level'] == 'Easy'
    assert rec["message"].startswith("Perfect difficulty")


def test_label_and_tier_mapping():
    assert difficulty_level(0.1) == 'Beginner'
    assert difficulty_level(0.95) == 'Expert'
    assert question_difficulty_for(0.3) == 'easy'
    assert question_difficulty_for(0.5) == 'medium'
    assert question_difficulty_for(0.8) == 'hard'
    assert skill_for_difficulty('hard') == 0.7
    assert skill_for_difficulty('easy') == 0.3
