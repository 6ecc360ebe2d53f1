"""Adaptive difficulty: keep the player inside the flow zone.

A rolling window of the last 10 accuracy samples drives three transitions:
  recent > 0.8 and confidence > 0.7  → challenge + 0.1 (increase)
  recent < 0.4 and confidence > 0.7  → challenge - 0.1 (decrease)
  otherwise                          → maintain

confidence = 0.7 * max(0, 1 - variance) + 0.3 * min(1, len(window) / 10)
flow score = round((1 - min(|recent - 0.6| / 0.4, 1)) * 100)
"""
import logging
from collections import deque
from datetime import datetime, timezone

from config.settings import DIFFICULTY_DEFAULTS

logger = logging.getLogger(__name__)

WINDOW = DIFFICULTY_DEFAULTS['performance_window']
FLOW_MIN = DIFFICULTY_DEFAULTS['flow_zone_min']
FLOW_MAX = DIFFICULTY_DEFAULTS['flow_zone_max']
STEP = DIFFICULTY_DEFAULTS['adjustment_step']
MIN_CONFIDENCE = DIFFICULTY_DEFAULTS['min_confidence']
OPTIMAL_ACCURACY = DIFFICULTY_DEFAULTS['optimal_accuracy']
TREND_WINDOW = DIFFICULTY_DEFAULTS['trend_window']
TREND_THRESHOLD = DIFFICULTY_DEFAULTS['trend_threshold']
MAX_FLOW_DISTANCE = 0.4

INCREASE = 'increase'
DECREASE = 'decrease'
MAINTAIN = 'maintain'


def _mean(values):
    return sum(values) / len(values)


def _variance(values):
    if not values:
        return 0.0
    m = _mean(values)
    return sum((v - m) ** 2 for v in values) / len(values)


def _check_unit(name, value):
    if value is None or isinstance(value, bool) or not 0.0 <= value <= 1.0:
        raise ValueError(f'{name} must be within [0, 1], got {value!r}')
    return float(value)


class DifficultyController:
    """Per-player difficulty state machine over current_challenge in [0, 1]."""

    def __init__(self, skill_level=None):
        self.reset(skill_level)

    def reset(self, skill_level=None):
        """Reinitialize with an empty window; challenge = skill_level or 0.5."""
        level = DIFFICULTY_DEFAULTS['initial_skill'] if skill_level is None else skill_level
        level = _check_unit('skill_level', level)
        self.user_skill_level = level
        self.current_challenge = level
        self.performance_history = deque(maxlen=WINDOW)
        self.confidence = 0.5
        self.adjustment_count = 0
        self.last_adjustment = datetime.now(timezone.utc).isoformat()

    # --- Window statistics ---

    def recent_accuracy(self):
        if not self.performance_history:
            return 0.5
        return _mean(self.performance_history)

    def calculate_confidence(self):
        window = list(self.performance_history)
        consistency = max(0.0, 1.0 - _variance(window))
        sample_ratio = min(1.0, len(window) / WINDOW)
        return consistency * 0.7 + sample_ratio * 0.3

    def performance_trend(self):
        """Compare the last 3 samples with the 3 before them."""
        window = list(self.performance_history)
        if len(window) < TREND_WINDOW * 2:
            return 'stable'
        recent = window[-TREND_WINDOW:]
        older = window[-TREND_WINDOW * 2:-TREND_WINDOW]
        difference = _mean(recent) - _mean(older)
        if difference > TREND_THRESHOLD:
            return 'improving'
        if difference < -TREND_THRESHOLD:
            return 'declining'
        return 'stable'

    # --- Transitions ---

    def update_performance(self, accuracy, response_time=None, streak=None,
                           questions_answered=None):
        """Record one accuracy sample and move current_challenge.

        Returns dict: new_difficulty, adjustment_reason, confidence,
        performance_trend, recent_accuracy.
        """
        self.performance_history.append(_check_unit('accuracy', accuracy))

        recent = self.recent_accuracy()
        confidence = self.calculate_confidence()
        trend = self.performance_trend()

        if recent > FLOW_MAX and confidence > MIN_CONFIDENCE:
            new_difficulty = min(1.0, round(self.current_challenge + STEP, 10))
            reason = INCREASE
        elif recent < FLOW_MIN and confidence > MIN_CONFIDENCE:
            new_difficulty = max(0.0, round(self.current_challenge - STEP, 10))
            reason = DECREASE
        else:
            new_difficulty = self.current_challenge
            reason = MAINTAIN

        if reason != MAINTAIN:
            logger.info('Difficulty %s: %.2f -> %.2f (recent=%.2f conf=%.2f)',
                        reason, self.current_challenge, new_difficulty,
                        recent, confidence)
        else:
            logger.debug('Difficulty maintained at %.2f (recent=%.2f conf=%.2f)',
                         self.current_challenge, recent, confidence)

        self.current_challenge = new_difficulty
        self.confidence = confidence
        self.adjustment_count += 1
        self.last_adjustment = datetime.now(timezone.utc).isoformat()

        return {
            'new_difficulty': new_difficulty,
            'adjustment_reason': reason,
            'confidence': confidence,
            'performance_trend': trend,
            'recent_accuracy': recent,
        }

    # --- Flow state ---

    def flow_state(self):
        recent = self.recent_accuracy()
        in_flow = FLOW_MIN <= recent <= FLOW_MAX
        distance = min(abs(recent - OPTIMAL_ACCURACY) / MAX_FLOW_DISTANCE, 1)
        flow_score = round((1 - distance) * 100)

        if in_flow:
            recommendations = ["Great! You're in the optimal learning zone",
                               'Keep up the momentum']
        elif recent < FLOW_MIN:
            recommendations = ['Consider easier questions to build confidence',
                               'Take breaks between sessions']
        else:
            recommendations = ['Try more challenging questions',
                               'Explore advanced topics']

        return {
            'is_in_flow': in_flow,
            'flow_score': flow_score,
            'optimal_zone': in_flow,
            'recent_accuracy': recent,
            'recommendations': recommendations,
        }

    def difficulty_recommendations(self):
        challenge = self.current_challenge
        if challenge < 0.3:
            current, upcoming, progress = 'Beginner', 'Easy', challenge / 0.3
        elif challenge < 0.6:
            current, upcoming, progress = 'Easy', 'Medium', (challenge - 0.3) / 0.3
        elif challenge < 0.8:
            current, upcoming, progress = 'Medium', 'Hard', (challenge - 0.6) / 0.2
        else:
            current, upcoming, progress = 'Hard', 'Expert', (challenge - 0.8) / 0.2

        if self.flow_state()['is_in_flow']:
            message = "Perfect difficulty! You're learning optimally."
        elif self.performance_history:
            if self.recent_accuracy() < FLOW_MIN:
                message = 'Questions might be too challenging. Consider easier content.'
            else:
                message = "You're doing great! Ready for more challenging questions?"
        else:
            message = "Let's find your optimal learning level!"

        return {
            'current_level': current,
            'next_level': upcoming,
            'progress': round(progress * 100),
            'message': message,
        }

    # --- Persistence shape ---

    def to_dict(self):
        return {
            'user_skill_level': self.user_skill_level,
            'current_challenge': self.current_challenge,
            'performance_history': list(self.performance_history),
            'optimal_flow_zone': {'min': FLOW_MIN, 'max': FLOW_MAX},
            'confidence': self.confidence,
            'adjustment_count': self.adjustment_count,
            'last_adjustment': self.last_adjustment,
        }

    @classmethod
    def from_dict(cls, data):
        """Rebuild from a stored profile; None or empty gives a fresh controller."""
        controller = cls()
        if not data:
            return controller
        controller.user_skill_level = _check_unit(
            'user_skill_level', data.get('user_skill_level', controller.user_skill_level))
        controller.current_challenge = _check_unit(
            'current_challenge', data.get('current_challenge', controller.current_challenge))
        controller.performance_history = deque(
            (_check_unit('accuracy', v) for v in data.get('performance_history', [])),
            maxlen=WINDOW,
        )
        controller.confidence = data.get('confidence', controller.confidence)
        controller.adjustment_count = data.get('adjustment_count', 0)
        controller.last_adjustment = data.get('last_adjustment', controller.last_adjustment)
        return controller


def difficulty_level(challenge):
    """Human-readable label for a challenge value."""
    if challenge < 0.25:
        return 'Beginner'
    if challenge < 0.5:
        return 'Easy'
    if challenge < 0.75:
        return 'Medium'
    if challenge < 0.9:
        return 'Hard'
    return 'Expert'


def question_difficulty_for(challenge):
    """Map a challenge value onto the bank's easy/medium/hard tiers."""
    if challenge < 0.5:
        return 'easy'
    if challenge < 0.75:
        return 'medium'
    return 'hard'


def skill_for_difficulty(difficulty):
    """Starting challenge for a recommended baseline difficulty."""
    return {'easy': 0.3, 'medium': 0.5, 'hard': 0.7}.get(difficulty, 0.5)
