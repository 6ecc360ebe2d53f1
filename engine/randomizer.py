"""Question and answer randomization with bias tracking.

- Fisher-Yates shuffle drives both option order and question order.
- Answer positions are shuffled as an index permutation applied to the
  options and the correct index together; the correct option is never
  looked up by its text.
- QuestionPool rotates through a bank without repeats until exhausted.
- PositionAnalytics tallies where correct answers land (4 buckets) and
  flags any bucket above 40% of the running total.
"""
import logging
import math
import random
import time
from collections import deque

from config.settings import (
    RANDOMIZATION_DEFAULTS, RANDOMIZATION_STRATEGIES, DIFFICULTIES,
    POSITION_BIAS_THRESHOLD, POSITION_MIN_SAMPLES, FIXED_BIAS_THRESHOLD,
)
from engine import length_bias

logger = logging.getLogger(__name__)

POSITIONS = 4
RECENT_POSITIONS = 50
LENGTH_FIX_ATTEMPTS = 3


class SeededRandom:
    """Linear congruential generator for reproducible runs.

    seed = (seed * 1664525 + 1013904223) mod 2^32, output seed / 2^32.
    """

    MODULUS = 2 ** 32

    def __init__(self, seed=None):
        if seed is None:
            seed = int(time.time() * 1000)
        self.seed = int(seed) % self.MODULUS

    def next(self):
        self.seed = (self.seed * 1664525 + 1013904223) % self.MODULUS
        return self.seed / self.MODULUS

    def next_int(self, upper):
        return math.floor(self.next() * upper)


def make_random(seed=None):
    """Uniform source in [0, 1): seeded LCG when seed is given, else random.random."""
    if seed is None:
        return random.random
    return SeededRandom(seed).next


def randomization_config(config=None):
    """Merge a partial randomization config over the defaults and validate it."""
    merged = dict(RANDOMIZATION_DEFAULTS)
    for key, value in (config or {}).items():
        if key not in RANDOMIZATION_DEFAULTS:
            raise ValueError(f'Unknown randomization option: {key}')
        merged[key] = value
    if merged['strategy'] not in RANDOMIZATION_STRATEGIES:
        raise ValueError(f"Unknown randomization strategy: {merged['strategy']}")
    return merged


def fisher_yates_shuffle(items, rand=None):
    """Return a uniformly shuffled copy of items."""
    rand = rand or random.random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = math.floor(rand() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def _require_question_list(questions):
    if questions is None or isinstance(questions, (str, bytes, dict)):
        raise TypeError('questions must be a list of question dicts')
    try:
        return list(questions)
    except TypeError as e:
        raise TypeError('questions must be a list of question dicts') from e


# --- Answer positions ---

def randomize_answer_positions(question, config=None, rand=None, analytics=None):
    """Shuffle a question's options, tracking the correct answer by index.

    Args:
        question: dict with options (list) and correct_answer (int)
        config: partial randomization config
        rand: uniform source; defaults to one built from config['seed']
        analytics: PositionAnalytics to record the new correct position

    Returns a new dict with randomization metadata (original_correct_answer,
    was_randomized, randomized_at); the input is not modified.
    """
    cfg = randomization_config(config)
    options = length_bias.require_options(question)
    original_correct = question['correct_answer']

    if len(set(options)) != len(options):
        logger.warning('Question %s has duplicate option text; correct answer '
                       'tracked by index', question.get('id'))

    randomized = dict(question)
    randomized['original_correct_answer'] = original_correct
    randomized['randomized_at'] = int(time.time() * 1000)

    if not cfg['randomize_answers']:
        randomized['options'] = list(options)
        randomized['was_randomized'] = False
        return randomized

    rand = rand or make_random(cfg['seed'])
    permutation = fisher_yates_shuffle(range(len(options)), rand)
    randomized['options'] = [options[i] for i in permutation]
    randomized['correct_answer'] = permutation.index(original_correct)
    randomized['was_randomized'] = True

    if cfg['prevent_length_bias']:
        randomized = correct_length_bias(randomized, rand)

    if cfg['track_analytics'] and analytics is not None:
        analytics.record(randomized['correct_answer'])

    return randomized


def correct_length_bias(question, rand=None):
    """Perturb option lengths when the correct answer stands out by length.

    Retries a few times from the original options; keeps the last attempt
    even if the bias could not be removed.
    """
    analysis = length_bias.analyze_length_bias(question)
    if analysis['bias_score'] <= FIXED_BIAS_THRESHOLD:
        return question

    fixed = dict(question)
    for _ in range(LENGTH_FIX_ATTEMPTS):
        fixed['options'] = length_bias.randomize_answer_lengths(question['options'], rand)
        if length_bias.validate_length_bias_fix(fixed):
            logger.debug('Length bias fixed for question %s', question.get('id'))
            return fixed
    logger.info('Length bias persists for question %s (score %d)',
                question.get('id'), length_bias.analyze_length_bias(fixed)['bias_score'])
    return fixed


# --- Question order and selection ---

def randomize_question_order(questions, config=None, rand=None):
    cfg = randomization_config(config)
    questions = _require_question_list(questions)
    if not cfg['randomize_questions']:
        return questions
    return fisher_yates_shuffle(questions, rand or make_random(cfg['seed']))


def _tier_distance(question, target_difficulty):
    try:
        return abs(DIFFICULTIES.index(question.get('difficulty'))
                   - DIFFICULTIES.index(target_difficulty))
    except ValueError:
        return len(DIFFICULTIES)


def _weighted_choice(candidates, weights, rand):
    total = sum(weights)
    point = rand() * total
    cumulative = 0.0
    for candidate, weight in zip(candidates, weights):
        cumulative += weight
        if point < cumulative:
            return candidate
    return candidates[-1]


def select_question(candidates, config=None, rand=None, target_difficulty=None):
    """Pick one question according to the configured strategy.

    shuffle:  first of a shuffled copy
    weighted: weight 1 / (1 + tier distance to target_difficulty)
    adaptive: uniform among questions at target_difficulty, else all
    """
    cfg = randomization_config(config)
    candidates = _require_question_list(candidates)
    if not candidates:
        raise ValueError('Cannot select a question from an empty list')
    rand = rand or make_random(cfg['seed'])

    strategy = cfg['strategy']
    if strategy == 'weighted' and target_difficulty:
        weights = [1.0 / (1 + _tier_distance(q, target_difficulty)) for q in candidates]
        return _weighted_choice(candidates, weights, rand)
    if strategy == 'adaptive' and target_difficulty:
        matching = [q for q in candidates if q.get('difficulty') == target_difficulty]
        pool = matching or candidates
        return pool[math.floor(rand() * len(pool))]
    if strategy == 'shuffle' and cfg['randomize_questions']:
        return fisher_yates_shuffle(candidates, rand)[0]
    return candidates[math.floor(rand() * len(candidates))]


def get_random_question(questions, config=None, rand=None, analytics=None,
                        target_difficulty=None):
    cfg = randomization_config(config)
    rand = rand or make_random(cfg['seed'])
    selected = select_question(questions, cfg, rand, target_difficulty)
    return randomize_answer_positions(selected, cfg, rand, analytics)


def batch_randomize_questions(questions, config=None, rand=None, analytics=None):
    """Shuffle question order, then each question's answer positions."""
    cfg = randomization_config(config)
    rand = rand or make_random(cfg['seed'])
    ordered = randomize_question_order(questions, cfg, rand)
    return [randomize_answer_positions(q, cfg, rand, analytics) for q in ordered]


class QuestionPool:
    """Rotation over a fixed bank: no repeats until every question was drawn."""

    def __init__(self, questions, config=None, rand=None, analytics=None, used_ids=None):
        self.questions = _require_question_list(questions)
        self.config = randomization_config(config)
        self.rand = rand or make_random(self.config['seed'])
        self.analytics = analytics
        self.used_ids = set(used_ids or ())

    def get_next(self, target_difficulty=None):
        if not self.questions:
            raise ValueError('Cannot draw from an empty question pool')

        if all(q['id'] in self.used_ids for q in self.questions):
            logger.info('Question pool exhausted (%d questions), resetting',
                        len(self.questions))
            self.used_ids.clear()

        unused = [q for q in self.questions if q['id'] not in self.used_ids]
        if not unused:
            fallback = self.questions[math.floor(self.rand() * len(self.questions))]
            return randomize_answer_positions(fallback, self.config, self.rand, self.analytics)

        if self.config['strategy'] == 'shuffle':
            selected = unused[math.floor(self.rand() * len(unused))]
        else:
            selected = select_question(unused, self.config, self.rand, target_difficulty)
        self.used_ids.add(selected['id'])
        return randomize_answer_positions(selected, self.config, self.rand, self.analytics)

    def reset(self):
        self.used_ids.clear()

    def stats(self):
        total = len(self.questions)
        used = len({q['id'] for q in self.questions} & self.used_ids)
        return {
            'total_questions': total,
            'used_questions': used,
            'remaining_questions': total - used,
            'usage_percentage': used / total * 100 if total else 0.0,
        }


class PositionAnalytics:
    """Running tally of correct-answer positions."""

    def __init__(self, counts=None, total=0, recent=None, last_updated=None):
        self.counts = list(counts) if counts else [0] * POSITIONS
        self.total = total
        self.recent = deque(recent or (), maxlen=RECENT_POSITIONS)
        self.last_updated = last_updated

    def record(self, position):
        if not 0 <= position < POSITIONS:
            raise ValueError(f'Answer position {position} outside 0-{POSITIONS - 1}')
        self.counts[position] += 1
        self.total += 1
        self.recent.append(position)
        self.last_updated = int(time.time() * 1000)
        if self.bias_detected():
            logger.debug('Position bias: distribution %s over %d', self.counts, self.total)

    def percentages(self):
        if self.total == 0:
            return [0.0] * POSITIONS
        return [count / self.total * 100 for count in self.counts]

    def bias_detected(self):
        return any(p > POSITION_BIAS_THRESHOLD for p in self.percentages())

    def recent_bias_detected(self):
        if not self.recent:
            return False
        share = max(list(self.recent).count(p) for p in range(POSITIONS)) / len(self.recent)
        return share * 100 > POSITION_BIAS_THRESHOLD

    def is_valid(self):
        """Acceptable once 20+ samples exist and no bucket exceeds 40%."""
        if self.total < POSITION_MIN_SAMPLES:
            return False
        return all(p <= POSITION_BIAS_THRESHOLD for p in self.percentages())

    def reset(self):
        self.counts = [0] * POSITIONS
        self.total = 0
        self.recent.clear()
        self.last_updated = None

    def to_dict(self):
        return {
            'total_questions': self.total,
            'answer_position_distribution': {
                f'position{i}': count for i, count in enumerate(self.counts)
            },
            'recent_positions': list(self.recent),
            'last_updated': self.last_updated,
            'bias_detected': self.bias_detected(),
        }

    @classmethod
    def from_dict(cls, data):
        if not data:
            return cls()
        distribution = data.get('answer_position_distribution') or {}
        counts = [distribution.get(f'position{i}', 0) for i in range(POSITIONS)]
        return cls(counts, data.get('total_questions', sum(counts)),
                   data.get('recent_positions'), data.get('last_updated'))


# --- Bank maintenance ---

def rebalance_answer_positions(questions):
    """Return copies whose correct answers cycle evenly through positions 0-3.

    The correct option is swapped into its target slot so the option text
    and correct index stay consistent.
    """
    questions = _require_question_list(questions)
    total = len(questions)
    base, remainder = divmod(total, POSITIONS)
    targets = [base + (1 if i < remainder else 0) for i in range(POSITIONS)]
    assigned = [0] * POSITIONS

    rebalanced = []
    for question in questions:
        options = list(length_bias.require_options(question))
        target = next(i for i in range(POSITIONS) if assigned[i] < targets[i])
        assigned[target] += 1
        current = question['correct_answer']
        options[target], options[current] = options[current], options[target]
        moved = dict(question)
        moved['options'] = options
        moved['correct_answer'] = target
        rebalanced.append(moved)

    logger.info('Rebalanced %d questions to distribution %s', total, assigned)
    return rebalanced


def answer_distribution(questions):
    counts = [0] * POSITIONS
    for question in questions:
        counts[question['correct_answer']] += 1
    return counts


def validate_answer_distribution(questions, max_share=35.0):
    """True when no position holds more than max_share percent of answers."""
    questions = _require_question_list(questions)
    if not questions:
        return True
    counts = answer_distribution(questions)
    shares = [c / len(questions) * 100 for c in counts]
    logger.info('Answer distribution %s (max %.1f%%)', counts, max(shares))
    return max(shares) <= max_share
