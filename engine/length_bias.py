"""Answer length bias: detect when the correct option is guessable by length.

Bias score is a fixed lookup on the correct option's length rank:
  longest → 100, shortest → 80, 2nd longest → 60, 3rd longest → 40, else 20.
A question counts as fixed once its recomputed score drops below 50.
"""
import logging
import math
import random

from config.settings import (
    LENGTH_DEFAULTS, PADDING_STRATEGIES, TRUNCATION_STRATEGIES,
    SEVERE_BIAS_THRESHOLD, FIXED_BIAS_THRESHOLD,
)

logger = logging.getLogger(__name__)

ELLIPSIS = '...'
FILLER_WORDS = ['and', 'or', 'with', 'for', 'in', 'on', 'at', 'by']
MIN_RANDOMIZED_LENGTH = 5


def require_options(question):
    if not isinstance(question, dict):
        raise TypeError(f'question must be a dict, got {type(question).__name__}')
    options = question.get('options')
    if not isinstance(options, (list, tuple)):
        raise TypeError('Invalid question: options is not a list')
    if not options:
        raise ValueError('Invalid question: options is empty')
    correct = question.get('correct_answer')
    if not isinstance(correct, int) or isinstance(correct, bool) or not 0 <= correct < len(options):
        raise ValueError(f'Invalid question: correct_answer {correct!r} out of range')
    return options


def analyze_length_bias(question):
    """Length report for one question.

    correct_position is the correct option's rank by length (0 = longest).
    """
    options = require_options(question)
    lengths = [len(opt) for opt in options]
    correct_length = lengths[question['correct_answer']]
    max_length = max(lengths)
    min_length = min(lengths)
    correct_position = sorted(lengths, reverse=True).index(correct_length)

    if correct_length == max_length:
        score = 100
    elif correct_length == min_length:
        score = 80
    elif correct_position == 1:
        score = 60
    elif correct_position == 2:
        score = 40
    else:
        score = 20

    return {
        'question_id': question.get('id'),
        'lengths': lengths,
        'correct_length': correct_length,
        'max_length': max_length,
        'min_length': min_length,
        'correct_position': correct_position,
        'is_longest': correct_length == max_length,
        'is_shortest': correct_length == min_length,
        'bias_score': score,
    }


def analyze_length_bias_patterns(questions):
    """Aggregate bias statistics over a question set."""
    analyses = [analyze_length_bias(q) for q in questions]
    total = len(analyses)
    if total == 0:
        return {
            'total_questions': 0,
            'longest_bias_count': 0,
            'shortest_bias_count': 0,
            'longest_bias_percentage': 0.0,
            'shortest_bias_percentage': 0.0,
            'average_bias_score': 0.0,
            'severe_bias_count': 0,
        }
    longest = sum(1 for a in analyses if a['is_longest'])
    shortest = sum(1 for a in analyses if a['is_shortest'])
    return {
        'total_questions': total,
        'longest_bias_count': longest,
        'shortest_bias_count': shortest,
        'longest_bias_percentage': longest / total * 100,
        'shortest_bias_percentage': shortest / total * 100,
        'average_bias_score': sum(a['bias_score'] for a in analyses) / total,
        'severe_bias_count': sum(1 for a in analyses
                                 if a['bias_score'] > SEVERE_BIAS_THRESHOLD),
    }


def length_config(config=None):
    """Merge a partial normalization config over the defaults and validate it."""
    merged = dict(LENGTH_DEFAULTS)
    for key, value in (config or {}).items():
        if key not in LENGTH_DEFAULTS:
            raise ValueError(f'Unknown length normalization option: {key}')
        merged[key] = value
    if merged['padding_strategy'] not in PADDING_STRATEGIES:
        raise ValueError(f"Unknown padding strategy: {merged['padding_strategy']}")
    if merged['truncation_strategy'] not in TRUNCATION_STRATEGIES:
        raise ValueError(f"Unknown truncation strategy: {merged['truncation_strategy']}")
    if merged['target_length'] <= len(ELLIPSIS) or merged['tolerance'] < 0:
        raise ValueError('target_length must exceed the ellipsis and tolerance be >= 0')
    return merged


def pad_answer(answer, target_length, strategy='spaces'):
    needed = target_length - len(answer)
    if needed <= 0:
        return answer

    if strategy == 'words':
        padded = answer
        for word in FILLER_WORDS:
            if len(padded) >= target_length:
                break
            if len(padded) + len(word) + 1 <= target_length:
                padded += ' ' + word
        if len(padded) < target_length:
            padded += ' ' * (target_length - len(padded))
        return padded

    if strategy == 'ellipsis':
        return answer + '.' * min(needed, 3)

    return answer + ' ' * needed


def truncate_answer(answer, target_length, strategy='smart', preserve_meaning=True):
    """Shorten answer to about target_length; the result always carries '...'."""
    if len(answer) <= target_length:
        return answer

    if strategy == 'middle':
        start = target_length // 2 - 2
        end = target_length // 2 + 2
        return answer[:start] + ELLIPSIS + answer[len(answer) - end:]

    if strategy == 'smart' and preserve_meaning:
        budget = target_length - len(ELLIPSIS)
        result = ''
        for word in answer.split(' '):
            if len(result) + len(word) + 1 <= budget:
                result += (' ' if result else '') + word
            else:
                break
        return result + ELLIPSIS

    return answer[:target_length - len(ELLIPSIS)] + ELLIPSIS


def normalize_answer_lengths(question, config=None):
    """Return a copy of question with every option pulled into target ± tolerance."""
    options = require_options(question)
    cfg = length_config(config)
    lo = cfg['target_length'] - cfg['tolerance']
    hi = cfg['target_length'] + cfg['tolerance']

    normalized = []
    for option in options:
        if len(option) < lo:
            option = pad_answer(option, cfg['target_length'], cfg['padding_strategy'])
        elif len(option) > hi:
            option = truncate_answer(option, cfg['target_length'],
                                     cfg['truncation_strategy'], cfg['preserve_meaning'])
        normalized.append(option)

    result = dict(question)
    result['options'] = normalized
    return result


def randomize_answer_lengths(options, rand=None):
    """Perturb each option's length by -2..+2 characters (minimum 5).

    Lighter than full normalization: pads with spaces or truncates with '...'.
    """
    if not isinstance(options, (list, tuple)):
        raise TypeError('Invalid options: must be a list of strings')
    rand = rand or random.random

    randomized = []
    for option in options:
        variation = math.floor(rand() * 5) - 2
        target = max(MIN_RANDOMIZED_LENGTH, len(option) + variation)
        if len(option) < target:
            option = option + ' ' * (target - len(option))
        elif len(option) > target:
            option = option[:target - len(ELLIPSIS)] + ELLIPSIS
        randomized.append(option)
    return randomized


def has_severe_length_bias(question):
    return analyze_length_bias(question)['bias_score'] > SEVERE_BIAS_THRESHOLD


def validate_length_bias_fix(question):
    return analyze_length_bias(question)['bias_score'] < FIXED_BIAS_THRESHOLD


def length_bias_recommendations(question):
    analysis = analyze_length_bias(question)
    recommendations = []
    if analysis['is_longest']:
        recommendations.append(
            'Correct answer is longest - consider shortening or lengthening other options')
    if analysis['is_shortest']:
        recommendations.append(
            'Correct answer is shortest - consider lengthening or shortening other options')
    if analysis['bias_score'] > 80:
        recommendations.append('SEVERE bias detected - immediate normalization required')
    elif analysis['bias_score'] > 60:
        recommendations.append('Moderate bias detected - consider normalization')
    if analysis['max_length'] - analysis['min_length'] > 20:
        recommendations.append(
            'Large length variation detected - consider standardizing lengths')
    return recommendations
