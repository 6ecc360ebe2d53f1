"""One-time baseline assessment: pick questions, grade, seed ratings.

Per category: rating = clamp(1200 + (accuracy - 50) / 10 * 100, 800, 1600).
Overall accuracy ≥ 80 → hard, ≥ 60 → medium, else easy.
"""
import logging

from config.settings import BASELINE_DEFAULTS
from engine import rating as rating_engine
from engine.randomizer import fisher_yates_shuffle, make_random

logger = logging.getLogger(__name__)

DEFAULT_OVERALL_ACCURACY = 50.0


def generate_baseline_test(bank, interests, questions_per_category=None, rand=None):
    """Pick up to N medium questions per interest, categories interleaved.

    Args:
        bank: {category: {difficulty: [question, ...]}}
        interests: categories the player selected
        questions_per_category: defaults to 5
        rand: uniform source for both shuffles

    Returns a list of question dicts, each tagged with its category.
    """
    if interests is None or isinstance(interests, str):
        raise TypeError('interests must be a list of categories')
    per_category = questions_per_category or BASELINE_DEFAULTS['questions_per_category']
    if per_category < 1:
        raise ValueError('questions_per_category must be at least 1')
    rand = rand or make_random()
    difficulty = BASELINE_DEFAULTS['difficulty']

    selected = []
    for category in interests:
        candidates = (bank.get(category) or {}).get(difficulty) or []
        if not candidates:
            logger.info('Baseline: no %s questions for category %s', difficulty, category)
            continue
        for question in fisher_yates_shuffle(candidates, rand)[:per_category]:
            tagged = dict(question)
            tagged['category'] = category
            selected.append(tagged)

    return fisher_yates_shuffle(selected, rand)


def calculate_baseline_elo(category_scores):
    """Seed rating per category; categories with no questions get 1200."""
    ratings = {}
    for category, scores in category_scores.items():
        if not scores.get('total'):
            ratings[category] = rating_engine.STARTING_RATING
            continue
        accuracy = scores['correct'] / scores['total'] * 100
        ratings[category] = rating_engine.baseline_rating(accuracy)
    return ratings


def recommended_difficulty(overall_accuracy):
    if overall_accuracy >= 80:
        return 'hard'
    if overall_accuracy >= 60:
        return 'medium'
    return 'easy'


def calculate_baseline_results(questions, answers):
    """Grade a baseline test.

    Args:
        questions: list of question dicts with category and correct_answer
        answers: chosen option index per question (None = unanswered)

    Returns dict: category_scores, overall_accuracy, recommended_elo,
    recommended_difficulty, total_questions, total_correct.
    """
    if questions is None or answers is None:
        raise TypeError('questions and answers are required')
    questions = list(questions)
    answers = list(answers)
    if len(answers) != len(questions):
        raise ValueError(f'Expected {len(questions)} answers, got {len(answers)}')

    category_scores = {}
    total_correct = 0
    for question, answer in zip(questions, answers):
        category = question.get('category')
        if not category:
            raise ValueError(f"Question {question.get('id')} has no category")
        scores = category_scores.setdefault(category, {'correct': 0, 'total': 0, 'accuracy': 0.0})
        scores['total'] += 1
        if answer == question['correct_answer']:
            scores['correct'] += 1
            total_correct += 1

    for scores in category_scores.values():
        scores['accuracy'] = scores['correct'] / scores['total'] * 100

    if questions:
        overall = total_correct / len(questions) * 100
    else:
        overall = DEFAULT_OVERALL_ACCURACY

    return {
        'category_scores': category_scores,
        'overall_accuracy': overall,
        'recommended_elo': calculate_baseline_elo(category_scores),
        'recommended_difficulty': recommended_difficulty(overall),
        'total_questions': len(questions),
        'total_correct': total_correct,
    }
