"""Loading the buzzword question bank from JSON into the questions table."""
import json
import logging

from config.settings import QUESTION_BANK_PATH, CATEGORIES, DIFFICULTIES
from engine.length_bias import require_options
from models import question as question_model

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('id', 'category', 'difficulty', 'buzzword', 'definition',
                   'options', 'correct_answer')
OPTION_COUNT = 4


def load_bank_file(path=None):
    """Read and validate question dicts from a JSON bank file.

    Accepts either a bare list or {"questions": [...]}.
    """
    path = path or QUESTION_BANK_PATH
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    questions = data.get('questions', []) if isinstance(data, dict) else data
    for q in questions:
        validate_question(q)
    return questions


def validate_question(question):
    missing = [f for f in REQUIRED_FIELDS if f not in question]
    if missing:
        raise ValueError(f"Question {question.get('id')} missing fields: {missing}")
    if question['category'] not in CATEGORIES:
        raise ValueError(f"Question {question['id']} has unknown category "
                         f"{question['category']!r}")
    if question['difficulty'] not in DIFFICULTIES:
        raise ValueError(f"Question {question['id']} has unknown difficulty "
                         f"{question['difficulty']!r}")
    options = require_options(question)
    if len(options) != OPTION_COUNT:
        raise ValueError(f"Question {question['id']} has {len(options)} options, "
                         f"expected {OPTION_COUNT}")


def seed(questions=None, path=None, force=False):
    """Insert bank questions into the db. Skips when already seeded unless force.

    Returns the number of questions written.
    """
    if not force and question_model.count() > 0:
        return 0
    if questions is None:
        questions = load_bank_file(path)
    for q in questions:
        validate_question(q)
        question_model.create(q['id'], q['category'], q['difficulty'],
                              q['buzzword'], q['definition'], q['options'],
                              q['correct_answer'])
    logger.info('Seeded %d questions into the bank', len(questions))
    return len(questions)


def bank_by_category(categories=None):
    """Group stored questions as {category: {difficulty: [question, ...]}}."""
    wanted = list(categories) if categories else list(CATEGORIES)
    bank = {c: {d: [] for d in DIFFICULTIES} for c in wanted}
    for q in question_model.get_for_categories(wanted):
        bank[q['category']].setdefault(q['difficulty'], []).append(q)
    return bank


def questions_for_interests(interests):
    """Flat list of every stored question in the player's categories."""
    categories = list(interests) if interests else list(CATEGORIES)
    return question_model.get_for_categories(categories)
