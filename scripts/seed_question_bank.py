#!/usr/bin/env python3
"""Load data/question_bank.json into the DB, reporting answer-position and
length bias first.

With --rebalance, correct answers are redistributed evenly across positions
0-3 before seeding. Exit code 1 if the stored bank still fails the
distribution check.

Usage:
    python3 scripts/seed_question_bank.py [--rebalance] [path/to/bank.json]
"""
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from db.database import init_db
from engine.length_bias import analyze_length_bias_patterns, length_bias_recommendations
from engine.randomizer import (
    answer_distribution, rebalance_answer_positions, validate_answer_distribution,
)
from services import question_bank


def main(argv):
    rebalance = '--rebalance' in argv
    paths = [a for a in argv if not a.startswith('--')]
    path = paths[0] if paths else None

    init_db()
    questions = question_bank.load_bank_file(path)
    print(f"Loaded {len(questions)} questions")
    print(f"Answer positions: {answer_distribution(questions)}")

    patterns = analyze_length_bias_patterns(questions)
    print(f"Correct answer longest:  {patterns['longest_bias_percentage']:.1f}%")
    print(f"Correct answer shortest: {patterns['shortest_bias_percentage']:.1f}%")
    print(f"Average bias score:      {patterns['average_bias_score']:.1f}")
    for q in questions:
        notes = length_bias_recommendations(q)
        if notes:
            print(f"  {q['id']}: {'; '.join(notes)}")

    if rebalance:
        questions = rebalance_answer_positions(questions)
        print(f"Rebalanced positions: {answer_distribution(questions)}")

    written = question_bank.seed(questions, force=True)
    print("=" * 60)
    print(f"Seeded {written} questions")
    print("=" * 60)

    return 0 if validate_answer_distribution(questions) else 1


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
