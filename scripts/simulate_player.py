#!/usr/bin/env python3
"""Simulate a player against a running server, answering with a fixed hit rate.

Creates (or reuses) a player, skips the baseline, plays one game of N
questions and reports the rating change.

Usage:
    python3 scripts/simulate_player.py [hit_rate] [questions]
"""
import json
import os
import random
import sys

import requests

BASE_URL = 'http://localhost:5003'
PLAYER_NAME = 'SimPlayer'
BANK_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
                         'data', 'question_bank.json')


def load_definitions():
    """Question id -> correct definition text, read from the local bank file."""
    with open(BANK_PATH, encoding='utf-8') as f:
        return {q['id']: q['definition'] for q in json.load(f)['questions']}


def find_or_create_player(http):
    resp = http.post(f'{BASE_URL}/players', json={
        'name': PLAYER_NAME, 'interests': ['tech', 'business'],
    })
    if resp.status_code == 201:
        return resp.json()
    players = http.get(f'{BASE_URL}/').json()['players']
    return next(p for p in players if p['name'] == PLAYER_NAME)


def main(argv):
    hit_rate = float(argv[0]) if argv else 0.75
    total = int(argv[1]) if len(argv) > 1 else 20
    http = requests.Session()
    definitions = load_definitions()

    player = find_or_create_player(http)
    player_id = player['id']
    print(f"Player {player_id} ({player['name']}), baseline {player['baseline_status']}")
    if player['baseline_status'] == 'pending':
        http.post(f'{BASE_URL}/baseline/{player_id}/skip')

    correct_count = 0
    for i in range(total):
        resp = http.post(f'{BASE_URL}/game/{player_id}/next')
        if resp.status_code != 200:
            print(f"Error getting question: {resp.status_code} {resp.text}")
            break
        question = resp.json()

        options = question['options']
        right = options.index(definitions[question['id']])
        if random.random() < hit_rate:
            answer = right
        else:
            answer = random.choice([i for i in range(len(options)) if i != right])
        resp = http.post(f'{BASE_URL}/game/{player_id}/answer', json={
            'question_id': question['id'], 'answer': answer,
        })
        graded = resp.json()
        correct_count += graded['correct']

        adjustment = graded['adjustment']
        print(f"Q{i+1} [{question['target_difficulty']}] {question['buzzword']}: "
              f"{'Correct' if graded['correct'] else 'Wrong'}  "
              f"challenge={adjustment['new_difficulty']:.2f} "
              f"({adjustment['adjustment_reason']})")

    resp = http.post(f'{BASE_URL}/game/{player_id}/complete', json={
        'category': 'tech', 'difficulty': 'medium',
        'questions_answered': total, 'correct_answers': correct_count,
    })
    result = resp.json()

    print(f"\n=== Results ===")
    print(f"Correct: {correct_count}/{total}")
    print(f"Result:  {result['outcome']['result']} ({result['rank']['lp_gain_text']})")
    print(f"Rating:  {result['rating']} ({result['rank']['current_rank']['label']})")
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
