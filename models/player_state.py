"""Per-player state in the key-value store.

Keys are namespaced by player id; values are the plain dicts the engines
produce. Missing values come back as None and callers fall back to defaults.
"""
from db.database import kv_get, kv_set, kv_remove

RATING = 'rating'
DIFFICULTY = 'difficulty'
POOL = 'pool'
CURRENT_QUESTION = 'current_question'
BASELINE_TEST = 'baseline_test'
BASELINE_RESULT = 'baseline_result'

KINDS = (RATING, DIFFICULTY, POOL, CURRENT_QUESTION, BASELINE_TEST, BASELINE_RESULT)


def key_for(player_id, kind):
    if kind not in KINDS:
        raise ValueError(f'Unknown player state kind: {kind}')
    return f'player:{player_id}:{kind}'


def get(player_id, kind):
    return kv_get(key_for(player_id, kind))


def save(player_id, kind, value):
    kv_set(key_for(player_id, kind), value)


def remove(player_id, kind):
    kv_remove(key_for(player_id, kind))


def remove_all(player_id):
    for kind in KINDS:
        remove(player_id, kind)
