"""CRUD for players table."""
import json

from db.database import query_db, execute_db


def _decode(row):
    if row is None:
        return None
    row['interests'] = json.loads(row['interests'] or '[]')
    return row


def get_all():
    return [_decode(r) for r in query_db("SELECT * FROM players ORDER BY name")]


def get_by_id(player_id):
    return _decode(query_db("SELECT * FROM players WHERE id=?", (player_id,), one=True))


def get_by_name(name):
    return _decode(query_db("SELECT * FROM players WHERE name=?", (name,), one=True))


def create(name, interests=()):
    return execute_db(
        "INSERT INTO players (name, interests) VALUES (?, ?)",
        (name, json.dumps(list(interests))),
    )


def update_interests(player_id, interests):
    execute_db("UPDATE players SET interests=? WHERE id=?",
               (json.dumps(list(interests)), player_id))


def update_baseline_status(player_id, status):
    """status: 'pending' | 'completed' | 'skipped'"""
    execute_db("UPDATE players SET baseline_status=? WHERE id=?", (status, player_id))


def delete(player_id):
    execute_db("DELETE FROM players WHERE id=?", (player_id,))
