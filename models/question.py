"""CRUD for the question bank table."""
import json

from db.database import query_db, execute_db


def _decode(row):
    if row is None:
        return None
    row['options'] = json.loads(row['options'])
    return row


def get_by_id(question_id):
    return _decode(query_db("SELECT * FROM questions WHERE id=?", (question_id,), one=True))


def get_all():
    return [_decode(r) for r in query_db("SELECT * FROM questions ORDER BY id")]


def get_for_category(category, difficulty=None):
    if difficulty:
        rows = query_db(
            "SELECT * FROM questions WHERE category=? AND difficulty=? ORDER BY id",
            (category, difficulty),
        )
    else:
        rows = query_db("SELECT * FROM questions WHERE category=? ORDER BY id", (category,))
    return [_decode(r) for r in rows]


def get_for_categories(categories):
    if not categories:
        return []
    placeholders = ','.join('?' for _ in categories)
    rows = query_db(
        f"SELECT * FROM questions WHERE category IN ({placeholders}) ORDER BY id",
        tuple(categories),
    )
    return [_decode(r) for r in rows]


def count():
    return query_db("SELECT COUNT(*) AS n FROM questions", one=True)['n']


def create(question_id, category, difficulty, buzzword, definition, options,
           correct_answer):
    execute_db(
        """INSERT INTO questions
           (id, category, difficulty, buzzword, definition, options, correct_answer)
           VALUES (?, ?, ?, ?, ?, ?, ?)
           ON CONFLICT(id) DO UPDATE SET
            category=excluded.category,
            difficulty=excluded.difficulty,
            buzzword=excluded.buzzword,
            definition=excluded.definition,
            options=excluded.options,
            correct_answer=excluded.correct_answer""",
        (question_id, category, difficulty, buzzword, definition,
         json.dumps(list(options)), correct_answer),
    )
    return question_id
