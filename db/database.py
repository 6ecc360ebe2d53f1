"""SQLite database connection helper, initialization and key-value store."""
import json
import logging
import os
import sqlite3

from config.settings import DB_PATH

log = logging.getLogger(__name__)
SCHEMA_PATH = os.path.join(os.path.dirname(__file__), 'schema.sql')


def get_db():
    conn = sqlite3.connect(DB_PATH, timeout=5)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON")
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def _column_exists(conn, table, column):
    cur = conn.execute(f"PRAGMA table_info({table})")
    return any(row[1] == column for row in cur.fetchall())


def _migrate(conn):
    """Add columns to existing tables (safe to run repeatedly)."""
    migrations = [
        ('players', 'baseline_status', "TEXT DEFAULT 'pending'"),
    ]
    for table, column, col_type in migrations:
        if not _column_exists(conn, table, column):
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}")
            log.info("Migration: added %s.%s", table, column)
    conn.commit()


def init_db():
    conn = get_db()
    try:
        with open(SCHEMA_PATH, 'r') as f:
            schema = f.read()
        # Tables first, then migrations, then indexes
        for stmt in schema.split(';'):
            stmt = stmt.strip()
            if stmt and stmt.upper().startswith('CREATE TABLE'):
                conn.execute(stmt)
        conn.commit()
        _migrate(conn)
        for stmt in schema.split(';'):
            stmt = stmt.strip()
            if stmt and not stmt.upper().startswith('CREATE TABLE'):
                conn.execute(stmt)
        conn.commit()
        log.info("Database initialized at %s", DB_PATH)
    finally:
        conn.close()


def query_db(sql, params=(), one=False):
    conn = get_db()
    try:
        cur = conn.execute(sql, params)
        rows = [dict(row) for row in cur.fetchall()]
        return rows[0] if (one and rows) else (None if one else rows)
    except sqlite3.Error as e:
        log.error("query_db error: %s | SQL: %s", e, sql[:200])
        raise
    finally:
        conn.close()


def execute_db(sql, params=()):
    conn = get_db()
    try:
        cur = conn.execute(sql, params)
        conn.commit()
        return cur.lastrowid
    except sqlite3.Error as e:
        log.error("execute_db error: %s | SQL: %s", e, sql[:200])
        raise
    finally:
        conn.close()


# --- Key-value store: JSON values under string keys ---

def kv_get(key):
    """Return the decoded JSON value stored under key, or None."""
    row = query_db("SELECT value FROM kv_store WHERE key=?", (key,), one=True)
    if row is None:
        return None
    try:
        return json.loads(row['value'])
    except (json.JSONDecodeError, TypeError) as e:
        log.error("kv_get: corrupt value under %s (%s), ignoring", key, e)
        return None


def kv_set(key, value):
    execute_db(
        """INSERT INTO kv_store (key, value, updated_at)
           VALUES (?, ?, CURRENT_TIMESTAMP)
           ON CONFLICT(key) DO UPDATE SET
            value=excluded.value,
            updated_at=CURRENT_TIMESTAMP""",
        (key, json.dumps(value)),
    )


def kv_remove(key):
    execute_db("DELETE FROM kv_store WHERE key=?", (key,))
