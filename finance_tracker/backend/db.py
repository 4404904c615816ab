# backend/db.py
import os
import sqlite3

from flask import current_app, g

SCHEMA_FILE = os.path.join(os.path.dirname(__file__), "schema.sql")
# sqlite INTEGER PRIMARY KEY is a signed 64-bit value
MAX_ROW_ID = 2 ** 63 - 1


def _connect(path):
    # ensure directory exists
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def is_row_id(value):
    return isinstance(value, int) and 0 < value <= MAX_ROW_ID


def get_db():
    db = getattr(g, "_database", None)
    if db is None:
        db = g._database = _connect(current_app.config["DB_PATH"])
    return db


def close_db(exception=None):
    db = g.pop("_database", None)
    if db is not None:
        db.close()


def query_db(query, args=(), one=False):
    cur = get_db().execute(query, args)
    rv = cur.fetchall()
    cur.close()
    return (rv[0] if rv else None) if one else rv


def execute_db(query, args=()):
    """Run a write statement and commit. Returns (lastrowid, rowcount)."""
    conn = get_db()
    cur = conn.cursor()
    try:
        cur.execute(query, args)
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        last, count = cur.lastrowid, cur.rowcount
        cur.close()
    return last, count


def init_db(path):
    """
    Create the tables from schema.sql at `path`.
    Idempotent (IF NOT EXISTS everywhere) so it runs on every startup.
    """
    if not os.path.exists(SCHEMA_FILE):
        raise FileNotFoundError(f"schema.sql not found at expected path: {SCHEMA_FILE}")

    conn = _connect(path)
    try:
        with open(SCHEMA_FILE, "r", encoding="utf-8") as f:
            conn.executescript(f.read())
        conn.commit()
    finally:
        conn.close()


def row_to_dict(row):
    """Convert sqlite3.Row to dict"""
    return {key: row[key] for key in row.keys()} if row is not None else None
