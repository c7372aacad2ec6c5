"""
SQLite storage.

Every entity is stored as one row. Reference lists (followers, likes,
comment ids, ...) live on the owning row as JSON text columns, so a
document is loaded, mutated in Python and saved back whole. Multi-row
writes go through ``transaction()``.
"""

import contextlib
import datetime
import json
import logging
import re
import sqlite3
import uuid

from flask import current_app, g

logger = logging.getLogger(__name__)

ID_RE = re.compile(r"^[0-9a-f]{32}$")

SCHEMA = """
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    username TEXT UNIQUE NOT NULL,
    email TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    bio TEXT DEFAULT '',
    avatar TEXT,
    followers TEXT NOT NULL DEFAULT '[]',
    following TEXT NOT NULL DEFAULT '[]',
    posts TEXT NOT NULL DEFAULT '[]',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS posts (
    id TEXT PRIMARY KEY,
    author_id TEXT NOT NULL,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    image TEXT,
    likes TEXT NOT NULL DEFAULT '[]',
    comments TEXT NOT NULL DEFAULT '[]',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS comments (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    post_id TEXT NOT NULL,
    content TEXT NOT NULL,
    likes TEXT NOT NULL DEFAULT '[]',
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS messages (
    id TEXT PRIMARY KEY,
    sender_id TEXT NOT NULL,
    receiver_id TEXT NOT NULL,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_posts_author ON posts(author_id);
CREATE INDEX IF NOT EXISTS idx_comments_post ON comments(post_id);
CREATE INDEX IF NOT EXISTS idx_messages_sender ON messages(sender_id);
CREATE INDEX IF NOT EXISTS idx_messages_receiver ON messages(receiver_id);
"""


def new_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value) -> bool:
    return isinstance(value, str) and bool(ID_RE.match(value))


def utcnow() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


# -----------------------
# Connection helpers
# -----------------------
def get_db():
    """
    Returns the sqlite3.Connection for the current request, opening it on
    first use.
    """
    if "db" not in g:
        conn = sqlite3.connect(
            current_app.config["DATABASE"],
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        cur = conn.cursor()
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.close()
        g.db = conn
    return g.db


def close_db(exc=None):
    db = g.pop("db", None)
    if db is not None:
        db.close()


def query_db(query, args=(), one=False):
    cur = get_db().execute(query, args)
    rv = cur.fetchall()
    cur.close()
    return (rv[0] if rv else None) if one else rv


def execute_db(query, args=()):
    conn = get_db()
    cur = conn.execute(query, args)
    if not g.get("in_transaction"):
        conn.commit()
    rowcount = cur.rowcount
    cur.close()
    return rowcount


@contextlib.contextmanager
def transaction():
    """
    Runs the block under a write lock taken up front, so a load-mutate-save
    sequence cannot interleave with another writer. Nested use joins the
    outer transaction.
    """
    conn = get_db()
    if g.get("in_transaction"):
        yield conn
        return
    conn.execute("BEGIN IMMEDIATE")
    g.in_transaction = True
    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    else:
        conn.commit()
    finally:
        g.in_transaction = False


def init_db():
    db = get_db()
    db.executescript(SCHEMA)
    db.commit()
    logger.info("Database initialized/ready at %s", current_app.config["DATABASE"])


# -----------------------
# Document collections
# -----------------------
class Collection:
    """
    A table viewed as a collection of documents.

    Documents are plain dicts keyed by column name. Columns listed in
    ``list_fields`` hold JSON arrays and are decoded on load.
    """

    def __init__(self, table, fields, list_fields=()):
        self.table = table
        self.fields = tuple(fields)
        self.list_fields = tuple(list_fields)

    def _decode(self, row):
        if row is None:
            return None
        doc = dict(row)
        for name in self.list_fields:
            doc[name] = json.loads(doc[name] or "[]")
        return doc

    def _encode(self, doc):
        values = []
        for name in self.fields:
            value = doc.get(name)
            if name in self.list_fields:
                value = json.dumps(value or [])
            values.append(value)
        return values

    def find_by_id(self, doc_id):
        row = query_db(f"SELECT * FROM {self.table} WHERE id = ?", (doc_id,), one=True)
        return self._decode(row)

    def find_one(self, where, args=()):
        row = query_db(f"SELECT * FROM {self.table} WHERE {where} LIMIT 1", args, one=True)
        return self._decode(row)

    def find(self, where=None, args=(), order_by=None):
        sql = f"SELECT * FROM {self.table}"
        if where:
            sql += f" WHERE {where}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        return [self._decode(r) for r in query_db(sql, args)]

    def find_by_ids(self, ids, order_by=None):
        ids = [str(i) for i in ids]
        if not ids:
            return []
        # one bound parameter whatever the list length
        return self.find("id IN (SELECT value FROM json_each(?))", (json.dumps(ids),), order_by=order_by)

    def save(self, doc):
        """Insert the document, or replace the stored copy with the same id."""
        columns = ", ".join(self.fields)
        marks = ", ".join("?" for _ in self.fields)
        updates = ", ".join(f"{name} = excluded.{name}" for name in self.fields if name != "id")
        execute_db(
            f"INSERT INTO {self.table} ({columns}) VALUES ({marks}) "
            f"ON CONFLICT(id) DO UPDATE SET {updates}",
            self._encode(doc),
        )
        return doc

    def delete_one(self, doc_id):
        return execute_db(f"DELETE FROM {self.table} WHERE id = ?", (doc_id,))

    def delete_many(self, where, args=()):
        return execute_db(f"DELETE FROM {self.table} WHERE {where}", args)


users = Collection(
    "users",
    ("id", "username", "email", "password_hash", "bio", "avatar",
     "followers", "following", "posts", "created_at", "updated_at"),
    list_fields=("followers", "following", "posts"),
)

posts = Collection(
    "posts",
    ("id", "author_id", "title", "content", "image", "likes", "comments",
     "created_at", "updated_at"),
    list_fields=("likes", "comments"),
)

comments = Collection(
    "comments",
    ("id", "user_id", "post_id", "content", "likes", "created_at"),
    list_fields=("likes",),
)

messages = Collection(
    "messages",
    ("id", "sender_id", "receiver_id", "content", "created_at"),
)
