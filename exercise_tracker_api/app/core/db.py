"""
SQLite persistence for users and their exercise logs.

``ExerciseStore`` owns the schema and every SQL statement the
application runs.  One store object is built at startup and handed to
the service layer; it opens a short‑lived connection per operation
and closes it on exit.

Driver errors never leave this module as ``sqlite3`` exceptions: a
uniqueness conflict on ``users.username`` becomes
``DuplicateUsername`` and everything else becomes ``StoreError``.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .config import settings
from .exceptions import DuplicateUsername, StoreError

logger = logging.getLogger(__name__)

# Largest value SQLite can bind to an INTEGER column or a LIMIT.
SQLITE_MAX_INTEGER = 2**63 - 1

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    username TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS exercises (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    description TEXT NOT NULL,
    duration INTEGER NOT NULL,
    date TEXT NOT NULL,
    FOREIGN KEY(user_id) REFERENCES users(id)
);

-- Log queries filter on user and date range
CREATE INDEX IF NOT EXISTS idx_exercises_user_date ON exercises(user_id, date);
"""


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used directly; relative ones are resolved
    against the project root (the directory holding the package).
    """
    db_url = database_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def _is_username_conflict(exc: sqlite3.IntegrityError) -> bool:
    return "users.username" in str(exc)


class ExerciseStore:
    """Data store for the ``users`` and ``exercises`` tables."""

    def __init__(self, database_path: str, timeout: float = 5.0) -> None:
        self.database_path = database_path
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "ExerciseStore":
        return cls(get_database_path(), timeout=settings.database_timeout)

    # ------------------------------------------------------------------
    # Connections and transactions
    # ------------------------------------------------------------------

    def connect(self) -> sqlite3.Connection:
        """Open a new connection.

        Rows come back as ``sqlite3.Row``.  ``isolation_level=None``
        leaves transaction control to :meth:`transaction`; statements
        outside it commit on their own.
        """
        conn = sqlite3.connect(self.database_path, timeout=self.timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        # Foreign keys are off by default in SQLite and must be enabled per connection.
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection, translating driver errors and closing on exit."""
        try:
            conn = self.connect()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not open database {self.database_path}: {exc}") from exc
        try:
            yield conn
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        finally:
            conn.close()

    @contextmanager
    def transaction(self, immediate: bool = False) -> Iterator[sqlite3.Connection]:
        """Run the enclosed statements as one transaction.

        Commits when the block exits normally and rolls back on any
        exception.  ``immediate=True`` takes the write lock up front so
        concurrent writers queue instead of failing mid‑transaction.
        """
        with self.connection() as conn:
            conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            try:
                yield conn
            except BaseException:
                # SQLite may already have rolled back (e.g. SQLITE_FULL).
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

    def init_db(self) -> None:
        """Create the tables and index if they do not exist yet."""
        Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)
        with self.connection() as conn:
            conn.executescript(SCHEMA)
        logger.info("Database ready at %s (tables: users, exercises)", self.database_path)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, user_id: str, username: str) -> Dict[str, Any]:
        """Insert a user and read it back in one transaction.

        Raises ``DuplicateUsername`` when ``username`` is taken.
        """
        try:
            with self.transaction(immediate=True) as conn:
                conn.execute(
                    "INSERT INTO users (id, username) VALUES (?, ?)",
                    (user_id, username),
                )
                row = conn.execute(
                    "SELECT id, username FROM users WHERE id = ?",
                    (user_id,),
                ).fetchone()
                if row is None:
                    raise StoreError(f"User {user_id} missing right after insert")
        except StoreError as exc:
            cause = exc.__cause__
            if isinstance(cause, sqlite3.IntegrityError) and _is_username_conflict(cause):
                raise DuplicateUsername(username) from cause
            raise
        return dict(row)

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        with self.connection() as conn:
            row = conn.execute(
                "SELECT id, username FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        return dict(row) if row else None

    def list_users(self) -> List[Dict[str, Any]]:
        with self.connection() as conn:
            rows = conn.execute("SELECT id, username FROM users ORDER BY rowid").fetchall()
        return [dict(row) for row in rows]

    # ------------------------------------------------------------------
    # Exercises
    # ------------------------------------------------------------------

    def insert_exercise(self, user_id: str, description: str, duration: int, date: str) -> int:
        """Insert an exercise row and return its id."""
        with self.connection() as conn:
            cursor = conn.execute(
                "INSERT INTO exercises (user_id, description, duration, date) VALUES (?, ?, ?, ?)",
                (user_id, description, duration, date),
            )
            return cursor.lastrowid

    @staticmethod
    def _log_filter(
        user_id: str, date_from: Optional[str], date_to: Optional[str]
    ) -> Tuple[str, List[Any]]:
        """Build the WHERE clause shared by the count and row queries.

        Bounds are compared as strings against the stored
        ``YYYY-MM-DD`` values, so they must use the same form.
        """
        clauses = ["user_id = ?"]
        params: List[Any] = [user_id]
        if date_from:
            clauses.append("date >= ?")
            params.append(date_from)
        if date_to:
            clauses.append("date <= ?")
            params.append(date_to)
        return " AND ".join(clauses), params

    @classmethod
    def _count(cls, conn, user_id, date_from, date_to) -> int:
        where, params = cls._log_filter(user_id, date_from, date_to)
        row = conn.execute(
            f"SELECT COUNT(*) AS total_count FROM exercises WHERE {where}",
            params,
        ).fetchone()
        return row["total_count"] if row else 0

    @classmethod
    def _fetch(cls, conn, user_id, date_from, date_to, limit) -> List[Dict[str, Any]]:
        where, params = cls._log_filter(user_id, date_from, date_to)
        # Newest first; id breaks ties between entries on the same day.
        sql = (
            "SELECT id, description, duration, date FROM exercises "
            f"WHERE {where} ORDER BY date DESC, id DESC"
        )
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        return [dict(row) for row in conn.execute(sql, params).fetchall()]

    def count_exercises(
        self, user_id: str, date_from: Optional[str] = None, date_to: Optional[str] = None
    ) -> int:
        """Number of the user's exercises inside the date bounds."""
        with self.connection() as conn:
            return self._count(conn, user_id, date_from, date_to)

    def fetch_exercises(
        self,
        user_id: str,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """The user's exercises inside the date bounds, newest first, capped at ``limit``."""
        with self.connection() as conn:
            return self._fetch(conn, user_id, date_from, date_to, limit)

    def query_exercises(
        self,
        user_id: str,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Tuple[int, List[Dict[str, Any]]]:
        """Return ``(count, rows)`` read in one transaction.

        ``count`` ignores ``limit``; only ``rows`` is capped.
        """
        with self.transaction() as conn:
            total = self._count(conn, user_id, date_from, date_to)
            rows = self._fetch(conn, user_id, date_from, date_to, limit)
        return total, rows
