import sqlite3
import json
import logging
import threading
from contextlib import contextmanager
from typing import Iterable

from .config import DB_PATH
from .film import FilmRecord
from .utils import title_key

logger = logging.getLogger(__name__)


class ConnectionPool:
    """
    SQLite connection pool holding one connection per thread.

    Tracks transaction nesting so that only the outermost get_db() commits.
    Connections owned by threads that have exited are closed the next time
    a thread asks for a new connection.
    """

    def __init__(self, db_path):
        self._db_path = db_path
        self._lock = threading.Lock()
        self._connections: dict[int, sqlite3.Connection] = {}
        self._transaction_depth: dict[int, int] = {}

    def _create_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA busy_timeout = 5000")
        conn.execute("PRAGMA journal_mode = WAL")
        return conn

    def _cleanup_dead_threads(self):
        """Close connections owned by threads that have exited. Caller holds the lock."""
        alive_threads = {t.ident for t in threading.enumerate()}
        dead_threads = set(self._connections) - alive_threads

        for thread_id in dead_threads:
            conn = self._connections.pop(thread_id)
            self._transaction_depth.pop(thread_id, None)
            try:
                conn.close()
                logger.debug(f"Cleaned up connection for dead thread {thread_id}")
            except sqlite3.Error as e:
                logger.warning(f"Error closing connection for thread {thread_id}: {e}")

    def get_connection(self) -> sqlite3.Connection:
        """Get a connection for the current thread, creating if necessary."""
        thread_id = threading.get_ident()
        with self._lock:
            conn = self._connections.get(thread_id)
            if conn is None:
                self._cleanup_dead_threads()
                conn = self._create_connection()
                self._connections[thread_id] = conn
                self._transaction_depth[thread_id] = 0
                logger.debug(f"Created connection for thread {thread_id} (pool size: {len(self._connections)})")
            return conn

    def get_transaction_depth(self) -> int:
        return self._transaction_depth.get(threading.get_ident(), 0)

    def increment_transaction_depth(self):
        thread_id = threading.get_ident()
        with self._lock:
            self._transaction_depth[thread_id] = self._transaction_depth.get(thread_id, 0) + 1

    def decrement_transaction_depth(self):
        thread_id = threading.get_ident()
        with self._lock:
            depth = self._transaction_depth.get(thread_id, 1)
            self._transaction_depth[thread_id] = max(0, depth - 1)

    def close_all(self):
        """Close all connections (call on application shutdown)."""
        with self._lock:
            for thread_id, conn in list(self._connections.items()):
                try:
                    conn.close()
                except sqlite3.Error as e:
                    logger.warning(f"Error closing connection for thread {thread_id}: {e}")

            self._connections.clear()
            self._transaction_depth.clear()
            logger.debug("Connection pool closed")


# Global pool instance
_pool: ConnectionPool | None = None
_pool_lock = threading.Lock()


def _get_pool() -> ConnectionPool:
    """Get or create the global connection pool."""
    global _pool
    if _pool is None:
        with _pool_lock:
            if _pool is None:
                DB_PATH.parent.mkdir(exist_ok=True, parents=True)
                _pool = ConnectionPool(DB_PATH)
    return _pool


@contextmanager
def get_db(read_only: bool = False):
    """
    Get database connection with proper transaction handling.

    Args:
        read_only: If True, skip commit on exit

    Only the outermost context commits or rolls back.
    """
    pool = _get_pool()
    conn = pool.get_connection()

    is_outermost = pool.get_transaction_depth() == 0
    pool.increment_transaction_depth()

    try:
        yield conn

        if is_outermost and not read_only:
            conn.commit()

    except Exception:
        if is_outermost:
            conn.rollback()
        raise

    finally:
        pool.decrement_transaction_depth()


def close_pool():
    """Close the connection pool. Call on application shutdown."""
    global _pool
    if _pool is not None:
        _pool.close_all()
        _pool = None


def init_db() -> None:
    with get_db() as conn:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS films (
                title_key TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                year INTEGER,
                imdb_rating REAL,
                director TEXT,
                genres TEXT,        -- JSON list
                actors TEXT,        -- JSON list
                languages TEXT,     -- JSON list
                box_office_usd REAL,
                budget_usd REAL,
                awards TEXT         -- JSON list
            );
            CREATE INDEX IF NOT EXISTS idx_films_year ON films(year);
        """)


def load_json(val):
    """Safely load a JSON list from a db field."""
    if not val:
        return []
    if isinstance(val, list):
        return val
    try:
        return json.loads(val)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Failed to parse JSON '{str(val)[:50]}...': {e}")
        return []


def _row_to_film(row: sqlite3.Row) -> FilmRecord:
    data = dict(row)
    for column in ('genres', 'actors', 'languages', 'awards'):
        data[column] = load_json(data.get(column))
    return FilmRecord.from_dict(data)


def _film_to_row(film: FilmRecord) -> tuple:
    return (
        film.key, film.title, film.release_year, film.imdb_rating, film.director,
        json.dumps(sorted(film.genres)), json.dumps(sorted(film.actors)),
        json.dumps(sorted(film.languages)),
        film.box_office_usd, film.budget_usd,
        json.dumps(sorted(film.awards)),
    )


def upsert_films(films: Iterable[FilmRecord]) -> int:
    """Insert or replace films (keyed by case-insensitive title). Returns rows written."""
    rows = [_film_to_row(f) for f in films]
    if not rows:
        return 0
    with get_db() as conn:
        conn.executemany("""
            INSERT OR REPLACE INTO films
            (title_key, title, year, imdb_rating, director, genres, actors, languages,
             box_office_usd, budget_usd, awards)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, rows)
    logger.debug(f"Upserted {len(rows)} films")
    return len(rows)


class FilmDatabase:
    """Fact store backed by the SQLite films table."""

    def find_by_title(self, title: str) -> FilmRecord | None:
        with get_db(read_only=True) as conn:
            row = conn.execute("SELECT * FROM films WHERE title_key = ?", (title_key(title),)).fetchone()
        return _row_to_film(row) if row else None

    def list_all(self) -> list[FilmRecord]:
        with get_db(read_only=True) as conn:
            rows = conn.execute("SELECT * FROM films ORDER BY title_key, title").fetchall()
        return [_row_to_film(r) for r in rows]

    def count(self) -> int:
        with get_db(read_only=True) as conn:
            return conn.execute("SELECT COUNT(*) FROM films").fetchone()[0]
