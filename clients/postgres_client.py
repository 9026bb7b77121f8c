"""
PostgreSQL client with connection pooling.

Uses psycopg2 with ThreadedConnectionPool. The pool is opened and closed
explicitly by the process entry point (see main.py lifespan); nothing is
shared at module level. Ownership scoping is the caller's job: every
user-owned query carries the owning account id as a predicate.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, List, Tuple
from uuid import UUID

import psycopg2
import psycopg2.extras
import psycopg2.pool

logger = logging.getLogger(__name__)


class PostgresClient:
    """
    PostgreSQL client owning a single connection pool.

    Usage:
        db = PostgresClient(database_url)
        db.connect()
        rows = db.execute("SELECT * FROM tasks WHERE account_id = %s", (account_id,))
        db.close()
    """

    def __init__(self, database_url: str, min_connections: int = 2, max_connections: int = 20):
        if not database_url:
            raise ValueError("database_url is required")
        self._database_url = database_url
        self._min_connections = min_connections
        self._max_connections = max_connections
        self._pool: psycopg2.pool.ThreadedConnectionPool | None = None
        self._lock = threading.RLock()

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    def connect(self) -> None:
        """Open the connection pool. Safe to call twice."""
        with self._lock:
            if self._pool is not None:
                return
            self._pool = psycopg2.pool.ThreadedConnectionPool(
                minconn=self._min_connections,
                maxconn=self._max_connections,
                dsn=self._database_url,
                connect_timeout=30,
            )
            psycopg2.extras.register_default_jsonb(globally=True)
            logger.info("Connection pool created")

    @contextmanager
    def get_connection(self):
        """Borrow a connection; rolled back on error, always returned to the pool."""
        if self._pool is None:
            raise RuntimeError("PostgresClient is not connected. Call connect() first.")

        conn = self._pool.getconn()
        if conn is None:
            raise RuntimeError("Could not get connection from pool")

        try:
            yield conn
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def _convert_params(self, params: Tuple | Dict | None) -> Tuple | Dict | None:
        """Convert UUID objects to strings."""
        if params is None:
            return None

        def convert(value: Any) -> Any:
            if isinstance(value, UUID):
                return str(value)
            if isinstance(value, list):
                return [convert(v) for v in value]
            if isinstance(value, tuple):
                return tuple(convert(v) for v in value)
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            return value

        return convert(params)

    def execute(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """Execute query, return list of row dicts. Empty list if no results."""
        params = self._convert_params(params)
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(query, params)
                rows = [dict(row) for row in cur.fetchall()] if cur.description else []
            conn.commit()
            return rows

    def execute_single(self, query: str, params: Tuple | Dict | None = None) -> Dict[str, Any] | None:
        """Execute query, return first row or None."""
        results = self.execute(query, params)
        return results[0] if results else None

    def execute_returning(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """Execute INSERT/UPDATE/DELETE with RETURNING, return results."""
        params = self._convert_params(params)
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(query, params)
                rows = [dict(row) for row in cur.fetchall()]
            conn.commit()
            return rows

    def close(self) -> None:
        """Close connection pool."""
        with self._lock:
            if self._pool is not None:
                self._pool.closeall()
                self._pool = None
                logger.info("Connection pool closed")
