"""
Storage gateway with connection management and schema initialization.

Provides the single shared SQLite connection that every repository in the
Steadfast store works through.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence

from steadfast.config import DB_TIMEOUT, get_db_path

from . import schema
from .errors import NotOpenError, SqlExecutionError

logger = logging.getLogger(__name__)


@dataclass
class ExecuteResult:
    """Outcome of a mutating statement."""

    rowcount: int
    lastrowid: Optional[int]


class Database:
    """
    Storage gateway owning the one connection to the embedded database.

    The connection runs in autocommit mode; ``transaction()`` opens an
    explicit transaction that commits on success and rolls back on any error.
    All access is serialized through a re-entrant lock, and a transaction
    holds that lock for its whole block.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize the gateway without opening it.

        Args:
            db_path: Path to the SQLite database file. Defaults to the configured path
        """
        self.db_path = Path(db_path) if db_path else get_db_path()
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._tx_depth = 0

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self):
        """Open the database file and ensure the schema. No-op if already open."""
        with self._lock:
            if self._conn is not None:
                logger.debug("Database already open")
                return

            logger.info(f"Opening database: {self.db_path}")
            self._ensure_db_directory()
            conn = sqlite3.connect(
                self.db_path,
                timeout=DB_TIMEOUT,
                isolation_level=None,
                check_same_thread=False,
            )
            conn.row_factory = sqlite3.Row
            try:
                conn.execute("PRAGMA foreign_keys = ON")
                version = schema.ensure_schema(conn)
            except Exception as e:
                logger.error(f"Failed to initialize schema: {e}", exc_info=True)
                conn.close()
                raise

            self._conn = conn
            logger.info(f"Database opened at schema version {version}")

    def close(self):
        """Release the connection. Later operations raise NotOpenError."""
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None
            self._tx_depth = 0
            logger.info("Database closed")

    def _ensure_db_directory(self):
        """Ensure the database directory exists."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Database directory ensured: {self.db_path.parent}")
        except Exception as e:
            logger.error(f"Failed to create database directory: {e}", exc_info=True)
            raise

    def _require_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise NotOpenError()
        return self._conn

    def _run(self, sql: str, params: Sequence[Any]) -> sqlite3.Cursor:
        conn = self._require_connection()
        try:
            return conn.execute(sql, tuple(params))
        except sqlite3.Error as e:
            logger.error(f"SQL Error: {e}", exc_info=True)
            logger.error(f"SQL: {' '.join(sql.split())}")
            logger.error(f"Params: {tuple(params)}")
            raise SqlExecutionError(sql, params, e) from e

    # =========================================================================
    # Query primitives
    # =========================================================================

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        """Execute a mutating statement."""
        with self._lock:
            cursor = self._run(sql, params)
            return ExecuteResult(rowcount=cursor.rowcount, lastrowid=cursor.lastrowid)

    def query_all(self, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        """Run a query and return every row in order."""
        with self._lock:
            return self._run(sql, params).fetchall()

    def query_first(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        """Run a query and return the first row, if any."""
        with self._lock:
            return self._run(sql, params).fetchone()

    @contextmanager
    def transaction(self) -> Iterator["Database"]:
        """
        Context manager for an atomic block of operations.

        Commits when the block exits normally and discards every write made
        since the transaction began if it raises. Nested calls join the
        outermost transaction.
        """
        with self._lock:
            conn = self._require_connection()
            if self._tx_depth > 0:
                self._tx_depth += 1
                try:
                    yield self
                finally:
                    self._tx_depth -= 1
                return

            self._run("BEGIN", ())
            self._tx_depth = 1
            try:
                yield self
            except BaseException:
                self._tx_depth = 0
                conn.rollback()
                logger.debug("Transaction rolled back")
                raise
            self._tx_depth = 0
            try:
                self._run("COMMIT", ())
            except SqlExecutionError:
                # A failed COMMIT leaves the transaction open
                conn.rollback()
                logger.debug("Transaction rolled back after failed commit")
                raise

    # =========================================================================
    # Maintenance
    # =========================================================================

    def schema_version(self) -> int:
        """Get the stored schema version."""
        with self._lock:
            return schema.get_schema_version(self._require_connection())

    def table_counts(self) -> dict[str, int]:
        """Count rows in every user table (debug summary)."""
        tables = self.query_all(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        counts: dict[str, int] = {}
        for row in tables:
            name = row["name"]
            count_row = self.query_first(f"SELECT COUNT(*) AS count FROM {name}")
            counts[name] = count_row["count"] if count_row else 0
            logger.debug(f"Table {name}: {counts[name]} rows")
        return counts

    def reset(self):
        """Drop every table and rebuild the schema from scratch."""
        with self._lock:
            if self._conn is None:
                self.open()
            conn = self._require_connection()
            for table in schema.DROP_ORDER:
                conn.execute(f"DROP TABLE IF EXISTS {table}")
            schema.set_schema_version(conn, 0)
            schema.ensure_schema(conn)
            logger.info("Database reset complete")
