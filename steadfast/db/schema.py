"""
Schema definitions and forward-only migrations for the Steadfast store.

The schema version lives in SQLite's ``PRAGMA user_version``. A fresh store
is stamped with ``SCHEMA_VERSION`` directly; an older store replays every
migration step above its stored version, bumping the version after each one
so that an interrupted upgrade resumes where it stopped.
"""

import logging
import sqlite3
from typing import Callable

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2

# Table creation statements
CREATE_HABITS_TABLE = """
    CREATE TABLE IF NOT EXISTS habits (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        icon TEXT,
        frequency TEXT NOT NULL DEFAULT 'daily' CHECK(
            frequency IN ('daily', 'weekly', 'monthly')
        ),
        reminderTime TEXT,
        streak INTEGER DEFAULT 0,
        lastCompletedDate TEXT,
        isActive INTEGER DEFAULT 1 CHECK(isActive IN (0, 1)),
        isDefault INTEGER DEFAULT 0 CHECK(isDefault IN (0, 1)),
        createdAt TEXT NOT NULL,
        updatedAt TEXT NOT NULL
    )
"""

CREATE_HABIT_LOGS_TABLE = """
    CREATE TABLE IF NOT EXISTS habit_logs (
        id TEXT PRIMARY KEY,
        habitId TEXT NOT NULL REFERENCES habits(id) ON DELETE CASCADE,
        date TEXT NOT NULL,
        completed INTEGER DEFAULT 0 CHECK(completed IN (0, 1)),
        completedAt TEXT,
        createdAt TEXT NOT NULL,
        updatedAt TEXT NOT NULL,
        UNIQUE(habitId, date)
    )
"""

CREATE_GRATITUDE_ENTRIES_TABLE = """
    CREATE TABLE IF NOT EXISTS gratitude_entries (
        id TEXT PRIMARY KEY,
        date TEXT NOT NULL UNIQUE,
        createdAt TEXT NOT NULL,
        updatedAt TEXT NOT NULL
    )
"""

CREATE_GRATITUDE_ITEMS_TABLE = """
    CREATE TABLE IF NOT EXISTS gratitude_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        entryId TEXT NOT NULL REFERENCES gratitude_entries(id) ON DELETE CASCADE,
        itemText TEXT NOT NULL,
        itemOrder INTEGER NOT NULL
    )
"""

CREATE_PRAYER_REQUESTS_TABLE = """
    CREATE TABLE IF NOT EXISTS prayer_requests (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT,
        category TEXT NOT NULL CHECK(
            category IN ('Personal', 'Family', 'Friends', 'Church',
                         'Health', 'Work', 'World', 'Other')
        ),
        priority TEXT NOT NULL CHECK(priority IN ('Urgent', 'High', 'Normal')),
        status TEXT NOT NULL DEFAULT 'Active' CHECK(
            status IN ('Active', 'Answered', 'Archived')
        ),
        createdAt TEXT NOT NULL,
        updatedAt TEXT NOT NULL,
        answeredAt TEXT,
        answeredNote TEXT
    )
"""

CREATE_PRAYER_UPDATES_TABLE = """
    CREATE TABLE IF NOT EXISTS prayer_updates (
        id TEXT PRIMARY KEY,
        prayerId TEXT NOT NULL REFERENCES prayer_requests(id) ON DELETE CASCADE,
        note TEXT NOT NULL,
        createdAt TEXT NOT NULL
    )
"""

ALL_TABLES = [
    CREATE_HABITS_TABLE,
    CREATE_HABIT_LOGS_TABLE,
    CREATE_GRATITUDE_ENTRIES_TABLE,
    CREATE_GRATITUDE_ITEMS_TABLE,
    CREATE_PRAYER_REQUESTS_TABLE,
    CREATE_PRAYER_UPDATES_TABLE,
]

# (index name, table, columns)
HABIT_INDEXES = [
    ("idx_habit_logs_date", "habit_logs", "date"),
    ("idx_habit_logs_habitId", "habit_logs", "habitId"),
    ("idx_habit_logs_habitId_date", "habit_logs", "habitId, date"),
    ("idx_gratitude_entries_date", "gratitude_entries", "date"),
    ("idx_gratitude_items_entryId", "gratitude_items", "entryId"),
]

PRAYER_INDEXES = [
    ("idx_prayer_requests_status", "prayer_requests", "status"),
    ("idx_prayer_updates_prayerId", "prayer_updates", "prayerId"),
]

ALL_INDEXES = HABIT_INDEXES + PRAYER_INDEXES

# Child tables first so foreign keys never block the drop
DROP_ORDER = [
    "prayer_updates",
    "prayer_requests",
    "gratitude_items",
    "gratitude_entries",
    "habit_logs",
    "habits",
]


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the stored schema version (0 when never initialized)."""
    row = conn.execute("PRAGMA user_version").fetchone()
    return row[0] if row else 0


def set_schema_version(conn: sqlite3.Connection, version: int):
    """Stamp the store with a schema version."""
    # PRAGMA does not accept bound parameters
    conn.execute(f"PRAGMA user_version = {int(version)}")


def create_indexes(conn: sqlite3.Connection, indexes=ALL_INDEXES):
    """Create database indexes for query performance."""
    for index_name, table, columns in indexes:
        conn.execute(f"""
            CREATE INDEX IF NOT EXISTS {index_name}
            ON {table}({columns})
        """)


def add_column(conn: sqlite3.Connection, table: str, column_def: str) -> bool:
    """
    Additively patch a table with a new column.

    A "duplicate column name" failure means the column is already there and
    is ignored; every other error propagates.

    Returns:
        True if the column was added, False if it already existed
    """
    try:
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {column_def}")
        logger.info(f"Added column to {table}: {column_def}")
        return True
    except sqlite3.OperationalError as e:
        if "duplicate column name" in str(e).lower():
            logger.debug(f"Column already exists on {table}, skipping: {column_def}")
            return False
        raise


def _migrate_to_v2(conn: sqlite3.Connection):
    """Normalize prayer requests into tables and backfill habit frequency."""
    add_column(conn, "habits", "frequency TEXT NOT NULL DEFAULT 'daily'")
    conn.execute(CREATE_PRAYER_REQUESTS_TABLE)
    conn.execute(CREATE_PRAYER_UPDATES_TABLE)
    create_indexes(conn, PRAYER_INDEXES)


# Ordered (target version, step); each step must be safe to re-run
MIGRATIONS: list[tuple[int, Callable[[sqlite3.Connection], None]]] = [
    (2, _migrate_to_v2),
]


def create_tables(conn: sqlite3.Connection):
    """Create every table and index if absent."""
    for table_sql in ALL_TABLES:
        conn.execute(table_sql)
    create_indexes(conn)


def migrate(conn: sqlite3.Connection, from_version: int, to_version: int = SCHEMA_VERSION):
    """
    Apply forward-only migration steps between two versions.

    Each step runs in its own transaction together with its version bump.
    """
    logger.info(f"Migrating database from version {from_version} to {to_version}")
    for version, step in MIGRATIONS:
        if from_version < version <= to_version:
            conn.execute("BEGIN")
            try:
                step(conn)
                set_schema_version(conn, version)
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                logger.error(f"Migration to version {version} failed", exc_info=True)
                raise
            logger.info(f"Database migrated to version {version}")

    # Versions without a step still advance the stamp
    if get_schema_version(conn) < to_version:
        set_schema_version(conn, to_version)


def ensure_schema(conn: sqlite3.Connection) -> int:
    """
    Create the schema if needed and bring it up to ``SCHEMA_VERSION``.

    Expects an autocommit connection (``isolation_level=None``). Failures are
    fatal and propagate to the caller.

    Returns:
        The schema version after the call
    """
    create_tables(conn)
    logger.debug("Tables created successfully")

    current_version = get_schema_version(conn)
    if current_version == 0:
        set_schema_version(conn, SCHEMA_VERSION)
        logger.info(f"Schema version set to {SCHEMA_VERSION}")
    elif current_version < SCHEMA_VERSION:
        migrate(conn, current_version, SCHEMA_VERSION)
    else:
        logger.debug(f"Schema is current at version {current_version}")

    return get_schema_version(conn)
