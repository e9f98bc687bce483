"""
SQLite database wrapper
Provides the durable key-value medium the record store persists into
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from seizuretrack.core.logger import get_logger
from seizuretrack.core.sqls import queries, schema

logger = get_logger(__name__)


class StorageError(Exception):
    """Raised when the storage medium rejects a read or a write"""


class DatabaseManager:
    """Database manager"""

    def __init__(self, db_path: Optional[str] = None):
        # If no path is provided, use the unified data directory
        if db_path is None:
            from seizuretrack.core.paths import get_db_path

            db_path = str(get_db_path())

        self.db_path = str(db_path)
        self._init_database()

    def _init_database(self):
        """Initialize database"""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._create_tables()
        logger.info(f"Database initialization completed: {self.db_path}")

    def _create_tables(self):
        """Create database tables"""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            for table_sql in schema.ALL_TABLES:
                cursor.execute(table_sql)

            for index_sql in schema.ALL_INDEXES:
                cursor.execute(index_sql)

            conn.commit()
            logger.debug("Database table creation completed")

    @contextmanager
    def get_connection(self):
        """Get database connection context manager"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row  # Enable column name access for results
        try:
            yield conn
        finally:
            conn.close()

    def execute_query(self, query: str, params: Tuple = ()) -> List[Dict[str, Any]]:
        """Execute query and return results"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            rows = cursor.fetchall()
            return [dict(row) for row in rows]

    def execute_update(self, query: str, params: Tuple = ()) -> int:
        """Execute update operation and return affected row count"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            conn.commit()
            return cursor.rowcount

    # Key-value methods
    def get_item(self, key: str) -> Optional[str]:
        """Get the raw value stored under key, None when absent"""
        try:
            rows = self.execute_query(queries.SELECT_ITEM, (key,))
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e
        return rows[0]["value"] if rows else None

    def set_item(self, key: str, value: str) -> None:
        """Replace the value stored under key"""
        try:
            self.execute_update(queries.UPSERT_ITEM, (key, value))
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write '{key}': {e}") from e

    def remove_item(self, key: str) -> bool:
        """Delete key, returns whether it existed"""
        try:
            return self.execute_update(queries.DELETE_ITEM, (key,)) > 0
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete '{key}': {e}") from e

    def keys(self) -> List[str]:
        """List stored keys"""
        try:
            return [row["key"] for row in self.execute_query(queries.SELECT_ALL_KEYS)]
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list keys: {e}") from e

    def get_storage_stats(self) -> List[Dict[str, Any]]:
        """Size and last update time of each stored entry"""
        try:
            return self.execute_query(queries.SELECT_ITEM_SIZES)
        except sqlite3.Error as e:
            logger.warning(f"Failed to read storage statistics: {e}")
            return []


def open_database(db_path: Optional[str] = None) -> DatabaseManager:
    """Create a database manager from an explicit path or the config value

    Reads database.path from config.toml and falls back to
    <app home>/seizuretrack.db when it is not configured.
    """
    if db_path is None:
        from seizuretrack.config.loader import get_config
        from seizuretrack.core.paths import get_db_path

        configured_path = get_config().get("database.path", "")
        if configured_path and str(configured_path).strip():
            db_path = str(configured_path)
        else:
            db_path = str(get_db_path())

    manager = DatabaseManager(db_path)
    logger.info(f"✓ Database manager initialized, path: {db_path}")
    return manager
