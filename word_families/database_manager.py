#!/usr/bin/env python3
"""Centralized PostgreSQL connection manager with pooling."""

from typing import Optional, Dict, Any
import logging
from contextlib import contextmanager
from threading import Lock

from psycopg.rows import dict_row
from psycopg.pq import TransactionStatus
from psycopg_pool import ConnectionPool

from .config import DatabaseConfig, get_database_config

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Database connection manager with connection pooling
    Provides consistent database access patterns for the stores and indexes
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config_obj = config or get_database_config()
        self.pool: Optional[ConnectionPool] = None
        self._initialized = False
        self.setup_connection_pool()

    def setup_connection_pool(self):
        """Setup PostgreSQL connection pool"""
        try:
            conninfo = self.config_obj.get_connection_string(hide_password=False)
            max_size = self.config_obj.pool_size or 10
            self.pool = ConnectionPool(
                conninfo=conninfo,
                min_size=1,
                max_size=max_size,
                timeout=self.config_obj.timeout,
                name="word_family_pool",
                open=True,
            )
            self._initialized = True
            logger.info("Database connection pool initialized successfully")

        except Exception as exc:
            logger.error(f"Failed to create PostgreSQL connection pool: {exc}")
            raise

    @contextmanager
    def get_connection(self, autocommit: bool = False):
        """
        Get a database connection from the pool

        Args:
            autocommit: Whether to enable autocommit mode

        Yields:
            Database connection, committed on success and rolled back on error
        """
        if not self.pool:
            raise RuntimeError("Database connection pool is not initialized")

        with self.pool.connection() as connection:
            connection.autocommit = autocommit
            try:
                if self.config_obj.schema:
                    connection.execute(
                        f'SET search_path TO "{self.config_obj.schema}"',
                        prepare=False,
                    )
                yield connection
                if not autocommit:
                    connection.commit()
            except Exception:
                if not autocommit:
                    connection.rollback()
                raise
            finally:
                if connection.info.transaction_status == TransactionStatus.IDLE:
                    connection.autocommit = False

    @contextmanager
    def get_cursor(self, dictionary: bool = False, autocommit: bool = False):
        """
        Get a database cursor (convenience method)

        Args:
            dictionary: Whether to return rows as dictionaries
            autocommit: Whether to enable autocommit mode

        Example:
            with db_manager.get_cursor(dictionary=True) as cursor:
                cursor.execute("SELECT * FROM vocabulary WHERE id = %s", (123,))
                row = cursor.fetchone()
        """
        cursor_kwargs: Dict[str, Any] = {}
        if dictionary:
            cursor_kwargs['row_factory'] = dict_row

        with self.get_connection(autocommit=autocommit) as conn:
            with conn.cursor(**cursor_kwargs) as real_cursor:
                yield CursorWrapper(real_cursor)

    def test_connection(self) -> bool:
        """Return True when a trivial query succeeds"""
        try:
            with self.get_cursor() as cursor:
                cursor.execute("SELECT 1")
                return cursor.fetchone()[0] == 1
        except Exception as e:
            logger.error(f"Connection test failed: {e}")
            return False


class CursorWrapper:
    """
    Wrapper around psycopg cursor that disables prepared statements by default.
    Prevents "prepared statement already exists" errors behind a transaction pooler.
    """

    def __init__(self, cursor):
        self._cursor = cursor

    def execute(self, query, params=None, **kwargs):
        """Execute with prepare=False by default"""
        kwargs.setdefault('prepare', False)
        return self._cursor.execute(query, params, **kwargs)

    def executemany(self, query, params_seq, **kwargs):
        kwargs.pop('prepare', None)
        return self._cursor.executemany(query, params_seq, **kwargs)

    def __getattr__(self, name):
        return getattr(self._cursor, name)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return self._cursor.__exit__(*args)


_db_manager: Optional[DatabaseManager] = None
_manager_lock = Lock()


def get_database_manager() -> DatabaseManager:
    """
    Get the process-wide database manager, creating the pool on first use

    Returns:
        DatabaseManager instance
    """
    global _db_manager
    if _db_manager is None:
        with _manager_lock:
            if _db_manager is None:
                _db_manager = DatabaseManager()
    return _db_manager

