"""
==========================================
Execution helpers for rendered statements.
==========================================

The builders in sql and migration only produce text. This module is the
thin layer that sends that text to PostgreSQL through SQLAlchemy:

    - create_sqlalchemy_engine: engine built from core.config
    - log_query: times a statement and logs it
    - execute_statements: runs an ordered statement list in one transaction
    - execute_query: runs one builder and returns the RETURNING row

Example:
    >>> from migration import Migration
    >>> from sql import InsertQuery
    >>> from utils.database_utils import (
    ...     create_sqlalchemy_engine, execute_query, execute_statements
    ... )
    >>>
    >>> engine = create_sqlalchemy_engine()
    >>> execute_statements(engine, migration.up())
    >>> row = execute_query(engine, InsertQuery('users').values({'email': 'a@b.c'}).returning('id'))
    >>> row['id']
    1
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import config

logger = logging.getLogger(__name__)


class StatementExecutionError(Exception):
    """Exception raised when the database rejects a rendered statement."""

    def __init__(self, message: str, statement: Optional[str] = None):
        super().__init__(message)
        self.statement = statement


def create_sqlalchemy_engine(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10
) -> Engine:
    """
    Create SQLAlchemy engine with connection pooling.

    Arguments left as None fall back to core.config.

    Args:
        host: Database hostname
        port: Database port
        user: Database user
        password: Database password
        database: Database name
        echo: Enable SQLAlchemy statement logging
        pool_size: Connection pool size
        max_overflow: Maximum overflow connections

    Returns:
        Configured SQLAlchemy Engine
    """
    connection_url = URL.create(
        drivername='postgresql',
        username=user or config.db_user,
        password=password or config.db_password,
        host=host or config.db_host,
        port=port or config.db_port,
        database=database or config.db_name
    )

    return create_engine(
        connection_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True
    )


@contextmanager
def log_query(sql: str) -> Iterator[None]:
    """Log a statement with its execution time.

    Example:
        >>> with log_query(sql):
        ...     conn.exec_driver_sql(sql)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"[{elapsed_ms:.2f} ms] {sql}")


def execute_statements(engine: Engine, statements: Iterable[Optional[str]]) -> int:
    """
    Run statements in order inside a single transaction.

    Args:
        engine: SQLAlchemy engine
        statements: Rendered statements (e.g. Migration.up()); None entries are skipped

    Returns:
        Number of statements executed

    Raises:
        StatementExecutionError: If a statement fails; the transaction is rolled back
    """
    executed = 0
    current = None

    try:
        with engine.begin() as conn:
            for current in statements:
                if not current:
                    continue
                with log_query(current):
                    conn.exec_driver_sql(current)
                executed += 1
    except SQLAlchemyError as e:
        logger.error(f"❌ Statement failed after {executed} successful statement(s): {e}")
        raise StatementExecutionError(f"Failed to execute statement: {e}", statement=current) from e

    logger.info(f"✅ Executed {executed} statement(s)")
    return executed


def execute_query(engine: Engine, query: Any) -> Dict[str, Any]:
    """
    Run one builder (anything with render()) and return its first row.

    Args:
        engine: SQLAlchemy engine
        query: InsertQuery, UpdateQuery or SelectQuery

    Returns:
        First result row as a dict when the statement returns rows
        (RETURNING or SELECT), otherwise an empty dict

    Raises:
        StatementExecutionError: If the database rejects the statement
    """
    sql = query.render()

    try:
        with engine.begin() as conn:
            with log_query(sql):
                result = conn.exec_driver_sql(sql)
            if not result.returns_rows:
                return {}
            row = result.mappings().first()
    except SQLAlchemyError as e:
        logger.error(f"❌ Query failed: {e}")
        raise StatementExecutionError(f"Failed to execute query: {e}", statement=sql) from e

    return dict(row) if row is not None else {}
