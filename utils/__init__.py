"""
==========================
Utility Functions Package.
==========================

Helpers that connect the pure SQL builders to a live PostgreSQL database.

Modules:
    database_utils: Engine creation and execution of rendered statements
"""

__version__ = "0.1.0"
__all__ = [
    'create_sqlalchemy_engine',
    'execute_statements',
    'execute_query',
    'log_query',
    'StatementExecutionError'
]

from .database_utils import (
    StatementExecutionError,
    create_sqlalchemy_engine,
    execute_query,
    execute_statements,
    log_query,
)
