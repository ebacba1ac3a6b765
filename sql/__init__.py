"""
======================================
SQL statement builders for PostgreSQL.
======================================

This package provides mutable builder objects that accumulate the parts of
a statement and render it to SQL text on demand. Rendering is pure: no
connection, no caching, no side effects.

The package is organized as:
    - escaping.py: Identifier quoting and literal formatting (Raw passthrough)
    - expression.py: Predicate rendering for WHERE fragments
    - insert_query.py: INSERT builder with ON CONFLICT and RETURNING
    - update_query.py: UPDATE builder, also the ON CONFLICT DO UPDATE action
    - select_query.py: SELECT builder, used as an INSERT source
    - errors.py: QueryBuildError and its subclasses

Example:
    >>> from sql import InsertQuery, Raw
    >>>
    >>> query = InsertQuery('users').columns('email', 'name')
    >>> query.values('a@example.com', 'Ann').values('b@example.com', 'Bob')
    >>> query.on_conflict('(email)').do_update(name=Raw('EXCLUDED.name'))
    >>> sql = query.render()
"""

__version__ = "0.1.0"
__all__ = [
    # Builders
    'InsertQuery', 'OnConflictWhereClause', 'UpdateQuery', 'SelectQuery',
    # Escaping
    'Raw', 'render_identifier', 'render_literal', 'qualify_table',
    # Predicates
    'where_builder', 'render_predicate',
    # Errors
    'QueryBuildError', 'MissingTargetError', 'EmptyRowError',
    'ConflictingValueSourceError'
]

from .errors import (
    ConflictingValueSourceError,
    EmptyRowError,
    MissingTargetError,
    QueryBuildError,
)
from .escaping import Raw, qualify_table, render_identifier, render_literal
from .expression import render_predicate, where_builder
from .insert_query import InsertQuery, OnConflictWhereClause
from .select_query import SelectQuery
from .update_query import UpdateQuery
