"""
=================================================
Reversible DDL definitions for schema migrations.
=================================================

Modules:
    operation: Operation base class, AddTable, DropTable and migration errors
    table: Table (create_table definition), column/index operations
    migration: Migration, the helper collecting operations

Example:
    >>> from migration import Migration
    >>>
    >>> migration = Migration('create_users')
    >>> with migration.create_table('users') as t:
    ...     t.string('email', nullable=False, unique=True)
    ...     t.timestamps()
    >>> up_statements = migration.up()
    >>> down_statements = migration.down()
"""

__version__ = "0.1.0"
__all__ = [
    'Operation', 'AddTable', 'DropTable', 'Table', 'ColumnOperation',
    'IndexOperation', 'Migration', 'COLUMN_TYPES', 'safe_index_name',
    'MigrationError', 'UnimplementedOperationError'
]

from .migration import Migration
from .operation import (
    AddTable,
    DropTable,
    MigrationError,
    Operation,
    UnimplementedOperationError,
)
from .table import COLUMN_TYPES, ColumnOperation, IndexOperation, Table, safe_index_name
