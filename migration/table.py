"""
======================================
Table definition for create_table DDL.
======================================

Accumulates column and index operations for one table and renders them as
CREATE TABLE / CREATE INDEX statements (up) and DROP TABLE (down).

Known limitations, kept on purpose:
    - down() drops the table only; indexes created by up() are not dropped
      explicitly (they go away with the table).
    - Column defaults are inserted as raw SQL text, callers must pass
      SQL-safe expressions such as "NOW()" or "'active'".
    - Table, column and index names are emitted as given, unquoted.

Example:
    >>> table = Table('users')
    >>> table.serial('id', primary=True)
    >>> table.string('email', nullable=False, unique=True)
    >>> table.timestamps()
    >>> table.up()[0]
    'CREATE TABLE users (id serial PRIMARY KEY, email text NOT NULL, created_at ...)'
    >>> table.down()
    ['DROP TABLE users']
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from .operation import Operation, UnimplementedOperationError

logger = logging.getLogger(__name__)

# Closed set of column type shorthands and the SQL type each one stands for
COLUMN_TYPES = {
    'string': 'text',
    'text': 'text',
    'integer': 'integer',
    'bigint': 'bigint',
    'smallint': 'smallint',
    'serial': 'serial',
    'bigserial': 'bigserial',
    'boolean': 'boolean',
    'float': 'double precision',
    'decimal': 'numeric',
    'uuid': 'uuid',
    'json': 'json',
    'jsonb': 'jsonb',
    'date': 'date',
    'timestamp': 'timestamp without time zone',
    'timestamptz': 'timestamp with time zone',
    'bytea': 'bytea',
}

TIMESTAMP_TYPE = COLUMN_TYPES['timestamp']


def safe_index_name(text: str) -> str:
    """Normalize text into an index name.

    CamelCase is split into snake_case, the result is lower-cased, every run
    of characters outside [a-zA-Z0-9_] becomes one underscore and repeated
    underscores are collapsed.

    Example:
        >>> safe_index_name('UserProfiles_email-address')
        'user_profiles_email_address'
    """
    text = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', text)
    text = re.sub(r'([a-z\d])([A-Z])', r'\1_\2', text)
    text = re.sub(r'[^a-zA-Z0-9_]', '_', text.lower())
    name = re.sub(r'_+', '_', text)
    return name or '_'


@dataclass(frozen=True)
class ColumnOperation:
    """One column definition inside CREATE TABLE."""

    column: str
    type: str
    nullable: bool = True
    default: Optional[str] = None
    primary: bool = False

    def render(self) -> str:
        parts = [
            self.column,
            self.type,
            None if self.nullable else "NOT NULL",
            f"DEFAULT {self.default}" if self.default is not None else None,
            "PRIMARY KEY" if self.primary else None,
        ]
        return " ".join(part for part in parts if part)


@dataclass(frozen=True)
class IndexOperation:
    """One CREATE INDEX on a single field."""

    field: str
    name: str
    using: Optional[str] = None
    unique: bool = False

    def render(self, table: str) -> str:
        parts = [
            "CREATE",
            "UNIQUE" if self.unique else None,
            "INDEX",
            self.name,
            "ON",
            table,
            f"USING {self.using}" if self.using else None,
            f"({self.field})",
        ]
        return " ".join(part for part in parts if part)


class Table(Operation):
    """Definition of a table created by a migration.

    Attributes:
        name: Table name
        is_create: Create mode; altering an existing table is not supported
        column_operations: Columns in declaration order
        index_operations: Indexes in declaration order
    """

    def __init__(self, name: str, is_create: bool = True):
        if not is_create:
            raise UnimplementedOperationError(
                f"Altering table '{name}' is not implemented, only table creation is supported"
            )

        self.name = str(name)
        self.is_create = is_create
        self.column_operations: List[ColumnOperation] = []
        self.index_operations: List[IndexOperation] = []

    def add_column(
        self,
        column: str,
        type: str,
        default: Any = None,
        nullable: bool = True,
        primary: bool = False,
        index: bool = False,
        unique: bool = False
    ) -> "Table":
        """Add a column, plus an index when index or unique is set.

        Args:
            column: Column name
            type: SQL type, already resolved (e.g. "text", "integer")
            default: SQL expression used as DEFAULT, inserted unescaped
            nullable: False adds NOT NULL
            primary: Adds PRIMARY KEY
            index: Adds a non-unique index on the column
            unique: Adds a unique index on the column (takes precedence over index)
        """
        self.column_operations.append(ColumnOperation(
            column=str(column),
            type=str(type),
            nullable=nullable,
            default=None if default is None else str(default),
            primary=primary
        ))

        if unique:
            self.add_index(column, unique=True)
        elif index:
            self.add_index(column, unique=False)

        return self

    def add_index(
        self,
        field: str,
        name: Optional[str] = None,
        using: Optional[str] = None,
        unique: bool = False
    ) -> "Table":
        """Add an index on one field.

        Args:
            field: Indexed column or expression
            name: Index name, defaults to the normalized "<table>_<field>"
            using: Index method (e.g. "gin", "hash")
            unique: Create a UNIQUE index
        """
        name = name or safe_index_name(f"{self.name}_{field}")

        self.index_operations.append(IndexOperation(
            field=str(field),
            name=name,
            using=None if using is None else str(using),
            unique=unique
        ))
        return self

    index = add_index

    def column(self, type_alias: str, column: str, **options: Any) -> "Table":
        """Add a column using a shorthand from COLUMN_TYPES.

        Raises:
            ValueError: If the shorthand is unknown
        """
        try:
            sql_type = COLUMN_TYPES[type_alias]
        except KeyError:
            raise ValueError(
                f"Unknown column type '{type_alias}', expected one of {sorted(COLUMN_TYPES)}"
            ) from None
        return self.add_column(column, sql_type, **options)

    def string(self, column: str, **options: Any) -> "Table":
        return self.column('string', column, **options)

    def text(self, column: str, **options: Any) -> "Table":
        return self.column('text', column, **options)

    def integer(self, column: str, **options: Any) -> "Table":
        return self.column('integer', column, **options)

    def bigint(self, column: str, **options: Any) -> "Table":
        return self.column('bigint', column, **options)

    def serial(self, column: str, **options: Any) -> "Table":
        return self.column('serial', column, **options)

    def bigserial(self, column: str, **options: Any) -> "Table":
        return self.column('bigserial', column, **options)

    def boolean(self, column: str, **options: Any) -> "Table":
        return self.column('boolean', column, **options)

    def float(self, column: str, **options: Any) -> "Table":
        return self.column('float', column, **options)

    def decimal(self, column: str, **options: Any) -> "Table":
        return self.column('decimal', column, **options)

    def uuid(self, column: str, **options: Any) -> "Table":
        return self.column('uuid', column, **options)

    def jsonb(self, column: str, **options: Any) -> "Table":
        return self.column('jsonb', column, **options)

    def date(self, column: str, **options: Any) -> "Table":
        return self.column('date', column, **options)

    def timestamp(self, column: str, **options: Any) -> "Table":
        return self.column('timestamp', column, **options)

    def timestamps(self, nullable: bool = False) -> "Table":
        """Add created_at and updated_at, both defaulting to NOW() and indexed."""
        self.add_column('created_at', TIMESTAMP_TYPE, nullable=nullable, default="NOW()")
        self.add_column('updated_at', TIMESTAMP_TYPE, nullable=nullable, default="NOW()")
        self.add_index('created_at')
        self.add_index('updated_at')
        return self

    def _render_columns(self) -> Optional[str]:
        if not self.column_operations:
            return None
        return "(" + ", ".join(col.render() for col in self.column_operations) + ")"

    def up(self) -> List[str]:
        create = " ".join(part for part in ["CREATE TABLE", self.name, self._render_columns()] if part)
        statements = [create] + [index.render(self.name) for index in self.index_operations]
        logger.debug(
            f"Rendered table '{self.name}': {len(self.column_operations)} column(s), "
            f"{len(self.index_operations)} index(es)"
        )
        return statements

    def down(self) -> List[str]:
        return [f"DROP TABLE {self.name}"]
