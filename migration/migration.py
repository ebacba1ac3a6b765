"""
============================
Migration definition helper.
============================

A Migration collects operations and renders the full forward and reverse
statement lists. It does not execute anything and keeps no record of which
migrations were applied; pass the rendered lists to an executor such as
utils.database_utils.execute_statements.

Example:
    >>> migration = Migration()
    >>> with migration.create_table('users') as t:
    ...     t.string('first_name')
    ...     t.string('email', nullable=False, unique=True)
    ...     t.timestamps()
    >>> migration.up()
    ['CREATE TABLE users (id serial PRIMARY KEY, first_name text, ...)', 'CREATE UNIQUE INDEX users_email ON users (email)', ...]
    >>> migration.down()
    ['DROP TABLE users']
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from .operation import AddTable, DropTable, Operation
from .table import Table

logger = logging.getLogger(__name__)


class Migration:
    """Ordered collection of reversible operations.

    Attributes:
        name: Optional label used in log messages
        operations: Operations in the order they were added
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.__class__.__name__
        self.operations: List[Operation] = []

    def add_operation(self, operation: Operation) -> Operation:
        self.operations.append(operation)
        return operation

    @contextmanager
    def create_table(self, name: str, primary: bool = True) -> Iterator[Table]:
        """Define a new table inside a with block.

        By default an "id serial PRIMARY KEY" column is created first; pass
        primary=False to declare a custom primary key instead. The table is
        registered when the block exits without an exception.

        Args:
            name: Table name
            primary: Add the default id primary key column

        Example:
            >>> with migration.create_table('accounts', primary=False) as t:
            ...     t.uuid('account_id', primary=True)
            ...     t.string('label')
        """
        table = Table(name, is_create=True)

        if primary:
            table.serial('id', primary=True)

        yield table
        self.add_operation(table)

    def add_table(self, name: str) -> AddTable:
        return self.add_operation(AddTable(name))

    def drop_table(self, name: str) -> DropTable:
        return self.add_operation(DropTable(name))

    def up(self) -> List[str]:
        """Forward statements of every operation, in declaration order."""
        statements = [
            statement
            for operation in self.operations
            for statement in operation.up()
            if statement
        ]
        logger.debug(f"Migration {self.name}: {len(statements)} up statement(s)")
        return statements

    def down(self) -> List[str]:
        """Reverse statements, last operation first."""
        statements = [
            statement
            for operation in reversed(self.operations)
            for statement in operation.down()
            if statement
        ]
        logger.debug(f"Migration {self.name}: {len(statements)} down statement(s)")
        return statements
