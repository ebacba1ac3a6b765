"""
=============================
Reversible schema operations.
=============================

An operation renders a forward ("up") and a reverse ("down") list of SQL
statements. Statements are meant to be run one at a time, in order, by
whatever executes the migration (see utils.database_utils.execute_statements).

Classes:
    Operation: Abstract base for every migration operation
    AddTable: Bare CREATE TABLE / DROP TABLE pair
    DropTable: Mirror of AddTable
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class MigrationError(Exception):
    """Exception raised for migration definition errors."""
    pass


class UnimplementedOperationError(MigrationError, NotImplementedError):
    """Raised when a migration operation variant is not supported yet."""
    pass


class Operation(ABC):
    """A schema change that knows how to apply and revert itself."""

    @abstractmethod
    def up(self) -> List[Optional[str]]:
        """Statements applying the operation."""

    @abstractmethod
    def down(self) -> List[Optional[str]]:
        """Statements reverting the operation."""


class AddTable(Operation):
    """Create an empty table."""

    def __init__(self, table: str):
        self.table = table

    def up(self) -> List[Optional[str]]:
        return [f"CREATE TABLE {self.table}"]

    def down(self) -> List[Optional[str]]:
        return [f"DROP TABLE {self.table}"]


class DropTable(Operation):
    """Drop a table; reverting recreates it empty."""

    def __init__(self, table: str):
        self.table = table

    def up(self) -> List[Optional[str]]:
        return [f"DROP TABLE {self.table}"]

    def down(self) -> List[Optional[str]]:
        return [f"CREATE TABLE {self.table}"]
