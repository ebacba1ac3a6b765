"""
=====================
SELECT query builder.
=====================

Small SELECT builder whose main use is as the source of
INSERT INTO ... (SELECT ...). It covers projection, FROM, WHERE, ORDER BY
and LIMIT; anything richer can be passed as Raw text.

Example:
    >>> query = (
    ...     SelectQuery('customers', schema='staging')
    ...     .select('id', 'email')
    ...     .where({'column': 'is_deleted', 'value': False})
    ...     .order_by('id')
    ...     .limit(100)
    ... )
    >>> query.render()
    'SELECT id, email FROM staging.customers WHERE is_deleted = FALSE ORDER BY id LIMIT 100'
"""

from typing import List, Optional, Union

from .escaping import Raw, qualify_table, render_identifier
from .expression import Predicate, where_builder


class SelectQuery:
    """Builder for SELECT statements."""

    def __init__(
        self,
        table: Optional[str] = None,
        columns: Union[str, List[Union[str, Raw]]] = "*",
        schema: Optional[str] = None
    ):
        self.table = table
        self.schema = schema
        self._columns: List[Union[str, Raw]] = []
        self._wheres: List[Predicate] = []
        self._order_by: List[str] = []
        self._limit: Optional[int] = None

        if columns != "*":
            self.select(*([columns] if isinstance(columns, str) else columns))

    def select(self, *columns: Union[str, Raw]) -> "SelectQuery":
        """Append projected columns; Raw entries are emitted verbatim."""
        self._columns.extend(columns)
        return self

    def from_(self, table: str, schema: Optional[str] = None) -> "SelectQuery":
        self.table = table
        self.schema = schema
        return self

    def where(self, *predicates: Predicate) -> "SelectQuery":
        self._wheres.extend(predicates)
        return self

    def order_by(self, *expressions: str) -> "SelectQuery":
        """Append ORDER BY expressions as raw text (e.g. "created_at DESC")."""
        self._order_by.extend(expressions)
        return self

    def limit(self, limit: Optional[int]) -> "SelectQuery":
        self._limit = limit
        return self

    def _render_columns(self) -> str:
        if not self._columns:
            return "*"
        return ", ".join(
            col.text if isinstance(col, Raw) else render_identifier(col)
            for col in self._columns
        )

    def render(self) -> str:
        """Render the SELECT statement."""
        parts = ["SELECT", self._render_columns()]

        if self.table:
            parts += ["FROM", qualify_table(self.table, self.schema)]

        where = where_builder(self._wheres)
        if where:
            parts += ["WHERE", where]

        if self._order_by:
            parts += ["ORDER BY", ", ".join(self._order_by)]

        if self._limit is not None:
            parts += ["LIMIT", str(int(self._limit))]

        return " ".join(parts)

    to_sql = render

    def __str__(self):
        return self.render()
