"""
=====================
UPDATE query builder.
=====================

Mutable builder for UPDATE statements. Besides standalone use, an UpdateQuery
without a table is the action of INSERT ... ON CONFLICT ... DO UPDATE, where
it renders as "UPDATE SET ..." and the INSERT supplies the target.

Example:
    >>> query = UpdateQuery('customers').set(status='inactive').where({'id': 42})
    >>> query.render()
    "UPDATE customers SET status = 'inactive' WHERE id = 42"
    >>>
    >>> action = UpdateQuery().set(email=Raw('EXCLUDED.email'))
    >>> action.render()
    'UPDATE SET email = EXCLUDED.email'
"""

import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Union

from .errors import QueryBuildError
from .escaping import qualify_table, render_identifier, render_literal
from .expression import Predicate, where_builder

logger = logging.getLogger(__name__)


class UpdateQuery:
    """Builder for UPDATE statements.

    Attributes:
        table: Target table, None when used as a conflict action
        schema: Optional schema of the target table
    """

    def __init__(self, table: Optional[str] = None, schema: Optional[str] = None):
        self.table = table
        self.schema = schema
        self._assignments: List[str] = []
        self._wheres: List[Predicate] = []
        self._returning: Optional[str] = None

    def set(self, mapping: Optional[Mapping] = None, **assignments: Any) -> "UpdateQuery":
        """Add column assignments; values are rendered as literals.

        Args:
            mapping: Optional column -> value mapping (for non-identifier names)
            **assignments: Column -> value pairs

        Returns:
            The builder, for chaining
        """
        merged = dict(mapping or {})
        merged.update(assignments)

        for column, value in merged.items():
            self._assignments.append(f"{render_identifier(column)} = {render_literal(value)}")
        return self

    def set_raw(self, assignment: str) -> "UpdateQuery":
        """Add an assignment written as raw SQL (e.g. "counter = counter + 1")."""
        self._assignments.append(assignment)
        return self

    def where(self, *predicates: Predicate) -> "UpdateQuery":
        """Append WHERE predicates (combined with AND)."""
        self._wheres.extend(predicates)
        return self

    def returning(self, expression: Union[str, Sequence[str]]) -> "UpdateQuery":
        """Set the RETURNING clause from raw text or a list of columns."""
        if isinstance(expression, str):
            self._returning = expression
        else:
            self._returning = ", ".join(render_identifier(col) for col in expression)
        return self

    def render(self) -> str:
        """Render the UPDATE statement.

        Raises:
            QueryBuildError: If no assignment was added
        """
        if not self._assignments:
            raise QueryBuildError("UPDATE requires at least one SET assignment")

        parts = [
            "UPDATE",
            qualify_table(self.table, self.schema) if self.table else None,
            "SET",
            ", ".join(self._assignments),
        ]

        where = where_builder(self._wheres)
        if where:
            parts += ["WHERE", where]

        if self._returning:
            parts += ["RETURNING", self._returning]

        sql = " ".join(part for part in parts if part)
        logger.debug(f"Rendered UPDATE: {sql}")
        return sql

    to_sql = render

    def __str__(self):
        return self.render()
