"""
=====================
INSERT query builder.
=====================

Mutable builder for a single PostgreSQL INSERT statement:

    INSERT INTO table_name [ ( column_name [, ...] ) ]
        { DEFAULT VALUES | VALUES ( expression [, ...] ) [, ...] | ( query ) }
        [ ON CONFLICT [ conflict_target ] DO conflict_action ]
        [ RETURNING output_expression ]

Values come either from rows (named mappings or positional tuples) or from a
SELECT sub-query, never both. Rendering is a pure function of the builder's
state: render() can be called any number of times.

Classes:
    InsertQuery: The INSERT builder
    OnConflictWhereClause: Predicate fragment for ON CONFLICT ... WHERE
    RowValues / SubQueryValues: The two kinds of value source

Example:
    >>> query = InsertQuery('users').values({'email': 'a@example.com', 'name': 'Ann'})
    >>> query.on_conflict('(email)').do_nothing().returning('id')
    >>> print(query.render())
    INSERT INTO users (email, name) VALUES ('a@example.com', 'Ann') ON CONFLICT (email) DO NOTHING RETURNING id
    >>>
    >>> # Upsert
    >>> query = InsertQuery('users', values={'email': 'a@example.com', 'name': 'Ann'})
    >>> query.on_conflict('(email)').do_update(name=Raw('EXCLUDED.name'))
    >>> print(query.render())
    INSERT INTO users (email, name) VALUES ('a@example.com', 'Ann') ON CONFLICT (email) DO UPDATE SET name = EXCLUDED.name
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from .errors import ConflictingValueSourceError, EmptyRowError, MissingTargetError
from .escaping import Raw, qualify_table, render_identifier, render_literal
from .expression import Predicate, where_builder
from .update_query import UpdateQuery

logger = logging.getLogger(__name__)


class OnConflictWhereClause:
    """Predicates of an ON CONFLICT ... WHERE fragment, combined with AND.

    render() returns the fragment without the WHERE keyword; InsertQuery
    emits the keyword when embedding it.
    """

    def __init__(self, *predicates: Predicate):
        self.wheres: List[Predicate] = list(predicates)

    def where(self, *predicates: Predicate) -> "OnConflictWhereClause":
        self.wheres.extend(predicates)
        return self

    def render(self) -> str:
        return where_builder(self.wheres)

    def __str__(self):
        return self.render()


@dataclass
class RowValues:
    """Value source made of literal rows."""

    rows: List[Tuple[Any, ...]] = field(default_factory=list)


@dataclass(frozen=True)
class SubQueryValues:
    """Value source made of a sub-query exposing render()."""

    query: Any


ConflictCondition = Union[bool, str, OnConflictWhereClause]
ConflictAction = Union[str, UpdateQuery]


def _is_query(value: Any) -> bool:
    # Raw is a scalar expression, not a row source
    return not isinstance(value, (str, Mapping, Raw)) and callable(getattr(value, 'render', None))


class InsertQuery:
    """Builder for INSERT statements.

    Attributes:
        table: Target table name, required before render()
        schema: Optional schema of the target table
        keys: Column names of the insertion; empty means no column list
        on_conflict_condition: False (no clause), True (bare ON CONFLICT),
            a conflict target string, or an OnConflictWhereClause
        on_conflict_action: Action text after DO, or an UpdateQuery
    """

    def __init__(
        self,
        table: Optional[str] = None,
        values: Any = None,
        schema: Optional[str] = None
    ):
        self.table = table
        self.schema = schema
        self.keys: List[str] = []
        self.value_source: Union[RowValues, SubQueryValues] = RowValues()
        self.returning_expression: Optional[str] = None
        self.on_conflict_condition: ConflictCondition = False
        self.on_conflict_action: ConflictAction = "NOTHING"

        if values is not None:
            self.values(values)

    def into(self, table: str, schema: Optional[str] = None) -> "InsertQuery":
        self.table = table
        self.schema = schema
        return self

    # ------------------------------------------------------------------
    # Value source
    # ------------------------------------------------------------------

    def _rows_for_update(self) -> List[Tuple[Any, ...]]:
        if isinstance(self.value_source, SubQueryValues):
            raise ConflictingValueSourceError("Cannot insert both from SELECT and from data")
        return self.value_source.rows

    def values(self, *args: Any) -> "InsertQuery":
        """Set the values to insert.

        Accepted forms:
            values({'a': 1, 'b': 2}): one named row, replaces keys and rows
            values([{'a': 1}, {'a': 2}]): several named rows replacing the
                current ones, keys taken from the last row (row shapes are
                not checked); an empty list changes nothing
            values(select_query): INSERT ... (SELECT ...)
            values(1, 2): appends one positional row, keys unchanged
            values(Raw("NOW()")): one positional row holding a raw expression

        Raises:
            ConflictingValueSourceError: If rows and a sub-query are mixed
        """
        if len(args) == 1:
            arg = args[0]
            if isinstance(arg, Mapping):
                return self._set_named_rows([arg])
            if _is_query(arg):
                return self.from_select(arg)
            if isinstance(arg, (list, tuple)) and all(isinstance(r, Mapping) for r in arg):
                return self._set_named_rows(arg)

        return self.add_row(*args)

    def _set_named_rows(self, rows: Sequence[Mapping]) -> "InsertQuery":
        self._rows_for_update()
        if not rows:
            return self

        self.keys = [str(key) for key in rows[-1].keys()]
        self.value_source = RowValues([tuple(row.values()) for row in rows])
        return self

    def add_row(self, *values: Any) -> "InsertQuery":
        """Append one positional row, independent of keys."""
        self._rows_for_update().append(tuple(values))
        return self

    def from_select(self, query: Any) -> "InsertQuery":
        """Use a sub-query (any object with render()) as the value source.

        Raises:
            ConflictingValueSourceError: If rows were already added
        """
        if isinstance(self.value_source, RowValues) and self.value_source.rows:
            raise ConflictingValueSourceError("Cannot insert both from SELECT and from data")

        self.value_source = SubQueryValues(query)
        return self

    def columns(self, *names: str) -> "InsertQuery":
        """Set the column list explicitly, used with positional rows."""
        self.keys = [str(name) for name in names]
        return self

    def size(self) -> int:
        """Number of rows to insert, -1 when inserting from a sub-query."""
        if isinstance(self.value_source, SubQueryValues):
            return -1
        return len(self.value_source.rows)

    # ------------------------------------------------------------------
    # RETURNING / ON CONFLICT
    # ------------------------------------------------------------------

    def returning(self, expression: Union[str, Sequence[str]]) -> "InsertQuery":
        """Set the RETURNING clause from raw text or a list of columns."""
        if isinstance(expression, str):
            self.returning_expression = expression
        else:
            self.returning_expression = ", ".join(render_identifier(col) for col in expression)
        return self

    def on_conflict(self, condition: ConflictCondition = True) -> "InsertQuery":
        """Set the conflict condition.

        Args:
            condition: True for a bare ON CONFLICT, a conflict target written
                as SQL (e.g. "(email)" or "ON CONSTRAINT users_email_key"),
                or an OnConflictWhereClause
        """
        self.on_conflict_condition = condition
        return self

    def on_conflict_where(self, *predicates: Predicate) -> "InsertQuery":
        """Set an ON CONFLICT WHERE condition built from predicates."""
        self.on_conflict_condition = OnConflictWhereClause(*predicates)
        return self

    def do_conflict_action(self, action: str) -> "InsertQuery":
        """Set the conflict action as raw text placed after DO."""
        self.on_conflict_action = str(action)
        return self

    def do_update(
        self,
        configure: Optional[Callable[[UpdateQuery], Any]] = None,
        **assignments: Any
    ) -> "InsertQuery":
        """Use an UPDATE as the conflict action.

        Args:
            configure: Optional callable receiving the UpdateQuery to set up
            **assignments: Column -> value pairs passed to UpdateQuery.set

        Example:
            >>> query.on_conflict('(id)').do_update(
            ...     lambda u: u.set(name=Raw('EXCLUDED.name')).where('users.locked = FALSE')
            ... )
        """
        action = UpdateQuery()
        if assignments:
            action.set(**assignments)
        if configure is not None:
            configure(action)

        self.on_conflict_action = action
        return self

    def do_nothing(self) -> "InsertQuery":
        self.on_conflict_action = "NOTHING"
        return self

    def has_conflict(self) -> bool:
        return bool(self.on_conflict_condition)

    def clear_conflict(self) -> "InsertQuery":
        self.on_conflict_condition = False
        return self

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_keys(self) -> Optional[str]:
        if not self.keys:
            return None
        return "(" + ", ".join(render_identifier(key) for key in self.keys) + ")"

    def _render_values(self) -> str:
        source = self.value_source

        if isinstance(source, SubQueryValues):
            return f"({source.query.render()})"

        rows = source.rows
        if not rows or (len(rows) == 1 and not rows[0] and not self.keys):
            return "DEFAULT VALUES"

        rendered = []
        for idx, row in enumerate(rows):
            if not row:
                raise EmptyRowError(f"No value to insert (at row #{idx})")
            rendered.append("(" + ", ".join(render_literal(value) for value in row) + ")")

        return "VALUES " + ",\n".join(rendered)

    def _render_conflict(self) -> List[str]:
        condition = self.on_conflict_condition
        if not condition:
            return []

        parts = ["ON CONFLICT"]

        if isinstance(condition, OnConflictWhereClause):
            fragment = condition.render()
            if fragment:
                parts += ["WHERE", fragment]
        elif condition is not True:
            parts.append(str(condition))

        action = self.on_conflict_action
        parts += ["DO", action.render() if isinstance(action, UpdateQuery) else str(action)]
        return parts

    def render(self) -> str:
        """Render the INSERT statement.

        Raises:
            MissingTargetError: If no table was set
            EmptyRowError: If an accumulated row holds no values
        """
        if not self.table:
            raise MissingTargetError("You must provide an `into` clause")

        parts = [
            "INSERT INTO",
            qualify_table(self.table, self.schema),
            self._render_keys(),
            self._render_values(),
        ]
        parts += self._render_conflict()

        if self.returning_expression:
            parts += ["RETURNING", self.returning_expression]

        sql = " ".join(part for part in parts if part)
        logger.debug(f"Rendered INSERT into {self.table} ({self.size()} row(s))")
        return sql

    to_sql = render

    def __str__(self):
        return self.render()
