"""
======================================
Boolean predicate rendering for WHERE.
======================================

Renders the predicate fragments used by ON CONFLICT ... WHERE, UPDATE and
SELECT builders. There is no expression tree; a predicate is
one of

- a raw SQL string (or Raw), passed through as written,
- a condition dict {'column': ..., 'operator': ..., 'value': ...},
- a mapping of column -> value, meaning equality on every column.

Values are rendered through sql.escaping.render_literal and columns through
render_identifier.

Functions:
    render_predicate: Render one predicate
    where_builder: Combine predicates into a WHERE fragment (no keyword)

Example:
    >>> where_builder([
    ...     {'column': 'status', 'operator': '=', 'value': 'active'},
    ...     {'column': 'id', 'value': [1, 2, 3]},
    ...     'deleted_at IS NULL'
    ... ])
    "(status = 'active') AND (id IN (1, 2, 3)) AND (deleted_at IS NULL)"
"""

from collections.abc import Mapping
from typing import Any, Iterable, List, Union

from .escaping import Raw, render_identifier, render_literal

Predicate = Union[str, Raw, Mapping]

CONDITION_KEYS = {'column', 'operator', 'value'}


def _render_condition(column: Any, operator: str, value: Any) -> str:
    operator = operator.strip().upper()
    target = render_identifier(column)

    if value is None:
        if operator in ('=', 'IS'):
            return f"{target} IS NULL"
        if operator in ('!=', '<>', 'IS NOT'):
            return f"{target} IS NOT NULL"

    if isinstance(value, (list, tuple, set, frozenset)):
        if operator == '=':
            operator = 'IN'
        elif operator in ('!=', '<>'):
            operator = 'NOT IN'
        if not value:
            # IN () is not valid SQL
            return "FALSE" if operator == 'IN' else "TRUE"
        items = ", ".join(render_literal(v) for v in value)
        return f"{target} {operator} ({items})"

    return f"{target} {operator} {render_literal(value)}"


def render_predicate(predicate: Predicate) -> str:
    """Render a single predicate to SQL text.

    Args:
        predicate: Raw string, Raw, condition dict or column/value mapping

    Returns:
        Predicate SQL without surrounding parentheses

    Raises:
        TypeError: If the predicate has an unsupported type
        ValueError: If a mapping is empty
    """
    if isinstance(predicate, Raw):
        return predicate.text

    if isinstance(predicate, str):
        return predicate

    if isinstance(predicate, Mapping):
        if 'column' in predicate and set(predicate) <= CONDITION_KEYS:
            return _render_condition(
                predicate['column'],
                predicate.get('operator', '='),
                predicate.get('value')
            )

        if not predicate:
            raise ValueError("Cannot render an empty predicate mapping")

        parts = [_render_condition(column, '=', value) for column, value in predicate.items()]
        return " AND ".join(parts)

    raise TypeError(f"Unsupported predicate type: {type(predicate).__name__}")


def where_builder(predicates: Iterable[Predicate], operator: str = "AND") -> str:
    """Build a WHERE fragment from predicates.

    Each predicate is parenthesised when more than one is combined so that
    OR inside a raw predicate cannot leak across the join.

    Args:
        predicates: Predicates to combine
        operator: Logical operator between predicates (AND, OR)

    Returns:
        WHERE clause without the WHERE keyword, empty string when no predicates
    """
    rendered: List[str] = [render_predicate(p) for p in predicates]

    if not rendered:
        return ""

    if len(rendered) == 1:
        return rendered[0]

    return f" {operator.upper()} ".join(f"({part})" for part in rendered)
