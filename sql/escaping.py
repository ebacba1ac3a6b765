"""
===============================================
Identifier and literal escaping for PostgreSQL.
===============================================

Every identifier and every scalar that the INSERT/UPDATE/SELECT builders
emit goes through this module. Identifier quoting is delegated to
SQLAlchemy's PostgreSQL identifier preparer, which leaves legal lower-case
names bare and double-quotes anything else (upper case, reserved words,
special characters), doubling embedded quotes.

Functions:
    render_identifier: Quote a table, column or index name
    qualify_table: Schema-qualified table reference
    render_literal: Format a Python scalar as a SQL literal

Classes:
    Raw: SQL text passed through unescaped (e.g. NOW(), EXCLUDED.name)

Example:
    >>> render_identifier('email')
    'email'
    >>> render_identifier('user')
    '"user"'
    >>> qualify_table('customers', schema='staging')
    'staging.customers'
    >>> render_literal("O'Brien")
    "'O''Brien'"
    >>> render_literal(Raw('NOW()'))
    'NOW()'
"""

import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.dialects import postgresql

_preparer = postgresql.dialect().identifier_preparer


class Raw:
    """SQL expression inserted verbatim into rendered statements.

    The caller is responsible for the text being valid, safe SQL.

    Example:
        >>> InsertQuery('events').values({'created_at': Raw('NOW()')})
    """

    __slots__ = ('text',)

    def __init__(self, text: str):
        self.text = str(text)

    def render(self) -> str:
        return self.text

    def __eq__(self, other):
        return isinstance(other, Raw) and other.text == self.text

    def __hash__(self):
        return hash(self.text)

    def __repr__(self):
        return f"Raw({self.text!r})"


def render_identifier(name: Any) -> str:
    """Quote a single SQL identifier for PostgreSQL.

    Args:
        name: Identifier; non-string values are converted with str()

    Returns:
        The identifier, double-quoted when PostgreSQL requires it
    """
    return _preparer.quote(str(name))


def qualify_table(table: Any, schema: Optional[str] = None) -> str:
    """Render a table reference, optionally prefixed with its schema.

    Args:
        table: Table name
        schema: Optional schema name

    Returns:
        Escaped table reference such as staging.customers
    """
    quoted_table = render_identifier(table)
    if schema:
        return f"{render_identifier(schema)}.{quoted_table}"
    return quoted_table


def _quote_text(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def render_literal(value: Any) -> str:
    """Format a Python value as a PostgreSQL literal.

    Supported values:
        None -> NULL, bool -> TRUE/FALSE, int/Decimal -> digits,
        float -> repr (NaN/Infinity quoted), str/UUID -> quoted text,
        datetime/date/time -> quoted ISO text, bytes -> quoted bytea hex,
        Raw -> verbatim text, builder with render() -> parenthesised sub-query.

    Args:
        value: Scalar to render

    Returns:
        SQL literal text

    Raises:
        TypeError: If the value type has no literal form
    """
    if value is None:
        return "NULL"

    if isinstance(value, Raw):
        return value.text

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"

    if isinstance(value, int):
        return str(value)

    if isinstance(value, float):
        if math.isnan(value):
            return "'NaN'"
        if math.isinf(value):
            return "'Infinity'" if value > 0 else "'-Infinity'"
        return repr(value)

    if isinstance(value, Decimal):
        if not value.is_finite():
            return _quote_text(str(value))
        return str(value)

    if isinstance(value, str):
        return _quote_text(value)

    # datetime before date: datetime is a date subclass
    if isinstance(value, datetime):
        return _quote_text(value.isoformat(sep=' '))

    if isinstance(value, (date, time)):
        return _quote_text(value.isoformat())

    if isinstance(value, UUID):
        return _quote_text(str(value))

    if isinstance(value, (bytes, bytearray, memoryview)):
        return _quote_text("\\x" + bytes(value).hex())

    if callable(getattr(value, 'render', None)):
        return f"({value.render()})"

    raise TypeError(f"Cannot render {type(value).__name__} as a SQL literal: {value!r}")
