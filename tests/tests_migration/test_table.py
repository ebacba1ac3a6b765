"""
=================================================
Comprehensive pytest suite for migration/table.py
=================================================

Sections:
---------
1. Unit tests - columns, indexes, timestamps, type shorthands
2. Edge case tests - index name normalization, empty tables
3. Regression tests - up/down asymmetry and raw defaults

How to Execute:
---------------
All tests:          pytest tests/tests_migration/test_table.py -v
By category:        pytest tests/tests_migration/test_table.py -m regression
"""

import re

import pytest

from migration.operation import UnimplementedOperationError
from migration.table import (
    COLUMN_TYPES,
    ColumnOperation,
    IndexOperation,
    Table,
    safe_index_name,
)

# =========================
# UNIT TESTS
# =========================


@pytest.mark.unit
def test_single_primary_key_column(users_table):
    users_table.add_column('id', 'integer', primary=True)
    assert users_table.up() == ['CREATE TABLE users (id integer PRIMARY KEY)']


@pytest.mark.unit
def test_column_clause_field_order(users_table):
    users_table.add_column('status', 'text', default="'active'", nullable=False, primary=True)
    assert users_table.up() == [
        "CREATE TABLE users (status text NOT NULL DEFAULT 'active' PRIMARY KEY)"
    ]


@pytest.mark.unit
@pytest.mark.parametrize("nullable", [True, False])
def test_not_null_present_only_when_not_nullable(nullable):
    rendered = ColumnOperation('name', 'text', nullable=nullable).render()
    assert ('NOT NULL' in rendered) is (not nullable)


@pytest.mark.unit
def test_columns_are_comma_joined_in_declaration_order(users_table):
    users_table.add_column('id', 'serial', primary=True)
    users_table.add_column('email', 'text', nullable=False)
    users_table.add_column('age', 'integer')

    assert users_table.up()[0] == (
        'CREATE TABLE users (id serial PRIMARY KEY, email text NOT NULL, age integer)'
    )


@pytest.mark.unit
def test_unique_column_adds_unique_index(users_table):
    users_table.add_column('email', 'text', unique=True, index=True)

    assert users_table.index_operations == [
        IndexOperation(field='email', name='users_email', using=None, unique=True)
    ]
    assert users_table.up()[1] == 'CREATE UNIQUE INDEX users_email ON users (email)'


@pytest.mark.unit
def test_indexed_column_adds_plain_index(users_table):
    users_table.add_column('last_login', 'timestamp', index=True)
    assert users_table.up()[1] == 'CREATE INDEX users_last_login ON users (last_login)'


@pytest.mark.unit
def test_add_index_with_name_and_method(users_table):
    users_table.add_column('tags', 'jsonb')
    users_table.add_index('tags', name='idx_users_tags', using='gin')

    assert users_table.up() == [
        'CREATE TABLE users (tags jsonb)',
        'CREATE INDEX idx_users_tags ON users USING gin (tags)',
    ]


@pytest.mark.unit
def test_index_alias(users_table):
    users_table.index('email', unique=True)
    assert users_table.index_operations[0].unique is True
    assert users_table.index_operations[0].name == 'users_email'


@pytest.mark.unit
def test_indexes_render_in_accumulation_order(users_table):
    users_table.add_index('b').add_index('a', unique=True)
    assert users_table.up()[1:] == [
        'CREATE INDEX users_b ON users (b)',
        'CREATE UNIQUE INDEX users_a ON users (a)',
    ]


@pytest.mark.unit
def test_timestamps_adds_two_columns_and_two_indexes(users_table):
    users_table.timestamps()

    assert [c.column for c in users_table.column_operations] == ['created_at', 'updated_at']
    assert [i.field for i in users_table.index_operations] == ['created_at', 'updated_at']
    assert not any(i.unique for i in users_table.index_operations)
    assert users_table.up() == [
        'CREATE TABLE users ('
        'created_at timestamp without time zone NOT NULL DEFAULT NOW(), '
        'updated_at timestamp without time zone NOT NULL DEFAULT NOW())',
        'CREATE INDEX users_created_at ON users (created_at)',
        'CREATE INDEX users_updated_at ON users (updated_at)',
    ]


@pytest.mark.unit
def test_timestamps_nullable(users_table):
    users_table.timestamps(nullable=True)
    assert 'NOT NULL' not in users_table.up()[0]
    assert 'DEFAULT NOW()' in users_table.up()[0]


@pytest.mark.unit
def test_type_shorthands_resolve_through_lookup_table(users_table):
    users_table.string('name').float('score').timestamp('seen_at').uuid('token', unique=True)

    types = [(c.column, c.type) for c in users_table.column_operations]
    assert types == [
        ('name', 'text'),
        ('score', 'double precision'),
        ('seen_at', 'timestamp without time zone'),
        ('token', 'uuid'),
    ]
    assert users_table.index_operations[0].unique is True


@pytest.mark.unit
def test_generic_column_shorthand(users_table):
    users_table.column('timestamptz', 'deleted_at')
    assert users_table.column_operations[0].type == COLUMN_TYPES['timestamptz']


@pytest.mark.unit
def test_unknown_shorthand_raises(users_table):
    with pytest.raises(ValueError, match="Unknown column type 'email'"):
        users_table.column('email', 'contact')


@pytest.mark.unit
def test_non_create_mode_is_unimplemented():
    with pytest.raises(UnimplementedOperationError):
        Table('users', is_create=False)


@pytest.mark.unit
def test_unimplemented_error_is_not_implemented_error():
    assert issubclass(UnimplementedOperationError, NotImplementedError)


# =========================
# EDGE CASE TESTS
# =========================


@pytest.mark.edge_case
def test_table_without_columns_omits_parentheses():
    assert Table('empty').up() == ['CREATE TABLE empty']


@pytest.mark.edge_case
def test_duplicate_columns_are_all_rendered(users_table):
    users_table.add_column('a', 'text').add_column('a', 'integer')
    assert users_table.up()[0] == 'CREATE TABLE users (a text, a integer)'


@pytest.mark.edge_case
@pytest.mark.parametrize("text, expected", [
    ('users_email', 'users_email'),
    ('UserProfiles_email', 'user_profiles_email'),
    ('HTTPRequests_path', 'http_requests_path'),
    ('users_lower(email)', 'users_lower_email_'),
    ('users__a--b  c', 'users_a_b_c'),
    ('événements_date', '_v_nements_date'),
])
def test_safe_index_name(text, expected):
    assert safe_index_name(text) == expected


@pytest.mark.edge_case
@pytest.mark.parametrize("table, field", [
    ('Users', 'Email Address'),
    ('a--b', '__c__'),
    ('schema.table', 'lower(name)'),
    ('x', '$$$'),
])
def test_generated_index_names_are_sql_safe(table, field):
    name = Table(table).add_index(field).index_operations[0].name

    assert name
    assert re.fullmatch(r'[a-zA-Z0-9_]+', name)
    assert '__' not in name


# =========================
# REGRESSION TESTS
# =========================


@pytest.mark.regression
def test_down_never_drops_indexes(users_table):
    users_table.add_column('email', 'text', unique=True)
    users_table.timestamps()

    assert len(users_table.index_operations) == 3
    assert users_table.down() == ['DROP TABLE users']


@pytest.mark.regression
def test_default_is_inserted_unescaped(users_table):
    users_table.add_column('note', 'text', default="'it''s'")
    assert users_table.up()[0] == "CREATE TABLE users (note text DEFAULT 'it''s')"


@pytest.mark.regression
def test_up_is_idempotent(users_table):
    users_table.serial('id', primary=True).timestamps()
    assert users_table.up() == users_table.up()


@pytest.mark.regression
def test_up_always_starts_with_create_table():
    table = Table('audit')
    table.add_index('created_at')

    assert table.up() == ['CREATE TABLE audit', 'CREATE INDEX audit_created_at ON audit (created_at)']
    assert None not in table.up()
