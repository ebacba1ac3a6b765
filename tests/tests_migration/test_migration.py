"""
==================================================================
Pytest suite for migration/migration.py and migration/operation.py
==================================================================

Test Coverage:
--------------
- AddTable / DropTable up and down statements
- Migration.create_table context manager (default id column, primary=False)
- Migration.up / down ordering across several operations
- Operation abstract base
"""

import pytest

from migration import AddTable, DropTable, Migration, Operation, Table


@pytest.mark.unit
def test_add_table_operation():
    op = AddTable('audit')
    assert op.up() == ['CREATE TABLE audit']
    assert op.down() == ['DROP TABLE audit']


@pytest.mark.unit
def test_drop_table_operation_is_mirror():
    op = DropTable('audit')
    assert op.up() == ['DROP TABLE audit']
    assert op.down() == ['CREATE TABLE audit']


@pytest.mark.unit
def test_operation_is_abstract():
    with pytest.raises(TypeError):
        Operation()


@pytest.mark.unit
def test_create_table_adds_serial_primary_key_by_default():
    migration = Migration()

    with migration.create_table('users') as t:
        t.string('email', nullable=False, unique=True)

    assert isinstance(migration.operations[0], Table)
    assert migration.up() == [
        'CREATE TABLE users (id serial PRIMARY KEY, email text NOT NULL)',
        'CREATE UNIQUE INDEX users_email ON users (email)',
    ]
    assert migration.down() == ['DROP TABLE users']


@pytest.mark.unit
def test_create_table_without_default_primary_key():
    migration = Migration()

    with migration.create_table('accounts', primary=False) as t:
        t.uuid('account_id', primary=True)

    assert migration.up() == ['CREATE TABLE accounts (account_id uuid PRIMARY KEY)']


@pytest.mark.unit
def test_table_is_not_registered_when_block_raises():
    migration = Migration()

    with pytest.raises(RuntimeError):
        with migration.create_table('broken') as t:
            t.string('name')
            raise RuntimeError("boom")

    assert migration.operations == []


@pytest.mark.integration
def test_up_in_order_and_down_in_reverse():
    migration = Migration('init')

    with migration.create_table('users') as t:
        t.timestamps()
    migration.add_table('audit')
    migration.drop_table('legacy')

    assert migration.up() == [
        'CREATE TABLE users (id serial PRIMARY KEY, '
        'created_at timestamp without time zone NOT NULL DEFAULT NOW(), '
        'updated_at timestamp without time zone NOT NULL DEFAULT NOW())',
        'CREATE INDEX users_created_at ON users (created_at)',
        'CREATE INDEX users_updated_at ON users (updated_at)',
        'CREATE TABLE audit',
        'DROP TABLE legacy',
    ]
    assert migration.down() == [
        'CREATE TABLE legacy',
        'DROP TABLE audit',
        'DROP TABLE users',
    ]


@pytest.mark.unit
def test_empty_migration_renders_nothing():
    migration = Migration()
    assert migration.up() == []
    assert migration.down() == []
    assert migration.name == 'Migration'


@pytest.mark.edge_case
def test_none_statements_are_skipped():
    class PartialOperation(Operation):
        def up(self):
            return [None, 'SELECT 1']

        def down(self):
            return [None]

    migration = Migration()
    migration.add_operation(PartialOperation())

    assert migration.up() == ['SELECT 1']
    assert migration.down() == []
