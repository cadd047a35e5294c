import logging

import pytest

from tests.factories import item_payload
from wolfcafe.domain.item_models import COL_AMOUNT, COL_NAME, COL_PRICE
from wolfcafe.exceptions import (
    DatabaseConnectionError,
    ItemNotFoundError,
    RepositoryError,
)
from wolfcafe.persistence import migrations
from wolfcafe.persistence.database_manager import DatabaseManager
from wolfcafe.services.item_repository import DatabaseItemRepository
from wolfcafe.services.save_reconciler import SaveReconciler
from wolfcafe.ui.view_models import ItemsGridViewModel


@pytest.fixture()
def db():
    manager = DatabaseManager(":memory:", logger=logging.getLogger("test_db"))
    yield manager
    manager.close()


@pytest.fixture()
def repository(db):
    return DatabaseItemRepository(db, logger=logging.getLogger("test_repo"))


def test_schema_setup_records_version(db):
    db.cursor.execute("SELECT MAX(version) FROM schema_version")
    assert db.cursor.fetchone()[0] == migrations.SCHEMA_VERSION
    assert db._table_exists("items")


def test_schema_setup_is_idempotent(db):
    db.setup_database()

    db.cursor.execute("SELECT COUNT(*) FROM schema_version WHERE version = ?", (migrations.SCHEMA_VERSION,))
    assert db.cursor.fetchone()[0] == 1


def test_database_file_is_created_with_parent_directory(tmp_path):
    path = tmp_path / "nested" / "wolfcafe.db"

    manager = DatabaseManager(str(path))
    manager.close()

    assert path.exists()


def test_unopenable_database_raises_connection_error(tmp_path):
    with pytest.raises(DatabaseConnectionError):
        DatabaseManager(str(tmp_path))


def test_create_then_list_in_identity_order(repository):
    first = repository.create_item(item_payload(name="Coffee", price=2.5, amount=10))
    second = repository.create_item(item_payload(name="Tea", description="green", price=1.5, amount=5))

    listed = repository.list_items()

    assert [entry.id for entry in listed] == [first.id, second.id]
    assert listed[1].name == "Tea"
    assert listed[1].description == "green"
    assert listed[1].price == pytest.approx(1.5)
    assert listed[1].amount == 5


def test_update_changes_stored_values(repository):
    created = repository.create_item(item_payload(name="Coffee"))

    repository.update_item(created.id, item_payload(name="Dark Roast", price=3.0, amount=4))

    (stored,) = repository.list_items()
    assert (stored.name, stored.price, stored.amount) == ("Dark Roast", 3.0, 4)


def test_update_of_unknown_item_raises_not_found(repository):
    with pytest.raises(ItemNotFoundError) as excinfo:
        repository.update_item(999, item_payload())

    assert "999" in excinfo.value.message


def test_constraint_violation_is_a_repository_error(repository):
    with pytest.raises(RepositoryError):
        repository.create_item(item_payload(amount=-1))


def test_list_on_closed_database_raises(db, repository):
    db.close()

    with pytest.raises(RepositoryError, match="Failed to load items."):
        repository.list_items()


def test_grid_round_trip_through_sqlite(repository):
    repository.create_item(item_payload(name="Coffee", description="", price=2.5, amount=10))
    grid = ItemsGridViewModel()
    grid.load(repository.list_items())

    grid.commit_cell(0, COL_PRICE, "$3.00")
    grid.begin_new_row(1)
    grid.commit_cell(1, COL_NAME, "Tea")
    grid.commit_cell(1, COL_PRICE, "1.50")
    grid.commit_cell(1, COL_AMOUNT, "5")
    SaveReconciler(repository, max_workers=2).reconcile(grid)

    assert grid.row_values(0) == ("Coffee", "", "3", "10")
    assert grid.row_values(1) == ("Tea", "", "1.5", "5")
    assert grid.row_count == 3
    assert not grid.has_pending_changes
