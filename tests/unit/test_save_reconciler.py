import logging

import pytest

from tests.factories import FakeItemRepository, item
from wolfcafe.domain.item_models import COL_AMOUNT, COL_DESCRIPTION, COL_NAME, COL_PRICE
from wolfcafe.exceptions import ItemNotFoundError, RepositoryError, RowValidationError
from wolfcafe.services.save_reconciler import SAVE_FAILED_MESSAGE, SavePlan, SaveReconciler
from wolfcafe.ui.view_models import ItemsGridViewModel


def _add_row(grid, name, description, price, amount):
    row = grid.row_count - 1
    grid.begin_new_row(row)
    for col, value in ((COL_NAME, name), (COL_DESCRIPTION, description), (COL_PRICE, price), (COL_AMOUNT, amount)):
        grid.commit_cell(row, col, value)
    return row


@pytest.fixture()
def coffee_repo():
    return FakeItemRepository([item(id=1, name="Coffee", description="", price=2.5, amount=10)])


@pytest.fixture()
def coffee_grid(coffee_repo):
    grid = ItemsGridViewModel()
    grid.load(coffee_repo.list_items())
    coffee_repo.calls.clear()
    return grid


def _reconciler(repo):
    return SaveReconciler(repo, logger=logging.getLogger("test_save_reconciler"))


def test_reconcile_updates_creates_and_reloads(coffee_repo, coffee_grid):
    coffee_grid.commit_cell(0, COL_PRICE, "3.00")
    _add_row(coffee_grid, "Tea", "", "1.50", "5")

    _reconciler(coffee_repo).reconcile(coffee_grid)

    creates = coffee_repo.calls_of("create")
    updates = coffee_repo.calls_of("update")
    assert [call[1].name for call in creates] == ["Tea"]
    assert creates[0][1].price == pytest.approx(1.5)
    assert creates[0][1].amount == 5
    assert len(updates) == 1
    assert updates[0][1] == 1
    assert updates[0][2].price == pytest.approx(3.0)
    assert coffee_repo.calls[-1] == ("list",)

    assert coffee_grid.row_count == 3
    assert coffee_grid.row_values(0) == ("Coffee", "", "3", "10")
    assert coffee_grid.row_values(1) == ("Tea", "", "1.5", "5")
    assert coffee_grid.backing_ids() == (1, 2)
    assert coffee_grid.is_placeholder_row(2)
    assert not coffee_grid.has_dirty_changes
    assert not coffee_grid.has_unsaved_rows


def test_invalid_row_aborts_before_any_repository_call(coffee_repo, coffee_grid):
    coffee_grid.commit_cell(0, COL_PRICE, "abc")
    _add_row(coffee_grid, "Tea", "", "1.50", "5")
    before = coffee_grid.rows()

    with pytest.raises(RowValidationError) as excinfo:
        _reconciler(coffee_repo).reconcile(coffee_grid)

    assert excinfo.value.row_number == 1
    assert coffee_repo.calls == []
    assert coffee_grid.rows() == before
    assert coffee_grid.has_invalid_cells


def test_creates_run_in_row_order_without_overlap():
    repo = FakeItemRepository(create_delay=0.01)
    grid = ItemsGridViewModel()
    grid.load(repo.list_items())
    for name in ("A", "B", "C"):
        _add_row(grid, name, "", "1", "1")

    _reconciler(repo).reconcile(grid)

    assert [call[1].name for call in repo.calls_of("create")] == ["A", "B", "C"]
    assert repo.max_concurrent_creates == 1
    assert grid.backing_ids() == (1, 2, 3)


def test_unmodified_rows_are_not_resent():
    repo = FakeItemRepository([item(id=1, name="Coffee"), item(id=2, name="Tea")])
    grid = ItemsGridViewModel()
    grid.load(repo.list_items())
    grid.commit_cell(1, COL_AMOUNT, "99")

    plan = _reconciler(repo).prepare(grid)

    assert plan.creates == ()
    assert [item_id for item_id, _ in plan.updates] == [2]


def test_row_edited_back_to_baseline_is_skipped(coffee_repo, coffee_grid):
    coffee_grid.commit_cell(0, COL_NAME, "Latte")
    coffee_grid.commit_cell(0, COL_NAME, "Coffee")

    plan = _reconciler(coffee_repo).prepare(coffee_grid)

    assert plan.is_empty


def test_many_updates_are_all_sent():
    repo = FakeItemRepository([item(id=i, name=f"Item {i}") for i in range(1, 9)])
    grid = ItemsGridViewModel()
    grid.load(repo.list_items())
    for row in range(8):
        grid.commit_cell(row, COL_AMOUNT, str(row + 100))

    SaveReconciler(repo, max_workers=3).reconcile(grid)

    assert sorted(call[1] for call in repo.calls_of("update")) == list(range(1, 9))
    assert grid.row_values(7)[COL_AMOUNT] == "107"


def test_failed_create_leaves_grid_untouched_and_stops(coffee_repo, coffee_grid):
    coffee_repo.fail_create_names["B"] = RepositoryError("Name already exists")
    for name in ("A", "B", "C"):
        _add_row(coffee_grid, name, "", "1", "1")
    before = coffee_grid.rows()

    with pytest.raises(RepositoryError, match="Name already exists"):
        _reconciler(coffee_repo).reconcile(coffee_grid)

    assert [call[1].name for call in coffee_repo.calls_of("create")] == ["A", "B"]
    assert coffee_repo.calls_of("list") == []
    assert coffee_grid.rows() == before
    # Already-applied creates are not rolled back.
    assert [entry.name for entry in coffee_repo.items.values()] == ["Coffee", "A"]


def test_failed_update_surfaces_first_error_after_others_settle():
    repo = FakeItemRepository([item(id=1, name="Coffee"), item(id=2, name="Tea")])
    repo.fail_update_ids[1] = RepositoryError("Price rejected")
    grid = ItemsGridViewModel()
    grid.load(repo.list_items())
    grid.commit_cell(0, COL_AMOUNT, "5")
    grid.commit_cell(1, COL_AMOUNT, "6")

    with pytest.raises(RepositoryError, match="Price rejected"):
        _reconciler(repo).reconcile(grid)

    assert len(repo.calls_of("update")) == 2
    assert repo.items[2].amount == 6
    assert grid.is_row_modified(0) and grid.is_row_modified(1)


def test_unexpected_exceptions_are_wrapped():
    class Exploding(FakeItemRepository):
        def create_item(self, payload):
            raise OSError("connection reset")

    plan = SavePlan(creates=(item().to_payload(),))

    with pytest.raises(RepositoryError) as excinfo:
        _reconciler(Exploding()).persist(plan)

    assert excinfo.value.message == "connection reset"
    assert isinstance(excinfo.value.__cause__, OSError)


def test_update_of_missing_item_is_a_repository_error(coffee_repo):
    plan = SavePlan(updates=((42, item().to_payload()),))

    with pytest.raises(ItemNotFoundError):
        _reconciler(coffee_repo).persist(plan)


@pytest.mark.parametrize(
    "exc,expected",
    [
        (RepositoryError("Backend says no"), "Backend says no"),
        (RepositoryError(""), SAVE_FAILED_MESSAGE),
        (RuntimeError(""), SAVE_FAILED_MESSAGE),
        (RuntimeError("boom"), "boom"),
    ],
)
def test_describe_error_prefers_backend_message(exc, expected):
    assert SaveReconciler.describe_error(exc) == expected
