"""Repository abstraction consumed by the items grid."""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence

from wolfcafe.domain.item_models import Item, ItemPayload
from wolfcafe.exceptions import ItemNotFoundError, RepositoryError


class ItemRepository(Protocol):
    """Interface exposing the item operations required by the grid."""

    def list_items(self) -> Sequence[Item]:
        ...

    def create_item(self, payload: ItemPayload) -> Item:
        ...

    def update_item(self, item_id: Any, payload: ItemPayload) -> None:
        ...


class DatabaseItemRepository:
    """Adapter that wraps the sqlite items repository API."""

    def __init__(self, db_manager: Any, logger: Optional[logging.Logger] = None) -> None:
        self._db = db_manager
        self._logger = logger or logging.getLogger(__name__)

    @property
    def _items(self):
        return self._db.items_repo

    def list_items(self) -> Sequence[Item]:
        rows = self._items.get_all_items()
        error = self._items.last_error()
        if error:
            raise RepositoryError("Failed to load items.", detail=error)
        return [Item.from_mapping(dict(row)) for row in rows]

    def create_item(self, payload: ItemPayload) -> Item:
        new_id = self._items.add_item(
            payload.name, payload.description, payload.price, payload.amount
        )
        if new_id is None:
            detail = self._items.last_error()
            raise RepositoryError(detail or f"Failed to create item '{payload.name}'.", detail=detail)
        self._logger.debug("Created item %s (%s)", new_id, payload.name)
        return Item(
            id=new_id,
            name=payload.name,
            description=payload.description,
            price=payload.price,
            amount=payload.amount,
        )

    def update_item(self, item_id: Any, payload: ItemPayload) -> None:
        if not self._items.update_item(
            item_id, payload.name, payload.description, payload.price, payload.amount
        ):
            detail = self._items.last_error()
            if self._items.get_item(item_id) is None:
                raise ItemNotFoundError(detail or f"Item {item_id} does not exist.", detail=detail)
            raise RepositoryError(detail or f"Failed to update item {item_id}.", detail=detail)
        self._logger.debug("Updated item %s", item_id)
