"""Domain models for menu items edited in the items grid."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

COL_NAME = 0
COL_DESCRIPTION = 1
COL_PRICE = 2
COL_AMOUNT = 3

HEADERS = ("Name", "Description", "Price", "Amount")
COLUMN_COUNT = len(HEADERS)

# Prompt text shown in the trailing "new item" row.
PLACEHOLDER_TEXT = ("Add Item...", "Enter description...", "0.00", "0")

_ID_KEYS = ("id", "itemId", "_id")


@dataclass(frozen=True)
class CellPosition:
    """Positional identity of a grid cell."""

    row: int
    col: int

    def moved(self, d_row: int, d_col: int) -> "CellPosition":
        return CellPosition(self.row + d_row, self.col + d_col)


@dataclass(frozen=True)
class ItemPayload:
    """Body sent to the repository when creating or updating an item."""

    name: str
    description: str
    price: float
    amount: int


@dataclass(frozen=True)
class Item:
    """A menu item as known by the backend."""

    id: Any
    name: str
    description: str = ""
    price: float = 0.0
    amount: int = 0

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Item":
        """Build an item from a backend record, tolerating alternate id keys."""
        return cls(
            id=extract_item_id(raw),
            name=str(raw.get("name", "") or ""),
            description=str(raw.get("description", "") or ""),
            price=float(raw.get("price", 0.0) or 0.0),
            amount=int(raw.get("amount", 0) or 0),
        )

    def to_payload(self) -> ItemPayload:
        return ItemPayload(
            name=self.name,
            description=self.description,
            price=self.price,
            amount=self.amount,
        )

    def cell_values(self) -> tuple[str, str, str, str]:
        """Return the text representation used by the grid, in column order."""
        return (self.name, self.description, _number_text(self.price), str(self.amount))


def extract_item_id(raw: Mapping[str, Any]) -> Optional[Any]:
    for key in _ID_KEYS:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _number_text(value: float) -> str:
    # Mirror how the backend's JSON numbers read: 3.0 -> "3", 2.5 -> "2.5".
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)
