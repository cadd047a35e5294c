"""Domain models for the WolfCafe items editor."""

from .item_models import (
    COL_AMOUNT,
    COL_DESCRIPTION,
    COL_NAME,
    COL_PRICE,
    COLUMN_COUNT,
    HEADERS,
    PLACEHOLDER_TEXT,
    CellPosition,
    Item,
    ItemPayload,
)

__all__ = [
    "COL_AMOUNT",
    "COL_DESCRIPTION",
    "COL_NAME",
    "COL_PRICE",
    "COLUMN_COUNT",
    "HEADERS",
    "PLACEHOLDER_TEXT",
    "CellPosition",
    "Item",
    "ItemPayload",
]
