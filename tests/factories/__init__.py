from .items import (
    FakeItemRepository,
    RecordingView,
    amount_texts,
    invalid_amount_texts,
    invalid_price_texts,
    item,
    item_payload,
    items,
    price_texts,
)

__all__ = [
    "FakeItemRepository",
    "RecordingView",
    "amount_texts",
    "invalid_amount_texts",
    "invalid_price_texts",
    "item",
    "item_payload",
    "items",
    "price_texts",
]
