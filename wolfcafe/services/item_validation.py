"""Pure cell validation and formatting helpers for the items grid."""
from __future__ import annotations

import math
import re
from typing import Optional, Sequence

from wolfcafe.domain.item_models import (
    COL_AMOUNT,
    COL_DESCRIPTION,
    COL_NAME,
    COL_PRICE,
    COLUMN_COUNT,
    ItemPayload,
)
from wolfcafe.exceptions import RowValidationError

_AMOUNT_PATTERN = re.compile(r"^\d+$")


def parse_price(value: Optional[str]) -> str:
    """Strip a single leading ``$`` from a price string."""
    text = "" if value is None else str(value)
    if text.startswith("$"):
        return text[1:]
    return text


def _parse_finite(text: str) -> Optional[float]:
    if "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_valid_cell(value: Optional[str], col: int) -> bool:
    """Return True when ``value`` satisfies the rule for column ``col``."""
    if col == COL_DESCRIPTION:
        return True
    trimmed = ("" if value is None else str(value)).strip()
    if col == COL_NAME:
        return trimmed != ""
    if col == COL_PRICE:
        stripped = parse_price(trimmed).strip()
        return stripped != "" and _parse_finite(stripped) is not None
    if col == COL_AMOUNT:
        # ASCII digits only; str.isdigit would accept superscripts.
        return _AMOUNT_PATTERN.match(trimmed) is not None and trimmed.isascii()
    return False


def normalize_cell_value(value: Optional[str], col: int) -> str:
    """Return the value stored in the grid for raw editor text."""
    text = "" if value is None else str(value)
    if col == COL_PRICE:
        return parse_price(text)
    return text


def edit_buffer_for(value: str, col: int) -> str:
    """Return the initial editor text for a committed cell value."""
    if col == COL_PRICE:
        return parse_price(value)
    return value


def format_cell_value_for_display(value: str, col: int) -> str:
    """Render numeric prices as ``$X.XX``; every other value is shown verbatim."""
    if col == COL_PRICE and value != "":
        number = _parse_finite(value.strip()) if value.strip() else None
        if number is not None:
            return f"${number:.2f}"
    return value


def invalid_columns(values: Sequence[str]) -> list[int]:
    """Return the column indices of ``values`` that fail validation."""
    return [col for col in range(COLUMN_COUNT) if not is_valid_cell(values[col], col)]


def build_payload(values: Sequence[str], row_number: int) -> ItemPayload:
    """Convert a row's cell texts into a typed payload.

    Raises:
        RowValidationError: if any column fails its rule. ``row_number`` is the
            1-based row shown to the user.
    """
    if len(values) != COLUMN_COUNT:
        raise RowValidationError(row_number)

    name = str(values[COL_NAME] or "").strip()
    description = str(values[COL_DESCRIPTION] or "").strip()
    price_text = parse_price(str(values[COL_PRICE] or "").strip()).strip()
    amount_text = str(values[COL_AMOUNT] or "").strip()

    failing = invalid_columns((name, description, price_text, amount_text))
    if failing:
        raise RowValidationError(row_number, columns=failing)

    return ItemPayload(
        name=name,
        description=description,
        price=float(price_text),
        amount=int(amount_text),
    )
