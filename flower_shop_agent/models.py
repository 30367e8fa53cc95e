# Data models for cart items and tool calls.
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from typing import Optional

from .errors import InvalidArgumentError


class BouquetSize(IntEnum):
    SMALL = 1  # 3 flowers
    MEDIUM = 2  # 5 flowers
    LARGE = 3  # 10 flowers


BOUQUET_PRICES = {
    BouquetSize.SMALL: Decimal("15"),
    BouquetSize.MEDIUM: Decimal("25"),
    BouquetSize.LARGE: Decimal("35"),
}


def price_for_size(bouquet_size: int) -> Decimal:
    """Return the price of a bouquet; the only source of truth for prices."""
    # bool is an int subclass, but True is not a bouquet size
    if isinstance(bouquet_size, bool) or bouquet_size not in BOUQUET_PRICES:
        raise InvalidArgumentError(f"Invalid bouquet size: {bouquet_size!r}")
    return BOUQUET_PRICES[BouquetSize(bouquet_size)]


@dataclass
class CartItem:
    """One bouquet line in a cart."""
    cart_id: str
    bouquet_size: int
    flower: str  # plural form, e.g. "roses"
    color: str
    price: Decimal
    id: Optional[int] = None  # assigned by the store


@dataclass
class AddItemResult:
    """Outcome of adding a bouquet; a full cart yields added=False, not an error."""
    added: bool
    message: str
    item: Optional[CartItem] = None


@dataclass
class FunctionCall:
    """A function call issued by the model within one response."""
    name: str
    call_id: str
    arguments: str  # JSON text


@dataclass
class ChatResult:
    """Final answer of one chat turn."""
    id: str  # continuation token for the next turn
    output: str
