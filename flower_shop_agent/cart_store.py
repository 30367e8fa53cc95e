"""Cart persistence.

Provides:
- AbstractCartStore: interface used by the tool registry and the cart endpoint
- SqliteCartStore: SQLite-backed store with a lazily opened shared connection

The five-bouquet limit is enforced inside the store so that no caller can
bypass it."""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator, List, Optional

from .config import CART_DB_PATH, MAX_CART_ITEMS
from .errors import CartStoreError
from .models import AddItemResult, CartItem, price_for_size

logger = logging.getLogger(__name__)

ITEM_ADDED_MESSAGE = "Cart item added"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cart_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    cart_id TEXT NOT NULL,
    bouquet_size INTEGER NOT NULL,
    flower TEXT NOT NULL,
    color TEXT NOT NULL,
    price NUMERIC NOT NULL
)
"""


def capacity_refusal_message(max_items: int = MAX_CART_ITEMS) -> str:
    return f"You cannot have more than {max_items} bouquets in your cart"


class AbstractCartStore:
    """Interface for cart stores."""

    def list_items(self, cart_id: str) -> List[CartItem]:
        #Return the cart's items in insertion order; empty for unknown carts
        raise NotImplementedError

    def add_item(self, cart_id: str, bouquet_size: int, flower: str, color: str) -> AddItemResult:
        #Persist one bouquet unless the cart is full
        raise NotImplementedError

    def delete_item(self, item_id: int) -> None:
        raise NotImplementedError

    def clear_cart(self, cart_id: str) -> None:
        raise NotImplementedError


class SqliteCartStore(AbstractCartStore):
    """SQLite cart store.

    A single connection is opened on first use and reused for the lifetime of
    the store. SQLite connections are not thread-safe by default, so the
    connection is created with ``check_same_thread=False`` and every
    operation holds ``self._lock``.
    """

    def __init__(self, db_path: str = CART_DB_PATH, max_items: int = MAX_CART_ITEMS) -> None:
        self.db_path = db_path
        self.max_items = max_items
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    def _get_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            with self._lock:
                if self._connection is None:
                    logger.info("Opening cart database at %s", self.db_path)
                    try:
                        # Autocommit mode; transactions are opened explicitly below.
                        conn = sqlite3.connect(self.db_path, check_same_thread=False, isolation_level=None)
                        conn.row_factory = sqlite3.Row
                        conn.execute(_SCHEMA)
                    except sqlite3.Error as exc:
                        raise CartStoreError(f"Cannot open cart database: {exc}") from exc
                    self._connection = conn
        return self._connection

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        """Run statements in one IMMEDIATE transaction, rolling back on error."""
        conn = self._get_connection()
        with self._lock:
            cur = conn.cursor()
            try:
                cur.execute("BEGIN IMMEDIATE")
                yield cur
                cur.execute("COMMIT")
            except (sqlite3.Error, OverflowError) as exc:
                if conn.in_transaction:
                    conn.rollback()
                raise CartStoreError(str(exc)) from exc
            except Exception:
                if conn.in_transaction:
                    conn.rollback()
                raise
            finally:
                cur.close()

    def list_items(self, cart_id: str) -> List[CartItem]:
        conn = self._get_connection()
        with self._lock:
            try:
                rows = conn.execute(
                    "SELECT id, cart_id, bouquet_size, flower, color, price "
                    "FROM cart_items WHERE cart_id = ? ORDER BY id",
                    (cart_id,),
                ).fetchall()
            except sqlite3.Error as exc:
                raise CartStoreError(str(exc)) from exc
        return [_row_to_item(row) for row in rows]

    def add_item(self, cart_id: str, bouquet_size: int, flower: str, color: str) -> AddItemResult:
        price = price_for_size(bouquet_size)

        with self._transaction() as cur:
            # Count check and insert are one statement, so two concurrent adds
            # cannot both see room for the last slot.
            cur.execute(
                "INSERT INTO cart_items (cart_id, bouquet_size, flower, color, price) "
                "SELECT ?, ?, ?, ?, ? "
                "WHERE (SELECT COUNT(*) FROM cart_items WHERE cart_id = ?) < ?",
                (cart_id, int(bouquet_size), flower, color, str(price), cart_id, self.max_items),
            )
            inserted = cur.rowcount == 1
            item_id = cur.lastrowid if inserted else None

        if not inserted:
            logger.info("Cart %s is full, refusing %s %s", cart_id, color, flower)
            return AddItemResult(added=False, message=capacity_refusal_message(self.max_items))

        item = CartItem(
            id=item_id,
            cart_id=cart_id,
            bouquet_size=int(bouquet_size),
            flower=flower,
            color=color,
            price=price,
        )
        return AddItemResult(added=True, message=ITEM_ADDED_MESSAGE, item=item)

    def delete_item(self, item_id: int) -> None:
        with self._transaction() as cur:
            cur.execute("DELETE FROM cart_items WHERE id = ?", (item_id,))

    def clear_cart(self, cart_id: str) -> None:
        with self._transaction() as cur:
            cur.execute("DELETE FROM cart_items WHERE cart_id = ?", (cart_id,))

    def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None


def _row_to_item(row: sqlite3.Row) -> CartItem:
    return CartItem(
        id=row["id"],
        cart_id=row["cart_id"],
        bouquet_size=row["bouquet_size"],
        flower=row["flower"],
        color=row["color"],
        price=Decimal(str(row["price"])),
    )
