"""Cart tools exposed to the model.

TOOLS is the schema list sent with every Responses API request. ToolRegistry
binds each schema to a handler over the cart store and dispatches the
model's function calls.
"""

import logging
from typing import Any, Callable, Dict, List, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .cart_store import AbstractCartStore
from .errors import InvalidArgumentsError, UnknownFunctionError
from .models import FunctionCall
from .utils import serialize_cart_item

logger = logging.getLogger(__name__)

ITEM_DELETED_MESSAGE = "Cart item deleted"
CART_CLEARED_MESSAGE = "Cart cleared"

# Largest value an SQLite INTEGER column can hold.
SQLITE_MAX_INTEGER = 2**63 - 1


TOOLS = [
    {
        "type": "function",
        "name": "getCartItems",
        "description": "Gets the items in the user's cart",
        "parameters": {
            "type": "object",
            "properties": {},
            "required": [],
            "additionalProperties": False,
        },
        "strict": True,
    },
    {
        "type": "function",
        "name": "addCartItem",
        "description": "Adds an item to the user's cart",
        "parameters": {
            "type": "object",
            "properties": {
                "bouquetSize": {
                    "type": "integer",
                    "description": "Size of the bouquet. 1 = small, 2 = medium, 3 = large",
                },
                "flower": {
                    "type": "string",
                    "description": "Name of the flower, always in plural form (e.g. roses, NOT rose)",
                },
                "color": {
                    "type": "string",
                    "description": "Color of the flower",
                },
            },
            "required": ["bouquetSize", "flower", "color"],
            "additionalProperties": False,
        },
        "strict": True,
    },
    {
        "type": "function",
        "name": "deleteCartItem",
        "description": "Deletes an item from the user's cart",
        "parameters": {
            "type": "object",
            "properties": {
                "itemId": {
                    "type": "integer",
                    "description": "ID of the item to delete",
                },
            },
            "required": ["itemId"],
            "additionalProperties": False,
        },
        "strict": True,
    },
    {
        "type": "function",
        "name": "clearCart",
        "description": "Clears the user's cart",
        "parameters": {
            "type": "object",
            "properties": {},
            "required": [],
            "additionalProperties": False,
        },
        "strict": True,
    },
]


# Argument models mirror the schemas above: no extra fields, no coercion.
class _ToolArgs(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)


class NoArgs(_ToolArgs):
    pass


class AddCartItemArgs(_ToolArgs):
    bouquetSize: int
    flower: str
    color: str


class DeleteCartItemArgs(_ToolArgs):
    itemId: int = Field(ge=1, le=SQLITE_MAX_INTEGER)


Handler = Callable[[str, Any], Any]


class ToolRegistry:
    """Name -> (argument model, handler) table built once per store."""

    def __init__(self, store: AbstractCartStore) -> None:
        self.store = store
        self._handlers: Dict[str, Tuple[Type[_ToolArgs], Handler]] = {
            "getCartItems": (NoArgs, self._get_cart_items),
            "addCartItem": (AddCartItemArgs, self._add_cart_item),
            "deleteCartItem": (DeleteCartItemArgs, self._delete_cart_item),
            "clearCart": (NoArgs, self._clear_cart),
        }
        self._check_catalog()

    @property
    def schemas(self) -> List[Dict[str, Any]]:
        return TOOLS

    def _check_catalog(self) -> None:
        """Fail at startup if handlers and declared schemas drift apart."""
        declared = {tool["name"]: tool for tool in TOOLS}
        if set(declared) != set(self._handlers):
            raise RuntimeError(
                f"Tool catalog mismatch: declared={sorted(declared)}, handled={sorted(self._handlers)}"
            )
        for name, (args_model, _) in self._handlers.items():
            properties = set(declared[name]["parameters"]["properties"])
            if properties != set(args_model.model_fields):
                raise RuntimeError(f"Argument model for {name} does not match its schema")

    def dispatch(self, cart_id: str, call: FunctionCall) -> Any:
        """Validate and run one function call against the given cart."""
        entry = self._handlers.get(call.name)
        if entry is None:
            raise UnknownFunctionError(f"Unknown function: {call.name}")
        args_model, handler = entry

        try:
            args = args_model.model_validate_json(call.arguments or "{}")
        except ValidationError as exc:
            raise InvalidArgumentsError(f"Invalid arguments for {call.name}: {exc}") from exc

        logger.info("Tool call %s (%s) for cart %s", call.name, call.call_id, cart_id)
        return handler(cart_id, args)

    def _get_cart_items(self, cart_id: str, args: NoArgs) -> List[Dict[str, Any]]:
        return [serialize_cart_item(item) for item in self.store.list_items(cart_id)]

    def _add_cart_item(self, cart_id: str, args: AddCartItemArgs) -> str:
        result = self.store.add_item(cart_id, args.bouquetSize, args.flower, args.color)
        return result.message

    def _delete_cart_item(self, cart_id: str, args: DeleteCartItemArgs) -> str:
        self.store.delete_item(args.itemId)
        return ITEM_DELETED_MESSAGE

    def _clear_cart(self, cart_id: str, args: NoArgs) -> str:
        self.store.clear_cart(cart_id)
        return CART_CLEARED_MESSAGE
