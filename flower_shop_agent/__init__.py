"""Conversational flower shop assistant with a tool-calling cart."""

from .agent import FlowerShopChatAgent
from .cart_store import AbstractCartStore, SqliteCartStore
from .models import CartItem, ChatResult
from .tools import ToolRegistry

__all__ = [
    "FlowerShopChatAgent",
    "AbstractCartStore",
    "SqliteCartStore",
    "CartItem",
    "ChatResult",
    "ToolRegistry",
]
