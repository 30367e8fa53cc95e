"""Simple CLI entry point for the flower shop assistant."""

import asyncio
import logging
import uuid

from flower_shop_agent import FlowerShopChatAgent, SqliteCartStore, ToolRegistry
from flower_shop_agent.config import LOG_LEVEL
from flower_shop_agent.errors import FlowerShopError

SIZE_NAMES = {1: "Small", 2: "Medium", 3: "Large"}


def print_cart(store: SqliteCartStore, cart_id: str) -> None:
    items = store.list_items(cart_id)
    if not items:
        print("Cart: (empty)")
        return
    total = sum(item.price for item in items)
    print("Cart:")
    for item in items:
        size = SIZE_NAMES.get(item.bouquet_size, item.bouquet_size)
        print(f"  #{item.id} {size} bouquet of {item.color} {item.flower} - {item.price}€")
    print(f"  Total: {total}€")


async def main() -> None:
    store = SqliteCartStore()
    agent = FlowerShopChatAgent(ToolRegistry(store))
    cart_id = str(uuid.uuid4())
    previous_id = None
    print("Flower shop assistant is ready. Type 'exit' or 'quit' to stop.")

    while True:
        try:
            user_input = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting.")
            break

        if not user_input:
            continue
        if user_input.lower() in {"exit", "quit"}:
            print("Goodbye.")
            break

        try:
            result = await agent.chat(cart_id, user_input, previous_id)
        except FlowerShopError as e:
            logging.getLogger(__name__).error("Chat turn failed: %s", e)
            print("Agent: Sorry, something went wrong. Please try again in a moment.\n")
            continue

        previous_id = result.id
        print(f"Agent: {result.output}\n")
        print_cart(store, cart_id)
        print()

    store.close()
    print("Session ended.")


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    asyncio.run(main())
