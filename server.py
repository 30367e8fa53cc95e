import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from flower_shop_agent import AbstractCartStore, FlowerShopChatAgent, SqliteCartStore, ToolRegistry
from flower_shop_agent.config import LOG_LEVEL, PORT
from flower_shop_agent.errors import InvalidRequestError
from flower_shop_agent.utils import serialize_cart_item

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    # Optional here so that missing fields map to 400, not FastAPI's 422.
    cartId: Optional[str] = None
    input: Optional[str] = None
    previousId: Optional[str] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    store: Optional[AbstractCartStore] = None,
    agent: Optional[FlowerShopChatAgent] = None,
) -> FastAPI:
    """Build the API around one store and one agent shared by all requests."""
    store = store or SqliteCartStore()
    agent = agent or FlowerShopChatAgent(ToolRegistry(store))

    app = FastAPI(title="Flower Shop Assistant API")

    # The chat UI is served from a different origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/chat")
    async def chat_endpoint(request: ChatRequest):
        try:
            result = await agent.chat(request.cartId, request.input, request.previousId)
        except InvalidRequestError as e:
            return _error(400, str(e))
        except Exception:
            # Details stay in the log; the client only learns that the turn failed.
            logger.exception("Chat request for cart %s failed", request.cartId)
            return _error(500, "Failed to process request")
        return {"id": result.id, "output": result.output}

    @app.get("/cart")
    def cart_endpoint(id: Optional[str] = None):
        if not id:
            return _error(400, "Cart ID is required")
        try:
            items = store.list_items(id)
        except Exception:
            logger.exception("Reading cart %s failed", id)
            return _error(500, "Failed to read cart")
        return [serialize_cart_item(item) for item in items]

    @app.get("/")
    async def root():
        return {"status": "Flower Shop Assistant API is running", "docs": "/docs"}

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
