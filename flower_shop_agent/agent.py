"""Flower shop assistant using OpenAI Responses API tool calling.

Loop per chat turn:
1. Send the user input (first round) or the tool outputs (later rounds)
2. Run every function call the model asked for against the cart, in order
3. Repeat until the model answers without function calls

Conversation state lives in the model service: each response id is the
continuation token for the next turn.

Entry points: FlowerShopChatAgent.chat()
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncAzureOpenAI, AsyncOpenAI, OpenAIError

from .config import (
    AZURE_OPENAI_ENDPOINT,
    CHAT_TIMEOUT_SECONDS,
    MAX_OUTPUT_TOKENS,
    MAX_TOOL_ITERATIONS,
    MODEL_CALL_TIMEOUT_SECONDS,
    MODEL_NAME,
    OPENAI_API_KEY_SECRET,
    OPENAI_API_VERSION,
)
from .errors import (
    ChatTimeoutError,
    InvalidRequestError,
    ModelServiceError,
    ToolLoopExceededError,
)
from .models import ChatResult
from .secret_store import AbstractSecretStore, default_secret_store
from .tools import ToolRegistry
from .utils import extract_function_calls, function_call_output, serialize_tool_output

logger = logging.getLogger(__name__)

# Instructions sent with every model request.
SYSTEM_PROMPT = """
You are a salesperson in a flower shop. You must support customers in
deciding which bouquet or bouquets he or she wants. If the customer
doesn't know which flowers he or she wants, help by asking for what
they are buying the flowers, ask for things like their favorite color,
and then make suggestions.

In your shop, you offer the following flowers:

* Rose (red, yellow, purple)
* Lily (yellow, pink, white)
* Gerbera (pink, red, yellow)
* Freesia (white, pink, red, yellow)
* Tulips (red, yellow, purple)
* Sunflowers (yellow)

We can keep prices down by putting only one type of flower in a bouquet.
It is not possible to mix flowers in a single bouquet.

Your pricing schema:

* Small bouquet for 15€ (3 flowers of the same type arranged
  with a little bit of green grass)
* Medium bouquet for 25€ (5 flowers of the same type nicely
  arranged, including some larger green leaves as decoration)
* Large bouquet for 35€ (10 flowers of the same type, beautifully
  arranged with greenery and smaller filler flowers)

Start the conversation by greeting the customer. Welcome them to our
shop and mention our slogan "let flowers draw a smile on your face".
Ask them what they want. Wait for their response. Based on their response,
suggest a bouquet.

Maintain a shopping cart for the customer using the provided function tools.
A cart holds at most 5 bouquets.

Avoid enumerations, be friendly, and avoid being overly excited.

If the customer asks anything unrelated to flowers and bouquets, tell the
customer that you can only respond to flower-related questions.
"""


class FlowerShopChatAgent:
    """Runs the tool-calling loop for one chat turn at a time.

    The agent holds no conversation state; it can serve any number of carts
    and conversations concurrently.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        client: Any = None,
        secret_store: Optional[AbstractSecretStore] = None,
        model: str = MODEL_NAME,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
        max_tool_iterations: int = MAX_TOOL_ITERATIONS,
        model_call_timeout: float = MODEL_CALL_TIMEOUT_SECONDS,
        chat_timeout: float = CHAT_TIMEOUT_SECONDS,
    ) -> None:
        self.registry = registry
        # Created on first chat() from the secret store unless injected.
        self._client = client
        self._secret_store = secret_store or default_secret_store()
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.max_tool_iterations = max_tool_iterations
        self.model_call_timeout = model_call_timeout
        self.chat_timeout = chat_timeout

    def _get_client(self) -> Any:
        if self._client is None:
            api_key = self._secret_store.get_secret(OPENAI_API_KEY_SECRET)
            if AZURE_OPENAI_ENDPOINT:
                logger.info("Using Azure OpenAI at %s", AZURE_OPENAI_ENDPOINT)
                self._client = AsyncAzureOpenAI(
                    api_key=api_key,
                    azure_endpoint=AZURE_OPENAI_ENDPOINT,
                    azure_deployment=self.model,
                    api_version=OPENAI_API_VERSION,
                )
            else:
                self._client = AsyncOpenAI(api_key=api_key)
        return self._client

    async def chat(self, cart_id: Optional[str], user_input: Optional[str], previous_id: Optional[str] = None) -> ChatResult:
        """Handle one turn of conversation and return the reply with its continuation id."""
        if not cart_id or not cart_id.strip():
            raise InvalidRequestError("Cart ID is required")
        if not user_input or not user_input.strip():
            raise InvalidRequestError("Input is required")

        try:
            return await asyncio.wait_for(
                self._run(cart_id, user_input, previous_id),
                timeout=self.chat_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ChatTimeoutError(f"Chat turn exceeded {self.chat_timeout}s") from exc

    async def _run(self, cart_id: str, user_input: str, previous_id: Optional[str]) -> ChatResult:
        client = self._get_client()
        response = await self._create_response(client, user_input, previous_id)

        rounds = 0
        while True:
            calls = extract_function_calls(response)
            if not calls:
                break

            rounds += 1
            if rounds > self.max_tool_iterations:
                raise ToolLoopExceededError(
                    f"Model requested tools for more than {self.max_tool_iterations} rounds"
                )

            # Sequential on purpose: a later call may depend on an earlier one's writes.
            # Any failure propagates and nothing from this batch is submitted.
            # Store calls block, so they run in a worker thread, one at a time.
            tool_outputs: List[Dict[str, str]] = []
            for call in calls:
                output = await asyncio.to_thread(self.registry.dispatch, cart_id, call)
                tool_outputs.append(function_call_output(call.call_id, serialize_tool_output(output)))

            logger.debug("Round %d: returning %d tool outputs", rounds, len(tool_outputs))
            response = await self._create_response(client, tool_outputs, response.id)

        return ChatResult(id=response.id, output=getattr(response, "output_text", "") or "")

    async def _create_response(self, client: Any, model_input: Any, previous_id: Optional[str]) -> Any:
        """One model round trip, bounded by the per-call timeout."""
        request: Dict[str, Any] = {
            "model": self.model,
            "max_output_tokens": self.max_output_tokens,
            "input": model_input,
            "instructions": SYSTEM_PROMPT,
            "tools": self.registry.schemas,
        }
        if previous_id:
            request["previous_response_id"] = previous_id

        try:
            response = await asyncio.wait_for(
                client.responses.create(**request),
                timeout=self.model_call_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ChatTimeoutError(f"Model call exceeded {self.model_call_timeout}s") from exc
        except OpenAIError as exc:
            logger.warning("Model service call failed: %s", exc)
            raise ModelServiceError(str(exc)) from exc

        if not getattr(response, "id", None):
            raise ModelServiceError("Model response has no id")
        return response
