"""Fakes for the Responses API objects the agent reads."""
import json
from types import SimpleNamespace
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

CART_ID = "7f1c2a9e-3b4d-4c5e-8f60-0a1b2c3d4e5f"


def function_call(name: str, arguments: Optional[Dict[str, Any]] = None, call_id: str = "call_1") -> SimpleNamespace:
    return SimpleNamespace(
        type="function_call",
        name=name,
        call_id=call_id,
        arguments=json.dumps(arguments or {}),
    )


def tool_response(response_id: str, *calls: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(id=response_id, output=list(calls), output_text="")


def text_response(response_id: str, text: str) -> SimpleNamespace:
    message = SimpleNamespace(type="message", content=[SimpleNamespace(type="output_text", text=text)])
    return SimpleNamespace(id=response_id, output=[message], output_text=text)


def fake_client(*responses: Any) -> MagicMock:
    """Client whose responses.create returns the given responses in order."""
    client = MagicMock()
    client.responses.create = AsyncMock(side_effect=list(responses))
    return client
