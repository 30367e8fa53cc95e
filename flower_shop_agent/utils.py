"""Utility functions for the flower shop agent."""
import json
from dataclasses import asdict
from typing import Any, Dict, List

from .errors import ModelServiceError
from .models import CartItem, FunctionCall


def serialize_cart_item(item: CartItem) -> Dict[str, Any]:
    """Convert CartItem to the JSON wire form used by the cart API and tools."""
    data = asdict(item)
    return {
        "id": data["id"],
        "cartId": data["cart_id"],
        "bouquetSize": data["bouquet_size"],
        "flower": data["flower"],
        "color": data["color"],
        # Prices are whole currency units, so a float is exact in JSON.
        "price": float(data["price"]),
    }


def serialize_tool_output(value: Any) -> str:
    """Text fed back to the model for one function call.

    Strings go through verbatim so refusals reach the model word for word.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def extract_function_calls(response: Any) -> List[FunctionCall]:
    """Collect the function_call items of a Responses API result, in order."""
    output = getattr(response, "output", None)
    if output is None:
        return []
    if not isinstance(output, list):
        raise ModelServiceError("Model response output is not a list")

    calls: List[FunctionCall] = []
    for item in output:
        if getattr(item, "type", None) != "function_call":
            continue
        name = getattr(item, "name", None)
        call_id = getattr(item, "call_id", None)
        arguments = getattr(item, "arguments", None)
        if not isinstance(name, str) or not isinstance(call_id, str) or not call_id:
            raise ModelServiceError("Model returned a malformed function call")
        calls.append(FunctionCall(name=name, call_id=call_id, arguments=arguments or ""))
    return calls


def function_call_output(call_id: str, output: str) -> Dict[str, str]:
    """Build the input item that answers one function call."""
    return {"type": "function_call_output", "call_id": call_id, "output": output}
