"""
Component tests for the HTTP API.

The app is built with an in-memory store and an agent whose model client is
scripted, so requests go through the real routes, loop and store.
"""
import pytest
from fastapi.testclient import TestClient

from server import create_app

from .helpers import CART_ID, fake_client, function_call, text_response, tool_response


@pytest.fixture
def build_client(store, make_agent):
    def _build(model_client):
        agent = make_agent(model_client)
        return TestClient(create_app(store=store, agent=agent))
    return _build


class TestChatEndpoint:

    def test_successful_turn(self, build_client, store):
        model = fake_client(
            tool_response("resp_1", function_call("addCartItem", {"bouquetSize": 1, "flower": "lilies", "color": "pink"})),
            text_response("resp_2", "A small bouquet of pink lilies is in your cart."),
        )
        client = build_client(model)

        response = client.post("/chat", json={"cartId": CART_ID, "input": "Small pink lilies please"})

        assert response.status_code == 200
        assert response.json() == {"id": "resp_2", "output": "A small bouquet of pink lilies is in your cart."}
        assert len(store.list_items(CART_ID)) == 1

    def test_previous_id_is_forwarded(self, build_client):
        model = fake_client(text_response("resp_5", "Of course."))
        client = build_client(model)

        client.post("/chat", json={"cartId": CART_ID, "input": "Thanks", "previousId": "resp_4"})

        assert model.responses.create.await_args.kwargs["previous_response_id"] == "resp_4"

    @pytest.mark.parametrize(
        "body,message",
        [
            ({"input": "Hi"}, "Cart ID is required"),
            ({"cartId": CART_ID}, "Input is required"),
            ({"cartId": CART_ID, "input": ""}, "Input is required"),
        ],
    )
    def test_missing_fields_return_400(self, build_client, body, message):
        model = fake_client()
        client = build_client(model)

        response = client.post("/chat", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": message}
        model.responses.create.assert_not_awaited()

    def test_downstream_failure_returns_generic_500(self, build_client):
        model = fake_client(tool_response("resp_1", function_call("dropTables")))
        client = build_client(model)

        response = client.post("/chat", json={"cartId": CART_ID, "input": "Hi"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process request"}


class TestCartEndpoint:

    def test_lists_cart_items(self, build_client, store):
        first = store.add_item(CART_ID, 2, "roses", "red").item
        second = store.add_item(CART_ID, 3, "sunflowers", "yellow").item
        client = build_client(fake_client())

        response = client.get("/cart", params={"id": CART_ID})

        assert response.status_code == 200
        data = response.json()
        assert [item["id"] for item in data] == [first.id, second.id]
        assert data[0] == {
            "id": first.id,
            "cartId": CART_ID,
            "bouquetSize": 2,
            "flower": "roses",
            "color": "red",
            "price": 25,
        }

    def test_unknown_cart_is_empty(self, build_client):
        client = build_client(fake_client())

        response = client.get("/cart", params={"id": "no-such-cart"})

        assert response.status_code == 200
        assert response.json() == []

    def test_missing_id_returns_400(self, build_client):
        client = build_client(fake_client())

        response = client.get("/cart")

        assert response.status_code == 400
        assert response.json() == {"error": "Cart ID is required"}


def test_health(build_client):
    client = build_client(fake_client())

    assert client.get("/health").json() == {"status": "ok"}
