import pytest

from flower_shop_agent import FlowerShopChatAgent, SqliteCartStore, ToolRegistry
from flower_shop_agent.secret_store import EnvSecretStore


@pytest.fixture
def store():
    store = SqliteCartStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def registry(store):
    return ToolRegistry(store)


@pytest.fixture
def make_agent(registry):
    """Build an agent around a fake model client."""
    def _make(client, **kwargs):
        return FlowerShopChatAgent(
            registry,
            client=client,
            secret_store=EnvSecretStore(environ={}),
            **kwargs,
        )
    return _make
