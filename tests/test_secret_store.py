"""
Tests for secret lookup.

The Key Vault client is replaced with a mock; no Azure credentials are used.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import ResourceNotFoundError

from flower_shop_agent import secret_store
from flower_shop_agent.errors import SecretNotFoundError
from flower_shop_agent.secret_store import EnvSecretStore, KeyVaultSecretStore, default_secret_store

VAULT_URL = "https://flowershop-kv.vault.azure.net"


class TestKeyVaultSecretStore:

    def test_returns_secret_value(self):
        client = MagicMock()
        client.get_secret.return_value = SimpleNamespace(value="sk-from-vault")
        store = KeyVaultSecretStore(VAULT_URL, client=client)

        assert store.get_secret("OPENAI-API-KEY") == "sk-from-vault"
        client.get_secret.assert_called_once_with("OPENAI-API-KEY")

    def test_missing_secret(self):
        client = MagicMock()
        client.get_secret.side_effect = ResourceNotFoundError("SecretNotFound")
        store = KeyVaultSecretStore(VAULT_URL, client=client)

        with pytest.raises(SecretNotFoundError):
            store.get_secret("OPENAI-API-KEY")

    def test_empty_secret(self):
        client = MagicMock()
        client.get_secret.return_value = SimpleNamespace(value=None)
        store = KeyVaultSecretStore(VAULT_URL, client=client)

        with pytest.raises(SecretNotFoundError):
            store.get_secret("OPENAI-API-KEY")


class TestDefaultSecretStore:

    def test_environment_without_vault_url(self, monkeypatch):
        monkeypatch.setattr(secret_store, "AZURE_KEY_VAULT_URL", None)

        assert isinstance(default_secret_store(), EnvSecretStore)

    def test_key_vault_with_vault_url(self, monkeypatch):
        secret_client = MagicMock()
        monkeypatch.setattr(secret_store, "AZURE_KEY_VAULT_URL", VAULT_URL)
        monkeypatch.setattr(secret_store, "SecretClient", secret_client)
        monkeypatch.setattr(secret_store, "DefaultAzureCredential", MagicMock())

        store = default_secret_store()

        assert isinstance(store, KeyVaultSecretStore)
        assert secret_client.call_args.kwargs["vault_url"] == VAULT_URL
