"""Secret lookup by logical name.

Secrets are addressed by Key Vault names such as ``OPENAI-API-KEY``; the
environment store maps them to ``OPENAI_API_KEY``.
"""

import logging
import os
from typing import Mapping, Optional

from azure.core.exceptions import ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient
from dotenv import load_dotenv

from .config import AZURE_KEY_VAULT_URL
from .errors import SecretNotFoundError

logger = logging.getLogger(__name__)


class AbstractSecretStore:
    """Interface for secret stores."""

    def get_secret(self, name: str) -> str:
        #Return the secret value or raise SecretNotFoundError
        raise NotImplementedError


class EnvSecretStore(AbstractSecretStore):
    """Reads secrets from the process environment (and a local .env file)."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        if environ is None:
            load_dotenv()
            environ = os.environ
        self._environ = environ

    @staticmethod
    def env_name(name: str) -> str:
        return name.upper().replace("-", "_")

    def get_secret(self, name: str) -> str:
        value = self._environ.get(self.env_name(name))
        if not value:
            raise SecretNotFoundError(f"Secret {name!r} not found")
        logger.debug("Resolved secret %s from environment", name)
        return value


class KeyVaultSecretStore(AbstractSecretStore):
    """Reads secrets from Azure Key Vault.

    Authenticates with DefaultAzureCredential (managed identity in Azure,
    developer credentials locally) unless a SecretClient is passed in.
    """

    def __init__(self, vault_url: str, client: Optional[SecretClient] = None) -> None:
        self.vault_url = vault_url
        self._client = client or SecretClient(vault_url=vault_url, credential=DefaultAzureCredential())

    def get_secret(self, name: str) -> str:
        try:
            secret = self._client.get_secret(name)
        except ResourceNotFoundError as exc:
            raise SecretNotFoundError(f"Secret {name!r} not found in {self.vault_url}") from exc
        if not secret.value:
            raise SecretNotFoundError(f"Secret {name!r} in {self.vault_url} is empty")
        logger.debug("Resolved secret %s from Key Vault", name)
        return secret.value


def default_secret_store() -> AbstractSecretStore:
    """Key Vault when AZURE_KEY_VAULT_URL is configured, otherwise the environment."""
    if AZURE_KEY_VAULT_URL:
        return KeyVaultSecretStore(AZURE_KEY_VAULT_URL)
    return EnvSecretStore()
