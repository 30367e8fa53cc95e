import os

from dotenv import load_dotenv

load_dotenv()

MODEL_NAME = os.environ.get("MODEL_NAME", "gpt-4o")
MAX_OUTPUT_TOKENS = int(os.environ.get("MAX_OUTPUT_TOKENS", "4096"))
MAX_TOOL_ITERATIONS = int(os.environ.get("MAX_TOOL_ITERATIONS", "8")) # Tool rounds allowed per chat turn

MODEL_CALL_TIMEOUT_SECONDS = float(os.environ.get("MODEL_CALL_TIMEOUT_SECONDS", "60"))
CHAT_TIMEOUT_SECONDS = float(os.environ.get("CHAT_TIMEOUT_SECONDS", "180")) # Whole turn, all rounds included

MAX_CART_ITEMS = int(os.environ.get("MAX_CART_ITEMS", "5"))
CART_DB_PATH = os.environ.get("CART_DB_PATH", "flower_shop.db")

# Logical secret name; resolved by the secret store, never read directly.
OPENAI_API_KEY_SECRET = os.environ.get("OPENAI_API_KEY_SECRET", "OPENAI-API-KEY")
AZURE_OPENAI_ENDPOINT = os.environ.get("AZURE_OPENAI_ENDPOINT") # Use Azure OpenAI when set
AZURE_KEY_VAULT_URL = os.environ.get("AZURE_KEY_VAULT_URL") # Read secrets from Key Vault when set
OPENAI_API_VERSION = os.environ.get("OPENAI_API_VERSION", "2025-03-01-preview")

PORT = int(os.environ.get("PORT", "8080"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
