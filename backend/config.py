"""
Runtime configuration for the Blueprint Factory API.

All values come from environment variables. Placeholder values copied from
the sample .env file are treated as unset.
"""

import os

_PLACEHOLDERS = {"your_openai_api_key_here", "your_langsmith_api_key_here"}

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Database
DATABASE_URL = os.environ.get(
    "DATABASE_URL",
    "sqlite+aiosqlite:///./blueprint_factory_dev.db",
)
# Connection used for admin jobs (RLS bypass on the hosted database)
ADMIN_DATABASE_URL = os.environ.get("ADMIN_DATABASE_URL", DATABASE_URL)

# Hosted Supabase project
SUPABASE_JWT_SECRET = os.environ.get("SUPABASE_JWT_SECRET", "")
JWT_AUDIENCE = "authenticated"

# OpenAI / LangChain
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4.1-mini")
CHAIN_TEMPERATURE = 0.7
CHAIN_MAX_TOKENS = 500
LANGCHAIN_PROJECT = os.environ.get("LANGCHAIN_PROJECT", "blueprint-factory")

# Demo profile storage (JSON file standing in for browser local storage)
PROFILE_STORAGE_PATH = os.environ.get(
    "PROFILE_STORAGE_PATH",
    "./profile_storage.json",
)


def _is_set(value) -> bool:
    return bool(value) and value not in _PLACEHOLDERS


def openai_api_key():
    """Return the OpenAI key, or None when unset or still a placeholder."""
    key = os.environ.get("OPENAI_API_KEY")
    return key if _is_set(key) else None


def is_openai_configured() -> bool:
    return openai_api_key() is not None


def is_tracing_enabled() -> bool:
    """LangSmith tracing needs both the flag and a real API key."""
    return (
        os.environ.get("LANGCHAIN_TRACING_V2") == "true"
        and _is_set(os.environ.get("LANGCHAIN_API_KEY"))
    )


def service_role_key():
    return (
        os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
        or os.environ.get("NEXT_PUBLIC_SUPABASE_SERVICE_ROLE_KEY")
    )
