"""Centralized configuration for chainkit.

Secret resolution order (per variable):
  1. Environment variable / ``.env`` file  (local dev)
  2. AWS SSM Parameter Store SecureString  (when ``AWS_EXECUTION_ENV`` is set)

The SSM paths follow the convention ``/chainkit/<VARIABLE_NAME>``.

Secrets are resolved lazily (on first client construction) so that importing
the library never requires credentials.  Plain settings below are read once
at import time; a malformed number fails the import with the variable named.
"""

from __future__ import annotations

import functools
import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

SSM_PREFIX = "/chainkit/"

# ── Feature flag: running on AWS? ────────────────────────────────────
_ON_AWS = bool(os.getenv("AWS_EXECUTION_ENV"))


# ── Secret resolution ────────────────────────────────────────────────

@functools.cache
def _get_ssm_parameter(name: str) -> str | None:
    """Fetch a SecureString from SSM Parameter Store, once per process.

    ``None`` when the parameter is missing or SSM is unreachable; the error
    is only logged so the caller can decide whether the value was required.
    """
    try:
        import boto3  # noqa: PLC0415

        resp = boto3.client("ssm").get_parameter(Name=SSM_PREFIX + name, WithDecryption=True)
        return resp["Parameter"]["Value"]
    except Exception:
        logger.debug("SSM lookup for %s%s failed", SSM_PREFIX, name)
        return None


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    # .env.example placeholders count as unset
    if value and not value.startswith("your_"):
        return value
    if _ON_AWS:
        return _get_ssm_parameter(name)
    return None


def _require_env(name: str) -> str:
    """Return a config value from env-var or SSM, or raise a clear error."""
    value = _optional_env(name)
    if value:
        return value
    raise OSError(
        f"Missing required configuration: {name}. "
        f"Set it in .env (local) or SSM Parameter Store {SSM_PREFIX}{name} (AWS)."
    )


def get_openai_api_key() -> str:
    """Return the OpenAI API key, raising ``OSError`` when it is not configured."""
    return _require_env("OPENAI_API_KEY")


def get_openai_organization() -> str | None:
    """Organization ID sent as ``OpenAI-Organization``, if one is configured."""
    return _optional_env("OPENAI_ORGANIZATION")


# ── Typed settings ───────────────────────────────────────────────────

def _number(name: str, default: str, kind: type[int] | type[float]):
    raw = os.getenv(name, default)
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{name} must be {'an integer' if kind is int else 'a number'}, got {raw!r}") from None


# ── OpenAI ──────────────────────────────────────────────────────────
OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_CHAT_MODEL: str = os.getenv("OPENAI_CHAT_MODEL", "gpt-3.5-turbo")
OPENAI_COMPLETION_MODEL: str = os.getenv("OPENAI_COMPLETION_MODEL", "gpt-3.5-turbo-instruct")
OPENAI_EMBEDDING_MODEL: str = os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-ada-002")
OPENAI_TIMEOUT_SECONDS: float = _number("OPENAI_TIMEOUT_SECONDS", "60", float)
OPENAI_MAX_RETRIES: int = _number("OPENAI_MAX_RETRIES", "3", int)

# ── Agent ───────────────────────────────────────────────────────────
AGENT_MAX_ITERATIONS: int = _number("AGENT_MAX_ITERATIONS", "10", int)

# ── AWS Textract ────────────────────────────────────────────────────
TEXTRACT_POLL_INTERVAL_SECONDS: float = _number("TEXTRACT_POLL_INTERVAL_SECONDS", "5", float)

# ── Server ──────────────────────────────────────────────────────────
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = _number("SERVER_PORT", "8000", int)
CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]
