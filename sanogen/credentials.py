"""Credential resolution.

The Gemini API key is read from exactly one place: the GEMINI_API_KEY
environment variable, looked up at call time. `.env` files are loaded into
the environment by the entry points (backend/app.py, main.py), never here.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, SecretStr

from sanogen.errors import MalformedCredential, MissingCredential

ENV_KEY = "GEMINI_API_KEY"
KEY_PREFIX = "AIza"

# Values left behind by templates and deploy dashboards.
_PLACEHOLDERS = frozenset({
    "placeholder_api_key",
    "your_api_key",
    "your_api_key_here",
    "your-api-key",
    "api_key",
    "changeme",
    "undefined",
    "null",
    "none",
})


class Credential(BaseModel):
    """An API key that passed validation. Printing it shows only the masked form."""

    model_config = ConfigDict(frozen=True)

    secret: SecretStr

    def reveal(self) -> str:
        return self.secret.get_secret_value()

    def masked(self, keep: int = 4) -> str:
        value = self.reveal()
        if len(value) <= keep * 2:
            return "*" * len(value)
        return f"{value[:keep]}…{value[-keep:]}"

    def __str__(self) -> str:
        return self.masked()

    def __repr__(self) -> str:
        return f"Credential({self.masked()!r})"


def resolve_credential(environ: Mapping[str, str] | None = None) -> Credential:
    """Read and validate the API key.

    Raises MissingCredential if the key is unset, blank, or a placeholder;
    MalformedCredential if it lacks the Gemini key prefix.
    """
    env = os.environ if environ is None else environ
    value = (env.get(ENV_KEY) or "").strip()

    if not value or value.lower() in _PLACEHOLDERS:
        raise MissingCredential(f"{ENV_KEY} is not set")
    if not value.startswith(KEY_PREFIX):
        raise MalformedCredential(
            f"{ENV_KEY} does not look like a Gemini key (expected prefix {KEY_PREFIX!r})"
        )
    return Credential(secret=SecretStr(value))


def credential_status(environ: Mapping[str, str] | None = None) -> dict:
    """Describe the configured key for a diagnostics panel, never revealing it."""
    try:
        credential = resolve_credential(environ)
    except (MissingCredential, MalformedCredential) as e:
        return {"configured": False, "masked": None, "problem": str(e)}
    return {"configured": True, "masked": credential.masked(), "problem": None}
