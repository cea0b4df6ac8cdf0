"""Error taxonomy.

Two layers of exceptions exist:

    Component errors — raised by the individual building blocks:
        CredentialError  (credentials.py)  — MissingCredential, MalformedCredential
        TransportError   (llm.py)          — Unauthorized, RateLimited,
                                             RegionBlocked, UnknownTransportError
        DecodeError      (decoder.py)      — EmptyResponse, InvalidJson,
                                             SchemaMismatch

    TaskError — the only exception the orchestrator lets escape. It carries a
        TaskErrorKind from a closed set plus an optional diagnostic string.
        The component error that caused it is chained as __cause__.

Diagnostics never contain the raw credential; callers that build messages
from a credential must use Credential.masked().
"""

from __future__ import annotations

from enum import StrEnum


# ---------------------------------------------------------------------------
# Credential errors
# ---------------------------------------------------------------------------

class CredentialError(RuntimeError):
    """The API credential could not be resolved."""


class MissingCredential(CredentialError):
    """No credential configured, or only a placeholder value."""


class MalformedCredential(CredentialError):
    """A credential is configured but does not look like a provider key."""


# ---------------------------------------------------------------------------
# Transport errors — raised by the generation client
# ---------------------------------------------------------------------------

class TransportError(RuntimeError):
    """The generation provider could not produce a response."""


class Unauthorized(TransportError):
    pass


class RateLimited(TransportError):
    pass


class RegionBlocked(TransportError):
    pass


class UnknownTransportError(TransportError):
    pass


# ---------------------------------------------------------------------------
# Decode errors — raised by the response decoder
# ---------------------------------------------------------------------------

class DecodeError(ValueError):
    """The provider's reply is not a valid result."""


class EmptyResponse(DecodeError):
    pass


class InvalidJson(DecodeError):
    pass


class SchemaMismatch(DecodeError):
    pass


# ---------------------------------------------------------------------------
# TaskError — what callers of the orchestrator see
# ---------------------------------------------------------------------------

class TaskErrorKind(StrEnum):
    EMPTY_INPUT = "empty_input"
    NO_CREDENTIAL = "no_credential"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    REGION_BLOCKED = "region_blocked"
    UNKNOWN = "unknown"
    BAD_RESPONSE = "bad_response"


class TaskError(RuntimeError):
    """A classified failure of one task run."""

    def __init__(self, kind: TaskErrorKind, diagnostic: str | None = None) -> None:
        super().__init__(diagnostic or kind.value)
        self.kind = kind
        self.diagnostic = diagnostic

    @property
    def retryable(self) -> bool:
        # Only quota errors clear up on their own; the core itself never retries.
        return self.kind is TaskErrorKind.RATE_LIMITED

    def __repr__(self) -> str:
        return f"TaskError({self.kind.value!r}, {self.diagnostic!r})"


_TRANSPORT_KINDS: dict[type[TransportError], TaskErrorKind] = {
    Unauthorized: TaskErrorKind.UNAUTHORIZED,
    RateLimited: TaskErrorKind.RATE_LIMITED,
    RegionBlocked: TaskErrorKind.REGION_BLOCKED,
    UnknownTransportError: TaskErrorKind.UNKNOWN,
}


def kind_for_transport_error(error: TransportError) -> TaskErrorKind:
    """Map a transport failure onto the task error of the same meaning."""
    for cls, kind in _TRANSPORT_KINDS.items():
        if isinstance(error, cls):
            return kind
    return TaskErrorKind.UNKNOWN
