"""LLM client — HTTP connection to the Gemini generateContent endpoint.

The orchestrator injects a generator matching the protocol:

    async def generate(credential, instruction, schema) -> str: ...

`schema` is an OutputSchema for structured tasks, or None for plain text.
The returned string is the model's raw text; interpreting it is the
decoder's job.

GeminiClient issues exactly one request per call and never retries. Every
failure is raised as a TransportError subclass:

    Unauthorized           — key rejected (401/403, or 400 API_KEY_INVALID)
    RateLimited            — 429 / RESOURCE_EXHAUSTED
    RegionBlocked          — provider refuses to serve the caller's location
    UnknownTransportError  — everything else (network, timeout, 5xx, junk body)

Tests substitute a stub generator instead of patching the network where they can.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Protocol

import httpx

from sanogen.credentials import Credential
from sanogen.errors import (
    RateLimited,
    RegionBlocked,
    TransportError,
    Unauthorized,
    UnknownTransportError,
)
from sanogen.schemas import OutputSchema

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_TIMEOUT = 60.0


def _timeout_from_env() -> float:
    raw = os.getenv("SANOGEN_TIMEOUT", "")
    if not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0.0
    if not timeout > 0:
        logger.warning("invalid SANOGEN_TIMEOUT=%r, using %ss", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return timeout


# ---------------------------------------------------------------------------
# Protocol — every generator implementation must match this signature
# ---------------------------------------------------------------------------

class TextGenerator(Protocol):
    async def generate(
        self, credential: Credential, instruction: str, schema: OutputSchema | None
    ) -> str: ...


# ---------------------------------------------------------------------------
# GeminiClient — connects to the real backend
# ---------------------------------------------------------------------------

class GeminiClient:
    """Async HTTP client for Gemini's generateContent endpoint.

    Request:  POST {base_url}/v1beta/models/{model}:generateContent
              header x-goog-api-key, body {"contents": [...], "generationConfig": {...}}
    Response: {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}

    Args:
        model:    Model identifier, e.g. "gemini-3-flash-preview".
        base_url: API root. Overridable for proxies and tests.
        timeout:  HTTP timeout in seconds. The only timeout in the call path.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @classmethod
    def from_env(cls) -> GeminiClient:
        """Build a client from SANOGEN_MODEL / SANOGEN_BASE_URL / SANOGEN_TIMEOUT."""
        return cls(
            model=os.getenv("SANOGEN_MODEL", DEFAULT_MODEL),
            base_url=os.getenv("SANOGEN_BASE_URL", DEFAULT_BASE_URL),
            timeout=_timeout_from_env(),
        )

    @property
    def url(self) -> str:
        return f"{self._base_url}/v1beta/models/{self._model}:generateContent"

    def _build_body(self, instruction: str, schema: OutputSchema | None) -> dict:
        body: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": instruction}]}],
        }
        if schema is not None:
            body["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": schema.to_gemini(),
            }
        return body

    def _parse_response(self, data: Any) -> str:
        """Concatenate the text parts of the first candidate.

        A reply without candidates (e.g. a prompt blocked by safety filters)
        yields "" and is left for the decoder to reject. Any other shape is
        an UnknownTransportError.
        """
        if not isinstance(data, dict):
            raise UnknownTransportError("Gemini returned an unexpected body")
        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            logger.warning("gemini returned no candidates block_reason=%s", block_reason)
            return ""
        if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
            raise UnknownTransportError("Gemini returned an unexpected body")
        content = candidates[0].get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if not parts:
            return ""
        if not isinstance(parts, list) or not all(isinstance(p, dict) for p in parts):
            raise UnknownTransportError("Gemini returned an unexpected body")
        return "".join(p["text"] for p in parts if isinstance(p.get("text"), str))

    async def generate(
        self, credential: Credential, instruction: str, schema: OutputSchema | None
    ) -> str:
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": credential.reveal(),
        }
        body = self._build_body(instruction, schema)
        logger.debug(
            "llm call model=%s schema=%s key=%s prompt_len=%d",
            self._model, schema.name if schema else None, credential.masked(), len(instruction),
        )

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(self.url, json=body, headers=headers)
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise UnknownTransportError(f"Cannot connect to Gemini at {self._base_url}") from e
        except httpx.TimeoutException as e:
            raise UnknownTransportError(f"Gemini timed out after {self._timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise classify_http_error(e.response) from e
        except httpx.HTTPError as e:
            raise UnknownTransportError(f"Gemini request failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise UnknownTransportError("Gemini returned a non-JSON body") from e

        text = self._parse_response(data)
        logger.debug("llm response model=%s len=%d", self._model, len(text))
        return text


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

def _error_details(response: httpx.Response) -> tuple[str, str, str]:
    """Return (status, reason, message) from a Google API error body, if any."""
    try:
        error = response.json().get("error") or {}
    except (ValueError, AttributeError):
        return "", "", response.text[:400]
    reasons = [d.get("reason", "") for d in error.get("details") or [] if isinstance(d, dict)]
    return error.get("status", ""), " ".join(r for r in reasons if r), error.get("message", "")


def classify_http_error(response: httpx.Response) -> TransportError:
    """Turn a failed provider response into the matching TransportError."""
    code = response.status_code
    status, reason, message = _error_details(response)
    detail = f"Gemini returned HTTP {code}" + (f": {message}" if message else "")
    lowered = f"{status} {reason} {message}".lower()

    if code in (401, 403) or "api_key_invalid" in lowered or "api key not valid" in lowered:
        error: TransportError = Unauthorized(detail)
    elif code == 429 or status == "RESOURCE_EXHAUSTED":
        error = RateLimited(detail)
    elif "location is not supported" in lowered or "user location" in lowered:
        error = RegionBlocked(detail)
    else:
        error = UnknownTransportError(detail)

    logger.warning("gemini error %s status=%s -> %s", code, status or "-", type(error).__name__)
    return error
