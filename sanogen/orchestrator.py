"""Task orchestrator — runs one user request end-to-end.

Task flow:
  1. Reject blank input (EMPTY_INPUT) before anything else happens.
  2. Resolve the API key from the environment (NO_CREDENTIAL on failure).
  3. Build the instruction and output schema for the request kind.
  4. Call the generator — the one network round-trip (transport failures
     map one-to-one onto UNAUTHORIZED / RATE_LIMITED / REGION_BLOCKED / UNKNOWN).
  5. Decode the reply against the schema (BAD_RESPONSE on failure).
  6. Return the typed result.

Nothing is retried and nothing is shared between calls, so any number of
runs may be awaited concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from sanogen.credentials import Credential, resolve_credential
from sanogen.decoder import decode
from sanogen.errors import (
    CredentialError,
    DecodeError,
    TaskError,
    TaskErrorKind,
    TransportError,
    kind_for_transport_error,
)
from sanogen.llm import GeminiClient, TextGenerator
from sanogen.models import (
    EmotionAdviceRequest,
    EmotionEntry,
    Insight,
    Metaphor,
    MetaphorRequest,
    TaskRequest,
    TaskResult,
    ThoughtAnalysisRequest,
)
from sanogen.prompts import PromptError, build_enhance_prompt, build_prompt
from sanogen.schemas import OutputSchema

logger = logging.getLogger(__name__)


async def run(
    request: TaskRequest,
    *,
    generator: TextGenerator | None = None,
    environ: Mapping[str, str] | None = None,
) -> TaskResult:
    """Execute one task and return its result, or raise TaskError."""

    # 1. Input
    if not request.primary_text.strip():
        raise TaskError(TaskErrorKind.EMPTY_INPUT, "Input text is empty")

    # 2. Credential
    credential = _credential(environ)

    # 3. Prompt
    try:
        instruction, schema = build_prompt(request)
    except PromptError as e:
        logger.error("task=%s prompt failed: %s", request.kind, e)
        raise TaskError(TaskErrorKind.UNKNOWN, str(e)) from e

    # 4. Generation
    raw = await _generate(generator, credential, instruction, schema)

    # 5. Decode
    try:
        result = decode(raw, schema)
    except DecodeError as e:
        logger.warning("task=%s bad response: %s", request.kind, e)
        raise TaskError(TaskErrorKind.BAD_RESPONSE, str(e)) from e

    logger.info("task=%s completed", request.kind)
    return result


async def analyze_thought(thought: str, **kwargs) -> Insight:
    return await run(ThoughtAnalysisRequest(thought=thought), **kwargs)


async def advise_emotion(emotion: str, intensity: int, context: str = "", **kwargs) -> EmotionEntry:
    """Raises pydantic.ValidationError if intensity is outside 1..10."""
    request = EmotionAdviceRequest(emotion=emotion, intensity=intensity, context=context)
    return await run(request, **kwargs)


async def compose_metaphor(situation: str, **kwargs) -> Metaphor:
    return await run(MetaphorRequest(situation=situation), **kwargs)


async def enhance_prompt(
    prompt: str,
    *,
    generator: TextGenerator | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Ask the model to enrich an image-generation prompt.

    Plain-text task with no schema; an empty reply falls back to the original prompt.
    """
    if not prompt.strip():
        raise TaskError(TaskErrorKind.EMPTY_INPUT, "Prompt is empty")
    credential = _credential(environ)
    try:
        instruction = build_enhance_prompt(prompt)
    except PromptError as e:
        raise TaskError(TaskErrorKind.UNKNOWN, str(e)) from e
    text = await _generate(generator, credential, instruction, None)
    return text.strip() or prompt


# ---------------------------------------------------------------------------
# Steps shared by every task
# ---------------------------------------------------------------------------

def _credential(environ: Mapping[str, str] | None) -> Credential:
    try:
        return resolve_credential(environ)
    except CredentialError as e:
        logger.warning("credential unavailable: %s", e)
        raise TaskError(TaskErrorKind.NO_CREDENTIAL, str(e)) from e


async def _generate(
    generator: TextGenerator | None,
    credential: Credential,
    instruction: str,
    schema: OutputSchema | None,
) -> str:
    generator = generator or GeminiClient.from_env()
    try:
        return await generator.generate(credential, instruction, schema)
    except TransportError as e:
        raise TaskError(kind_for_transport_error(e), str(e)) from e
