"""FastMCP server exposing the three tasks as MCP tools.

Tools:
  - analyze_thought(thought)                       — sanogenic analysis
  - advise_emotion(emotion, intensity, context)    — reflection + advice
  - compose_metaphor(situation)                    — therapeutic parable

Each tool returns the result as a dict. Task errors are raised as tool
errors carrying the user-facing message for their kind.

The generator is module state replaced via set_generator() in tests.

Usage:
    uv run python -m backend.mcp_server
"""

from mcp.server.fastmcp import FastMCP

from sanogen import orchestrator
from sanogen.errors import TaskError
from sanogen.llm import GeminiClient, TextGenerator
from sanogen.view import describe_error

mcp = FastMCP("sanogenic-lab")

_generator: TextGenerator | None = None


def set_generator(generator: TextGenerator | None) -> None:
    """Replace the generator used by the tools (used in tests)."""
    global _generator
    _generator = generator


def _active_generator() -> TextGenerator:
    return _generator or GeminiClient.from_env()


async def _call(coro) -> dict:
    try:
        result = await coro
    except TaskError as e:
        raise ValueError(f"{e.kind.value}: {describe_error(e)}") from e
    return result.model_dump()


@mcp.tool()
async def analyze_thought(thought: str) -> dict:
    """Analyse a troubling thought with Orlov's sanogenic thinking method."""
    return await _call(orchestrator.analyze_thought(thought, generator=_active_generator()))


@mcp.tool()
async def advise_emotion(emotion: str, intensity: int, context: str = "") -> dict:
    """Reflection question and advice for an emotion of intensity 1-10."""
    return await _call(
        orchestrator.advise_emotion(emotion, intensity, context, generator=_active_generator())
    )


@mcp.tool()
async def compose_metaphor(situation: str) -> dict:
    """A short therapeutic parable for a life situation."""
    return await _call(orchestrator.compose_metaphor(situation, generator=_active_generator()))


if __name__ == "__main__":
    from dotenv import load_dotenv

    load_dotenv()
    mcp.run()
