"""Core domain models.

Requests and results are frozen pydantic models: built once per call and
never mutated. Result field names are the camelCase names used on the wire,
so a decoded reply maps onto a model without renaming.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class TaskKind(StrEnum):
    ANALYSIS = "analysis"
    EMOTION = "emotion"
    METAPHOR = "metaphor"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class _Request(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def primary_text(self) -> str:
        raise NotImplementedError


class ThoughtAnalysisRequest(_Request):
    """A troubling thought to analyse with sanogenic reflection."""

    kind: Literal["analysis"] = "analysis"
    thought: str

    @property
    def primary_text(self) -> str:
        return self.thought


class EmotionAdviceRequest(_Request):
    """An emotion, how strong it is (1–10), and what provoked it."""

    kind: Literal["emotion"] = "emotion"
    emotion: str
    intensity: int = Field(ge=1, le=10)
    context: str = ""

    @property
    def primary_text(self) -> str:
        return self.emotion


class MetaphorRequest(_Request):
    """A life situation to answer with a therapeutic parable."""

    kind: Literal["metaphor"] = "metaphor"
    situation: str

    @property
    def primary_text(self) -> str:
        return self.situation


TaskRequest = Annotated[
    Union[ThoughtAnalysisRequest, EmotionAdviceRequest, MetaphorRequest],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class _Result(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Insight(_Result):
    originalThought: str
    distortions: list[str]  # may be empty, never missing
    analysis: str
    reframedThought: str
    suggestedAction: str
    shieldTechnique: str


class EmotionEntry(_Result):
    emotion: str
    intensity: int | float
    reflection: str
    advice: str


class Metaphor(_Result):
    title: str
    story: str
    moral: str


TaskResult = Union[Insight, EmotionEntry, Metaphor]
