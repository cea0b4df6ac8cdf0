"""Pydantic request models for API endpoints."""

from pydantic import BaseModel, Field


class AnalysisBody(BaseModel):
    thought: str


class EmotionBody(BaseModel):
    emotion: str
    intensity: int = Field(ge=1, le=10)
    context: str = ""


class MetaphorBody(BaseModel):
    situation: str


class EnhancePromptBody(BaseModel):
    prompt: str
