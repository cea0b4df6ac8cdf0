"""Output schemas — the exact shape each task's reply must have.

A schema is sent to the provider (as Gemini's ``responseSchema``) and then
used again by the decoder to check the reply field by field.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from sanogen.models import EmotionEntry, Insight, Metaphor, TaskKind, TaskResult


class FieldKind(StrEnum):
    STRING = "string"
    NUMBER = "number"
    STRING_ARRAY = "array<string>"


_GEMINI_TYPES: dict[FieldKind, dict[str, Any]] = {
    FieldKind.STRING: {"type": "STRING"},
    FieldKind.NUMBER: {"type": "NUMBER"},
    FieldKind.STRING_ARRAY: {"type": "ARRAY", "items": {"type": "STRING"}},
}


@dataclass(frozen=True)
class OutputSchema:
    """Ordered field → kind mapping plus the set of mandatory fields.

    Args:
        name:        Short identifier, used in logs and diagnostics.
        fields:      (field name, kind) pairs in the order the model should emit them.
        required:    Names that must be present and non-null.
        result_type: Result model the decoder builds from a matching reply.
    """

    name: str
    fields: tuple[tuple[str, FieldKind], ...]
    required: frozenset[str]
    result_type: type[TaskResult]

    @property
    def field_names(self) -> list[str]:
        return [name for name, _ in self.fields]

    def to_gemini(self) -> dict[str, Any]:
        """Render as a Gemini ``responseSchema`` object."""
        return {
            "type": "OBJECT",
            "properties": {name: dict(_GEMINI_TYPES[kind]) for name, kind in self.fields},
            "required": [name for name, _ in self.fields if name in self.required],
            "propertyOrdering": self.field_names,
        }


def _all_required(
    name: str, fields: tuple[tuple[str, FieldKind], ...], result_type: type[TaskResult]
) -> OutputSchema:
    return OutputSchema(
        name=name,
        fields=fields,
        required=frozenset(n for n, _ in fields),
        result_type=result_type,
    )


# `distortions` is required; an empty list is a valid value.
INSIGHT_SCHEMA = _all_required(
    "insight",
    (
        ("originalThought", FieldKind.STRING),
        ("distortions", FieldKind.STRING_ARRAY),
        ("analysis", FieldKind.STRING),
        ("reframedThought", FieldKind.STRING),
        ("suggestedAction", FieldKind.STRING),
        ("shieldTechnique", FieldKind.STRING),
    ),
    Insight,
)

EMOTION_SCHEMA = _all_required(
    "emotion",
    (
        ("emotion", FieldKind.STRING),
        ("intensity", FieldKind.NUMBER),
        ("reflection", FieldKind.STRING),
        ("advice", FieldKind.STRING),
    ),
    EmotionEntry,
)

METAPHOR_SCHEMA = _all_required(
    "metaphor",
    (
        ("title", FieldKind.STRING),
        ("story", FieldKind.STRING),
        ("moral", FieldKind.STRING),
    ),
    Metaphor,
)

SCHEMAS: dict[TaskKind, OutputSchema] = {
    TaskKind.ANALYSIS: INSIGHT_SCHEMA,
    TaskKind.EMOTION: EMOTION_SCHEMA,
    TaskKind.METAPHOR: METAPHOR_SCHEMA,
}
