"""Response decoder — raw model text to a typed result.

Checks are done against the OutputSchema rather than left to pydantic's
coercion: "7" is not a number and 7 is not a string here. Values that pass
are handed to the result model unchanged.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

from pydantic import ValidationError

from sanogen.errors import EmptyResponse, InvalidJson, SchemaMismatch
from sanogen.models import TaskResult
from sanogen.schemas import FieldKind, OutputSchema

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9]*\s*(.*?)\s*```$", re.DOTALL)


def _strip_code_fence(text: str) -> str:
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def _reject_constant(name: str) -> Any:
    raise InvalidJson(f"Model returned a non-finite number: {name}")


def _matches(kind: FieldKind, value: Any) -> bool:
    if kind is FieldKind.STRING:
        return isinstance(value, str)
    if kind is FieldKind.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
    if kind is FieldKind.STRING_ARRAY:
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    return False


def decode(raw: str, schema: OutputSchema) -> TaskResult:
    """Parse `raw` and build the result model `schema` describes.

    Raises EmptyResponse, InvalidJson or SchemaMismatch.
    """
    text = (raw or "").strip()
    if not text:
        raise EmptyResponse("Model returned an empty response")

    try:
        # NaN / Infinity are not JSON
        data = json.loads(_strip_code_fence(text), parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise InvalidJson(f"Model returned invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidJson(f"Expected a JSON object, got {type(data).__name__}")

    missing = [name for name, _ in schema.fields if name in schema.required and data.get(name) is None]
    if missing:
        raise SchemaMismatch(f"{schema.name}: missing required fields {missing}")

    wrong = [
        f"{name} (expected {kind.value})"
        for name, kind in schema.fields
        if name in data and data[name] is not None and not _matches(kind, data[name])
    ]
    if wrong:
        raise SchemaMismatch(f"{schema.name}: wrong field types: {', '.join(wrong)}")

    try:
        return schema.result_type.model_validate({name: data[name] for name in schema.field_names if name in data})
    except ValidationError as e:
        raise SchemaMismatch(f"{schema.name}: {e}") from e
