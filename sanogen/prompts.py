"""Prompt builder — Handlebars templates, one per task kind.

User text is substituted with triple-stash ({{{thought}}}) so it lands in the
instruction verbatim: no HTML escaping, and never parsed as template code.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pybars

from sanogen.models import (
    EmotionAdviceRequest,
    MetaphorRequest,
    TaskKind,
    TaskRequest,
    ThoughtAnalysisRequest,
)
from sanogen.schemas import SCHEMAS, OutputSchema

_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class PromptError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


def render_prompt(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context))
    except Exception as e:
        raise PromptError(f"Template error: {e}") from e


# ── Templates ────────────────────────────────────────────

ANALYSIS_TEMPLATE = (
    "Ты — психолог, работающий по методу саногенного мышления Ю. М. Орлова.\n"
    "Разбери мысль пользователя:\n"
    "\"{{{thought}}}\"\n\n"
    "1. originalThought — повтори исходную мысль дословно.\n"
    "2. distortions — перечисли патогенные установки и когнитивные искажения "
    "(короткие ярлыки; пустой список, если их нет).\n"
    "3. analysis — объясни, какие ожидания и программы поведения породили "
    "обиду, вину или стыд.\n"
    "4. reframedThought — переформулируй мысль в саногенном ключе.\n"
    "5. suggestedAction — предложи одно конкретное действие на сегодня.\n"
    "6. shieldTechnique — опиши технику «щита» для подобных ситуаций.\n\n"
    "Ответь строго в формате JSON по заданной схеме, на русском языке."
)

EMOTION_TEMPLATE = (
    "Ты — психолог, работающий по методу саногенного мышления Ю. М. Орлова.\n"
    "Пользователь переживает эмоцию: \"{{{emotion}}}\".\n"
    "Интенсивность по шкале от 1 до 10: {{{intensity}}}.\n"
    "{{#if context}}Контекст: \"{{{context}}}\".\n{{/if}}"
    "\n"
    "Поле emotion — название эмоции, поле intensity — число от 1 до 10.\n"
    "В поле reflection предложи вопрос для саногенной рефлексии этой эмоции.\n"
    "В поле advice дай короткий практический совет, как снизить её "
    "интенсивность без подавления.\n\n"
    "Ответь строго в формате JSON по заданной схеме, на русском языке."
)

METAPHOR_TEMPLATE = (
    "Ты — рассказчик терапевтических притч.\n"
    "Ситуация пользователя: \"{{{situation}}}\".\n\n"
    "Сочини короткую притчу, которая поможет взглянуть на ситуацию иначе, "
    "не называя её прямо.\n"
    "title — название притчи, story — текст притчи (абзацы разделяй переводом "
    "строки), moral — мораль одной фразой.\n\n"
    "Ответь строго в формате JSON по заданной схеме, на русском языке."
)

ENHANCE_TEMPLATE = (
    "Улучши следующий запрос для генерации изображения: \"{{{prompt}}}\".\n"
    "Добавь детали композиции, освещения и стиля. Верни только текст запроса."
)

_TEMPLATES: dict[TaskKind, str] = {
    TaskKind.ANALYSIS: ANALYSIS_TEMPLATE,
    TaskKind.EMOTION: EMOTION_TEMPLATE,
    TaskKind.METAPHOR: METAPHOR_TEMPLATE,
}


def _context(request: TaskRequest) -> dict[str, Any]:
    if isinstance(request, ThoughtAnalysisRequest):
        return {"thought": request.thought}
    if isinstance(request, EmotionAdviceRequest):
        return {
            "emotion": request.emotion,
            "intensity": str(request.intensity),
            "context": request.context,
        }
    if isinstance(request, MetaphorRequest):
        return {"situation": request.situation}
    raise TypeError(f"Unsupported request type: {type(request).__name__}")


def build_prompt(request: TaskRequest) -> tuple[str, OutputSchema]:
    """Return (instruction, schema) for a request.

    The primary text is assumed to be non-blank; the orchestrator checks it.
    """
    kind = TaskKind(request.kind)
    instruction = render_prompt(_TEMPLATES[kind], _context(request))
    return instruction, SCHEMAS[kind]


def build_enhance_prompt(prompt: str) -> str:
    """Instruction asking the model to enrich an image-generation prompt."""
    return render_prompt(ENHANCE_TEMPLATE, {"prompt": prompt})
