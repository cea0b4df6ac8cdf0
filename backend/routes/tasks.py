"""Task endpoints: thought analysis, emotion advice, metaphor, prompt enhancement.

Task errors become JSON bodies {"error": <kind>, "message": <user text>};
the provider diagnostic is added only when ?diagnostics=true.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from sanogen import orchestrator
from sanogen.errors import TaskError, TaskErrorKind
from sanogen.models import (
    EmotionAdviceRequest,
    EmotionEntry,
    Insight,
    Metaphor,
    MetaphorRequest,
    ThoughtAnalysisRequest,
)
from sanogen.view import describe_error

from .models import AnalysisBody, EmotionBody, EnhancePromptBody, MetaphorBody

router = APIRouter()

STATUS_CODES: dict[TaskErrorKind, int] = {
    TaskErrorKind.EMPTY_INPUT: 400,
    TaskErrorKind.NO_CREDENTIAL: 503,
    TaskErrorKind.UNAUTHORIZED: 502,
    TaskErrorKind.RATE_LIMITED: 429,
    TaskErrorKind.REGION_BLOCKED: 451,
    TaskErrorKind.UNKNOWN: 502,
    TaskErrorKind.BAD_RESPONSE: 502,
}


def error_response(error: TaskError, diagnostics: bool = False) -> JSONResponse:
    content = {"error": error.kind.value, "message": describe_error(error)}
    if diagnostics and error.diagnostic:
        content["diagnostic"] = error.diagnostic
    return JSONResponse(content, status_code=STATUS_CODES[error.kind])


@router.post("/analysis", response_model=Insight)
async def analysis(body: AnalysisBody, request: Request, diagnostics: bool = False):
    """Sanogenic analysis of a troubling thought."""
    try:
        return await orchestrator.run(
            ThoughtAnalysisRequest(thought=body.thought),
            generator=request.app.state.generator,
        )
    except TaskError as e:
        return error_response(e, diagnostics)


@router.post("/emotion", response_model=EmotionEntry)
async def emotion(body: EmotionBody, request: Request, diagnostics: bool = False):
    """Reflection and advice for an emotion of a given intensity."""
    try:
        return await orchestrator.run(
            EmotionAdviceRequest(**body.model_dump()),
            generator=request.app.state.generator,
        )
    except TaskError as e:
        return error_response(e, diagnostics)


@router.post("/metaphor", response_model=Metaphor)
async def metaphor(body: MetaphorBody, request: Request, diagnostics: bool = False):
    """Therapeutic parable for a life situation."""
    try:
        return await orchestrator.run(
            MetaphorRequest(situation=body.situation),
            generator=request.app.state.generator,
        )
    except TaskError as e:
        return error_response(e, diagnostics)


@router.post("/enhance-prompt")
async def enhance_prompt(body: EnhancePromptBody, request: Request, diagnostics: bool = False):
    """Enrich an image-generation prompt."""
    try:
        text = await orchestrator.enhance_prompt(body.prompt, generator=request.app.state.generator)
    except TaskError as e:
        return error_response(e, diagnostics)
    return {"prompt": text}
