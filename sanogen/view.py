"""Presentation state for the three-tab screen.

TaskView is the state machine a UI binds to:

    IDLE ──submit──▶ LOADING ──▶ SUCCESS
      ▲                    └───▶ ERROR
      └───────── reset / switch_tab ─────┘

A blank submission clears any previous outcome, stays in IDLE with a
validation message and never calls the orchestrator. A runner failure that is
not a TaskError is reported as UNKNOWN. Each error kind has exactly one user-facing message;
provider diagnostics are shown only when explicitly asked for.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from sanogen import orchestrator
from sanogen.errors import TaskError, TaskErrorKind
from sanogen.models import TaskKind, TaskRequest, TaskResult

logger = logging.getLogger(__name__)


class ViewStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


TAB_LABELS: dict[TaskKind, str] = {
    TaskKind.ANALYSIS: "Анализ",
    TaskKind.EMOTION: "Дневник",
    TaskKind.METAPHOR: "Метафора",
}

ERROR_MESSAGES: dict[TaskErrorKind, str] = {
    TaskErrorKind.EMPTY_INPUT: "Пожалуйста, заполните поле ввода.",
    TaskErrorKind.NO_CREDENTIAL: (
        "API-ключ не найден. Задайте переменную GEMINI_API_KEY "
        "(ключ начинается на AIza) и перезапустите приложение."
    ),
    TaskErrorKind.UNAUTHORIZED: (
        "Ключ отклонён сервисом. Проверьте правильность ключа в Google AI Studio."
    ),
    TaskErrorKind.RATE_LIMITED: (
        "Превышен лимит запросов. Подождите немного и попробуйте снова."
    ),
    TaskErrorKind.REGION_BLOCKED: (
        "Сервис недоступен в вашем регионе."
    ),
    TaskErrorKind.UNKNOWN: "Не удалось связаться с ИИ. Попробуйте позже.",
    TaskErrorKind.BAD_RESPONSE: (
        "ИИ вернул ответ в неожиданном формате. Отправьте запрос ещё раз."
    ),
}


def describe_error(error: TaskError, show_diagnostics: bool = False) -> str:
    """User-facing text for a task error."""
    message = ERROR_MESSAGES[error.kind]
    if show_diagnostics and error.diagnostic:
        return f"{message}\n\n{error.diagnostic}"
    return message


Runner = Callable[[TaskRequest], Awaitable[TaskResult]]


class TaskView:
    """View state for one screen. Not shared between users or screens.

    Args:
        runner:           Coroutine that executes a request; defaults to
                          orchestrator.run with the real Gemini client.
        show_diagnostics: Append provider diagnostics to error messages.
    """

    def __init__(self, runner: Runner | None = None, show_diagnostics: bool = False) -> None:
        self._runner = runner or orchestrator.run
        self.show_diagnostics = show_diagnostics
        self.tab = TaskKind.ANALYSIS
        self.status = ViewStatus.IDLE
        self.result: TaskResult | None = None
        self.error: TaskError | None = None
        self.message: str | None = None

    def reset(self) -> None:
        self.status = ViewStatus.IDLE
        self.result = None
        self.error = None
        self.message = None

    def switch_tab(self, tab: TaskKind) -> None:
        self.tab = tab
        self.reset()

    async def submit(self, request: TaskRequest) -> None:
        if request.kind != self.tab:
            raise ValueError(f"Request kind {request.kind!r} does not match tab {self.tab.value!r}")

        self.reset()
        if not request.primary_text.strip():
            self.message = ERROR_MESSAGES[TaskErrorKind.EMPTY_INPUT]
            return

        self.status = ViewStatus.LOADING
        try:
            self.result = await self._runner(request)
        except TaskError as e:
            logger.info("tab=%s failed kind=%s", self.tab.value, e.kind.value)
            self._fail(e)
            return
        except Exception as e:
            logger.exception("tab=%s runner raised unexpectedly", self.tab.value)
            self._fail(TaskError(TaskErrorKind.UNKNOWN, str(e) or type(e).__name__))
            return
        self.status = ViewStatus.SUCCESS

    def _fail(self, error: TaskError) -> None:
        self.error = error
        self.message = describe_error(error, self.show_diagnostics)
        self.status = ViewStatus.ERROR
