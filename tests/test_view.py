"""Tests for the TaskView presentation state machine."""

import json

import pytest

from sanogen.errors import RateLimited, TaskError, TaskErrorKind
from sanogen.models import EmotionAdviceRequest, Metaphor, MetaphorRequest, TaskKind, ThoughtAnalysisRequest
from sanogen.orchestrator import run
from sanogen.view import ERROR_MESSAGES, TAB_LABELS, TaskView, ViewStatus, describe_error

METAPHOR_REPLY = json.dumps({"title": "t", "story": "s", "moral": "m"})


def _view(stub_generator, **kwargs) -> TaskView:
    async def runner(request):
        return await run(request, generator=stub_generator)
    return TaskView(runner=runner, **kwargs)


class TestTaskView:
    def test_starts_idle_on_analysis_tab(self) -> None:
        view = TaskView()
        assert view.status is ViewStatus.IDLE
        assert view.tab is TaskKind.ANALYSIS
        assert view.result is None and view.error is None and view.message is None

    async def test_success(self, stub) -> None:
        view = _view(stub(reply=METAPHOR_REPLY))
        view.switch_tab(TaskKind.METAPHOR)
        await view.submit(MetaphorRequest(situation="x"))
        assert view.status is ViewStatus.SUCCESS
        assert view.result == Metaphor(title="t", story="s", moral="m")
        assert view.error is None

    async def test_blank_input_stays_idle(self, stub) -> None:
        gen = stub(reply=METAPHOR_REPLY)
        view = _view(gen)
        await view.submit(ThoughtAnalysisRequest(thought="  "))
        assert view.status is ViewStatus.IDLE
        assert view.message == ERROR_MESSAGES[TaskErrorKind.EMPTY_INPUT]
        assert gen.calls == []

    async def test_error_sets_classified_message(self, stub) -> None:
        view = _view(stub(error=RateLimited("HTTP 429: Quota exceeded")))
        view.switch_tab(TaskKind.METAPHOR)
        await view.submit(MetaphorRequest(situation="x"))
        assert view.status is ViewStatus.ERROR
        assert view.error.kind is TaskErrorKind.RATE_LIMITED
        assert view.message == ERROR_MESSAGES[TaskErrorKind.RATE_LIMITED]
        assert "Quota exceeded" not in view.message
        assert view.result is None

    async def test_diagnostics_shown_when_enabled(self, stub) -> None:
        view = _view(stub(error=RateLimited("HTTP 429: Quota exceeded")), show_diagnostics=True)
        view.switch_tab(TaskKind.METAPHOR)
        await view.submit(MetaphorRequest(situation="x"))
        assert "Quota exceeded" in view.message

    async def test_loading_while_in_flight(self) -> None:
        seen = []

        async def runner(request):
            seen.append(view.status)
            return Metaphor(title="t", story="s", moral="m")

        view = TaskView(runner=runner)
        view.switch_tab(TaskKind.METAPHOR)
        await view.submit(MetaphorRequest(situation="x"))
        assert seen == [ViewStatus.LOADING]

    async def test_unexpected_runner_failure_is_unknown(self) -> None:
        async def runner(request):
            raise RuntimeError("socket closed")

        view = TaskView(runner=runner, show_diagnostics=True)
        view.switch_tab(TaskKind.METAPHOR)
        await view.submit(MetaphorRequest(situation="x"))
        assert view.status is ViewStatus.ERROR
        assert view.error.kind is TaskErrorKind.UNKNOWN
        assert view.message.startswith(ERROR_MESSAGES[TaskErrorKind.UNKNOWN])
        assert "socket closed" in view.message
        assert view.result is None

    @pytest.mark.parametrize("first_reply", [METAPHOR_REPLY, "not json"])
    async def test_blank_submit_clears_previous_outcome(self, stub, first_reply) -> None:
        gen = stub(reply=first_reply)
        view = _view(gen)
        view.switch_tab(TaskKind.METAPHOR)
        await view.submit(MetaphorRequest(situation="x"))
        assert view.status in (ViewStatus.SUCCESS, ViewStatus.ERROR)

        await view.submit(MetaphorRequest(situation="   "))
        assert view.status is ViewStatus.IDLE
        assert view.result is None and view.error is None
        assert view.message == ERROR_MESSAGES[TaskErrorKind.EMPTY_INPUT]
        assert len(gen.calls) == 1

    async def test_reset_clears_state(self, stub) -> None:
        view = _view(stub(error=RateLimited("q")))
        view.switch_tab(TaskKind.METAPHOR)
        await view.submit(MetaphorRequest(situation="x"))
        view.reset()
        assert view.status is ViewStatus.IDLE
        assert view.error is None and view.message is None

    async def test_switch_tab_resets(self, stub) -> None:
        view = _view(stub(reply=METAPHOR_REPLY))
        view.switch_tab(TaskKind.METAPHOR)
        await view.submit(MetaphorRequest(situation="x"))
        view.switch_tab(TaskKind.EMOTION)
        assert view.tab is TaskKind.EMOTION
        assert view.status is ViewStatus.IDLE
        assert view.result is None

    async def test_request_must_match_tab(self) -> None:
        view = TaskView()
        with pytest.raises(ValueError):
            await view.submit(EmotionAdviceRequest(emotion="anger", intensity=3))


def test_every_error_kind_has_a_message():
    assert set(ERROR_MESSAGES) == set(TaskErrorKind)


def test_every_tab_has_a_label():
    assert set(TAB_LABELS) == set(TaskKind)


def test_describe_error_hides_diagnostic_by_default():
    error = TaskError(TaskErrorKind.UNKNOWN, "ConnectError: refused")
    assert describe_error(error) == ERROR_MESSAGES[TaskErrorKind.UNKNOWN]
    assert describe_error(error, show_diagnostics=True).endswith("ConnectError: refused")
