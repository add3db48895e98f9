from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable

import pytest

from eva.config import Settings
from eva.context import AmbientContext
from eva.core import AssistantOrchestrator
from eva.core.orchestrator import DELIVERY_FAILED_TEXT
from eva.errors import SessionBusyError
from eva.tools import ToolResult
from eva.tools.executor import RESULTS_HEADER
from eva.types import MessageType, ToolId


class GatedExecutor:
    """Holds each batch until the gate for its first tool is released."""

    def __init__(self, *first_tools: ToolId) -> None:
        self.gates = {tool_id: asyncio.Event() for tool_id in first_tools}

    async def execute_many(self, tool_ids: Iterable[ToolId], context: AmbientContext | None = None) -> list[ToolResult]:
        tool_ids = list(tool_ids)
        await self.gates[tool_ids[0]].wait()
        return [ToolResult(tool_id, f"{tool_id} done", True) for tool_id in tool_ids]


class FailingExecutor:
    async def execute_many(self, tool_ids: Iterable[ToolId], context: AmbientContext | None = None) -> list[ToolResult]:
        raise RuntimeError("backend unavailable")


async def wait_until(predicate: Callable[[], bool]) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.001)

    await asyncio.wait_for(_poll(), timeout=2)


@pytest.mark.asyncio
async def test_reply_is_immediate_and_tool_results_follow(orchestrator: AssistantOrchestrator) -> None:
    reply = await orchestrator.submit("Can I get a loan fast?", session_id="s1", role="borrower")

    assert reply is not None
    messages = orchestrator.get_messages("s1")
    assert [item.type for item in messages] == [MessageType.USER, MessageType.ASSISTANT]
    assert messages[0].content == "Can I get a loan fast?"
    assert reply.context["tools"] == ("credit-check", "lender-match", "fast-decline-detection")
    assert reply.context["confidence"] == 0.92
    assert reply.context["template"] == "fast-approval"
    assert reply.context["user_role"] == "borrower"
    assert "Available Tools:" in reply.content
    assert orchestrator.pending_deliveries == 1
    assert not orchestrator.is_processing

    await orchestrator.drain()

    messages = orchestrator.get_messages("s1")
    assert [item.type for item in messages][-1] is MessageType.TOOL_RESULT
    result = messages[-1]
    assert result.tool == "credit-check"
    assert result.tools == ("credit-check", "lender-match", "fast-decline-detection")
    assert result.content.startswith(RESULTS_HEADER)
    assert result.content.count("✅") == 3
    assert result.context["success"] is True
    assert orchestrator.pending_deliveries == 0


@pytest.mark.asyncio
async def test_no_tools_means_no_delivery(orchestrator: AssistantOrchestrator) -> None:
    reply = await orchestrator.submit("hello there", session_id="s1", role="auditor")

    assert reply is not None
    assert reply.context["tools"] == ()
    assert reply.context["template"] == "generic"
    assert orchestrator.pending_deliveries == 0
    await orchestrator.drain()
    assert len(orchestrator.get_messages("s1")) == 2


@pytest.mark.asyncio
async def test_blank_message_is_ignored(orchestrator: AssistantOrchestrator) -> None:
    assert await orchestrator.submit("   ", session_id="s1") is None
    assert orchestrator.get_messages("s1") == ()
    assert not orchestrator.is_processing


@pytest.mark.asyncio
async def test_second_message_is_rejected_while_processing(orchestrator: AssistantOrchestrator) -> None:
    first, second = await asyncio.gather(
        orchestrator.submit("Can I get a loan fast?", session_id="s1", role="borrower"),
        orchestrator.submit("Find me better rates", session_id="s1", role="borrower"),
    )

    assert first is not None
    assert second is None
    contents = [item.content for item in orchestrator.get_messages("s1")]
    assert "Find me better rates" not in contents
    await orchestrator.drain()


@pytest.mark.asyncio
async def test_strict_submit_raises_when_busy(orchestrator: AssistantOrchestrator) -> None:
    first, second = await asyncio.gather(
        orchestrator.submit("Can I get a loan fast?", session_id="s1", role="borrower"),
        orchestrator.submit("again", session_id="s1", role="borrower", strict=True),
        return_exceptions=True,
    )

    assert not isinstance(first, BaseException)
    assert isinstance(second, SessionBusyError)
    await orchestrator.drain()


@pytest.mark.asyncio
async def test_deliveries_complete_out_of_order_without_cancellation() -> None:
    executor = GatedExecutor("credit-check", "pipeline-analysis")
    orchestrator = AssistantOrchestrator(settings=Settings(), executor=executor)  # type: ignore[arg-type]

    await orchestrator.submit("Can I get a loan fast?", session_id="s1", role="borrower")
    await orchestrator.submit("How can I close this deal faster?", session_id="s1", role="vendor")
    assert orchestrator.pending_deliveries == 2

    executor.gates["pipeline-analysis"].set()
    await wait_until(lambda: orchestrator.pending_deliveries == 1)
    executor.gates["credit-check"].set()
    await orchestrator.drain()

    results = [item for item in orchestrator.get_messages("s1") if item.type is MessageType.TOOL_RESULT]
    assert [item.tool for item in results] == ["pipeline-analysis", "credit-check"]
    assert len(orchestrator.get_messages("s1")) == 6


@pytest.mark.asyncio
async def test_composition_failure_appends_error_reply(
    orchestrator: AssistantOrchestrator, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _broken_compose(*_args, **_kwargs):
        raise ValueError("template table corrupted")

    monkeypatch.setattr(orchestrator.composer, "compose", _broken_compose)

    reply = await orchestrator.submit("Can I get a loan fast?", session_id="s1", role="vendor")

    assert reply is not None
    assert reply.type is MessageType.ASSISTANT
    assert "I apologize, but I encountered an error" in reply.content
    assert "deal acceleration" in reply.content
    assert reply.context["error"] == "composition"
    assert orchestrator.pending_deliveries == 0
    assert not orchestrator.is_processing
    assert await orchestrator.submit("try again", session_id="s1", role="vendor") is not None


@pytest.mark.asyncio
async def test_delivery_failure_is_reported_in_session() -> None:
    orchestrator = AssistantOrchestrator(settings=Settings(), executor=FailingExecutor())  # type: ignore[arg-type]

    await orchestrator.submit("Can I get a loan fast?", session_id="s1", role="borrower")
    await orchestrator.drain()

    last = orchestrator.get_messages("s1")[-1]
    assert last.type is MessageType.TOOL_RESULT
    assert DELIVERY_FAILED_TEXT in last.content
    assert last.context["success"] is False


@pytest.mark.asyncio
async def test_sessions_do_not_share_messages(orchestrator: AssistantOrchestrator) -> None:
    await orchestrator.submit("Can I get a loan fast?", session_id="a", role="borrower")
    await orchestrator.submit("How can I close this deal faster?", session_id="b", role="vendor")
    await orchestrator.drain()

    assert all(item.tools == () or item.tool == "credit-check" for item in orchestrator.get_messages("a"))
    assert orchestrator.get_messages("b")[-1].tool == "pipeline-analysis"


def test_greet_only_for_empty_session(orchestrator: AssistantOrchestrator) -> None:
    welcome = orchestrator.greet("s1", role="vendor", transaction={"type": "lease", "completed_tasks": 1, "total_tasks": 2})

    assert welcome is not None
    assert "50% complete" in welcome.content
    assert welcome.context["welcome"] is True
    assert welcome.context["role_specific"] is True
    assert orchestrator.greet("s1", role="vendor") is None
    assert len(orchestrator.get_messages("s1")) == 1


def test_greet_falls_back_when_context_is_unreadable(orchestrator: AssistantOrchestrator) -> None:
    class BrokenTransaction:
        def __getattr__(self, name: str):
            raise RuntimeError(name)

    welcome = orchestrator.greet("s1", role="borrower", transaction=BrokenTransaction())

    assert welcome is not None
    assert "No transaction selected" in welcome.content


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_stop_tool_delivery(orchestrator: AssistantOrchestrator) -> None:
    def _broken_renderer(session_id: str, message) -> None:
        if message.type is MessageType.ASSISTANT:
            raise RuntimeError("renderer broke")

    orchestrator.store.on_append(_broken_renderer)

    reply = await orchestrator.submit("Can I get a loan fast?", session_id="s1", role="borrower")

    assert reply is not None
    assert orchestrator.pending_deliveries == 1
    await orchestrator.drain()
    types = [item.type for item in orchestrator.get_messages("s1")]
    assert types == [MessageType.USER, MessageType.ASSISTANT, MessageType.TOOL_RESULT]


@pytest.mark.asyncio
async def test_logged_tool_results_cannot_be_rewritten(orchestrator: AssistantOrchestrator) -> None:
    await orchestrator.submit("Can I get a loan fast?", session_id="s1", role="borrower")
    await orchestrator.drain()

    last = orchestrator.get_messages("s1")[-1]
    with pytest.raises(AttributeError):
        last.context["results"].clear()
    with pytest.raises(TypeError):
        last.context["results"][0]["success"] = False

    assert len(orchestrator.get_messages("s1")[-1].context["results"]) == 3
