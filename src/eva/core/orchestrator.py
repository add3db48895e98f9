"""Assistant orchestration: detect tools, compose a reply, deliver tool results."""

from __future__ import annotations

import asyncio
from contextvars import copy_context
from dataclasses import asdict, dataclass
from functools import partial
from typing import Any

from loguru import logger

from eva.config import Settings
from eva.context import AmbientContext
from eva.core.composer import ResponseComposer, ResponsePayload
from eva.core.detector import ToolDetector
from eva.errors import CompositionError, SessionBusyError
from eva.logging_utils import session_scope
from eva.session import Message, SessionStore
from eva.tools import ToolCatalog, ToolExecutor, ToolResult, build_tool_catalog, format_results
from eva.tools.executor import RESULTS_HEADER
from eva.types import Context, Role, ToolId

DEFAULT_SESSION_ID = "default"
DELIVERY_FAILED_TEXT = "❌ Tool execution could not be completed. Please try again."


@dataclass(frozen=True)
class PreparedReply:
    """Detection and composition output for one accepted message."""

    tools: tuple[ToolId, ...]
    payload: ResponsePayload
    content: str


class AssistantOrchestrator:
    """Top-level coordinator for one assistant instance.

    A submission is processed as Idle -> Processing -> Idle. Detection and
    composition finish before ``submit`` returns; tool results are delivered
    later by background tasks that are never awaited by ``submit`` and never
    cancelled by later submissions.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        catalog: ToolCatalog | None = None,
        detector: ToolDetector | None = None,
        composer: ResponseComposer | None = None,
        executor: ToolExecutor | None = None,
        store: SessionStore | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.catalog = catalog or build_tool_catalog()
        self.detector = detector or ToolDetector(
            self.catalog,
            max_tools=self.settings.max_detected_tools,
            min_token_length=self.settings.min_token_length,
        )
        self.composer = composer or ResponseComposer()
        self.executor = executor or ToolExecutor(self.catalog, delay_seconds=self.settings.tool_delay_seconds)
        self.store = store or SessionStore()
        self._processing = False
        self._deliveries: set[asyncio.Task[None]] = set()

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def pending_deliveries(self) -> int:
        return len(self._deliveries)

    def get_messages(self, session_id: str = DEFAULT_SESSION_ID) -> tuple[Message, ...]:
        return self.store.get_messages(session_id)

    async def submit(
        self,
        text: str,
        *,
        session_id: str = DEFAULT_SESSION_ID,
        role: str | Role | None = None,
        transaction: Context = None,
        customer: Context = None,
        strict: bool = False,
    ) -> Message | None:
        """Process one user message and return the assistant reply that was appended.

        Returns None, with nothing appended, for blank text or while another
        message is still being processed. ``strict`` turns the latter into
        a SessionBusyError.
        """
        content = text.strip() if text else ""
        if not content:
            logger.debug("orchestrator.ignored reason=empty session={}", session_id)
            return None
        if self._processing:
            logger.warning("orchestrator.rejected reason=busy session={}", session_id)
            if strict:
                raise SessionBusyError("another message is still being processed")
            return None

        active_role = role if role is not None else self.settings.default_role
        self._processing = True
        try:
            with session_scope(session_id):
                self.store.append(session_id, Message.user(content))
                try:
                    reply = await self._prepare_in_executor(content, active_role, transaction)
                except CompositionError:
                    logger.opt(exception=True).error("orchestrator.compose_failed role={}", active_role)
                    return self.store.append(
                        session_id,
                        Message.assistant(
                            self.composer.error_message(active_role),
                            context={"user_role": str(active_role), "error": "composition"},
                        ),
                    )

                message = self.store.append(
                    session_id,
                    Message.assistant(reply.content, context=self._reply_context(reply, active_role)),
                )
                if reply.tools:
                    self._schedule_delivery(session_id, reply.tools, AmbientContext(transaction, customer))
                logger.info(
                    "orchestrator.replied template={} tools={}",
                    reply.payload.template.value,
                    list(reply.tools),
                )
                return message
        finally:
            self._processing = False

    def greet(
        self,
        session_id: str = DEFAULT_SESSION_ID,
        *,
        role: str | Role | None = None,
        transaction: Context = None,
        customer: Context = None,
    ) -> Message | None:
        """Append the role-specific welcome message to an empty session."""
        if self.store.count(session_id):
            return None

        active_role = role if role is not None else self.settings.default_role
        with session_scope(session_id):
            try:
                content = self.composer.welcome(active_role, transaction, customer)
            except Exception:
                logger.opt(exception=True).warning("orchestrator.welcome_failed role={}", active_role)
                content = self.composer.welcome(active_role)
            known = Role.from_value(active_role)
            return self.store.append(
                session_id,
                Message.assistant(
                    content,
                    context={
                        "user_role": str(active_role),
                        "role_specific": known in (Role.BORROWER, Role.VENDOR),
                        "welcome": True,
                    },
                ),
            )

    async def drain(self) -> None:
        """Wait until every scheduled tool-result delivery has finished."""
        while self._deliveries:
            await asyncio.gather(*tuple(self._deliveries), return_exceptions=True)

    async def aclose(self, *, cancel: bool = False) -> None:
        if cancel:
            for task in tuple(self._deliveries):
                task.cancel()
        await self.drain()

    async def _prepare_in_executor(self, content: str, role: str | Role, transaction: Context) -> PreparedReply:
        ctx = copy_context()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, ctx.run, partial(self._prepare, content, role, transaction))

    def _prepare(self, content: str, role: str | Role, transaction: Context) -> PreparedReply:
        try:
            tools = self.detector.detect(content, role)
            payload = self.composer.compose(role, content, transaction, tools)
            rendered = self.composer.render(role, payload, [self.catalog.lookup(tool_id) for tool_id in tools])
        except Exception as exc:
            raise CompositionError(f"could not compose a reply for role={role}") from exc
        return PreparedReply(tools=tools, payload=payload, content=rendered)

    @staticmethod
    def _reply_context(reply: PreparedReply, role: str | Role) -> dict[str, Any]:
        return {
            "tools": reply.tools,
            "confidence": reply.payload.confidence,
            "next_steps": reply.payload.next_steps,
            "suggested_actions": reply.payload.suggested_actions,
            "expected_timeframe": reply.payload.expected_timeframe,
            "template": reply.payload.template.value,
            "user_role": str(role),
        }

    def _schedule_delivery(self, session_id: str, tools: tuple[ToolId, ...], context: AmbientContext) -> None:
        task = asyncio.create_task(self._deliver(session_id, tools, context), name=f"eva-delivery:{session_id}")
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)
        logger.info("delivery.scheduled tools={} pending={}", list(tools), len(self._deliveries))

    async def _deliver(self, session_id: str, tools: tuple[ToolId, ...], context: AmbientContext) -> None:
        try:
            results = await self.executor.execute_many(tools, context)
        except Exception:
            # Every delivery ends with a tool-result entry, even on failure.
            logger.exception("delivery.failed tools={}", list(tools))
            self.store.append(
                session_id,
                Message.tool_result(f"{RESULTS_HEADER}\n{DELIVERY_FAILED_TEXT}", tools, context={"success": False}),
            )
            return

        self.store.append(
            session_id,
            Message.tool_result(format_results(results), tools, context=self._results_context(results)),
        )
        logger.info("delivery.done tools={}", list(tools))

    @staticmethod
    def _results_context(results: list[ToolResult]) -> dict[str, Any]:
        return {
            "success": all(item.success for item in results),
            "results": tuple(asdict(item) for item in results),
        }
