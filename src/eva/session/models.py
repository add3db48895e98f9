"""Session message models."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from eva.types import MessageType, ToolId


def _new_id() -> str:
    return uuid.uuid4().hex


def _freeze_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze_value(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_value(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze_value(item) for item in value)
    return value


def _freeze(context: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    """Read-only copy of ``context``, nested containers included."""
    if context is None:
        return None
    return _freeze_value(context)


@dataclass(frozen=True)
class Message:
    """One entry of a conversation log. Never mutated after creation."""

    type: MessageType
    content: str
    tool: ToolId | None = None
    tools: tuple[ToolId, ...] = ()
    context: Mapping[str, Any] | None = None
    id: str = field(default_factory=_new_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(MessageType.USER, content)

    @classmethod
    def assistant(cls, content: str, *, context: Mapping[str, Any] | None = None) -> Message:
        return cls(MessageType.ASSISTANT, content, context=_freeze(context))

    @classmethod
    def tool_result(
        cls,
        content: str,
        tools: tuple[ToolId, ...],
        *,
        context: Mapping[str, Any] | None = None,
    ) -> Message:
        """Consolidated result message; ``tool`` keeps the first tool of the batch."""
        return cls(
            MessageType.TOOL_RESULT,
            content,
            tool=tools[0] if tools else None,
            tools=tools,
            context=_freeze(context),
        )
