"""Simulated tool execution."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from ..context import (
    AmbientContext,
    customer_snapshot,
    field_of,
    risk_profile,
    transaction_snapshot,
)
from ..types import ToolCategory, ToolId
from .catalog import ToolCatalog, ToolDefinition, build_tool_catalog

DEFAULT_DELAY_SECONDS = 2.0
RESULTS_HEADER = "Tool Execution Results:"

Sleeper = Callable[[float], Awaitable[None]]
DataBuilder = Callable[[AmbientContext], dict[str, Any]]


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one simulated tool run."""

    tool: ToolId
    result: str
    success: bool
    authoritative: bool = True
    data: dict[str, Any] = field(default_factory=dict)


class ToolExecutor:
    """Run catalog tools after a simulated processing delay.

    Every call works on its own locals, so any number of executions may be
    in flight on one event loop at once.
    """

    def __init__(
        self,
        catalog: ToolCatalog | None = None,
        *,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._catalog = catalog or build_tool_catalog()
        self._delay_seconds = delay_seconds
        self._sleep = sleep

    async def execute(self, tool_id: ToolId, context: AmbientContext | None = None) -> ToolResult:
        definition = self._catalog.lookup(tool_id)
        if not definition.found:
            logger.warning("tool.unknown name={}", tool_id)

        logger.info("tool.call.start name={} category={}", tool_id, definition.category.value)
        start = time.monotonic()
        try:
            await self._sleep(self._delay_seconds)
            return ToolResult(
                tool=tool_id,
                result=f"{definition.name} completed successfully: {definition.outcome}",
                success=True,
                authoritative=definition.found,
                data=_contextual_data(definition, context or AmbientContext()),
            )
        finally:
            duration = time.monotonic() - start
            logger.info("tool.call.end name={} duration={:.3f}ms", tool_id, duration * 1000)

    async def execute_many(
        self, tool_ids: Iterable[ToolId], context: AmbientContext | None = None
    ) -> list[ToolResult]:
        """Run tools concurrently; results keep the order of ``tool_ids``."""
        return list(await asyncio.gather(*(self.execute(tool_id, context) for tool_id in tool_ids)))


def format_results(results: Iterable[ToolResult]) -> str:
    lines = [RESULTS_HEADER]
    for item in results:
        if not item.success:
            marker = "❌"
        elif not item.authoritative:
            marker = "⚠️"
        else:
            marker = "✅"
        lines.append(f"{marker} {item.result}")
    return "\n".join(lines)


def _contextual_data(definition: ToolDefinition, context: AmbientContext) -> dict[str, Any]:
    builder = _ID_BUILDERS.get(definition.id) or _CATEGORY_BUILDERS.get(definition.category)
    if builder is None:
        return {}
    return builder(context)


def _transaction_data(context: AmbientContext) -> dict[str, Any]:
    return {
        "transaction": transaction_snapshot(context.transaction),
        "related_transactions": [],
        "context": "financial-transaction-analysis",
    }


def _customer_data(context: AmbientContext) -> dict[str, Any]:
    return {
        "customer": customer_snapshot(context.resolved_customer()),
        "customer_transactions": [],
        "context": "customer-relationship-management",
    }


def _risk_data(context: AmbientContext) -> dict[str, Any]:
    return {
        "risk_profile": risk_profile(context.transaction),
        "compliance_status": "compliant",
        "context": "risk-assessment",
    }


def _matching_data(context: AmbientContext) -> dict[str, Any]:
    return {
        "matches": [
            {"name": "First National Bank", "score": 85},
            {"name": "Community Credit Union", "score": 78},
        ],
        "deal_structure": field_of(context.transaction, "deal_structure", "dealStructure"),
        "context": "lender-matching",
    }


def _web_search_data(_context: AmbientContext) -> dict[str, Any]:
    searched_at = datetime.now(UTC).isoformat()
    return {
        "search_results": [
            {
                "title": "Current Market Interest Rates",
                "snippet": "Federal Reserve announces latest interest rate decision...",
                "url": "https://example.com/rates",
                "date": searched_at,
            },
            {
                "title": "Industry News: Finance Sector Update",
                "snippet": "Latest developments in commercial lending...",
                "url": "https://example.com/news",
                "date": searched_at,
            },
        ],
        "context": "web-search-brave-pro",
        "results_count": 2,
    }


def _profile_data(context: AmbientContext) -> dict[str, Any]:
    customer = context.resolved_customer()
    return {
        "profile": {
            "company_name": field_of(customer, "name", default="Unknown Company"),
            "industry": field_of(customer, "industry", default="General Business"),
        },
        "sources": ["LinkedIn", "Company Website", "News Articles"],
        "context": "profile-builder-ai",
        "confidence": 0.85,
    }


_ID_BUILDERS: dict[ToolId, DataBuilder] = {
    "web-search-brave": _web_search_data,
    "web-search-profile": _profile_data,
}

_CATEGORY_BUILDERS: dict[ToolCategory, DataBuilder] = {
    ToolCategory.TRANSACTION: _transaction_data,
    ToolCategory.CUSTOMER: _customer_data,
    ToolCategory.RISK: _risk_data,
    ToolCategory.MATCHING: _matching_data,
}
