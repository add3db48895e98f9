import asyncio

import pytest

from eva.context import AmbientContext
from eva.tools import ToolCatalog, ToolExecutor, ToolResult, format_results
from eva.tools.executor import RESULTS_HEADER


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_execute_known_tool(catalog: ToolCatalog) -> None:
    sleep = RecordingSleep()
    executor = ToolExecutor(catalog, delay_seconds=2.0, sleep=sleep)

    result = await executor.execute("credit-check")

    assert sleep.calls == [2.0]
    assert result.tool == "credit-check"
    assert result.success
    assert result.authoritative
    assert result.result == "Quick Credit Check completed successfully: Credit score and eligibility status"


@pytest.mark.asyncio
async def test_execute_unknown_tool_is_not_authoritative(catalog: ToolCatalog) -> None:
    executor = ToolExecutor(catalog, sleep=RecordingSleep())

    result = await executor.execute("crystal-ball")

    assert result.success
    assert not result.authoritative
    assert result.result == "crystal-ball completed successfully: Processing result"


@pytest.mark.asyncio
async def test_execute_many_keeps_input_order(catalog: ToolCatalog) -> None:
    sleep = RecordingSleep()
    executor = ToolExecutor(catalog, sleep=sleep)
    tools = ("fast-decline-detection", "credit-check", "lender-match")

    results = await executor.execute_many(tools)

    assert [item.tool for item in results] == list(tools)
    assert len(sleep.calls) == 3


@pytest.mark.asyncio
async def test_execution_data_uses_ambient_context(catalog: ToolCatalog) -> None:
    executor = ToolExecutor(catalog, sleep=RecordingSleep())
    context = AmbientContext(
        transaction={"id": "tx-9", "type": "working_capital", "requestedAmount": 50000},
        customer={"name": "Globex", "industry": "Logistics"},
    )

    query = await executor.execute("transaction-query", context)
    profile = await executor.execute("web-search-profile", context)
    matching = await executor.execute("lender-match", context)
    plain = await executor.execute("credit-check", context)

    assert query.data["transaction"]["id"] == "tx-9"
    assert query.data["transaction"]["amount"] == 50000
    assert profile.data["profile"] == {"company_name": "Globex", "industry": "Logistics"}
    assert matching.data["context"] == "lender-matching"
    assert plain.data == {}


def test_format_results_markers() -> None:
    text = format_results(
        [
            ToolResult("credit-check", "Quick Credit Check completed successfully: ok", True),
            ToolResult("crystal-ball", "crystal-ball completed successfully: Processing result", True, False),
            ToolResult("lender-match", "Smart Lender Matching failed", False),
        ]
    )
    lines = text.splitlines()
    assert lines[0] == RESULTS_HEADER
    assert lines[1].startswith("✅ Quick Credit Check")
    assert lines[2].startswith("⚠️ crystal-ball")
    assert lines[3].startswith("❌ Smart Lender Matching")
