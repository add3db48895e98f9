from __future__ import annotations

import pytest

from eva.config import Settings
from eva.core import AssistantOrchestrator
from eva.tools import ToolCatalog, build_tool_catalog


@pytest.fixture()
def catalog() -> ToolCatalog:
    return build_tool_catalog()


@pytest.fixture()
def settings() -> Settings:
    return Settings(tool_delay_seconds=0.01)


@pytest.fixture()
def orchestrator(settings: Settings, catalog: ToolCatalog) -> AssistantOrchestrator:
    return AssistantOrchestrator(settings=settings, catalog=catalog)
