"""Tools package for EVA."""

from .catalog import ToolCatalog, ToolDefinition, build_tool_catalog
from .executor import ToolExecutor, ToolResult, format_results

__all__ = [
    "ToolCatalog",
    "ToolDefinition",
    "ToolExecutor",
    "ToolResult",
    "build_tool_catalog",
    "format_results",
]
