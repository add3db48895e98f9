"""EVA - role-aware assistant orchestration for lending workflows."""

from .core import AssistantOrchestrator, ResponseComposer, ToolDetector
from .roles import RoleProfileProvider
from .session import Message, SessionStore
from .tools import ToolCatalog, ToolExecutor, build_tool_catalog
from .types import Role

__version__ = "0.1.0"

__all__ = [
    "AssistantOrchestrator",
    "Message",
    "ResponseComposer",
    "Role",
    "RoleProfileProvider",
    "SessionStore",
    "ToolCatalog",
    "ToolDetector",
    "ToolExecutor",
    "build_tool_catalog",
]
