"""Core module for EVA."""

from .composer import ResponseComposer, ResponsePayload, Template, WorkflowStep
from .detector import ToolDetector
from .orchestrator import AssistantOrchestrator

__all__ = [
    "AssistantOrchestrator",
    "ResponseComposer",
    "ResponsePayload",
    "Template",
    "ToolDetector",
    "WorkflowStep",
]
