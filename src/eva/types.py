"""Shared enums and data aliases."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, TypeAlias

ToolId: TypeAlias = str
Context: TypeAlias = Any


class Role(StrEnum):
    """Platform persona of the person talking to the assistant."""

    BORROWER = "borrower"
    VENDOR = "vendor"
    LENDER = "lender"
    ADMIN = "admin"
    DEVELOPER = "developer"

    @classmethod
    def from_value(cls, value: str | Role | None) -> Role | None:
        """Return the matching role, or None when the value is not a known role."""
        if isinstance(value, Role):
            return value
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @classmethod
    def resolve(cls, value: str | Role | None) -> Role:
        """Like from_value, but unknown roles fall back to borrower."""
        return cls.from_value(value) or cls.BORROWER


class MessageType(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL_CALL = "tool-call"
    TOOL_RESULT = "tool-result"


class StepStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class ToolCategory(StrEnum):
    TRANSACTION = "transaction"
    CUSTOMER = "customer"
    RISK = "risk"
    DOCUMENTS = "documents"
    MATCHING = "matching"
    EXECUTION = "execution"
    ANALYSIS = "analysis"
    ASSESSMENT = "assessment"
    PREVENTION = "prevention"
    ANALYTICS = "analytics"
    ACCELERATION = "acceleration"
    NETWORKING = "networking"
    FINANCIAL = "financial"
    UNDERWRITING = "underwriting"
    COMPLIANCE = "compliance"
    REPORTING = "reporting"
    PRICING = "pricing"
    COMMUNICATION = "communication"
    GENERAL = "general"
