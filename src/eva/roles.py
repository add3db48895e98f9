"""Role profiles: tool sets, goals and example prompts per role."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .tools.catalog import ToolCatalog, build_tool_catalog
from .types import Role, ToolId

Priority = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class Goal:
    """Outcome a role typically wants from the assistant."""

    id: str
    title: str
    description: str
    priority: Priority
    expected_outcome: str
    timeframe: str


@dataclass(frozen=True)
class RoleProfile:
    role: Role
    tool_ids: tuple[ToolId, ...]
    goals: tuple[Goal, ...]
    prompts: tuple[str, ...]


BORROWER_GOALS = (
    Goal(
        "fast-approval",
        "Fast Loan Approval",
        "Get quick pre-approval or decline decision",
        "high",
        "Approval/Decline within 24 hours",
        "1-3 business days",
    ),
    Goal(
        "lender-matching",
        "Find Best Lenders",
        "Match with lenders offering best terms",
        "high",
        "3-5 qualified lender options",
        "2-5 business days",
    ),
    Goal(
        "rate-optimization",
        "Optimize Interest Rates",
        "Find lowest possible rates",
        "medium",
        "Rate improvement of 0.5-2%",
        "3-7 business days",
    ),
)

VENDOR_GOALS = (
    Goal(
        "deal-acceleration",
        "Accelerate Deal Closure",
        "Speed up funding process for pending deals",
        "high",
        "40% faster funding timeline",
        "1-2 business days",
    ),
    Goal(
        "volume-increase",
        "Increase Deal Volume",
        "Get more deals funded through optimal matching",
        "high",
        "25% increase in funded deals",
        "1-4 weeks",
    ),
    Goal(
        "lender-network",
        "Expand Lender Network",
        "Access to broader lender marketplace",
        "medium",
        "10+ new lender partnerships",
        "2-6 weeks",
    ),
)

BORROWER_PROMPTS = (
    "Can you help me get pre-approved for a loan?",
    "What lenders would be best for my credit profile?",
    "How quickly can I get a funding decision?",
    "What documents do I need for approval?",
    "Can you find me better interest rates?",
)

VENDOR_PROMPTS = (
    "How can I close my current deals faster?",
    "Which lenders should I prioritize for quick funding?",
    "Can you help me increase my deal volume?",
    "What's the fastest path to funding for this deal?",
    "How can I optimize my approval rates?",
)

DEFAULT_PROMPTS = (
    "I need help with loan approval",
    "I want to close more deals",
    "Can you help me find the right lenders?",
    "What's the fastest way to get funding?",
    "How can I optimize my financing process?",
)


class RoleProfileProvider:
    """Pure lookup from a role identifier to its profile."""

    def __init__(self, catalog: ToolCatalog | None = None) -> None:
        self._catalog = catalog or build_tool_catalog()

    @property
    def catalog(self) -> ToolCatalog:
        return self._catalog

    def profile(self, role: str | Role | None) -> RoleProfile:
        resolved = Role.resolve(role)
        return RoleProfile(
            role=resolved,
            tool_ids=self.tools_for_role(resolved),
            goals=self.goals_for_role(resolved),
            prompts=self.prompts_for_role(role),
        )

    def tools_for_role(self, role: str | Role | None) -> tuple[ToolId, ...]:
        return self._catalog.tools_for_role(role)

    def goals_for_role(self, role: str | Role | None) -> tuple[Goal, ...]:
        resolved = Role.resolve(role)
        if resolved is Role.BORROWER:
            return BORROWER_GOALS
        if resolved is Role.VENDOR:
            return VENDOR_GOALS
        return BORROWER_GOALS + VENDOR_GOALS

    def prompts_for_role(self, role: str | Role | None) -> tuple[str, ...]:
        # Prompts follow the caller's actual role; unknown roles get the mixed list.
        known = Role.from_value(role)
        if known is Role.BORROWER:
            return BORROWER_PROMPTS
        if known is Role.VENDOR:
            return VENDOR_PROMPTS
        return DEFAULT_PROMPTS
