"""Tool catalog for EVA."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..types import Role, ToolCategory, ToolId

NOT_FOUND_DESCRIPTION = "Tool description not available"
NOT_FOUND_ESTIMATED_TIME = "Unknown"
NOT_FOUND_OUTCOME = "Processing result"

_BORROWER = frozenset({Role.BORROWER, Role.ADMIN, Role.DEVELOPER})
_VENDOR = frozenset({Role.VENDOR, Role.ADMIN, Role.DEVELOPER})
_LENDER = frozenset({Role.LENDER})
_WORKSPACE = frozenset({Role.LENDER, Role.ADMIN, Role.DEVELOPER})


@dataclass(frozen=True)
class ToolDefinition:
    """Static description of one backend capability."""

    id: ToolId
    name: str
    description: str
    category: ToolCategory
    estimated_time: str
    outcome: str
    applicable_roles: frozenset[Role] = frozenset()
    found: bool = True

    @classmethod
    def not_found(cls, tool_id: ToolId) -> ToolDefinition:
        return cls(
            id=tool_id,
            name=tool_id,
            description=NOT_FOUND_DESCRIPTION,
            category=ToolCategory.GENERAL,
            estimated_time=NOT_FOUND_ESTIMATED_TIME,
            outcome=NOT_FOUND_OUTCOME,
            found=False,
        )

    def keywords(self) -> str:
        """Lowercased bag of words used for message matching."""
        return " ".join([self.name, self.description, self.category.value, self.id]).lower()


class ToolCatalog:
    """Registry for tool definitions, kept in declaration order."""

    def __init__(self, definitions: Iterable[ToolDefinition] | None = None) -> None:
        self._definitions: dict[ToolId, ToolDefinition] = {}
        for definition in definitions or []:
            self.register(definition)

    def register(self, definition: ToolDefinition) -> None:
        self._definitions[definition.id] = definition

    def has(self, tool_id: ToolId) -> bool:
        return tool_id in self._definitions

    def lookup(self, tool_id: ToolId) -> ToolDefinition:
        definition = self._definitions.get(tool_id)
        if definition is None:
            return ToolDefinition.not_found(tool_id)
        return definition

    def definitions(self) -> list[ToolDefinition]:
        return list(self._definitions.values())

    def tools_for_role(self, role: str | Role | None) -> tuple[ToolId, ...]:
        resolved = Role.resolve(role)
        return tuple(
            definition.id for definition in self._definitions.values() if resolved in definition.applicable_roles
        )

    def render(self, role: str | Role | None = None) -> str:
        if role is None:
            definitions = self.definitions()
        else:
            definitions = [self.lookup(tool_id) for tool_id in self.tools_for_role(role)]
        if not definitions:
            return "(no tools)"

        groups: dict[ToolCategory, list[ToolDefinition]] = {}
        for definition in definitions:
            groups.setdefault(definition.category, []).append(definition)

        lines: list[str] = []
        for category in sorted(groups, key=lambda item: item.value):
            lines.append(category.value.title())
            for definition in groups[category]:
                lines.append(f"  {definition.id:28} {definition.name} ({definition.estimated_time})")
            lines.append("")
        return "\n".join(lines).strip()


def build_tool_catalog() -> ToolCatalog:
    return ToolCatalog(_all_definitions())


def _all_definitions() -> list[ToolDefinition]:
    return [
        *_borrower_definitions(),
        *_vendor_definitions(),
        *_lender_definitions(),
        *_workspace_definitions(),
    ]


def _tool(
    tool_id: ToolId,
    name: str,
    description: str,
    category: ToolCategory,
    estimated_time: str,
    outcome: str,
    roles: frozenset[Role],
) -> ToolDefinition:
    return ToolDefinition(tool_id, name, description, category, estimated_time, outcome, roles)


def _borrower_definitions() -> list[ToolDefinition]:
    return [
        _tool(
            "credit-check",
            "Quick Credit Check",
            "Instant soft credit pull and score analysis",
            ToolCategory.ASSESSMENT,
            "2 minutes",
            "Credit score and eligibility status",
            _BORROWER,
        ),
        _tool(
            "lender-match",
            "Smart Lender Matching",
            "AI-powered matching with best lenders for your profile",
            ToolCategory.MATCHING,
            "5 minutes",
            "3-5 qualified lender options",
            _BORROWER,
        ),
        _tool(
            "rate-comparison",
            "Rate Shopping Engine",
            "Compare rates across multiple lenders simultaneously",
            ToolCategory.ANALYSIS,
            "3 minutes",
            "Rate comparison with savings potential",
            _BORROWER,
        ),
        _tool(
            "document-upload",
            "Document Upload",
            "Securely upload statements, tax returns and IDs",
            ToolCategory.DOCUMENTS,
            "3 minutes",
            "Documents attached to your application",
            _BORROWER,
        ),
        _tool(
            "application-status",
            "Application Status Tracker",
            "Track where your application sits in review",
            ToolCategory.TRANSACTION,
            "1 minute",
            "Current stage and outstanding items",
            _BORROWER,
        ),
        _tool(
            "pre-approval-calculator",
            "Pre-Approval Calculator",
            "Estimate the amount you can be pre-approved for",
            ToolCategory.ASSESSMENT,
            "2 minutes",
            "Estimated pre-approval range",
            _BORROWER,
        ),
        _tool(
            "credit-improvement-tips",
            "Credit Improvement Advisor",
            "Personalized steps to raise your credit score",
            ToolCategory.ASSESSMENT,
            "4 minutes",
            "Prioritized credit improvement plan",
            _BORROWER,
        ),
        _tool(
            "loan-affordability-analysis",
            "Loan Affordability Analysis",
            "Check monthly payments against your cash flow",
            ToolCategory.ANALYSIS,
            "4 minutes",
            "Affordable payment and amount range",
            _BORROWER,
        ),
        _tool(
            "collateral-evaluation",
            "Collateral Evaluation",
            "Estimate the lending value of pledged assets",
            ToolCategory.RISK,
            "6 minutes",
            "Collateral value and advance rate",
            _BORROWER,
        ),
        _tool(
            "fast-decline-detection",
            "Fast Decline Prevention",
            "Pre-screen for automatic declines before application",
            ToolCategory.PREVENTION,
            "1 minute",
            "Decline risk assessment and recommendations",
            _BORROWER,
        ),
    ]


def _vendor_definitions() -> list[ToolDefinition]:
    return [
        _tool(
            "pipeline-analysis",
            "Deal Pipeline Analytics",
            "Comprehensive analysis of your deal pipeline health",
            ToolCategory.ANALYTICS,
            "5 minutes",
            "Pipeline insights and optimization recommendations",
            _VENDOR,
        ),
        _tool(
            "deal-acceleration",
            "Deal Acceleration Engine",
            "Identify and fast-track high-potential deals",
            ToolCategory.ACCELERATION,
            "3 minutes",
            "40% faster deal closure times",
            _VENDOR,
        ),
        _tool(
            "vendor-network-expansion",
            "Network Expansion Tool",
            "Discover new lender partnerships and opportunities",
            ToolCategory.NETWORKING,
            "10 minutes",
            "10+ new potential partnerships",
            _VENDOR,
        ),
        _tool(
            "commission-tracker",
            "Commission Analytics",
            "Track and optimize commission rates across deals",
            ToolCategory.FINANCIAL,
            "2 minutes",
            "Commission optimization insights",
            _VENDOR,
        ),
        _tool(
            "deal-matching-ai",
            "AI Deal Matching",
            "Match deals with optimal lenders using AI",
            ToolCategory.MATCHING,
            "4 minutes",
            "Higher approval rates and better terms",
            _VENDOR,
        ),
        _tool(
            "performance-analytics",
            "Vendor Performance Dashboard",
            "Comprehensive performance metrics and trends",
            ToolCategory.ANALYTICS,
            "5 minutes",
            "Performance insights and improvement areas",
            _VENDOR,
        ),
        _tool(
            "market-insights",
            "Market Insights",
            "Equipment finance demand and pricing trends",
            ToolCategory.ANALYSIS,
            "4 minutes",
            "Market trends for your product lines",
            _VENDOR,
        ),
        _tool(
            "lender-relationship-manager",
            "Lender Relationship Manager",
            "Manage contacts and terms with partner lenders",
            ToolCategory.NETWORKING,
            "3 minutes",
            "Lender relationship health summary",
            _VENDOR,
        ),
        _tool(
            "territory-optimization",
            "Territory Optimization",
            "Find regions with the strongest funding demand",
            ToolCategory.ANALYTICS,
            "6 minutes",
            "Ranked territories by deal potential",
            _VENDOR,
        ),
        _tool(
            "vendor-scorecard",
            "Vendor Scorecard",
            "Benchmark approval and funding rates across your lender panel",
            ToolCategory.ANALYTICS,
            "2 minutes",
            "Scorecard against peer vendors",
            _VENDOR,
        ),
    ]


def _lender_definitions() -> list[ToolDefinition]:
    return [
        _tool(
            "underwriting-assistant",
            "AI Underwriting Assistant",
            "Automated underwriting support and decision assistance",
            ToolCategory.UNDERWRITING,
            "10 minutes",
            "Faster, more accurate underwriting decisions",
            _LENDER,
        ),
        _tool(
            "risk-assessment",
            "Advanced Risk Assessment",
            "Comprehensive risk analysis and scoring",
            ToolCategory.RISK,
            "8 minutes",
            "Detailed risk profile and recommendations",
            _LENDER,
        ),
        _tool(
            "portfolio-analysis",
            "Portfolio Analysis",
            "Concentration, yield and delinquency review",
            ToolCategory.ANALYSIS,
            "7 minutes",
            "Portfolio health report",
            _LENDER,
        ),
        _tool(
            "compliance-checker",
            "Compliance Checker",
            "Screen files against lending regulations",
            ToolCategory.COMPLIANCE,
            "4 minutes",
            "Compliance exceptions list",
            _LENDER,
        ),
        _tool(
            "document-verification",
            "Document Verification",
            "Verify authenticity of submitted documents",
            ToolCategory.DOCUMENTS,
            "5 minutes",
            "Verified document set",
            _LENDER,
        ),
        _tool(
            "credit-decision-engine",
            "Credit Decision Engine",
            "Rules-based approve, decline or refer decisions",
            ToolCategory.UNDERWRITING,
            "3 minutes",
            "Recommended credit decision",
            _LENDER,
        ),
        _tool(
            "regulatory-reporting",
            "Regulatory Reporting",
            "Assemble required regulatory filings",
            ToolCategory.REPORTING,
            "12 minutes",
            "Draft regulatory reports",
            _LENDER,
        ),
        _tool(
            "loan-pricing-optimizer",
            "Loan Pricing Optimizer",
            "Price loans against risk and market rates",
            ToolCategory.PRICING,
            "4 minutes",
            "Risk-adjusted pricing recommendation",
            _LENDER,
        ),
        _tool(
            "borrower-communication",
            "Borrower Communication",
            "Draft status updates and document requests",
            ToolCategory.COMMUNICATION,
            "2 minutes",
            "Ready-to-send borrower messages",
            _LENDER,
        ),
        _tool(
            "audit-trail-generator",
            "Audit Trail Generator",
            "Compile a timeline of decisions and actions",
            ToolCategory.COMPLIANCE,
            "3 minutes",
            "Exportable audit trail",
            _LENDER,
        ),
    ]


def _workspace_definitions() -> list[ToolDefinition]:
    return [
        _tool(
            "transaction-query",
            "Transaction Query",
            "Analyze deal metrics, payment terms, and transaction status",
            ToolCategory.TRANSACTION,
            "1 minute",
            "Transaction snapshot",
            _WORKSPACE,
        ),
        _tool(
            "customer-lookup",
            "Customer Lookup",
            "Review credit profile, payment history, and relationship data",
            ToolCategory.CUSTOMER,
            "1 minute",
            "Customer relationship summary",
            _WORKSPACE,
        ),
        _tool(
            "risk-analysis",
            "Risk Analysis",
            "Calculate risk scores, DSC ratios, and compliance factors",
            ToolCategory.RISK,
            "3 minutes",
            "Risk score and compliance status",
            _WORKSPACE,
        ),
        _tool(
            "smart-match",
            "Smart Match",
            "Find lenders with optimal rates and deal preferences",
            ToolCategory.MATCHING,
            "3 minutes",
            "Ranked lender matches",
            _WORKSPACE,
        ),
        _tool(
            "deal-structure",
            "Deal Structuring",
            "Optimize loan terms, rates, and payment structures",
            ToolCategory.TRANSACTION,
            "5 minutes",
            "Proposed deal structure",
            _WORKSPACE,
        ),
        _tool(
            "transaction-execution",
            "Transaction Execution",
            "Process workflows, approvals, and funding coordination",
            ToolCategory.EXECUTION,
            "5 minutes",
            "Workflow actions queued",
            _WORKSPACE,
        ),
        _tool(
            "document-search",
            "Document Search",
            "Access contracts, statements, and compliance documents",
            ToolCategory.DOCUMENTS,
            "2 minutes",
            "Matching documents",
            _WORKSPACE,
        ),
        _tool(
            "web-search-brave",
            "Web Search",
            "Search the web with Brave Pro for real-time data and news",
            ToolCategory.ANALYSIS,
            "2 minutes",
            "Current market and news results",
            _WORKSPACE,
        ),
        _tool(
            "web-search-profile",
            "Profile Builder",
            "Build comprehensive profiles using AI-powered web data",
            ToolCategory.ANALYSIS,
            "4 minutes",
            "Company profile from public sources",
            _WORKSPACE,
        ),
    ]
