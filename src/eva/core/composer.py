"""Role-tailored reply composition."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from eva.context import (
    completion_percent,
    describe_customer,
    describe_transaction,
    format_amount,
    requested_amount,
    risk_level,
    transaction_type,
)
from eva.tools.catalog import ToolDefinition
from eva.types import Context, Role, StepStatus

AVAILABLE_TOOLS_HEADER = "Available Tools:"
NEXT_STEPS_HEADER = "Next Steps:"


class Template(StrEnum):
    FAST_APPROVAL = "fast-approval"
    RATE_SHOPPING = "rate-shopping"
    BORROWER_GENERIC = "borrower-generic"
    DEAL_ACCELERATION = "deal-acceleration"
    VOLUME_INCREASE = "volume-increase"
    VENDOR_GENERIC = "vendor-generic"
    GENERIC = "generic"


@dataclass(frozen=True)
class WorkflowStep:
    id: str
    title: str
    description: str
    required: bool
    status: StepStatus
    estimated_time: str


@dataclass(frozen=True)
class ResponsePayload:
    """Structured reply produced for one user message."""

    message: str
    next_steps: tuple[WorkflowStep, ...]
    suggested_actions: tuple[str, ...]
    expected_timeframe: str
    confidence: float
    template: Template


def _step(step_id: str, title: str, description: str, estimated_time: str) -> WorkflowStep:
    return WorkflowStep(step_id, title, description, True, StepStatus.PENDING, estimated_time)


TEMPLATES: dict[Template, ResponsePayload] = {
    Template.FAST_APPROVAL: ResponsePayload(
        message=(
            "I'll help you get a fast loan decision! Based on your request, I'm analyzing your profile for "
            "quick pre-approval or decline. Let me check your eligibility across our lender network."
        ),
        next_steps=(
            _step("credit-check", "Quick Credit Assessment", "Soft credit pull to determine eligibility", "2 minutes"),
            _step("lender-match", "Lender Matching", "Find 3-5 best lender options", "5 minutes"),
            _step("pre-approval", "Pre-Approval Decision", "Get approval or decline decision", "10 minutes"),
        ),
        suggested_actions=(
            "Provide income verification documents",
            "Submit bank statements for faster processing",
            "Confirm loan amount and purpose",
        ),
        expected_timeframe="Decision within 15 minutes",
        confidence=0.92,
        template=Template.FAST_APPROVAL,
    ),
    Template.RATE_SHOPPING: ResponsePayload(
        message=(
            "I'll help you find the best rates available! Let me shop your loan across multiple lenders to get "
            "you the lowest possible rate."
        ),
        next_steps=(
            _step("rate-comparison", "Multi-Lender Rate Check", "Compare rates from 10+ lenders", "3 minutes"),
            _step("term-optimization", "Optimize Loan Terms", "Find best combination of rate and terms", "5 minutes"),
        ),
        suggested_actions=(
            "Compare multiple rate options",
            "Consider different loan terms",
            "Lock in your preferred rate",
        ),
        expected_timeframe="Rate quotes in 8 minutes",
        confidence=0.88,
        template=Template.RATE_SHOPPING,
    ),
    Template.BORROWER_GENERIC: ResponsePayload(
        message=(
            "As a borrower, I'm here to help you get fast loan decisions and find the best lenders for your "
            "needs. What type of financing are you looking for?"
        ),
        next_steps=(
            _step("needs-assessment", "Assess Financing Needs", "Determine loan type and amount", "3 minutes"),
            _step("eligibility-check", "Quick Eligibility Check", "Preliminary qualification assessment", "5 minutes"),
        ),
        suggested_actions=(
            "Specify loan amount needed",
            "Provide business/personal information",
            "Upload required documents",
        ),
        expected_timeframe="Initial assessment in 8 minutes",
        confidence=0.85,
        template=Template.BORROWER_GENERIC,
    ),
    Template.DEAL_ACCELERATION: ResponsePayload(
        message=(
            "I'll help you close more deals faster! Let me optimize your current pipeline and identify "
            "quick-close opportunities with our lender network."
        ),
        next_steps=(
            _step("pipeline-analysis", "Pipeline Assessment", "Analyze current deals for closure potential", "5 minutes"),
            _step("lender-optimization", "Lender Route Optimization", "Match deals to best-fit lenders", "8 minutes"),
            _step("closure-acceleration", "Accelerate Funding", "Fast-track high-probability deals", "12 minutes"),
        ),
        suggested_actions=(
            "Upload current deal pipeline",
            "Prioritize high-value transactions",
            "Set up automated lender matching",
        ),
        expected_timeframe="Deal optimization in 25 minutes",
        confidence=0.94,
        template=Template.DEAL_ACCELERATION,
    ),
    Template.VOLUME_INCREASE: ResponsePayload(
        message=(
            "I'll help you increase your deal volume! Let me connect you with additional lenders and optimize "
            "your approval rates."
        ),
        next_steps=(
            _step("lender-expansion", "Expand Lender Network", "Connect with 5+ new lender partners", "10 minutes"),
            _step(
                "approval-optimization",
                "Optimize Approval Rates",
                "Improve deal structuring for higher approvals",
                "15 minutes",
            ),
        ),
        suggested_actions=(
            "Review successful deal patterns",
            "Identify new lender opportunities",
            "Set up volume-based partnerships",
        ),
        expected_timeframe="Network expansion in 25 minutes",
        confidence=0.90,
        template=Template.VOLUME_INCREASE,
    ),
    Template.VENDOR_GENERIC: ResponsePayload(
        message=(
            "As a vendor, I'm here to help you close more deals and increase your funding volume. Let's "
            "optimize your current pipeline and find new opportunities."
        ),
        next_steps=(
            _step("portfolio-review", "Review Current Portfolio", "Analyze current deals and success rates", "5 minutes"),
            _step(
                "opportunity-identification",
                "Identify Opportunities",
                "Find quick-close and high-value deals",
                "8 minutes",
            ),
        ),
        suggested_actions=(
            "Upload current deal pipeline",
            "Set closure targets",
            "Connect with new lenders",
        ),
        expected_timeframe="Portfolio optimization in 13 minutes",
        confidence=0.87,
        template=Template.VENDOR_GENERIC,
    ),
    Template.GENERIC: ResponsePayload(
        message=(
            "I'll help you achieve your financing goals. Please let me know if you're looking to borrow funds "
            "or if you're a vendor seeking to close more deals."
        ),
        next_steps=(
            _step("role-clarification", "Clarify Your Role", "Determine if you're a borrower or vendor", "1 minute"),
            _step("goal-setting", "Set Objectives", "Define what you want to accomplish", "3 minutes"),
        ),
        suggested_actions=(
            "Select your user type",
            "Describe your financing needs",
            "Set your timeline",
        ),
        expected_timeframe="Personalized workflow in 4 minutes",
        confidence=0.80,
        template=Template.GENERIC,
    ),
}

IntentRule = tuple[tuple[str, ...], Template]

INTENT_RULES: dict[Role, tuple[tuple[IntentRule, ...], Template]] = {
    Role.BORROWER: (
        (
            (("loan", "approval", "funding"), Template.FAST_APPROVAL),
            (("rate", "interest", "better terms"), Template.RATE_SHOPPING),
        ),
        Template.BORROWER_GENERIC,
    ),
    Role.VENDOR: (
        (
            (("close", "fund", "deal"), Template.DEAL_ACCELERATION),
            (("volume", "more deals", "increase"), Template.VOLUME_INCREASE),
        ),
        Template.VENDOR_GENERIC,
    ),
}

ROLE_FOOTERS: dict[Role, str] = {
    Role.BORROWER: (
        "For Borrowers: I can help you get fast loan decisions, find the best lenders, and optimize your rates. "
        "Just ask!"
    ),
    Role.VENDOR: (
        "For Vendors: I can accelerate your deals, expand your network, and optimize your performance. "
        "What would you like to work on?"
    ),
}

ERROR_TOPICS: dict[Role, str] = {
    Role.BORROWER: "loan applications, credit checks, or rate comparisons",
    Role.VENDOR: "deal acceleration, pipeline analysis, or performance metrics",
}


def _template_role(role: str | Role | None) -> Role | None:
    """Only borrower and vendor have dedicated templates; everything else is generic."""
    known = Role.from_value(role)
    if known in INTENT_RULES:
        return known
    return None


class ResponseComposer:
    """Build structured replies from static per-role templates.

    Every method is pure: identical arguments give identical output, nothing
    blocks, and unknown roles or intents fall through to a generic template.
    """

    def compose(
        self,
        role: str | Role | None,
        message: str,
        transaction: Context = None,
        detected_tools: Iterable[str] = (),
    ) -> ResponsePayload:
        return TEMPLATES[self.classify(role, message)]

    def classify(self, role: str | Role | None, message: str) -> Template:
        template_role = _template_role(role)
        if template_role is None:
            return Template.GENERIC

        rules, fallback = INTENT_RULES[template_role]
        lowered = message.lower()
        for keywords, template in rules:
            if any(keyword in lowered for keyword in keywords):
                return template
        return fallback

    def render(
        self,
        role: str | Role | None,
        payload: ResponsePayload,
        tools: Iterable[ToolDefinition] = (),
    ) -> str:
        """Display text for a payload using the bullet and numbered-step convention."""

        sections = [payload.message]
        tools = list(tools)
        if tools:
            tool_lines = [AVAILABLE_TOOLS_HEADER]
            tool_lines.extend(f"• {tool.name}: {tool.description} ({tool.estimated_time})" for tool in tools)
            sections.append("\n".join(tool_lines))

            step_lines = [NEXT_STEPS_HEADER]
            step_lines.extend(
                f"{index}. {step.title} - {step.description}" for index, step in enumerate(payload.next_steps, 1)
            )
            sections.append("\n".join(step_lines))

        footer = ROLE_FOOTERS.get(_template_role(role))
        if footer:
            sections.append(footer)
        return "\n\n".join(sections)

    def welcome(self, role: str | Role | None, transaction: Context = None, customer: Context = None) -> str:
        template_role = _template_role(role)
        kind = transaction_type(transaction, default="application" if template_role is Role.BORROWER else "transaction")
        if template_role is Role.BORROWER:
            greeting = (
                f"Welcome! I'm EVA, your AI lending assistant. I see you have an active {kind}. I'm here to help "
                "you get fast loan approvals and find the best lenders for your needs. My goal is to get you either "
                "approved or a clear decline decision as quickly as possible."
            )
        elif template_role is Role.VENDOR:
            greeting = (
                f"Welcome! I'm EVA, your AI deal acceleration assistant. I see you have a {kind} in progress. I'm "
                "here to help you close this deal faster and optimize your funding pipeline for maximum success."
            )
        else:
            greeting = (
                f"I can see you're working on a {kind}. Let me help you with context-aware insights and "
                "recommendations."
            )

        if transaction is not None and template_role is not None:
            greeting = f"{greeting}\n\n{self.transaction_insights(template_role, transaction)}"
        return f"{greeting}\n\n{describe_transaction(transaction)}\n{describe_customer(customer)}"

    def transaction_insights(self, role: str | Role | None, transaction: Context) -> str:
        template_role = _template_role(role)
        kind = transaction_type(transaction)
        if template_role is Role.BORROWER:
            level = risk_level(transaction)
            amount = format_amount(requested_amount(transaction))
            return (
                f"Based on your {kind} for {amount}, I see a {level} risk profile. I can help you get approved by "
                f"matching you with lenders who specialize in {kind} and work with {level} risk borrowers."
            )
        if template_role is Role.VENDOR:
            return (
                f"This {kind} is {completion_percent(transaction)}% complete. I can help accelerate the remaining "
                "tasks and connect with lenders who have fast turnaround times for this deal type."
            )
        return f"I can help optimize this {kind} transaction for faster processing and better outcomes."

    def error_message(self, role: str | Role | None) -> str:
        label = str(role).strip() if role else "user"
        topics = ERROR_TOPICS.get(_template_role(role), "available services")
        return (
            f"I apologize, but I encountered an error processing your request. As a {label}, you can try asking "
            f"about {topics}. Please try again."
        )
