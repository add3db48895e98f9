"""Read-only helpers over the ambient transaction and customer context.

Callers hand the engine whatever object their transaction provider returns:
a mapping from a JSON payload or an attribute-style record. Field names may
be snake_case or camelCase. Nothing here mutates the context.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from numbers import Number
from typing import Any

from .types import Context

NO_TRANSACTION = "📊 No transaction selected"
NO_CUSTOMER = "👤 No customer selected"
DEFAULT_RISK_PROFILE: dict[str, Any] = {"score": "Medium", "factors": ["Credit History"]}
LOW_RISK_SCORE = 700
MEDIUM_RISK_SCORE = 500


@dataclass(frozen=True)
class AmbientContext:
    """Transaction and customer currently selected by the caller."""

    transaction: Context = None
    customer: Context = None

    def resolved_customer(self) -> Context:
        if self.customer is not None:
            return self.customer
        return field_of(self.transaction, "customer")


def field_of(obj: Context, *keys: str, default: Any = None) -> Any:
    """Read the first present field from mapping-like or attribute-based objects."""

    if obj is None:
        return default
    for key in keys:
        if isinstance(obj, Mapping):
            value = obj.get(key)
        else:
            value = getattr(obj, key, None)
        if value is not None:
            return value
    return default


def transaction_type(transaction: Context, default: str = "transaction") -> str:
    value = field_of(transaction, "type", default=default)
    return str(value).replace("_", " ")


def requested_amount(transaction: Context) -> Any:
    return field_of(transaction, "requested_amount", "requestedAmount", "amount")


def format_amount(value: Any) -> str:
    if isinstance(value, Number) and not isinstance(value, bool):
        return f"${value:,.0f}"
    if value is None:
        return "requested amount"
    return str(value)


def risk_level(transaction: Context) -> str:
    summary = field_of(transaction, "financial_summary", "financialSummary")
    score = field_of(summary, "risk_score", "riskScore")
    if not score:
        return "medium"
    if score > LOW_RISK_SCORE:
        return "low"
    if score > MEDIUM_RISK_SCORE:
        return "medium"
    return "high"


def completion_percent(transaction: Context) -> int:
    completed = field_of(transaction, "completed_tasks", "completedTasks", default=0)
    total = field_of(transaction, "total_tasks", "totalTasks", default=0)
    if total <= 0:
        return 0
    return round(completed / total * 100)


def risk_profile(transaction: Context) -> Any:
    return field_of(transaction, "risk_profile", "riskProfile", default=DEFAULT_RISK_PROFILE)


def describe_transaction(transaction: Context) -> str:
    if transaction is None:
        return NO_TRANSACTION
    borrower = field_of(transaction, "borrower_name", "borrowerName", "customer_name", "customerName", default="Unknown")
    return f"📊 Transaction: {borrower} - {transaction_type(transaction)}"


def describe_customer(customer: Context) -> str:
    if customer is None:
        return NO_CUSTOMER
    return f"👤 Customer: {field_of(customer, 'name', default='Unknown')}"


def transaction_snapshot(transaction: Context) -> dict[str, Any]:
    if transaction is None:
        return {}
    return {
        "id": field_of(transaction, "id"),
        "type": field_of(transaction, "type"),
        "amount": requested_amount(transaction),
        "stage": field_of(transaction, "stage", "status"),
        "borrower_name": field_of(transaction, "borrower_name", "borrowerName", "customer_name", "customerName"),
    }


def customer_snapshot(customer: Context) -> dict[str, Any]:
    if customer is None:
        return {}
    return {
        "name": field_of(customer, "name"),
        "industry": field_of(customer, "industry"),
        "credit_score": field_of(customer, "credit_score", "creditScore"),
        "risk_level": field_of(customer, "risk_level", "riskLevel"),
        "kyc_status": field_of(customer, "kyc_status", "kycStatus"),
    }
