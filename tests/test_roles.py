from eva.roles import (
    BORROWER_GOALS,
    BORROWER_PROMPTS,
    DEFAULT_PROMPTS,
    VENDOR_GOALS,
    VENDOR_PROMPTS,
    RoleProfileProvider,
)
from eva.types import Role


def test_borrower_profile() -> None:
    provider = RoleProfileProvider()
    profile = provider.profile("borrower")
    assert profile.role is Role.BORROWER
    assert profile.tool_ids == provider.catalog.tools_for_role("borrower")
    assert profile.goals == BORROWER_GOALS
    assert profile.prompts == BORROWER_PROMPTS
    assert [goal.id for goal in profile.goals] == ["fast-approval", "lender-matching", "rate-optimization"]


def test_vendor_profile() -> None:
    provider = RoleProfileProvider()
    assert provider.goals_for_role("vendor") == VENDOR_GOALS
    assert provider.prompts_for_role("VENDOR") == VENDOR_PROMPTS
    assert provider.tools_for_role("vendor")[0] == "pipeline-analysis"


def test_unknown_role_uses_borrower_tools_and_default_prompts() -> None:
    provider = RoleProfileProvider()
    profile = provider.profile("auditor")
    assert profile.role is Role.BORROWER
    assert profile.tool_ids == provider.tools_for_role("borrower")
    assert profile.goals == BORROWER_GOALS
    assert profile.prompts == DEFAULT_PROMPTS


def test_operator_roles_get_combined_goals() -> None:
    provider = RoleProfileProvider()
    for role in ("lender", "admin", "developer"):
        assert provider.goals_for_role(role) == BORROWER_GOALS + VENDOR_GOALS
        assert provider.prompts_for_role(role) == DEFAULT_PROMPTS
