"""Heuristic tool detection for free-text messages."""

from __future__ import annotations

import re
import string

from loguru import logger

from eva.tools.catalog import ToolCatalog, build_tool_catalog
from eva.types import Role, ToolId

MAX_DETECTED_TOOLS = 3
MIN_TOKEN_LENGTH = 3
SEPARATOR_RE = re.compile(r"[-_.\s]+")
TOKEN_STRIP = string.punctuation + "“”‘’"
STOP_WORDS = frozenset(
    {
        "about",
        "and",
        "any",
        "are",
        "can",
        "could",
        "for",
        "from",
        "get",
        "have",
        "how",
        "the",
        "this",
        "that",
        "what",
        "which",
        "will",
        "with",
        "would",
        "you",
        "your",
    }
)

OverrideRule = tuple[frozenset[str], tuple[ToolId, ...]]

OVERRIDE_RULES: dict[Role, tuple[OverrideRule, ...]] = {
    Role.BORROWER: (
        (frozenset({"loan", "credit", "borrow", "funding"}), ("credit-check", "lender-match")),
        (frozenset({"rate", "interest", "terms", "better"}), ("rate-comparison",)),
        (frozenset({"fast", "quick", "urgent", "immediate"}), ("fast-decline-detection", "pre-approval-calculator")),
    ),
    Role.VENDOR: (
        (frozenset({"deals", "pipeline", "volume", "acceleration"}), ("pipeline-analysis", "deal-acceleration")),
        (frozenset({"performance", "analytics", "metrics", "insights"}), ("performance-analytics",)),
        (frozenset({"commission", "revenue", "profit", "earnings"}), ("commission-tracker",)),
        (frozenset({"network", "partners", "lenders", "expansion"}), ("vendor-network-expansion",)),
    ),
}


def tokenize(message: str) -> list[str]:
    """Lowercase, split on whitespace and strip surrounding punctuation."""

    tokens: list[str] = []
    for word in message.lower().split():
        token = word.strip(TOKEN_STRIP)
        if token:
            tokens.append(token)
    return tokens


def strip_separators(value: str) -> str:
    return SEPARATOR_RE.sub("", value.lower())


def override_additions(role: str | Role | None) -> tuple[ToolId, ...]:
    """All tool ids the role's override rules can add."""

    additions: list[ToolId] = []
    for _, tool_ids in OVERRIDE_RULES.get(Role.resolve(role), ()):
        additions.extend(tool_ids)
    return tuple(dict.fromkeys(additions))


class ToolDetector:
    """Pick the tools relevant to a message for a given role.

    Override rules are evaluated first and keyword matches follow in catalog
    declaration order, so the explicit rules survive the final truncation.
    """

    def __init__(
        self,
        catalog: ToolCatalog | None = None,
        *,
        max_tools: int = MAX_DETECTED_TOOLS,
        min_token_length: int = MIN_TOKEN_LENGTH,
    ) -> None:
        self._catalog = catalog or build_tool_catalog()
        self._max_tools = max_tools
        self._min_token_length = min_token_length

    def detect(self, message: str, role: str | Role | None) -> tuple[ToolId, ...]:
        tokens = tokenize(message)
        if not tokens:
            return ()

        resolved = Role.resolve(role)
        selected = [*self._override_matches(tokens, resolved), *self._keyword_matches(tokens, resolved)]
        detected = tuple(dict.fromkeys(selected))[: self._max_tools]
        logger.debug("detect.done role={} tokens={} tools={}", resolved.value, len(tokens), list(detected))
        return detected

    def _override_matches(self, tokens: list[str], role: Role) -> list[ToolId]:
        token_set = set(tokens)
        matches: list[ToolId] = []
        for trigger_words, tool_ids in OVERRIDE_RULES.get(role, ()):
            if token_set & trigger_words:
                matches.extend(tool_ids)
        return matches

    def _keyword_matches(self, tokens: list[str], role: Role) -> list[ToolId]:
        keyword_tokens = [
            token for token in tokens if len(token) >= self._min_token_length and token not in STOP_WORDS
        ]
        if not keyword_tokens:
            return []

        matches: list[ToolId] = []
        for tool_id in self._catalog.tools_for_role(role):
            definition = self._catalog.lookup(tool_id)
            if self._is_keyword_match(keyword_tokens, definition.keywords(), strip_separators(tool_id)):
                matches.append(tool_id)
        return matches

    @staticmethod
    def _is_keyword_match(tokens: list[str], keywords: str, compact_id: str) -> bool:
        for token in tokens:
            if token in keywords:
                return True
            compact_token = strip_separators(token)
            if not compact_token:
                continue
            if compact_token in compact_id or compact_id in compact_token:
                return True
        return False
