"""Rule-based intent classification used when AI is unavailable."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Callable

from confluence_gpt.models.intent import IntentKind, IntentSource, ParsedIntent
from confluence_gpt.parser.page_templates import fallback_title, generate_content, is_vague_title
from confluence_gpt.parser.prompt_templates import HELP_TEXT, UNKNOWN_TEXT

HELP_PATTERNS = (
    re.compile(r"^help$", re.I),
    re.compile(r"what\s+can\s+you\s+do", re.I),
    re.compile(r"how\s+(?:do\s+i|to)\s+use", re.I),
)

SPACES_PATTERNS = (
    re.compile(r"(?:list|show|get)\s+(?:all\s+)?spaces", re.I),
    re.compile(r"(?:what|which)\s+spaces", re.I),
    re.compile(r"available\s+spaces", re.I),
)

CREATE_PATTERNS = (
    re.compile(
        r"create\s+(?:a\s+)?(?:new\s+)?(?:page\s+)?(?:called\s+|titled\s+|named\s+)?"
        r"[\"']?([^\"'\n]+?)[\"']?(?:\s+page)?$",
        re.I,
    ),
    re.compile(r"create\s+(?:a\s+)?(?:new\s+)?(.+?)\s+(?:page|notes|doc)", re.I),
    re.compile(r"new\s+page\s+(?:called\s+|titled\s+)?[\"']?([^\"'\n]+?)[\"']?$", re.I),
    re.compile(
        r"make\s+(?:a\s+)?(?:page\s+)?(?:called\s+)?[\"']?([^\"'\n]+?)[\"']?(?:\s+page)?$",
        re.I,
    ),
)

SEARCH_PATTERNS = (
    re.compile(
        r"(?:find|search|look\s+for)\s+(?:pages?\s+)?(?:about\s+|mentioning\s+|with\s+)?"
        r"[\"']?([^\"'\n]+?)[\"']?$",
        re.I,
    ),
    re.compile(r"(?:pages?\s+)?about\s+[\"']?([^\"'\n]+?)[\"']?$", re.I),
    re.compile(r"where\s+(?:is|are)\s+(?:the\s+)?[\"']?([^\"'\n]+?)[\"']?$", re.I),
)

_LEADING_ARTICLE = re.compile(r"^(?:a|an|the)\s+", re.I)


def normalize_title(raw: str) -> str:
    title = _LEADING_ARTICLE.sub("", raw.strip())
    return " ".join(w[:1].upper() + w[1:] for w in title.split(" "))


def _build_help(match: re.Match[str]) -> ParsedIntent:
    return ParsedIntent(kind=IntentKind.HELP, answer=HELP_TEXT, confidence=0.9)


def _build_spaces(match: re.Match[str]) -> ParsedIntent:
    return ParsedIntent(kind=IntentKind.LIST_SPACES, confidence=0.9)


def _build_create(match: re.Match[str]) -> ParsedIntent:
    title = normalize_title(match.group(1) or "")
    if title and is_vague_title(title):
        title = fallback_title()
    return ParsedIntent(
        kind=IntentKind.CREATE,
        title=title or f"New Page - {date.today().isoformat()}",
        content=generate_content(title or "New Page"),
        confidence=0.8,
    )


def _build_search(match: re.Match[str]) -> ParsedIntent:
    return ParsedIntent(
        kind=IntentKind.SEARCH,
        query=(match.group(1) or "").strip(),
        confidence=0.8,
    )


@dataclass(frozen=True)
class IntentRule:
    kind: IntentKind
    patterns: tuple[re.Pattern[str], ...]
    build: Callable[[re.Match[str]], ParsedIntent]

    def apply(self, message: str) -> ParsedIntent | None:
        for pattern in self.patterns:
            match = pattern.search(message)
            if match:
                return self.build(match)
        return None


# Priority order: earlier rules pre-empt later ones.
DEFAULT_RULES: tuple[IntentRule, ...] = (
    IntentRule(IntentKind.HELP, HELP_PATTERNS, _build_help),
    IntentRule(IntentKind.LIST_SPACES, SPACES_PATTERNS, _build_spaces),
    IntentRule(IntentKind.CREATE, CREATE_PATTERNS, _build_create),
    IntentRule(IntentKind.SEARCH, SEARCH_PATTERNS, _build_search),
)


class RuleMatcher:
    def __init__(self, rules: tuple[IntentRule, ...] = DEFAULT_RULES) -> None:
        self._rules = rules

    @property
    def rules(self) -> tuple[IntentRule, ...]:
        return self._rules

    def match(self, message: str) -> ParsedIntent:
        normalized = (message or "").strip()
        for rule in self._rules:
            intent = rule.apply(normalized)
            if intent is not None:
                return intent
        return ParsedIntent(
            kind=IntentKind.UNKNOWN,
            answer=UNKNOWN_TEXT,
            confidence=0.3,
            source=IntentSource.RULES,
        )
