"""Brutal tests for the rule matcher and page templates."""

from __future__ import annotations

import re
from datetime import date

import pytest

from confluence_gpt.models.intent import IntentKind, IntentSource
from confluence_gpt.parser.page_templates import (
    GENERIC_TEMPLATE,
    MEETING_TEMPLATE,
    RETRO_TEMPLATE,
    STATUS_TEMPLATE,
    generate_content,
)
from confluence_gpt.parser.prompt_templates import HELP_TEXT, UNKNOWN_TEXT
from confluence_gpt.parser.rule_matcher import (
    DEFAULT_RULES,
    RuleMatcher,
    _build_create,
    normalize_title,
)


@pytest.fixture
def matcher():
    return RuleMatcher()


class TestNormalizeTitle:
    def test_strips_leading_article(self):
        assert normalize_title("the roadmap") == "Roadmap"
        assert normalize_title("an overview") == "Overview"

    def test_capitalizes_each_word(self):
        assert normalize_title("project roadmap") == "Project Roadmap"

    def test_keeps_inner_capitals(self):
        assert normalize_title("q3 OKRs") == "Q3 OKRs"

    def test_article_inside_title_kept(self):
        assert normalize_title("state of the union") == "State Of The Union"


class TestGenerateContent:
    def test_meeting_keyword(self):
        content = generate_content("Weekly Team MEETING")
        assert content == MEETING_TEMPLATE
        for section in ("Attendees", "Agenda", "Notes", "Action Items"):
            assert section in content

    def test_retro_keyword(self):
        content = generate_content("Sprint Retro")
        assert content == RETRO_TEMPLATE
        assert "What Went Well" in content
        assert "What Could Improve" in content

    def test_status_keyword(self):
        assert generate_content("Status Report") == STATUS_TEMPLATE
        assert generate_content("Weekly Update") == STATUS_TEMPLATE

    def test_meeting_wins_over_status(self):
        assert generate_content("Weekly Meeting") == MEETING_TEMPLATE

    def test_generic_template(self):
        content = generate_content("Roadmap")
        assert content == GENERIC_TEMPLATE.format(title="Roadmap")
        assert content.count("<") == 4

    def test_generic_title_escaped(self):
        assert "<h2>R&amp;D &lt;plan&gt;</h2>" in generate_content("R&D <plan>")


class TestRulePriority:
    def test_rules_in_fixed_order(self):
        kinds = [rule.kind for rule in DEFAULT_RULES]
        assert kinds == [
            IntentKind.HELP,
            IntentKind.LIST_SPACES,
            IntentKind.CREATE,
            IntentKind.SEARCH,
        ]

    def test_spaces_beats_create(self, matcher):
        intent = matcher.match("list spaces then create a page called Plans")
        assert intent.kind == IntentKind.LIST_SPACES

    def test_help_beats_everything(self, matcher):
        intent = matcher.match("what can you do to create pages about spaces")
        assert intent.kind == IntentKind.HELP

    def test_create_beats_search(self, matcher):
        intent = matcher.match("create a page about search")
        assert intent.kind == IntentKind.CREATE

    def test_custom_rule_order(self):
        reordered = RuleMatcher(rules=(DEFAULT_RULES[2], DEFAULT_RULES[1]))
        intent = reordered.match("create a page listing available spaces")
        assert intent.kind == IntentKind.CREATE


class TestHelpAndSpaces:
    @pytest.mark.parametrize("message", ["help", "HELP", "What can you do?", "how do I use this"])
    def test_help(self, matcher, message):
        intent = matcher.match(message)
        assert intent.kind == IntentKind.HELP
        assert intent.answer == HELP_TEXT
        assert intent.confidence == 0.9

    def test_help_must_be_whole_message(self, matcher):
        assert matcher.match("I need help").kind != IntentKind.HELP

    @pytest.mark.parametrize(
        "message", ["list spaces", "show all spaces", "which spaces exist", "available spaces?"]
    )
    def test_spaces(self, matcher, message):
        intent = matcher.match(message)
        assert intent.kind == IntentKind.LIST_SPACES
        assert intent.confidence == 0.9


class TestCreate:
    def test_called_title_normalized(self, matcher):
        intent = matcher.match("create a page called project roadmap")
        assert intent.kind == IntentKind.CREATE
        assert intent.title == "Project Roadmap"
        assert intent.confidence == 0.8
        assert intent.source == IntentSource.RULES

    def test_quoted_title(self, matcher):
        intent = matcher.match('create a page titled "release checklist"')
        assert intent.title == "Release Checklist"

    def test_meeting_notes_page(self, matcher):
        intent = matcher.match("create a meeting notes page")
        assert intent.title == "Meeting Notes"
        assert intent.content == MEETING_TEMPLATE

    def test_retro_content(self, matcher):
        intent = matcher.match("create a new sprint retro page")
        assert intent.kind == IntentKind.CREATE
        assert "What Went Well" in intent.content

    def test_generic_content(self, matcher):
        intent = matcher.match("create a page called onboarding guide")
        assert intent.content == GENERIC_TEMPLATE.format(title="Onboarding Guide")

    def test_new_page_phrase(self, matcher):
        intent = matcher.match("new page called Vendor List")
        assert intent.kind == IntentKind.CREATE
        assert intent.title == "Vendor List"

    def test_make_phrase(self, matcher):
        intent = matcher.match("make a page called team charter")
        assert intent.kind == IntentKind.CREATE
        assert intent.title == "Team Charter"

    def test_surrounding_whitespace_trimmed(self, matcher):
        assert matcher.match("   create a page called Budget   ").title == "Budget"

    @pytest.mark.parametrize("message", ["create page ab", "create a page called this", "create a page called x"])
    def test_vague_title_replaced(self, matcher, message):
        intent = matcher.match(message)
        assert intent.kind == IntentKind.CREATE
        assert intent.title == f"Imported Document - {date.today().isoformat()}"
        assert intent.content.startswith("<h2>Imported Document")

    def test_fallback_title_format(self):
        match = re.match(r"()", "")
        intent = _build_create(match)
        assert intent.title == f"New Page - {date.today().isoformat()}"
        assert intent.content.startswith("<h2>")


class TestSearch:
    def test_find_pages_about(self, matcher):
        intent = matcher.match("find pages about authentication")
        assert intent.kind == IntentKind.SEARCH
        assert intent.query == "authentication"
        assert intent.confidence == 0.8

    def test_search_quoted(self, matcher):
        assert matcher.match('search "budget 2024"').query == "budget 2024"

    def test_look_for(self, matcher):
        assert matcher.match("look for onboarding").query == "onboarding"

    def test_where_is(self, matcher):
        intent = matcher.match("where is the deployment guide")
        assert intent.kind == IntentKind.SEARCH
        assert intent.query == "deployment guide"

    def test_bare_about(self, matcher):
        assert matcher.match("pages about security").query == "security"


class TestUnknown:
    @pytest.mark.parametrize("message", ["", "   ", "tell me a joke", "hello there"])
    def test_unmatched(self, matcher, message):
        intent = matcher.match(message)
        assert intent.kind == IntentKind.UNKNOWN
        assert intent.answer == UNKNOWN_TEXT
        assert intent.confidence == 0.3

    def test_none_message(self, matcher):
        assert matcher.match(None).kind == IntentKind.UNKNOWN


class TestDeterminism:
    @pytest.mark.parametrize(
        "message",
        [
            "create a page called project roadmap",
            "find pages about auth",
            "list spaces",
            "help",
            "gibberish words",
        ],
    )
    def test_same_input_same_output(self, matcher, message):
        assert matcher.match(message) == matcher.match(message)
        assert RuleMatcher().match(message) == matcher.match(message)
