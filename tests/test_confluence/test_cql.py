"""Tests for CQL expression building."""

from __future__ import annotations

from confluence_gpt.confluence.cql import build_search_cql, escape_cql_value


class TestEscape:
    def test_quotes_and_backslashes(self):
        assert escape_cql_value('say "hi" \\ now') == 'say \\"hi\\" \\\\ now'

    def test_trims(self):
        assert escape_cql_value("  auth  ") == "auth"


class TestBuildSearchCql:
    def test_no_filters(self):
        assert build_search_cql() == "type=page order by score desc"

    def test_space_only(self):
        assert build_search_cql(space_key="ENG") == 'type=page AND space = "ENG" order by score desc'

    def test_single_word_query(self):
        assert build_search_cql("auth") == (
            'type=page AND (text ~ "\\"auth\\"" OR text ~ "auth" OR title ~ "\\"auth\\"" '
            'OR (title ~ "auth*") OR title ~ "auth") order by score desc'
        )

    def test_multi_word_query_and_space(self):
        cql = build_search_cql("release notes", "DOCS")
        assert cql.startswith('type=page AND space = "DOCS" AND (')
        assert '(title ~ "release*" AND title ~ "notes*")' in cql
        assert 'text ~ "release notes"' in cql
        assert cql.endswith(" order by score desc")

    def test_query_quotes_escaped(self):
        cql = build_search_cql('the "big" plan')
        assert 'text ~ "the \\"big\\" plan"' in cql
