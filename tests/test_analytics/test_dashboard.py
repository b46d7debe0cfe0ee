"""Tests for dashboard aggregation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from confluence_gpt.analytics.dashboard import DashboardService, summarize_overview
from confluence_gpt.exceptions import ConfluenceError

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def page(page_id, space, days_ago, author="Ann", webui=None):
    when = (NOW - timedelta(days=days_ago)).isoformat().replace("+00:00", "Z")
    data = {
        "id": page_id,
        "title": f"Page {page_id}",
        "space": {"key": space, "name": space.title()},
        "version": {"number": 2, "when": when},
        "history": {"lastUpdated": {"when": when, "by": {"displayName": author}}},
    }
    if webui:
        data["_links"] = {"webui": webui}
    return data


SPACES = [
    {"key": "ENG", "name": "Engineering", "id": 1, "type": "global"},
    {"key": "HR", "name": "People", "id": 2, "type": "global"},
    {"key": "EMPTY", "name": "Empty", "id": 3},
]

PAGES = [
    page("1", "ENG", 0, "Ann", webui="/spaces/ENG/pages/1"),
    page("2", "ENG", 2, "Bob"),
    page("3", "HR", 5, "Ann"),
    page("4", "HR", 10, "Cid"),
    page("5", "ENG", 30, "Dee"),
]


class TestSummarizeOverview:
    def test_totals(self):
        overview = summarize_overview(SPACES, PAGES, {"ENG": 40, "HR": 12}, 60, "acme.atlassian.net", now=NOW)
        assert overview.overview.total_spaces == 3
        assert overview.overview.total_pages == 52
        assert overview.overview.active_this_week == 3
        assert overview.overview.contributors == 4

    def test_total_falls_back_to_count_query(self):
        overview = summarize_overview(SPACES, PAGES, {}, 60, "acme.atlassian.net", now=NOW)
        assert overview.overview.total_pages == 60

    def test_space_stats(self):
        overview = summarize_overview(SPACES, PAGES, {"ENG": 40}, 60, "acme.atlassian.net", now=NOW)
        stats = {s.key: s for s in overview.spaces}
        assert stats["ENG"].page_count == 40
        assert stats["HR"].page_count == 2
        assert stats["EMPTY"].page_count == 0
        assert stats["ENG"].recent_activity == 2
        assert stats["HR"].recent_activity == 1
        assert stats["ENG"].link == "https://acme.atlassian.net/wiki/spaces/ENG"

    def test_recent_pages_and_links(self):
        overview = summarize_overview(SPACES, PAGES, {}, 5, "acme.atlassian.net", now=NOW)
        assert [p.id for p in overview.recent_pages] == ["1", "2", "3", "4", "5"]
        assert overview.recent_pages[0].link == "https://acme.atlassian.net/wiki/spaces/ENG/pages/1"
        assert overview.recent_pages[1].link == "https://acme.atlassian.net/wiki/pages/2"
        assert overview.recent_pages[1].last_updated_by == "Bob"

    def test_recent_pages_capped(self):
        many = [page(str(i), "ENG", 0) for i in range(30)]
        overview = summarize_overview(SPACES, many, {}, 30, "d", now=NOW)
        assert len(overview.recent_pages) == 20

    def test_timeline(self):
        overview = summarize_overview(SPACES, PAGES, {}, 5, "d", now=NOW)
        timeline = overview.activity_timeline
        assert len(timeline) == 14
        assert timeline == sorted(timeline, key=lambda p: p.date)
        counts = {p.date: p.updates for p in timeline}
        assert timeline[-1].date == "2024-06-15"
        assert timeline[0].date == "2024-06-02"
        assert counts["2024-06-15"] == 1
        assert counts["2024-06-13"] == 1
        assert counts["2024-06-10"] == 1
        assert counts["2024-06-05"] == 1
        assert sum(counts.values()) == 4

    def test_pages_by_space_sorted_and_nonzero(self):
        overview = summarize_overview(SPACES, PAGES, {"ENG": 3, "HR": 9}, 5, "d", now=NOW)
        assert [(s.key, s.value) for s in overview.pages_by_space] == [("HR", 9), ("ENG", 3)]

    def test_empty(self):
        overview = summarize_overview([], [], {}, 0, "d", now=NOW)
        assert overview.overview.total_pages == 0
        assert overview.recent_pages == []
        assert all(p.updates == 0 for p in overview.activity_timeline)


class TestDashboardService:
    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.domain = "acme.atlassian.net"
        client.fetch_spaces = AsyncMock(return_value=SPACES)
        client.search_content = AsyncMock(
            side_effect=[{"results": PAGES}, {"results": [], "totalSize": 75}]
        )
        client.space_page_count = AsyncMock(side_effect=[40, ConfluenceError("nope", 500), 0])
        client.get_page_view = AsyncMock(return_value="view")
        return client

    @pytest.mark.asyncio
    async def test_overview(self, client):
        overview = await DashboardService(client).overview(now=NOW)
        stats = {s.key: s.page_count for s in overview.spaces}
        assert stats == {"ENG": 40, "HR": 2, "EMPTY": 0}
        assert overview.overview.total_pages == 42
        client.fetch_spaces.assert_awaited_once_with(limit=100, expand="description.plain,homepage")
        first_cql = client.search_content.await_args_list[0].args[0]
        assert first_cql == "type=page ORDER BY lastmodified DESC"

    @pytest.mark.asyncio
    async def test_page_content(self, client):
        assert await DashboardService(client).page_content("7") == "view"
        client.get_page_view.assert_awaited_once_with("7")
