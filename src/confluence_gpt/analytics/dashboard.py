"""Dashboard aggregation over Confluence space and page metadata."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

from loguru import logger

from confluence_gpt.confluence.client import ConfluenceClient
from confluence_gpt.exceptions import ConfluenceError
from confluence_gpt.models.confluence import (
    ActivityPoint,
    DashboardOverview,
    OverviewTotals,
    PageView,
    RecentPage,
    SpaceShare,
    SpaceStats,
)

RECENT_PAGE_LIMIT = 20
TIMELINE_DAYS = 14
TOP_SPACES = 8
COUNTED_SPACES = 10

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _parse_when(value: str | None) -> datetime:
    if not value:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _last_updated(page: dict[str, Any]) -> str | None:
    history = page.get("history") or {}
    return (history.get("lastUpdated") or {}).get("when") or (page.get("version") or {}).get("when")


def _author(page: dict[str, Any]) -> str | None:
    history = page.get("history") or {}
    return (
        ((history.get("lastUpdated") or {}).get("by") or {}).get("displayName")
        or (history.get("createdBy") or {}).get("displayName")
        or ((page.get("version") or {}).get("by") or {}).get("displayName")
    )


def _page_link(domain: str, page: dict[str, Any]) -> str:
    webui = (page.get("_links") or {}).get("webui") or f"/pages/{page['id']}"
    return f"https://{domain}/wiki{webui}"


def summarize_overview(
    spaces: list[dict[str, Any]],
    pages: list[dict[str, Any]],
    space_page_counts: dict[str, int],
    total_page_count: int,
    domain: str,
    now: datetime | None = None,
) -> DashboardOverview:
    """Group and count raw Confluence metadata into the dashboard payload.

    ``pages`` is expected newest first. Per-space counts prefer the
    dedicated count query and fall back to the pages seen in ``pages``.
    """
    now = now or datetime.now(timezone.utc)
    week_ago = now - timedelta(days=7)
    window_start = now - timedelta(days=TIMELINE_DAYS)

    seen_counts: dict[str, int] = {}
    recent_activity: dict[str, int] = {}
    contributors: set[str] = set()

    for page in pages:
        space_key = (page.get("space") or {}).get("key")
        if not space_key:
            continue
        seen_counts[space_key] = seen_counts.get(space_key, 0) + 1
        author = _author(page)
        if author:
            contributors.add(author)
        if _parse_when(_last_updated(page)) > week_ago:
            recent_activity[space_key] = recent_activity.get(space_key, 0) + 1

    space_stats = [
        SpaceStats(
            key=s["key"],
            name=s.get("name", s["key"]),
            id=s.get("id"),
            type=s.get("type"),
            page_count=space_page_counts.get(s["key"]) or seen_counts.get(s["key"], 0),
            recent_activity=recent_activity.get(s["key"], 0),
            link=f"https://{domain}/wiki/spaces/{s['key']}",
        )
        for s in spaces
    ]

    recent_pages = [
        RecentPage(
            id=str(p["id"]),
            title=p.get("title", ""),
            space=(p.get("space") or {}).get("key"),
            space_name=(p.get("space") or {}).get("name"),
            version=(p.get("version") or {}).get("number") or 1,
            last_updated=_last_updated(p) or now.isoformat(),
            last_updated_by=_author(p) or "Unknown",
            link=_page_link(domain, p),
        )
        for p in pages[:RECENT_PAGE_LIMIT]
    ]

    # Fourteen daily buckets ending today.
    buckets = {
        (now - timedelta(days=TIMELINE_DAYS - 1 - i)).date().isoformat(): 0
        for i in range(TIMELINE_DAYS)
    }
    for page in pages:
        updated = _parse_when(_last_updated(page))
        if window_start < updated <= now:
            key = updated.date().isoformat()
            if key in buckets:
                buckets[key] += 1
    timeline = [ActivityPoint(date=d, updates=n) for d, n in sorted(buckets.items())]

    active_this_week = sum(1 for p in pages if _parse_when(_last_updated(p)) > week_ago)

    pages_by_space = [
        SpaceShare(name=s.name, value=s.page_count, key=s.key)
        for s in sorted(
            (s for s in space_stats if s.page_count > 0),
            key=lambda s: s.page_count,
            reverse=True,
        )[:TOP_SPACES]
    ]

    return DashboardOverview(
        overview=OverviewTotals(
            total_spaces=len(spaces),
            total_pages=sum(space_page_counts.values()) or total_page_count,
            active_this_week=active_this_week,
            contributors=len(contributors),
        ),
        spaces=space_stats,
        recent_pages=recent_pages,
        activity_timeline=timeline,
        pages_by_space=pages_by_space,
    )


class DashboardService:
    def __init__(self, client: ConfluenceClient) -> None:
        self._client = client

    async def _count_space(self, space_key: str, seen: int) -> int:
        try:
            return await self._client.space_page_count(space_key) or seen
        except ConfluenceError as exc:
            logger.warning("Page count for space {} failed: {}", space_key, exc)
            return seen

    async def overview(self, now: datetime | None = None) -> DashboardOverview:
        spaces = await self._client.fetch_spaces(limit=100, expand="description.plain,homepage")
        pages_data = await self._client.search_content(
            "type=page ORDER BY lastmodified DESC",
            limit=100,
            expand="version,space,history.lastUpdated,history.createdBy",
        )
        pages = list(pages_data.get("results", []))
        count_data = await self._client.search_content("type=page", limit=0)
        total_page_count = int(count_data.get("totalSize") or len(pages))

        seen: dict[str, int] = {}
        for page in pages:
            key = (page.get("space") or {}).get("key")
            if key:
                seen[key] = seen.get(key, 0) + 1

        counted = spaces[:COUNTED_SPACES]
        counts = await asyncio.gather(
            *(self._count_space(s["key"], seen.get(s["key"], 0)) for s in counted)
        )
        space_page_counts = {s["key"]: n for s, n in zip(counted, counts)}

        return summarize_overview(
            spaces, pages, space_page_counts, total_page_count, self._client.domain, now=now
        )

    async def page_content(self, page_id: str) -> PageView:
        return await self._client.get_page_view(page_id)
