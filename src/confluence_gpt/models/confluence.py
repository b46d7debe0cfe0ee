"""Simplified Confluence shapes returned to callers."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Space(BaseModel):
    key: str
    name: str
    id: int | str | None = None


class PageSummary(BaseModel):
    id: str
    title: str
    space: str | None = None
    version: int | None = None
    link: str = ""


class CreatedPage(BaseModel):
    id: str
    title: str
    link: str = ""


class UpdatedPage(BaseModel):
    id: str
    title: str
    version: int
    link: str = ""


class PageDetail(BaseModel):
    id: str
    title: str
    content: str = ""
    version: int | None = None


class PageView(BaseModel):
    id: str
    title: str
    space: str | None = None
    space_name: str | None = None
    content: str = "<p>No content</p>"
    version: int | None = None
    last_updated: str | None = None
    last_updated_by: str | None = None
    link: str = ""


class SpaceStats(BaseModel):
    key: str
    name: str
    id: int | str | None = None
    type: str | None = None
    page_count: int = 0
    recent_activity: int = 0
    link: str = ""


class RecentPage(BaseModel):
    id: str
    title: str
    space: str | None = None
    space_name: str | None = None
    version: int = 1
    last_updated: str
    last_updated_by: str = "Unknown"
    link: str = ""


class ActivityPoint(BaseModel):
    date: str
    updates: int = 0


class SpaceShare(BaseModel):
    name: str
    value: int
    key: str


class OverviewTotals(BaseModel):
    total_spaces: int = 0
    total_pages: int = 0
    active_this_week: int = 0
    contributors: int = 0


class DashboardOverview(BaseModel):
    overview: OverviewTotals = Field(default_factory=OverviewTotals)
    spaces: list[SpaceStats] = Field(default_factory=list)
    recent_pages: list[RecentPage] = Field(default_factory=list)
    activity_timeline: list[ActivityPoint] = Field(default_factory=list)
    pages_by_space: list[SpaceShare] = Field(default_factory=list)
