"""Dashboard analytics API."""

from __future__ import annotations

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from confluence_gpt.analytics.dashboard import DashboardService
from confluence_gpt.api.dependencies import ConfluenceDep

router = APIRouter()


@router.get("/analytics")
async def analytics(
    client: ConfluenceDep,
    kind: str = Query("overview", alias="type"),
    page_id: str | None = None,
):
    service = DashboardService(client)
    if kind == "overview":
        return await service.overview()
    if kind == "page-content":
        if not page_id:
            return JSONResponse({"error": "page_id required"}, status_code=400)
        return await service.page_content(page_id)
    return JSONResponse({"error": "Invalid type"}, status_code=400)
