"""Confluence space and page proxy endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response
from pydantic import BaseModel

from confluence_gpt.api.dependencies import ConfluenceDep
from confluence_gpt.models.confluence import (
    CreatedPage,
    PageDetail,
    PageSummary,
    Space,
    UpdatedPage,
)

router = APIRouter()


class PageCreate(BaseModel):
    title: str
    space_key: str
    content: str = ""


class PageUpdate(BaseModel):
    title: str
    content: str = ""


@router.get("/spaces", response_model=list[Space])
async def list_spaces(client: ConfluenceDep) -> list[Space]:
    return await client.list_spaces()


@router.get("/pages", response_model=list[PageSummary])
async def search_pages(
    client: ConfluenceDep,
    query: str | None = None,
    title: str | None = None,
    space_key: str | None = None,
) -> list[PageSummary]:
    return await client.search_pages(query or title, space_key=space_key)


@router.post("/pages", response_model=CreatedPage)
async def create_page(body: PageCreate, client: ConfluenceDep) -> CreatedPage:
    return await client.create_page(body.title, body.space_key, body.content)


@router.get("/pages/{page_id}", response_model=PageDetail)
async def get_page(page_id: str, client: ConfluenceDep) -> PageDetail:
    return await client.get_page(page_id)


@router.put("/pages/{page_id}", response_model=UpdatedPage)
async def update_page(page_id: str, body: PageUpdate, client: ConfluenceDep) -> UpdatedPage:
    return await client.update_page(page_id, body.title, body.content)


@router.delete("/pages/{page_id}", status_code=204)
async def delete_page(page_id: str, client: ConfluenceDep) -> Response:
    await client.delete_page(page_id)
    return Response(status_code=204)
