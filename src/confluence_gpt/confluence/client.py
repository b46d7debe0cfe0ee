"""Async Confluence Cloud REST client returning simplified shapes."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from confluence_gpt.config.settings import ConfluenceCredentials
from confluence_gpt.confluence.cql import build_search_cql
from confluence_gpt.exceptions import ConfluenceCredentialsError, ConfluenceError
from confluence_gpt.models.confluence import (
    CreatedPage,
    PageDetail,
    PageSummary,
    PageView,
    Space,
    UpdatedPage,
)


def normalize_domain(domain: str) -> str:
    domain = domain.strip()
    for prefix in ("https://", "http://"):
        if domain.lower().startswith(prefix):
            domain = domain[len(prefix):]
    return domain.rstrip("/")


def _error_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error"):
            if isinstance(payload.get(key), str):
                return payload[key]
    return fallback


class ConfluenceClient:
    def __init__(
        self,
        credentials: ConfluenceCredentials,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        if not credentials.is_complete:
            raise ConfluenceCredentialsError()
        self.domain = normalize_domain(credentials.domain)
        self._http = httpx.AsyncClient(
            base_url=f"https://{self.domain}/wiki",
            auth=(credentials.email, credentials.api_token),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> ConfluenceClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    def web_link(self, webui: str | None, page_id: str | None = None) -> str:
        if not webui:
            webui = f"/pages/{page_id}" if page_id else ""
        return f"https://{self.domain}/wiki{webui}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ConfluenceError(f"Could not reach Confluence: {exc}") from exc

        if response.status_code == 204 or not response.content:
            payload: Any = None
        else:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text

        if response.is_error:
            logger.warning("Confluence {} {} -> {}", method, path, response.status_code)
            raise ConfluenceError(
                _error_message(payload, f"Confluence returned {response.status_code}"),
                status_code=response.status_code,
                detail=payload,
            )
        return payload

    # ── raw endpoints ──

    async def fetch_spaces(self, limit: int = 25, expand: str | None = None) -> list[dict]:
        params: dict[str, Any] = {"limit": limit}
        if expand:
            params["expand"] = expand
        data = await self._request("GET", "/rest/api/space", params=params)
        return list((data or {}).get("results", []))

    async def search_content(
        self, cql: str, limit: int = 50, expand: str | None = None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"cql": cql, "limit": limit}
        if expand:
            params["expand"] = expand
        return await self._request("GET", "/rest/api/content/search", params=params) or {}

    async def space_page_count(self, space_key: str) -> int:
        data = await self._request(
            "GET", f"/rest/api/space/{space_key}/content/page", params={"limit": 0}
        )
        return int((data or {}).get("size") or 0)

    # ── simplified operations ──

    async def list_spaces(self) -> list[Space]:
        return [
            Space(key=s["key"], name=s.get("name", s["key"]), id=s.get("id"))
            for s in await self.fetch_spaces()
        ]

    async def search_pages(
        self, query: str | None = None, space_key: str | None = None, limit: int = 50
    ) -> list[PageSummary]:
        cql = build_search_cql(query, space_key)
        logger.debug("CQL search: {}", cql)
        data = await self._request(
            "GET",
            "/rest/api/content/search",
            params={"cql": cql, "expand": "version,space", "limit": limit},
        )
        return [
            PageSummary(
                id=str(p["id"]),
                title=p.get("title", ""),
                space=(p.get("space") or {}).get("key"),
                version=(p.get("version") or {}).get("number"),
                link=self.web_link((p.get("_links") or {}).get("webui"), str(p["id"])),
            )
            for p in (data or {}).get("results", [])
        ]

    async def create_page(self, title: str, space_key: str, content: str) -> CreatedPage:
        data = await self._request(
            "POST",
            "/rest/api/content",
            json={
                "title": title,
                "type": "page",
                "space": {"key": space_key},
                "body": {"storage": {"value": content, "representation": "storage"}},
            },
        )
        logger.info("Created page {!r} in space {}", data.get("title"), space_key)
        return CreatedPage(
            id=str(data["id"]),
            title=data.get("title", title),
            link=self.web_link((data.get("_links") or {}).get("webui"), str(data["id"])),
        )

    async def get_page(self, page_id: str) -> PageDetail:
        data = await self._request(
            "GET", f"/rest/api/content/{page_id}", params={"expand": "body.storage,version"}
        )
        return PageDetail(
            id=str(data["id"]),
            title=data.get("title", ""),
            content=((data.get("body") or {}).get("storage") or {}).get("value", ""),
            version=(data.get("version") or {}).get("number"),
        )

    async def update_page(self, page_id: str, title: str, content: str) -> UpdatedPage:
        current = await self._request("GET", f"/rest/api/content/{page_id}")
        next_version = int(current["version"]["number"]) + 1

        data = await self._request(
            "PUT",
            f"/rest/api/content/{page_id}",
            json={
                "id": page_id,
                "type": "page",
                "title": title,
                "version": {"number": next_version},
                "body": {"storage": {"value": content, "representation": "storage"}},
            },
        )
        return UpdatedPage(
            id=str(data["id"]),
            title=data.get("title", title),
            version=next_version,
            link=self.web_link((data.get("_links") or {}).get("webui"), str(data["id"])),
        )

    async def delete_page(self, page_id: str) -> None:
        await self._request("DELETE", f"/rest/api/content/{page_id}")

    async def get_page_view(self, page_id: str) -> PageView:
        page = await self._request(
            "GET",
            f"/rest/api/content/{page_id}",
            params={"expand": "body.view,version,space,history.lastUpdated"},
        )
        version = page.get("version") or {}
        last_updated = (page.get("history") or {}).get("lastUpdated") or {}
        return PageView(
            id=str(page["id"]),
            title=page.get("title", ""),
            space=(page.get("space") or {}).get("key"),
            space_name=(page.get("space") or {}).get("name"),
            content=((page.get("body") or {}).get("view") or {}).get("value") or "<p>No content</p>",
            version=version.get("number"),
            last_updated=last_updated.get("when") or version.get("when"),
            last_updated_by=(
                (last_updated.get("by") or {}).get("displayName")
                or (version.get("by") or {}).get("displayName")
            ),
            link=self.web_link((page.get("_links") or {}).get("webui"), str(page["id"])),
        )
