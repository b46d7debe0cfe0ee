"""FastAPI application factory with lifespan."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from confluence_gpt.api.errors import register_exception_handlers
from confluence_gpt.config.logging import configure_logging
from confluence_gpt.config.settings import Settings
from confluence_gpt.storage.store import AppStore


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: open the store. Shutdown: close it."""
    store: AppStore = app.state.store
    await store.initialize()
    yield
    await store.close()


def create_app(settings: Settings | None = None, store: AppStore | None = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Confluence GPT", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store or AppStore(db_path=settings.db_path)
    register_exception_handlers(app)

    # ── mount routers ──
    from confluence_gpt.api.routes import ai, analytics, auth, chat, confluence, upload

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(chat.router, prefix="/api/chat", tags=["chat"])
    app.include_router(ai.router, prefix="/api", tags=["ai"])
    app.include_router(confluence.router, prefix="/api", tags=["confluence"])
    app.include_router(analytics.router, prefix="/api", tags=["analytics"])
    app.include_router(upload.router, prefix="/api", tags=["upload"])

    return app
