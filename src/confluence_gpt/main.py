"""Entry point and dependency wiring."""

from __future__ import annotations

from confluence_gpt.cli.app import app
from confluence_gpt.config.settings import AIConfig, ConfluenceCredentials, Settings
from confluence_gpt.confluence.client import ConfluenceClient
from confluence_gpt.parser.ai_delegate import AIDelegate
from confluence_gpt.parser.intent_parser import IntentResolver
from confluence_gpt.pipeline import ChatPipeline
from confluence_gpt.storage.store import AppStore


def build_resolver(settings: Settings | None = None, ai_config: AIConfig | None = None) -> IntentResolver:
    settings = settings or Settings()
    return IntentResolver(delegate=AIDelegate(ai_config or settings.ai_config()))


def build_store(settings: Settings | None = None) -> AppStore:
    settings = settings or Settings()
    return AppStore(db_path=settings.db_path)


def build_pipeline(
    settings: Settings | None = None,
    store: AppStore | None = None,
    ai_config: AIConfig | None = None,
) -> ChatPipeline:
    settings = settings or Settings()
    return ChatPipeline(
        resolver=build_resolver(settings, ai_config),
        store=store,
        default_space=settings.default_space,
    )


def build_confluence_client(
    settings: Settings | None = None,
    credentials: ConfluenceCredentials | None = None,
) -> ConfluenceClient:
    settings = settings or Settings()
    return ConfluenceClient(credentials or settings.confluence_credentials())


if __name__ == "__main__":
    app()
