"""Tests for dependency wiring."""

from __future__ import annotations

import pytest

from confluence_gpt.config.settings import AIConfig, ConfluenceCredentials
from confluence_gpt.confluence.client import ConfluenceClient
from confluence_gpt.main import (
    build_confluence_client,
    build_pipeline,
    build_resolver,
    build_store,
)
from confluence_gpt.parser.intent_parser import IntentResolver
from confluence_gpt.pipeline import ChatPipeline
from confluence_gpt.storage.store import AppStore


def test_build_resolver(mock_settings):
    assert isinstance(build_resolver(mock_settings), IntentResolver)


def test_build_store(mock_settings):
    store = build_store(mock_settings)
    assert isinstance(store, AppStore)
    assert store.db_path == str(mock_settings.db_path)


def test_build_pipeline_uses_overrides(mock_settings):
    store = AppStore()
    pipeline = build_pipeline(mock_settings, store=store, ai_config=AIConfig(model="m-2"))
    assert isinstance(pipeline, ChatPipeline)
    assert pipeline.store is store
    assert pipeline.resolver._delegate.config.model == "m-2"


@pytest.mark.asyncio
async def test_build_confluence_client(mock_settings):
    client = build_confluence_client(mock_settings)
    assert isinstance(client, ConfluenceClient)
    assert client.domain == "acme.atlassian.net"
    await client.close()


@pytest.mark.asyncio
async def test_explicit_credentials_win(mock_settings):
    client = build_confluence_client(
        mock_settings,
        ConfluenceCredentials(domain="https://other.atlassian.net/", email="e", api_token="t"),
    )
    assert client.domain == "other.atlassian.net"
    await client.close()
