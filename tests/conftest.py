"""Shared fixtures and mocks for all tests."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest
import pytest_asyncio

from confluence_gpt.config.settings import AIConfig, ConfluenceCredentials, Settings
from confluence_gpt.models.intent import UploadedDocument
from confluence_gpt.parser.ai_delegate import AIDelegate
from confluence_gpt.storage.store import AppStore

AI_URL = "https://api.deepseek.com/chat/completions"

_ENV_KEYS = (
    "AI_API_KEY",
    "AI_BASE_URL",
    "AI_MODEL",
    "CONFLUENCE_DOMAIN",
    "CONFLUENCE_EMAIL",
    "CONFLUENCE_API_TOKEN",
    "DEFAULT_SPACE",
    "DB_PATH",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(f"CONFLUENCE_GPT_{key}", raising=False)
    return monkeypatch


@pytest.fixture
def mock_settings(clean_env, tmp_path):
    clean_env.setenv("CONFLUENCE_GPT_AI_API_KEY", "sk-test-key-fake")
    clean_env.setenv("CONFLUENCE_GPT_CONFLUENCE_DOMAIN", "acme.atlassian.net")
    clean_env.setenv("CONFLUENCE_GPT_CONFLUENCE_EMAIL", "bot@acme.io")
    clean_env.setenv("CONFLUENCE_GPT_CONFLUENCE_API_TOKEN", "atl-token-123456")
    clean_env.setenv("CONFLUENCE_GPT_DB_PATH", str(tmp_path / "app.db"))
    clean_env.setenv("CONFLUENCE_GPT_LOG_LEVEL", "DEBUG")
    return Settings()


@pytest.fixture
def credentials():
    return ConfluenceCredentials(
        domain="acme.atlassian.net", email="bot@acme.io", api_token="atl-token-123456"
    )


@pytest_asyncio.fixture
async def temp_db():
    store = AppStore(db_path=":memory:")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def sample_document():
    content = "Quarterly Plan\n\nShip the importer.\n\nHire two engineers."
    return UploadedDocument(
        file_name="q3-plan.txt",
        file_type="text/plain",
        content=content,
        preview=content[:200],
        length=len(content),
    )


@pytest.fixture
def mock_openai_response():
    """Create a mock OpenAI chat completion response."""
    def _make(data):
        message = MagicMock()
        message.content = data if isinstance(data, str) or data is None else json.dumps(data)
        choice = MagicMock()
        choice.message = message
        response = MagicMock()
        response.choices = [choice]
        return response
    return _make


@pytest.fixture
def mock_openai_client():
    """An AsyncOpenAI stand-in whose completions call is an AsyncMock."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def delegate(mock_openai_client):
    calls: list[tuple[str, AIConfig]] = []

    def factory(api_key, config):
        calls.append((api_key, config))
        return mock_openai_client

    d = AIDelegate(AIConfig(), client_factory=factory)
    d.factory_calls = calls
    return d


@pytest.fixture
def openai_error():
    """Build real openai exception instances for a given status code."""
    def _make(status: int, message: str = "error"):
        request = httpx.Request("POST", AI_URL)
        response = httpx.Response(status, request=request)
        classes = {
            401: openai.AuthenticationError,
            403: openai.PermissionDeniedError,
            429: openai.RateLimitError,
            500: openai.InternalServerError,
        }
        cls = classes.get(status, openai.APIStatusError)
        return cls(message, response=response, body=None)
    return _make
