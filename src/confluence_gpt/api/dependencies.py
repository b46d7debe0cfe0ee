"""Request-scoped dependencies shared by the API routes."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request

from confluence_gpt.auth.service import AccountService
from confluence_gpt.config.settings import ConfluenceCredentials, Settings
from confluence_gpt.confluence.client import ConfluenceClient
from confluence_gpt.exceptions import AuthError, ConfluenceCredentialsError
from confluence_gpt.main import build_pipeline
from confluence_gpt.pipeline import ChatPipeline
from confluence_gpt.storage.models import User, UserSettingsRecord
from confluence_gpt.storage.store import AppStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> AppStore:
    return request.app.state.store


SettingsDep = Annotated[Settings, Depends(get_settings)]
StoreDep = Annotated[AppStore, Depends(get_store)]


def get_accounts(store: StoreDep, settings: SettingsDep) -> AccountService:
    return AccountService(store, session_days=settings.session_days)


AccountsDep = Annotated[AccountService, Depends(get_accounts)]


def session_token(request: Request, settings: SettingsDep) -> str | None:
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.cookie_name)


TokenDep = Annotated[str | None, Depends(session_token)]


async def get_current_user(accounts: AccountsDep, token: TokenDep) -> User:
    return await accounts.authenticate(token)


async def get_optional_user(accounts: AccountsDep, token: TokenDep) -> User | None:
    if not token:
        return None
    try:
        return await accounts.authenticate(token)
    except AuthError:
        return None


UserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


async def get_user_settings(user: OptionalUserDep, store: StoreDep) -> UserSettingsRecord | None:
    if user is None:
        return None
    return await store.get_settings(user.id)


UserSettingsDep = Annotated[UserSettingsRecord | None, Depends(get_user_settings)]


def resolve_credentials(
    request: Request, settings: SettingsDep, user_settings: UserSettingsDep
) -> ConfluenceCredentials:
    """Pick Confluence credentials: request headers, then the user's stored
    settings, then the process environment."""
    from_headers = ConfluenceCredentials(
        domain=request.headers.get("x-confluence-domain", ""),
        email=request.headers.get("x-confluence-email", ""),
        api_token=request.headers.get("x-confluence-token", ""),
    )
    if from_headers.is_complete:
        return from_headers
    if user_settings is not None and user_settings.confluence_credentials().is_complete:
        return user_settings.confluence_credentials()
    return settings.confluence_credentials()


CredentialsDep = Annotated[ConfluenceCredentials, Depends(resolve_credentials)]


async def get_confluence_client(credentials: CredentialsDep) -> AsyncIterator[ConfluenceClient]:
    if not credentials.is_complete:
        raise ConfluenceCredentialsError()
    async with ConfluenceClient(credentials) as client:
        yield client


async def get_optional_confluence_client(
    credentials: CredentialsDep,
) -> AsyncIterator[ConfluenceClient | None]:
    if not credentials.is_complete:
        yield None
        return
    async with ConfluenceClient(credentials) as client:
        yield client


ConfluenceDep = Annotated[ConfluenceClient, Depends(get_confluence_client)]
OptionalConfluenceDep = Annotated[
    ConfluenceClient | None, Depends(get_optional_confluence_client)
]


def get_pipeline(
    settings: SettingsDep, store: StoreDep, user_settings: UserSettingsDep
) -> ChatPipeline:
    ai_config = user_settings.ai_config(settings.ai_config()) if user_settings else None
    return build_pipeline(settings, store=store, ai_config=ai_config)


PipelineDep = Annotated[ChatPipeline, Depends(get_pipeline)]
