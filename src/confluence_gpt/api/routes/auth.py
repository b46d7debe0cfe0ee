"""Account API: register, login, logout, current user, settings."""

from __future__ import annotations

from fastapi import APIRouter, Response
from pydantic import BaseModel

from confluence_gpt.api.dependencies import (
    AccountsDep,
    SettingsDep,
    StoreDep,
    TokenDep,
    UserDep,
)
from confluence_gpt.config.settings import DEFAULT_AI_BASE_URL, DEFAULT_AI_MODEL, Settings
from confluence_gpt.storage.models import User, UserSettingsRecord

router = APIRouter()


class RegisterRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ConfluenceSettings(BaseModel):
    domain: str | None = None
    email: str | None = None
    api_token: str | None = None


class AISettings(BaseModel):
    api_key: str | None = None
    base_url: str | None = None
    model: str | None = None
    enabled: bool | None = None


class SettingsPayload(BaseModel):
    confluence: ConfluenceSettings = ConfluenceSettings()
    ai: AISettings = AISettings()


class AccountResponse(BaseModel):
    user: User
    settings: SettingsPayload | None = None
    message: str | None = None


def settings_payload(record: UserSettingsRecord | None) -> SettingsPayload | None:
    if record is None:
        return None
    return SettingsPayload(
        confluence=ConfluenceSettings(
            domain=record.confluence_domain or "",
            email=record.confluence_email or "",
            api_token=record.confluence_token or "",
        ),
        ai=AISettings(
            api_key=record.ai_api_key or "",
            base_url=record.ai_base_url or DEFAULT_AI_BASE_URL,
            model=record.ai_model or DEFAULT_AI_MODEL,
            enabled=record.ai_enabled,
        ),
    )


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        settings.cookie_name,
        token,
        max_age=settings.session_days * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


@router.post("/register", response_model=AccountResponse)
async def register(
    body: RegisterRequest, response: Response, accounts: AccountsDep, settings: SettingsDep
) -> AccountResponse:
    await accounts.register(body.email, body.password, body.name)
    result = await accounts.login(body.email, body.password)
    _set_session_cookie(response, result.token, settings)
    return AccountResponse(
        user=result.user,
        settings=settings_payload(result.settings),
        message="Registration successful",
    )


@router.post("/login", response_model=AccountResponse)
async def login(
    body: LoginRequest, response: Response, accounts: AccountsDep, settings: SettingsDep
) -> AccountResponse:
    result = await accounts.login(body.email, body.password)
    _set_session_cookie(response, result.token, settings)
    return AccountResponse(
        user=result.user,
        settings=settings_payload(result.settings),
        message="Login successful",
    )


@router.post("/logout")
async def logout(
    response: Response, accounts: AccountsDep, token: TokenDep, settings: SettingsDep
) -> dict[str, str]:
    await accounts.logout(token)
    response.delete_cookie(settings.cookie_name, path="/")
    return {"message": "Logged out"}


@router.get("/me", response_model=AccountResponse)
async def me(user: UserDep, store: StoreDep) -> AccountResponse:
    return AccountResponse(user=user, settings=settings_payload(await store.get_settings(user.id)))


@router.get("/settings")
async def get_settings(user: UserDep, store: StoreDep) -> dict[str, SettingsPayload | None]:
    return {"settings": settings_payload(await store.get_settings(user.id))}


@router.post("/settings")
async def save_settings(
    body: SettingsPayload, user: UserDep, accounts: AccountsDep
) -> dict[str, object]:
    record = await accounts.update_settings(
        user.id,
        confluence_domain=body.confluence.domain,
        confluence_email=body.confluence.email,
        confluence_token=body.confluence.api_token,
        ai_api_key=body.ai.api_key,
        ai_base_url=body.ai.base_url,
        ai_model=body.ai.model,
        ai_enabled=body.ai.enabled,
    )
    return {"message": "Settings saved", "settings": settings_payload(record)}
