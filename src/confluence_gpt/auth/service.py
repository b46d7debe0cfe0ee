"""Account registration, login and session handling."""

from __future__ import annotations

import hashlib
import secrets
from datetime import timedelta
from typing import Any

from loguru import logger
from pydantic import BaseModel

from confluence_gpt.exceptions import AuthError, RegistrationError
from confluence_gpt.storage.models import User, UserSettingsRecord, utcnow
from confluence_gpt.storage.store import AppStore

MIN_PASSWORD_LENGTH = 6
PBKDF2_ITERATIONS = 240_000
INVALID_LOGIN = "Invalid email or password"


def hash_password(password: str, salt: str | None = None, iterations: int = PBKDF2_ITERATIONS) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return f"pbkdf2_sha256${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt, _ = encoded.split("$", 3)
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    candidate = hash_password(password, salt=salt, iterations=int(iterations))
    return secrets.compare_digest(candidate.encode("utf-8"), encoded.encode("utf-8"))


class LoginResult(BaseModel):
    user: User
    token: str
    settings: UserSettingsRecord | None = None


class AccountService:
    def __init__(self, store: AppStore, session_days: int = 7) -> None:
        self._store = store
        self._session_days = session_days

    async def register(self, email: str | None, password: str | None, name: str | None) -> User:
        if not email or not password or not name:
            raise RegistrationError("All fields are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise RegistrationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        email = email.strip().lower()
        if await self._store.get_user_by_email(email):
            raise RegistrationError("Email already registered")

        record = await self._store.create_user(email, hash_password(password), name.strip())
        await self._store.upsert_settings(record.id)
        logger.info("Registered user {}", record.id)
        return record.public()

    async def login(self, email: str | None, password: str | None) -> LoginResult:
        if not email or not password:
            raise AuthError("Email and password are required")

        record = await self._store.get_user_by_email(email.strip().lower())
        if record is None or not verify_password(password, record.password_hash):
            raise AuthError(INVALID_LOGIN)

        token = secrets.token_urlsafe(32)
        expires_at = utcnow() + timedelta(days=self._session_days)
        await self._store.create_session(record.id, token, expires_at)
        logger.info("User {} logged in", record.id)
        return LoginResult(
            user=record.public(),
            token=token,
            settings=await self._store.get_settings(record.id),
        )

    async def logout(self, token: str | None) -> None:
        if token:
            await self._store.delete_session(token)

    async def authenticate(self, token: str | None) -> User:
        if not token:
            raise AuthError("Unauthorized")
        session = await self._store.get_session(token)
        if session is None:
            raise AuthError("Unauthorized")
        record = await self._store.get_user(session.user_id)
        if record is None:
            raise AuthError("Unauthorized")
        return record.public()

    async def get_settings(self, user_id: int) -> UserSettingsRecord | None:
        return await self._store.get_settings(user_id)

    async def update_settings(self, user_id: int, **fields: Any) -> UserSettingsRecord:
        return await self._store.upsert_settings(user_id, **fields)
