"""Exception to HTTP response mapping."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from confluence_gpt.exceptions import (
    AccessDeniedError,
    AIError,
    AuthError,
    ConfluenceError,
    ConfluenceGPTError,
    MissingCredentialError,
    NotFoundError,
    RegistrationError,
    UploadError,
    UpstreamAuthError,
)


def status_for(exc: ConfluenceGPTError) -> int:
    if isinstance(exc, (RegistrationError, UploadError, MissingCredentialError)):
        return 400
    if isinstance(exc, (AuthError, UpstreamAuthError)):
        return 401
    if isinstance(exc, AccessDeniedError):
        return 403
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ConfluenceError):
        return exc.status_code
    if isinstance(exc, AIError):
        return 502
    return 500


async def handle_app_error(request: Request, exc: ConfluenceGPTError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc)
    body: dict[str, object] = {"error": str(exc)}
    if isinstance(exc, ConfluenceError) and exc.detail is not None:
        body["detail"] = exc.detail
    return JSONResponse(body, status_code=status)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ConfluenceGPTError, handle_app_error)
