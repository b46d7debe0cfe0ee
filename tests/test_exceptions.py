"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from confluence_gpt.exceptions import (
    AIError,
    AuthError,
    ConfluenceCredentialsError,
    ConfluenceError,
    ConfluenceGPTError,
    MalformedResponseError,
    MissingCredentialError,
    NetworkError,
    RegistrationError,
    UpstreamAuthError,
    UpstreamError,
)


@pytest.mark.parametrize(
    "cls",
    [MissingCredentialError, UpstreamAuthError, UpstreamError, NetworkError, MalformedResponseError],
)
def test_ai_errors_share_base(cls):
    assert issubclass(cls, AIError)
    assert issubclass(cls, ConfluenceGPTError)


def test_status_codes():
    assert UpstreamAuthError("x").status_code == 401
    assert UpstreamError("x").status_code == 500
    assert UpstreamError("x", status_code=429).status_code == 429


def test_confluence_error_detail():
    exc = ConfluenceError("nope", status_code=404, detail={"message": "nope"})
    assert str(exc) == "nope"
    assert exc.status_code == 404
    assert exc.detail == {"message": "nope"}
    assert ConfluenceError("x").status_code == 502


def test_credentials_error():
    exc = ConfluenceCredentialsError()
    assert isinstance(exc, ConfluenceError)
    assert exc.status_code == 401
    assert str(exc) == "Missing Confluence credentials"


def test_registration_is_auth_error():
    assert issubclass(RegistrationError, AuthError)
