"""Custom exception hierarchy for Confluence GPT."""

from __future__ import annotations


class ConfluenceGPTError(Exception):
    """Base exception for all Confluence GPT errors."""


class AIError(ConfluenceGPTError):
    """Base for failures of the chat-completion delegate."""


class MissingCredentialError(AIError):
    """Raised when no usable AI API key is available."""


class UpstreamAuthError(AIError):
    """Raised when the AI provider rejects the API key."""

    def __init__(self, message: str, status_code: int = 401) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamError(AIError):
    """Raised for any other non-success response from the AI provider."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(AIError):
    """Raised when the AI provider cannot be reached at all."""


class MalformedResponseError(AIError):
    """Raised when a success response carries no message content."""


class ConfluenceError(ConfluenceGPTError):
    """Raised when a Confluence REST call fails."""

    def __init__(self, message: str, status_code: int = 502, detail: object = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ConfluenceCredentialsError(ConfluenceError):
    """Raised when Confluence domain, email or token is missing."""

    def __init__(self, message: str = "Missing Confluence credentials") -> None:
        super().__init__(message, status_code=401)


class AuthError(ConfluenceGPTError):
    """Raised when registration, login or session lookup fails."""


class NotFoundError(ConfluenceGPTError):
    """Raised when a requested record does not exist."""


class AccessDeniedError(ConfluenceGPTError):
    """Raised when a record belongs to another user."""


class UploadError(ConfluenceGPTError):
    """Raised when an uploaded file cannot be turned into text."""


class RegistrationError(AuthError):
    """Raised when registration input is incomplete or already taken."""
