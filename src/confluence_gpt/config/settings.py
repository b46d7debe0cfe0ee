"""Application settings loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

DEFAULT_AI_BASE_URL = "https://api.deepseek.com"
DEFAULT_AI_MODEL = "deepseek-chat"


class AIConfig(BaseModel):
    """Immutable chat-completion defaults handed to the AI delegate."""

    model_config = {"frozen": True}

    base_url: str = DEFAULT_AI_BASE_URL
    model: str = DEFAULT_AI_MODEL
    command_temperature: float = 0.2
    document_temperature: float = 0.05
    command_max_tokens: int = 2000
    # DeepSeek caps completions at 8192 tokens
    document_max_tokens: int = 8192


class ConfluenceCredentials(BaseModel):
    domain: str = ""
    email: str = ""
    api_token: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.domain and self.email and self.api_token)


class Settings(BaseSettings):
    model_config = {"env_prefix": "CONFLUENCE_GPT_"}

    ai_api_key: str = Field(default="", description="AI provider API key (blank disables AI)")
    ai_base_url: str = Field(default=DEFAULT_AI_BASE_URL, description="AI provider base URL")
    ai_model: str = Field(default=DEFAULT_AI_MODEL, description="AI model name")
    confluence_domain: str = Field(default="", description="Confluence Cloud domain")
    confluence_email: str = Field(default="", description="Confluence account email")
    confluence_api_token: str = Field(default="", description="Confluence API token")
    default_space: str = Field(default="", description="Space key used when none is given")
    db_path: Path = Field(
        default=Path.home() / ".confluence_gpt" / "app.db",
        description="SQLite database path",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    session_days: int = Field(default=7, description="Session lifetime in days")
    cookie_name: str = Field(default="confluence-gpt-session", description="Session cookie name")
    cookie_secure: bool = Field(default=False, description="Mark the session cookie Secure")
    max_upload_chars: int = Field(default=15000, description="Extracted upload text limit")
    host: str = Field(default="127.0.0.1", description="API bind host")
    port: int = Field(default=8000, description="API bind port")

    def ai_config(self) -> AIConfig:
        return AIConfig(base_url=self.ai_base_url, model=self.ai_model)

    def confluence_credentials(self) -> ConfluenceCredentials:
        return ConfluenceCredentials(
            domain=self.confluence_domain,
            email=self.confluence_email,
            api_token=self.confluence_api_token,
        )
