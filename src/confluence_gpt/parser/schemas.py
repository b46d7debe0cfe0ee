"""Shape of the JSON object the AI provider is asked to return."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, field_validator


class AIIntentPayload(BaseModel):
    """Untrusted provider output; every field is optional."""

    model_config = {"extra": "ignore"}

    type: str | None = None
    title: str | None = None
    content: str | None = None
    query: str | None = None
    space: str | None = None
    answer: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_to_text(cls, value: Any) -> str | None:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return str(value)
