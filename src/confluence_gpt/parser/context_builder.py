"""Outbound message construction for requests that carry an attachment."""

from __future__ import annotations

import re

from confluence_gpt.models.intent import UploadedDocument
from confluence_gpt.parser.prompt_templates import (
    DEFAULT_DOCUMENT_REQUEST,
    DOCUMENT_END,
    DOCUMENT_REQUEST_TEMPLATE,
    DOCUMENT_START,
    PASSTHROUGH_TEMPLATE,
)

VAGUE_REFERENCE = re.compile(
    r"\b(this|it|that|the file|the document|the pdf|the content)\b", re.I
)

_EXTENSION = re.compile(r"\.[^/.]+$")


def has_vague_reference(text: str) -> bool:
    return VAGUE_REFERENCE.search(text) is not None


def default_title_for(file_name: str) -> str:
    return _EXTENSION.sub("", file_name)


def build_outbound_message(
    user_message: str, attachment: UploadedDocument | None = None
) -> str:
    """Return the single string sent downstream for one resolution call.

    Without an attachment the message passes through untouched. With one,
    an empty or vague request ("summarize it") becomes a document-conversion
    prompt that embeds the full text between fixed delimiter lines; a
    specific request keeps its wording and only gets the file prefixed.
    Document text is embedded as-is, delimiters inside it are not escaped.
    """
    if attachment is None:
        return user_message

    stripped = user_message.strip()
    request = stripped or DEFAULT_DOCUMENT_REQUEST
    if not stripped or has_vague_reference(request):
        return DOCUMENT_REQUEST_TEMPLATE.format(
            file_name=attachment.file_name,
            default_title=default_title_for(attachment.file_name),
            start=DOCUMENT_START,
            content=attachment.content,
            end=DOCUMENT_END,
            request=request,
        )

    return PASSTHROUGH_TEMPLATE.format(
        file_name=attachment.file_name,
        content=attachment.content,
        request=request,
    )
