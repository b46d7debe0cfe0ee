"""Document upload and text extraction."""

from __future__ import annotations

from fastapi import APIRouter, File, UploadFile

from confluence_gpt.api.dependencies import SettingsDep
from confluence_gpt.exceptions import UploadError
from confluence_gpt.upload.extractor import extract_document

router = APIRouter()


@router.post("/upload")
async def upload(settings: SettingsDep, file: UploadFile | None = File(None)) -> dict[str, object]:
    if file is None:
        raise UploadError("No file provided")

    data = await file.read()
    document = extract_document(
        file.filename or "upload", file.content_type, data, settings.max_upload_chars
    )
    return {"success": True, **document.model_dump()}
