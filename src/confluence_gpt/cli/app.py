"""Typer CLI commands."""

from __future__ import annotations

import asyncio
import mimetypes
from pathlib import Path
from typing import Optional

import typer

from confluence_gpt.cli.output import (
    print_config,
    print_error,
    print_info,
    print_intent,
    print_overview,
    print_pages,
    print_reply,
    print_spaces,
)
from confluence_gpt.config.logging import configure_logging, mask_secret
from confluence_gpt.config.settings import Settings
from confluence_gpt.exceptions import ConfluenceGPTError
from confluence_gpt.models.chat import AssistantReply, ChatRequest
from confluence_gpt.models.intent import UploadedDocument

app = typer.Typer(name="confluence-gpt", help="Natural-language assistant for Confluence.")


def _get_settings() -> Settings:
    return Settings()


def _get_pipeline(settings: Settings):
    from confluence_gpt.main import build_pipeline
    return build_pipeline(settings)


def _get_client(settings: Settings):
    from confluence_gpt.main import build_confluence_client
    return build_confluence_client(settings)


def _load_attachment(path: Path, settings: Settings) -> UploadedDocument:
    from confluence_gpt.upload.extractor import extract_document

    content_type, _ = mimetypes.guess_type(path.name)
    return extract_document(path.name, content_type, path.read_bytes(), settings.max_upload_chars)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the log level"),
) -> None:
    """Natural-language assistant for Confluence."""
    configure_logging(log_level or _get_settings().log_level)


@app.command()
def ask(
    message: str = typer.Argument("", help="Natural language request"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="Document to attach"
    ),
    space: Optional[str] = typer.Option(None, "--space", "-s", help="Target space key"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve the intent without acting"),
) -> None:
    """Resolve a request and carry it out against Confluence."""
    async def _run():
        settings = _get_settings()
        attachment = _load_attachment(file, settings) if file else None
        pipeline = _get_pipeline(settings)
        request = ChatRequest(
            message=message,
            attachment=attachment,
            api_key=settings.ai_api_key or None,
            space=space,
        )

        if dry_run:
            intent = await pipeline.resolver.resolve_request(
                request.message, request.attachment, request.api_key
            )
            print_intent(intent)
            print_info("Dry run: no Confluence changes made.")
            return

        if not settings.confluence_credentials().is_complete:
            turn = await pipeline.run(request)
        else:
            async with _get_client(settings) as client:
                turn = await pipeline.run(request, client)
        print_intent(turn.intent)
        print_reply(turn.reply)

    if not message and file is None:
        print_error("Provide a message or --file.")
        raise typer.Exit(1)
    try:
        asyncio.run(_run())
    except ConfluenceGPTError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


@app.command()
def chat(
    message: str = typer.Argument(..., help="Question for the assistant"),
) -> None:
    """Ask the AI provider a free-form question."""
    async def _run():
        settings = _get_settings()
        intent = await _get_pipeline(settings).resolver.chat(message, settings.ai_api_key)
        print_reply(AssistantReply(content=intent.answer or ""))

    try:
        asyncio.run(_run())
    except ConfluenceGPTError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


@app.command()
def spaces() -> None:
    """List Confluence spaces."""
    async def _run():
        async with _get_client(_get_settings()) as client:
            print_spaces(await client.list_spaces())

    try:
        asyncio.run(_run())
    except ConfluenceGPTError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search text"),
    space: Optional[str] = typer.Option(None, "--space", "-s", help="Restrict to a space key"),
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum results shown"),
) -> None:
    """Search Confluence pages."""
    async def _run():
        async with _get_client(_get_settings()) as client:
            pages = await client.search_pages(query, space_key=space)
        if not pages:
            print_info(f'No pages found matching "{query}".')
        else:
            print_pages(pages[:limit])

    try:
        asyncio.run(_run())
    except ConfluenceGPTError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


@app.command()
def dashboard() -> None:
    """Show space and page activity."""
    from confluence_gpt.analytics.dashboard import DashboardService

    async def _run():
        async with _get_client(_get_settings()) as client:
            overview = await DashboardService(client).overview()
        print_overview(overview)

    try:
        asyncio.run(_run())
    except ConfluenceGPTError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


@app.command(name="config")
def show_config() -> None:
    """Show current configuration."""
    try:
        settings = _get_settings()
    except Exception as exc:
        print_error(f"Failed to load settings: {exc}")
        raise typer.Exit(1)

    print_config({
        "AI Key": mask_secret(settings.ai_api_key) if settings.ai_api_key else "(not set)",
        "AI Base URL": settings.ai_base_url,
        "AI Model": settings.ai_model,
        "Confluence Domain": settings.confluence_domain or "(not set)",
        "Confluence Email": settings.confluence_email or "(not set)",
        "Confluence Token": (
            mask_secret(settings.confluence_api_token)
            if settings.confluence_api_token else "(not set)"
        ),
        "Default Space": settings.default_space or "(first available)",
        "DB Path": str(settings.db_path),
        "Log Level": settings.log_level,
    })


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind host"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from confluence_gpt.api.app import create_app

    settings = _get_settings()
    uvicorn.run(
        create_app(settings),
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )
