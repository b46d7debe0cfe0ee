"""Rich display helpers for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from confluence_gpt.models.chat import AssistantReply
from confluence_gpt.models.confluence import DashboardOverview, PageSummary, Space
from confluence_gpt.models.intent import ParsedIntent

console = Console()


def print_intent(intent: ParsedIntent) -> None:
    table = Table(title="Parsed Intent", show_header=False, expand=True)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Intent", intent.kind.value)
    table.add_row("Source", intent.source.value)
    table.add_row("Confidence", f"{intent.confidence:.0%}")
    for name in ("title", "query", "space"):
        value = getattr(intent, name)
        if value:
            table.add_row(name.capitalize(), value)
    console.print(table)


def print_reply(reply: AssistantReply) -> None:
    style = "red" if reply.action and reply.action.status.value == "error" else "green"
    console.print(Panel(Markdown(reply.content), title="Assistant", border_style=style))

    if reply.action and reply.action.type == "search" and reply.action.data:
        print_pages([PageSummary.model_validate(p) for p in reply.action.data])
    elif reply.action and reply.action.type == "create" and reply.action.data:
        console.print(f"[dim]{reply.action.data.get('link', '')}[/]")


def print_spaces(spaces: list[Space]) -> None:
    table = Table(title=f"Spaces ({len(spaces)})", expand=True)
    table.add_column("Key", style="bold cyan")
    table.add_column("Name")
    for space in spaces:
        table.add_row(space.key, space.name)
    console.print(table)


def print_pages(pages: list[PageSummary]) -> None:
    table = Table(title=f"Pages ({len(pages)})", expand=True)
    table.add_column("ID", style="bold")
    table.add_column("Title", style="cyan")
    table.add_column("Space")
    table.add_column("Link")
    for page in pages:
        table.add_row(page.id, page.title, page.space or "", page.link)
    console.print(table)


def print_overview(overview: DashboardOverview) -> None:
    totals = overview.overview
    table = Table(title="Overview", show_header=False, expand=True)
    table.add_column("Metric", style="bold cyan")
    table.add_column("Value", justify="right")
    table.add_row("Spaces", str(totals.total_spaces))
    table.add_row("Pages", str(totals.total_pages))
    table.add_row("Updated this week", str(totals.active_this_week))
    table.add_row("Contributors", str(totals.contributors))
    console.print(table)

    if overview.recent_pages:
        recent = Table(title="Recently Updated", expand=True)
        recent.add_column("Title", style="cyan")
        recent.add_column("Space")
        recent.add_column("By")
        recent.add_column("When")
        for page in overview.recent_pages[:10]:
            recent.add_row(page.title, page.space or "", page.last_updated_by, page.last_updated)
        console.print(recent)


def print_config(values: dict[str, str]) -> None:
    table = Table(title="Configuration", show_header=False)
    table.add_column("Setting", style="bold cyan")
    table.add_column("Value")
    for key, value in values.items():
        table.add_row(key, value)
    console.print(table)


def print_error(message: str) -> None:
    console.print(Panel(f"[red]{message}[/]", title="Error", border_style="red"))


def print_info(message: str) -> None:
    console.print(f"[dim]{message}[/]")
