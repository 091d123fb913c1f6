"""Console rendering helpers for the media-admin CLI."""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .models import Listing, Notification, UploadResult

console = Console()


def _echo(message: str) -> None:
    console.print(message)


def _human_size(value: int) -> str:
    size = float(max(value, 0))
    units = ["B", "KB", "MB", "GB", "TB"]
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    if unit_idx == 0:
        return f"{int(size)} {units[unit_idx]}"
    return f"{size:.2f} {units[unit_idx]}"


def _object_size(metadata: Dict[str, Any]) -> Optional[int]:
    size = metadata.get("size") if metadata else None
    try:
        return int(size) if size is not None else None
    except (TypeError, ValueError):
        return None


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]media-admin[/bold green]",
        subtitle="[dim]media library CLI[/dim]",
        border_style="blue",
    )
    console.print(panel)


def render_listing(listing: Listing, url_for: Callable[[str], str], show_urls: bool = False) -> None:
    """Render folders first, then files, the way the library grid shows them."""
    title = f"/{listing.path}" if listing.path else "Home"
    if listing.is_empty:
        console.print(Panel("No files in this folder", title=title, border_style="dim"))
        return

    table = Table(title=title, title_justify="left")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Size", justify="right")
    table.add_column("Created", style="dim")
    if show_urls:
        table.add_column("URL", style="blue", overflow="fold")

    for folder in listing.folders:
        row = ["dir", f"[bold]{folder}/[/bold]", "", ""]
        if show_urls:
            row.append("")
        table.add_row(*row)

    for file in listing.files:
        size = _object_size(file.metadata)
        row = ["file", file.name, _human_size(size) if size is not None else "-", file.created_at or "-"]
        if show_urls:
            row.append(url_for(file.path))
        table.add_row(*row)

    console.print(table)
    _echo(f"[dim]Folders: {len(listing.folders)}  Files: {len(listing.files)}[/dim]")


def render_upload_results(results: Sequence[UploadResult]) -> None:
    stamp = time.strftime("%H:%M:%S")
    for result in results:
        if result.success:
            _echo(f"[dim]{stamp}[/dim] [green]DONE[/green] {result.path}")
        else:
            kind = f" ({result.error_kind})" if result.error_kind else ""
            _echo(f"[dim]{stamp}[/dim] [red]FAIL[/red] {result.filename}{kind} cause={result.error}")

    succeeded = sum(1 for result in results if result.success)
    color = "green" if succeeded == len(results) else "yellow" if succeeded else "red"
    _echo(f"[{color}]Uploaded {succeeded}/{len(results)} files[/{color}]")


class NotificationPrinter:
    """Prints view notifications; remembers whether any error was shown."""

    def __init__(self, quiet_success: bool = False):
        self.errors = 0
        self._quiet_success = quiet_success

    def __call__(self, notification: Notification) -> None:
        if notification.is_error:
            self.errors += 1
            _echo(f"[red]{notification.title}:[/red] {notification.description}")
            return
        if not self._quiet_success:
            _echo(f"[green]{notification.title}:[/green] {notification.description}")
