"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from bundle_prep.core import CleanupStatus, Downloader
from bundle_prep.utils.formatting import folder_size, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Check the values in your configuration file.",
            "• Run `bundle-prep show-config` to see the effective settings.",
        ],
        "PayloadError": [
            "• The JSON document needs a 'text' string and an 'images' list.",
            "• Transforms accept only export-png, export-area, export-width"
            " and export-height.",
        ],
        "DownloaderDisposedError": [
            "• Create a new downloader instead of reusing a disposed one.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_result_panel(downloader: Downloader) -> None:
    """Displays the outcome of a settled downloader."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column()

    if downloader.folder_path:
        files = sorted(
            str(p.relative_to(downloader.folder_path))
            for p in downloader.folder_path.rglob("*")
            if p.is_file()
        )
        table.add_row("Folder:", f"[green]{downloader.folder_path}[/green]")
        table.add_row("Files:", str(len(files)))
        table.add_row("Size:", format_size(folder_size(downloader.folder_path)))
        for name in files[:10]:
            table.add_row("", f"[dim]{name}[/dim]")
        if len(files) > 10:
            table.add_row("", f"[dim]... and {len(files) - 10} more[/dim]")
        title, style = "[bold green]✓ Bundle Ready[/bold green]", "green"
    elif downloader.user_error:
        table.add_row("Error:", f"[red]{downloader.user_error_message}[/red]")
        title, style = "[bold red]✗ Bundle Failed[/bold red]", "red"
    else:
        table.add_row("Error:", "[red]internal failure (see log)[/red]")
        title, style = "[bold red]✗ Bundle Failed[/bold red]", "red"

    console.print(Panel(table, title=title, border_style=style, expand=False))


def print_cleanup_status(status: CleanupStatus, folder_path: Path) -> None:
    """Reports what disposal did with the bundle folder."""
    console = Console()
    messages = {
        CleanupStatus.REMOVED: f"[dim]Removed {folder_path}[/dim]",
        CleanupStatus.SKIPPED: "[dim]Nothing to clean up.[/dim]",
        CleanupStatus.FAILED: f"[red]✗ Failed to remove {folder_path}[/red]",
        CleanupStatus.DISABLED: (
            f"[yellow]Cleanup disabled, {folder_path} was kept.[/yellow]"
        ),
    }
    console.print(messages[status])


def print_config(config_path: Path, config_data: dict[str, Any]) -> None:
    """Displays the effective configuration."""
    console = Console()
    content = "\n".join(f"{key} = {value}" for key, value in config_data.items())
    console.print(
        Panel(
            content,
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )
