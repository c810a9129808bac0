"""
Defines the command-line interface for the application using Typer.
Each command prepares one bundle, reports it and cleans it up again.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Callable

import typer
from rich.console import Console
from rich.logging import RichHandler

from bundle_prep import __version__
from bundle_prep.core import DownloadManager, Downloader
from bundle_prep.exceptions import BundlePrepError
from bundle_prep.models.config import PrepConfig
from bundle_prep.storage.config_manager import ConfigManager

from .formatters import (
    format_error_with_suggestions,
    print_cleanup_status,
    print_config,
    print_result_panel,
)

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=False,
        )
    ],
)
log = logging.getLogger("bundle_prep")

app = typer.Typer(
    name="bundle-prep",
    help=(
        "Prepare disposable input bundles for document builds. Use 'bundle-prep"
        " <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "bundle-prep"


CONFIG_FILE = get_config_dir() / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    config_file: Path = typer.Option(
        CONFIG_FILE, "--config", "-c", help="Path to the INI configuration file."
    ),
):
    """Bundle preparation CLI"""
    if version:
        console.print(f"[bold]bundle-prep[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    ctx.obj = {"config_file": config_file, "verbose": verbose}

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def _load_config(ctx: typer.Context, root: Path | None) -> PrepConfig:
    cli_options = {"root_folder": root} if root else {}
    try:
        config = ConfigManager(ctx.obj["config_file"]).load_config(cli_options)
    except BundlePrepError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    verbose = ctx.obj["verbose"]
    log.setLevel("DEBUG" if verbose >= 2 else config.log_level)
    return config


def _prepare_bundle(
    config: PrepConfig,
    make_downloader: Callable[[DownloadManager], Downloader],
    keep: bool,
) -> None:
    """Runs one downloader to completion and reports its outcome."""

    async def _prepare_async() -> bool:
        manager = await DownloadManager.create(config.root_folder, config)
        if manager is None:
            console.print(
                f"[red]✗ Could not prepare root folder '{config.root_folder}'.[/red]"
            )
            return False

        downloader = make_downloader(manager)
        result = await downloader.trigger()
        print_result_panel(downloader)

        if not keep:
            status = await downloader.dispose()
            print_cleanup_status(status, downloader.target_folder)
        return result.ok

    try:
        ok = asyncio.run(_prepare_async())
    except BundlePrepError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
    if not ok:
        raise typer.Exit(code=1)


RootOption = typer.Option(
    None, "--root", "-r", help="Root folder for bundles (emptied on start)."
)
KeepOption = typer.Option(
    False,
    "--keep",
    "-k",
    help=(
        "Keep the bundle folder instead of cleaning it up. The root folder is"
        " emptied at the start of every command, so a kept bundle only lasts"
        " until the next run."
    ),
)


@app.command()
def text(
    ctx: typer.Context,
    file_name: str = typer.Argument(..., help="Name of the file to create."),
    content: str | None = typer.Option(
        None, "--text", "-t", help="Text to write. Read from stdin when omitted."
    ),
    root: Path | None = RootOption,
    keep: bool = KeepOption,
):
    """Write literal text into a new bundle."""
    config = _load_config(ctx, root)
    if content is None:
        content = typer.get_text_stream("stdin").read()
    _prepare_bundle(
        config, lambda m: m.create_text_downloader(content, file_name), keep
    )


@app.command()
def git(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Repository URL to clone."),
    root: Path | None = RootOption,
    keep: bool = KeepOption,
):
    """Shallow-clone a git repository into a new bundle."""
    config = _load_config(ctx, root)
    _prepare_bundle(config, lambda m: m.create_git_downloader(url), keep)


@app.command()
def url(
    ctx: typer.Context,
    source_url: str = typer.Argument(..., help="URL to download."),
    file_name: str = typer.Argument(..., help="Name of the downloaded file."),
    root: Path | None = RootOption,
    keep: bool = KeepOption,
):
    """Download a URL into a new bundle."""
    config = _load_config(ctx, root)
    _prepare_bundle(
        config, lambda m: m.create_url_downloader(source_url, file_name), keep
    )


@app.command()
def tarball(
    ctx: typer.Context,
    archive: Path = typer.Argument(..., help="Tarball to extract."),
    root: Path | None = RootOption,
    keep: bool = KeepOption,
):
    """Extract a tarball into a new bundle."""
    config = _load_config(ctx, root)
    archive_path = archive.expanduser().resolve()
    _prepare_bundle(config, lambda m: m.create_tarball_extractor(archive_path), keep)


@app.command(name="json")
def json_command(
    ctx: typer.Context,
    payload_file: Path = typer.Argument(..., help="JSON document payload."),
    file_name: str = typer.Argument(..., help="Name of the template file to create."),
    root: Path | None = RootOption,
    keep: bool = KeepOption,
):
    """Assemble a document and its images from a JSON payload."""
    config = _load_config(ctx, root)
    try:
        with open(payload_file, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]✗ Could not read payload {payload_file}: {e}[/red]")
        raise typer.Exit(code=1) from e
    _prepare_bundle(
        config, lambda m: m.create_json_downloader(payload, file_name), keep
    )


@app.command(name="show-config")
def show_config(ctx: typer.Context):
    """Display the effective configuration."""
    config = _load_config(ctx, None)
    config_data = config.model_dump(exclude={"config_path"})
    print_config(ctx.obj["config_file"], config_data)


@app.command(name="init-config")
def init_config(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing file without asking."
    ),
):
    """Write a configuration file with default settings."""
    config_file: Path = ctx.obj["config_file"]
    if (
        config_file.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()
    try:
        ConfigManager(config_file).save_new_config({})
    except BundlePrepError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]✓ Configuration saved to '{config_file}'[/bold green]")
