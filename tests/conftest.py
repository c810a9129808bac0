"""
Shared pytest fixtures for bundle-prep tests.

Provides common fixtures for:
- Bundle root folders and managers
- Inline image payloads
- A recording stand-in for external tools
- A local HTTP server
"""

import base64
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from bundle_prep.core import DownloadManager
from bundle_prep.models.config import PrepConfig
from bundle_prep.utils.process import CommandOutcome

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(64))
SVG_TEXT = '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"/>'


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """An existing, empty bundle root folder."""
    folder = tmp_path / "bundles"
    folder.mkdir()
    return folder


@pytest.fixture
def config(root: Path) -> PrepConfig:
    return PrepConfig(root_folder=root, inkscape_binary="inkscape-test")


@pytest.fixture
def manager(root: Path, config: PrepConfig) -> DownloadManager:
    return DownloadManager(root, config)


@pytest.fixture
def png_data_url() -> str:
    return "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")


@pytest.fixture
def svg_data_url() -> str:
    return "data:image/svg+xml;base64," + base64.b64encode(SVG_TEXT.encode()).decode(
        "ascii"
    )


class CommandRecorder:
    """Stands in for `execute_command`, recording every invocation."""

    def __init__(self, returncode: int = 0):
        self.returncode = returncode
        self.calls: list[dict[str, Any]] = []

    async def __call__(
        self, program: str, args: list[str], timeout: float | None = None
    ) -> CommandOutcome:
        self.calls.append({"program": program, "args": list(args), "timeout": timeout})
        return CommandOutcome(returncode=self.returncode)


@pytest.fixture
def fake_inkscape(monkeypatch) -> CommandRecorder:
    """Replaces Inkscape invocations of the json-assembly job."""
    recorder = CommandRecorder()
    monkeypatch.setattr("bundle_prep.core.json_assembly.execute_command", recorder)
    return recorder


@asynccontextmanager
async def serve(app: web.Application):
    """Runs an aiohttp application on a local port for the duration of a test."""
    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()
