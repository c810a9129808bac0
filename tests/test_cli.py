"""Smoke tests for the command-line interface."""

import json

import pytest
import typer
from typer.testing import CliRunner

from bundle_prep import __version__
from bundle_prep.cli.app import app

runner = CliRunner()


@pytest.fixture
def cli_args(tmp_path):
    return ["--config", str(tmp_path / "config.ini")]


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_text_bundle_kept(cli_args, tmp_path):
    root = tmp_path / "root"

    result = runner.invoke(
        app, [*cli_args, "text", "a.tex", "--text", "hello", "--root", str(root), "--keep"]
    )

    assert result.exit_code == 0, result.output
    assert "Bundle Ready" in result.output
    assert (root / "tmp_1" / "a.tex").read_text() == "hello"


def test_text_bundle_cleaned_up(cli_args, tmp_path):
    root = tmp_path / "root"

    result = runner.invoke(
        app, [*cli_args, "text", "a.tex", "--text", "hello", "--root", str(root)]
    )

    assert result.exit_code == 0, result.output
    assert not (root / "tmp_1").exists()


def test_json_payload_with_unknown_transform(cli_args, tmp_path):
    payload_file = tmp_path / "payload.json"
    payload_file.write_text(
        json.dumps(
            {
                "text": "x",
                "images": [
                    {
                        "name": "a.png",
                        "imageDataUrl": "data:,abc",
                        "transform": {"export-dpi": 300},
                    }
                ],
            }
        )
    )

    result = runner.invoke(
        app,
        [*cli_args, "json", str(payload_file), "main.tex", "--root", str(tmp_path / "root")],
    )

    assert result.exit_code == 1
    assert "PayloadError" in result.output


def test_failed_bundle_exits_with_error(cli_args, tmp_path):
    result = runner.invoke(
        app,
        [
            *cli_args,
            "tarball",
            str(tmp_path / "missing.tar"),
            "--root",
            str(tmp_path / "root"),
        ],
    )

    assert result.exit_code == 1


def test_show_config(cli_args, tmp_path):
    result = runner.invoke(app, [*cli_args, "show-config"])

    assert result.exit_code == 0
    assert "inkscape_binary" in result.output


@pytest.mark.parametrize("command", ["text", "git", "url", "tarball", "json"])
def test_keep_help_warns_about_next_run(command):
    click_command = typer.main.get_command(app).commands[command]
    keep = next(param for param in click_command.params if param.name == "keep")

    assert "emptied at the start of every command" in keep.help
