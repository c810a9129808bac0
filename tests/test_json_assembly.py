"""Tests for assembling documents from JSON payloads."""

import pytest

from .conftest import PNG_BYTES, SVG_TEXT


def _payload(*images, text="\\documentclass{article}"):
    return {"text": text, "images": list(images)}


class TestImages:
    @pytest.mark.asyncio
    async def test_writes_text_and_images(self, manager, png_data_url, svg_data_url, fake_inkscape):
        downloader = manager.create_json_downloader(
            _payload(
                {"name": "a.png", "imageDataUrl": png_data_url},
                {"name": "b.svg", "imageDataUrl": svg_data_url},
            ),
            "main.tex",
        )

        result = await downloader.trigger()

        assert result.ok
        folder = result.folder_path
        assert (folder / "main.tex").read_text() == "\\documentclass{article}"
        assert (folder / "a.png").read_bytes() == PNG_BYTES
        assert (folder / "b.svg").read_text() == SVG_TEXT
        assert fake_inkscape.calls == []

    @pytest.mark.asyncio
    async def test_malformed_data_uri_removes_folder(self, manager, png_data_url, fake_inkscape):
        downloader = manager.create_json_downloader(
            _payload(
                {"name": "ok.png", "imageDataUrl": png_data_url},
                {"name": "broken.png", "imageDataUrl": "not-a-data-uri"},
            ),
            "main.tex",
        )

        result = await downloader.trigger()

        assert result.folder_path is None
        assert result.user_error.image_name == "broken.png"
        assert downloader.user_error_message == (
            "failed to save image broken.png -- expected image data URI"
        )
        assert not downloader.target_folder.exists()
        assert fake_inkscape.calls == []

    @pytest.mark.asyncio
    async def test_undecodable_base64_is_treated_as_malformed(self, manager, fake_inkscape):
        downloader = manager.create_json_downloader(
            _payload({"name": "a.png", "imageDataUrl": "data:image/png;base64,%%%"}),
            "main.tex",
        )

        result = await downloader.trigger()

        assert result.user_error.image_name == "a.png"
        assert not downloader.target_folder.exists()

    @pytest.mark.asyncio
    async def test_text_write_failure_removes_folder(self, manager, png_data_url, fake_inkscape, monkeypatch):
        from bundle_prep.storage import folders

        original_write = folders.write_file

        async def refuse_text(path, content):
            if isinstance(content, str):
                return False
            return await original_write(path, content)

        monkeypatch.setattr(folders, "write_file", refuse_text)
        downloader = manager.create_json_downloader(
            _payload({"name": "a.png", "imageDataUrl": png_data_url}), "main.tex"
        )

        result = await downloader.trigger()

        assert result.is_internal_failure
        assert not downloader.target_folder.exists()
        assert fake_inkscape.calls == []

    @pytest.mark.asyncio
    async def test_unpadded_base64_image_is_saved(self, manager, fake_inkscape):
        downloader = manager.create_json_downloader(
            _payload({"name": "a.png", "imageDataUrl": "data:image/png;base64,YWJjZA"}),
            "main.tex",
        )

        result = await downloader.trigger()

        assert result.ok
        assert (result.folder_path / "a.png").read_bytes() == b"abcd"

    @pytest.mark.asyncio
    async def test_image_write_failure_is_internal(self, manager, png_data_url, monkeypatch):
        from bundle_prep.storage import folders

        original_write = folders.write_file

        async def refuse_images(path, content):
            if isinstance(content, bytes):
                return False
            return await original_write(path, content)

        monkeypatch.setattr(folders, "write_file", refuse_images)
        downloader = manager.create_json_downloader(
            _payload({"name": "a.png", "imageDataUrl": png_data_url}), "main.tex"
        )

        result = await downloader.trigger()

        assert result.is_internal_failure
        assert not downloader.target_folder.exists()


class TestTransforms:
    @pytest.mark.asyncio
    async def test_invokes_inkscape_per_transformed_image(
        self, manager, png_data_url, svg_data_url, fake_inkscape
    ):
        downloader = manager.create_json_downloader(
            _payload(
                {
                    "name": "a.svg",
                    "imageDataUrl": svg_data_url,
                    "transform": {
                        "export-png": "a.png",
                        "export-area": {"x0": 0, "y0": 0, "x1": 100, "y1": 200},
                    },
                },
                {"name": "plain.png", "imageDataUrl": png_data_url},
                {
                    "name": "b.svg",
                    "imageDataUrl": svg_data_url,
                    "transform": {"export-width": 64, "export-height": "32"},
                },
            ),
            "main.tex",
        )

        result = await downloader.trigger()

        assert result.ok
        folder = downloader.target_folder
        assert fake_inkscape.calls == [
            {
                "program": "inkscape-test",
                "args": [
                    "--without-gui",
                    f"--file={folder / 'a.svg'}",
                    f"--export-png={folder / 'a.png'}",
                    "--export-area=0:0:100:200",
                ],
                "timeout": None,
            },
            {
                "program": "inkscape-test",
                "args": [
                    "--without-gui",
                    f"--file={folder / 'b.svg'}",
                    "--export-width=64",
                    "--export-height=32",
                ],
                "timeout": None,
            },
        ]

    @pytest.mark.asyncio
    async def test_invalid_option_keeps_folder_and_skips_tool(
        self, manager, svg_data_url, fake_inkscape
    ):
        downloader = manager.create_json_downloader(
            _payload(
                {
                    "name": "a.svg",
                    "imageDataUrl": svg_data_url,
                    "transform": {"export-width": "not-a-number"},
                }
            ),
            "main.tex",
        )

        result = await downloader.trigger()

        assert result.folder_path is None
        assert result.user_error is None
        assert fake_inkscape.calls == []
        assert (downloader.target_folder / "main.tex").exists()
        assert (downloader.target_folder / "a.svg").exists()

    @pytest.mark.asyncio
    async def test_invalid_option_on_later_image_stops_processing(
        self, manager, svg_data_url, fake_inkscape
    ):
        downloader = manager.create_json_downloader(
            _payload(
                {"name": "a.svg", "imageDataUrl": svg_data_url, "transform": {"export-width": 10}},
                {"name": "b.svg", "imageDataUrl": svg_data_url, "transform": {"export-png": 5}},
            ),
            "main.tex",
        )

        result = await downloader.trigger()

        assert result.is_internal_failure
        assert len(fake_inkscape.calls) == 1
        assert downloader.target_folder.exists()

    @pytest.mark.asyncio
    async def test_tool_failure_keeps_folder(self, manager, svg_data_url, fake_inkscape):
        fake_inkscape.returncode = 1
        downloader = manager.create_json_downloader(
            _payload(
                {"name": "a.svg", "imageDataUrl": svg_data_url, "inkscape": {"export-height": 10}}
            ),
            "main.tex",
        )

        result = await downloader.trigger()

        assert result.is_internal_failure
        assert len(fake_inkscape.calls) == 1
        assert downloader.target_folder.exists()

    @pytest.mark.asyncio
    async def test_empty_transform_still_runs_tool(self, manager, svg_data_url, fake_inkscape):
        downloader = manager.create_json_downloader(
            _payload({"name": "a.svg", "imageDataUrl": svg_data_url, "transform": {}}),
            "main.tex",
        )

        result = await downloader.trigger()

        assert result.ok
        folder = downloader.target_folder
        assert fake_inkscape.calls == [
            {
                "program": "inkscape-test",
                "args": ["--without-gui", f"--file={folder / 'a.svg'}"],
                "timeout": None,
            }
        ]
