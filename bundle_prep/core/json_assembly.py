"""
Assembles a document bundle from a JSON payload: a TeX template plus embedded
images, optionally post-processed with Inkscape.

All steps run strictly in payload order so that the tool never runs
concurrently and the first failing image is unambiguous.
"""

import logging
from pathlib import Path

from bundle_prep.exceptions import TransformOptionError
from bundle_prep.media.data_uri import parse_data_uri
from bundle_prep.media.transforms import build_transform_flags
from bundle_prep.models.config import DEFAULT_INKSCAPE_BINARY
from bundle_prep.models.payload import ImageEntry, JsonPayload
from bundle_prep.models.result import AcquisitionResult, UserError
from bundle_prep.storage import folders
from bundle_prep.utils.formatting import format_kb
from bundle_prep.utils.process import execute_command

from .jobs import create_folder

log = logging.getLogger(__name__)


async def _save_images(
    folder_path: Path, images: list[ImageEntry]
) -> AcquisitionResult | None:
    """Decodes and writes every image. Returns a failure result, or None."""
    total_size = 0
    for image in images:
        log.info(
            f"Processing '{image.name}'/~{format_kb(len(image.image_data_url))}"
        )
        data_uri = parse_data_uri(image.image_data_url)
        content = None
        if data_uri is not None:
            try:
                content = data_uri.decode()
            except ValueError as e:
                log.debug(f"Could not decode data URI of '{image.name}': {e}")

        if content is None:
            await folders.remove_folder(folder_path)
            error = UserError.image_data_url_failed(image.name)
            log.info(f"Rejected image payload: {error.message}")
            return AcquisitionResult.failure(error)

        if not await folders.write_file(folder_path / image.name, content):
            log.error(
                f"Failed to create file '{image.name}' of size {format_kb(len(content))}"
            )
            await folders.remove_folder(folder_path)
            return AcquisitionResult.internal_failure()

        total_size += len(content)
        log.info(f"Done image '{image.name}'/{format_kb(len(content))}")

    log.info(f"Saved {len(images)} image(s) of total size {format_kb(total_size)}")
    return None


async def _apply_transforms(
    folder_path: Path, images: list[ImageEntry], inkscape_binary: str
) -> AcquisitionResult | None:
    """Runs Inkscape on every image with a transform. Returns a failure, or None."""
    converted = 0
    for image in images:
        if image.transform is None:
            continue

        image_path = folder_path / image.name
        try:
            flags = build_transform_flags(image.transform, folder_path)
        except TransformOptionError as e:
            log.error(f"Unable to execute inkscape for '{image.name}'. {e}")
            return AcquisitionResult.internal_failure()
        except Exception as e:
            log.error(
                f"Unable to execute inkscape for '{image.name}'. "
                f"Unexpected error while building options: {e}"
            )
            return AcquisitionResult.internal_failure()

        args = ["--without-gui", f"--file={image_path}", *flags]
        outcome = await execute_command(inkscape_binary, args)
        if not outcome.ok:
            log.error(
                f"Unable to execute inkscape for '{image.name}': {outcome.describe()}"
            )
            return AcquisitionResult.internal_failure()

        log.info(f"Executed {inkscape_binary} {' '.join(args)}")
        converted += 1

    log.info(f"{converted} image(s) successfully converted with inkscape.")
    return None


async def json_assembly_job(
    folder_path: Path,
    payload: JsonPayload,
    file_name: str,
    inkscape_binary: str = DEFAULT_INKSCAPE_BINARY,
) -> AcquisitionResult:
    """
    Writes the payload text and images into `folder_path` and applies image
    transforms.

    Failures while writing the text or decoding images roll the folder back.
    Failures while applying transforms leave the folder on disk for the
    downloader to dispose of.
    """
    log.info(f"Creating text file {file_name} of size {len(payload.text)}B")
    log.debug(f"File content is\n{payload.text}")
    if not await create_folder(folder_path):
        return AcquisitionResult.internal_failure()

    file_path = folder_path / file_name
    if not await folders.write_file(file_path, payload.text):
        log.error(f"Failed to create file '{file_path}' of size {len(payload.text)}B")
        await folders.remove_folder(folder_path)
        return AcquisitionResult.internal_failure()

    if failure := await _save_images(folder_path, payload.images):
        return failure

    log.info("Applying inkscape transforms to images (if any)")
    if failure := await _apply_transforms(
        folder_path, payload.images, inkscape_binary
    ):
        return failure

    return AcquisitionResult.success(folder_path)
