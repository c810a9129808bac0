"""
Acquisition jobs that populate a bundle folder from a single source.

Each job takes the folder it should create and returns an AcquisitionResult.
Jobs never raise: every failure is turned into a user-facing or internal
failure result, and the folder is rolled back where the job owns the failure.
"""

import asyncio
import logging
from pathlib import Path

import aiohttp

from bundle_prep.media.http_fetcher import is_success_status, stream_to_file
from bundle_prep.models.result import AcquisitionResult, UserError
from bundle_prep.storage import folders
from bundle_prep.utils.process import execute_command

log = logging.getLogger(__name__)

GIT_CLONE_TIMEOUT_S = 120


async def create_folder(folder_path: Path) -> bool:
    """Creates the bundle folder, logging when it cannot be created."""
    success = await folders.make_folder(folder_path)
    if not success:
        log.error(f"Failed to create temporary directory {folder_path}")
    return success


async def write_text_job(
    folder_path: Path, text: str, file_name: str
) -> AcquisitionResult:
    """Writes literal text into `folder_path/file_name`."""
    log.info(f"Creating text file {file_name} with {len(text)} bytes")
    if not await create_folder(folder_path):
        return AcquisitionResult.internal_failure()

    file_path = folder_path / file_name
    if not await folders.write_file(file_path, text):
        log.error(f"Failed to write {len(text)} bytes of text into file {file_path}")
        await folders.remove_folder(folder_path)
        return AcquisitionResult.internal_failure()
    return AcquisitionResult.success(folder_path)


async def git_clone_job(
    folder_path: Path, url: str, git_binary: str = "git"
) -> AcquisitionResult:
    """
    Shallow-clones a git repository into `folder_path`.

    A failed clone leaves whatever git produced on disk; the folder is only
    reclaimed by disposing the downloader.
    """
    if await folders.exists(folder_path):
        log.error(f"Directory {folder_path} already exists, refusing to clone into it")
        return AcquisitionResult.internal_failure()

    log.info(f"git clone --depth 1 {url} {folder_path}")
    outcome = await execute_command(
        git_binary,
        ["clone", "--depth", "1", url, str(folder_path)],
        timeout=GIT_CLONE_TIMEOUT_S,
    )
    if not outcome.ok:
        log.error(f"Failed to clone git repository {url}: {outcome.describe()}")
        return AcquisitionResult.failure(UserError.git_clone_failed(url))
    return AcquisitionResult.success(folder_path)


async def url_fetch_job(
    folder_path: Path, url: str, file_name: str
) -> AcquisitionResult:
    """Downloads a URL into `folder_path/file_name`."""
    if not await create_folder(folder_path):
        return AcquisitionResult.internal_failure()

    file_path = folder_path / file_name
    log.info(f"wget {url} > {file_path}")
    try:
        status, size = await stream_to_file(url, file_path)
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        detail = str(e) or type(e).__name__
        log.info(f"Tried to load {url} and got error - {detail}")
        await folders.remove_folder(folder_path)
        return AcquisitionResult.failure(UserError.loading_error(url, detail))

    if not is_success_status(status):
        log.info(f"Tried to load {url} and got response status {status}")
        await folders.remove_folder(folder_path)
        return AcquisitionResult.failure(UserError.bad_response(url, status))

    log.info(f"Downloaded {size} bytes from {url}")
    return AcquisitionResult.success(folder_path)


async def tarball_extract_job(
    folder_path: Path, archive_path: Path, tar_binary: str = "tar"
) -> AcquisitionResult:
    """Extracts a tarball into `folder_path`."""
    if not await create_folder(folder_path):
        return AcquisitionResult.internal_failure()

    log.info(f"tar -xf {archive_path} -C {folder_path}")
    outcome = await execute_command(
        tar_binary, ["-xf", str(archive_path), "-C", str(folder_path)]
    )
    if not outcome.ok:
        await folders.remove_folder(folder_path)
        log.error(f"Failed to extract tarball {archive_path}: {outcome.describe()}")
        return AcquisitionResult.failure(UserError.tarball_extraction_failed())
    return AcquisitionResult.success(folder_path)
