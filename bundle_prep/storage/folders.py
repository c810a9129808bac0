"""
Asynchronous filesystem helpers with a simple success/failure contract.

Every helper logs the underlying OSError and reports the outcome as a boolean
so that jobs can translate it into a result without handling exceptions.
"""

import asyncio
import logging
import os
import shutil
from pathlib import Path

import aiofiles

log = logging.getLogger(__name__)


async def exists(path: Path) -> bool:
    """Checks whether a file or folder exists at the given path."""
    return await asyncio.to_thread(os.path.exists, path)


async def make_folder(folder_path: Path) -> bool:
    """Creates a single folder. Fails if it already exists."""
    try:
        await asyncio.to_thread(os.mkdir, folder_path)
        return True
    except OSError as e:
        log.error(f"Failed to create folder '{folder_path}': {e}")
        return False


async def write_file(file_path: Path, content: str | bytes) -> bool:
    """Writes text (UTF-8) or bytes to a file, replacing any existing content."""
    mode = "wb" if isinstance(content, bytes) else "w"
    encoding = None if isinstance(content, bytes) else "utf-8"
    try:
        async with aiofiles.open(file_path, mode, encoding=encoding) as f:
            await f.write(content)
        return True
    except OSError as e:
        log.error(f"Failed to write file '{file_path}': {e}")
        return False


async def remove_folder(folder_path: Path) -> bool:
    """Removes a folder and everything below it."""
    try:
        await asyncio.to_thread(shutil.rmtree, folder_path)
        return True
    except OSError as e:
        log.error(f"Failed to remove folder '{folder_path}': {e}")
        return False


def _recreate_if_non_empty(folder_path: Path) -> None:
    if folder_path.is_dir():
        if not any(folder_path.iterdir()):
            return
        shutil.rmtree(folder_path)
    folder_path.mkdir(parents=True)


async def recreate_folder_if_non_empty(folder_path: Path) -> bool:
    """Ensures the folder exists and is empty, recreating it when needed."""
    try:
        await asyncio.to_thread(_recreate_if_non_empty, folder_path)
        return True
    except OSError as e:
        log.error(f"Failed to prepare folder '{folder_path}': {e}")
        return False
