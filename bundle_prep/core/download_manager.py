"""
The factory for downloaders: owns the root folder and hands out unique
temporary folder names under it.
"""

import logging
import threading
from functools import partial
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping

from bundle_prep.models.config import PrepConfig
from bundle_prep.models.payload import JsonPayload
from bundle_prep.models.result import AcquisitionResult
from bundle_prep.storage import folders

from .downloader import AcquisitionJob, Downloader
from .jobs import git_clone_job, tarball_extract_job, url_fetch_job, write_text_job
from .json_assembly import json_assembly_job

log = logging.getLogger(__name__)


class DownloadManager:
    """Creates downloaders whose folders live under a single root folder."""

    def __init__(self, folder_path: Path, config: PrepConfig | None = None):
        self.config = config or PrepConfig()
        self._folder_path = Path(folder_path)
        self._counter = 0
        self._counter_lock = threading.Lock()

    @classmethod
    async def create(
        cls, folder_path: Path | str, config: PrepConfig | None = None
    ) -> "DownloadManager | None":
        """
        Prepares an empty root folder and returns a manager for it.

        Returns:
            The manager, or None if the root folder could not be prepared.
        """
        folder_path = Path(folder_path)
        if not await folders.recreate_folder_if_non_empty(folder_path):
            log.error(f"Failed to create folder for downloader - {folder_path}")
            return None
        return cls(folder_path, config)

    @property
    def folder_path(self) -> Path:
        return self._folder_path

    def next_name(self) -> Path:
        """Allocates a fresh folder name. Names are never reused."""
        with self._counter_lock:
            self._counter += 1
            counter = self._counter
        return self._folder_path / f"tmp_{counter}"

    def _new_downloader(
        self, job_factory: Callable[[Path], Awaitable[AcquisitionResult]]
    ) -> Downloader:
        folder_path = self.next_name()
        job: AcquisitionJob = partial(job_factory, folder_path)
        return Downloader(
            job, folder_path, cleanup_enabled=not self.config.keep_temp_folders
        )

    def create_text_downloader(self, text: str, file_name: str) -> Downloader:
        return self._new_downloader(
            partial(write_text_job, text=text, file_name=file_name)
        )

    def create_git_downloader(self, url: str) -> Downloader:
        return self._new_downloader(
            partial(git_clone_job, url=url, git_binary=self.config.git_binary)
        )

    def create_url_downloader(self, url: str, file_name: str) -> Downloader:
        return self._new_downloader(
            partial(url_fetch_job, url=url, file_name=file_name)
        )

    def create_tarball_extractor(self, archive_path: Path | str) -> Downloader:
        return self._new_downloader(
            partial(
                tarball_extract_job,
                archive_path=Path(archive_path),
                tar_binary=self.config.tar_binary,
            )
        )

    def create_json_downloader(
        self, payload: JsonPayload | Mapping[str, Any], file_name: str
    ) -> Downloader:
        """
        Creates a downloader that assembles a document from a JSON payload.

        Raises:
            PayloadError: If a raw payload does not decode, including when an
            image requests an unsupported transform option.
        """
        payload = JsonPayload.decode(payload)
        return self._new_downloader(
            partial(
                json_assembly_job,
                payload=payload,
                file_name=file_name,
                inkscape_binary=self.config.inkscape_binary,
            )
        )
