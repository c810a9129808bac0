"""
A handle around a single acquisition job and the temporary folder it produces.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable

from bundle_prep.exceptions import DownloaderDisposedError
from bundle_prep.models.result import AcquisitionResult, UserError
from bundle_prep.storage import folders

log = logging.getLogger(__name__)

AcquisitionJob = Callable[[], Awaitable[AcquisitionResult]]


class DownloaderState(Enum):
    """Lifecycle of the wrapped job."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"


class CleanupStatus(Enum):
    """Outcome of disposing a downloader."""

    REMOVED = "removed"  # Folder deleted
    SKIPPED = "skipped"  # Already disposed or nothing on disk
    FAILED = "failed"  # Deletion attempted and failed
    DISABLED = "disabled"  # Cleanup turned off by configuration


class Downloader:
    """
    Runs its job at most once and owns the folder the job creates.

    The job starts on the first call to `trigger()`. Every later or concurrent
    call awaits the same cached result. Once settled, `folder_path` and
    `user_error` can be read synchronously.
    """

    def __init__(
        self, job: AcquisitionJob, target_folder: Path, cleanup_enabled: bool = True
    ):
        self.folder_path: Path | None = None
        self.user_error: UserError | None = None
        self.result: AcquisitionResult | None = None
        self.target_folder = target_folder
        self._job = job
        self._cleanup_enabled = cleanup_enabled
        self._state = DownloaderState.NOT_STARTED
        self._disposed = False
        self._task: asyncio.Task | None = None
        self._gate = asyncio.Lock()

    @property
    def state(self) -> DownloaderState:
        return self._state

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def user_error_message(self) -> str | None:
        return self.user_error.message if self.user_error else None

    async def trigger(self) -> AcquisitionResult:
        """
        Starts the job if it has not been started and waits for its result.

        The job runs as a shielded task: cancelling a caller does not cancel
        the job.

        Raises:
            DownloaderDisposedError: If the downloader was disposed before its
            job was ever started.
        """
        async with self._gate:
            if self._task is None:
                if self._disposed:
                    raise DownloaderDisposedError(
                        f"Downloader for '{self.target_folder}' was already disposed."
                    )
                self._state = DownloaderState.RUNNING
                self._task = asyncio.ensure_future(self._run_job())
        return await asyncio.shield(self._task)

    async def _run_job(self) -> AcquisitionResult:
        try:
            result = await self._job()
        except Exception as e:
            log.error(
                f"Acquisition job for '{self.target_folder}' crashed: {e}",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            result = AcquisitionResult.internal_failure()

        self.result = result
        self.folder_path = result.folder_path
        self.user_error = result.user_error
        self._state = DownloaderState.COMPLETED
        log.info(
            f"Downloading finished: folder_path={self.folder_path}, "
            f"user_error={self.user_error_message}"
        )
        return result

    async def dispose(self) -> CleanupStatus:
        """
        Deletes the folder this downloader allocated, if it exists on disk.

        An in-flight job is awaited first so that cleanup never races with the
        job creating the folder. Repeated calls are no-ops.
        """
        if self._disposed:
            return CleanupStatus.SKIPPED
        self._disposed = True

        if self._task is not None and not self._task.done():
            log.debug(f"Waiting for job of '{self.target_folder}' before cleanup")
            await asyncio.shield(self._task)

        log.info(f"Cleaning up {self.target_folder}")
        if not self._cleanup_enabled:
            log.warning(f"Cleanup ignored for {self.target_folder}")
            return CleanupStatus.DISABLED
        if not await folders.exists(self.target_folder):
            log.warning("Downloader failed to create folder - nothing to clean up")
            return CleanupStatus.SKIPPED

        if not await folders.remove_folder(self.target_folder):
            log.error(f"Downloader failed to remove temp folder {self.target_folder}")
            return CleanupStatus.FAILED
        log.info(f"Downloader removed folder {self.target_folder}")
        return CleanupStatus.REMOVED

    def to_dict(self) -> dict[str, Any]:
        """The caller-facing view of a settled downloader."""
        return {
            "folderPath": str(self.folder_path) if self.folder_path else None,
            "userError": self.user_error_message,
        }
