"""
Core acquisition engine.

The `DownloadManager` hands out `Downloader` handles, each wrapping one
acquisition job that populates a temporary folder at most once.
"""

from .download_manager import DownloadManager
from .downloader import CleanupStatus, Downloader, DownloaderState

__all__ = ["CleanupStatus", "DownloadManager", "Downloader", "DownloaderState"]
