"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class BundlePrepError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(BundlePrepError):
    """Raised for issues related to configuration loading or validation."""


class PayloadError(BundlePrepError):
    """Raised when a JSON document payload cannot be decoded."""


class TransformOptionError(BundlePrepError):
    """Raised when an image transform option has an invalid parameter."""

    def __init__(self, option: str, reason: str):
        super().__init__(f"Option '{option}' has an error: {reason}")
        self.option = option
        self.reason = reason


class DownloaderDisposedError(BundlePrepError):
    """Raised when a disposed downloader is asked to start its job."""
