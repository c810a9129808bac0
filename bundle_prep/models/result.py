"""
Result values produced by acquisition jobs.

A result is either a populated folder, a user-facing error, or neither. The
last shape signals an internal failure whose details only go to the log.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class UserErrorKind(Enum):
    """Kinds of failures that may be shown to the end user."""

    LOADING_BAD_RESPONSE = "loading_bad_response"
    LOADING_ERROR = "loading_error"
    GIT_CLONE_FAILED = "git_clone_failed"
    TARBALL_EXTRACTION_FAILED = "tarball_extraction_failed"
    IMAGE_DATA_URL_EXTRACTION_FAILED = "image_data_url_extraction_failed"


@dataclass(frozen=True)
class UserError:
    """A structured user-facing failure, rendered to text on demand."""

    kind: UserErrorKind
    url: str | None = None
    status_code: int | None = None
    image_name: str | None = None
    detail: str | None = None

    @classmethod
    def bad_response(cls, url: str, status_code: int) -> "UserError":
        return cls(UserErrorKind.LOADING_BAD_RESPONSE, url=url, status_code=status_code)

    @classmethod
    def loading_error(cls, url: str, detail: str) -> "UserError":
        return cls(UserErrorKind.LOADING_ERROR, url=url, detail=detail)

    @classmethod
    def git_clone_failed(cls, url: str) -> "UserError":
        return cls(UserErrorKind.GIT_CLONE_FAILED, url=url)

    @classmethod
    def tarball_extraction_failed(cls) -> "UserError":
        return cls(UserErrorKind.TARBALL_EXTRACTION_FAILED)

    @classmethod
    def image_data_url_failed(cls, image_name: str) -> "UserError":
        return cls(UserErrorKind.IMAGE_DATA_URL_EXTRACTION_FAILED, image_name=image_name)

    @property
    def message(self) -> str:
        """The displayable message for this error."""
        if self.kind is UserErrorKind.LOADING_BAD_RESPONSE:
            return (
                f"failed to download URL {self.url} - "
                f"got response status {self.status_code}"
            )
        if self.kind is UserErrorKind.LOADING_ERROR:
            return f"error while loading {self.url}: {self.detail}"
        if self.kind is UserErrorKind.GIT_CLONE_FAILED:
            return f"failed to clone git repository {self.url}"
        if self.kind is UserErrorKind.TARBALL_EXTRACTION_FAILED:
            return "failed to extract tarball"
        return f"failed to save image {self.image_name} -- expected image data URI"

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class AcquisitionResult:
    """Immutable outcome of a single acquisition job."""

    folder_path: Path | None = None
    user_error: UserError | None = None

    def __post_init__(self):
        if self.folder_path is not None and self.user_error is not None:
            raise ValueError("A result cannot carry both a folder and a user error.")

    @classmethod
    def success(cls, folder_path: Path) -> "AcquisitionResult":
        return cls(folder_path=folder_path)

    @classmethod
    def failure(cls, user_error: UserError) -> "AcquisitionResult":
        return cls(user_error=user_error)

    @classmethod
    def internal_failure(cls) -> "AcquisitionResult":
        return cls()

    @property
    def ok(self) -> bool:
        return self.folder_path is not None

    @property
    def is_internal_failure(self) -> bool:
        return self.folder_path is None and self.user_error is None

    def to_dict(self) -> dict[str, Any]:
        """Renders the result in the caller-facing output contract."""
        return {
            "folderPath": str(self.folder_path) if self.folder_path else None,
            "userError": self.user_error.message if self.user_error else None,
        }
