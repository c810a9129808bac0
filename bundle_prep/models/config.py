"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_INKSCAPE_BINARY = "/usr/bin/inkscape"
DEFAULT_ROOT_FOLDER = "tmp"


class PrepConfig(BaseModel):
    """A validated configuration model for the application."""

    # Folders
    root_folder: Path = Field(Path(DEFAULT_ROOT_FOLDER), validate_default=True)
    keep_temp_folders: bool = False

    # External tools
    git_binary: str = "git"
    tar_binary: str = "tar"
    inkscape_binary: str = DEFAULT_INKSCAPE_BINARY

    log_level: str = "INFO"

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("root_folder")
    @classmethod
    def validate_root_folder(cls, v: Path) -> Path:
        """Resolves the root folder and refuses the filesystem root."""
        resolved = v.expanduser().resolve()
        if resolved == Path(resolved.anchor):
            raise ValueError("Root folder cannot be the filesystem root.")
        return resolved

    @field_validator("git_binary", "tar_binary", "inkscape_binary")
    @classmethod
    def validate_binary(cls, v: str) -> str:
        if not v:
            raise ValueError("Tool binary cannot be empty.")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
