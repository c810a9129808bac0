"""
Image transform options applied with Inkscape before a document is built.

Only a closed set of Inkscape export options is accepted. Each option is parsed
into a typed value that validates its parameter once and renders the exact
command-line flag passed to the tool.
"""

import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping

from pathvalidate import ValidationError as FilenameValidationError
from pathvalidate import validate_filename

from bundle_prep.exceptions import TransformOptionError

_LEADING_INT_REGEX = re.compile(r"^\s*([+-]?\d+)")


def _parse_int(option: str, value: Any) -> int:
    """
    Reads an integer the lenient way browsers do: numbers are truncated and
    strings contribute their leading digits ("120px" -> 120).
    """
    if isinstance(value, bool):
        raise TransformOptionError(option, "Expected a number parameter.")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TransformOptionError(option, "Expected a finite number parameter.")
        return int(value)
    if isinstance(value, str) and (match := _LEADING_INT_REGEX.match(value)):
        return int(match.group(1))
    raise TransformOptionError(
        option, f"Expected a number parameter but got {value!r}."
    )


class TransformOption:
    """Base class of the supported Inkscape export options."""

    option: str = ""

    def as_flag(self, folder_path: Path) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class ExportPng(TransformOption):
    """Exports the image as PNG under the given file name inside the bundle."""

    file_name: str
    option = "export-png"

    @classmethod
    def parse(cls, value: Any) -> "ExportPng":
        if not isinstance(value, str):
            raise TransformOptionError(cls.option, "File name expected.")
        try:
            validate_filename(value)
        except FilenameValidationError as e:
            raise TransformOptionError(cls.option, f"Invalid file name: {e}") from e
        return cls(value)

    def as_flag(self, folder_path: Path) -> str:
        return f"--export-png={folder_path / self.file_name}"


@dataclass(frozen=True)
class ExportArea(TransformOption):
    """Restricts the export to the rectangle (x0, y0)-(x1, y1)."""

    x0: int
    y0: int
    x1: int
    y1: int
    option = "export-area"

    @classmethod
    def parse(cls, value: Any) -> "ExportArea":
        if not isinstance(value, Mapping):
            raise TransformOptionError(
                cls.option, "Four numbers x0, y0, x1, y1 expected as parameters."
            )
        bounds = {}
        for key in ("x0", "y0", "x1", "y1"):
            if key not in value:
                raise TransformOptionError(
                    cls.option, f"Four numbers x0, y0, x1, y1 expected but '{key}' is missing."
                )
            bounds[key] = _parse_int(cls.option, value[key])
        return cls(**bounds)

    def as_flag(self, folder_path: Path) -> str:
        return f"--export-area={self.x0}:{self.y0}:{self.x1}:{self.y1}"


@dataclass(frozen=True)
class ExportWidth(TransformOption):
    """Sets the width of the exported bitmap in pixels."""

    width: int
    option = "export-width"

    @classmethod
    def parse(cls, value: Any) -> "ExportWidth":
        return cls(_parse_int(cls.option, value))

    def as_flag(self, folder_path: Path) -> str:
        return f"--export-width={self.width}"


@dataclass(frozen=True)
class ExportHeight(TransformOption):
    """Sets the height of the exported bitmap in pixels."""

    height: int
    option = "export-height"

    @classmethod
    def parse(cls, value: Any) -> "ExportHeight":
        return cls(_parse_int(cls.option, value))

    def as_flag(self, folder_path: Path) -> str:
        return f"--export-height={self.height}"


_OPTION_PARSERS: dict[str, Callable[[Any], TransformOption]] = {
    ExportPng.option: ExportPng.parse,
    ExportArea.option: ExportArea.parse,
    ExportWidth.option: ExportWidth.parse,
    ExportHeight.option: ExportHeight.parse,
}


def parse_transform_option(option: str, value: Any) -> TransformOption:
    """
    Builds a typed transform option.

    Raises:
        TransformOptionError: If the option is unsupported or its parameter is
        invalid.
    """
    parser = _OPTION_PARSERS.get(option)
    if parser is None:
        raise TransformOptionError(option, "Unsupported option.")
    return parser(value)


def build_transform_flags(
    transform: Mapping[str, Any], folder_path: Path
) -> list[str]:
    """Parses every option of a transform and renders its Inkscape flags in order."""
    return [
        parse_transform_option(option, value).as_flag(folder_path)
        for option, value in transform.items()
    ]
