"""
Pydantic models for the JSON document payload.

A payload carries a TeX (LaTeX) template together with the images it refers to
by name. Each image is embedded as a data URI and may request a transform that
is applied with Inkscape before the document is built, e.g.:

    {"export-png": "file.png", "export-area": {"x0": 0, "y0": 0, "x1": 100, "y1": 200}}
"""

from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from bundle_prep.exceptions import PayloadError

# Long Inkscape option names accepted in an image transform.
SUPPORTED_TRANSFORM_OPTIONS = ("export-png", "export-area", "export-width", "export-height")


class ImageEntry(BaseModel):
    """A single image referenced from the document template."""

    name: str
    image_data_url: str = Field(
        validation_alias=AliasChoices("imageDataUrl", "image_data_url")
    )
    transform: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("transform", "inkscape")
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Image name cannot be empty.")
        return v

    @field_validator("transform")
    @classmethod
    def validate_transform_keys(
        cls, v: dict[str, Any] | None
    ) -> dict[str, Any] | None:
        """Rejects option names outside the supported allow-list."""
        if v is None:
            return v
        unknown = [key for key in v if key not in SUPPORTED_TRANSFORM_OPTIONS]
        if unknown:
            raise ValueError(
                f"Unsupported transform option(s): {', '.join(unknown)}. "
                f"Allowed: {', '.join(SUPPORTED_TRANSFORM_OPTIONS)}."
            )
        return v


class JsonPayload(BaseModel):
    """A document template plus the images it embeds."""

    text: str
    images: list[ImageEntry] = Field(default_factory=list)

    @classmethod
    def decode(cls, data: "JsonPayload | Mapping[str, Any]") -> "JsonPayload":
        """
        Builds a payload from a decoded JSON mapping.

        Raises:
            PayloadError: If the mapping does not describe a valid payload.
        """
        if isinstance(data, cls):
            return data
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise PayloadError(f"Invalid JSON document payload:\n{e}") from e
