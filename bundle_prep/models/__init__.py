"""
Data Models Layer.

This package contains the models that define the core data structures used
throughout the application: configuration, job payloads and job results.
"""

from .config import PrepConfig
from .payload import ImageEntry, JsonPayload
from .result import AcquisitionResult, UserError, UserErrorKind

__all__ = [
    "AcquisitionResult",
    "ImageEntry",
    "JsonPayload",
    "PrepConfig",
    "UserError",
    "UserErrorKind",
]
