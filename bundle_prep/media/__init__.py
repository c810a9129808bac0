"""
Media Processing Layer.

This package is responsible for turning remote and inline content into files:
HTTP streaming, data URI decoding and Inkscape transform options.
"""

from .data_uri import DataUri, parse_data_uri
from .http_fetcher import stream_to_file
from .transforms import build_transform_flags, parse_transform_option

__all__ = [
    "DataUri",
    "build_transform_flags",
    "parse_data_uri",
    "parse_transform_option",
    "stream_to_file",
]
