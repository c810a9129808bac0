"""
Parsing and decoding of RFC 2397 data URIs carrying inline image content.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes

# Pre-compiled regex for performance
_DATA_URI_REGEX = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?"
    r"(?P<params>(?:;[\w.+-]+=[\w.+%-]+)*)"
    r"(?P<base64>;base64)?"
    r",(?P<data>.*)$",
    re.IGNORECASE | re.DOTALL,
)


@dataclass(frozen=True)
class DataUri:
    """The parsed parts of a data URI."""

    mime_type: str
    is_base64: bool
    payload: str

    def decode(self) -> bytes:
        """
        Returns the embedded bytes.

        Raises:
            ValueError: If a base64 payload cannot be decoded.
        """
        if self.is_base64:
            compact = "".join(self.payload.split())
            # Accept the URL-safe alphabet and missing padding.
            compact = compact.replace("-", "+").replace("_", "/")
            compact += "=" * (-len(compact) % 4)
            try:
                return base64.b64decode(compact, validate=True)
            except binascii.Error as e:
                raise ValueError(f"Invalid base64 payload: {e}") from e
        return unquote_to_bytes(self.payload)


def parse_data_uri(text: str) -> DataUri | None:
    """Parses a data URI, returning None when the text is not one."""
    match = _DATA_URI_REGEX.match(text.strip())
    if not match:
        return None
    return DataUri(
        mime_type=(match.group("mime") or "text/plain").lower(),
        is_base64=match.group("base64") is not None,
        payload=match.group("data"),
    )
