"""
Handles the low-level streaming of HTTP responses into files.
"""

import logging
from pathlib import Path

import aiofiles
import aiohttp

log = logging.getLogger(__name__)

# Applies to connecting and to each read; a transfer that keeps receiving data
# is never cut off.
RESPONSE_TIMEOUT_S = 5
CHUNK_SIZE = 131072  # 128 KB


def is_success_status(status: int) -> bool:
    """Statuses in [200, 400) count as a successful download."""
    return 200 <= status < 400


async def stream_to_file(url: str, destination_path: Path) -> tuple[int, int]:
    """
    Streams the body of a GET request into a file.

    The body is only written when the response status is in the success band.

    Args:
        url: The URL to fetch.
        destination_path: The file that receives the body.

    Returns:
        A tuple of (response status, bytes written).

    Raises:
        aiohttp.ClientError: On connection or protocol errors.
        asyncio.TimeoutError: When connecting or a read exceeds the timeout.
        OSError: When the destination file cannot be written.
    """
    timeout = aiohttp.ClientTimeout(
        total=None, connect=RESPONSE_TIMEOUT_S, sock_read=RESPONSE_TIMEOUT_S
    )
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(url, allow_redirects=True) as response:
            if not is_success_status(response.status):
                return response.status, 0

            bytes_written = 0
            async with aiofiles.open(destination_path, "wb") as f:
                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    await f.write(chunk)
                    bytes_written += len(chunk)
            log.debug(f"Streamed {bytes_written} bytes from {url}")
            return response.status, bytes_written
