"""
Runs external tools as asyncio subprocesses.
"""

import asyncio
import logging
from dataclasses import dataclass

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOutcome:
    """Exit status and captured output of a finished command."""

    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    def describe(self) -> str:
        """A one-line explanation of why the command did not succeed."""
        if self.error:
            return self.error
        if self.timed_out:
            return "command timed out"
        detail = self.stderr.strip() or self.stdout.strip()
        return f"exit code {self.returncode}" + (f": {detail}" if detail else "")


async def execute_command(
    program: str, args: list[str], timeout: float | None = None
) -> CommandOutcome:
    """
    Runs a program to completion and captures its output.

    Args:
        program: Executable name or path.
        args: Command-line arguments.
        timeout: Seconds after which the process is killed. None waits forever.

    Returns:
        The command outcome. Failures to spawn the process are reported in
        `error` rather than raised.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            program,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        log.debug(f"Could not start '{program}': {e}")
        return CommandOutcome(returncode=None, error=f"could not start {program}: {e}")

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        log.debug(f"'{program}' killed after {timeout}s timeout.")
        return CommandOutcome(returncode=process.returncode, timed_out=True)

    return CommandOutcome(
        returncode=process.returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
