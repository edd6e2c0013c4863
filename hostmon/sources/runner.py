from __future__ import annotations

import asyncio
import logging
import subprocess
import sys

from hostmon.config import TOOL_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


def _creation_flags() -> int:
    # Keep wmic from flashing a console window when run from a GUI process.
    if sys.platform == "win32":
        return getattr(subprocess, "CREATE_NO_WINDOW", 0)
    return 0


async def run_tool(
    argv: list[str],
    timeout: float = TOOL_TIMEOUT_SECONDS,
    allow_nonzero: bool = False,
) -> str | None:
    """Run an external diagnostic command and return its stdout.

    Returns ``None`` when the binary is missing or not executable, when the
    command runs longer than ``timeout`` seconds, or when it exits non-zero
    (unless ``allow_nonzero`` is set). Stdin is closed so the tool can never
    block on an interactive prompt.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
            creationflags=_creation_flags(),
        )
    except OSError as exc:
        logger.debug("Cannot start %s: %s", argv[0], exc)
        return None

    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.debug("%s timed out after %.1fs", argv[0], timeout)
        await _kill(proc)
        return None

    if proc.returncode != 0 and not allow_nonzero:
        logger.debug("%s exited with status %s", argv[0], proc.returncode)
        return None

    return stdout.decode(errors="replace")


async def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        return
    await proc.wait()
