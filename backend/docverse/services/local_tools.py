"""
Local engine invoker.

Runs external executables (LibreOffice, Ghostscript, pdftoppm, Tesseract)
as subprocesses inside a scoped workspace and reads their output from disk.
No retries happen here; fallback across engine types is the policy's job.
"""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Optional, Sequence

from docverse.config import Settings
from docverse.services.exceptions import LocalToolError
from docverse.services.workspace import scoped_workspace

logger = logging.getLogger(__name__)

# Characters of stderr kept in logs and errors
STDERR_TAIL = 2000


def tool_available(executable: str) -> bool:
    """Check whether an executable can be found on PATH (or as a path)."""
    return shutil.which(executable) is not None


async def run_tool(
    executable: str,
    args: Sequence[str],
    cwd: Optional[Path] = None,
) -> str:
    """
    Run one executable to completion.

    Args:
        executable: Program name or path
        args: Ordered argument list
        cwd: Working directory

    Returns:
        Captured stdout

    Raises:
        LocalToolError: If the program is missing or exits non-zero
    """
    command = [executable, *args]
    logger.debug("Running %s", " ".join(command))

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd) if cwd else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, PermissionError) as e:
        logger.error("Executable %s could not be started: %s", executable, e)
        raise LocalToolError(f"{executable} is not available") from e

    stdout, stderr = await process.communicate()
    stderr_text = stderr.decode("utf-8", errors="replace")[-STDERR_TAIL:]

    if process.returncode != 0:
        logger.error(
            "%s exited with status %s: %s", executable, process.returncode, stderr_text
        )
        raise LocalToolError(
            f"{executable} exited with status {process.returncode}",
            returncode=process.returncode,
            stderr=stderr_text,
        )

    return stdout.decode("utf-8", errors="replace")


async def run_local_tool(
    executable: str,
    args: Sequence[str],
    input_bytes: bytes,
    *,
    input_name: str,
    output_name: str,
    settings: Settings,
) -> bytes:
    """
    Write input to a scoped workspace, run the tool, return the output bytes.

    ``args`` may contain ``{input}``, ``{output}`` and ``{outdir}``
    placeholders, replaced with absolute workspace paths, and
    ``{profile_uri}``, a file URI for a per-call tool profile directory.

    Raises:
        LocalToolError: Non-zero exit, or a missing or empty output file
    """
    async with scoped_workspace(prefix="docverse-local-", root=settings.temp_dir) as ws:
        input_path = ws.write(input_name, input_bytes)
        placeholders = {
            "input": str(input_path),
            "output": str(ws.file(output_name)),
            "outdir": str(ws.path),
            "profile_uri": (ws.path / "profile").as_uri(),
        }
        resolved = [arg.format(**placeholders) for arg in args]

        await run_tool(executable, resolved, cwd=ws.path)

        try:
            output = ws.read(output_name)
        except FileNotFoundError as e:
            logger.error("%s produced no output file %s", executable, output_name)
            raise LocalToolError(f"{executable} produced no output") from e

        if not output:
            logger.error("%s wrote an empty %s", executable, output_name)
            raise LocalToolError(f"{executable} produced an empty output file")
        return output
