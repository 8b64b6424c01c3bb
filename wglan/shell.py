"""
Synchronous external command runner.

Every lifecycle step that shells out goes through run_command so failures
surface as the step's own exception type, carrying the tool's output.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Optional, Sequence, Type

from .exceptions import CommandError

logger = logging.getLogger(__name__)


def run_command(
    argv: Sequence[str],
    error: Type[CommandError],
    action: str,
    timeout: Optional[float] = None,
    combined: bool = True,
) -> str:
    """
    Run a command to completion and return its output.

    Args:
        argv: Command and arguments
        error: Exception class raised on failure
        action: Short description used in the error message ("create the interface")
        timeout: Seconds before the command is killed, or None to wait forever
        combined: Merge stderr into the returned output; when False only
            stdout is returned and stderr is kept for the error message

    Returns:
        The command's output (stdout, or stdout+stderr when combined)

    Raises:
        error: If the command cannot be started, times out or exits non-zero
    """
    cmd = list(argv)
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if combined else subprocess.PIPE,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise error(f"unable to {action}: {cmd[0]} not found", argv=cmd) from e
    except subprocess.TimeoutExpired as e:
        raise error(f"unable to {action}: {cmd[0]} timed out after {timeout}s", argv=cmd) from e
    except OSError as e:
        raise error(f"unable to {action}: {e}", argv=cmd) from e

    if result.returncode != 0:
        output = result.stdout or ""
        if not combined and result.stderr:
            output = f"{output}{result.stderr}"
        output = output.strip()
        detail = f": {output}" if output else ""
        raise error(
            f"unable to {action}: {cmd[0]} exited with status {result.returncode}{detail}",
            argv=cmd,
            returncode=result.returncode,
            output=output,
        )

    return result.stdout or ""
