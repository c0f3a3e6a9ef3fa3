# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# tools.py

"""
Run external tools (circom, node, snarkjs, npm, pip, the input generator).

Every invocation is blocking, gets its working directory passed explicitly
and never changes the working directory of this process. Failures of any
kind are reported as `ToolInvocationError`.
"""

import logging
import subprocess
import time
from pathlib import Path
from typing import Mapping

from proofgen.errors import ToolInvocationError

logger = logging.getLogger(__name__)

# how much of a failing tool's stderr ends up in the error message
STDERR_TAIL_LINES = 20


def run_tool(
    cmd: list[str],
    cwd: str | Path,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> str:
    """
    Run `cmd` in `cwd` and return its stripped stdout.

    Args:
        cmd: Program and arguments; no shell is involved.
        cwd: Directory the tool runs in.
        env: Full process environment for the tool, or None to inherit ours.
        timeout: Seconds to wait before the tool is killed, None for no limit.

    Raises:
        ToolInvocationError: If the program cannot be started, exits with a
            non-zero status, or runs past `timeout`.
    """
    cmd = [str(c) for c in cmd]
    name = Path(cmd[0]).name
    logger.debug("running %s in %s", " ".join(cmd), cwd)
    start = time.monotonic()

    try:
        output = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise ToolInvocationError(
            f"{name} not found (is it installed and on PATH?)", command=cmd
        ) from e
    except PermissionError as e:
        raise ToolInvocationError(f"{name} is not executable: {e}", command=cmd) from e
    except subprocess.TimeoutExpired as e:
        raise ToolInvocationError(
            f"{name} did not finish within {timeout} seconds", command=cmd
        ) from e
    except subprocess.CalledProcessError as e:
        stderr = _tail(e.stderr or e.stdout or "")
        logger.error("%s exited with status %d", " ".join(cmd), e.returncode)
        if stderr:
            logger.error("stderr: %s", stderr)
        message = f"{name} exited with status {e.returncode}"
        if stderr:
            message += f"\n{stderr}"
        raise ToolInvocationError(
            message, command=cmd, returncode=e.returncode, stderr=stderr
        ) from e

    logger.debug("%s finished in %.2f seconds", name, time.monotonic() - start)
    return output.stdout.strip()


def _tail(text: str) -> str:
    lines = text.strip().splitlines()
    return "\n".join(lines[-STDERR_TAIL_LINES:])
