# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# environment.py

"""
Isolated Python environment for the circuit's input generator.

The input generator needs a few third-party packages (a JWT library and two
crypto libraries) that we do not want to install into whatever interpreter
runs the pipeline. `provision` creates a throwaway virtual environment,
installs them into it and removes it again once the pipeline is done with it.
"""

import os
import shutil
import subprocess
import tempfile
import venv
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import SimpleNamespace
from typing import Iterable, Iterator

from proofgen.errors import ProvisioningError, ToolInvocationError
from proofgen.tools import run_tool


@dataclass(frozen=True)
class ToolchainEnvironment:
    root: Path
    python: Path
    bin_dir: Path

    def env(self, base: dict[str, str] | None = None) -> dict[str, str]:
        """
        Return a process environment with this virtual environment activated.

        Mirrors what `bin/activate` does: sets VIRTUAL_ENV, puts the
        environment's bin directory first on PATH and drops PYTHONHOME.
        """
        env = dict(os.environ if base is None else base)
        env.pop("PYTHONHOME", None)
        env["VIRTUAL_ENV"] = str(self.root)
        env["PATH"] = os.pathsep.join(
            p for p in (str(self.bin_dir), env.get("PATH", "")) if p
        )
        return env


class _Builder(venv.EnvBuilder):
    # keeps the context venv computed, so we do not guess bin/ vs Scripts/
    def post_setup(self, context: SimpleNamespace) -> None:
        self.context = context


def create_environment(root: str | Path, with_pip: bool) -> ToolchainEnvironment:
    builder = _Builder(clear=True, with_pip=with_pip)
    try:
        builder.create(str(root))
    except (OSError, subprocess.CalledProcessError) as e:
        raise ProvisioningError(f"cannot create virtual environment in {root}: {e}") from e

    context = builder.context
    return ToolchainEnvironment(
        root=Path(context.env_dir),
        python=Path(context.env_exe),
        bin_dir=Path(context.bin_path),
    )


def install_packages(
    environment: ToolchainEnvironment,
    packages: Iterable[str],
    timeout: float | None = None,
) -> None:
    """
    pip install `packages` into `environment`.

    Raises:
        ProvisioningError: If pip fails or times out. There is no retry.
    """
    packages = list(packages)
    if not packages:
        return
    cmd = [
        str(environment.python),
        "-m",
        "pip",
        "install",
        "--disable-pip-version-check",
        *packages,
    ]
    try:
        run_tool(cmd, cwd=environment.root, env=environment.env(), timeout=timeout)
    except ToolInvocationError as e:
        raise ProvisioningError(
            f"installing {' '.join(packages)} failed: {e.message}"
        ) from e


@contextmanager
def provision(
    packages: Iterable[str],
    timeout: float | None = None,
) -> Iterator[ToolchainEnvironment]:
    """
    Create a fresh virtual environment holding `packages` for the duration of
    the `with` block.

    The environment lives in a temporary directory that is deleted when the
    block exits, whether it exits normally or with an exception.

    Raises:
        ProvisioningError: If the environment cannot be created or a package
            cannot be installed.
    """
    packages = list(packages)
    workdir = Path(tempfile.mkdtemp(prefix="proofgen-"))
    try:
        environment = create_environment(workdir / "ig", with_pip=bool(packages))
        install_packages(environment, packages, timeout=timeout)
        yield environment
    finally:
        shutil.rmtree(workdir, ignore_errors=True)
