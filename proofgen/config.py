# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# config.py

"""
Operator configuration for the pipeline.

Defaults come from `proofgen.constants`; `PipelineConfig.from_env` lets an
operator override them with PROOFGEN_* environment variables:

    PROOFGEN_REPO_DIR           circuit repository root
    PROOFGEN_CIRCOM             circuit compiler executable
    PROOFGEN_NODE               node executable
    PROOFGEN_SNARKJS            snarkjs executable
    PROOFGEN_NPM                npm executable
    PROOFGEN_TIMEOUT            seconds allowed per external tool invocation
    PROOFGEN_PACKAGES           whitespace separated input generator deps
    PROOFGEN_VERIFICATION_KEY   snarkjs verification_key.json to check against
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from proofgen.constants import (
    CIRCOM,
    CIRCUIT_ENTRY,
    ENV_PREFIX,
    INPUT_GENERATOR_PACKAGES,
    NODE,
    NPM,
    SNARKJS,
    TEMPLATES_DIR,
)
from proofgen.errors import InvalidInputError


@dataclass
class PipelineConfig:
    repo_dir: Path | None = None
    circom: str = CIRCOM
    node: str = NODE
    snarkjs: str = SNARKJS
    npm: str = NPM
    timeout: float | None = None
    packages: tuple[str, ...] = INPUT_GENERATOR_PACKAGES
    verification_key: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PipelineConfig":
        """
        Build a config from PROOFGEN_* variables, falling back to defaults.

        Raises:
            InvalidInputError: If PROOFGEN_TIMEOUT is not a positive number.
        """
        environ = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            value = environ.get(ENV_PREFIX + name)
            return value if value else None

        config = cls()
        if (repo_dir := get("REPO_DIR")) is not None:
            config.repo_dir = Path(repo_dir)
        config.circom = get("CIRCOM") or config.circom
        config.node = get("NODE") or config.node
        config.snarkjs = get("SNARKJS") or config.snarkjs
        config.npm = get("NPM") or config.npm

        if (timeout := get("TIMEOUT")) is not None:
            config.timeout = parse_timeout(timeout)

        packages = environ.get(ENV_PREFIX + "PACKAGES")
        if packages is not None:
            config.packages = tuple(packages.split())

        if (vk := get("VERIFICATION_KEY")) is not None:
            config.verification_key = Path(vk)
        return config

    def resolve_repo_dir(self, start: str | Path | None = None) -> Path:
        if self.repo_dir is not None:
            return Path(self.repo_dir).resolve()
        return find_repo_root(start)


def parse_timeout(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError:
        raise InvalidInputError(f"{ENV_PREFIX}TIMEOUT must be a number, got {value!r}")
    if timeout <= 0:
        raise InvalidInputError(f"{ENV_PREFIX}TIMEOUT must be positive, got {value!r}")
    return timeout


def find_repo_root(start: str | Path | None = None) -> Path:
    """
    Locate the circuit repository root.

    Walks from `start` (default: the current directory) towards the filesystem
    root and returns the first directory containing `templates/main.circom`.
    When none does, `start` itself is returned.
    """
    start = Path(start or Path.cwd()).resolve()
    for candidate in (start, *start.parents):
        if (candidate / TEMPLATES_DIR / CIRCUIT_ENTRY).is_file():
            return candidate
    return start
