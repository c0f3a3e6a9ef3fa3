# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

from dataclasses import dataclass
from pathlib import Path

from proofgen.config import PipelineConfig
from proofgen.constants import CIRCUIT_ENTRY, CIRCUIT_NAME, GENERATED_DIR
from proofgen.errors import ToolInvocationError
from proofgen.tools import run_tool


@dataclass(frozen=True)
class CompiledCircuitArtifacts:
    r1cs: Path
    wasm: Path
    sym: Path
    generated_dir: Path


def library_root(config: PipelineConfig, cwd: str | Path) -> Path:
    """
    Return the global node_modules directory, where circomlib is installed.
    """
    root = run_tool([config.npm, "root", "-g"], cwd=cwd, timeout=config.timeout)
    if not root:
        raise ToolInvocationError(f"{config.npm} root -g printed nothing")
    return Path(root)


def compile_circuit(
    templates_dir: str | Path, config: PipelineConfig
) -> CompiledCircuitArtifacts:
    """
    (Re)compile the circuit in `templates_dir`.

    Runs `circom -l <npm root -g> main.circom --r1cs --wasm --sym` inside
    `templates_dir`. Outputs from an earlier run are overwritten by the
    compiler; nothing is cleaned up when it fails.

    Raises:
        ToolInvocationError: If the entry file is missing or circom fails.
    """
    templates_dir = Path(templates_dir)
    entry = templates_dir / CIRCUIT_ENTRY
    if not entry.is_file():
        raise ToolInvocationError(f"circuit entry file {entry} not found")

    lib = library_root(config, cwd=templates_dir)
    cmd = [config.circom, "-l", str(lib), CIRCUIT_ENTRY, "--r1cs", "--wasm", "--sym"]
    run_tool(cmd, cwd=templates_dir, timeout=config.timeout)

    generated_dir = templates_dir / GENERATED_DIR
    artifacts = CompiledCircuitArtifacts(
        r1cs=templates_dir / f"{CIRCUIT_NAME}.r1cs",
        wasm=generated_dir / f"{CIRCUIT_NAME}.wasm",
        sym=templates_dir / f"{CIRCUIT_NAME}.sym",
        generated_dir=generated_dir,
    )
    if not artifacts.wasm.is_file():
        raise ToolInvocationError(
            f"{config.circom} succeeded but {artifacts.wasm} was not produced",
            command=cmd,
        )
    return artifacts
