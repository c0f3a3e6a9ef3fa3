# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

from dataclasses import dataclass
from pathlib import Path

from proofgen.circuit import CompiledCircuitArtifacts
from proofgen.config import PipelineConfig
from proofgen.constants import INPUT_FILE, INPUT_GENERATOR, WITNESS_FILE, WITNESS_SCRIPT
from proofgen.environment import ToolchainEnvironment
from proofgen.errors import ToolInvocationError
from proofgen.files import remove_files, truncate_file
from proofgen.tools import run_tool


@dataclass(frozen=True)
class WitnessArtifact:
    path: Path
    input_document: Path


def generate_input(
    repo_dir: str | Path,
    environment: ToolchainEnvironment,
    config: PipelineConfig,
) -> Path:
    """
    Run tools/input_gen.py inside `environment` to (re)write input.json.

    input.json is truncated first, so an empty file after the generator ran
    means it produced nothing rather than that last run's input was reused.

    Returns:
        Absolute path of the input document.

    Raises:
        ToolInvocationError: If the generator is missing, fails, or leaves
            input.json empty.
        FilesystemError: If input.json cannot be prepared.
    """
    repo_dir = Path(repo_dir).resolve()
    script = repo_dir / INPUT_GENERATOR
    if not script.is_file():
        raise ToolInvocationError(f"input generator {script} not found")

    input_document = truncate_file(repo_dir / INPUT_FILE)
    cmd = [str(environment.python), INPUT_GENERATOR]
    run_tool(cmd, cwd=repo_dir, env=environment.env(), timeout=config.timeout)

    if input_document.stat().st_size == 0:
        raise ToolInvocationError(
            f"{INPUT_GENERATOR} did not write {input_document}", command=cmd
        )
    return input_document


def compute_witness(
    compiled: CompiledCircuitArtifacts,
    input_document: str | Path,
    config: PipelineConfig,
) -> WitnessArtifact:
    """
    Evaluate the compiled circuit on `input_document`.

    Runs `node generate_witness.js main.wasm <input> witness.wtns` in the
    directory circom generated the witness calculator into. A witness left
    over from an earlier run is deleted before node starts.

    Raises:
        ToolInvocationError: If node fails or no witness file appears.
    """
    input_document = Path(input_document).resolve()
    cwd = compiled.generated_dir
    witness = cwd / WITNESS_FILE
    remove_files([witness])

    cmd = [
        config.node,
        WITNESS_SCRIPT,
        compiled.wasm.name,
        str(input_document),
        WITNESS_FILE,
    ]
    run_tool(cmd, cwd=cwd, timeout=config.timeout)

    if not witness.is_file():
        raise ToolInvocationError(
            f"{config.node} succeeded but {witness} was not produced", command=cmd
        )
    return WitnessArtifact(path=witness, input_document=input_document)


def generate_witness(
    repo_dir: str | Path,
    compiled: CompiledCircuitArtifacts,
    environment: ToolchainEnvironment,
    config: PipelineConfig,
) -> WitnessArtifact:
    input_document = generate_input(repo_dir, environment, config)
    return compute_witness(compiled, input_document, config)
