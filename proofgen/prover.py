# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

from dataclasses import dataclass
from pathlib import Path

from proofgen.config import PipelineConfig
from proofgen.constants import PROOF_FILE, PUBLIC_FILE
from proofgen.errors import PipelineError, ToolInvocationError
from proofgen.files import remove_files
from proofgen.tools import run_tool
from proofgen.witness import WitnessArtifact


@dataclass(frozen=True)
class ProofArtifacts:
    proof: Path
    public: Path


def proof_artifacts(output_dir: str | Path) -> ProofArtifacts:
    output_dir = Path(output_dir)
    return ProofArtifacts(proof=output_dir / PROOF_FILE, public=output_dir / PUBLIC_FILE)


def prove(
    prover_key_path: str | Path,
    witness: WitnessArtifact,
    output_dir: str | Path,
    config: PipelineConfig,
) -> ProofArtifacts:
    """
    Generate a Groth16 proof with snarkjs.

    proof.json and public.json in `output_dir` are deleted before snarkjs is
    started, and again if it fails, so a failed run leaves no artifacts rather
    than stale or partially written ones.

    Raises:
        FilesystemError: If a stale artifact cannot be deleted.
        ToolInvocationError: If snarkjs fails or does not write both files.
    """
    artifacts = proof_artifacts(output_dir)
    discard(artifacts)

    cmd = [
        config.snarkjs,
        "groth16",
        "prove",
        str(prover_key_path),
        str(witness.path),
        str(artifacts.proof),
        str(artifacts.public),
    ]
    try:
        run_tool(cmd, cwd=Path(output_dir), timeout=config.timeout)

        missing = [p for p in (artifacts.proof, artifacts.public) if not p.is_file()]
        if missing:
            raise ToolInvocationError(
                f"{config.snarkjs} succeeded but did not write "
                + ", ".join(str(p) for p in missing),
                command=cmd,
            )
    except PipelineError:
        discard(artifacts)
        raise
    return artifacts


def discard(artifacts: ProofArtifacts) -> None:
    """Delete proof.json and public.json, whichever of them exist."""
    remove_files([artifacts.proof, artifacts.public])
