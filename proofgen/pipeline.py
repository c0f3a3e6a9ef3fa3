# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# pipeline.py

"""
Drive the proof generation stages in order.

    START -> VALIDATED -> PROVISIONED -> COMPILED -> WITNESS_GENERATED
          -> PROVED -> CHECKED -> DONE

Each stage needs the previous one to have succeeded. The first error moves
the pipeline to FAILED, is tagged with the stage that raised it and is
re-raised; nothing after it runs and nothing is retried.
"""

from enum import Enum
from typing import Callable, ContextManager

from proofgen.arguments import PipelineRequest, validate
from proofgen.circuit import compile_circuit
from proofgen.config import PipelineConfig
from proofgen.constants import TEMPLATES_DIR
from proofgen.environment import ToolchainEnvironment, provision
from proofgen.errors import PipelineError
from proofgen.proof_check import ProofCheck, check_proof_artifacts
from proofgen.prover import ProofArtifacts, discard, prove
from proofgen.witness import generate_witness


class Stage(Enum):
    START = "start"
    VALIDATED = "validate"
    PROVISIONED = "provision"
    COMPILED = "compile"
    WITNESS_GENERATED = "witness"
    PROVED = "prove"
    CHECKED = "check"
    DONE = "done"
    FAILED = "failed"


Provisioner = Callable[..., ContextManager[ToolchainEnvironment]]


class Pipeline:
    """
    One run of the proof generation pipeline.

    Args:
        config: Tool locations, repository root, timeout, packages and the
            optional verification key.
        provisioner: Context manager factory creating the isolated input
            generator environment; called as
            `provisioner(packages, timeout=...)`.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        provisioner: Provisioner = provision,
    ):
        self.config = config or PipelineConfig()
        self.provisioner = provisioner
        self.repo_dir = self.config.resolve_repo_dir()
        self.stage = Stage.START
        self._current = Stage.START
        self.request: PipelineRequest | None = None
        self.check: ProofCheck | None = None

    def _step(self, stage: Stage, fn: Callable, *args):
        self._current = stage
        result = fn(*args)
        self.stage = stage
        return result

    def run(self, args: list[str]) -> ProofArtifacts:
        """
        Validate `args`, then compile, generate the witness, prove and check.

        Raises:
            PipelineError: Whatever the failing stage raised, with `stage` set.
        """
        self._current = Stage.VALIDATED
        try:
            return self._run(args)
        except PipelineError as e:
            if e.stage is None:
                e.stage = self._current.value
            self.stage = Stage.FAILED
            raise

    def _run(self, args: list[str]) -> ProofArtifacts:
        config = self.config
        templates_dir = self.repo_dir / TEMPLATES_DIR

        print(f"Executing from directory: {self.repo_dir}")
        request = self._step(Stage.VALIDATED, validate, args, self.repo_dir)
        self.request = request
        print()
        print(f"Using proving key from {request.prover_key_path}")

        print()
        print("Creating python3 virtual env w/ deps...")
        self._current = Stage.PROVISIONED
        with self.provisioner(config.packages, timeout=config.timeout) as environment:
            self.stage = Stage.PROVISIONED

            print()
            print("(Re)compiling circuit. This will take several seconds...")
            compiled = self._step(Stage.COMPILED, compile_circuit, templates_dir, config)

            print()
            print("Running input generator and computing witness...")
            witness = self._step(
                Stage.WITNESS_GENERATED,
                generate_witness,
                self.repo_dir,
                compiled,
                environment,
                config,
            )

        print()
        print("Generating proof. Should take around 30 seconds...")
        artifacts = self._step(
            Stage.PROVED, prove, request.prover_key_path, witness, request.output_dir, config
        )

        try:
            self.check = self._step(
                Stage.CHECKED, check_proof_artifacts, artifacts, config.verification_key
            )
        except PipelineError:
            discard(artifacts)
            raise
        if self.check.verified:
            print()
            print(f"Proof verifies against {config.verification_key}")

        self.stage = Stage.DONE
        print()
        print(f"Done. Find the proof in {artifacts.proof} and public signals in {artifacts.public}")
        return artifacts
