# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# errors.py

"""
Error taxonomy for the proof generation pipeline.

Every failure surfaced by a stage derives from `PipelineError`. The
orchestrator tags the error with the stage that was running when it was
raised, so the CLI can name it in a single line.
"""


class PipelineError(Exception):
    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage is None:
            return self.message
        return f"{self.stage}: {self.message}"


class InvalidInputError(PipelineError):
    """Missing arguments or an unusable prover key path."""


class ProvisioningError(PipelineError):
    """The isolated toolchain environment could not be created or populated."""


class ToolInvocationError(PipelineError):
    """
    An external tool failed: non-zero exit, missing executable, timeout, or
    missing expected output.
    """

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
        stage: str | None = None,
    ):
        super().__init__(message, stage)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr


class FilesystemError(PipelineError):
    """A directory or file the pipeline owns could not be created or removed."""


class ProofArtifactError(PipelineError):
    """proof.json / public.json are malformed or do not verify."""
