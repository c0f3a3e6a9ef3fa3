# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

from dataclasses import dataclass
from pathlib import Path

from proofgen.errors import InvalidInputError
from proofgen.files import ensure_directory

USAGE = """\
Usage: proofgen <prover_key_path> <placeholder> [<output_dir>]

Creates proofs for the inputs generated by the circuit's tools/input_gen.py
script. We use these proofs to test the verifier.

Uses <prover_key_path> as the path to the prover key. Relative paths are
resolved against the current directory, not the circuit repository.

Proofs are stored in <output_dir> which defaults to the root of the circuit
repository ({repo_dir})."""


@dataclass(frozen=True)
class PipelineRequest:
    prover_key_path: Path
    output_dir: Path


def usage(repo_dir: str | Path) -> str:
    return USAGE.format(repo_dir=repo_dir)


def validate(args: list[str], repo_dir: str | Path) -> PipelineRequest:
    """
    Check the command line arguments and turn them into a `PipelineRequest`.

    The first argument is the prover key, the second is a historical slot that
    must be present but is not used, and the optional third one overrides the
    output directory (default: `repo_dir`). Relative paths are taken relative
    to the process working directory, not `repo_dir`.

    Nothing touches the filesystem until every check has passed; only then is
    the output directory created.

    Raises:
        InvalidInputError: Fewer than two arguments, or the key path does not
            exist or is not a regular file.
        FilesystemError: The output directory cannot be created.
    """
    if len(args) < 2:
        raise InvalidInputError(usage(repo_dir))

    prover_key = Path(args[0]).expanduser()
    if not prover_key.exists():
        raise InvalidInputError(f"{prover_key} does not exist")
    if not prover_key.is_file():
        raise InvalidInputError(f"{prover_key} is not a file (may be a directory?)")

    output_dir = Path(args[2]).expanduser() if len(args) > 2 else Path(repo_dir)

    return PipelineRequest(
        prover_key_path=prover_key.resolve(),
        output_dir=ensure_directory(output_dir),
    )
