# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

import logging
import os
import sys

from proofgen.arguments import usage
from proofgen.config import PipelineConfig
from proofgen.constants import ENV_PREFIX
from proofgen.errors import PipelineError
from proofgen.pipeline import Pipeline


def main(argv: list[str] | None = None) -> int:
    """CLI: proofgen <prover_key_path> <placeholder> [<output_dir>]"""
    args = sys.argv[1:] if argv is None else list(argv)

    level = os.environ.get(ENV_PREFIX + "LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = PipelineConfig.from_env()
    except PipelineError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if len(args) < 2:
        print(usage(config.resolve_repo_dir()), file=sys.stderr)
        return 1

    try:
        Pipeline(config).run(args)
    except PipelineError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0
