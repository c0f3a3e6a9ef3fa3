# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import sys

from proofgen.cli import main

if __name__ == "__main__":
    sys.exit(main())
