# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# circuit repository layout
TEMPLATES_DIR = "templates"
CIRCUIT_ENTRY = "main.circom"
CIRCUIT_NAME = "main"
GENERATED_DIR = f"{CIRCUIT_NAME}_js"
WITNESS_SCRIPT = "generate_witness.js"
INPUT_GENERATOR = "tools/input_gen.py"

# intermediate artifacts
INPUT_FILE = "input.json"
WITNESS_FILE = "witness.wtns"

# outputs
PROOF_FILE = "proof.json"
PUBLIC_FILE = "public.json"

# input_gen.py imports jwt, Crypto and cryptography
INPUT_GENERATOR_PACKAGES = ("pyjwt", "pycryptodome", "cryptography")

# external tools, resolved through PATH unless overridden
CIRCOM = "circom"
NODE = "node"
SNARKJS = "snarkjs"
NPM = "npm"

# environment variables read by PipelineConfig.from_env
ENV_PREFIX = "PROOFGEN_"
