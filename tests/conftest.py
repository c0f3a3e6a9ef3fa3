# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# tests/conftest.py

import sys
from contextlib import contextmanager
from pathlib import Path
from types import SimpleNamespace

import pytest

from fakes import FAKE_CIRCOM, FAKE_NODE, FAKE_NPM, FAKE_SNARKJS, INPUT_GEN, sample_proof, save_json, write_script
from proofgen.config import PipelineConfig
from proofgen.environment import ToolchainEnvironment


@pytest.fixture
def fake_provisioner():
    """
    Provisioner yielding the interpreter running the tests instead of a new
    virtual environment; records the packages it was asked for.
    """
    calls = []

    @contextmanager
    def host_environment(packages, timeout=None):
        calls.append(list(packages))
        python = Path(sys.executable)
        yield ToolchainEnvironment(root=python.parent.parent, python=python, bin_dir=python.parent)

    host_environment.calls = calls
    return host_environment


@pytest.fixture
def circuit_repo(tmp_path):
    """
    A circuit repository with templates/main.circom and tools/input_gen.py,
    plus fake circom, npm, node and snarkjs executables in a bin directory.
    """
    repo = tmp_path / "repo"
    (repo / "templates").mkdir(parents=True)
    (repo / "templates" / "main.circom").write_text("pragma circom 2.1.3;\n")
    (repo / "tools").mkdir()
    (repo / "tools" / "input_gen.py").write_text(INPUT_GEN)

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    fixture = bin_dir / "proof.fixture.json"
    save_json(fixture, sample_proof())

    config = PipelineConfig(
        repo_dir=repo,
        circom=str(write_script(bin_dir / "circom", FAKE_CIRCOM)),
        npm=str(write_script(bin_dir / "npm", FAKE_NPM)),
        node=str(write_script(bin_dir / "node", FAKE_NODE)),
        snarkjs=str(write_script(bin_dir / "snarkjs", FAKE_SNARKJS.format(fixture=fixture))),
        packages=(),
        timeout=30,
    )

    key = tmp_path / "key.zkey"
    key.write_bytes(b"zkey")

    return SimpleNamespace(repo=repo, bin=bin_dir, config=config, key=key)
