# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import pytest
from py_ecc.optimized_bn128 import G1, G2, curve_order, field_modulus, multiply

from fakes import g1_json, g2_json, sample_proof, save_json, twist_point_outside_subgroup
from proofgen.errors import ProofArtifactError
from proofgen.proof_check import (
    check_proof_artifacts,
    parse_proof,
    parse_public_signals,
    parse_verification_key,
    verify_proof,
)
from proofgen.prover import proof_artifacts

# verification key secrets
alpha, beta, gamma, delta = 2, 3, 5, 7
ic0, ic1 = 11, 13

public_signal = 42


def toy_verification_key() -> dict:
    return {
        "protocol": "groth16",
        "curve": "bn128",
        "nPublic": 1,
        "vk_alpha_1": g1_json(multiply(G1, alpha)),
        "vk_beta_2": g2_json(multiply(G2, beta)),
        "vk_gamma_2": g2_json(multiply(G2, gamma)),
        "vk_delta_2": g2_json(multiply(G2, delta)),
        "IC": [g1_json(multiply(G1, ic0)), g1_json(multiply(G1, ic1))],
    }


def toy_proof(x: int = 17, y: int = 19) -> dict:
    # pick A = [x]G1, B = [y]G2 and solve the verification equation for C
    vk_x = ic0 + ic1 * public_signal
    c = (x * y - alpha * beta - vk_x * gamma) * pow(delta, -1, curve_order) % curve_order
    return {
        "pi_a": g1_json(multiply(G1, x)),
        "pi_b": g2_json(multiply(G2, y)),
        "pi_c": g1_json(multiply(G1, c)),
        "protocol": "groth16",
        "curve": "bn128",
    }


def test_sample_proof_parses():
    proof = parse_proof(sample_proof())
    assert len(proof.a) == 3
    assert len(proof.b) == 3


def test_missing_fields():
    data = sample_proof()
    del data["pi_c"]
    with pytest.raises(ProofArtifactError, match="pi_c"):
        parse_proof(data)


def test_point_off_curve():
    data = sample_proof()
    data["pi_a"] = ["1", "3", "1"]
    with pytest.raises(ProofArtifactError, match="G1"):
        parse_proof(data)


def test_g2_point_off_twist():
    data = sample_proof()
    data["pi_b"][0] = ["1", "1"]
    with pytest.raises(ProofArtifactError, match="G2"):
        parse_proof(data)


def test_coordinate_outside_field():
    data = sample_proof()
    data["pi_a"] = [str(field_modulus + 1), "2", "1"]
    with pytest.raises(ProofArtifactError, match="base field"):
        parse_proof(data)


def test_wrong_protocol():
    data = sample_proof()
    data["protocol"] = "plonk"
    with pytest.raises(ProofArtifactError, match="plonk"):
        parse_proof(data)


def test_public_signals():
    assert parse_public_signals(["1", "42"]) == ["1", "42"]
    with pytest.raises(ProofArtifactError):
        parse_public_signals({"inputs": ["1"]})
    with pytest.raises(ProofArtifactError):
        parse_public_signals([42])
    with pytest.raises(ProofArtifactError, match="scalar field"):
        parse_public_signals([str(curve_order)])


def test_verification_key_missing_ic():
    vk = toy_verification_key()
    del vk["IC"]
    with pytest.raises(ProofArtifactError, match="IC"):
        parse_verification_key(vk)


@pytest.mark.parametrize("n_public", ["abc", None, 1.5, True])
def test_verification_key_non_integer_n_public(n_public):
    vk = toy_verification_key()
    vk["nPublic"] = n_public
    with pytest.raises(ProofArtifactError, match="nPublic"):
        parse_verification_key(vk)


def test_verification_key_n_public_as_string():
    vk = toy_verification_key()
    vk["nPublic"] = "1"
    assert parse_verification_key(vk).n_public == 1


def test_verification_key_ic_not_a_list():
    vk = toy_verification_key()
    vk["IC"] = "IC"
    with pytest.raises(ProofArtifactError, match="IC must be a list"):
        parse_verification_key(vk)


def test_g2_point_outside_subgroup():
    data = sample_proof()
    data["pi_b"] = twist_point_outside_subgroup()
    with pytest.raises(ProofArtifactError, match="subgroup"):
        parse_proof(data)


def test_verify_toy_proof():
    vk = parse_verification_key(toy_verification_key())
    proof = parse_proof(toy_proof())
    assert verify_proof(vk, proof, [str(public_signal)])


def test_tampered_public_signal_does_not_verify():
    vk = parse_verification_key(toy_verification_key())
    proof = parse_proof(toy_proof())
    assert not verify_proof(vk, proof, [str(public_signal + 1)])


def test_public_count_mismatch():
    vk = parse_verification_key(toy_verification_key())
    proof = parse_proof(toy_proof())
    with pytest.raises(ProofArtifactError, match="count mismatch"):
        verify_proof(vk, proof, ["1", "2"])


def test_check_artifacts_without_key(tmp_path):
    artifacts = proof_artifacts(tmp_path)
    save_json(artifacts.proof, sample_proof())
    save_json(artifacts.public, ["1", "42"])

    check = check_proof_artifacts(artifacts)

    assert check.public == ["1", "42"]
    assert check.verified is None


def test_check_artifacts_with_key(tmp_path):
    artifacts = proof_artifacts(tmp_path)
    save_json(artifacts.proof, toy_proof())
    save_json(artifacts.public, [str(public_signal)])
    vk_path = tmp_path / "verification_key.json"
    save_json(vk_path, toy_verification_key())

    assert check_proof_artifacts(artifacts, vk_path).verified is True


def test_check_artifacts_invalid_json(tmp_path):
    artifacts = proof_artifacts(tmp_path)
    artifacts.proof.write_text("{not json")
    save_json(artifacts.public, [])
    with pytest.raises(ProofArtifactError, match="not valid JSON"):
        check_proof_artifacts(artifacts)


def test_check_artifacts_undecodable_public_signals(tmp_path):
    artifacts = proof_artifacts(tmp_path)
    save_json(artifacts.proof, sample_proof())
    artifacts.public.write_bytes(b"\xff\xfe")
    with pytest.raises(ProofArtifactError, match="public signals .* is not valid JSON"):
        check_proof_artifacts(artifacts)


def test_check_artifacts_verification_key_is_a_directory(tmp_path):
    artifacts = proof_artifacts(tmp_path)
    save_json(artifacts.proof, sample_proof())
    save_json(artifacts.public, ["1", "42"])
    with pytest.raises(ProofArtifactError, match="cannot read verification key"):
        check_proof_artifacts(artifacts, tmp_path)


def test_check_artifacts_missing_verification_key(tmp_path):
    artifacts = proof_artifacts(tmp_path)
    save_json(artifacts.proof, sample_proof())
    save_json(artifacts.public, ["1", "42"])
    with pytest.raises(ProofArtifactError, match="does not exist"):
        check_proof_artifacts(artifacts, tmp_path / "verification_key.json")


if __name__ == "__main__":
    pytest.main()
