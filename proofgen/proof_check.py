# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# proof_check.py

"""
Check snarkjs Groth16 output over BN254.

snarkjs writes:
  - proof.json:  {pi_a: [x, y, z], pi_b: [[x0, x1], [y0, y1], [z0, z1]],
                  pi_c: [x, y, z], protocol: "groth16", curve: "bn128"}
  - public.json: ["<decimal>", ...]
  - verification_key.json (exported separately):
                 {nPublic, vk_alpha_1, vk_beta_2, vk_gamma_2, vk_delta_2, IC}

All coordinates are decimal strings of projective points. G2 coordinates are
Fq2 elements written as [c0, c1], meaning c0 + c1 * u.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    add,
    b,
    b2,
    curve_order,
    field_modulus,
    final_exponentiate,
    is_inf,
    is_on_curve,
    multiply,
    pairing,
)

from proofgen.errors import ProofArtifactError
from proofgen.files import load_json
from proofgen.prover import ProofArtifacts


@dataclass(frozen=True)
class Groth16Proof:
    a: tuple
    b: tuple
    c: tuple


@dataclass(frozen=True)
class VerificationKey:
    n_public: int
    alpha: tuple
    beta: tuple
    gamma: tuple
    delta: tuple
    ic: list[tuple]


@dataclass(frozen=True)
class ProofCheck:
    proof: Groth16Proof
    public: list[str]
    verified: bool | None = None


def _coordinate(value: Any, where: str) -> int:
    try:
        n = int(str(value), 10)
    except ValueError:
        raise ProofArtifactError(f"{where}: {value!r} is not a decimal integer")
    if not 0 <= n < field_modulus:
        raise ProofArtifactError(f"{where}: coordinate outside the base field")
    return n


def g1_from_json(value: Any, where: str) -> tuple:
    """
    Decode a snarkjs G1 point ([x, y, z]) and check it lies on BN254.
    """
    if not isinstance(value, list) or len(value) != 3:
        raise ProofArtifactError(f"{where}: expected [x, y, z]")
    x, y, z = (FQ(_coordinate(v, where)) for v in value)
    point = (x, y, z)
    if not is_on_curve(point, b):
        raise ProofArtifactError(f"{where}: point is not on the BN254 G1 curve")
    return point


def g2_from_json(value: Any, where: str) -> tuple:
    """
    Decode a snarkjs G2 point ([[x0, x1], [y0, y1], [z0, z1]]) and check it
    lies in the prime order subgroup of the BN254 twist. The twist has a
    cofactor, so being on the curve is not enough.
    """
    if not isinstance(value, list) or len(value) != 3:
        raise ProofArtifactError(f"{where}: expected [[x0, x1], [y0, y1], [z0, z1]]")
    coords = []
    for pair in value:
        if not isinstance(pair, list) or len(pair) != 2:
            raise ProofArtifactError(f"{where}: Fq2 element must be [c0, c1]")
        coords.append(FQ2([_coordinate(c, where) for c in pair]))
    point = tuple(coords)
    if not is_on_curve(point, b2):
        raise ProofArtifactError(f"{where}: point is not on the BN254 G2 twist")
    if not is_inf(multiply(point, curve_order)):
        raise ProofArtifactError(f"{where}: point is not in the BN254 G2 subgroup")
    return point


def parse_proof(data: Any) -> Groth16Proof:
    if not isinstance(data, dict):
        raise ProofArtifactError("proof: expected a JSON object")
    missing = [k for k in ("pi_a", "pi_b", "pi_c") if k not in data]
    if missing:
        raise ProofArtifactError(f"proof: missing {', '.join(missing)}")
    protocol = data.get("protocol", "groth16")
    if protocol != "groth16":
        raise ProofArtifactError(f"proof: protocol is {protocol!r}, not 'groth16'")
    return Groth16Proof(
        a=g1_from_json(data["pi_a"], "pi_a"),
        b=g2_from_json(data["pi_b"], "pi_b"),
        c=g1_from_json(data["pi_c"], "pi_c"),
    )


def parse_public_signals(data: Any) -> list[str]:
    if not isinstance(data, list):
        raise ProofArtifactError("public signals: expected a JSON list")
    for i, s in enumerate(data):
        if not isinstance(s, str) or not (s.isascii() and s.isdigit()):
            raise ProofArtifactError(f"public signal {i}: {s!r} is not a decimal string")
        if int(s) >= curve_order:
            raise ProofArtifactError(f"public signal {i}: not in the BN254 scalar field")
    return list(data)


def _n_public(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    raise ProofArtifactError(f"verification key: nPublic {value!r} is not an integer")


def parse_verification_key(data: Any) -> VerificationKey:
    if not isinstance(data, dict):
        raise ProofArtifactError("verification key: expected a JSON object")
    try:
        ic = data["IC"]
        if not isinstance(ic, list):
            raise ProofArtifactError("verification key: IC must be a list")
        return VerificationKey(
            n_public=_n_public(data["nPublic"]),
            alpha=g1_from_json(data["vk_alpha_1"], "vk_alpha_1"),
            beta=g2_from_json(data["vk_beta_2"], "vk_beta_2"),
            gamma=g2_from_json(data["vk_gamma_2"], "vk_gamma_2"),
            delta=g2_from_json(data["vk_delta_2"], "vk_delta_2"),
            ic=[g1_from_json(p, f"IC[{i}]") for i, p in enumerate(ic)],
        )
    except KeyError as e:
        raise ProofArtifactError(f"verification key: missing {e.args[0]}") from e


def _load(path: str | Path, what: str) -> Any:
    try:
        return load_json(path)
    except FileNotFoundError as e:
        raise ProofArtifactError(f"{what} {path} does not exist") from e
    except OSError as e:
        raise ProofArtifactError(f"cannot read {what} {path}: {e}") from e
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError
        raise ProofArtifactError(f"{what} {path} is not valid JSON: {e}") from e


def load_proof(path: str | Path) -> Groth16Proof:
    return parse_proof(_load(path, "proof"))


def load_public_signals(path: str | Path) -> list[str]:
    return parse_public_signals(_load(path, "public signals"))


def load_verification_key(path: str | Path) -> VerificationKey:
    return parse_verification_key(_load(path, "verification key"))


def verify_proof(vk: VerificationKey, proof: Groth16Proof, public: list[str]) -> bool:
    """
    Check the Groth16 equation

        e(A, B) == e(alpha, beta) * e(vk_x, gamma) * e(C, delta)

    with vk_x = IC[0] + sum(public[i] * IC[i + 1]).

    Raises:
        ProofArtifactError: If the number of public signals does not match
            the verification key.
    """
    if len(public) != vk.n_public:
        raise ProofArtifactError(
            f"public input count mismatch: len(public)={len(public)} vs vk.nPublic={vk.n_public}"
        )
    if len(vk.ic) != len(public) + 1:
        raise ProofArtifactError(
            f"IC length mismatch: len(IC)={len(vk.ic)} vs len(public)+1={len(public) + 1}"
        )

    vk_x = vk.ic[0]
    for i, s in enumerate(public):
        vk_x = add(vk_x, multiply(vk.ic[i + 1], int(s)))

    left = pairing(proof.b, proof.a, final_exponentiate=False)
    right = pairing(vk.beta, vk.alpha, final_exponentiate=False)
    right *= pairing(vk.gamma, vk_x, final_exponentiate=False)
    right *= pairing(vk.delta, proof.c, final_exponentiate=False)

    return final_exponentiate(left) == final_exponentiate(right)


def check_proof_artifacts(
    artifacts: ProofArtifacts, verification_key: str | Path | None = None
) -> ProofCheck:
    """
    Load and check freshly written proof.json / public.json.

    Without a verification key only the structure is checked: the three proof
    points are on their curves and every public signal is a field element.
    With one, the proof must also verify.

    Raises:
        ProofArtifactError: If either artifact is malformed or the proof does
            not verify against `verification_key`.
    """
    proof = load_proof(artifacts.proof)
    public = load_public_signals(artifacts.public)

    if verification_key is None:
        return ProofCheck(proof=proof, public=public)

    vk = load_verification_key(verification_key)
    if not verify_proof(vk, proof, public):
        raise ProofArtifactError(f"{artifacts.proof} does not verify against {verification_key}")
    return ProofCheck(proof=proof, public=public, verified=True)
