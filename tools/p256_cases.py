"""
Deterministically generated keygen and sign cases.

Expected outputs come from the reference engine in p256_ref.
"""

import hashlib
from typing import Iterable, List, NamedTuple, Optional

from p256_ref import G, N, AffinePoint, Signature, SignRejection, scalar_mult, sign
from testgen_errors import UnexpectedInvariantViolation

INVALID_KEYGEN_SCALARS = [0, N, N + 1, N + 2, 2**256 - 2, 2**256 - 1]


class KeygenCase(NamedTuple):
    priv: bytes
    pub: AffinePoint


class SignCase(NamedTuple):
    k: int
    z: int
    priv: int
    signature: Optional[Signature]


def sha256_int(seed: str) -> int:
    return int.from_bytes(hashlib.sha256(seed.encode()).digest(), "big")


def keygen_cases(privs: Iterable[bytes]) -> List[KeygenCase]:
    return [KeygenCase(priv, scalar_mult(int.from_bytes(priv, "big"), G)) for priv in privs]


# (k, z, priv, reason it must fail)
_INVALID_SIGN_INPUTS = [
    (1, N - G.x, 1, SignRejection.ZERO_S),
    (0, 0, 1, SignRejection.INVALID_NONCE),
    (N, 0, 1, SignRejection.INVALID_NONCE),
]


def invalid_sign_cases() -> List[SignCase]:
    cases = []
    for k, z, priv, reason in _INVALID_SIGN_INPUTS:
        outcome = sign(z, priv, k)
        if outcome is not reason:
            raise UnexpectedInvariantViolation(
                f"sign(k={k:#x}, z={z:#x}, priv={priv:#x}) gave {outcome}, expected {reason}")
        cases.append(SignCase(k, z, priv, None))
    return cases


def _valid_sign_inputs():
    yield 1, 0, 1
    yield N - 1, 2**256 - 1, N - 1
    for i in range(5):
        yield sha256_int(f"test{i}k"), sha256_int(f"test{i}z"), sha256_int(f"test{i}p")


def valid_sign_cases() -> List[SignCase]:
    cases = []
    for k, z, priv in _valid_sign_inputs():
        outcome = sign(z, priv, k)
        if isinstance(outcome, SignRejection):
            raise UnexpectedInvariantViolation(
                f"sign(k={k:#x}, z={z:#x}, priv={priv:#x}) rejected: {outcome.value}")
        cases.append(SignCase(k, z, priv, outcome))
    return cases
