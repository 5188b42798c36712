"""
Reference P-256 (secp256r1) arithmetic used to compute expected test outputs.

Correct but slow and not side channel safe. Nothing here validates that a
point lies on the curve unless asked to; callers pass sane inputs.
"""

from enum import Enum
from typing import NamedTuple, Union

# ─── Curve parameters ────────────────────────────────────────────────────────

Q = 2**256 - 2**224 + 2**192 + 2**96 - 1
N = 0xffffffff00000000ffffffffffffffffbce6faada7179e84f3b9cac2fc632551
B = 0x5ac635d8aa3a93e7b3ebbd55769886bc651d06b0cc53b0f63bce3c3e27d2604b


class AffinePoint(NamedTuple):
    x: int
    y: int


class JacobianPoint(NamedTuple):
    x: int
    y: int
    z: int


G = AffinePoint(0x6b17d1f2e12c4247f8bce6e563a440f277037d812deb33a0f4a13945d898c296,
                0x4fe342e2fe1a7f9b8ee7eb4a7c0f9e162bce33576b315ececbb6406837bf51f5)

INFINITY = JacobianPoint(0, 0, 0)
AFFINE_INFINITY = AffinePoint(0, 0)


# ─── Field helpers ───────────────────────────────────────────────────────────

def _half(v: int, mod: int) -> int:
    """v / 2 modulo an odd mod."""
    return (v + mod) >> 1 if v & 1 else v >> 1


def mod_inverse(value: int, mod: int) -> int:
    """Inverse of value modulo an odd mod, or 0 for value == 0.

    Extended binary GCD (Hankerson, Menezes, Vanstone, Guide to Elliptic
    Curve Cryptography, algorithm 2.22). Only halving and subtraction are
    needed.
    """
    if value == 0:
        return 0
    u, v = value, mod
    x1, x2 = 1, 0
    while u != 1 and v != 1:
        if u == 0 or v == 0:
            raise ValueError(f"{value} is not invertible modulo {mod}")
        while u & 1 == 0:
            u >>= 1
            x1 = _half(x1, mod)
        while v & 1 == 0:
            v >>= 1
            x2 = _half(x2, mod)
        if u >= v:
            u -= v
            x1 -= x2
            if x1 < 0:
                x1 += mod
        else:
            v -= u
            x2 -= x1
            if x2 < 0:
                x2 += mod
    return x1 if u == 1 else x2


# ─── Point arithmetic ────────────────────────────────────────────────────────

def point_double(p: JacobianPoint, q: int = Q) -> JacobianPoint:
    """Jacobian doubling for a = -3 (eprint 2014/130, algorithm 10)."""
    t1 = p.z * p.z
    t2 = p.x + t1
    t1 = p.x - t1
    t1 = t1 * t2
    t2 = _half(t1, q)
    t1 = t1 + t2
    t2 = p.y * p.y
    t3 = p.x * t2
    t4 = t1 * t1
    t4 = t4 - t3
    x = t4 - t3
    z = p.y * p.z
    t2 = t2 * t2
    t4 = t3 - x
    t1 = t1 * t4
    y = t1 - t2
    return JacobianPoint(x % q, y % q, z % q)


def point_add(p1: JacobianPoint, p2: AffinePoint, q: int = Q) -> JacobianPoint:
    """Mixed addition of a Jacobian and an affine point (eprint 2014/130, algorithm 13)."""
    if p1.z == 0:
        return JacobianPoint(p2.x, p2.y, 1)
    t1 = p1.z * p1.z
    t2 = p1.z * t1
    t1 = (t1 * p2.x - p1.x) % q
    t2 = (t2 * p2.y - p1.y) % q
    if t1 == 0:
        if t2 == 0:
            return point_double(p1, q)
        return INFINITY
    z = p1.z * t1
    t3 = t1 * t1
    t4 = t1 * t3
    t3 = p1.x * t3
    t1 = t3 + t3
    x = t2 * t2 - t1 - t4
    t3 = t2 * (t3 - x)
    t4 = t4 * p1.y
    y = t3 - t4
    return JacobianPoint(x % q, y % q, z % q)


def to_affine(p: JacobianPoint, q: int = Q) -> AffinePoint:
    """Exact conversion to affine; infinity maps to (0, 0)."""
    x, y, z = p.x % q, p.y % q, p.z % q
    z_inv = mod_inverse(z, q)
    z_inv2 = z_inv * z_inv % q
    return AffinePoint(x * z_inv2 % q, y * z_inv2 * z_inv % q)


def is_on_curve(p: AffinePoint, q: int = Q, b: int = B) -> bool:
    if not (0 <= p.x < q and 0 <= p.y < q):
        return False
    return (p.y * p.y - (p.x * p.x * p.x - 3 * p.x + b)) % q == 0


def scalar_mult(scalar: int, p: AffinePoint, q: int = Q) -> AffinePoint:
    """scalar * p by double-and-add, most significant bit first.

    Timing depends on the scalar's bits.
    """
    if scalar == 0:
        return AFFINE_INFINITY
    negative = scalar < 0
    scalar = abs(scalar)
    result = INFINITY
    for i in range(scalar.bit_length() - 1, -1, -1):
        result = point_double(result, q)
        if (scalar >> i) & 1:
            result = point_add(result, p, q)
    if negative:
        result = JacobianPoint(result.x, q - result.y, result.z)
    return to_affine(result, q)


# ─── ECDSA ───────────────────────────────────────────────────────────────────

class Signature(NamedTuple):
    r: int
    s: int


class SignRejection(Enum):
    INVALID_NONCE = "k not in [1, n-1]"
    INVALID_KEY = "private key not in [1, n-1]"
    ZERO_R = "r == 0"
    ZERO_S = "s == 0"


def sign(z: int, private_key: int, k: int) -> Union[Signature, SignRejection]:
    """Raw ECDSA signature of an already reduced hash value z.

    z is used as given; truncating the digest is the caller's job.
    """
    if not 1 <= k < N:
        return SignRejection.INVALID_NONCE
    if not 1 <= private_key < N:
        return SignRejection.INVALID_KEY
    r = scalar_mult(k, G).x % N
    if r == 0:
        return SignRejection.ZERO_R
    s = mod_inverse(k, N) * (z + r * private_key) % N
    if s == 0:
        return SignRejection.ZERO_S
    return Signature(r, s)
