import pytest
from ecpy.curves import Curve

from p256_ref import (AFFINE_INFINITY, G, INFINITY, N, Q, AffinePoint, JacobianPoint, Signature,
                      SignRejection, is_on_curve, mod_inverse, point_add, point_double, scalar_mult,
                      sign, to_affine)

CURVE = Curve.get_curve("secp256r1")

G2 = AffinePoint(0x7cf27b188d034f7e8a52380304b51ac3c08969e277f21b35a60b48fc47669978,
                 0x07775510db8ed040293d9ac69f7430dbba7dade63ce982299e04b79d227873d1)

SCALARS = [1, 2, 3, 7, 0xdeadbeef, 2**128 + 1, N // 2, N - 2, N - 1,
           0xc9afa9d845ba75166b5c215767b1d6934e50c3db36e89b127b8a622b120f6721]


def lift(p: AffinePoint) -> JacobianPoint:
    return JacobianPoint(p.x, p.y, 1)


# ─── mod_inverse ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize("modulus", [3, 101, 65537, N, Q])
def test_inverse_small_values(modulus):
    for a in range(1, min(modulus, 200)):
        assert a * mod_inverse(a, modulus) % modulus == 1


@pytest.mark.parametrize("modulus", [N, Q])
def test_inverse_large_values(modulus):
    for a in [modulus - 1, modulus - 2, 2**255, G.x % modulus, G.y % modulus]:
        r = mod_inverse(a, modulus)
        assert 0 <= r < modulus
        assert r == pow(a, -1, modulus)


def test_inverse_of_zero_is_zero():
    assert mod_inverse(0, N) == 0
    assert mod_inverse(0, Q) == 0


def test_inverse_rejects_non_coprime_value():
    with pytest.raises(ValueError):
        mod_inverse(3, 9)


# ─── Point arithmetic ────────────────────────────────────────────────────────

def test_generator_is_on_curve():
    assert is_on_curve(G)
    assert not is_on_curve(AffinePoint(G.x, G.y + 1))
    assert not is_on_curve(AFFINE_INFINITY)


def test_double_generator():
    assert to_affine(point_double(lift(G))) == G2


def test_double_infinity_is_infinity():
    assert point_double(INFINITY).z == 0


def test_add_to_infinity_lifts_point():
    assert point_add(INFINITY, G) == JacobianPoint(G.x, G.y, 1)


def test_add_same_point_doubles():
    assert to_affine(point_add(lift(G), G)) == G2


def test_add_negation_is_infinity():
    assert point_add(lift(G), AffinePoint(G.x, Q - G.y)).z == 0


def test_add_distinct_points():
    three = to_affine(point_add(point_double(lift(G)), G))
    assert three == scalar_mult(3, G)
    assert is_on_curve(three)


def test_add_with_non_normalized_jacobian_input():
    # same point as G2 but with z = 5
    z = 5
    p = JacobianPoint(G2.x * z**2 % Q, G2.y * z**3 % Q, z)
    assert to_affine(point_add(p, G)) == scalar_mult(3, G)


# ─── scalar_mult ─────────────────────────────────────────────────────────────

def test_multiply_by_zero_is_affine_infinity():
    assert scalar_mult(0, G) == AffinePoint(0, 0)


def test_multiply_by_one_is_base_point():
    assert scalar_mult(1, G) == G


def test_multiply_by_order_is_infinity():
    assert scalar_mult(N, G) == AFFINE_INFINITY


def test_multiply_by_order_minus_one_is_negation():
    assert scalar_mult(N - 1, G) == AffinePoint(G.x, Q - G.y)


@pytest.mark.parametrize("k", SCALARS)
def test_multiply_matches_ecpy(k):
    expected = CURVE.mul_point(k, CURVE.generator)
    assert scalar_mult(k, G) == AffinePoint(expected.x, expected.y)


@pytest.mark.parametrize("k", SCALARS)
def test_negative_scalar_negates_y(k):
    p = scalar_mult(k, G)
    neg = scalar_mult(-k, G)
    assert neg.x == p.x
    assert neg.y == Q - p.y


def test_multiply_arbitrary_point():
    p = scalar_mult(0x1234567, G)
    assert scalar_mult(0x89abcdef, p) == scalar_mult(0x1234567 * 0x89abcdef, G)


# ─── sign ────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("z", [0, 1, N - 1, 2**256 - 1])
def test_sign_rejects_bad_nonce(z):
    assert sign(z, 1, 0) is SignRejection.INVALID_NONCE
    assert sign(z, 1, N) is SignRejection.INVALID_NONCE
    assert sign(z, 1, -1) is SignRejection.INVALID_NONCE


@pytest.mark.parametrize("z", [0, 1, N - 1, 2**256 - 1])
def test_sign_rejects_bad_private_key(z):
    assert sign(z, 0, 1) is SignRejection.INVALID_KEY
    assert sign(z, N, 1) is SignRejection.INVALID_KEY


def test_nonce_is_checked_before_private_key():
    assert sign(0, 0, 0) is SignRejection.INVALID_NONCE


def test_sign_rejects_zero_s():
    assert sign(N - G.x, 1, 1) is SignRejection.ZERO_S


def test_sign_k1_z0_priv1():
    sig = sign(0, 1, 1)
    r = scalar_mult(1, G).x % N
    assert sig == Signature(r, mod_inverse(1, N) * (0 + r * 1) % N)
    assert sig.r != 0 and sig.s != 0
    assert sign(0, 1, 1) == sig


def test_sign_matches_textbook_formula():
    k, z, d = 0x1234, 2**256 - 1, N - 1
    sig = sign(z, d, k)
    r = CURVE.mul_point(k, CURVE.generator).x % N
    assert sig == Signature(r, pow(k, -1, N) * (z + r * d) % N)


def test_signature_verifies():
    k, z, d = 0xabcdef, 0x5555, 0x7777
    r, s = sign(z, d, k)
    w = pow(s, -1, N)
    pub = CURVE.mul_point(d, CURVE.generator)
    R = CURVE.add_point(CURVE.mul_point(z * w % N, CURVE.generator), CURVE.mul_point(r * w % N, pub))
    assert R.x % N == r
