import pytest

from p256_ref import G, scalar_mult
from vector_builders import ecdh_test, spki, uncompressed

PEER_SCALAR = 0x3c2f5a1e9b7d4c8a6e0f1d2b3a4c5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b1c2d
PRIVATE_SCALAR = 0x7d7dc5f71eb29ddaf80d6214632eeae03d9058af1fb6d22ed80badb62bc1a534
SIGNING_SCALAR = 0x2ad8f5c1a7e93b04d6f1c8e2b5a7d9c3e1f0a2b4c6d8e0f1a3b5c7d9e1f3a5b7


@pytest.fixture(scope="session")
def peer_point():
    return scalar_mult(PEER_SCALAR, G)


@pytest.fixture(scope="session")
def shared_secret(peer_point):
    return scalar_mult(PRIVATE_SCALAR, peer_point).x.to_bytes(32, "big")


@pytest.fixture
def valid_ecdh_test(peer_point, shared_secret):
    return ecdh_test(1, spki(uncompressed(peer_point)), PRIVATE_SCALAR.to_bytes(32, "big"), shared_secret)


@pytest.fixture(scope="session")
def signing_key():
    return SIGNING_SCALAR, scalar_mult(SIGNING_SCALAR, G)
