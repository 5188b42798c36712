"""
Render normalized P-256 test vectors as a C source file with a run_tests() driver.

Repeated byte strings (public keys, private keys, shared secrets, messages,
signatures) are interned so every distinct value is emitted once and test
records refer to it by name.

Numeric values are written as 32-bit limbs, least significant limb first,
which is the integer layout p256-cortex-m4 expects. Hashes, raw point
encodings and shared secrets are written byte by byte.
"""

from typing import Dict, Iterator, List, NamedTuple

from p256_cases import (INVALID_KEYGEN_SCALARS, KeygenCase, SignCase, invalid_sign_cases,
                        keygen_cases, valid_sign_cases)
from p256_ref import AffinePoint, Signature
from wycheproof_vectors import EcdhRecord, VerifyRecord

PREAMBLE = """\
// Auto-generated by generate_p256_tests.py, DO NOT EDIT
// Sources: Wycheproof ecdh_secp256r1_test.json, ecdsa_secp256r1_sha256_test.json

#include <string.h>
#include <stdint.h>
#include <stdbool.h>
#include "p256-cortex-m4.h"

#define COUNTOF(a) (sizeof(a) / sizeof((a)[0]))

struct VerifyTest {const uint32_t* key; const uint8_t* msg; const uint32_t* sig; bool result;};
struct EcdhTest {const uint8_t* pub; const uint32_t* priv; const uint8_t* shared; uint8_t publen; bool valid;};
struct KeygenTest {const uint32_t* priv; const uint32_t* pub;};
struct InvalidSign {const uint32_t k[8]; const uint8_t z[32]; const uint32_t priv[8];};
struct ValidSign {const uint32_t k[8]; const uint8_t z[32]; const uint32_t priv[8]; const uint32_t sig[16];};

"""

DRIVER = """
bool run_tests(void) {
    for (size_t i = 0; i < COUNTOF(verify_tests); i++) {
        const struct VerifyTest* t = &verify_tests[i];
        if (p256_verify(t->key, t->key + 8, t->msg, 32, t->sig, t->sig + 8) != t->result) {
            return false;
        }
    }
    for (size_t i = 0; i < COUNTOF(ecdh_tests); i++) {
        const struct EcdhTest* t = &ecdh_tests[i];
        uint32_t x[8], y[8];
        uint8_t shared[32];
        if ((p256_octet_string_to_point(x, y, t->pub, t->publen) &&
             p256_ecdh_calc_shared_secret(shared, t->priv, x, y) &&
             memcmp(shared, t->shared, 32) == 0) != t->valid) {
            return false;
        }
    }
    for (size_t i = 0; i < COUNTOF(keygen_tests_ok); i++) {
        const struct KeygenTest* t = &keygen_tests_ok[i];
        uint32_t pub[16];
        if (!p256_keygen(pub, pub + 8, t->priv) || memcmp(pub, t->pub, 64) != 0) {
            return false;
        }
    }
    for (size_t i = 0; i < COUNTOF(keygen_tests_fail); i++) {
        uint32_t x[8], y[8];
        if (p256_keygen(x, y, keygen_tests_fail[i])) {
            return false;
        }
    }
    for (size_t i = 0; i < COUNTOF(invalid_signs); i++) {
        const struct InvalidSign* t = &invalid_signs[i];
        uint32_t sig[16];
        if (p256_sign(sig, sig + 8, t->z, 32, t->priv, t->k)) {
            return false;
        }
    }
    for (size_t i = 0; i < COUNTOF(valid_signs); i++) {
        const struct ValidSign* t = &valid_signs[i];
        uint32_t sig[16];
        if (!p256_sign(sig, sig + 8, t->z, 32, t->priv, t->k) || memcmp(sig, t->sig, 64) != 0) {
            return false;
        }
    }
    return true;
}
"""


# ─── Interning ───────────────────────────────────────────────────────────────

class InternTable:
    """First-seen-order mapping from distinct byte strings to C symbols."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self._ids: Dict[bytes, int] = {}
        self._values: List[bytes] = []
        self._frozen = False

    def intern(self, value: bytes) -> int:
        value = bytes(value)
        if value not in self._ids:
            if self._frozen:
                raise RuntimeError(f"{self.prefix} table is frozen")
            self._ids[value] = len(self._values)
            self._values.append(value)
        return self._ids[value]

    def symbol(self, value: bytes) -> str:
        return f"{self.prefix}_{self.intern(value)}"

    def freeze(self):
        self._frozen = True

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._values)


# ─── Encoding ────────────────────────────────────────────────────────────────

def to_uint_array(data: bytes, size: int = 1, group: int = 1) -> str:
    """Split data into size-byte elements and reverse their order within each group."""
    if len(data) % (size * group):
        raise ValueError(f"{len(data)} bytes do not split into groups of {group} x {size} bytes")
    parts = [f"0x{data[i:i + size].hex()}" for i in range(0, len(data), size)]
    for start in range(0, len(parts), group):
        parts[start:start + group] = parts[start:start + group][::-1]
    return "{" + ", ".join(parts) + "}"


def byte_array(data: bytes) -> str:
    return to_uint_array(data, 1, 1)


def limb_array(data: bytes) -> str:
    return to_uint_array(data, 4, 8)


def int_to_bytes(v: int, length: int = 32) -> bytes:
    return v.to_bytes(length, "big")


def point_bytes(p: AffinePoint) -> bytes:
    return int_to_bytes(p.x) + int_to_bytes(p.y)


def signature_bytes(sig: Signature) -> bytes:
    return int_to_bytes(sig.r) + int_to_bytes(sig.s)


# ─── Corpus model ────────────────────────────────────────────────────────────

class Corpus(NamedTuple):
    ecdh: List[EcdhRecord]
    verify: List[VerifyRecord]
    pubs: InternTable
    privs: InternTable
    shareds: InternTable
    keys: InternTable
    msgs: InternTable
    sigs: InternTable
    keygen_ok: List[KeygenCase]
    keygen_fail: List[int]
    invalid_signs: List[SignCase]
    valid_signs: List[SignCase]


def build_corpus(ecdh: List[EcdhRecord], verify: List[VerifyRecord]) -> Corpus:
    """Intern every record value and compute the generated cases."""
    pubs, privs, shareds = InternTable("pub"), InternTable("priv"), InternTable("shared")
    for record in ecdh:
        pubs.intern(record.pub)
        privs.intern(record.priv)
        if record.shared:
            shareds.intern(record.shared)

    keys, msgs, sigs = InternTable("key"), InternTable("msg"), InternTable("sig")
    for record in verify:
        keys.intern(record.key)
        msgs.intern(record.msg)
        sigs.intern(record.sig)

    for table in (pubs, privs, shareds, keys, msgs, sigs):
        table.freeze()

    return Corpus(ecdh, verify, pubs, privs, shareds, keys, msgs, sigs,
                  keygen_ok=keygen_cases(privs),
                  keygen_fail=list(INVALID_KEYGEN_SCALARS),
                  invalid_signs=invalid_sign_cases(),
                  valid_signs=valid_sign_cases())


# ─── Emission ────────────────────────────────────────────────────────────────

def emit_ecdh_section(f, corpus: Corpus):
    """ECDH value tables, ecdh_tests and the keygen tests derived from the private keys."""
    for i, pub in enumerate(corpus.pubs):
        f.write(f"static const uint8_t pub_{i}[] = {byte_array(pub)};\n")
    for i, priv in enumerate(corpus.privs):
        f.write(f"static const uint32_t priv_{i}[] = {limb_array(priv)};\n")
    for i, shared in enumerate(corpus.shareds):
        f.write(f"static const uint8_t shared_{i}[] = {byte_array(shared)};\n")
    for i, case in enumerate(corpus.keygen_ok):
        f.write(f"static const uint32_t pub_for_priv_{i}[] = {limb_array(point_bytes(case.pub))};\n")

    rows = []
    for record in corpus.ecdh:
        shared = corpus.shareds.symbol(record.shared) if record.shared else "NULL"
        rows.append(f"{{{corpus.pubs.symbol(record.pub)}, {corpus.privs.symbol(record.priv)}, "
                    f"{shared}, {len(record.pub)}, {int(record.valid)}}}")
    f.write("static const struct EcdhTest ecdh_tests[] = {\n  " + ",\n  ".join(rows) + "\n};\n\n")

    rows = [f"{{priv_{i}, pub_for_priv_{i}}}" for i in range(len(corpus.keygen_ok))]
    f.write("static const struct KeygenTest keygen_tests_ok[] = {\n  " + ",\n  ".join(rows) + "\n};\n\n")

    rows = [limb_array(int_to_bytes(v)) for v in corpus.keygen_fail]
    f.write("static const uint32_t keygen_tests_fail[][8] = {\n  " + ",\n  ".join(rows) + "\n};\n\n")


def emit_sign_section(f, corpus: Corpus):
    rows = []
    for case in corpus.invalid_signs:
        rows.append(f"{{{limb_array(int_to_bytes(case.k))},\n   {byte_array(int_to_bytes(case.z))},\n"
                    f"   {limb_array(int_to_bytes(case.priv))}}}")
    f.write("static const struct InvalidSign invalid_signs[] = {\n  " + ",\n  ".join(rows) + "\n};\n\n")

    rows = []
    for case in corpus.valid_signs:
        rows.append(f"{{{limb_array(int_to_bytes(case.k))},\n   {byte_array(int_to_bytes(case.z))},\n"
                    f"   {limb_array(int_to_bytes(case.priv))},\n   {limb_array(signature_bytes(case.signature))}}}")
    f.write("static const struct ValidSign valid_signs[] = {\n  " + ",\n  ".join(rows) + "\n};\n\n")


def emit_verify_section(f, corpus: Corpus):
    for i, key in enumerate(corpus.keys):
        f.write(f"static const uint32_t key_{i}[] = {limb_array(key)};\n")
    for i, msg in enumerate(corpus.msgs):
        f.write(f"static const uint8_t msg_{i}[] = {byte_array(msg)};\n")
    for i, sig in enumerate(corpus.sigs):
        f.write(f"static const uint32_t sig_{i}[] = {limb_array(sig)};\n")

    rows = [f"{{{corpus.keys.symbol(r.key)}, {corpus.msgs.symbol(r.msg)}, {corpus.sigs.symbol(r.sig)}, {int(r.result)}}}"
            for r in corpus.verify]
    f.write("static const struct VerifyTest verify_tests[] = {\n  " + ",\n  ".join(rows) + "\n};\n")


def write_corpus(f, corpus: Corpus):
    f.write(PREAMBLE)
    emit_ecdh_section(f, corpus)
    emit_sign_section(f, corpus)
    emit_verify_section(f, corpus)
    f.write(DRIVER)
