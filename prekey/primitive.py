import base64
import os
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Protocol

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .domain import CurveDomain, P256
from .errors import InvalidKeyError, UnavailableSecureRandomError


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("utf-8")

def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("utf-8"))


# ---- secure random ----

class SecureRandom(Protocol):
    def next_bytes(self, n: int) -> bytes: ...


class SystemRandom:
    """Operating system CSPRNG (os.urandom). May block until the pool is seeded."""

    def __init__(self):
        # read once so a missing source fails at configuration time
        self.next_bytes(1)

    def next_bytes(self, n: int) -> bytes:
        try:
            return os.urandom(n)
        except NotImplementedError as e:
            raise UnavailableSecureRandomError("No secure random source on this platform") from e


_random: Optional[SecureRandom] = None
_random_lock = threading.Lock()

def configure_random(source: SecureRandom) -> None:
    """Select the process-wide secure random source."""
    global _random
    with _random_lock:
        _random = source

def get_random() -> SecureRandom:
    global _random
    with _random_lock:
        if _random is None:
            _random = SystemRandom()
        return _random

def random_int(low: int, high: int, rng: Optional[SecureRandom] = None) -> int:
    """
    Uniform integer in [low, high] by rejection sampling.
    Draws the minimum number of bits covering the span, never reduces modulo.
    """
    if high < low:
        raise ValueError("empty range")
    rng = rng or get_random()
    span = high - low + 1
    bits = span.bit_length()
    nbytes = (bits + 7) // 8
    mask = (1 << bits) - 1
    while True:
        raw = rng.next_bytes(nbytes)
        if len(raw) != nbytes:
            raise UnavailableSecureRandomError(f"Random source returned {len(raw)} of {nbytes} bytes")
        v = int.from_bytes(raw, "big") & mask
        if v < span:
            return low + v

def rand_nonce(n: int = 12, rng: Optional[SecureRandom] = None) -> bytes:
    return (rng or get_random()).next_bytes(n)


# ---- shared curve resource ----

class CurveResource:
    """
    The curve arithmetic object shared by the whole process.

    Every operation touching it (point encode/decode, key generation,
    agreement) runs under the single lock held here. Critical sections
    must not nest.
    """

    def __init__(self, domain: CurveDomain):
        self.domain = domain
        self._curve = ec.SECP256R1()
        self._lock = threading.Lock()

    @contextmanager
    def locked(self) -> Iterator[ec.EllipticCurve]:
        with self._lock:
            yield self._curve


CURVE = CurveResource(P256)


# ---- AEAD (sealing of stored secrets) ----

def aead_encrypt(key32: bytes, plaintext: bytes, aad: bytes) -> tuple[bytes, bytes]:
    nonce = rand_nonce(12)
    ct = AESGCM(key32).encrypt(nonce, plaintext, aad)
    return nonce, ct

def aead_decrypt(key32: bytes, nonce: bytes, ciphertext: bytes, aad: bytes) -> bytes:
    try:
        return AESGCM(key32).decrypt(nonce, ciphertext, aad)
    except InvalidTag as e:
        raise InvalidKeyError("Sealed key material failed authentication") from e
