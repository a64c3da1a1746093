from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Final, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from pydantic import BaseModel, Field

from .codec import CurvePoint, _from_public_key, public_key_from_b64, public_key_to_b64
from .config import get_settings
from .domain import P256
from .errors import InvalidKeyError
from .primitive import (
    CURVE,
    SecureRandom,
    aead_decrypt, aead_encrypt,
    b64d, b64e,
    get_random, random_int,
)

KEY_ID_SPACE: Final = 4096
MAX_KEY_ID: Final = KEY_ID_SPACE - 1


def next_key_id(key_id: int) -> int:
    """Successor in the 12-bit id space; 4095 wraps to 0."""
    return (key_id + 1) % KEY_ID_SPACE


@dataclass(frozen=True)
class KeyPair:
    id: int
    public_point: CurvePoint
    private_scalar: int = field(repr=False)

    def __post_init__(self):
        if not 0 <= self.id <= MAX_KEY_ID:
            raise ValueError(f"Key id {self.id} outside [0, {MAX_KEY_ID}]")

    def with_id(self, key_id: int) -> KeyPair:
        return replace(self, id=key_id)


def generate_key_pair(rng: Optional[SecureRandom] = None) -> KeyPair:
    """
    Fresh key pair on P-256 with id 0; the caller assigns ids.

    The scalar is drawn uniformly from [1, n-1] out of the configured
    secure random source. Raises UnavailableSecureRandomError if there is none.
    """
    scalar = random_int(1, P256.n - 1, rng)
    with CURVE.locked() as curve:
        private_key = ec.derive_private_key(scalar, curve)
        # keep affine coordinates only; the wire form is always compressed
        public_point = _from_public_key(private_key.public_key())
    return KeyPair(id=0, public_point=public_point, private_scalar=scalar)


# ---- sealing under the master secret ----

class MasterSecret:
    """
    Symmetric key protecting private scalars at rest (AES-256-GCM).
    """

    def __init__(self, key: bytes):
        if len(key) != 32:
            raise ValueError("Master secret must be 32 bytes")
        self._key = bytes(key)

    @classmethod
    def generate(cls, rng: Optional[SecureRandom] = None) -> MasterSecret:
        return cls((rng or get_random()).next_bytes(32))

    @classmethod
    def from_passphrase(cls, passphrase: str, salt: bytes, iterations: Optional[int] = None) -> MasterSecret:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=iterations or get_settings().pbkdf2_iterations,
        )
        return cls(kdf.derive(passphrase.encode("utf-8")))

    def seal(self, plaintext: bytes, aad: bytes) -> str:
        nonce, ct = aead_encrypt(self._key, plaintext, aad)
        return b64e(nonce + ct)

    def open(self, sealed: str, aad: bytes) -> bytes:
        try:
            blob = b64d(sealed)
        except ValueError as e:
            raise InvalidKeyError("Sealed key material is not valid base64") from e
        if len(blob) < 28:  # 12 bytes nonce + 16 bytes tag minimum
            raise InvalidKeyError("Sealed key material too short")
        return aead_decrypt(self._key, blob[:12], blob[12:], aad)

    def __repr__(self) -> str:
        return "MasterSecret(<redacted>)"


class StoredKeyPair(BaseModel):
    """Persisted form of a KeyPair: compressed public key, sealed private scalar."""
    key_id: int = Field(ge=0, le=MAX_KEY_ID)
    public_key: str
    private_key: str


def _scalar_aad(peer: str, key_id: int) -> bytes:
    return f"{peer}|{key_id}".encode("utf-8")


def seal_key_pair(pair: KeyPair, master_secret: MasterSecret, peer: str) -> StoredKeyPair:
    scalar_bytes = pair.private_scalar.to_bytes(P256.field_bytes, "big")
    return StoredKeyPair(
        key_id=pair.id,
        public_key=public_key_to_b64(pair.public_point),
        private_key=master_secret.seal(scalar_bytes, _scalar_aad(peer, pair.id)),
    )


def open_key_pair(stored: StoredKeyPair, master_secret: MasterSecret, peer: str) -> KeyPair:
    scalar = int.from_bytes(master_secret.open(stored.private_key, _scalar_aad(peer, stored.key_id)), "big")
    if not 1 <= scalar < P256.n:
        raise InvalidKeyError("Stored private scalar out of range")
    return KeyPair(
        id=stored.key_id,
        public_point=public_key_from_b64(stored.public_key),
        private_scalar=scalar,
    )
