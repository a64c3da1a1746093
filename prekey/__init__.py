"""ECDH key agreement and session-key lifecycle for prekey handshakes."""

from .domain import (
    CurveDomain,
    P256,
    POINT_SIZE,
)

from .errors import (
    CryptoError,
    InvalidKeyError,
    UnavailableSecureRandomError,
    StoreError,
    RecordNotFoundError,
)

from .primitive import (
    SecureRandom,
    SystemRandom,
    configure_random,
    get_random,
)

from .codec import (
    CurvePoint,
    encode_point,
    decode_point,
    public_key_to_b64,
    public_key_from_b64,
)

from .keys import (
    KeyPair,
    MasterSecret,
    StoredKeyPair,
    generate_key_pair,
    next_key_id,
    seal_key_pair,
    open_key_pair,
)

from .agreement import calculate_agreement

from .records import (
    RecordKind,
    RecordStore,
    LocalKeyRecord,
    RemoteKey,
    RemoteKeyRecord,
    SessionRecord,
)

from .keystore import MemoryRecordStore, JsonRecordStore
from .diagnostics import Diagnostics, LoggingDiagnostics, NullDiagnostics
from .session import SessionStateOracle
from .initializer import KeyRecordInitializer

__all__ = [
    # Curve
    "CurveDomain",
    "P256",
    "POINT_SIZE",
    # Errors
    "CryptoError",
    "InvalidKeyError",
    "UnavailableSecureRandomError",
    "StoreError",
    "RecordNotFoundError",
    # Random
    "SecureRandom",
    "SystemRandom",
    "configure_random",
    "get_random",
    # Points
    "CurvePoint",
    "encode_point",
    "decode_point",
    "public_key_to_b64",
    "public_key_from_b64",
    # Keys
    "KeyPair",
    "MasterSecret",
    "StoredKeyPair",
    "generate_key_pair",
    "next_key_id",
    "seal_key_pair",
    "open_key_pair",
    "calculate_agreement",
    # Records and stores
    "RecordKind",
    "RecordStore",
    "LocalKeyRecord",
    "RemoteKey",
    "RemoteKeyRecord",
    "SessionRecord",
    "MemoryRecordStore",
    "JsonRecordStore",
    # Session lifecycle
    "Diagnostics",
    "LoggingDiagnostics",
    "NullDiagnostics",
    "SessionStateOracle",
    "KeyRecordInitializer",
]
