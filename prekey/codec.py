"""
Compressed wire encoding of curve points.

Format (33 bytes):
    byte 0      tag, 0x02 when y is even, 0x03 when y is odd
    bytes 1-32  x coordinate, big-endian, zero-padded

No other tag is accepted: uncompressed (0x04) and infinity (0x00) encodings
are rejected on decode.
"""

from dataclasses import dataclass
from typing import Final

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .domain import P256, POINT_SIZE
from .errors import InvalidKeyError
from .primitive import CURVE, b64d, b64e

COMPRESSED_TAGS: Final = frozenset((0x02, 0x03))


@dataclass(frozen=True)
class CurvePoint:
    """
    Affine point on the package curve.

    Only obtained from decode_point() or key generation, both of which
    validate curve membership.
    """
    x: int
    y: int


def _to_public_key(point: CurvePoint, curve: ec.EllipticCurve) -> ec.EllipticCurvePublicKey:
    # caller holds the curve lock
    try:
        return ec.EllipticCurvePublicNumbers(point.x, point.y, curve).public_key()
    except ValueError as e:
        raise InvalidKeyError("Point is not on the curve") from e


def _from_public_key(public_key: ec.EllipticCurvePublicKey) -> CurvePoint:
    numbers = public_key.public_numbers()
    return CurvePoint(numbers.x, numbers.y)


def encode_point(point: CurvePoint) -> bytes:
    """Serialize a point to its 33-byte compressed form."""
    with CURVE.locked() as curve:
        public_key = _to_public_key(point, curve)
        return public_key.public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint,
        )


def decode_point(data: bytes, offset: int = 0) -> CurvePoint:
    """
    Read exactly POINT_SIZE bytes at ``offset`` and reconstruct the point.

    Raises:
        InvalidKeyError: too few bytes, unknown tag, x outside the field,
            or x with no corresponding point on the curve.
    """
    if offset < 0 or len(data) - offset < POINT_SIZE:
        raise InvalidKeyError(
            f"Need {POINT_SIZE} bytes at offset {offset}, got {max(len(data) - offset, 0)}"
        )

    raw = bytes(data[offset:offset + POINT_SIZE])
    if raw[0] not in COMPRESSED_TAGS:
        raise InvalidKeyError(f"Invalid compressed point tag 0x{raw[0]:02x}")

    x = int.from_bytes(raw[1:], "big")
    if x >= P256.q:
        raise InvalidKeyError("x coordinate outside the field")

    with CURVE.locked() as curve:
        try:
            public_key = ec.EllipticCurvePublicKey.from_encoded_point(curve, raw)
        except ValueError as e:
            raise InvalidKeyError("Encoded point is not on the curve") from e
        point = _from_public_key(public_key)

    if not P256.contains(point.x, point.y):
        raise InvalidKeyError("Decoded point fails the curve equation")
    return point


def public_key_to_b64(point: CurvePoint) -> str:
    return b64e(encode_point(point))

def public_key_from_b64(s: str) -> CurvePoint:
    try:
        raw = b64d(s)
    except ValueError as e:
        raise InvalidKeyError("Public key is not valid base64") from e
    return decode_point(raw)
