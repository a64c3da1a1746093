"""
Fixed domain parameters of the curve used for every key in this package.

NIST P-256 (secp256r1):
    y^2 = x^3 + a*x + b  (mod q)
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class CurveDomain:
    name: str
    q: int    # field prime
    a: int
    b: int
    gx: int   # base point
    gy: int
    n: int    # order of the base point
    point_size: int

    @property
    def field_bytes(self) -> int:
        return (self.q.bit_length() + 7) // 8

    def contains(self, x: int, y: int) -> bool:
        """Curve-equation check for an affine point with coordinates in the field."""
        if not (0 <= x < self.q and 0 <= y < self.q):
            return False
        return (y * y - (x * x * x + self.a * x + self.b)) % self.q == 0


P256: Final = CurveDomain(
    name="secp256r1",
    q=0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFF,
    a=0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFC,
    b=0x5AC635D8AA3A93E7B3EBBD55769886BC651D06B0CC53B0F63BCE3C3E27D2604B,
    gx=0x6B17D1F2E12C4247F8BCE6E563A440F277037D812DEB33A0F4A13945D898C296,
    gy=0x4FE342E2FE1A7F9B8EE7EB4A7C0F9E162BCE33576B315ECECBB6406837BF51F5,
    n=0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
    point_size=33,
)

POINT_SIZE: Final = P256.point_size
"""Compressed point: 0x02/0x03 tag + 32-byte x coordinate."""
