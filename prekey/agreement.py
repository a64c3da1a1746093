"""
ECDH agreement on P-256.

The result is the raw agreement value (x coordinate of the shared point) as
an integer. It is not a symmetric key: run it through a KDF before use, and
never log or persist it.
"""

from cryptography.hazmat.primitives.asymmetric import ec

from .codec import CurvePoint, _to_public_key
from .domain import P256
from .errors import InvalidKeyError
from .primitive import CURVE


def calculate_agreement(local_private_scalar: int, remote_public_point: CurvePoint) -> int:
    """
    Shared secret from our private scalar and the peer's public point.

    calculate_agreement(a.private, b.public) == calculate_agreement(b.private, a.public)

    Raises:
        InvalidKeyError: scalar outside [1, n-1] or point not on the curve.
    """
    if not 1 <= local_private_scalar < P256.n:
        raise InvalidKeyError("Private scalar outside [1, n-1]")

    with CURVE.locked() as curve:
        private_key = ec.derive_private_key(local_private_scalar, curve)
        public_key = _to_public_key(remote_public_point, curve)
        shared = private_key.exchange(ec.ECDH(), public_key)

    return int.from_bytes(shared, "big")
