class CryptoError(Exception):
    """Base exception for cryptographic errors"""
    pass


class InvalidKeyError(CryptoError):
    """Key material that does not decode to a usable key on the curve."""
    pass


class UnavailableSecureRandomError(CryptoError):
    """No cryptographically secure random source can be obtained."""
    pass


class StoreError(Exception):
    """Base exception for record store failures"""
    pass


class RecordNotFoundError(StoreError):
    def __init__(self, kind, peer: str):
        super().__init__(f"No {kind} record for peer {peer!r}")
        self.kind = kind
        self.peer = peer
