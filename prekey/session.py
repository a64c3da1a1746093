from typing import Optional

from .diagnostics import Diagnostics, LoggingDiagnostics, emit
from .errors import RecordNotFoundError
from .records import RecordKind, RecordStore, SessionRecord


class SessionStateOracle:
    """
    Readiness predicates over the three per-peer records.

    A session exists only when the local key record, the remote key record
    and the session record are all present. Missing records make the
    predicates false; store failures propagate.
    """

    def __init__(self, store: RecordStore, diagnostics: Optional[Diagnostics] = None):
        self.store = store
        self.diagnostics = diagnostics or LoggingDiagnostics()

    def _session(self, peer: str) -> Optional[SessionRecord]:
        # may vanish between the existence check and the load (concurrent abort)
        try:
            return self.store.load(RecordKind.SESSION, peer)
        except RecordNotFoundError:
            return None

    def has_session(self, peer: str) -> bool:
        emit(self.diagnostics, "session.checked", peer=peer)
        return (
            self.store.exists(RecordKind.LOCAL_KEY, peer)
            and self.store.exists(RecordKind.REMOTE_KEY, peer)
            and self.store.exists(RecordKind.SESSION, peer)
        )

    def has_established_session(self, peer: str) -> bool:
        """Session exists and is past the initial prekey handshake."""
        if not self.has_session(peer):
            return False
        session = self._session(peer)
        return session is not None and not session.requires_prekey_bundle()

    def has_bound_identity(self, peer: str) -> bool:
        if not self.has_session(peer):
            return False
        session = self._session(peer)
        return session is not None and session.bound_identity() is not None

    def abort_session(self, peer: str) -> None:
        """Delete all three records for ``peer``. Safe to call repeatedly."""
        emit(self.diagnostics, "session.aborted", peer=peer)
        self.store.delete(RecordKind.LOCAL_KEY, peer)
        self.store.delete(RecordKind.REMOTE_KEY, peer)
        self.store.delete(RecordKind.SESSION, peer)
