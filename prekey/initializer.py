from typing import Optional, Tuple

from .diagnostics import Diagnostics, LoggingDiagnostics, emit
from .keys import (
    MAX_KEY_ID,
    KeyPair,
    MasterSecret,
    generate_key_pair,
    next_key_id,
    open_key_pair,
    seal_key_pair,
)
from .primitive import SecureRandom, random_int
from .records import LocalKeyRecord, RecordKind, RecordStore


class KeyRecordInitializer:
    """
    Seeds and rotates the local current/next key pairs for a peer.

    Private scalars are sealed under ``master_secret`` before they reach
    the store.
    """

    def __init__(
        self,
        store: RecordStore,
        master_secret: MasterSecret,
        rng: Optional[SecureRandom] = None,
        diagnostics: Optional[Diagnostics] = None,
    ):
        self.store = store
        self.master_secret = master_secret
        self.rng = rng
        self.diagnostics = diagnostics or LoggingDiagnostics()

    def _generate(self, key_id: int) -> KeyPair:
        return generate_key_pair(self.rng).with_id(key_id)

    def initialize(self, peer: str) -> LocalKeyRecord:
        """
        Create and persist a fresh record for ``peer``.

        The initial id is uniform in [1, 4094] so that 0 stays reserved and
        the paired next id (initial + 1) never passes 4095.
        """
        initial_id = random_int(1, MAX_KEY_ID - 1, self.rng)
        current = self._generate(initial_id)
        nxt = self._generate(next_key_id(initial_id))

        record = LocalKeyRecord(
            peer=peer,
            current=seal_key_pair(current, self.master_secret, peer),
            next=seal_key_pair(nxt, self.master_secret, peer),
        )
        self.store.save(RecordKind.LOCAL_KEY, peer, record)
        emit(self.diagnostics, "local_keys.initialized", peer=peer, current_id=current.id, next_id=nxt.id)
        return record

    def rotate(self, peer: str) -> LocalKeyRecord:
        """Promote next to current and stage a new next; ids wrap modulo 4096."""
        record = self.store.load(RecordKind.LOCAL_KEY, peer)
        fresh = self._generate(next_key_id(record.next.key_id))
        rotated = record.rotated(seal_key_pair(fresh, self.master_secret, peer))
        self.store.save(RecordKind.LOCAL_KEY, peer, rotated)
        emit(self.diagnostics, "local_keys.rotated", peer=peer, current_id=rotated.current.key_id, next_id=fresh.id)
        return rotated

    def key_pairs(self, peer: str) -> Tuple[KeyPair, KeyPair]:
        """Unsealed (current, next) key pairs for ``peer``."""
        record = self.store.load(RecordKind.LOCAL_KEY, peer)
        return (
            open_key_pair(record.current, self.master_secret, peer),
            open_key_pair(record.next, self.master_secret, peer),
        )
