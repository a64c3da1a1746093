"""
Local key record initialization and rotation tests.

1. initialize() persists a current/next pair with consecutive ids
2. The initial id is drawn from [1, 4094], both ends reachable
3. Private scalars only reach the store sealed
4. rotate() promotes next and wraps ids modulo 4096
"""

import pytest

from prekey import (
    InvalidKeyError,
    KeyRecordInitializer,
    MasterSecret,
    RecordKind,
    RecordNotFoundError,
    UnavailableSecureRandomError,
    encode_point,
)
from prekey.records import LocalKeyRecord

from conftest import NoRandom, ScriptedRandom

PEER = "bob@example.org"


class TestInitialize:
    """initialize()."""

    def test_persists_record(self, store, master_secret, diagnostics):
        record = KeyRecordInitializer(store, master_secret, diagnostics=diagnostics).initialize(PEER)
        assert store.exists(RecordKind.LOCAL_KEY, PEER)
        assert store.load(RecordKind.LOCAL_KEY, PEER) == record
        assert record.peer == PEER

    def test_id_pairing(self, store, master_secret, diagnostics):
        initializer = KeyRecordInitializer(store, master_secret, diagnostics=diagnostics)
        for _ in range(100):
            record = initializer.initialize(PEER)
            assert 1 <= record.current.key_id <= 4094
            assert record.next.key_id == record.current.key_id + 1

    def test_lowest_initial_id(self, store, master_secret, diagnostics):
        rng = ScriptedRandom(b"\x00\x00")
        record = KeyRecordInitializer(store, master_secret, rng, diagnostics).initialize(PEER)
        assert (record.current.key_id, record.next.key_id) == (1, 2)

    def test_highest_initial_id(self, store, master_secret, diagnostics):
        rng = ScriptedRandom(b"\x0f\xfd")
        record = KeyRecordInitializer(store, master_secret, rng, diagnostics).initialize(PEER)
        assert (record.current.key_id, record.next.key_id) == (4094, 4095)

    def test_reserved_ids_never_drawn(self, store, master_secret, diagnostics):
        # 4094 and 4095 draws would give ids 4095 and 4096: rejected
        rng = ScriptedRandom(b"\x0f\xfe", b"\x0f\xff", b"\x00\x09")
        record = KeyRecordInitializer(store, master_secret, rng, diagnostics).initialize(PEER)
        assert record.current.key_id == 10

    def test_two_distinct_key_pairs(self, store, master_secret, diagnostics):
        initializer = KeyRecordInitializer(store, master_secret, diagnostics=diagnostics)
        initializer.initialize(PEER)
        current, nxt = initializer.key_pairs(PEER)
        assert current.private_scalar != nxt.private_scalar
        assert len(encode_point(current.public_point)) == 33
        assert len(encode_point(nxt.public_point)) == 33

    def test_scalars_are_sealed(self, store, master_secret, diagnostics):
        initializer = KeyRecordInitializer(store, master_secret, diagnostics=diagnostics)
        record = initializer.initialize(PEER)
        current, nxt = initializer.key_pairs(PEER)
        dumped = record.model_dump_json()
        assert str(current.private_scalar) not in dumped
        assert str(nxt.private_scalar) not in dumped

    def test_other_master_secret_cannot_open(self, store, master_secret, diagnostics):
        KeyRecordInitializer(store, master_secret, diagnostics=diagnostics).initialize(PEER)
        other = KeyRecordInitializer(store, MasterSecret.generate(), diagnostics=diagnostics)
        with pytest.raises(InvalidKeyError):
            other.key_pairs(PEER)

    def test_missing_random_source(self, store, master_secret, diagnostics):
        with pytest.raises(UnavailableSecureRandomError):
            KeyRecordInitializer(store, master_secret, NoRandom(), diagnostics).initialize(PEER)
        assert not store.exists(RecordKind.LOCAL_KEY, PEER)

    def test_replaces_existing_record(self, store, master_secret, diagnostics):
        initializer = KeyRecordInitializer(store, master_secret, diagnostics=diagnostics)
        first = initializer.initialize(PEER)
        second = initializer.initialize(PEER)
        assert store.load(RecordKind.LOCAL_KEY, PEER) == second
        assert second.current.public_key != first.current.public_key

    def test_emits_event_without_secrets(self, store, master_secret, diagnostics):
        record = KeyRecordInitializer(store, master_secret, diagnostics=diagnostics).initialize(PEER)
        name, fields = diagnostics.events[-1]
        assert name == "local_keys.initialized"
        assert fields == {"peer": PEER, "current_id": record.current.key_id, "next_id": record.next.key_id}


class TestRotate:
    """rotate()."""

    def test_promotes_next(self, store, master_secret, diagnostics):
        initializer = KeyRecordInitializer(store, master_secret, diagnostics=diagnostics)
        before = initializer.initialize(PEER)
        after = initializer.rotate(PEER)
        assert after.current == before.next
        assert after.next.key_id == before.next.key_id + 1
        assert store.load(RecordKind.LOCAL_KEY, PEER) == after

    def test_wraps_at_4095(self, store, master_secret, diagnostics):
        rng = ScriptedRandom(b"\x0f\xfd")
        initializer = KeyRecordInitializer(store, master_secret, rng, diagnostics)
        initializer.initialize(PEER)
        rotated = initializer.rotate(PEER)
        assert (rotated.current.key_id, rotated.next.key_id) == (4095, 0)
        rotated = initializer.rotate(PEER)
        assert (rotated.current.key_id, rotated.next.key_id) == (0, 1)

    def test_rotated_pairs_open(self, store, master_secret, diagnostics):
        initializer = KeyRecordInitializer(store, master_secret, diagnostics=diagnostics)
        initializer.initialize(PEER)
        initializer.rotate(PEER)
        current, nxt = initializer.key_pairs(PEER)
        assert nxt.id == current.id + 1 or (current.id, nxt.id) == (4095, 0)

    def test_rotate_without_record(self, store, master_secret, diagnostics):
        with pytest.raises(RecordNotFoundError):
            KeyRecordInitializer(store, master_secret, diagnostics=diagnostics).rotate(PEER)

    def test_record_rotated_helper(self, store, master_secret, diagnostics):
        record = KeyRecordInitializer(store, master_secret, diagnostics=diagnostics).initialize(PEER)
        assert isinstance(record.rotated(record.current), LocalKeyRecord)
        assert record.rotated(record.current).current == record.next


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
