"""
Handshake Usage Example

Quick reference for seeding local keys, accepting a peer's public key and
checking session state.
"""

from prekey import (
    JsonRecordStore,
    KeyRecordInitializer,
    MasterSecret,
    RecordKind,
    RemoteKey,
    RemoteKeyRecord,
    SessionRecord,
    SessionStateOracle,
    calculate_agreement,
    decode_point,
    encode_point,
    generate_key_pair,
    public_key_to_b64,
)
from prekey.config import configure_logging

configure_logging()

PEER = "+15550001111"

# ========================================
# SETUP: master secret + record store
# ========================================

master_secret = MasterSecret.from_passphrase("example passphrase", salt=b"example-salt-123")
store = JsonRecordStore("example_keystore.json")

oracle = SessionStateOracle(store)
initializer = KeyRecordInitializer(store, master_secret)

print(f"Session before setup: {oracle.has_session(PEER)}")


# ========================================
# SEED OUR current/next KEY PAIRS
# ========================================

record = initializer.initialize(PEER)
current, _ = initializer.key_pairs(PEER)
our_wire_key = encode_point(current.public_point)   # 33 bytes, goes in our bundle

print(f"Local key ids: current={record.current.key_id} next={record.next.key_id}")


# ========================================
# PEER'S KEY ARRIVES (simulated)
# ========================================

peer_pair = generate_key_pair().with_id(7)
peer_wire_key = encode_point(peer_pair.public_point)

remote_point = decode_point(peer_wire_key)          # raises InvalidKeyError on bad input
store.save(
    RecordKind.REMOTE_KEY,
    PEER,
    RemoteKeyRecord(peer=PEER, current=RemoteKey(key_id=7, public_key=public_key_to_b64(remote_point))),
)
store.save(RecordKind.SESSION, PEER, SessionRecord(peer=PEER, prekey_bundle_required=True))

print(f"Session present: {oracle.has_session(PEER)}")
print(f"Established: {oracle.has_established_session(PEER)}")


# ========================================
# AGREEMENT (feed the result to a KDF, never print it)
# ========================================

ours = calculate_agreement(current.private_scalar, remote_point)
theirs = calculate_agreement(peer_pair.private_scalar, decode_point(our_wire_key))
print(f"✓ Both sides agree: {ours == theirs}")


# ========================================
# TEARDOWN
# ========================================

oracle.abort_session(PEER)
print(f"Session after abort: {oracle.has_session(PEER)}")
