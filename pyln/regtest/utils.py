from binascii import unhexlify

import os


def env(name, default=None):
    """Look up a test setting in the environment, or use {default}."""
    return os.environ.get(name, default)


TEST_NETWORK = env("TEST_NETWORK", 'regtest')
TEST_DEBUG = env("TEST_DEBUG", "0") == "1"


def sat_to_msat(amount: int) -> int:
    return amount * 1000


def parse_pubkey(peer_id: str) -> bytes:
    """Decode a hex-encoded compressed public key, or raise ValueError."""
    try:
        raw = unhexlify(peer_id)
    except (TypeError, ValueError):
        raise ValueError("Invalid node id {!r}: not hex".format(peer_id))
    if len(raw) != 33 or raw[0] not in (2, 3):
        raise ValueError("Invalid node id {!r}: not a compressed public key".format(peer_id))
    return raw


def only_first(arr):
    """Many RPC calls return an array where we only care about the first
    entry, if any.
    """
    return arr[0] if arr else None
