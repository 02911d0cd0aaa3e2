"""
poc_beacon.utils.hash
=====================

SHA-256 mixing of the two entropy inputs.

The mixing digest is the root of every derived value: its 32 bytes seed the
ChaCha stream *and* its prefix becomes the beacon payload. The absorbed bytes
are, in order::

    remote.data || i64_le(remote.timestamp) || local.data || i64_le(local.timestamp)

No domain tag or length framing is added. Other implementations hash exactly
these bytes, so adding either would break reproducibility.
"""

from __future__ import annotations

from hashlib import sha256 as _sha256

from poc_beacon.types.core import Entropy

__all__ = ["sha256", "mixing_digest", "DIGEST_SIZE"]

DIGEST_SIZE = 32


def sha256(data: bytes) -> bytes:
    """Return SHA-256(data)."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("sha256 expects a bytes-like object")
    return _sha256(bytes(data)).digest()


def mixing_digest(remote: Entropy, local: Entropy) -> bytes:
    """32-byte digest over the remote entropy followed by the local entropy."""
    h = _sha256()
    h.update(remote.to_bytes())
    h.update(local.to_bytes())
    return h.digest()
