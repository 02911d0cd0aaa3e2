"""
poc_beacon.utils.bytes
======================

Small utilities for working with hex/base64/bytes plus strict **length guards**.
Kept dependency-free (stdlib only) and safe for deterministic contexts.

Highlights
----------
- :func:`to_hex` / :func:`from_hex` with strict validation.
- :func:`to_b64` / :func:`from_b64` using the standard (padded) alphabet.
- :func:`as_bytes` to normalize bytes-like values.
- :func:`decode_bytes` to accept hex *or* base64 text from user input.
- Length guard: :func:`ensure_len`.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Optional, Union

BytesLike = Union[bytes, bytearray, memoryview]

__all__ = [
    "to_hex",
    "from_hex",
    "is_hex",
    "to_b64",
    "from_b64",
    "as_bytes",
    "decode_bytes",
    "ensure_len",
]

# -----------------
# Hex <-> Bytes I/O
# -----------------

_HEX_RE = re.compile(r"^(?:0[xX])?[0-9a-fA-F]*$")


def is_hex(s: str) -> bool:
    """
    Return True if *s* is a valid hex string with an optional ``0x`` prefix.
    Enforces no whitespace and even number of nibbles (after optional prefix).
    """
    if not isinstance(s, str):
        return False
    if not _HEX_RE.match(s):
        return False
    body = s[2:] if s.startswith(("0x", "0X")) else s
    return len(body) % 2 == 0


def from_hex(s: str) -> bytes:
    """
    Convert a hex string (with optional ``0x``) to bytes.

    Strict rules:
    - No whitespace.
    - Only 0-9a-fA-F characters (plus optional prefix).
    - Even-length nibble count.
    """
    if not isinstance(s, str):
        raise TypeError("from_hex expects a str")
    if not _HEX_RE.match(s):
        raise ValueError("invalid hex string (characters or whitespace)")
    body = s[2:] if s.startswith(("0x", "0X")) else s
    if len(body) % 2 != 0:
        raise ValueError("hex string must have an even number of nibbles")
    return bytes.fromhex(body)


def to_hex(b: BytesLike, *, prefix: str = "0x") -> str:
    """Encode bytes as lowercase hex. By default returns with ``0x`` prefix."""
    return (prefix or "") + as_bytes(b).hex()


# --------------------
# Base64 <-> Bytes I/O
# --------------------


def to_b64(b: BytesLike) -> str:
    """Standard-alphabet, padded base64."""
    return base64.b64encode(as_bytes(b)).decode("ascii")


def from_b64(s: str) -> bytes:
    """Strict standard-alphabet base64 decode (rejects stray characters)."""
    if not isinstance(s, str):
        raise TypeError("from_b64 expects a str")
    try:
        return base64.b64decode(s, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64: {e}") from e


def decode_bytes(s: str, encoding: Optional[str] = None) -> bytes:
    """
    Decode user-supplied text to bytes.

    ``encoding`` may be "hex" or "base64". When omitted, ``0x``-prefixed
    strings are hex and anything else is tried as hex first, then base64.
    """
    if encoding is not None:
        enc = encoding.strip().lower()
        if enc == "hex":
            return from_hex(s)
        if enc in ("base64", "b64"):
            return from_b64(s)
        raise ValueError(f"unknown encoding: {encoding!r}")
    if s.startswith(("0x", "0X")) or is_hex(s):
        return from_hex(s)
    return from_b64(s)


# --------------
# Bytes utilities
# --------------


def as_bytes(x: BytesLike) -> bytes:
    """Normalize bytes-like to immutable :class:`bytes`."""
    if isinstance(x, bytes):
        return x
    if isinstance(x, (bytearray, memoryview)):
        return bytes(x)
    raise TypeError(f"expected bytes-like, got {type(x)!r}")


def ensure_len(b: BytesLike, expected: int, *, name: str = "value") -> bytes:
    """
    Ensure ``len(b) == expected``. Returns bytes on success, raises ValueError otherwise.
    """
    bb = as_bytes(b)
    if len(bb) != expected:
        raise ValueError(f"{name} must be {expected} bytes, got {len(bb)}")
    return bb
