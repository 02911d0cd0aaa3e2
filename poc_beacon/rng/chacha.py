"""
ChaCha keystream generator
==========================

A seedable ChaCha stream exposing the keystream as little-endian 32-bit words.

Block layout (16 x u32)::

    "expa" "nd 3" "2-by" "te k"  | key[0..4]
    key[4..8]                    | ctr_lo ctr_hi stream_lo stream_hi

The key is the 32-byte seed, the block counter is 64 bits wide and starts at
zero, and the stream id is zero. Blocks are consumed in counter order and each
block's words in index order, so the output is the plain keystream read four
bytes at a time. A 64-bit draw is two consecutive words, low word first.

With `rounds=20` this is byte-for-byte the standard ChaCha20 keystream; beacon
derivation uses `rounds=12`.
"""

from __future__ import annotations

import struct
from typing import List

from poc_beacon.utils.bytes import ensure_len

__all__ = ["ChaChaRng", "chacha_block"]

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_SIGMA = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)  # "expand 32-byte k"

_COLUMNS = ((0, 4, 8, 12), (1, 5, 9, 13), (2, 6, 10, 14), (3, 7, 11, 15))
_DIAGONALS = ((0, 5, 10, 15), (1, 6, 11, 12), (2, 7, 8, 13), (3, 4, 9, 14))


def _rotl(v: int, c: int) -> int:
    return ((v << c) & _MASK32) | (v >> (32 - c))


def _quarter_round(x: List[int], a: int, b: int, c: int, d: int) -> None:
    x[a] = (x[a] + x[b]) & _MASK32
    x[d] = _rotl(x[d] ^ x[a], 16)
    x[c] = (x[c] + x[d]) & _MASK32
    x[b] = _rotl(x[b] ^ x[c], 12)
    x[a] = (x[a] + x[b]) & _MASK32
    x[d] = _rotl(x[d] ^ x[a], 8)
    x[c] = (x[c] + x[d]) & _MASK32
    x[b] = _rotl(x[b] ^ x[c], 7)


def chacha_block(key_words: tuple, counter: int, stream: int = 0, rounds: int = 12) -> List[int]:
    """Compute one 64-byte block as 16 words."""
    state = [
        *_SIGMA,
        *key_words,
        counter & _MASK32,
        (counter >> 32) & _MASK32,
        stream & _MASK32,
        (stream >> 32) & _MASK32,
    ]
    x = list(state)
    for _ in range(rounds // 2):
        for a, b, c, d in _COLUMNS:
            _quarter_round(x, a, b, c, d)
        for a, b, c, d in _DIAGONALS:
            _quarter_round(x, a, b, c, d)
    return [(x[i] + state[i]) & _MASK32 for i in range(16)]


class ChaChaRng:
    """
    Deterministic ChaCha word stream.

        rng = ChaChaRng(seed32)           # ChaCha12
        rng.next_u32(); rng.next_u64()

    Identical seeds (and round counts) always produce identical streams.
    """

    __slots__ = ("_key", "_rounds", "_stream", "_counter", "_buf", "_idx")

    def __init__(self, seed: bytes, *, rounds: int = 12, stream: int = 0) -> None:
        seed = ensure_len(seed, 32, name="seed")
        if rounds <= 0 or rounds % 2:
            raise ValueError("rounds must be a positive even number")
        self._key = struct.unpack("<8I", bytes(seed))
        self._rounds = rounds
        self._stream = stream & _MASK64
        self._counter = 0
        self._buf: List[int] = []
        self._idx = 0

    @property
    def rounds(self) -> int:
        return self._rounds

    @property
    def word_pos(self) -> int:
        """Number of 32-bit words consumed so far."""
        return (self._counter - 1) * 16 + self._idx if self._buf else 0

    def _refill(self) -> None:
        self._buf = chacha_block(self._key, self._counter, self._stream, self._rounds)
        self._counter = (self._counter + 1) & _MASK64
        self._idx = 0

    def next_u32(self) -> int:
        if self._idx >= len(self._buf):
            self._refill()
        w = self._buf[self._idx]
        self._idx += 1
        return w

    def next_u64(self) -> int:
        lo = self.next_u32()
        hi = self.next_u32()
        return (hi << 32) | lo

    def keystream(self, n: int) -> bytes:
        """Return the next `n` keystream bytes, consuming whole words."""
        if n < 0:
            raise ValueError("n must be non-negative")
        words = (n + 3) // 4
        out = b"".join(struct.pack("<I", self.next_u32()) for _ in range(words))
        return out[:n]
