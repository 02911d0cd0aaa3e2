"""
Uniform sampling over a ChaCha word stream
==========================================

The deriver only needs two operations from its randomness:

  • ``gen_index(n)``              : uniform index in ``[0, n)``
  • ``gen_range_inclusive(lo, hi)``: uniform integer in ``[lo, hi]``

:class:`UniformSampler` implements both with the widening-multiply rejection
method used by the Rust ``rand`` 0.8 crate, so a given seed yields the same
indices in every implementation that follows it:

    range = hi - lo + 1              (mod 2^w; 0 means the full w-bit range)
    zone  = (range << clz_w(range)) - 1
    loop:
        v        = next w-bit word
        hi, lo'  = high / low w bits of v * range
        if lo' <= zone: return lo + hi

Width ``w`` is 32 bits for indices below 2^32 and 64 bits otherwise.
Inclusive integer ranges are sampled at 64 bits (a 64-bit ``usize``).
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, TypeVar, runtime_checkable

from poc_beacon.constants import CHACHA_ROUNDS
from poc_beacon.rng.chacha import ChaChaRng

__all__ = ["RandomSource", "WordSource", "UniformSampler", "choose", "chacha12_source"]

T = TypeVar("T")

_U32_MAX = (1 << 32) - 1


@runtime_checkable
class WordSource(Protocol):
    def next_u32(self) -> int: ...
    def next_u64(self) -> int: ...


@runtime_checkable
class RandomSource(Protocol):
    """Capability consumed by the beacon deriver."""

    def gen_index(self, n: int) -> int: ...
    def gen_range_inclusive(self, low: int, high: int) -> int: ...


def _leading_zeros(v: int, bits: int) -> int:
    return bits - v.bit_length()


class UniformSampler:
    """Uniform index/range sampling over a :class:`WordSource`."""

    __slots__ = ("_words",)

    def __init__(self, words: WordSource) -> None:
        self._words = words

    @property
    def words(self) -> WordSource:
        return self._words

    def _next(self, bits: int) -> int:
        return self._words.next_u32() if bits == 32 else self._words.next_u64()

    def sample_inclusive(self, low: int, high: int, *, bits: int = 64) -> int:
        if bits not in (32, 64):
            raise ValueError("bits must be 32 or 64")
        if low > high:
            raise ValueError(f"empty range [{low}, {high}]")
        mask = (1 << bits) - 1
        if low < 0 or high > mask:
            raise ValueError(f"range [{low}, {high}] does not fit in u{bits}")
        span = (high - low + 1) & mask
        if span == 0:
            return self._next(bits)
        zone = ((span << _leading_zeros(span, bits)) - 1) & mask
        while True:
            m = self._next(bits) * span
            if (m & mask) <= zone:
                return low + (m >> bits)

    def gen_index(self, n: int) -> int:
        if n <= 0:
            raise ValueError("cannot sample an index from an empty range")
        if n <= _U32_MAX:
            return self.sample_inclusive(0, n - 1, bits=32)
        return self.sample_inclusive(0, n - 1, bits=64)

    def gen_range_inclusive(self, low: int, high: int) -> int:
        return self.sample_inclusive(low, high, bits=64)


def choose(items: Sequence[T], source: RandomSource) -> Optional[T]:
    """Pick one element uniformly; ``None`` (and no draw) for an empty sequence."""
    if not items:
        return None
    return items[source.gen_index(len(items))]


def chacha12_source(seed: bytes) -> UniformSampler:
    """Default production source: ChaCha12 seeded with the 32-byte mixing digest."""
    return UniformSampler(ChaChaRng(seed, rounds=CHACHA_ROUNDS))
