"""
poc_beacon.rng
--------------
Seeded, reproducible randomness for beacon parameter selection.

- :class:`ChaChaRng` turns a 32-byte seed into a ChaCha keystream of 32/64-bit words.
- :class:`UniformSampler` maps those words to uniform indices and integer ranges.
- :class:`RandomSource` is the capability the deriver consumes.
"""

from __future__ import annotations

from .chacha import ChaChaRng
from .uniform import RandomSource, UniformSampler, chacha12_source

__all__ = ["ChaChaRng", "RandomSource", "UniformSampler", "chacha12_source"]
