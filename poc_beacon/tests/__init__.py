"""
poc_beacon.tests
----------------
Test package for beacon derivation.

Notes:
- Known-answer tests pin the ChaCha keystream to published vectors; the
  derivation tests pin draw order and sampling with scripted word sources.
"""

from __future__ import annotations

__all__: tuple[str, ...] = ()
