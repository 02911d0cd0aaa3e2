"""
poc_beacon.utils.time
=====================

Wall-clock reads for the entropy and report collaborators.

The derivation itself never reads the clock. Entropy generation and report
construction do, and any failure to read it (or a reading before the UNIX
epoch) surfaces as :class:`~poc_beacon.errors.ClockError`.
"""

from __future__ import annotations

import time
from typing import Callable

from poc_beacon.errors import ClockError

__all__ = ["ClockS", "ClockNs", "unix_seconds", "unix_nanos"]

ClockS = Callable[[], float]
ClockNs = Callable[[], int]


def unix_seconds(clock: ClockS = time.time) -> int:
    """Whole seconds since the UNIX epoch."""
    try:
        now = clock()
    except (OSError, OverflowError, ValueError) as e:
        raise ClockError(str(e)) from e
    if now < 0:
        raise ClockError("before-epoch")
    return int(now)


def unix_nanos(clock_ns: ClockNs = time.time_ns) -> int:
    """Nanoseconds since the UNIX epoch."""
    try:
        now = clock_ns()
    except (OSError, OverflowError, ValueError) as e:
        raise ClockError(str(e)) from e
    if now < 0:
        raise ClockError("before-epoch")
    return int(now)
