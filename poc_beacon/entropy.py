"""
Entropy sources.

Two kinds of entropy feed a beacon:

- *remote* entropy, published by an entropy service and received as a report
  (mapping), see :func:`entropy_from_report`;
- *local* entropy, generated on the device right before beaconing, see
  :func:`local_entropy`.

Neither source is part of the reproducibility contract: once built, an
:class:`~poc_beacon.types.core.Entropy` is just a value.
"""

from __future__ import annotations

import secrets
import time
from typing import Any, Callable, Mapping

from poc_beacon.constants import LOCAL_ENTROPY_SIZE, LOCAL_ENTROPY_VERSION
from poc_beacon.types.core import Entropy
from poc_beacon.utils.bytes import decode_bytes
from poc_beacon.utils.time import ClockS, unix_seconds

__all__ = ["local_entropy", "entropy_from_report"]


def local_entropy(
    *,
    clock: ClockS = time.time,
    size: int = LOCAL_ENTROPY_SIZE,
    token_bytes: Callable[[int], bytes] = secrets.token_bytes,
) -> Entropy:
    """
    Fresh device-side entropy: `size` random bytes stamped with the current
    UNIX time in seconds.

    Raises:
        ClockError: if the clock cannot be read or is before the epoch.
    """
    if size <= 0:
        raise ValueError("size must be > 0")
    timestamp = unix_seconds(clock)
    return Entropy(version=LOCAL_ENTROPY_VERSION, data=token_bytes(size), timestamp=timestamp)


def entropy_from_report(report: Mapping[str, Any]) -> Entropy:
    """
    Build remote entropy from a decoded entropy report.

    Accepted keys: ``version`` (default 0), ``data`` (bytes, hex or base64 text),
    ``timestamp`` (default 0) and an optional ``encoding`` hint ("hex"/"base64")
    for ``data``.
    """
    if "data" not in report:
        raise ValueError("entropy report is missing 'data'")
    data = report["data"]
    if isinstance(data, str):
        data = decode_bytes(data, report.get("encoding"))
    elif isinstance(data, (bytearray, memoryview)):
        data = bytes(data)
    elif not isinstance(data, bytes):
        raise TypeError(f"entropy data must be bytes or str, got {type(data)!r}")
    try:
        version = int(report.get("version", 0))
        timestamp = int(report.get("timestamp", 0))
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid entropy report field: {e}") from e
    return Entropy(version=version, data=data, timestamp=timestamp)
