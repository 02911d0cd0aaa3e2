"""
Beacon derivation errors.

A small, typed hierarchy of exceptions raised while deriving a beacon or
building its report. Callers can catch the base `BeaconError` to abort the
current beacon attempt, or catch the concrete subclasses for more granular
control. None of these are transient: retrying with the same inputs fails the
same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


class BeaconError(Exception):
    """Base class for all beacon derivation errors."""
    pass


@dataclass(frozen=True)
class InvalidVersion(BeaconError):
    """
    Raised when an entropy version is outside the supported set, or when the
    remote and local entropy belong to different schemes.

    Attributes:
        version: The offending version tag.
        source: Which entropy carried it ('remote' or 'local').
        supported: The accepted version tags.
    """
    version: int
    source: str = "remote"
    supported: Tuple[int, ...] = (0, 1)

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return (
            f"InvalidVersion: {self.source} entropy version={self.version} "
            f"supported={list(self.supported)}"
        )


@dataclass(frozen=True)
class NoRegionParameters(BeaconError):
    """Raised when the region channel plan is empty."""

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return "NoRegionParameters: no region channel frequencies supplied"


@dataclass(frozen=True)
class NoDataRate(BeaconError):
    """Raised when the configured datarate list is empty."""

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return "NoDataRate: no beacon datarates configured"


@dataclass(frozen=True)
class ClockError(BeaconError):
    """
    Raised when the system clock cannot be read or reports a time before the
    UNIX epoch.

    Attributes:
        reason: Optional explanation (e.g., 'before-epoch', or the OS error text).
    """
    reason: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return "ClockError" + (f": {self.reason}" if self.reason else "")


__all__ = [
    "BeaconError",
    "InvalidVersion",
    "NoRegionParameters",
    "NoDataRate",
    "ClockError",
]
