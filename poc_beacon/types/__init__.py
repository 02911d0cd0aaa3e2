"""
poc_beacon.types
----------------
Typed value objects shared across the beacon package.
"""

from __future__ import annotations

from .core import Beacon, Entropy, RegionParameter
from poc_beacon.datarate import DataRate

__all__ = ["Beacon", "DataRate", "Entropy", "RegionParameter"]
