"""
Proof-of-coverage beacon derivation.

Given a remote and a local entropy value plus a region channel plan, derive a
beacon payload, transmit frequency and datarate that any party holding the
same inputs can recompute.

    from poc_beacon import Entropy, RegionParameter, derive, beacon_id

    beacon = derive(remote, local, [RegionParameter(904_300_000)])
    key = beacon_id(beacon)
"""

from __future__ import annotations

from .version import __version__
from .beacon.derive import BeaconDeriver, beacon_id, derive
from .datarate import DataRate
from .errors import (BeaconError, ClockError, InvalidVersion, NoDataRate,
                     NoRegionParameters)
from .types.core import Beacon, Entropy, RegionParameter

__all__ = [
    "__version__",
    "Beacon",
    "BeaconDeriver",
    "BeaconError",
    "ClockError",
    "DataRate",
    "Entropy",
    "InvalidVersion",
    "NoDataRate",
    "NoRegionParameters",
    "RegionParameter",
    "beacon_id",
    "derive",
]
