"""
poc_beacon.beacon
-----------------
Beacon derivation from a (remote, local) entropy pair.
"""

from __future__ import annotations

from .derive import BeaconDeriver, beacon_id, derive

__all__ = ["BeaconDeriver", "beacon_id", "derive"]
