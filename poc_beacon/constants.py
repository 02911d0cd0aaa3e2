"""
Beacon derivation constants.

These values are part of the derivation contract: every party recomputing a
beacon must use the same payload bounds and the same datarate list *in the
same order*, otherwise the seeded draws select different parameters.
"""

from __future__ import annotations

from typing import Tuple

from poc_beacon.datarate import DataRate

# -----------------------------
# Payload bounds (bytes)
# -----------------------------
MIN_BEACON_PAYLOAD_SIZE: int = 5
MAX_BEACON_PAYLOAD_SIZE: int = 10

# -----------------------------
# Datarates
# -----------------------------
# Supported worldwide. SF11/SF12 are not available in every region.
BEACON_DATA_RATES: Tuple[DataRate, ...] = (
    DataRate.SF7BW125,
    DataRate.SF8BW125,
    DataRate.SF9BW125,
    DataRate.SF10BW125,
)

# -----------------------------
# Entropy / seeding
# -----------------------------
# Scheme tags accepted by the derivation; all map to the same v0 scheme.
SUPPORTED_ENTROPY_VERSIONS: Tuple[int, ...] = (0, 1)
LOCAL_ENTROPY_VERSION: int = 0
LOCAL_ENTROPY_SIZE: int = 32

SEED_SIZE: int = 32
CHACHA_ROUNDS: int = 12

# -----------------------------
# Report defaults
# -----------------------------
DEFAULT_TX_POWER_DBM: int = 27

__all__ = [
    "MIN_BEACON_PAYLOAD_SIZE",
    "MAX_BEACON_PAYLOAD_SIZE",
    "BEACON_DATA_RATES",
    "SUPPORTED_ENTROPY_VERSIONS",
    "LOCAL_ENTROPY_VERSION",
    "LOCAL_ENTROPY_SIZE",
    "SEED_SIZE",
    "CHACHA_ROUNDS",
    "DEFAULT_TX_POWER_DBM",
]
