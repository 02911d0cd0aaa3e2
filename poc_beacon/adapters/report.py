"""
Beacon → report adapter.

Builds the report a gateway submits after transmitting a beacon. The report
carries the beacon payload and parameters plus a creation timestamp taken
*when the report is built* (never from the beacon, never fed back into
derivation).

Key material and signatures belong to other collaborators: ``pub_key`` and
``signature`` are left empty here and filled in with :meth:`IotBeaconReport.with_signer`.

Encoding uses ``msgspec`` JSON; bytes fields are emitted as standard base64.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict

import msgspec

from poc_beacon.constants import DEFAULT_TX_POWER_DBM
from poc_beacon.types.core import Beacon
from poc_beacon.utils.bytes import to_b64
from poc_beacon.utils.time import ClockNs, unix_nanos

logger = logging.getLogger(__name__)

__all__ = ["IotBeaconReport", "build_report", "encode_report", "decode_report"]


@dataclass(frozen=True)
class IotBeaconReport:
    """Wire-level beacon report. `datarate` is the numeric datarate tag."""

    pub_key: bytes
    local_entropy: bytes
    remote_entropy: bytes
    data: bytes
    frequency: int
    channel: int
    datarate: int
    tmst: int
    tx_power: int
    timestamp: int
    signature: bytes

    def with_signer(self, *, pub_key: bytes, signature: bytes) -> "IotBeaconReport":
        return replace(self, pub_key=bytes(pub_key), signature=bytes(signature))

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        for k, v in d.items():
            if isinstance(v, bytes):
                d[k] = to_b64(v)
        return d


def build_report(
    beacon: Beacon,
    *,
    clock_ns: ClockNs = time.time_ns,
    tx_power: int = DEFAULT_TX_POWER_DBM,
) -> IotBeaconReport:
    """
    Raises:
        ClockError: the clock cannot be read or reports a pre-epoch time.
    """
    timestamp = unix_nanos(clock_ns)
    report = IotBeaconReport(
        pub_key=b"",
        local_entropy=beacon.local_entropy.data,
        remote_entropy=beacon.remote_entropy.data,
        data=beacon.data,
        frequency=beacon.frequency,
        channel=0,
        datarate=int(beacon.datarate),
        tmst=0,
        tx_power=tx_power,
        timestamp=timestamp,
        signature=b"",
    )
    logger.debug("beacon report built", extra={"beacon_id": beacon.beacon_id()})
    return report


def encode_report(report: IotBeaconReport) -> bytes:
    return msgspec.json.encode(report)


def decode_report(payload: bytes) -> IotBeaconReport:
    return msgspec.json.decode(payload, type=IotBeaconReport)
