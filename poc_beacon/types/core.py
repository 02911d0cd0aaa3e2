from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from poc_beacon.constants import MAX_BEACON_PAYLOAD_SIZE, MIN_BEACON_PAYLOAD_SIZE
from poc_beacon.datarate import DataRate
from poc_beacon.utils.bytes import to_b64, to_hex

"""
Core typed primitives for beacon derivation.

These are intentionally minimal and free of heavy dependencies so they can be
shared across submodules (entropy sources, the deriver, report construction,
CLI, and tests).

Types provided:
  • Entropy         : versioned entropy value (data + timestamp)
  • RegionParameter : one allowed transmit channel of a region plan
  • Beacon          : derived payload and transmit parameters
"""

# Signed 64-bit bounds for entropy timestamps (serialized as 8 LE bytes)
_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1
_U64_MAX = (1 << 64) - 1


def _require_nonneg(name: str, v: int) -> None:
    if v < 0:
        raise ValueError(f"{name} must be non-negative (got {v})")


# ---- Entropy -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Entropy:
    """
    A versioned entropy value.

    Fields:
      version   : scheme tag (see constants.SUPPORTED_ENTROPY_VERSIONS)
      data      : opaque entropy bytes (a nonce, a random draw, …)
      timestamp : seconds since the UNIX epoch at generation (signed 64-bit)
    """

    version: int
    data: bytes
    timestamp: int

    def __post_init__(self) -> None:  # type: ignore[override]
        if not isinstance(self.version, int) or isinstance(self.version, bool):
            raise TypeError("version must be an int")
        _require_nonneg("version", self.version)
        if not isinstance(self.data, (bytes, bytearray)):
            raise TypeError("data must be bytes")
        if isinstance(self.data, bytearray):
            object.__setattr__(self, "data", bytes(self.data))
        if not isinstance(self.timestamp, int) or isinstance(self.timestamp, bool):
            raise TypeError("timestamp must be an int")
        if not (_I64_MIN <= self.timestamp <= _I64_MAX):
            raise ValueError("timestamp must fit in a signed 64-bit integer")

    def to_bytes(self) -> bytes:
        """Serialization absorbed by the mixing digest: data || i64_le(timestamp)."""
        return self.data + self.timestamp.to_bytes(8, "little", signed=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "data": to_hex(self.data),
            "timestamp": self.timestamp,
        }

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Entropy":
        data = d["data"]
        if isinstance(data, str):
            body = data[2:] if data.startswith(("0x", "0X")) else data
            data = bytes.fromhex(body)
        return Entropy(
            version=int(d.get("version", 0)),
            data=data,
            timestamp=int(d.get("timestamp", 0)),
        )


# ---- Region plan ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RegionParameter:
    """
    One allowed transmit channel of a region's channel plan.

    Only `channel_frequency` takes part in the derivation; bandwidth and
    max_eirp ride along from the plan for callers that need them.
    """

    channel_frequency: int
    bandwidth: int = 0
    max_eirp: int = 0

    def __post_init__(self) -> None:  # type: ignore[override]
        for name in ("channel_frequency", "bandwidth", "max_eirp"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            _require_nonneg(name, v)
        if self.channel_frequency > _U64_MAX:
            raise ValueError("channel_frequency must fit in an unsigned 64-bit integer")


# ---- Beacon ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Beacon:
    """
    A derived beacon.

    Fields:
      data           : payload, a prefix of the mixing digest
      frequency      : selected channel frequency (Hz)
      datarate       : selected datarate
      remote_entropy : remote entropy the beacon was derived from
      local_entropy  : local entropy the beacon was derived from
    """

    data: bytes
    frequency: int
    datarate: DataRate
    remote_entropy: Entropy
    local_entropy: Entropy

    def __post_init__(self) -> None:  # type: ignore[override]
        if not isinstance(self.data, (bytes, bytearray)):
            raise TypeError("data must be bytes")
        if isinstance(self.data, bytearray):
            object.__setattr__(self, "data", bytes(self.data))
        if not (MIN_BEACON_PAYLOAD_SIZE <= len(self.data) <= MAX_BEACON_PAYLOAD_SIZE):
            raise ValueError(
                f"data length must be in [{MIN_BEACON_PAYLOAD_SIZE}, "
                f"{MAX_BEACON_PAYLOAD_SIZE}] (got {len(self.data)})"
            )
        if not isinstance(self.datarate, DataRate):
            raise TypeError("datarate must be a DataRate")

    def beacon_id(self) -> str:
        """Standard base64 encoding of the payload; stable dedup key for the beacon."""
        return to_b64(self.data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "beacon_id": self.beacon_id(),
            "data": to_hex(self.data),
            "frequency": self.frequency,
            "datarate": self.datarate.name,
            "remote_entropy": self.remote_entropy.to_dict(),
            "local_entropy": self.local_entropy.to_dict(),
        }


__all__ = ["Entropy", "RegionParameter", "Beacon", "DataRate"]
