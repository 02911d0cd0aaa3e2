"""
Beacon module configuration.

Operational knobs that are *not* part of the derivation contract:
- Report defaults (transmit power)
- Region channel plan location
- Logging level/format

Derivation constants (payload bounds, datarate order, ChaCha rounds) live in
`poc_beacon.constants` and are deliberately not configurable.

Provides:
- A dataclass-based config with validation
- Loading from environment variables (prefix configurable)
- Loading from a JSON or YAML file
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from poc_beacon.constants import DEFAULT_TX_POWER_DBM

ENV_PREFIX = "POC_BEACON_"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_LOG_FORMATS = {"json", "text", "auto"}


@dataclass
class BeaconConfig:
    """
    tx_power:          transmit power (dBm) written into beacon reports
    region_file:       optional JSON/YAML channel plan used by the CLI
    log_level:         minimum log level
    log_format:        "json", "text" or "auto" (TTY detection)
    """

    tx_power: int = DEFAULT_TX_POWER_DBM
    region_file: Optional[str] = None
    log_level: str = "INFO"
    log_format: str = "auto"

    def validate(self) -> None:
        if not (0 <= self.tx_power <= 40):
            raise ValueError("tx_power must be between 0 and 40 dBm")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unsupported log_level: {self.log_level}")
        if self.log_format.lower() not in _LOG_FORMATS:
            raise ValueError(f"log_format must be one of {sorted(_LOG_FORMATS)}")

    def log_json(self) -> Optional[bool]:
        """Tri-state JSON flag for `poc_beacon.logging.configure`."""
        fmt = self.log_format.lower()
        return None if fmt == "auto" else fmt == "json"

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_env(prefix: str = ENV_PREFIX) -> "BeaconConfig":
        """
        Load configuration from environment variables. All variables are optional.

          - POC_BEACON_TX_POWER=27
          - POC_BEACON_REGION_FILE=/etc/beacon/us915.yaml
          - POC_BEACON_LOG_LEVEL=DEBUG
          - POC_BEACON_LOG_FORMAT=json
        """

        def _get(name: str, cast: Any, default: Any) -> Any:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None:
                return default
            try:
                return cast(raw)
            except Exception as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        cfg = BeaconConfig(
            tx_power=_get("TX_POWER", int, DEFAULT_TX_POWER_DBM),
            region_file=_get("REGION_FILE", str, None),
            log_level=_get("LOG_LEVEL", str, "INFO"),
            log_format=_get("LOG_FORMAT", str, "auto"),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def from_file(path: str) -> "BeaconConfig":
        """
        Load configuration from a JSON or YAML file. Keys mirror the dataclass:

            tx_power: 27
            region_file: ./us915.yaml
            log_level: INFO
            log_format: json
        """
        with open(path, "r", encoding="utf-8") as f:
            data = _parse_json_or_yaml(f.read(), path)
        if not isinstance(data, dict):
            raise ValueError(f"{path!r} must contain a mapping")

        cfg = BeaconConfig(
            tx_power=int(data.get("tx_power", DEFAULT_TX_POWER_DBM)),
            region_file=data.get("region_file"),
            log_level=str(data.get("log_level", "INFO")),
            log_format=str(data.get("log_format", "auto")),
        )
        cfg.validate()
        return cfg


def _parse_json_or_yaml(text: str, path_hint: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    import yaml

    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {path_hint!r} as JSON or YAML: {e}") from e


__all__ = ["BeaconConfig", "ENV_PREFIX"]
