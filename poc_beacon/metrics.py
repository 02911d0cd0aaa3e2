"""
Prometheus metrics for beacon derivation.

  • derivations_total{outcome}: derive() calls per outcome
  • payload_bytes             : distribution of derived payload lengths
  • datarate_total{datarate}  : selected datarates

Label cardinality is intentionally low: outcomes and datarates are small,
finite vocabularies, and no per-beacon labels are ever exposed.

Usage
-----
    from poc_beacon.metrics import METRICS

    METRICS.record_derivation("ok")
    METRICS.observe_beacon(payload_len=7, datarate="SF9BW125")

Tests and embedders that need isolation construct their own `Metrics` with a
private `CollectorRegistry`.
"""

from __future__ import annotations

from typing import Iterable

from prometheus_client import REGISTRY, Counter, Histogram

from poc_beacon.constants import BEACON_DATA_RATES

# --------- Vocabularies (kept small for bounded cardinality) ---------

_DERIVE_OUTCOMES = (
    "ok",                # beacon derived
    "invalid_version",   # entropy version unsupported or mismatched
    "no_region_params",  # empty channel plan
    "no_data_rate",      # empty datarate configuration
)

_DATARATE_LABELS = tuple(dr.name for dr in BEACON_DATA_RATES) + ("other",)

# Payload length buckets (bytes)
_PAYLOAD_BUCKETS = (5.0, 6.0, 7.0, 8.0, 9.0, 10.0)


class Metrics:
    """
    Container for all beacon Prometheus instruments.

    Args:
        namespace: Prometheus metric namespace (prefix).
        subsystem: Prometheus metric subsystem (inserted between namespace and name).
        registry:  Prometheus registry to register the metrics with.
    """

    def __init__(
        self,
        *,
        namespace: str = "poc",
        subsystem: str = "beacon",
        registry=REGISTRY,
        payload_buckets: Iterable[float] = _PAYLOAD_BUCKETS,
    ) -> None:
        self.derivations_total = Counter(
            "derivations_total",
            "Number of beacon derivations attempted, labeled by outcome.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.datarate_total = Counter(
            "datarate_total",
            "Datarates selected for derived beacons.",
            labelnames=("datarate",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.payload_bytes = Histogram(
            "payload_bytes",
            "Length of derived beacon payloads, in bytes.",
            buckets=tuple(payload_buckets),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

    def record_derivation(self, outcome: str) -> None:
        """Increment the derivation counter; unknown outcomes are not recorded."""
        if outcome not in _DERIVE_OUTCOMES:
            return
        self.derivations_total.labels(outcome=outcome).inc()

    def observe_beacon(self, *, payload_len: int, datarate: str) -> None:
        self.payload_bytes.observe(float(payload_len))
        label = datarate if datarate in _DATARATE_LABELS else "other"
        self.datarate_total.labels(datarate=label).inc()


# Singleton used by the default deriver
METRICS = Metrics()

__all__ = [
    "Metrics",
    "METRICS",
    "_DERIVE_OUTCOMES",
]
