"""
Beacon derivation
=================

Turns a (remote, local) entropy pair and a region channel plan into a
:class:`~poc_beacon.types.core.Beacon` that anyone holding the same inputs can
recompute bit-for-bit.

Scheme v0 (entropy versions 0 and 1)
------------------------------------
1. ``D = SHA-256(remote.data || i64le(remote.ts) || local.data || i64le(local.ts))``
2. Seed a ChaCha12 stream with the 32 bytes of ``D``.
3. Draw, strictly in this order:
     a. channel index in ``[0, len(region_params))``
     b. payload size in ``[MIN_BEACON_PAYLOAD_SIZE, MAX_BEACON_PAYLOAD_SIZE]``
     c. datarate index in ``[0, len(data_rates))``
4. Payload = ``D[:size]``.

Reordering the draws, or drawing fresh bytes for the payload instead of
truncating ``D``, yields different beacons than every other implementation.

Typical usage
-------------
    from poc_beacon.beacon import derive, beacon_id

    beacon = derive(remote, local, region_params)
    key = beacon_id(beacon)
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Sequence

from poc_beacon.constants import (BEACON_DATA_RATES, MAX_BEACON_PAYLOAD_SIZE,
                                  MIN_BEACON_PAYLOAD_SIZE,
                                  SUPPORTED_ENTROPY_VERSIONS)
from poc_beacon.datarate import DataRate
from poc_beacon.errors import (BeaconError, InvalidVersion, NoDataRate,
                               NoRegionParameters)
from poc_beacon.metrics import METRICS, Metrics
from poc_beacon.rng.uniform import RandomSource, chacha12_source
from poc_beacon.types.core import Beacon, Entropy, RegionParameter
from poc_beacon.utils.hash import mixing_digest

logger = logging.getLogger(__name__)

RngFactory = Callable[[bytes], RandomSource]

_OUTCOME_BY_ERROR = {
    InvalidVersion: "invalid_version",
    NoRegionParameters: "no_region_params",
    NoDataRate: "no_data_rate",
}


class BeaconDeriver:
    """
    Deterministic beacon derivation.

    Args:
        data_rates:  ordered datarate list sampled in step 3c.
        rng_factory: builds the random source from the 32-byte digest
                     (ChaCha12 by default). Tests inject scripted sources here.
        metrics:     Prometheus instruments; ``None`` disables recording.
    """

    def __init__(
        self,
        *,
        data_rates: Sequence[DataRate] = BEACON_DATA_RATES,
        rng_factory: RngFactory = chacha12_source,
        metrics: Optional[Metrics] = METRICS,
    ) -> None:
        self._data_rates = tuple(data_rates)
        self._rng_factory = rng_factory
        self._metrics = metrics
        # Version tag -> scheme. New schemes get their own entry.
        self._schemes: Dict[int, Callable[..., Beacon]] = {
            v: self._derive_v0 for v in SUPPORTED_ENTROPY_VERSIONS
        }

    @property
    def data_rates(self) -> tuple:
        return self._data_rates

    def derive(
        self,
        remote_entropy: Entropy,
        local_entropy: Entropy,
        region_params: Sequence[RegionParameter],
    ) -> Beacon:
        """
        Derive the beacon for this entropy pair.

        Raises:
            InvalidVersion: remote version unsupported, or local entropy from a
                different scheme.
            NoRegionParameters: `region_params` is empty.
            NoDataRate: the configured datarate list is empty.
        """
        try:
            scheme = self._select_scheme(remote_entropy, local_entropy)
            beacon = scheme(remote_entropy, local_entropy, region_params)
        except BeaconError as e:
            self._record(_OUTCOME_BY_ERROR.get(type(e), ""))
            logger.info("beacon derivation rejected: %s", e)
            raise

        self._record("ok")
        if self._metrics is not None:
            self._metrics.observe_beacon(
                payload_len=len(beacon.data), datarate=beacon.datarate.name
            )
        logger.debug(
            "beacon derived",
            extra={
                "beacon_id": beacon.beacon_id(),
                "frequency": beacon.frequency,
                "datarate": beacon.datarate.name,
            },
        )
        return beacon

    # ---------- Scheme dispatch ----------

    def _select_scheme(self, remote: Entropy, local: Entropy) -> Callable[..., Beacon]:
        scheme = self._schemes.get(remote.version)
        if scheme is None:
            raise InvalidVersion(
                remote.version, "remote", tuple(SUPPORTED_ENTROPY_VERSIONS)
            )
        if self._schemes.get(local.version) != scheme:
            raise InvalidVersion(
                local.version, "local", tuple(SUPPORTED_ENTROPY_VERSIONS)
            )
        return scheme

    def _derive_v0(
        self,
        remote: Entropy,
        local: Entropy,
        region_params: Sequence[RegionParameter],
    ) -> Beacon:
        digest = mixing_digest(remote, local)
        rng = self._rng_factory(digest)

        # Draw order is frequency, payload size, datarate.
        frequency = _rand_frequency(region_params, rng)
        payload_size = rng.gen_range_inclusive(
            MIN_BEACON_PAYLOAD_SIZE, MAX_BEACON_PAYLOAD_SIZE
        )
        datarate = _rand_data_rate(self._data_rates, rng)

        return Beacon(
            data=digest[:payload_size],
            frequency=frequency,
            datarate=datarate,
            remote_entropy=remote,
            local_entropy=local,
        )

    def _record(self, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_derivation(outcome)


def _rand_frequency(region_params: Sequence[RegionParameter], rng: RandomSource) -> int:
    if not region_params:
        raise NoRegionParameters()
    return region_params[rng.gen_index(len(region_params))].channel_frequency


def _rand_data_rate(data_rates: Sequence[DataRate], rng: RandomSource) -> DataRate:
    if not data_rates:
        raise NoDataRate()
    return data_rates[rng.gen_index(len(data_rates))]


# ---------- Module-level conveniences ----------

_DEFAULT = BeaconDeriver()


def derive(
    remote_entropy: Entropy,
    local_entropy: Entropy,
    region_params: Sequence[RegionParameter],
) -> Beacon:
    """Derive with the default (ChaCha12, worldwide datarates) deriver."""
    return _DEFAULT.derive(remote_entropy, local_entropy, region_params)


def beacon_id(beacon: Beacon) -> str:
    """Standard base64 of the beacon payload."""
    return beacon.beacon_id()


__all__ = ["BeaconDeriver", "RngFactory", "derive", "beacon_id"]
