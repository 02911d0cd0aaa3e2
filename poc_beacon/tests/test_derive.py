import base64
import hashlib
from typing import List, Tuple

import pytest
from prometheus_client import CollectorRegistry

from poc_beacon import (Beacon, BeaconDeriver, DataRate, Entropy,
                        InvalidVersion, NoDataRate, NoRegionParameters,
                        RegionParameter, beacon_id, derive)
from poc_beacon.constants import (BEACON_DATA_RATES, MAX_BEACON_PAYLOAD_SIZE,
                                  MIN_BEACON_PAYLOAD_SIZE)
from poc_beacon.metrics import Metrics
from poc_beacon.utils.hash import mixing_digest

US915 = [
    RegionParameter(903_900_000),
    RegionParameter(904_100_000),
    RegionParameter(904_300_000),
    RegionParameter(904_500_000),
    RegionParameter(904_700_000),
    RegionParameter(904_900_000),
    RegionParameter(905_100_000),
    RegionParameter(905_300_000),
]


def _entropy(fill: int, ts: int = 0, version: int = 0, n: int = 32) -> Entropy:
    return Entropy(version=version, data=bytes([fill]) * n, timestamp=ts)


def _expected_digest(remote: Entropy, local: Entropy) -> bytes:
    return hashlib.sha256(
        remote.data
        + remote.timestamp.to_bytes(8, "little", signed=True)
        + local.data
        + local.timestamp.to_bytes(8, "little", signed=True)
    ).digest()


class ScriptedSource:
    """RandomSource that replays answers and logs every draw."""

    def __init__(self, index_answers: List[int], range_answers: List[int]) -> None:
        self._idx = list(index_answers)
        self._rng = list(range_answers)
        self.calls: List[Tuple] = []

    def gen_index(self, n: int) -> int:
        self.calls.append(("index", n))
        return self._idx.pop(0)

    def gen_range_inclusive(self, low: int, high: int) -> int:
        self.calls.append(("range", low, high))
        return self._rng.pop(0)


class _Factory:
    def __init__(self, source: ScriptedSource) -> None:
        self.source = source
        self.seeds: List[bytes] = []

    def __call__(self, seed: bytes) -> ScriptedSource:
        self.seeds.append(seed)
        return self.source


def _deriver(factory=None, **kw) -> BeaconDeriver:
    kw.setdefault("metrics", None)
    if factory is not None:
        kw["rng_factory"] = factory
    return BeaconDeriver(**kw)


# ---------------------------------------------------------------------------
# Draw order and wiring
# ---------------------------------------------------------------------------


def test_draw_order_is_frequency_size_datarate():
    src = ScriptedSource(index_answers=[2, 3], range_answers=[7])
    factory = _Factory(src)
    remote, local = _entropy(0x11), _entropy(0x22)

    beacon = _deriver(factory).derive(remote, local, US915)

    assert src.calls == [
        ("index", len(US915)),
        ("range", MIN_BEACON_PAYLOAD_SIZE, MAX_BEACON_PAYLOAD_SIZE),
        ("index", len(BEACON_DATA_RATES)),
    ]
    assert beacon.frequency == US915[2].channel_frequency
    assert beacon.datarate is DataRate.SF10BW125
    assert len(beacon.data) == 7


def test_seed_is_mixing_digest_and_payload_is_its_prefix():
    src = ScriptedSource(index_answers=[0, 0], range_answers=[9])
    factory = _Factory(src)
    remote, local = _entropy(0xAB, ts=1_700_000_000), _entropy(0xCD, ts=1_700_000_042)

    beacon = _deriver(factory).derive(remote, local, US915)

    digest = _expected_digest(remote, local)
    assert factory.seeds == [digest]
    assert beacon.data == digest[:9]


def test_entropies_attached_unchanged():
    remote, local = _entropy(1, ts=5), _entropy(2, ts=6, version=1)
    beacon = _deriver().derive(remote, local, US915)
    assert beacon.remote_entropy is remote
    assert beacon.local_entropy is local


def test_remote_then_local_order_matters():
    a, b = _entropy(0x01), _entropy(0x02)
    assert mixing_digest(a, b) != mixing_digest(b, a)
    assert mixing_digest(a, b) == _expected_digest(a, b)


def test_negative_timestamp_serialized_as_signed():
    ent = Entropy(version=0, data=b"x", timestamp=-1)
    assert ent.to_bytes() == b"x" + b"\xff" * 8


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("version", [2, 3, 255, 1 << 31])
def test_unsupported_remote_version_rejected_without_draws(version):
    src = ScriptedSource([], [])
    factory = _Factory(src)
    with pytest.raises(InvalidVersion) as ei:
        _deriver(factory).derive(_entropy(0, version=version), _entropy(1), US915)
    assert ei.value.version == version
    assert ei.value.source == "remote"
    assert factory.seeds == []
    assert src.calls == []


def test_local_version_from_other_scheme_rejected():
    factory = _Factory(ScriptedSource([], []))
    with pytest.raises(InvalidVersion) as ei:
        _deriver(factory).derive(_entropy(0), _entropy(1, version=7), US915)
    assert ei.value.source == "local"
    assert factory.seeds == []


@pytest.mark.parametrize("rv,lv", [(0, 0), (0, 1), (1, 0), (1, 1)])
def test_versions_zero_and_one_are_the_same_scheme(rv, lv):
    remote = Entropy(version=rv, data=b"\x00" * 32, timestamp=0)
    local = Entropy(version=lv, data=b"\xff" * 32, timestamp=0)
    baseline = derive(
        Entropy(0, b"\x00" * 32, 0), Entropy(0, b"\xff" * 32, 0), US915
    )
    beacon = derive(remote, local, US915)
    assert (beacon.data, beacon.frequency, beacon.datarate) == (
        baseline.data,
        baseline.frequency,
        baseline.datarate,
    )


def test_empty_region_params_rejected_without_draws():
    src = ScriptedSource([], [])
    with pytest.raises(NoRegionParameters):
        _deriver(_Factory(src)).derive(_entropy(0), _entropy(1), [])
    assert src.calls == []


@pytest.mark.parametrize("fill", [0x00, 0x7F, 0xFF])
def test_empty_region_params_rejected_for_any_entropy(fill):
    with pytest.raises(NoRegionParameters):
        derive(_entropy(fill), _entropy(fill ^ 0xFF), [])


def test_empty_data_rates_rejected():
    with pytest.raises(NoDataRate):
        _deriver(data_rates=()).derive(_entropy(0), _entropy(1), US915)


# ---------------------------------------------------------------------------
# Determinism and the fixed scenario
# ---------------------------------------------------------------------------


def test_fixed_scenario_known_answer():
    remote = Entropy(version=0, data=b"\x00" * 32, timestamp=0)
    local = Entropy(version=0, data=b"\xff" * 32, timestamp=0)
    params = [RegionParameter(904_300_000)]

    first = derive(remote, local, params)
    for _ in range(5):
        again = derive(
            Entropy(0, b"\x00" * 32, 0), Entropy(0, b"\xff" * 32, 0), params
        )
        assert again == first

    digest = hashlib.sha256(b"\x00" * 40 + b"\xff" * 32 + b"\x00" * 8).digest()
    assert first.frequency == 904_300_000
    assert MIN_BEACON_PAYLOAD_SIZE <= len(first.data) <= MAX_BEACON_PAYLOAD_SIZE
    assert first.data == digest[: len(first.data)]
    assert first.datarate in BEACON_DATA_RATES

    assert len(first.data) == 8
    assert first.datarate is DataRate.SF10BW125
    assert first.data.hex() == "9c322207a9d92916"


def test_multi_channel_known_answer():
    remote = Entropy(version=0, data=bytes([0]) * 32, timestamp=-5000)
    local = Entropy(version=0, data=b"\x55" * 17, timestamp=1_700_000_000)

    beacon = derive(remote, local, US915)

    assert beacon.frequency == 904_100_000
    assert len(beacon.data) == 6
    assert beacon.datarate is DataRate.SF7BW125
    assert beacon.data.hex() == "9bdc344fea7a"


def test_independent_derivers_agree():
    remote, local = _entropy(0x10, ts=99), _entropy(0x20, ts=100)
    a = BeaconDeriver(metrics=None).derive(remote, local, US915)
    b = BeaconDeriver(metrics=None).derive(remote, local, US915)
    assert a == b


def test_region_order_is_part_of_the_input():
    remote, local = _entropy(0x10), _entropy(0x20)
    src = ScriptedSource(index_answers=[0, 0], range_answers=[5])
    beacon = _deriver(_Factory(src)).derive(remote, local, list(reversed(US915)))
    assert beacon.frequency == US915[-1].channel_frequency


def test_changing_inputs_changes_beacons():
    base_remote, base_local = _entropy(0x00), _entropy(0xFF)
    base = derive(base_remote, base_local, US915)
    variants = []
    for i in range(32):
        data = bytearray(base_remote.data)
        data[i] ^= 0x01
        variants.append(Entropy(0, bytes(data), 0))
    variants += [_entropy(0x00, ts=t) for t in range(1, 17)]
    for remote in variants:
        other = derive(remote, base_local, US915)
        assert (other.data, other.frequency, other.datarate) != (
            base.data,
            base.frequency,
            base.datarate,
        )


def test_frequencies_and_datarates_all_reachable():
    freqs, rates = set(), set()
    for i in range(200):
        b = derive(_entropy(i % 256, ts=i), _entropy(0x55), US915)
        freqs.add(b.frequency)
        rates.add(b.datarate)
    assert freqs == {p.channel_frequency for p in US915}
    assert rates == set(BEACON_DATA_RATES)


# ---------------------------------------------------------------------------
# beacon_id
# ---------------------------------------------------------------------------


def test_beacon_id_is_standard_base64_of_payload():
    beacon = derive(_entropy(0x01), _entropy(0x02), US915)
    bid = beacon_id(beacon)
    assert bid == beacon.beacon_id()
    assert base64.b64decode(bid, validate=True) == beacon.data


def test_beacon_id_uses_standard_alphabet():
    b = Beacon(
        data=b"\xfb\xff\xbf\xfe\xff",
        frequency=1,
        datarate=DataRate.SF7BW125,
        remote_entropy=_entropy(0),
        local_entropy=_entropy(0),
    )
    assert beacon_id(b) == "+/+//v8="


# ---------------------------------------------------------------------------
# Beacon invariants and metrics
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("n", [0, 4, 11, 32])
def test_beacon_rejects_out_of_bounds_payload(n):
    with pytest.raises(ValueError):
        Beacon(
            data=b"\x00" * n,
            frequency=1,
            datarate=DataRate.SF7BW125,
            remote_entropy=_entropy(0),
            local_entropy=_entropy(0),
        )


def test_beacon_is_immutable():
    beacon = derive(_entropy(0x01), _entropy(0x02), US915)
    with pytest.raises(AttributeError):
        beacon.frequency = 1  # type: ignore[misc]


def test_beacon_copies_mutable_payload():
    buf = bytearray(b"\x01" * 6)
    b = Beacon(
        data=buf,
        frequency=903_900_000,
        datarate=DataRate.SF7BW125,
        remote_entropy=_entropy(0),
        local_entropy=_entropy(1),
    )
    buf.extend(b"\x00" * 20)

    assert isinstance(b.data, bytes)
    assert b.data == b"\x01" * 6
    assert len(b.data) <= MAX_BEACON_PAYLOAD_SIZE


def test_metrics_record_outcomes():
    registry = CollectorRegistry()
    deriver = BeaconDeriver(metrics=Metrics(registry=registry))

    deriver.derive(_entropy(0), _entropy(1), US915)
    with pytest.raises(NoRegionParameters):
        deriver.derive(_entropy(0), _entropy(1), [])
    with pytest.raises(InvalidVersion):
        deriver.derive(_entropy(0, version=9), _entropy(1), US915)

    def sample(outcome):
        return registry.get_sample_value(
            "poc_beacon_derivations_total", {"outcome": outcome}
        )

    assert sample("ok") == 1.0
    assert sample("no_region_params") == 1.0
    assert sample("invalid_version") == 1.0
    assert registry.get_sample_value("poc_beacon_payload_bytes_count") == 1.0
