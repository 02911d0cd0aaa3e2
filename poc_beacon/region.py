"""
Region channel plans.

A channel plan is an *ordered* list of :class:`RegionParameter`. The order is
part of the derivation input: two parties holding the same frequencies in a
different order derive different beacons. Loaders here never sort or dedupe.

Accepted shapes (JSON or YAML)::

    [903900000, 904100000]

    region_params:
      - channel_frequency: 903900000
        bandwidth: 125000
        max_eirp: 360
      - {channel_frequency: 904100000}
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from poc_beacon.config import _parse_json_or_yaml
from poc_beacon.types.core import RegionParameter

__all__ = ["region_params_from_list", "load_region_params", "parse_region_params"]


def _one(item: Any, idx: int) -> RegionParameter:
    if isinstance(item, bool):
        raise ValueError(f"region_params[{idx}]: expected int or mapping")
    if isinstance(item, int):
        freq, bw, eirp = item, 0, 0
    elif isinstance(item, Mapping):
        if "channel_frequency" not in item:
            raise ValueError(f"region_params[{idx}]: missing channel_frequency")
        freq = item["channel_frequency"]
        bw = item.get("bandwidth", 0)
        eirp = item.get("max_eirp", 0)
    else:
        raise ValueError(f"region_params[{idx}]: expected int or mapping")
    try:
        param = RegionParameter(
            channel_frequency=int(freq), bandwidth=int(bw), max_eirp=int(eirp)
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"region_params[{idx}]: {e}") from e
    if param.channel_frequency == 0:
        raise ValueError(f"region_params[{idx}]: channel_frequency must be > 0")
    return param


def region_params_from_list(items: Iterable[Any]) -> List[RegionParameter]:
    return [_one(item, i) for i, item in enumerate(items)]


def parse_region_params(data: Any) -> List[RegionParameter]:
    """Accept a bare list or a mapping carrying a ``region_params`` list."""
    if isinstance(data, Mapping):
        data = data.get("region_params")
    if not isinstance(data, list):
        raise ValueError("expected a list of region parameters")
    return region_params_from_list(data)


def load_region_params(path: str) -> List[RegionParameter]:
    """Load a channel plan from a JSON or YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = _parse_json_or_yaml(f.read(), path)
    return parse_region_params(data)
