"""
poc_beacon.cli
--------------

Small CLI around beacon derivation.

Commands:
  - derive         : Derive a beacon (or its report) from two entropy values.
  - local-entropy  : Generate fresh local entropy.
  - params         : Show the fixed derivation parameters.

Environment:
  POC_BEACON_* variables (see poc_beacon.config.BeaconConfig.from_env).

Example:
  poc-beacon derive --remote-data 0x00.. --local-data 0xff.. -f 904300000
  python -m poc_beacon.cli params
"""

from __future__ import annotations

import json
import sys
from typing import List, Optional, Sequence

import typer

from poc_beacon import logging as blog
from poc_beacon.adapters.report import build_report
from poc_beacon.beacon.derive import BeaconDeriver
from poc_beacon.config import BeaconConfig
from poc_beacon.constants import (BEACON_DATA_RATES, CHACHA_ROUNDS,
                                  DEFAULT_TX_POWER_DBM,
                                  MAX_BEACON_PAYLOAD_SIZE,
                                  MIN_BEACON_PAYLOAD_SIZE,
                                  SUPPORTED_ENTROPY_VERSIONS)
from poc_beacon.entropy import local_entropy
from poc_beacon.errors import BeaconError
from poc_beacon.region import load_region_params, region_params_from_list
from poc_beacon.types.core import Entropy
from poc_beacon.utils.bytes import decode_bytes

__all__ = ["app", "main"]

app = typer.Typer(
    name="poc-beacon",
    help="Deterministic proof-of-coverage beacon derivation.",
    no_args_is_help=True,
    add_completion=False,
)


def _load_config() -> BeaconConfig:
    try:
        return BeaconConfig.from_env()
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _setup_logging(cfg: BeaconConfig, level: Optional[str]) -> None:
    blog.configure(json=cfg.log_json(), level=level or cfg.log_level)


def _entropy(label: str, data: str, timestamp: int, version: int) -> Entropy:
    try:
        raw = decode_bytes(data)
    except ValueError as e:
        raise typer.BadParameter(f"{label} data: {e}")
    try:
        return Entropy(version=version, data=raw, timestamp=timestamp)
    except (TypeError, ValueError) as e:
        raise typer.BadParameter(f"{label} entropy: {e}")


def _dump(obj: object, pretty: bool) -> None:
    typer.echo(json.dumps(obj, indent=2 if pretty else None))


@app.command("derive")
def cmd_derive(
    remote_data: str = typer.Option(..., "--remote-data", help="Remote entropy bytes (0x-hex or base64)."),
    local_data: str = typer.Option(..., "--local-data", help="Local entropy bytes (0x-hex or base64)."),
    remote_ts: int = typer.Option(0, "--remote-ts", help="Remote entropy timestamp (seconds)."),
    local_ts: int = typer.Option(0, "--local-ts", help="Local entropy timestamp (seconds)."),
    remote_version: int = typer.Option(0, "--remote-version", help="Remote entropy version."),
    local_version: int = typer.Option(0, "--local-version", help="Local entropy version."),
    frequency: Optional[List[int]] = typer.Option(
        None, "--frequency", "-f", help="Channel frequency in Hz (repeatable, order matters)."
    ),
    region_file: Optional[str] = typer.Option(
        None, "--region-file", help="JSON/YAML channel plan (overrides POC_BEACON_REGION_FILE)."
    ),
    report: bool = typer.Option(False, "--report", help="Print the beacon report instead of the beacon."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print JSON output."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the log level."),
) -> None:
    """Derive a beacon from remote and local entropy."""
    cfg = _load_config()
    _setup_logging(cfg, log_level)

    remote = _entropy("remote", remote_data, remote_ts, remote_version)
    local = _entropy("local", local_data, local_ts, local_version)

    path = region_file or cfg.region_file
    try:
        if frequency:
            params = region_params_from_list(frequency)
        elif path:
            params = load_region_params(path)
        else:
            params = []
    except (OSError, ValueError) as e:
        raise typer.BadParameter(f"region parameters: {e}")

    try:
        beacon = BeaconDeriver().derive(remote, local, params)
        if report:
            _dump(build_report(beacon, tx_power=cfg.tx_power).to_dict(), pretty)
        else:
            _dump(beacon.to_dict(), pretty)
    except BeaconError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)


@app.command("local-entropy")
def cmd_local_entropy(
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print JSON output."),
) -> None:
    """Generate fresh local entropy (random bytes + current time)."""
    try:
        ent = local_entropy()
    except BeaconError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    _dump(ent.to_dict(), pretty)


@app.command("params")
def cmd_params() -> None:
    """Show the fixed derivation parameters."""
    _dump(
        {
            "min_payload_size": MIN_BEACON_PAYLOAD_SIZE,
            "max_payload_size": MAX_BEACON_PAYLOAD_SIZE,
            "data_rates": [dr.name for dr in BEACON_DATA_RATES],
            "entropy_versions": list(SUPPORTED_ENTROPY_VERSIONS),
            "digest": "sha256",
            "rng": f"chacha{CHACHA_ROUNDS}",
            "default_tx_power": DEFAULT_TX_POWER_DBM,
        },
        True,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:  # pragma: no cover - thin wrapper
    """Entry-point for the `poc-beacon` script and `python -m poc_beacon.cli`."""
    try:
        app(args=list(argv) if argv is not None else None, prog_name="poc-beacon")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
