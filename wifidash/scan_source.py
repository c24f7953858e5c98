# Copyright 2025 icecake0141
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review for correctness and security.

"""
Scan sources for wifidash.

A scan source returns complete snapshots of the networks in range. Two
sources are provided: NetworkManager's nmcli for live scans, and a YAML/JSON
snapshot file that is re-read on every scan.
"""

import logging
import re
import subprocess
from typing import Any, List, Optional, Protocol, Sequence, Tuple

import yaml

from wifidash.models import Channel, NetworkRecord, freq_to_band, records_from_list

logger = logging.getLogger(__name__)

NMCLI_FIELDS = "BSSID,SSID,CHAN,FREQ,SIGNAL,BANDWIDTH"
NMCLI_TIMEOUT_SECONDS = 30.0


class ScanSourceError(RuntimeError):
    """Raised when a scan source cannot produce a snapshot."""


class ScanSource(Protocol):
    def cached_scan_results(self) -> Sequence[NetworkRecord]:
        ...

    def scan(self) -> Sequence[NetworkRecord]:
        ...


def signal_to_dbm(signal: int) -> int:
    """Approximate dBm from nmcli 0-100 SIGNAL."""
    return int((signal / 2) - 100)


def _split_terse(line: str) -> List[str]:
    """Split a nmcli terse line on unescaped ':' characters."""
    fields: List[str] = []
    cur: List[str] = []
    i = 0
    while i < len(line):
        if line[i] == "\\" and i + 1 < len(line):
            cur.append(line[i + 1])
            i += 2
        elif line[i] == ":":
            fields.append("".join(cur))
            cur = []
            i += 1
        else:
            cur.append(line[i])
            i += 1
    fields.append("".join(cur))
    return fields


def _leading_int(text: str, default: int = 0) -> int:
    match = re.search(r"(\d+)", text)
    return int(match.group(1)) if match else default


def parse_nmcli(output: str) -> Tuple[NetworkRecord, ...]:
    """
    Parse ``nmcli -t -f BSSID,SSID,CHAN,FREQ,SIGNAL,BANDWIDTH`` output.

    Lines with too few fields or without a BSSID are skipped. nmcli does not
    expose information elements, so records carry none.
    """
    records = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = _split_terse(line)
        if len(parts) < 6 or not parts[0].strip():
            logger.debug("Skipping unparseable nmcli line: %r", line)
            continue
        freq = _leading_int(parts[3])
        records.append(
            NetworkRecord(
                bssid=parts[0].strip().lower(),
                ssid=parts[1].strip() or None,
                channel=Channel(
                    number=_leading_int(parts[2]),
                    width_mhz=_leading_int(parts[5], default=20),
                    band=freq_to_band(freq),
                    center_freq_mhz=freq,
                ),
                signal_dbm=signal_to_dbm(_leading_int(parts[4])),
            )
        )
    return tuple(records)


class NmcliScanSource:
    """Live scans through NetworkManager's command line client."""

    def __init__(self, timeout: float = NMCLI_TIMEOUT_SECONDS, nmcli_path: str = "nmcli") -> None:
        self.timeout = timeout
        self.nmcli_path = nmcli_path

    def _run(self, rescan: str) -> Tuple[NetworkRecord, ...]:
        cmd = [self.nmcli_path, "-t", "-f", NMCLI_FIELDS, "dev", "wifi", "list", "--rescan", rescan]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout, check=False)
        except FileNotFoundError as exc:
            raise ScanSourceError("nmcli not found, is NetworkManager installed?") from exc
        except subprocess.TimeoutExpired as exc:
            raise ScanSourceError(f"nmcli timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise ScanSourceError(f"nmcli could not be started: {exc}") from exc
        if result.returncode != 0:
            raise ScanSourceError(result.stderr.strip() or f"nmcli exited with status {result.returncode}")
        return parse_nmcli(result.stdout)

    def cached_scan_results(self) -> Tuple[NetworkRecord, ...]:
        return self._run("no")

    def scan(self) -> Tuple[NetworkRecord, ...]:
        return self._run("yes")


class SnapshotFileSource:
    """
    Snapshots read from a YAML (or JSON) file.

    The file holds either a list of network mappings or a mapping with a
    ``networks`` list. It is re-read on every scan so edits show up live.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def _load(self) -> Tuple[NetworkRecord, ...]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data: Any = yaml.safe_load(fh)
        except (OSError, UnicodeDecodeError) as exc:
            raise ScanSourceError(f"Cannot read snapshot file '{self.path}': {exc}") from exc
        except yaml.YAMLError as exc:
            raise ScanSourceError(f"Invalid snapshot file '{self.path}': {exc}") from exc

        if isinstance(data, dict):
            data = data.get("networks")
        try:
            return records_from_list(data)
        except ValueError as exc:
            raise ScanSourceError(f"Invalid snapshot file '{self.path}': {exc}") from exc

    def cached_scan_results(self) -> Tuple[NetworkRecord, ...]:
        return self._load()

    def scan(self) -> Tuple[NetworkRecord, ...]:
        return self._load()


def create_scan_source(kind: str, snapshot_file: Optional[str] = None) -> ScanSource:
    """Build the scan source selected on the command line."""
    if kind == "file":
        if not snapshot_file:
            raise ValueError("--snapshot-file is required with --source file.")
        return SnapshotFileSource(snapshot_file)
    if kind == "nmcli":
        return NmcliScanSource()
    raise ValueError(f"Unknown scan source '{kind}'.")
