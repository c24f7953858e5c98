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
Domain models for wifidash.

Scan sources deliver immutable NetworkRecord values; a complete scan is a
snapshot (any iterable of records, in no meaningful order). Records are
matched across snapshots by BSSID only, elements by their numeric id.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

# 802.11 amendments in generation order, used to display protocol sets.
PROTOCOL_ORDER: Tuple[str, ...] = ("b", "a", "g", "n", "ac", "ax", "be")


def freq_to_band(freq_mhz: int) -> str:
    """Return the band label for a center frequency in MHz."""
    if 2400 <= freq_mhz < 2500:
        return "2.4 GHz"
    if 5000 <= freq_mhz < 5900:
        return "5 GHz"
    if 5925 <= freq_mhz <= 7125:
        return "6 GHz"
    return "?"


def format_protocols(protocols: Iterable[str]) -> str:
    """Join protocol names in generation order, unknown names last."""
    known = [name for name in PROTOCOL_ORDER if name in protocols]
    unknown = sorted(name for name in protocols if name not in PROTOCOL_ORDER)
    return "/".join(known + unknown)


@dataclass(frozen=True)
class Channel:
    number: int
    width_mhz: int
    band: str
    center_freq_mhz: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Channel":
        """Build a channel from a mapping; band defaults to the frequency's band."""
        if not isinstance(data, Mapping):
            raise ValueError(f"Channel entry must be a mapping, got {type(data).__name__}.")
        try:
            center_freq = int(data["center_freq_mhz"])
            return cls(
                number=int(data["number"]),
                width_mhz=int(data.get("width_mhz", 20)),
                band=str(data.get("band") or freq_to_band(center_freq)),
                center_freq_mhz=center_freq,
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid channel entry {dict(data)!r}: {exc}") from exc


@dataclass(frozen=True)
class InformationField:
    name: str
    value: str

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


@dataclass(frozen=True)
class InformationElement:
    """One information element carried in a beacon or probe response."""

    id: int
    name: str
    data: bytes = b""
    fields: Tuple[InformationField, ...] = ()

    @property
    def length(self) -> int:
        return len(self.data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InformationElement":
        """
        Build an element from a mapping.

        ``data`` is a hex string of the raw element body; ``fields`` is either a
        mapping of name to value or a list of ``{name, value}`` mappings.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Information element entry must be a mapping, got {type(data).__name__}.")
        try:
            raw = bytes.fromhex(str(data.get("data", "")))
            raw_fields = data.get("fields") or []
            if isinstance(raw_fields, Mapping):
                fields = tuple(InformationField(str(k), str(v)) for k, v in raw_fields.items())
            else:
                fields = tuple(InformationField(str(item["name"]), str(item["value"])) for item in raw_fields)
            return cls(id=int(data["id"]), name=str(data["name"]), data=raw, fields=fields)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid information element entry {dict(data)!r}: {exc}") from exc


@dataclass(frozen=True)
class NetworkRecord:
    """
    One basic service set seen by a scan.

    Two records describe the same access point when their ``bssid`` matches,
    regardless of any other attribute.
    """

    bssid: str
    ssid: Optional[str]
    channel: Channel
    signal_dbm: int
    protocols: FrozenSet[str] = field(default_factory=frozenset)
    elements: Tuple[InformationElement, ...] = ()

    @property
    def protocols_label(self) -> str:
        return format_protocols(self.protocols)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NetworkRecord":
        """Build a record from a mapping as found in a snapshot file."""
        if not isinstance(data, Mapping):
            raise ValueError(f"Network entry must be a mapping, got {type(data).__name__}.")
        try:
            ssid = data.get("ssid")
            return cls(
                bssid=str(data["bssid"]).lower(),
                ssid=str(ssid) if ssid not in (None, "") else None,
                channel=Channel.from_dict(data["channel"]),
                signal_dbm=int(data["signal_dbm"]),
                protocols=frozenset(str(p).lower() for p in data.get("protocols") or ()),
                elements=tuple(InformationElement.from_dict(ie) for ie in data.get("elements") or ()),
            )
        except (AttributeError, KeyError, TypeError) as exc:
            raise ValueError(f"Invalid network entry {dict(data)!r}: {exc}") from exc


def records_from_list(entries: Any) -> Tuple[NetworkRecord, ...]:
    """Convert a list of mappings into records, raising ValueError on bad input."""
    if entries is None:
        return ()
    if not isinstance(entries, list):
        raise ValueError(f"Expected a list of networks, got {type(entries).__name__}.")
    return tuple(NetworkRecord.from_dict(entry) for entry in entries)


def summarize_records(records: Iterable[NetworkRecord]) -> Dict[str, int]:
    """Count records per band, used for the status line."""
    counts: Dict[str, int] = {}
    for record in records:
        counts[record.channel.band] = counts.get(record.channel.band, 0) + 1
    return counts
