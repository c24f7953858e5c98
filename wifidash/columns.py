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
Column and sort model shared by the wifidash tables.

Sort direction naming follows the historical behavior of the dashboard:
DESCENDING applies the raw per-column ordering and ASCENDING reverses it.
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Sequence

from wifidash.models import InformationElement, NetworkRecord


class SortDirection(Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class BssColumn(Enum):
    """Displayable columns of the basic service set table."""

    BSSID = "BSSID"
    SSID = "SSID"
    CHANNEL = "Channel"
    CHANNEL_WIDTH = "Channel Width"
    BAND = "Band"
    FREQUENCY = "Frequency"
    SIGNAL = "Signal"
    WIFI_PROTOCOLS = "Wi-Fi Protocols"

    def __str__(self) -> str:
        return self.value


class IeColumn(Enum):
    """Columns of the information element table."""

    ID = "ID"
    ELEMENT = "Element"
    LENGTH = "Length"

    def __str__(self) -> str:
        return self.value


DEFAULT_BSS_COLUMNS: List[BssColumn] = list(BssColumn)
DEFAULT_IE_COLUMNS: List[IeColumn] = list(IeColumn)
DEFAULT_SORT = (BssColumn.BSSID, SortDirection.DESCENDING)
SORT_MARKER = "*"


def _ssid_key(record: NetworkRecord) -> Any:
    # A hidden network sorts before any named one.
    return (0, "") if record.ssid is None else (1, record.ssid)


# Raw ordering per column. Signal deliberately departs from raw dBm order:
# it ranks by strength, so the strongest access point comes first under
# DESCENDING (-40 dBm before -60 dBm).
_BSS_SORT_KEYS: Dict[BssColumn, Callable[[NetworkRecord], Any]] = {
    BssColumn.BSSID: lambda record: record.bssid,
    BssColumn.SSID: _ssid_key,
    BssColumn.CHANNEL: lambda record: record.channel.number,
    BssColumn.CHANNEL_WIDTH: lambda record: record.channel.width_mhz,
    BssColumn.BAND: lambda record: record.channel.band,
    BssColumn.FREQUENCY: lambda record: record.channel.center_freq_mhz,
    BssColumn.SIGNAL: lambda record: -record.signal_dbm,
    BssColumn.WIFI_PROTOCOLS: lambda record: record.protocols_label,
}


def sort_records(records: Iterable[NetworkRecord], column: BssColumn, direction: SortDirection) -> List[NetworkRecord]:
    """
    Return the records ordered by a column.

    Both directions are stable: records comparing equal keep the relative
    order they had in ``records``.
    """
    return sorted(records, key=_BSS_SORT_KEYS[column], reverse=direction is SortDirection.ASCENDING)


def format_bss_cell(record: NetworkRecord, column: BssColumn) -> str:
    """Format one cell of the basic service set table."""
    if column is BssColumn.BSSID:
        return record.bssid
    if column is BssColumn.SSID:
        return record.ssid or ""
    if column is BssColumn.CHANNEL:
        return str(record.channel.number)
    if column is BssColumn.CHANNEL_WIDTH:
        return f"{record.channel.width_mhz} MHz"
    if column is BssColumn.BAND:
        return record.channel.band
    if column is BssColumn.FREQUENCY:
        return f"{record.channel.center_freq_mhz} MHz"
    if column is BssColumn.SIGNAL:
        return f"{record.signal_dbm} dBm"
    return record.protocols_label


def format_ie_cell(element: InformationElement, column: IeColumn) -> str:
    """Format one cell of the information element table."""
    if column is IeColumn.ID:
        return str(element.id)
    if column is IeColumn.ELEMENT:
        return element.name
    return f"{element.length} B"


def build_bss_rows(records: Sequence[NetworkRecord], columns: Sequence[BssColumn]) -> List[List[str]]:
    return [[format_bss_cell(record, column) for column in columns] for record in records]


def build_ie_rows(elements: Sequence[InformationElement], columns: Sequence[IeColumn]) -> List[List[str]]:
    return [[format_ie_cell(element, column) for column in columns] for element in elements]
