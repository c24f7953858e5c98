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
Basic service set table state.

Holds the sorted scan results, their display rows, and the selection. The
selection follows an access point by BSSID across snapshot replacements and
is never left empty while there are rows to select.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from wifidash.columns import (
    DEFAULT_BSS_COLUMNS,
    DEFAULT_SORT,
    SORT_MARKER,
    BssColumn,
    SortDirection,
    build_bss_rows,
    sort_records,
)
from wifidash.models import NetworkRecord

logger = logging.getLogger(__name__)


class BssTableState:
    """
    Sortable, selectable list of network records.

    ``selected`` is either None (no records) or a valid index into
    ``records``.
    """

    def __init__(self, columns: Optional[Sequence[BssColumn]] = None) -> None:
        self.columns: List[BssColumn] = list(columns) if columns is not None else list(DEFAULT_BSS_COLUMNS)
        self.records: List[NetworkRecord] = []
        self.rows: List[List[str]] = []
        self.sort_column, self.sort_direction = DEFAULT_SORT
        self.selected: Optional[int] = None
        self.is_focused = False

    def focus(self) -> None:
        self.is_focused = True

    def unfocus(self) -> None:
        self.is_focused = False

    def replace_snapshot(self, records: Iterable[NetworkRecord]) -> None:
        """
        Replace the table contents with a new scan snapshot.

        The snapshot is sorted with the active sort. The previously selected
        access point stays selected if it is still present; otherwise the
        first row is selected, or nothing when the snapshot is empty.

        Args:
            records: The complete set of records from one scan, in any order
        """
        previous = self.currently_selected()
        new_records = sort_records(records, self.sort_column, self.sort_direction)

        self.selected = None
        if previous is not None:
            self.selected = next(
                (index for index, record in enumerate(new_records) if record.bssid == previous.bssid),
                None,
            )
        if self.selected is None and new_records:
            self.selected = 0

        self.records = new_records
        self.rows = build_bss_rows(new_records, self.columns)
        logger.debug("Snapshot applied: %d records, selected=%s", len(new_records), self.selected)

    def sort(self, column: BssColumn, direction: SortDirection) -> None:
        """
        Re-sort the current records and make the sort active for later snapshots.

        The selection always moves to the first row.
        """
        self.records = sort_records(self.records, column, direction)
        self.rows = build_bss_rows(self.records, self.columns)
        self.sort_column = column
        self.sort_direction = direction
        self.selected = 0 if self.records else None

    def select_next(self) -> None:
        if self.selected is None:
            if self.records:
                self.selected = 0
        elif self.selected + 1 < len(self.records):
            self.selected += 1

    def select_previous(self) -> None:
        if self.selected is not None and self.selected > 0:
            self.selected -= 1

    def currently_selected(self) -> Optional[NetworkRecord]:
        if self.selected is None:
            return None
        return self.records[self.selected]

    def header(self) -> List[str]:
        """Column labels, with the active sort column marked."""
        return [f"{column}{SORT_MARKER}" if column is self.sort_column else str(column) for column in self.columns]
