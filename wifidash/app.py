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
Application view state for wifidash.

App owns both tables and keeps them consistent: the element table always
shows the elements of the selected basic service set, and exactly one table
has focus.
"""

from enum import Enum
from typing import Any, Iterable

from wifidash.bss_table import BssTableState
from wifidash.columns import BssColumn, SortDirection
from wifidash.ie_table import IeTableState
from wifidash.models import NetworkRecord


class Focus(Enum):
    PRIMARY = "primary"
    DETAIL = "detail"


class App:
    """View state shared by the render loop and the rendering surface."""

    def __init__(self) -> None:
        self.bss_table = BssTableState()
        self.ie_table = IeTableState()
        self.focus = Focus.PRIMARY
        self._apply_focus()

    def apply_new_snapshot(self, records: Iterable[NetworkRecord]) -> None:
        self.bss_table.replace_snapshot(records)
        self.recompute_detail()

    def sort_primary(self, column: BssColumn, direction: SortDirection) -> None:
        self.bss_table.sort(column, direction)
        self.recompute_detail()

    def select_next(self) -> None:
        if self.focus is Focus.PRIMARY:
            self.bss_table.select_next()
        else:
            self.ie_table.select_next()
        self.recompute_detail()

    def select_previous(self) -> None:
        if self.focus is Focus.PRIMARY:
            self.bss_table.select_previous()
        else:
            self.ie_table.select_previous()
        self.recompute_detail()

    def cycle_focus(self) -> None:
        self.focus = Focus.DETAIL if self.focus is Focus.PRIMARY else Focus.PRIMARY
        self._apply_focus()

    def recompute_detail(self) -> None:
        """Rebuild the element table from the selected basic service set."""
        selected = self.bss_table.currently_selected()
        self.ie_table.set_elements(selected.elements if selected is not None else ())

    def render(self, surface: Any) -> None:
        surface.draw(self.bss_table, self.ie_table, self.focus)

    def _apply_focus(self) -> None:
        if self.focus is Focus.PRIMARY:
            self.ie_table.unfocus()
            self.bss_table.focus()
        else:
            self.bss_table.unfocus()
            self.ie_table.focus()
