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
Information element table state for the selected basic service set.
"""

from typing import List, Optional, Sequence

from wifidash.columns import DEFAULT_IE_COLUMNS, IeColumn, build_ie_rows
from wifidash.models import InformationElement


class IeTableState:
    """Selectable list of information elements, kept in the order the record defines."""

    def __init__(self, columns: Optional[Sequence[IeColumn]] = None) -> None:
        self.columns: List[IeColumn] = list(columns) if columns is not None else list(DEFAULT_IE_COLUMNS)
        self.elements: List[InformationElement] = []
        self.rows: List[List[str]] = []
        self.selected: Optional[int] = None
        self.is_focused = False

    def focus(self) -> None:
        self.is_focused = True

    def unfocus(self) -> None:
        self.is_focused = False

    def set_elements(self, elements: Sequence[InformationElement]) -> None:
        """
        Replace the element list.

        The selection stays on the element with the same id when one is
        present (first match), otherwise falls back to the first element.
        """
        previous = self.currently_selected()
        new_elements = list(elements)

        self.selected = None
        if previous is not None:
            self.selected = next(
                (index for index, element in enumerate(new_elements) if element.id == previous.id),
                None,
            )
        if self.selected is None and new_elements:
            self.selected = 0

        self.elements = new_elements
        self.rows = build_ie_rows(new_elements, self.columns)

    def select_next(self) -> None:
        if self.selected is None:
            if self.elements:
                self.selected = 0
        elif self.selected + 1 < len(self.elements):
            self.selected += 1

    def select_previous(self) -> None:
        if self.selected is not None and self.selected > 0:
            self.selected -= 1

    def currently_selected(self) -> Optional[InformationElement]:
        if self.selected is None:
            return None
        return self.elements[self.selected]

    def header(self) -> List[str]:
        return [str(column) for column in self.columns]

    def selected_fields(self) -> List[str]:
        """Display strings for the fields of the selected element."""
        element = self.currently_selected()
        if element is None:
            return []
        return [str(info_field) for info_field in element.fields]
