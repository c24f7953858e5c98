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
wifidash UI Rendering Module

This module draws the two tables onto the terminal. Screen content is built
as a list of plain lines (ANSI styled when color is enabled) by pure layout
functions, and TerminalSurface writes only the lines that changed since the
previous frame.
"""

import os
import re
import sys
from typing import IO, List, NamedTuple, Optional, Sequence, Tuple

from wifidash.app import Focus
from wifidash.bss_table import BssTableState
from wifidash.ie_table import IeTableState
from wifidash.models import summarize_records

ANSI_RESET = "\x1b[0m"
ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")
HIGHLIGHT_STYLE = "\x1b[1;33m"  # Bold yellow
FOCUS_BORDER_STYLE = "\x1b[33m"  # Yellow
SELECTED_PREFIX = "> "
UNSELECTED_PREFIX = "  "
COLUMN_SPACING = 1
KEY_HINTS = "q: quit | b/s: sort by BSSID/SSID | up/down: select | Enter: switch table"

BSS_TITLE = "Basic Service Sets"
IE_TITLE = "Information Elements"


class Region(NamedTuple):
    top: int
    left: int
    width: int
    height: int


# ============================================================================
# ANSI/Text Utility Functions
# ============================================================================


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_ESCAPE_RE.sub("", text)


def visible_len(text: str) -> int:
    """Get the visible length of text (excluding ANSI codes)."""
    return len(strip_ansi(text))


def truncate_visible(text: str, width: int) -> Tuple[str, int]:
    """
    Truncate text to a visible width, preserving ANSI codes.

    Returns:
        Tuple of (truncated_text, visible_count)
    """
    result = []
    visible_count = 0
    index = 0
    while index < len(text) and visible_count < width:
        if text[index] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, index)
            if match:
                result.append(match.group(0))
                index = match.end()
                continue
        result.append(text[index])
        index += 1
        visible_count += 1
    truncated = "".join(result)
    if "\x1b[" in truncated and not truncated.endswith(ANSI_RESET):
        truncated += ANSI_RESET
    return truncated, visible_count


def pad_visible(text: str, width: int) -> str:
    """Pad text to a visible width, preserving ANSI codes."""
    truncated, visible_count = truncate_visible(text, width)
    if visible_count < width:
        truncated += " " * (width - visible_count)
    return truncated


def stylize(text: str, style: str, use_color: bool) -> str:
    if not use_color or not text:
        return text
    return f"{style}{text}{ANSI_RESET}"


def get_terminal_size(fallback: Tuple[int, int] = (80, 24)) -> os.terminal_size:
    """
    Get the terminal size by directly querying the terminal.

    Queries stdout, then stderr, then stdin, so the size follows terminal
    resizes even when COLUMNS/LINES are set in the environment.
    """
    for stream in (sys.stdout, sys.stderr, sys.stdin):
        try:
            if stream.isatty():
                return os.get_terminal_size(stream.fileno())
        except (AttributeError, ValueError, OSError):
            continue
    return os.terminal_size(fallback)


# ============================================================================
# Layout
# ============================================================================


def compute_layout(width: int, height: int) -> Tuple[Region, Region, Region]:
    """
    Split the screen into the BSS table, the element table and the field list.

    A one-cell margin surrounds the content. The upper half holds the BSS
    table; the lower half is split 33/67 between the element table and the
    field list.
    """
    inner_width = max(0, width - 2)
    inner_height = max(0, height - 2)
    top_height = inner_height // 2
    bottom_height = inner_height - top_height
    ie_width = inner_width * 33 // 100
    bss = Region(1, 1, inner_width, top_height)
    ie = Region(1 + top_height, 1, ie_width, bottom_height)
    fields = Region(1 + top_height, 1 + ie_width, inner_width - ie_width, bottom_height)
    return bss, ie, fields


def compute_scroll_start(selected: Optional[int], total: int, visible: int) -> int:
    """Return the first visible row index so that the selected row stays on screen."""
    if visible <= 0 or total <= visible or selected is None:
        return 0
    max_index = total - 1
    selected = min(max(selected, 0), max_index)
    return max(0, min(selected - visible + 1, max_index - visible + 1))


def compute_column_widths(column_count: int, width: int) -> List[int]:
    """Divide the available width evenly between the columns."""
    if column_count <= 0:
        return []
    usable = max(0, width - len(SELECTED_PREFIX) - COLUMN_SPACING * (column_count - 1))
    return [usable // column_count] * column_count


def format_row(cells: Sequence[str], widths: Sequence[int], selected: bool = False) -> str:
    prefix = SELECTED_PREFIX if selected else UNSELECTED_PREFIX
    spacer = " " * COLUMN_SPACING
    return prefix + spacer.join(pad_visible(cell, col_width) for cell, col_width in zip(cells, widths))


def box_lines(
    lines: Sequence[str],
    width: int,
    height: int,
    title: str = "",
    focused: bool = False,
    use_color: bool = False,
) -> List[str]:
    """Draw a titled box around lines; a focused box uses '=' borders."""
    if width < 2 or height < 2:
        return [pad_visible(line, max(0, width)) for line in list(lines)[: max(0, height)]]
    inner_width = width - 2
    inner_height = height - 2
    fill = "=" if focused else "-"
    caption = f" {title} " if title else ""
    caption, _ = truncate_visible(caption, inner_width)
    top = "+" + caption + fill * (inner_width - visible_len(caption)) + "+"
    bottom = "+" + fill * inner_width + "+"
    if focused:
        top = stylize(top, FOCUS_BORDER_STYLE, use_color)
        bottom = stylize(bottom, FOCUS_BORDER_STYLE, use_color)
    inner = [pad_visible(line, inner_width) for line in list(lines)[:inner_height]]
    while len(inner) < inner_height:
        inner.append(" " * inner_width)
    return [top] + [f"|{line}|" for line in inner] + [bottom]


def build_table_lines(
    header: Sequence[str],
    rows: Sequence[Sequence[str]],
    selected: Optional[int],
    width: int,
    height: int,
    use_color: bool,
) -> List[str]:
    """Build the inner lines of a table: header row then the visible body rows."""
    if width <= 0 or height <= 0:
        return []
    widths = compute_column_widths(len(header), width)
    lines = [format_row(header, widths)]
    visible = max(0, height - 1)
    start = compute_scroll_start(selected, len(rows), visible)
    for index in range(start, min(len(rows), start + visible)):
        is_selected = index == selected
        line = format_row(rows[index], widths, selected=is_selected)
        lines.append(stylize(line, HIGHLIGHT_STYLE, use_color and is_selected))
    return lines


def build_bss_panel(table: BssTableState, region: Region, use_color: bool) -> List[str]:
    lines = build_table_lines(
        table.header(), table.rows, table.selected, region.width - 2, region.height - 2, use_color
    )
    return box_lines(lines, region.width, region.height, BSS_TITLE, table.is_focused, use_color)


def build_ie_panel(table: IeTableState, region: Region, use_color: bool) -> List[str]:
    lines = build_table_lines(
        table.header(), table.rows, table.selected, region.width - 2, region.height - 2, use_color
    )
    return box_lines(lines, region.width, region.height, IE_TITLE, table.is_focused, use_color)


def build_fields_panel(table: IeTableState, region: Region) -> List[str]:
    """Field list of the selected element; blank when nothing is selected."""
    element = table.currently_selected()
    if element is None:
        return [" " * region.width for _ in range(region.height)]
    return box_lines(table.selected_fields(), region.width, region.height, element.name)


def build_status_line(table: BssTableState, focus: Focus, width: int) -> str:
    counts = summarize_records(table.records)
    bands = ", ".join(f"{band}: {count}" for band, count in sorted(counts.items()))
    parts = [f"Networks: {len(table.records)}"]
    if bands:
        parts.append(bands)
    parts.append(f"Sort: {table.sort_column} {table.sort_direction.value}")
    parts.append(f"Focus: {focus.value}")
    parts.append(KEY_HINTS)
    return pad_visible(" | ".join(parts), width)


def build_screen_lines(
    bss_table: BssTableState,
    ie_table: IeTableState,
    focus: Focus,
    width: int,
    height: int,
    use_color: bool = False,
) -> List[str]:
    """Compose the whole screen as ``height`` lines of ``width`` visible cells."""
    if width <= 0 or height <= 0:
        return []
    bss_region, ie_region, fields_region = compute_layout(width, height)
    screen = [" " * width for _ in range(height)]

    bss_lines = build_bss_panel(bss_table, bss_region, use_color)
    for offset, line in enumerate(bss_lines):
        screen[bss_region.top + offset] = " " + line + " " * (width - 1 - visible_len(line))

    ie_lines = build_ie_panel(ie_table, ie_region, use_color)
    field_lines = build_fields_panel(ie_table, fields_region)
    for offset in range(ie_region.height):
        left = ie_lines[offset] if offset < len(ie_lines) else " " * ie_region.width
        right = field_lines[offset] if offset < len(field_lines) else " " * fields_region.width
        row = " " + pad_visible(left, ie_region.width) + pad_visible(right, fields_region.width)
        screen[ie_region.top + offset] = pad_visible(row, width)

    screen[height - 1] = build_status_line(bss_table, focus, width)
    return screen


# ============================================================================
# Terminal Surface
# ============================================================================


def enter_alternate_screen(stream: IO[str]) -> None:
    stream.write("\x1b[?1049h\x1b[?25l\x1b[2J\x1b[H")
    stream.flush()


def leave_alternate_screen(stream: IO[str]) -> None:
    stream.write(ANSI_RESET + "\x1b[?25h\x1b[?1049l")
    stream.flush()


class TerminalSurface:
    """Draws frames to a terminal stream, rewriting only changed lines."""

    def __init__(self, stream: Optional[IO[str]] = None, use_color: bool = False) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.use_color = use_color
        self.last_lines: Optional[List[str]] = None
        self.last_size: Optional[Tuple[int, int]] = None

    def draw(self, bss_table: BssTableState, ie_table: IeTableState, focus: Focus) -> None:
        size = get_terminal_size(fallback=(80, 24))
        lines = build_screen_lines(bss_table, ie_table, focus, size.columns, size.lines, self.use_color)
        if not lines:
            return

        if self.last_lines is None or self.last_size != (size.columns, size.lines):
            chunks = ["\x1b[2J\x1b[H"]
            chunks.extend(f"\x1b[{index + 1};1H{line}" for index, line in enumerate(lines))
        else:
            chunks = [
                f"\x1b[{index + 1};1H\x1b[2K{line}"
                for index, line in enumerate(lines)
                if index >= len(self.last_lines) or self.last_lines[index] != line
            ]
        if chunks:
            self.stream.write("".join(chunks))
            self.stream.flush()
        self.last_lines = lines
        self.last_size = (size.columns, size.lines)
