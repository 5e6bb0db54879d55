"""Fitting the bar into the available width.

Truncation narrows the row from the outside in: items are dropped from the
far end of whichever side of the current item is wider, and a "+N" marker
replaces each side's dropped items. The current item is never dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from rich.cells import cell_len

from .components import Component, StrWidth
from .config import BufferlineOptions
from .host import TabInfo

logger = logging.getLogger(__name__)

__all__ = [
    "Marker",
    "Section",
    "get_marker_size",
    "render_bar",
    "render_tab_indicators",
    "truncate",
]


class Section:
    """A contiguous run of components with a cached total width.

    ``length`` is kept in step with ``items`` by the pop methods; it is never
    recomputed from scratch.
    """

    def __init__(self, items: Iterable[Component] = ()) -> None:
        self.items: list[Component] = list(items)
        self.length = sum(item.length for item in self.items)

    def pop_front(self) -> Component | None:
        if not self.items:
            return None
        item = self.items.pop(0)
        self.length -= item.length
        return item

    def pop_back(self) -> Component | None:
        if not self.items:
            return None
        item = self.items.pop()
        self.length -= item.length
        return item

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __repr__(self) -> str:
        return f"Section(items={len(self.items)}, length={self.length})"


@dataclass
class Marker:
    """Counts of items truncated on each side.

    ``*_element_size`` is the width of a marker's text without its count.
    """

    left_count: int = 0
    right_count: int = 0
    left_element_size: int = 0
    right_element_size: int = 0


def get_marker_size(count: int, element_size: int, strwidth: StrWidth = cell_len) -> int:
    return strwidth(str(count)) + element_size if count > 0 else 0


def truncate(
    before: Section,
    current: Section,
    after: Section,
    available_width: int,
    marker: Marker,
    strwidth: StrWidth = cell_len,
) -> tuple[str, Marker, list[Component]]:
    """Drop outer items until the row fits ``available_width``.

    Returns the rendered line, the marker counts and the items that made it
    onto the line. When even the current item does not fit, the line is empty
    rather than showing part of it.

    Every pass either returns, drops one item, or (with both sides already
    empty) zeroes the marker counts, so the loop ends within
    ``len(before) + len(after) + 2`` passes.
    """
    for _ in range(len(before) + len(after) + 2):
        markers_length = get_marker_size(
            marker.left_count, marker.left_element_size, strwidth
        ) + get_marker_size(marker.right_count, marker.right_element_size, strwidth)
        total_length = before.length + current.length + after.length + markers_length

        if available_width >= total_length:
            visible = [*before.items, *current.items, *after.items]
            line = "".join(
                item.render(index, visible[index + 1] if index + 1 < len(visible) else None)
                for index, item in enumerate(visible)
            )
            return line, marker, visible

        # too narrow for the current item on its own
        if available_width < current.length:
            return "", marker, []

        if before.length >= after.length:
            if before.pop_front() is not None:
                marker.left_count += 1
        elif after.pop_back() is not None:
            marker.right_count += 1

        # not even room for the indicators; counts can grow back on later passes
        if current.length + markers_length > available_width:
            marker.left_count = 0
            marker.right_count = 0

    raise RuntimeError("truncation did not converge")


def _split_sections(items: Sequence[Component]) -> tuple[Section, Section, Section]:
    for index, item in enumerate(items):
        if item.current():
            return Section(items[:index]), Section([item]), Section(items[index + 1 :])
    return Section(items), Section(), Section()


def render_tab_indicators(
    tabs: Sequence[TabInfo], current_tab: int | None, options: BufferlineOptions
) -> str:
    """Tab numbers drawn at the right edge when buffers are shown."""
    if not options.show_tab_indicators or options.is_tabline or len(tabs) < 2:
        return ""
    return "".join(
        f"[{number}]" if tab.id == current_tab else f" {number} "
        for number, tab in enumerate(tabs, start=1)
    )


def render_bar(
    components: Sequence[Component],
    *,
    options: BufferlineOptions,
    columns: int,
    strwidth: StrWidth = cell_len,
    tabs: Sequence[TabInfo] = (),
    current_tab: int | None = None,
) -> tuple[str, list[Component]]:
    """Render the whole bar for ``columns`` cells.

    Hidden items are left out. Returns the bar text and the items that fit.
    """
    items = [item for item in components if not item.hidden]
    before, current, after = _split_sections(items)

    tab_text = render_tab_indicators(tabs, current_tab, options)
    tab_width = strwidth(tab_text)
    available_width = columns - tab_width

    left_icon = options.left_trunc_marker
    right_icon = options.right_trunc_marker
    marker = Marker(
        left_element_size=strwidth(f" {left_icon}  "),
        right_element_size=strwidth(f"  {right_icon} "),
    )

    line, marker, visible = truncate(before, current, after, available_width, marker, strwidth)
    logger.debug(
        "rendered bar",
        extra={
            "available_width": available_width,
            "items": len(items),
            "visible": len(visible),
            "left_truncated": marker.left_count,
            "right_truncated": marker.right_count,
        },
    )

    left = f" {left_icon} {marker.left_count} " if marker.left_count else ""
    right = f" {marker.right_count} {right_icon} " if marker.right_count else ""
    text = f"{left}{line}{right}"
    if tab_text:
        padding = max(columns - strwidth(text) - tab_width, 0)
        text = f"{text}{' ' * padding}{tab_text}"
    return text, visible
