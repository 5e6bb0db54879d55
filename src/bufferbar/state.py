"""Bar state shared by the render cycle and the command layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .components import Component


@dataclass
class BufferlineState:
    """Snapshot of the bar produced by the latest render.

    ``all_components`` is the full ordered list including group separators and
    members of hidden groups. ``components`` keeps only focusable, non-hidden
    items and is what index-based commands work on. ``visible_components`` is
    the subset that fit on screen.

    ``custom_sort`` survives renders: once the user moves or sorts, it holds
    the manual id order until explicitly cleared.
    """

    all_components: list[Component] = field(default_factory=list)
    components: list[Component] = field(default_factory=list)
    visible_components: list[Component] = field(default_factory=list)
    custom_sort: list[int] | None = None
    is_picking: bool = False
    current_element_index: int | None = None

    def set(self, **fields: Any) -> None:
        for name, value in fields.items():
            if not hasattr(self, name):
                raise AttributeError(f"BufferlineState has no field {name!r}")
            setattr(self, name, value)


def filter_invisible(items: list[Component]) -> list[Component]:
    """Drop unfocusable and hidden items."""
    return [item for item in items if item.focusable and not item.hidden]


def get_ids(items: list[Component]) -> list[int]:
    return [item.id for item in items]
