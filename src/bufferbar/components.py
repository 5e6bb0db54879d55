"""Renderable bar items.

Every item knows its display ``length`` before layout. The truncation engine
trusts that number without measuring rendered text again, so ``render`` must
always produce exactly ``length`` cells whatever the neighbour is.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import InitVar, dataclass, field
from typing import TYPE_CHECKING

from rich.cells import cell_len

if TYPE_CHECKING:
    from .config import BufferlineOptions
    from .host import BufferInfo

StrWidth = Callable[[str], int]


def crop(text: str, max_length: int, ellipsis: str, strwidth: StrWidth = cell_len) -> str:
    """Crop ``text`` to ``max_length`` cells, ending with ``ellipsis`` when cut."""
    if strwidth(text) <= max_length:
        return text
    budget = max_length - strwidth(ellipsis)
    kept: list[str] = []
    used = 0
    for char in text:
        width = strwidth(char)
        if used + width > budget:
            break
        kept.append(char)
        used += width
    return "".join(kept) + ellipsis


@dataclass(eq=False)
class Component:
    """Base bar item.

    ``text`` is the body; ``separator`` is drawn after it when another
    focusable item follows and is replaced by blanks of the same width
    otherwise.
    """

    id: int
    text: str = ""
    separator: str = ""
    focusable: bool = True
    hidden: bool = False
    group: str | None = None
    path: str = ""
    is_current: bool = False
    length: int = field(default=0, init=False)
    strwidth: InitVar[StrWidth | None] = None

    kind = "component"

    def __post_init__(self, strwidth: StrWidth | None) -> None:
        measure = strwidth or cell_len
        separator_width = measure(self.separator)
        self._blank = " " * separator_width
        self.length = measure(self.text) + separator_width

    def render(self, index: int, next_item: Component | None) -> str:
        """Render this item at ``index`` given its right neighbour."""
        if next_item is None or not next_item.focusable:
            return self.text + self._blank
        return self.text + self.separator

    def current(self) -> bool:
        return self.is_current

    def as_buffer(self) -> Buffer | None:
        return None

    def as_element(self) -> Buffer | TabPage | None:
        return None

    @property
    def visible(self) -> bool:
        return self.focusable and not self.hidden


@dataclass(eq=False)
class Buffer(Component):
    """An open document."""

    name: str = ""
    letter: str = ""
    modified: bool = False

    kind = "buffer"

    @classmethod
    def create(
        cls,
        info: BufferInfo,
        *,
        name: str,
        options: BufferlineOptions,
        strwidth: StrWidth,
        letter: str = "",
        is_picking: bool = False,
        is_current: bool = False,
        group: str | None = None,
        hidden: bool = False,
    ) -> Buffer:
        parts = [" "]
        if is_picking and letter:
            parts.append(f"{letter} ")
        if options.numbers == "buffer_id":
            parts.append(f"{info.id}. ")
        parts.append(crop(name, options.max_name_length, options.truncation_ellipsis, strwidth))
        if info.modified:
            parts.append(f" {options.modified_icon}")
        parts.append(" ")
        return cls(
            id=info.id,
            text="".join(parts),
            separator=options.separator,
            hidden=hidden,
            group=group,
            path=info.path,
            is_current=is_current,
            strwidth=strwidth,
            name=name,
            letter=letter,
            modified=info.modified,
        )

    def as_buffer(self) -> Buffer:
        return self

    def as_element(self) -> Buffer:
        return self


@dataclass(eq=False)
class TabPage(Component):
    """An editor tab, labelled with the name of its focused buffer."""

    name: str = ""
    letter: str = ""
    ordinal: int = 0
    buffer_id: int | None = None

    kind = "tab"

    @classmethod
    def create(
        cls,
        tab_id: int,
        *,
        ordinal: int,
        name: str,
        path: str,
        buffer_id: int | None,
        options: BufferlineOptions,
        strwidth: StrWidth,
        letter: str = "",
        is_picking: bool = False,
        is_current: bool = False,
    ) -> TabPage:
        hint = f"{letter} " if is_picking and letter else ""
        label = crop(name, options.max_name_length, options.truncation_ellipsis, strwidth)
        return cls(
            id=tab_id,
            text=f" {hint}{ordinal}:{label} ",
            separator=options.separator,
            path=path,
            is_current=is_current,
            strwidth=strwidth,
            name=name,
            letter=letter,
            ordinal=ordinal,
            buffer_id=buffer_id,
        )

    def as_element(self) -> TabPage:
        return self


@dataclass(eq=False)
class GroupSeparator(Component):
    """Start or end boundary of a named group."""

    name: str = ""
    position: str = "start"
    count: int = 0

    kind = "group"

    @classmethod
    def start(
        cls, group_id: str, name: str, *, hidden: bool, count: int, strwidth: StrWidth
    ) -> GroupSeparator:
        text = f"[{name} +{count}] " if hidden else f"[{name}"
        return cls(
            id=0,
            text=text,
            focusable=False,
            group=group_id,
            strwidth=strwidth,
            name=name,
            position="start",
            count=count,
        )

    @classmethod
    def end(cls, group_id: str, name: str, *, strwidth: StrWidth) -> GroupSeparator:
        return cls(
            id=0,
            text="] ",
            focusable=False,
            group=group_id,
            strwidth=strwidth,
            name=name,
            position="end",
        )
