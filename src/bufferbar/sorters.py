"""Ordering of bar components."""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any

from .components import Component, TabPage
from .exceptions import InvalidSortError

logger = logging.getLogger(__name__)

Comparator = Callable[[Any, Any], bool]
SortBy = str | Comparator


@dataclass
class SortContext:
    """What a sort may look at besides the components themselves.

    ``tab_numbers`` maps a buffer id to the lowest tab number showing it.
    """

    custom_sort: list[int] | None = None
    cwd: str = ""
    tab_numbers: dict[int, int] = field(default_factory=dict)


def _extension(component: Component) -> str:
    return PurePath(component.path).suffix.lstrip(".")


def _directory(component: Component) -> str:
    return os.path.dirname(os.path.abspath(component.path)) if component.path else ""


def _relative_directory(component: Component, cwd: str) -> tuple[int, str]:
    if not component.path:
        return (1, "")
    directory = _directory(component)
    if not cwd:
        return (1, directory)
    relative = os.path.relpath(directory, cwd)
    if relative == os.pardir or relative.startswith(os.pardir + os.sep):
        return (1, directory)
    return (0, "" if relative == os.curdir else relative)


def _tab_number(c: Component, context: SortContext) -> float:
    if isinstance(c, TabPage):
        return c.ordinal
    return context.tab_numbers.get(c.id, float("inf"))


def _key_for(sort_by: str, context: SortContext) -> Callable[[Component], Any]:
    if sort_by == "id":
        return lambda c: c.id
    if sort_by == "path":
        return lambda c: c.path
    if sort_by == "extension":
        return _extension
    if sort_by == "directory":
        return _directory
    if sort_by == "relative_directory":
        return lambda c: _relative_directory(c, context.cwd)
    if sort_by == "tabs":
        return lambda c: _tab_number(c, context)
    raise InvalidSortError(f"Unknown sort criterion: {sort_by}", sort_by=sort_by)


def comparator_to_key(comparator: Comparator) -> Callable[[Component], Any]:
    """Adapt a ``(a, b) -> bool`` strict weak order to a sort key."""

    def compare(a: Component, b: Component) -> int:
        if comparator(a, b):
            return -1
        if comparator(b, a):
            return 1
        return 0

    return functools.cmp_to_key(compare)


def sort(
    components: Sequence[Component],
    sort_by: SortBy | None = None,
    context: SortContext | None = None,
) -> list[Component]:
    """Return ``components`` ordered by ``sort_by``.

    A non-empty ``context.custom_sort`` means the user arranged the items by
    hand, and the input order is returned untouched. Built-in criteria are
    stable key sorts; ties keep their incoming order.
    """
    context = context or SortContext()
    if context.custom_sort:
        return list(components)

    criterion = sort_by if sort_by is not None else "id"
    if callable(criterion):
        key = comparator_to_key(criterion)
    else:
        key = _key_for(criterion, context)
    logger.debug("sorting %d components by %s", len(components), criterion)
    return sorted(components, key=key)


def tab_numbers(tabs: Sequence[Any]) -> dict[int, int]:
    """Map each buffer id to the first tab (1-based) that shows it."""
    numbers: dict[int, int] = {}
    for number, tab in enumerate(tabs, start=1):
        for buf_id in tab.buffers:
            numbers.setdefault(buf_id, number)
    return numbers
