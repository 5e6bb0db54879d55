"""Named buffer groups.

Every buffer belongs to exactly one group. ``pinned`` always renders first,
configured groups follow by priority, and ``ungrouped`` comes last. Named
groups are framed by separators and can be hidden as a unit.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from rich.cells import cell_len

from .components import Buffer, Component, GroupSeparator, StrWidth
from .config import GroupOptions, GroupsConfig, GroupSpec
from .exceptions import GroupNotFoundError

logger = logging.getLogger(__name__)

PINNED_ID = "pinned"
UNGROUPED_ID = "ungrouped"


@dataclass(eq=False)
class Group:
    """Runtime state of a group."""

    id: str
    name: str
    priority: int = 0
    hidden: bool = False
    auto_close: bool = False
    patterns: list[str] = field(default_factory=list)
    matcher: Callable[[Any], bool] | None = None

    @property
    def is_named(self) -> bool:
        return self.id not in (PINNED_ID, UNGROUPED_ID)

    def matches(self, buffer: Buffer) -> bool:
        if self.matcher is not None:
            return bool(self.matcher(buffer))
        basename = os.path.basename(buffer.path)
        return any(
            fnmatch.fnmatch(buffer.path, pattern) or fnmatch.fnmatch(basename, pattern)
            for pattern in self.patterns
        )

    @classmethod
    def from_spec(cls, spec: GroupSpec) -> Group:
        return cls(
            id=spec.name.lower(),
            name=spec.name,
            priority=spec.priority,
            hidden=spec.hidden,
            auto_close=spec.auto_close,
            patterns=list(spec.patterns),
            matcher=spec.matcher,
        )


class GroupManager:
    """Assigns buffers to groups and renders them in group order."""

    def __init__(self, config: GroupsConfig | None = None) -> None:
        config = config or GroupsConfig()
        self.options: GroupOptions = config.options
        named = sorted(
            (Group.from_spec(spec) for spec in config.items),
            key=lambda group: group.priority,
        )
        self._groups: dict[str, Group] = {PINNED_ID: Group(id=PINNED_ID, name="pinned")}
        self._groups.update((group.id, group) for group in named)
        self._groups[UNGROUPED_ID] = Group(id=UNGROUPED_ID, name="ungrouped")
        # manual assignments (pins) by buffer id
        self._manual: dict[int, str] = {}
        self._members: dict[str, list[Buffer]] = {}

    # -- lookup ---------------------------------------------------------------

    def get_by_id(self, group_id: str | None) -> Group | None:
        if group_id is None:
            return None
        return self._groups.get(group_id)

    def get_by_name(self, name: str) -> Group | None:
        return self._groups.get(name.strip().lower())

    def names(self) -> list[str]:
        """Names usable with group commands."""
        return [group.name for group in self._groups.values() if group.id != UNGROUPED_ID]

    def members(self, name: str) -> list[Buffer]:
        group = self._require(name)
        return list(self._members.get(group.id, []))

    def _require(self, name: str) -> Group:
        group = self.get_by_name(name)
        if group is None:
            raise GroupNotFoundError(f"No group named {name!r}", group_name=name)
        return group

    # -- assignment -------------------------------------------------------------

    def assign(self, buffer: Buffer) -> Buffer:
        """Set ``buffer.group`` and its hidden flag from the group it falls in."""
        group_id = self._manual.get(buffer.id)
        if group_id is None:
            group_id = UNGROUPED_ID
            for group in self._groups.values():
                if group.is_named and group.matches(buffer):
                    group_id = group.id
                    break
        buffer.group = group_id
        buffer.hidden = self._groups[group_id].hidden
        return buffer

    def add_to_group(self, group_id: str, buffer: Buffer) -> None:
        if group_id not in self._groups:
            raise GroupNotFoundError(f"No group named {group_id!r}", group_name=group_id)
        self._manual[buffer.id] = group_id
        buffer.group = group_id
        buffer.hidden = self._groups[group_id].hidden

    def remove_from_group(self, group_id: str, buffer: Buffer) -> None:
        if self._manual.get(buffer.id) == group_id:
            del self._manual[buffer.id]
        self.assign(buffer)

    def is_pinned(self, buffer: Buffer | None) -> bool:
        return buffer is not None and self._manual.get(buffer.id) == PINNED_ID

    def retain(self, alive: set[int]) -> None:
        """Forget manual assignments of closed buffers."""
        for buf_id in [i for i in self._manual if i not in alive]:
            del self._manual[buf_id]

    # -- visibility -------------------------------------------------------------

    def set_hidden(self, group_id: str, value: bool) -> None:
        group = self._groups.get(group_id)
        if group is None or not group.is_named:
            return
        group.hidden = value
        logger.debug("group %s hidden=%s", group.name, value)

    def toggle_hidden(self, group_id: str | None = None, name: str | None = None) -> None:
        group = self.get_by_id(group_id) if group_id is not None else None
        if group is None and name is not None:
            group = self._require(name)
        if group is not None:
            self.set_hidden(group.id, not group.hidden)

    def command(self, name: str, fn: Callable[[Buffer], Any]) -> None:
        """Apply ``fn`` to every member of the named group."""
        for buffer in self.members(name):
            fn(buffer)

    # -- rendering --------------------------------------------------------------

    def render(
        self,
        components: Sequence[Component],
        sorter: Callable[[list[Component]], list[Component]],
        strwidth: StrWidth = cell_len,
    ) -> list[Component]:
        """Order ``components`` by group, sorting within each group."""
        buckets: dict[str, list[Component]] = {group_id: [] for group_id in self._groups}
        for component in components:
            buffer = component.as_buffer()
            group_id = buffer.group if buffer is not None else None
            buckets[group_id if group_id in buckets else UNGROUPED_ID].append(component)

        self._members = {}
        result: list[Component] = []
        for group_id, group in self._groups.items():
            items = buckets[group_id]
            if not items:
                continue
            items = sorter(items)
            self._members[group_id] = [b for b in (i.as_buffer() for i in items) if b]
            if not group.is_named:
                result.extend(items)
                continue
            for item in items:
                item.hidden = group.hidden
            result.append(
                GroupSeparator.start(
                    group_id, group.name, hidden=group.hidden, count=len(items), strwidth=strwidth
                )
            )
            result.extend(items)
            if not group.hidden:
                result.append(GroupSeparator.end(group_id, group.name, strwidth=strwidth))
        return result
