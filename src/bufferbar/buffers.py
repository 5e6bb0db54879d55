"""Building buffer components from the host's document list."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import PurePath

from .components import Buffer
from .config import BufferlineOptions
from .groups import GroupManager
from .host import BufferInfo, Host
from .letters import LetterRegistry
from .state import BufferlineState

logger = logging.getLogger(__name__)

NO_NAME = "[No Name]"


def apply_custom_order(ids: Sequence[int], custom_sort: Iterable[int] | None) -> list[int]:
    """Order ``ids`` by ``custom_sort``.

    Ids missing from ``custom_sort`` (newly opened buffers) keep their host
    order after the known ones; ids of closed buffers are ignored.
    """
    if not custom_sort:
        return list(ids)
    present = set(ids)
    ordered = [buf_id for buf_id in dict.fromkeys(custom_sort) if buf_id in present]
    known = set(ordered)
    ordered.extend(buf_id for buf_id in ids if buf_id not in known)
    return ordered


def unique_names(paths: dict[int, str]) -> dict[int, str]:
    """File names, with parent directories prepended where names collide."""
    parts = {buf_id: PurePath(path).parts if path else () for buf_id, path in paths.items()}
    depth = dict.fromkeys(paths, 1)

    def name_of(buf_id: int) -> str:
        if not parts[buf_id]:
            return NO_NAME
        return "/".join(parts[buf_id][-depth[buf_id] :])

    while True:
        by_name: dict[str, list[int]] = {}
        for buf_id in paths:
            by_name.setdefault(name_of(buf_id), []).append(buf_id)
        changed = False
        for name, ids in by_name.items():
            if len(ids) < 2 or name == NO_NAME:
                continue
            for buf_id in ids:
                if depth[buf_id] < len(parts[buf_id]):
                    depth[buf_id] += 1
                    changed = True
        if not changed:
            return {buf_id: name_of(buf_id) for buf_id in paths}


def get_components(
    host: Host,
    state: BufferlineState,
    options: BufferlineOptions,
    letters: LetterRegistry,
    groups: GroupManager,
) -> list[Buffer]:
    """One ``Buffer`` per open document, in custom order when one is set."""
    infos: dict[int, BufferInfo] = {info.id: info for info in host.list_buffers()}
    ids = apply_custom_order(list(infos), state.custom_sort)
    names = unique_names({buf_id: infos[buf_id].path for buf_id in ids})
    current = host.current_buffer()

    letters.retain(ids)
    groups.retain(set(ids))

    components: list[Buffer] = []
    for buf_id in ids:
        name = names[buf_id]
        buffer = Buffer.create(
            infos[buf_id],
            name=name,
            options=options,
            strwidth=host.strwidth,
            letter=letters.get(buf_id, name),
            is_picking=state.is_picking,
            is_current=buf_id == current,
        )
        components.append(groups.assign(buffer))
    logger.debug("built %d buffer components", len(components))
    return components
