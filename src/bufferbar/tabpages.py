"""Building tab components from the host's tab list."""

from __future__ import annotations

from pathlib import PurePath

from .buffers import NO_NAME, apply_custom_order
from .components import TabPage
from .config import BufferlineOptions
from .host import Host
from .letters import LetterRegistry
from .state import BufferlineState


def get_components(
    host: Host,
    state: BufferlineState,
    options: BufferlineOptions,
    letters: LetterRegistry,
) -> list[TabPage]:
    """One ``TabPage`` per editor tab, labelled by its focused buffer."""
    paths = {info.id: info.path for info in host.list_buffers()}
    host_tabs = host.list_tabs()
    by_id = {tab.id: tab for tab in host_tabs}
    numbers = {tab.id: number for number, tab in enumerate(host_tabs, start=1)}
    tabs = [by_id[tab_id] for tab_id in apply_custom_order(list(by_id), state.custom_sort)]
    current = host.current_tab()
    letters.retain(tab.id for tab in tabs)

    components: list[TabPage] = []
    for tab in tabs:
        path = paths.get(tab.current_buffer, "") if tab.current_buffer is not None else ""
        name = PurePath(path).name if path else NO_NAME
        components.append(
            TabPage.create(
                tab.id,
                ordinal=numbers[tab.id],
                name=name,
                path=path,
                buffer_id=tab.current_buffer,
                options=options,
                strwidth=host.strwidth,
                letter=letters.get(tab.id, name),
                is_picking=state.is_picking,
                is_current=tab.id == current,
            )
        )
    return components
