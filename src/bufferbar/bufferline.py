"""The bar itself: setup, editor event handling and the render cycle."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable

from . import buffers, commands, sorters, tabpages
from .actions import CommandRegistry
from .components import Component
from .config import BufferlineConfig, BufferlineOptions
from .exceptions import UnsupportedHostError
from .groups import GroupManager
from .host import Event, Host, NotifyLevel
from .letters import LetterRegistry
from .render import render_bar
from .state import BufferlineState, filter_invisible

logger = logging.getLogger(__name__)

MIN_HOST_VERSION = (0, 7)


class Bufferline:
    """Keeps the bar in sync with a host editor.

    Owns the state store, the group manager and the pick letters. Every
    render rebuilds the component list from the host and stores the result
    back in ``state`` for index-based commands.

    Usage:
        bar = Bufferline(host, BufferlineConfig())
        if bar.setup():
            bar.commands.run("BufferLineCycleNext")
    """

    def __init__(self, host: Host, config: BufferlineConfig | None = None) -> None:
        self.host = host
        self.config = config or BufferlineConfig()
        self.state = BufferlineState()
        self.groups = GroupManager(self.config.options.groups)
        self.letters = LetterRegistry()
        self.tab_letters = LetterRegistry()
        self.commands: CommandRegistry | None = None
        self._awaiting_key = False
        self._version_reported = False

    @property
    def options(self) -> BufferlineOptions:
        return self.config.options

    # -- setup ----------------------------------------------------------------

    def check_host(self) -> None:
        version = tuple(self.host.version())
        if version[: len(MIN_HOST_VERSION)] < MIN_HOST_VERSION:
            raise UnsupportedHostError(
                "bufferbar requires editor version 0.7 or higher",
                version=version,
                required=MIN_HOST_VERSION,
            )

    def setup(self) -> bool:
        """Register events and the tabline provider.

        Returns False without registering anything when the host is too old.
        """
        try:
            self.check_host()
        except UnsupportedHostError as exc:
            logger.error(str(exc))
            if not self._version_reported:
                self.host.notify(exc.message, NotifyLevel.ERROR)
                self._version_reported = True
            return False

        self._setup_events()
        self.commands = CommandRegistry(self)
        self.host.set_tabline(self._tabline)
        self.toggle_bufferline()
        self.refresh()
        logger.info("bufferline ready", extra={"mode": self.options.mode})
        return True

    def _on(self, event: Event, handler: Callable[[], None], once: bool = False) -> None:
        def callback() -> None:
            if self._awaiting_key:
                logger.debug("ignoring %s while waiting for a pick key", event.value)
                return
            handler()

        self.host.on(event, callback, once=once)

    def _setup_events(self) -> None:
        options = self.options
        self._on(Event.COLORSCHEME, self.apply_colors)
        if options.persist_buffer_sort:
            self._on(Event.SESSION_LOAD_POST, self._restore_positions)
        if not options.always_show_bufferline:
            self._on(Event.BUF_ADD, self.toggle_bufferline)
            self._on(Event.TAB_ENTER, self.toggle_bufferline)
        self._on(Event.BUF_READ, lambda: self.host.schedule(self.handle_group_enter), once=True)
        self._on(Event.BUF_ENTER, self.handle_group_enter)

    # -- event handlers ---------------------------------------------------------

    def apply_colors(self) -> None:
        logger.debug("colorscheme changed, redrawing")
        self.refresh()

    def _restore_positions(self) -> None:
        commands.restore_positions(self)
        self.refresh()

    def toggle_bufferline(self) -> None:
        """Show the bar when there is more than one item (or always, if set)."""
        if self.options.is_tabline:
            item_count = len(self.host.list_tabs())
        else:
            item_count = len(self.host.list_buffers())
        status = self.options.always_show_bufferline or item_count > 1
        if self.host.bar_visible() != status:
            self.host.set_bar_visible(status)

    def handle_group_enter(self) -> None:
        """Reveal the entered buffer's group and hide other auto-close groups."""
        _, element = commands.get_current_element_index(self, include_hidden=True)
        buffer = element.as_buffer() if element is not None else None
        if buffer is None or buffer.group is None:
            return
        current_group = self.groups.get_by_id(buffer.group)
        if current_group is None:
            return
        if self.groups.options.toggle_hidden_on_enter and current_group.hidden:
            self.groups.set_hidden(current_group.id, False)
        for item in self.state.components:
            group = self.groups.get_by_id(item.group)
            if group is not None and group.auto_close and group.id != current_group.id:
                self.groups.set_hidden(group.id, True)

    # -- rendering --------------------------------------------------------------

    def current_id(self) -> int | None:
        if self.options.is_tabline:
            return self.host.current_tab()
        return self.host.current_buffer()

    def sort_context(self, **overrides: object) -> sorters.SortContext:
        context = sorters.SortContext(
            custom_sort=self.state.custom_sort,
            cwd=self.host.cwd(),
            tab_numbers=sorters.tab_numbers(self.host.list_tabs()),
        )
        return dataclasses.replace(context, **overrides)

    def sorter(self, components: list[Component]) -> list[Component]:
        return sorters.sort(components, self.options.sort_by, self.sort_context())

    def render(self) -> str:
        """Rebuild the bar from the host and return its text."""
        options = self.options
        if options.is_tabline:
            components: list[Component] = list(
                tabpages.get_components(self.host, self.state, options, self.tab_letters)
            )
            components = self.sorter(components)
        else:
            components = list(
                buffers.get_components(self.host, self.state, options, self.letters, self.groups)
            )
            components = self.groups.render(components, self.sorter, self.host.strwidth)

        tabline, visible = render_bar(
            components,
            options=options,
            columns=self.host.columns(),
            strwidth=self.host.strwidth,
            tabs=self.host.list_tabs(),
            current_tab=self.host.current_tab(),
        )

        focusable = filter_invisible(components)
        current_index = next(
            (index for index, item in enumerate(focusable) if item.current()), None
        )
        self.state.set(
            all_components=components,
            components=focusable,
            visible_components=filter_invisible(visible),
            current_element_index=current_index,
        )
        return tabline

    def _tabline(self) -> str:
        # the bar state is populated even while the bar itself is hidden
        self.toggle_bufferline()
        return self.render()

    def refresh(self) -> None:
        self.host.redraw()

    def read_key(self) -> str:
        """Block for one key press; editor events are ignored meanwhile."""
        self._awaiting_key = True
        try:
            return self.host.getchar()
        finally:
            self._awaiting_key = False
