"""Host editor interface.

The bar never talks to an editor directly. Everything it needs (document
list, focus, width measurement, session storage, events) goes through the
``Host`` protocol. ``MemoryHost`` is a complete in-memory editor model used by
the CLI and the test suite.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

from rich.cells import cell_len

from .exceptions import HostError

logger = logging.getLogger(__name__)


class Event(str, Enum):
    """Editor events the bar subscribes to."""

    BUF_ADD = "BufAdd"
    TAB_ENTER = "TabEnter"
    COLORSCHEME = "ColorScheme"
    SESSION_LOAD_POST = "SessionLoadPost"
    BUF_READ = "BufRead"
    BUF_ENTER = "BufEnter"


class NotifyLevel(str, Enum):
    """Severity of a user-visible message."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class BufferInfo:
    """A document as reported by the host."""

    id: int
    path: str = ""
    modified: bool = False


@dataclass(frozen=True)
class TabInfo:
    """An editor tab as reported by the host."""

    id: int
    buffers: tuple[int, ...] = ()
    current_buffer: int | None = None


@runtime_checkable
class Host(Protocol):
    """Operations the bar consumes from the editor."""

    def version(self) -> tuple[int, ...]: ...

    def current_buffer(self) -> int | None: ...

    def list_buffers(self) -> list[BufferInfo]: ...

    def current_tab(self) -> int | None: ...

    def list_tabs(self) -> list[TabInfo]: ...

    def cwd(self) -> str: ...

    def columns(self) -> int: ...

    def strwidth(self, text: str) -> int: ...

    def notify(self, message: str, level: NotifyLevel = NotifyLevel.INFO) -> None: ...

    def delete_buffer(self, buf_id: int, force: bool = True) -> None: ...

    def focus_buffer(self, buf_id: int) -> None: ...

    def focus_tab(self, tab_id: int) -> None: ...

    def buffer_window(self, buf_id: int) -> int | None: ...

    def focus_window(self, win_id: int) -> None: ...

    def execute(self, command: str) -> None: ...

    def get_var(self, key: str) -> str | None: ...

    def set_var(self, key: str, value: str | None) -> None: ...

    def on(self, event: Event, callback: Callable[[], None], once: bool = False) -> None: ...

    def schedule(self, fn: Callable[[], None]) -> None: ...

    def set_tabline(self, provider: Callable[[], str]) -> None: ...

    def redraw(self) -> None: ...

    def bar_visible(self) -> bool: ...

    def set_bar_visible(self, visible: bool) -> None: ...

    def getchar(self) -> str: ...


@dataclass
class _Listener:
    callback: Callable[[], None]
    once: bool = False


_BUFFER_CMD = re.compile(r"^\s*b(?:uffer)?\s+(\d+)\s*$")
_DELETE_CMD = re.compile(r"^\s*bd(?:elete)?(!?)\s+(\d+)\s*$")
_TABNEXT_CMD = re.compile(r"^\s*tabn(?:ext)?\s+(\d+)\s*$")


@dataclass
class MemoryHost:
    """In-memory editor.

    Buffer ids are handed out in increasing order and never reused. Tabs keep
    a list of buffers shown in their windows; each buffer is shown in one
    window whose id equals ``1000 + buffer id``.
    """

    width: int = 80
    host_version: tuple[int, ...] = (0, 10, 0)
    working_dir: str = "/"
    keys: deque[str] = field(default_factory=deque)
    key_reader: Callable[[], str] | None = None

    buffers: dict[int, BufferInfo] = field(default_factory=dict)
    tabs: list[TabInfo] = field(default_factory=list)
    variables: dict[str, str] = field(default_factory=dict)
    notifications: list[tuple[str, NotifyLevel]] = field(default_factory=list)
    tabline: str = ""
    visible: bool = False
    redraw_count: int = 0

    _current_buffer: int | None = None
    _current_tab: int | None = None
    _next_id: int = 1
    _listeners: dict[Event, list[_Listener]] = field(default_factory=dict)
    _pending: list[Callable[[], None]] = field(default_factory=list)
    _provider: Callable[[], str] | None = None

    # -- editor model -------------------------------------------------------

    def open(self, path: str, *, focus: bool = True, modified: bool = False) -> int:
        """Open a document and fire the add/read/enter events."""
        buf_id = self._next_id
        self._next_id += 1
        self.buffers[buf_id] = BufferInfo(id=buf_id, path=path, modified=modified)
        if not self.tabs:
            self.tabs.append(TabInfo(id=1))
            self._current_tab = 1
        self.emit(Event.BUF_ADD)
        self.emit(Event.BUF_READ)
        if focus or self._current_buffer is None:
            self.focus_buffer(buf_id)
        else:
            self.redraw()
        return buf_id

    def open_many(self, paths: Iterable[str]) -> list[int]:
        return [self.open(path, focus=False) for path in paths]

    def new_tab(self, buf_id: int) -> int:
        """Open a tab showing ``buf_id`` and switch to it."""
        tab_id = max((tab.id for tab in self.tabs), default=0) + 1
        self.tabs.append(TabInfo(id=tab_id, buffers=(buf_id,), current_buffer=buf_id))
        self.focus_tab(tab_id)
        return tab_id

    def set_modified(self, buf_id: int, modified: bool = True) -> None:
        info = self._buffer(buf_id)
        self.buffers[buf_id] = BufferInfo(id=info.id, path=info.path, modified=modified)

    def emit(self, event: Event) -> None:
        """Fire every callback registered for ``event``."""
        listeners = self._listeners.get(event, [])
        self._listeners[event] = [listener for listener in listeners if not listener.once]
        for listener in listeners:
            listener.callback()

    def run_pending(self) -> None:
        """Run callbacks deferred with ``schedule``."""
        pending, self._pending = self._pending, []
        for fn in pending:
            fn()

    def _buffer(self, buf_id: int) -> BufferInfo:
        try:
            return self.buffers[buf_id]
        except KeyError:
            raise HostError(f"Unknown buffer {buf_id}", {"buffer": buf_id}) from None

    def _tab_index(self, tab_id: int) -> int:
        for index, tab in enumerate(self.tabs):
            if tab.id == tab_id:
                return index
        raise HostError(f"Unknown tab {tab_id}", {"tab": tab_id})

    # -- Host protocol ------------------------------------------------------

    def version(self) -> tuple[int, ...]:
        return self.host_version

    def current_buffer(self) -> int | None:
        return self._current_buffer

    def list_buffers(self) -> list[BufferInfo]:
        return list(self.buffers.values())

    def current_tab(self) -> int | None:
        return self._current_tab

    def list_tabs(self) -> list[TabInfo]:
        return list(self.tabs)

    def cwd(self) -> str:
        return self.working_dir

    def columns(self) -> int:
        return self.width

    def strwidth(self, text: str) -> int:
        return cell_len(text)

    def notify(self, message: str, level: NotifyLevel = NotifyLevel.INFO) -> None:
        self.notifications.append((message, level))

    def delete_buffer(self, buf_id: int, force: bool = True) -> None:
        info = self._buffer(buf_id)
        if info.modified and not force:
            raise HostError(f"Buffer {buf_id} has unsaved changes", {"buffer": buf_id})
        del self.buffers[buf_id]
        for index, tab in enumerate(self.tabs):
            if buf_id in tab.buffers:
                remaining = tuple(b for b in tab.buffers if b != buf_id)
                current = tab.current_buffer if tab.current_buffer != buf_id else None
                if current is None and remaining:
                    current = remaining[-1]
                self.tabs[index] = TabInfo(id=tab.id, buffers=remaining, current_buffer=current)
        if self._current_buffer == buf_id:
            self._current_buffer = next(reversed(self.buffers), None)
            if self._current_buffer is not None:
                self.emit(Event.BUF_ENTER)
        self.redraw()

    def focus_buffer(self, buf_id: int) -> None:
        self._buffer(buf_id)
        self._current_buffer = buf_id
        if self._current_tab is not None:
            index = self._tab_index(self._current_tab)
            tab = self.tabs[index]
            shown = tab.buffers if buf_id in tab.buffers else (*tab.buffers, buf_id)
            self.tabs[index] = TabInfo(id=tab.id, buffers=shown, current_buffer=buf_id)
        self.emit(Event.BUF_ENTER)
        self.redraw()

    def focus_tab(self, tab_id: int) -> None:
        tab = self.tabs[self._tab_index(tab_id)]
        self._current_tab = tab_id
        if tab.current_buffer is not None:
            self._current_buffer = tab.current_buffer
        self.emit(Event.TAB_ENTER)
        self.redraw()

    def buffer_window(self, buf_id: int) -> int | None:
        tab = self.tabs[self._tab_index(self._current_tab)] if self._current_tab else None
        if tab is not None and buf_id in tab.buffers:
            return 1000 + buf_id
        return None

    def focus_window(self, win_id: int) -> None:
        self.focus_buffer(win_id - 1000)

    def execute(self, command: str) -> None:
        logger.debug("execute %r", command)
        if match := _BUFFER_CMD.match(command):
            self.focus_buffer(int(match.group(1)))
        elif match := _DELETE_CMD.match(command):
            self.delete_buffer(int(match.group(2)), force=bool(match.group(1)))
        elif match := _TABNEXT_CMD.match(command):
            number = int(match.group(1))
            if not 1 <= number <= len(self.tabs):
                raise HostError(f"Invalid tab number {number}")
            self.focus_tab(self.tabs[number - 1].id)
        else:
            raise HostError(f"Not an editor command: {command}", {"command": command})

    def get_var(self, key: str) -> str | None:
        return self.variables.get(key)

    def set_var(self, key: str, value: str | None) -> None:
        if value is None:
            self.variables.pop(key, None)
        else:
            self.variables[key] = value

    def on(self, event: Event, callback: Callable[[], None], once: bool = False) -> None:
        self._listeners.setdefault(event, []).append(_Listener(callback, once))

    def schedule(self, fn: Callable[[], None]) -> None:
        self._pending.append(fn)

    def set_tabline(self, provider: Callable[[], str]) -> None:
        self._provider = provider

    def redraw(self) -> None:
        if self._provider is None:
            return
        self.redraw_count += 1
        self.tabline = self._provider()

    def bar_visible(self) -> bool:
        return self.visible

    def set_bar_visible(self, visible: bool) -> None:
        self.visible = visible

    def getchar(self) -> str:
        if self.key_reader is not None:
            return self.key_reader()
        if self.keys:
            return self.keys.popleft()
        return "\x1b"
