"""Named editor commands for the bar."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from . import commands
from .exceptions import BufferbarError
from .host import NotifyLevel

# NOTE: no __future__.annotations here; dataclasses resolve string annotations
# through sys.modules, which breaks standalone imports in tests.

if TYPE_CHECKING:
    from .bufferline import Bufferline

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Operations reachable from editor commands."""

    # Picking
    PICK = "pick"
    PICK_CLOSE = "pick_close"

    # Navigation
    CYCLE_NEXT = "cycle_next"
    CYCLE_PREV = "cycle_prev"
    GO_TO = "go_to"

    # Closing
    CLOSE_RIGHT = "close_right"
    CLOSE_LEFT = "close_left"

    # Ordering
    MOVE_NEXT = "move_next"
    MOVE_PREV = "move_prev"
    SORT_BY_EXTENSION = "sort_by_extension"
    SORT_BY_DIRECTORY = "sort_by_directory"
    SORT_BY_RELATIVE_DIRECTORY = "sort_by_relative_directory"
    SORT_BY_TABS = "sort_by_tabs"
    RESET_SORT = "reset_sort"

    # Groups
    GROUP_CLOSE = "group_close"
    GROUP_TOGGLE = "group_toggle"
    TOGGLE_PIN = "toggle_pin"


@dataclass
class UserCommand:
    """An editor command bound to an action."""

    name: str
    action: Action
    description: str
    nargs: tuple[int, int] = (0, 0)  # (min, max)
    complete: str | None = None  # "group" completes group names


DEFAULT_COMMANDS: list[UserCommand] = [
    UserCommand("BufferLinePick", Action.PICK, "Focus a buffer by its letter"),
    UserCommand("BufferLinePickClose", Action.PICK_CLOSE, "Close a buffer by its letter"),
    UserCommand("BufferLineCycleNext", Action.CYCLE_NEXT, "Focus the next buffer"),
    UserCommand("BufferLineCyclePrev", Action.CYCLE_PREV, "Focus the previous buffer"),
    UserCommand("BufferLineCloseRight", Action.CLOSE_RIGHT, "Close buffers to the right"),
    UserCommand("BufferLineCloseLeft", Action.CLOSE_LEFT, "Close buffers to the left"),
    UserCommand("BufferLineMoveNext", Action.MOVE_NEXT, "Move the buffer one slot right"),
    UserCommand("BufferLineMovePrev", Action.MOVE_PREV, "Move the buffer one slot left"),
    UserCommand(
        "BufferLineSortByExtension", Action.SORT_BY_EXTENSION, "Sort buffers by extension"
    ),
    UserCommand(
        "BufferLineSortByDirectory", Action.SORT_BY_DIRECTORY, "Sort buffers by directory"
    ),
    UserCommand(
        "BufferLineSortByRelativeDirectory",
        Action.SORT_BY_RELATIVE_DIRECTORY,
        "Sort buffers by directory relative to the working directory",
    ),
    UserCommand("BufferLineSortByTabs", Action.SORT_BY_TABS, "Sort buffers by tab"),
    UserCommand("BufferLineResetSort", Action.RESET_SORT, "Drop the manual buffer order"),
    UserCommand(
        "BufferLineGoToBuffer",
        Action.GO_TO,
        "Focus the Nth buffer (pass 'absolute' to count hidden ones)",
        nargs=(1, 2),
    ),
    UserCommand(
        "BufferLineGroupClose",
        Action.GROUP_CLOSE,
        "Close every buffer in a group",
        nargs=(1, 1),
        complete="group",
    ),
    UserCommand(
        "BufferLineGroupToggle",
        Action.GROUP_TOGGLE,
        "Hide or show a group",
        nargs=(1, 1),
        complete="group",
    ),
    UserCommand("BufferLineTogglePin", Action.TOGGLE_PIN, "Pin or unpin the buffer"),
]


class CommandRegistry:
    """Dispatches editor commands to the command layer.

    Errors raised by a command are reported through ``host.notify`` and never
    reach the caller.
    """

    def __init__(self, bar: "Bufferline") -> None:
        self.bar = bar
        self.commands: dict[str, UserCommand] = {cmd.name: cmd for cmd in DEFAULT_COMMANDS}
        self._handlers: dict[Action, Callable[..., Any]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        bar = self.bar
        self.register_handler(Action.PICK, lambda: commands.pick_buffer(bar))
        self.register_handler(Action.PICK_CLOSE, lambda: commands.close_with_pick(bar))
        self.register_handler(Action.CYCLE_NEXT, lambda: commands.cycle(bar, 1))
        self.register_handler(Action.CYCLE_PREV, lambda: commands.cycle(bar, -1))
        self.register_handler(Action.GO_TO, self._go_to)
        self.register_handler(Action.CLOSE_RIGHT, lambda: commands.close_in_direction(bar, "right"))
        self.register_handler(Action.CLOSE_LEFT, lambda: commands.close_in_direction(bar, "left"))
        self.register_handler(Action.MOVE_NEXT, lambda: commands.move(bar, 1))
        self.register_handler(Action.MOVE_PREV, lambda: commands.move(bar, -1))
        self.register_handler(
            Action.SORT_BY_EXTENSION, lambda: commands.sort_by(bar, "extension")
        )
        self.register_handler(
            Action.SORT_BY_DIRECTORY, lambda: commands.sort_by(bar, "directory")
        )
        self.register_handler(
            Action.SORT_BY_RELATIVE_DIRECTORY,
            lambda: commands.sort_by(bar, "relative_directory"),
        )
        self.register_handler(Action.SORT_BY_TABS, lambda: commands.sort_by(bar, "tabs"))
        self.register_handler(Action.RESET_SORT, lambda: commands.reset_sort(bar))
        self.register_handler(
            Action.GROUP_CLOSE, lambda name: commands.group_action(bar, name, "close")
        )
        self.register_handler(
            Action.GROUP_TOGGLE, lambda name: commands.group_action(bar, name, "toggle")
        )
        self.register_handler(Action.TOGGLE_PIN, lambda: commands.toggle_pin(bar))

    def _go_to(self, num: str, mode: str | None = None) -> None:
        commands.go_to(self.bar, num, absolute=mode == "absolute")

    def register_handler(self, action: Action, handler: Callable[..., Any]) -> None:
        """Register (or replace) the handler for an action."""
        self._handlers[action] = handler

    def names(self) -> list[str]:
        return sorted(self.commands)

    def complete(self, name: str, prefix: str = "") -> list[str]:
        """Completion candidates for the argument of command ``name``."""
        command = self.commands.get(name)
        if command is None or command.complete != "group":
            return []
        prefix = prefix.lower()
        return [n for n in self.bar.groups.names() if n.lower().startswith(prefix)]

    def run(self, name: str, *args: str) -> bool:
        """Run command ``name``. Returns False when it failed or was rejected."""
        command = self.commands.get(name)
        if command is None:
            self._report(f"Unknown command: {name}")
            return False
        low, high = command.nargs
        if not low <= len(args) <= high:
            expected = str(low) if low == high else f"{low} to {high}"
            self._report(f"{name} takes {expected} argument(s), got {len(args)}")
            return False
        handler = self._handlers.get(command.action)
        if handler is None:
            self._report(f"No handler registered for {name}")
            return False
        try:
            handler(*args)
        except BufferbarError as exc:
            logger.warning("%s failed: %s", name, exc)
            self.bar.host.notify(exc.message, NotifyLevel.ERROR)
            return False
        return True

    def _report(self, message: str) -> None:
        logger.warning(message)
        self.bar.host.notify(message, NotifyLevel.ERROR)
