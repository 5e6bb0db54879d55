"""User-facing operations on the bar.

Each command validates against the current ``BufferlineState`` first and
raises a ``UserInputError`` before touching anything; only then does it
mutate state and request a redraw.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from . import sorters
from .components import Buffer, Component, TabPage
from .config import ClickCommand
from .exceptions import BufferNotFoundError, NothingToSortError, UserInputError
from .groups import PINNED_ID
from .state import get_ids

if TYPE_CHECKING:
    from .bufferline import Bufferline

logger = logging.getLogger(__name__)

POSITIONS_KEY = "BufferlinePositions"

_CLICK_COMMANDS = {
    "l": "left_mouse_command",
    "r": "right_mouse_command",
    "m": "middle_mouse_command",
}


# -- persistence ----------------------------------------------------------------


def parse_positions(value: str) -> list[int]:
    """Parse a stored ``"5,3,9"`` order back into ids."""
    ids: list[int] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            logger.warning("Ignoring invalid buffer id in saved positions: %r", part)
    return ids


def save_positions(bar: Bufferline, ids: list[int]) -> None:
    bar.host.set_var(POSITIONS_KEY, ",".join(str(buf_id) for buf_id in ids))


def restore_positions(bar: Bufferline) -> list[int] | None:
    """Load the persisted manual order into ``custom_sort``."""
    value = bar.host.get_var(POSITIONS_KEY)
    if not value:
        return None
    ids = parse_positions(value)
    if ids:
        bar.state.custom_sort = ids
        logger.debug("restored custom order", extra={"positions": value})
    return ids or None


def _set_custom_sort(bar: Bufferline, components: list[Component]) -> None:
    bar.state.custom_sort = get_ids(components)
    if bar.options.persist_buffer_sort:
        save_positions(bar, bar.state.custom_sort)


def reset_sort(bar: Bufferline) -> None:
    """Forget the manual order so automatic sorting applies again."""
    bar.state.custom_sort = None
    if bar.options.persist_buffer_sort:
        bar.host.set_var(POSITIONS_KEY, None)
    bar.refresh()


# -- lookup ---------------------------------------------------------------------


def get_current_element_index(
    bar: Bufferline, include_hidden: bool = False
) -> tuple[int | None, Buffer | TabPage | None]:
    """Index (0-based) and element of the current item."""
    items = bar.state.all_components if include_hidden else bar.state.components
    current_id = bar.current_id()
    for index, item in enumerate(items):
        element = item.as_element()
        if element is not None and element.id == current_id:
            return index, element
    return None, None


def _focus(bar: Bufferline, element: Component) -> None:
    if isinstance(element, TabPage):
        bar.host.focus_tab(element.id)
    else:
        bar.host.focus_buffer(element.id)


# -- clicks and user commands -----------------------------------------------------


def handle_user_command(bar: Bufferline, command: ClickCommand, buf_id: int) -> None:
    """Run a configured command: a callable gets the id, a string is executed."""
    if not command:
        return
    if callable(command):
        command(buf_id)
    else:
        bar.host.execute(command.replace("%d", str(buf_id)))


def handle_close(bar: Bufferline, buf_id: int) -> None:
    handle_user_command(bar, bar.options.close_command, buf_id)


def handle_click(bar: Bufferline, element_id: int | None, button: str = "l") -> None:
    """Dispatch a mouse click on an item to the command bound to ``button``."""
    if element_id is None:
        return
    option = _CLICK_COMMANDS.get(button)
    if option is None:
        raise UserInputError(f"Unknown mouse button: {button}", {"button": button})
    if bar.options.is_tabline and button == "l":
        bar.host.focus_tab(element_id)
        return
    handle_user_command(bar, getattr(bar.options, option), element_id)


def handle_win_click(bar: Bufferline, buf_id: int) -> None:
    win_id = bar.host.buffer_window(buf_id)
    if win_id is not None:
        bar.host.focus_window(win_id)


def handle_group_click(bar: Bufferline, group_id: str) -> None:
    bar.groups.toggle_hidden(group_id)
    bar.refresh()


def buf_exec(bar: Bufferline, index: int, func: Callable[[Component, list[Component]], Any]) -> None:
    """Call ``func`` with the visible item at 1-based ``index``."""
    visible = bar.state.visible_components
    if 1 <= index <= len(visible):
        func(visible[index - 1], visible)


# -- picking ----------------------------------------------------------------------


def pick(bar: Bufferline, func: Callable[[int], Any]) -> bool:
    """Show pick letters, wait for one key and apply ``func`` to the match.

    Picking mode is always left again, whether or not a letter matched.
    Returns True when an item matched.
    """
    bar.state.is_picking = True
    bar.refresh()
    matched = False
    try:
        letter = bar.read_key()
        registry = bar.tab_letters if bar.options.is_tabline else bar.letters
        element_id = registry.find(letter)
        if element_id is not None and element_id in get_ids(bar.state.components):
            func(element_id)
            matched = True
        else:
            logger.debug("no item for pick key %r", letter)
    finally:
        bar.state.is_picking = False
        bar.refresh()
    return matched


def pick_buffer(bar: Bufferline) -> bool:
    if bar.options.is_tabline:
        return pick(bar, bar.host.focus_tab)
    return pick(bar, bar.host.focus_buffer)


def close_with_pick(bar: Bufferline) -> bool:
    if bar.options.is_tabline:
        raise UserInputError("Closing by pick is only available for buffers")
    return pick(bar, lambda buf_id: handle_close(bar, buf_id))


# -- navigation -------------------------------------------------------------------


def go_to(bar: Bufferline, num: int | str, absolute: bool = False) -> None:
    """Focus the item at 1-based position ``num``; ``-1`` means the last one.

    Positions count visible items unless ``absolute`` is set.
    """
    try:
        position = int(num)
    except (TypeError, ValueError):
        raise UserInputError(f"Not a buffer position: {num!r}") from None
    items = bar.state.components if absolute else bar.state.visible_components
    if position == -1 and items:
        _focus(bar, items[-1])
    elif 1 <= position <= len(items):
        _focus(bar, items[position - 1])


def cycle(bar: Bufferline, direction: int) -> None:
    """Focus the neighbouring item, wrapping around at both ends."""
    index, _ = get_current_element_index(bar)
    if index is None:
        raise BufferNotFoundError("Unable to find buffer to cycle from, sorry")
    components = bar.state.components
    next_index = (index + direction) % len(components)
    element = components[next_index].as_element()
    if element is None:
        raise BufferNotFoundError("This buffer does not exist")
    _focus(bar, element)


def move(bar: Bufferline, direction: int) -> None:
    """Swap the current item with its neighbour in ``direction``."""
    index, _ = get_current_element_index(bar)
    if index is None:
        raise BufferNotFoundError("Unable to find buffer to move, sorry")
    components = bar.state.components
    next_index = index + direction
    if not 0 <= next_index < len(components):
        return
    components[index], components[next_index] = components[next_index], components[index]
    _set_custom_sort(bar, components)
    bar.refresh()


def move_to(bar: Bufferline, to_index: int) -> None:
    """Move the current item to 1-based ``to_index``; negative counts from the end."""
    index, _ = get_current_element_index(bar)
    if index is None:
        raise BufferNotFoundError("Unable to find buffer to move, sorry")
    components = bar.state.components
    target = to_index - 1 if to_index > 0 else len(components) + to_index
    if not 0 <= target < len(components) or target == index:
        return
    components.insert(target, components.pop(index))
    _set_custom_sort(bar, components)
    bar.refresh()


def close_in_direction(bar: Bufferline, direction: str) -> None:
    """Close every buffer strictly left or right of the current one."""
    if direction not in ("left", "right"):
        raise UserInputError(f"Invalid direction: {direction}", {"direction": direction})
    if bar.options.is_tabline:
        raise UserInputError("Closing to one side is only available for buffers")
    index, _ = get_current_element_index(bar)
    if index is None:
        raise BufferNotFoundError("Unable to find buffer to close from, sorry")
    components = bar.state.components
    targets = components[:index] if direction == "left" else components[index + 1 :]
    for item in targets:
        buffer = item.as_buffer()
        if buffer is not None:
            bar.host.delete_buffer(buffer.id, force=True)
    if targets:
        bar.refresh()


def sort_by(bar: Bufferline, criterion: sorters.SortBy) -> None:
    """Sort the bar by ``criterion`` and keep the result as the manual order.

    An explicit sort replaces any existing manual order.
    """
    components = bar.state.components
    if not components:
        raise NothingToSortError("Unable to find buffers to sort, sorry")
    ordered = sorters.sort(components, criterion, bar.sort_context(custom_sort=None))
    bar.state.components = ordered
    _set_custom_sort(bar, ordered)
    bar.refresh()


# -- groups -----------------------------------------------------------------------


def group_action(bar: Bufferline, name: str, action: str | Callable[[Buffer], Any]) -> None:
    """Run ``action`` on the named group: "close", "toggle" or a callable."""
    if not name:
        raise UserInputError("A name must be passed to execute a group action")
    if action == "close":
        bar.groups.command(name, lambda buffer: bar.host.delete_buffer(buffer.id, force=True))
        bar.refresh()
    elif action == "toggle":
        bar.groups.toggle_hidden(name=name)
        bar.refresh()
    elif callable(action):
        bar.groups.command(name, action)
    else:
        raise UserInputError(f"Unknown group action: {action}", {"action": action})


def toggle_pin(bar: Bufferline) -> None:
    _, element = get_current_element_index(bar)
    buffer = element.as_buffer() if element is not None else None
    if buffer is None:
        raise BufferNotFoundError("Unable to find buffer to pin, sorry")
    if bar.groups.is_pinned(buffer):
        bar.groups.remove_from_group(PINNED_ID, buffer)
    else:
        bar.groups.add_to_group(PINNED_ID, buffer)
    bar.refresh()
