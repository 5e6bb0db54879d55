"""Bufferbar - a tab/buffer bar engine that fits editor buffers into one line."""

__version__ = "0.4.0"

# Re-export core components for convenience
from .actions import Action, CommandRegistry, UserCommand
from .bufferline import Bufferline
from .components import Buffer, Component, GroupSeparator, TabPage
from .config import BufferlineConfig, BufferlineOptions, GroupSpec, configure_logging
from .exceptions import (
    BufferbarError,
    BufferNotFoundError,
    ConfigError,
    GroupNotFoundError,
    HostError,
    InvalidSortError,
    NothingToSortError,
    UnsupportedHostError,
    UserInputError,
)
from .host import BufferInfo, Event, Host, MemoryHost, NotifyLevel, TabInfo
from .render import Marker, Section, render_bar, truncate
from .state import BufferlineState

__all__ = [
    "__version__",
    "Action",
    "Buffer",
    "BufferInfo",
    "Bufferline",
    "BufferlineConfig",
    "BufferlineOptions",
    "BufferlineState",
    "BufferbarError",
    "BufferNotFoundError",
    "CommandRegistry",
    "Component",
    "ConfigError",
    "Event",
    "GroupNotFoundError",
    "GroupSeparator",
    "GroupSpec",
    "Host",
    "HostError",
    "InvalidSortError",
    "Marker",
    "MemoryHost",
    "NothingToSortError",
    "NotifyLevel",
    "Section",
    "TabInfo",
    "TabPage",
    "UnsupportedHostError",
    "UserCommand",
    "UserInputError",
    "configure_logging",
    "render_bar",
    "truncate",
]
