"""Configuration management for bufferbar."""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = {
    name: logging.getLevelName(name.upper())
    for name in ("critical", "error", "warning", "info", "debug")
}
# Attributes every LogRecord carries; anything else came in through ``extra=``.
_STANDARD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message"}

MODES = {"buffers", "tabs"}
NUMBER_STYLES = {"none", "buffer_id"}
SORT_CRITERIA = {"id", "path", "extension", "directory", "relative_directory", "tabs"}

# A user command is either a callable taking the buffer id or a string with a
# single "%d" placeholder that the host executes.
ClickCommand = str | Callable[[int], Any] | None


def _parse_log_level(level: str) -> int:
    normalized = level.strip().lower()
    if normalized in _LOG_LEVELS:
        return _LOG_LEVELS[normalized]
    raise ValueError(f"Invalid log level: {level}. Valid: {', '.join(sorted(_LOG_LEVELS))}")


def _coerce_log_levels(levels: dict[str, str]) -> dict[str, str]:
    for level in levels.values():
        _parse_log_level(level)
    return {name: level.strip().lower() for name, level in levels.items()}


class _StructuredFormatter(logging.Formatter):
    """One JSON object per record; ``extra=`` fields become top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _STANDARD_ATTRS:
                continue
            if isinstance(value, (str, int, float, bool)) or value is None:
                payload[key] = value
            else:
                payload[key] = str(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(config: "BufferlineConfig") -> None:
    """Configure structured logging.

    The handler writes to stderr unless ``log_file`` is set, so log records
    never end up on the bar the CLI prints to stdout.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler: logging.Handler
    if config.log_file:
        handler = logging.FileHandler(config.log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_StructuredFormatter())
    root_logger.addHandler(handler)

    levels = {name: _parse_log_level(level) for name, level in config.log_levels.items()}
    root_logger.setLevel(min([_parse_log_level(config.log_level), *levels.values()]))
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


class GroupSpec(BaseModel):
    """A named, independently hideable set of buffers."""

    name: str = Field(description="Group name shown on the separator")
    patterns: list[str] = Field(
        default_factory=list,
        description="Glob patterns matched against the buffer path",
    )
    matcher: Callable[[Any], bool] | None = Field(
        default=None,
        description="Predicate receiving the Buffer; takes precedence over patterns",
    )
    priority: int = Field(default=0, description="Lower priorities render first")
    auto_close: bool = Field(
        default=False, description="Hide this group when entering a buffer of another group"
    )
    hidden: bool = Field(default=False, description="Start hidden")

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Group name must not be empty")
        if value.lower() in {"pinned", "ungrouped"}:
            raise ValueError(f"Group name {value!r} is reserved")
        return value


class GroupOptions(BaseModel):
    """Behaviour shared by all groups."""

    toggle_hidden_on_enter: bool = Field(
        default=True, description="Reveal a hidden group when one of its buffers is entered"
    )


class GroupsConfig(BaseModel):
    """Group definitions."""

    options: GroupOptions = Field(default_factory=GroupOptions)
    items: list[GroupSpec] = Field(default_factory=list)

    @field_validator("items")
    @classmethod
    def _validate_unique(cls, value: list[GroupSpec]) -> list[GroupSpec]:
        seen: set[str] = set()
        for spec in value:
            key = spec.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate group name: {spec.name}")
            seen.add(key)
        return value


class BufferlineOptions(BaseModel):
    """Options controlling what the bar shows and how commands behave."""

    mode: str = Field(default="buffers", description="Render buffers or tabs")
    sort_by: str | Callable[[Any, Any], bool] = Field(
        default="id",
        description="Built-in criterion name or a (a, b) -> bool comparator",
    )
    persist_buffer_sort: bool = Field(
        default=True, description="Persist manual ordering in session storage"
    )
    always_show_bufferline: bool = Field(
        default=True, description="Show the bar even with a single item"
    )
    numbers: str = Field(default="none", description="Number style (none, buffer_id)")
    max_name_length: int = Field(default=18, ge=2, description="Longest label in cells")
    truncation_ellipsis: str = Field(default="…", description="Appended to cropped names")
    modified_icon: str = Field(default="●", description="Suffix for modified buffers")
    separator: str = Field(default="|", description="Drawn between items")
    left_trunc_marker: str = Field(default="<", description="Left overflow indicator")
    right_trunc_marker: str = Field(default=">", description="Right overflow indicator")
    show_tab_indicators: bool = Field(
        default=True, description="Show tab numbers on the right in buffer mode"
    )
    left_mouse_command: ClickCommand = Field(default="buffer %d")
    right_mouse_command: ClickCommand = Field(default="bdelete! %d")
    middle_mouse_command: ClickCommand = Field(default=None)
    close_command: ClickCommand = Field(default="bdelete! %d")
    groups: GroupsConfig = Field(default_factory=GroupsConfig)

    @field_validator("mode")
    @classmethod
    def _validate_mode(cls, value: str) -> str:
        if value not in MODES:
            valid = ", ".join(sorted(MODES))
            raise ValueError(f"Invalid mode. Valid: {valid}")
        return value

    @field_validator("numbers")
    @classmethod
    def _validate_numbers(cls, value: str) -> str:
        if value not in NUMBER_STYLES:
            valid = ", ".join(sorted(NUMBER_STYLES))
            raise ValueError(f"Invalid numbers style. Valid: {valid}")
        return value

    @field_validator("sort_by")
    @classmethod
    def _validate_sort_by(cls, value: Any) -> Any:
        if isinstance(value, str) and value not in SORT_CRITERIA:
            valid = ", ".join(sorted(SORT_CRITERIA))
            raise ValueError(f"Invalid sort_by. Valid: {valid}")
        return value

    @field_validator("separator")
    @classmethod
    def _validate_separator(cls, value: str) -> str:
        if not value:
            raise ValueError("separator must not be empty")
        return value

    @property
    def is_tabline(self) -> bool:
        return self.mode == "tabs"


class BufferlineConfig(BaseModel):
    """Main configuration for bufferbar."""

    options: BufferlineOptions = Field(default_factory=BufferlineOptions)
    log_level: str = Field(default="warning", description="Log level")
    log_levels: dict[str, str] = Field(
        default_factory=dict,
        description="Per-component log levels (e.g., {'bufferbar.render': 'debug'})",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path (structured JSON)",
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        _parse_log_level(value)
        return value.strip().lower()

    @field_validator("log_levels")
    @classmethod
    def _validate_log_levels(cls, value: dict[str, str]) -> dict[str, str]:
        return _coerce_log_levels(value)

    def is_tabline(self) -> bool:
        return self.options.is_tabline

    @classmethod
    def from_file(cls, path: str | Path) -> "BufferlineConfig":
        """Load configuration from TOML file."""
        import tomllib

        path = Path(path)
        if not path.exists():
            return cls()

        with open(path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)

    @classmethod
    def default_path(cls) -> Path:
        """Get default config file path."""
        return Path.home() / ".config" / "bufferbar" / "config.toml"
