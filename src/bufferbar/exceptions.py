"""
Bufferbar Exception Hierarchy.

All custom exceptions inherit from BufferbarError for unified error handling.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class BufferbarError(Exception):
    """Base exception for bufferbar errors.

    All bufferbar exceptions inherit from this class so the command surface
    can turn any of them into a user notification with a single except clause.

    Attributes:
        message: Human-readable error description
        context: Additional context for debugging
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self._log_error()

    def _log_error(self) -> None:
        """Log the error creation at debug level.

        Most of these errors are ordinary user mistakes (sorting an empty bar,
        moving with no current buffer). Callers log at a higher level when
        they surface the error.
        """
        logger.debug(
            f"{self.__class__.__name__}: {self.message}",
            extra={"error_context": self.context},
        )

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} [{ctx}]"
        return self.message


class ConfigError(BufferbarError):
    """Raised for configuration errors.

    Examples:
        - Unknown sort criterion in the config file
        - Malformed config file
    """


class UnsupportedHostError(ConfigError):
    """Raised when the host editor is older than the minimum supported version.

    Attributes:
        version: The version reported by the host
        required: The minimum version required
    """

    def __init__(
        self,
        message: str,
        version: tuple[int, ...] | None = None,
        required: tuple[int, ...] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if version is not None:
            ctx["version"] = ".".join(str(part) for part in version)
        if required is not None:
            ctx["required"] = ".".join(str(part) for part in required)
        super().__init__(message, ctx)
        self.version = version
        self.required = required


class UserInputError(BufferbarError):
    """Raised when a command cannot run against the current bar state.

    The state store is never mutated before one of these is raised.
    """


class NothingToSortError(UserInputError):
    """Raised when a sort is requested while the bar is empty."""


class BufferNotFoundError(UserInputError):
    """Raised when the current buffer cannot be located in the bar."""


class InvalidSortError(UserInputError):
    """Raised for an unknown sort criterion.

    Attributes:
        sort_by: The criterion that was requested
    """

    def __init__(
        self,
        message: str,
        sort_by: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if sort_by:
            ctx["sort_by"] = sort_by
        super().__init__(message, ctx)
        self.sort_by = sort_by


class GroupNotFoundError(UserInputError):
    """Raised when a group action names a group that does not exist."""

    def __init__(
        self,
        message: str,
        group_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if group_name:
            ctx["group"] = group_name
        super().__init__(message, ctx)
        self.group_name = group_name


class HostError(BufferbarError):
    """Raised when the host editor rejects a request.

    Examples:
        - Unknown command string passed to ``execute``
        - Focusing a buffer id the host does not know
    """
