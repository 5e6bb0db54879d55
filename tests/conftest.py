"""Shared fixtures for bufferbar tests."""

from __future__ import annotations

import logging

import pytest

from bufferbar.bufferline import Bufferline
from bufferbar.config import BufferlineConfig, BufferlineOptions
from bufferbar.host import MemoryHost


@pytest.fixture
def make_bar():
    """Build a host with ``paths`` open (the first one focused) and a set-up bar."""

    def factory(paths=(), width=80, host=None, **options):
        host = host or MemoryHost(width=width)
        ids = host.open_many(paths)
        bar = Bufferline(host, BufferlineConfig(options=BufferlineOptions(**options)))
        assert bar.setup()
        return host, bar, ids

    return factory


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way it was after configure_logging runs."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
