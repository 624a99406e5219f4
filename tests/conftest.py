"""
Shared pytest fixtures for shutdown gate tests.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shutdown_gate.config import ShutdownOptions
from shutdown_gate.controller import ShutdownController
from shutdown_gate.state import ShutdownState

from tests.fakes import FakeProcess, FakeScheduler, FakeServer


@pytest.fixture
def events():
    """Ordered log of side effects across fakes."""
    return []


@pytest.fixture
def fake_process(events):
    return FakeProcess(events)


@pytest.fixture
def fake_server(events):
    return FakeServer(events)


@pytest.fixture
def fake_scheduler(events):
    return FakeScheduler(events)


@pytest.fixture
def fake_logger():
    """Logger sink that silences output and records calls."""
    return MagicMock(spec=["info", "warning", "error"])


@pytest.fixture
def make_controller(fake_server, fake_process, fake_scheduler, fake_logger):
    """Factory building a controller wired to the fakes."""

    def _make(server=None, **option_overrides):
        option_overrides.setdefault("logger", fake_logger)
        option_overrides.setdefault("graceful", True)
        state = ShutdownState(ShutdownOptions(**option_overrides))
        controller = ShutdownController(
            server or fake_server,
            state,
            process=fake_process,
            call_later=fake_scheduler,
        )
        return controller

    return _make
