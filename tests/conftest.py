"""
Pytest configuration for the reloadwatch test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Temporary directory fixtures
- A fake notification backend for deterministic lifecycle tests
- A bounded wait helper for tests against the real watchdog backend
"""

import os
import shutil
import tempfile
import time
from pathlib import Path

import pytest

from reloadwatch.logging_config import reset_logging, setup_logging
from reloadwatch.watcher.backend import ChangeEvent
from reloadwatch.watcher.config import WatcherConfig, reset_watcher_config


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Quiet logging for the whole run."""
    os.environ.setdefault("RELOADWATCH_MACHINE_MODE", "1")
    reset_logging()
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False)


@pytest.fixture(autouse=True)
def clean_watcher_config(monkeypatch):
    """Isolate tests from RELOADWATCH_* variables set in the outer environment."""
    for key in list(os.environ):
        if key.startswith("RELOADWATCH_") and key != "RELOADWATCH_MACHINE_MODE":
            monkeypatch.delenv(key)
    reset_watcher_config()
    yield
    reset_watcher_config()


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(os.path.realpath(tempfile.mkdtemp(prefix="reloadwatch_test_")))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def watcher_config():
    """Config with no extra library roots and a short stop timeout."""
    return WatcherConfig(
        stop_timeout=1.0,
        extra_library_roots=[],
        exclude_libraries=True,
        poll_interval=0.1,
    )


# ============================================================================
# FAKE BACKEND
# ============================================================================

class FakeHandle:
    """Stands in for a running watchdog observer."""

    def __init__(self, paths, recursive, callback):
        self.paths = list(paths)
        self.recursive = recursive
        self.callback = callback
        self.stopped = False
        self.stop_calls = 0

    def stop(self, timeout=None):
        self.stop_calls += 1
        self.stopped = True


class FakeBackend:
    """
    Records watch registrations and lets tests deliver events by hand.

    Set ``fail`` to an exception instance to make the next registrations raise.
    """

    def __init__(self):
        self.handles = []
        self.fail = None

    def __call__(self, paths, recursive, callback):
        if self.fail is not None:
            raise self.fail
        handle = FakeHandle(paths, recursive, callback)
        self.handles.append(handle)
        return handle

    @property
    def calls(self):
        return len(self.handles)

    @property
    def active(self):
        live = [h for h in self.handles if not h.stopped]
        return live[-1] if live else None

    def emit(self, *paths):
        """Deliver one event to the active registration."""
        assert self.active is not None, "no active registration"
        self.active.callback(ChangeEvent(paths=[str(p) for p in paths]))


@pytest.fixture
def fake_backend():
    return FakeBackend()


# ============================================================================
# WAIT HELPERS
# ============================================================================

def wait_for(predicate, timeout=5.0, interval=0.05):
    """Poll ``predicate`` until it is true or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait():
    """The ``wait_for`` helper, for tests that need to wait on the backend thread."""
    return wait_for
