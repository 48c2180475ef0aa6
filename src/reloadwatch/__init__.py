"""
reloadwatch - Evented file update checking

Tracks a fixed set of files and directories through OS file notifications
and exposes a single "something changed" flag for reload-on-change hosts.
"""

__version__ = "0.3.0"

from reloadwatch.checker import EventedFileUpdateChecker
from reloadwatch.exceptions import (
    AccessError,
    ConfigurationError,
    RegistrationError,
    ReloadWatchError,
)
from reloadwatch.schemas import CheckerStatus
from reloadwatch.watcher import WatcherConfig, WatchState, get_watcher_config

__all__ = [
    "__version__",
    "EventedFileUpdateChecker",
    "CheckerStatus",
    "WatcherConfig",
    "WatchState",
    "get_watcher_config",
    "ReloadWatchError",
    "ConfigurationError",
    "AccessError",
    "RegistrationError",
]
