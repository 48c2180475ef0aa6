"""
Watch-set management for the evented checker.

Components:
- reducer: minimal set of directories to register
- matcher: decides whether a changed path is tracked
- lifecycle: start/stop/restart of the backend watch, fork rebuild
- backend: watchdog-based notification primitive
- flag: thread-safe change flag
- fork: process-wide after-fork hook registry
- config: WatcherConfig with env var support
"""

from .config import WatcherConfig, get_watcher_config, reset_watcher_config
from .lifecycle import WatchLifecycle, WatchState
from .matcher import PathMatcher
from .reducer import common_path, directories_to_watch

__all__ = [
    "WatcherConfig",
    "get_watcher_config",
    "reset_watcher_config",
    "WatchLifecycle",
    "WatchState",
    "PathMatcher",
    "common_path",
    "directories_to_watch",
]
