"""
Notification backend built on watchdog.

Exposes the minimal primitive the lifecycle manager needs: watch these
paths recursively, call back with changed paths, stop.
"""

import os
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..exceptions import RegistrationError
from ..logging_config import logger
from .config import IGNORED_EVENT_TYPES, get_watcher_config


@dataclass
class ChangeEvent:
    """Paths touched by a single backend event."""

    paths: List[str] = field(default_factory=list)


ChangeCallback = Callable[[ChangeEvent], None]


class ChangeEventHandler(FileSystemEventHandler):
    """
    Forwards watchdog events to a callback as ChangeEvent objects.
    """

    def __init__(self, callback: ChangeCallback):
        super().__init__()
        self.callback = callback

    def on_any_event(self, event: FileSystemEvent):
        if event.event_type in IGNORED_EVENT_TYPES:
            return

        paths = [os.fsdecode(event.src_path)]
        dest_path = getattr(event, "dest_path", None)
        if dest_path:
            paths.append(os.fsdecode(dest_path))

        self.callback(ChangeEvent(paths=paths))


class WatchHandle:
    """
    A running watchdog observer.

    ``stop`` is idempotent and waits at most ``timeout`` seconds for the
    observer thread.
    """

    def __init__(self, observer: Observer, paths: Sequence[str]):
        self.observer = observer
        self.paths = list(paths)
        self._stopped = False

    @property
    def alive(self) -> bool:
        return not self._stopped and self.observer.is_alive()

    def stop(self, timeout: Optional[float] = None) -> None:
        if self._stopped:
            return
        self._stopped = True

        if timeout is None:
            timeout = get_watcher_config().stop_timeout

        self.observer.stop()
        if threading.current_thread() is not self.observer:
            self.observer.join(timeout=timeout)
            if self.observer.is_alive():
                logger.warning(f"Observer did not stop within {timeout:.1f}s, abandoning it")

        logger.debug(f"Stopped watching {len(self.paths)} path(s)")


def watch(paths: Sequence[str], recursive: bool, callback: ChangeCallback) -> WatchHandle:
    """
    Start watching ``paths``.

    Args:
        paths: Directories to watch
        recursive: Watch subdirectories too
        callback: Called from the observer thread with each ChangeEvent

    Returns:
        WatchHandle for the running observer

    Raises:
        RegistrationError: If the observer could not be started
    """
    handler = ChangeEventHandler(callback)
    observer = Observer()

    try:
        for path in paths:
            observer.schedule(handler, path, recursive=recursive)
        observer.start()
    except Exception as e:
        try:
            observer.stop()
        except Exception as stop_error:
            logger.debug(f"Error stopping half-started observer: {stop_error}")
        raise RegistrationError(paths, e) from e

    logger.debug(f"Watching {len(paths)} path(s): {', '.join(paths)}")
    return WatchHandle(observer, paths)
