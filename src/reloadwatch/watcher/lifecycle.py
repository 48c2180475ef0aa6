"""
Watch lifecycle management.

Owns the backend registration for one set of tracked files/directories:
start, stop, restart when missing directories appear, and rebuild in a
forked child. Every failure coming from filesystem probing or from the
backend is absorbed here; the checker degrades to "no changes reported"
instead of crashing its host.
"""

import os
import threading
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Set

from ..exceptions import AccessError, RegistrationError
from ..logging_config import logger
from ..paths import resolve_existing
from .backend import ChangeEvent, WatchHandle, watch
from .flag import AtomicBoolean
from .fork import ForkTracker
from .matcher import PathMatcher
from .reducer import candidate_directories, common_path, directories_to_watch


class WatchState(str, Enum):
    STOPPED = "stopped"
    WATCHING = "watching"
    DEGRADED = "degraded"


def probe_directory(path: Path) -> bool:
    """
    Check that ``path`` is a directory the backend can watch.

    Returns:
        False if it doesn't exist or is not a directory

    Raises:
        AccessError: If it exists but can't be read or traversed
    """
    try:
        if not path.is_dir():
            return False
        if not os.access(path, os.R_OK | os.X_OK):
            raise AccessError(str(path), "permission denied")
        return True
    except OSError as e:
        raise AccessError(str(path), str(e)) from e


class WatchLifecycle:
    """
    Manages the backend watch for a fixed set of tracked files/directories.

    Attributes:
        files: Tracked files (never change after construction)
        dirs: Tracked directories -> extensions. Keys are resolved through
            symlinks the first time the directory is seen to exist.
        updated: Change flag set from the backend thread
        watch_roots: Directories registered (or to be registered) on last start
        missing: Candidate directories that didn't exist on last start
        state: Current WatchState
        closed: Set by close(); start and restart are no-ops afterwards
    """

    def __init__(
        self,
        files: Set[Path],
        dirs: Dict[Path, Set[str]],
        library_roots: Sequence[str] = (),
        backend: Callable[..., WatchHandle] = watch,
        stop_timeout: Optional[float] = None,
        track_forks: bool = True,
    ):
        self.files = files
        self.dirs = dirs
        self.library_roots = list(library_roots)
        self.backend = backend
        self.stop_timeout = stop_timeout

        self.updated = AtomicBoolean(False)
        self.watch_roots: List[Path] = []
        self.missing: List[Path] = []
        self.common: Optional[Path] = None
        self.matcher = PathMatcher(self.files, self.dirs, None, self.library_roots)
        self.state = WatchState.STOPPED

        self._handle: Optional[WatchHandle] = None
        self._lock = threading.RLock()
        self._fork_token: Optional[int] = None
        self.closed = False

        self.start()
        if track_forks:
            self._fork_token = ForkTracker.after_fork(self._after_fork)

    @contextmanager
    def thread_safely(self) -> Iterator["WatchLifecycle"]:
        """Hold the lifecycle lock for the duration of the block."""
        with self._lock:
            yield self

    def start(self) -> WatchState:
        """
        Register every existing watch root with the backend.

        Returns:
            The resulting state (WATCHING or DEGRADED), or STOPPED once closed
        """
        with self._lock:
            if self.closed:
                return self.state
            self.dirs = resolve_existing(self.dirs)
            self.common = common_path(self.dirs)
            self.matcher = PathMatcher(self.files, self.dirs, self.common, self.library_roots)

            roots = directories_to_watch(
                candidate_directories(self.dirs, self.files), self.library_roots
            )
            exist = [root for root in roots if os.path.exists(root)]
            self.missing = [root for root in roots if root not in exist]
            if self.missing:
                logger.debug(f"Not yet present: {', '.join(map(str, self.missing))}")

            self.watch_roots = []
            self._handle = self._start_backend(exist) if exist else None
            if self._handle is None:
                self.state = WatchState.DEGRADED
                logger.debug("No watch registered, checker is degraded")
            else:
                self.state = WatchState.WATCHING
            return self.state

    def stop(self) -> None:
        """Tear down the backend watch, if any. Safe to call repeatedly."""
        with self._lock:
            handle, self._handle = self._handle, None
            if handle is not None:
                handle.stop(self.stop_timeout)
            self.state = WatchState.STOPPED

    def restart(self) -> WatchState:
        with self._lock:
            self.stop()
            return self.start()

    def needs_restart(self) -> bool:
        """True if a directory missing on last start exists now."""
        if self.closed:
            return False
        return any(os.path.exists(directory) for directory in self.missing)

    def changed(self, event: ChangeEvent) -> None:
        """Backend callback: raise the flag on the first tracked path."""
        if not self.updated.is_true():
            if any(self.matcher.matches(path) for path in event.paths):
                self.updated.make_true()

    def close(self) -> None:
        """Stop watching and drop the fork hook."""
        with self._lock:
            self.closed = True
            self.stop()
        if self._fork_token is not None:
            ForkTracker.unregister(self._fork_token)
            self._fork_token = None

    def _after_fork(self) -> None:
        # Observer threads don't survive fork; abandon the inherited handle
        self._lock = threading.RLock()
        self.updated.reinit_after_fork()
        self._handle = None
        self.start()

    def _start_backend(self, roots: List[Path]) -> Optional[WatchHandle]:
        accessible = []
        for root in roots:
            try:
                if probe_directory(root):
                    accessible.append(str(root))
            except AccessError as e:
                logger.debug(f"Skipping inaccessible directory {e}")

        if not accessible:
            logger.warning("None of the watch roots are accessible, changes will not be detected")
            return None

        try:
            handle = self.backend(accessible, recursive=True, callback=self.changed)
        except RegistrationError as e:
            logger.warning(f"{e}; changes will not be detected until restart")
            return None
        except Exception as e:
            logger.warning(
                f"Watch backend failed with {type(e).__name__}: {e}; "
                f"changes will not be detected until restart"
            )
            return None

        self.watch_roots = [Path(path) for path in accessible]
        return handle
