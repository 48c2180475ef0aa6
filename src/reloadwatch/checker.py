"""
Evented file update checker.

Reports whether any tracked file (or file under a tracked directory with a
matching extension) changed since the last ``execute``, using OS file
notifications instead of polling mtimes.

Usage:
    with EventedFileUpdateChecker(["config/routes.py"], {"app": ["py"]}, reload_app) as checker:
        ...
        checker.execute_if_updated()
"""

from typing import Callable, Iterable, Mapping, Optional, Sequence, Union

from .exceptions import ConfigurationError
from .logging_config import logger
from .paths import normalize_dirs, normalize_files
from .schemas import CheckerStatus
from .watcher.backend import watch
from .watcher.config import WatcherConfig, get_watcher_config
from .watcher.lifecycle import WatchLifecycle


class EventedFileUpdateChecker:
    """
    Change detector for a fixed set of files and directories.

    Args:
        files: Files to track (exact paths)
        dirs: Directories to track, mapped to extension lists ("py" or ".py").
            An empty list tracks every file below the directory.
        callback: Called by ``execute``
        config: Overrides the environment-derived WatcherConfig
        backend: Replacement for the watchdog backend ``watch`` function

    Raises:
        ConfigurationError: If callback is missing or not callable
    """

    def __init__(
        self,
        files: Iterable[str],
        dirs: Optional[Mapping[str, Union[str, Sequence[str]]]] = None,
        callback: Optional[Callable[[], object]] = None,
        *,
        config: Optional[WatcherConfig] = None,
        backend: Callable = watch,
    ):
        if callback is None:
            raise ConfigurationError("A callback is required to initialize an EventedFileUpdateChecker")
        if not callable(callback):
            raise ConfigurationError(f"callback must be callable, got {type(callback).__name__}")

        self._callback = callback
        config = config or get_watcher_config()
        library_roots = config.library_roots()

        self._core = WatchLifecycle(
            files=normalize_files(files, library_roots),
            dirs=normalize_dirs(dirs, library_roots),
            library_roots=library_roots,
            backend=backend,
            stop_timeout=config.stop_timeout,
        )
        logger.debug(f"Checker created: {self._core.state.value}, roots={self._core.watch_roots}")

    @property
    def files(self):
        return frozenset(self._core.files)

    def updated(self) -> bool:
        """
        True if a tracked change was seen since the last ``execute``.

        A directory that was missing and now exists restarts the watch and
        counts as a change.
        """
        core = self._core
        if core.needs_restart():
            with core.thread_safely():
                # Another caller may have restarted while we waited
                if core.needs_restart():
                    logger.info("Watched directory appeared, restarting watch")
                    # Raised first so no caller sees the new watch with a clear flag
                    core.updated.make_true()
                    core.restart()

        return core.updated.is_true()

    def execute(self):
        """Clear the change flag, then run the callback."""
        self._core.updated.make_false()
        return self._callback()

    def execute_if_updated(self, before: Optional[Callable[[], object]] = None) -> bool:
        """
        Run ``execute`` if ``updated()``; ``before`` runs first when given.

        Returns:
            Whether execution happened
        """
        if self.updated():
            if before is not None:
                before()
            self.execute()
            return True
        return False

    def status(self) -> CheckerStatus:
        core = self._core
        return CheckerStatus(
            state=core.state.value,
            updated=core.updated.is_true(),
            watch_roots=[str(p) for p in core.watch_roots],
            missing=[str(p) for p in core.missing],
            common_path=str(core.common) if core.common is not None else None,
            files=sorted(str(f) for f in core.files),
            directories={str(d): sorted(exts) for d, exts in sorted(core.dirs.items())},
        )

    def close(self) -> None:
        """Stop watching and unregister the fork hook. Safe to call repeatedly."""
        core = getattr(self, "_core", None)
        if core is not None:
            core.close()

    def __enter__(self) -> "EventedFileUpdateChecker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        files = sorted(str(f) for f in self._core.files) if hasattr(self, "_core") else []
        return f"<EventedFileUpdateChecker:{id(self):#x} files={files!r}>"
