"""
Process-wide registry of hooks run in the child after ``os.fork()``.

``os.register_at_fork`` callbacks can't be removed, so a single dispatcher
is registered once and individual hooks come and go through this registry.
On platforms without fork semantics registration is a no-op.
"""

import os
import threading
from typing import Callable, Dict

from ..logging_config import logger


class ForkTracker:
    """Registers and unregisters after-fork hooks."""

    _hooks: Dict[int, Callable[[], None]] = {}
    _next_id = 0
    _lock = threading.Lock()
    _installed = False

    @classmethod
    def after_fork(cls, callback: Callable[[], None]) -> int:
        """
        Run ``callback`` in every child process forked from now on.

        Returns:
            Token for ``unregister``
        """
        with cls._lock:
            cls._install()
            cls._next_id += 1
            token = cls._next_id
            cls._hooks[token] = callback
            return token

    @classmethod
    def unregister(cls, token: int) -> None:
        with cls._lock:
            cls._hooks.pop(token, None)

    @classmethod
    def registered(cls) -> int:
        """Number of live hooks."""
        return len(cls._hooks)

    @classmethod
    def _install(cls) -> None:
        if cls._installed:
            return
        cls._installed = True
        if hasattr(os, "register_at_fork"):
            os.register_at_fork(after_in_child=cls.run_hooks)

    @classmethod
    def run_hooks(cls) -> None:
        """Invoke every registered hook. Failures are logged, not raised."""
        # The parent may have held the lock while forking
        cls._lock = threading.Lock()
        for token, callback in list(cls._hooks.items()):
            try:
                callback()
            except Exception as e:
                logger.error(f"After-fork hook {token} failed: {type(e).__name__}: {e}")
