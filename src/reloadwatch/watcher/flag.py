"""Thread-safe boolean shared between the backend thread and the caller."""

import threading


class AtomicBoolean:
    """
    Boolean with atomic read, write and compare-and-set.

    Python has no lock-free primitive for this, so a private lock guards
    the value. The lock is never held while calling out.
    """

    def __init__(self, initial: bool = False):
        self._value = bool(initial)
        self._lock = threading.Lock()

    def is_true(self) -> bool:
        with self._lock:
            return self._value

    def make_true(self) -> bool:
        """Set to True. Returns True if the value changed."""
        return self.compare_and_set(False, True)

    def make_false(self) -> bool:
        """Set to False. Returns True if the value changed."""
        return self.compare_and_set(True, False)

    def compare_and_set(self, expect: bool, update: bool) -> bool:
        with self._lock:
            if self._value != expect:
                return False
            self._value = update
            return True

    def reinit_after_fork(self) -> None:
        """Replace the lock; a backend thread may have held it at fork time."""
        self._lock = threading.Lock()

    def __bool__(self) -> bool:
        return self.is_true()

    def __repr__(self) -> str:
        return f"AtomicBoolean({self._value})"
