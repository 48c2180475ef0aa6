"""
Watcher Configuration.

All values configurable via RELOADWATCH_* environment variables.

Environment Variables:
    RELOADWATCH_STOP_TIMEOUT: Seconds to wait for the observer thread on stop (default: 1.0)
    RELOADWATCH_LIBRARY_ROOTS: Extra library roots, os.pathsep separated
    RELOADWATCH_EXCLUDE_LIBRARIES: If "false", library roots are watched like any path (default: true)
    RELOADWATCH_POLL_INTERVAL: Poll interval of `reloadwatch run` (default: 0.5)
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..paths import default_library_roots


DEFAULT_STOP_TIMEOUT = 1.0
DEFAULT_POLL_INTERVAL = 0.5

# Events that report access rather than modification
IGNORED_EVENT_TYPES = frozenset({"opened", "closed_no_write"})


def _env_float(key: str, default: float) -> float:
    """Read float from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    """Read boolean from environment variable."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


def _env_paths(key: str) -> List[str]:
    """Read an os.pathsep separated path list from environment variable."""
    value = os.getenv(key, "")
    return [part for part in value.split(os.pathsep) if part]


@dataclass
class WatcherConfig:
    """
    Evented checker configuration.

    Fields default from RELOADWATCH_* environment variables and can be
    overridden per checker by passing an explicit instance.
    """

    stop_timeout: float = field(default_factory=lambda: _env_float(
        "RELOADWATCH_STOP_TIMEOUT", DEFAULT_STOP_TIMEOUT
    ))
    extra_library_roots: List[str] = field(default_factory=lambda: _env_paths(
        "RELOADWATCH_LIBRARY_ROOTS"
    ))
    exclude_libraries: bool = field(default_factory=lambda: _env_bool(
        "RELOADWATCH_EXCLUDE_LIBRARIES", True
    ))
    poll_interval: float = field(default_factory=lambda: _env_float(
        "RELOADWATCH_POLL_INTERVAL", DEFAULT_POLL_INTERVAL
    ))

    def library_roots(self) -> List[str]:
        """Library roots in effect: interpreter package dirs plus extras."""
        if not self.exclude_libraries:
            return []
        roots = default_library_roots() + [os.path.abspath(p) for p in self.extra_library_roots]
        return sorted(set(roots))

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary (for JSON output)."""
        return {
            "stop_timeout": self.stop_timeout,
            "extra_library_roots": list(self.extra_library_roots),
            "exclude_libraries": self.exclude_libraries,
            "poll_interval": self.poll_interval,
        }


# Global instance for convenience
_default_config: Optional[WatcherConfig] = None


def get_watcher_config() -> WatcherConfig:
    """Get the global watcher configuration."""
    global _default_config
    if _default_config is None:
        _default_config = WatcherConfig()
    return _default_config


def reset_watcher_config() -> None:
    """Reset global config (useful after env var changes or for testing)."""
    global _default_config
    _default_config = None
