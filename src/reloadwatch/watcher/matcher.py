"""Decides whether a changed path reported by the backend is tracked."""

import os
from pathlib import Path
from typing import Dict, Optional, Sequence, Set

from ..paths import is_under


class PathMatcher:
    """
    Matches changed paths against tracked files and directories.

    Policy, in order:
        1. Paths under a library root never match.
        2. An exact tracked file matches.
        3. A path that is a directory does not match.
        4. Walk up from the parent directory. The first tracked directory
           found decides: it matches if its extension set is empty or holds
           the path's extension. The walk stops without a match at the
           common path of all tracked directories or at the filesystem root.
    """

    def __init__(
        self,
        files: Set[Path],
        dirs: Dict[Path, Set[str]],
        common: Optional[Path] = None,
        library_roots: Sequence[str] = (),
    ):
        self.files = files
        self.dirs = dirs
        self.common = common
        self.library_roots = library_roots

    def matches(self, changed) -> bool:
        path = Path(os.fsdecode(changed))

        if self.library_roots and is_under(path, self.library_roots):
            return False

        if path in self.files:
            return True

        if os.path.isdir(path):
            return False

        ext = path.suffix
        for directory in (path.parent, *path.parent.parents):
            exts = self.dirs.get(directory)
            if exts is not None:
                # Innermost tracked directory wins, no fallback to outer ones
                return not exts or ext in exts
            if directory == self.common or directory == directory.parent:
                return False
        return False

    __call__ = matches
