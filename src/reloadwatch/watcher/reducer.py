"""
Directory-set reduction.

Recursive watches on a parent already cover every descendant, so only the
outermost candidate directories are registered with the backend.
"""

from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Set


def candidate_directories(dirs: Mapping[Path, Set[str]], files: Iterable[Path]) -> Set[Path]:
    """Tracked directories plus the parent directory of every tracked file."""
    return set(dirs) | {f.parent for f in files}


def directories_to_watch(candidates: Iterable[Path], library_roots: Iterable[str] = ()) -> List[Path]:
    """
    Drop every candidate that has a strict ancestor among the candidates or
    the library roots.

    Args:
        candidates: Directories that need to be covered
        library_roots: Roots that are never watched

    Returns:
        Sorted list of watch roots. Running it on its own output returns
        the same list.
    """
    candidates = set(candidates)
    accounted_for = candidates | {Path(root) for root in library_roots}
    return sorted(
        directory for directory in candidates
        if not any(parent in accounted_for for parent in directory.parents)
    )


def common_path(paths: Iterable[Path]) -> Optional[Path]:
    """
    Deepest directory that is an ancestor-or-self of every path.

    Returns None for an empty input.
    """
    common: Optional[Set[Path]] = None
    for path in paths:
        ancestry = {path, *path.parents}
        common = ancestry if common is None else common & ancestry
    if not common:
        return None
    return max(common, key=lambda p: len(p.parts))
