"""
Path normalization for tracked files and directories.

Turns caller-supplied path strings into canonical absolute paths and drops
anything living under a library root (installed third-party packages).
Symlinks are not followed here; tracked directories are resolved later,
once they are known to exist (see ``resolve_existing``).
"""

import os
import site
import sysconfig
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union


PathLike = Union[str, "os.PathLike[str]"]


def default_library_roots() -> List[str]:
    """
    Directories holding installed packages for the running interpreter.

    Returns:
        Sorted list of absolute paths (may include paths that don't exist)
    """
    roots: Set[str] = set()

    try:
        roots.update(site.getsitepackages())
    except AttributeError:
        # Some embedded/virtualenv builds ship a site module without it
        pass

    user_site = site.getusersitepackages()
    if isinstance(user_site, str):
        roots.add(user_site)

    for key in ("purelib", "platlib"):
        path = sysconfig.get_paths().get(key)
        if path:
            roots.add(path)

    return sorted(os.path.abspath(root) for root in roots)


def expand_path(path: PathLike) -> Path:
    """Absolute form of ``path`` with ``~``, ``.`` and ``..`` collapsed, symlinks kept."""
    return Path(os.path.abspath(os.path.expanduser(os.fspath(path))))


def is_under(path: Path, roots: Iterable[PathLike]) -> bool:
    """True if ``path`` equals or lies below any of ``roots`` (component-wise)."""
    text = str(path)
    for root in roots:
        root = os.fspath(root).rstrip(os.sep) or os.sep
        if text == root:
            return True
        prefix = root if root.endswith(os.sep) else root + os.sep
        if text.startswith(prefix):
            return True
    return False


def normalize_extension(ext: str) -> str:
    """Normalize ``"rb"`` and ``".rb"`` to ``".rb"``."""
    ext = str(ext)
    if ext.startswith("."):
        ext = ext[1:]
    return "." + ext


def normalize_extensions(exts: Union[None, str, Sequence[str]]) -> Set[str]:
    """
    Normalize an extension list to a set of dotted extensions.

    A bare string is treated as a single extension. Empty strings are
    dropped; an empty result means "any extension".
    Unlike a literal strip-then-add-a-dot rule, "" and "." do not become a
    bare "." that matches nothing; they are ignored on purpose.
    """
    if exts is None:
        return set()
    if isinstance(exts, str):
        exts = [exts]
    return {normalize_extension(ext) for ext in exts if str(ext).lstrip(".")}


def _merge_into(target: Dict[Path, Set[str]], key: Path, exts: Set[str]) -> None:
    # An empty set means "any extension" and absorbs any other set
    if key not in target:
        target[key] = set(exts)
    elif not target[key] or not exts:
        target[key] = set()
    else:
        target[key] |= exts


def normalize_files(files: Iterable[PathLike], library_roots: Sequence[str] = ()) -> Set[Path]:
    """Expand tracked files, dropping those under a library root."""
    result = set()
    for f in files:
        path = expand_path(f)
        if is_under(path, library_roots):
            continue
        result.add(path)
    return result


def normalize_dirs(
    dirs: Optional[Mapping[PathLike, Union[None, str, Sequence[str]]]],
    library_roots: Sequence[str] = (),
) -> Dict[Path, Set[str]]:
    """
    Expand tracked directories and normalize their extension sets.

    Duplicate keys (after expansion) have their extension sets merged.
    """
    result: Dict[Path, Set[str]] = {}
    for directory, exts in (dirs or {}).items():
        path = expand_path(directory)
        if is_under(path, library_roots):
            continue
        _merge_into(result, path, normalize_extensions(exts))
    return result


def resolve_existing(dirs: Dict[Path, Set[str]]) -> Dict[Path, Set[str]]:
    """
    Resolve symlinks in every directory key that exists on disk.

    Keys for directories that don't exist yet are kept as-is and resolved
    on a later call.
    """
    resolved: Dict[Path, Set[str]] = {}
    for directory, exts in dirs.items():
        key = Path(os.path.realpath(directory)) if os.path.isdir(directory) else directory
        _merge_into(resolved, key, exts)
    return resolved
