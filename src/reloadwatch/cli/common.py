"""
Shared helpers for CLI commands.
"""

from typing import Dict, List, Tuple

import typer


def parse_dir_spec(spec: str) -> Tuple[str, List[str]]:
    """
    Split a ``PATH[:ext,ext]`` directory spec.

    Examples:
        "app" -> ("app", [])
        "app:py,pyi" -> ("app", ["py", "pyi"])
        "C:\\src:py" -> ("C:\\src", ["py"])
    """
    head, sep, tail = spec.rpartition(":")
    if not sep or not head or len(head) == 1 or "/" in tail or "\\" in tail:
        return spec, []
    return head, [ext.strip() for ext in tail.split(",") if ext.strip()]


def build_dirs(specs: List[str]) -> Dict[str, List[str]]:
    """Turn repeated --dir options into the mapping the checker expects."""
    dirs: Dict[str, List[str]] = {}
    for spec in specs:
        path, exts = parse_dir_spec(spec)
        if not path:
            raise typer.BadParameter(f"Empty directory in spec: {spec!r}")
        if path in dirs and (not dirs[path] or not exts):
            # A spec without extensions tracks everything
            dirs[path] = []
        else:
            dirs.setdefault(path, []).extend(exts)
    return dirs
