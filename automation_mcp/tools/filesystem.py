from __future__ import annotations

from pathlib import Path
from typing import Iterable, List


def list_names(folder: Path) -> List[str]:
    """Return the entry names of a directory in sorted order."""
    if not folder.exists():
        raise FileNotFoundError(f"Directory not found: {folder}")
    if not folder.is_dir():
        raise NotADirectoryError(f"Expected a directory but found a file: {folder}")
    return sorted(entry.name for entry in folder.iterdir())


def walk_files(folder: Path, root: Path) -> List[str]:
    """Depth-first listing of every file under ``folder``.

    Paths are POSIX strings relative to ``root``. Each subdirectory is fully
    expanded before the next sibling is visited. Symlinked directories are
    listed as entries but not descended into.
    """
    if not folder.exists():
        raise FileNotFoundError(f"Directory not found: {folder}")
    if not folder.is_dir():
        raise NotADirectoryError(f"Expected a directory but found a file: {folder}")

    files: List[str] = []
    for entry in sorted(folder.iterdir(), key=lambda item: item.name):
        if entry.is_dir() and not entry.is_symlink():
            files.extend(walk_files(entry, root))
        else:
            files.append(_relative(entry, root))
    return files


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def filter_suffixes(paths: Iterable[str], suffixes: Iterable[str]) -> List[str]:
    wanted = tuple(suffixes)
    return [path for path in paths if path.endswith(wanted)]


def read_text(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if not path.is_file():
        raise IsADirectoryError(f"Expected a file but found a directory: {path}")
    return path.read_text(encoding="utf-8", errors="replace")
