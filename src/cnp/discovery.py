"""Source file discovery utilities."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path, PurePath


@dataclass(slots=True, frozen=True)
class DiscoveredPath:
    """A path found under the project root; ignored paths are not scanned."""

    path: Path
    ignored: bool = False


def should_ignore(path: PurePath, ignore_folders: Iterable[str]) -> bool:
    """Return True if any segment of ``path`` is exactly an ignored folder name."""
    folders = set(ignore_folders)
    return any(part in folders for part in path.parts)


def normalize_path(path: Path) -> str:
    """Return an absolute, symlink-resolved form of ``path``.

    On macOS temporary directories resolve under ``/private``; the prefix is
    stripped so paths compare equal to the ones users see.
    """
    resolved = os.path.realpath(path)
    if sys.platform == "darwin" and resolved.startswith("/private/"):
        resolved = resolved[len("/private") :]
    return resolved


def discover_sources(
    root: Path,
    extensions: Iterable[str],
    ignore_folders: Iterable[str],
) -> Iterator[DiscoveredPath]:
    """Walk ``root`` recursively yielding source files with the given extensions.

    Directories named in ``ignore_folders`` are yielded once as ignored and
    not descended into. Symlinked files are skipped. Entries are visited in
    sorted order so that results are stable across runs.
    """
    suffixes = {f".{ext.lstrip('.')}" for ext in extensions}
    folders = tuple(ignore_folders)

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        relative = current.relative_to(root)

        kept: list[str] = []
        for name in sorted(dirnames):
            if should_ignore(relative / name, folders):
                yield DiscoveredPath(current / name, ignored=True)
            else:
                kept.append(name)
        dirnames[:] = kept

        for name in sorted(filenames):
            path = current / name
            if path.suffix not in suffixes or path.is_symlink():
                continue
            yield DiscoveredPath(path, ignored=should_ignore(relative / name, folders))
