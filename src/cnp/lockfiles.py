"""Resolve the set of packages recorded in the project's lockfile.

Exactly one lockfile must be present for the result to be used. When several
are found the resolution is ambiguous and an empty set is returned, so that no
dependency is protected from unused detection on a guess.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from pathlib import Path

import structlog
import yaml

from .parsers import bun_lock, package_lock, pnpm_lock, yarn_lock

log = structlog.get_logger("cnp.lockfiles")


class LockfileFormat(enum.Enum):
    """Supported lockfiles, in detection order."""

    PACKAGE_LOCK = ("package-lock.json", package_lock.parse)
    YARN = ("yarn.lock", yarn_lock.parse)
    PNPM = ("pnpm-lock.yaml", pnpm_lock.parse)
    BUN = ("bun.lock", bun_lock.parse)
    BUN_BINARY = ("bun.lockb", None)

    def __init__(self, filename: str, parser: Callable[[Path], set[str]] | None) -> None:
        self.filename = filename
        self.parser = parser

    @property
    def supported(self) -> bool:
        return self.parser is not None

    def path(self, root: Path) -> Path:
        return root / self.filename

    def parse(self, root: Path) -> set[str]:
        if self.parser is None:
            raise ValueError(f"{self.filename} is a binary lockfile and cannot be read")
        return self.parser(self.path(root))


def detect_lockfiles(root: Path) -> list[LockfileFormat]:
    """Return every lockfile format present in ``root``."""
    return [fmt for fmt in LockfileFormat if fmt.path(root).is_file()]


def resolve_required(root: Path) -> set[str]:
    """Return package names recorded in the single lockfile under ``root``.

    Returns an empty set when no lockfile exists, when more than one exists,
    or when the lockfile cannot be parsed.
    """
    found = detect_lockfiles(root)
    if not found:
        return set()

    if len(found) > 1:
        log.warning(
            "lockfile.ambiguous",
            lockfiles=[fmt.filename for fmt in found],
            hint="Multiple lockfiles detected. Please use only one package manager.",
        )
        return set()

    lockfile = found[0]
    if not lockfile.supported:
        log.warning(
            "lockfile.unsupported",
            lockfile=lockfile.filename,
            hint="Run `bun install --save-text-lockfile` to produce bun.lock",
        )
        return set()

    try:
        names = lockfile.parse(root)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        log.warning("lockfile.unparseable", lockfile=lockfile.filename, error=str(exc))
        return set()

    log.debug("lockfile.resolved", lockfile=lockfile.filename, packages=len(names))
    return {name for name in names if name}

