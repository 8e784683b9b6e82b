"""Detect the project's package manager and build its commands."""

from __future__ import annotations

from pathlib import Path

from .errors import UnsupportedPackageManagerError

# First match wins.
_DETECTION_ORDER: tuple[tuple[str, str], ...] = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lock", "bun"),
    ("bun.lockb", "bun"),
)

REMOVE_VERBS: dict[str, str] = {
    "npm": "uninstall",
    "pnpm": "remove",
    "yarn": "remove",
    "bun": "remove",
}

DEFAULT_PACKAGE_MANAGER = "npm"


def detect_package_manager(root: Path) -> str:
    """Return the package manager for ``root`` based on lockfile presence."""
    for filename, manager in _DETECTION_ORDER:
        if (root / filename).exists():
            return manager
    return DEFAULT_PACKAGE_MANAGER


def remove_command(manager: str, dependency: str) -> list[str]:
    """Return the command that removes ``dependency`` with ``manager``."""
    verb = REMOVE_VERBS.get(manager)
    if verb is None:
        known = ", ".join(sorted(REMOVE_VERBS))
        raise UnsupportedPackageManagerError(
            f"Unsupported package manager '{manager}'. Known package managers: {known}"
        )
    return [manager, verb, dependency]


def install_command(manager: str) -> list[str]:
    return [manager, "install"]
