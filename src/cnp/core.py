"""Core analysis entrypoint.

This module ties together the manifest, the source scan, the lockfile and the
ignore file to compute the set of unused dependencies. It performs no console
output so it can be driven by the CLI or embedded in other tooling.
"""

from __future__ import annotations

from collections.abc import Set
from dataclasses import dataclass, field
from pathlib import Path

from .ignore_file import read_ignore_file
from .lockfiles import resolve_required
from .parsers.package_json import declared_dependencies, read_manifest
from .scanner import ProgressCallback, ScanResult, scan_files
from .settings import Settings


def compute_unused(
    declared: Set[str],
    used: Set[str],
    required: Set[str],
    ignored: Set[str],
) -> set[str]:
    """Return ``declared - used - required - ignored``."""
    return set(declared) - set(used) - set(required) - set(ignored)


@dataclass(slots=True)
class Analysis:
    """Result of analysing one project."""

    root: Path
    manifest_path: Path
    declared: set[str]
    used: set[str]
    required: set[str]
    ignored: set[str]
    unused: set[str]
    scan: ScanResult = field(default_factory=ScanResult)

    def sorted_used(self) -> list[str]:
        return sorted(self.used)

    def sorted_unused(self) -> list[str]:
        return sorted(self.unused)


def analyze_project(
    root: Path,
    settings: Settings | None = None,
    progress: ProgressCallback | None = None,
) -> Analysis:
    """Analyse the project at ``root``.

    Raises:
        ManifestNotFoundError: the manifest does not exist.
        ManifestParseError: the manifest is not a valid JSON object.
    """
    settings = settings or Settings()
    root = root.resolve()
    manifest_path = settings.manifest_path(root)

    manifest = read_manifest(manifest_path)
    declared = declared_dependencies(manifest, settings.dependency_sections)

    scan = scan_files(root, declared, settings, progress=progress)
    used = scan.used & declared
    required = resolve_required(root)
    ignored = read_ignore_file(root, settings.ignore_file_name)

    return Analysis(
        root=root,
        manifest_path=manifest_path,
        declared=declared,
        used=used,
        required=required,
        ignored=ignored,
        unused=compute_unused(declared, used, required, ignored),
        scan=scan,
    )
