"""Scan project sources for references to declared dependencies."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from .discovery import discover_sources, normalize_path
from .matcher import ReferenceMatcher
from .settings import Settings, is_typescript_project
from .typescript import TypeCheckResult, run_type_checker

log = structlog.get_logger("cnp.scanner")

ProgressCallback = Callable[[Path], None]
TypeChecker = Callable[[Path, Settings], TypeCheckResult]


@dataclass(slots=True)
class ScanResult:
    """Outcome of a single scan; explored and ignored keep discovery order."""

    used: set[str] = field(default_factory=set)
    explored: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)
    typescript_unused: set[str] = field(default_factory=set)


def default_type_checker(root: Path, settings: Settings) -> TypeCheckResult:
    if not settings.typescript_check or not is_typescript_project(root):
        return TypeCheckResult()
    return run_type_checker(root, settings.tsc_command, settings.typescript_extensions)


def _read_source(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        log.debug("scanner.unreadable", path=str(path), error=str(exc))
        return None


def scan_files(
    root: Path,
    dependencies: Iterable[str],
    settings: Settings | None = None,
    progress: ProgressCallback | None = None,
    matcher: ReferenceMatcher | None = None,
    type_checker: TypeChecker = default_type_checker,
) -> ScanResult:
    """Find which of ``dependencies`` are referenced by sources under ``root``.

    TypeScript files are matched after the type checker ran, and packages it
    reported as imported-but-unused in a file do not count for that file.
    """
    settings = settings or Settings()
    matcher = matcher or ReferenceMatcher(settings.import_forms)
    deps = sorted(set(dependencies))
    ts_suffixes = {f".{ext.lstrip('.')}" for ext in settings.typescript_extensions}

    result = ScanResult()
    seen: set[str] = set()
    deferred: list[tuple[Path, str]] = []

    for entry in discover_sources(root, settings.extensions, settings.ignore_folders):
        if progress is not None:
            progress(entry.path)

        normalized = normalize_path(entry.path)
        if normalized in seen:
            continue
        seen.add(normalized)

        if entry.ignored:
            result.ignored.append(normalized)
            continue

        result.explored.append(normalized)
        if entry.path.suffix in ts_suffixes:
            deferred.append((entry.path, normalized))
            continue

        content = _read_source(entry.path)
        if content is not None:
            result.used |= matcher.find_dependencies(content, deps)

    if deferred:
        checked = type_checker(root, settings)
        result.typescript_unused = checked.names
        for path, normalized in deferred:
            content = _read_source(path)
            if content is None:
                continue
            found = matcher.find_dependencies(content, deps)
            result.used |= found - checked.for_file(normalized)

    log.info(
        "scanner.done",
        explored=len(result.explored),
        ignored=len(result.ignored),
        used=len(result.used),
    )
    return result
