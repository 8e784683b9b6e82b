"""Use the TypeScript compiler to find imports that are never read.

A text scan counts ``import x from "pkg"`` as a use of ``pkg`` even when ``x``
is never referenced. When the project has a tsconfig.json, ``tsc`` is run with
``--noUnusedLocals`` and its unused-declaration diagnostics are mapped back to
the packages whose imports they point at.
"""

from __future__ import annotations

import os
import re
import shlex
import subprocess
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from .discovery import normalize_path
from .matcher import base_package

log = structlog.get_logger("cnp.typescript")

# TS6133: '<name>' is declared but its value is never read.
# TS6192: All imports in import declaration are unused.
UNUSED_DECLARATION = "TS6133"
UNUSED_IMPORT_DECLARATION = "TS6192"
UNUSED_CODES = (UNUSED_DECLARATION, UNUSED_IMPORT_DECLARATION)

TSC_ARGS = ("--noEmit", "--pretty", "false", "--noUnusedLocals")
MAX_STATEMENT_LINES = 50

_IMPORT_START_RE = re.compile(r"^\s*import\b")
# lines that can sit inside a multi-line import clause
_CLAUSE_LINE_RE = re.compile(r"^[\s\w$,{}*]*$")
_DECLARATION_RE = re.compile(r"^\s*(?:export\s+)?(?:const|let|var|function|class)\b")
_SIDE_EFFECT_RE = re.compile(r"""^\s*import\s*['"]([^'"\s]+)['"]""")
_FROM_RE = re.compile(
    r"""^\s*import\s+(?:type\s+)?(?P<clause>[^'";]*?)\s*\bfrom\s*['"](?P<module>[^'"\s]+)['"]"""
)
_BRACES_RE = re.compile(r"\{([^}]*)\}")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


@dataclass(slots=True, frozen=True)
class Diagnostic:
    path: str
    line: int
    code: str


@dataclass(slots=True)
class TypeCheckResult:
    """Packages whose imports the compiler reported unused, keyed by file."""

    unused_by_file: dict[str, set[str]] = field(default_factory=dict)
    ran: bool = False

    @property
    def names(self) -> set[str]:
        found: set[str] = set()
        for packages in self.unused_by_file.values():
            found |= packages
        return found

    def for_file(self, path: str) -> set[str]:
        return self.unused_by_file.get(path, set())


def resolve_tsc_command(root: Path, configured: str | None = None) -> list[str]:
    """Return the compiler command: configured, then node_modules/.bin, then PATH."""
    if configured:
        return shlex.split(configured)
    local = root / "node_modules" / ".bin" / ("tsc.cmd" if os.name == "nt" else "tsc")
    if local.is_file():
        return [str(local)]
    return ["tsc"]


def _diagnostic_re(typescript_extensions: Iterable[str]) -> re.Pattern[str]:
    exts = "|".join(re.escape(ext.lstrip(".")) for ext in typescript_extensions)
    return re.compile(rf"^(?P<path>.*\.(?:{exts}))\((?P<line>\d+),\d+\):\s*error\s+(?P<code>TS\d+)")


def parse_diagnostics(
    output: str,
    typescript_extensions: Iterable[str] = ("ts", "tsx"),
) -> Iterator[Diagnostic]:
    """Yield unused-declaration diagnostics from ``tsc --pretty false`` output.

    Example line::

        src/file.ts(1,8): error TS6133: 'analytics' is declared but its value is never read.
    """
    pattern = _diagnostic_re(typescript_extensions)
    for line in output.splitlines():
        match = pattern.match(line.strip())
        if match is None or match.group("code") not in UNUSED_CODES:
            continue
        yield Diagnostic(match.group("path"), int(match.group("line")), match.group("code"))


def count_bindings(clause: str) -> int:
    """Return how many local names an import clause binds.

    ``React`` -> 1, ``{ a, b as c }`` -> 2, ``React, { useState }`` -> 2,
    ``* as fs`` -> 1.
    """
    count = 0
    for inner in _BRACES_RE.findall(clause):
        count += sum(1 for part in inner.split(",") if part.strip())
    outside = _BRACES_RE.sub("", clause)
    count += sum(1 for part in outside.split(",") if part.strip())
    return count


def parse_import_statement(statement: str) -> tuple[str, int] | None:
    """Return ``(module, bindings)`` for an import statement.

    Handles named, default, namespace, combined and side-effect imports.
    """
    match = _FROM_RE.match(statement)
    if match:
        return match.group("module"), count_bindings(match.group("clause"))
    match = _SIDE_EFFECT_RE.match(statement)
    if match:
        return match.group(1), 0
    return None


def _import_statement(lines: list[str], index: int) -> str | None:
    """Return the text of the import statement spanning ``lines[index]``."""
    start = index
    while not _IMPORT_START_RE.match(lines[start]):
        line = lines[start]
        if (
            index - start >= MAX_STATEMENT_LINES
            or not line.strip()
            or _DECLARATION_RE.match(line)
            or not _CLAUSE_LINE_RE.match(line)
        ):
            return None
        start -= 1
        if start < 0:
            return None

    collected: list[str] = []
    for line in lines[start : start + MAX_STATEMENT_LINES]:
        collected.append(line.strip())
        statement = " ".join(collected)
        if parse_import_statement(statement) is not None:
            # the statement must span the diagnosed line
            if start + len(collected) - 1 < index:
                return None
            return statement
    return None


def module_from_source_line(path: Path, line_number: int, code: str = UNUSED_DECLARATION) -> str | None:
    """Return the module imported by the statement at ``line_number`` (1-based).

    Returns None when the line is not part of an import, is a comment, is out
    of range, or (for TS6133) belongs to an import that binds other names
    which may still be in use.
    """
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return None

    if line_number < 1 or line_number > len(lines):
        return None

    target = lines[line_number - 1].strip()
    if not target or target.startswith(("//", "/*")):
        return None

    statement = _import_statement(lines, line_number - 1)
    if statement is None:
        return None

    parsed = parse_import_statement(statement)
    if parsed is None:
        return None
    module, bindings = parsed
    if code == UNUSED_DECLARATION and bindings > 1:
        return None
    return module


def run_type_checker(
    root: Path,
    command: str | None = None,
    typescript_extensions: Iterable[str] = ("ts", "tsx"),
    runner: Runner = subprocess.run,
) -> TypeCheckResult:
    """Run ``tsc`` in ``root`` and collect packages imported but never read.

    If the compiler cannot be started a warning is logged and an empty result
    is returned, leaving the text scan as the only source of truth.
    """
    cmd = [*resolve_tsc_command(root, command), *TSC_ARGS]
    try:
        completed = runner(
            cmd,
            cwd=root,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        log.warning(
            "typescript.unavailable",
            command=cmd[0],
            error=str(exc),
            hint="Failed to run tsc. Unused imports may not be detected.",
        )
        return TypeCheckResult()

    result = TypeCheckResult(ran=True)
    if completed.returncode == 0:
        return result

    # tsc writes diagnostics to stdout; some wrappers use stderr
    output = "\n".join(part for part in (completed.stdout, completed.stderr) if part)
    for diagnostic in parse_diagnostics(output, typescript_extensions):
        path = Path(diagnostic.path)
        if not path.is_absolute():
            path = root / path
        module = module_from_source_line(path, diagnostic.line, diagnostic.code)
        package = base_package(module) if module else None
        if package is None:
            continue
        result.unused_by_file.setdefault(normalize_path(path), set()).add(package)

    log.debug("typescript.checked", files=len(result.unused_by_file), packages=sorted(result.names))
    return result

