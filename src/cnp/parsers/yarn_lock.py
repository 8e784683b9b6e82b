"""Parse yarn.lock (classic and berry) to capture resolved package names."""

from __future__ import annotations

from pathlib import Path

from .specifier import package_name


def parse(path: Path) -> set[str]:
    """Return package names from the entry headers of a yarn lock file.

    An entry header is an unindented line ending with ``:`` that lists one or
    more comma-separated specifiers, e.g. ``"@babel/core@^7.0.0", "@babel/core@^7.1.0":``.
    """
    names: set[str] = set()

    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.rstrip()
        if not line or line[0] in " \t#":
            continue
        if not line.endswith(":"):
            continue
        header = line[:-1]
        for spec in header.split(","):
            spec = spec.strip().strip('"')
            if not spec or spec == "__metadata":
                continue
            name = package_name(spec)
            if name:
                names.add(name)

    return names
