"""Recover bare package names from lockfile specifiers and install paths.

Supported shapes:
- ``name@range`` and ``@scope/name@range`` (yarn headers, pnpm v6+ keys)
- ``alias@npm:target@range`` (the alias is the installed name)
- ``node_modules/a/node_modules/@scope/b`` (npm v2+ package paths)
- ``/name/1.2.3`` and ``/@scope/name/1.2.3_peer@1.0.0`` (pnpm v5 keys)
- ``name@1.2.3(peer@1.0.0)`` (pnpm v9 peer suffixes)
- ``parent/child`` (bun nested packages)
"""

from __future__ import annotations

import re

_VERSION_RE = re.compile(r"\d+\.\d+\.\d+\S*")


def package_name(spec: str) -> str:
    """Strip the version part of ``spec``, taking a leading scope into account."""
    spec = spec.strip().strip("\"'")
    if spec.startswith("@"):
        idx = spec.find("@", 1)
        return spec if idx == -1 else spec[:idx]
    return spec.split("@", 1)[0]


def _looks_like_version(segment: str) -> bool:
    return _VERSION_RE.fullmatch(segment) is not None


def split_package_path(path: str) -> list[str]:
    """Return the chain of package names encoded in a lockfile key.

    ``node_modules/a/node_modules/@s/b`` -> ``["a", "@s/b"]``;
    ``/react/18.2.0`` -> ``["react"]``.
    """
    ref = path.strip().split("(", 1)[0]
    segments = [s for s in ref.split("/") if s and s != "node_modules"]

    names: list[str] = []
    i = 0
    while i < len(segments):
        segment = segments[i]
        if segment.startswith("@") and "@" not in segment[1:] and i + 1 < len(segments):
            candidate = f"{segment}/{segments[i + 1]}"
            i += 2
        else:
            candidate = segment
            i += 1
        # pnpm v5 keys put the version in its own segment after the name
        if names and _looks_like_version(candidate):
            continue
        name = package_name(candidate)
        if name:
            names.append(name)
    return names
