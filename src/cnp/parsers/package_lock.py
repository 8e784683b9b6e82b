"""Parse npm package-lock.json to capture installed package names."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .specifier import split_package_path


def _walk_v1(deps: dict[str, Any], names: set[str]) -> None:
    for name, meta in deps.items():
        if name:
            names.add(name)
        if isinstance(meta, dict) and isinstance(meta.get("dependencies"), dict):
            _walk_v1(meta["dependencies"], names)


def parse(path: Path) -> set[str]:
    """Return package names from the lockfile.

    Supports npm v1 ("dependencies" tree) and v2+ ("packages" map).
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object")

    names: set[str] = set()

    # npm v2+ format; the root ("") and workspace links carry no node_modules/ prefix
    packages = data.get("packages")
    if isinstance(packages, dict):
        for key in packages:
            if "node_modules/" not in key:
                continue
            chain = split_package_path(key)
            if chain:
                names.add(chain[-1])

    # npm v1 format
    deps = data.get("dependencies")
    if isinstance(deps, dict):
        _walk_v1(deps, names)

    return names
