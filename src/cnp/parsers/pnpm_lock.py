"""Parse pnpm-lock.yaml to capture resolved package names."""

from __future__ import annotations

from pathlib import Path

import yaml

from .specifier import split_package_path

_DEP_SECTIONS = ("dependencies", "devDependencies", "optionalDependencies")


def parse(path: Path) -> set[str]:
    """Return package names from a pnpm lock file.

    Keys look like "/name/1.2.3" (v5), "/name@1.2.3" (v6) or
    "name@1.2.3(peer@1.0.0)" (v9). Importer sections contribute the names of
    direct dependencies.
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a mapping")

    names: set[str] = set()

    for section in ("packages", "snapshots"):
        pkgs = data.get(section) or {}
        if not isinstance(pkgs, dict):
            continue
        for key in pkgs:
            if not isinstance(key, str):
                continue
            chain = split_package_path(key)
            if chain:
                names.add(chain[0])

    importers = data.get("importers") or {}
    projects = list(importers.values()) if isinstance(importers, dict) else []
    # single-project lockfiles list direct dependencies at the top level
    projects.append(data)
    for project in projects:
        if not isinstance(project, dict):
            continue
        for section in _DEP_SECTIONS:
            deps = project.get(section)
            if isinstance(deps, dict):
                names.update(str(name) for name in deps if name)

    return names
