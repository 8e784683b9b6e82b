"""Parse bun.lock (the text lockfile introduced in bun 1.1.39).

The file is JSON with trailing commas allowed. The binary ``bun.lockb``
format is not supported.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from .specifier import split_package_path

_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_DEP_SECTIONS = ("dependencies", "devDependencies", "optionalDependencies", "peerDependencies")


def parse(path: Path) -> set[str]:
    """Return package names from a bun text lock file."""
    content = _TRAILING_COMMA_RE.sub(r"\1", path.read_text(encoding="utf-8"))
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object")

    names: set[str] = set()

    packages = data.get("packages")
    if isinstance(packages, dict):
        for key in packages:
            # nested installs are keyed "parent/child"
            chain = split_package_path(key)
            if chain:
                names.add(chain[-1])

    workspaces = data.get("workspaces")
    if isinstance(workspaces, dict):
        for workspace in workspaces.values():
            if not isinstance(workspace, dict):
                continue
            for section in _DEP_SECTIONS:
                deps = workspace.get(section)
                if isinstance(deps, dict):
                    names.update(name for name in deps if name)

    return names
