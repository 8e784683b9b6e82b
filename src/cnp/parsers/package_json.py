"""Parse package.json and extract declared dependencies."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..errors import ManifestNotFoundError, ManifestParseError


def read_manifest(path: Path) -> dict[str, Any]:
    """Return the parsed manifest document.

    Raises:
        ManifestNotFoundError: the file does not exist.
        ManifestParseError: the content is not a JSON object.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestNotFoundError(f"Error: `{path}` not found.") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestParseError(f"Error: Failed to read {path.name}: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(f"Error: Invalid JSON in {path.name}.") from exc

    if not isinstance(data, dict):
        raise ManifestParseError(f"Error: {path.name} must contain a JSON object.")
    return data


def declared_dependencies(
    manifest: dict[str, Any],
    sections: Iterable[str] = ("dependencies",),
) -> set[str]:
    """Return dependency names declared in the given manifest sections.

    Sections that are missing or not objects contribute nothing.
    """
    names: set[str] = set()
    for section in sections:
        deps = manifest.get(section)
        if isinstance(deps, dict):
            names.update(name for name in deps if name)
    return names
