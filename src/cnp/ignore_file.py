"""Read the user-authored list of dependencies that are never reported unused."""

from __future__ import annotations

from pathlib import Path

import structlog

log = structlog.get_logger("cnp.ignore_file")

DEFAULT_IGNORE_FILE = ".cnpignore"


def parse_ignore_lines(content: str) -> set[str]:
    """Return the names listed in ignore-file content.

    Blank lines and ``#`` comments (full-line or trailing) are skipped.
    """
    names: set[str] = set()
    for raw in content.splitlines():
        line = raw.split("#", 1)[0].strip()
        if line:
            names.add(line)
    return names


def read_ignore_file(root: Path, name: str = DEFAULT_IGNORE_FILE) -> set[str]:
    """Return the ignored dependency names for the project at ``root``.

    A missing file yields an empty set.
    """
    path = root / name
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return set()
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("ignore_file.unreadable", path=str(path), error=str(exc))
        return set()
    return parse_ignore_lines(content)
