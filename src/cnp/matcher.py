"""Detect references to npm packages in JavaScript and TypeScript sources.

A ``ReferenceMatcher`` is parameterised by the syntactic import forms it
recognises and builds one compiled pattern per dependency name. The package
name must appear as a whole quoted module specifier, optionally followed by a
sub-path: ``"lodash"`` and ``"lodash/fp"`` reference ``lodash`` while
``"lodash-es"`` does not.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable


class ImportForm(str, enum.Enum):
    """Syntactic forms that count as a reference to a package."""

    # import x from "p", import { x } from "p", import * as x from "p",
    # import x, { y } from "p", import type { T } from "p", export { x } from "p"
    FROM = "from"
    # require("p")
    REQUIRE = "require"
    # import "p"
    SIDE_EFFECT = "side-effect"
    # import("p")
    DYNAMIC = "dynamic"


_QUOTE = "['\"`]"

_FORM_TEMPLATES: dict[ImportForm, str] = {
    ImportForm.FROM: r"\b(?:import|export)\b[^'\"`;]*?\bfrom\s*{token}",
    ImportForm.REQUIRE: r"\brequire\s*\(\s*{token}\s*\)",
    ImportForm.SIDE_EFFECT: r"\bimport\s*{token}",
    ImportForm.DYNAMIC: r"\bimport\s*\(\s*{token}\s*\)",
}


def _token(dependency: str) -> str:
    return _QUOTE + re.escape(dependency) + r"(?:/[^'\"`\s]*)?" + _QUOTE


def build_pattern(dependency: str, forms: Iterable[ImportForm]) -> re.Pattern[str]:
    """Compile a pattern matching any of ``forms`` importing ``dependency``."""
    token = _token(dependency)
    alternatives = [_FORM_TEMPLATES[form].format(token=token) for form in forms]
    if not alternatives:
        raise ValueError("At least one import form is required")
    return re.compile("|".join(f"(?:{alt})" for alt in alternatives))


class ReferenceMatcher:
    """Match package references in file content.

    Patterns are compiled lazily and cached per dependency name, so a single
    matcher can be shared across every file of a scan.
    """

    def __init__(self, forms: Iterable[ImportForm] | None = None) -> None:
        self.forms: tuple[ImportForm, ...] = tuple(forms) if forms is not None else tuple(ImportForm)
        if not self.forms:
            raise ValueError("At least one import form is required")
        self._patterns: dict[str, re.Pattern[str]] = {}

    def pattern_for(self, dependency: str) -> re.Pattern[str]:
        pattern = self._patterns.get(dependency)
        if pattern is None:
            pattern = build_pattern(dependency, self.forms)
            self._patterns[dependency] = pattern
        return pattern

    def matches(self, content: str, dependency: str) -> bool:
        return self.pattern_for(dependency).search(content) is not None

    def find_dependencies(self, content: str, dependencies: Iterable[str]) -> set[str]:
        """Return the subset of ``dependencies`` referenced in ``content``."""
        return {dep for dep in dependencies if dep and self.matches(content, dep)}


def base_package(specifier: str) -> str | None:
    """Return the package a module specifier belongs to.

    ``@scope/pkg/sub/path`` -> ``@scope/pkg``, ``pkg/sub`` -> ``pkg``.
    Relative, absolute and ``node:`` specifiers are not packages.
    """
    spec = specifier.strip()
    if not spec or spec.startswith((".", "/", "node:")):
        return None
    parts = spec.split("/")
    if spec.startswith("@"):
        if len(parts) < 2 or not parts[1]:
            return None
        return f"{parts[0]}/{parts[1]}"
    return parts[0]
