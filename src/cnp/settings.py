"""Settings loader for the dependency checker.

Settings are read from a JSON file (default: ``.cnprc.json`` in the project
root) and validated against ``SETTINGS_SCHEMA``. Every key is optional; keys
that are not present keep the defaults defined on ``Settings``.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from .errors import ConfigError
from .matcher import ImportForm


DEFAULT_CONFIG_NAME = ".cnprc.json"
CONFIG_PATH_ENV_VAR = "CNP_CONFIG"
TSCONFIG_NAME = "tsconfig.json"

DEFAULT_EXTENSIONS = ("js", "ts", "jsx", "tsx", "mdx", "cjs", "mjs")
DEFAULT_TYPESCRIPT_EXTENSIONS = ("ts", "tsx")
DEFAULT_IGNORE_FOLDERS = (
    "node_modules",
    "dist",
    "build",
    "public",
    ".next",
    ".git",
    "coverage",
    "cypress",
    "test",
    "output",
)

_STRING_LIST = {"type": "array", "items": {"type": "string", "minLength": 1}}

SETTINGS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "manifest": {"type": "string", "minLength": 1},
        "ignoreFile": {"type": "string", "minLength": 1},
        "extensions": {**_STRING_LIST, "minItems": 1},
        "typescriptExtensions": _STRING_LIST,
        "ignoreFolders": _STRING_LIST,
        "dependencySections": {**_STRING_LIST, "minItems": 1},
        "importForms": {
            "type": "array",
            "minItems": 1,
            "items": {"enum": [form.value for form in ImportForm]},
        },
        "interactiveDefault": {"enum": ["none", "all"]},
        "typescriptCheck": {"type": "boolean"},
        "tscCommand": {"type": ["string", "null"]},
    },
}

# JSON key -> Settings attribute
_FIELD_NAMES = {
    "manifest": "manifest_name",
    "ignoreFile": "ignore_file_name",
    "extensions": "extensions",
    "typescriptExtensions": "typescript_extensions",
    "ignoreFolders": "ignore_folders",
    "dependencySections": "dependency_sections",
    "importForms": "import_forms",
    "interactiveDefault": "interactive_default",
    "typescriptCheck": "typescript_check",
    "tscCommand": "tsc_command",
}


@dataclass(slots=True, frozen=True)
class Settings:
    """Scan and uninstall settings for a single run."""

    manifest_name: str = "package.json"
    ignore_file_name: str = ".cnpignore"
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    typescript_extensions: tuple[str, ...] = DEFAULT_TYPESCRIPT_EXTENSIONS
    ignore_folders: tuple[str, ...] = DEFAULT_IGNORE_FOLDERS
    dependency_sections: tuple[str, ...] = ("dependencies",)
    import_forms: tuple[ImportForm, ...] = field(default_factory=lambda: tuple(ImportForm))
    interactive_default: str = "none"
    typescript_check: bool = True
    tsc_command: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a validated settings document."""
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _FIELD_NAMES[key]
            if name == "import_forms":
                value = tuple(ImportForm(v) for v in value)
            elif isinstance(value, list):
                value = tuple(_strip_dots(value)) if "extensions" in name else tuple(value)
            values[name] = value
        return cls(**values)

    def with_sections(self, *sections: str) -> Settings:
        """Return a copy that also declares the given manifest sections."""
        merged = list(self.dependency_sections)
        merged.extend(s for s in sections if s not in merged)
        return replace(self, dependency_sections=tuple(merged))

    def manifest_path(self, root: Path) -> Path:
        return root / self.manifest_name


def _strip_dots(extensions: Iterable[str]) -> list[str]:
    return [ext.lstrip(".") for ext in extensions]


def _format_errors(errors: Iterable[Any]) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def _resolve_config_path(root: Path, path: Path | str | None) -> tuple[Path, bool]:
    """Resolve the settings file path and whether it was explicitly requested.

    Priority:
    1. Explicit path argument
    2. CNP_CONFIG environment variable
    3. Default path (.cnprc.json in the project root)
    """
    if path is not None:
        return Path(path), True

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path), True

    return root / DEFAULT_CONFIG_NAME, False


def load_settings(root: Path, path: Path | str | None = None) -> Settings:
    """Load and validate settings for the project at ``root``.

    Args:
        root: The project root.
        path: Optional path to the settings file. If not provided, uses the
            CNP_CONFIG env var or falls back to ``.cnprc.json`` in ``root``.

    Returns:
        A Settings object. Defaults are returned when no settings file was
        requested and the default file does not exist.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path, explicit = _resolve_config_path(root, path)

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return Settings()

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    validator = Draft202012Validator(SETTINGS_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise ConfigError(f"Invalid configuration in {config_path}:\n" + _format_errors(errors))

    return Settings.from_dict(data)


def is_typescript_project(root: Path) -> bool:
    """Return True if ``root`` holds a tsconfig.json that resolves to a file."""
    return (root / TSCONFIG_NAME).is_file()
