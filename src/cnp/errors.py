"""Error types raised by the dependency checker."""

from __future__ import annotations


class CnpError(RuntimeError):
    """Base error for failures that prevent an analysis from running."""


class ManifestError(CnpError):
    """Raised when the project manifest cannot be used."""


class ManifestNotFoundError(ManifestError):
    """Raised when the manifest file does not exist."""


class ManifestParseError(ManifestError):
    """Raised when the manifest is not a valid JSON object."""


class ConfigError(CnpError):
    """Raised when the settings file cannot be loaded or is invalid."""


class UnsupportedPackageManagerError(ValueError):
    """Raised when no uninstall command is known for a package manager."""
