"""Tests for package manager detection and command building."""

from __future__ import annotations

import pytest

from cnp.errors import UnsupportedPackageManagerError
from cnp.package_manager import detect_package_manager, install_command, remove_command


class TestDetectPackageManager:
    @pytest.mark.parametrize(
        ("lockfiles", "expected"),
        [
            ((), "npm"),
            (("package-lock.json",), "npm"),
            (("yarn.lock",), "yarn"),
            (("pnpm-lock.yaml",), "pnpm"),
            (("bun.lock",), "bun"),
            (("bun.lockb",), "bun"),
            (("yarn.lock", "pnpm-lock.yaml"), "pnpm"),
            (("bun.lock", "yarn.lock"), "yarn"),
        ],
    )
    def test_detection(self, tmp_path, lockfiles, expected):
        for name in lockfiles:
            (tmp_path / name).write_text("")
        assert detect_package_manager(tmp_path) == expected


class TestCommands:
    @pytest.mark.parametrize(
        ("manager", "expected"),
        [
            ("npm", ["npm", "uninstall", "react"]),
            ("pnpm", ["pnpm", "remove", "react"]),
            ("yarn", ["yarn", "remove", "react"]),
            ("bun", ["bun", "remove", "react"]),
        ],
    )
    def test_remove_command(self, manager, expected):
        assert remove_command(manager, "react") == expected

    def test_unknown_manager(self):
        with pytest.raises(UnsupportedPackageManagerError, match="deno"):
            remove_command("deno", "react")

    def test_install_command(self):
        assert install_command("pnpm") == ["pnpm", "install"]
