"""Tests for lockfile detection and required-set resolution."""

from __future__ import annotations

import json

import pytest
from structlog.testing import capture_logs

from cnp.lockfiles import LockfileFormat, detect_lockfiles, resolve_required


class TestDetectLockfiles:
    def test_none_present(self, tmp_path):
        assert detect_lockfiles(tmp_path) == []
        assert resolve_required(tmp_path) == set()

    def test_detection_order(self, tmp_path):
        for name in ("bun.lock", "pnpm-lock.yaml", "package-lock.json"):
            (tmp_path / name).write_text("{}")
        assert detect_lockfiles(tmp_path) == [
            LockfileFormat.PACKAGE_LOCK,
            LockfileFormat.PNPM,
            LockfileFormat.BUN,
        ]

    def test_directory_named_like_lockfile_is_ignored(self, tmp_path):
        (tmp_path / "yarn.lock").mkdir()
        assert detect_lockfiles(tmp_path) == []


class TestResolveRequired:
    def test_package_lock(self, tmp_path):
        (tmp_path / "package-lock.json").write_text(
            json.dumps({"dependencies": {"react": {"version": "18.2.0"}}})
        )
        assert resolve_required(tmp_path) == {"react"}

    def test_pnpm_lock(self, tmp_path):
        (tmp_path / "pnpm-lock.yaml").write_text(
            "packages:\n"
            "  /react/18.2.0:\n"
            "    resolution: {integrity: sha512-x}\n"
            "  /@vercel/analytics/1.0.0:\n"
            "    resolution: {integrity: sha512-y}\n"
        )
        assert resolve_required(tmp_path) == {"react", "@vercel/analytics"}

    def test_yarn_lock(self, tmp_path):
        (tmp_path / "yarn.lock").write_text('react@^18.2.0:\n  version "18.2.0"\n')
        assert resolve_required(tmp_path) == {"react"}

    def test_bun_lock(self, tmp_path):
        (tmp_path / "bun.lock").write_text(
            json.dumps({"packages": {"react": "18.2.0", "@vercel/analytics": "1.0.0"}})
        )
        assert resolve_required(tmp_path) == {"react", "@vercel/analytics"}

    def test_multiple_lockfiles_yield_empty_set(self, tmp_path):
        (tmp_path / "package-lock.json").write_text(
            json.dumps({"dependencies": {"react": {"version": "18.2.0"}}})
        )
        (tmp_path / "yarn.lock").write_text('react@^18.2.0:\n  version "18.2.0"\n')

        with capture_logs() as logs:
            assert resolve_required(tmp_path) == set()

        warnings = [entry for entry in logs if entry["event"] == "lockfile.ambiguous"]
        assert len(warnings) == 1
        assert warnings[0]["log_level"] == "warning"
        assert warnings[0]["lockfiles"] == ["package-lock.json", "yarn.lock"]

    @pytest.mark.parametrize(
        ("name", "content"),
        [
            ("package-lock.json", "invalid json"),
            ("package-lock.json", ""),
            ("package-lock.json", "[]"),
            ("pnpm-lock.yaml", "packages: [unclosed"),
            ("bun.lock", "{ nope"),
        ],
    )
    def test_unparseable_lockfile_yields_empty_set(self, tmp_path, name, content):
        (tmp_path / name).write_text(content)
        with capture_logs() as logs:
            assert resolve_required(tmp_path) == set()
        assert [entry["event"] for entry in logs] == ["lockfile.unparseable"]

    def test_empty_yarn_lock(self, tmp_path):
        (tmp_path / "yarn.lock").write_text("")
        assert resolve_required(tmp_path) == set()

    def test_binary_bun_lockfile_is_unsupported(self, tmp_path):
        (tmp_path / "bun.lockb").write_bytes(b"\x00\x01binary")
        with capture_logs() as logs:
            assert resolve_required(tmp_path) == set()
        assert logs[0]["event"] == "lockfile.unsupported"
        assert logs[0]["lockfile"] == "bun.lockb"

    def test_binary_format_cannot_be_parsed_directly(self, tmp_path):
        assert not LockfileFormat.BUN_BINARY.supported
        with pytest.raises(ValueError):
            LockfileFormat.BUN_BINARY.parse(tmp_path)


class TestDigitLeadingNames:
    @pytest.mark.parametrize(
        ("name", "content"),
        [
            (
                "package-lock.json",
                json.dumps({"packages": {"node_modules/7zip-bin": {"version": "5.2.0"}}}),
            ),
            (
                "package-lock.json",
                json.dumps({"dependencies": {"7zip-bin": {"version": "5.2.0"}}}),
            ),
            ("yarn.lock", '7zip-bin@^5.2.0:\n  version "5.2.0"\n'),
            ("pnpm-lock.yaml", "packages:\n  /7zip-bin/5.2.0:\n    resolution: {integrity: sha512-x}\n"),
            ("pnpm-lock.yaml", "packages:\n  /7zip-bin@5.2.0:\n    resolution: {integrity: sha512-x}\n"),
            ("pnpm-lock.yaml", "packages:\n  7zip-bin@5.2.0:\n    resolution: {integrity: sha512-x}\n"),
            ("bun.lock", '{"packages": {"7zip-bin": ["7zip-bin@5.2.0", "", {}, "sha512-x"],}}'),
        ],
    )
    def test_name_starting_with_digit_is_kept(self, tmp_path, name, content):
        (tmp_path / name).write_text(content)
        assert resolve_required(tmp_path) == {"7zip-bin"}
