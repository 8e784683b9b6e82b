"""Shared pytest fixtures for check-node-packages tests."""

from __future__ import annotations

import io
import json
import subprocess
import textwrap
from pathlib import Path

import pytest
from rich.console import Console


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv("CNP_CONFIG", raising=False)


@pytest.fixture
def make_project(tmp_path):
    """Create a project tree; ``files`` maps relative paths to content."""

    def _make(
        manifest: dict | None = None,
        files: dict[str, str] | None = None,
        name: str = "project",
    ) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        if manifest is not None:
            (root / "package.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        for rel, content in (files or {}).items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return root

    return _make


@pytest.fixture
def console():
    return Console(file=io.StringIO(), force_terminal=False, width=200, color_system=None)


class FakeRunner:
    """Stand-in for subprocess.run recording every command."""

    def __init__(self, failures: tuple[str, ...] = (), raises: type[Exception] | None = None):
        self.failures = failures
        self.raises = raises
        self.calls: list[tuple[list[str], dict]] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((list(cmd), kwargs))
        if self.raises is not None:
            raise self.raises(f"cannot run {cmd[0]}")
        code = 1 if cmd[-1] in self.failures else 0
        return subprocess.CompletedProcess(cmd, code, stdout="", stderr="boom" if code else "")

    @property
    def commands(self) -> list[list[str]]:
        return [cmd for cmd, _ in self.calls]


@pytest.fixture
def fake_runner():
    return FakeRunner
