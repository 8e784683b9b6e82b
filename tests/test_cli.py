"""Tests for the command line entrypoint."""

from __future__ import annotations

import json

import pytest
from structlog.testing import capture_logs

from cnp import cli

MANIFEST = {"dependencies": {"react": "^18.0.0", "lodash": "^4.17.21"}}
SOURCES = {"src/index.js": "import React from 'react';\n"}


@pytest.fixture(autouse=True)
def _captured_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda verbosity=0: None)
    # keep log lines out of the captured report streams
    with capture_logs() as logs:
        yield logs


class TestMain:
    def test_report(self, make_project, capsys):
        root = make_project(MANIFEST, SOURCES)

        assert cli.main(["--root", str(root)]) == 0

        out = capsys.readouterr().out
        assert "Dependency Usage Report" in out
        assert "- lodash" in out
        assert "--dry-run" in out

    def test_json_output(self, make_project, capsys):
        root = make_project(MANIFEST, SOURCES)

        assert cli.main(["--root", str(root), "--json"]) == 0

        captured = capsys.readouterr()
        data = json.loads(captured.out)
        assert data["unused"] == ["lodash"]
        assert data["used"] == ["react"]
        assert "Scanning complete!" in captured.err

    def test_dry_run(self, make_project, capsys):
        root = make_project(MANIFEST, SOURCES)
        manifest_before = (root / "package.json").read_text()

        assert cli.main(["--root", str(root), "--dry-run"]) == 0

        out = capsys.readouterr().out
        assert "Dry-run mode: No changes will be made." in out
        assert (root / "package.json").read_text() == manifest_before

    def test_include_dev(self, make_project, capsys):
        root = make_project({**MANIFEST, "devDependencies": {"eslint": "^8.0.0"}}, SOURCES)
        assert cli.main(["--root", str(root), "--json", "--include-dev"]) == 0
        assert json.loads(capsys.readouterr().out)["unused"] == ["eslint", "lodash"]

    def test_missing_manifest(self, make_project, capsys):
        root = make_project(files=SOURCES)
        assert cli.main(["--root", str(root)]) == 1
        assert "package.json` not found." in capsys.readouterr().err

    def test_json_stdout_holds_only_the_document(self, make_project, capsys, _captured_logging):
        root = make_project(MANIFEST, SOURCES)

        assert cli.main(["--root", str(root), "--json", "-v"]) == 0

        out = capsys.readouterr().out
        assert out.startswith("{")
        assert json.loads(out)["hasUnused"] is True
        assert "scanner.done" in [entry["event"] for entry in _captured_logging]

    def test_invalid_settings(self, make_project, capsys):
        root = make_project(MANIFEST, {**SOURCES, ".cnprc.json": '{"importForms": []}'})
        assert cli.main(["--root", str(root)]) == 1
        assert "importForms" in capsys.readouterr().err

    def test_explicit_config(self, make_project, tmp_path, capsys):
        root = make_project(MANIFEST, SOURCES)
        config = tmp_path / "cnp.json"
        config.write_text(json.dumps({"ignoreFolders": ["src"]}))

        assert cli.main(["--root", str(root), "--json", "--config", str(config)]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["unused"] == ["lodash", "react"]

    def test_modes_are_mutually_exclusive(self):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["--dry-run", "--all"])
        assert excinfo.value.code == 2
