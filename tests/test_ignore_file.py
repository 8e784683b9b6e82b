"""Tests for the .cnpignore reader."""

from __future__ import annotations

from cnp.ignore_file import parse_ignore_lines, read_ignore_file


class TestParseIgnoreLines:
    def test_comments_and_blank_lines(self):
        content = "# keep these\nreact\n\n  lodash  \n@types/node # types only\n#eslint\n"
        assert parse_ignore_lines(content) == {"react", "lodash", "@types/node"}

    def test_empty_content(self):
        assert parse_ignore_lines("") == set()


class TestReadIgnoreFile:
    def test_missing_file(self, tmp_path):
        assert read_ignore_file(tmp_path) == set()

    def test_reads_default_name(self, tmp_path):
        (tmp_path / ".cnpignore").write_text("react\nreact-dom\n", encoding="utf-8")
        assert read_ignore_file(tmp_path) == {"react", "react-dom"}

    def test_custom_name(self, tmp_path):
        (tmp_path / ".depsignore").write_text("lodash\n", encoding="utf-8")
        assert read_ignore_file(tmp_path, ".depsignore") == {"lodash"}
        assert read_ignore_file(tmp_path) == set()
