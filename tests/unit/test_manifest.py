"""Tests for jabuti.toml settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from jabuti.core.errors import ConfigError, ErrorContext, JabutiError
from jabuti.core.manifest import SETTINGS_FILENAME, Settings, find_settings, load_settings


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / SETTINGS_FILENAME
    path.write_text(content)
    return path


class TestLoadSettings:
    def test_full_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "[format]\nindent_size = 4\n\n"
            "[completion]\ndue_date_offset_hours = 48\n\n"
            '[server]\nlog_level = "debug"\n',
        )
        settings = load_settings(path)
        assert settings.format.indent_size == 4
        assert settings.completion.due_date_offset_hours == 48
        assert settings.server.log_level == "DEBUG"
        assert settings.path == path

    def test_missing_sections_use_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(_write(tmp_path, "[format]\nindent_size = 3\n"))
        assert settings.format.indent_size == 3
        assert settings.completion.due_date_offset_hours == 24
        assert settings.server.log_level == "INFO"

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        settings = load_settings(_write(tmp_path, "[format]\ncolor = true\n[extra]\nx = 1\n"))
        assert settings.format.indent_size == 2

    def test_invalid_toml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_settings(_write(tmp_path, "[format\n"))

    def test_indent_size_must_be_positive(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="indent_size must be >= 1"):
            load_settings(_write(tmp_path, "[format]\nindent_size = 0\n"))

    def test_bool_is_not_an_integer(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="must be an integer"):
            load_settings(_write(tmp_path, "[completion]\ndue_date_offset_hours = true\n"))

    def test_section_must_be_table(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match=r"\[format\] must be a table"):
            load_settings(_write(tmp_path, "format = 3\n"))

    def test_bad_log_level(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="log_level"):
            load_settings(_write(tmp_path, '[server]\nlog_level = "loud"\n'))

    def test_error_names_the_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[format]\nindent_size = -1\n")
        with pytest.raises(ConfigError) as exc_info:
            load_settings(path)
        assert exc_info.value.context.file == path
        assert str(path) in str(exc_info.value)


class TestFindSettings:
    def test_defaults_when_absent(self, tmp_path: Path) -> None:
        settings = find_settings(tmp_path)
        assert settings == Settings()
        assert settings.path is None

    def test_loads_when_present(self, tmp_path: Path) -> None:
        _write(tmp_path, "[format]\nindent_size = 8\n")
        assert find_settings(tmp_path).format.indent_size == 8


class TestErrorContext:
    def test_location_only(self) -> None:
        assert ErrorContext(file=Path("a.toml")).format() == "a.toml"

    def test_line_and_snippet(self) -> None:
        context = ErrorContext(file=Path("a.toml"), line=2, column=3, snippet="x = ")
        assert context.format() == "a.toml:2:3\n    x = \n      ^^^"

    def test_base_error_without_context(self) -> None:
        error = JabutiError("boom")
        assert str(error) == "boom"
        assert error.context is None
