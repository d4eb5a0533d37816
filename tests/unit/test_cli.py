"""Tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from jabuti.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def messy_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.jabuti"
    path.write_text('contract C{\nparties{\napplication="A"\n}\n}\n')
    return path


FORMATTED = 'contract C {\n  parties {\n    application = "A"\n  }\n}\n'


class TestVersion:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "Jabuti version" in result.output


class TestFormatCommand:
    def test_prints_formatted_text(self, cli_runner: CliRunner, messy_file: Path) -> None:
        result = cli_runner.invoke(app, ["format", str(messy_file)])
        assert result.exit_code == 0
        assert result.output == FORMATTED
        assert messy_file.read_text() != FORMATTED

    def test_check_fails_on_unformatted(self, cli_runner: CliRunner, messy_file: Path) -> None:
        result = cli_runner.invoke(app, ["format", "--check", str(messy_file)])
        assert result.exit_code == 1
        assert "Would reformat" in result.output

    def test_check_passes_on_formatted(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "ok.jabuti"
        path.write_text(FORMATTED)
        result = cli_runner.invoke(app, ["format", "--check", str(path)])
        assert result.exit_code == 0

    def test_write_in_place(self, cli_runner: CliRunner, messy_file: Path) -> None:
        result = cli_runner.invoke(app, ["format", "--write", str(messy_file)])
        assert result.exit_code == 0
        assert messy_file.read_text() == FORMATTED

    def test_indent_from_settings_next_to_file(
        self, cli_runner: CliRunner, messy_file: Path
    ) -> None:
        (messy_file.parent / "jabuti.toml").write_text("[format]\nindent_size = 4\n")
        result = cli_runner.invoke(app, ["format", str(messy_file)])
        assert result.exit_code == 0
        assert "\n    parties {\n" in result.output

    def test_explicit_config(self, cli_runner: CliRunner, messy_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "custom.toml"
        config.write_text("[format]\nindent_size = 3\n")
        result = cli_runner.invoke(app, ["format", "--config", str(config), str(messy_file)])
        assert result.exit_code == 0
        assert "\n   parties {\n" in result.output

    def test_bad_config(self, cli_runner: CliRunner, messy_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "bad.toml"
        config.write_text("[format]\nindent_size = 0\n")
        result = cli_runner.invoke(app, ["format", "--config", str(config), str(messy_file)])
        assert result.exit_code == 1

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["format", str(tmp_path / "nope.jabuti")])
        assert result.exit_code == 1


class TestOutlineCommand:
    def test_outline(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "c.jabuti"
        path.write_text(FORMATTED)
        result = cli_runner.invoke(app, ["outline", str(path)])
        assert result.exit_code == 0
        assert "contract" in result.output
        assert "parties" in result.output
        assert "application" in result.output
        # contract, parties, application
        assert "3 symbols" in result.output

    def test_empty_document(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "empty.jabuti"
        path.write_text("")
        result = cli_runner.invoke(app, ["outline", str(path)])
        assert result.exit_code == 0
        assert "empty" in result.output


class TestLspCommands:
    def test_lsp_check(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["lsp", "check"])
        assert result.exit_code == 0
        assert "All LSP dependencies installed." in result.output

    def test_lsp_without_subcommand_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["lsp"])
        assert "run" in result.output

    def test_lsp_run_tcp(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        from jabuti.lsp.server import server

        calls = []

        def fake_start_tcp(host: str, port: int) -> None:
            calls.append((host, port))
            raise KeyboardInterrupt

        monkeypatch.setattr(server, "start_tcp", fake_start_tcp)
        result = cli_runner.invoke(app, ["lsp", "run", "--tcp", "--port", "9000"])
        assert result.exit_code == 0
        assert calls == [("127.0.0.1", 9000)]
        assert "LSP server stopped." in result.output

    def test_lsp_run_failure_exits_1(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from jabuti.lsp.server import server

        def broken_start_io() -> None:
            raise RuntimeError("stdio unavailable")

        monkeypatch.setattr(server, "start_io", broken_start_io)
        result = cli_runner.invoke(app, ["lsp", "run"])
        assert result.exit_code == 1
        assert "stdio unavailable" in result.output
