import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import make_config_error

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "jabuti.toml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class FormatConfig:
    """Formatter configuration."""

    indent_size: int = 2  # spaces per brace depth


@dataclass
class CompletionConfig:
    """Completion configuration."""

    due_date_offset_hours: int = 24  # dueDate suggestion is now + offset


@dataclass
class ServerConfig:
    """Language server configuration."""

    log_level: str = "INFO"


@dataclass
class Settings:
    """
    Tooling settings, read from an optional jabuti.toml.

    Example jabuti.toml:

        [format]
        indent_size = 2

        [completion]
        due_date_offset_hours = 24

        [server]
        log_level = "DEBUG"
    """

    format: FormatConfig = field(default_factory=FormatConfig)
    completion: CompletionConfig = field(default_factory=CompletionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    path: Path | None = None


def _section(data: dict[str, Any], name: str, path: Path) -> dict[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise make_config_error(f"[{name}] must be a table", path)
    return value


def _int_value(table: dict[str, Any], key: str, default: int, section: str, path: Path) -> int:
    value = table.get(key, default)
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise make_config_error(f"{section}.{key} must be an integer, got {value!r}", path)
    return value


def load_settings(path: Path) -> Settings:
    """
    Parse a jabuti.toml file.

    Unknown keys are ignored.

    Raises:
        ConfigError: If the file is not valid TOML or a known key has a bad value
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise make_config_error(f"Invalid TOML: {e}", path) from e

    format_data = _section(data, "format", path)
    completion_data = _section(data, "completion", path)
    server_data = _section(data, "server", path)

    indent_size = _int_value(format_data, "indent_size", 2, "format", path)
    if indent_size < 1:
        raise make_config_error(f"format.indent_size must be >= 1, got {indent_size}", path)

    offset = _int_value(completion_data, "due_date_offset_hours", 24, "completion", path)

    log_level = server_data.get("log_level", "INFO")
    if not isinstance(log_level, str) or log_level.upper() not in _LOG_LEVELS:
        raise make_config_error(
            f"server.log_level must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}",
            path,
        )

    return Settings(
        format=FormatConfig(indent_size=indent_size),
        completion=CompletionConfig(due_date_offset_hours=offset),
        server=ServerConfig(log_level=log_level.upper()),
        path=path,
    )


def find_settings(root: Path) -> Settings:
    """Load ``root/jabuti.toml`` if present, otherwise return defaults."""
    settings_path = root / SETTINGS_FILENAME
    if not settings_path.is_file():
        logger.debug(f"No {SETTINGS_FILENAME} in {root}, using defaults")
        return Settings()
    return load_settings(settings_path)
