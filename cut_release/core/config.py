"""Typed loading of the optional ``.cut-release.toml`` project file.

Example::

    remote = "upstream"
    default_tag = "latest"

    [commands]
    npm = "pnpm"
    git = "git"

    [update]
    check = false
    timeout = 2.0

    [output]
    max_bytes = 10485760
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_float, get_int, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_DIST_TAG",
    "DEFAULT_REMOTE",
    "CommandsConfig",
    "Config",
    "ConfigError",
    "OutputConfig",
    "UpdateConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = ".cut-release.toml"

DEFAULT_REMOTE = "origin"
DEFAULT_DIST_TAG = "latest"
DEFAULT_UPDATE_TIMEOUT = 2.0
DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the project config cannot be read or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class CommandsConfig:
    """Executables used to build the release plan."""

    npm: str = "npm"
    git: str = "git"


@dataclass(frozen=True, slots=True)
class UpdateConfig:
    """Self-update probe settings."""

    check: bool = True
    timeout: float = DEFAULT_UPDATE_TIMEOUT


@dataclass(frozen=True, slots=True)
class OutputConfig:
    max_bytes: int = DEFAULT_MAX_OUTPUT_BYTES


@dataclass(frozen=True, slots=True)
class Config:
    """Project-level defaults; CLI flags always win over these."""

    remote: str = DEFAULT_REMOTE
    default_tag: str = DEFAULT_DIST_TAG
    commands: CommandsConfig = field(default_factory=CommandsConfig)
    update: UpdateConfig = field(default_factory=UpdateConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        commands: StrDict = get_table(data, "commands") or {}
        update: StrDict = get_table(data, "update") or {}
        output: StrDict = get_table(data, "output") or {}

        check = get_bool(update, "check")
        timeout = get_float(update, "timeout")
        max_bytes = get_int(output, "max_bytes")
        if timeout is not None and timeout <= 0:
            raise ValueError("update.timeout must be > 0")
        if max_bytes is not None and max_bytes <= 0:
            raise ValueError("output.max_bytes must be > 0")

        return cls(
            remote=get_str(data, "remote") or DEFAULT_REMOTE,
            default_tag=get_str(data, "default_tag") or DEFAULT_DIST_TAG,
            commands=CommandsConfig(
                npm=get_str(commands, "npm") or "npm",
                git=get_str(commands, "git") or "git",
            ),
            update=UpdateConfig(
                check=True if check is None else check,
                timeout=timeout or DEFAULT_UPDATE_TIMEOUT,
            ),
            output=OutputConfig(max_bytes=max_bytes or DEFAULT_MAX_OUTPUT_BYTES),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and validate ``path``.

    Args:
        path: Path to a ``.cut-release.toml`` file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(project_root: Path) -> Result[Config, ConfigError]:
    """Load ``<project_root>/.cut-release.toml`` or return defaults if absent.

    A file that exists but cannot be parsed is reported as an error.
    """
    path = project_root / CONFIG_FILENAME
    if not path.exists():
        return Ok(Config())
    return load_config(path)
