"""Tests for cut_release.core.config module."""

from __future__ import annotations

from pathlib import Path

from cut_release.core.config import (
    CONFIG_FILENAME,
    DEFAULT_MAX_OUTPUT_BYTES,
    Config,
    load_config,
    load_config_or_default,
)
from cut_release.core.result import Err, Ok


class TestLoadConfigOrDefault:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        result = load_config_or_default(tmp_path)

        assert isinstance(result, Ok)
        config = result.value
        assert config == Config()
        assert config.remote == "origin"
        assert config.default_tag == "latest"
        assert config.commands.npm == "npm"
        assert config.update.check is True
        assert config.output.max_bytes == DEFAULT_MAX_OUTPUT_BYTES

    def test_full_file(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(
            'remote = "upstream"\n'
            'default_tag = "stable"\n'
            "[commands]\n"
            'npm = "pnpm"\n'
            "[update]\n"
            "check = false\n"
            "timeout = 5\n"
            "[output]\n"
            "max_bytes = 2048\n",
            encoding="utf-8",
        )

        result = load_config_or_default(tmp_path)

        assert isinstance(result, Ok)
        config = result.value
        assert config.remote == "upstream"
        assert config.default_tag == "stable"
        assert config.commands.npm == "pnpm"
        assert config.commands.git == "git"
        assert config.update.check is False
        assert config.update.timeout == 5.0
        assert config.output.max_bytes == 2048

    def test_broken_file_is_an_error(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("remote = [", encoding="utf-8")

        result = load_config_or_default(tmp_path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == tmp_path / CONFIG_FILENAME


class TestLoadConfig:
    def test_missing_path(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_rejects_non_positive_timeout(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[update]\ntimeout = 0\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "update.timeout" in result.error.message

    def test_rejects_non_positive_max_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[output]\nmax_bytes = -1\n", encoding="utf-8")

        assert isinstance(load_config(path), Err)

    def test_blank_strings_fall_back_to_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text('remote = "  "\n[commands]\ngit = ""\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.remote == "origin"
        assert result.value.commands.git == "git"

    def test_wrong_types_are_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text('commands = "npm"\n[output]\nmax_bytes = true\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.commands.npm == "npm"
        assert result.value.output.max_bytes == DEFAULT_MAX_OUTPUT_BYTES
