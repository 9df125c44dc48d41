"""Tests for config module."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from pydantic import ValidationError

from claude_run_supervisor.config import (
    SupervisorConfig,
    find_config_file,
    get_config,
    load_config,
)


class TestSupervisorConfig:
    """Tests for SupervisorConfig defaults."""

    def test_defaults(self):
        config = SupervisorConfig()

        assert config.claude_path is None
        assert config.model == "sonnet"
        assert config.verbose is False
        assert config.timeout is None
        assert config.drain_grace == 5.0
        assert config.prompt_file_name == ".claude-prompt.txt"
        assert config.system_prompt_file_name == ".claude-system-prompt.txt"
        assert config.extra_args == []
        assert config.env == {}
        assert "You have exceeded your rate limit" in config.rate_limit_markers
        assert config.context_overflow_markers == ["context_length_exceeded"]
        assert config.diagnostic_noise_patterns == ["node:internal"]

    def test_chunk_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            SupervisorConfig(chunk_size=0)


class TestFindConfigFile:
    """Tests for find_config_file() function."""

    def test_env_var(self, tmp_path, monkeypatch):
        config_file = tmp_path / "custom.yaml"
        monkeypatch.setenv("CLAUDE_SUPERVISOR_CONFIG", str(config_file))

        assert find_config_file() == config_file.resolve()

    def test_current_dir(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CLAUDE_SUPERVISOR_CONFIG", raising=False)
        config_file = tmp_path / "claude-supervisor.yaml"
        config_file.write_text("model: opus\n", encoding="utf-8")

        with patch("claude_run_supervisor.config.Path.cwd", return_value=tmp_path):
            assert find_config_file() == config_file

    def test_parent_dir(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CLAUDE_SUPERVISOR_CONFIG", raising=False)
        config_file = tmp_path / "claude-supervisor.yaml"
        config_file.write_text("model: opus\n", encoding="utf-8")
        nested = tmp_path / "deep" / "nested"
        nested.mkdir(parents=True)

        with patch("claude_run_supervisor.config.Path.cwd", return_value=nested):
            assert find_config_file() == config_file

    def test_not_found(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CLAUDE_SUPERVISOR_CONFIG", raising=False)
        empty = tmp_path / "empty"
        empty.mkdir()

        with patch("claude_run_supervisor.config.Path.cwd", return_value=empty), \
             patch.object(Path, "is_file", return_value=False):
            assert find_config_file() is None


class TestLoadConfig:
    """Tests for load_config() function."""

    def test_load_config_success(self, temp_config_file):
        config = load_config(temp_config_file)

        assert isinstance(config, SupervisorConfig)
        assert config.model == "opus"
        assert config.verbose is True
        assert config.timeout == 600
        assert config.extra_args == ["--max-turns", "50"]
        assert config.env == {"CLAUDE_CODE_MAX_OUTPUT_TOKENS": "32000"}
        assert config.rate_limit_markers == ["usage limit reached"]
        # Untouched fields keep their defaults
        assert config.context_overflow_markers == ["context_length_exceeded"]

    def test_load_config_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            load_config(Path("/non/existent/claude-supervisor.yaml"))

    def test_load_config_invalid_yaml(self, tmp_path):
        invalid = tmp_path / "invalid.yaml"
        invalid.write_text("invalid: yaml: content: [", encoding="utf-8")

        with pytest.raises(yaml.YAMLError):
            load_config(invalid)

    def test_load_config_invalid_values(self, tmp_path):
        invalid = tmp_path / "claude-supervisor.yaml"
        invalid.write_text("timeout: soon\n", encoding="utf-8")

        with pytest.raises(ValidationError):
            load_config(invalid)

    def test_load_config_not_a_mapping(self, tmp_path):
        invalid = tmp_path / "claude-supervisor.yaml"
        invalid.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_config(invalid)

    def test_load_config_empty_file(self, tmp_path):
        empty = tmp_path / "claude-supervisor.yaml"
        empty.write_text("", encoding="utf-8")

        assert load_config(empty) == SupervisorConfig()

    def test_load_config_defaults_without_file(self):
        with patch("claude_run_supervisor.config.find_config_file", return_value=None):
            assert load_config() == SupervisorConfig()

    def test_get_config_reloads(self, temp_config_file, monkeypatch):
        monkeypatch.setenv("CLAUDE_SUPERVISOR_CONFIG", str(temp_config_file))

        assert get_config().model == "opus"

        temp_config_file.write_text("model: haiku\n", encoding="utf-8")

        assert get_config().model == "haiku"
