"""Configuration models for the Claude Run Supervisor."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

CONFIG_FILE_NAME = "claude-supervisor.yaml"


class SupervisorConfig(BaseModel):
    """Root configuration model."""

    claude_path: Optional[str] = Field(
        default=None,
        description="Explicit path to the claude executable (searched in PATH if unset)",
    )
    model: str = Field(default="sonnet", description="Default model passed to claude")
    verbose: bool = Field(
        default=False,
        description="Log verbose progress lines (tool calls, session ids, resources) at INFO",
    )
    timeout: Optional[float] = Field(
        default=None, description="Default run timeout in seconds"
    )
    drain_grace: float = Field(
        default=5.0,
        description="Seconds to wait for output to drain after killing a timed out process",
    )
    chunk_size: int = Field(
        default=64 * 1024, gt=0, description="Read size for the child's output pipes"
    )
    prompt_file_name: str = Field(
        default=".claude-prompt.txt", description="File the prompt is written to"
    )
    system_prompt_file_name: str = Field(
        default=".claude-system-prompt.txt",
        description="File the system prompt is written to",
    )
    extra_args: list[str] = Field(
        default_factory=list, description="Additional arguments appended for every run"
    )
    env: dict[str, str] = Field(
        default_factory=dict, description="Environment overrides for the child process"
    )
    rate_limit_markers: list[str] = Field(
        default_factory=lambda: [
            "rate_limit_exceeded",
            "You have exceeded your rate limit",
            "rate limit",
        ],
        description="Phrases in the last message that mean a usage limit was hit",
    )
    context_overflow_markers: list[str] = Field(
        default_factory=lambda: ["context_length_exceeded"],
        description="Phrases in the last message that mean the context was exceeded",
    )
    diagnostic_noise_patterns: list[str] = Field(
        default_factory=lambda: ["node:internal"],
        description="Unparseable lines containing these are dropped instead of logged",
    )


def find_config_file() -> Optional[Path]:
    """Find the configuration file.

    Search order:
    1. CLAUDE_SUPERVISOR_CONFIG environment variable
    2. claude-supervisor.yaml in the current directory or any parent
    """
    env_path = os.environ.get("CLAUDE_SUPERVISOR_CONFIG")
    if env_path:
        return Path(env_path).resolve()

    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate

    return None


def load_config(config_path: Optional[Path] = None) -> SupervisorConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the config file. If None, will search for it;
            when nothing is found the defaults are used.

    Returns:
        Loaded SupervisorConfig object.

    Raises:
        FileNotFoundError: config_path (or CLAUDE_SUPERVISOR_CONFIG) does not exist.
        yaml.YAMLError: the file is not valid YAML.
        pydantic.ValidationError: the values do not fit the model.
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            return SupervisorConfig()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return SupervisorConfig(**data)


def get_config() -> SupervisorConfig:
    """Get the configuration (always reloads from disk)."""
    return load_config()
