"""Configuration management: TOML config at ~/.config/kakashell/kaka.toml."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import tomli_w

from kakashell.core.exceptions import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

DEFAULT_COMMANDS: tuple[str, ...] = (
    "ls", "cd", "pwd", "grep", "find", "cat", "echo", "touch", "mkdir", "rm",
    "cp", "mv", "head", "tail", "less", "chmod", "df", "du", "ps",
    "ping", "curl", "wget", "ssh",
)

_DEFAULT_CONFIG: dict[str, Any] = {
    "openai": {
        "api_key": "",
        "api_base": "https://api.openai.com/v1/chat/completions",
        "model": "gpt-4o-mini",
        "timeout": 60,
    },
    "assistant": {
        "system_prompt": (
            "You are a helpful assistant for Linux users. Answer questions about "
            "Linux commands concisely and suggest the exact command to run."
        ),
        "max_recent_interactions": 5,
        "max_openai_context": 10,
    },
    "completion": {
        "commands": list(DEFAULT_COMMANDS),
        "cd_command": "cd",
    },
}


def get_config_dir() -> Path:
    """Return the config directory, creating it if needed."""
    config_dir = Path(os.environ.get("KAKASHELL_CONFIG_DIR", "~/.config/kakashell")).expanduser()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Return the path to the config TOML file."""
    return get_config_dir() / "kaka.toml"


def get_history_path() -> Path:
    """Return the path to the REPL history file."""
    return get_config_dir() / "history"


def get_log_path() -> Path:
    return get_config_dir() / "kaka.log"


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file, returning defaults if not found.

    An empty ``openai.api_key`` falls back to the ``OPENAI_API_KEY``
    environment variable.
    """
    if config_path is None:
        config_path = get_config_path()
    config = _deep_copy_dict(_DEFAULT_CONFIG)
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                user_config = tomllib.load(f)
        except Exception as e:
            raise ConfigError(f"Failed to load config: {e}") from e
        config = _merge_config(config, user_config)

    if not config["openai"].get("api_key"):
        config["openai"]["api_key"] = os.environ.get("OPENAI_API_KEY", "")
    return config


def save_config(config: dict[str, Any], config_path: Path | None = None) -> Path:
    """Save configuration to TOML file and return its path."""
    if config_path is None:
        config_path = get_config_path()
    try:
        with open(config_path, "wb") as f:
            tomli_w.dump(config, f)
    except Exception as e:
        raise ConfigError(f"Failed to save config: {e}") from e
    return config_path


def default_config() -> dict[str, Any]:
    return _deep_copy_dict(_DEFAULT_CONFIG)


def _merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_config(base[key], value)
        else:
            base[key] = value
    return base


def _deep_copy_dict(d: dict[str, Any]) -> dict[str, Any]:
    """Simple deep copy for nested dicts of simple types."""
    result: dict[str, Any] = {}
    for k, v in d.items():
        if isinstance(v, dict):
            result[k] = _deep_copy_dict(v)
        elif isinstance(v, list):
            result[k] = list(v)
        else:
            result[k] = v
    return result
