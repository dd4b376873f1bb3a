"""Configuration and data file parsing utilities."""

import json
from pathlib import Path
from typing import Any

import json5
import yaml
from pydantic import ValidationError

from extsync.config.schemas import ToolConfig
from extsync.utils.filesystem import ensure_directory
from extsync.utils.platform import get_env, get_user_config_directory

CLI_COMMAND_ENV = "EXTSYNC_CLI_COMMAND"


class ConfigError(Exception):
    """Error loading or parsing configuration."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


def load_json(path: Path) -> Any:
    """Load and parse a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed JSON value

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8-sig") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e


def save_json(path: Path, data: Any, indent: int = 2) -> None:
    """Save data to a JSON file.

    Args:
        path: Path to write to
        data: Data to serialize
        indent: JSON indentation level
    """
    ensure_directory(path.parent)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)
        f.write("\n")


def load_jsonc(path: Path) -> dict[str, Any]:
    """Load a JSON-with-comments file such as an editor's settings.json.

    Comments and trailing commas are accepted. An empty file is an empty
    mapping.

    Raises:
        ConfigError: If the file cannot be read, parsed, or is not an object
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e

    if not text.strip():
        return {}

    try:
        result = json5.loads(text)
    except ValueError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}", path) from e

    if not isinstance(result, dict):
        raise ConfigError(f"Settings file must contain an object: {path}", path)
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = yaml.safe_load(f)
            if result is None:
                return {}
            if not isinstance(result, dict):
                raise ConfigError(f"YAML file must contain a mapping: {path}", path)
            return result
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e


def save_yaml(path: Path, data: dict[str, Any]) -> None:
    """Save data to a YAML file."""
    ensure_directory(path.parent)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def get_config_path() -> Path:
    """Get the location of config.yaml."""
    return get_user_config_directory() / "extsync" / "config.yaml"


def load_tool_config(path: Path | None = None, apply_env: bool = True) -> ToolConfig:
    """Load the tool configuration.

    A missing file yields the defaults. The EXTSYNC_CLI_COMMAND environment
    variable overrides ``cli_command`` from the file.

    Args:
        path: Path to config.yaml (defaults to the user config location)
        apply_env: Whether the environment override is applied

    Returns:
        Parsed ToolConfig

    Raises:
        ConfigError: If the file exists but is invalid
    """
    config_path = path or get_config_path()
    data = load_yaml(config_path) if config_path.exists() else {}

    env_command = get_env(CLI_COMMAND_ENV) if apply_env else None
    if env_command:
        data["cli_command"] = env_command

    try:
        return ToolConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config: {e}", config_path) from e


def save_tool_config(config: ToolConfig, path: Path | None = None) -> Path:
    """Save the tool configuration.

    Returns:
        The path written to
    """
    config_path = path or get_config_path()
    save_yaml(config_path, config.model_dump(exclude_none=True))
    return config_path
