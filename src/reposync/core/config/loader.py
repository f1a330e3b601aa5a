"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import RepoSyncConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".reposync.json"

# Global cache to avoid reloading config multiple times per session
_config_cache: RepoSyncConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/reposync/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "reposync" / "config.json"


def get_project_config_path(project_dir: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        project_dir: Repository root (defaults to current directory)

    Returns:
        Path to .reposync.json in the repository root
    """
    if project_dir is None:
        project_dir = Path.cwd()
    return project_dir / PROJECT_CONFIG_NAME


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 20}})
        {'a': 1, 'b': {'x': 10, 'y': 20}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _set_nested(config: dict[str, Any], section: str, key: str, value: Any) -> None:
    config.setdefault(section, {})
    config[section][key] = value


def _parse_bool(value: str) -> bool:
    return value.lower() not in ("false", "0", "no", "")


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        REPOSYNC_REMOTE - overrides remote.name
        REPOSYNC_NETWORK_TIMEOUT - overrides remote.network_timeout
        REPOSYNC_PULL_REBASE - overrides sync.pull_rebase
        REPOSYNC_DEFAULT_BRANCH - overrides repository.default_branch
        REPOSYNC_USER_NAME - overrides identity.name
        REPOSYNC_USER_EMAIL - overrides identity.email
        REPOSYNC_TOKEN - overrides auth.token

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = {k: (v.copy() if isinstance(v, dict) else v) for k, v in config_dict.items()}

    if remote := os.environ.get("REPOSYNC_REMOTE"):
        _set_nested(result, "remote", "name", remote)

    if timeout_str := os.environ.get("REPOSYNC_NETWORK_TIMEOUT"):
        try:
            timeout = int(timeout_str)
            if timeout < 1:
                logger.warning(
                    "REPOSYNC_NETWORK_TIMEOUT must be >= 1, got %d, ignoring", timeout
                )
            else:
                _set_nested(result, "remote", "network_timeout", timeout)
        except ValueError:
            logger.warning("Invalid REPOSYNC_NETWORK_TIMEOUT value '%s', ignoring", timeout_str)

    if rebase_str := os.environ.get("REPOSYNC_PULL_REBASE"):
        _set_nested(result, "sync", "pull_rebase", _parse_bool(rebase_str))

    if default_branch := os.environ.get("REPOSYNC_DEFAULT_BRANCH"):
        _set_nested(result, "repository", "default_branch", default_branch)

    if user_name := os.environ.get("REPOSYNC_USER_NAME"):
        _set_nested(result, "identity", "name", user_name)

    if user_email := os.environ.get("REPOSYNC_USER_EMAIL"):
        _set_nested(result, "identity", "email", user_email)

    if token := os.environ.get("REPOSYNC_TOKEN"):
        _set_nested(result, "auth", "token", token)

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "remote": {"name": "origin", "network_timeout": 120},
        "sync": {"pull_rebase": False},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> RepoSyncConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (REPOSYNC_*)
        2. Project config (.reposync.json)
        3. User config (~/.config/reposync/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Repository root to load .reposync.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated RepoSyncConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    user_config_path = get_user_config_path()
    if user_config := load_json_file(user_config_path):
        merged = deep_merge(merged, user_config)

    project_config_path = get_project_config_path(project_dir)
    if project_config := load_json_file(project_config_path):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = RepoSyncConfig(**merged)

    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
