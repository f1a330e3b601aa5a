"""Environment loading helpers.

reposync reads credentials and overrides from the process environment
(REPOSYNC_*). Values may also come from .env files:

  os.environ (pre-existing) > project .env > user .env

A .env file never overrides a variable already exported in the shell.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

ENV_FILE_NAME = ".env"


def user_env_path() -> Path:
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return xdg_home / "reposync" / ENV_FILE_NAME


def read_env_file(path: Path) -> dict[str, str]:
    """Variables defined in a .env file; keys without a value are skipped."""
    if not path.is_file():
        return {}
    return {
        str(key): str(value)
        for key, value in dotenv_values(path).items()
        if key is not None and value is not None
    }


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, Path]:
    """Export variables from the user and project .env files.

    Args:
        project_dir: Repository root holding the project .env (defaults to cwd)
        user_env_paths: Explicit user env files
        project_env_paths: Explicit project env files

    Returns:
        Mapping of each exported variable to the file it came from.
    """
    if user_env_paths is None:
        user_env_paths = [user_env_path()]
    if project_env_paths is None:
        project_env_paths = [(project_dir or Path.cwd()) / ENV_FILE_NAME]

    preset = set(os.environ)
    loaded: dict[str, Path] = {}

    # Project files come last so they win over user files
    for path in [*user_env_paths, *project_env_paths]:
        for key, value in read_env_file(Path(path)).items():
            if key in preset:
                continue
            os.environ[key] = value
            loaded[key] = Path(path)

    for key, source in loaded.items():
        logger.debug("Loaded %s from %s", key, source)
    return loaded
