"""
Tests for .env layering.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from reposync.core.config.env import load_layered_env, read_env_file

KEYS = ("REPOSYNC_TEST_A", "REPOSYNC_TEST_B", "REPOSYNC_TEST_C")


@pytest.fixture(autouse=True)
def clean_keys():
    for key in KEYS:
        os.environ.pop(key, None)
    yield
    for key in KEYS:
        os.environ.pop(key, None)


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestReadEnvFile:
    def test_missing(self, tmp_path: Path) -> None:
        assert read_env_file(tmp_path / ".env") == {}

    def test_values(self, tmp_path: Path) -> None:
        env = _write(tmp_path / ".env", "# comment\nREPOSYNC_TEST_A=one\nexport REPOSYNC_TEST_B='two'\n")
        assert read_env_file(env) == {"REPOSYNC_TEST_A": "one", "REPOSYNC_TEST_B": "two"}


class TestLoadLayeredEnv:
    def test_project_overrides_user(self, tmp_path: Path) -> None:
        user = _write(tmp_path / "user" / ".env", "REPOSYNC_TEST_A=user\nREPOSYNC_TEST_B=user\n")
        project = _write(tmp_path / "project" / ".env", "REPOSYNC_TEST_A=project\n")

        loaded = load_layered_env(user_env_paths=[user], project_env_paths=[project])

        assert os.environ["REPOSYNC_TEST_A"] == "project"
        assert os.environ["REPOSYNC_TEST_B"] == "user"
        assert loaded == {"REPOSYNC_TEST_A": project, "REPOSYNC_TEST_B": user}

    def test_shell_wins(self, tmp_path: Path) -> None:
        os.environ["REPOSYNC_TEST_C"] = "shell"
        project = _write(tmp_path / ".env", "REPOSYNC_TEST_C=file\n")

        loaded = load_layered_env(user_env_paths=[], project_env_paths=[project])

        assert os.environ["REPOSYNC_TEST_C"] == "shell"
        assert loaded == {}

    def test_default_paths(self, tmp_path: Path) -> None:
        # conftest points XDG_CONFIG_HOME at a per-test directory
        xdg = Path(os.environ["XDG_CONFIG_HOME"])
        _write(xdg / "reposync" / ".env", "REPOSYNC_TEST_A=user\n")
        _write(tmp_path / ".env", "REPOSYNC_TEST_B=project\n")

        load_layered_env(project_dir=tmp_path)

        assert os.environ["REPOSYNC_TEST_A"] == "user"
        assert os.environ["REPOSYNC_TEST_B"] == "project"
