"""
Tests for transport credentials.
"""

import base64

from reposync.core.repo.auth import basic_auth_header, transport_env


class TestBasicAuthHeader:
    """Tests for basic_auth_header."""

    def test_token_is_username_with_empty_password(self):
        header = basic_auth_header("ghp_abc")
        assert header.startswith("Authorization: Basic ")
        encoded = header.removeprefix("Authorization: Basic ")
        assert base64.b64decode(encoded).decode() == "ghp_abc:"


class TestTransportEnv:
    """Tests for transport_env."""

    def test_anonymous(self):
        env = transport_env("")
        assert env == {"GIT_TERMINAL_PROMPT": "0"}

    def test_timeout(self):
        env = transport_env("", timeout=30)
        assert env["GIT_HTTP_LOW_SPEED_LIMIT"] == "1"
        assert env["GIT_HTTP_LOW_SPEED_TIME"] == "30"

    def test_token_injected_as_extra_header(self):
        env = transport_env("tok")
        assert env["GIT_CONFIG_COUNT"] == "1"
        assert env["GIT_CONFIG_KEY_0"] == "http.extraHeader"
        assert env["GIT_CONFIG_VALUE_0"] == basic_auth_header("tok")

    def test_appends_after_existing_config_entries(self, monkeypatch):
        monkeypatch.setenv("GIT_CONFIG_COUNT", "2")
        env = transport_env("tok")
        assert env["GIT_CONFIG_COUNT"] == "3"
        assert env["GIT_CONFIG_KEY_2"] == "http.extraHeader"

    def test_token_not_in_plain_text(self):
        env = transport_env("very-secret-token")
        assert all("very-secret-token" not in value for value in env.values())
