"""
Credential injection for HTTPS remotes.

The token is handed to git through GIT_CONFIG_* environment variables as an
``http.extraHeader``, so it never appears on a command line or in
.git/config. Username/password semantics follow the usual token convention:
the token is the username and the password is empty.
"""

from __future__ import annotations

import base64
import os


def basic_auth_header(token: str) -> str:
    """Build the Authorization header value for a token."""
    encoded = base64.b64encode(f"{token}:".encode()).decode("ascii")
    return f"Authorization: Basic {encoded}"


def transport_env(token: str = "", timeout: int | None = None) -> dict[str, str]:
    """
    Environment for a git process that talks to a remote.

    Args:
        token: Access token; empty means anonymous.
        timeout: Seconds of stalled transfer after which the HTTP transport
            gives up (maps to a network failure).

    Returns:
        Variables to add to the git process environment.
    """
    env: dict[str, str] = {"GIT_TERMINAL_PROMPT": "0"}

    if timeout is not None:
        env["GIT_HTTP_LOW_SPEED_LIMIT"] = "1"
        env["GIT_HTTP_LOW_SPEED_TIME"] = str(timeout)

    if token:
        # Append after any GIT_CONFIG_* entries the user already exported
        try:
            index = int(os.environ.get("GIT_CONFIG_COUNT", "0"))
        except ValueError:
            index = 0
        env[f"GIT_CONFIG_KEY_{index}"] = "http.extraHeader"
        env[f"GIT_CONFIG_VALUE_{index}"] = basic_auth_header(token)
        env["GIT_CONFIG_COUNT"] = str(index + 1)

    return env
