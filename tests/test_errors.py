"""
Tests for the error taxonomy and backend error classification.
"""

from git.exc import GitCommandError

from reposync.core.errors import (
    CONFLICT_KINDS,
    ErrorKind,
    RepoSyncError,
    classify_git_error,
    describe_git_error,
)


def _git_error(stderr: str, status: int = 128) -> GitCommandError:
    return GitCommandError(["git", "fetch", "origin"], status, stderr)


class TestErrorKind:
    """Tests for ErrorKind."""

    def test_conflict_kinds(self):
        assert ErrorKind.MERGE_CONFLICT.is_conflict
        assert ErrorKind.REBASE_CONFLICT.is_conflict
        assert ErrorKind.CHERRY_PICK_CONFLICT.is_conflict
        assert ErrorKind.REVERT_CONFLICT.is_conflict

    def test_fatal_kinds_are_not_conflicts(self):
        for kind in ErrorKind:
            if kind not in CONFLICT_KINDS:
                assert not kind.is_conflict, kind

    def test_values_are_strings(self):
        assert ErrorKind.NOT_A_REPOSITORY.value == "not_a_repository"
        assert ErrorKind("auth_failure") is ErrorKind.AUTH_FAILURE


class TestRepoSyncError:
    """Tests for RepoSyncError."""

    def test_carries_kind_and_message(self):
        error = RepoSyncError(ErrorKind.COMMIT_NOT_FOUND, "Commit not found: abc", stderr="x")
        assert error.kind is ErrorKind.COMMIT_NOT_FOUND
        assert str(error) == "Commit not found: abc"
        assert error.stderr == "x"


class TestClassifyGitError:
    """Tests for classify_git_error."""

    def test_authentication_failed(self):
        error = _git_error("fatal: Authentication failed for 'https://example.com/r.git/'")
        assert classify_git_error(error) is ErrorKind.AUTH_FAILURE

    def test_http_403_is_auth_not_network(self):
        error = _git_error(
            "fatal: unable to access 'https://example.com/r.git/': "
            "The requested URL returned error: 403"
        )
        assert classify_git_error(error) is ErrorKind.AUTH_FAILURE

    def test_prompt_disabled_is_auth(self):
        error = _git_error(
            "fatal: could not read Username for 'https://example.com': "
            "terminal prompts disabled"
        )
        assert classify_git_error(error) is ErrorKind.AUTH_FAILURE

    def test_unresolvable_host(self):
        error = _git_error(
            "fatal: unable to access 'https://nowhere.invalid/r.git/': "
            "Could not resolve host: nowhere.invalid"
        )
        assert classify_git_error(error) is ErrorKind.NETWORK_FAILURE

    def test_stalled_transfer_is_network(self):
        error = _git_error(
            "error: RPC failed; curl 28 Operation too slow. Less than 1 bytes/sec "
            "transferred the last 120 seconds\nfatal: early EOF"
        )
        assert classify_git_error(error) is ErrorKind.NETWORK_FAILURE

    def test_unknown_failure_is_backend(self):
        error = _git_error("fatal: bad object deadbeef")
        assert classify_git_error(error) is ErrorKind.BACKEND_FAILURE

    def test_bytes_stderr(self):
        error = GitCommandError(["git", "push"], 128, b"fatal: Connection refused")
        assert classify_git_error(error) is ErrorKind.NETWORK_FAILURE


class TestDescribeGitError:
    """Tests for describe_git_error."""

    def test_prefers_fatal_line(self):
        error = _git_error("hint: something\nfatal: not a valid object name: 'nope'")
        assert describe_git_error(error) == "not a valid object name: 'nope'"

    def test_error_line(self):
        error = _git_error("error: pathspec 'x' did not match any file(s) known to git")
        assert describe_git_error(error) == "pathspec 'x' did not match any file(s) known to git"

    def test_falls_back_to_last_line(self):
        error = _git_error("first\nsecond")
        assert describe_git_error(error) == "second"

    def test_empty_stderr(self):
        error = _git_error("", status=1)
        assert describe_git_error(error) == "git exited with status 1"
