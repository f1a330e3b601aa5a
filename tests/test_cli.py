"""
Tests for the reposync CLI.

Commands run through Typer's CliRunner against real repositories, with
--repo pointing at the working copy under test.
"""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from reposync import __version__
from reposync.cli import app
from reposync.cli.errors import ExitCode

runner = CliRunner()


def invoke(repo: Path, *args: str, input: str | None = None):
    return runner.invoke(app, ["--repo", str(repo), *args], input=input)


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestStatusCommand:
    """Tests for reposync status."""

    def test_not_a_repository(self, tmp_path: Path) -> None:
        result = invoke(tmp_path, "status")

        assert result.exit_code == ExitCode.USER_ERROR
        assert "Not a git repository" in result.output

    def test_after_init(self, tmp_path: Path) -> None:
        repo = tmp_path / "project"
        repo.mkdir()

        init = invoke(repo, "init")
        status = invoke(repo, "status")

        assert init.exit_code == 0
        assert status.exit_code == 0
        assert "main" in status.output
        assert "Pending changes" in status.output


class TestChangesCommands:
    """Tests for reposync changes."""

    def test_commit_all(self, git_repo_with_commit: Path, git) -> None:
        (git_repo_with_commit / "new.txt").write_text("new\n")

        result = invoke(git_repo_with_commit, "changes", "commit", "-a", "-m", "Add new file")

        assert result.exit_code == 0
        assert git(git_repo_with_commit, "log", "-1", "--format=%s") == "Add new file"

    def test_commit_nothing_staged(self, git_repo_with_commit: Path) -> None:
        result = invoke(git_repo_with_commit, "changes", "commit", "-m", "Nothing")

        assert result.exit_code == 0
        assert "Nothing staged" in result.output

    def test_stage_unknown_path(self, git_repo_with_commit: Path) -> None:
        result = invoke(git_repo_with_commit, "changes", "stage", "ghost.txt")

        assert result.exit_code == ExitCode.USER_ERROR

    def test_list(self, git_repo_with_commit: Path) -> None:
        (git_repo_with_commit / "new.txt").write_text("new\n")

        result = invoke(git_repo_with_commit, "changes", "list")

        assert result.exit_code == 0
        assert "new.txt" in result.output


class TestBranchCommands:
    """Tests for reposync branch."""

    def test_list(self, git_repo_with_commit: Path, git) -> None:
        git(git_repo_with_commit, "branch", "feature")

        result = invoke(git_repo_with_commit, "branch", "list")

        assert result.exit_code == 0
        assert "main" in result.output
        assert "feature" in result.output

    def test_delete_current_fails(self, git_repo_with_commit: Path) -> None:
        result = invoke(git_repo_with_commit, "branch", "delete", "main")

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "current branch" in result.output

    def test_merge_conflict_exit_code(self, git_repo_with_commit: Path, commit_file, git) -> None:
        repo = git_repo_with_commit
        git(repo, "checkout", "-b", "other")
        commit_file(repo, "README.md", "theirs\n")
        git(repo, "checkout", "main")
        commit_file(repo, "README.md", "ours\n")

        result = invoke(repo, "branch", "merge", "other")

        assert result.exit_code == ExitCode.CONFLICT
        assert "conflicts" in result.output

        listed = invoke(repo, "conflicts", "list")
        assert "README.md" in listed.output


class TestSyncCommands:
    """Tests for reposync sync."""

    def test_push_without_remote(self, git_repo_with_commit: Path) -> None:
        result = invoke(git_repo_with_commit, "sync", "push")

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "reposync sync remote" in result.output

    def test_invalid_remote_url(self, git_repo_with_commit: Path) -> None:
        result = invoke(git_repo_with_commit, "sync", "remote", "git@example.com:a/b.git")

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_show_remote(self, git_repo_with_commit: Path) -> None:
        invoke(git_repo_with_commit, "sync", "remote", "https://example.com/a/b.git")

        result = invoke(git_repo_with_commit, "sync", "remote")

        assert result.exit_code == 0
        assert "https://example.com/a/b.git" in result.output

    def test_push(self, linked_repo, commit_file, git) -> None:
        local, remote = linked_repo
        sha = commit_file(local, "a.txt", "a\n")

        result = invoke(local, "sync", "push")

        assert result.exit_code == 0
        assert git(remote, "rev-parse", "main") == sha

    def test_force_push_declined(self, linked_repo, commit_file, git) -> None:
        local, remote = linked_repo
        before = git(remote, "rev-parse", "main")
        commit_file(local, "a.txt", "a\n")

        result = invoke(local, "sync", "push", "--force", input="n\n")

        assert result.exit_code != 0
        assert git(remote, "rev-parse", "main") == before

    def test_repair_confirmed(self, linked_repo, git) -> None:
        local, _ = linked_repo
        git(local, "checkout", "-b", "feature")

        result = invoke(local, "sync", "repair", input="y\n")

        assert result.exit_code == 0
        assert git(local, "symbolic-ref", "--short", "HEAD") == "main"


class TestLogCommands:
    """Tests for reposync log."""

    def test_list(self, git_repo_with_commit: Path, git) -> None:
        head = git(git_repo_with_commit, "rev-parse", "HEAD")

        result = invoke(git_repo_with_commit, "log", "list")

        assert result.exit_code == 0
        assert head[:7] in result.output

    def test_checkout_unknown_commit(self, git_repo_with_commit: Path) -> None:
        result = invoke(git_repo_with_commit, "log", "checkout", "deadbeef")

        assert result.exit_code == ExitCode.GENERAL_ERROR


class TestStashCommands:
    """Tests for reposync stash."""

    def test_save_and_pop(self, git_repo_with_commit: Path) -> None:
        readme = git_repo_with_commit / "README.md"
        readme.write_text("wip\n")

        saved = invoke(git_repo_with_commit, "stash", "save", "-m", "wip")
        assert saved.exit_code == 0
        assert readme.read_text() == "# Test Repo\n"

        popped = invoke(git_repo_with_commit, "stash", "pop")
        assert popped.exit_code == 0
        assert readme.read_text() == "wip\n"


class TestIgnoreCommands:
    """Tests for reposync ignore."""

    def test_list_templates(self, tmp_path: Path) -> None:
        result = invoke(tmp_path, "ignore", "template")

        assert result.exit_code == 0
        assert "Python / AI" in result.output

    def test_unknown_template(self, tmp_path: Path) -> None:
        result = invoke(tmp_path, "ignore", "template", "Cobol")

        assert result.exit_code == ExitCode.USER_ERROR

    def test_apply_template(self, tmp_path: Path) -> None:
        result = invoke(tmp_path, "ignore", "template", "Flutter")

        assert result.exit_code == 0
        assert (tmp_path / ".gitignore").exists()
