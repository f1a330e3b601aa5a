"""
Repository handle.

A RepositoryHandle owns the single live GitPython session for one
working-copy root. Every orchestrator receives the same handle and calls
``ensure_open()`` before touching repository state, so the session is
opened lazily and re-opened after ``close()``.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from reposync.core.config.models import RepoSyncConfig
from reposync.core.errors import (
    ErrorKind,
    RepoSyncError,
    classify_git_error,
    describe_git_error,
)
from reposync.core.outcome import Outcome, guarded
from reposync.core.repo.auth import transport_env

logger = logging.getLogger(__name__)

METADATA_DIR = ".git"


class RepositoryHandle:
    """
    Caller-owned handle on one repository root.

    The handle is not thread-safe: callers must serialize operations
    against a handle, and must not open two handles on the same root at
    the same time.

    Example:
        >>> handle = RepositoryHandle(Path("~/src/project").expanduser())
        >>> if not handle.is_repository():
        ...     handle.initialize()
        >>> repo = handle.ensure_open()
    """

    def __init__(self, root: Path, config: RepoSyncConfig | None = None) -> None:
        """
        Create a handle. Nothing is opened until first use.

        Args:
            root: Working-copy root directory.
            config: Loaded configuration (defaults apply when omitted).
        """
        self.root = Path(root).expanduser().resolve()
        self.config = config or RepoSyncConfig()
        self._repo: Repo | None = None

    def __repr__(self) -> str:
        state = "open" if self._repo is not None else "closed"
        return f"RepositoryHandle({str(self.root)!r}, {state})"

    def __enter__(self) -> RepositoryHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def remote_name(self) -> str:
        return self.config.remote.name

    @property
    def network_timeout(self) -> int:
        return self.config.remote.network_timeout

    @property
    def is_open(self) -> bool:
        return self._repo is not None

    def is_repository(self) -> bool:
        """Check whether the root contains repository metadata."""
        return (self.root / METADATA_DIR).exists()

    def ensure_open(self) -> Repo:
        """
        Return the live session, opening it if necessary.

        Returns:
            The GitPython Repo for this root.

        Raises:
            RepoSyncError: NOT_A_REPOSITORY if the root has no metadata.
        """
        if self._repo is not None:
            return self._repo

        if not self.is_repository():
            raise RepoSyncError(
                ErrorKind.NOT_A_REPOSITORY, f"Not a git repository: {self.root}"
            )

        try:
            self._repo = Repo(self.root)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise RepoSyncError(
                ErrorKind.NOT_A_REPOSITORY, f"Not a git repository: {self.root}"
            ) from e

        logger.debug("Opened repository at %s", self.root)
        return self._repo

    def close(self) -> None:
        """Release the session. The next operation re-opens it."""
        if self._repo is not None:
            self._repo.close()
            self._repo = None
            logger.debug("Closed repository at %s", self.root)

    @guarded("repository.initialize")
    def initialize(self) -> Outcome:
        """
        Create repository metadata at the root and open it.

        An existing repository is opened unchanged. The identity from the
        configuration is applied when set.
        """
        if self.is_repository():
            self.ensure_open()
            return Outcome.ok("repository.initialize", "Repository already initialized")

        kwargs: dict[str, str] = {}
        if self.config.repository.default_branch:
            kwargs["initial_branch"] = self.config.repository.default_branch

        try:
            self._repo = Repo.init(self.root, mkdir=True, **kwargs)
        except GitCommandError as e:
            raise RepoSyncError(
                ErrorKind.BACKEND_FAILURE, describe_git_error(e), stderr=str(e.stderr)
            ) from e

        logger.info("Initialized repository at %s", self.root)

        identity = self.config.identity
        if identity.name or identity.email:
            self._write_identity(identity.name, identity.email)

        return Outcome.ok("repository.initialize", "Repository initialized successfully")

    @guarded("repository.identity")
    def configure_identity(self, name: str, email: str) -> Outcome:
        """
        Write user.name / user.email to the repository config.

        Empty values are skipped; they never delete existing configuration.
        """
        self.ensure_open()
        written = self._write_identity(name, email)
        if not written:
            return Outcome.no_changes("repository.identity", "Identity unchanged")
        return Outcome.ok("repository.identity", f"Set {', '.join(written)}")

    def _write_identity(self, name: str, email: str) -> list[str]:
        repo = self.ensure_open()
        written: list[str] = []
        with repo.config_writer() as writer:
            if name:
                writer.set_value("user", "name", name)
                written.append("user.name")
            if email:
                writer.set_value("user", "email", email)
                written.append("user.email")
        if written:
            logger.info("Configured %s for %s", " and ".join(written), self.root)
        return written

    def identity(self) -> tuple[str, str]:
        """Return the configured (user.name, user.email), empty when unset."""
        repo = self.ensure_open()
        reader = repo.config_reader()
        name = reader.get_value("user", "name", default="")
        email = reader.get_value("user", "email", default="")
        return str(name), str(email)

    # ------------------------------------------------------------------
    # Backend queries shared by the orchestrators
    # ------------------------------------------------------------------

    def resolve_commit(self, revision: str) -> str | None:
        """
        Resolve a (possibly abbreviated) revision to a full commit id.

        Returns:
            The 40-hex object id, or None if it does not name a commit.
        """
        if not revision:
            return None
        repo = self.ensure_open()
        try:
            sha = repo.git.rev_parse("--verify", "--quiet", f"{revision}^{{commit}}")
        except GitCommandError:
            return None
        return sha.strip() or None

    def head_commit(self) -> str | None:
        """Commit id of HEAD, or None while HEAD is unborn."""
        return self.resolve_commit("HEAD")

    def require_head(self) -> str:
        """
        Commit id of HEAD.

        Raises:
            RepoSyncError: REPOSITORY_EMPTY if nothing has been committed.
        """
        sha = self.head_commit()
        if sha is None:
            raise RepoSyncError(ErrorKind.REPOSITORY_EMPTY, "Repository is empty. Commit first.")
        return sha

    def head_ref(self) -> str | None:
        """Full ref HEAD points at (also when unborn), or None when detached."""
        repo = self.ensure_open()
        try:
            return repo.git.symbolic_ref("-q", "HEAD").strip() or None
        except GitCommandError:
            return None

    def current_branch(self) -> str | None:
        """Short name of the checked-out branch, or None when detached."""
        ref = self.head_ref()
        if ref is None:
            return None
        return ref.removeprefix("refs/heads/")

    def current_branch_label(self) -> str:
        """Branch name, or the abbreviated commit id when HEAD is detached."""
        branch = self.current_branch()
        if branch is not None:
            return branch
        head = self.head_commit()
        return head[:7] if head else "HEAD"

    def ref_exists(self, full_ref: str) -> bool:
        repo = self.ensure_open()
        try:
            repo.git.show_ref("--verify", "--quiet", full_ref)
        except GitCommandError:
            return False
        return True

    def git_path(self, name: str) -> Path:
        """Path of a file inside the repository metadata directory."""
        repo = self.ensure_open()
        return Path(repo.git_dir) / name

    def remote_url(self) -> str:
        """URL of the configured remote, or "" when there is none."""
        repo = self.ensure_open()
        value = repo.config_reader().get_value(
            f'remote "{self.remote_name}"', "url", default=""
        )
        return str(value)

    def upstream_ref(self) -> str | None:
        """
        Remote-tracking ref of the current branch.

        The branch's configured upstream wins; otherwise
        refs/remotes/<remote>/<branch> is used when it exists.
        """
        branch = self.current_branch()
        if branch is None:
            return None
        repo = self.ensure_open()
        try:
            upstream = repo.git.rev_parse("--symbolic-full-name", f"{branch}@{{upstream}}")
        except GitCommandError:
            upstream = ""
        upstream = upstream.strip()
        if upstream.startswith("refs/remotes/"):
            return upstream

        fallback = f"refs/remotes/{self.remote_name}/{branch}"
        if self.ref_exists(fallback):
            return fallback
        return None

    @contextmanager
    def remote_session(self, token: str = "") -> Iterator[Repo]:
        """
        Yield the session with transport credentials installed.

        Args:
            token: Access token; empty means anonymous.
        """
        repo = self.ensure_open()
        env = transport_env(token, timeout=self.network_timeout)
        with repo.git.custom_environment(**env):
            yield repo

    # ------------------------------------------------------------------
    # Clone
    # ------------------------------------------------------------------

    @classmethod
    def clone(
        cls,
        url: str,
        parent: Path,
        folder: str,
        token: str = "",
        config: RepoSyncConfig | None = None,
    ) -> tuple[RepositoryHandle | None, Outcome]:
        """
        Clone a remote repository into ``parent / folder``.

        A destination that exists and is not empty is refused. A partially
        created destination is removed on failure.

        Returns:
            (handle, outcome); handle is None when the clone failed.
        """
        config = config or RepoSyncConfig()
        dest = Path(parent).expanduser() / folder

        if dest.exists() and any(dest.iterdir()):
            return None, Outcome.failure(
                "repository.clone",
                ErrorKind.BACKEND_FAILURE,
                f"Destination exists and is not empty: {dest}",
            )

        env = transport_env(token, timeout=config.remote.network_timeout)
        try:
            Repo.clone_from(url, dest, env=env)
        except GitCommandError as e:
            if dest.exists():
                shutil.rmtree(dest, ignore_errors=True)
            kind = classify_git_error(e)
            message = describe_git_error(e)
            logger.error("Clone of %s failed (%s): %s", url, kind.value, message)
            return None, Outcome.failure("repository.clone", kind, f"Clone failed: {message}")

        logger.info("Cloned %s into %s", url, dest)
        handle = cls(dest, config)
        return handle, Outcome.ok("repository.clone", "Cloned successfully")
