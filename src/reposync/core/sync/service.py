"""
Synchronization with the single configured remote.

Fetch, pull and push run inside ``RepositoryHandle.remote_session`` so
that the access token reaches git through its environment only. Force
push is not gated here: callers obtain the user's confirmation first.
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from git.exc import GitCommandError

from reposync.core.branches.service import LOCAL_PREFIX, REMOTE_PREFIX, BranchOrchestrator
from reposync.core.errors import ErrorKind, RepoSyncError
from reposync.core.outcome import OperationStatus, Outcome, guarded
from reposync.core.repo.handle import RepositoryHandle

logger = logging.getLogger(__name__)

DEFAULT_BRANCH_MARKERS = ("main", "master")


def validate_remote_url(url: str) -> str:
    """
    Check that ``url`` is an absolute HTTP(S) URL.

    Returns:
        The stripped URL.

    Raises:
        RepoSyncError: INVALID_REMOTE_URL otherwise.
    """
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise RepoSyncError(
            ErrorKind.INVALID_REMOTE_URL, f"Remote URL must be http(s): {url or '<empty>'}"
        )
    return url


def select_default_branch(branch_names: list[str]) -> str | None:
    """
    Pick the branch a repair links to.

    The first name (in lexicographic order) containing "main" wins,
    falling back to the first containing "master".
    """
    ordered = sorted(branch_names)
    for marker in DEFAULT_BRANCH_MARKERS:
        for name in ordered:
            if marker in name:
                return name
    return None


class SyncOrchestrator:
    """
    Fetch, pull, push and repair against the configured remote.

    Example:
        >>> sync = SyncOrchestrator(handle)
        >>> sync.add_remote("https://example.com/team/project.git")
        >>> sync.push(token, force=False)
    """

    def __init__(self, handle: RepositoryHandle) -> None:
        self.handle = handle
        self.branches = BranchOrchestrator(handle)

    @property
    def remote(self) -> str:
        return self.handle.remote_name

    def remote_url(self) -> str:
        """URL of the configured remote; "" when missing or unreadable."""
        try:
            return self.handle.remote_url()
        except RepoSyncError as e:
            logger.debug("No remote URL: %s", e)
            return ""

    def has_remote(self) -> bool:
        return bool(self.remote_url())

    def _require_remote(self) -> None:
        self.handle.ensure_open()
        if not self.handle.remote_url():
            raise RepoSyncError(
                ErrorKind.NO_REMOTE, f"No remote '{self.remote}' configured. Add one first."
            )

    def _require_branch(self) -> str:
        branch = self.handle.current_branch()
        if branch is None:
            raise RepoSyncError(ErrorKind.BRANCH_NOT_FOUND, "HEAD is detached; check out a branch")
        return branch

    @guarded("sync.add_remote")
    def add_remote(self, url: str) -> Outcome:
        """
        Point the configured remote at ``url``.

        Writes the URL and a fetch refspec covering every branch, replacing
        any previous values.
        """
        url = validate_remote_url(url)
        repo = self.handle.ensure_open()
        section = f'remote "{self.remote}"'
        with repo.config_writer() as writer:
            writer.set_value(section, "url", url)
            writer.set_value(
                section, "fetch", f"+refs/heads/*:refs/remotes/{self.remote}/*"
            )
        logger.info("Remote %s set to %s", self.remote, url)
        return Outcome.ok("sync.add_remote", f"Remote {self.remote} set to {url}")

    @guarded("sync.fetch")
    def fetch(self, token: str = "") -> Outcome:
        """Fetch every branch of the remote; anonymous when ``token`` is empty."""
        self._require_remote()
        with self.handle.remote_session(token) as repo:
            repo.git.fetch(self.remote)
        logger.info("Fetched from %s", self.remote)
        return Outcome.ok("sync.fetch", f"Fetched from {self.remote}")

    @guarded("sync.push")
    def push(self, token: str = "", force: bool = False) -> Outcome:
        """
        Push the current branch and set it as upstream.

        Args:
            token: Access token; empty means anonymous.
            force: Overwrite the remote branch. Callers confirm with the
                user before passing True.

        Returns:
            OK, or ALREADY_UP_TO_DATE when the remote-tracking ref already
            pointed at HEAD.
        """
        self._require_remote()
        head = self.handle.require_head()
        branch = self._require_branch()
        tracking = f"{REMOTE_PREFIX}{self.remote}/{branch}"
        before = self.handle.resolve_commit(tracking) if self.handle.ref_exists(tracking) else None

        args = ["--set-upstream"]
        if force:
            args.append("--force")
        args.extend([self.remote, f"{LOCAL_PREFIX}{branch}:{LOCAL_PREFIX}{branch}"])
        with self.handle.remote_session(token) as repo:
            repo.git.push(*args)

        if before == head:
            return Outcome.ok(
                "sync.push", "Everything up-to-date", status=OperationStatus.ALREADY_UP_TO_DATE
            )
        logger.info("Pushed %s to %s%s", branch, self.remote, " (forced)" if force else "")
        verb = "Force-pushed" if force else "Pushed"
        return Outcome.ok("sync.push", f"{verb} {branch} to {self.remote}", commit_sha=head)

    @guarded("sync.pull")
    def pull(self, token: str = "") -> Outcome:
        """
        Fetch, then merge (or rebase, per ``sync.pull_rebase``) the upstream
        of the current branch.

        Conflicts come back as MERGE_CONFLICT or REBASE_CONFLICT so the
        caller can route to conflict resolution.
        """
        self._require_remote()
        branch = self._require_branch()
        with self.handle.remote_session(token) as repo:
            repo.git.fetch(self.remote)

        upstream = self.handle.upstream_ref()
        if upstream is None:
            raise RepoSyncError(
                ErrorKind.BRANCH_NOT_FOUND,
                f"Remote has no branch {branch}; push it first",
            )

        rebase = self.handle.config.sync.pull_rebase
        return self.branches.integrate(upstream[len(REMOTE_PREFIX) :], "sync.pull", rebase=rebase)

    def remote_branches(self) -> list[str]:
        """Branch names of the configured remote, without the remote prefix."""
        repo = self.handle.ensure_open()
        prefix = f"{REMOTE_PREFIX}{self.remote}/"
        output = repo.git.for_each_ref("--format=%(refname)%09%(symref)", prefix)
        names: list[str] = []
        for line in output.splitlines():
            full_ref, _, symref = line.partition("\t")
            if full_ref.startswith(prefix) and not symref:
                names.append(full_ref[len(prefix) :])
        return names

    @guarded("sync.repair")
    def link_and_repair(self, token: str = "") -> Outcome:
        """
        Relink the local repository to the remote's default branch.

        Steps:
            1. fetch the remote;
            2. pick its branch containing "main", else "master";
            3. force the local branch of that name onto the remote tip;
            4. check it out and track the remote branch;
            5. mixed-reset so the working tree is kept as local changes.

        Destructive to local branch state. When no default branch exists
        nothing local is touched.
        """
        self._require_remote()
        with self.handle.remote_session(token) as repo:
            repo.git.fetch(self.remote)

        branch = select_default_branch(self.remote_branches())
        if branch is None:
            raise RepoSyncError(
                ErrorKind.NO_DEFAULT_REMOTE_BRANCH,
                f"Remote {self.remote} has no main or master branch",
            )

        remote_ref = f"{REMOTE_PREFIX}{self.remote}/{branch}"
        sha = self.handle.resolve_commit(remote_ref)
        if sha is None:
            raise RepoSyncError(ErrorKind.BRANCH_NOT_FOUND, f"Cannot resolve {remote_ref}")

        logger.info("Repairing %s onto %s/%s (%s)", self.handle.root, self.remote, branch, sha[:8])
        repo.git.update_ref(f"{LOCAL_PREFIX}{branch}", sha)
        repo.git.symbolic_ref("HEAD", f"{LOCAL_PREFIX}{branch}")
        repo.git.reset("--mixed", sha)
        repo.git.branch(f"--set-upstream-to={self.remote}/{branch}", branch)

        return Outcome.ok(
            "sync.repair", f"Linked {branch} to {self.remote}/{branch}", commit_sha=sha
        )
