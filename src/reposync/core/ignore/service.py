"""
Ignore-file editing.

Reads and writes the plain-text ignore file at the repository root and
appends built-in templates to it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from reposync.core.errors import ErrorKind, RepoSyncError
from reposync.core.ignore.templates import TEMPLATES
from reposync.core.outcome import Outcome, guarded

logger = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".gitignore"
ENCODING_ERRORS = "surrogateescape"


def merge_template(content: str, template: str) -> str:
    """
    Append the lines of ``template`` that ``content`` does not already have.

    Comment and blank lines are only kept when at least one pattern is
    new. Returns ``content`` unchanged when every pattern is present.
    """
    existing = {line.strip() for line in content.splitlines() if line.strip()}
    patterns = [
        line for line in template.splitlines()
        if line.strip() and not line.startswith("#")
    ]
    if all(line.strip() in existing for line in patterns):
        return content

    kept = [
        line for line in template.splitlines()
        if not line.strip() or line.startswith("#") or line.strip() not in existing
    ]
    prefix = ""
    if content and not content.endswith("\n"):
        prefix = "\n\n"
    elif content:
        prefix = "\n"
    return content + prefix + "\n".join(kept).strip("\n") + "\n"


class IgnoreFile:
    """
    The ignore file of one working copy.

    Example:
        >>> ignore = IgnoreFile(project_dir)
        >>> ignore.apply_template("Python / AI")
        >>> "__pycache__/" in ignore.read()
        True
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @property
    def path(self) -> Path:
        return self.root / IGNORE_FILE_NAME

    def read(self) -> str:
        """
        Content of the ignore file; "" when it does not exist.

        Bytes that are not UTF-8 are kept as surrogate escapes so that
        ``write`` puts them back unchanged.

        Raises:
            RepoSyncError: BACKEND_FAILURE if the file cannot be read.
        """
        if not self.path.exists():
            return ""
        try:
            return self.path.read_text(encoding="utf-8", errors=ENCODING_ERRORS)
        except OSError as e:
            raise RepoSyncError(
                ErrorKind.BACKEND_FAILURE, f"Could not read {self.path}: {e}"
            ) from e

    @guarded("ignore.write")
    def write(self, text: str) -> Outcome:
        try:
            self.path.write_text(text, encoding="utf-8", errors=ENCODING_ERRORS)
        except OSError as e:
            raise RepoSyncError(
                ErrorKind.BACKEND_FAILURE, f"Could not write {self.path}: {e}"
            ) from e
        logger.info("Saved %s", self.path)
        return Outcome.ok("ignore.write", f"Saved {IGNORE_FILE_NAME}")

    @guarded("ignore.template")
    def apply_template(self, name: str) -> Outcome:
        """Append a template from TEMPLATES by display name."""
        template = TEMPLATES.get(name)
        if template is None:
            raise RepoSyncError(
                ErrorKind.BACKEND_FAILURE,
                f"Unknown template {name!r}. Available: {', '.join(TEMPLATES)}",
            )

        content = self.read()
        merged = merge_template(content, template)
        if merged == content:
            return Outcome.no_changes("ignore.template", f"{name} template already applied")

        saved = self.write(merged)
        if not saved.success:
            return saved
        return Outcome.ok("ignore.template", f"Added {name} template")
