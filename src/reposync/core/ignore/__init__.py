"""
Ignore-file module.

Read, write and extend the working copy's ignore file from built-in
templates.
"""

from reposync.core.ignore.service import IgnoreFile, merge_template
from reposync.core.ignore.templates import TEMPLATES

__all__ = ["IgnoreFile", "TEMPLATES", "merge_template"]
