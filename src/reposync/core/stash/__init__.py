"""
Stash module.

Positional stash entries: create, apply (with optional drop), pop, drop
and list.
"""

from reposync.core.stash.service import StashOrchestrator, parse_stash_list

__all__ = ["StashOrchestrator", "parse_stash_list"]
