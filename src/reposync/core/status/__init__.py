"""
Status module.

Builds the dashboard snapshot for a repository.
"""

from reposync.core.status.aggregator import StatusAggregator

__all__ = ["StatusAggregator"]
