"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_BULK_MAX_REPOSITORIES,
    DEFAULT_EVENT_MAX_REPOSITORIES,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_LABELS,
)

__all__ = [
    "DEFAULT_GITHUB_API_URL",
    "DEFAULT_EVENT_MAX_REPOSITORIES",
    "DEFAULT_BULK_MAX_REPOSITORIES",
    "DEFAULT_MAX_LABELS",
    "DEFAULT_MAX_CONCURRENCY",
]
