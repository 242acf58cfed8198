"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


@dataclass
class BaseConfig:
    """Configuration shared by every label synchronization command."""

    debug: bool
    github_api_url: str
    github_authentication_type: GitHubAuthenticationType
    github_pat_token: str | None
    github_app_id: int | None
    github_app_private_key_path: Path | None
    github_app_installation_id: int | None
    source_repo: str
    max_repositories: int
    include_source_repo: bool


@dataclass
class SyncLabelEventConfig(BaseConfig):
    """Configuration for the sync-event command."""

    event_path: Path
    max_concurrency: int


@dataclass
class ResyncLabelsConfig(BaseConfig):
    """Configuration for the resync-all command."""

    max_labels: int
