"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio
from pathlib import Path

from github_label_sync.configuration import reconcile
from github_label_sync.configuration.models import (
    ResyncLabelsConfig,
    SyncLabelEventConfig,
)


def get_sync_event_config(
    debug: bool = False,
    github_api_url: str | None = None,
    github_pat_token: str | None = None,
    github_app_id: int | None = None,
    github_app_private_key_path: Path | None = None,
    github_app_installation_id: int | None = None,
    source_repo: str | None = None,
    max_repositories: int | None = None,
    include_source_repo: bool = False,
    event_path: Path | None = None,
    max_concurrency: int | None = None,
) -> SyncLabelEventConfig:
    """Synchronously get the reconciled sync-event configuration."""
    return asyncio.run(
        reconcile.reconcile_sync_event_configuration(
            cli_debug=debug,
            cli_github_api_url=github_api_url,
            cli_github_pat_token=github_pat_token,
            cli_github_app_id=github_app_id,
            cli_github_app_private_key_path=github_app_private_key_path,
            cli_github_app_installation_id=github_app_installation_id,
            cli_source_repo=source_repo,
            cli_max_repositories=max_repositories,
            cli_event_path=event_path,
            cli_max_concurrency=max_concurrency,
            cli_include_source_repo=include_source_repo,
        )
    )


def get_resync_config(
    debug: bool = False,
    github_api_url: str | None = None,
    github_pat_token: str | None = None,
    github_app_id: int | None = None,
    github_app_private_key_path: Path | None = None,
    github_app_installation_id: int | None = None,
    source_repo: str | None = None,
    max_repositories: int | None = None,
    include_source_repo: bool = False,
    max_labels: int | None = None,
) -> ResyncLabelsConfig:
    """Synchronously get the reconciled resync-all configuration."""
    return asyncio.run(
        reconcile.reconcile_resync_configuration(
            cli_debug=debug,
            cli_github_api_url=github_api_url,
            cli_github_pat_token=github_pat_token,
            cli_github_app_id=github_app_id,
            cli_github_app_private_key_path=github_app_private_key_path,
            cli_github_app_installation_id=github_app_installation_id,
            cli_source_repo=source_repo,
            cli_max_repositories=max_repositories,
            cli_max_labels=max_labels,
            cli_include_source_repo=include_source_repo,
        )
    )
