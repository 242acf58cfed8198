"""Orchestrates propagation of a single label event to every target repository."""

import asyncio
import time
from pathlib import Path
from typing import Callable

import structlog

from github_label_sync.configuration.models import GitHubAuthenticationType
from github_label_sync.github.abc import LabelDirectoryBase, RepositoryListingBase
from github_label_sync.github.adapter import GitHubKitAdapter
from github_label_sync.schemas.labels import LabelEventPayload
from github_label_sync.schemas.repositories import RepositoryReference
from github_label_sync.synchronize.labels import reconcile_label_change
from github_label_sync.synchronize.models import LabelChange
from github_label_sync.synchronize.rename import classify_label_event
from github_label_sync.synchronize.repositories import list_target_repositories
from github_label_sync.synchronize.results import LabelEventSyncResult, TargetSyncResult
from github_label_sync.utils.constants import DEFAULT_EVENT_MAX_REPOSITORIES, DEFAULT_MAX_CONCURRENCY

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

DirectoryFactory = Callable[[RepositoryReference], LabelDirectoryBase]


async def _sync_target(
    repository: RepositoryReference,
    change: LabelChange,
    directory_factory: DirectoryFactory,
    semaphore: asyncio.Semaphore,
) -> TargetSyncResult:
    """Reconcile one target repository as an independent unit of work."""
    async with semaphore:
        try:
            result = await reconcile_label_change(directory_factory(repository), change)
        except Exception as exc:
            logger.error(
                "Failed to reconcile label in target repository",
                repository=repository.full_name,
                label=change.label.name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return TargetSyncResult(repository, error=exc)
    return TargetSyncResult(repository, result=result)


async def sync_label_change(
    change: LabelChange,
    listing: RepositoryListingBase,
    directory_factory: DirectoryFactory,
    owner: str,
    max_repositories: int = DEFAULT_EVENT_MAX_REPOSITORIES,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    exclude: RepositoryReference | None = None,
) -> LabelEventSyncResult:
    """Reconcile `change` against every repository of `owner`, each target independently.

    A failure in one target is recorded in its TargetSyncResult and never
    prevents the remaining targets from being attempted.
    """
    targets = await list_target_repositories(listing, owner, max_repositories, exclude=exclude)
    semaphore = asyncio.Semaphore(max_concurrency)

    start_time = time.time()
    logger.info("Synchronizing label", label=change.label.name, change=type(change).__name__, target_count=len(targets))
    target_results = await asyncio.gather(*(_sync_target(repository, change, directory_factory, semaphore) for repository in targets))
    end_time = time.time()

    result = LabelEventSyncResult(change, list(target_results))
    logger.info(
        "Synchronized label",
        label=change.label.name,
        duration=round(end_time - start_time, 2),
        target_count=len(targets),
        error_count=len(result.errors),
    )
    return result


async def run_sync_event_workflow(
    source_repo: str,
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
    github_auth_type: GitHubAuthenticationType,
    github_api_url: str,
    event_path: Path,
    max_repositories: int = DEFAULT_EVENT_MAX_REPOSITORIES,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    include_source_repo: bool = False,
) -> LabelEventSyncResult:
    """Run the sync-event workflow: load the label event and propagate it to every repository of the source's owner."""
    payload = LabelEventPayload.from_file(event_path)
    logger.info("Loaded label event", event_path=str(event_path), action=payload.action, label=payload.label.name)
    change = classify_label_event(payload)

    source_adapter = await GitHubKitAdapter.create(
        repo=source_repo,
        github_auth_type=github_auth_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
        github_api_url=github_api_url,
    )
    source = source_adapter.repository

    return await sync_label_change(
        change,
        listing=source_adapter,
        directory_factory=source_adapter.for_repository,
        owner=source.owner,
        max_repositories=max_repositories,
        max_concurrency=max_concurrency,
        exclude=None if include_source_repo else source,
    )
