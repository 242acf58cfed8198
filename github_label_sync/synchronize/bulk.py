"""Orchestrates a bulk resync of every source label to every target repository.

The resync runs as one sequential unit of work: the first failing
(label, repository) pair aborts every pair after it, and the whole job has to
be re-run to retry.
"""

import time
from pathlib import Path

import structlog

from github_label_sync.configuration.models import GitHubAuthenticationType
from github_label_sync.github.abc import LabelDirectoryBase, RepositoryListingBase
from github_label_sync.github.adapter import GitHubKitAdapter
from github_label_sync.schemas.repositories import RepositoryReference
from github_label_sync.synchronize.driver import DirectoryFactory
from github_label_sync.synchronize.labels import reconcile_label_change
from github_label_sync.synchronize.models import ContentEdit
from github_label_sync.synchronize.repositories import list_target_repositories
from github_label_sync.synchronize.results import BulkResyncResult, LabelReconciliationResult
from github_label_sync.utils.constants import DEFAULT_BULK_MAX_REPOSITORIES, DEFAULT_MAX_LABELS

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def resync_labels(
    source: LabelDirectoryBase,
    listing: RepositoryListingBase,
    directory_factory: DirectoryFactory,
    max_repositories: int = DEFAULT_BULK_MAX_REPOSITORIES,
    max_labels: int = DEFAULT_MAX_LABELS,
    exclude: RepositoryReference | None = None,
) -> BulkResyncResult:
    """Push every label of `source` to every repository of its owner, one pair at a time."""
    start_time = time.time()
    label_names = [label.name for label in await source.list_labels(max_count=max_labels)]
    logger.info("Found labels in source repository", repository=source.repository.full_name, labels=label_names)
    if len(label_names) >= max_labels:
        logger.warning(
            "Label limit reached, labels beyond it are not synchronized",
            repository=source.repository.full_name,
            max_labels=max_labels,
        )
    targets = await list_target_repositories(listing, source.repository.owner, max_repositories, exclude=exclude)

    results: list[LabelReconciliationResult] = []
    for label_name in label_names:
        repository: RepositoryReference | None = None
        try:
            # Read the current definition rather than trusting the listing, the
            # source may have changed since the run started.
            label = await source.get_label(label_name)
            change = ContentEdit(label=label)
            for repository in targets:
                logger.info("Syncing label to repository", label=label_name, repository=repository.full_name)
                results.append(await reconcile_label_change(directory_factory(repository), change))
        except Exception as exc:
            logger.error(
                "Bulk resync aborted, remaining labels and repositories were not synchronized",
                label=label_name,
                repository=repository.full_name if repository is not None else None,
                error=str(exc),
                error_type=type(exc).__name__,
                completed=len(results),
            )
            return BulkResyncResult(results, failed_label=label_name, failed_repository=repository, error=exc)

    logger.info(
        "Bulk resync complete",
        label_count=len(label_names),
        target_count=len(targets),
        reconciliation_count=len(results),
        duration=round(time.time() - start_time, 2),
    )
    return BulkResyncResult(results)


async def run_resync_workflow(
    source_repo: str,
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
    github_auth_type: GitHubAuthenticationType,
    github_api_url: str,
    max_repositories: int = DEFAULT_BULK_MAX_REPOSITORIES,
    max_labels: int = DEFAULT_MAX_LABELS,
    include_source_repo: bool = False,
) -> BulkResyncResult:
    """Run the resync-all workflow against the source repository's owner."""
    source_adapter = await GitHubKitAdapter.create(
        repo=source_repo,
        github_auth_type=github_auth_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
        github_api_url=github_api_url,
    )
    return await resync_labels(
        source=source_adapter,
        listing=source_adapter,
        directory_factory=source_adapter.for_repository,
        max_repositories=max_repositories,
        max_labels=max_labels,
        exclude=None if include_source_repo else source_adapter.repository,
    )
