"""Enumerates the repositories that receive reconciled labels."""

import structlog

from github_label_sync.github.abc import RepositoryListingBase
from github_label_sync.schemas.repositories import RepositoryReference

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def list_target_repositories(
    listing: RepositoryListingBase,
    owner: str,
    max_count: int,
    exclude: RepositoryReference | None = None,
) -> list[RepositoryReference]:
    """List up to `max_count` non-archived repositories owned by `owner`.

    The cap is applied by the listing before `exclude` is removed, so excluding
    the source repository never pulls in a repository beyond the cap.
    Repositories past the cap are left out with a warning. Order follows the
    upstream listing and carries no meaning.
    """
    repositories = await listing.list_owner_repositories(owner, max_count)
    targets: list[RepositoryReference] = []
    seen: set[RepositoryReference] = set()
    for repository in repositories:
        if repository == exclude or repository in seen:
            continue
        seen.add(repository)
        targets.append(repository)
    logger.info(
        "Enumerated target repositories",
        owner=owner,
        max_count=max_count,
        target_count=len(targets),
        excluded=exclude.full_name if exclude is not None else None,
    )
    if len(repositories) >= max_count:
        logger.warning("Repository limit reached, repositories beyond it are not synchronized", owner=owner, max_count=max_count)
    return targets
