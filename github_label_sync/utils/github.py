"""Contains utility functions for GitHub interactions."""

from github_label_sync.schemas.repositories import RepositoryReference


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("A source repository is required in config.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


async def parse_repository_reference(repo: str | None) -> RepositoryReference:
    """Parses an 'owner/repo' string into a repository reference."""
    owner, name = await split_repository_in_configuration(repo=repo)
    return RepositoryReference(owner=owner, name=name)
