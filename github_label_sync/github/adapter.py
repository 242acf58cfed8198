"""GitHub client adapter for the githubkit library."""

from pathlib import Path
from typing import Any, NoReturn, Self
from urllib.parse import quote

import structlog
from githubkit import Response
from githubkit.exception import GitHubException, RequestFailed
from githubkit.versions.latest.models import Label

from github_label_sync.configuration.models import GitHubAuthenticationType
from github_label_sync.schemas.labels import LabelModel
from github_label_sync.schemas.repositories import RepositoryReference
from github_label_sync.utils.constants import DEFAULT_GITHUB_API_URL, GITHUB_PAGE_SIZE
from github_label_sync.utils.github import parse_repository_reference

from .abc import LabelDirectoryBase, RepositoryListingBase
from .client import GitHubClient, get_github_client
from .exceptions import ConflictError, NotFoundError, TransportError

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def _is_already_exists(exc: RequestFailed) -> bool:
    """Return whether a 422 response reports that a resource with the same name already exists."""
    try:
        error_data = exc.response.json()
    except Exception:
        return False
    if not isinstance(error_data, dict):
        return False
    return any(isinstance(error, dict) and error.get("code") == "already_exists" for error in error_data.get("errors", []))


def _label_path_name(name: str) -> str:
    """Percent-encode a label name for use as the `{name}` segment of a label URL.

    githubkit interpolates path parameters without encoding them, so `/`, `?`
    and `#` in a name would otherwise address a different label.
    """
    return quote(name, safe="")


class GitHubKitAdapter(LabelDirectoryBase, RepositoryListingBase):
    """GitHub client adapter for the githubkit library, bound to one repository."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = DEFAULT_GITHUB_API_URL,
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance

        Raises:
            ValueError: If the repository is malformed or the private key cannot be read
        """
        reference = await parse_repository_reference(repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=reference.owner,
            repo_name=reference.name,
        )
        client = await get_github_client(
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client, reference.owner, reference.name)

    @property
    def repository(self) -> RepositoryReference:
        """The repository this adapter is bound to."""
        return RepositoryReference(owner=self.owner, name=self.repo_name)

    def for_repository(self, repository: RepositoryReference) -> "GitHubKitAdapter":
        """Return an adapter bound to another repository that shares this adapter's client."""
        return GitHubKitAdapter(self.client, repository.owner, repository.name)

    def _raise_label_error(self, exc: GitHubException, name: str, label_addressed: bool = True) -> NoReturn:
        """Translate a githubkit exception raised by a label call into the label error taxonomy.

        A 404 only means the label is missing when the request addressed the
        label by name. Otherwise it means the repository is missing or not
        visible to the credential, which is a TransportError.
        """
        repository = self.repository.full_name
        if isinstance(exc, RequestFailed):
            status_code = exc.response.status_code
            if status_code == 404 and label_addressed:
                raise NotFoundError(name, repository=repository, cause=exc) from exc
            if status_code == 404:
                logger.error("Repository not found or not accessible", repository=repository, label=name)
                raise TransportError(
                    f"Repository {repository} was not found or is not accessible with the configured credentials", repository, exc
                ) from exc
            if status_code == 422 and _is_already_exists(exc):
                raise ConflictError(name, repository=repository, cause=exc) from exc
            logger.error("GitHub label request failed", repository=repository, label=name, status_code=status_code)
            raise TransportError(f"GitHub request for label '{name}' in {repository} failed with HTTP {status_code}", repository, exc) from exc
        logger.error("GitHub label request could not be completed", repository=repository, label=name, error=str(exc))
        raise TransportError(f"GitHub request for label '{name}' in {repository} could not be completed: {exc}", repository, exc) from exc

    @staticmethod
    def _to_label_model(label: Label) -> LabelModel:
        return LabelModel(name=label.name, color=label.color, description=label.description)

    # Label directory
    async def list_labels(self, max_count: int | None = None) -> list[LabelModel]:
        """List all labels for a repository, handling pagination."""
        all_labels: list[LabelModel] = []
        page: int = 1
        while True:
            try:
                response: Response[list[Label]] = await self.client.rest.issues.async_list_labels_for_repo(
                    owner=self.owner,
                    repo=self.repo_name,
                    per_page=GITHUB_PAGE_SIZE,
                    page=page,
                )
            except GitHubException as exc:
                repository = self.repository.full_name
                logger.error("Failed to list labels", repository=repository, page=page, error=str(exc))
                raise TransportError(f"Failed to list labels in {repository}: {exc}", repository, exc) from exc
            labels: list[Label] = response.parsed_data
            all_labels.extend(self._to_label_model(label) for label in labels)
            if max_count is not None and len(all_labels) >= max_count:
                return all_labels[:max_count]
            if len(labels) < GITHUB_PAGE_SIZE:
                break
            page += 1
        logger.debug("Listed labels", repository=self.repository.full_name, label_count=len(all_labels))
        return all_labels

    async def label_exists(self, name: str) -> bool:
        """Return whether a label with exactly `name` exists in the repository.

        GitHub's single-label lookup matches names case-insensitively, so the
        full listing is compared instead.
        """
        labels = await self.list_labels()
        exists = any(label.name == name for label in labels)
        logger.debug("Checked label existence", repository=self.repository.full_name, label=name, exists=exists)
        return exists

    async def get_label(self, name: str) -> LabelModel:
        """Get a label's current color and description."""
        try:
            response: Response[Label] = await self.client.rest.issues.async_get_label(
                owner=self.owner, repo=self.repo_name, name=_label_path_name(name)
            )
        except GitHubException as exc:
            self._raise_label_error(exc, name)
        return self._to_label_model(response.parsed_data)

    async def create_label(self, name: str, color: str, description: str = "") -> LabelModel:
        """Create a label for a repository."""
        try:
            response: Response[Label] = await self.client.rest.issues.async_create_label(
                owner=self.owner,
                repo=self.repo_name,
                name=name,
                color=color,
                description=description,
            )
        except GitHubException as exc:
            self._raise_label_error(exc, name, label_addressed=False)
        logger.info("Created label", repository=self.repository.full_name, label=name, color=color)
        return self._to_label_model(response.parsed_data)

    async def edit_label(self, name: str, color: str, description: str = "") -> LabelModel:
        """Update the color and description of a label found by name."""
        try:
            response: Response[Label] = await self.client.rest.issues.async_update_label(
                owner=self.owner,
                repo=self.repo_name,
                name=_label_path_name(name),
                color=color,
                description=description,
            )
        except GitHubException as exc:
            self._raise_label_error(exc, name)
        logger.info("Edited label", repository=self.repository.full_name, label=name, color=color)
        return self._to_label_model(response.parsed_data)

    async def rename_and_edit_label(self, old_name: str, new_name: str, color: str, description: str = "") -> LabelModel:
        """Rename a label and update its color and description in one call.

        GitHub rejects a rename onto an existing name with a 422, which surfaces
        as ConflictError. A missing `old_name` surfaces as NotFoundError.
        """
        try:
            response: Response[Label] = await self.client.rest.issues.async_update_label(
                owner=self.owner,
                repo=self.repo_name,
                name=_label_path_name(old_name),
                new_name=new_name,
                color=color,
                description=description,
            )
        except RequestFailed as exc:
            if exc.response.status_code == 422 and _is_already_exists(exc):
                raise ConflictError(new_name, repository=self.repository.full_name, cause=exc) from exc
            self._raise_label_error(exc, old_name)
        except GitHubException as exc:
            self._raise_label_error(exc, old_name)
        logger.info("Renamed label", repository=self.repository.full_name, old_label=old_name, label=new_name, color=color)
        return self._to_label_model(response.parsed_data)

    # Repository listing
    async def _authenticated_login(self) -> str | None:
        """Return the login of the authenticated user, or None for credentials that are not a user."""
        try:
            response = await self.client.rest.users.async_get_authenticated()
        except GitHubException as exc:
            # GitHub App installation tokens cannot read /user.
            logger.debug("Could not resolve the authenticated user", error=str(exc))
            return None
        return response.parsed_data.login

    async def _list_repositories_page(self, owner: str, page: int, owner_kind: str) -> list[Any]:
        response: Response[Any]
        if owner_kind == "org":
            response = await self.client.rest.repos.async_list_for_org(org=owner, type="all", per_page=GITHUB_PAGE_SIZE, page=page)
        elif owner_kind == "authenticated_user":
            response = await self.client.rest.repos.async_list_for_authenticated_user(
                affiliation="owner", per_page=GITHUB_PAGE_SIZE, page=page
            )
        else:
            response = await self.client.rest.repos.async_list_for_user(username=owner, type="owner", per_page=GITHUB_PAGE_SIZE, page=page)
        return response.parsed_data

    async def _user_owner_kind(self, owner: str) -> str:
        """Pick the user listing that can see the most of `owner`'s repositories."""
        login = await self._authenticated_login()
        if login is not None and login.lower() == owner.lower():
            logger.info("Owner is the authenticated user, listing its public and private repositories", owner=owner)
            return "authenticated_user"
        logger.warning("Owner is a user other than the authenticated one, only its public repositories are visible", owner=owner)
        return "user"

    async def list_owner_repositories(self, owner: str, max_count: int) -> list[RepositoryReference]:
        """List at most `max_count` non-archived repositories owned by `owner`, handling pagination.

        Owners that are not organizations are listed as users. Private
        repositories of a user are only visible when that user is the one
        the credential authenticates as.
        """
        repositories: list[RepositoryReference] = []
        owner_kind = "org"
        page: int = 1
        while len(repositories) < max_count:
            try:
                batch = await self._list_repositories_page(owner, page, owner_kind)
            except RequestFailed as exc:
                if exc.response.status_code == 404 and owner_kind == "org" and page == 1:
                    logger.info("Owner is not an organization, listing user repositories instead", owner=owner)
                    owner_kind = await self._user_owner_kind(owner)
                    continue
                logger.error("Failed to list repositories", owner=owner, page=page, status_code=exc.response.status_code)
                raise TransportError(f"Failed to list repositories of {owner}: HTTP {exc.response.status_code}", None, exc) from exc
            except GitHubException as exc:
                logger.error("Failed to list repositories", owner=owner, page=page, error=str(exc))
                raise TransportError(f"Failed to list repositories of {owner}: {exc}", None, exc) from exc
            for repo in batch:
                if repo.archived:
                    continue
                repositories.append(RepositoryReference(owner=repo.owner.login, name=repo.name))
                if len(repositories) >= max_count:
                    break
            if len(batch) < GITHUB_PAGE_SIZE:
                break
            page += 1
        return repositories
