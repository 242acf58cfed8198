"""Unit tests for the GitHubKitAdapter class and related GitHub operations."""

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from githubkit.exception import GitHubException, RequestFailed

from github_label_sync.configuration.models import GitHubAuthenticationType
from github_label_sync.github.adapter import GitHubKitAdapter
from github_label_sync.github.exceptions import ConflictError, NotFoundError, TransportError
from github_label_sync.schemas.labels import LabelModel
from github_label_sync.schemas.repositories import RepositoryReference


class DummyResponse:
    """A dummy response object to mock GitHub API responses."""

    def __init__(self, parsed_data: Any, status_code: int = 200) -> None:
        """Initialize the dummy response with parsed data and a status code."""
        self.status_code: int = status_code
        self.parsed_data = parsed_data


def make_request_failed(status_code: int, body: dict[str, Any] | None = None) -> RequestFailed:
    """Build a githubkit RequestFailed carrying the given status code and JSON body."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body or {}
    return RequestFailed(response)


def make_label(name: str, color: str = "ff0000", description: str | None = None) -> SimpleNamespace:
    """Build an object shaped like a githubkit Label."""
    return SimpleNamespace(name=name, color=color, description=description)


def make_repository(name: str, archived: bool = False, owner: str = "neurobagel") -> SimpleNamespace:
    """Build an object shaped like a githubkit MinimalRepository."""
    return SimpleNamespace(name=name, archived=archived, owner=SimpleNamespace(login=owner))


ALREADY_EXISTS = {"message": "Validation Failed", "errors": [{"resource": "Label", "code": "already_exists", "field": "name"}]}


@pytest.fixture
def adapter() -> GitHubKitAdapter:
    """An adapter bound to neurobagel/api with a mocked githubkit client."""
    return GitHubKitAdapter(MagicMock(), "neurobagel", "api")


def test_for_repository_shares_client(adapter: GitHubKitAdapter) -> None:
    """Test that an adapter for another repository reuses the same client."""
    other = adapter.for_repository(RepositoryReference(owner="neurobagel", name="bagelbids"))
    assert other.client is adapter.client
    assert other.repository.full_name == "neurobagel/bagelbids"


@pytest.mark.asyncio
async def test_create_binds_adapter_to_parsed_repository() -> None:
    """Test that create parses the owner/repo string and binds the adapter to it."""
    client = MagicMock()
    with patch("github_label_sync.github.adapter.get_github_client", new=AsyncMock(return_value=client)) as mock_get_client:
        adapter = await GitHubKitAdapter.create(
            repo="/neurobagel/planning/",
            github_auth_type=GitHubAuthenticationType.PAT,
            github_pat_token="token",
        )

    assert adapter.client is client
    assert adapter.repository == RepositoryReference(owner="neurobagel", name="planning")
    assert mock_get_client.await_args.kwargs["github_pat_token"] == "token"


@pytest.mark.asyncio
async def test_create_rejects_malformed_repository() -> None:
    """Test that create raises ValueError for a repository that is not owner/repo."""
    with patch("github_label_sync.github.adapter.get_github_client", new=AsyncMock()) as mock_get_client:
        with pytest.raises(ValueError):
            await GitHubKitAdapter.create(repo="neurobagel", github_auth_type=GitHubAuthenticationType.PAT, github_pat_token="token")
    mock_get_client.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_labels_paginates(adapter: GitHubKitAdapter) -> None:
    """Test that labels are listed across pages until a short page is returned."""
    first_page = [make_label(f"label-{index}") for index in range(100)]
    second_page = [make_label("last", description="Final")]
    adapter.client.rest.issues.async_list_labels_for_repo = AsyncMock(side_effect=[DummyResponse(first_page), DummyResponse(second_page)])

    labels = await adapter.list_labels()

    assert len(labels) == 101
    assert labels[-1] == LabelModel(name="last", color="ff0000", description="Final")
    assert adapter.client.rest.issues.async_list_labels_for_repo.await_count == 2


@pytest.mark.asyncio
async def test_list_labels_respects_max_count(adapter: GitHubKitAdapter) -> None:
    """Test that listing stops once max_count labels have been collected."""
    first_page = [make_label(f"label-{index}") for index in range(100)]
    adapter.client.rest.issues.async_list_labels_for_repo = AsyncMock(return_value=DummyResponse(first_page))

    labels = await adapter.list_labels(max_count=10)

    assert len(labels) == 10
    adapter.client.rest.issues.async_list_labels_for_repo.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, expected",
    [
        pytest.param("bug", True, id="exact match"),
        pytest.param("Bug", False, id="different case"),
        pytest.param("bugfix", False, id="longer name sharing a prefix"),
        pytest.param("bu", False, id="substring"),
    ],
)
async def test_label_exists_matches_whole_name_case_sensitively(adapter: GitHubKitAdapter, name: str, expected: bool) -> None:
    """Test that existence requires an exact, case-sensitive name match."""
    adapter.client.rest.issues.async_list_labels_for_repo = AsyncMock(return_value=DummyResponse([make_label("bug")]))
    assert await adapter.label_exists(name) is expected


@pytest.mark.asyncio
async def test_label_exists_raises_transport_error_on_failure(adapter: GitHubKitAdapter) -> None:
    """Test that a failed query is distinguished from a label that is not found."""
    adapter.client.rest.issues.async_list_labels_for_repo = AsyncMock(side_effect=make_request_failed(401))
    with pytest.raises(TransportError):
        await adapter.label_exists("bug")


@pytest.mark.asyncio
async def test_get_label_normalizes_null_description(adapter: GitHubKitAdapter) -> None:
    """Test that a label without a description is read with an empty description."""
    adapter.client.rest.issues.async_get_label = AsyncMock(return_value=DummyResponse(make_label("bug", "d73a4a", None)))
    assert await adapter.get_label("bug") == LabelModel(name="bug", color="d73a4a", description="")


@pytest.mark.asyncio
async def test_get_label_not_found(adapter: GitHubKitAdapter) -> None:
    """Test that a missing label surfaces NotFoundError."""
    adapter.client.rest.issues.async_get_label = AsyncMock(side_effect=make_request_failed(404))
    with pytest.raises(NotFoundError):
        await adapter.get_label("bug")


@pytest.mark.asyncio
async def test_create_label_success(adapter: GitHubKitAdapter) -> None:
    """Test successful label creation."""
    adapter.client.rest.issues.async_create_label = AsyncMock(return_value=DummyResponse(make_label("bug", "ff0000", "Something broken")))

    label = await adapter.create_label("bug", "ff0000", "Something broken")

    assert label == LabelModel(name="bug", color="ff0000", description="Something broken")
    adapter.client.rest.issues.async_create_label.assert_awaited_once_with(
        owner="neurobagel", repo="api", name="bug", color="ff0000", description="Something broken"
    )


@pytest.mark.asyncio
async def test_create_label_conflict(adapter: GitHubKitAdapter) -> None:
    """Test that creating a label whose name exists raises ConflictError with the original error chained."""
    original = make_request_failed(422, ALREADY_EXISTS)
    adapter.client.rest.issues.async_create_label = AsyncMock(side_effect=original)

    with pytest.raises(ConflictError) as exc_info:
        await adapter.create_label("bug", "ff0000")

    assert exc_info.value.cause is original
    assert exc_info.value.__cause__ is original
    assert exc_info.value.repository == "neurobagel/api"


@pytest.mark.asyncio
async def test_create_label_other_validation_error_is_transport_error(adapter: GitHubKitAdapter) -> None:
    """Test that a 422 unrelated to an existing name is not mistaken for a conflict."""
    body = {"message": "Validation Failed", "errors": [{"resource": "Label", "code": "invalid", "field": "color"}]}
    adapter.client.rest.issues.async_create_label = AsyncMock(side_effect=make_request_failed(422, body))
    with pytest.raises(TransportError):
        await adapter.create_label("bug", "not-a-color")


@pytest.mark.asyncio
async def test_edit_label_not_found(adapter: GitHubKitAdapter) -> None:
    """Test that editing a missing label raises NotFoundError."""
    adapter.client.rest.issues.async_update_label = AsyncMock(side_effect=make_request_failed(404))
    with pytest.raises(NotFoundError) as exc_info:
        await adapter.edit_label("bug", "ff0000", "Something broken")
    assert exc_info.value.name == "bug"


@pytest.mark.asyncio
async def test_edit_label_does_not_send_new_name(adapter: GitHubKitAdapter) -> None:
    """Test that a plain edit only updates color and description."""
    adapter.client.rest.issues.async_update_label = AsyncMock(return_value=DummyResponse(make_label("bug", "00ff00", "Updated")))

    await adapter.edit_label("bug", "00ff00", "Updated")

    kwargs = adapter.client.rest.issues.async_update_label.await_args.kwargs
    assert "new_name" not in kwargs
    assert kwargs["name"] == "bug"


@pytest.mark.asyncio
async def test_rename_and_edit_label_success(adapter: GitHubKitAdapter) -> None:
    """Test that a rename sends the old name, the new name, and the new attributes in one call."""
    adapter.client.rest.issues.async_update_label = AsyncMock(return_value=DummyResponse(make_label("defect", "b60205", "Broken")))

    label = await adapter.rename_and_edit_label("bug", "defect", "b60205", "Broken")

    assert label.name == "defect"
    adapter.client.rest.issues.async_update_label.assert_awaited_once_with(
        owner="neurobagel", repo="api", name="bug", new_name="defect", color="b60205", description="Broken"
    )


@pytest.mark.asyncio
async def test_rename_and_edit_label_conflict_names_new_label(adapter: GitHubKitAdapter) -> None:
    """Test that renaming onto an existing name raises ConflictError for the new name."""
    adapter.client.rest.issues.async_update_label = AsyncMock(side_effect=make_request_failed(422, ALREADY_EXISTS))
    with pytest.raises(ConflictError) as exc_info:
        await adapter.rename_and_edit_label("bug", "defect", "b60205")
    assert exc_info.value.name == "defect"


@pytest.mark.asyncio
async def test_rename_and_edit_label_not_found_names_old_label(adapter: GitHubKitAdapter) -> None:
    """Test that renaming a missing label raises NotFoundError for the old name."""
    adapter.client.rest.issues.async_update_label = AsyncMock(side_effect=make_request_failed(404))
    with pytest.raises(NotFoundError) as exc_info:
        await adapter.rename_and_edit_label("bug", "defect", "b60205")
    assert exc_info.value.name == "bug"


@pytest.mark.asyncio
async def test_network_failure_is_transport_error(adapter: GitHubKitAdapter) -> None:
    """Test that failures without an HTTP response surface as TransportError."""
    original = GitHubException("Connection reset by peer")
    adapter.client.rest.issues.async_create_label = AsyncMock(side_effect=original)
    with pytest.raises(TransportError) as exc_info:
        await adapter.create_label("bug", "ff0000")
    assert exc_info.value.cause is original


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, encoded",
    [
        pytest.param("area/api", "area%2Fapi", id="slash"),
        pytest.param("needs info?", "needs%20info%3F", id="question mark"),
        pytest.param("p#1", "p%231", id="hash"),
    ],
)
async def test_label_name_is_encoded_in_label_url(adapter: GitHubKitAdapter, name: str, encoded: str) -> None:
    """Test that label names addressed in the URL path are percent-encoded for get, edit, and rename."""
    adapter.client.rest.issues.async_get_label = AsyncMock(return_value=DummyResponse(make_label(name)))
    adapter.client.rest.issues.async_update_label = AsyncMock(return_value=DummyResponse(make_label(name)))

    await adapter.get_label(name)
    await adapter.edit_label(name, "ff0000")
    await adapter.rename_and_edit_label(name, "renamed/label?", "ff0000")

    assert adapter.client.rest.issues.async_get_label.await_args.kwargs["name"] == encoded
    edit_call, rename_call = adapter.client.rest.issues.async_update_label.await_args_list
    assert edit_call.kwargs["name"] == encoded
    assert rename_call.kwargs["name"] == encoded
    # The new name travels in the request body and is sent as-is.
    assert rename_call.kwargs["new_name"] == "renamed/label?"


@pytest.mark.asyncio
async def test_not_found_error_keeps_unencoded_label_name(adapter: GitHubKitAdapter) -> None:
    """Test that errors name the label as the user knows it, not its encoded form."""
    adapter.client.rest.issues.async_update_label = AsyncMock(side_effect=make_request_failed(404))
    with pytest.raises(NotFoundError) as exc_info:
        await adapter.edit_label("area/api", "ff0000")
    assert exc_info.value.name == "area/api"


@pytest.mark.asyncio
async def test_create_label_in_missing_repository_is_transport_error(adapter: GitHubKitAdapter) -> None:
    """Test that a 404 on create reports an unreachable repository rather than a missing label."""
    original = make_request_failed(404)
    adapter.client.rest.issues.async_create_label = AsyncMock(side_effect=original)

    with pytest.raises(TransportError) as exc_info:
        await adapter.create_label("bug", "ff0000")

    assert not isinstance(exc_info.value, NotFoundError)
    assert "neurobagel/api" in str(exc_info.value)
    assert exc_info.value.cause is original


@pytest.mark.asyncio
async def test_list_owner_repositories_skips_archived_and_caps(adapter: GitHubKitAdapter) -> None:
    """Test that archived repositories are skipped and listing stops at max_count."""
    batch = [make_repository("planning"), make_repository("old-tool", archived=True), make_repository("api"), make_repository("bagelbids")]
    adapter.client.rest.repos.async_list_for_org = AsyncMock(return_value=DummyResponse(batch))

    repositories = await adapter.list_owner_repositories("neurobagel", max_count=2)

    assert [repository.full_name for repository in repositories] == ["neurobagel/planning", "neurobagel/api"]


@pytest.mark.asyncio
async def test_list_owner_repositories_paginates(adapter: GitHubKitAdapter) -> None:
    """Test that repository listing follows pages until a short page is returned."""
    first_page = [make_repository(f"repo-{index}") for index in range(100)]
    second_page = [make_repository("repo-100")]
    adapter.client.rest.repos.async_list_for_org = AsyncMock(side_effect=[DummyResponse(first_page), DummyResponse(second_page)])

    repositories = await adapter.list_owner_repositories("neurobagel", max_count=500)

    assert len(repositories) == 101


@pytest.mark.asyncio
async def test_list_owner_repositories_falls_back_to_public_user_listing(adapter: GitHubKitAdapter) -> None:
    """Test that a user owner other than the authenticated user is listed through the public user endpoint."""
    adapter.client.rest.repos.async_list_for_org = AsyncMock(side_effect=make_request_failed(404))
    adapter.client.rest.users.async_get_authenticated = AsyncMock(return_value=DummyResponse(SimpleNamespace(login="someone-else")))
    adapter.client.rest.repos.async_list_for_user = AsyncMock(return_value=DummyResponse([make_repository("dotfiles", owner="octocat")]))

    repositories = await adapter.list_owner_repositories("octocat", max_count=50)

    assert repositories == [RepositoryReference(owner="octocat", name="dotfiles")]
    adapter.client.rest.repos.async_list_for_user.assert_awaited_once_with(username="octocat", type="owner", per_page=100, page=1)


@pytest.mark.asyncio
async def test_list_owner_repositories_authenticated_user_includes_private(adapter: GitHubKitAdapter) -> None:
    """Test that the authenticated user's own repositories are listed through the endpoint that includes private ones."""
    adapter.client.rest.repos.async_list_for_org = AsyncMock(side_effect=make_request_failed(404))
    adapter.client.rest.users.async_get_authenticated = AsyncMock(return_value=DummyResponse(SimpleNamespace(login="Octocat")))
    adapter.client.rest.repos.async_list_for_authenticated_user = AsyncMock(
        return_value=DummyResponse([make_repository("dotfiles", owner="octocat"), make_repository("private-notes", owner="octocat")])
    )
    adapter.client.rest.repos.async_list_for_user = AsyncMock()

    repositories = await adapter.list_owner_repositories("octocat", max_count=50)

    assert [repository.name for repository in repositories] == ["dotfiles", "private-notes"]
    adapter.client.rest.repos.async_list_for_authenticated_user.assert_awaited_once_with(affiliation="owner", per_page=100, page=1)
    adapter.client.rest.repos.async_list_for_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_owner_repositories_app_token_uses_public_user_listing(adapter: GitHubKitAdapter) -> None:
    """Test that credentials that cannot read the authenticated user fall back to the public user listing."""
    adapter.client.rest.repos.async_list_for_org = AsyncMock(side_effect=make_request_failed(404))
    adapter.client.rest.users.async_get_authenticated = AsyncMock(side_effect=make_request_failed(403))
    adapter.client.rest.repos.async_list_for_user = AsyncMock(return_value=DummyResponse([make_repository("dotfiles", owner="octocat")]))

    repositories = await adapter.list_owner_repositories("octocat", max_count=50)

    assert repositories == [RepositoryReference(owner="octocat", name="dotfiles")]


@pytest.mark.asyncio
async def test_list_owner_repositories_failure_is_transport_error(adapter: GitHubKitAdapter) -> None:
    """Test that a failing repository listing raises TransportError."""
    adapter.client.rest.repos.async_list_for_org = AsyncMock(side_effect=make_request_failed(403))
    with pytest.raises(TransportError):
        await adapter.list_owner_repositories("neurobagel", max_count=50)
