"""Base ABCs for label directories and repository listings."""

from abc import ABC, abstractmethod

from github_label_sync.schemas.labels import LabelModel
from github_label_sync.schemas.repositories import RepositoryReference


class LabelDirectoryBase(ABC):
    """Reads and writes the label set of a single repository."""

    @property
    @abstractmethod
    def repository(self) -> RepositoryReference:
        """The repository this directory is bound to."""
        pass

    @abstractmethod
    async def list_labels(self, max_count: int | None = None) -> list[LabelModel]:
        """List labels in the repository, at most `max_count` when given."""
        pass

    @abstractmethod
    async def label_exists(self, name: str) -> bool:
        """Return whether a label with exactly this name exists (case-sensitive)."""
        pass

    @abstractmethod
    async def get_label(self, name: str) -> LabelModel:
        """Read a label's current color and description. Raises NotFoundError if absent."""
        pass

    @abstractmethod
    async def create_label(self, name: str, color: str, description: str = "") -> LabelModel:
        """Create a label. Raises ConflictError if the name already exists."""
        pass

    @abstractmethod
    async def edit_label(self, name: str, color: str, description: str = "") -> LabelModel:
        """Update color and description of a label. Raises NotFoundError if absent."""
        pass

    @abstractmethod
    async def rename_and_edit_label(self, old_name: str, new_name: str, color: str, description: str = "") -> LabelModel:
        """Rename a label and update its color and description in one call.

        Raises NotFoundError if `old_name` is absent and ConflictError if `new_name` is taken.
        """
        pass


class RepositoryListingBase(ABC):
    """Lists repositories owned by an organization."""

    @abstractmethod
    async def list_owner_repositories(self, owner: str, max_count: int) -> list[RepositoryReference]:
        """List at most `max_count` non-archived repositories owned by `owner`."""
        pass
