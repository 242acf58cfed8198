"""Pydantic schema for references to repositories."""

from pydantic import BaseModel, ConfigDict


class RepositoryReference(BaseModel):
    """Identifies a repository that should receive reconciled labels."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        """Return the repository in 'owner/name' format."""
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name
