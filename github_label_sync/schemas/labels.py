"""Pydantic schemas for labels and the label webhook payload."""

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LabelModel(BaseModel):
    """Pydantic model for a GitHub label."""

    model_config = ConfigDict(frozen=True)

    name: str
    color: str
    description: str = ""

    @field_validator("description", mode="before")
    @classmethod
    def _normalize_description(cls, value: Any) -> Any:
        # GitHub reports labels without a description as null.
        if value is None:
            return ""
        return value

    @field_validator("color", mode="before")
    @classmethod
    def _normalize_color(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lstrip("#")
        return value


class NameChangeModel(BaseModel):
    """Pydantic model for the previous value of a changed label field."""

    model_config = ConfigDict(populate_by_name=True)

    previous: str | None = Field(default=None, alias="from")


class LabelChangesModel(BaseModel):
    """Pydantic model for the `changes` object attached to edited label events."""

    name: NameChangeModel | None = None
    color: NameChangeModel | None = None
    description: NameChangeModel | None = None


class LabelEventPayload(BaseModel):
    """Pydantic model for the subset of the GitHub `label` webhook payload that is consumed.

    Other payload fields (repository, sender, installation, ...) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    action: Literal["created", "edited", "deleted"]
    label: LabelModel
    changes: LabelChangesModel | None = None

    @property
    def previous_name(self) -> str | None:
        """Return the label's name before the edit, if the edit changed the name."""
        if self.changes is None or self.changes.name is None:
            return None
        return self.changes.name.previous

    @classmethod
    def from_file(cls, path: Path) -> "LabelEventPayload":
        """Load a webhook payload from a JSON file such as the one at GITHUB_EVENT_PATH."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return cls.model_validate(data)
