"""Label changes and reconciliation outcomes used by the synchronize module."""

from dataclasses import dataclass
from enum import Enum

from github_label_sync.schemas.labels import LabelModel


class ReconciliationOutcome(str, Enum):
    """What a single reconciliation did to a target repository."""

    CREATED = "created"
    EDITED = "edited"
    RENAMED_AND_EDITED = "renamed-and-edited"
    SKIPPED_CONFLICT = "skipped-conflict"
    SKIPPED_NOOP = "skipped-noop"


@dataclass(frozen=True)
class LabelCreated:
    """A label was created in the source repository."""

    label: LabelModel


@dataclass(frozen=True)
class ContentEdit:
    """A label's color or description changed while its name stayed the same."""

    label: LabelModel


@dataclass(frozen=True)
class RenameEdit:
    """A label was renamed from `old_name`, possibly with color or description changes."""

    old_name: str
    label: LabelModel

    @property
    def new_name(self) -> str:
        """The label's name after the rename."""
        return self.label.name


@dataclass(frozen=True)
class LabelDeleted:
    """A label was deleted in the source repository."""

    label: LabelModel


LabelChange = LabelCreated | ContentEdit | RenameEdit | LabelDeleted
