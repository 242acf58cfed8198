"""Decides whether a label webhook event renamed the label."""

import structlog

from github_label_sync.schemas.labels import LabelEventPayload
from github_label_sync.synchronize.models import ContentEdit, LabelChange, LabelCreated, LabelDeleted, RenameEdit

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def is_label_renamed(previous_name: str | None, name: str) -> bool:
    """Return whether an edit changed the label's name.

    GitHub sends the `edited` action for any field change and only attaches
    `changes.name.from` when the name changed.
    """
    return bool(previous_name) and previous_name != name


def classify_label_event(payload: LabelEventPayload) -> LabelChange:
    """Turn a label webhook payload into the change it describes."""
    label = payload.label
    if payload.action == "created":
        return LabelCreated(label=label)
    if payload.action == "deleted":
        return LabelDeleted(label=label)

    previous_name = payload.previous_name
    if is_label_renamed(previous_name, label.name):
        logger.info("Label has been renamed", label=label.name, previous_label=previous_name)
        # is_label_renamed guarantees previous_name is a non-empty string here.
        return RenameEdit(old_name=previous_name, label=label)  # type: ignore[arg-type]
    logger.info("Label has not been renamed", label=label.name)
    return ContentEdit(label=label)
