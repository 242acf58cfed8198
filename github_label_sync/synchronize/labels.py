"""Contains reconciliation logic for propagating one label change to one repository.

Each reconciliation reads the target's label state, then performs at most one
create, edit, or rename call. The read and the write are not atomic, so a
ConflictError raised by the write is treated as the authoritative answer for
creates and renames. A NotFoundError raised by the write always propagates.
"""

import structlog

from github_label_sync.github.abc import LabelDirectoryBase
from github_label_sync.github.exceptions import ConflictError
from github_label_sync.schemas.labels import LabelModel
from github_label_sync.synchronize.models import (
    ContentEdit,
    LabelChange,
    LabelCreated,
    LabelDeleted,
    ReconciliationOutcome,
    RenameEdit,
)
from github_label_sync.synchronize.results import LabelReconciliationResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def _create_label(directory: LabelDirectoryBase, label: LabelModel) -> LabelReconciliationResult:
    """Create the label, resolving a concurrent creation of the same name to a skipped conflict."""
    repository = directory.repository
    logger.info("Creating label", repository=repository.full_name, label=label.name)
    try:
        await directory.create_label(label.name, label.color, label.description)
    except ConflictError:
        logger.warning(
            "Label appeared in target before it could be created",
            repository=repository.full_name,
            label=label.name,
            outcome=ReconciliationOutcome.SKIPPED_CONFLICT.value,
        )
        return LabelReconciliationResult(repository, label.name, ReconciliationOutcome.SKIPPED_CONFLICT)
    logger.info("Label reconciled", repository=repository.full_name, label=label.name, outcome=ReconciliationOutcome.CREATED.value)
    return LabelReconciliationResult(repository, label.name, ReconciliationOutcome.CREATED)


async def _reconcile_created(directory: LabelDirectoryBase, change: LabelCreated) -> LabelReconciliationResult:
    repository = directory.repository
    label = change.label
    if await directory.label_exists(label.name):
        logger.info(
            "Cannot create label because it already exists",
            repository=repository.full_name,
            label=label.name,
            outcome=ReconciliationOutcome.SKIPPED_CONFLICT.value,
        )
        return LabelReconciliationResult(repository, label.name, ReconciliationOutcome.SKIPPED_CONFLICT)
    return await _create_label(directory, label)


async def _reconcile_content_edit(directory: LabelDirectoryBase, change: ContentEdit) -> LabelReconciliationResult:
    repository = directory.repository
    label = change.label
    if not await directory.label_exists(label.name):
        logger.info("Label was edited but never synced to target, treating it as new", repository=repository.full_name, label=label.name)
        return await _create_label(directory, label)

    logger.info("Updating label", repository=repository.full_name, label=label.name)
    await directory.edit_label(label.name, label.color, label.description)
    logger.info("Label reconciled", repository=repository.full_name, label=label.name, outcome=ReconciliationOutcome.EDITED.value)
    return LabelReconciliationResult(repository, label.name, ReconciliationOutcome.EDITED)


async def _reconcile_rename(directory: LabelDirectoryBase, change: RenameEdit) -> LabelReconciliationResult:
    repository = directory.repository
    label = change.label
    existing_names = {existing.name for existing in await directory.list_labels()}
    if change.new_name in existing_names:
        logger.warning(
            "Label was renamed but the new name already exists in target, manual intervention required",
            repository=repository.full_name,
            label=change.new_name,
            previous_label=change.old_name,
            outcome=ReconciliationOutcome.SKIPPED_CONFLICT.value,
        )
        return LabelReconciliationResult(repository, change.new_name, ReconciliationOutcome.SKIPPED_CONFLICT)

    if change.old_name not in existing_names:
        logger.info(
            "Label was renamed but target has neither the old nor the new name, creating it",
            repository=repository.full_name,
            label=change.new_name,
            previous_label=change.old_name,
        )
        return await _create_label(directory, label)

    logger.info("Renaming label", repository=repository.full_name, label=change.new_name, previous_label=change.old_name)
    try:
        await directory.rename_and_edit_label(change.old_name, change.new_name, label.color, label.description)
    except ConflictError:
        logger.warning(
            "New label name appeared in target before the rename, manual intervention required",
            repository=repository.full_name,
            label=change.new_name,
            previous_label=change.old_name,
            outcome=ReconciliationOutcome.SKIPPED_CONFLICT.value,
        )
        return LabelReconciliationResult(repository, change.new_name, ReconciliationOutcome.SKIPPED_CONFLICT)
    logger.info(
        "Label reconciled",
        repository=repository.full_name,
        label=change.new_name,
        previous_label=change.old_name,
        outcome=ReconciliationOutcome.RENAMED_AND_EDITED.value,
    )
    return LabelReconciliationResult(repository, change.new_name, ReconciliationOutcome.RENAMED_AND_EDITED)


async def reconcile_label_change(directory: LabelDirectoryBase, change: LabelChange) -> LabelReconciliationResult:
    """Apply one label change to the repository behind `directory`.

    Outcomes:
        - created: create unless the name exists (skipped-conflict).
        - content edit: edit in place if the name exists, otherwise create.
        - rename: skipped-conflict if the new name exists; rename if the old
          name exists; otherwise create under the new name.
        - deleted: never propagated (skipped-noop), since the label may still
          be attached to issues that need manual triage.
    """
    if isinstance(change, LabelDeleted):
        logger.info(
            "Label deletions are not propagated, leaving target unchanged",
            repository=directory.repository.full_name,
            label=change.label.name,
            outcome=ReconciliationOutcome.SKIPPED_NOOP.value,
        )
        return LabelReconciliationResult(directory.repository, change.label.name, ReconciliationOutcome.SKIPPED_NOOP)
    if isinstance(change, LabelCreated):
        return await _reconcile_created(directory, change)
    if isinstance(change, ContentEdit):
        return await _reconcile_content_edit(directory, change)
    if isinstance(change, RenameEdit):
        return await _reconcile_rename(directory, change)
    raise TypeError(f"Unsupported label change: {change!r}")
