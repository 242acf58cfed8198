"""Contains results of label synchronization runs."""

from github_label_sync.schemas.repositories import RepositoryReference
from github_label_sync.synchronize.models import LabelChange, ReconciliationOutcome


class LabelReconciliationResult:
    """Contains the outcome of reconciling one label against one target repository."""

    def __init__(self, repository: RepositoryReference, label_name: str, outcome: ReconciliationOutcome) -> None:
        """Initialize the result with the target repository, the label name, and the outcome."""
        self.repository = repository
        self.label_name = label_name
        self.outcome = outcome

    def __repr__(self) -> str:
        return f"LabelReconciliationResult(repository={self.repository.full_name!r}, label_name={self.label_name!r}, outcome={self.outcome.value!r})"


class TargetSyncResult:
    """Contains the result or the error of one independent unit of work in a fan-out."""

    def __init__(
        self,
        repository: RepositoryReference,
        result: LabelReconciliationResult | None = None,
        error: BaseException | None = None,
    ) -> None:
        """Initialize the result with either a reconciliation result or the error that ended the unit."""
        self.repository = repository
        self.result = result
        self.error = error

    @property
    def succeeded(self) -> bool:
        """Whether the unit of work completed without an error."""
        return self.error is None


class LabelEventSyncResult:
    """Contains results of propagating one label event to every target repository."""

    def __init__(self, change: LabelChange, target_results: list[TargetSyncResult]) -> None:
        """Initialize the result with the classified change and the per-repository results."""
        self.change = change
        self.target_results = target_results

    @property
    def errors(self) -> list[TargetSyncResult]:
        """The units of work that failed."""
        return [target_result for target_result in self.target_results if not target_result.succeeded]

    @property
    def succeeded(self) -> bool:
        """Whether every unit of work completed without an error."""
        return not self.errors


class BulkResyncResult:
    """Contains results of a bulk resync, which stops at the first failing (label, repository) pair."""

    def __init__(
        self,
        results: list[LabelReconciliationResult],
        failed_label: str | None = None,
        failed_repository: RepositoryReference | None = None,
        error: BaseException | None = None,
    ) -> None:
        """Initialize the result with the completed reconciliations and the failure that aborted the run, if any."""
        self.results = results
        self.failed_label = failed_label
        self.failed_repository = failed_repository
        self.error = error

    @property
    def succeeded(self) -> bool:
        """Whether the whole sequence completed."""
        return self.error is None
