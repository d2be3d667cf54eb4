"""ReviewSession: owns the file records of one batch and their review lifecycle."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from gdriveorg.errors import (
    InvalidArgumentError,
    InvalidTransitionError,
    MissingAnalysisError,
    NotFoundError,
)
from gdriveorg.models import (
    AnalysisResult,
    FileDescriptor,
    FileRecord,
    RecordStatus,
    Sensitivity,
)

logger = logging.getLogger(__name__)

UNCLASSIFIED: str = "Unclassified"

_EDITABLE_STATUSES: frozenset[RecordStatus] = frozenset(
    {RecordStatus.PENDING, RecordStatus.APPROVED, RecordStatus.ERROR}
)


class ReviewSession:
    """
    Ordered records of the current batch.

    All status changes go through FileRecord.transition_to; this class only
    decides which records a user action applies to.
    """

    def __init__(self) -> None:
        self._records: list[FileRecord] = []
        self._by_id: dict[str, FileRecord] = {}

    # ----------------------------
    # Loading
    # ----------------------------
    def ingest(self, descriptors: Iterable[FileDescriptor]) -> list[FileRecord]:
        """Replace the current batch with `pending` records, one per descriptor."""
        records: list[FileRecord] = []
        by_id: dict[str, FileRecord] = {}
        for descriptor in descriptors:
            if descriptor.id in by_id:
                raise InvalidArgumentError(
                    "Duplicate file id in batch",
                    details={"file_id": descriptor.id},
                )
            record = FileRecord(descriptor=descriptor)
            records.append(record)
            by_id[descriptor.id] = record

        self._records = records
        self._by_id = by_id
        return list(records)

    def merge_results(self, results: Iterable[AnalysisResult]) -> int:
        """
        Attach analyses to records by file id.

        Returns:
            Number of records that received an analysis. Records without a
            matching result keep analysis=None.
        """
        matched = 0
        for result in results:
            record = self._by_id.get(result.file_id)
            if record is None:
                logger.debug("Ignoring analysis for unknown file id %s", result.file_id)
                continue
            record.analysis = result
            matched += 1
        return matched

    def reset_analysis(self) -> None:
        """Return every record to unanalyzed `pending` (after a failed classification)."""
        for record in self._records:
            record.reset()

    def clear(self) -> None:
        self._records = []
        self._by_id = {}

    # ----------------------------
    # Transitions
    # ----------------------------
    def approve(self, file_id: str) -> FileRecord:
        record = self._require_status(file_id, RecordStatus.PENDING, "approve")
        record.transition_to(RecordStatus.APPROVED)
        return record

    def reject(self, file_id: str) -> FileRecord:
        record = self._require_status(file_id, RecordStatus.PENDING, "reject")
        record.transition_to(RecordStatus.REJECTED)
        return record

    def reapprove(self, file_id: str) -> FileRecord:
        """Queue an `error` record for another sync attempt."""
        record = self._require_status(file_id, RecordStatus.ERROR, "reapprove")
        record.transition_to(RecordStatus.APPROVED)
        return record

    def approve_all(self) -> list[str]:
        """
        Approve every `pending` record that has an analysis.

        Returns:
            Ids of the records that changed. A second call returns [].
        """
        changed: list[str] = []
        for record in self._records:
            if record.status is RecordStatus.PENDING and record.analysis is not None:
                record.transition_to(RecordStatus.APPROVED)
                changed.append(record.id)
        return changed

    def edit_analysis(
        self,
        file_id: str,
        *,
        suggested_name: Optional[str] = None,
        suggested_path: Optional[str] = None,
    ) -> AnalysisResult:
        """
        Replace the suggested name and/or path of a record's analysis.

        Raises:
            MissingAnalysisError: if the record was never analyzed.
            InvalidTransitionError: if the record is already synced or rejected.
        """
        record = self.get(file_id)
        if record.analysis is None:
            raise MissingAnalysisError(
                "Record has no analysis to edit",
                details={"file_id": file_id},
            )
        if record.status not in _EDITABLE_STATUSES:
            raise InvalidTransitionError(
                f"Cannot edit a {record.status.value} record",
                details={"file_id": file_id, "status": record.status.value},
            )
        try:
            record.analysis = record.analysis.with_edits(
                suggested_name=suggested_name,
                suggested_path=suggested_path,
            )
        except ValueError as exc:
            raise InvalidArgumentError(str(exc), details={"file_id": file_id}, cause=exc) from exc
        return record.analysis

    # ----------------------------
    # Queries
    # ----------------------------
    @property
    def records(self) -> list[FileRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, file_id: str) -> FileRecord:
        record = self._by_id.get(file_id)
        if record is None:
            raise NotFoundError("No record with this file id", details={"file_id": file_id})
        return record

    def by_status(self, *statuses: RecordStatus) -> list[FileRecord]:
        wanted = set(statuses)
        return [r for r in self._records if r.status in wanted]

    def approved(self) -> list[FileRecord]:
        return self.by_status(RecordStatus.APPROVED)

    def archive_recommended(self) -> list[FileRecord]:
        return [r for r in self._records if r.analysis is not None and r.analysis.should_archive]

    def sensitive(
        self,
        levels: Sequence[Sensitivity] = (Sensitivity.CONFIDENTIAL, Sensitivity.HIGH_RISK),
    ) -> list[FileRecord]:
        wanted = set(levels)
        return [
            r for r in self._records
            if r.analysis is not None and r.analysis.sensitivity in wanted
        ]

    def needs_manual_review(self) -> list[FileRecord]:
        return [
            r for r in self._records
            if r.analysis is not None and r.analysis.needs_manual_review
        ]

    def high_risk_count(self) -> int:
        return len(self.sensitive((Sensitivity.HIGH_RISK,)))

    def counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in RecordStatus}
        for r in self._records:
            counts[r.status.value] += 1
        return counts

    def category_breakdown(self) -> dict[str, int]:
        breakdown: dict[str, int] = {}
        for r in self._records:
            key = r.analysis.category.value if r.analysis is not None else UNCLASSIFIED
            breakdown[key] = breakdown.get(key, 0) + 1
        return breakdown

    def organized_ratio(self) -> float:
        """Share of records currently approved (0.0 for an empty batch)."""
        if not self._records:
            return 0.0
        return len(self.approved()) / len(self._records)

    @property
    def review_complete(self) -> bool:
        return bool(self._records) and not self.by_status(RecordStatus.PENDING)

    def summary(self) -> dict[str, int]:
        counts = self.counts()
        return {
            "total": len(self._records),
            "synced": counts[RecordStatus.SYNCED.value],
            "error": counts[RecordStatus.ERROR.value],
            "rejected": counts[RecordStatus.REJECTED.value],
            "remaining": counts[RecordStatus.PENDING.value] + counts[RecordStatus.APPROVED.value],
        }

    # ----------------------------
    # Internals
    # ----------------------------
    def _require_status(self, file_id: str, expected: RecordStatus, action: str) -> FileRecord:
        record = self.get(file_id)
        if record.status is not expected:
            raise InvalidTransitionError(
                f"Cannot {action} a {record.status.value} record",
                details={"file_id": file_id, "status": record.status.value},
            )
        return record
