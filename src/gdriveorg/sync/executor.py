"""Sync Executor: apply approved suggestions to the remote store, one file at a time."""

from __future__ import annotations

import logging
from typing import Callable, Literal, Optional, Sequence

from gdriveorg.errors import GDriveOrgError, InvalidStateError, is_auth_failure
from gdriveorg.models import (
    FileRecord,
    RecordStatus,
    SyncItemResult,
    SyncProgress,
    SyncReport,
)
from gdriveorg.util.ids import new_run_id

from .applier import RemoteMutationApplier
from .resolver import FolderPathResolver, is_root_path

logger = logging.getLogger(__name__)

ExecutorState = Literal["idle", "running"]
ProgressCallback = Callable[[SyncProgress], None]
StopHook = Callable[[], bool]


class SyncExecutor:
    """
    Drive approved records through path resolution and mutation sequentially.

    Policy:
        - A failing record becomes `error` and the run continues.
        - Progress advances after every processed record, whatever the outcome.
        - should_stop is polled between records only; the in-flight record
          always completes.
        - An exception from on_progress is logged and does not end the run.
        - Nothing is retried; an `error` record must be re-approved first.
    """

    def __init__(self, resolver: FolderPathResolver, applier: RemoteMutationApplier) -> None:
        self._resolver = resolver
        self._applier = applier
        self._state: ExecutorState = "idle"
        self._progress = SyncProgress()

    @property
    def state(self) -> ExecutorState:
        return self._state

    @property
    def progress(self) -> SyncProgress:
        """Snapshot of the live (current, total) pair of the latest run."""
        return SyncProgress(self._progress.current, self._progress.total)

    def sync(
        self,
        records: Sequence[FileRecord],
        *,
        on_progress: Optional[ProgressCallback] = None,
        should_stop: Optional[StopHook] = None,
    ) -> SyncReport:
        if self._state == "running":
            raise InvalidStateError("A sync run is already in progress")

        run_id = new_run_id()
        if not records:
            return SyncReport(run_id=run_id, results=[], progress=SyncProgress(),
                              summary=_summarize([]))

        self._state = "running"
        self._progress = SyncProgress(current=0, total=len(records))
        results: list[SyncItemResult] = []
        stopped = False
        logger.info("Sync run %s started: %d record(s)", run_id, len(records))

        try:
            for record in records:
                if should_stop is not None and should_stop():
                    stopped = True
                    logger.info("Sync run %s stopped after %d of %d record(s)",
                                run_id, self._progress.current, self._progress.total)
                    break

                results.append(self._sync_one(record))
                self._progress.current += 1
                if on_progress is not None:
                    self._notify(on_progress, run_id)
        finally:
            self._state = "idle"

        summary = _summarize(results)
        logger.info("Sync run %s finished: %s", run_id, summary)
        return SyncReport(
            run_id=run_id,
            results=results,
            progress=self.progress,
            stopped=stopped,
            summary=summary,
        )

    def _notify(self, on_progress: ProgressCallback, run_id: str) -> None:
        try:
            on_progress(self.progress)
        except Exception:
            logger.exception("Progress callback failed in sync run %s; continuing", run_id)

    def _sync_one(self, record: FileRecord) -> SyncItemResult:
        analysis = record.analysis
        if record.status is not RecordStatus.APPROVED or analysis is None:
            return SyncItemResult(file_id=record.id, name=record.name, status="skipped")

        target_folder_id: Optional[str] = None
        try:
            if not is_root_path(analysis.suggested_path):
                target_folder_id = self._resolver.resolve(analysis.suggested_path)
            self._applier.apply_update(
                record.id,
                analysis.suggested_name,
                record.descriptor.parents,
                target_folder_id,
            )
        except GDriveOrgError as exc:
            logger.warning("Sync failed for %s (%s): %s", record.name, record.id, exc)
            record.transition_to(RecordStatus.ERROR)
            record.last_error = str(exc)
            return SyncItemResult(
                file_id=record.id,
                name=record.name,
                status="error",
                target_folder_id=target_folder_id,
                error_type=exc.__class__.__name__,
                error_message=str(exc),
                requires_reauth=is_auth_failure(exc),
            )

        record.transition_to(RecordStatus.SYNCED)
        return SyncItemResult(
            file_id=record.id,
            name=record.name,
            status="synced",
            target_folder_id=target_folder_id,
        )


def _summarize(results: list[SyncItemResult]) -> dict[str, int]:
    summary: dict[str, int] = {"synced": 0, "error": 0, "skipped": 0}
    for r in results:
        summary[r.status] = summary.get(r.status, 0) + 1
    return summary
