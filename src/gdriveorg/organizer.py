"""DriveOrganizer: analyze -> review -> sync for one user session."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from gdriveorg.auth import AuthInfo
from gdriveorg.classify import ClassificationGateway
from gdriveorg.config import OrganizerConfig
from gdriveorg.errors import GatewayError, InvalidStateError
from gdriveorg.models import (
    AnalysisResult,
    FileDescriptor,
    FileInfo,
    FileRecord,
    SyncProgress,
    SyncReport,
)
from gdriveorg.review import ReviewSession
from gdriveorg.selection import describe_drive_files
from gdriveorg.store import DriveStore
from gdriveorg.sync import FolderPathResolver, RemoteMutationApplier, SyncExecutor
from gdriveorg.sync.executor import ProgressCallback, StopHook

logger = logging.getLogger(__name__)


class DriveOrganizer:
    """
    High-level session: select files, classify them, review, then sync.

    The folder path cache belongs to this organizer's resolver and survives
    start_new_batch(); it is dropped with the organizer.
    """

    def __init__(self, auth_info: AuthInfo, config: OrganizerConfig) -> None:
        store = DriveStore(
            auth_info,
            scopes=config.scopes,
            supports_all_drives=config.supports_all_drives,
        )
        gateway = ClassificationGateway(model_name=config.model_name)
        self._init(store, gateway, config)

    @classmethod
    def from_components(
        cls,
        store: Any,
        gateway: ClassificationGateway,
        config: OrganizerConfig,
    ) -> "DriveOrganizer":
        """Create an organizer with injected store/gateway (useful for tests)."""
        obj = cls.__new__(cls)
        obj._init(store, gateway, config)
        return obj

    def _init(self, store: Any, gateway: ClassificationGateway, config: OrganizerConfig) -> None:
        self._config = config
        self._store = store
        self._gateway = gateway
        self._resolver = FolderPathResolver(store, root_id=config.root_id)
        self._executor = SyncExecutor(self._resolver, RemoteMutationApplier(store))
        self._review = ReviewSession()

    # ----------------------------
    # Accessors
    # ----------------------------
    @property
    def review(self) -> ReviewSession:
        return self._review

    @property
    def resolver(self) -> FolderPathResolver:
        return self._resolver

    @property
    def sync_state(self) -> str:
        return self._executor.state

    @property
    def sync_progress(self) -> SyncProgress:
        return self._executor.progress

    # ----------------------------
    # Selection / analysis
    # ----------------------------
    def browse(self, folder_id: Optional[str] = None) -> list[FileInfo]:
        """List the children of folder_id (default: configured root)."""
        return self._store.list_children(folder_id or self._config.root_id)

    def select(self, infos: Iterable[FileInfo]) -> list[FileDescriptor]:
        return describe_drive_files(self._store, infos, snippet_limit=self._config.snippet_limit)

    def analyze(self, descriptors: Sequence[FileDescriptor]) -> list[FileRecord]:
        """
        Start a new batch and classify it.

        Raises:
            InvalidStateError: if a sync run is in progress.
            GatewayError: if classification fails; every record is left as
                unanalyzed `pending`.
        """
        self._require_idle("analyze")
        records = self._review.ingest(descriptors)
        try:
            results = self._gateway.classify(descriptors, self._config.gemini_api_key)
        except GatewayError:
            self._review.reset_analysis()
            logger.warning("Classification failed for a batch of %d file(s)", len(descriptors))
            raise

        matched = self._review.merge_results(results)
        if matched < len(records):
            logger.info("%d of %d file(s) received no analysis", len(records) - matched, len(records))
        return records

    # ----------------------------
    # Review
    # ----------------------------
    def approve(self, file_id: str) -> FileRecord:
        return self._review.approve(file_id)

    def reject(self, file_id: str) -> FileRecord:
        return self._review.reject(file_id)

    def approve_all(self) -> list[str]:
        return self._review.approve_all()

    def reapprove(self, file_id: str) -> FileRecord:
        return self._review.reapprove(file_id)

    def edit_analysis(
        self,
        file_id: str,
        *,
        suggested_name: Optional[str] = None,
        suggested_path: Optional[str] = None,
    ) -> AnalysisResult:
        return self._review.edit_analysis(
            file_id,
            suggested_name=suggested_name,
            suggested_path=suggested_path,
        )

    # ----------------------------
    # Sync
    # ----------------------------
    def sync(
        self,
        *,
        on_progress: Optional[ProgressCallback] = None,
        should_stop: Optional[StopHook] = None,
    ) -> SyncReport:
        """
        Apply every approved record to Drive.

        Raises:
            InvalidStateError: if an approved record came from local disk.
        """
        approved = self._review.approved()
        local = [r.id for r in approved if r.descriptor.source == "local"]
        if local:
            raise InvalidStateError(
                "Local files cannot be synced to Drive",
                details={"file_ids": local},
            )
        return self._executor.sync(approved, on_progress=on_progress, should_stop=should_stop)

    def summary(self) -> dict[str, int]:
        return self._review.summary()

    def start_new_batch(self) -> None:
        self._require_idle("start a new batch")
        self._review.clear()

    def _require_idle(self, action: str) -> None:
        if self._executor.state != "idle":
            raise InvalidStateError(f"Cannot {action} while a sync run is in progress")
