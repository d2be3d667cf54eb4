"""Result models for sync runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

ItemStatus = Literal["synced", "error", "skipped"]


@dataclass(slots=True)
class SyncProgress:
    """Live (current, total) pair of a sync run."""

    current: int = 0
    total: int = 0

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 0.0
        return self.current / self.total

    @property
    def done(self) -> bool:
        return self.current >= self.total


@dataclass(slots=True)
class SyncItemResult:
    """Outcome for a single record within a sync run."""

    file_id: str
    name: str
    status: ItemStatus

    target_folder_id: Optional[str] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    requires_reauth: bool = False


@dataclass(slots=True)
class SyncReport:
    """Aggregate result of SyncExecutor.sync."""

    run_id: str
    results: list[SyncItemResult]
    progress: SyncProgress

    stopped: bool = False
    summary: dict[str, int] = field(default_factory=dict)

    @property
    def requires_reauth(self) -> bool:
        return any(r.requires_reauth for r in self.results)

    @property
    def failed_ids(self) -> list[str]:
        return [r.file_id for r in self.results if r.status == "error"]
