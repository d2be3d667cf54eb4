"""FileRecord: a selected file plus its review state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gdriveorg.errors import MissingAnalysisError

from .analysis import AnalysisResult
from .descriptor import FileDescriptor
from .status import RecordStatus, check_transition


@dataclass(slots=True)
class FileRecord:
    """
    Review state of one file.

    status must only change through transition_to, which enforces the
    transition table and the rule that approval requires an analysis, or
    through reset, which discards the analysis after a failed classification.
    """

    descriptor: FileDescriptor
    analysis: Optional[AnalysisResult] = None
    status: RecordStatus = RecordStatus.PENDING
    last_error: Optional[str] = None

    @property
    def id(self) -> str:
        return self.descriptor.id

    @property
    def name(self) -> str:
        return self.descriptor.name

    def transition_to(self, target: RecordStatus) -> None:
        check_transition(self.status, target, file_id=self.id)
        if target is RecordStatus.APPROVED and self.analysis is None:
            raise MissingAnalysisError(
                "Record has no analysis and cannot be approved",
                details={"file_id": self.id},
            )
        self.status = target
        if target is not RecordStatus.ERROR:
            self.last_error = None

    def reset(self) -> None:
        """Return to unanalyzed `pending`, whatever the current status."""
        self.analysis = None
        self.status = RecordStatus.PENDING
        self.last_error = None
