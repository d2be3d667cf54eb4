"""Classifier output model."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Optional

MANUAL_REVIEW_CONFIDENCE: float = 0.8
_MANUAL_REVIEW_MARKER: str = "manual"


class Category(str, Enum):
    """Closed taxonomy of top-level categories."""

    WORK = "01_Work"
    PERSONAL = "02_Personal"
    FINANCE = "03_Finance"
    LEGAL = "04_Legal"
    PHOTOS_VIDEOS = "05_Photos_Videos"
    LEARNING = "06_Learning"
    TEMPLATES = "07_Templates"
    ARCHIVE = "99_Archive"

    @property
    def label(self) -> str:
        """Display label without the ordering prefix ('05_Photos_Videos' -> 'Photos_Videos')."""
        return self.value.split("_", 1)[1]


class Sensitivity(str, Enum):
    NORMAL = "Normal"
    CONFIDENTIAL = "Confidential"
    HIGH_RISK = "High Risk"


@dataclass(slots=True, frozen=True)
class AnalysisResult:
    """
    Organization suggestion for one file.

    Only suggested_name and suggested_path may be edited by the user
    (see with_edits).
    """

    file_id: str
    category: Category
    suggested_path: str
    suggested_name: str
    should_archive: bool
    sensitivity: Sensitivity
    reasoning: str
    confidence: Optional[float] = None

    def __post_init__(self) -> None:
        if self.confidence is not None and not 0.0 <= self.confidence <= 1.0:
            raise ValueError("AnalysisResult.confidence must be within [0.0, 1.0]")

    @property
    def needs_manual_review(self) -> bool:
        if self.confidence is not None and self.confidence < MANUAL_REVIEW_CONFIDENCE:
            return True
        return _MANUAL_REVIEW_MARKER in self.reasoning.lower()

    @property
    def is_sensitive(self) -> bool:
        return self.sensitivity in (Sensitivity.CONFIDENTIAL, Sensitivity.HIGH_RISK)

    def with_edits(
        self,
        *,
        suggested_name: Optional[str] = None,
        suggested_path: Optional[str] = None,
    ) -> AnalysisResult:
        changes: dict[str, str] = {}
        if suggested_name is not None:
            if not suggested_name.strip():
                raise ValueError("suggested_name must be a non-empty string")
            changes["suggested_name"] = suggested_name
        if suggested_path is not None:
            changes["suggested_path"] = suggested_path
        return dataclasses.replace(self, **changes)
