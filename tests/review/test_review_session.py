import unittest

from gdriveorg.errors import (
    InvalidArgumentError,
    InvalidTransitionError,
    MissingAnalysisError,
    NotFoundError,
)
from gdriveorg.models import (
    AnalysisResult,
    Category,
    FileDescriptor,
    RecordStatus,
    Sensitivity,
)
from gdriveorg.review import UNCLASSIFIED, ReviewSession


def _descriptor(file_id: str) -> FileDescriptor:
    return FileDescriptor(id=file_id, name=f"{file_id}.txt", size=1, mime_type="text/plain", last_modified=0)


def _analysis(file_id: str, **overrides) -> AnalysisResult:
    values = dict(
        file_id=file_id,
        category=Category.WORK,
        suggested_path="Work/2024",
        suggested_name=f"{file_id} report.txt",
        should_archive=False,
        sensitivity=Sensitivity.NORMAL,
        reasoning="Project report.",
        confidence=0.9,
    )
    values.update(overrides)
    return AnalysisResult(**values)


def _session(*ids: str, analyzed=None) -> ReviewSession:
    session = ReviewSession()
    session.ingest([_descriptor(i) for i in ids])
    wanted = ids if analyzed is None else analyzed
    session.merge_results([_analysis(i) for i in wanted])
    return session


class TestReviewSessionLoading(unittest.TestCase):
    def test_ingest_creates_pending_records_and_replaces_batch(self) -> None:
        session = ReviewSession()
        session.ingest([_descriptor("a"), _descriptor("b")])
        session.ingest([_descriptor("c")])
        self.assertEqual([r.id for r in session.records], ["c"])
        self.assertIs(session.get("c").status, RecordStatus.PENDING)
        with self.assertRaises(NotFoundError):
            session.get("a")

    def test_ingest_rejects_duplicate_ids(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            ReviewSession().ingest([_descriptor("a"), _descriptor("a")])

    def test_merge_results_leaves_unmatched_records_unanalyzed(self) -> None:
        session = ReviewSession()
        session.ingest([_descriptor("a"), _descriptor("b")])
        matched = session.merge_results([_analysis("a"), _analysis("zzz")])
        self.assertEqual(matched, 1)
        self.assertIsNotNone(session.get("a").analysis)
        self.assertIsNone(session.get("b").analysis)

    def test_reset_analysis(self) -> None:
        session = _session("a", "b")
        session.approve("a")
        session.reset_analysis()
        for record in session.records:
            self.assertIs(record.status, RecordStatus.PENDING)
            self.assertIsNone(record.analysis)


class TestReviewSessionTransitions(unittest.TestCase):
    def test_approve_and_reject_from_pending(self) -> None:
        session = _session("a", "b")
        session.approve("a")
        session.reject("b")
        self.assertIs(session.get("a").status, RecordStatus.APPROVED)
        self.assertIs(session.get("b").status, RecordStatus.REJECTED)

    def test_approve_or_reject_outside_pending_is_invalid(self) -> None:
        session = _session("a", "b")
        session.reject("a")
        session.approve("b")
        for action in (session.approve, session.reject):
            with self.assertRaises(InvalidTransitionError):
                action("a")
            with self.assertRaises(InvalidTransitionError):
                action("b")
        self.assertIs(session.get("a").status, RecordStatus.REJECTED)
        self.assertIs(session.get("b").status, RecordStatus.APPROVED)

    def test_synced_and_error_records_are_not_touched(self) -> None:
        session = _session("s", "e")
        for file_id in ("s", "e"):
            session.approve(file_id)
        session.get("s").transition_to(RecordStatus.SYNCED)
        session.get("e").transition_to(RecordStatus.ERROR)

        for file_id in ("s", "e"):
            with self.assertRaises(InvalidTransitionError):
                session.approve(file_id)
            with self.assertRaises(InvalidTransitionError):
                session.reject(file_id)
        self.assertIs(session.get("s").status, RecordStatus.SYNCED)
        self.assertIs(session.get("e").status, RecordStatus.ERROR)

    def test_approve_without_analysis(self) -> None:
        session = _session("a", analyzed=[])
        with self.assertRaises(MissingAnalysisError):
            session.approve("a")
        self.assertIs(session.get("a").status, RecordStatus.PENDING)

    def test_approve_all_only_touches_pending_and_is_idempotent(self) -> None:
        session = _session("p1", "p2", "r", "x", "none", analyzed=["p1", "p2", "r", "x"])
        session.reject("r")
        session.approve("x")
        session.get("x").transition_to(RecordStatus.ERROR)

        changed = session.approve_all()

        self.assertEqual(changed, ["p1", "p2"])
        self.assertIs(session.get("r").status, RecordStatus.REJECTED)
        self.assertIs(session.get("x").status, RecordStatus.ERROR)
        self.assertIs(session.get("none").status, RecordStatus.PENDING)
        before = {r.id: r.status for r in session.records}
        self.assertEqual(session.approve_all(), [])
        self.assertEqual({r.id: r.status for r in session.records}, before)

    def test_reapprove_only_from_error(self) -> None:
        session = _session("a", "b")
        session.approve("a")
        session.get("a").transition_to(RecordStatus.ERROR)
        session.get("a").last_error = "boom"

        session.reapprove("a")
        self.assertIs(session.get("a").status, RecordStatus.APPROVED)
        self.assertIsNone(session.get("a").last_error)
        with self.assertRaises(InvalidTransitionError):
            session.reapprove("b")

    def test_edit_analysis_merges_fields(self) -> None:
        session = _session("a")
        edited = session.edit_analysis("a", suggested_name="Edited.txt")
        self.assertEqual(edited.suggested_name, "Edited.txt")
        self.assertEqual(edited.suggested_path, "Work/2024")
        self.assertEqual(session.get("a").analysis.suggested_name, "Edited.txt")

        session.approve("a")
        session.edit_analysis("a", suggested_path="Work/Archive")
        self.assertEqual(session.get("a").analysis.suggested_path, "Work/Archive")

    def test_edit_analysis_errors(self) -> None:
        session = _session("a", "b", "c", analyzed=["b", "c"])
        with self.assertRaises(MissingAnalysisError):
            session.edit_analysis("a", suggested_name="x")

        session.approve("b")
        session.get("b").transition_to(RecordStatus.SYNCED)
        with self.assertRaises(InvalidTransitionError):
            session.edit_analysis("b", suggested_name="x")

        with self.assertRaises(InvalidArgumentError):
            session.edit_analysis("c", suggested_name="")


class TestReviewSessionQueries(unittest.TestCase):
    def setUp(self) -> None:
        self.session = ReviewSession()
        self.session.ingest([_descriptor(i) for i in ("a", "b", "c", "d")])
        self.session.merge_results([
            _analysis("a", should_archive=True, category=Category.ARCHIVE),
            _analysis("b", sensitivity=Sensitivity.HIGH_RISK, confidence=0.5),
            _analysis("c", sensitivity=Sensitivity.CONFIDENTIAL, reasoning="Manual Review Required: no date"),
        ])

    def test_filters(self) -> None:
        s = self.session
        self.assertEqual([r.id for r in s.archive_recommended()], ["a"])
        self.assertEqual([r.id for r in s.sensitive()], ["b", "c"])
        self.assertEqual([r.id for r in s.sensitive((Sensitivity.HIGH_RISK,))], ["b"])
        self.assertEqual([r.id for r in s.needs_manual_review()], ["b", "c"])
        self.assertEqual(s.high_risk_count(), 1)

    def test_counts_breakdown_and_summary(self) -> None:
        s = self.session
        s.approve("a")
        s.reject("b")

        self.assertEqual(s.counts()["approved"], 1)
        self.assertEqual(s.counts()["pending"], 2)
        self.assertEqual([r.id for r in s.by_status(RecordStatus.PENDING, RecordStatus.REJECTED)],
                         ["b", "c", "d"])
        self.assertEqual(s.category_breakdown(), {"99_Archive": 1, "01_Work": 2, UNCLASSIFIED: 1})
        self.assertEqual(s.organized_ratio(), 0.25)
        self.assertFalse(s.review_complete)
        self.assertEqual(
            s.summary(),
            {"total": 4, "synced": 0, "error": 0, "rejected": 1, "remaining": 3},
        )

    def test_clear(self) -> None:
        self.session.clear()
        self.assertEqual(len(self.session), 0)
        self.assertFalse(self.session.review_complete)
        self.assertEqual(self.session.organized_ratio(), 0.0)


if __name__ == "__main__":
    unittest.main()
