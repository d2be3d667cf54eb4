import json
import unittest
from datetime import datetime, timezone
from types import SimpleNamespace

from gdriveorg.classify import ClassificationGateway
from gdriveorg.config import OrganizerConfig
from gdriveorg.errors import GatewayError, InvalidStateError, InvalidTransitionError
from gdriveorg.models import FileDescriptor, FileInfo, RecordStatus
from gdriveorg.organizer import DriveOrganizer
from gdriveorg.util.mime import FOLDER_MIME


class FakeStore:
    def __init__(self) -> None:
        self.calls = []
        self.folders = {}
        self._next = 0
        dt = datetime(2022, 6, 1, 10, 0, 0, tzinfo=timezone.utc)
        self.children = {
            "root": [
                FileInfo(file_id="A", name="Inbox", mime_type=FOLDER_MIME, parents=["root"]),
                FileInfo(file_id="f1", name="IMG_001.jpg", mime_type="image/jpeg",
                         parents=["P0"], modified_time=dt, size=2048),
                FileInfo(file_id="f2", name="memo.txt", mime_type="text/plain",
                         parents=["P0"], modified_time=dt, size=12),
            ],
        }

    def list_children(self, folder_id: str):
        self.calls.append(("list_children", folder_id))
        return list(self.children.get(folder_id, []))

    def get_content(self, file_id: str, mime_type: str) -> str:
        self.calls.append(("get_content", file_id))
        return "meeting memo" if mime_type.startswith("text/") else "[Binary]"

    def find_folder_by_name(self, name: str, parent_id: str):
        self.calls.append(("find", name, parent_id))
        return self.folders.get((parent_id, name))

    def create_folder(self, name: str, parent_id: str) -> str:
        self.calls.append(("create", name, parent_id))
        self._next += 1
        folder_id = f"D{self._next}"
        self.folders[(parent_id, name)] = folder_id
        return folder_id

    def update_file(self, file_id, *, name=None, add_parents=None, remove_parents=None):
        self.calls.append(("update", file_id, name, add_parents, remove_parents))

    def of(self, kind: str):
        return [c for c in self.calls if c[0] == kind]


class FakeModel:
    def __init__(self, payload=None, error=None) -> None:
        self.payload = payload or []
        self.error = error
        self.prompts = []

    def generate_content(self, prompt: str):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=json.dumps(self.payload))


def _item(file_id: str, path: str, name: str, **overrides) -> dict:
    item = {
        "fileId": file_id,
        "category": "02_Personal",
        "suggestedPath": path,
        "suggestedName": name,
        "shouldArchive": False,
        "sensitivity": "Normal",
        "reasoning": "Holiday photo.",
        "confidence": 0.95,
    }
    item.update(overrides)
    return item


def _organizer(model: FakeModel, store=None):
    store = store or FakeStore()
    gateway = ClassificationGateway(model_factory=lambda key, name, instruction: model)
    organizer = DriveOrganizer.from_components(store, gateway, OrganizerConfig(gemini_api_key="key"))
    return organizer, store


def _descriptor(file_id: str, name: str = "file.txt", source: str = "drive") -> FileDescriptor:
    return FileDescriptor(
        id=file_id, name=name, size=1, mime_type="text/plain",
        last_modified=0, parents=("P0",) if source == "drive" else (), source=source,
    )


class TestDriveOrganizer(unittest.TestCase):
    def test_browse_and_select_drive_files(self) -> None:
        organizer, store = _organizer(FakeModel())

        infos = organizer.browse()
        descriptors = organizer.select(infos)

        self.assertEqual(store.calls[0], ("list_children", "root"))
        self.assertEqual([d.id for d in descriptors], ["f1", "f2"])
        self.assertEqual(descriptors[1].content_snippet, "meeting memo")

    def test_single_photo_end_to_end(self) -> None:
        model = FakeModel([_item("f1", "Personal/Photos/2022", "2022-06-01 Beach Vacation.jpg")])
        organizer, store = _organizer(model)
        descriptors = organizer.select(organizer.browse())[:1]

        records = organizer.analyze(descriptors)
        self.assertEqual(len(model.prompts), 1)
        self.assertIs(records[0].status, RecordStatus.PENDING)

        organizer.approve("f1")
        report = organizer.sync()

        self.assertEqual(
            [c[1:] for c in store.of("create")],
            [("Personal", "root"), ("Photos", "D1"), ("2022", "D2")],
        )
        self.assertEqual(
            store.of("update"),
            [("update", "f1", "2022-06-01 Beach Vacation.jpg", ["D3"], ["P0"])],
        )
        self.assertIs(organizer.review.get("f1").status, RecordStatus.SYNCED)
        self.assertEqual(report.summary, {"synced": 1, "error": 0, "skipped": 0})
        self.assertEqual(organizer.resolver.cache["Personal/Photos/2022"], "D3")
        self.assertEqual(organizer.summary()["synced"], 1)
        self.assertEqual(organizer.sync_state, "idle")

    def test_shared_path_is_created_once(self) -> None:
        model = FakeModel([
            _item("a", "Work/2024", "A.txt", category="01_Work"),
            _item("b", "Work/2024", "B.txt", category="01_Work"),
        ])
        organizer, store = _organizer(model)
        organizer.analyze([_descriptor("a"), _descriptor("b")])

        self.assertEqual(organizer.approve_all(), ["a", "b"])
        organizer.sync()

        self.assertEqual([c[1] for c in store.of("create")], ["Work", "2024"])
        self.assertEqual([c[3] for c in store.of("update")], [["D2"], ["D2"]])

    def test_edited_analysis_is_what_gets_synced(self) -> None:
        model = FakeModel([_item("f1", "Personal/Photos/2022", "Beach.jpg")])
        organizer, store = _organizer(model)
        organizer.analyze([_descriptor("f1", "IMG_001.jpg")])

        organizer.edit_analysis("f1", suggested_name="Trip.jpg", suggested_path="Travel")
        organizer.approve("f1")
        organizer.sync()

        self.assertEqual([c[1] for c in store.of("create")], ["Travel"])
        self.assertEqual(store.of("update")[0][2], "Trip.jpg")

    def test_gateway_failure_leaves_records_unanalyzed(self) -> None:
        organizer, store = _organizer(FakeModel(error=RuntimeError("timeout")))

        with self.assertRaises(GatewayError):
            organizer.analyze([_descriptor("a"), _descriptor("b")])

        for record in organizer.review.records:
            self.assertIs(record.status, RecordStatus.PENDING)
            self.assertIsNone(record.analysis)
        report = organizer.sync()
        self.assertEqual(report.results, [])
        self.assertEqual(store.calls, [])

    def test_rejected_records_are_not_synced(self) -> None:
        model = FakeModel([_item("a", "X", "A.txt"), _item("b", "Y", "B.txt")])
        organizer, store = _organizer(model)
        organizer.analyze([_descriptor("a"), _descriptor("b")])

        organizer.reject("a")
        with self.assertRaises(InvalidTransitionError):
            organizer.approve("a")
        organizer.approve("b")
        organizer.sync()

        self.assertEqual([c[1] for c in store.of("update")], ["b"])
        self.assertIs(organizer.review.get("a").status, RecordStatus.REJECTED)

    def test_local_records_cannot_be_synced(self) -> None:
        model = FakeModel([_item("local-1", "Notes", "Notes.txt")])
        organizer, store = _organizer(model)
        organizer.analyze([_descriptor("local-1", source="local")])
        organizer.approve("local-1")

        with self.assertRaises(InvalidStateError):
            organizer.sync()
        self.assertEqual(store.of("update"), [])

    def test_new_batch_keeps_folder_cache(self) -> None:
        model = FakeModel([_item("a", "Work/2024", "A.txt")])
        organizer, store = _organizer(model)
        organizer.analyze([_descriptor("a")])
        organizer.approve_all()
        organizer.sync()

        organizer.start_new_batch()
        self.assertEqual(len(organizer.review), 0)

        model.payload = [_item("b", "Work/2024", "B.txt")]
        organizer.analyze([_descriptor("b")])
        organizer.approve_all()
        organizer.sync()

        self.assertEqual(len(store.of("create")), 2)
        self.assertEqual(len(store.of("find")), 2)
        self.assertEqual(store.of("update")[-1][3], ["D2"])


if __name__ == "__main__":
    unittest.main()
