import json
import unittest
from types import SimpleNamespace

from gdriveorg.classify import ClassificationGateway, build_user_prompt
from gdriveorg.classify.gateway import parse_results
from gdriveorg.classify.prompt import BINARY_PLACEHOLDER, FILE_SEPARATOR, SYSTEM_INSTRUCTION
from gdriveorg.errors import GatewayError
from gdriveorg.models import Category, FileDescriptor, Sensitivity


def _descriptor(file_id: str, snippet=None, name=None) -> FileDescriptor:
    return FileDescriptor(
        id=file_id,
        name=name or f"{file_id}.txt",
        size=10,
        mime_type="text/plain",
        last_modified=1735689600000,
        content_snippet=snippet,
    )


def _item(file_id: str, **overrides) -> dict:
    item = {
        "fileId": file_id,
        "category": "01_Work",
        "suggestedPath": "Work/2024",
        "suggestedName": "Report.txt",
        "shouldArchive": False,
        "sensitivity": "Normal",
        "reasoning": "Project report.",
        "confidence": 0.9,
    }
    item.update(overrides)
    return item


class FakeModel:
    def __init__(self, text=None, error=None) -> None:
        self.text = text
        self.error = error
        self.prompts = []

    def generate_content(self, prompt: str):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeFactory:
    def __init__(self, model: FakeModel) -> None:
        self.model = model
        self.calls = []

    def __call__(self, api_key: str, model_name: str, system_instruction: str) -> FakeModel:
        self.calls.append((api_key, model_name, system_instruction))
        return self.model


def _gateway(text=None, error=None):
    factory = FakeFactory(FakeModel(text=text, error=error))
    return ClassificationGateway(model_name="test-model", model_factory=factory), factory


class TestClassificationGateway(unittest.TestCase):
    def test_empty_batch_makes_no_request(self) -> None:
        gateway, factory = _gateway(text="[]")
        self.assertEqual(gateway.classify([], "key"), [])
        self.assertEqual(gateway.classify([], None), [])
        self.assertEqual(factory.calls, [])

    def test_missing_credential(self) -> None:
        gateway, factory = _gateway(text="[]")
        for credential in (None, "", "   "):
            with self.assertRaises(GatewayError) as ctx:
                gateway.classify([_descriptor("f1")], credential)
            self.assertEqual(ctx.exception.details["reason"], "missing_credential")
        self.assertEqual(factory.calls, [])

    def test_single_request_returns_parsed_results(self) -> None:
        text = json.dumps([_item("f1"), _item("f2", category="02_Personal", sensitivity="High Risk")])
        gateway, factory = _gateway(text=text)

        results = gateway.classify([_descriptor("f1"), _descriptor("f2")], " key ")

        self.assertEqual(len(factory.calls), 1)
        self.assertEqual(factory.calls[0], ("key", "test-model", SYSTEM_INSTRUCTION))
        self.assertEqual(len(factory.model.prompts), 1)
        self.assertEqual([r.file_id for r in results], ["f1", "f2"])
        self.assertIs(results[1].category, Category.PERSONAL)
        self.assertIs(results[1].sensitivity, Sensitivity.HIGH_RISK)
        self.assertEqual(results[0].confidence, 0.9)

    def test_unknown_and_duplicate_ids_are_dropped(self) -> None:
        text = json.dumps([_item("f1"), _item("ghost"), _item("f1", suggestedName="Other.txt")])
        gateway, _ = _gateway(text=text)

        results = gateway.classify([_descriptor("f1"), _descriptor("f2")], "key")

        self.assertEqual([r.file_id for r in results], ["f1"])
        self.assertEqual(results[0].suggested_name, "Report.txt")

    def test_remote_failure(self) -> None:
        gateway, _ = _gateway(error=RuntimeError("connection reset"))
        with self.assertRaises(GatewayError) as ctx:
            gateway.classify([_descriptor("f1")], "key")
        self.assertEqual(ctx.exception.details["reason"], "remote")
        self.assertIsInstance(ctx.exception.cause, RuntimeError)

    def test_auth_failure(self) -> None:
        from google.api_core import exceptions as core_exceptions

        gateway, _ = _gateway(error=core_exceptions.Unauthenticated("API key not valid"))
        with self.assertRaises(GatewayError) as ctx:
            gateway.classify([_descriptor("f1")], "bad-key")
        self.assertEqual(ctx.exception.details["reason"], "auth")

    def test_empty_response(self) -> None:
        gateway, _ = _gateway(text="  ")
        with self.assertRaises(GatewayError) as ctx:
            gateway.classify([_descriptor("f1")], "key")
        self.assertEqual(ctx.exception.details["reason"], "empty_response")

    def test_one_malformed_item_fails_the_batch(self) -> None:
        text = json.dumps([_item("f1"), _item("f2", category="Misc")])
        gateway, _ = _gateway(text=text)
        with self.assertRaises(GatewayError) as ctx:
            gateway.classify([_descriptor("f1"), _descriptor("f2")], "key")
        self.assertEqual(ctx.exception.details["reason"], "malformed")
        self.assertEqual(ctx.exception.details["index"], 1)


class TestParseResults(unittest.TestCase):
    def test_code_fence_is_stripped(self) -> None:
        text = "```json\n" + json.dumps([_item("f1")]) + "\n```"
        self.assertEqual([r.file_id for r in parse_results(text)], ["f1"])

    def test_confidence_is_optional(self) -> None:
        item = _item("f1")
        del item["confidence"]
        (result,) = parse_results(json.dumps([item]))
        self.assertIsNone(result.confidence)
        self.assertFalse(result.needs_manual_review)

    def test_schema_violations(self) -> None:
        missing = _item("f1")
        del missing["reasoning"]
        cases = [
            "not json",
            json.dumps({"fileId": "f1"}),
            json.dumps([missing]),
            json.dumps([_item("f1", sensitivity="Secret")]),
            json.dumps([_item("f1", shouldArchive="yes")]),
            json.dumps([_item("f1", confidence=1.5)]),
            json.dumps([_item("f1", confidence=True)]),
            json.dumps([_item("f1", suggestedName=" ")]),
            json.dumps([_item("", )]),
            json.dumps(["f1"]),
        ]
        for text in cases:
            with self.subTest(text=text):
                with self.assertRaises(GatewayError) as ctx:
                    parse_results(text)
                self.assertEqual(ctx.exception.details["reason"], "malformed")


class TestPrompt(unittest.TestCase):
    def test_user_prompt_lists_every_file(self) -> None:
        prompt = build_user_prompt([
            _descriptor("f1", snippet="Quarterly numbers", name="q3.txt"),
            _descriptor("f2"),
        ])

        self.assertIn("File ID: f1", prompt)
        self.assertIn("Name: q3.txt", prompt)
        self.assertIn("Snippet: Quarterly numbers", prompt)
        self.assertIn("Modified: 2025-01-01T00:00:00.000Z", prompt)
        self.assertIn(f"Snippet: {BINARY_PLACEHOLDER}", prompt)
        self.assertEqual(prompt.count(FILE_SEPARATOR), 1)

    def test_system_instruction_lists_categories(self) -> None:
        for category in Category:
            self.assertIn(category.value, SYSTEM_INSTRUCTION)
        self.assertIn("Manual Review Required", SYSTEM_INSTRUCTION)


if __name__ == "__main__":
    unittest.main()
