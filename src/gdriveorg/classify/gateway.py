"""Classification Gateway: one Gemini request per batch of file descriptors."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, Sequence

from gdriveorg.errors import GatewayError
from gdriveorg.models import AnalysisResult, Category, FileDescriptor, Sensitivity

from .prompt import SYSTEM_INSTRUCTION, build_user_prompt

logger = logging.getLogger(__name__)

ModelFactory = Callable[[str, str, str], Any]

_REQUIRED_FIELDS: tuple[str, ...] = (
    "fileId",
    "category",
    "suggestedPath",
    "suggestedName",
    "shouldArchive",
    "sensitivity",
    "reasoning",
)


def _gemini_model_factory(api_key: str, model_name: str, system_instruction: str) -> Any:
    try:
        import google.generativeai as genai
    except Exception as exc:  # pragma: no cover
        raise GatewayError(
            "google-generativeai is not available",
            details={"reason": "remote", "hint": "Install google-generativeai"},
            cause=exc,
        ) from exc

    genai.configure(api_key=api_key)
    return genai.GenerativeModel(
        model_name=model_name,
        system_instruction=system_instruction,
        generation_config=genai.GenerationConfig(
            temperature=0.1,
            response_mime_type="application/json",
        ),
    )


class ClassificationGateway:
    """
    Turn a batch of file descriptors into AnalysisResults.

    The batch is all-or-nothing: any remote or parsing failure raises
    GatewayError and no result is returned.
    """

    DEFAULT_MODEL: str = "gemini-2.5-pro"

    def __init__(
        self,
        *,
        model_name: str = DEFAULT_MODEL,
        model_factory: Optional[ModelFactory] = None,
    ) -> None:
        self._model_name = model_name
        self._model_factory = model_factory or _gemini_model_factory

    @property
    def model_name(self) -> str:
        return self._model_name

    def classify(self, batch: Sequence[FileDescriptor], credential: Optional[str]) -> list[AnalysisResult]:
        """
        Classify every descriptor in batch with a single request.

        Returns:
            One AnalysisResult per recognised fileId, in response order.

        Raises:
            GatewayError: on a missing credential, remote failure, or a
                response that does not match the expected schema.
        """
        if not batch:
            return []
        if not credential or not credential.strip():
            raise GatewayError(
                "No classifier API key provided",
                details={"reason": "missing_credential"},
            )

        logger.info("Classifying %d file(s) with %s", len(batch), self._model_name)
        text = self._generate(build_user_prompt(batch), credential.strip())
        results = parse_results(text)
        return _filter_known(results, batch)

    def _generate(self, prompt: str, credential: str) -> str:
        try:
            model = self._model_factory(credential, self._model_name, SYSTEM_INSTRUCTION)
            response = model.generate_content(prompt)
            text = response.text
        except GatewayError:
            raise
        except Exception as exc:
            reason = "auth" if _is_auth_exception(exc) else "remote"
            raise GatewayError(
                "Classification request failed",
                details={"reason": reason, "model": self._model_name},
                cause=exc,
            ) from exc

        if not isinstance(text, str) or not text.strip():
            raise GatewayError(
                "Classifier returned an empty response",
                details={"reason": "empty_response", "model": self._model_name},
            )
        return text


def parse_results(text: str) -> list[AnalysisResult]:
    """
    Parse the classifier's JSON array into AnalysisResults.

    Raises:
        GatewayError: (reason "malformed") if any element does not match the schema.
    """
    try:
        payload = json.loads(_strip_code_fence(text))
    except ValueError as exc:
        raise _malformed("Classifier response is not valid JSON", cause=exc) from exc

    if not isinstance(payload, list):
        raise _malformed("Classifier response must be a JSON array")

    return [_parse_item(item, index) for index, item in enumerate(payload)]


def _parse_item(item: Any, index: int) -> AnalysisResult:
    if not isinstance(item, dict):
        raise _malformed("Result entry must be an object", index=index)

    missing = [key for key in _REQUIRED_FIELDS if key not in item]
    if missing:
        raise _malformed(f"Result entry is missing fields: {', '.join(missing)}", index=index)

    file_id = item["fileId"]
    if not isinstance(file_id, str) or not file_id:
        raise _malformed("fileId must be a non-empty string", index=index)
    for key in ("suggestedPath", "suggestedName", "reasoning"):
        if not isinstance(item[key], str):
            raise _malformed(f"{key} must be a string", index=index)
    if not item["suggestedName"].strip():
        raise _malformed("suggestedName must not be empty", index=index)
    if not isinstance(item["shouldArchive"], bool):
        raise _malformed("shouldArchive must be a boolean", index=index)

    try:
        category = Category(item["category"])
        sensitivity = Sensitivity(item["sensitivity"])
    except ValueError as exc:
        raise _malformed(str(exc), index=index, cause=exc) from exc

    confidence = item.get("confidence")
    if confidence is not None:
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            raise _malformed("confidence must be a number", index=index)
        confidence = float(confidence)
        if not 0.0 <= confidence <= 1.0:
            raise _malformed("confidence must be within [0, 1]", index=index)

    return AnalysisResult(
        file_id=file_id,
        category=category,
        suggested_path=item["suggestedPath"],
        suggested_name=item["suggestedName"],
        should_archive=item["shouldArchive"],
        sensitivity=sensitivity,
        reasoning=item["reasoning"],
        confidence=confidence,
    )


def _filter_known(results: list[AnalysisResult], batch: Sequence[FileDescriptor]) -> list[AnalysisResult]:
    known = {d.id for d in batch}
    seen: set[str] = set()
    kept: list[AnalysisResult] = []
    for result in results:
        if result.file_id not in known:
            logger.warning("Dropping result for unknown file id %s", result.file_id)
            continue
        if result.file_id in seen:
            logger.warning("Dropping duplicate result for file id %s", result.file_id)
            continue
        seen.add(result.file_id)
        kept.append(result)
    return kept


def _strip_code_fence(text: str) -> str:
    s = text.strip()
    if s.startswith("```"):
        s = s.split("\n", 1)[1] if "\n" in s else ""
        if s.rstrip().endswith("```"):
            s = s.rstrip()[:-3]
    return s


def _malformed(message: str, *, index: Optional[int] = None,
               cause: Optional[BaseException] = None) -> GatewayError:
    details: dict[str, Any] = {"reason": "malformed"}
    if index is not None:
        details["index"] = index
    return GatewayError(message, details=details, cause=cause)


def _is_auth_exception(exc: BaseException) -> bool:
    from google.api_core import exceptions as core_exceptions

    return isinstance(exc, (core_exceptions.Unauthenticated, core_exceptions.PermissionDenied))
