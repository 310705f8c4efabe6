"""
Post-processing of raw model output.

Model content is semi-structured: it may be wrapped in markdown fences or
surrounded by prose. `extract_json` digs out the JSON payload (fence strip,
then bracket scan) and the parse helpers turn it into typed results.
"""

import json
from enum import Enum
from typing import List

from pydantic import ValidationError

from libs.llm_openai.chat_client import LLMMalformedOutputError
from apps.ingredients.schemas import StructuredAnalysisResult


class JsonKind(Enum):
    OBJECT = ("{", "}")
    ARRAY = ("[", "]")

    @property
    def opener(self) -> str:
        return self.value[0]

    @property
    def closer(self) -> str:
        return self.value[1]


class JsonNotFoundError(LLMMalformedOutputError):
    """No JSON payload of the requested kind in the model content."""


def _strip_fences(content: str) -> str:
    cleaned = content.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    elif cleaned.startswith("```"):
        cleaned = cleaned[len("```"):]
    if cleaned.endswith("```"):
        cleaned = cleaned[: -len("```")]
    return cleaned.strip()


def _validated(candidate: str) -> str:
    try:
        json.loads(candidate)
    except json.JSONDecodeError as e:
        raise LLMMalformedOutputError(f"Invalid JSON in model output: {e}") from e
    return candidate


def extract_json(content: str, kind: JsonKind) -> str:
    """Return the JSON object/array text embedded in `content`."""
    cleaned = _strip_fences(content or "")

    if cleaned.startswith(kind.opener) and cleaned.endswith(kind.closer):
        return _validated(cleaned)

    first = cleaned.find(kind.opener)
    last = cleaned.rfind(kind.closer)
    if first >= 0 and last > first:
        return _validated(cleaned[first : last + 1])

    raise JsonNotFoundError(f"No JSON {kind.name.lower()} found in content")


def parse_analysis_result(json_text: str) -> StructuredAnalysisResult:
    try:
        return StructuredAnalysisResult.model_validate_json(json_text)
    except ValidationError as e:
        raise LLMMalformedOutputError(f"Analysis does not match the expected schema: {e}") from e


def clean_extracted_ingredients(json_text: str) -> str:
    """Lowercase, trim, drop empty and de-duplicate a JSON array of names, joined with ", "."""
    items = json.loads(json_text)
    if not isinstance(items, list):
        raise LLMMalformedOutputError("Extracted ingredients are not a JSON array")

    cleaned: List[str] = []
    for item in items:
        if item is None:
            continue
        name = str(item).lower().strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return ", ".join(cleaned)
