"""Structured feedback classification and report synthesis.

The remote model is treated as an opaque function: every request carries a
JSON schema, every response is validated against the local schema types, and
any failure along the way surfaces as a single domain error per call.

Updates:
    v0.1.0 - 2026-10-18 - Classification and batch report contracts.
"""

from __future__ import annotations

import json
import logging
from time import perf_counter
from typing import Any, Callable, Dict, Sequence, TypeVar

from ..core.errors import (
    AnalysisError,
    ClassificationError,
    ReportSynthesisError,
    SchemaValidationError,
)
from ..core.llm_gateway import LLMGateway
from ..core.schemas import (
    AnalysisResult,
    BatchAnalysisResult,
    FeedbackItem,
    Priority,
    Sentiment,
)
from .prompt_service import PromptService

logger = logging.getLogger(__name__)

CLASSIFY_WORKFLOW = "classify_feedback"
SYNTHESIZE_WORKFLOW = "synthesize_report"

ANALYSIS_RESULT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "sentiment": {
            "type": "string",
            "enum": [member.value for member in Sentiment],
            "description": "The overall sentiment of the feedback.",
        },
        "pain_point": {
            "type": "string",
            "description": "A concise summary of the specific problem or issue the customer is facing.",
        },
        "feature_request": {
            "type": "string",
            "description": "A suggested feature or solution derived from the feedback.",
        },
        "priority": {
            "type": "string",
            "enum": [member.value for member in Priority],
            "description": "The urgency of addressing this issue based on severity and sentiment.",
        },
        "summary": {
            "type": "string",
            "description": "A very short one-sentence summary of the feedback.",
        },
        "tags": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List of 3-5 keywords describing the issue and request.",
        },
    },
    "required": [
        "sentiment",
        "pain_point",
        "feature_request",
        "priority",
        "summary",
        "tags",
    ],
}

BATCH_ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "sentiment_trend_analysis": {
            "type": "string",
            "description": "A paragraph describing the sentiment trend over time, noting any shifts.",
        },
        "top_themes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "theme_name": {"type": "string"},
                    "count": {"type": "integer"},
                    "description": {"type": "string"},
                },
                "required": ["theme_name", "count", "description"],
            },
            "description": "List of recurring themes found in the feedback.",
        },
    },
    "required": ["sentiment_trend_analysis", "top_themes"],
}

T = TypeVar("T")


def _response_format(name: str, schema: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "json_schema", "json_schema": {"name": name, "schema": schema}}


def _strip_code_fence(response: str) -> str:
    cleaned = response.strip()
    if cleaned.startswith("```"):
        parts = cleaned.split("\n", 1)
        cleaned = parts[1] if len(parts) > 1 else ""
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip().rsplit("```", 1)[0]
    return cleaned.strip()


class AnalysisClient:
    """Translates feedback requests into schema-constrained LLM calls."""

    def __init__(self, llm_gateway: LLMGateway, prompt_service: PromptService) -> None:
        self._llm = llm_gateway
        self._prompts = prompt_service

    def classify_feedback(self, text: str) -> AnalysisResult:
        """Classify a single feedback text.

        Args:
            text (str): Raw customer feedback. Empty input is forwarded as-is.

        Returns:
            AnalysisResult: Fully populated classification.

        Raises:
            ClassificationError: If the call fails, the response is empty, or
                the response does not match the declared schema.
        """

        return self._run(
            CLASSIFY_WORKFLOW,
            ClassificationError,
            lambda: self._prompts.render(CLASSIFY_WORKFLOW, feedback=text),
            ANALYSIS_RESULT_SCHEMA,
            AnalysisResult.from_dict,
            item_count=1,
        )

    def synthesize_report(self, items: Sequence[FeedbackItem]) -> BatchAnalysisResult:
        """Synthesize a trend and theme report over a snapshot of items.

        Only the reduced projection of each item (date, sentiment, pain point,
        feature request, tags) is sent to the model.

        Raises:
            ReportSynthesisError: If ``items`` is empty, the call fails, or the
                response does not match the declared schema.
        """

        if not items:
            raise ReportSynthesisError("At least one feedback item is required.")
        result = self._run(
            SYNTHESIZE_WORKFLOW,
            ReportSynthesisError,
            lambda: self._prompts.render(
                SYNTHESIZE_WORKFLOW,
                data=json.dumps(
                    [item.report_projection() for item in items], ensure_ascii=False
                ),
            ),
            BATCH_ANALYSIS_SCHEMA,
            BatchAnalysisResult.from_dict,
            item_count=len(items),
        )
        if result.themed_item_count > len(items):
            logger.warning(
                "Theme counts exceed the number of analyzed items",
                extra={"themed": result.themed_item_count, "items": len(items)},
            )
        return result

    def _run(
        self,
        workflow: str,
        error_cls: type[AnalysisError],
        build_prompt: Callable[[], str],
        schema: Dict[str, Any],
        parse: Callable[[Any], T],
        *,
        item_count: int,
    ) -> T:
        started = perf_counter()
        try:
            prompt = build_prompt()
            response = self._llm.invoke(
                workflow, prompt, response_format=_response_format(workflow, schema)
            )
            result = parse(self._decode(response))
        except Exception as exc:
            logger.error(
                "analysis_failed",
                extra={
                    "workflow": workflow,
                    "duration_ms": round((perf_counter() - started) * 1000, 2),
                    "error": str(exc),
                },
            )
            raise error_cls(f"{workflow} failed: {exc}") from exc

        logger.info(
            "analysis_completed",
            extra={
                "workflow": workflow,
                "duration_ms": round((perf_counter() - started) * 1000, 2),
                "items": item_count,
            },
        )
        return result

    @staticmethod
    def _decode(response: str) -> Any:
        cleaned = _strip_code_fence(response or "")
        if not cleaned:
            raise SchemaValidationError("Model returned an empty response.")
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise SchemaValidationError(f"Response is not valid JSON: {exc}") from exc


__all__ = [
    "ANALYSIS_RESULT_SCHEMA",
    "AnalysisClient",
    "BATCH_ANALYSIS_SCHEMA",
    "CLASSIFY_WORKFLOW",
    "SYNTHESIZE_WORKFLOW",
]
