"""
Tolerant parsing of LLM output into structured meeting insight.

Models asked for "JSON only" still wrap their answer in markdown code
fences or surround it with prose. The parser isolates the outermost JSON
object and validates it against MeetingInsight.
"""

import json
import re
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from domain.models import MeetingInsight
from shared_utils.constants import LogScope
from shared_utils.logging_utils import ContextualLogger


logger = ContextualLogger(scope=LogScope.PARSER)

_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)


def extract_json_object(raw: str) -> Optional[Dict[str, Any]]:
    """Return the first decodable JSON object found in *raw*, else None.

    Tries, in order: a fenced block, the whole text, and the slice from the
    first ``{`` to the last ``}``.
    """
    if not raw or not raw.strip():
        return None

    candidates = [m.group(1).strip() for m in _FENCE.finditer(raw)]
    candidates.append(raw.strip())
    start, end = raw.find("{"), raw.rfind("}")
    if start != -1 and end > start:
        candidates.append(raw[start:end + 1])

    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(value, dict):
            return value
    return None


class InsightParser:
    """Turns raw model text into a validated MeetingInsight."""

    @staticmethod
    def parse(raw: str) -> Optional[MeetingInsight]:
        """Parse *raw* model output.

        Args:
            raw: Text returned by the LLM.

        Returns:
            MeetingInsight, or None if no object could be decoded or the
            object does not satisfy the schema.
        """
        payload = extract_json_object(raw)
        if payload is None:
            logger.warning("insight_json_not_found", raw_length=len(raw or ""))
            return None

        try:
            return MeetingInsight.model_validate(payload)
        except PydanticValidationError as exc:
            logger.warning(
                "insight_schema_invalid",
                errors=exc.error_count(),
                keys=sorted(payload.keys()),
            )
            return None
