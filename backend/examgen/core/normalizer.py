import json
import logging
import re

from pydantic import ValidationError

from .errors import ResponseTooLargeError
from .schemas import ExamData

logger = logging.getLogger("examgen.normalizer")

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"```\s*$")


def strip_code_fence(text: str) -> str:
    """Strip common markdown fences around a JSON answer."""
    cleaned = _LEADING_FENCE.sub("", text, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_exam_response(raw_text: str) -> ExamData:
    """Parse the final model answer into ``ExamData``.

    Truncated output is not repaired: any syntax failure, or a payload
    missing the examTitle/content/answers envelope, raises
    ``ResponseTooLargeError`` instead of the raw parser error.
    """
    raw_text = raw_text or ""
    cleaned = strip_code_fence(raw_text)
    try:
        data = json.loads(cleaned)
        return ExamData.model_validate(data)
    # deeply nested arrays exhaust the decoder's recursion limit
    except (json.JSONDecodeError, ValidationError, RecursionError) as e:
        logger.error(f"JSON parse error. Raw text length: {len(raw_text)} ({type(e).__name__})")
    raise ResponseTooLargeError()
