import json
from typing import Any, List, Optional, Tuple


class ExamGenerationError(Exception):
    """Base class for every failure surfaced by the generation core."""


class MissingCredentialError(ExamGenerationError):
    def __init__(self, message: str = "Missing API Key. Please click Settings to add your API Key."):
        super().__init__(message)


class EmptyResponseError(ExamGenerationError):
    def __init__(self, model: str):
        super().__init__("Empty response from AI")
        self.model = model


def describe_error(error: Any) -> str:
    """Message of an error, or a serialized form when it carries none."""
    if isinstance(error, BaseException) and str(error):
        return str(error)
    try:
        return json.dumps(error, default=repr)
    except (TypeError, ValueError):
        return repr(error)


class AllModelsFailedError(ExamGenerationError):
    def __init__(self, last_error: Any, attempts: Optional[List[Tuple[str, BaseException]]] = None):
        super().__init__(f"All AI models failed. Last error: {describe_error(last_error)}")
        self.last_error = last_error
        self.attempts = attempts or []


class ResponseTooLargeError(ExamGenerationError):
    def __init__(
        self,
        message: str = (
            "The exam was too large for the AI to finish. "
            "Try uploading fewer training files or shortening the Matrix/Spec."
        ),
    ):
        super().__init__(message)
