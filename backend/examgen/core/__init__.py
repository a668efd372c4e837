# backend/examgen/core/__init__.py
"""
Core package for the exam generation assistant.
Exposes the data model, the model invoker and the two-stage exam generator.
"""

from .errors import (
    AllModelsFailedError,
    EmptyResponseError,
    ExamGenerationError,
    MissingCredentialError,
    ResponseTooLargeError,
)
from .exam_generator import (
    CallbackObserver,
    ExamGenerator,
    GenerationPhase,
    GenerationState,
    generate_exam,
)
from .model_invoker import MODEL_CATALOG, MODEL_PRIORITY, ModelInvoker
from .normalizer import parse_exam_response
from .schemas import (
    AnswerKey,
    ExamConfig,
    ExamData,
    ExamLevel,
    ExamSection,
    GenerateExamResponse,
    ModelInfo,
    Question,
    QuestionPart,
)
from .settings import GenerationContext

__all__ = [
    "AllModelsFailedError",
    "AnswerKey",
    "CallbackObserver",
    "EmptyResponseError",
    "ExamConfig",
    "ExamData",
    "ExamGenerationError",
    "ExamGenerator",
    "ExamLevel",
    "ExamSection",
    "GenerateExamResponse",
    "GenerationContext",
    "GenerationPhase",
    "GenerationState",
    "MODEL_CATALOG",
    "MODEL_PRIORITY",
    "MissingCredentialError",
    "ModelInfo",
    "ModelInvoker",
    "Question",
    "QuestionPart",
    "ResponseTooLargeError",
    "generate_exam",
    "parse_exam_response",
]
