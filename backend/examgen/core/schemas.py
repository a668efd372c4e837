from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExamLevel(str, Enum):
    PRIMARY = "Primary"
    MIDDLE_SCHOOL = "Middle School"
    HIGH_SCHOOL = "High School"


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _dicts_only(value: Any) -> List[Any]:
    # model output is loosely shaped; drop anything that is not an object
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


# ------------------------------------------------------------
# Request models
# ------------------------------------------------------------
class ExamConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    level: str                                       # "Primary", "Middle School", "High School"
    grade_level: str = Field(alias="gradeLevel")     # e.g. "Grade 7"
    exam_type: str = Field(default="", alias="examType")  # e.g. "45 minutes, mid-term"
    structure_content: Optional[str] = Field(default=None, alias="structureContent")
    matrix_content: Optional[str] = Field(default=None, alias="matrixContent")
    specification_content: Optional[str] = Field(default=None, alias="specificationContent")
    reference_content: Optional[str] = Field(default=None, alias="referenceContent")


# ------------------------------------------------------------
# Exam models (parsed from model output)
# ------------------------------------------------------------
class QuestionPart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    label: Optional[str] = None
    content: Optional[str] = None

    @field_validator("label", "content", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Optional[str]:
        return _optional_text(v)


class Question(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    text: str = ""
    points: Optional[float] = None
    parts: Optional[List[QuestionPart]] = None

    @field_validator("id", "text", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _optional_text(v) or ""

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_points(cls, v: Any) -> Optional[float]:
        if v is None or isinstance(v, bool):
            return None
        try:
            if isinstance(v, (int, float)):
                return float(v)
            return float(str(v).strip())
        except (ValueError, OverflowError):
            return None

    @field_validator("parts", mode="before")
    @classmethod
    def _coerce_parts(cls, v: Any) -> Optional[List[Any]]:
        if v is None:
            return None
        return _dicts_only(v)


class ExamSection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    section: str = ""
    text: Optional[str] = None          # shared passage, may contain "\n" paragraph breaks
    questions: List[Question] = Field(default_factory=list)

    @field_validator("section", mode="before")
    @classmethod
    def _coerce_section(cls, v: Any) -> str:
        return _optional_text(v) or ""

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_passage(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator("questions", mode="before")
    @classmethod
    def _coerce_questions(cls, v: Any) -> List[Any]:
        return _dicts_only(v)


class AnswerKey(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    question_id: str = Field(alias="questionId")
    answer: Optional[str] = None
    points_detail: Optional[str] = Field(default=None, alias="pointsDetail")

    @field_validator("question_id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return _optional_text(v) or ""

    @field_validator("answer", "points_detail", mode="before")
    @classmethod
    def _coerce_optional(cls, v: Any) -> Optional[str]:
        return _optional_text(v)


class ExamData(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    exam_title: str = Field(alias="examTitle")
    duration: str = ""
    content: List[ExamSection]
    answers: List[AnswerKey]

    @field_validator("exam_title", "duration", mode="before")
    @classmethod
    def _coerce_header(cls, v: Any) -> str:
        return _optional_text(v) or ""

    @field_validator("content", "answers", mode="before")
    @classmethod
    def _coerce_entries(cls, v: Any) -> Any:
        # non-list envelopes are left to fail validation
        if isinstance(v, list):
            return _dicts_only(v)
        return v

    def question_ids(self) -> List[str]:
        return [q.id for section in self.content for q in section.questions]

    def unmatched_answers(self) -> List[AnswerKey]:
        """Answer entries whose questionId matches no question id."""
        known = set(self.question_ids())
        return [a for a in self.answers if a.question_id not in known]


# ------------------------------------------------------------
# Response models
# ------------------------------------------------------------
class ModelInfo(BaseModel):
    id: str
    name: str
    description: str


class GenerateExamResponse(BaseModel):
    status: str
    progress: List[str]
    exam: ExamData
