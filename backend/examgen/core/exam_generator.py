import logging
from enum import Enum
from typing import Callable, Optional, Protocol

from .difficulty import DEFAULT_RULES, DifficultyRuleTable, build_system_instruction
from .model_invoker import ModelInvoker
from .normalizer import parse_exam_response
from .schemas import ExamConfig, ExamData
from .settings import GenerationContext

logger = logging.getLogger("examgen.generator")

REFERENCE_LIMIT = 15000
MATRIX_LIMIT = 5000
SPECIFICATION_LIMIT = 5000
DEFAULT_STRUCTURE = "Standard GDPT 2018"


# ------------------------------------------------------------
# Phases, state & progress
# ------------------------------------------------------------
class GenerationPhase(str, Enum):
    ANALYZING_PLAN = "analyzing_plan"
    SYNTHESIZING_CONTENT = "synthesizing_content"

    @property
    def message(self) -> str:
        return _PHASE_MESSAGES[self]


_PHASE_MESSAGES = {
    GenerationPhase.ANALYZING_PLAN: "Step 1/2: Analyzing Matrix & Training Data...",
    GenerationPhase.SYNTHESIZING_CONTENT: "Step 2/2: Generating Exam Content (Be patient)...",
}


class GenerationState(str, Enum):
    IDLE = "idle"
    ANALYZING_PLAN = "analyzing_plan"
    SYNTHESIZING_CONTENT = "synthesizing_content"
    DONE = "done"
    FAILED = "failed"


class ProgressObserver(Protocol):
    def on_phase(self, phase: GenerationPhase) -> None: ...


class CallbackObserver:
    """Adapts a plain ``(message) -> None`` callback to ``ProgressObserver``."""

    def __init__(self, callback: Callable[[str], None]):
        self.callback = callback

    def on_phase(self, phase: GenerationPhase) -> None:
        self.callback(phase.message)


# ------------------------------------------------------------
# Prompts
# ------------------------------------------------------------
def truncate(text: Optional[str], limit: int) -> Optional[str]:
    """Hard character cutoff, not word or paragraph aware."""
    if not text:
        return text
    return text[:limit]


EXAM_JSON_SHAPE = """{
  "examTitle": "string",
  "duration": "string",
  "content": [
    {
      "section": "string",
      "text": "string (shared passage here)",
      "questions": [{ "id": "Question 1", "text": "concise question", "points": 0.2, "parts": [{"label": "A.", "content": "..."}] }]
    }
  ],
  "answers": [{ "questionId": "Question 1", "answer": "A", "pointsDetail": "0.2 pts" }]
}"""


def build_plan_prompt(config: ExamConfig, rule_text: str) -> str:
    system_instruction = build_system_instruction(config.grade_level, rule_text)
    reference = truncate(config.reference_content, REFERENCE_LIMIT) or "None"
    matrix = truncate(config.matrix_content, MATRIX_LIMIT) or "None"
    specification = truncate(config.specification_content, SPECIFICATION_LIMIT) or "None"

    return (
        "Role: Senior Assessment Specialist.\n"
        "Analyze these requirements and create a logic-only blueprint.\n\n"
        "STRICT DIFFICULTY CONTROL:\n"
        f"{system_instruction}\n\n"
        f"Target Structure: {config.structure_content or DEFAULT_STRUCTURE}\n"
        f"Matrix: {matrix}\n"
        f"Spec: {specification}\n"
        f"Training Context (Excerpt): {reference}\n\n"
        "Task:\n"
        "1. Extract number of questions per section.\n"
        "2. Define grammar/vocab focus per section.\n"
        f"3. Generate a High-Quality Reading Passage (concise, ~250 words) appropriate for {config.grade_level}.\n"
        "4. Provide a structural plan. No full JSON yet.\n"
    )


def build_content_prompt(config: ExamConfig, plan: str, rule_text: str) -> str:
    system_instruction = build_system_instruction(config.grade_level, rule_text)

    return (
        "Role: Professional English Teacher.\n"
        f"Create the FINAL EXAM JSON based on this plan: {plan}\n\n"
        f"CRITICAL DIFFICULTY ENFORCEMENT for {config.grade_level}:\n"
        f"{system_instruction}\n\n"
        "CRITICAL RULES for JSON Size Efficiency:\n"
        "1. DO NOT repeat the reading passage or long descriptions inside individual 'questions'.\n"
        "2. Put shared text ONLY in the section's 'text' field.\n"
        "3. Keep question texts concise.\n"
        "4. Ensure the JSON is valid and complete.\n\n"
        f"Exam Metadata: {config.level} - {config.grade_level}, Time: {config.exam_type}.\n"
        'Formatting: Use Vietnamese headers ("I. PHẦN TRẮC NGHIỆM").\n\n'
        "Return ONLY JSON with this structure:\n"
        f"{EXAM_JSON_SHAPE}\n"
    )


# ------------------------------------------------------------
# Orchestrator
# ------------------------------------------------------------
class ExamGenerator:
    """Two-stage pipeline: structural plan, then full exam JSON."""

    def __init__(self, invoker: ModelInvoker, rules: DifficultyRuleTable = DEFAULT_RULES):
        self.invoker = invoker
        self.rules = rules
        self.state = GenerationState.IDLE

    def _enter(self, phase: GenerationPhase, observer: Optional[ProgressObserver]) -> None:
        self.state = GenerationState(phase.value)
        logger.info(phase.message)
        if observer is not None:
            observer.on_phase(phase)

    async def generate(self, config: ExamConfig, observer: Optional[ProgressObserver] = None) -> ExamData:
        self.state = GenerationState.IDLE
        rule_text = self.rules.resolve(config.level)

        try:
            self._enter(GenerationPhase.ANALYZING_PLAN, observer)
            plan = await self.invoker.invoke(build_plan_prompt(config, rule_text))

            self._enter(GenerationPhase.SYNTHESIZING_CONTENT, observer)
            raw = await self.invoker.invoke(build_content_prompt(config, plan, rule_text), json_response=True)
            exam = parse_exam_response(raw)
        except Exception:
            self.state = GenerationState.FAILED
            raise

        self.state = GenerationState.DONE
        unmatched = exam.unmatched_answers()
        if unmatched:
            logger.warning(
                f"{len(unmatched)} answer(s) reference unknown question ids: "
                f"{[a.question_id for a in unmatched]}"
            )
        logger.info(f"Generated exam '{exam.exam_title}' with {len(exam.question_ids())} questions.")
        return exam


async def generate_exam(
    config: ExamConfig,
    on_progress: Optional[Callable[[str], None]] = None,
    *,
    context: Optional[GenerationContext] = None,
    rules: DifficultyRuleTable = DEFAULT_RULES,
) -> ExamData:
    invoker = ModelInvoker(context or GenerationContext.from_env())
    observer = CallbackObserver(on_progress) if on_progress else None
    return await ExamGenerator(invoker, rules).generate(config, observer)
