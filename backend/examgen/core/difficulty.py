from dataclasses import dataclass
from typing import Mapping, Optional

from .schemas import ExamLevel

# ------------------------------------------------------------
# Rule texts
# ------------------------------------------------------------
PRIMARY_RULES = """
**For PRIMARY (Grade 3-5):**
- Vocabulary: Basic 500-1000 common words
- Grammar: Simple present, present continuous, basic sentence structures
- Reading passages: 80-150 words, simple topics (family, school, animals, daily activities)
- Question types: Multiple choice, fill-in-the-blank, picture matching
- Language complexity: A1-A2 CEFR level
- Sentence length: 5-10 words average
- Instructions: Simple and clear Vietnamese translations provided

Example differentiation:
- Grade 3: "The cat is on the table." (Simple present, basic vocabulary)
"""

MIDDLE_SCHOOL_RULES = """
**For MIDDLE SCHOOL (Grade 6-9):**
- Vocabulary: 1500-2500 words, topic-based vocabulary
- Grammar: All basic tenses, conditionals, passive voice, reported speech
- Reading passages: 200-300 words, varied topics (culture, environment, technology basics)
- Question types: Multiple choice, gap-filling, short answers, true/false
- Language complexity: A2-B1 CEFR level
- Sentence length: 10-15 words average
- Mix of concrete and some abstract concepts

Example differentiation:
- Grade 7: "If I had more time, I would visit my grandparents." (Second conditional, family relationships)
"""

HIGH_SCHOOL_RULES = """
**For HIGH SCHOOL (Grade 10-12):**
- Vocabulary: 3000-5000 words, academic and specialized vocabulary
- Grammar: Complex structures, inversion, cleft sentences, advanced conditionals
- Reading passages: 350-500 words, academic topics (science, social issues, literature analysis)
- Question types: Multiple choice, long answers, essay-style, inference questions
- Language complexity: B1-B2 CEFR level
- Sentence length: 15-20 words average
- Abstract thinking and critical analysis required

Example differentiation:
- Grade 11: "Despite numerous challenges, the environmental conservation movement has gained significant momentum globally." (Complex sentence, academic vocabulary)
"""

HIGH_SCHOOL_KNOWLEDGE = """
**HIGH SCHOOL KNOWLEDGE BASE (GDPT 2018, Grade 10-12):**
- Follow the unit themes of the national English textbooks (family life, environment,
  technology, global citizenship, further education, the world of work).
- Pronunciation: stress in two- and three-syllable words, sounds in context.
- Grammar: perfect and continuous tenses, passive voice, reported speech, relative and
  participle clauses, conditionals, inversion, cleft sentences.
- Reading: passages of 300-450 words with main idea, detail, reference, vocabulary-in-context
  and inference questions.
- Writing: sentence transformation, sentence combination, paragraph and letter arrangement.
- Target the national high-school graduation exam format (B1-B2 CEFR).
"""

GENERIC_RULES = "Apply difficulty appropriate for the selected grade level and keep topics age-appropriate."


# ------------------------------------------------------------
# Rule tables
# ------------------------------------------------------------
@dataclass(frozen=True)
class DifficultyRuleTable:
    """Maps an exam level to the instruction text injected into both prompts."""

    rules: Mapping[str, str]
    fallback_level: Optional[str] = None
    fallback_text: str = GENERIC_RULES

    def resolve(self, level: str) -> str:
        if level in self.rules:
            return self.rules[level]
        if self.fallback_level is not None:
            return self.rules[self.fallback_level]
        return self.fallback_text


TIERED_RULES = DifficultyRuleTable(
    rules={
        ExamLevel.PRIMARY.value: PRIMARY_RULES,
        ExamLevel.MIDDLE_SCHOOL.value: MIDDLE_SCHOOL_RULES,
        ExamLevel.HIGH_SCHOOL.value: HIGH_SCHOOL_RULES,
    },
    fallback_level=ExamLevel.MIDDLE_SCHOOL.value,
)

HIGH_SCHOOL_FOCUS_RULES = DifficultyRuleTable(
    rules={ExamLevel.HIGH_SCHOOL.value: HIGH_SCHOOL_KNOWLEDGE},
    fallback_text=GENERIC_RULES,
)

DEFAULT_RULES = TIERED_RULES


def build_system_instruction(grade_level: str, rule_text: str) -> str:
    return (
        "When user selects a grade level, you MUST:\n"
        f"1. Analyze the selected grade ({grade_level})\n"
        "2. Apply the appropriate difficulty parameters below\n"
        "3. Generate exam content that matches EXACTLY the complexity level for that grade\n"
        "4. Use age-appropriate topics and contexts\n"
        "5. Adjust vocabulary, grammar structures, and cognitive demands accordingly\n"
        "6. Ensure reading passages and questions are neither too easy nor too difficult for the target grade\n"
        f"{rule_text}"
    )
