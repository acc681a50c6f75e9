"""Canned questions offered in the chat input panel."""

from enum import Enum

from pydantic import BaseModel


class QuestionCategory(str, Enum):
    GENERAL = "general"
    GAMEPLAY = "gameplay"
    TECHNICAL = "technical"


class PresetQuestion(BaseModel):
    id: int
    question: str
    category: QuestionCategory


PRESET_QUESTIONS: list[PresetQuestion] = [
    PresetQuestion(
        id=1,
        question="What are the most widespread misconceptions about government incentives in Turkey?",
        category=QuestionCategory.GENERAL,
    ),
    PresetQuestion(
        id=2,
        question="What do people commonly get wrong about government support for young entrepreneurs?",
        category=QuestionCategory.GENERAL,
    ),
    PresetQuestion(
        id=3,
        question="What are the most common examples of economic and financial disinformation on social media?",
        category=QuestionCategory.TECHNICAL,
    ),
    PresetQuestion(
        id=4,
        question="What misleading claims circulated about state aid after the earthquake?",
        category=QuestionCategory.GENERAL,
    ),
    PresetQuestion(
        id=5,
        question="Which disinformation about public incentives spreads most often during election periods?",
        category=QuestionCategory.GAMEPLAY,
    ),
    PresetQuestion(
        id=6,
        question="What false information about state-funded projects spreads among young people?",
        category=QuestionCategory.TECHNICAL,
    ),
]


def suggest_questions(
    text: str,
    questions: list[PresetQuestion] | None = None,
    limit: int = 3,
) -> list[PresetQuestion]:
    """Return preset questions containing ``text``, case-insensitively.

    Args:
        text: Current content of the chat input.
        questions: Candidates, defaults to PRESET_QUESTIONS.
        limit: Maximum number of suggestions.

    Returns:
        Up to ``limit`` matching questions in their original order; empty for
        blank input.
    """
    needle = text.strip().lower()
    if not needle:
        return []
    candidates = PRESET_QUESTIONS if questions is None else questions
    return [q for q in candidates if needle in q.question.lower()][:limit]
