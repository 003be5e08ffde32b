"""
Mood quiz scoring.

Answers later in the quiz weigh more than earlier ones: answer ``i``
(0-based) adds ``1 + 0.1 * i`` to the score of the mood it picked. The
primary and secondary moods are the two highest scores, compared with a
strict ``>`` while walking the moods in MoodTag declaration order, so an
equal score never displaces a mood seen earlier.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..models.mood import MoodScoreResult, QuizAnswer, QuizOption, QuizQuestion
from ..models.product import MoodTag, canonical_mood

logger = logging.getLogger(__name__)

BASE_WEIGHT = Decimal("1")
WEIGHT_STEP = Decimal("0.1")

PRIMARY_BONUS = 2
SECONDARY_BONUS = 1
SELECTION_BONUS = 1


def _question(text: str, *options: tuple[str, MoodTag]) -> QuizQuestion:
    return QuizQuestion(
        question=text,
        options=[QuizOption(text=label, mood=mood.value) for label, mood in options],
    )


QUIZ_QUESTIONS: list[QuizQuestion] = [
    _question(
        "What would you like to do right now?",
        ("Take a nap", MoodTag.TIRED),
        ("Go to a party", MoodTag.CELEBRATING),
        ("Relax in nature", MoodTag.CHILL),
        ("Exercise", MoodTag.ENERGETIC),
        ("Read a book", MoodTag.FOCUSED),
    ),
    _question(
        "What kind of music do you want to listen to?",
        ("Upbeat and energetic", MoodTag.ENERGETIC),
        ("Calm and soothing", MoodTag.RELAXED),
        ("Party anthems", MoodTag.CELEBRATING),
        ("Focus beats", MoodTag.FOCUSED),
        ("Nothing, I need silence", MoodTag.TIRED),
    ),
    _question(
        "What's your energy level right now?",
        ("Very low, I'm exhausted", MoodTag.TIRED),
        ("Low, but peaceful", MoodTag.RELAXED),
        ("Moderate and balanced", MoodTag.CHILL),
        ("High, I'm feeling good", MoodTag.HAPPY),
        ("Very high, I'm pumped!", MoodTag.ENERGETIC),
    ),
    _question(
        "What kind of environment are you in?",
        ("At home relaxing", MoodTag.CHILL),
        ("At work or studying", MoodTag.FOCUSED),
        ("Out with friends", MoodTag.CELEBRATING),
        ("In nature", MoodTag.RELAXED),
        ("On the go", MoodTag.ENERGETIC),
    ),
    _question(
        "What would taste good right now?",
        ("Coffee or energy drink", MoodTag.TIRED),
        ("Something sweet", MoodTag.HAPPY),
        ("A healthy meal", MoodTag.FOCUSED),
        ("Comfort food", MoodTag.CHILL),
        ("Celebration treats", MoodTag.CELEBRATING),
    ),
]


def normalize_mood(value: str) -> str:
    """Canonical spelling for known moods, the stripped string otherwise"""
    mood = canonical_mood(value)
    return mood.value if mood else value.strip()


def mood_vocabulary(extra: Iterable[str] = ()) -> list[str]:
    """Canonical moods in declaration order, then unknown moods in first-seen order"""
    vocabulary = [m.value for m in MoodTag]
    for mood in extra:
        if mood not in vocabulary:
            vocabulary.append(mood)
    return vocabulary


def answer_weight(index: int) -> Decimal:
    return BASE_WEIGHT + WEIGHT_STEP * index


def _ordered_answers(answers: Sequence[QuizAnswer], question_count: Optional[int]) -> list[QuizAnswer]:
    if not answers:
        raise ValueError("Cannot score a quiz without answers")

    expected = question_count if question_count is not None else len(answers)
    by_index: dict[int, QuizAnswer] = {}
    for answer in answers:
        if answer.question_index in by_index:
            raise ValueError(f"Question {answer.question_index} answered twice")
        if not answer.mood or not answer.mood.strip():
            raise ValueError(f"Question {answer.question_index} has an empty answer")
        by_index[answer.question_index] = answer

    missing = [i for i in range(expected) if i not in by_index]
    if missing or len(by_index) != expected:
        raise ValueError(f"Quiz is incomplete, missing answers for questions {missing}")

    return [by_index[i] for i in range(expected)]


def score_answers(
    answers: Sequence[QuizAnswer],
    question_count: Optional[int] = None,
) -> MoodScoreResult:
    """
    Score a completed quiz.

    Args:
        answers: One answer per question, in any order
        question_count: Number of questions in the quiz; defaults to the
            number of answers

    Raises:
        ValueError: If a question is unanswered or answered twice. Callers
            must only score a complete quiz.
    """
    ordered = _ordered_answers(answers, question_count)
    chosen = [normalize_mood(a.mood) for a in ordered]

    scores: dict[str, Decimal] = {mood: Decimal("0") for mood in mood_vocabulary(chosen)}
    for index, mood in enumerate(chosen):
        scores[mood] += answer_weight(index)

    primary: Optional[str] = None
    secondary: Optional[str] = None
    for mood, score in scores.items():
        if score == 0:
            continue
        if primary is None or score > scores[primary]:
            secondary = primary
            primary = mood
        elif secondary is None or score > scores[secondary]:
            secondary = mood

    logger.debug(f"Quiz scored: primary={primary}, secondary={secondary}")

    return MoodScoreResult(
        primary=primary,
        secondary=secondary,
        scores={mood: float(score) for mood, score in scores.items()},
    )


# ==================== Preference counters ====================

def _bumped(counters: dict[str, int], mood: str, amount: int) -> dict[str, int]:
    updated = dict(counters)
    updated[mood] = updated.get(mood, 0) + amount
    return updated


def apply_preferences(counters: dict[str, int], result: MoodScoreResult) -> dict[str, int]:
    """Counters after a quiz: +2 for the primary mood, +1 for the secondary"""
    updated = _bumped(counters, result.primary, PRIMARY_BONUS)
    if result.secondary:
        updated = _bumped(updated, result.secondary, SECONDARY_BONUS)
    return updated


def record_selection(counters: dict[str, int], mood: str) -> dict[str, int]:
    """Counters after picking a mood directly"""
    return _bumped(counters, normalize_mood(mood), SELECTION_BONUS)


def top_moods(counters: dict[str, int], limit: int = 3) -> list[tuple[str, int]]:
    """Most preferred moods, highest counter first"""
    ranked = sorted(counters.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


def trending_moods(counter_maps: Iterable[dict[str, int]], limit: int = 3) -> list[tuple[str, int]]:
    """Moods ranked by their counters summed over all shoppers"""
    totals: dict[str, int] = {}
    for counters in counter_maps:
        for mood, count in counters.items():
            totals[mood] = totals.get(mood, 0) + count
    return top_moods({mood: count for mood, count in totals.items() if count > 0}, limit=limit)
