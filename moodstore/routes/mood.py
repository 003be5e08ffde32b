"""Mood picker, quiz and detection routes"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..core.errors import ValidationError
from ..database.profiles import profile_db
from ..models.mood import (
    DetectMoodRequest,
    DetectMoodResponse,
    MoodScoreResult,
    MoodSelectRequest,
    QuizQuestion,
    QuizSubmission,
    RecentMood,
)
from ..models.engagement import TrendingMood
from ..models.product import mood_emoji
from ..security.auth import SessionUser, optional_user, require_user
from ..services.mood_detector import MoodDetector
from ..services.mood_scorer import (
    QUIZ_QUESTIONS,
    apply_preferences,
    normalize_mood,
    record_selection,
    score_answers,
    top_moods,
    trending_moods,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Mood"])

# Initialize services (would be dependency injected in production)
mood_detector: Optional[MoodDetector] = None


def get_mood_detector() -> MoodDetector:
    """Get or create mood detector"""
    global mood_detector
    if mood_detector is None:
        mood_detector = MoodDetector(delay=settings.mood_detection_delay)
    return mood_detector


@router.get("/mood-quiz/questions", response_model=list[QuizQuestion])
async def get_quiz_questions():
    """The quiz shown to shoppers, in order"""
    return QUIZ_QUESTIONS


@router.post("/mood-quiz", response_model=MoodScoreResult)
async def submit_quiz(
    submission: QuizSubmission,
    user: Optional[SessionUser] = Depends(optional_user),
):
    """
    Score a completed quiz.

    Signed-in users get their mood preference counters bumped: +2 for the
    primary mood and +1 for the secondary one.
    """
    try:
        result = score_answers(submission.answers, question_count=len(QUIZ_QUESTIONS))
    except ValueError as e:
        raise ValidationError(str(e))

    if user:
        profile_db.ensure_profile(user.user_id, email=user.email)
        counters = profile_db.get_mood_preferences(user.user_id)
        profile_db.set_mood_preferences(user.user_id, apply_preferences(counters, result))

    return result


@router.post("/moods/select")
async def select_mood(
    request: MoodSelectRequest,
    user: Optional[SessionUser] = Depends(optional_user),
):
    """Record a mood picked directly; anonymous picks are not stored"""
    mood = normalize_mood(request.mood)
    if not mood:
        raise ValidationError("Mood is required")

    if user:
        profile_db.ensure_profile(user.user_id, email=user.email)
        counters = profile_db.get_mood_preferences(user.user_id)
        profile_db.set_mood_preferences(user.user_id, record_selection(counters, mood))

    return {"mood": mood, "redirect": f"/products?mood={mood}"}


@router.get("/moods/recent", response_model=list[RecentMood])
async def recent_moods(user: SessionUser = Depends(require_user)):
    """The user's three most preferred moods"""
    counters = profile_db.get_mood_preferences(user.user_id)
    return [
        RecentMood(name=name, count=count, emoji=mood_emoji(name))
        for name, count in top_moods(counters)
    ]


@router.get("/moods/trending", response_model=list[TrendingMood])
async def get_trending_moods(limit: int = Query(3, ge=1, le=8)):
    """Moods most preferred across all shoppers"""
    ranked = trending_moods(profile_db.all_mood_preferences(), limit=limit)
    return [TrendingMood(mood=mood, count=count, emoji=mood_emoji(mood)) for mood, count in ranked]


@router.post("/detect-mood", response_model=DetectMoodResponse, response_model_exclude_none=True)
async def detect_mood(
    request: DetectMoodRequest,
    detector: MoodDetector = Depends(get_mood_detector),
):
    """Guess the shopper's mood from a camera snapshot"""
    if not request.image:
        return JSONResponse({"error": "Image data is required"}, status_code=400)

    try:
        mood = await detector.detect(request.image)
    except Exception:
        logger.exception("Error detecting mood")
        return JSONResponse({"error": "Failed to detect mood"}, status_code=500)

    return DetectMoodResponse(mood=mood.value)
