"""Mood quiz and mood detection models"""

from pydantic import BaseModel, Field
from typing import Optional


class QuizAnswer(BaseModel):
    """Answer to one quiz question"""
    question_index: int = Field(ge=0)
    mood: str


class MoodScoreResult(BaseModel):
    """Outcome of scoring a completed quiz"""
    primary: str
    secondary: Optional[str] = None
    scores: dict[str, float] = {}


class QuizOption(BaseModel):
    text: str
    mood: str


class QuizQuestion(BaseModel):
    question: str
    options: list[QuizOption]


class QuizSubmission(BaseModel):
    """Request body for scoring the quiz"""
    answers: list[QuizAnswer]


class MoodSelectRequest(BaseModel):
    mood: str


class RecentMood(BaseModel):
    name: str
    count: int
    emoji: Optional[str] = None


class DetectMoodRequest(BaseModel):
    image: Optional[str] = None


class DetectMoodResponse(BaseModel):
    mood: Optional[str] = None
    error: Optional[str] = None
