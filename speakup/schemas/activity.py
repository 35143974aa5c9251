# speakup/schemas/activity.py - Activity tracker schemas
from pydantic import BaseModel, Field
from typing import Optional
import uuid


class RecordingIn(BaseModel):
    course_id: uuid.UUID
    sentence_no: int = Field(..., ge=1)
    file_url: str = Field(..., min_length=1, max_length=500)


class RecordingOut(BaseModel):
    course_id: uuid.UUID
    sentence_no: int
    file_url: str
    attempt_count: int

    class Config:
        from_attributes = True


class YouTubeViewIn(BaseModel):
    course_id: uuid.UUID
    sentence_no: int = Field(..., ge=1)
    duration: int = Field(..., ge=0)


class QuizAttemptIn(BaseModel):
    course_id: uuid.UUID
    sentence_no: int = Field(..., ge=1)
    kind: Optional[str] = Field("speaking", max_length=32)
    is_correct: bool = False


class QuizAttemptOut(BaseModel):
    sentence_no: int
    kind: Optional[str] = None
    attempt_quiz: int
    correct_count: int

    class Config:
        from_attributes = True


class QuizStats(BaseModel):
    total_attempts: int
    total_correct: int
