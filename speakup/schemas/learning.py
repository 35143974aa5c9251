# speakup/schemas/learning.py - Sentences, progress and favorites
from pydantic import BaseModel, Field
from typing import Optional, List
import uuid
from datetime import datetime


class SentenceOut(BaseModel):
    no: int
    en: str
    ko: str
    contents: str
    audio_url: Optional[str] = None
    utube_url: Optional[str] = None

    class Config:
        from_attributes = True


class UnitSubjectOut(BaseModel):
    unit_number: int
    subject_ko: str
    subject_en: str
    unit_utube_url: Optional[str] = None

    class Config:
        from_attributes = True


class NextDayIn(BaseModel):
    course_id: Optional[uuid.UUID] = None
    next_day: Optional[int] = Field(None, ge=1)
    total_completed: Optional[bool] = None


class NextDayOut(BaseModel):
    course_id: Optional[uuid.UUID] = None
    user_next_day: int
    total_completed: bool

    class Config:
        from_attributes = True


class SentenceRef(BaseModel):
    course_id: uuid.UUID
    sentence_no: int = Field(..., ge=1)


class ReviewOut(BaseModel):
    completed_days: List[int]


class FavoriteStatus(BaseModel):
    favorited: bool


class CompletedSentenceOut(BaseModel):
    sentence_no: int
    completed_at: datetime
    sentence: Optional[SentenceOut] = None
