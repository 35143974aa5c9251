# speakup/schemas/voice.py - Voice sharing schemas
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid


class OpenVoiceIn(BaseModel):
    course_id: uuid.UUID
    sentence_no: int = Field(..., ge=1)


class OpenVoiceOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    course_id: uuid.UUID
    sentence_no: int
    sentence_en: Optional[str] = None
    my_voice_url: str
    like_count: int
    created_at: datetime

    class Config:
        from_attributes = True


class OpenVoiceListItem(OpenVoiceOut):
    display_name: str
    profile_image: Optional[str] = None


class LikeStatus(BaseModel):
    liked: bool
    like_count: int


class ListenedOut(BaseModel):
    listened: bool
    first_time: bool
