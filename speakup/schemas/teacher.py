# speakup/schemas/teacher.py - Teacher management schemas
from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import date as date_type, datetime
import re
import uuid

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_hhmm(v: str) -> str:
    if not TIME_PATTERN.match(v or ""):
        raise ValueError("Time must be in HH:MM format")
    return v


class TeacherApplicant(BaseModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    real_name: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TeacherOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    is_active: bool
    nation: str
    subject: str
    nick_name: Optional[str] = None
    zoom_invite_link_url: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime


class TeacherUpdate(BaseModel):
    nation: Optional[str] = None
    subject: Optional[str] = None
    nick_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)

    @validator("nation")
    def validate_nation(cls, v):
        if v is not None and v not in ("KR", "PH"):
            raise ValueError("nation must be KR or PH")
        return v

    @validator("subject")
    def validate_subject(cls, v):
        if v is not None and v not in ("en", "ja", "ko", "zh"):
            raise ValueError("subject must be one of en, ja, ko, zh")
        return v


class ScheduleConflictCheck(BaseModel):
    """Fields are optional here; the handler answers 400 when one is missing"""
    teacher_id: Optional[uuid.UUID] = None
    date: Optional[date_type] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    course_id: Optional[uuid.UUID] = None

    @validator("start_time", "end_time")
    def check_times(cls, v):
        if v is None:
            return v
        return validate_hhmm(v)


class ConflictsCheck(BaseModel):
    class_dates: List[date_type]
    start_time: str
    end_time: str
    current_course_id: Optional[uuid.UUID] = None

    @validator("start_time", "end_time")
    def check_times(cls, v):
        return validate_hhmm(v)


class AvailabilitySlot(BaseModel):
    date: date_type
    start_time: str
    end_time: str

    @validator("start_time", "end_time")
    def check_times(cls, v):
        return validate_hhmm(v)


class AvailabilityCheck(BaseModel):
    class_dates: List[AvailabilitySlot]
    current_teacher_id: Optional[uuid.UUID] = None


class TeacherAttendanceToggle(BaseModel):
    course_id: uuid.UUID
    class_date: date_type


class TeacherStats(BaseModel):
    course_count: int
    student_count: int
