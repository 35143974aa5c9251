# speakup/schemas/course.py - Course and class-date schemas
from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import date as date_type, datetime
import uuid

from speakup.schemas.teacher import validate_hhmm


class ClassDateIn(BaseModel):
    date: date_type
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @validator("start_time", "end_time")
    def check_times(cls, v):
        if v is None:
            return v
        return validate_hhmm(v)


class ClassDateOut(BaseModel):
    id: uuid.UUID
    course_id: uuid.UUID
    date: date_type
    day_of_week: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    class Config:
        from_attributes = True


class CourseBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    contents: str = "basic100"
    location: str = "online"
    teacher_id: Optional[uuid.UUID] = None

    schedule_monday: bool = False
    schedule_tuesday: bool = False
    schedule_wednesday: bool = False
    schedule_thursday: bool = False
    schedule_friday: bool = False
    schedule_saturday: bool = False
    schedule_sunday: bool = False

    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    duration: str = "25분"
    class_count: int = Field(1, ge=1)
    price: int = Field(0, ge=0)

    @validator("title")
    def strip_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @validator("contents")
    def validate_contents(cls, v):
        if v not in ("tour100", "basic100", "wh100"):
            raise ValueError("contents must be one of tour100, basic100, wh100")
        return v

    @validator("location")
    def validate_location(cls, v):
        if v not in ("online", "offline", "hybrid"):
            raise ValueError("location must be one of online, offline, hybrid")
        return v

    @validator("start_time", "end_time")
    def check_times(cls, v):
        if v is None:
            return v
        return validate_hhmm(v)

    @validator("end_date")
    def validate_date_range(cls, v, values):
        start = values.get("start_date")
        if v and start and v < start:
            raise ValueError("end_date must not be before start_date")
        return v


class CourseCreate(CourseBase):
    class_dates: List[ClassDateIn] = []


class CourseUpdate(CourseBase):
    """Full replacement; class_dates=None leaves the schedule untouched"""
    class_dates: Optional[List[ClassDateIn]] = None


class CourseOut(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    contents: str
    location: str
    generator_id: Optional[uuid.UUID] = None
    teacher_id: Optional[uuid.UUID] = None

    schedule_monday: bool
    schedule_tuesday: bool
    schedule_wednesday: bool
    schedule_thursday: bool
    schedule_friday: bool
    schedule_saturday: bool
    schedule_sunday: bool

    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: str
    class_count: int
    price: int
    created_at: datetime

    class Config:
        from_attributes = True


class CourseDetail(CourseOut):
    status: str
    teacher_name: Optional[str] = None
    class_dates: List[ClassDateOut] = []


class ClassMember(BaseModel):
    enrollment_id: uuid.UUID
    student_id: Optional[uuid.UUID] = None
    display_name: str
    profile_image: Optional[str] = None
    status: str
