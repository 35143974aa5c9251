# speakup/schemas/enrollment.py - Enrollment schemas
from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime
import uuid


class EnrollmentCreate(BaseModel):
    course_id: uuid.UUID
    student_name: str = Field(..., min_length=1, max_length=100)
    student_phone: str = Field(..., min_length=1, max_length=20)
    center_name: Optional[str] = None
    local_name: Optional[str] = None
    description: Optional[str] = None

    @validator("student_name")
    def strip_name(cls, v):
        if not v.strip():
            raise ValueError("student_name cannot be empty")
        return v.strip()

    @validator("student_phone")
    def strip_phone_hyphens(cls, v):
        return v.replace("-", "").strip()


class BulkStudent(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    center_name: Optional[str] = None
    local_name: Optional[str] = None
    description: Optional[str] = None


class BulkEnrollmentIn(BaseModel):
    course_id: uuid.UUID
    students: List[BulkStudent] = Field(..., min_length=1)


class BulkFailure(BaseModel):
    name: str
    phone: str
    reason: str


class BulkSuccess(BaseModel):
    name: str
    phone: str


class BulkEnrollmentOut(BaseModel):
    success_count: int
    failed_count: int
    successful: List[BulkSuccess]
    failed: List[BulkFailure]


class EnrollmentOut(BaseModel):
    id: uuid.UUID
    course_id: uuid.UUID
    course_title: str
    student_id: Optional[uuid.UUID] = None
    student_name: str
    student_phone: str
    status: str
    center_name: Optional[str] = None
    local_name: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class MyEnrollments(BaseModel):
    enrollments: List[EnrollmentOut]
    message: Optional[str] = None


class CountOut(BaseModel):
    count: int
