# speakup/schemas/attendance.py - Attendance schemas
from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import date as date_type
import uuid

from speakup.schemas.course import ClassDateOut


class AttendanceCheckIn(BaseModel):
    class_date_id: uuid.UUID
    course_id: uuid.UUID


class AttendanceOut(BaseModel):
    id: uuid.UUID
    class_date_id: uuid.UUID
    course_id: uuid.UUID
    is_attended: bool
    date: Optional[date_type] = None


class AttendanceDashboard(BaseModel):
    total_class_dates: int
    attended_class_dates: int


class RosterStudent(BaseModel):
    student_id: uuid.UUID
    student_name: str
    display_name: str
    attendance: Dict[str, bool]


class CourseRoster(BaseModel):
    class_dates: List[ClassDateOut]
    students: List[RosterStudent]
