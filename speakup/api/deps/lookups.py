# speakup/api/deps/lookups.py - Shared "fetch or 404" helpers for routers
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from uuid import UUID

from speakup.models.course import Course
from speakup.models.teacher import Teacher


def get_course_or_404(db: Session, course_id: UUID) -> Course:
    course = db.get(Course, course_id)
    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found"
        )
    return course


def get_teacher_or_404(db: Session, teacher_id: UUID) -> Teacher:
    teacher = db.get(Teacher, teacher_id)
    if not teacher:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Teacher not found"
        )
    return teacher
