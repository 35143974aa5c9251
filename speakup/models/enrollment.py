# speakup/models/enrollment.py - Student enrollment in a course
from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Text, ForeignKey, DateTime, CheckConstraint, UniqueConstraint, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from speakup.models.base import Base
import enum


class EnrollmentStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"


class Enrollment(Base):
    """
    Links a student to a course.

    Admins register students by name and phone before they have an account;
    such rows are pending with no student_id until the student claims them
    from "my courses" with a matching profile.
    """
    __tablename__ = "enrollments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    course_title: Mapped[str] = mapped_column(String(255), nullable=False)

    student_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), index=True)
    student_name: Mapped[str] = mapped_column(String(100), nullable=False)
    student_phone: Mapped[str] = mapped_column(String(20), nullable=False)  # digits only

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=EnrollmentStatus.PENDING.value)

    center_name: Mapped[Optional[str]] = mapped_column(String(100))
    local_name: Mapped[Optional[str]] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    course: Mapped["Course"] = relationship("Course", back_populates="enrollments")
    student: Mapped[Optional["User"]] = relationship("User")

    __table_args__ = (
        UniqueConstraint("course_id", "student_id", name="uq_enrollment_course_student"),
        Index("ix_enrollments_name_phone", "student_name", "student_phone"),
        CheckConstraint("status IN ('pending','active','completed','dropped')", name="status"),
    )
