# speakup/models/course.py - Courses and their concrete class dates
from __future__ import annotations
import uuid
from datetime import date as date_type, datetime
from typing import Optional
from sqlalchemy import String, Text, Integer, Date, DateTime, Boolean, ForeignKey, CheckConstraint, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from speakup.models.base import Base
import enum


class CourseContents(str, enum.Enum):
    """Sentence corpus a course studies"""
    TOUR100 = "tour100"
    BASIC100 = "basic100"
    WH100 = "wh100"


class CourseLocation(str, enum.Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"


WEEKDAY_FIELDS = [
    "schedule_monday",
    "schedule_tuesday",
    "schedule_wednesday",
    "schedule_thursday",
    "schedule_friday",
    "schedule_saturday",
    "schedule_sunday",
]


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    contents: Mapped[str] = mapped_column(String(16), nullable=False, default=CourseContents.BASIC100.value)
    location: Mapped[str] = mapped_column(String(16), nullable=False, default=CourseLocation.ONLINE.value)

    generator_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), index=True)
    teacher_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("teachers.id", ondelete="SET NULL"), index=True)

    # Weekly recurrence flags
    schedule_monday: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    schedule_tuesday: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    schedule_wednesday: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    schedule_thursday: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    schedule_friday: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    schedule_saturday: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    schedule_sunday: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    start_date: Mapped[Optional[date_type]] = mapped_column(Date)
    end_date: Mapped[Optional[date_type]] = mapped_column(Date)
    start_time: Mapped[Optional[str]] = mapped_column(String(5))  # HH:MM
    end_time: Mapped[Optional[str]] = mapped_column(String(5))

    duration: Mapped[str] = mapped_column(String(16), nullable=False, default="25분")
    class_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    teacher: Mapped[Optional["Teacher"]] = relationship("Teacher", back_populates="courses")
    class_dates: Mapped[list["ClassDate"]] = relationship(
        "ClassDate",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="ClassDate.date",
    )
    enrollments: Mapped[list["Enrollment"]] = relationship(
        "Enrollment",
        back_populates="course",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("contents IN ('tour100','basic100','wh100')", name="contents"),
        CheckConstraint("location IN ('online','offline','hybrid')", name="location"),
        CheckConstraint("price >= 0", name="price_positive"),
    )

    @property
    def weekdays(self) -> list[int]:
        """Scheduled weekdays as date.weekday() numbers (Monday = 0)"""
        return [i for i, field in enumerate(WEEKDAY_FIELDS) if getattr(self, field)]


class ClassDate(Base):
    """One concrete session of a course"""
    __tablename__ = "class_dates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    day_of_week: Mapped[str] = mapped_column(String(3), nullable=False)
    start_time: Mapped[Optional[str]] = mapped_column(String(5))
    end_time: Mapped[Optional[str]] = mapped_column(String(5))

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    course: Mapped["Course"] = relationship("Course", back_populates="class_dates")
    attendances: Mapped[list["Attendance"]] = relationship(
        "Attendance",
        back_populates="class_date",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_class_dates_course_date", "course_id", "date"),
    )
