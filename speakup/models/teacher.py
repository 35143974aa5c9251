# speakup/models/teacher.py - Teacher profile attached to an approved user
from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, Boolean, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from speakup.models.base import Base
import enum


class TeacherNation(str, enum.Enum):
    KR = "KR"
    PH = "PH"


class TeacherSubject(str, enum.Enum):
    EN = "en"
    JA = "ja"
    KO = "ko"
    ZH = "zh"


class Teacher(Base):
    """
    Created when an admin approves a user's teacher application.
    New teachers start inactive and are switched on by an admin.
    """
    __tablename__ = "teachers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    nation: Mapped[str] = mapped_column(String(2), nullable=False, default=TeacherNation.KR.value)
    subject: Mapped[str] = mapped_column(String(2), nullable=False, default=TeacherSubject.EN.value)
    nick_name: Mapped[Optional[str]] = mapped_column(String(100))
    zoom_invite_link_url: Mapped[Optional[str]] = mapped_column(String(500))

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user: Mapped["User"] = relationship("User", back_populates="teacher")
    courses: Mapped[list["Course"]] = relationship("Course", back_populates="teacher")

    __table_args__ = (
        CheckConstraint("nation IN ('KR','PH')", name="nation"),
        CheckConstraint("subject IN ('en','ja','ko','zh')", name="subject"),
    )
