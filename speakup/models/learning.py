# speakup/models/learning.py - Sentence corpus and per-user learning progress
from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from speakup.models.base import Base


class Sentence(Base):
    """Numbered study sentence; day N covers numbers (N-1)*5+1 .. N*5"""
    __tablename__ = "sentences"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    no: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    en: Mapped[str] = mapped_column(Text, nullable=False)
    ko: Mapped[str] = mapped_column(Text, nullable=False)
    contents: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    audio_url: Mapped[Optional[str]] = mapped_column(String(500))
    utube_url: Mapped[Optional[str]] = mapped_column(String(500))


class UnitSubject(Base):
    __tablename__ = "unit_subjects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    unit_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    subject_ko: Mapped[str] = mapped_column(String(255), nullable=False)
    subject_en: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_utube_url: Mapped[Optional[str]] = mapped_column(String(500))
    contents: Mapped[Optional[str]] = mapped_column(String(16))


class CompletedSentence(Base):
    __tablename__ = "completed_sentences"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    sentence_no: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", "sentence_no", name="uq_completed_sentence"),
    )


class FavoriteSentence(Base):
    __tablename__ = "favorite_sentences"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    sentence_no: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", "sentence_no", name="uq_favorite_sentence"),
    )


class UserNextDay(Base):
    """Where a learner resumes in a course"""
    __tablename__ = "user_next_days"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"))
    user_next_day: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_user_next_days_user_course", "user_id", "course_id"),
    )
