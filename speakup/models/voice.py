# speakup/models/voice.py - Published student recordings, likes and listens
from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from speakup.models.base import Base


class MyVoiceOpenList(Base):
    """A recording a student has opened to classmates"""
    __tablename__ = "my_voice_open_list"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    sentence_no: Mapped[int] = mapped_column(Integer, nullable=False)
    sentence_en: Mapped[Optional[str]] = mapped_column(Text)
    my_voice_url: Mapped[str] = mapped_column(String(500), nullable=False)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user: Mapped["User"] = relationship("User")
    likes: Mapped[list["VoiceLike"]] = relationship("VoiceLike", back_populates="voice", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", "sentence_no", name="uq_open_voice_sentence"),
    )


class VoiceLike(Base):
    __tablename__ = "voice_likes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    voice_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("my_voice_open_list.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    voice: Mapped["MyVoiceOpenList"] = relationship("MyVoiceOpenList", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("user_id", "voice_id", name="uq_voice_like"),
    )


class VoiceListened(Base):
    """First listen sets created_at; later listens only move updated_at"""
    __tablename__ = "voice_listened"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    voice_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("my_voice_open_list.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "voice_id", name="uq_voice_listened"),
    )
