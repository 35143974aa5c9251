# speakup/models/user.py - User accounts, roles and learner profile
from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, Boolean, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from speakup.models.base import Base
import enum


class UserRole(str, enum.Enum):
    """System-wide user roles"""
    ADMIN = "ADMIN"            # Full platform management
    SEMI_ADMIN = "SEMI_ADMIN"  # Courses, enrollments and purchase confirmation
    TEACHER = "TEACHER"        # Teaches assigned courses
    STUDENT = "STUDENT"        # Default role for every new account


STAFF_ROLES = [UserRole.ADMIN.value, UserRole.SEMI_ADMIN.value]


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Account
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255))
    password_hash: Mapped[Optional[str]] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=UserRole.STUDENT.value)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Learner profile; real_name + phone identify a student for enrollment matching
    real_name: Mapped[Optional[str]] = mapped_column(String(100))
    phone: Mapped[Optional[str]] = mapped_column(String(20), index=True)
    class_nickname: Mapped[Optional[str]] = mapped_column(String(100))
    message: Mapped[Optional[str]] = mapped_column(Text)

    is_apply_for_teacher: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    zoom_invite_url: Mapped[Optional[str]] = mapped_column(String(500))

    image: Mapped[Optional[str]] = mapped_column(String(500))
    custom_image_url: Mapped[Optional[str]] = mapped_column(String(500))
    is_image_public_open: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    teacher: Mapped[Optional["Teacher"]] = relationship("Teacher", back_populates="user", uselist=False)

    def has_role(self, role: str) -> bool:
        """Check if user has a specific role"""
        return self.role == role

    def has_any_role(self, roles: list[str]) -> bool:
        """Check if user has any of the specified roles"""
        return self.role in roles

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_profile_complete(self) -> bool:
        return bool(self.real_name and self.phone)

    @property
    def plain_phone(self) -> Optional[str]:
        """Phone without hyphens, the form enrollments are stored with"""
        return self.phone.replace("-", "") if self.phone else None

    @property
    def display_name(self) -> str:
        return self.class_nickname or self.real_name or self.name or "익명"

    @property
    def public_image(self) -> Optional[str]:
        """Profile image, only when the user has made it public"""
        if not self.is_image_public_open:
            return None
        return self.custom_image_url or self.image

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
