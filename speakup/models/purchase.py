# speakup/models/purchase.py - Bank-transfer purchase requests and completed payments
from __future__ import annotations
import uuid
from datetime import date, datetime
from typing import Optional
from sqlalchemy import String, Integer, Date, DateTime, ForeignKey, CheckConstraint, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from speakup.models.base import Base
import enum


class PurchaseStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    EXPIRED = "expired"


class WaitForPurchase(Base):
    """A purchase awaiting transfer confirmation by staff"""
    __tablename__ = "wait_for_purchases"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    course_title: Mapped[str] = mapped_column(String(255), nullable=False)

    user_name: Mapped[Optional[str]] = mapped_column(String(100))
    user_phone: Mapped[Optional[str]] = mapped_column(String(20))

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    class_count: Mapped[int] = mapped_column(Integer, nullable=False)
    total_fee: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=PurchaseStatus.PENDING.value)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user: Mapped["User"] = relationship("User")

    __table_args__ = (
        CheckConstraint("status IN ('pending','paid','expired')", name="status"),
        CheckConstraint("total_fee >= 0", name="total_fee_positive"),
        Index("ix_wait_for_purchases_status_expires", "status", "expires_at"),
    )


class Purchase(Base):
    """Payment confirmed by the payment provider"""
    __tablename__ = "purchases"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    payment_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("courses.id", ondelete="SET NULL"))
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    order_name: Mapped[str] = mapped_column(String(255), nullable=False)

    paid_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="amount_positive"),
    )
