# speakup/schemas/purchase.py - Purchase request and payment schemas
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
import uuid


class WaitForPurchaseCreate(BaseModel):
    course_id: uuid.UUID
    course_title: str = Field(..., min_length=1, max_length=255)
    start_date: date
    class_count: int = Field(..., ge=1)
    total_fee: int = Field(..., ge=0)


class WaitForPurchaseOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    course_id: uuid.UUID
    course_title: str
    user_name: Optional[str] = None
    user_phone: Optional[str] = None
    start_date: date
    class_count: int
    total_fee: int
    status: str
    expires_at: datetime
    created_at: datetime

    class Config:
        from_attributes = True


class FreeEnrollmentIn(BaseModel):
    course_id: uuid.UUID


class PaymentNotification(BaseModel):
    """Payment result forwarded after the provider has verified it"""
    payment_id: str = Field(..., min_length=1, max_length=100)
    status: str
    amount: int = Field(..., ge=0)
    order_name: str = Field(..., min_length=1, max_length=255)
    wait_for_purchase_id: uuid.UUID


class PaymentResult(BaseModel):
    recorded: bool
    duplicate: bool = False
    purchase_id: Optional[str] = None
    status: Optional[str] = None


class ProfileCompleteOut(BaseModel):
    is_profile_complete: bool


class ExistsOut(BaseModel):
    exists: bool
