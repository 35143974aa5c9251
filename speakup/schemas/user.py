# speakup/schemas/user.py - Profile schemas
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid


class UserOut(BaseModel):
    """Profile as the owner sees it"""
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    role: str
    real_name: Optional[str] = None
    phone: Optional[str] = None
    class_nickname: Optional[str] = None
    message: Optional[str] = None
    is_apply_for_teacher: bool
    zoom_invite_url: Optional[str] = None
    image: Optional[str] = None
    custom_image_url: Optional[str] = None
    is_image_public_open: bool
    is_profile_complete: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """real_name and phone are checked in the handler so missing values give 400"""
    real_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    class_nickname: Optional[str] = Field(None, max_length=100)
    message: Optional[str] = None
    is_apply_for_teacher: Optional[bool] = None
    zoom_invite_url: Optional[str] = Field(None, max_length=500)


class ImagePublicOut(BaseModel):
    is_image_public_open: bool


class SelectedCourseIn(BaseModel):
    selected_course_id: Optional[uuid.UUID] = None
    selected_course_contents: Optional[str] = None
    selected_course_title: Optional[str] = None


class SelectedCourseOut(SelectedCourseIn):
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
