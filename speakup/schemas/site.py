# speakup/schemas/site.py - Site configuration and inquiry schemas
import uuid
from datetime import datetime
from pydantic import BaseModel, EmailStr
from typing import List, Optional


class ConfigurationIn(BaseModel):
    """Required values are checked by the handler so blanks answer 400"""
    site_name: Optional[str] = None
    admin_email: Optional[EmailStr] = None
    admin_id: Optional[str] = None


class ConfigurationOut(BaseModel):
    site_name: str
    admin_email: str
    admin_id: str

    class Config:
        from_attributes = True


class PerthQuestionIn(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class PerthQuestionOut(BaseModel):
    id: uuid.UUID
    name: str
    phone: str
    email: Optional[str] = None
    message: str
    created_at: datetime

    class Config:
        from_attributes = True


class PerthQuestionCreated(BaseModel):
    message: str
    data: PerthQuestionOut


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PerthQuestionPage(BaseModel):
    data: List[PerthQuestionOut]
    pagination: Pagination
