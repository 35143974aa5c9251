# speakup/schemas/points.py - Points schemas
from pydantic import BaseModel
from typing import Dict
import uuid


class PointsOut(BaseModel):
    points: int


class RankOut(BaseModel):
    rank: int
    points: int
    total_students: int


class RankingEntry(BaseModel):
    rank: int
    user_id: str
    display_name: str
    points: int


class TeamPoints(BaseModel):
    total_team_points: int
    student_count: int


class PointsDetail(BaseModel):
    counts: Dict[str, int]
    points: Dict[str, int]
    rates: Dict[str, int]
    total_points: int


class RecalculateIn(BaseModel):
    course_id: uuid.UUID
