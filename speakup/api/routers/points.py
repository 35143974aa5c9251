# speakup/api/routers/points.py - Course points, ranking and team totals
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import Dict, Any, List
from uuid import UUID
import logging

from speakup.core.db import get_db
from speakup.api.deps.auth import get_current_user
from speakup.models.enrollment import Enrollment, EnrollmentStatus
from speakup.models.site import UserCoursePoints
from speakup.models.user import User
from speakup.schemas.points import PointsOut, RankOut, RankingEntry, TeamPoints, PointsDetail, RecalculateIn
from speakup.services.points_service import PointsService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=PointsOut)
async def get_points(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Stored points; zero until the first recalculation"""
    row = db.execute(
        select(UserCoursePoints).where(
            UserCoursePoints.user_id == ctx["user"].id,
            UserCoursePoints.course_id == course_id,
        )
    ).scalar_one_or_none()
    return PointsOut(points=row.points if row else 0)


@router.post("/recalculate", response_model=PointsOut)
async def recalculate_points(
    data: RecalculateIn,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]

    try:
        row = PointsService(db).recalculate(user.id, data.course_id)
    except Exception as e:
        db.rollback()
        logger.error(f"Error recalculating points for {user.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error recalculating points"
        )

    return PointsOut(points=row.points)


@router.get("/detail", response_model=PointsDetail)
async def points_detail(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]

    enrollment = db.execute(
        select(Enrollment).where(
            Enrollment.course_id == course_id,
            Enrollment.student_id == user.id,
            Enrollment.status == EnrollmentStatus.ACTIVE.value,
        )
    ).scalar_one_or_none()

    if not enrollment:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="수강 중인 강좌가 아닙니다."
        )

    return PointsService(db).points_detail(user.id, course_id)


@router.get("/rank", response_model=RankOut)
async def my_rank(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return PointsService(db).user_rank(ctx["user"].id, course_id)


@router.get("/ranking", response_model=List[RankingEntry])
async def course_ranking(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return PointsService(db).ranking(course_id)


@router.get("/team", response_model=TeamPoints)
async def team_points(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return PointsService(db).team_points(course_id)
