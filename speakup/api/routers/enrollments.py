# speakup/api/routers/enrollments.py - Enrollment registration, bulk import and claiming
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from typing import Dict, Any, List
from uuid import UUID
import logging

from speakup.core.db import get_db
from speakup.api.deps.auth import get_current_user, require_staff
from speakup.api.deps.lookups import get_course_or_404
from speakup.models.enrollment import Enrollment, EnrollmentStatus
from speakup.models.user import User
from speakup.schemas.enrollment import (
    EnrollmentCreate, EnrollmentOut, BulkEnrollmentIn, BulkEnrollmentOut, MyEnrollments, CountOut
)
from speakup.services.enrollment_service import EnrollmentService, EnrollmentError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EnrollmentOut, status_code=status.HTTP_201_CREATED)
async def create_enrollment(
    enrollment_data: EnrollmentCreate,
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Register a student by name and phone; the student claims it later"""
    user = ctx["user"]
    course = get_course_or_404(db, enrollment_data.course_id)

    existing = db.execute(
        select(Enrollment).where(
            Enrollment.course_id == course.id,
            Enrollment.student_name == enrollment_data.student_name,
            Enrollment.student_phone == enrollment_data.student_phone,
        )
    ).scalar_one_or_none()

    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="이미 등록된 학생입니다."
        )

    new_enrollment = Enrollment(
        course_id=course.id,
        course_title=course.title,
        student_name=enrollment_data.student_name,
        student_phone=enrollment_data.student_phone,
        status=EnrollmentStatus.PENDING.value,
        center_name=enrollment_data.center_name,
        local_name=enrollment_data.local_name,
        description=enrollment_data.description,
    )

    try:
        db.add(new_enrollment)
        db.commit()
        db.refresh(new_enrollment)
        logger.info(f"Enrollment created: {new_enrollment.student_name} in {course.title} by {user.email}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating enrollment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating enrollment"
        )

    return new_enrollment


@router.post("/bulk", response_model=BulkEnrollmentOut)
async def bulk_create_enrollments(
    data: BulkEnrollmentIn,
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    course = get_course_or_404(db, data.course_id)

    try:
        result = EnrollmentService(db).bulk_create(course, [s.model_dump() for s in data.students])
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating enrollments"
        )

    return result


@router.get("/", response_model=List[EnrollmentOut])
async def list_enrollments(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    return db.execute(
        select(Enrollment)
        .where(Enrollment.course_id == course_id)
        .order_by(Enrollment.created_at.desc())
    ).scalars().all()


@router.get("/count", response_model=CountOut)
async def count_active_enrollments(
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    count = db.execute(
        select(func.count(Enrollment.id)).where(Enrollment.status == EnrollmentStatus.ACTIVE.value)
    ).scalar()
    return CountOut(count=count or 0)


@router.get("/mine", response_model=MyEnrollments)
async def my_enrollments(
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Enrollments the caller can claim, plus those already claimed"""
    user: User = ctx["user"]

    if not user.is_profile_complete:
        return MyEnrollments(
            enrollments=[],
            message="수강 정보를 확인하려면 실명과 전화번호를 등록해주세요."
        )

    enrollments = EnrollmentService(db).claimable_for_user(user)
    return MyEnrollments(enrollments=[EnrollmentOut.model_validate(e) for e in enrollments])


@router.post("/{enrollment_id}/activate", response_model=EnrollmentOut)
async def activate_enrollment(
    enrollment_id: UUID,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]

    enrollment = db.execute(
        select(Enrollment).where(Enrollment.id == enrollment_id)
    ).scalar_one_or_none()

    if not enrollment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enrollment not found"
        )

    try:
        return EnrollmentService(db).activate(enrollment, user)
    except EnrollmentError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error activating enrollment"
        )
