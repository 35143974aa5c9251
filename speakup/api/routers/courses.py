# speakup/api/routers/courses.py - Course administration, class dates and class members
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select
from typing import Dict, Any, List
from uuid import UUID
import logging

from speakup.core.db import get_db
from speakup.api.deps.auth import get_current_user, require_staff
from speakup.api.deps.lookups import get_course_or_404, get_teacher_or_404
from speakup.models.course import Course, ClassDate
from speakup.models.enrollment import Enrollment, EnrollmentStatus
from speakup.models.teacher import Teacher
from speakup.schemas.course import CourseCreate, CourseUpdate, CourseDetail, ClassDateOut, ClassMember
from speakup.services.course_service import CourseService, course_detail

logger = logging.getLogger(__name__)
router = APIRouter()

COURSE_FIELDS = [
    "title", "description", "contents", "location", "teacher_id",
    "schedule_monday", "schedule_tuesday", "schedule_wednesday", "schedule_thursday",
    "schedule_friday", "schedule_saturday", "schedule_sunday",
    "start_date", "end_date", "start_time", "end_time",
    "duration", "class_count", "price",
]


@router.get("/", response_model=List[CourseDetail])
async def list_courses(
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """All courses, newest first, with status and schedule"""
    courses = db.execute(
        select(Course)
        .options(
            selectinload(Course.class_dates),
            selectinload(Course.teacher).selectinload(Teacher.user),
        )
        .order_by(Course.created_at.desc())
    ).scalars().all()
    return [course_detail(c) for c in courses]


@router.post("/", response_model=CourseDetail, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate,
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    user = ctx["user"]

    if course_data.teacher_id:
        get_teacher_or_404(db, course_data.teacher_id)

    course = Course(
        generator_id=user.id,
        **{field: getattr(course_data, field) for field in COURSE_FIELDS},
    )
    class_dates = [item.model_dump() for item in course_data.class_dates]
    course.class_dates = CourseService(db).build_class_dates(course, class_dates)

    try:
        db.add(course)
        db.commit()
        db.refresh(course)
        logger.info(f"Course created: {course.title} with {len(course.class_dates)} class dates by {user.email}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating course: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating course"
        )

    return course_detail(course)


@router.get("/{course_id}", response_model=CourseDetail)
async def get_course(
    course_id: UUID,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return course_detail(get_course_or_404(db, course_id))


@router.put("/{course_id}", response_model=CourseDetail)
async def update_course(
    course_id: UUID,
    course_data: CourseUpdate,
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Update a course; class dates with attendance are never removed"""
    course = get_course_or_404(db, course_id)

    if course_data.teacher_id:
        get_teacher_or_404(db, course_data.teacher_id)

    try:
        for field in COURSE_FIELDS:
            setattr(course, field, getattr(course_data, field))

        if course_data.class_dates is not None:
            CourseService(db).sync_class_dates(course, [item.model_dump() for item in course_data.class_dates])

        for enrollment in course.enrollments:
            enrollment.course_title = course.title

        db.commit()
        db.refresh(course)
        logger.info(f"Course updated: {course.title} by {ctx['user'].email}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating course {course_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating course"
        )

    return course_detail(course)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: UUID,
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    course = get_course_or_404(db, course_id)

    try:
        db.delete(course)
        db.commit()
        logger.info(f"Course deleted: {course_id} by {ctx['user'].email}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting course {course_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting course"
        )


@router.get("/{course_id}/class-dates", response_model=List[ClassDateOut])
async def list_class_dates(
    course_id: UUID,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    get_course_or_404(db, course_id)
    return db.execute(
        select(ClassDate)
        .where(ClassDate.course_id == course_id)
        .order_by(ClassDate.date)
    ).scalars().all()


@router.get("/{course_id}/members", response_model=List[ClassMember])
async def class_members(
    course_id: UUID,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Classmates of a course; images only for students who made them public"""
    get_course_or_404(db, course_id)

    enrollments = db.execute(
        select(Enrollment)
        .where(
            Enrollment.course_id == course_id,
            Enrollment.status.in_([EnrollmentStatus.PENDING.value, EnrollmentStatus.ACTIVE.value]),
        )
        .options(selectinload(Enrollment.student))
        .order_by(Enrollment.created_at)
    ).scalars().all()

    members = []
    for enrollment in enrollments:
        student = enrollment.student
        if student:
            display_name = student.class_nickname or student.real_name or student.name or enrollment.student_name or "익명"
            profile_image = student.public_image
        else:
            display_name = enrollment.student_name or "익명"
            profile_image = None

        members.append(ClassMember(
            enrollment_id=enrollment.id,
            student_id=enrollment.student_id,
            display_name=display_name,
            profile_image=profile_image,
            status=enrollment.status,
        ))

    return members
