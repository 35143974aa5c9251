# speakup/api/routers/attendance.py - Student check-in and attendance reporting
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func
from typing import Dict, Any, List
from uuid import UUID
from datetime import date
import logging

from speakup.core.db import get_db
from speakup.api.deps.auth import get_current_user, require_roles
from speakup.api.deps.lookups import get_course_or_404
from speakup.models.attendance import Attendance
from speakup.models.course import ClassDate
from speakup.models.enrollment import Enrollment, EnrollmentStatus
from speakup.models.teacher import Teacher
from speakup.models.user import User, UserRole, STAFF_ROLES
from speakup.schemas.attendance import AttendanceCheckIn, AttendanceOut, AttendanceDashboard, RosterStudent, CourseRoster
from speakup.schemas.course import ClassDateOut

logger = logging.getLogger(__name__)
router = APIRouter()


def _attendance_out(attendance: Attendance) -> AttendanceOut:
    return AttendanceOut(
        id=attendance.id,
        class_date_id=attendance.class_date_id,
        course_id=attendance.course_id,
        is_attended=attendance.is_attended,
        date=attendance.class_date.date if attendance.class_date else None,
    )


@router.post("/", response_model=AttendanceOut)
async def check_in(
    data: AttendanceCheckIn,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark the caller present for a class date; repeated check-ins are no-ops"""
    user: User = ctx["user"]

    class_date = db.execute(
        select(ClassDate).where(
            ClassDate.id == data.class_date_id,
            ClassDate.course_id == data.course_id,
        )
    ).scalar_one_or_none()

    if not class_date:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Class date not found"
        )

    attendance = db.execute(
        select(Attendance).where(
            Attendance.class_date_id == class_date.id,
            Attendance.user_id == user.id,
        )
    ).scalar_one_or_none()

    if attendance:
        attendance.is_attended = True
    else:
        attendance = Attendance(
            class_date_id=class_date.id,
            course_id=class_date.course_id,
            user_id=user.id,
            is_attended=True,
        )
        db.add(attendance)

    try:
        db.commit()
        db.refresh(attendance)
        logger.info(f"Attendance recorded: {user.email} on {class_date.date}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error recording attendance for {user.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error recording attendance"
        )

    return _attendance_out(attendance)


@router.get("/me", response_model=List[AttendanceOut])
async def my_attendance(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    rows = db.execute(
        select(Attendance)
        .join(ClassDate, ClassDate.id == Attendance.class_date_id)
        .where(
            Attendance.course_id == course_id,
            Attendance.user_id == ctx["user"].id,
        )
        .options(selectinload(Attendance.class_date))
        .order_by(ClassDate.date)
    ).scalars().all()
    return [_attendance_out(a) for a in rows]


@router.get("/dashboard", response_model=AttendanceDashboard)
async def attendance_dashboard(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Class dates held so far and how many of them the caller attended"""
    today = date.today()

    total = db.execute(
        select(func.count(ClassDate.id)).where(
            ClassDate.course_id == course_id,
            ClassDate.date <= today,
        )
    ).scalar() or 0

    attended = db.execute(
        select(func.count(Attendance.id))
        .join(ClassDate, ClassDate.id == Attendance.class_date_id)
        .where(
            Attendance.course_id == course_id,
            Attendance.user_id == ctx["user"].id,
            Attendance.is_attended.is_(True),
            ClassDate.date <= today,
        )
    ).scalar() or 0

    return AttendanceDashboard(total_class_dates=total, attended_class_dates=attended)


@router.get("/courses/{course_id}", response_model=CourseRoster)
async def course_attendance(
    course_id: UUID,
    ctx: Dict[str, Any] = Depends(require_roles(STAFF_ROLES + [UserRole.TEACHER.value])),
    db: Session = Depends(get_db)
):
    """Attendance grid of a course: class dates by active students"""
    user: User = ctx["user"]
    course = get_course_or_404(db, course_id)

    if not user.has_any_role(STAFF_ROLES):
        teacher = db.execute(
            select(Teacher).where(Teacher.user_id == user.id)
        ).scalar_one_or_none()
        if not teacher or course.teacher_id != teacher.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="담당 강좌가 아닙니다."
            )

    enrollments = db.execute(
        select(Enrollment)
        .where(
            Enrollment.course_id == course.id,
            Enrollment.status == EnrollmentStatus.ACTIVE.value,
            Enrollment.student_id.is_not(None),
        )
        .options(selectinload(Enrollment.student))
        .order_by(Enrollment.student_name)
    ).scalars().all()

    attended = {
        (user_id, class_date_id)
        for user_id, class_date_id in db.execute(
            select(Attendance.user_id, Attendance.class_date_id).where(
                Attendance.course_id == course.id,
                Attendance.is_attended.is_(True),
            )
        ).all()
    }

    students = []
    for enrollment in enrollments:
        students.append(RosterStudent(
            student_id=enrollment.student_id,
            student_name=enrollment.student_name,
            display_name=enrollment.student.display_name if enrollment.student else enrollment.student_name,
            attendance={
                str(cd.id): (enrollment.student_id, cd.id) in attended
                for cd in course.class_dates
            },
        ))

    return CourseRoster(
        class_dates=[ClassDateOut.model_validate(cd) for cd in course.class_dates],
        students=students,
    )
