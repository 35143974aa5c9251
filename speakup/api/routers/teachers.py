# speakup/api/routers/teachers.py - Teacher applications, management, schedules and conflicts
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func
from typing import Dict, Any, List
from uuid import UUID
import logging

from speakup.core.db import get_db
from speakup.api.deps.auth import require_admin, require_staff, require_teacher
from speakup.api.deps.lookups import get_course_or_404, get_teacher_or_404
from speakup.models.attendance import TeacherAttendance
from speakup.models.course import Course, ClassDate
from speakup.models.enrollment import Enrollment, EnrollmentStatus
from speakup.models.teacher import Teacher
from speakup.models.user import User, UserRole
from speakup.schemas.course import ClassDateOut, CourseDetail
from speakup.schemas.enrollment import EnrollmentOut
from speakup.schemas.teacher import (
    TeacherApplicant,
    TeacherOut,
    TeacherUpdate,
    ScheduleConflictCheck,
    ConflictsCheck,
    AvailabilityCheck,
    TeacherAttendanceToggle,
    TeacherStats,
)
from speakup.services.course_service import course_status, course_detail
from speakup.services.schedule_service import ScheduleService

logger = logging.getLogger(__name__)
router = APIRouter()


def _teacher_out(teacher: Teacher) -> TeacherOut:
    return TeacherOut(
        id=teacher.id,
        user_id=teacher.user_id,
        is_active=teacher.is_active,
        nation=teacher.nation,
        subject=teacher.subject,
        nick_name=teacher.nick_name,
        zoom_invite_link_url=teacher.zoom_invite_link_url,
        name=teacher.user.real_name or teacher.user.name,
        email=teacher.user.email,
        phone=teacher.user.phone,
        created_at=teacher.created_at,
    )


def _own_teacher(db: Session, user: User) -> Teacher:
    teacher = db.execute(
        select(Teacher).where(Teacher.user_id == user.id)
    ).scalar_one_or_none()
    if not teacher:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="강사 계정이 아닙니다."
        )
    return teacher


def _commit(db: Session, action: str):
    try:
        db.commit()
        logger.info(action)
    except Exception as e:
        db.rollback()
        logger.error(f"Error: {action}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating teacher"
        )


# ---- Teacher self-service ----

@router.get("/me/courses")
async def my_teaching_courses(
    ctx: Dict[str, Any] = Depends(require_teacher),
    db: Session = Depends(get_db)
):
    """Courses taught by the caller with active student counts"""
    teacher = _own_teacher(db, ctx["user"])

    rows = db.execute(
        select(Course, func.count(Enrollment.id))
        .outerjoin(Enrollment, (Enrollment.course_id == Course.id) & (Enrollment.status == EnrollmentStatus.ACTIVE.value))
        .where(Course.teacher_id == teacher.id)
        .group_by(Course.id)
        .order_by(Course.start_date)
    ).all()

    return [
        {
            "id": str(course.id),
            "title": course.title,
            "start_date": course.start_date,
            "end_date": course.end_date,
            "start_time": course.start_time,
            "end_time": course.end_time,
            "status": course_status(course.start_date, course.end_date),
            "student_count": student_count,
        }
        for course, student_count in rows
    ]


@router.get("/me/courses/{course_id}")
async def my_teaching_course(
    course_id: UUID,
    ctx: Dict[str, Any] = Depends(require_teacher),
    db: Session = Depends(get_db)
):
    teacher = _own_teacher(db, ctx["user"])
    course = get_course_or_404(db, course_id)
    if course.teacher_id != teacher.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="담당 강좌가 아닙니다."
        )

    students = db.execute(
        select(Enrollment)
        .where(Enrollment.course_id == course.id, Enrollment.status == EnrollmentStatus.ACTIVE.value)
        .order_by(Enrollment.student_name)
    ).scalars().all()

    return {
        "course": course_detail(course),
        "students": [EnrollmentOut.model_validate(e, from_attributes=True) for e in students],
    }


@router.get("/me/class-dates", response_model=List[ClassDateOut])
async def my_class_dates(
    ctx: Dict[str, Any] = Depends(require_teacher),
    db: Session = Depends(get_db)
):
    teacher = _own_teacher(db, ctx["user"])
    return db.execute(
        select(ClassDate)
        .join(Course, ClassDate.course_id == Course.id)
        .where(Course.teacher_id == teacher.id)
        .order_by(ClassDate.date, ClassDate.start_time)
    ).scalars().all()


@router.get("/me/stats", response_model=TeacherStats)
async def my_stats(
    ctx: Dict[str, Any] = Depends(require_teacher),
    db: Session = Depends(get_db)
):
    teacher = _own_teacher(db, ctx["user"])

    course_count = db.execute(
        select(func.count(Course.id)).where(Course.teacher_id == teacher.id)
    ).scalar() or 0

    student_count = db.execute(
        select(func.count(func.distinct(Enrollment.student_id)))
        .join(Course, Enrollment.course_id == Course.id)
        .where(
            Course.teacher_id == teacher.id,
            Enrollment.status == EnrollmentStatus.ACTIVE.value,
            Enrollment.student_id.is_not(None),
        )
    ).scalar() or 0

    return TeacherStats(course_count=course_count, student_count=student_count)


# ---- Applications ----

@router.get("/applications", response_model=List[TeacherApplicant])
async def list_applications(
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return db.execute(
        select(User)
        .where(User.is_apply_for_teacher.is_(True))
        .order_by(User.created_at.desc())
    ).scalars().all()


@router.post("/applications/{user_id}/approve", response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
async def approve_application(
    user_id: UUID,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Promote an applicant to teacher; the new Teacher row starts inactive"""
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    if not user.is_apply_for_teacher:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="강사 신청을 하지 않은 사용자입니다."
        )
    if user.teacher:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="이미 강사로 등록된 사용자입니다."
        )

    teacher = Teacher(user_id=user.id, is_active=False, nick_name=user.class_nickname)
    user.role = UserRole.TEACHER.value
    user.is_apply_for_teacher = False
    db.add(teacher)
    _commit(db, f"Teacher application approved for {user.email} by {ctx['user'].email}")

    db.refresh(teacher)
    return _teacher_out(teacher)


@router.post("/applications/{user_id}/reject", response_model=TeacherApplicant)
async def reject_application(
    user_id: UUID,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    user.is_apply_for_teacher = False
    _commit(db, f"Teacher application rejected for {user.email}")
    db.refresh(user)
    return user


# ---- Management ----

@router.get("/", response_model=List[TeacherOut])
async def list_teachers(
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    teachers = db.execute(
        select(Teacher).options(selectinload(Teacher.user)).order_by(Teacher.created_at.desc())
    ).scalars().all()
    return [_teacher_out(t) for t in teachers]


@router.get("/active", response_model=List[TeacherOut])
async def list_active_teachers(
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    teachers = db.execute(
        select(Teacher)
        .where(Teacher.is_active.is_(True))
        .options(selectinload(Teacher.user))
        .order_by(Teacher.created_at)
    ).scalars().all()
    return [_teacher_out(t) for t in teachers]


@router.post("/availability")
async def teacher_availability(
    data: AvailabilityCheck,
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Active teachers annotated with whether the proposed slots fit their schedule"""
    slots = [slot.model_dump() for slot in data.class_dates]
    return ScheduleService(db).teacher_availability(slots, data.current_teacher_id)


@router.post("/schedule-conflict")
async def check_schedule_conflict(
    data: ScheduleConflictCheck,
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    if not (data.teacher_id and data.date and data.start_time and data.end_time):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="teacher_id, date, start_time and end_time are required"
        )

    return ScheduleService(db).check_teacher_schedule_conflict(
        teacher_id=data.teacher_id,
        class_date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        exclude_course_id=data.course_id,
    )


@router.post("/conflicts")
async def check_all_teacher_conflicts(
    data: ConflictsCheck,
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    conflicts = ScheduleService(db).find_teacher_conflicts(
        class_dates=data.class_dates,
        start_time=data.start_time,
        end_time=data.end_time,
        current_course_id=data.current_course_id,
    )
    return {"conflicts": conflicts}


@router.patch("/{teacher_id}/status", response_model=TeacherOut)
async def toggle_teacher_status(
    teacher_id: UUID,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    teacher = get_teacher_or_404(db, teacher_id)
    teacher.is_active = not teacher.is_active
    _commit(db, f"Teacher {teacher.id} active={teacher.is_active}")
    db.refresh(teacher)
    return _teacher_out(teacher)


@router.put("/{teacher_id}", response_model=TeacherOut)
async def update_teacher(
    teacher_id: UUID,
    data: TeacherUpdate,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    teacher = get_teacher_or_404(db, teacher_id)

    if data.nation is not None:
        teacher.nation = data.nation
    if data.subject is not None:
        teacher.subject = data.subject
    if data.nick_name is not None:
        teacher.nick_name = data.nick_name or None
    if data.phone is not None:
        teacher.user.phone = data.phone or None

    _commit(db, f"Teacher {teacher.id} updated by {ctx['user'].email}")
    db.refresh(teacher)
    return _teacher_out(teacher)


@router.delete("/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_teacher(
    teacher_id: UUID,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Remove the teacher profile and return the user to the student role"""
    teacher = get_teacher_or_404(db, teacher_id)
    teacher.user.role = UserRole.STUDENT.value
    db.delete(teacher)
    _commit(db, f"Teacher {teacher_id} deleted by {ctx['user'].email}")


@router.get("/{teacher_id}/schedule", response_model=List[CourseDetail])
async def teacher_schedule(
    teacher_id: UUID,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    get_teacher_or_404(db, teacher_id)
    courses = db.execute(
        select(Course)
        .where(Course.teacher_id == teacher_id)
        .options(selectinload(Course.class_dates))
        .order_by(Course.start_date)
    ).scalars().all()
    return [course_detail(c) for c in courses]


@router.get("/{teacher_id}/attendance")
async def teacher_attendance(
    teacher_id: UUID,
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    get_teacher_or_404(db, teacher_id)
    course = get_course_or_404(db, course_id)

    attendance = db.execute(
        select(TeacherAttendance).where(
            TeacherAttendance.teacher_id == teacher_id,
            TeacherAttendance.course_id == course.id,
        )
    ).scalars().all()

    return {
        "class_dates": [ClassDateOut.model_validate(cd, from_attributes=True) for cd in course.class_dates],
        "attendance_data": [
            {"id": str(a.id), "class_date": a.class_date.isoformat(), "course_id": str(a.course_id)}
            for a in attendance
        ],
    }


@router.post("/{teacher_id}/attendance")
async def toggle_teacher_attendance(
    teacher_id: UUID,
    data: TeacherAttendanceToggle,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    get_teacher_or_404(db, teacher_id)
    get_course_or_404(db, data.course_id)

    existing = db.execute(
        select(TeacherAttendance).where(
            TeacherAttendance.teacher_id == teacher_id,
            TeacherAttendance.course_id == data.course_id,
            TeacherAttendance.class_date == data.class_date,
        )
    ).scalar_one_or_none()

    if existing:
        db.delete(existing)
        attended = False
    else:
        db.add(TeacherAttendance(teacher_id=teacher_id, course_id=data.course_id, class_date=data.class_date))
        attended = True

    _commit(db, f"Teacher {teacher_id} attendance on {data.class_date}: {attended}")
    return {"attended": attended}
