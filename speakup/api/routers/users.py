# speakup/api/routers/users.py - Own profile, teacher application and selected course
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import select, or_, and_
from typing import Dict, Any, List
import logging
import re

from speakup.core.db import get_db
from speakup.api.deps.auth import get_current_user
from speakup.api.deps.lookups import get_course_or_404
from speakup.models.course import Course
from speakup.models.enrollment import Enrollment
from speakup.models.site import SelectedCourse
from speakup.models.teacher import Teacher
from speakup.models.user import User, UserRole, STAFF_ROLES
from speakup.schemas.course import CourseOut
from speakup.schemas.user import UserOut, ProfileUpdate, ImagePublicOut, SelectedCourseIn, SelectedCourseOut

logger = logging.getLogger(__name__)
router = APIRouter()

PROFILE_PHONE_PATTERN = re.compile(r"^\d{3}-\d{3,4}-\d{4}$")


def _commit(db: Session, user: User, action: str):
    try:
        db.commit()
        db.refresh(user)
        logger.info(f"{action} for {user.email}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error during {action.lower()} for {user.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error during {action.lower()}"
        )


@router.get("/me", response_model=UserOut)
async def get_me(ctx: Dict[str, Any] = Depends(get_current_user)):
    return ctx["user"]


@router.put("/me", response_model=UserOut)
async def update_me(
    data: ProfileUpdate,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the learner profile used for enrollment matching"""
    user: User = ctx["user"]

    real_name = (data.real_name or "").strip()
    phone = (data.phone or "").strip()
    if not real_name or not phone:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="실명과 전화번호는 필수입니다."
        )

    if not PROFILE_PHONE_PATTERN.match(phone):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="전화번호 형식이 올바르지 않습니다. (예: 010-1234-5678)"
        )

    if data.zoom_invite_url:
        if not user.has_role(UserRole.TEACHER.value):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Zoom 초대 링크는 강사만 설정할 수 있습니다."
            )
        if not data.zoom_invite_url.startswith("https://"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Zoom 초대 링크는 https:// 로 시작해야 합니다."
            )

    duplicate = db.execute(
        select(User).where(User.phone == phone, User.id != user.id)
    ).scalars().first()
    if duplicate:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="이미 사용 중인 전화번호입니다."
        )

    user.real_name = real_name
    user.phone = phone
    if data.class_nickname is not None:
        user.class_nickname = data.class_nickname.strip() or None
    if data.message is not None:
        user.message = data.message
    if data.is_apply_for_teacher is not None:
        user.is_apply_for_teacher = data.is_apply_for_teacher
    if data.zoom_invite_url is not None:
        user.zoom_invite_url = data.zoom_invite_url or None

    _commit(db, user, "Profile updated")
    return user


@router.post("/me/toggle-image-public", response_model=ImagePublicOut)
async def toggle_image_public(
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    user.is_image_public_open = not user.is_image_public_open
    _commit(db, user, "Image visibility toggled")
    return ImagePublicOut(is_image_public_open=user.is_image_public_open)


@router.post("/me/reset-image", response_model=UserOut)
async def reset_image(
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Drop the custom image and fall back to the account image"""
    user: User = ctx["user"]
    user.custom_image_url = None
    _commit(db, user, "Custom image reset")
    return user


@router.post("/me/cancel-teacher-application", response_model=UserOut)
async def cancel_teacher_application(
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    if not user.is_apply_for_teacher:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="강사 신청 내역이 없습니다."
        )

    user.is_apply_for_teacher = False
    _commit(db, user, "Teacher application cancelled")
    return user


@router.get("/me/courses", response_model=List[CourseOut])
async def my_courses(
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Courses relevant to the caller's role"""
    user: User = ctx["user"]

    if user.has_role(UserRole.STUDENT.value):
        conditions = [Enrollment.student_id == user.id]
        if user.is_profile_complete:
            conditions.append(and_(
                Enrollment.student_name == user.real_name,
                Enrollment.student_phone == user.plain_phone,
            ))
        query = (
            select(Course)
            .join(Enrollment, Enrollment.course_id == Course.id)
            .where(or_(*conditions))
            .distinct()
        )
    elif user.has_role(UserRole.TEACHER.value):
        teacher = db.execute(
            select(Teacher).where(Teacher.user_id == user.id)
        ).scalar_one_or_none()
        if not teacher:
            return []
        query = select(Course).where(Course.teacher_id == teacher.id)
    elif user.has_any_role(STAFF_ROLES):
        query = select(Course).where(Course.generator_id == user.id)
    else:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unknown role"
        )

    courses = db.execute(query).scalars().all()
    return sorted(courses, key=lambda c: c.created_at, reverse=True)


@router.get("/me/selected", response_model=SelectedCourseOut)
async def get_selected_course(
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    selected = db.execute(
        select(SelectedCourse).where(SelectedCourse.user_id == ctx["user"].id)
    ).scalar_one_or_none()
    if not selected:
        return SelectedCourseOut()
    return selected


@router.put("/me/selected", response_model=SelectedCourseOut)
async def save_selected_course(
    data: SelectedCourseIn,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    if data.selected_course_id:
        get_course_or_404(db, data.selected_course_id)

    selected = db.execute(
        select(SelectedCourse).where(SelectedCourse.user_id == user.id)
    ).scalar_one_or_none()

    if not selected:
        selected = SelectedCourse(user_id=user.id)
        db.add(selected)

    selected.selected_course_id = data.selected_course_id
    selected.selected_course_contents = data.selected_course_contents
    selected.selected_course_title = data.selected_course_title

    try:
        db.commit()
        db.refresh(selected)
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving selected course for {user.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error saving selected course"
        )
    return selected


@router.post("/me/selected/reset")
async def reset_selected_course(
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Clear the selected course; a user who never picked one has nothing to clear"""
    user: User = ctx["user"]
    selected = db.execute(
        select(SelectedCourse).where(SelectedCourse.user_id == user.id)
    ).scalar_one_or_none()

    if selected:
        selected.selected_course_id = None
        selected.selected_course_contents = None
        selected.selected_course_title = None
        _commit(db, user, "Selected course reset")

    return {"success": True}
