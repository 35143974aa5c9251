# speakup/services/enrollment_service.py - Enrollment creation, bulk import and claiming
from sqlalchemy.orm import Session
from sqlalchemy import select, or_, and_
from typing import Optional, Dict, Any, List
from uuid import UUID
import logging
import re

from speakup.models.course import Course
from speakup.models.enrollment import Enrollment, EnrollmentStatus
from speakup.models.user import User

logger = logging.getLogger(__name__)

BULK_PHONE_PATTERN = re.compile(r"^[0-9]{10,11}$")


def strip_phone(phone: Optional[str]) -> str:
    """Digits-only phone as stored on enrollments"""
    if not phone:
        return ""
    return phone.replace("-", "").replace(" ", "").strip()


class EnrollmentError(Exception):
    """Raised for enrollment rule violations; carries an HTTP-friendly status code"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class EnrollmentService:
    def __init__(self, db: Session):
        self.db = db

    def find_for_student(self, course_id: UUID, student_id: UUID) -> Optional[Enrollment]:
        return self.db.execute(
            select(Enrollment).where(
                Enrollment.course_id == course_id,
                Enrollment.student_id == student_id,
            )
        ).scalar_one_or_none()

    def create_active_enrollment(
        self,
        course: Course,
        user: User,
        fallback_name: Optional[str] = None,
        fallback_phone: Optional[str] = None,
    ) -> Enrollment:
        """Active enrollment for a known user; the caller commits"""
        enrollment = Enrollment(
            course_id=course.id,
            course_title=course.title,
            student_id=user.id,
            student_name=user.real_name or fallback_name or user.name or "",
            student_phone=strip_phone(user.phone or fallback_phone),
            status=EnrollmentStatus.ACTIVE.value,
        )
        self.db.add(enrollment)
        return enrollment

    def bulk_create(self, course: Course, students: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Register many students by name and phone.

        Invalid rows and phones already enrolled in the course are reported
        back instead of aborting the whole import.
        """
        successful: List[Dict[str, Any]] = []
        failed: List[Dict[str, Any]] = []

        existing_phones = set(self.db.execute(
            select(Enrollment.student_phone).where(Enrollment.course_id == course.id)
        ).scalars().all())

        for student in students:
            raw_name = (student.get("name") or "").strip()
            raw_phone = (student.get("phone") or "").strip()

            if not raw_name or not raw_phone:
                failed.append({"name": raw_name, "phone": raw_phone, "reason": "이름과 전화번호는 필수입니다."})
                continue

            name = raw_name.replace(" ", "")
            phone = strip_phone(raw_phone)

            if not BULK_PHONE_PATTERN.match(phone):
                failed.append({"name": raw_name, "phone": raw_phone, "reason": "유효하지 않은 전화번호 형식입니다."})
                continue

            if phone in existing_phones:
                failed.append({"name": raw_name, "phone": raw_phone, "reason": "이미 등록된 학생입니다."})
                continue

            enrollment = Enrollment(
                course_id=course.id,
                course_title=course.title,
                student_name=name,
                student_phone=phone,
                status=EnrollmentStatus.PENDING.value,
                center_name=student.get("center_name"),
                local_name=student.get("local_name"),
                description=student.get("description"),
            )
            self.db.add(enrollment)
            existing_phones.add(phone)
            successful.append({"name": name, "phone": phone})

        try:
            self.db.commit()
            logger.info(f"Bulk enrollment for course {course.id}: {len(successful)} ok, {len(failed)} failed")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error in bulk enrollment for course {course.id}: {e}")
            raise

        return {
            "success_count": len(successful),
            "failed_count": len(failed),
            "successful": successful,
            "failed": failed,
        }

    def claimable_for_user(self, user: User) -> List[Enrollment]:
        """Unclaimed pending rows matching the profile, plus the user's active rows"""
        return self.db.execute(
            select(Enrollment)
            .where(
                or_(
                    and_(
                        Enrollment.student_name == user.real_name,
                        Enrollment.student_phone == user.plain_phone,
                        Enrollment.status == EnrollmentStatus.PENDING.value,
                        Enrollment.student_id.is_(None),
                    ),
                    and_(
                        Enrollment.student_id == user.id,
                        Enrollment.status == EnrollmentStatus.ACTIVE.value,
                    ),
                )
            )
            .order_by(Enrollment.created_at.desc())
        ).scalars().all()

    def activate(self, enrollment: Enrollment, user: User) -> Enrollment:
        if enrollment.student_name != user.real_name or enrollment.student_phone != user.plain_phone:
            raise EnrollmentError("본인의 수강 정보만 활성화할 수 있습니다.", status_code=403)
        if enrollment.status != EnrollmentStatus.PENDING.value:
            raise EnrollmentError("대기 중인 수강 정보만 활성화할 수 있습니다.")
        if self.find_for_student(enrollment.course_id, user.id):
            raise EnrollmentError("이미 수강 중인 강좌입니다.", status_code=409)

        try:
            enrollment.student_id = user.id
            enrollment.status = EnrollmentStatus.ACTIVE.value
            self.db.commit()
            self.db.refresh(enrollment)
            logger.info(f"Enrollment {enrollment.id} activated by {user.email}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error activating enrollment {enrollment.id}: {e}")
            raise
        return enrollment
