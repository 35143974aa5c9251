# speakup/services/purchase_service.py - Transfer requests, confirmation and payment completion
from sqlalchemy.orm import Session
from sqlalchemy import select, update
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from uuid import UUID
import logging

from speakup.core.config import settings
from speakup.models.course import Course
from speakup.models.purchase import WaitForPurchase, Purchase, PurchaseStatus
from speakup.models.user import User
from speakup.services.enrollment_service import EnrollmentService, EnrollmentError

logger = logging.getLogger(__name__)


def purchase_expiry(created_at: datetime) -> datetime:
    """Transfer requests lapse at PURCHASE_EXPIRY_HOUR on the following day"""
    next_day = (created_at + timedelta(days=1)).date()
    return datetime(next_day.year, next_day.month, next_day.day, settings.PURCHASE_EXPIRY_HOUR, 0, 0)


class PurchaseService:
    def __init__(self, db: Session):
        self.db = db
        self.enrollments = EnrollmentService(db)

    def expire_stale(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        result = self.db.execute(
            update(WaitForPurchase)
            .where(
                WaitForPurchase.status == PurchaseStatus.PENDING.value,
                WaitForPurchase.expires_at < now,
            )
            .values(status=PurchaseStatus.EXPIRED.value)
        )
        self.db.commit()
        if result.rowcount:
            logger.info(f"Expired {result.rowcount} pending purchase requests")
        return result.rowcount

    def confirm(self, request: WaitForPurchase) -> Dict[str, Any]:
        """
        Mark a pending request paid and enroll its user, in one commit.

        Raises:
            EnrollmentError: If the request is not pending or the user is already enrolled
        """
        if request.status != PurchaseStatus.PENDING.value:
            raise EnrollmentError("대기 중인 구매 요청만 확인할 수 있습니다.")

        if self.enrollments.find_for_student(request.course_id, request.user_id):
            raise EnrollmentError("이미 수강 중인 강좌입니다.")

        course = self.db.get(Course, request.course_id)
        if not course:
            raise EnrollmentError("강좌를 찾을 수 없습니다.", status_code=404)

        try:
            request.status = PurchaseStatus.PAID.value
            enrollment = self.enrollments.create_active_enrollment(
                course, request.user, fallback_name=request.user_name, fallback_phone=request.user_phone
            )
            self.db.commit()
            self.db.refresh(request)
            self.db.refresh(enrollment)
            logger.info(f"Purchase request {request.id} confirmed, enrollment {enrollment.id} created")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error confirming purchase request {request.id}: {e}")
            raise

        return {"purchase": request, "enrollment": enrollment}

    def complete_payment(
        self,
        payment_id: str,
        amount: int,
        order_name: str,
        request_id: UUID,
    ) -> Dict[str, Any]:
        """
        Record a provider-confirmed payment against a purchase request.

        Replayed notifications for a known payment_id are acknowledged
        without writing anything.
        """
        existing = self.db.execute(
            select(Purchase).where(Purchase.payment_id == payment_id)
        ).scalar_one_or_none()
        if existing:
            logger.info(f"Payment {payment_id} already recorded")
            return {"recorded": False, "duplicate": True, "purchase_id": str(existing.id)}

        request = self.db.get(WaitForPurchase, request_id)
        if not request:
            raise EnrollmentError("구매 요청을 찾을 수 없습니다.", status_code=404)
        if amount != request.total_fee:
            raise EnrollmentError("결제 금액이 일치하지 않습니다.")

        course = self.db.get(Course, request.course_id)
        if not course:
            raise EnrollmentError("강좌를 찾을 수 없습니다.", status_code=404)

        user: User = request.user
        try:
            purchase = Purchase(
                payment_id=payment_id,
                user_id=user.id,
                course_id=course.id,
                amount=amount,
                order_name=order_name,
            )
            self.db.add(purchase)
            request.status = PurchaseStatus.PAID.value

            if not self.enrollments.find_for_student(course.id, user.id):
                self.enrollments.create_active_enrollment(
                    course, user, fallback_name=request.user_name, fallback_phone=request.user_phone
                )

            self.db.commit()
            self.db.refresh(purchase)
            logger.info(f"Payment {payment_id} recorded for user {user.id}, course {course.id}")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error recording payment {payment_id}: {e}")
            raise

        return {"recorded": True, "duplicate": False, "purchase_id": str(purchase.id)}
