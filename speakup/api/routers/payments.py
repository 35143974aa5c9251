# speakup/api/routers/payments.py - Free enrollment, bank-transfer requests and payment completion
from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import Dict, Any, List, Optional
from uuid import UUID
from datetime import datetime
import logging

from speakup.core.db import get_db
from speakup.core.security import verify_webhook_secret
from speakup.api.deps.auth import get_current_user, require_staff
from speakup.api.deps.lookups import get_course_or_404
from speakup.models.purchase import WaitForPurchase, PurchaseStatus
from speakup.models.user import User, STAFF_ROLES
from speakup.schemas.enrollment import EnrollmentOut
from speakup.schemas.purchase import (
    WaitForPurchaseCreate, WaitForPurchaseOut, FreeEnrollmentIn,
    PaymentNotification, PaymentResult, ProfileCompleteOut, ExistsOut
)
from speakup.services.enrollment_service import EnrollmentService, EnrollmentError
from speakup.services.purchase_service import PurchaseService, purchase_expiry

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_complete_profile(user: User):
    if not user.is_profile_complete:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="실명과 전화번호를 먼저 등록해주세요."
        )


def _get_request_or_404(db: Session, request_id: UUID) -> WaitForPurchase:
    request = db.get(WaitForPurchase, request_id)
    if not request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Purchase request not found"
        )
    return request


@router.get("/check-user-info", response_model=ProfileCompleteOut)
async def check_user_info(ctx: Dict[str, Any] = Depends(get_current_user)):
    return ProfileCompleteOut(is_profile_complete=ctx["user"].is_profile_complete)


@router.get("/check-already-enrolled", response_model=ExistsOut)
async def check_already_enrolled(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    enrollment = EnrollmentService(db).find_for_student(course_id, ctx["user"].id)
    return ExistsOut(exists=enrollment is not None)


@router.post("/free-enrollment", response_model=EnrollmentOut, status_code=status.HTTP_201_CREATED)
async def free_enrollment(
    data: FreeEnrollmentIn,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Enroll directly in a course that needs no payment"""
    user: User = ctx["user"]
    _require_complete_profile(user)

    course = get_course_or_404(db, data.course_id)
    service = EnrollmentService(db)

    if service.find_for_student(course.id, user.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="이미 수강 중인 강좌입니다."
        )

    try:
        enrollment = service.create_active_enrollment(course, user)
        db.commit()
        db.refresh(enrollment)
        logger.info(f"Free enrollment: {user.email} in {course.title}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating free enrollment for {user.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating enrollment"
        )

    return enrollment


@router.post("/wait-for-purchase", response_model=WaitForPurchaseOut, status_code=status.HTTP_201_CREATED)
async def create_wait_for_purchase(
    data: WaitForPurchaseCreate,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    _require_complete_profile(user)
    get_course_or_404(db, data.course_id)

    pending = db.execute(
        select(WaitForPurchase).where(
            WaitForPurchase.user_id == user.id,
            WaitForPurchase.course_id == data.course_id,
            WaitForPurchase.status == PurchaseStatus.PENDING.value,
        )
    ).scalars().first()

    if pending:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="이미 대기 중인 구매 요청이 있습니다."
        )

    now = datetime.utcnow()
    request = WaitForPurchase(
        user_id=user.id,
        course_id=data.course_id,
        course_title=data.course_title,
        user_name=user.real_name,
        user_phone=user.phone,
        start_date=data.start_date,
        class_count=data.class_count,
        total_fee=data.total_fee,
        status=PurchaseStatus.PENDING.value,
        expires_at=purchase_expiry(now),
        created_at=now,
    )

    try:
        db.add(request)
        db.commit()
        db.refresh(request)
        logger.info(f"Purchase request created: {user.email} for {data.course_title}, expires {request.expires_at}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating purchase request: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating purchase request"
        )

    return request


@router.get("/wait-for-purchase", response_model=List[WaitForPurchaseOut])
async def list_wait_for_purchase(
    status_filter: Optional[str] = Query(None, alias="status"),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Purchase requests, newest first; students only see their own"""
    user: User = ctx["user"]
    PurchaseService(db).expire_stale()

    query = select(WaitForPurchase)
    if not user.has_any_role(STAFF_ROLES):
        query = query.where(WaitForPurchase.user_id == user.id)
    if status_filter:
        query = query.where(WaitForPurchase.status == status_filter)

    return db.execute(query.order_by(WaitForPurchase.created_at.desc())).scalars().all()


@router.delete("/wait-for-purchase/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_wait_for_purchase(
    request_id: UUID,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    request = _get_request_or_404(db, request_id)

    if request.user_id != user.id and not user.has_any_role(STAFF_ROLES):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="본인의 구매 요청만 삭제할 수 있습니다."
        )

    if request.status == PurchaseStatus.PAID.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="결제가 완료된 요청은 삭제할 수 없습니다."
        )

    try:
        db.delete(request)
        db.commit()
        logger.info(f"Purchase request {request_id} deleted by {user.email}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting purchase request {request_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting purchase request"
        )


@router.post("/wait-for-purchase/{request_id}/confirm", response_model=EnrollmentOut)
async def confirm_wait_for_purchase(
    request_id: UUID,
    ctx: Dict[str, Any] = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Staff confirmation of a received bank transfer"""
    request = _get_request_or_404(db, request_id)

    try:
        result = PurchaseService(db).confirm(request)
    except EnrollmentError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error confirming purchase request"
        )

    logger.info(f"Purchase request {request_id} confirmed by {ctx['user'].email}")
    return result["enrollment"]


@router.post("/complete", response_model=PaymentResult)
async def complete_payment(
    notification: PaymentNotification,
    x_webhook_secret: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Payment webhook; the provider has already verified the payment"""
    if not verify_webhook_secret(x_webhook_secret):
        logger.warning(f"Rejected payment notification {notification.payment_id}: bad webhook secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook secret"
        )

    if notification.status != "PAID":
        logger.info(f"Payment {notification.payment_id} ignored with status {notification.status}")
        return PaymentResult(recorded=False, status=notification.status)

    try:
        result = PurchaseService(db).complete_payment(
            payment_id=notification.payment_id,
            amount=notification.amount,
            order_name=notification.order_name,
            request_id=notification.wait_for_purchase_id,
        )
    except EnrollmentError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error recording payment"
        )

    return PaymentResult(status=notification.status, **result)
