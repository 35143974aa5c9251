# speakup/api/routers/perth_questions.py - Perth tour inquiry form
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from typing import Dict, Any
import logging
import math

from speakup.core.db import get_db
from speakup.api.deps.auth import require_admin
from speakup.models.site import PerthQuestion
from speakup.schemas.site import (
    PerthQuestionIn,
    PerthQuestionOut,
    PerthQuestionCreated,
    PerthQuestionPage,
    Pagination,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=PerthQuestionCreated, status_code=status.HTTP_201_CREATED)
async def create_question(
    data: PerthQuestionIn,
    db: Session = Depends(get_db)
):
    """Public inquiry form; name, phone and message are required"""
    name = (data.name or "").strip()
    phone = (data.phone or "").strip()
    message = (data.message or "").strip()
    if not name or not phone or not message:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="이름, 연락처, 문의 내용은 필수입니다."
        )

    question = PerthQuestion(
        name=name,
        phone=phone,
        email=(data.email or "").strip() or None,
        message=message,
    )

    try:
        db.add(question)
        db.commit()
        db.refresh(question)
        logger.info(f"Perth inquiry received: {question.id}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving Perth inquiry: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="문의 접수 중 오류가 발생했습니다."
        )

    return PerthQuestionCreated(
        message="문의가 성공적으로 접수되었습니다.",
        data=PerthQuestionOut.model_validate(question),
    )


@router.get("/", response_model=PerthQuestionPage)
async def list_questions(
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100)
):
    """Inquiries, newest first"""
    # Get total count
    total = db.execute(select(func.count(PerthQuestion.id))).scalar() or 0

    # Apply pagination
    offset = (page - 1) * limit
    questions = db.execute(
        select(PerthQuestion)
        .order_by(PerthQuestion.created_at.desc())
        .offset(offset)
        .limit(limit)
    ).scalars().all()

    return PerthQuestionPage(
        data=[PerthQuestionOut.model_validate(q) for q in questions],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )
