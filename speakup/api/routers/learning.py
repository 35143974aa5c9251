# speakup/api/routers/learning.py - Daily sentences, progress, review and favorites
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from typing import Dict, Any, List, Optional
from uuid import UUID
import logging

from speakup.core.config import settings
from speakup.core.db import get_db
from speakup.api.deps.auth import get_current_user
from speakup.api.deps.lookups import get_course_or_404
from speakup.models.learning import Sentence, UnitSubject, CompletedSentence, FavoriteSentence, UserNextDay
from speakup.models.user import User
from speakup.schemas.enrollment import CountOut
from speakup.schemas.learning import (
    SentenceOut, UnitSubjectOut, NextDayIn, NextDayOut, SentenceRef, ReviewOut, FavoriteStatus,
    CompletedSentenceOut,
)
from speakup.services.learning_service import LearningService

logger = logging.getLogger(__name__)
router = APIRouter()


def _next_day_row(db: Session, user_id: UUID, course_id: Optional[UUID]) -> Optional[UserNextDay]:
    query = select(UserNextDay).where(UserNextDay.user_id == user_id)
    if course_id:
        query = query.where(UserNextDay.course_id == course_id)
    else:
        query = query.where(UserNextDay.course_id.is_(None))
    return db.execute(query).scalars().first()


def _favorite(db: Session, user_id: UUID, course_id: UUID, sentence_no: int) -> Optional[FavoriteSentence]:
    return db.execute(
        select(FavoriteSentence).where(
            FavoriteSentence.user_id == user_id,
            FavoriteSentence.course_id == course_id,
            FavoriteSentence.sentence_no == sentence_no,
        )
    ).scalar_one_or_none()


def _commit(db: Session, action: str, user: User):
    try:
        db.commit()
        logger.info(f"{action} for {user.email}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error during {action.lower()} for {user.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error during {action.lower()}"
        )


@router.get("/sentences", response_model=List[SentenceOut])
async def sentences_for_day(
    day: int = Query(..., ge=1),
    contents: Optional[str] = Query(None),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return LearningService(db).sentences_for_day(day, contents)


@router.get("/sentences/count", response_model=CountOut)
async def sentence_count(
    contents: Optional[str] = Query(None),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = select(func.count(Sentence.id))
    if contents:
        query = query.where(Sentence.contents == contents)
    return CountOut(count=db.execute(query).scalar() or 0)


@router.get("/sentences/{no}", response_model=SentenceOut)
async def get_sentence(
    no: int,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    sentence = db.execute(
        select(Sentence).where(Sentence.no == no)
    ).scalar_one_or_none()

    if not sentence:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sentence not found"
        )
    return sentence


@router.get("/unit-subject", response_model=UnitSubjectOut)
async def get_unit_subject(
    unit_number: int = Query(..., ge=1),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    subject = db.execute(
        select(UnitSubject).where(UnitSubject.unit_number == unit_number)
    ).scalars().first()

    if not subject:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unit subject not found"
        )
    return subject


@router.get("/next-day", response_model=NextDayOut)
async def get_next_day(
    course_id: Optional[UUID] = Query(None),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Resume point for the caller; first access starts at day 1"""
    user: User = ctx["user"]
    row = _next_day_row(db, user.id, course_id)

    if not row:
        if course_id:
            get_course_or_404(db, course_id)
        row = UserNextDay(user_id=user.id, course_id=course_id, user_next_day=1, total_completed=False)
        db.add(row)
        _commit(db, "Next day initialized", user)
        db.refresh(row)

    return row


@router.post("/next-day", response_model=NextDayOut)
async def save_next_day(
    data: NextDayIn,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    row = _next_day_row(db, user.id, data.course_id)

    if not row:
        if data.course_id:
            get_course_or_404(db, data.course_id)
        row = UserNextDay(user_id=user.id, course_id=data.course_id, user_next_day=1, total_completed=False)
        db.add(row)

    if data.next_day is not None:
        row.user_next_day = data.next_day
    if data.total_completed is not None:
        row.total_completed = data.total_completed

    _commit(db, f"Next day set to {row.user_next_day}", user)
    db.refresh(row)
    return row


@router.post("/completed", status_code=status.HTTP_201_CREATED)
async def mark_completed(
    data: SentenceRef,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    get_course_or_404(db, data.course_id)

    existing = db.execute(
        select(CompletedSentence).where(
            CompletedSentence.user_id == user.id,
            CompletedSentence.course_id == data.course_id,
            CompletedSentence.sentence_no == data.sentence_no,
        )
    ).scalar_one_or_none()

    if existing:
        return {"completed": True, "created": False}

    db.add(CompletedSentence(user_id=user.id, course_id=data.course_id, sentence_no=data.sentence_no))
    _commit(db, f"Sentence {data.sentence_no} completed", user)
    return {"completed": True, "created": True}


@router.get("/completed", response_model=List[CompletedSentenceOut])
async def completed_sentences(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The caller's completed sentences in a course, with the sentence text"""
    rows = db.execute(
        select(CompletedSentence, Sentence)
        .outerjoin(Sentence, Sentence.no == CompletedSentence.sentence_no)
        .where(
            CompletedSentence.user_id == ctx["user"].id,
            CompletedSentence.course_id == course_id,
        )
        .order_by(CompletedSentence.sentence_no)
    ).all()

    return [
        CompletedSentenceOut(
            sentence_no=completed.sentence_no,
            completed_at=completed.completed_at,
            sentence=SentenceOut.model_validate(sentence) if sentence else None,
        )
        for completed, sentence in rows
    ]


@router.get("/review", response_model=ReviewOut)
async def review_days(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return ReviewOut(completed_days=LearningService(db).completed_days(ctx["user"].id, course_id))


@router.get("/review/sentences", response_model=List[SentenceOut])
async def review_sentences(
    day: int = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if day < 1 or day > settings.REVIEW_CYCLE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"day must be between 1 and {settings.REVIEW_CYCLE_DAYS}"
        )
    return LearningService(db).review_sentences(day)


@router.post("/favorites/toggle", response_model=FavoriteStatus)
async def toggle_favorite(
    data: SentenceRef,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    get_course_or_404(db, data.course_id)
    favorite = _favorite(db, user.id, data.course_id, data.sentence_no)

    if favorite:
        db.delete(favorite)
        favorited = False
    else:
        db.add(FavoriteSentence(user_id=user.id, course_id=data.course_id, sentence_no=data.sentence_no))
        favorited = True

    _commit(db, f"Favorite {data.sentence_no} {'added' if favorited else 'removed'}", user)
    return FavoriteStatus(favorited=favorited)


@router.get("/favorites/check", response_model=FavoriteStatus)
async def check_favorite(
    course_id: UUID = Query(...),
    sentence_no: int = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return FavoriteStatus(favorited=_favorite(db, ctx["user"].id, course_id, sentence_no) is not None)


@router.get("/favorites", response_model=List[SentenceOut])
async def list_favorites(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return db.execute(
        select(Sentence)
        .join(FavoriteSentence, FavoriteSentence.sentence_no == Sentence.no)
        .where(
            FavoriteSentence.user_id == ctx["user"].id,
            FavoriteSentence.course_id == course_id,
        )
        .order_by(Sentence.no)
    ).scalars().all()


@router.delete("/favorites/{sentence_no}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_favorite(
    sentence_no: int,
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    favorite = _favorite(db, user.id, course_id, sentence_no)

    if not favorite:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Favorite not found"
        )

    db.delete(favorite)
    _commit(db, f"Favorite {sentence_no} removed", user)
