# speakup/api/routers/voice.py - Sharing recordings with classmates, likes and listens
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func
from typing import Dict, Any, List, Optional
from uuid import UUID
from datetime import datetime
import logging

from speakup.core.db import get_db
from speakup.api.deps.auth import get_current_user
from speakup.models.activity import Recording
from speakup.models.learning import Sentence
from speakup.models.user import User
from speakup.models.voice import MyVoiceOpenList, VoiceLike, VoiceListened
from speakup.schemas.enrollment import CountOut
from speakup.schemas.voice import OpenVoiceIn, OpenVoiceOut, OpenVoiceListItem, LikeStatus, ListenedOut

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_voice_or_404(db: Session, voice_id: UUID) -> MyVoiceOpenList:
    voice = db.get(MyVoiceOpenList, voice_id)
    if not voice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Voice not found"
        )
    return voice


def _own_voice(db: Session, user_id: UUID, course_id: UUID, sentence_no: int) -> Optional[MyVoiceOpenList]:
    return db.execute(
        select(MyVoiceOpenList).where(
            MyVoiceOpenList.user_id == user_id,
            MyVoiceOpenList.course_id == course_id,
            MyVoiceOpenList.sentence_no == sentence_no,
        )
    ).scalar_one_or_none()


def _commit(db: Session, action: str, user: User):
    try:
        db.commit()
        logger.info(f"{action} by {user.email}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error during {action.lower()} by {user.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error during {action.lower()}"
        )


@router.get("/my-open", response_model=List[int])
async def my_open_sentences(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Sentence numbers the caller has opened"""
    return db.execute(
        select(MyVoiceOpenList.sentence_no)
        .where(
            MyVoiceOpenList.user_id == ctx["user"].id,
            MyVoiceOpenList.course_id == course_id,
        )
        .order_by(MyVoiceOpenList.sentence_no)
    ).scalars().all()


@router.post("/my-open", response_model=OpenVoiceOut, status_code=status.HTTP_201_CREATED)
async def open_my_voice(
    data: OpenVoiceIn,
    response: Response,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Publish the caller's recording of a sentence; re-opening refreshes it"""
    user: User = ctx["user"]

    recording = db.execute(
        select(Recording).where(
            Recording.user_id == user.id,
            Recording.course_id == data.course_id,
            Recording.sentence_no == data.sentence_no,
        )
    ).scalar_one_or_none()
    if not recording:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="녹음 파일이 없습니다."
        )

    sentence = db.execute(
        select(Sentence).where(Sentence.no == data.sentence_no)
    ).scalar_one_or_none()
    if not sentence:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sentence not found"
        )

    voice = _own_voice(db, user.id, data.course_id, data.sentence_no)
    if voice:
        voice.my_voice_url = recording.file_url
        voice.sentence_en = sentence.en
        response.status_code = status.HTTP_200_OK
    else:
        voice = MyVoiceOpenList(
            user_id=user.id,
            course_id=data.course_id,
            sentence_no=data.sentence_no,
            sentence_en=sentence.en,
            my_voice_url=recording.file_url,
            like_count=0,
        )
        db.add(voice)

    _commit(db, f"Voice opened for sentence {data.sentence_no}", user)
    db.refresh(voice)
    return voice


@router.delete("/my-open", status_code=status.HTTP_204_NO_CONTENT)
async def close_my_voice(
    course_id: UUID = Query(...),
    sentence_no: int = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    voice = _own_voice(db, user.id, course_id, sentence_no)
    if not voice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Voice not found"
        )

    db.delete(voice)
    _commit(db, f"Voice closed for sentence {sentence_no}", user)


@router.get("/open-list", response_model=List[OpenVoiceListItem])
async def open_voice_list(
    course_id: UUID = Query(...),
    sentence_no: int = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    voices = db.execute(
        select(MyVoiceOpenList)
        .where(
            MyVoiceOpenList.course_id == course_id,
            MyVoiceOpenList.sentence_no == sentence_no,
        )
        .options(selectinload(MyVoiceOpenList.user))
        .order_by(MyVoiceOpenList.created_at.desc())
    ).scalars().all()

    return [
        OpenVoiceListItem(
            **OpenVoiceOut.model_validate(voice).model_dump(),
            display_name=voice.user.display_name,
            profile_image=voice.user.public_image,
        )
        for voice in voices
    ]


@router.post("/{voice_id}/like", response_model=LikeStatus)
async def toggle_like(
    voice_id: UUID,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Like or unlike; like_count moves in the same commit"""
    user: User = ctx["user"]
    voice = _get_voice_or_404(db, voice_id)

    like = db.execute(
        select(VoiceLike).where(VoiceLike.user_id == user.id, VoiceLike.voice_id == voice.id)
    ).scalar_one_or_none()

    if like:
        db.delete(like)
        voice.like_count = max(voice.like_count - 1, 0)
        liked = False
    else:
        db.add(VoiceLike(user_id=user.id, voice_id=voice.id))
        voice.like_count += 1
        liked = True

    _commit(db, f"Voice {voice.id} {'liked' if liked else 'unliked'}", user)
    return LikeStatus(liked=liked, like_count=voice.like_count)


@router.get("/{voice_id}/like", response_model=LikeStatus)
async def like_status(
    voice_id: UUID,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    voice = _get_voice_or_404(db, voice_id)
    like = db.execute(
        select(VoiceLike).where(VoiceLike.user_id == ctx["user"].id, VoiceLike.voice_id == voice.id)
    ).scalar_one_or_none()
    return LikeStatus(liked=like is not None, like_count=voice.like_count)


@router.post("/{voice_id}/listened", response_model=ListenedOut)
async def mark_listened(
    voice_id: UUID,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    voice = _get_voice_or_404(db, voice_id)

    listened = db.execute(
        select(VoiceListened).where(VoiceListened.user_id == user.id, VoiceListened.voice_id == voice.id)
    ).scalar_one_or_none()

    first_time = listened is None
    if first_time:
        db.add(VoiceListened(user_id=user.id, voice_id=voice.id))
    else:
        listened.updated_at = datetime.utcnow()

    _commit(db, f"Voice {voice.id} listened", user)
    return ListenedOut(listened=True, first_time=first_time)


@router.get("/unlistened/count", response_model=CountOut)
async def unlistened_count(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Classmates' voices the caller has not played yet"""
    user: User = ctx["user"]
    listened_ids = select(VoiceListened.voice_id).where(VoiceListened.user_id == user.id)

    count = db.execute(
        select(func.count(MyVoiceOpenList.id)).where(
            MyVoiceOpenList.course_id == course_id,
            MyVoiceOpenList.user_id != user.id,
            MyVoiceOpenList.id.not_in(listened_ids),
        )
    ).scalar()
    return CountOut(count=count or 0)


@router.get("/new/count", response_model=CountOut)
async def new_voice_count(
    course_id: UUID = Query(...),
    since: Optional[datetime] = Query(None),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Classmates' voices opened after `since`, or all of them when omitted"""
    query = select(func.count(MyVoiceOpenList.id)).where(
        MyVoiceOpenList.course_id == course_id,
        MyVoiceOpenList.user_id != ctx["user"].id,
    )
    if since is not None:
        query = query.where(MyVoiceOpenList.created_at > since)
    count = db.execute(query).scalar()
    return CountOut(count=count or 0)


@router.get("/count", response_model=CountOut)
async def open_voice_count(
    course_id: UUID = Query(...),
    sentence_no: int = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    count = db.execute(
        select(func.count(MyVoiceOpenList.id)).where(
            MyVoiceOpenList.course_id == course_id,
            MyVoiceOpenList.sentence_no == sentence_no,
        )
    ).scalar()
    return CountOut(count=count or 0)


@router.get("/likes/total", response_model=CountOut)
async def likes_received(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    count = db.execute(
        select(func.count(VoiceLike.id))
        .join(MyVoiceOpenList, MyVoiceOpenList.id == VoiceLike.voice_id)
        .where(
            MyVoiceOpenList.user_id == ctx["user"].id,
            MyVoiceOpenList.course_id == course_id,
        )
    ).scalar()
    return CountOut(count=count or 0)


@router.get("/likes/given", response_model=CountOut)
async def likes_given(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    count = db.execute(
        select(func.count(VoiceLike.id))
        .join(MyVoiceOpenList, MyVoiceOpenList.id == VoiceLike.voice_id)
        .where(
            VoiceLike.user_id == ctx["user"].id,
            MyVoiceOpenList.course_id == course_id,
        )
    ).scalar()
    return CountOut(count=count or 0)


@router.get("/my-open/count", response_model=CountOut)
async def my_open_count(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    count = db.execute(
        select(func.count(MyVoiceOpenList.id)).where(
            MyVoiceOpenList.user_id == ctx["user"].id,
            MyVoiceOpenList.course_id == course_id,
        )
    ).scalar()
    return CountOut(count=count or 0)
