# speakup/api/routers/activity.py - Listening, recording, video and quiz trackers
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from typing import Dict, Any, Optional
from uuid import UUID
import logging

from speakup.core.db import get_db
from speakup.api.deps.auth import get_current_user
from speakup.api.deps.lookups import get_course_or_404
from speakup.models.activity import NativeAudioAttempt, Recording, QuizAttempt, YouTubeViewAttempt
from speakup.models.user import User
from speakup.models.voice import MyVoiceOpenList
from speakup.schemas.activity import RecordingIn, RecordingOut, YouTubeViewIn, QuizAttemptIn, QuizAttemptOut, QuizStats
from speakup.schemas.enrollment import CountOut
from speakup.schemas.learning import SentenceRef

logger = logging.getLogger(__name__)
router = APIRouter()

# Views shorter than this are accidental clicks
YOUTUBE_MIN_SECONDS = 3
YOUTUBE_MAX_SECONDS = 60


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


def _recording(db: Session, user_id: UUID, course_id: UUID, sentence_no: int) -> Optional[Recording]:
    return db.execute(
        select(Recording).where(
            Recording.user_id == user_id,
            Recording.course_id == course_id,
            Recording.sentence_no == sentence_no,
        )
    ).scalar_one_or_none()


@router.post("/native-audio", status_code=status.HTTP_201_CREATED)
async def record_native_audio(
    data: SentenceRef,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    get_course_or_404(db, data.course_id)
    db.add(NativeAudioAttempt(user_id=user.id, course_id=data.course_id, sentence_no=data.sentence_no))
    _commit(db, f"Native audio listen on sentence {data.sentence_no}", user)
    return {"recorded": True}


@router.get("/native-audio/count", response_model=CountOut)
async def native_audio_count(
    course_id: UUID = Query(...),
    sentence_no: Optional[int] = Query(None),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = select(func.count(NativeAudioAttempt.id)).where(
        NativeAudioAttempt.user_id == ctx["user"].id,
        NativeAudioAttempt.course_id == course_id,
    )
    if sentence_no is not None:
        query = query.where(NativeAudioAttempt.sentence_no == sentence_no)
    return CountOut(count=db.execute(query).scalar() or 0)


@router.post("/recordings", response_model=RecordingOut)
async def save_recording(
    data: RecordingIn,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Store the latest recording of a sentence.

    Re-recording bumps attempt_count and, when the sentence was already
    opened to classmates, replaces the shared voice as well.
    """
    user: User = ctx["user"]
    get_course_or_404(db, data.course_id)
    recording = _recording(db, user.id, data.course_id, data.sentence_no)

    if recording:
        recording.file_url = data.file_url
        recording.attempt_count += 1
    else:
        recording = Recording(
            user_id=user.id,
            course_id=data.course_id,
            sentence_no=data.sentence_no,
            file_url=data.file_url,
            attempt_count=1,
        )
        db.add(recording)

    open_voice = db.execute(
        select(MyVoiceOpenList).where(
            MyVoiceOpenList.user_id == user.id,
            MyVoiceOpenList.course_id == data.course_id,
            MyVoiceOpenList.sentence_no == data.sentence_no,
        )
    ).scalar_one_or_none()
    if open_voice:
        open_voice.my_voice_url = data.file_url

    _commit(db, f"Recording saved for sentence {data.sentence_no}", user)
    db.refresh(recording)
    return recording


@router.get("/recordings", response_model=RecordingOut)
async def get_recording(
    course_id: UUID = Query(...),
    sentence_no: int = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    recording = _recording(db, ctx["user"].id, course_id, sentence_no)
    if not recording:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Recording not found"
        )
    return recording


@router.get("/recordings/total", response_model=CountOut)
async def recording_total(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    total = db.execute(
        select(func.sum(Recording.attempt_count)).where(
            Recording.user_id == ctx["user"].id,
            Recording.course_id == course_id,
        )
    ).scalar()
    return CountOut(count=total or 0)


@router.post("/youtube-view")
async def record_youtube_view(
    data: YouTubeViewIn,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    get_course_or_404(db, data.course_id)

    if data.duration < YOUTUBE_MIN_SECONDS:
        return {"recorded": False, "duration": 0}

    duration = min(data.duration, YOUTUBE_MAX_SECONDS)
    db.add(YouTubeViewAttempt(
        user_id=user.id,
        course_id=data.course_id,
        sentence_no=data.sentence_no,
        duration=duration,
    ))
    _commit(db, f"YouTube view of {duration}s on sentence {data.sentence_no}", user)
    return {"recorded": True, "duration": duration}


@router.get("/youtube-view/total", response_model=CountOut)
async def youtube_view_total(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Total seconds watched in a course"""
    total = db.execute(
        select(func.sum(YouTubeViewAttempt.duration)).where(
            YouTubeViewAttempt.user_id == ctx["user"].id,
            YouTubeViewAttempt.course_id == course_id,
        )
    ).scalar()
    return CountOut(count=total or 0)


@router.post("/quiz", response_model=QuizAttemptOut)
async def record_quiz_attempt(
    data: QuizAttemptIn,
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user: User = ctx["user"]
    get_course_or_404(db, data.course_id)

    attempt = db.execute(
        select(QuizAttempt).where(
            QuizAttempt.user_id == user.id,
            QuizAttempt.course_id == data.course_id,
            QuizAttempt.sentence_no == data.sentence_no,
            QuizAttempt.kind == data.kind,
        )
    ).scalar_one_or_none()

    if not attempt:
        attempt = QuizAttempt(
            user_id=user.id,
            course_id=data.course_id,
            sentence_no=data.sentence_no,
            kind=data.kind,
            attempt_quiz=0,
            correct_count=0,
        )
        db.add(attempt)

    attempt.attempt_quiz += 1
    if data.is_correct:
        attempt.correct_count += 1

    _commit(db, f"Quiz attempt on sentence {data.sentence_no}", user)
    db.refresh(attempt)
    return attempt


@router.get("/quiz/stats", response_model=QuizStats)
async def quiz_stats(
    course_id: UUID = Query(...),
    ctx: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    attempts, correct = db.execute(
        select(func.sum(QuizAttempt.attempt_quiz), func.sum(QuizAttempt.correct_count)).where(
            QuizAttempt.user_id == ctx["user"].id,
            QuizAttempt.course_id == course_id,
        )
    ).one()
    return QuizStats(total_attempts=attempts or 0, total_correct=correct or 0)
