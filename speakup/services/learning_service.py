# speakup/services/learning_service.py - Daily sentence paging and review bookkeeping
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import List, Optional
from uuid import UUID
from collections import Counter
import math

from speakup.core.config import settings
from speakup.models.learning import Sentence, CompletedSentence


def day_of_sentence(sentence_no: int, per_day: Optional[int] = None) -> int:
    per_day = per_day or settings.SENTENCES_PER_DAY
    return math.ceil(sentence_no / per_day)


def review_day(day: int, cycle: Optional[int] = None) -> int:
    """Fold a learning day into the 1..cycle review range"""
    cycle = cycle or settings.REVIEW_CYCLE_DAYS
    remainder = day % cycle
    return cycle if remainder == 0 else remainder


class LearningService:
    def __init__(self, db: Session):
        self.db = db

    def sentences_for_day(self, day: int, contents: Optional[str] = None) -> List[Sentence]:
        per_day = settings.SENTENCES_PER_DAY
        query = select(Sentence).order_by(Sentence.no)
        if contents:
            query = query.where(Sentence.contents == contents)
        query = query.offset((day - 1) * per_day).limit(per_day)
        return self.db.execute(query).scalars().all()

    def review_sentences(self, day: int) -> List[Sentence]:
        per_day = settings.SENTENCES_PER_DAY
        return self.db.execute(
            select(Sentence)
            .where(Sentence.no >= (day - 1) * per_day + 1, Sentence.no <= day * per_day)
            .order_by(Sentence.no)
        ).scalars().all()

    def completed_days(self, user_id: UUID, course_id: UUID) -> List[int]:
        """Review days whose sentences were all completed, in learning-day order"""
        sentence_numbers = self.db.execute(
            select(CompletedSentence.sentence_no).where(
                CompletedSentence.user_id == user_id,
                CompletedSentence.course_id == course_id,
            )
        ).scalars().all()

        day_counts = Counter(day_of_sentence(no) for no in sentence_numbers)
        return [
            review_day(day)
            for day in sorted(day_counts)
            if day_counts[day] == settings.SENTENCES_PER_DAY
        ]
