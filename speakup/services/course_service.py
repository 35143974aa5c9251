# speakup/services/course_service.py - Course lifecycle and class-date bookkeeping
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from datetime import date, timedelta
from typing import Optional, List, Dict, Any, Iterable
import logging
import enum

from speakup.models.attendance import Attendance
from speakup.models.course import Course, ClassDate
from speakup.schemas.course import CourseOut, CourseDetail, ClassDateOut

logger = logging.getLogger(__name__)

DAY_LABELS = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


class CourseStatus(str, enum.Enum):
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def course_status(start_date: Optional[date], end_date: Optional[date], today: Optional[date] = None) -> str:
    """Status by calendar date only; times of day are ignored"""
    if not start_date or not end_date:
        return CourseStatus.WAITING.value

    today = today or date.today()
    if today < start_date:
        return CourseStatus.WAITING.value
    if today > end_date:
        return CourseStatus.COMPLETED.value
    return CourseStatus.IN_PROGRESS.value


def day_label(value: date) -> str:
    return DAY_LABELS[value.weekday()]


def dates_from_weekdays(start_date: date, end_date: date, weekdays: Iterable[int]) -> List[date]:
    """Every date in [start_date, end_date] whose weekday is scheduled"""
    wanted = set(weekdays)
    days = []
    current = start_date
    while current <= end_date:
        if current.weekday() in wanted:
            days.append(current)
        current += timedelta(days=1)
    return days


class CourseService:
    def __init__(self, db: Session):
        self.db = db

    def build_class_dates(self, course: Course, class_dates: Optional[List[Dict[str, Any]]]) -> List[ClassDate]:
        """
        Class dates for a new course. Without explicit dates they are
        generated from the weekly schedule flags over the course's date range.
        """
        if not class_dates:
            if not (course.start_date and course.end_date and course.weekdays):
                return []
            class_dates = [
                {"date": d} for d in dates_from_weekdays(course.start_date, course.end_date, course.weekdays)
            ]

        created = []
        for item in class_dates:
            created.append(ClassDate(
                date=item["date"],
                day_of_week=day_label(item["date"]),
                start_time=item.get("start_time") or course.start_time,
                end_time=item.get("end_time") or course.end_time,
            ))
        return created

    def sync_class_dates(self, course: Course, class_dates: List[Dict[str, Any]]) -> Dict[str, int]:
        """
        Replace a course's class dates without losing attendance.

        Dates no longer wanted are removed only when nobody attended them;
        dates not yet present are added. The caller commits.
        """
        wanted = {item["date"]: item for item in class_dates}

        attended_ids = set(self.db.execute(
            select(Attendance.class_date_id)
            .where(Attendance.course_id == course.id)
            .group_by(Attendance.class_date_id)
            .having(func.count(Attendance.id) > 0)
        ).scalars().all())

        removed = 0
        kept_dates = set()
        for existing in list(course.class_dates):
            if existing.date in wanted or existing.id in attended_ids:
                kept_dates.add(existing.date)
                continue
            course.class_dates.remove(existing)
            removed += 1

        added = 0
        for day, item in sorted(wanted.items()):
            if day in kept_dates:
                continue
            course.class_dates.append(ClassDate(
                date=day,
                day_of_week=day_label(day),
                start_time=item.get("start_time") or course.start_time,
                end_time=item.get("end_time") or course.end_time,
            ))
            added += 1

        logger.info(f"Class dates synced for course {course.id}: {added} added, {removed} removed")
        return {"added": added, "removed": removed}


def course_detail(course: Course, today: Optional[date] = None) -> CourseDetail:
    """CourseDetail response for a loaded course"""
    teacher_name = None
    if course.teacher:
        teacher_name = course.teacher.nick_name or course.teacher.user.real_name or course.teacher.user.name

    return CourseDetail(
        **CourseOut.model_validate(course).model_dump(),
        status=course_status(course.start_date, course.end_date, today),
        teacher_name=teacher_name,
        class_dates=[ClassDateOut.model_validate(cd) for cd in course.class_dates],
    )
