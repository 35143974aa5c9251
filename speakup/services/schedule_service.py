# speakup/services/schedule_service.py - Teacher schedule conflict detection
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select
from datetime import date
from typing import Optional, Dict, Any, List
from uuid import UUID
import logging

from speakup.models.course import Course, ClassDate
from speakup.models.teacher import Teacher

logger = logging.getLogger(__name__)


def time_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight"""
    try:
        hours, minutes = value.split(":")
        return int(hours) * 60 + int(minutes)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time format: {value!r}, expected HH:MM")


def intervals_overlap(new_start: int, new_end: int, ex_start: int, ex_end: int) -> bool:
    """Strict overlap; intervals that only touch at an edge do not overlap"""
    return new_start < ex_end and new_end > ex_start


def boundary_overlap(new_start: int, new_end: int, ex_start: int, ex_end: int) -> bool:
    """
    Overlap test used when checking one teacher's day: either endpoint of
    the new class falls inside the existing one, or one contains the other.
    """
    return (
        ex_start <= new_start < ex_end
        or ex_start < new_end <= ex_end
        or (new_start <= ex_start and new_end >= ex_end)
        or (ex_start <= new_start and ex_end >= new_end)
    )


class ScheduleService:
    """Conflict checks between proposed class times and existing teacher schedules"""

    def __init__(self, db: Session):
        self.db = db

    def check_teacher_schedule_conflict(
        self,
        teacher_id: UUID,
        class_date: date,
        start_time: str,
        end_time: str,
        exclude_course_id: Optional[UUID] = None,
    ) -> Dict[str, Any]:
        """
        Check whether a single teacher is free on a date.

        Class-date times take precedence over the course's default times.
        Returns the first conflict found.
        """
        new_start = time_to_minutes(start_time)
        new_end = time_to_minutes(end_time)

        query = (
            select(ClassDate, Course)
            .join(Course, ClassDate.course_id == Course.id)
            .where(Course.teacher_id == teacher_id, ClassDate.date == class_date)
            .order_by(ClassDate.start_time)
        )
        if exclude_course_id:
            query = query.where(Course.id != exclude_course_id)

        for existing, course in self.db.execute(query).all():
            ex_start_str = existing.start_time or course.start_time
            ex_end_str = existing.end_time or course.end_time
            if not ex_start_str or not ex_end_str:
                continue

            if boundary_overlap(new_start, new_end, time_to_minutes(ex_start_str), time_to_minutes(ex_end_str)):
                logger.info(f"Schedule conflict for teacher {teacher_id} on {class_date}: {course.title}")
                return {
                    "has_conflict": True,
                    "conflict_details": {
                        "course_title": course.title,
                        "date": existing.date.isoformat(),
                        "time": f"{ex_start_str} - {ex_end_str}",
                    },
                }

        return {"has_conflict": False, "conflict_details": None}

    def find_teacher_conflicts(
        self,
        class_dates: List[date],
        start_time: str,
        end_time: str,
        current_course_id: Optional[UUID] = None,
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Map each active teacher to the courses that clash with the proposed dates.

        Course times take precedence over class-date times here. Each course
        is reported at most once per teacher.
        """
        new_start = time_to_minutes(start_time)
        new_end = time_to_minutes(end_time)
        wanted = set(class_dates)

        teachers = self.db.execute(
            select(Teacher)
            .where(Teacher.is_active.is_(True))
            .options(selectinload(Teacher.courses).selectinload(Course.class_dates))
        ).scalars().all()

        conflicts: Dict[str, List[Dict[str, Any]]] = {}
        for teacher in teachers:
            teacher_conflicts = []
            for course in teacher.courses:
                if current_course_id and course.id == current_course_id:
                    continue

                for existing in course.class_dates:
                    if existing.date not in wanted:
                        continue
                    ex_start_str = course.start_time or existing.start_time
                    ex_end_str = course.end_time or existing.end_time
                    if not ex_start_str or not ex_end_str:
                        continue

                    if intervals_overlap(new_start, new_end, time_to_minutes(ex_start_str), time_to_minutes(ex_end_str)):
                        teacher_conflicts.append({
                            "id": str(course.id),
                            "title": course.title,
                            "date": existing.date.isoformat(),
                            "start_time": ex_start_str,
                            "end_time": ex_end_str,
                        })
                        break

            if teacher_conflicts:
                conflicts[str(teacher.id)] = teacher_conflicts

        return conflicts

    def teacher_availability(
        self,
        class_dates: List[Dict[str, Any]],
        current_teacher_id: Optional[UUID] = None,
    ) -> List[Dict[str, Any]]:
        """
        List active teachers with whether they can take every proposed slot.

        Each slot is {"date", "start_time", "end_time"}. The course's current
        teacher is always reported available.
        """
        slots_by_date: Dict[date, List[tuple]] = {}
        for slot in class_dates:
            slots_by_date.setdefault(slot["date"], []).append(
                (time_to_minutes(slot["start_time"]), time_to_minutes(slot["end_time"]))
            )

        teachers = self.db.execute(
            select(Teacher)
            .where(Teacher.is_active.is_(True))
            .options(
                selectinload(Teacher.user),
                selectinload(Teacher.courses).selectinload(Course.class_dates),
            )
        ).scalars().all()

        results = []
        for teacher in teachers:
            conflicting_courses = []
            if teacher.id != current_teacher_id:
                for course in teacher.courses:
                    conflicting_dates = []
                    for existing in course.class_dates:
                        if existing.date not in slots_by_date:
                            continue
                        ex_start_str = existing.start_time or course.start_time
                        ex_end_str = existing.end_time or course.end_time
                        if not ex_start_str or not ex_end_str:
                            continue
                        ex_start, ex_end = time_to_minutes(ex_start_str), time_to_minutes(ex_end_str)
                        if any(intervals_overlap(s, e, ex_start, ex_end) for s, e in slots_by_date[existing.date]):
                            conflicting_dates.append(existing.date.isoformat())

                    if conflicting_dates:
                        conflicting_courses.append({
                            "course_id": str(course.id),
                            "course_title": course.title,
                            "conflicting_dates": conflicting_dates,
                        })

            results.append({
                "id": str(teacher.id),
                "user_id": str(teacher.user_id),
                "name": teacher.user.real_name or teacher.user.name,
                "nick_name": teacher.nick_name,
                "nation": teacher.nation,
                "subject": teacher.subject,
                "is_available": not conflicting_courses,
                "conflicting_courses": conflicting_courses,
            })

        return results
