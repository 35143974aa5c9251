# speakup/services/points_service.py - Gamification points aggregation
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from typing import Dict, Any, List, Optional
from uuid import UUID
import logging
import math

from speakup.models.activity import NativeAudioAttempt, Recording, QuizAttempt, YouTubeViewAttempt
from speakup.models.attendance import Attendance
from speakup.models.enrollment import Enrollment, EnrollmentStatus
from speakup.models.site import UserCoursePoints
from speakup.models.user import User
from speakup.models.voice import MyVoiceOpenList, VoiceLike

logger = logging.getLogger(__name__)

# Points awarded per unit of activity
VIDEO_POINT_PER_SECOND = 0.5
AUDIO_POINT_PER_ATTEMPT = 1
RECORDING_POINT_PER_ATTEMPT = 20
QUIZ_ATTEMPT_POINT = 3
QUIZ_CORRECT_POINT = 3
ATTENDANCE_POINT = 50
MY_VOICE_OPEN_POINT = 100
VOICE_LIKE_POINT = 100
USER_VOICE_LIKE_POINT = 20

POINT_WEIGHTS = {
    "video_duration": VIDEO_POINT_PER_SECOND,
    "audio_attempts": AUDIO_POINT_PER_ATTEMPT,
    "recording_attempts": RECORDING_POINT_PER_ATTEMPT,
    "quiz_attempts": QUIZ_ATTEMPT_POINT,
    "quiz_correct": QUIZ_CORRECT_POINT,
    "attendance": ATTENDANCE_POINT,
    "my_voice_open": MY_VOICE_OPEN_POINT,
    "voice_likes_received": VOICE_LIKE_POINT,
    "voice_likes_given": USER_VOICE_LIKE_POINT,
}


def round_half_up(value: float) -> int:
    """Round .5 away from zero for the non-negative totals used here"""
    return int(math.floor(value + 0.5))


def percentage(part: float, total: float) -> int:
    if not total:
        return 0
    return round_half_up(part / total * 100)


class PointsService:
    """Computes and stores per-course activity points"""

    def __init__(self, db: Session):
        self.db = db

    def _scalar(self, query) -> int:
        return self.db.execute(query).scalar() or 0

    def activity_counts(self, user_id: UUID, course_id: UUID) -> Dict[str, int]:
        """Raw activity totals for one learner in one course"""
        return {
            "video_duration": self._scalar(
                select(func.sum(YouTubeViewAttempt.duration)).where(
                    YouTubeViewAttempt.user_id == user_id, YouTubeViewAttempt.course_id == course_id
                )
            ),
            "audio_attempts": self._scalar(
                select(func.count(NativeAudioAttempt.id)).where(
                    NativeAudioAttempt.user_id == user_id, NativeAudioAttempt.course_id == course_id
                )
            ),
            "recording_attempts": self._scalar(
                select(func.sum(Recording.attempt_count)).where(
                    Recording.user_id == user_id, Recording.course_id == course_id
                )
            ),
            "quiz_attempts": self._scalar(
                select(func.sum(QuizAttempt.attempt_quiz)).where(
                    QuizAttempt.user_id == user_id, QuizAttempt.course_id == course_id
                )
            ),
            "quiz_correct": self._scalar(
                select(func.sum(QuizAttempt.correct_count)).where(
                    QuizAttempt.user_id == user_id, QuizAttempt.course_id == course_id
                )
            ),
            "attendance": self._scalar(
                select(func.count(Attendance.id)).where(
                    Attendance.user_id == user_id,
                    Attendance.course_id == course_id,
                    Attendance.is_attended.is_(True),
                )
            ),
            "my_voice_open": self._scalar(
                select(func.count(MyVoiceOpenList.id)).where(
                    MyVoiceOpenList.user_id == user_id, MyVoiceOpenList.course_id == course_id
                )
            ),
            "voice_likes_received": self._scalar(
                select(func.count(VoiceLike.id))
                .join(MyVoiceOpenList, VoiceLike.voice_id == MyVoiceOpenList.id)
                .where(MyVoiceOpenList.user_id == user_id, MyVoiceOpenList.course_id == course_id)
            ),
            "voice_likes_given": self._scalar(
                select(func.count(VoiceLike.id))
                .join(MyVoiceOpenList, VoiceLike.voice_id == MyVoiceOpenList.id)
                .where(VoiceLike.user_id == user_id, MyVoiceOpenList.course_id == course_id)
            ),
        }

    def calculate_user_activity_points(self, user_id: UUID, course_id: UUID) -> Dict[str, Any]:
        counts = self.activity_counts(user_id, course_id)
        total = sum(counts[key] * weight for key, weight in POINT_WEIGHTS.items())
        return {"counts": counts, "total_points": round_half_up(total)}

    def points_detail(self, user_id: UUID, course_id: UUID) -> Dict[str, Any]:
        """Per-activity points and each activity's share of the total"""
        counts = self.activity_counts(user_id, course_id)
        raw = {key: counts[key] * weight for key, weight in POINT_WEIGHTS.items()}
        item_points = {key: round_half_up(value) for key, value in raw.items()}
        total = round_half_up(sum(raw.values()))

        # Shares use the unrounded item points
        rates = {
            "video": percentage(raw["video_duration"], total),
            "audio": percentage(raw["audio_attempts"], total),
            "recording": percentage(raw["recording_attempts"], total),
            "quiz": percentage(raw["quiz_attempts"] + raw["quiz_correct"], total),
            "attendance": percentage(raw["attendance"], total),
            "my_voice_open": percentage(raw["my_voice_open"], total),
            "voice_like": percentage(raw["voice_likes_received"] + raw["voice_likes_given"], total),
        }

        return {
            "counts": counts,
            "points": item_points,
            "rates": rates,
            "total_points": total,
        }

    def save_points(self, user_id: UUID, course_id: UUID, points: int) -> UserCoursePoints:
        """Upsert the stored points row; caller commits"""
        row = self.db.execute(
            select(UserCoursePoints).where(
                UserCoursePoints.user_id == user_id,
                UserCoursePoints.course_id == course_id,
            )
        ).scalar_one_or_none()

        if row:
            row.points = points
        else:
            row = UserCoursePoints(user_id=user_id, course_id=course_id, points=points)
            self.db.add(row)
        return row

    def recalculate(self, user_id: UUID, course_id: UUID) -> UserCoursePoints:
        result = self.calculate_user_activity_points(user_id, course_id)
        row = self.save_points(user_id, course_id, result["total_points"])
        self.db.commit()
        self.db.refresh(row)
        logger.info(f"Points recalculated for user {user_id} in course {course_id}: {row.points}")
        return row

    def ranking(self, course_id: UUID) -> List[Dict[str, Any]]:
        rows = self.db.execute(
            select(UserCoursePoints, User)
            .join(User, UserCoursePoints.user_id == User.id)
            .where(UserCoursePoints.course_id == course_id)
            .order_by(UserCoursePoints.points.desc(), UserCoursePoints.updated_at)
        ).all()

        return [
            {
                "rank": index + 1,
                "user_id": str(points.user_id),
                "display_name": user.display_name,
                "points": points.points,
            }
            for index, (points, user) in enumerate(rows)
        ]

    def user_rank(self, user_id: UUID, course_id: UUID) -> Dict[str, Any]:
        ranking = self.ranking(course_id)
        entry: Optional[Dict[str, Any]] = next(
            (item for item in ranking if item["user_id"] == str(user_id)), None
        )
        return {
            "rank": entry["rank"] if entry else 0,
            "points": entry["points"] if entry else 0,
            "total_students": len(ranking),
        }

    def team_points(self, course_id: UUID) -> Dict[str, int]:
        """Sum of stored points over the course's active students"""
        student_ids = self.db.execute(
            select(Enrollment.student_id).where(
                Enrollment.course_id == course_id,
                Enrollment.status == EnrollmentStatus.ACTIVE.value,
                Enrollment.student_id.is_not(None),
            )
        ).scalars().all()

        total = 0
        if student_ids:
            total = self._scalar(
                select(func.sum(UserCoursePoints.points)).where(
                    UserCoursePoints.course_id == course_id,
                    UserCoursePoints.user_id.in_(student_ids),
                )
            )

        return {"total_team_points": total, "student_count": len(student_ids)}
