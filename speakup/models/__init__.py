# speakup/models/__init__.py - Import all models so SQLAlchemy can discover them

from speakup.models.base import Base

from speakup.models.user import User, UserRole
from speakup.models.teacher import Teacher
from speakup.models.course import Course, ClassDate
from speakup.models.enrollment import Enrollment, EnrollmentStatus
from speakup.models.purchase import WaitForPurchase, Purchase, PurchaseStatus
from speakup.models.attendance import Attendance, TeacherAttendance
from speakup.models.learning import Sentence, UnitSubject, CompletedSentence, FavoriteSentence, UserNextDay
from speakup.models.activity import NativeAudioAttempt, Recording, QuizAttempt, YouTubeViewAttempt
from speakup.models.voice import MyVoiceOpenList, VoiceLike, VoiceListened
from speakup.models.site import UserCoursePoints, SelectedCourse, Configuration, PerthQuestion

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Teacher",
    "Course",
    "ClassDate",
    "Enrollment",
    "EnrollmentStatus",
    "WaitForPurchase",
    "Purchase",
    "PurchaseStatus",
    "Attendance",
    "TeacherAttendance",
    "Sentence",
    "UnitSubject",
    "CompletedSentence",
    "FavoriteSentence",
    "UserNextDay",
    "NativeAudioAttempt",
    "Recording",
    "QuizAttempt",
    "YouTubeViewAttempt",
    "MyVoiceOpenList",
    "VoiceLike",
    "VoiceListened",
    "UserCoursePoints",
    "SelectedCourse",
    "Configuration",
    "PerthQuestion",
]
