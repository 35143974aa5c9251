"""Shared fixtures: in-memory database, API client and users for each role."""

import os

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["PAYMENT_WEBHOOK_SECRET"] = "test-webhook-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date, timedelta
from typing import Callable, Dict, Generator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from speakup.core.db import get_db
from speakup.core.security import token_manager
from speakup.main import app
from speakup.models import Base, ClassDate, Course, Teacher, User, UserRole
from speakup.models.enrollment import Enrollment, EnrollmentStatus

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Fresh schema per test; the API shares this session."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """API client with get_db bound to the test session."""

    def override_get_db() -> Generator[Session, None, None]:
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user: User) -> Dict[str, str]:
    token = token_manager.create_access_token(
        subject=str(user.id),
        additional_claims={"email": user.email, "role": user.role},
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    """Factory for persisted users."""

    def _make(
        email: str,
        role: str = UserRole.STUDENT.value,
        real_name: Optional[str] = None,
        phone: Optional[str] = None,
        **extra,
    ) -> User:
        user = User(email=email, name=email.split("@")[0], role=role, real_name=real_name, phone=phone, **extra)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user) -> User:
    return make_user("admin@example.com", role=UserRole.ADMIN.value, real_name="관리자", phone="010-0000-0000")


@pytest.fixture
def admin_headers(admin: User) -> Dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def student(make_user) -> User:
    return make_user("student@example.com", real_name="홍길동", phone="010-1234-5678")


@pytest.fixture
def student_headers(student: User) -> Dict[str, str]:
    return auth_headers(student)


@pytest.fixture
def teacher(db: Session, make_user) -> Teacher:
    user = make_user("teacher@example.com", role=UserRole.TEACHER.value, real_name="김선생", phone="010-9999-8888")
    teacher = Teacher(user_id=user.id, is_active=True, nick_name="Teacher Kim")
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    return teacher


@pytest.fixture
def teacher_headers(teacher: Teacher) -> Dict[str, str]:
    return auth_headers(teacher.user)


@pytest.fixture
def course(db: Session, admin: User, teacher: Teacher) -> Course:
    """In-progress Monday/Wednesday course taught by the fixture teacher, 10:00-10:25."""
    start = date.today() - timedelta(days=7)
    course = Course(
        title="Basic 100",
        contents="basic100",
        generator_id=admin.id,
        teacher_id=teacher.id,
        schedule_monday=True,
        schedule_wednesday=True,
        start_date=start,
        end_date=start + timedelta(days=27),
        start_time="10:00",
        end_time="10:25",
        price=100000,
    )
    course.class_dates = [
        ClassDate(date=start, day_of_week="mon", start_time="10:00", end_time="10:25"),
        ClassDate(date=start + timedelta(days=2), day_of_week="wed", start_time="10:00", end_time="10:25"),
        ClassDate(date=start + timedelta(days=30), day_of_week="fri", start_time="10:00", end_time="10:25"),
    ]
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@pytest.fixture
def active_enrollment(db: Session, course: Course, student: User) -> Enrollment:
    enrollment = Enrollment(
        course_id=course.id,
        course_title=course.title,
        student_id=student.id,
        student_name=student.real_name,
        student_phone=student.plain_phone,
        status=EnrollmentStatus.ACTIVE.value,
    )
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment


@pytest.fixture
def headers_for() -> Callable[[User], Dict[str, str]]:
    """Bearer headers for any user."""
    return auth_headers
