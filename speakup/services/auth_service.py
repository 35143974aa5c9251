# speakup/services/auth_service.py - Account creation and credential checks
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import Optional
import logging

from speakup.core.security import hash_password, verify_password, token_manager
from speakup.models.user import User, UserRole

logger = logging.getLogger(__name__)


class AuthService:
    """Service class for authentication operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.execute(
            select(User).where(User.email == email.lower().strip())
        ).scalar_one_or_none()

    def create_user(
        self,
        email: str,
        name: str,
        password: str,
        role: str = UserRole.STUDENT.value,
    ) -> User:
        """
        Create a new user account

        Raises:
            ValueError: If user already exists
        """
        email = email.lower().strip()
        if self.get_by_email(email):
            raise ValueError("User with this email already exists")

        user = User(
            email=email,
            name=name.strip(),
            password_hash=hash_password(password),
            role=role,
            is_active=True,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User created: {user.email} ({user.role})")
        return user

    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            return None
        return user

    def issue_token(self, user: User) -> str:
        return token_manager.create_access_token(
            subject=str(user.id),
            additional_claims={"email": user.email, "role": user.role},
        )
