# speakup/api/routers/auth.py - Email/password accounts issuing bearer tokens
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from speakup.core.db import get_db
from speakup.schemas.auth import RegisterIn, LoginIn, LoginOut
from speakup.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=LoginOut, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterIn,
    db: Session = Depends(get_db)
):
    """Register a new student account"""
    service = AuthService(db)

    try:
        user = service.create_user(
            email=user_data.email,
            name=user_data.name,
            password=user_data.password,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating user: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating user account"
        )

    return LoginOut(access_token=service.issue_token(user), role=user.role)


@router.post("/login", response_model=LoginOut)
async def login(
    credentials: LoginIn,
    db: Session = Depends(get_db)
):
    """Authenticate user and return access token"""
    service = AuthService(db)
    user = service.authenticate_user(credentials.email, credentials.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is deactivated"
        )

    logger.info(f"User logged in: {user.email}")
    return LoginOut(access_token=service.issue_token(user), role=user.role)
