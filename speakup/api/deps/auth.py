# speakup/api/deps/auth.py - Session validation and role-based authorization
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from sqlalchemy import select
from speakup.core.db import get_db
from speakup.core.security import decode_token
from speakup.models.user import User, UserRole, STAFF_ROLES
from uuid import UUID
from typing import Dict, Any, List

security = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Decode JWT and return user + claims.
    Returns: {"user": User, "claims": dict}
    """
    claims = decode_token(credentials.credentials)

    user_id_str = claims.get("sub")
    if not user_id_str:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing user ID"
        )

    try:
        user_uuid = UUID(user_id_str)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID format"
        )

    user = db.execute(
        select(User).where(User.id == user_uuid)
    ).scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account deactivated"
        )

    return {
        "user": user,
        "claims": claims
    }


def require_roles(required_roles: List[str]):
    """
    Create a dependency that requires specific roles.
    Usage: ctx = Depends(require_roles(["ADMIN", "TEACHER"]))
    """
    def role_checker(ctx=Depends(get_current_user)):
        user = ctx["user"]
        if not user.has_any_role(required_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {required_roles}"
            )
        return ctx
    return role_checker


def require_admin(ctx=Depends(get_current_user)):
    """Require admin role"""
    if not ctx["user"].is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return ctx


def require_staff(ctx=Depends(get_current_user)):
    """Require admin or semi-admin role"""
    if not ctx["user"].has_any_role(STAFF_ROLES):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff access required"
        )
    return ctx


def require_teacher(ctx=Depends(get_current_user)):
    """Require teacher role or admin"""
    if not ctx["user"].has_any_role([UserRole.TEACHER.value, UserRole.ADMIN.value]):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Teacher access required"
        )
    return ctx
