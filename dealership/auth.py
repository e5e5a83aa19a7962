# dealership/auth.py
"""Accounts, login sessions and the per-request session context.

A session token arrives either as the ``session_token`` cookie or as a bearer
token. It is resolved once per request into a ``SessionContext`` carrying the
user and the admin capability read from the user's role.
"""
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from fastapi import Cookie, Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud
from .db import get_db
from .models import User, UserSession, ROLE_ADMIN, ROLE_CUSTOMER
from .utils import logger

SESSION_COOKIE = "session_token"
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

security = HTTPBearer(auto_error=False)


class AuthError(ValueError):
    """Sign-up or sign-in rejected; the message is safe to show the user."""


class DuplicateAccount(AuthError):
    pass


@dataclass(frozen=True)
class SessionContext:
    user: User
    is_admin: bool

    @classmethod
    def load(cls, user: User) -> "SessionContext":
        return cls(user=user, is_admin=user.role == ROLE_ADMIN)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, stored: str) -> bool:
    try:
        return pwd_context.verify(password, stored)
    except ValueError:
        # stored value is not a hash this context recognises
        return False


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def sign_up(db: Session, email: str, password: str, full_name: str) -> User:
    if not full_name.strip():
        raise AuthError("Please enter your full name")
    if crud.get_user_by_email(db, email):
        raise DuplicateAccount("An account with this email already exists. Please sign in instead.")
    try:
        user = crud.create_user(db, email, full_name.strip(), hash_password(password), ROLE_CUSTOMER)
    except IntegrityError:
        db.rollback()
        raise DuplicateAccount("An account with this email already exists. Please sign in instead.")
    logger.info("Created account %s", user.id)
    return user


def sign_in(db: Session, email: str, password: str, ttl_days: int = 7) -> Tuple[User, UserSession]:
    user = crud.get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise AuthError("Invalid email or password. Please try again.")
    crud.purge_expired_sessions(db)
    expires_at = datetime.now(timezone.utc) + timedelta(days=ttl_days)
    session = crud.create_session(db, user.id, secrets.token_urlsafe(32), expires_at)
    logger.info("User %s signed in", user.id)
    return user, session


def sign_out(db: Session, user: User) -> None:
    crud.delete_sessions_for_user(db, user.id)
    logger.info("User %s signed out", user.id)


def resolve_session(db: Session, token: Optional[str]) -> Optional[SessionContext]:
    if not token:
        return None
    session = crud.get_session(db, token)
    if not session:
        return None
    if _as_utc(session.expires_at) < datetime.now(timezone.utc):
        crud.delete_session(db, token)
        return None
    return SessionContext.load(session.user)


def get_session_context(
    session_token: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[SessionContext]:
    token = session_token
    if not token and credentials:
        token = credentials.credentials
    return resolve_session(db, token)


def require_user(context: Optional[SessionContext] = Depends(get_session_context)) -> SessionContext:
    if context is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return context


def require_admin(context: SessionContext = Depends(require_user)) -> SessionContext:
    if not context.is_admin:
        raise HTTPException(status_code=403, detail="Only administrators can add vehicles.")
    return context
