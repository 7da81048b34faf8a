"""Password hashing, JWT tokens and the current-user dependencies."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from prestamistas.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGO, JWT_SECRET
from prestamistas.models.user_model import User
from prestamistas.utils.access_scope import is_admin
from prestamistas.utils.database import get_db

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

INACTIVE_ACCOUNT_DETAIL = "Account pending approval by an administrator"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, plain_password)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return jwt.encode({"sub": str(user_id), "exp": expire}, JWT_SECRET, algorithm=JWT_ALGO)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGO])
    except JWTError:
        return None


def get_current_user(
        token: str = Depends(oauth2_scheme),
        db: Session = Depends(get_db),
) -> User:
    payload = decode_access_token(token)
    sub = payload.get("sub") if payload else None
    if not sub or not str(sub).isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.user_id == int(sub)).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # an account switched off after login loses its session immediately
    if not user.is_active:
        logger.warning("Rejected token for inactive user %s", user.user_id)
        raise HTTPException(status.HTTP_403_FORBIDDEN, INACTIVE_ACCOUNT_DETAIL)

    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not is_admin(current_user):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Administrator role required")
    return current_user
