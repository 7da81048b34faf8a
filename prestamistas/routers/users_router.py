# prestamistas/routers/users_router.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from prestamistas.core.security import hash_password, require_admin
from prestamistas.models.user_model import User
from prestamistas.routers.auth_router import PROFILE_FIELDS
from prestamistas.schemas import PasswordSet, UserCreate, UserOut, UserUpdate
from prestamistas.utils.database import get_db

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(404, "User not found")
    return user


# READ ALL
@router.get("", response_model=list[UserOut])
def list_users(
        pending: bool = False,
        db: Session = Depends(get_db),
        admin: User = Depends(require_admin),
):
    query = db.query(User)
    if pending:
        query = query.filter(User.is_active.is_(False))
    return query.order_by(User.created_on.desc(), User.user_id.desc()).all()


# CREATE
@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
        payload: UserCreate,
        db: Session = Depends(get_db),
        admin: User = Depends(require_admin),
):
    email = payload.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(409, "Email already registered")

    user = User(
        email=email,
        password_hash=hash_password(payload.password),
        role=payload.role,
        is_active=payload.is_active,
        **{f: getattr(payload, f) for f in PROFILE_FIELDS},
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "Email already registered")

    db.refresh(user)
    logger.info("Admin %s created user %s (%s)", admin.user_id, user.user_id, user.role)
    return user


# READ ONE
@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return _get_user_or_404(db, user_id)


# UPDATE
@router.put("/{user_id}", response_model=UserOut)
def update_user(
        user_id: int,
        payload: UserUpdate,
        db: Session = Depends(get_db),
        admin: User = Depends(require_admin),
):
    user = _get_user_or_404(db, user_id)

    email = payload.email.lower()
    dup = db.query(User).filter(User.email == email, User.user_id != user_id).first()
    if dup:
        raise HTTPException(409, "Email already in use")

    if user.user_id == admin.user_id and (payload.role != "admin" or not payload.is_active):
        raise HTTPException(400, "You cannot demote or deactivate your own account")

    user.email = email
    user.role = payload.role
    user.is_active = payload.is_active
    for field in PROFILE_FIELDS:
        setattr(user, field, getattr(payload, field))

    db.commit()
    db.refresh(user)
    logger.info("Admin %s updated user %s", admin.user_id, user.user_id)
    return user


@router.post("/{user_id}/approve", response_model=UserOut)
def approve_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    user = _get_user_or_404(db, user_id)
    user.is_active = True
    db.commit()
    db.refresh(user)
    logger.info("Admin %s approved user %s", admin.user_id, user.user_id)
    return user


@router.post("/{user_id}/password")
def set_user_password(
        user_id: int,
        payload: PasswordSet,
        db: Session = Depends(get_db),
        admin: User = Depends(require_admin),
):
    user = _get_user_or_404(db, user_id)
    user.password_hash = hash_password(payload.password)
    db.commit()
    logger.info("Admin %s reset the password of user %s", admin.user_id, user.user_id)
    return {"message": "Password updated"}


# DELETE
@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    user = _get_user_or_404(db, user_id)
    if user.user_id == admin.user_id:
        raise HTTPException(400, "You cannot delete your own account")

    db.delete(user)
    db.commit()
    logger.info("Admin %s deleted user %s", admin.user_id, user_id)
    return {"message": "User deleted successfully"}
