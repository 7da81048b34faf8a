import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from prestamistas.core.security import (
    INACTIVE_ACCOUNT_DETAIL,
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from prestamistas.models.user_model import User
from prestamistas.schemas.user_schemas import (
    PasswordChange,
    ProfileUpdate,
    RegisterIn,
    TokenOut,
    UserOut,
)
from prestamistas.utils.database import get_db

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "first_name", "last_name", "identity_document", "mobile", "country",
    "region", "city", "address", "sex", "birth_date", "avatar_url",
)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    email = payload.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(409, "Email already registered")

    user = User(
        email=email,
        password_hash=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        identity_document=payload.identity_document,
        mobile=payload.mobile,
        country=payload.country or "Colombia",
        region=payload.region or "Antioquia",
        city=payload.city,
        address=payload.address,
        sex=payload.sex,
        birth_date=payload.birth_date,
        role="lender",
        is_active=False,
    )

    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "Email already registered")

    db.refresh(user)
    logger.info("Registration request from %s (user %s), pending approval", email, user.user_id)
    return user


@router.post("/login", response_model=TokenOut)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    email = form_data.username.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        logger.warning("Failed login for %s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # no token is ever issued to an account that is not approved
    if not user.is_active:
        logger.warning("Login refused for inactive user %s", user.user_id)
        raise HTTPException(status.HTTP_403_FORBIDDEN, INACTIVE_ACCOUNT_DETAIL)

    logger.info("User %s logged in", user.user_id)
    return TokenOut(
        access_token=create_access_token(user.user_id),
        user=UserOut.model_validate(user),
    )


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=UserOut)
def update_me(
        payload: ProfileUpdate,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    for field in PROFILE_FIELDS:
        setattr(current_user, field, getattr(payload, field))

    db.commit()
    db.refresh(current_user)
    return current_user


@router.post("/me/password")
def change_my_password(
        payload: PasswordChange,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    if not verify_password(payload.current_password, current_user.password_hash):
        raise HTTPException(400, "Current password is incorrect")

    current_user.password_hash = hash_password(payload.new_password)
    db.commit()
    logger.info("User %s changed their password", current_user.user_id)
    return {"message": "Password updated"}
