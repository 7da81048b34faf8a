from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import date, datetime
from typing import Optional, Literal

Role = Literal["admin", "lender", "operator"]
Sex = Literal["male", "female", "other"]


class UserProfileBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    identity_document: Optional[str] = None
    mobile: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    sex: Optional[Sex] = None
    birth_date: Optional[date] = None
    avatar_url: Optional[str] = None

    @field_validator(
        "identity_document", "mobile", "country", "region", "city", "address", "avatar_url",
        mode="before",
    )
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class RegisterIn(UserProfileBase):
    """Self-registration; the account stays inactive until approved."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    last_name: str = Field(..., min_length=1, max_length=100)
    identity_document: str = Field(..., min_length=1)
    mobile: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    sex: Sex


class UserCreate(UserProfileBase):
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Role = "lender"
    is_active: bool = True


class UserUpdate(UserProfileBase):
    email: EmailStr
    role: Role
    is_active: bool


class ProfileUpdate(UserProfileBase):
    pass


class PasswordSet(BaseModel):
    password: str = Field(..., min_length=6)


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class UserOut(BaseModel):
    user_id: int
    email: str
    first_name: str
    last_name: str
    identity_document: Optional[str] = None
    mobile: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    sex: Optional[str] = None
    birth_date: Optional[date] = None
    avatar_url: Optional[str] = None
    role: str
    is_active: bool
    created_on: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
