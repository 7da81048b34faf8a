from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import date, datetime
from typing import Optional


class CustomerBase(BaseModel):
    identity_document: str = Field(..., min_length=1, max_length=50)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    birth_date: Optional[date] = None
    marital_status: Optional[str] = None
    occupation: Optional[str] = None
    personal_references: Optional[str] = None
    notes: Optional[str] = None
    avatar_url: Optional[str] = None
    is_active: bool = True

    @field_validator("identity_document", "first_name", "last_name", mode="before")
    def strip_required(cls, v):
        return str(v).strip() if v is not None else v

    @field_validator(
        "phone", "email", "address", "marital_status", "occupation",
        "personal_references", "notes", "avatar_url",
        mode="before",
    )
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(CustomerBase):
    """Full replace of the editable fields."""
    pass


class CustomerOut(CustomerBase):
    customer_id: int
    email: Optional[str] = None
    created_by: Optional[int] = None
    created_on: Optional[datetime] = None
    updated_on: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerListOut(CustomerOut):
    debt: float = 0.0
    in_arrears: bool = False
    has_active_credit: bool = False
    current: bool = False
