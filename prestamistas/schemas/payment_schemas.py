from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, Literal

from prestamistas.schemas.loan_schema import LoanWithCustomerOut

PaymentType = Literal["regular", "advance", "partial", "full"]
PaymentMethod = Literal["cash", "transfer", "check", "card"]


class PaymentCreate(BaseModel):
    loan_id: int
    amount: float = Field(gt=0)
    payment_date: Optional[date] = None
    payment_type: PaymentType = "regular"
    payment_method: PaymentMethod = "cash"
    receipt_no: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("receipt_no", "notes", mode="before")
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class PaymentUpdate(PaymentCreate):
    payment_date: date


class PaymentOut(BaseModel):
    payment_id: int
    loan_id: int
    amount: float
    payment_date: date
    payment_type: str
    payment_method: str
    receipt_no: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_on: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentWithLoanOut(PaymentOut):
    loan: Optional[LoanWithCustomerOut] = None
