from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional, Literal

InterestType = Literal["simple", "compound"]
LoanStatus = Literal["active", "paid", "overdue", "cancelled", "delinquent"]
PaymentFrequency = Literal["daily", "weekly", "biweekly", "monthly"]


class LoanQuoteIn(BaseModel):
    principal_amount: float = Field(ge=0)
    interest_rate: float = Field(ge=0)
    interest_type: InterestType = "simple"
    term_days: int = Field(ge=1)
    start_date: Optional[date] = None
    amount_paid: float = Field(0, ge=0)


class LoanQuoteOut(BaseModel):
    total_payable: float
    interest_amount: float
    outstanding_balance: float
    due_date: date


class LoanCreate(BaseModel):
    customer_id: int
    principal_amount: float = Field(ge=0)
    # omitted -> default_interest_rate setting
    interest_rate: Optional[float] = Field(None, ge=0)
    interest_type: InterestType = "simple"
    term_days: int = Field(30, ge=1)
    start_date: date
    payment_frequency: PaymentFrequency = "daily"
    status: LoanStatus = "active"
    description: Optional[str] = None
    collateral: Optional[str] = None


class LoanUpdate(BaseModel):
    """Full replace of the editable fields; paid amount is kept."""
    customer_id: int
    principal_amount: float = Field(ge=0)
    interest_rate: float = Field(ge=0)
    interest_type: InterestType
    term_days: int = Field(ge=1)
    start_date: date
    payment_frequency: PaymentFrequency
    status: Optional[LoanStatus] = None
    description: Optional[str] = None
    collateral: Optional[str] = None


class CustomerMiniOut(BaseModel):
    customer_id: int
    identity_document: str
    first_name: str
    last_name: str

    class Config:
        from_attributes = True


class LoanOut(BaseModel):
    loan_id: int
    customer_id: int

    principal_amount: float
    interest_rate: float
    interest_type: str
    term_days: int
    start_date: date
    due_date: date

    total_payable: float
    amount_paid: float
    outstanding_balance: float

    status: str
    payment_frequency: str
    description: Optional[str] = None
    collateral: Optional[str] = None

    created_by: Optional[int] = None
    created_on: Optional[datetime] = None
    updated_on: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoanWithCustomerOut(LoanOut):
    customer: Optional[CustomerMiniOut] = None


class LoanDefaultsOut(BaseModel):
    interest_rate: float
    interest_type: str = "simple"
    term_days: int = 30
    payment_frequency: str = "daily"


class LoanStatsOut(BaseModel):
    total: int = 0
    active: int = 0
    paid: int = 0
    overdue: int = 0
    cancelled: int = 0
    delinquent: int = 0
