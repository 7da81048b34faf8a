from pydantic import BaseModel
from datetime import date
from typing import List

from prestamistas.schemas.loan_schema import LoanOut, LoanWithCustomerOut
from prestamistas.schemas.payment_schemas import PaymentWithLoanOut


class DashboardOut(BaseModel):
    total_customers: int
    total_loans: int
    active_loans: int
    overdue_loans: int
    amount_lent: float
    amount_outstanding: float
    amount_recovered: float
    payments_this_month: float
    overdue_list: List[LoanOut]


class RangeReportOut(BaseModel):
    date_from: date
    date_to: date
    loans: List[LoanWithCustomerOut]
    payments: List[PaymentWithLoanOut]
    total_lent: float
    total_collected: float
    loan_count: int
    payment_count: int
