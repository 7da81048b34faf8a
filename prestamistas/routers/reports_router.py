from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from prestamistas.core.security import get_current_user, require_admin
from prestamistas.models.customer_model import Customer
from prestamistas.models.loan_model import Loan
from prestamistas.models.payment_model import Payment
from prestamistas.models.user_model import User
from prestamistas.routers.payments_router import month_bounds
from prestamistas.schemas import DashboardOut, LoanOut, LoanWithCustomerOut, PaymentWithLoanOut, RangeReportOut
from prestamistas.utils.access_scope import scoped
from prestamistas.utils.credit_status import STATUS_ACTIVE, STATUS_OVERDUE
from prestamistas.utils.database import get_db
from prestamistas.utils.loan_calculations import money

router = APIRouter(prefix="/reports", tags=["Reports"])

OVERDUE_LIST_LIMIT = 10


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(
        today: Optional[date] = None,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    today = today or date.today()
    month_start, month_end = month_bounds(today.strftime("%Y-%m"))

    total_customers = (
        scoped(db, Customer, current_user)
        .filter(Customer.is_active.is_(True))
        .count()
    )

    loans = scoped(db, Loan, current_user)
    total_loans = loans.count()
    active_loans = loans.filter(Loan.status == STATUS_ACTIVE).count()
    overdue_q = loans.filter(Loan.status == STATUS_OVERDUE)
    overdue_loans = overdue_q.count()
    overdue_list = overdue_q.order_by(Loan.due_date.asc()).limit(OVERDUE_LIST_LIMIT).all()

    lent, outstanding, recovered = loans.with_entities(
        func.coalesce(func.sum(Loan.principal_amount), 0),
        func.coalesce(func.sum(Loan.outstanding_balance), 0),
        func.coalesce(func.sum(Loan.amount_paid), 0),
    ).one()

    paid_this_month = (
        scoped(db, Payment, current_user)
        .filter(Payment.payment_date >= month_start, Payment.payment_date <= month_end)
        .with_entities(func.coalesce(func.sum(Payment.amount), 0))
        .scalar()
    )

    return DashboardOut(
        total_customers=total_customers,
        total_loans=total_loans,
        active_loans=active_loans,
        overdue_loans=overdue_loans,
        amount_lent=float(money(lent)),
        amount_outstanding=float(money(outstanding)),
        amount_recovered=float(money(recovered)),
        payments_this_month=float(money(paid_this_month)),
        overdue_list=[LoanOut.model_validate(l) for l in overdue_list],
    )


@router.get("/summary", response_model=RangeReportOut)
def range_summary(
        date_from: date,
        date_to: date,
        db: Session = Depends(get_db),
        admin: User = Depends(require_admin),
):
    if date_from > date_to:
        raise HTTPException(422, "date_from must not be after date_to")

    loans = (
        scoped(db, Loan, admin)
        .options(joinedload(Loan.customer))
        .filter(Loan.start_date >= date_from, Loan.start_date <= date_to)
        .order_by(Loan.start_date.desc(), Loan.loan_id.desc())
        .all()
    )
    payments = (
        scoped(db, Payment, admin)
        .options(joinedload(Payment.loan).joinedload(Loan.customer))
        .filter(Payment.payment_date >= date_from, Payment.payment_date <= date_to)
        .order_by(Payment.payment_date.desc(), Payment.payment_id.desc())
        .all()
    )

    return RangeReportOut(
        date_from=date_from,
        date_to=date_to,
        loans=[LoanWithCustomerOut.model_validate(l) for l in loans],
        payments=[PaymentWithLoanOut.model_validate(p) for p in payments],
        total_lent=float(money(sum((money(l.principal_amount) for l in loans), money(0)))),
        total_collected=float(money(sum((money(p.amount) for p in payments), money(0)))),
        loan_count=len(loans),
        payment_count=len(payments),
    )
