import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from prestamistas.core.security import get_current_user
from prestamistas.models.customer_model import Customer
from prestamistas.models.loan_model import Loan
from prestamistas.models.payment_model import Payment
from prestamistas.models.user_model import User
from prestamistas.schemas import (
    CustomerOut,
    LoanCreate,
    LoanDefaultsOut,
    LoanOut,
    LoanQuoteIn,
    LoanQuoteOut,
    LoanStatsOut,
    LoanUpdate,
    LoanWithCustomerOut,
)
from prestamistas.utils.access_scope import get_scoped_or_404, scoped
from prestamistas.utils.credit_status import LOAN_STATUSES, PAYABLE_STATUSES
from prestamistas.utils.database import get_db
from prestamistas.utils.loan_calculations import money, quote_loan
from prestamistas.utils.settings_values import get_number_setting

router = APIRouter(prefix="/loans", tags=["Loans"])
logger = logging.getLogger(__name__)

DEFAULT_RATE_KEY = "default_interest_rate"
DEFAULT_TERM_KEY = "default_term_days"


# -------------------------------------------------
# Helpers
# -------------------------------------------------
def default_interest_rate(db: Session):
    return get_number_setting(db, DEFAULT_RATE_KEY, "5.0")


def apply_terms(loan: Loan, principal, rate, interest_type: str, term_days: int, start_date: date) -> None:
    """
    Derive due date, total and outstanding from the loan terms.
    The amount already paid is kept, so an edit never forgets payments.
    Terms are rounded to their stored precision first, so the stored
    terms always reproduce the stored total.
    """
    principal = money(principal)
    rate = money(rate)
    quote = quote_loan(
        principal=principal,
        interest_rate_percent=rate,
        term_days=term_days,
        interest_type=interest_type,
        start_date=start_date,
        amount_paid=loan.amount_paid,
    )
    loan.principal_amount = principal
    loan.interest_rate = rate
    loan.interest_type = interest_type
    loan.term_days = term_days
    loan.start_date = start_date
    loan.due_date = quote.due_date
    loan.total_payable = quote.total_payable
    loan.outstanding_balance = quote.outstanding_balance


def recompute_paid(db: Session, loan: Loan) -> None:
    """Recompute paid and outstanding from the loan's recorded payments."""
    db.flush()
    paid = (
        db.query(func.coalesce(func.sum(Payment.amount), 0))
        .filter(Payment.loan_id == loan.loan_id)
        .scalar()
    )
    loan.amount_paid = money(paid)
    loan.outstanding_balance = money(money(loan.total_payable) - loan.amount_paid)


def _customer_for_loan(db: Session, customer_id: int, current_user: User) -> Customer:
    customer = scoped(db, Customer, current_user).filter(Customer.customer_id == customer_id).first()
    if not customer:
        raise HTTPException(400, "Invalid customer_id")
    return customer


# =================================================
# 🔹 STATIC ROUTES (ALWAYS FIRST)
# =================================================
@router.get("/defaults", response_model=LoanDefaultsOut)
def loan_defaults(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return LoanDefaultsOut(
        interest_rate=float(default_interest_rate(db)),
        term_days=int(get_number_setting(db, DEFAULT_TERM_KEY, "30")),
    )


@router.post("/quote", response_model=LoanQuoteOut)
def loan_quote(payload: LoanQuoteIn, current_user: User = Depends(get_current_user)):
    quote = quote_loan(
        principal=money(payload.principal_amount),
        interest_rate_percent=money(payload.interest_rate),
        term_days=payload.term_days,
        interest_type=payload.interest_type,
        start_date=payload.start_date or date.today(),
        amount_paid=payload.amount_paid,
    )
    return LoanQuoteOut(
        total_payable=float(quote.total_payable),
        interest_amount=float(quote.interest_amount),
        outstanding_balance=float(quote.outstanding_balance),
        due_date=quote.due_date,
    )


@router.get("/customers", response_model=list[CustomerOut])
def customers_for_new_loan(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return (
        scoped(db, Customer, current_user)
        .filter(Customer.is_active.is_(True))
        .order_by(Customer.first_name.asc(), Customer.last_name.asc())
        .all()
    )


@router.get("/payable", response_model=list[LoanWithCustomerOut])
def payable_loans(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return (
        scoped(db, Loan, current_user)
        .options(joinedload(Loan.customer))
        .filter(Loan.status.in_(PAYABLE_STATUSES))
        .order_by(Loan.created_on.desc(), Loan.loan_id.desc())
        .all()
    )


@router.get("/stats", response_model=LoanStatsOut)
def loan_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    rows = (
        scoped(db, Loan, current_user)
        .with_entities(Loan.status, func.count(Loan.loan_id))
        .group_by(Loan.status)
        .all()
    )

    out = LoanStatsOut()
    for s, c in rows:
        if s in LOAN_STATUSES:
            setattr(out, s, c)
        out.total += c
    return out


# =================================================
# 🔹 LIST / CREATE
# =================================================
@router.get("", response_model=list[LoanWithCustomerOut])
def list_loans(
        status_filter: Optional[str] = Query(None, alias="status"),
        customer_id: Optional[int] = None,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    q = scoped(db, Loan, current_user).options(joinedload(Loan.customer))
    if status_filter:
        if status_filter not in LOAN_STATUSES:
            raise HTTPException(422, f"status must be one of {', '.join(LOAN_STATUSES)}")
        q = q.filter(Loan.status == status_filter)
    if customer_id is not None:
        q = q.filter(Loan.customer_id == customer_id)
    return q.order_by(Loan.created_on.desc(), Loan.loan_id.desc()).all()


@router.post("", response_model=LoanOut, status_code=status.HTTP_201_CREATED)
def create_loan(
        payload: LoanCreate,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    customer = _customer_for_loan(db, payload.customer_id, current_user)
    if not customer.is_active:
        raise HTTPException(400, "Customer is inactive")

    rate = payload.interest_rate
    if rate is None:
        rate = default_interest_rate(db)

    loan = Loan(
        customer_id=customer.customer_id,
        amount_paid=money(0),
        status=payload.status,
        payment_frequency=payload.payment_frequency,
        description=payload.description or None,
        collateral=payload.collateral or None,
        created_by=current_user.user_id,
    )
    apply_terms(loan, payload.principal_amount, rate, payload.interest_type, payload.term_days, payload.start_date)

    try:
        db.add(loan)
        db.commit()
    except Exception:
        logger.exception("Loan creation failed for customer %s", customer.customer_id)
        db.rollback()
        raise

    db.refresh(loan)
    logger.info(
        "Loan %s created by user %s: principal=%s total=%s due=%s",
        loan.loan_id, current_user.user_id, loan.principal_amount, loan.total_payable, loan.due_date,
    )
    return loan


# =================================================
# 🔹 DYNAMIC ROUTES (LAST)
# =================================================
@router.get("/{loan_id}", response_model=LoanWithCustomerOut)
def get_loan(loan_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_scoped_or_404(db, Loan, loan_id, current_user, "Loan")


@router.put("/{loan_id}", response_model=LoanOut)
def update_loan(
        loan_id: int,
        payload: LoanUpdate,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    loan = get_scoped_or_404(db, Loan, loan_id, current_user, "Loan")

    if payload.customer_id != loan.customer_id:
        _customer_for_loan(db, payload.customer_id, current_user)
        loan.customer_id = payload.customer_id

    apply_terms(
        loan,
        payload.principal_amount,
        payload.interest_rate,
        payload.interest_type,
        payload.term_days,
        payload.start_date,
    )
    loan.payment_frequency = payload.payment_frequency
    if payload.status is not None:
        loan.status = payload.status
    loan.description = payload.description or None
    loan.collateral = payload.collateral or None

    db.commit()
    db.refresh(loan)
    logger.info("Loan %s updated by user %s", loan_id, current_user.user_id)
    return loan


@router.delete("/{loan_id}")
def delete_loan(loan_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    loan = get_scoped_or_404(db, Loan, loan_id, current_user, "Loan")

    db.delete(loan)
    db.commit()
    logger.info("Loan %s deleted by user %s", loan_id, current_user.user_id)
    return {"message": "Loan deleted successfully"}
