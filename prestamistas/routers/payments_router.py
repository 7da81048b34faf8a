import calendar
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload

from prestamistas.core.security import get_current_user
from prestamistas.models.loan_model import Loan
from prestamistas.models.payment_model import Payment
from prestamistas.models.user_model import User
from prestamistas.routers.loans_router import recompute_paid
from prestamistas.schemas import PaymentCreate, PaymentOut, PaymentUpdate, PaymentWithLoanOut
from prestamistas.utils.access_scope import get_scoped_or_404, scoped
from prestamistas.utils.credit_status import PAYABLE_STATUSES
from prestamistas.utils.database import get_db
from prestamistas.utils.loan_calculations import money

router = APIRouter(prefix="/payments", tags=["Payments"])
logger = logging.getLogger(__name__)


# -------------------------------------------------
# Helpers
# -------------------------------------------------
def month_bounds(month: str):
    """'2024-05' -> (2024-05-01, 2024-05-31)"""
    try:
        year, mon = (int(p) for p in month.split("-"))
        last_day = calendar.monthrange(year, mon)[1]
        return date(year, mon, 1), date(year, mon, last_day)
    except (ValueError, TypeError):
        raise HTTPException(422, "month must look like YYYY-MM")


def _payable_loan(db: Session, loan_id: int, current_user: User) -> Loan:
    loan = scoped(db, Loan, current_user).filter(Loan.loan_id == loan_id).first()
    if not loan:
        raise HTTPException(400, "Invalid loan_id")
    if loan.status not in PAYABLE_STATUSES:
        raise HTTPException(400, f"Loan status not eligible for payment: {loan.status}")
    return loan


def _check_within_balance(loan: Loan, amount, already_counted=0) -> None:
    """
    A payment may settle the loan but never overpay it.
    already_counted: this payment's previous amount when it stays on the same loan.
    """
    available = money(loan.outstanding_balance) + money(already_counted)
    if money(amount) > available:
        raise HTTPException(400, f"Payment exceeds outstanding balance of {available}")


# READ ALL
@router.get("", response_model=list[PaymentWithLoanOut])
def list_payments(
        month: Optional[str] = Query(None, description="YYYY-MM"),
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        loan_id: Optional[int] = None,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    if month:
        date_from, date_to = month_bounds(month)

    q = scoped(db, Payment, current_user).options(
        joinedload(Payment.loan).joinedload(Loan.customer)
    )
    if date_from:
        q = q.filter(Payment.payment_date >= date_from)
    if date_to:
        q = q.filter(Payment.payment_date <= date_to)
    if loan_id is not None:
        q = q.filter(Payment.loan_id == loan_id)

    return q.order_by(Payment.payment_date.desc(), Payment.payment_id.desc()).all()


# CREATE
@router.post("", response_model=PaymentOut, status_code=status.HTTP_201_CREATED)
def create_payment(
        payload: PaymentCreate,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    loan = _payable_loan(db, payload.loan_id, current_user)
    _check_within_balance(loan, payload.amount)

    payment = Payment(
        loan_id=loan.loan_id,
        amount=money(payload.amount),
        payment_date=payload.payment_date or date.today(),
        payment_type=payload.payment_type,
        payment_method=payload.payment_method,
        receipt_no=payload.receipt_no,
        notes=payload.notes,
        created_by=current_user.user_id,
    )
    try:
        db.add(payment)
        recompute_paid(db, loan)
        db.commit()
    except Exception:
        logger.exception("Payment creation failed for loan %s", loan.loan_id)
        db.rollback()
        raise

    db.refresh(payment)
    logger.info(
        "Payment %s of %s on loan %s by user %s, outstanding now %s",
        payment.payment_id, payment.amount, loan.loan_id, current_user.user_id, loan.outstanding_balance,
    )
    return payment


# READ ONE
@router.get("/{payment_id}", response_model=PaymentWithLoanOut)
def get_payment(payment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_scoped_or_404(db, Payment, payment_id, current_user, "Payment")


# UPDATE
@router.put("/{payment_id}", response_model=PaymentOut)
def update_payment(
        payment_id: int,
        payload: PaymentUpdate,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    payment = get_scoped_or_404(db, Payment, payment_id, current_user, "Payment")
    old_loan = payment.loan

    if payload.loan_id != payment.loan_id:
        new_loan = _payable_loan(db, payload.loan_id, current_user)
        _check_within_balance(new_loan, payload.amount)
        payment.loan = new_loan
    else:
        new_loan = old_loan
        _check_within_balance(new_loan, payload.amount, already_counted=payment.amount)

    payment.amount = money(payload.amount)
    payment.payment_date = payload.payment_date
    payment.payment_type = payload.payment_type
    payment.payment_method = payload.payment_method
    payment.receipt_no = payload.receipt_no
    payment.notes = payload.notes

    recompute_paid(db, new_loan)
    if old_loan is not new_loan:
        recompute_paid(db, old_loan)

    db.commit()
    db.refresh(payment)
    logger.info("Payment %s updated by user %s", payment_id, current_user.user_id)
    return payment


# DELETE
@router.delete("/{payment_id}")
def delete_payment(payment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    payment = get_scoped_or_404(db, Payment, payment_id, current_user, "Payment")
    loan = payment.loan

    db.delete(payment)
    recompute_paid(db, loan)
    db.commit()
    logger.info("Payment %s deleted by user %s", payment_id, current_user.user_id)
    return {"message": "Payment deleted successfully"}
