# prestamistas/routers/customers_router.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from prestamistas.core.security import get_current_user
from prestamistas.models.customer_model import Customer
from prestamistas.models.loan_model import Loan
from prestamistas.models.user_model import User
from prestamistas.schemas import CustomerCreate, CustomerListOut, CustomerOut, CustomerUpdate
from prestamistas.utils.access_scope import get_scoped_or_404, scoped
from prestamistas.utils.credit_status import (
    STANDING_FILTERS,
    classify_loan_statuses,
    customer_debt,
    matches_standing,
)
from prestamistas.utils.database import get_db

router = APIRouter(prefix="/customers", tags=["Customers"])
logger = logging.getLogger(__name__)


def _duplicate_document(db: Session, document: str, exclude_id: Optional[int] = None) -> bool:
    # uniqueness is global, not per owner
    q = db.query(Customer.customer_id).filter(Customer.identity_document == document)
    if exclude_id is not None:
        q = q.filter(Customer.customer_id != exclude_id)
    return q.first() is not None


# READ ALL (with debt + credit standing)
@router.get("", response_model=list[CustomerListOut])
def list_customers(
        search: Optional[str] = Query(None, description="Name or document substring"),
        standing: str = Query("all", description="all / in_arrears / current / active"),
        active_only: bool = False,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    if standing not in STANDING_FILTERS:
        raise HTTPException(422, f"standing must be one of {', '.join(STANDING_FILTERS)}")

    query = scoped(db, Customer, current_user)
    if active_only:
        query = query.filter(Customer.is_active.is_(True))
    if search:
        like = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Customer.first_name.ilike(like),
                Customer.last_name.ilike(like),
                Customer.identity_document.ilike(like),
            )
        )
    customers = query.order_by(Customer.created_on.desc(), Customer.customer_id.desc()).all()
    if not customers:
        return []

    # loans are scoped as well: a lender only sees debt on loans they issued
    loans = (
        scoped(db, Loan, current_user)
        .filter(Loan.customer_id.in_([c.customer_id for c in customers]))
        .all()
    )
    by_customer = {}
    for loan in loans:
        by_customer.setdefault(loan.customer_id, []).append(loan)

    out = []
    for c in customers:
        c_loans = by_customer.get(c.customer_id, [])
        flags = classify_loan_statuses([l.status for l in c_loans])
        if not matches_standing(flags, standing):
            continue
        row = CustomerListOut.model_validate(c)
        row.debt = float(customer_debt(c_loans))
        row.in_arrears = flags.in_arrears
        row.has_active_credit = flags.has_active_credit
        row.current = flags.current
        out.append(row)
    return out


# CREATE
@router.post("", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def create_customer(
        payload: CustomerCreate,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    if _duplicate_document(db, payload.identity_document):
        raise HTTPException(409, "A customer with this identity document already exists")

    customer = Customer(**payload.model_dump(), created_by=current_user.user_id)
    try:
        db.add(customer)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "A customer with this identity document already exists")

    db.refresh(customer)
    logger.info("Customer %s created by user %s", customer.customer_id, current_user.user_id)
    return customer


# READ ONE
@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(
        customer_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    return get_scoped_or_404(db, Customer, customer_id, current_user, "Customer")


# UPDATE
@router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(
        customer_id: int,
        payload: CustomerUpdate,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    customer = get_scoped_or_404(db, Customer, customer_id, current_user, "Customer")

    if _duplicate_document(db, payload.identity_document, exclude_id=customer_id):
        raise HTTPException(409, "A customer with this identity document already exists")

    for field, value in payload.model_dump().items():
        setattr(customer, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "A customer with this identity document already exists")

    db.refresh(customer)
    logger.info("Customer %s updated by user %s", customer_id, current_user.user_id)
    return customer


# DELETE
@router.delete("/{customer_id}")
def delete_customer(
        customer_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
):
    customer = get_scoped_or_404(db, Customer, customer_id, current_user, "Customer")

    has_loans = db.query(Loan.loan_id).filter(Loan.customer_id == customer_id).first()
    if has_loans:
        raise HTTPException(409, "Customer cannot be deleted while loans reference it")

    db.delete(customer)
    db.commit()
    logger.info("Customer %s deleted by user %s", customer_id, current_user.user_id)
    return {"message": "Customer deleted successfully"}
