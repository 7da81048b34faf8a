from dataclasses import dataclass
from decimal import Decimal

from prestamistas.utils.loan_calculations import money

STATUS_ACTIVE = "active"
STATUS_PAID = "paid"
STATUS_OVERDUE = "overdue"
STATUS_CANCELLED = "cancelled"
STATUS_DELINQUENT = "delinquent"
LOAN_STATUSES = (STATUS_ACTIVE, STATUS_PAID, STATUS_OVERDUE, STATUS_CANCELLED, STATUS_DELINQUENT)

ARREARS_STATUSES = (STATUS_DELINQUENT, STATUS_OVERDUE)
PAYABLE_STATUSES = (STATUS_ACTIVE, STATUS_OVERDUE, STATUS_DELINQUENT)
CLOSED_STATUSES = (STATUS_PAID, STATUS_CANCELLED)

STANDING_FILTERS = ("all", "in_arrears", "current", "active")


@dataclass(frozen=True)
class CreditStanding:
    in_arrears: bool = False
    has_active_credit: bool = False
    current: bool = False


def classify_loan_statuses(statuses) -> CreditStanding:
    """
    Independent flags over one customer's loans: a customer can have active
    credit on one loan while being in arrears on another.
    """
    in_arrears = False
    has_active = False
    for s in statuses:
        if s in ARREARS_STATUSES:
            in_arrears = True
        elif s == STATUS_ACTIVE:
            has_active = True

    return CreditStanding(
        in_arrears=in_arrears,
        has_active_credit=has_active,
        current=has_active and not in_arrears,
    )


def customer_debt(loans) -> Decimal:
    """Outstanding balance still owed on loans that are not paid or cancelled."""
    total = money(0)
    for loan in loans:
        pending = money(loan.outstanding_balance)
        if pending > 0 and loan.status not in CLOSED_STATUSES:
            total += pending
    return money(total)


def matches_standing(standing: CreditStanding, wanted: str) -> bool:
    if wanted == "in_arrears":
        return standing.in_arrears
    if wanted == "current":
        return standing.current
    if wanted == "active":
        return standing.has_active_credit
    return True
