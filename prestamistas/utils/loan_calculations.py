from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

INTEREST_SIMPLE = "simple"
INTEREST_COMPOUND = "compound"
INTEREST_TYPES = (INTEREST_SIMPLE, INTEREST_COMPOUND)

# interest is quoted per 30-day period
PERIOD_DAYS = Decimal("30")


def money(x) -> Decimal:
    """Always return 2-decimal Decimal with HALF_UP rounding."""
    if x is None:
        x = 0
    if not isinstance(x, Decimal):
        x = Decimal(str(x))
    return x.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def parse_amount(raw) -> Decimal:
    """
    Parse a form-style numeric value ("1500", "12.5", 7).

    Raises ValueError on empty or non-numeric input so callers can reject
    it before any calculation runs.
    """
    if raw is None or isinstance(raw, bool):
        raise ValueError("A numeric value is required")
    text = str(raw).strip()
    if not text:
        raise ValueError("A numeric value is required")
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Not a number: {raw!r}")
    if not value.is_finite():
        raise ValueError(f"Not a number: {raw!r}")
    return value


def compute_total_payable(
        principal,
        interest_rate_percent,
        term_days: int,
        interest_type: str = INTEREST_SIMPLE,
) -> Decimal:
    """
    SIMPLE:
      total = principal * (1 + (rate% / 100) * (days / 30))
    COMPOUND (per 30-day period):
      total = principal * (1 + rate% / 100) ** (days / 30)

    Example:
      principal=1000, rate=5, days=60 => simple 1100.00, compound 1102.50

    Zero principal or zero term gives 0.00 without computing anything.
    """
    if interest_type not in INTEREST_TYPES:
        raise ValueError(f"Unknown interest type: {interest_type}")

    principal = Decimal(str(principal or 0))
    days = int(term_days or 0)
    if principal <= 0 or days <= 0:
        return money(0)

    rate = Decimal(str(interest_rate_percent or 0)) / Decimal("100")
    periods = Decimal(days) / PERIOD_DAYS

    if interest_type == INTEREST_SIMPLE:
        total = principal * (Decimal("1") + rate * periods)
    else:
        total = principal * ((Decimal("1") + rate) ** periods)

    return money(total)


def compute_outstanding_balance(total_payable, amount_paid=None) -> Decimal:
    """total - paid; a new loan has nothing paid yet."""
    return money(money(total_payable) - money(amount_paid))


def compute_due_date(start_date: date, term_days: int) -> date:
    """Calendar days, no business-day adjustment."""
    return start_date + timedelta(days=int(term_days))


@dataclass(frozen=True)
class LoanQuote:
    total_payable: Decimal
    interest_amount: Decimal
    outstanding_balance: Decimal
    due_date: date


def quote_loan(
        principal,
        interest_rate_percent,
        term_days: int,
        interest_type: str,
        start_date: date,
        amount_paid=None,
) -> LoanQuote:
    total = compute_total_payable(principal, interest_rate_percent, term_days, interest_type)
    interest = money(total - money(principal)) if total > 0 else money(0)
    return LoanQuote(
        total_payable=total,
        interest_amount=interest,
        outstanding_balance=compute_outstanding_balance(total, amount_paid),
        due_date=compute_due_date(start_date, term_days),
    )
