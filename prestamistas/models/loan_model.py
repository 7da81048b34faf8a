from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    DateTime,
    Numeric,
    Text,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from prestamistas.utils.database import Base


class Loan(Base):
    __tablename__ = "loans"

    __table_args__ = (
        Index("ix_loans_status", "status"),
        Index("ix_loans_customer_status", "customer_id", "status"),
        Index("ix_loans_owner_status", "created_by", "status"),
    )

    loan_id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.customer_id", ondelete="RESTRICT"), nullable=False, index=True)

    principal_amount = Column(Numeric(12, 2), nullable=False)
    interest_rate = Column(Numeric(7, 2), nullable=False)
    # simple / compound
    interest_type = Column(String(10), nullable=False, server_default="simple")
    term_days = Column(Integer, nullable=False)

    start_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)

    # derived when the loan is created or edited, never from current settings
    total_payable = Column(Numeric(12, 2), nullable=False)
    amount_paid = Column(Numeric(12, 2), nullable=False, server_default="0")
    outstanding_balance = Column(Numeric(12, 2), nullable=False)

    # active / paid / overdue / cancelled / delinquent
    status = Column(String(20), nullable=False, server_default="active")
    # daily / weekly / biweekly / monthly
    payment_frequency = Column(String(20), nullable=False, server_default="daily")

    description = Column(Text, nullable=True)
    collateral = Column(Text, nullable=True)

    created_by = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True)
    created_on = Column(DateTime, server_default=func.now())
    updated_on = Column(DateTime, server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="loans")
    payments = relationship(
        "Payment",
        back_populates="loan",
        cascade="all, delete-orphan",
    )
