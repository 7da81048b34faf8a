from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Numeric, Text, ForeignKey
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from prestamistas.utils.database import Base


class Payment(Base):
    __tablename__ = "payments"

    payment_id = Column(Integer, primary_key=True, index=True)
    loan_id = Column(Integer, ForeignKey("loans.loan_id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False, index=True)

    # regular / advance / partial / full
    payment_type = Column(String(20), nullable=False, default="regular")
    # cash / transfer / check / card
    payment_method = Column(String(20), nullable=False, default="cash")
    receipt_no = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    created_by = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True)
    created_on = Column(DateTime, server_default=func.now())
    updated_on = Column(DateTime, server_default=func.now(), onupdate=func.now())

    loan = relationship("Loan", back_populates="payments")
