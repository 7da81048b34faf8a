from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from prestamistas.utils.database import Base


class Customer(Base):
    __tablename__ = "customers"

    customer_id = Column(Integer, primary_key=True, index=True)
    identity_document = Column(String(50), unique=True, nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(255), nullable=True)
    birth_date = Column(Date, nullable=True)
    marital_status = Column(String(30), nullable=True)
    occupation = Column(String(100), nullable=True)
    personal_references = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    avatar_url = Column(String(500), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True, server_default="true")

    created_by = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True)
    created_on = Column(DateTime, server_default=func.now())
    updated_on = Column(DateTime, server_default=func.now(), onupdate=func.now())

    loans = relationship("Loan", back_populates="customer", passive_deletes=True)
