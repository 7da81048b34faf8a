from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime
from sqlalchemy.sql import func

from prestamistas.utils.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, server_default="")
    identity_document = Column(String(50), nullable=True)
    mobile = Column(String(30), nullable=True)

    country = Column(String(80), nullable=True)
    region = Column(String(80), nullable=True)
    city = Column(String(80), nullable=True)
    address = Column(String(255), nullable=True)

    # male / female / other
    sex = Column(String(10), nullable=True)
    birth_date = Column(Date, nullable=True)
    avatar_url = Column(String(500), nullable=True)

    # admin / lender / operator
    role = Column(String(20), nullable=False, server_default="lender")
    # stays false until an admin approves the account
    is_active = Column(Boolean, nullable=False, default=False, server_default="false")

    created_on = Column(DateTime, server_default=func.now())
    updated_on = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def id(self):
        return self.user_id
