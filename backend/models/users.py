# backend/models/users.py
from sqlalchemy import Column, Integer, String, CheckConstraint
from database import Base


# Register account. "admin" manages the catalog and labels, "cashier" sells
class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'cashier')", name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="cashier")
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
