from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.database import Base


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TransactionStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    SUBMITTED = "submitted"


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(50), nullable=False)
    id_number = Column(String(13), nullable=False)
    account_number = Column(String(16), nullable=False, index=True)
    username = Column(String(20), nullable=False, unique=True)
    password = Column(String(60), nullable=False)  # bcrypt digest
    salt = Column(String(29), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    transactions = relationship("Transaction", back_populates="customer")


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(20), nullable=False, unique=True)
    name = Column(String(50), nullable=False)
    role = Column(String(20), nullable=False, default="verifier")
    password = Column(String(60), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    provider = Column(String(10), nullable=False)
    payee_account = Column(String(16), nullable=False)
    swift_code = Column(String(11), nullable=False)
    status = Column(String(10), nullable=False, default=TransactionStatus.PENDING.value, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    # audit trail, filled in by the ledger's conditional transitions
    verified_by = Column(String(50), nullable=True)
    verified_by_id = Column(Integer, nullable=True)
    verified_at = Column(DateTime, nullable=True)
    submitted_by_id = Column(Integer, nullable=True)
    submitted_at = Column(DateTime, nullable=True)

    customer = relationship("Customer", back_populates="transactions")
