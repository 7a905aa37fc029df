"""
Shared pytest fixtures for all test modules.

Uses an in-memory SQLite database (StaticPool) so every test
function gets a clean, isolated in-memory database.
bcrypt runs at its minimum cost so credential tests stay fast.
"""
import pytest
from datetime import datetime
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from typing import Optional

from app.config import Settings
from app.database import Base, create_db_engine, get_db
from app.dependencies import get_hasher
from app.services.accounts import AccountRegistry
from app.services.credentials import BcryptHasher
from app.services.ledger import TransactionLedger
from app.services.workflow import VerificationWorkflow
from app import models


# ---------------------------------------------------------------------------
# "sqlite://" makes create_db_engine pick StaticPool, so every session
# reuses the same in-memory connection. Foreign keys are switched on by
# the same connect hook production uses.
# ---------------------------------------------------------------------------
TEST_ENGINE = create_db_engine(Settings(database_url="sqlite://"))
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=TEST_ENGINE)

TEST_HASHER = BcryptHasher(rounds=4)

VALID_PASSWORD = "SecurePass123!"


@pytest.fixture(autouse=True)
def reset_db():
    """Drop and recreate all tables before each test for full isolation."""
    Base.metadata.drop_all(bind=TEST_ENGINE)
    Base.metadata.create_all(bind=TEST_ENGINE)
    yield
    Base.metadata.drop_all(bind=TEST_ENGINE)


@pytest.fixture
def db(reset_db):
    """Yield a SQLAlchemy session backed by the in-memory test database."""
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def hasher():
    return TEST_HASHER


@pytest.fixture
def registry(db, hasher):
    return AccountRegistry(db, hasher)


@pytest.fixture
def ledger(db):
    return TransactionLedger(db)


@pytest.fixture
def workflow(ledger):
    return VerificationWorkflow(ledger)


@pytest.fixture
def client(db):
    """
    FastAPI TestClient with the DB session and password hasher overridden.
    The TestClient is NOT used as a context manager so the lifespan hook
    (which creates tables in the on-disk DB) is skipped.
    """
    from app.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_hasher] = lambda: TEST_HASHER
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers, not fixtures, so any test file can import and call them directly.
# They write rows straight to the store, bypassing the services under test.
# ---------------------------------------------------------------------------
def make_customer(
    db,
    username: str = "alice",
    account_number: str = "1234567890",
    password: str = VALID_PASSWORD,
    full_name: str = "Alice Smith",
    id_number: str = "9001015009087",
) -> models.Customer:
    salt = TEST_HASHER.gen_salt()
    customer = models.Customer(
        full_name=full_name,
        id_number=id_number,
        account_number=account_number,
        username=username,
        password=TEST_HASHER.hash(password, salt),
        salt=salt,
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


def make_employee(
    db,
    username: str = "emp001",
    name: str = "Thandi Nkosi",
    password: str = VALID_PASSWORD,
) -> models.Employee:
    employee = models.Employee(
        username=username,
        name=name,
        role="verifier",
        password=TEST_HASHER.hash(password, TEST_HASHER.gen_salt()),
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


def make_txn(
    db,
    customer_id: int,
    amount: str = "500.00",
    status: str = "pending",
    payee_account: str = "9876543210",
    swift_code: str = "12345678",
    created_at: Optional[datetime] = None,   # defaults to now
) -> models.Transaction:
    txn = models.Transaction(
        customer_id=customer_id,
        amount=Decimal(amount),
        currency="R",
        provider="SWIFT",
        payee_account=payee_account,
        swift_code=swift_code,
        status=status,
        created_at=created_at or models.utcnow(),
    )
    db.add(txn)
    db.commit()
    db.refresh(txn)
    return txn
