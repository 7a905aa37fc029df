"""
FastAPI dependency providers.

Each request gets its own Session from get_db, and the business components
are built around it here, so none of them touch the global engine.
"""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.services.accounts import AccountRegistry
from app.services.credentials import BcryptHasher, PasswordHasher
from app.services.ledger import TransactionLedger
from app.services.workflow import VerificationWorkflow


@lru_cache
def get_hasher() -> PasswordHasher:
    return BcryptHasher(rounds=get_settings().bcrypt_rounds)


def get_registry(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
) -> AccountRegistry:
    return AccountRegistry(db, hasher)


def get_ledger(db: Session = Depends(get_db)) -> TransactionLedger:
    return TransactionLedger(db)


def get_workflow(ledger: TransactionLedger = Depends(get_ledger)) -> VerificationWorkflow:
    return VerificationWorkflow(ledger)
