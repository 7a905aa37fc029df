"""
Creates the database tables and provisions the verifier employee accounts.

Employees cannot register through the API; this script is how they get
credentials. Passwords are hashed with the same bcrypt settings the API
uses, so the accounts can log in immediately.

Usage:
    python scripts/seed_employees.py
"""
import sys
import os

# Allow running from project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import engine, SessionLocal, init_db
from app.dependencies import get_hasher
from app.errors import DuplicateUsername
from app.services.accounts import AccountRegistry

EMPLOYEES = [
    {"username": "emp001", "name": "Thandi Nkosi", "password": "SecurePass123!"},
    {"username": "emp002", "name": "Pieter Botha", "password": "SecurePass456!"},
]


def main():
    print("Creating database tables...")
    init_db(engine)

    db = SessionLocal()
    try:
        registry = AccountRegistry(db, get_hasher())
        for emp in EMPLOYEES:
            try:
                employee = registry.create_employee(**emp)
            except DuplicateUsername:
                print(f"  {emp['username']}: already exists, skipping")
                continue
            print(f"  {employee.username}: created (id={employee.id}, role={employee.role})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
