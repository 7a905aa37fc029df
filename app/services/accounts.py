"""
Account registry: customer registration and login, employee login.

Authentication failures are deliberately uniform. An unknown username and a
wrong password raise the same AuthenticationError, and both pay for one
bcrypt comparison, so neither the message nor the timing reveals which
usernames exist.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app import models
from app.database import store_errors
from app.errors import AuthenticationError, DuplicateUsername
from app.services.credentials import PasswordHasher
from app.services.validation import FieldKind, sanitize, validate_fields

logger = logging.getLogger(__name__)

EMPLOYEE_ROLE = "verifier"


class AccountRegistry:
    def __init__(self, db: Session, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    def register_customer(
        self,
        full_name: Optional[str],
        id_number: Optional[str],
        account_number: Optional[str],
        username: Optional[str],
        password: Optional[str],
    ) -> models.Customer:
        """
        Raises:
            ValidationError: if any field is malformed or missing (all
                failures listed)
            DuplicateUsername: if the username is taken, including when a
                concurrent registration wins the race to insert it
        """
        fields = validate_fields({
            "fullName": (FieldKind.FULL_NAME, full_name),
            "idNumber": (FieldKind.ID_NUMBER, id_number),
            "accountNumber": (FieldKind.ACCOUNT_NUMBER, account_number),
            "username": (FieldKind.USERNAME, username),
            "password": (FieldKind.PASSWORD, password),
        })

        # Advisory only: the unique constraint on customers.username is what
        # actually settles concurrent registrations.
        with store_errors("customer registration"):
            existing = self.db.query(models.Customer.id).filter(
                models.Customer.username == fields["username"]
            ).first()
        if existing is not None:
            raise DuplicateUsername()

        salt = self.hasher.gen_salt()
        customer = models.Customer(
            full_name=fields["fullName"],
            id_number=fields["idNumber"],
            account_number=fields["accountNumber"],
            username=fields["username"],
            password=self.hasher.hash(fields["password"], salt),
            salt=salt,
        )
        with store_errors("customer registration"):
            self.db.add(customer)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.info("Lost registration race for username %s", fields["username"])
                raise DuplicateUsername()
            self.db.refresh(customer)

        logger.info("Registered customer %s (id=%s)", customer.username, customer.id)
        return customer

    def authenticate_customer(
        self, username: str, account_number: str, password: str
    ) -> models.Customer:
        username = sanitize(username)
        account_number = sanitize(account_number)
        password = sanitize(password, escape=False)

        with store_errors("customer login"):
            customer = self.db.query(models.Customer).filter(
                models.Customer.username == username,
                models.Customer.account_number == account_number,
            ).first()

        digest = customer.password if customer is not None else self.hasher.dummy_digest
        if not self.hasher.verify(password, digest) or customer is None:
            logger.info("Failed customer login for %s", username)
            raise AuthenticationError()
        return customer

    def authenticate_employee(self, username: str, password: str) -> models.Employee:
        username = sanitize(username)
        password = sanitize(password, escape=False)

        with store_errors("employee login"):
            employee = self.db.query(models.Employee).filter(
                models.Employee.username == username
            ).first()

        digest = employee.password if employee is not None else self.hasher.dummy_digest
        if not self.hasher.verify(password, digest) or employee is None:
            logger.info("Failed employee login for %s", username)
            raise AuthenticationError()
        return employee

    def create_employee(
        self, username: str, name: str, password: str, role: str = EMPLOYEE_ROLE
    ) -> models.Employee:
        """Provision a verifier account. Employees cannot self-register."""
        fields = validate_fields({
            "username": (FieldKind.USERNAME, username),
            "name": (FieldKind.FULL_NAME, name),
            "password": (FieldKind.PASSWORD, password),
        })

        employee = models.Employee(
            username=fields["username"],
            name=fields["name"],
            role=role,
            password=self.hasher.hash(fields["password"], self.hasher.gen_salt()),
        )
        with store_errors("employee provisioning"):
            self.db.add(employee)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                raise DuplicateUsername()
            self.db.refresh(employee)

        logger.info("Provisioned employee %s (role=%s)", employee.username, employee.role)
        return employee
