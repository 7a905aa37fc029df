"""
Field validation for every state-changing request.

Pure functions, no I/O. Each field kind has exactly one validator, looked
up through VALIDATORS. Inputs are trimmed and HTML-escaped before they are
matched, so whatever passes is also safe to render.

validate_fields() checks every field of a request before reporting, so a
form with three bad fields gets three errors back in one response.
"""
import html
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from app.errors import ValidationError


SUPPORTED_CURRENCY = "R"
SUPPORTED_PROVIDER = "SWIFT"

PASSWORD_SYMBOLS = "@$!%*?&"

FULL_NAME_RE = re.compile(r"^[a-zA-Z\s]{2,50}$")
ID_NUMBER_RE = re.compile(r"^\d{13}$")
ACCOUNT_NUMBER_RE = re.compile(r"^\d{10,16}$")
USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]{3,20}$")
PASSWORD_RE = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"
)
# 10 integer digits and 2 decimals, the width of Transaction.amount
AMOUNT_RE = re.compile(r"^\d{1,10}(\.\d{1,2})?$")
SWIFT_CODE_RE = re.compile(r"^\d{8,11}$")
RECORD_ID_RE = re.compile(r"^\d{1,19}$")

# largest value a signed 64-bit integer column holds
MAX_RECORD_ID = 2**63 - 1

REQUIRED_MESSAGE = "Field required"


class FieldKind(str, Enum):
    FULL_NAME = "full_name"
    ID_NUMBER = "id_number"
    ACCOUNT_NUMBER = "account_number"
    PAYEE_ACCOUNT = "payee_account"
    USERNAME = "username"
    PASSWORD = "password"
    AMOUNT = "amount"
    SWIFT_CODE = "swift_code"
    CURRENCY = "currency"
    PROVIDER = "provider"
    RECORD_ID = "record_id"


def sanitize(value, escape: bool = True) -> str:
    """Trim surrounding whitespace and HTML-escape."""
    text = "" if value is None else str(value).strip()
    return html.escape(text) if escape else text


def _matches(pattern: re.Pattern, value: str) -> bool:
    # fullmatch so a trailing newline cannot sneak past `$`
    return pattern.fullmatch(value) is not None


def validate_full_name(value: str) -> bool:
    return _matches(FULL_NAME_RE, value)


def validate_id_number(value: str) -> bool:
    return _matches(ID_NUMBER_RE, value)


def validate_account_number(value: str) -> bool:
    return _matches(ACCOUNT_NUMBER_RE, value)


def validate_username(value: str) -> bool:
    return _matches(USERNAME_RE, value)


def validate_password(value: str) -> bool:
    return _matches(PASSWORD_RE, value)


def validate_amount(value: str) -> bool:
    """
    Two independent gates: the syntax (digits with at most two decimals)
    and strict positivity. The pattern alone accepts "0" and "0.00".
    """
    if not _matches(AMOUNT_RE, value):
        return False
    try:
        return Decimal(value) > 0
    except InvalidOperation:
        return False


def validate_swift_code(value: str) -> bool:
    return _matches(SWIFT_CODE_RE, value)


def validate_record_id(value: str) -> bool:
    return _matches(RECORD_ID_RE, value) and 1 <= int(value) <= MAX_RECORD_ID


def validate_currency(value: str) -> bool:
    return value == SUPPORTED_CURRENCY


def validate_provider(value: str) -> bool:
    return value == SUPPORTED_PROVIDER


VALIDATORS: Dict[FieldKind, Tuple[Callable[[str], bool], str]] = {
    FieldKind.FULL_NAME: (validate_full_name, "Must be 2-50 letters and spaces"),
    FieldKind.ID_NUMBER: (validate_id_number, "Must be exactly 13 digits"),
    FieldKind.ACCOUNT_NUMBER: (validate_account_number, "Must be 10-16 digits"),
    FieldKind.PAYEE_ACCOUNT: (validate_account_number, "Must be 10-16 digits"),
    FieldKind.USERNAME: (
        validate_username,
        "Must be 3-20 letters, digits or underscores",
    ),
    FieldKind.PASSWORD: (
        validate_password,
        "Must be at least 8 characters with upper and lower case letters, "
        f"a digit and one of {PASSWORD_SYMBOLS}",
    ),
    FieldKind.AMOUNT: (
        validate_amount,
        "Must be a positive amount with at most 10 digits before "
        "and 2 after the decimal point",
    ),
    FieldKind.SWIFT_CODE: (validate_swift_code, "Must be 8-11 digits"),
    FieldKind.CURRENCY: (validate_currency, f"Only '{SUPPORTED_CURRENCY}' is supported"),
    FieldKind.PROVIDER: (validate_provider, f"Only '{SUPPORTED_PROVIDER}' is supported"),
    FieldKind.RECORD_ID: (validate_record_id, "Must be a positive integer id"),
}

_missing = set(FieldKind) - set(VALIDATORS)
if _missing:
    raise RuntimeError(f"No validator registered for {sorted(k.value for k in _missing)}")

# Escaping would change the secret that gets hashed
UNESCAPED_KINDS = {FieldKind.PASSWORD}


def check_field(kind: FieldKind, value) -> Optional[str]:
    """Return the error message for a sanitised value, or None if it is valid."""
    validator, message = VALIDATORS[kind]
    return None if validator(value) else message


def validate_fields(fields: Dict[str, Tuple[FieldKind, object]]) -> Dict[str, str]:
    """
    Sanitise and validate a whole request.

    `fields` maps the wire field name to (kind, raw value). A raw value of
    None means the field was not sent. Returns the sanitised values keyed by
    field name, or raises ValidationError listing every field that failed.
    """
    cleaned: Dict[str, str] = {}
    errors: List[Dict[str, str]] = []

    for name, (kind, raw) in fields.items():
        if raw is None:
            errors.append({"field": name, "message": REQUIRED_MESSAGE})
            continue
        value = sanitize(raw, escape=kind not in UNESCAPED_KINDS)
        message = check_field(kind, value)
        if message is not None:
            errors.append({"field": name, "message": message})
        cleaned[name] = value

    if errors:
        raise ValidationError(errors)
    return cleaned
