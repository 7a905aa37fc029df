"""
Pure unit tests for app/services/validation.py.

No database required; every function is a pure check.
Covers: each field grammar, the two amount gates, sanitisation, and
aggregate reporting of several bad fields at once.
"""
import pytest

from app.errors import ValidationError
from app.services.validation import (
    MAX_RECORD_ID,
    VALIDATORS,
    FieldKind,
    check_field,
    sanitize,
    validate_account_number,
    validate_amount,
    validate_currency,
    validate_fields,
    validate_full_name,
    validate_id_number,
    validate_password,
    validate_provider,
    validate_record_id,
    validate_swift_code,
    validate_username,
)


# ---------------------------------------------------------------------------
# Amount: syntax gate and positivity gate
# ---------------------------------------------------------------------------
class TestValidateAmount:
    @pytest.mark.parametrize("value", ["10.5", "1000.00", "500", "0.01", "1.1"])
    def test_accepts_positive_amounts(self, value):
        assert validate_amount(value) is True

    @pytest.mark.parametrize("value", ["0", "0.00", "0.0", "000"])
    def test_rejects_zero_even_though_syntax_matches(self, value):
        assert validate_amount(value) is False

    @pytest.mark.parametrize("value", ["-5", "-0.01", "+5"])
    def test_rejects_signed_amounts(self, value):
        assert validate_amount(value) is False

    @pytest.mark.parametrize("value", ["10.555", "10.", ".5", "1,000.00", "abc", "", "1e3"])
    def test_rejects_malformed_amounts(self, value):
        assert validate_amount(value) is False

    def test_rejects_trailing_newline(self):
        assert validate_amount("10.00\n") is False

    def test_accepts_ten_integer_digits(self):
        assert validate_amount("9999999999.99") is True
        assert validate_amount("1234567890") is True

    @pytest.mark.parametrize("value", ["10000000000", "12345678901234567.89"])
    def test_rejects_amounts_wider_than_the_column(self, value):
        assert validate_amount(value) is False


# ---------------------------------------------------------------------------
# Record ids
# ---------------------------------------------------------------------------
class TestValidateRecordId:
    @pytest.mark.parametrize("value", ["1", "42", str(MAX_RECORD_ID)])
    def test_accepts_positive_ids(self, value):
        assert validate_record_id(value) is True

    @pytest.mark.parametrize("value", ["0", "-1", "abc", "1.5", "", str(MAX_RECORD_ID + 1), "9" * 25])
    def test_rejects_non_ids(self, value):
        assert validate_record_id(value) is False


# ---------------------------------------------------------------------------
# Identity fields
# ---------------------------------------------------------------------------
class TestIdentityFields:
    def test_full_name(self):
        assert validate_full_name("Alice Smith")
        assert validate_full_name("Al")
        assert not validate_full_name("A")
        assert not validate_full_name("A" * 51)
        assert not validate_full_name("Alice O'Neil")
        assert not validate_full_name("R2D2")

    def test_id_number_is_exactly_13_digits(self):
        assert validate_id_number("9001015009087")
        assert not validate_id_number("900101500908")
        assert not validate_id_number("90010150090871")
        assert not validate_id_number("90010150090a7")

    def test_account_number_is_10_to_16_digits(self):
        assert validate_account_number("1234567890")
        assert validate_account_number("1234567890123456")
        assert not validate_account_number("123456789")
        assert not validate_account_number("12345678901234567")

    def test_username(self):
        assert validate_username("alice")
        assert validate_username("bob_99")
        assert not validate_username("al")
        assert not validate_username("a" * 21)
        assert not validate_username("alice-smith")

    def test_password_requires_all_character_classes(self):
        assert validate_password("SecurePass123!")
        assert not validate_password("securepass123!")  # no upper
        assert not validate_password("SECUREPASS123!")  # no lower
        assert not validate_password("SecurePass!!!")   # no digit
        assert not validate_password("SecurePass123")   # no symbol
        assert not validate_password("Sp1!")            # too short
        assert not validate_password("SecurePass123#")  # symbol outside the set


# ---------------------------------------------------------------------------
# Payment fields
# ---------------------------------------------------------------------------
class TestPaymentFields:
    def test_swift_code_is_8_to_11_digits(self):
        assert validate_swift_code("12345678")
        assert validate_swift_code("12345678901")
        assert not validate_swift_code("1234567")
        assert not validate_swift_code("123456789012")
        assert not validate_swift_code("ABCDZAJJ")

    def test_single_supported_currency_and_provider(self):
        assert validate_currency("R")
        assert not validate_currency("USD")
        assert validate_provider("SWIFT")
        assert not validate_provider("PayPal")


# ---------------------------------------------------------------------------
# Dispatch table and sanitisation
# ---------------------------------------------------------------------------
class TestDispatch:
    def test_every_field_kind_has_a_validator(self):
        assert set(VALIDATORS) == set(FieldKind)

    def test_check_field_returns_message_on_failure(self):
        assert check_field(FieldKind.SWIFT_CODE, "123") == "Must be 8-11 digits"
        assert check_field(FieldKind.SWIFT_CODE, "12345678") is None

    def test_sanitize_trims_and_escapes(self):
        assert sanitize("  alice  ") == "alice"
        assert sanitize("<b>x</b>") == "&lt;b&gt;x&lt;/b&gt;"
        assert sanitize(None) == ""

    def test_sanitize_can_skip_escaping(self):
        assert sanitize(" Pass&word1 ", escape=False) == "Pass&word1"


class TestValidateFields:
    def test_returns_sanitised_values(self):
        cleaned = validate_fields({
            "username": (FieldKind.USERNAME, "  alice "),
            "amount": (FieldKind.AMOUNT, " 500.00"),
        })
        assert cleaned == {"username": "alice", "amount": "500.00"}

    def test_reports_every_invalid_field(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_fields({
                "amount": (FieldKind.AMOUNT, "0.00"),
                "currency": (FieldKind.CURRENCY, "R"),
                "payeeAccount": (FieldKind.PAYEE_ACCOUNT, "123"),
                "swiftCode": (FieldKind.SWIFT_CODE, "abc"),
            })
        assert exc_info.value.fields == ["amount", "payeeAccount", "swiftCode"]

    def test_escaped_markup_fails_the_grammar(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_fields({"fullName": (FieldKind.FULL_NAME, "<script>")})
        assert exc_info.value.fields == ["fullName"]

    def test_password_is_not_escaped(self):
        cleaned = validate_fields({"password": (FieldKind.PASSWORD, "Secure&Pass1")})
        assert cleaned["password"] == "Secure&Pass1"

    def test_missing_field_is_reported_with_the_others(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_fields({
                "customerId": (FieldKind.RECORD_ID, "abc"),
                "amount": (FieldKind.AMOUNT, "0.00"),
                "currency": (FieldKind.CURRENCY, None),
            })
        assert exc_info.value.errors == [
            {"field": "customerId", "message": "Must be a positive integer id"},
            {"field": "amount", "message": VALIDATORS[FieldKind.AMOUNT][1]},
            {"field": "currency", "message": "Field required"},
        ]
