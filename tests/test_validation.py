from datetime import datetime, timedelta, timezone

from src.utils.validation import (
    generate_triev_id,
    generate_user_id,
    normalize_text,
    sanitize_input,
    validate_chassis_number,
    validate_email,
    validate_import_row,
    validate_password_strength,
    validate_past_date,
    validate_triev_id,
    validate_wallet_amount,
)

VALID_ROW = {
    "Rider Name": "Ravi Kumar",
    "Mobile Number": "9876543210",
    "Triev ID": "TR101",
    "Chassis Number": "MD9ABC123456",
    "Client Name": "Zomato",
    "Wallet Amount": "-200",
}


class TestValidators:
    def test_email(self):
        assert validate_email("ops@triev.in")
        assert not validate_email("ops@triev")
        assert not validate_email("")

    def test_chassis(self):
        assert validate_chassis_number("MD9ABC123456")
        assert not validate_chassis_number("AB12")
        assert not validate_chassis_number("MD9-ABC-1234")

    def test_triev_id(self):
        assert validate_triev_id("TR001")
        assert validate_triev_id("tr42")
        assert not validate_triev_id("RT001")

    def test_wallet_amount(self):
        assert validate_wallet_amount("-150.5")
        assert validate_wallet_amount(0)
        assert not validate_wallet_amount("abc")
        assert not validate_wallet_amount(float("inf"))

    def test_past_date(self):
        now = datetime.now(timezone.utc)
        assert validate_past_date(now - timedelta(days=1))
        assert not validate_past_date(now + timedelta(days=1))

    def test_password_strength(self):
        assert validate_password_strength("Secret123") == (True, "Password is strong")
        ok, message = validate_password_strength("short")
        assert not ok
        assert message

    def test_sanitize_and_normalize(self):
        assert sanitize_input(' <b>"Ravi"</b> ') == "bRavi/b"
        assert normalize_text("  Ravi   KUMAR ") == "Ravi KUMAR"


class TestGenerators:
    def test_triev_id_shape(self):
        triev_id = generate_triev_id()
        assert triev_id.startswith("TR")
        assert validate_triev_id(triev_id)

    def test_user_id(self):
        assert generate_user_id() == "TRIEV_TL0001"
        assert generate_user_id(41) == "TRIEV_TL0042"


class TestValidateImportRow:
    def test_valid_row(self):
        assert validate_import_row(VALID_ROW, 0) == []

    def test_missing_fields_are_reported_with_row_number(self):
        errors = validate_import_row({"Mobile Number": "12345", "Triev ID": "X1"}, 4)

        assert "Row 5: Rider Name is required" in errors
        assert "Row 5: Invalid mobile number format" in errors
        assert "Row 5: Chassis Number is required" in errors
        assert any("Triev ID" in e for e in errors)

    def test_bad_status(self):
        errors = validate_import_row({**VALID_ROW, "Status": "banned"}, 0)
        assert errors == ["Row 1: Status must be active, inactive, or deleted"]
