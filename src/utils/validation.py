"""Validation and sanitization helpers for forms and imports."""

import math
import random
import re
import time
from datetime import datetime
from typing import Any, Dict, List, Tuple

from .phone import format_phone_number, validate_phone_number

RIDER_STATUSES = ("active", "inactive", "deleted")

_EMAIL = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
_CHASSIS = re.compile(r'^[A-Z0-9]{6,17}$', re.IGNORECASE)
_TRIEV_ID = re.compile(r'^TR\d+$', re.IGNORECASE)


def validate_email(email: str) -> bool:
    return bool(email) and bool(_EMAIL.match(email))


def validate_chassis_number(chassis: str) -> bool:
    """Accept 6-17 alphanumeric characters (VIN-like)."""
    return bool(chassis) and bool(_CHASSIS.match(chassis))


def validate_triev_id(triev_id: str) -> bool:
    """Triev IDs are TR followed by digits (e.g. TR001)."""
    return bool(triev_id) and bool(_TRIEV_ID.match(triev_id))


def validate_wallet_amount(amount: Any) -> bool:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value)


def validate_past_date(value: datetime) -> bool:
    return value <= datetime.now(value.tzinfo)


def generate_triev_id(prefix: str = "TR") -> str:
    """Generate a rider code from the clock plus a random suffix."""
    timestamp = str(int(time.time() * 1000))[-6:]
    suffix = f"{random.randint(0, 999):03d}"
    return f"{prefix}{timestamp}{suffix}"


def generate_user_id(existing_count: int = 0) -> str:
    """Generate the next team leader code, e.g. TRIEV_TL0001."""
    return f"TRIEV_TL{existing_count + 1:04d}"


def sanitize_input(text: str) -> str:
    """Remove angle brackets and quotes, then trim."""
    return re.sub(r'[<>\'"]', '', text).strip()


def normalize_text(text: str) -> str:
    """Trim and collapse internal whitespace."""
    return re.sub(r'\s+', ' ', text.strip())


def validate_password_strength(password: str) -> Tuple[bool, str]:
    """
    Check password length and character classes.

    Returns:
        Tuple of (is_valid, message)
    """
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"
    if not re.search(r'[A-Z]', password):
        return False, "Password must contain at least one uppercase letter"
    if not re.search(r'[a-z]', password):
        return False, "Password must contain at least one lowercase letter"
    if not re.search(r'[0-9]', password):
        return False, "Password must contain at least one number"
    return True, "Password is strong"


def _cell(row: Dict[str, Any], key: str) -> str:
    value = row.get(key)
    if value is None:
        return ""
    return str(value).strip()


def validate_import_row(row: Dict[str, Any], row_index: int) -> List[str]:
    """
    Validate a rider import row against the template columns.

    Args:
        row: Row dict keyed by template column names
        row_index: Zero-based index of the row in the file

    Returns:
        List of error messages, empty when the row is valid
    """
    errors: List[str] = []
    label = f"Row {row_index + 1}"

    if not _cell(row, "Rider Name"):
        errors.append(f"{label}: Rider Name is required")

    mobile = _cell(row, "Mobile Number")
    if not mobile:
        errors.append(f"{label}: Mobile Number is required")
    elif not validate_phone_number(format_phone_number(mobile)):
        errors.append(f"{label}: Invalid mobile number format")

    if not _cell(row, "Chassis Number"):
        errors.append(f"{label}: Chassis Number is required")

    if not _cell(row, "Client Name"):
        errors.append(f"{label}: Client Name is required")

    triev_id = _cell(row, "Triev ID")
    if triev_id and not validate_triev_id(triev_id):
        errors.append(f"{label}: Invalid Triev ID format (should be TR followed by numbers)")

    amount = _cell(row, "Wallet Amount")
    if amount and not validate_wallet_amount(amount):
        errors.append(f"{label}: Invalid wallet amount")

    status = _cell(row, "Status")
    if status and status.lower() not in RIDER_STATUSES:
        errors.append(f"{label}: Status must be active, inactive, or deleted")

    return errors
