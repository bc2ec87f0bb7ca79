"""Mobile number normalization for lead and rider matching."""

import re
from typing import Any

# National subscriber number length for +91 numbers
SUBSCRIBER_DIGITS = 10

COUNTRY_CODE = "91"

_NON_DIGITS = re.compile(r'\D')
_E164_INDIA = re.compile(r'^\+91[6-9]\d{9}$')


def normalize_mobile(value: Any) -> str:
    """
    Reduce a mobile number to its comparison key.

    Rules:
    - Strip every non-digit character
    - Keep only the last 10 digits when more are present
    - Shorter numbers pass through unchanged (never padded)
    - Example: "+91 98765-43210" -> "9876543210"

    Args:
        value: Raw mobile number, may be None or a non-string

    Returns:
        Digit-only string of at most 10 characters, "" for empty input
    """
    if value is None:
        return ""

    digits = _NON_DIGITS.sub('', str(value))

    if len(digits) > SUBSCRIBER_DIGITS:
        return digits[-SUBSCRIBER_DIGITS:]

    return digits


def validate_phone_number(phone: str) -> bool:
    """Check a number is in +91XXXXXXXXXX form with a valid leading digit."""
    if not phone:
        return False
    return bool(_E164_INDIA.match(phone))


def format_phone_number(phone: str) -> str:
    """
    Format a phone number to E.164 (+91 prefix).

    Args:
        phone: Raw phone number

    Returns:
        "+91XXXXXXXXXX" when the digits allow it, otherwise the input unchanged
    """
    if not phone:
        return phone

    digits = _NON_DIGITS.sub('', phone)

    if digits.startswith(COUNTRY_CODE) and len(digits) == 12:
        return f"+{digits}"

    if len(digits) == SUBSCRIBER_DIGITS:
        return f"+{COUNTRY_CODE}{digits}"

    return phone


def format_phone_for_whatsapp(phone: str) -> str:
    """Ensure the number carries a +country-code prefix."""
    if phone.startswith('+'):
        return phone
    if phone.startswith(COUNTRY_CODE):
        return f"+{phone}"
    return f"+{COUNTRY_CODE}{phone}"
