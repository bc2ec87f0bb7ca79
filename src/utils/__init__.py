"""Utility functions for FleetDesk."""

from .phone import (
    normalize_mobile,
    validate_phone_number,
    format_phone_number,
    format_phone_for_whatsapp,
)
from .settings import Settings, get_secret, load_settings, configure_logging

__all__ = [
    "normalize_mobile",
    "validate_phone_number",
    "format_phone_number",
    "format_phone_for_whatsapp",
    "Settings",
    "get_secret",
    "load_settings",
    "configure_logging",
]
