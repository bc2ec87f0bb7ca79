"""Prompt templates for the fleet assistant."""

from .templates import (
    FLEET_SYSTEM_CONTEXT,
    DASHBOARD_ANALYST_PROMPT,
    LEAD_SCORER_PROMPT,
    LEAD_ADVISOR_PROMPT,
    PAYMENT_REMINDER_PROMPT,
    CHAT_SYSTEM_PROMPT,
)

__all__ = [
    "FLEET_SYSTEM_CONTEXT",
    "DASHBOARD_ANALYST_PROMPT",
    "LEAD_SCORER_PROMPT",
    "LEAD_ADVISOR_PROMPT",
    "PAYMENT_REMINDER_PROMPT",
    "CHAT_SYSTEM_PROMPT",
]
