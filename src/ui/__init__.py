"""Streamlit UI components."""

from .sidebar import render_sidebar
from .lead_board import render_lead_board
from .rider_desk import render_rider_desk
from .data_management import render_data_management
from .notifications import render_notifications
from .support_chat import render_support_chat

__all__ = [
    "render_sidebar",
    "render_lead_board",
    "render_rider_desk",
    "render_data_management",
    "render_notifications",
    "render_support_chat",
]
