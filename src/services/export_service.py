"""CSV / Excel exports and import templates."""

import io
from typing import Dict, Iterable, Optional

import pandas as pd

from ..models.leads import Lead
from ..models.riders import Rider
from .import_service import REQUIRED_RIDER_COLUMNS, WALLET_COLUMNS

LEAD_EXPORT_COLUMNS = [
    "Lead ID", "Name", "Mobile", "City", "Status", "Score", "Category", "Source", "Created At",
]

RIDER_EXPORT_COLUMNS = [
    "Triev ID", "Rider Name", "Mobile Number", "Chassis Number", "Client Name",
    "Team Leader", "Wallet Amount", "Status", "Allotment Date", "Remarks",
]


def _date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def leads_dataframe(leads: Iterable[Lead], categories: Optional[Dict[str, str]] = None) -> pd.DataFrame:
    """
    Tabulate leads for display and export.

    Args:
        leads: Leads to include
        categories: Live lead id -> category; falls back to the stored category
    """
    categories = categories or {}
    rows = [
        {
            "Lead ID": lead.lead_id if lead.lead_id is not None else "",
            "Name": lead.rider_name,
            "Mobile": lead.mobile_number,
            "City": lead.city,
            "Status": lead.status,
            "Score": lead.score if lead.score is not None else "",
            "Category": categories.get(lead.id, lead.category),
            "Source": lead.source,
            "Created At": _date(lead.created_at),
        }
        for lead in leads
    ]
    return pd.DataFrame(rows, columns=LEAD_EXPORT_COLUMNS)


def riders_dataframe(riders: Iterable[Rider]) -> pd.DataFrame:
    rows = [
        {
            "Triev ID": rider.triev_id,
            "Rider Name": rider.rider_name,
            "Mobile Number": rider.mobile_number,
            "Chassis Number": rider.chassis_number,
            "Client Name": rider.client_name,
            "Team Leader": rider.team_leader_name,
            "Wallet Amount": rider.wallet_amount,
            "Status": rider.status,
            "Allotment Date": _date(rider.allotment_date),
            "Remarks": rider.remarks,
        }
        for rider in riders
    ]
    return pd.DataFrame(rows, columns=RIDER_EXPORT_COLUMNS)


def leads_to_csv(leads: Iterable[Lead], categories: Optional[Dict[str, str]] = None) -> bytes:
    return leads_dataframe(leads, categories).to_csv(index=False).encode("utf-8")


def riders_to_csv(riders: Iterable[Rider]) -> bytes:
    return riders_dataframe(riders).to_csv(index=False).encode("utf-8")


def riders_to_excel(riders: Iterable[Rider]) -> bytes:
    """Rider sheet as .xlsx bytes."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        riders_dataframe(riders).to_excel(writer, index=False, sheet_name="Riders")
    return buffer.getvalue()


def rider_template_csv() -> bytes:
    """Empty rider import template with one example row."""
    example = {
        "Rider Name": "Ravi Kumar",
        "Mobile Number": "9876543210",
        "Triev ID": "TR101",
        "Chassis Number": "MD9ABC123456",
        "Client Name": "Zomato",
        "Team Leader": "leader@example.com",
        "Allotment Date": "2024-01-15",
        "Wallet Amount": "0",
        "Remarks": "",
    }
    return pd.DataFrame([example], columns=REQUIRED_RIDER_COLUMNS).to_csv(index=False).encode("utf-8")


def wallet_template_csv() -> bytes:
    example = {"Triev ID": "TR101", "Mobile Number": "9876543210", "Wallet Amount": "(-) 500"}
    return pd.DataFrame([example], columns=WALLET_COLUMNS).to_csv(index=False).encode("utf-8")
