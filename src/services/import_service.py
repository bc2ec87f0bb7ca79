"""Bulk rider and wallet imports from CSV or Excel files."""

import io
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from ..models.records import ImportRowError, ImportSummary
from ..models.riders import is_valid_client
from ..models.users import Viewer
from .activity_log import ActivityLogger
from .supabase_store import BackendError, FleetStore

logger = logging.getLogger(__name__)

REQUIRED_RIDER_COLUMNS = [
    "Rider Name",
    "Mobile Number",
    "Triev ID",
    "Chassis Number",
    "Client Name",
    "Team Leader",
    "Allotment Date",
    "Wallet Amount",
    "Remarks",
]

WALLET_COLUMNS = ["Triev ID", "Mobile Number", "Wallet Amount"]

# import_history keeps at most this many row errors
MAX_STORED_ERRORS = 50

_UUID = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$', re.IGNORECASE)
_PARENTHESISED = re.compile(r'\s*\(.*?\)\s*')


def read_tabular(file_name: str, content: bytes) -> List[Dict[str, Any]]:
    """
    Read a CSV or Excel upload into row dicts.

    Every cell is read as text and blank cells become "".
    """
    buffer = io.BytesIO(content)
    if file_name.lower().endswith((".xlsx", ".xls")):
        df = pd.read_excel(buffer, dtype=str)
    else:
        df = pd.read_csv(buffer, dtype=str)

    df.columns = [str(col).strip() for col in df.columns]
    df = df.fillna("")
    return df.to_dict(orient="records")


def missing_columns(rows: List[Dict[str, Any]], required: List[str]) -> List[str]:
    if not rows:
        return list(required)
    present = set(rows[0].keys())
    return [col for col in required if col not in present]


def parse_currency(value: Any) -> float:
    """
    Parse a wallet amount cell.

    Handles "500", "-500", "(-) 500", "(500)" and "₹1,200"; blank is 0.

    Raises:
        ValueError: No number could be read
    """
    if value is None:
        return 0.0
    text = str(value).strip()
    if not text:
        return 0.0

    if text.startswith("(-)") or (text.startswith("(") and text.endswith(")")):
        return -float(re.sub(r'[^0-9.]', '', text))

    return float(re.sub(r'[^0-9.\-]', '', text))


def _cell(row: Dict[str, Any], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value).strip()


def _digits(value: str) -> str:
    return re.sub(r'\D', '', value)


class TeamLeaderDirectory:
    """Resolves a free-text team leader cell to a user id."""

    def __init__(self, users: List[Dict[str, Any]]):
        self.ids = set()
        self.by_email: Dict[str, str] = {}
        self.by_name: Dict[str, str] = {}

        for user in users:
            user_id = str(user.get("id") or "")
            if not user_id:
                continue
            self.ids.add(user_id)

            email = (user.get("email") or "").strip().lower()
            if email:
                self.by_email[email] = user_id

            full_name = (user.get("full_name") or user.get("fullName") or "").strip()
            if full_name:
                self.by_name[full_name.lower()] = user_id
                # "Om Prakash Singh ( KONTI/357 )" -> "om prakash singh"
                clean = _PARENTHESISED.sub('', full_name).strip().lower()
                if clean:
                    self.by_name.setdefault(clean, user_id)

    def resolve(self, value: str) -> Optional[str]:
        """Match by UUID, then email, then exact or cleaned name."""
        if not value:
            return None
        if _UUID.match(value) and value in self.ids:
            return value

        key = value.strip().lower()
        if key in self.by_email:
            return self.by_email[key]
        if key in self.by_name:
            return self.by_name[key]

        clean = _PARENTHESISED.sub('', value).strip().lower()
        return self.by_name.get(clean)


class _Importer:
    """Shared bookkeeping for the bulk importers."""

    import_type = "rider"

    def __init__(self, store: FleetStore, activity: ActivityLogger):
        self.store = store
        self.activity = activity

    def _record_history(self, viewer: Viewer, summary: ImportSummary) -> None:
        row = {
            "admin_id": viewer.user_id,
            "admin_name": viewer.full_name,
            "import_type": self.import_type,
            "total_rows": summary.total,
            "success_count": summary.success,
            "failure_count": summary.failed,
            "status": summary.status,
            "errors": [e.model_dump(mode="json") for e in summary.errors[:MAX_STORED_ERRORS]],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self.store.insert_import_history(row)
        except BackendError as e:
            logger.warning(f"Failed to log import history: {e}")


class RiderImporter(_Importer):
    """Creates or updates riders from template rows."""

    import_type = "rider"

    def run(self, rows: List[Dict[str, Any]], viewer: Viewer) -> ImportSummary:
        """
        Import riders.

        Args:
            rows: Row dicts from read_tabular
            viewer: Admin running the import

        Returns:
            ImportSummary; unknown team leaders add a warning but the rider
            is still imported as unassigned
        """
        summary = ImportSummary(total=len(rows))

        try:
            directory = TeamLeaderDirectory(self.store.fetch_users())
        except BackendError as e:
            logger.warning(f"Could not load users for team leader mapping: {e}")
            directory = TeamLeaderDirectory([])

        for index, row in enumerate(rows):
            row_num = index + 2
            try:
                warning = self._import_row(row, directory)
                summary.success += 1
                if warning:
                    summary.errors.append(ImportRowError(
                        row=row_num,
                        identifier=_cell(row, "Rider Name"),
                        reason=warning,
                    ))
            except (ValueError, BackendError) as e:
                summary.failed += 1
                summary.errors.append(ImportRowError(
                    row=row_num,
                    identifier=_cell(row, "Rider Name") or f"Row {row_num}",
                    reason=str(e) or "Unknown error",
                    data={k: str(v) for k, v in row.items()},
                ))

        logger.info(f"Rider import: {summary.success} ok, {summary.failed} failed of {summary.total}")

        self.activity.log(
            viewer,
            "bulkImport",
            "system",
            "multiple",
            f"Imported {summary.success} riders, {summary.failed} failures.",
            {"success": summary.success, "failed": summary.failed},
        )
        self._record_history(viewer, summary)
        return summary

    def _import_row(self, row: Dict[str, Any], directory: TeamLeaderDirectory) -> Optional[str]:
        """Upsert one rider; returns a warning message or None."""
        rider_name = _cell(row, "Rider Name")
        triev_id = _cell(row, "Triev ID")
        mobile = _digits(_cell(row, "Mobile Number"))
        chassis = _cell(row, "Chassis Number")

        if not triev_id and not mobile and not chassis:
            raise ValueError("Missing Identifier (Triev ID, Mobile, or Chassis required)")
        if not rider_name:
            raise ValueError("Missing Rider Name")

        warning = None
        team_leader_name = _cell(row, "Team Leader") or _cell(row, "Base")
        team_leader_id = directory.resolve(team_leader_name)
        if team_leader_name and not team_leader_id:
            warning = (
                f"Warning: Team Leader '{team_leader_name}' not found. "
                "Rider assigned to 'Unassigned'."
            )

        client = _cell(row, "Client Name")
        allotment = pd.to_datetime(_cell(row, "Allotment Date") or None, errors="coerce")
        if pd.isna(allotment):
            allotment_date = datetime.now(timezone.utc).isoformat()
        else:
            allotment_date = allotment.isoformat()

        payload = {
            "rider_name": rider_name,
            "mobile_number": mobile,
            "triev_id": triev_id,
            "chassis_number": chassis,
            "client_name": client if is_valid_client(client) else "Other",
            "client_id": _cell(row, "Client ID"),
            "wallet_amount": parse_currency(row.get("Wallet Amount")),
            "allotment_date": allotment_date,
            "remarks": _cell(row, "Remarks"),
            "team_leader_id": team_leader_id,
            "team_leader_name": team_leader_name if team_leader_id else "Unassigned",
            "status": "active",
        }

        existing = self.store.find_rider(triev_id=triev_id, mobile=mobile, chassis=chassis)
        if existing:
            self.store.update_rider(existing["id"], payload)
        else:
            self.store.insert_rider(payload)

        return warning


class WalletImporter(_Importer):
    """Sets wallet balances for existing riders."""

    import_type = "wallet"

    def run(self, rows: List[Dict[str, Any]], viewer: Viewer) -> ImportSummary:
        summary = ImportSummary(total=len(rows))

        for index, row in enumerate(rows):
            row_num = index + 2
            try:
                rider, identifier = self._update_row(row)
                logger.debug(f"Updated wallet for {rider.get('rider_name')} using {identifier}")
                summary.success += 1
            except (ValueError, BackendError) as e:
                summary.failed += 1
                summary.errors.append(ImportRowError(
                    row=row_num,
                    identifier=_cell(row, "Triev ID") or _cell(row, "Mobile Number") or f"Row {row_num}",
                    reason=str(e) or "Unknown error",
                    data={k: str(v) for k, v in row.items()},
                ))

        logger.info(f"Wallet import: {summary.success} ok, {summary.failed} failed of {summary.total}")

        self.activity.log(
            viewer,
            "walletUpdated",
            "system",
            "multiple",
            f"Updated wallets for {summary.success} riders, {summary.failed} failures.",
            {"success": summary.success, "failed": summary.failed},
        )
        self._record_history(viewer, summary)
        return summary

    def _update_row(self, row: Dict[str, Any]) -> Tuple[Dict[str, Any], str]:
        triev_id = _cell(row, "Triev ID")
        mobile = _digits(_cell(row, "Mobile Number"))

        if not triev_id and not mobile:
            raise ValueError("Missing Identifier: 'Triev ID' or 'Mobile Number' is required column.")

        try:
            amount = parse_currency(row.get("Wallet Amount"))
        except ValueError:
            raise ValueError("Invalid Wallet Amount value.")

        rider = None
        identifier = ""
        if triev_id:
            rider = self.store.find_rider_by("triev_id", triev_id)
            identifier = f"Triev ID: {triev_id}"
        if rider is None and mobile:
            rider = self.store.find_rider_by("mobile_number", mobile)
            identifier = f"Mobile: {mobile}"

        if rider is None:
            label = f"Triev ID: {triev_id}" if triev_id else f"Mobile: {mobile}"
            raise ValueError(f"Rider not found for {label}. Ensure rider exists in system.")

        self.store.update_rider(rider["id"], {"wallet_amount": amount})
        return rider, identifier
