import io

import pandas as pd
import pytest

from src.services.import_service import (
    REQUIRED_RIDER_COLUMNS,
    RiderImporter,
    TeamLeaderDirectory,
    WalletImporter,
    missing_columns,
    parse_currency,
    read_tabular,
)

USERS = [
    {"id": "3f6c1a2e-1111-4222-8333-944455556666", "full_name": "Om Prakash Singh ( KONTI/357 )",
     "email": "om@triev.in", "role": "teamLeader"},
    {"id": "tl-2", "full_name": "Meena Rao", "email": "meena@triev.in", "role": "teamLeader"},
    {"id": "admin-1", "full_name": "Asha Admin", "email": "asha@triev.in", "role": "admin"},
]


def rider_row(**overrides):
    row = {
        "Rider Name": "Ravi Kumar",
        "Mobile Number": "+91 98765-43210",
        "Triev ID": "TR101",
        "Chassis Number": "MD9ABC123456",
        "Client Name": "Zomato",
        "Team Leader": "meena@triev.in",
        "Allotment Date": "2024-01-15",
        "Wallet Amount": "(-) 500",
        "Remarks": "",
    }
    row.update(overrides)
    return row


class TestParseCurrency:
    @pytest.mark.parametrize("raw,expected", [
        ("500", 500.0),
        ("-500", -500.0),
        ("(-) 500", -500.0),
        ("(500)", -500.0),
        ("₹1,200", 1200.0),
        ("₹ -1,200.50", -1200.5),
        ("", 0.0),
        (None, 0.0),
        (250, 250.0),
    ])
    def test_formats(self, raw, expected):
        assert parse_currency(raw) == expected

    def test_garbage(self):
        with pytest.raises(ValueError):
            parse_currency("abc")


class TestReadTabular:
    def test_csv_blanks_become_empty_strings(self):
        content = b"Rider Name , Mobile Number,Wallet Amount\nRavi,09876543210,\n"

        rows = read_tabular("riders.csv", content)

        assert rows == [{"Rider Name": "Ravi", "Mobile Number": "09876543210", "Wallet Amount": ""}]

    def test_excel(self):
        buffer = io.BytesIO()
        pd.DataFrame([{"Triev ID": "TR1", "Wallet Amount": "-20"}]).to_excel(buffer, index=False)

        rows = read_tabular("wallets.xlsx", buffer.getvalue())

        assert rows == [{"Triev ID": "TR1", "Wallet Amount": "-20"}]

    def test_missing_columns(self):
        assert missing_columns([], ["A"]) == ["A"]
        assert missing_columns([{"A": 1}], ["A", "B"]) == ["B"]


class TestTeamLeaderDirectory:
    def test_resolution_order(self):
        directory = TeamLeaderDirectory(USERS)

        assert directory.resolve("3f6c1a2e-1111-4222-8333-944455556666") == USERS[0]["id"]
        assert directory.resolve("OM@triev.in") == USERS[0]["id"]
        assert directory.resolve("meena rao") == "tl-2"
        assert directory.resolve("Om Prakash Singh") == USERS[0]["id"]
        assert directory.resolve("Om Prakash Singh (KONTI)") == USERS[0]["id"]
        assert directory.resolve("Nobody") is None
        assert directory.resolve("") is None


class TestRiderImporter:
    def test_inserts_new_rider(self, store, activity, fake_client, admin):
        fake_client.tables["users"] = list(USERS)

        summary = RiderImporter(store, activity).run([rider_row()], admin)

        assert (summary.total, summary.success, summary.failed) == (1, 1, 0)
        rider = fake_client.tables["riders"][0]
        assert rider["mobile_number"] == "919876543210"
        assert rider["wallet_amount"] == -500.0
        assert rider["team_leader_id"] == "tl-2"
        assert rider["team_leader_name"] == "meena@triev.in"
        assert rider["allotment_date"].startswith("2024-01-15")

        history = fake_client.tables["import_history"][0]
        assert history["import_type"] == "rider"
        assert history["status"] == "success"
        assert fake_client.tables["activity_logs"][0]["action_type"] == "bulkImport"

    def test_updates_existing_rider(self, store, activity, fake_client, admin):
        fake_client.tables["riders"] = [{"id": "r1", "rider_name": "Old", "triev_id": "TR101"}]

        RiderImporter(store, activity).run([rider_row(**{"Mobile Number": ""})], admin)

        assert len(fake_client.tables["riders"]) == 1
        assert fake_client.tables["riders"][0]["rider_name"] == "Ravi Kumar"

    def test_unknown_leader_and_client(self, store, activity, fake_client, admin):
        fake_client.tables["users"] = list(USERS)
        row = rider_row(**{"Team Leader": "", "Base": "Ghost Leader", "Client Name": "Dunzo"})

        summary = RiderImporter(store, activity).run([row], admin)

        assert summary.success == 1
        assert summary.errors[0].row == 2
        assert "Ghost Leader" in summary.errors[0].reason
        rider = fake_client.tables["riders"][0]
        assert rider["team_leader_id"] is None
        assert rider["team_leader_name"] == "Unassigned"
        assert rider["client_name"] == "Other"

    def test_row_failures(self, store, activity, fake_client, admin):
        fake_client.tables["users"] = list(USERS)
        rows = [
            rider_row(),
            rider_row(**{"Triev ID": "", "Mobile Number": "", "Chassis Number": ""}),
            rider_row(**{"Rider Name": "", "Triev ID": "TR102"}),
            rider_row(**{"Triev ID": "TR103", "Mobile Number": "9000000003", "Wallet Amount": "lots"}),
        ]

        summary = RiderImporter(store, activity).run(rows, admin)

        assert (summary.success, summary.failed) == (1, 3)
        assert [e.row for e in summary.errors] == [3, 4, 5]
        assert summary.errors[0].reason.startswith("Missing Identifier")
        assert summary.errors[1].reason == "Missing Rider Name"
        assert fake_client.tables["import_history"][0]["status"] == "partial"

    def test_history_keeps_fifty_errors(self, store, activity, fake_client, admin):
        rows = [rider_row(**{"Rider Name": ""}) for _ in range(60)]

        summary = RiderImporter(store, activity).run(rows, admin)

        assert summary.failed == 60
        assert len(summary.errors) == 60
        history = fake_client.tables["import_history"][0]
        assert len(history["errors"]) == 50
        assert history["status"] == "failed"

    def test_template_columns(self):
        assert set(REQUIRED_RIDER_COLUMNS) <= set(rider_row())


class TestWalletImporter:
    def test_updates_by_triev_id_then_mobile(self, store, activity, fake_client, admin):
        fake_client.tables["riders"] = [
            {"id": "r1", "rider_name": "A", "triev_id": "TR1", "mobile_number": "9000000001"},
            {"id": "r2", "rider_name": "B", "triev_id": "TR2", "mobile_number": "9000000002"},
        ]
        rows = [
            {"Triev ID": "TR1", "Mobile Number": "", "Wallet Amount": "(-) 300"},
            {"Triev ID": "TR404", "Mobile Number": "90000 00002", "Wallet Amount": "₹1,000"},
        ]

        summary = WalletImporter(store, activity).run(rows, admin)

        assert (summary.success, summary.failed) == (2, 0)
        wallets = {row["id"]: row["wallet_amount"] for row in fake_client.tables["riders"]}
        assert wallets == {"r1": -300.0, "r2": 1000.0}
        assert fake_client.tables["import_history"][0]["import_type"] == "wallet"

    def test_failures(self, store, activity, fake_client, admin):
        fake_client.tables["riders"] = [{"id": "r1", "rider_name": "A", "triev_id": "TR1"}]
        rows = [
            {"Triev ID": "", "Mobile Number": "", "Wallet Amount": "10"},
            {"Triev ID": "TR9", "Mobile Number": "", "Wallet Amount": "10"},
            {"Triev ID": "TR1", "Mobile Number": "", "Wallet Amount": "ten"},
        ]

        summary = WalletImporter(store, activity).run(rows, admin)

        assert summary.failed == 3
        reasons = [e.reason for e in summary.errors]
        assert reasons[0].startswith("Missing Identifier")
        assert reasons[1] == "Rider not found for Triev ID: TR9. Ensure rider exists in system."
        assert reasons[2] == "Invalid Wallet Amount value."
