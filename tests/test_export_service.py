import io

import pandas as pd

from src.services.export_service import (
    LEAD_EXPORT_COLUMNS,
    leads_to_csv,
    rider_template_csv,
    riders_to_csv,
    riders_to_excel,
    wallet_template_csv,
)
from src.services.import_service import REQUIRED_RIDER_COLUMNS, WALLET_COLUMNS, parse_currency


def test_leads_csv_uses_live_categories(make_lead):
    leads = [
        make_lead("9876543210", id="a", lead_id=1, rider_name="Ravi", city="Delhi", score=55),
        make_lead("9000000001", id="b", rider_name="Sita", category="Duplicate"),
    ]

    df = pd.read_csv(io.BytesIO(leads_to_csv(leads, {"a": "Match"})), dtype=str, keep_default_na=False)

    assert list(df.columns) == LEAD_EXPORT_COLUMNS
    assert df.loc[0, "Category"] == "Match"
    assert df.loc[0, "Score"] == "55"
    assert df.loc[1, "Category"] == "Duplicate"
    assert df.loc[1, "Lead ID"] == ""


def test_riders_csv(make_rider):
    riders = [make_rider("9876543210", triev_id="TR1", rider_name="Arun", wallet_amount=-20.5)]

    df = pd.read_csv(io.BytesIO(riders_to_csv(riders)))

    assert df.loc[0, "Triev ID"] == "TR1"
    assert df.loc[0, "Wallet Amount"] == -20.5


def test_riders_excel(make_rider):
    riders = [make_rider("9876543210", rider_name="Arun"), make_rider("9000000001", rider_name="Bala")]

    df = pd.read_excel(io.BytesIO(riders_to_excel(riders)), sheet_name="Riders")

    assert list(df["Rider Name"]) == ["Arun", "Bala"]


def test_templates_match_importers():
    rider = pd.read_csv(io.BytesIO(rider_template_csv()), dtype=str)
    wallet = pd.read_csv(io.BytesIO(wallet_template_csv()), dtype=str)

    assert list(rider.columns) == REQUIRED_RIDER_COLUMNS
    assert list(wallet.columns) == WALLET_COLUMNS
    assert parse_currency(wallet.loc[0, "Wallet Amount"]) == -500.0
