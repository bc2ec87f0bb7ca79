import pytest

from src.services.lead_scoring import (
    calculate_rider_score,
    rescore_leads,
    score_band,
    score_lead,
)


class TestScoreLead:
    def test_base_with_client(self, make_lead):
        assert score_lead(make_lead("9876543210"), "Genuine") == 55

    def test_match_and_permanent_license(self, make_lead):
        lead = make_lead("9876543210", driving_license="Permanent")
        assert score_lead(lead, "Match") == 100

    def test_duplicate_penalty(self, make_lead):
        lead = make_lead("9876543210", client_interested="")
        assert score_lead(lead, "Duplicate") == 20

    def test_unclassified(self, make_lead):
        assert score_lead(make_lead(""), None) == 55


@pytest.mark.parametrize("score,band", [
    (None, "Low"),
    (0, "Low"),
    (49, "Low"),
    (50, "Medium"),
    (79, "Medium"),
    (80, "High"),
    (100, "High"),
])
def test_score_band(score, band):
    assert score_band(score) == band


class TestRescoreLeads:
    def test_only_changed_leads_are_returned(self, make_lead, make_rider):
        leads = [
            make_lead("9876543210", id="dup1"),
            make_lead("9876543210", id="dup2", category="Duplicate", score=25),
            make_lead("9000000001", id="match"),
            make_lead("9000000002", id="fresh", category="Genuine", score=55),
            make_lead("", id="blank"),
        ]
        riders = [make_rider("9000000001")]

        updates = {u.id: (u.category, u.score) for u in rescore_leads(leads, riders)}

        assert updates == {
            "dup1": ("Duplicate", 25),
            "match": ("Match", 95),
        }

    def test_empty(self):
        assert rescore_leads([], []) == []


class TestRiderScore:
    def test_healthy_rider(self, make_rider):
        assert calculate_rider_score(make_rider("1", wallet_amount=1000)) == {"score": 100, "label": "Excellent"}

    def test_small_debt(self, make_rider):
        assert calculate_rider_score(make_rider("1", wallet_amount=-500)) == {"score": 90, "label": "Excellent"}

    def test_inactive_with_large_debt(self, make_rider):
        result = calculate_rider_score(make_rider("1", status="inactive", wallet_amount=-6000))
        assert result == {"score": 40, "label": "Critical"}

    def test_label_thresholds(self, make_rider):
        result = calculate_rider_score(make_rider("1", wallet_amount=-2500))
        assert result == {"score": 80, "label": "Excellent"}
        result = calculate_rider_score(make_rider("1", status="inactive", wallet_amount=-100))
        assert result == {"score": 70, "label": "At Risk"}
