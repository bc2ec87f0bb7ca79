import copy

from src.services.lead_classifier import (
    DUPLICATE,
    GENUINE,
    MATCH,
    active_leads,
    classify_leads,
    summarize_for_viewer,
    working_set_for,
)


class TestClassifyLeads:
    def test_scenario_genuine_duplicate_match(self, make_lead, make_rider):
        leads = [
            make_lead("9876543210", id="a"),
            make_lead("+91 98765 43210", id="b"),
            make_lead("9000000001", id="c"),
            make_lead("9111111111", id="d"),
        ]
        riders = [make_rider("919111111111")]

        result = classify_leads(leads, riders)

        assert result.categories == {"a": DUPLICATE, "b": DUPLICATE, "c": GENUINE, "d": MATCH}
        assert result.counts == (1, 2, 1)

    def test_match_wins_over_duplicate(self, make_lead, make_rider):
        leads = [make_lead("9876543210", id="a"), make_lead("09876543210", id="b")]
        riders = [make_rider("+91-98765-43210")]

        result = classify_leads(leads, riders)

        assert result.categories == {"a": MATCH, "b": MATCH}
        assert result.counts == (0, 0, 2)

    def test_empty_numbers_are_excluded(self, make_lead):
        leads = [make_lead("", id="a"), make_lead("n/a", id="b"), make_lead("9876543210", id="c")]

        result = classify_leads(leads, [])

        assert result.categories == {"c": GENUINE}
        assert result.total == 1
        assert result.category_for(leads[0]) is None

    def test_empty_rider_numbers_never_match(self, make_lead, make_rider):
        result = classify_leads([make_lead("", id="a")], [make_rider("")])
        assert result.total == 0

    def test_empty_inputs(self):
        result = classify_leads([], [])
        assert result.counts == (0, 0, 0)
        assert result.categories == {}

    def test_partition_adds_up(self, make_lead, make_rider):
        leads = [make_lead(f"90000000{i % 7:02d}") for i in range(30)] + [make_lead("")]
        riders = [make_rider("9000000003"), make_rider("9000000005")]

        result = classify_leads(leads, riders)

        assert result.total == 30
        assert len(result.categories) == 30

    def test_idempotent_and_does_not_mutate(self, make_lead, make_rider):
        leads = [make_lead("9876543210"), make_lead("9876543210"), make_lead("9000000001")]
        riders = [make_rider("9000000001")]
        snapshot = copy.deepcopy(leads)

        first = classify_leads(leads, riders)
        second = classify_leads(leads, riders)

        assert first == second
        assert leads == snapshot

    def test_accepts_row_dicts(self):
        leads = [{"id": 1, "mobileNumber": "9876543210"}, {"id": 2, "mobile_number": "9876543210"}]
        riders = [{"mobile_number": "9000000001"}]

        result = classify_leads(leads, riders)

        assert result.categories == {"1": DUPLICATE, "2": DUPLICATE}

    def test_population_drives_duplicates(self, make_lead):
        mine = [make_lead("9876543210", id="mine")]
        everyone = mine + [make_lead("9876543210", id="theirs", created_by="tl-2")]

        assert classify_leads(mine, []).categories == {"mine": GENUINE}
        assert classify_leads(mine, [], population=everyone).categories == {"mine": DUPLICATE}


class TestClassificationResult:
    def test_filter(self, make_lead, make_rider):
        leads = [make_lead("9876543210", id="a"), make_lead("9000000001", id="b"), make_lead("", id="c")]
        result = classify_leads(leads, [make_rider("9000000001")])

        assert [lead.id for lead in result.filter(leads, MATCH)] == ["b"]
        assert [lead.id for lead in result.filter(leads, GENUINE)] == ["a"]
        assert result.filter(leads, DUPLICATE) == []
        assert result.filter(leads, None) == leads

    def test_percentages(self, make_lead):
        leads = [make_lead("9876543210"), make_lead("9876543210"), make_lead("9000000001")]
        result = classify_leads(leads, [])

        assert result.percentages(3) == {GENUINE: 33.3, DUPLICATE: 66.7, MATCH: 0.0}
        assert classify_leads([], []).percentages(0) == {GENUINE: 0.0, DUPLICATE: 0.0, MATCH: 0.0}


class TestViewerScope:
    def test_working_set(self, make_lead, admin, leader):
        leads = [
            make_lead("9876543210", id="own"),
            make_lead("9000000001", id="other", created_by="tl-2"),
            make_lead("9000000002", id="gone", deleted_at="2024-01-01T00:00:00Z"),
        ]

        assert [lead.id for lead in working_set_for(admin, leads)] == ["own", "other"]
        assert [lead.id for lead in working_set_for(leader, leads)] == ["own"]

    def test_active_leads_drops_deleted(self, make_lead):
        leads = [make_lead("1", id="a"), make_lead("2", id="b", is_permanently_deleted=True)]
        assert [lead.id for lead in active_leads(leads)] == ["a"]

    def test_team_leader_sees_cross_team_duplicates(self, make_lead, leader):
        leads = [
            make_lead("9876543210", id="own"),
            make_lead("+919876543210", id="other", created_by="tl-2"),
        ]

        result = summarize_for_viewer(leader, leads, [])

        assert result.categories == {"own": DUPLICATE}
        assert result.counts == (0, 1, 0)

    def test_deleted_leads_do_not_create_duplicates(self, make_lead, admin):
        leads = [
            make_lead("9876543210", id="live"),
            make_lead("9876543210", id="dead", deleted_at="2024-01-01T00:00:00Z"),
        ]

        result = summarize_for_viewer(admin, leads, [])

        assert result.categories == {"live": GENUINE}

    def test_riders_are_not_scoped(self, make_lead, make_rider, leader):
        leads = [make_lead("9876543210", id="own")]
        riders = [make_rider("9876543210", team_leader_id="tl-2")]

        assert summarize_for_viewer(leader, leads, riders).categories == {"own": MATCH}
