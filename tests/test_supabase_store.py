import pytest

from src.models.leads import LeadUpdate
from src.services import supabase_store
from src.services.supabase_store import BackendError, FleetStore


class TestConnect:
    def test_requires_credentials(self):
        with pytest.raises(BackendError):
            FleetStore.connect("", "key")


class TestLeads:
    def test_fetch_leads_skips_deleted(self, store, fake_client):
        fake_client.tables["leads"] = [
            {"id": "1", "mobile_number": "9876543210", "deleted_at": None},
            {"id": "2", "mobile_number": "9000000001", "deleted_at": "2024-01-01T00:00:00Z"},
        ]

        assert [lead.id for lead in store.fetch_leads()] == ["1"]
        assert {lead.id for lead in store.fetch_leads(include_deleted=True)} == {"1", "2"}

    def test_fetch_pages_through_results(self, store, fake_client, monkeypatch):
        monkeypatch.setattr(supabase_store, "PAGE_SIZE", 2)
        fake_client.tables["riders"] = [{"id": str(i), "created_at": f"2024-01-0{i}T00:00:00Z"} for i in range(1, 6)]

        riders = store.fetch_riders()

        assert [rider.id for rider in riders] == ["5", "4", "3", "2", "1"]
        assert fake_client.calls.count(("riders", "select")) == 3

    def test_create_update_delete(self, store, fake_client):
        lead = store.create_lead({"rider_name": "Ravi", "mobile_number": "+919876543210"})
        assert lead.rider_name == "Ravi"

        store.update_lead(lead.id, {"status": "Convert"})
        row = fake_client.tables["leads"][0]
        assert row["status"] == "Convert"
        assert "updated_at" in row

        store.soft_delete_leads([lead.id])
        assert fake_client.tables["leads"][0]["deleted_at"]

        store.hard_delete_leads([lead.id])
        assert fake_client.tables["leads"] == []

    def test_empty_id_lists_do_nothing(self, store, fake_client):
        store.soft_delete_leads([])
        store.hard_delete_leads([])
        assert fake_client.calls == []

    def test_apply_lead_updates(self, store, fake_client):
        fake_client.tables["leads"] = [{"id": "1", "category": "Genuine", "score": 55}]

        written = store.apply_lead_updates([LeadUpdate(id="1", category="Match", score=95)])

        assert written == 1
        assert fake_client.tables["leads"][0]["category"] == "Match"
        assert fake_client.tables["leads"][0]["score"] == 95


class TestRiders:
    def test_find_rider_by_any_identifier(self, store, fake_client):
        fake_client.tables["riders"] = [
            {"id": "r1", "rider_name": "A", "triev_id": "TR1", "mobile_number": "9000000001"},
            {"id": "r2", "rider_name": "B", "triev_id": "TR2", "chassis_number": "CH22222"},
        ]

        assert store.find_rider(mobile="9000000001")["id"] == "r1"
        assert store.find_rider(triev_id="TRX", chassis="CH22222")["id"] == "r2"
        assert store.find_rider(triev_id="nope") is None
        assert store.find_rider() is None

    def test_find_rider_by_column(self, store, fake_client):
        fake_client.tables["riders"] = [{"id": "r1", "rider_name": "A", "triev_id": "TR1"}]
        assert store.find_rider_by("triev_id", "TR1")["id"] == "r1"
        assert store.find_rider_by("triev_id", "TR9") is None


class TestSupport:
    def test_admin_ids(self, store, fake_client):
        fake_client.tables["users"] = [
            {"id": "a", "role": "admin"},
            {"id": "b", "role": "teamLeader"},
        ]
        assert store.fetch_admin_ids() == ["a"]

    def test_failures_raise_backend_error(self, store, fake_client):
        fake_client.failing.add("users")
        with pytest.raises(BackendError, match="fetch users failed"):
            store.fetch_users()

    def test_upload_returns_public_url(self, store, fake_client):
        url = store.upload_file("chat-attachments", "uploads/x.png", b"data", "image/png")

        assert url == "https://storage.test/chat-attachments/uploads/x.png"
        assert fake_client.storage.uploads[0][3] == {"content-type": "image/png"}
