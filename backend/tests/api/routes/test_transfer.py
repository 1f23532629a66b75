"""Tests for the export/import and share-report endpoints.

The store is swapped for one over InMemoryStorage via dependency_overrides.
"""
from datetime import date, timedelta

from fastapi.testclient import TestClient

from gpjourney.api.dependencies import get_store
from gpjourney.core.storage import InMemoryStorage
from gpjourney.main import app
from gpjourney.models.journal import LogEntry, LogType, Medication
from gpjourney.services.store import Store

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

TODAY = date.today()
ENTRY = LogEntry(id="e1", timestamp="10:00:00 AM", type=LogType.FOOD, content="Oatmeal")
MED = Medication(id="m1", name="Prucalopride", dosage="2mg", frequency="Daily")


def make_store(logs=None, medications=None) -> Store:
    store = Store(InMemoryStorage())
    if logs is not None:
        store.save_logs(logs)
    if medications is not None:
        store.save_medications(medications)
    return store


def override(store: Store):
    app.dependency_overrides[get_store] = lambda: store
    return lambda: app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# GET /api/transfer/export
# ---------------------------------------------------------------------------


class TestExport:
    def test_returns_envelope_as_download(self):
        store = make_store({"2024-01-01": [ENTRY]}, [MED])
        cleanup = override(store)
        try:
            with TestClient(app) as client:
                response = client.get("/api/transfer/export")
        finally:
            cleanup()

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert "attachment" in response.headers["content-disposition"]
        data = response.json()
        assert data["version"] == "1.0"
        assert data["medications"][0]["name"] == "Prucalopride"


# ---------------------------------------------------------------------------
# POST /api/transfer/import
# ---------------------------------------------------------------------------


class TestImport:
    def test_round_trip_between_stores(self):
        source = make_store({"2024-01-01": [ENTRY]}, [MED])
        target = make_store()

        cleanup = override(source)
        try:
            with TestClient(app) as client:
                exported = client.get("/api/transfer/export").text
        finally:
            cleanup()

        cleanup = override(target)
        try:
            with TestClient(app) as client:
                response = client.post("/api/transfer/import", json={"text": exported})
        finally:
            cleanup()

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert target.get_logs() == source.get_logs()
        assert target.get_medications() == source.get_medications()

    def test_share_text_import(self):
        target = make_store(logs={"2023-12-31": [ENTRY]})
        text = (
            "Health Log History\nFrom: 2024-01-01 To: 2024-01-02\n=========================\n\n"
            "--- Monday, January 1, 2024 ---\n\n[Food]\n- (10:00:00 AM) Oatmeal\n\n"
        )
        cleanup = override(target)
        try:
            with TestClient(app) as client:
                response = client.post("/api/transfer/import", json={"text": text})
        finally:
            cleanup()

        assert response.json() == {"success": True}
        assert set(target.get_logs()) == {"2023-12-31", "2024-01-01"}

    def test_unrecognized_text_reports_failure(self):
        target = make_store(medications=[MED])
        cleanup = override(target)
        try:
            with TestClient(app) as client:
                response = client.post(
                    "/api/transfer/import", json={"text": "not json and no known headers"}
                )
        finally:
            cleanup()

        assert response.status_code == 200
        assert response.json() == {"success": False}
        assert target.get_medications() == [MED]

    def test_blank_text_reports_failure(self):
        cleanup = override(make_store())
        try:
            with TestClient(app) as client:
                response = client.post("/api/transfer/import", json={"text": "   "})
        finally:
            cleanup()

        assert response.json() == {"success": False}

    def test_missing_text_returns_422(self):
        cleanup = override(make_store())
        try:
            with TestClient(app) as client:
                response = client.post("/api/transfer/import", json={})
        finally:
            cleanup()

        assert response.status_code == 422


# ---------------------------------------------------------------------------
# GET /api/share/*
# ---------------------------------------------------------------------------


class TestShare:
    def test_medication_report(self):
        cleanup = override(make_store(medications=[MED]))
        try:
            with TestClient(app) as client:
                response = client.get("/api/share/medications")
        finally:
            cleanup()

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text.startswith("Medication List\n")
        assert "- Prucalopride\n  Dosage: 2mg\n" in response.text

    def test_history_defaults_to_last_30_days(self):
        recent = (TODAY - timedelta(days=3)).isoformat()
        old = (TODAY - timedelta(days=90)).isoformat()
        old_entry = ENTRY.model_copy(update={"content": "Ancient toast"})
        cleanup = override(make_store(logs={recent: [ENTRY], old: [old_entry]}))
        try:
            with TestClient(app) as client:
                response = client.get("/api/share/history")
        finally:
            cleanup()

        assert response.status_code == 200
        assert "Oatmeal" in response.text
        assert "Ancient toast" not in response.text

    def test_history_explicit_range(self):
        cleanup = override(make_store(logs={"2024-01-01": [ENTRY]}))
        try:
            with TestClient(app) as client:
                response = client.get(
                    "/api/share/history", params={"start": "2024-01-01", "end": "2024-01-31"}
                )
        finally:
            cleanup()

        assert "--- Monday, January 1, 2024 ---" in response.text

    def test_history_inverted_range_returns_400(self):
        cleanup = override(make_store())
        try:
            with TestClient(app) as client:
                response = client.get(
                    "/api/share/history", params={"start": "2024-02-01", "end": "2024-01-01"}
                )
        finally:
            cleanup()

        assert response.status_code == 400
        assert "start" in response.json()["detail"]

    def test_history_future_end_returns_400(self):
        cleanup = override(make_store())
        try:
            with TestClient(app) as client:
                response = client.get(
                    "/api/share/history",
                    params={"end": (TODAY + timedelta(days=5)).isoformat()},
                )
        finally:
            cleanup()

        assert response.status_code == 400
        assert "future" in response.json()["detail"]

    def test_summary_report_reimports(self):
        source = make_store(logs={"2024-01-01": [ENTRY]}, medications=[MED])
        cleanup = override(source)
        try:
            with TestClient(app) as client:
                report = client.get(
                    "/api/share/summary", params={"start": "2024-01-01", "end": "2024-01-31"}
                ).text
        finally:
            cleanup()

        target = make_store()
        cleanup = override(target)
        try:
            with TestClient(app) as client:
                response = client.post("/api/transfer/import", json={"text": report})
        finally:
            cleanup()

        assert response.json() == {"success": True}
        assert [m.name for m in target.get_medications()] == ["Prucalopride"]
        assert [e.content for e in target.get_logs()["2024-01-01"]] == ["Oatmeal"]
