"""Unit tests for gpjourney.services.store.

Uses InMemoryStorage as the substrate; no filesystem access except where a
failing substrate is simulated.
"""
import json
import logging

from gpjourney.core.storage import InMemoryStorage, StorageQuotaExceededError
from gpjourney.models.journal import DoctorVisit, LogEntry, LogType, Medication
from gpjourney.services.store import DOC_VISITS_KEY, LOGS_KEY, MEDS_KEY, Store

ENTRY = LogEntry(id="1", timestamp="10:00:00 AM", type=LogType.FOOD, content="Oatmeal")
MED = Medication(id="m1", name="Prucalopride", dosage="2mg", frequency="Daily")
VISIT = DoctorVisit(
    id="v1",
    date="2024-01-03",
    purpose="GI follow-up",
    details="Discussed gastric emptying results",
    visit_types=["Follow-up", "Specialist"],
    ai_summary="Reviewed gastric emptying study.",
)


class FailingStorage:
    """Substrate whose writes always exceed the quota."""

    def __init__(self):
        self.items = {}

    def get_item(self, key):
        return self.items.get(key)

    def set_item(self, key, value):
        raise StorageQuotaExceededError("quota exceeded")


class TestDefaults:
    def test_missing_keys_return_empty_defaults(self):
        store = Store(InMemoryStorage())
        assert store.get_logs() == {}
        assert store.get_medications() == []
        assert store.get_doctor_visits() == []

    def test_defaults_are_fresh_objects(self):
        store = Store(InMemoryStorage())
        store.get_logs()["2024-01-01"] = []
        assert store.get_logs() == {}


class TestMalformedStoredValues:
    def test_invalid_json_returns_default_and_logs(self, caplog):
        store = Store(InMemoryStorage({LOGS_KEY: "{not json"}))
        with caplog.at_level(logging.ERROR):
            assert store.get_logs() == {}
        assert LOGS_KEY in caplog.text

    def test_wrong_shape_returns_default(self):
        store = Store(InMemoryStorage({MEDS_KEY: '{"name": "not a list"}'}))
        assert store.get_medications() == []

    def test_wrong_shape_logs_returns_default(self):
        store = Store(InMemoryStorage({LOGS_KEY: "[1, 2]"}))
        assert store.get_logs() == {}

    def test_bad_log_type_skips_only_that_entry(self, caplog):
        raw = json.dumps(
            {
                "2024-01-01": [ENTRY.model_dump(mode="json")],
                "2024-01-02": [
                    {"id": "2", "timestamp": "9:00", "type": "Exercise", "content": "Walk"},
                    {"id": "3", "timestamp": "9:30", "type": "Symptom", "content": "Bloating"},
                ],
            }
        )
        store = Store(InMemoryStorage({LOGS_KEY: raw}))
        with caplog.at_level(logging.WARNING):
            logs = store.get_logs()
        assert logs["2024-01-01"] == [ENTRY]
        assert [e.id for e in logs["2024-01-02"]] == ["3"]
        assert "Skipping invalid LogEntry" in caplog.text

    def test_day_that_is_not_a_list_is_skipped(self):
        raw = json.dumps({"2024-01-01": [ENTRY.model_dump(mode="json")], "2024-01-02": "oops"})
        assert Store(InMemoryStorage({LOGS_KEY: raw})).get_logs() == {"2024-01-01": [ENTRY]}

    def test_incomplete_medication_skipped(self):
        raw = json.dumps([MED.model_dump(), {"id": "m2"}])
        assert Store(InMemoryStorage({MEDS_KEY: raw})).get_medications() == [MED]

    def test_invalid_visit_skipped(self):
        raw = json.dumps([VISIT.model_dump(by_alias=True), {"id": "v2", "date": "2024-02-01"}])
        assert Store(InMemoryStorage({DOC_VISITS_KEY: raw})).get_doctor_visits() == [VISIT]


class TestReadWrite:
    def test_logs_round_trip(self):
        store = Store(InMemoryStorage())
        store.save_logs({"2024-01-01": [ENTRY]})
        assert store.get_logs() == {"2024-01-01": [ENTRY]}

    def test_medications_round_trip(self):
        store = Store(InMemoryStorage())
        store.save_medications([MED])
        assert store.get_medications() == [MED]

    def test_doctor_visits_round_trip(self):
        store = Store(InMemoryStorage())
        store.save_doctor_visits([VISIT])
        assert store.get_doctor_visits() == [VISIT]

    def test_visits_stored_with_camel_case_keys(self):
        storage = InMemoryStorage()
        Store(storage).save_doctor_visits([VISIT])
        stored = json.loads(storage.items[DOC_VISITS_KEY])
        assert stored[0]["visitTypes"] == ["Follow-up", "Specialist"]
        assert stored[0]["aiSummary"] == "Reviewed gastric emptying study."

    def test_missing_ai_summary_is_omitted(self):
        storage = InMemoryStorage()
        Store(storage).save_doctor_visits([VISIT.model_copy(update={"ai_summary": None})])
        assert "aiSummary" not in json.loads(storage.items[DOC_VISITS_KEY])[0]

    def test_reads_data_written_by_older_deployments(self):
        raw = json.dumps(
            [
                {
                    "id": "1704300000000",
                    "date": "2024-01-03",
                    "purpose": "Check-up",
                    "details": "",
                    "visitTypes": ["Check-up"],
                }
            ]
        )
        visits = Store(InMemoryStorage({DOC_VISITS_KEY: raw})).get_doctor_visits()
        assert visits[0].visit_types == ["Check-up"]
        assert visits[0].ai_summary is None


class TestWriteFailures:
    def test_write_failure_is_logged_not_raised(self, caplog):
        store = Store(FailingStorage())
        with caplog.at_level(logging.ERROR):
            store.save_medications([MED])
        assert "quota exceeded" in caplog.text

    def test_write_failure_leaves_stored_value(self):
        storage = FailingStorage()
        storage.items[MEDS_KEY] = "[]"
        Store(storage).save_medications([MED])
        assert Store(storage).get_medications() == []

    def test_read_failure_returns_default(self, tmp_path):
        from gpjourney.core.storage import FileStorage

        (tmp_path / f"{LOGS_KEY}.json").write_bytes(b"\xff\xfe not utf-8")
        assert Store(FileStorage(tmp_path)).get_logs() == {}
