"""Typed read/write access to the three persisted record kinds.

Every record is read and written whole (no partial updates). Reads never
raise: a missing key yields the empty default, and a stored value that is not
JSON, or not a JSON list/object as its kind requires, is logged and treated
as absent. Individual items that fail validation are logged and skipped so
the rest of the record survives. Writes never raise either: a substrate
failure (quota exceeded, disk error) is logged and the caller's in-memory
state is left as is.
"""
import json
import logging
from typing import Any, Callable

from pydantic import TypeAdapter

from gpjourney.core.storage import KeyValueStorage, StorageError
from gpjourney.models.journal import (
    DailyLogs,
    DailyLogsAdapter,
    DoctorVisit,
    DoctorVisitListAdapter,
    Medication,
    MedicationListAdapter,
    salvage_daily_logs,
    salvage_records,
)

logger = logging.getLogger(__name__)

LOGS_KEY = "gpJourneyLogs"
MEDS_KEY = "gpJourneyMeds"
DOC_VISITS_KEY = "gpJourneyDocVisits"


class Store:
    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def _read(self, key: str, salvage: Callable[[Any], Any], default: Any) -> Any:
        try:
            raw = self.storage.get_item(key)
        except StorageError as exc:
            logger.error("Failed to read %s from storage: %s", key, exc)
            return default
        if raw is None:
            return default
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Stored value for %s is not valid JSON (%s); using empty default", key, exc)
            return default
        value = salvage(data)
        if value is None:
            logger.error(
                "Stored value for %s is a JSON %s, not the expected shape; using empty default",
                key,
                type(data).__name__,
            )
            return default
        return value

    def _write(self, key: str, adapter: TypeAdapter, value: Any) -> None:
        try:
            payload = adapter.dump_json(value, by_alias=True, exclude_none=True)
            self.storage.set_item(key, payload.decode("utf-8"))
        except StorageError as exc:
            logger.error("Failed to save %s to storage: %s", key, exc)

    def get_logs(self) -> DailyLogs:
        return self._read(LOGS_KEY, salvage_daily_logs, {})

    def save_logs(self, logs: DailyLogs) -> None:
        self._write(LOGS_KEY, DailyLogsAdapter, logs)

    def get_medications(self) -> list[Medication]:
        return self._read(MEDS_KEY, lambda data: salvage_records(data, Medication), [])

    def save_medications(self, medications: list[Medication]) -> None:
        self._write(MEDS_KEY, MedicationListAdapter, medications)

    def get_doctor_visits(self) -> list[DoctorVisit]:
        return self._read(DOC_VISITS_KEY, lambda data: salvage_records(data, DoctorVisit), [])

    def save_doctor_visits(self, visits: list[DoctorVisit]) -> None:
        self._write(DOC_VISITS_KEY, DoctorVisitListAdapter, visits)
