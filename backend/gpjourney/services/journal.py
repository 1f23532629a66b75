"""Journal operations: add/edit/delete log entries, medications and visits.

Each operation reads the whole record from the store, changes it, and writes
the whole record back.
"""
import logging
import math
import re
import uuid
from datetime import date, datetime
from typing import Awaitable, Callable

from gpjourney.models.journal import (
    DailyLogs,
    DoctorVisit,
    DoctorVisitCreate,
    DoctorVisitUpdate,
    LogEntry,
    LogEntryCreate,
    LogEntryUpdate,
    LogType,
    Medication,
    MedicationCreate,
    MedicationUpdate,
)
from gpjourney.services.llm import summarize_doctor_visit
from gpjourney.services.store import Store

logger = logging.getLogger(__name__)

_PLAIN_NUMBER = re.compile(r"[0-9]+(\.[0-9]*)?|\.[0-9]+")

Summarizer = Callable[[str], Awaitable[str]]


class InvalidEntryError(ValueError):
    """The requested change is not valid for the record."""


class RecordNotFoundError(LookupError):
    """No record with the given id (or date) exists."""


def _new_id() -> str:
    return uuid.uuid4().hex


def current_timestamp(now: datetime | None = None) -> str:
    """Time of day as entries display it, e.g. '9:05:00 AM'."""
    now = now or datetime.now()
    return now.strftime("%I:%M:%S %p").lstrip("0")


def format_weight(raw: str) -> str:
    """Validate a weight in pounds and render it as '<n> lbs'."""
    value = raw.strip()
    if value.lower().endswith("lbs"):
        value = value[:-3].strip()
    if not _PLAIN_NUMBER.fullmatch(value):
        raise InvalidEntryError("Weight must be a number of pounds")
    pounds = float(value)
    if not math.isfinite(pounds):
        raise InvalidEntryError("Weight must be a number of pounds")
    if not pounds > 0:
        raise InvalidEntryError("Weight must be greater than zero")
    return f"{value} lbs"


def _validate_log_date(date_key: str, today: date | None = None) -> None:
    try:
        day = date.fromisoformat(date_key)
    except ValueError:
        raise InvalidEntryError(f"Invalid date {date_key!r}; expected YYYY-MM-DD")
    if day > (today or date.today()):
        raise InvalidEntryError("Cannot log entries for a future date")


def _entry_content(log_type: LogType, raw: str) -> str:
    if log_type == LogType.WEIGHT:
        return format_weight(raw)
    content = raw.strip()
    if not content:
        raise InvalidEntryError("content cannot be empty")
    return content


# ---------------------------------------------------------------------------
# Log entries
# ---------------------------------------------------------------------------


def add_log_entry(
    store: Store,
    date_key: str,
    payload: LogEntryCreate,
    now: datetime | None = None,
) -> LogEntry:
    _validate_log_date(date_key, today=now.date() if now else None)
    entry = LogEntry(
        id=_new_id(),
        timestamp=current_timestamp(now),
        type=payload.type,
        content=_entry_content(payload.type, payload.content),
    )
    logs = store.get_logs()
    logs.setdefault(date_key, []).append(entry)
    store.save_logs(logs)
    logger.info("Added %s entry on %s", entry.type.value, date_key)
    return entry


def _find_entry(logs: DailyLogs, date_key: str, entry_id: str) -> int:
    for index, entry in enumerate(logs.get(date_key, [])):
        if entry.id == entry_id:
            return index
    raise RecordNotFoundError(f"Log entry {entry_id} not found on {date_key}")


def update_log_entry(
    store: Store, date_key: str, entry_id: str, payload: LogEntryUpdate
) -> LogEntry:
    logs = store.get_logs()
    index = _find_entry(logs, date_key, entry_id)
    entry = logs[date_key][index]
    updated = entry.model_copy(update={"content": _entry_content(entry.type, payload.content)})
    logs[date_key][index] = updated
    store.save_logs(logs)
    return updated


def delete_log_entry(store: Store, date_key: str, entry_id: str) -> None:
    # The date key stays behind with whatever entries remain, possibly none.
    logs = store.get_logs()
    index = _find_entry(logs, date_key, entry_id)
    del logs[date_key][index]
    store.save_logs(logs)


# ---------------------------------------------------------------------------
# Medications
# ---------------------------------------------------------------------------


def _find_medication(medications: list[Medication], medication_id: str) -> int:
    for index, med in enumerate(medications):
        if med.id == medication_id:
            return index
    raise RecordNotFoundError(f"Medication {medication_id} not found")


def add_medication(store: Store, payload: MedicationCreate) -> Medication:
    medication = Medication(id=_new_id(), **payload.model_dump())
    medications = store.get_medications()
    medications.append(medication)
    store.save_medications(medications)
    return medication


def update_medication(
    store: Store, medication_id: str, payload: MedicationUpdate
) -> Medication:
    medications = store.get_medications()
    index = _find_medication(medications, medication_id)
    updated = medications[index].model_copy(update=payload.model_dump(exclude_none=True))
    medications[index] = updated
    store.save_medications(medications)
    return updated


def delete_medication(store: Store, medication_id: str) -> None:
    medications = store.get_medications()
    index = _find_medication(medications, medication_id)
    del medications[index]
    store.save_medications(medications)


# ---------------------------------------------------------------------------
# Doctor visits
# ---------------------------------------------------------------------------


def _find_visit(visits: list[DoctorVisit], visit_id: str) -> int:
    for index, visit in enumerate(visits):
        if visit.id == visit_id:
            return index
    raise RecordNotFoundError(f"Doctor visit {visit_id} not found")


async def add_doctor_visit(
    store: Store,
    payload: DoctorVisitCreate,
    summarize: Summarizer | None = None,
) -> DoctorVisit:
    summarize = summarize or summarize_doctor_visit
    ai_summary = await summarize(payload.details) if payload.details.strip() else None
    visit = DoctorVisit(
        id=_new_id(),
        date=payload.date.isoformat(),
        purpose=payload.purpose,
        details=payload.details,
        visit_types=payload.visit_types,
        ai_summary=ai_summary,
    )
    visits = store.get_doctor_visits()
    visits.append(visit)
    store.save_doctor_visits(visits)
    return visit


async def update_doctor_visit(
    store: Store,
    visit_id: str,
    payload: DoctorVisitUpdate,
    summarize: Summarizer | None = None,
) -> DoctorVisit:
    """Apply the given fields; the summary is regenerated only if details changed."""
    summarize = summarize or summarize_doctor_visit
    before = store.get_doctor_visits()
    existing = before[_find_visit(before, visit_id)]

    changes: dict = {}
    if payload.date is not None:
        changes["date"] = payload.date.isoformat()
    if payload.purpose is not None:
        changes["purpose"] = payload.purpose
    if payload.visit_types is not None:
        changes["visit_types"] = payload.visit_types
    if payload.details is not None and payload.details != existing.details:
        changes["details"] = payload.details
        changes["ai_summary"] = (
            await summarize(payload.details) if payload.details.strip() else None
        )

    # Visits saved while the summary was pending must survive this write.
    visits = store.get_doctor_visits()
    index = _find_visit(visits, visit_id)
    updated = visits[index].model_copy(update=changes)
    visits[index] = updated
    store.save_doctor_visits(visits)
    return updated
