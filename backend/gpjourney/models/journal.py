"""Record kinds kept in local storage.

Field aliases keep the stored/exported JSON in the camelCase shape older
deployments wrote (``visitTypes``, ``aiSummary``), so data moves between
deployments unchanged.
"""
import datetime
import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

logger = logging.getLogger(__name__)


class LogType(str, Enum):
    # Declaration order is the display order in share reports.
    FOOD = "Food"
    SYMPTOM = "Symptom"
    MEDICATION = "Medication"
    WEIGHT = "Weight"
    JOURNAL = "Journal"


VISIT_TYPES: list[str] = [
    "Follow-up",
    "Check-up",
    "X-ray",
    "Surgery",
    "Lab Work",
    "Specialist",
    "Emergency",
    "Physical Therapy",
    "Other",
]


class LogEntry(BaseModel):
    id: str
    timestamp: str = Field(description="Locale-formatted time of day, e.g. '10:00:00 AM'")
    type: LogType
    content: str


class Medication(BaseModel):
    id: str
    name: str
    dosage: str = ""
    frequency: str = ""


class DoctorVisit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    date: str = Field(description="Visit date (YYYY-MM-DD)")
    purpose: str
    details: str = ""
    visit_types: list[str] = Field(default_factory=list, alias="visitTypes")
    ai_summary: str | None = Field(default=None, alias="aiSummary")


# date string (YYYY-MM-DD) -> entries in insertion order
DailyLogs = dict[str, list[LogEntry]]

DailyLogsAdapter = TypeAdapter(DailyLogs)
MedicationListAdapter = TypeAdapter(list[Medication])
DoctorVisitListAdapter = TypeAdapter(list[DoctorVisit])


def _valid_items(items: list, model: type[BaseModel]) -> list:
    valid = []
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError as exc:
            logger.warning(
                "Skipping invalid %s record (%d error(s))", model.__name__, exc.error_count()
            )
    return valid


def salvage_records(data: Any, model: type[BaseModel]) -> list | None:
    """Validate a decoded JSON list item by item, dropping the items that fail.

    Returns None when ``data`` is not a list at all.
    """
    if not isinstance(data, list):
        return None
    return _valid_items(data, model)


def salvage_daily_logs(data: Any) -> DailyLogs | None:
    """Like :func:`salvage_records` for the date-keyed logs record.

    Invalid entries are dropped; a day whose value is not a list is dropped.
    Returns None when ``data`` is not an object.
    """
    if not isinstance(data, dict):
        return None
    logs: DailyLogs = {}
    for date_key, entries in data.items():
        if not isinstance(entries, list):
            logger.warning("Skipping log day %r: entries are not a list", date_key)
            continue
        logs[date_key] = _valid_items(entries, LogEntry)
    return logs


# ---------------------------------------------------------------------------
# Request bodies for the journal operations
# ---------------------------------------------------------------------------


class LogEntryCreate(BaseModel):
    type: LogType
    content: str = Field(
        min_length=1,
        description="Free text; for Weight, the number of pounds (e.g. '182.5')",
    )


class LogEntryUpdate(BaseModel):
    content: str = Field(min_length=1)


class MedicationCreate(BaseModel):
    name: str = Field(min_length=1)
    dosage: str = ""
    frequency: str = ""


class MedicationUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    dosage: str | None = None
    frequency: str | None = None


def _check_visit_types(visit_types: list[str] | None) -> None:
    if visit_types is None:
        return
    unknown = sorted(set(visit_types) - set(VISIT_TYPES))
    if unknown:
        raise ValueError(f"Unknown visit types: {unknown}")


class DoctorVisitCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: datetime.date
    purpose: str = Field(min_length=1)
    details: str = ""
    visit_types: list[str] = Field(default_factory=list, alias="visitTypes")

    @model_validator(mode="after")
    def validate_visit_types(self) -> "DoctorVisitCreate":
        _check_visit_types(self.visit_types)
        return self


class DoctorVisitUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: datetime.date | None = None
    purpose: str | None = Field(default=None, min_length=1)
    details: str | None = None
    visit_types: list[str] | None = Field(default=None, alias="visitTypes")

    @model_validator(mode="after")
    def validate_visit_types(self) -> "DoctorVisitUpdate":
        _check_visit_types(self.visit_types)
        return self
