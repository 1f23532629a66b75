from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gpjourney.models.journal import (
    DailyLogs,
    DoctorVisit,
    Medication,
    salvage_daily_logs,
    salvage_records,
)

EXPORT_VERSION = "1.0"


class ExportEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    logs: DailyLogs
    medications: list[Medication]
    doctor_visits: list[DoctorVisit] = Field(alias="doctorVisits")
    version: str = EXPORT_VERSION
    exported_at: str = Field(alias="exportedAt", description="ISO-8601 timestamp")


class ImportEnvelope(BaseModel):
    """Incoming envelope; every field is optional and presence-checked.

    The console extractor older deployments hand out writes only the three
    data fields, so ``version`` and ``exportedAt`` may be missing too.
    Records that fail validation are dropped one by one; a field with the
    wrong top-level shape still fails the whole envelope.
    """

    model_config = ConfigDict(populate_by_name=True)

    logs: DailyLogs | None = None
    medications: list[Medication] | None = None
    doctor_visits: list[DoctorVisit] | None = Field(default=None, alias="doctorVisits")
    version: str | None = None
    exported_at: str | None = Field(default=None, alias="exportedAt")

    @field_validator("logs", mode="before")
    @classmethod
    def drop_invalid_entries(cls, value: Any) -> Any:
        salvaged = salvage_daily_logs(value)
        return value if salvaged is None else salvaged

    @field_validator("medications", mode="before")
    @classmethod
    def drop_invalid_medications(cls, value: Any) -> Any:
        salvaged = salvage_records(value, Medication)
        return value if salvaged is None else salvaged

    @field_validator("doctor_visits", mode="before")
    @classmethod
    def drop_invalid_visits(cls, value: Any) -> Any:
        salvaged = salvage_records(value, DoctorVisit)
        return value if salvaged is None else salvaged

    def has_data(self) -> bool:
        return any(
            value is not None
            for value in (self.logs, self.medications, self.doctor_visits)
        )


class ImportRequest(BaseModel):
    text: str = Field(description="Pasted export JSON or share-text report")


class ImportResponse(BaseModel):
    success: bool
