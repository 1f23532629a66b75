import logging

from fastapi import APIRouter, status

from gpjourney.api.dependencies import JournalStore, to_http_error
from gpjourney.models.journal import DailyLogs, LogEntry, LogEntryCreate, LogEntryUpdate
from gpjourney.services import journal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/logs", tags=["logs"])


@router.get("", response_model=DailyLogs, summary="Get all daily logs")
def get_logs(store: JournalStore) -> DailyLogs:
    return store.get_logs()


@router.put(
    "",
    response_model=DailyLogs,
    summary="Replace all daily logs",
    description="Full-record replace; the body becomes the stored daily logs.",
)
def save_logs(logs: DailyLogs, store: JournalStore) -> DailyLogs:
    store.save_logs(logs)
    return logs


@router.post(
    "/{date_key}/entries",
    response_model=LogEntry,
    status_code=status.HTTP_201_CREATED,
    summary="Add a log entry to a day",
)
def add_entry(date_key: str, payload: LogEntryCreate, store: JournalStore) -> LogEntry:
    try:
        return journal.add_log_entry(store, date_key, payload)
    except (journal.InvalidEntryError, journal.RecordNotFoundError) as exc:
        raise to_http_error(exc)


@router.patch(
    "/{date_key}/entries/{entry_id}",
    response_model=LogEntry,
    summary="Edit a log entry's content",
)
def update_entry(
    date_key: str, entry_id: str, payload: LogEntryUpdate, store: JournalStore
) -> LogEntry:
    try:
        return journal.update_log_entry(store, date_key, entry_id, payload)
    except (journal.InvalidEntryError, journal.RecordNotFoundError) as exc:
        raise to_http_error(exc)


@router.delete(
    "/{date_key}/entries/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a log entry",
)
def delete_entry(date_key: str, entry_id: str, store: JournalStore) -> None:
    try:
        journal.delete_log_entry(store, date_key, entry_id)
    except journal.RecordNotFoundError as exc:
        raise to_http_error(exc)
