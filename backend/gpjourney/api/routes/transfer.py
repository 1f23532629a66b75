"""Data migration and sharing endpoints.

GET  /api/transfer/export  — Full JSON export envelope, as a file download.
POST /api/transfer/import  — Import pasted export JSON or a share report.
GET  /api/share/*          — Human-readable share reports (plain text).
"""
import logging
from datetime import date, timedelta

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import PlainTextResponse, Response

from gpjourney.api.dependencies import JournalStore
from gpjourney.models.transfer import ImportRequest, ImportResponse
from gpjourney.services.interchange import export_all, import_all
from gpjourney.services.share_text import (
    format_health_summary,
    format_log_history_report,
    format_medication_report,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transfer"])

DEFAULT_SHARE_WINDOW_DAYS = 30


# ---------------------------------------------------------------------------
# Migration
# ---------------------------------------------------------------------------


@router.get(
    "/api/transfer/export",
    summary="Export all data",
    description="Logs, medications and doctor visits as one JSON envelope.",
)
def export_data(store: JournalStore) -> Response:
    content = export_all(store)
    filename = f"gpjourney-export-{date.today().isoformat()}.json"
    logger.info("Export generated: %d bytes", len(content.encode()))
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/api/transfer/import",
    response_model=ImportResponse,
    summary="Import pasted data",
    description=(
        "Accepts an export envelope (replaces every record it carries) or a "
        "pasted share report (medications replace the list, log days are "
        "merged by date). success=false means the text was not recognized. "
        "Clients should reload all records after a successful import."
    ),
)
def import_data(payload: ImportRequest, store: JournalStore) -> ImportResponse:
    if not payload.text.strip():
        return ImportResponse(success=False)
    return ImportResponse(success=import_all(store, payload.text))


# ---------------------------------------------------------------------------
# Share reports
# ---------------------------------------------------------------------------


def _resolve_range(start: date | None, end: date | None) -> tuple[date, date]:
    today = date.today()
    end = end or today
    start = start or end - timedelta(days=DEFAULT_SHARE_WINDOW_DAYS)
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must be on or before end",
        )
    if end > today:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end cannot be in the future",
        )
    return start, end


@router.get(
    "/api/share/medications",
    response_class=PlainTextResponse,
    summary="Medication list as shareable text",
)
def share_medications(store: JournalStore) -> str:
    return format_medication_report(store.get_medications())


@router.get(
    "/api/share/history",
    response_class=PlainTextResponse,
    summary="Log history as shareable text",
    description="Defaults to the last 30 days ending today.",
)
def share_history(
    store: JournalStore,
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
) -> str:
    start, end = _resolve_range(start, end)
    return format_log_history_report(store.get_logs(), start, end)


@router.get(
    "/api/share/summary",
    response_class=PlainTextResponse,
    summary="Medications and log history as one shareable report",
)
def share_summary(
    store: JournalStore,
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
) -> str:
    start, end = _resolve_range(start, end)
    return format_health_summary(store.get_medications(), store.get_logs(), start, end)
