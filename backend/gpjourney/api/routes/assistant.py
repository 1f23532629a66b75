"""Assistant endpoints backed by the language model.

None of these endpoints write to the store. Reminders are returned to the
client for it to schedule.
"""
import logging

from fastapi import APIRouter, HTTPException, status

from gpjourney.api.dependencies import JournalStore
from gpjourney.models.assistant import (
    CorrelationResponse,
    DailySuggestions,
    Reminder,
    ReminderRequest,
)
from gpjourney.services.llm import (
    create_reminder,
    get_daily_suggestions,
    get_symptom_correlation,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assistant", tags=["assistant"])


@router.get(
    "/suggestions",
    response_model=DailySuggestions,
    summary="Daily GP-friendly meal and exercise suggestion",
)
async def suggestions() -> DailySuggestions:
    try:
        return await get_daily_suggestions()
    except Exception as exc:
        logger.error("Daily suggestions failed: %s", exc, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not fetch suggestions",
        )


@router.get(
    "/correlation",
    response_model=CorrelationResponse,
    summary="Correlations across the last 30 days of logs",
    description="Not a medical diagnosis. Returns Markdown.",
)
async def correlation(store: JournalStore) -> CorrelationResponse:
    try:
        analysis = await get_symptom_correlation(store.get_logs())
    except Exception as exc:
        logger.error("Symptom correlation failed: %s", exc, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Error during analysis",
        )
    return CorrelationResponse(analysis=analysis)


@router.post(
    "/reminders",
    response_model=Reminder,
    summary="Have the assistant create a medication follow-up reminder",
    description="Returns the reminder's action and delay. Nothing is scheduled server-side.",
)
async def reminders(payload: ReminderRequest) -> Reminder:
    try:
        return await create_reminder(payload.medication, payload.minutes, payload.action)
    except Exception as exc:
        logger.error("Reminder creation failed: %s", exc, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not create reminder",
        )
