"""Language-model calls behind the assistant features.

Uses OpenAI chat completions. Only the journal operations and the assistant
routes await these; the store and the import/export codec never do.
Transient "overloaded / unavailable" failures are retried with exponential
backoff; anything else propagates to the caller, except visit summarization,
which degrades to a fixed placeholder so a visit can always be saved.
"""
import asyncio
import json
import logging
import random
from datetime import date, timedelta
from typing import Awaitable, Callable, TypeVar

from openai import AsyncOpenAI

from gpjourney.core.config import settings
from gpjourney.llm.system_prompts import (
    CORRELATION_SYSTEM,
    DIET_INFO,
    REMINDER_SYSTEM,
    SUGGESTIONS_SYSTEM,
    VISIT_SUMMARY_SYSTEM,
)
from gpjourney.models.assistant import DailySuggestions, Reminder
from gpjourney.models.journal import DailyLogs, DailyLogsAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_ATTEMPTS = 3
BASE_DELAY_SECONDS = 1.0
CORRELATION_WINDOW_DAYS = 30

NOT_ENOUGH_DATA = "Not enough data for analysis."
SUMMARY_UNAVAILABLE = "Summary unavailable."

_TRANSIENT_MARKERS = ("503", "overloaded", "unavailable")

SET_REMINDER_TOOL = {
    "type": "function",
    "function": {
        "name": "set_reminder",
        "description": "Sets a reminder timer for the user at a device level.",
        "parameters": {
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "description": "The task the user needs to perform when the timer expires.",
                },
                "minutes": {
                    "type": "number",
                    "description": "The delay in minutes before the reminder should trigger.",
                },
            },
            "required": ["action", "minutes"],
        },
    },
}


def _client() -> AsyncOpenAI:
    return AsyncOpenAI(api_key=settings.OPENAI_API_KEY)


def _is_transient(exc: Exception) -> bool:
    if getattr(exc, "status_code", None) == 503:
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    attempts: int = MAX_ATTEMPTS,
    delay: float = BASE_DELAY_SECONDS,
) -> T:
    """Await ``fn()``, retrying transient model failures with jittered backoff."""
    for attempt in range(1, attempts + 1):
        try:
            return await fn()
        except Exception as exc:
            if not _is_transient(exc) or attempt == attempts:
                raise
            backoff = delay * 2 ** (attempt - 1) + random.random()
            logger.warning(
                "Model unavailable or overloaded, retrying in %.1fs (attempt %d/%d)",
                backoff,
                attempt,
                attempts,
            )
            await asyncio.sleep(backoff)
    raise RuntimeError("unreachable")


async def _chat(system_prompt: str, user_prompt: str, **options):
    async def call():
        return await _client().chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            **options,
        )

    return await with_retry(call)


async def _complete(
    system_prompt: str,
    user_prompt: str,
    max_tokens: int,
    temperature: float,
    json_output: bool = False,
) -> str:
    extra = {"response_format": {"type": "json_object"}} if json_output else {}
    response = await _chat(
        system_prompt, user_prompt, max_tokens=max_tokens, temperature=temperature, **extra
    )
    return (response.choices[0].message.content or "").strip()


async def get_daily_suggestions() -> DailySuggestions:
    """One GP-friendly meal idea and one low-impact exercise idea for today."""
    user_prompt = (
        "Based on the dietary guidelines for GP below, create a daily meal "
        "suggestion and a low-impact exercise suggestion.\n\n"
        f"Dietary guidelines:\n---\n{DIET_INFO}\n---"
    )
    logger.info("Calling OpenAI for daily suggestions")
    raw = await _complete(SUGGESTIONS_SYSTEM, user_prompt, max_tokens=400, temperature=0.7, json_output=True)
    return DailySuggestions.model_validate(json.loads(raw))


def recent_logs(logs: DailyLogs, today: date, days: int = CORRELATION_WINDOW_DAYS) -> DailyLogs:
    """Logs dated within the last ``days`` days (inclusive of today)."""
    cutoff = (today - timedelta(days=days)).isoformat()
    return {key: entries for key, entries in logs.items() if key >= cutoff}


async def get_symptom_correlation(logs: DailyLogs, today: date | None = None) -> str:
    """Markdown analysis of correlations in the last 30 days of logs.

    Returns :data:`NOT_ENOUGH_DATA` without calling the model when no log
    falls inside the window.
    """
    window = recent_logs(logs, today or date.today())
    if not window:
        return NOT_ENOUGH_DATA

    logs_json = DailyLogsAdapter.dump_json(window, indent=2).decode("utf-8")
    user_prompt = f"Analyze these logs for correlations.\n{logs_json}"

    logger.info("Calling OpenAI for symptom correlation: days=%d", len(window))
    return await _complete(CORRELATION_SYSTEM, user_prompt, max_tokens=800, temperature=0.3)


async def summarize_doctor_visit(details: str) -> str:
    """Summarize visit notes in at most 20 words; never raises."""
    try:
        return await _complete(VISIT_SUMMARY_SYSTEM, f'"{details}"', max_tokens=60, temperature=0.2)
    except Exception as exc:
        logger.warning("Visit summarization failed: %s: %s", type(exc).__name__, exc)
        return SUMMARY_UNAVAILABLE


async def create_reminder(medication: str, minutes: int, action: str) -> Reminder:
    """Turn "I just took X, remind me to Y in N minutes" into a structured reminder.

    The model is forced to answer through the ``set_reminder`` tool. Nothing is
    scheduled here; delivering the reminder is up to the client.
    """
    user_prompt = (
        f"I just took {medication}. Please set a reminder for me to {action} "
        f"in {minutes} minutes."
    )
    tool_name = SET_REMINDER_TOOL["function"]["name"]

    logger.info("Calling OpenAI to create a reminder: minutes=%d", minutes)
    response = await _chat(
        REMINDER_SYSTEM,
        user_prompt,
        tools=[SET_REMINDER_TOOL],
        tool_choice={"type": "function", "function": {"name": tool_name}},
        temperature=0,
    )
    for tool_call in response.choices[0].message.tool_calls or []:
        if tool_call.function.name == tool_name:
            return Reminder.model_validate_json(tool_call.function.arguments)
    raise ValueError("Model did not call set_reminder")
