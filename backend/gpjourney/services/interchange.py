"""Export/import of the full record set for moving data between deployments.

Two import formats are accepted:

* the canonical JSON envelope written by :func:`export_all` (lossless), and
* a pasted share-text report (lossy, best effort).

The formats apply different write policies, and they must stay
distinct:

* canonical JSON replaces each present record wholesale,
* a share-text medication section replaces the medication list,
* a share-text log-history section is merged into the stored logs by date
  (imported dates replace those dates, all other dates are kept).

The three records are written one after another without a transaction; a
crash between writes can leave them out of step with each other.
"""
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import ValidationError

from gpjourney.models.journal import DailyLogs, Medication
from gpjourney.models.transfer import EXPORT_VERSION, ExportEnvelope, ImportEnvelope
from gpjourney.services.share_text import (
    LOG_HISTORY_HEADERS,
    MEDICATION_HEADERS,
    is_divider,
    is_header_line,
    parse_log_history_block,
    parse_medication_block,
)
from gpjourney.services.store import Store

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def _utc_timestamp() -> str:
    return (
        datetime.now(tz=timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def export_all(store: Store) -> str:
    """Serialize every record into the canonical JSON envelope."""
    envelope = ExportEnvelope(
        logs=store.get_logs(),
        medications=store.get_medications(),
        doctor_visits=store.get_doctor_visits(),
        version=EXPORT_VERSION,
        exported_at=_utc_timestamp(),
    )
    return envelope.model_dump_json(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Share-text sections
# ---------------------------------------------------------------------------


def _replace_medications(store: Store, medications: list[Medication]) -> bool:
    if not medications:
        return False
    store.save_medications(medications)
    logger.info("Imported %d medication(s) from share text (replaced list)", len(medications))
    return True


def _merge_logs(store: Store, days: DailyLogs) -> bool:
    if not days:
        return False
    logs = store.get_logs()
    logs.update(days)
    store.save_logs(logs)
    logger.info(
        "Imported %d day(s) from share text (merged into %d stored day(s))",
        len(days),
        len(logs),
    )
    return True


@dataclass(frozen=True)
class ShareSection:
    name: str
    headers: tuple[str, ...]
    parse: Callable[[list[str]], Any]
    apply: Callable[[Store, Any], bool]


SHARE_SECTIONS: tuple[ShareSection, ...] = (
    ShareSection("medications", MEDICATION_HEADERS, parse_medication_block, _replace_medications),
    ShareSection("log_history", LOG_HISTORY_HEADERS, parse_log_history_block, _merge_logs),
)


def _find_header(lines: list[str], headers: tuple[str, ...]) -> int | None:
    # Spellings are tried in table order; the first one present wins.
    for token in headers:
        for index, line in enumerate(lines):
            if is_header_line(line, token):
                return index
    return None


def _section_body(lines: list[str], start: int, boundaries: list[int]) -> list[str]:
    """Lines after the section's divider, up to the next section header."""
    end = min((b for b in boundaries if b > start), default=len(lines))
    body = lines[start + 1 : end]
    for index, line in enumerate(body):
        if is_divider(line):
            return body[index + 1 :]
    return body


def import_share_text(store: Store, text: str) -> bool:
    """Parse a pasted share report and persist whatever it yields.

    Returns False when no known section header is present or when no
    section produced any record.
    """
    lines = text.splitlines()
    found = [
        (section, index)
        for section in SHARE_SECTIONS
        if (index := _find_header(lines, section.headers)) is not None
    ]
    if not found:
        logger.warning("Import text matches no known format")
        return False

    boundaries = [index for _, index in found]
    changed = False
    for section, index in found:
        parsed = section.parse(_section_body(lines, index, boundaries))
        if section.apply(store, parsed):
            changed = True
        else:
            logger.info("Share-text section %s yielded no records", section.name)
    return changed


# ---------------------------------------------------------------------------
# Canonical JSON
# ---------------------------------------------------------------------------


def _parse_envelope(text: str) -> ImportEnvelope | None:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        envelope = ImportEnvelope.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "Import JSON does not match the export envelope (%d error(s))",
            exc.error_count(),
        )
        return None
    return envelope if envelope.has_data() else None


def _apply_envelope(store: Store, envelope: ImportEnvelope) -> None:
    if envelope.logs is not None:
        store.save_logs(envelope.logs)
    if envelope.medications is not None:
        store.save_medications(envelope.medications)
    if envelope.doctor_visits is not None:
        store.save_doctor_visits(envelope.doctor_visits)
    logger.info(
        "Imported export envelope (version=%s exported_at=%s): logs=%s medications=%s doctor_visits=%s",
        envelope.version,
        envelope.exported_at,
        envelope.logs is not None,
        envelope.medications is not None,
        envelope.doctor_visits is not None,
    )


def import_all(store: Store, text: str) -> bool:
    """Import pasted text in either format. Never raises.

    The canonical envelope is tried first; anything that is not a valid
    envelope carrying at least one data field falls through to the share-text
    parser.
    """
    try:
        envelope = _parse_envelope(text)
        if envelope is not None:
            _apply_envelope(store, envelope)
            return True
        return import_share_text(store, text)
    except Exception as exc:
        logger.error("Failed to import data: %s", exc, exc_info=True)
        return False
