"""Human-readable share reports and their best-effort parsers.

The formatters render the medication list and a date-bounded slice of the
daily logs as plain text for emailing or pasting. The parsers are their
inverse, used when a report is pasted into the import box. Parsing is lossy
by nature: ids are regenerated, doctor visits are never part of a report.

Every parser here is total. A line, entry, or day that does not match is
dropped (and logged where it matters) instead of raising, so one bad block
never sinks the rest of an import.
"""
import logging
import re
import uuid
from datetime import date, datetime

from gpjourney.models.journal import DailyLogs, LogEntry, LogType, Medication

logger = logging.getLogger(__name__)

# Header spellings, oldest first. New spellings are appended, never replaced,
# so reports produced by older deployments keep importing.
MEDICATION_HEADERS: tuple[str, ...] = ("Medication List", "CURRENT ACTIVE MEDICATIONS")
LOG_HISTORY_HEADERS: tuple[str, ...] = ("Health Log History", "DAILY LOG HISTORY")
SUMMARY_TITLE = "HEALTH SUMMARY"

DIVIDER = "=" * 25
BULLET_PREFIXES = ("- ", "• ", "* ")

_DIVIDER_LINE = re.compile(r"^=+$")
_DAY_MARKER = re.compile(r"^-{3,}\s*(?P<label>.+?)\s*-{3,}$")
_TYPE_MARKER = re.compile(r"^\[(?P<type>[^\]]+)\]$")
_ENTRY = re.compile(r"^\((?P<timestamp>[^)]*)\)\s+(?P<content>\S.*)$", re.DOTALL)

# Display-date forms produced by the various locales older deployments ran in.
# strptime's %d accepts both "1" and "01".
_DISPLAY_DATE_FORMATS = (
    "%A, %B %d, %Y",  # Monday, January 1, 2024
    "%A %d %B %Y",  # Monday 1 January 2024
    "%A, %d %B %Y",  # Monday, 1 January 2024
    "%B %d, %Y",  # January 1, 2024
    "%d %B %Y",  # 1 January 2024
    "%Y-%m-%d",
    "%m/%d/%Y",
)


def new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def format_display_date(day: date) -> str:
    """Render a date the way report day markers show it: 'Monday, January 1, 2024'."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def parse_display_date(label: str) -> str | None:
    """Parse a report day label back to a ``YYYY-MM-DD`` key, or None."""
    text = " ".join(label.split())
    for fmt in _DISPLAY_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    return None


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def _medication_lines(medications: list[Medication]) -> list[str]:
    lines: list[str] = []
    for med in medications:
        lines.append(f"- {med.name}")
        lines.append(f"  Dosage: {med.dosage}")
        lines.append(f"  Frequency: {med.frequency}")
        lines.append("")
    return lines


def _dates_in_range(logs: DailyLogs, start: date, end: date) -> list[str]:
    lo, hi = start.isoformat(), end.isoformat()
    return sorted((key for key in logs if lo <= key <= hi), reverse=True)


def _day_lines(date_key: str, entries: list[LogEntry]) -> list[str]:
    try:
        display = format_display_date(date.fromisoformat(date_key))
    except ValueError:
        display = date_key
    lines = [f"--- {display} ---", ""]

    groups = [
        (log_type, sorted((e for e in entries if e.type == log_type), key=lambda e: e.timestamp))
        for log_type in LogType
    ]
    groups = [(log_type, group) for log_type, group in groups if group]

    if not groups:
        lines.append("No entries for this day.")
        return lines

    for log_type, group in groups:
        lines.append(f"[{log_type.value}]")
        lines.extend(f"- ({e.timestamp}) {e.content}" for e in group)
        lines.append("")
    return lines


def format_medication_report(
    medications: list[Medication], header: str = MEDICATION_HEADERS[0]
) -> str:
    if not medications:
        return "No medications to share."
    lines = [header, DIVIDER, ""]
    lines.extend(_medication_lines(medications))
    return "\n".join(lines) + "\n"


def format_log_history_report(
    logs: DailyLogs,
    start: date,
    end: date,
    header: str = LOG_HISTORY_HEADERS[0],
) -> str:
    """Render the days between ``start`` and ``end`` (inclusive), newest first.

    Within a day, entries are grouped by type in :class:`LogType` order and
    sorted by their timestamp string.
    """
    dates = _dates_in_range(logs, start, end)
    if not dates:
        return f"No log entries found between {start.isoformat()} and {end.isoformat()}."

    lines = [header, f"From: {start.isoformat()} To: {end.isoformat()}", DIVIDER, ""]
    for date_key in dates:
        lines.extend(_day_lines(date_key, logs[date_key]))
    return "\n".join(lines) + "\n"


def format_health_summary(
    medications: list[Medication],
    logs: DailyLogs,
    start: date,
    end: date,
    generated: date | None = None,
) -> str:
    """Combined report using the newer section headers."""
    generated = generated or date.today()
    lines = [SUMMARY_TITLE, f"Generated: {format_display_date(generated)}", DIVIDER, ""]

    lines.extend([MEDICATION_HEADERS[1], DIVIDER, ""])
    if medications:
        lines.extend(_medication_lines(medications))
    else:
        lines.extend(["No medications recorded.", ""])

    lines.extend(
        [LOG_HISTORY_HEADERS[1], f"From: {start.isoformat()} To: {end.isoformat()}", DIVIDER, ""]
    )
    dates = _dates_in_range(logs, start, end)
    if not dates:
        lines.append("No log entries found for this period.")
    for date_key in dates:
        lines.extend(_day_lines(date_key, logs[date_key]))
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def is_divider(line: str) -> bool:
    return bool(_DIVIDER_LINE.match(line.strip()))


def is_header_line(line: str, token: str) -> bool:
    """True if ``line`` carries ``token`` as a section header.

    Bullet, day-marker and field lines are never headers, so a journal entry
    or medication that mentions "Medication List" does not open a section.
    """
    stripped = line.strip()
    if token not in stripped:
        return False
    return not stripped.startswith(("-", "[", "•", "*", "Dosage:", "Frequency:"))


def parse_medication_block(lines: list[str]) -> list[Medication]:
    """Parse ``- name`` / ``Dosage:`` / ``Frequency:`` blocks into medications.

    A bullet line starts a new record; field lines fill the record in
    progress; the last record is flushed at the end. Field lines before the
    first bullet are ignored.
    """
    medications: list[Medication] = []
    current: dict[str, str] | None = None

    def flush() -> None:
        if current is not None:
            medications.append(Medication(id=new_id(), **current))

    for raw in lines:
        line = raw.strip()
        if line.startswith(BULLET_PREFIXES):
            flush()
            name = line[2:].strip()
            current = {"name": name} if name else None
            continue
        if current is None:
            continue
        if "Dosage: " in line:
            current["dosage"] = line.split("Dosage: ", 1)[1].strip()
        elif "Frequency: " in line:
            current["frequency"] = line.split("Frequency: ", 1)[1].strip()
    flush()

    return medications


def split_day_blocks(lines: list[str]) -> list[tuple[str, list[str]]]:
    """Split a log-history body on ``--- <date> ---`` markers.

    Returns ``(date label, body lines)`` pairs; lines before the first marker
    are discarded.
    """
    blocks: list[tuple[str, list[str]]] = []
    for line in lines:
        match = _DAY_MARKER.match(line.strip())
        if match:
            blocks.append((match.group("label"), []))
        elif blocks:
            blocks[-1][1].append(line)
    return blocks


def _split_type_blocks(lines: list[str]) -> list[tuple[LogType, list[str]]]:
    blocks: list[tuple[LogType, list[str]]] = []
    current: list[str] | None = None
    for line in lines:
        match = _TYPE_MARKER.match(line.strip())
        if match:
            try:
                log_type = LogType(match.group("type").strip())
            except ValueError:
                logger.warning("Skipping entries under unknown log type %r", match.group("type"))
                current = None
                continue
            current = []
            blocks.append((log_type, current))
        elif current is not None:
            current.append(line)
    return blocks


def _split_entries(lines: list[str]) -> list[str]:
    # "- " opens an entry; any other line continues the one in progress
    # (multi-line journal notes are written out verbatim).
    entries: list[list[str]] = []
    for line in lines:
        if line.startswith("- "):
            entries.append([line[2:]])
        elif entries:
            entries[-1].append(line)
    return ["\n".join(chunk).rstrip() for chunk in entries]


def parse_entry_line(text: str, log_type: LogType) -> LogEntry | None:
    """Parse ``(<timestamp>) <content>`` into a LogEntry, or None on mismatch."""
    match = _ENTRY.match(text.strip())
    if not match:
        return None
    return LogEntry(
        id=new_id(),
        timestamp=match.group("timestamp").strip(),
        type=log_type,
        content=match.group("content"),
    )


def parse_day_block(label: str, lines: list[str]) -> tuple[str, list[LogEntry]] | None:
    """Recover one day's entries. Returns None when the date label is unreadable."""
    date_key = parse_display_date(label)
    if date_key is None:
        logger.warning("Skipping day block with unrecognized date %r", label)
        return None

    entries: list[LogEntry] = []
    for log_type, block in _split_type_blocks(lines):
        for chunk in _split_entries(block):
            entry = parse_entry_line(chunk, log_type)
            if entry is not None:
                entries.append(entry)
    return date_key, entries


def parse_log_history_block(lines: list[str]) -> DailyLogs:
    """Parse every readable day block; days without entries are left out."""
    days: DailyLogs = {}
    for label, block in split_day_blocks(lines):
        parsed = parse_day_block(label, block)
        if parsed is None:
            continue
        date_key, entries = parsed
        if entries:
            days.setdefault(date_key, []).extend(entries)
    return days
