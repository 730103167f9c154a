"""Booking — identifiers and calendar events for accepted booking requests.

Invariants:
    - Booking ids look like booking_<epoch ms>_<9 base36 chars>
    - Calendar event times are emitted in UTC; the requester's timezone is kept
      as a label
    - ICS text uses CRLF line endings and escapes ',', ';', '\\' and newlines
"""

import random
import string
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

from gateway.core.domain_types import EpochMillis

_BASE36 = string.digits + string.ascii_lowercase
_ICS_STAMP = "%Y%m%dT%H%M%SZ"


def generate_booking_id(now_ms: EpochMillis, rng: random.Random) -> str:
    suffix = "".join(rng.choice(_BASE36) for _ in range(9))
    return f"booking_{now_ms}_{suffix}"


def resolve_timezone(name: str) -> tzinfo:
    """UTC without a tz database lookup; anything else through zoneinfo."""
    if name.upper() in ("UTC", "Z", "GMT"):
        return timezone.utc
    return ZoneInfo(name)


def _escape_ics(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def build_calendar_event(
    *,
    booking_id: str,
    name: str,
    email: str,
    start: datetime,
    duration_minutes: int,
    timezone_name: str,
    topic: str,
    now: datetime,
) -> dict:
    """Describe the booked slot as JSON plus an attachable ICS document."""
    start_utc = start.astimezone(timezone.utc)
    end_utc = start_utc + timedelta(minutes=duration_minutes)
    title = f"{topic} with {name}"
    description = f"Booking {booking_id} requested by {name} <{email}>"
    ics = "\r\n".join([
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//edge-gateway//booking//EN",
        "BEGIN:VEVENT",
        f"UID:{booking_id}",
        f"DTSTAMP:{now.astimezone(timezone.utc).strftime(_ICS_STAMP)}",
        f"DTSTART:{start_utc.strftime(_ICS_STAMP)}",
        f"DTEND:{end_utc.strftime(_ICS_STAMP)}",
        f"SUMMARY:{_escape_ics(title)}",
        f"DESCRIPTION:{_escape_ics(description)}",
        "STATUS:TENTATIVE",
        "END:VEVENT",
        "END:VCALENDAR",
        "",
    ])
    return {
        "title": title,
        "start": start_utc.isoformat(),
        "end": end_utc.isoformat(),
        "durationMinutes": duration_minutes,
        "timezone": timezone_name,
        "description": description,
        "ics": ics,
    }
