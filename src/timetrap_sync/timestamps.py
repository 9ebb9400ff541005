"""
Timestamp helpers

tiempo prints timestamps differently depending on version and platform, so
parsing is format detection: each entry of TIMESTAMP_FORMATS is tried in
order and the first match wins.
"""

import logging
import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
JIRA_STARTED_FORMAT = "%Y-%m-%dT%H:%M:00.000%z"
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
UTC_NAMES = ("UTC", "GMT")

# Tried after datetime.fromisoformat()
TIMESTAMP_FORMATS = [
    "%Y-%m-%dT%H:%M:%SZ",          # 2024-01-15T09:00:00Z
    "%Y-%m-%dT%H:%M:%S.%fZ",       # 2024-01-15T09:00:00.123456Z
    "%Y-%m-%d %H:%M:%S %z",        # 2024-01-15 09:00:00 +0100
    "%Y-%m-%d %H:%M:%S",           # 2024-01-15 09:00:00 (local)
    "%a %b %d %H:%M:%S %Z %Y",     # Mon Jan 15 09:00:00 UTC 2024
    "%a %d %b %Y %H:%M:%S %z",     # Mon 15 Jan 2024 09:00:00 +0100
]


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a tiempo timestamp into an aware datetime, or None"""
    if not value:
        return None
    text = value.strip()

    parsed = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                if "%Z" in fmt and parsed.tzinfo is None and text.split()[-2].upper() in UTC_NAMES:
                    # strptime matches %Z but never sets tzinfo
                    parsed = parsed.replace(tzinfo=timezone.utc)
                break
            except ValueError:
                continue

    if parsed is None:
        logger.debug("Unrecognized timestamp: %r", value)
        return None

    if text.endswith("Z") and parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        # Naive values are local time
        return parsed.astimezone()
    return parsed


def to_epoch_seconds(value: Optional[str]) -> Optional[int]:
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return int(parsed.timestamp())


def format_started(started_at: datetime, tz: Optional[tzinfo] = None) -> str:
    """
    Format a start time the way jira-cli expects it

    Seconds are dropped (not rounded), e.g. 2024-01-15T09:30:00.000+0100
    """
    local = started_at.astimezone(tz) if tz else started_at.astimezone()
    return local.replace(second=0, microsecond=0).strftime(JIRA_STARTED_FORMAT)


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string; raises ValueError on anything else"""
    if not DATE_PATTERN.fullmatch(value or ""):
        raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
    return datetime.strptime(value, DATE_FORMAT).date()


def day_window(day: date) -> tuple[str, str]:
    """Return the [day, day + 1) retrieval window as YYYY-MM-DD strings"""
    end = day + timedelta(days=1)
    return day.strftime(DATE_FORMAT), end.strftime(DATE_FORMAT)
