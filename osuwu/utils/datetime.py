from __future__ import annotations

from datetime import datetime
from datetime import timezone
from typing import Optional

# the legacy api reports dates in this format, always in UTC
LEGACY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_legacy_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None

    return datetime.strptime(value, LEGACY_DATE_FORMAT).replace(tzinfo=timezone.utc)


def parse_iso_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None

    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed
