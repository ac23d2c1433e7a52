# app/services/timestamp_normalizer.py
"""
Turns Spot's raw event time (epoch seconds, epoch milliseconds, or a date
string) into a UTC datetime. Anything unparseable becomes None.
"""

import math
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

# Above this it's epoch milliseconds, otherwise epoch seconds.
# 1e12 ms is Sept 2001; 1e12 s is ~33,000 years out.
MS_THRESHOLD = 10 ** 12

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _as_number(raw: str) -> Optional[float]:
    try:
        n = float(raw)
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def from_epoch(n: float) -> Optional[datetime]:
    ms = n if n > MS_THRESHOLD else n * 1000
    try:
        return EPOCH + timedelta(milliseconds=ms)
    except (OverflowError, ValueError):
        return None


def _parse_date_string(raw: str) -> Optional[datetime]:
    parsed = None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        pass
    if parsed is None:
        try:
            parsed = parsedate_to_datetime(raw)          # "Tue, 14 Nov 2023 22:13:20 GMT"
        except (TypeError, ValueError, IndexError):
            return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return None


def normalize_timestamp(raw: Any) -> Optional[datetime]:
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None

    n = _as_number(text)
    if n is not None:
        return from_epoch(n)
    return _parse_date_string(text)
