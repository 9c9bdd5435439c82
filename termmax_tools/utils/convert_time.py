# termmax_tools/utils/convert_time.py

import datetime
import math
from typing import Optional

from ..types import DateTimeStr, SECONDS_PER_DAY


MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN",
          "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


def timestamp_to_datetime(timestamp: int) -> datetime.datetime:
    return datetime.datetime.fromtimestamp(timestamp, tz=datetime.timezone.utc)


def timestamp_to_iso(timestamp: int) -> DateTimeStr:
    """UTC ISO-8601 with millisecond precision, e.g. 2024-05-01T00:00:00.000Z"""
    return DateTimeStr(timestamp_to_datetime(timestamp).strftime('%Y-%m-%dT%H:%M:%S.000Z'))


def maturity_label(timestamp: int) -> str:
    """Market name date suffix, e.g. 01JAN2025"""
    dt = timestamp_to_datetime(timestamp)
    return f"{dt.day:02d}{MONTHS[dt.month - 1]}{dt.year}"


def days_until(target: Optional[int], timestamp: Optional[int]) -> Optional[int]:
    if target is None or not timestamp:
        return None
    return math.floor((target - timestamp) / SECONDS_PER_DAY)
