"""
dates.py — Lenient date handling.

Null, unparsable and epoch-zero values are all "no date". Parsing never
raises; sorting substitutes EARLIEST for a missing date so undated records
order first ascending.
"""

import datetime as dt
from numbers import Number
from typing import Any, Optional

import pandas as pd


EARLIEST = pd.Timestamp.min
EPOCH = pd.Timestamp(0)


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """Return a naive Timestamp, or None when the value carries no usable date."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        if isinstance(value, Number):
            # Numeric timestamps are epoch milliseconds, as the hosted store emits them.
            ts = pd.to_datetime(value, unit="ms", errors="coerce")
        else:
            ts = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    if ts == EPOCH:
        return None
    return ts


def to_day(value: Any) -> Optional[dt.date]:
    """Calendar day of `value` (time component dropped), or None."""
    if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        return value
    ts = parse_date(value)
    return ts.date() if ts is not None else None


def date_sort_key(value: Any) -> pd.Timestamp:
    ts = parse_date(value)
    return ts if ts is not None else EARLIEST


def format_date(value: Any, pattern: str, fallback: str = "") -> str:
    ts = parse_date(value)
    return ts.strftime(pattern) if ts is not None else fallback
