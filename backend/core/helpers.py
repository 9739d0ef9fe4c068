"""
helpers.py — Small coercion helpers shared by the metrics modules.
"""

import re
from typing import Any, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd


def safe_float(val) -> Optional[float]:
    """Convert to float or return None."""
    if isinstance(val, bool):
        return None
    try:
        v = float(val)
        return None if np.isnan(v) or np.isinf(v) else round(v, 2)
    except (TypeError, ValueError):
        return None


def sanitize(obj):
    """Recursively coerce numpy/pandas scalars to JSON-safe Python types."""
    if isinstance(obj, dict):
        return {k: sanitize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize(v) for v in obj]
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, (np.floating, float)):
        v = float(obj)
        return None if (np.isnan(v) or np.isinf(v)) else v
    if isinstance(obj, pd.Timestamp):
        return obj.isoformat()
    return obj


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from zero for positive values (Python's round() is banker's rounding)."""
    factor = 10 ** digits
    return float(np.floor(value * factor + 0.5) / factor)


def same_id(a: Any, b: Any) -> bool:
    """Compare record identifiers that may arrive as int, str or {"Id": ...} lookups."""
    a, b = record_id(a), record_id(b)
    return a is not None and a == b


def record_id(value: Any) -> Optional[int]:
    if isinstance(value, Mapping):
        value = value.get("Id", value.get("id"))
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def numeric_score(value: Any) -> Optional[float]:
    """A finite float for anything pandas can coerce, else None (bools never count)."""
    if value is None or isinstance(value, bool):
        return None
    v = pd.to_numeric(pd.Series([value], dtype=object), errors="coerce").iloc[0]
    return float(v) if pd.notna(v) and np.isfinite(v) else None


def numeric_scores(records: Iterable[Mapping[str, Any]], key: str = "score") -> List[float]:
    """Collect the numeric values of `key`, dropping anything that does not coerce."""
    values = [r.get(key) for r in records or []]
    values = [v for v in values if v is not None and not isinstance(v, bool)]
    if not values:
        return []
    numeric = pd.to_numeric(pd.Series(values, dtype=object), errors="coerce")
    return [float(v) for v in numeric.dropna() if np.isfinite(v)]


# ── Field lookup ────────────────────────────────────────────────────

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(field: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", field).lower()


def camel_case(field: str) -> str:
    head, *rest = field.split("_")
    return head + "".join(part.title() for part in rest)


def field_value(record: Mapping[str, Any], field: str) -> Any:
    """
    Field lookup that accepts camelCase or snake_case on either side.

    "id" also matches the hosted "Id" key, so records can be passed in
    their stored or their wire shape.
    """
    for key in (field, snake_case(field), camel_case(field)):
        if key in record:
            return record[key]
    if field.lower() == "id":
        return record.get("Id", record.get("id"))
    return None
