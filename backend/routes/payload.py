"""
Shared request-payload helpers for the route modules.
"""

from typing import Any, Dict, List

from fastapi import HTTPException


def records_from_payload(payload: dict, key: str) -> List[Dict[str, Any]]:
    """Extract a list of records from the request payload; empty lists are valid."""
    records = payload.get(key)
    if records is None:
        raise HTTPException(400, f"No {key} provided.")
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise HTTPException(400, f"'{key}' must be a list of records.")
    return records
