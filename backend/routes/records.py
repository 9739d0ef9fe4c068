"""
Record routes — sorting and search over caller-supplied record lists.
"""

from fastapi import APIRouter, HTTPException

from core.records import search_records, sort_records
from routes.payload import records_from_payload

router = APIRouter()


@router.post("/sort")
async def sort(payload: dict):
    """
    Sort records by a plain field or a derived key.
    Expects: { "records": [...], "field": "gradeAverage", "direction": "desc",
               "grades": [...], "attendance": [...] }
    """
    records = records_from_payload(payload, "records")
    field = payload.get("field")
    if not field:
        raise HTTPException(400, "No sort field provided.")
    try:
        ordered = sort_records(
            records,
            field,
            payload.get("direction", "asc"),
            grades=payload.get("grades") or [],
            attendance=payload.get("attendance") or [],
        )
    except ValueError as exc:
        raise HTTPException(422, str(exc))
    return {"records": ordered}


@router.post("/search")
async def search(payload: dict):
    records = records_from_payload(payload, "records")
    fields = payload.get("fields")
    if not fields:
        raise HTTPException(400, "No search fields provided.")
    if not isinstance(fields, list) or not all(isinstance(f, str) for f in fields):
        raise HTTPException(400, "'fields' must be a list of field names.")
    return {"records": search_records(records, payload.get("query"), fields)}
