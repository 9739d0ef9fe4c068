"""
remote.py — Record store adapter for the hosted table service.

Each table maps to a hosted "<entity>_c" table. Requests are JSON POSTs
(fetch/create/update/delete) and every response carries a `success` flag;
batch writes also report per-record `results`.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from store.base import (
    ASSIGNMENTS,
    ATTENDANCE,
    FIELDS,
    GRADES,
    STUDENTS,
    OrderBy,
    RecordNotFoundError,
    RecordStore,
    RecordStoreError,
    Where,
    check_table,
    normalize_record,
    to_remote,
)

_LOGGER = logging.getLogger(__name__)

REMOTE_TABLES = {
    STUDENTS: "student_c",
    ASSIGNMENTS: "assignment_c",
    GRADES: "grade_c",
    ATTENDANCE: "attendance_c",
}

SYSTEM_FIELDS = ["Name", "Tags", "Owner", "CreatedOn", "CreatedBy", "ModifiedOn", "ModifiedBy"]


class RemoteRecordStore(RecordStore):
    def __init__(
        self,
        base_url: str,
        project_id: str = "",
        public_key: str = "",
        timeout_s: float = 20.0,
        client: Optional[httpx.Client] = None,
    ):
        if not base_url:
            raise RecordStoreError("RECORD_STORE_URL is not configured.")
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_s,
            headers={
                "X-Project-Id": project_id,
                "X-Public-Key": public_key,
                "Content-Type": "application/json",
            },
        )

    def close(self):
        self._client.close()

    # ── Transport ──────────────────────────────────────────────────

    def _post(self, table: str, action: str, params: Dict[str, Any]) -> Dict[str, Any]:
        check_table(table)
        remote_table = REMOTE_TABLES[table]
        try:
            res = self._client.post(f"/tables/{remote_table}/{action}", json=params)
            res.raise_for_status()
            body = res.json()
        except (httpx.HTTPError, ValueError) as exc:
            _LOGGER.error("Error calling %s on %s: %s", action, remote_table, exc)
            raise RecordStoreError(f"{action} on {remote_table} failed: {exc}") from exc

        if not body.get("success"):
            message = body.get("message") or "unknown error"
            _LOGGER.error("Error calling %s on %s: %s", action, remote_table, message)
            raise RecordStoreError(message)
        return body

    def _successful(self, table: str, action: str, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Raise on the first failed per-record result; return the successful payloads."""
        results = body.get("results")
        if results is None:
            return [body["data"]] if body.get("data") else []
        failed = [r for r in results if not r.get("success")]
        if failed:
            _LOGGER.error("Failed to %s %d %s records: %s", action, len(failed), table, failed)
            raise RecordStoreError(failed[0].get("message") or f"{action} failed")
        return [r.get("data") for r in results if r.get("success")]

    # ── RecordStore ────────────────────────────────────────────────

    def _fetch_params(self, table: str, where: Optional[Where], order_by: Optional[OrderBy]) -> Dict[str, Any]:
        remote_names = to_remote(table, {f: None for f in FIELDS[table]})
        params: Dict[str, Any] = {
            "fields": [{"field": {"Name": name}} for name in SYSTEM_FIELDS + list(remote_names)],
        }
        if where:
            params["where"] = [
                {"FieldName": name, "Operator": "EqualTo", "Values": [value]}
                for name, value in to_remote(table, where).items()
            ]
        if order_by:
            params["orderBy"] = [
                {"fieldName": next(iter(to_remote(table, {field: None}))), "sorttype": direction.upper()}
                for field, direction in order_by
            ]
        return params

    def get_all(self, table: str, where: Optional[Where] = None, order_by: Optional[OrderBy] = None) -> List[Dict[str, Any]]:
        body = self._post(table, "fetch", self._fetch_params(table, where, order_by))
        return [normalize_record(table, row) for row in body.get("data") or []]

    def get_by_id(self, table: str, record_id: int) -> Dict[str, Any]:
        params = self._fetch_params(table, None, None)
        params["where"] = [{"FieldName": "Id", "Operator": "EqualTo", "Values": [int(record_id)]}]
        rows = self._post(table, "fetch", params).get("data") or []
        if not rows:
            raise RecordNotFoundError(table, record_id)
        return normalize_record(table, rows[0])

    def create(self, table: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        record = to_remote(table, normalize_record(table, data))
        body = self._post(table, "create", {"records": [record]})
        created = self._successful(table, "create", body)
        return normalize_record(table, created[0]) if created else {}

    def update(self, table: str, record_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
        record = to_remote(table, normalize_record(table, data, defaults=False))
        record["Id"] = int(record_id)
        body = self._post(table, "update", {"records": [record]})
        updated = self._successful(table, "update", body)
        return normalize_record(table, updated[0]) if updated else {}

    def delete(self, table: str, record_id: int) -> bool:
        body = self._post(table, "delete", {"RecordIds": [int(record_id)]})
        if body.get("results") is None:
            return True
        return len(self._successful(table, "delete", body)) > 0
