"""
memory.py — In-memory record store for tests and local development.

Holds its own tables; nothing is module-level. Optional artificial
latency mimics a hosted backend.
"""

import copy
import logging
import time
from typing import Any, Dict, List, Mapping, Optional

from core.dates import date_sort_key
from core.helpers import record_id, same_id
from store.base import (
    TABLES,
    OrderBy,
    RecordNotFoundError,
    RecordStore,
    Where,
    check_table,
    normalize_record,
)

_LOGGER = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    def __init__(self, seed: Optional[Mapping[str, List[Mapping[str, Any]]]] = None, delay_ms: int = 0):
        self.delay_ms = delay_ms
        self._tables: Dict[str, List[Dict[str, Any]]] = {t: [] for t in TABLES}
        if seed:
            self.seed(seed)

    def _delay(self):
        if self.delay_ms > 0:
            time.sleep(self.delay_ms / 1000)

    def seed(self, data: Mapping[str, List[Mapping[str, Any]]]):
        """Load records, keeping their ids when given and assigning new ones otherwise."""
        for table, rows in data.items():
            check_table(table)
            for row in rows:
                record = normalize_record(table, row)
                if record_id(record.get("id")) is None:
                    record["id"] = self._next_id(table)
                record["id"] = record_id(record["id"])
                self._tables[table].append(record)
        _LOGGER.debug("Seeded store: %s", {t: len(r) for t, r in self._tables.items()})

    def clear(self):
        for rows in self._tables.values():
            rows.clear()

    def _next_id(self, table: str) -> int:
        return max((r["id"] for r in self._tables[table]), default=0) + 1

    def _find(self, table: str, rid: Any) -> Dict[str, Any]:
        check_table(table)
        for row in self._tables[table]:
            if same_id(row.get("id"), rid):
                return row
        raise RecordNotFoundError(table, rid)

    def get_all(self, table: str, where: Optional[Where] = None, order_by: Optional[OrderBy] = None) -> List[Dict[str, Any]]:
        check_table(table)
        self._delay()
        rows = self._tables[table]
        for field, expected in (where or {}).items():
            if field.endswith("_id") or field == "id":
                rows = [r for r in rows if same_id(r.get(field), expected)]
            else:
                rows = [r for r in rows if r.get(field) == expected]
        for field, direction in reversed(list(order_by or [])):
            if field.endswith("date") or field == "created_at":
                key = lambda r, f=field: date_sort_key(r.get(f))
            else:
                key = lambda r, f=field: (r.get(f) is None, r.get(f) if r.get(f) is not None else 0)
            rows = sorted(rows, key=key, reverse=str(direction).lower() == "desc")
        return copy.deepcopy(list(rows))

    def get_by_id(self, table: str, rid: int) -> Dict[str, Any]:
        self._delay()
        return copy.deepcopy(self._find(table, rid))

    def create(self, table: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        check_table(table)
        self._delay()
        record = normalize_record(table, data)
        record["id"] = self._next_id(table)
        self._tables[table].append(record)
        return copy.deepcopy(record)

    def update(self, table: str, rid: int, data: Mapping[str, Any]) -> Dict[str, Any]:
        self._delay()
        row = self._find(table, rid)
        changes = normalize_record(table, data, defaults=False)
        changes.pop("id", None)
        row.update(changes)
        return copy.deepcopy(row)

    def delete(self, table: str, rid: int) -> bool:
        self._delay()
        row = self._find(table, rid)
        self._tables[table].remove(row)
        return True
