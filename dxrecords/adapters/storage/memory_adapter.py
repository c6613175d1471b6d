"""In-Memory Storage Adapter.

Implements StoragePort with a dict guarded by a lock. Used as the test
double for the Record Store and for throwaway local runs (DX_DB_TYPE=memory).
Nothing survives a restart.
"""

import logging
import threading
import time
from typing import Dict, List

from dxrecords.domain.ports import NotFoundError, Result, StoragePort
from dxrecords.domain.records import CandidateRecord, DiagnosticTestRecord

logger = logging.getLogger(__name__)


class InMemoryAdapter(StoragePort):
    """Dict-backed StoragePort implementation.

    Records are immutable, so handing out the stored instance never exposes
    a mutable alias. Insertion order is the unordered list order.
    """

    db_type = "memory"

    def __init__(self):
        self._records: Dict[str, DiagnosticTestRecord] = {}
        self._lock = threading.Lock()

    def initialize_schema(self) -> Result[None]:
        """Nothing to create; a dict needs no schema."""
        return Result.success_result(None)

    def create(self, candidate: CandidateRecord) -> DiagnosticTestRecord:
        record = DiagnosticTestRecord.from_candidate(candidate)
        with self._lock:
            self._records[record.id] = record
        return record

    def get(self, record_id: str) -> DiagnosticTestRecord:
        with self._lock:
            record = self._records.get(record_id)
        if record is None:
            raise NotFoundError(record_id)
        return record

    def list(self, order_by_date: bool = False) -> List[DiagnosticTestRecord]:
        with self._lock:
            records = list(self._records.values())
        if order_by_date:
            records.sort(key=lambda r: r.test_date, reverse=True)
        return records

    def update(self, record_id: str, candidate: CandidateRecord) -> DiagnosticTestRecord:
        with self._lock:
            existing = self._records.get(record_id)
            if existing is None:
                raise NotFoundError(record_id)
            updated = existing.with_changes(candidate)
            self._records[record_id] = updated
        return updated

    def delete(self, record_id: str) -> DiagnosticTestRecord:
        with self._lock:
            record = self._records.pop(record_id, None)
        if record is None:
            raise NotFoundError(record_id)
        return record

    def ping(self) -> Result[float]:
        start_time = time.time()
        with self._lock:
            pass
        return Result.success_result(round((time.time() - start_time) * 1000, 2))
