"""Record Service.

Coordinates the Validator and the Record Store for each operation. Mutating
operations validate first, so an invalid payload is rejected before the
store is consulted (a bad PUT to an unknown id is a 400, not a 404).

Security Impact:
    - Logs carry record ids only, never patient names
    - Storage errors propagate unchanged; mapping them to a generic response
      is the HTTP layer's job
"""

import logging
from typing import Any, List

from dxrecords.domain.ports import RecordValidationError, StoragePort
from dxrecords.domain.records import CandidateRecord, DiagnosticTestRecord
from dxrecords.domain.validator import validate_record_payload

logger = logging.getLogger(__name__)


class RecordService:
    """CRUD operations on diagnostic test records.

    Parameters:
        storage: Storage adapter implementing StoragePort (injected)
    """

    def __init__(self, storage: StoragePort):
        self.storage = storage

    def _validate(self, payload: Any) -> CandidateRecord:
        result = validate_record_payload(payload)
        if result.is_failure():
            raise RecordValidationError(result.error_details["errors"])
        return result.value

    def create(self, payload: Any) -> DiagnosticTestRecord:
        """Validate a payload and persist it as a new record.

        Raises:
            RecordValidationError: If the payload is invalid
            StorageError: If the storage engine fails
        """
        candidate = self._validate(payload)
        record = self.storage.create(candidate)
        logger.info(f"Created test record {record.id}")
        return record

    def get(self, record_id: str) -> DiagnosticTestRecord:
        return self.storage.get(record_id)

    def list(self, order_by_date: bool = False) -> List[DiagnosticTestRecord]:
        return self.storage.list(order_by_date=order_by_date)

    def update(self, record_id: str, payload: Any) -> DiagnosticTestRecord:
        """Validate a payload and replace the mutable fields of an existing record.

        Raises:
            RecordValidationError: If the payload is invalid
            NotFoundError: If the record does not exist
            StorageError: If the storage engine fails
        """
        candidate = self._validate(payload)
        record = self.storage.update(record_id, candidate)
        logger.info(f"Updated test record {record_id}")
        return record

    def delete(self, record_id: str) -> DiagnosticTestRecord:
        record = self.storage.delete(record_id)
        logger.info(f"Deleted test record {record_id}")
        return record
