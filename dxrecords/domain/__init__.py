"""Domain core: record models, validation, storage contract and service."""

from dxrecords.domain.ports import (
    FieldError,
    NotFoundError,
    RecordServiceError,
    RecordValidationError,
    Result,
    StorageError,
    StoragePort,
)
from dxrecords.domain.records import CandidateRecord, DiagnosticTestRecord, SUGGESTED_TEST_TYPES
from dxrecords.domain.service import RecordService
from dxrecords.domain.validator import validate_record_payload

__all__ = [
    "CandidateRecord",
    "DiagnosticTestRecord",
    "FieldError",
    "NotFoundError",
    "RecordService",
    "RecordServiceError",
    "RecordValidationError",
    "Result",
    "StorageError",
    "StoragePort",
    "SUGGESTED_TEST_TYPES",
    "validate_record_payload",
]
