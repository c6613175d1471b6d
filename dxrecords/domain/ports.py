"""Domain Ports - Abstract Contracts for Record Storage.

This module defines the Port interface (abstract contract) that storage
adapters must implement, together with the error taxonomy shared by the
Validator, the Record Store and the HTTP boundary.
Following Hexagonal Architecture, the Domain Core defines what it needs, not how it's provided.

Security Impact:
    - Storage errors keep the underlying cause for operators but expose only a generic message
    - Only validated CandidateRecord objects reach the storage port

Architecture:
    - Pure abstract interfaces with zero infrastructure dependencies
    - Adapters (in-memory, DuckDB, PostgreSQL) implement StoragePort
    - The storage handle is injected, never a module-level singleton
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar, Union

from dxrecords.domain.records import CandidateRecord, DiagnosticTestRecord

# Type variable for Result generic
T = TypeVar('T')


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Result type for communicating success or failure without exceptions.

    The Validator uses it to return either a candidate record or the full
    list of field errors; storage adapters use it for schema setup and
    connectivity checks.

    Attributes:
        success: True if the operation succeeded, False otherwise
        value: The successful result value (only present if success=True)
        error: Error information (only present if success=False)
        error_type: Type of error (ValidationError, StorageError, etc.)
        error_details: Additional error context

    Example:
        ```python
        result = validate_record_payload({"patientName": "Zain"})
        if not result.success:
            for error in result.error_details["errors"]:
                print(error.code, error.field)
        ```
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: Optional[dict] = None

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        """Create a successful result.

        Parameters:
            value: The successful result value

        Returns:
            Result: Success result with the value
        """
        return cls(
            success=True,
            value=value,
            error=None,
            error_type=None,
            error_details=None
        )

    @classmethod
    def failure_result(
        cls,
        error: Union[str, Exception],
        error_type: Optional[str] = None,
        error_details: Optional[dict] = None
    ) -> 'Result[T]':
        """Create a failure result.

        Parameters:
            error: Error message or exception
            error_type: Type of error (e.g., "ValidationError", "StorageError")
            error_details: Additional context

        Returns:
            Result: Failure result with error information
        """
        error_message = str(error) if isinstance(error, Exception) else error
        error_type_name = error_type or (type(error).__name__ if isinstance(error, Exception) else "UnknownError")

        return cls(
            success=False,
            value=None,
            error=error_message,
            error_type=error_type_name,
            error_details=error_details or {}
        )

    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success


# ============================================================================
# Field-level validation errors
# ============================================================================

REQUIRED_FIELD_MISSING = "RequiredFieldMissing"
INVALID_DATE_FORMAT = "InvalidDateFormat"
INVALID_FIELD_TYPE = "InvalidFieldType"


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure.

    Attributes:
        code: RequiredFieldMissing, InvalidDateFormat or InvalidFieldType
        field: Wire name of the offending field (e.g. "patientName")
        message: Human-readable message suitable for a form
    """

    code: str
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"code": self.code, "field": self.field, "message": self.message}


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class RecordServiceError(Exception):
    """Base exception for all record-service errors."""
    pass


class RecordValidationError(RecordServiceError):
    """Raised when an input payload fails validation.

    Attributes:
        errors: Every field error found, in field order
    """

    def __init__(self, errors: list[FieldError]):
        fields = ", ".join(error.field for error in errors)
        super().__init__(f"Validation failed for: {fields}")
        self.errors = list(errors)


class NotFoundError(RecordServiceError):
    """Raised when no record exists for the requested id.

    This is an expected outcome, not a defect.

    Attributes:
        record_id: The id that was looked up
    """

    def __init__(self, record_id: str):
        super().__init__(f"Test record not found: {record_id}")
        self.record_id = record_id


class StorageError(RecordServiceError):
    """Raised when the storage engine fails (connection loss, constraint violation, etc.).

    The original exception is chained as __cause__ and must only be logged,
    never returned to API callers.

    Attributes:
        operation: Storage operation that failed (create, get, list, ...)
        details: Additional non-sensitive context
    """

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.operation = operation
        self.details = details or {}


# ============================================================================
# Storage Port
# ============================================================================

class StoragePort(ABC):
    """Abstract contract for the Record Store.

    Implementations provide durable CRUD over a single collection of
    DiagnosticTestRecord objects keyed by id. Each operation must be atomic
    on its own; no cross-request locking or conflict detection is defined,
    so concurrent updates to one record resolve as last write wins.

    Errors:
        - get/update/delete raise NotFoundError for an unknown id
        - any storage-engine failure is raised as StorageError and never retried

    Example Usage:
        ```python
        storage = DuckDBAdapter(db_path=":memory:")
        storage.initialize_schema()
        record = storage.create(candidate)
        assert storage.get(record.id) == record
        ```
    """

    db_type: str = "unknown"

    @abstractmethod
    def initialize_schema(self) -> Result[None]:
        """Create the backing table(s) if they do not exist."""
        pass

    @abstractmethod
    def create(self, candidate: CandidateRecord) -> DiagnosticTestRecord:
        """Persist a new record.

        Assigns a new unique id and defaults test_date to the current time
        when the candidate omits it.

        Parameters:
            candidate: Validated candidate record

        Returns:
            DiagnosticTestRecord: The full stored record

        Raises:
            StorageError: If the storage engine fails
        """
        pass

    @abstractmethod
    def get(self, record_id: str) -> DiagnosticTestRecord:
        """Return the record with the given id.

        Raises:
            NotFoundError: If no such record exists
            StorageError: If the storage engine fails
        """
        pass

    @abstractmethod
    def list(self, order_by_date: bool = False) -> List[DiagnosticTestRecord]:
        """Return every record.

        Parameters:
            order_by_date: Sort by test_date, newest first. Otherwise the
                order is whatever the storage engine returns.
        """
        pass

    @abstractmethod
    def update(self, record_id: str, candidate: CandidateRecord) -> DiagnosticTestRecord:
        """Replace all mutable fields of an existing record atomically.

        test_date is only replaced when the candidate supplies one.

        Returns:
            DiagnosticTestRecord: The updated record

        Raises:
            NotFoundError: If no such record exists (nothing is changed)
            StorageError: If the storage engine fails
        """
        pass

    @abstractmethod
    def delete(self, record_id: str) -> DiagnosticTestRecord:
        """Remove a record permanently.

        Returns:
            DiagnosticTestRecord: The record's last known state

        Raises:
            NotFoundError: If no such record exists
            StorageError: If the storage engine fails
        """
        pass

    @abstractmethod
    def ping(self) -> Result[float]:
        """Check connectivity.

        Returns:
            Result[float]: Round-trip time in milliseconds on success
        """
        pass

    def close(self) -> None:
        """Release connections. Default implementation does nothing."""
        return None
