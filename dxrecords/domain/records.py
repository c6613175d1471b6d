"""Diagnostic Test Record Schema Definitions.

This module defines the canonical data models for diagnostic test results.
A CandidateRecord is what the Validator produces from raw input; a
DiagnosticTestRecord is what the Record Store owns once an id is assigned.

Security Impact:
    - patient_name is PII and must never be written to logs
    - Schema validation prevents empty or unparsed values from reaching persistence
    - Type safety enforced at runtime via Pydantic V2

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Models are immutable (frozen) so no component can mutate a stored record in place
    - Wire format uses camelCase aliases; Python code uses snake_case fields
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# Common values offered by the entry form. Not enforced: test_type is free text.
SUGGESTED_TEST_TYPES = (
    "Blood Test",
    "Urine Test",
    "X-Ray",
    "MRI",
    "CT Scan",
    "Ultrasound",
    "ECG",
    "COVID-19 PCR",
)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to timezone-aware UTC.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CandidateRecord(BaseModel):
    """Validated, normalized record that has not been assigned an id yet.

    Parameters:
        patient_name: Patient name (PII)
        test_type: Kind of diagnostic test (free text)
        result: Test result text
        test_date: When the test was taken; None lets the Record Store default it
        notes: Optional free-text notes
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    patient_name: str = Field(..., min_length=1, alias="patientName")
    test_type: str = Field(..., min_length=1, alias="testType")
    result: str = Field(..., min_length=1)
    test_date: Optional[datetime] = Field(None, alias="testDate")
    notes: Optional[str] = None

    @field_validator("patient_name", "test_type", "result")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only values."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("test_date")
    @classmethod
    def validate_test_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None


class DiagnosticTestRecord(BaseModel):
    """A persisted diagnostic test result for one patient.

    The id is assigned once by the Record Store and never changes. Every
    other field is replaced as a unit by an update.

    Example:
        ```python
        candidate = CandidateRecord(patient_name="Zain", test_type="Blood Test", result="Pending")
        record = DiagnosticTestRecord.from_candidate(candidate)
        record.model_dump(by_alias=True, mode="json")
        # {"id": "...", "patientName": "Zain", ..., "testDate": "2024-05-01T10:00:00Z", "notes": None}
        ```
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    patient_name: str = Field(..., min_length=1, alias="patientName", description="Patient name (PII)")
    test_type: str = Field(..., min_length=1, alias="testType", description="Diagnostic test type")
    result: str = Field(..., min_length=1, description="Test result")
    test_date: datetime = Field(..., alias="testDate", description="Test date-time (UTC)")
    notes: Optional[str] = Field(None, description="Optional notes")

    @field_validator("patient_name", "test_type", "result")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("test_date")
    @classmethod
    def validate_test_date(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_serializer("test_date", when_used="json")
    def serialize_test_date(self, v: datetime) -> str:
        return v.isoformat().replace("+00:00", "Z")

    @classmethod
    def from_candidate(
        cls,
        candidate: CandidateRecord,
        record_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "DiagnosticTestRecord":
        """Build a new record from a candidate.

        Parameters:
            candidate: Validated candidate record
            record_id: Identifier to use (a new UUID4 when omitted)
            now: Time used when the candidate has no test_date (defaults to current UTC time)

        Returns:
            DiagnosticTestRecord: Record ready to persist
        """
        return cls(
            id=record_id or str(uuid.uuid4()),
            patient_name=candidate.patient_name,
            test_type=candidate.test_type,
            result=candidate.result,
            test_date=candidate.test_date or now or utc_now(),
            notes=candidate.notes,
        )

    def with_changes(self, candidate: CandidateRecord) -> "DiagnosticTestRecord":
        """Return this record with every mutable field taken from candidate.

        test_date is only replaced when the candidate supplies one; notes is
        always replaced, so an absent value clears it.
        """
        return self.model_copy(
            update={
                "patient_name": candidate.patient_name,
                "test_type": candidate.test_type,
                "result": candidate.result,
                "test_date": candidate.test_date or self.test_date,
                "notes": candidate.notes,
            }
        )
