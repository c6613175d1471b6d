"""Input Validator for Diagnostic Test Payloads.

Turns an untyped payload from the wire into either a CandidateRecord or the
complete, ordered list of field errors. Each field is checked by a small
named predicate; every check runs so the caller can report all problems in
one round trip.

Security Impact:
    - Nothing reaches the Record Store without passing these checks
    - Field values are never logged (patientName is PII)

Architecture:
    - Pure function, no side effects, deterministic for a given input
    - Date parsing is delegated to pandas, which accepts ISO-8601 and the
      other common calendar formats entered through the browser form
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

import pandas as pd

from dxrecords.domain.ports import (
    INVALID_DATE_FORMAT,
    INVALID_FIELD_TYPE,
    REQUIRED_FIELD_MISSING,
    FieldError,
    Result,
)
from dxrecords.domain.records import CandidateRecord, ensure_utc

logger = logging.getLogger(__name__)

# Wire name -> message for the required text fields, in reporting order
REQUIRED_TEXT_FIELDS = {
    "patientName": "Patient name is required",
    "testType": "Test type is required",
    "result": "Test result is required",
}

# pandas resolves these against the clock; a payload must name a fixed date
RELATIVE_DATE_WORDS = frozenset({"now", "today"})


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def check_required_text(payload: Mapping, field: str, message: str) -> tuple[Optional[str], Optional[FieldError]]:
    """Check a required, non-empty text field.

    Returns:
        (trimmed value, None) on success or (None, FieldError) on failure
    """
    value = payload.get(field)
    if _is_blank(value):
        return None, FieldError(REQUIRED_FIELD_MISSING, field, message)
    if not isinstance(value, str):
        return None, FieldError(INVALID_FIELD_TYPE, field, f"{field} must be a string")
    return value.strip(), None


def parse_test_date(value: Any) -> Optional[datetime]:
    """Parse a calendar date or timestamp into a UTC datetime.

    Naive values are taken as UTC.

    Raises:
        ValueError: If the value is not a string or cannot be parsed
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str):
        raise ValueError(f"Unsupported date value type: {type(value).__name__}")
    if value.strip().lower() in RELATIVE_DATE_WORDS:
        raise ValueError(f"Relative date not allowed: {value!r}")
    try:
        parsed = pd.to_datetime(value.strip(), utc=True)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Unparsable date: {value!r}") from e
    if pd.isna(parsed):
        raise ValueError(f"Unparsable date: {value!r}")
    return parsed.to_pydatetime()


def check_test_date(payload: Mapping, field: str = "testDate") -> tuple[Optional[datetime], Optional[FieldError]]:
    """Check the optional test date.

    Absent, null and empty values mean "unset"; the Record Store defaults them.
    """
    value = payload.get(field)
    if _is_blank(value):
        return None, None
    try:
        return parse_test_date(value), None
    except ValueError:
        return None, FieldError(INVALID_DATE_FORMAT, field, "Invalid date format")


def normalize_notes(payload: Mapping, field: str = "notes") -> Optional[str]:
    """Notes are always accepted; non-string values are converted to text."""
    value = payload.get(field)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def validate_record_payload(payload: Any) -> Result[CandidateRecord]:
    """Validate a raw create/update payload.

    Parameters:
        payload: Decoded JSON body (any value; non-objects are treated as empty)

    Returns:
        Result[CandidateRecord]: Success with the normalized candidate, or a
        failure whose error_details["errors"] lists every FieldError in
        field order (patientName, testType, result, testDate)
    """
    if not isinstance(payload, Mapping):
        payload = {}

    errors: list[FieldError] = []
    values: dict[str, Any] = {}

    for field, message in REQUIRED_TEXT_FIELDS.items():
        value, error = check_required_text(payload, field, message)
        if error:
            errors.append(error)
        else:
            values[field] = value

    test_date, date_error = check_test_date(payload)
    if date_error:
        errors.append(date_error)

    if errors:
        logger.debug(f"Payload rejected: {[(e.code, e.field) for e in errors]}")
        return Result.failure_result(
            f"Validation failed for: {', '.join(e.field for e in errors)}",
            error_type="ValidationError",
            error_details={"errors": errors},
        )

    candidate = CandidateRecord(
        patient_name=values["patientName"],
        test_type=values["testType"],
        result=values["result"],
        test_date=test_date,
        notes=normalize_notes(payload),
    )
    return Result.success_result(candidate)
