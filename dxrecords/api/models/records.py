"""Request/response models for the records API (OpenAPI documentation)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RecordPayload(BaseModel):
    """Documented shape of a create/update body.

    Only used for the OpenAPI schema: the route accepts the raw JSON value
    and the Validator decides what is acceptable, so every field error can
    be reported at once.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "patientName": "Zain",
                "testType": "Blood Test",
                "result": "Pending",
                "testDate": "2024-05-01",
                "notes": "Patient has mild symptoms.",
            }
        }
    )

    patientName: str = Field(..., min_length=1)
    testType: str = Field(..., min_length=1, description="Free text; see /api/test-types for suggestions")
    result: str = Field(..., min_length=1)
    testDate: Optional[datetime] = Field(None, description="Calendar date or ISO-8601 timestamp; defaults to now")
    notes: Optional[str] = None


class FieldErrorModel(BaseModel):
    code: str = Field(..., description="RequiredFieldMissing, InvalidDateFormat, InvalidFieldType, InvalidRequestBody or InvalidQueryParameter")
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    error: str = "Validation failed"
    errors: list[FieldErrorModel]


class NotFoundResponse(BaseModel):
    error: str = "Not found"
    detail: str = "Test not found"
    id: str


class ErrorResponse(BaseModel):
    error: str
    detail: str


class SuggestedTestTypesResponse(BaseModel):
    """Suggested test types offered by the entry form (not enforced)."""

    testTypes: list[str]
