"""API Pydantic models."""

from dxrecords.api.models.health import DatabaseHealth, HealthResponse
from dxrecords.api.models.records import (
    ErrorResponse,
    FieldErrorModel,
    NotFoundResponse,
    RecordPayload,
    SuggestedTestTypesResponse,
    ValidationErrorResponse,
)
