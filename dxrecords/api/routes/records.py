"""Diagnostic test record endpoints.

REST surface consumed by the browser UI and programmatic clients. Handlers
are plain (sync) functions: FastAPI runs them in its threadpool, so a slow
storage call never blocks unrelated requests.
"""

import logging
from typing import Any, List, Literal, Optional

from fastapi import APIRouter, Body, Query

from dxrecords.api.dependencies import RecordServiceDep
from dxrecords.api.models.records import (
    ErrorResponse,
    NotFoundResponse,
    RecordPayload,
    SuggestedTestTypesResponse,
    ValidationErrorResponse,
)
from dxrecords.domain.records import SUGGESTED_TEST_TYPES, DiagnosticTestRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tests"])

PAYLOAD_OPENAPI = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": RecordPayload.model_json_schema()}},
    }
}

STORAGE_ERROR = {500: {"model": ErrorResponse, "description": "Storage failure"}}
NOT_FOUND = {404: {"model": NotFoundResponse, "description": "Test not found"}}
INVALID = {400: {"model": ValidationErrorResponse, "description": "Validation errors"}}


@router.post(
    "/tests",
    response_model=DiagnosticTestRecord,
    status_code=201,
    responses={**INVALID, **STORAGE_ERROR},
    openapi_extra=PAYLOAD_OPENAPI,
)
def create_test(service: RecordServiceDep, payload: Any = Body(None)) -> DiagnosticTestRecord:
    """Create a diagnostic test record.

    testDate defaults to the current server time when omitted.
    """
    return service.create(payload)


@router.get("/tests", response_model=List[DiagnosticTestRecord], responses=STORAGE_ERROR)
def list_tests(
    service: RecordServiceDep,
    order: Optional[Literal["desc"]] = Query(
        None, description="'desc' sorts by testDate, newest first; omitted means storage order"
    ),
) -> List[DiagnosticTestRecord]:
    """List every diagnostic test record."""
    return service.list(order_by_date=order == "desc")


@router.get("/tests/{record_id}", response_model=DiagnosticTestRecord, responses={**NOT_FOUND, **STORAGE_ERROR})
def get_test(record_id: str, service: RecordServiceDep) -> DiagnosticTestRecord:
    return service.get(record_id)


@router.put(
    "/tests/{record_id}",
    response_model=DiagnosticTestRecord,
    responses={**INVALID, **NOT_FOUND, **STORAGE_ERROR},
    openapi_extra=PAYLOAD_OPENAPI,
)
def update_test(record_id: str, service: RecordServiceDep, payload: Any = Body(None)) -> DiagnosticTestRecord:
    """Replace every mutable field of a record.

    notes is cleared when omitted; testDate is kept when omitted.
    """
    return service.update(record_id, payload)


@router.delete("/tests/{record_id}", response_model=DiagnosticTestRecord, responses={**NOT_FOUND, **STORAGE_ERROR})
def delete_test(record_id: str, service: RecordServiceDep) -> DiagnosticTestRecord:
    """Delete a record permanently and return its last state."""
    return service.delete(record_id)


@router.get("/test-types", response_model=SuggestedTestTypesResponse)
def list_test_types() -> SuggestedTestTypesResponse:
    """Common test types for the entry form's suggestion list. Not enforced."""
    return SuggestedTestTypesResponse(testTypes=list(SUGGESTED_TEST_TYPES))
