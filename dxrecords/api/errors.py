"""Error-to-response mapping for the records API.

    RecordValidationError   -> 400 {"error": "Validation failed", "errors": [...]}
    RequestValidationError  -> 400 (malformed JSON body, bad query parameter), same shape
    NotFoundError           -> 404 {"error": "Not found", "detail": "Test not found", "id": ...}
    StorageError            -> 500 generic body; cause is logged, never returned
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dxrecords.domain.ports import NotFoundError, RecordValidationError, StorageError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {
    "error": "Internal server error",
    "detail": "An unexpected error occurred"
}


async def record_validation_error_handler(request: Request, exc: RecordValidationError) -> JSONResponse:
    logger.info(f"Rejected {request.method} {request.url.path}: {[e.code + ':' + e.field for e in exc.errors]}")
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation failed",
            "errors": [error.to_dict() for error in exc.errors],
        },
    )


# FastAPI error location -> error code
REQUEST_ERROR_CODES = {
    "body": "InvalidRequestBody",
    "query": "InvalidQueryParameter",
    "path": "InvalidPathParameter",
    "header": "InvalidHeader",
}


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and bad query parameters are reported like field errors.

    The code names where the problem is; the field is the location without
    its source prefix (e.g. ?order=asc -> InvalidQueryParameter, "order").
    """
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())] or ["body"]
        source = location[0]
        errors.append({
            "code": REQUEST_ERROR_CODES.get(source, "InvalidRequestBody"),
            "field": ".".join(location[1:]) or source,
            "message": error.get("msg", "Invalid request"),
        })
    return JSONResponse(status_code=400, content={"error": "Validation failed", "errors": errors})


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info(f"Test record not found: {exc.record_id}")
    return JSONResponse(
        status_code=404,
        content={"error": "Not found", "detail": "Test not found", "id": exc.record_id},
    )


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    cause = exc.__cause__ or exc
    logger.error(
        f"Storage failure during {exc.operation or 'unknown operation'} "
        f"on {request.method} {request.url.path}: {cause}",
        exc_info=(type(cause), cause, cause.__traceback__),
    )
    return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecordValidationError, record_validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
