"""
Mapping from structured failure results to HTTP responses.
"""
from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lifeline.database.provisioner import FailureReason

FAILURE_STATUS = {
    FailureReason.INVALID_NAME: status.HTTP_400_BAD_REQUEST,
    FailureReason.SCHEMA_INVALID: status.HTTP_400_BAD_REQUEST,
    FailureReason.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureReason.MODEL_CONFLICT: status.HTTP_409_CONFLICT,
    FailureReason.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    FailureReason.STORAGE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(reason: FailureReason | None) -> int:
    """HTTP status for a failure reason (500 when unknown)."""
    return FAILURE_STATUS.get(reason, status.HTTP_500_INTERNAL_SERVER_ERROR)


def failure_response(result: BaseModel) -> JSONResponse:
    """Serialize a failed result with the status its reason maps to."""
    return JSONResponse(
        status_code=status_for(getattr(result, "reason", None)),
        content=result.model_dump(mode="json"),
    )
