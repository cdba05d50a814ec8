"""Map service exceptions to HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.schemas.common import ErrorResponse
from partnerledger.services.errors import (
    AutoAssignmentError,
    ClientNotFoundError,
    ExportError,
    InvalidPaymentError,
    InvalidSplitError,
    PartnerNotFoundError,
    SnapshotLoadError,
)

logger: logging.Logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[Exception], int] = {
    PartnerNotFoundError: 404,
    ClientNotFoundError: 404,
    ExportError: 500,
    InvalidSplitError: 422,
    InvalidPaymentError: 422,
    AutoAssignmentError: 502,
}


def _error_body(exc: Exception, retryable: bool = False) -> dict[str, object]:
    return ErrorResponse(detail=str(exc), type=type(exc).__name__, retryable=retryable).model_dump()


def register_error_handlers(app: FastAPI) -> None:
    async def _on_service_error(request: Request, exc: Exception) -> JSONResponse:
        status_code: int = next(
            code for exc_type, code in _STATUS_CODES.items() if isinstance(exc, exc_type)
        )
        return JSONResponse(status_code=status_code, content=_error_body(exc))

    async def _on_snapshot_error(request: Request, exc: SnapshotLoadError) -> JSONResponse:
        logger.warning("Snapshot load failed: %s", exc)
        return JSONResponse(status_code=503, content=_error_body(exc, retryable=exc.retryable))

    for exc_type in _STATUS_CODES:
        app.add_exception_handler(exc_type, _on_service_error)
    app.add_exception_handler(SnapshotLoadError, _on_snapshot_error)
