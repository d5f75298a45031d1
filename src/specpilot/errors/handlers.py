"""FastAPI exception handlers producing the ErrorResponse envelope."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from specpilot.errors.exceptions import MissingInputError, PermissionDeniedError, SpecPilotError
from specpilot.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def _error_json(request: Request, status_code: int, code: str, message: str, details=None) -> JSONResponse:
    trace_id = getattr(request.state, "trace_id", "unknown")
    error_response = ErrorResponse(
        error=ErrorDetail(
            code=code,
            message=message,
            details=details,
            trace_id=trace_id,
            timestamp=datetime.now(timezone.utc),
        ),
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


def _error_list(exc) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(SpecPilotError)
    async def specpilot_error_handler(request: Request, exc: SpecPilotError):
        if isinstance(exc, PermissionDeniedError):
            logger.warning(
                "review_permission_denied",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "trace_id": getattr(request.state, "trace_id", "unknown"),
                    "reason": str(exc),
                },
            )
        elif exc.status_code >= 500:
            logger.error("%s: %s", exc.code, exc.message)
        return _error_json(request, exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(PydanticValidationError)
    async def model_validation_handler(request: Request, exc: PydanticValidationError):
        # Models parsed outside the request body, e.g. a canonical spec handed to a service
        errors = _error_list(exc)
        logger.warning("%s failed validation at %s", exc.title, request.url.path)
        return _error_json(request, 400, "VALIDATION_ERROR", f"{exc.title} failed validation", errors)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = _error_list(exc)
        if errors and all(err["type"] == "missing" for err in errors):
            missing = MissingInputError(str(errors[0]["loc"][-1]) if errors[0]["loc"] else "body")
            return _error_json(request, missing.status_code, missing.code, missing.message, errors)
        return _error_json(
            request,
            400,
            "VALIDATION_ERROR",
            "Request body failed validation",
            errors,
        )
