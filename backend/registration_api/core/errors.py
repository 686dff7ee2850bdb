"""Service-level errors and their HTTP translation."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from registration_api.core.logging import get_logger

logger = get_logger(__name__)


class ServiceError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_body(self) -> dict:
        return {"error": self.message}


class ValidationError(ServiceError):
    status_code = 400
    message = "Invalid registration data"

    def __init__(self, message: str | None = None, fields: list[dict] | None = None):
        super().__init__(message)
        self.fields = fields or []

    def to_body(self) -> dict:
        body = super().to_body()
        if self.fields:
            body["fields"] = self.fields
        return body


class PaymentStatusError(ValidationError):
    message = "Payment status cannot be reverted once marked paid"


class UnauthorizedError(ServiceError):
    status_code = 401
    message = "Unauthorized. Invalid or missing admin token."


class NotFoundError(ServiceError):
    status_code = 404
    message = "Player not found"


class RateLimitError(ServiceError):
    status_code = 429
    message = "Too many registrations from this IP, please try again later."

    def __init__(self, message: str | None = None, retry_after: float = 0):
        super().__init__(message)
        self.retry_after = retry_after


class MediaStoreError(ServiceError):
    message = "Upload failed"


def _field_errors(exc: RequestValidationError) -> list[dict]:
    out = []
    for err in exc.errors():
        # loc is ("body", "name") / ("query", "page"); drop the source prefix.
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        out.append({"field": ".".join(loc) or None, "message": err.get("msg", "invalid value")})
    return out


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def _service_error(_request: Request, exc: ServiceError):
        headers = None
        if isinstance(exc, RateLimitError) and exc.retry_after:
            headers = {"Retry-After": str(max(1, int(exc.retry_after + 0.999)))}
        if exc.status_code >= 500:
            logger.error("service failure: %s", exc, exc_info=exc)
            return JSONResponse(status_code=500, content={"error": exc.message})
        return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(_request: Request, exc: RequestValidationError):
        fields = _field_errors(exc)
        summary = "; ".join(
            f"{f['field']}: {f['message']}" if f["field"] else f["message"] for f in fields
        )
        err = ValidationError(summary or None, fields=fields)
        return JSONResponse(status_code=400, content=err.to_body())

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
