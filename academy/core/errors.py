# academy/core/errors.py
import logging
from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException
from starlette.requests import Request

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Domain error rendered as {"code", "message", "details"}."""

    status_code: int = 400
    code: str = "BAD_REQUEST"
    message: str = "Bad request"

    def __init__(self, message: str | None = None, *, code: str | None = None,
                 status_code: int | None = None, details: Any = None):
        self.message = message or self.message
        self.code = code or self.code
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class Unauthorized(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
    message = "Unauthorized"


class Forbidden(AppError):
    status_code = 403
    code = "FORBIDDEN"
    message = "You do not have permission to perform this action"


class NotFound(AppError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Not found"


class AlreadyEnrolled(AppError):
    code = "ALREADY_ENROLLED"
    message = "You are already enrolled in this class"


class AlreadyRegistered(AppError):
    code = "ALREADY_REGISTERED"
    message = "You are already registered for this event"


class OfferingUnavailable(AppError):
    code = "CLASS_INACTIVE"
    message = "This class is not currently available for enrollment"


class OfferingFull(AppError):
    code = "CLASS_FULL"
    message = "This class is full"


class CheckoutFailed(AppError):
    status_code = 502
    code = "CHECKOUT_FAILED"
    message = "Failed to create checkout session"


def _body(code: str, message: str, details: Any = None) -> dict:
    return {"code": code, "message": message, "details": details}


def register_exception_handlers(api: FastAPI) -> None:
    @api.exception_handler(AppError)
    def handle_app_error(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=_body(exc.code, exc.message, exc.details))

    @api.exception_handler(HTTPException)
    def handle_http_error(request: Request, exc: HTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        details = None if isinstance(exc.detail, str) else exc.detail
        return JSONResponse(status_code=exc.status_code, content=_body("HTTP_ERROR", message, details),
                            headers=getattr(exc, "headers", None))

    @api.exception_handler(RequestValidationError)
    def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "body"
        message = f"Invalid value for '{field}': {first.get('msg', 'invalid')}"
        return JSONResponse(status_code=422,
                            content=_body("VALIDATION_ERROR", message,
                                          [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
                                           for e in errors]))

    @api.exception_handler(IntegrityError)
    def handle_integrity_error(request: Request, exc: IntegrityError):
        return JSONResponse(status_code=409,
                            content=_body("UNIQUE_VIOLATION", "Duplicate record.", str(getattr(exc, "orig", exc))))

    @api.exception_handler(Exception)
    def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=_body("INTERNAL_ERROR", "Something went wrong", str(exc)))
