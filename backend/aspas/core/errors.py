# aspas/core/errors.py
"""
Domain error taxonomy.

Every failure a service or dependency can report is a member of ``ErrorKind``.
Each member carries the wire ``code``, the HTTP status and a default message,
so routers never map strings to status codes by hand.
"""
import logging
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("uvicorn.error")


class ErrorKind(Enum):
    """Closed set of domain errors: (code, http status, default message)."""

    VALIDATION_ERROR = ("VALIDATION_ERROR", status.HTTP_400_BAD_REQUEST, "Invalid data")

    # Authentication
    INVALID_CREDENTIALS = ("INVALID_CREDENTIALS", status.HTTP_401_UNAUTHORIZED, "Incorrect email or password")
    MISSING_TOKEN = ("MISSING_TOKEN", status.HTTP_401_UNAUTHORIZED, "Access token not provided")
    INVALID_TOKEN = ("INVALID_TOKEN", status.HTTP_401_UNAUTHORIZED, "Invalid or expired token")
    TOKEN_EXPIRED = ("TOKEN_EXPIRED", status.HTTP_401_UNAUTHORIZED, "Token expired")
    TOKEN_GENERATION_ERROR = ("TOKEN_GENERATION_ERROR", status.HTTP_500_INTERNAL_SERVER_ERROR, "Could not generate token")

    # Accounts
    EMAIL_ALREADY_EXISTS = ("EMAIL_ALREADY_EXISTS", status.HTTP_409_CONFLICT, "This email is already in use")
    USERNAME_ALREADY_EXISTS = ("USERNAME_ALREADY_EXISTS", status.HTTP_409_CONFLICT, "This username is already in use")
    USER_NOT_FOUND = ("USER_NOT_FOUND", status.HTTP_404_NOT_FOUND, "User not found")
    USER_NOT_AUTHORIZED = ("USER_NOT_AUTHORIZED", status.HTTP_403_FORBIDDEN, "User not authorized")

    # Password reset tokens (client errors, distinct from bearer-token errors)
    RESET_TOKEN_INVALID = ("INVALID_TOKEN", status.HTTP_400_BAD_REQUEST, "Invalid token")
    RESET_TOKEN_USED = (
        "TOKEN_ALREADY_USED",
        status.HTTP_400_BAD_REQUEST,
        "This token has already been used. Please request a new recovery token.",
    )
    RESET_TOKEN_EXPIRED = (
        "TOKEN_EXPIRED",
        status.HTTP_400_BAD_REQUEST,
        "This token has expired. Please request a new recovery token.",
    )

    # Resources
    PROJECT_NOT_FOUND = ("PROJECT_NOT_FOUND", status.HTTP_404_NOT_FOUND, "Project not found")
    TASK_NOT_FOUND = ("TASK_NOT_FOUND", status.HTTP_404_NOT_FOUND, "Task not found")
    PHRASE_NOT_FOUND = ("PHRASE_NOT_FOUND", status.HTTP_404_NOT_FOUND, "Phrase not found")

    # Rate limiting
    TOO_MANY_LOGIN_ATTEMPTS = ("TOO_MANY_LOGIN_ATTEMPTS", status.HTTP_429_TOO_MANY_REQUESTS, "Too many login attempts")
    TOO_MANY_LOGIN_ATTEMPTS_EMAIL = (
        "TOO_MANY_LOGIN_ATTEMPTS_EMAIL",
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many login attempts for this email",
    )

    INTERNAL_ERROR = ("INTERNAL_ERROR", status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    def __init__(self, code: str, status_code: int, default_message: str):
        self.code = code
        self.status_code = status_code
        self.default_message = default_message


class AppError(Exception):
    """
    The single domain exception raised by services and dependencies.

    Args:
        kind: Member of ErrorKind (decides code and HTTP status)
        message: Optional message overriding the kind's default
        details: Optional list of {field, message} entries (validation failures)
        extra: Optional extra top-level keys for the error envelope (e.g. retryAfter)
        headers: Optional response headers (e.g. Retry-After)
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        details: Optional[list[dict[str, str]]] = None,
        extra: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self.kind = kind
        self.message = message or kind.default_message
        self.details = details
        self.extra = extra or {}
        self.headers = headers
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        body.update(self.extra)
        return body


def format_validation_errors(errors, strip_location: bool = False) -> list[dict[str, str]]:
    """
    Turn pydantic error dicts into [{field, message}] with dotted field paths.

    FastAPI prefixes body errors with the request location ("body", "query"...);
    pass strip_location=True to drop that first segment. An error on the
    location as a whole (e.g. a missing body) keeps it as the field name.
    """
    items = []
    for err in errors:
        loc = list(err.get("loc", ()))
        if strip_location and len(loc) > 1:
            loc = loc[1:]
        items.append({"field": ".".join(str(p) for p in loc), "message": err.get("msg", "")})
    return items


LOCATION_MESSAGES = {
    "body": "Invalid data",
    "path": "Invalid parameters",
    "params": "Invalid parameters",
    "query": "Invalid query parameters",
}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    location = errors[0]["loc"][0] if errors and errors[0].get("loc") else "body"
    err = AppError(
        ErrorKind.VALIDATION_ERROR,
        message=LOCATION_MESSAGES.get(location, ErrorKind.VALIDATION_ERROR.default_message),
        details=format_validation_errors(errors, strip_location=True),
    )
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak the raw exception to the client
    logger.exception("[error] Unhandled exception on %s %s", request.method, request.url.path)
    err = AppError(ErrorKind.INTERNAL_ERROR)
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
