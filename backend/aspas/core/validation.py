# aspas/core/validation.py
"""
Schema-driven validation of request payloads.

``parse_payload`` is the single entry point: it validates a mapping against a
pydantic model and either returns the normalized model or raises ``AppError``.
``validate_params`` / ``validate_query`` wrap it as FastAPI dependencies for path
parameters and query strings. Request bodies go through FastAPI's own parsing and
are rendered by ``errors.request_validation_handler`` with the same formatter.
"""
import logging
from typing import Any, Mapping, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from aspas.core.errors import LOCATION_MESSAGES, AppError, ErrorKind, format_validation_errors

logger = logging.getLogger("uvicorn.error")

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_payload(schema: Type[ModelT], data: Mapping[str, Any] | None, location: str = "body") -> ModelT:
    """
    Validate ``data`` against ``schema``.

    Args:
        schema: pydantic model describing the payload
        data: raw payload (body, path params or query string)
        location: "body" | "params" | "query", only used for the error message

    Returns:
        The validated model (coerced, defaulted and trimmed)

    Raises:
        AppError(VALIDATION_ERROR): one detail entry per violated rule
        AppError(INTERNAL_ERROR): the validator itself failed unexpectedly
    """
    try:
        return schema.model_validate(dict(data or {}))
    except ValidationError as exc:
        raise AppError(
            ErrorKind.VALIDATION_ERROR,
            message=LOCATION_MESSAGES.get(location, ErrorKind.VALIDATION_ERROR.default_message),
            details=format_validation_errors(exc.errors()),
        ) from None
    except Exception:
        logger.exception("[validation] Unexpected error while validating %s with %s", location, schema.__name__)
        raise AppError(ErrorKind.INTERNAL_ERROR) from None


def validate_params(schema: Type[ModelT]):
    """Dependency factory: validate ``request.path_params`` against ``schema``."""

    async def dependency(request: Request) -> ModelT:
        return parse_payload(schema, request.path_params, "params")

    return dependency


def validate_query(schema: Type[ModelT]):
    """Dependency factory: validate ``request.query_params`` against ``schema``."""

    async def dependency(request: Request) -> ModelT:
        return parse_payload(schema, request.query_params, "query")

    return dependency
