from __future__ import annotations

from typing import Any

from .exceptions import (
    ApiError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)

GENERIC_MESSAGE = "Request failed"


def map_error(status_code: int, payload: Any) -> ApiError:
    body = payload if isinstance(payload, dict) else {}
    server_message = body.get("message")
    structured = isinstance(server_message, str) and bool(server_message.strip())
    code = str(body.get("code") or "HTTP_ERROR")
    message = server_message.strip() if structured else GENERIC_MESSAGE
    mapped: type[ApiError]
    if status_code == 401:
        mapped = UnauthorizedError
    elif status_code == 403:
        mapped = ForbiddenError
    elif status_code == 404:
        mapped = NotFoundError
    elif status_code == 409:
        mapped = ConflictError
    elif 400 <= status_code < 500:
        mapped = ValidationError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = ApiError
    return mapped(
        code=code,
        message=message,
        details=body.get("details"),
        status_code=status_code,
        structured=structured,
        raw_payload=payload,
    )
