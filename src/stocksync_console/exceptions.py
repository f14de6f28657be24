from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None = None
    status_code: int = 0
    structured: bool = False
    raw_payload: object | None = None

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.code}: {self.message}"


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class AuthorizationError(ApiError):
    """401/403: the credential is missing, expired or revoked."""


class UnauthorizedError(AuthorizationError):
    pass


class ForbiddenError(AuthorizationError):
    pass


class ValidationError(ApiError):
    """4xx rejection of the request itself."""


class NotFoundError(ValidationError):
    pass


class ConflictError(ValidationError):
    pass


class ServerError(ApiError):
    """5xx server-side failures."""


class MalformedResponseError(ApiError):
    """2xx response whose body does not have the expected shape."""


class DraftValidationError(ValueError):
    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class NotAuthenticatedError(RuntimeError):
    pass
