from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ApiError, DraftValidationError, TransportError

TRANSPORT_MESSAGE = "Unable to reach the server. Check your connection and try again."


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None

    @property
    def technical_details(self) -> str | None:
        if self.details:
            return self.details
        return None


def to_user_facing_error(exc: Exception, fallback: str) -> UserFacingError:
    if isinstance(exc, TransportError):
        return UserFacingError(message=TRANSPORT_MESSAGE, details=f"{exc.code}: {exc.message}")
    if isinstance(exc, ApiError):
        primary = exc.message if exc.structured else fallback
        return UserFacingError(message=primary, details=f"{exc.code} (HTTP {exc.status_code})")
    if isinstance(exc, DraftValidationError):
        return UserFacingError(message=str(exc), details="CLIENT_VALIDATION")
    return UserFacingError(message=fallback, details=type(exc).__name__)


def failure_message(exc: Exception, fallback: str) -> str:
    return to_user_facing_error(exc, fallback).message
