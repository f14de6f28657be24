from __future__ import annotations

import base64
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol

from .exceptions import AuthorizationError, DraftValidationError, MalformedResponseError
from .http_client import HttpClient
from .models import Identity, LoginResponse, decode_object

logger = logging.getLogger(__name__)

REGISTRATION_CONFIRMATION = "Registration successful! Please login."


class SessionStatus(str, Enum):
    UNKNOWN = "unknown"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Session:
    status: SessionStatus = SessionStatus.UNKNOWN
    identity: Identity | None = None

    @property
    def is_ready(self) -> bool:
        return self.status is not SessionStatus.UNKNOWN

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED


@dataclass(frozen=True)
class TokenValidation:
    valid: bool
    reason: str | None = None
    claims: dict[str, Any] | None = None


class TokenStoreLike(Protocol):
    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def clear(self) -> None: ...


def _decode_claims(token: str) -> dict[str, Any] | None:
    parts = token.split(".")
    if len(parts) != 3:
        return None
    payload_part = parts[1]
    padded = payload_part + ("=" * (-len(payload_part) % 4))
    decoded = base64.urlsafe_b64decode(padded.encode("utf-8")).decode("utf-8")
    payload = json.loads(decoded)
    if not isinstance(payload, dict):
        raise ValueError("claims must be a JSON object")
    return payload


def validate_token(token: str | None, now_utc: datetime | None = None) -> TokenValidation:
    """Local check only: JWT-shaped tokens must decode and must not be past ``exp``.

    Opaque tokens are accepted as-is; the server has the final say.
    """
    if not token:
        return TokenValidation(valid=False, reason="missing_token")
    try:
        claims = _decode_claims(token)
    except (ValueError, UnicodeDecodeError):
        return TokenValidation(valid=False, reason="corrupt_token")
    if claims is None:
        return TokenValidation(valid=True)

    exp = claims.get("exp")
    if exp is None:
        return TokenValidation(valid=True, claims=claims)
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return TokenValidation(valid=False, reason="corrupt_token")

    now = now_utc or datetime.now(tz=timezone.utc)
    if float(exp) <= now.timestamp():
        return TokenValidation(valid=False, reason="expired_token")
    return TokenValidation(valid=True, claims=claims)


def identity_from_claims(claims: dict[str, Any] | None) -> Identity | None:
    if not claims:
        return None
    identity = decode_object(claims, Identity)
    if identity is None or not any((identity.id, identity.name, identity.email, identity.role)):
        return None
    return identity


SessionListener = Callable[[Session], None]


class SessionController:
    """Owns the credential lifecycle: unknown -> anonymous | authenticated."""

    def __init__(
        self,
        http: HttpClient,
        tokens: TokenStoreLike,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.http = http
        self.tokens = tokens
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))
        self._state = Session()
        self._listeners: list[SessionListener] = []
        self.http.register_auth_failure_handler(self._on_auth_failure)

    @property
    def state(self) -> Session:
        return self._state

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, state: Session) -> None:
        previous = self._state
        self._state = state
        if previous != state:
            logger.info("session_transition", extra={"from_status": previous.status.value, "to_status": state.status.value})
            for listener in list(self._listeners):
                listener(state)

    def initialize(self) -> Session:
        if self._state.is_ready:
            return self._state
        token = self.tokens.get()
        if not token:
            self._transition(Session(SessionStatus.ANONYMOUS))
            return self._state
        validation = validate_token(token, now_utc=self._clock())
        if not validation.valid:
            logger.info("stored_token_rejected", extra={"reason": validation.reason})
            self.tokens.clear()
            self._transition(Session(SessionStatus.ANONYMOUS))
            return self._state
        self._transition(Session(SessionStatus.AUTHENTICATED, identity_from_claims(validation.claims)))
        return self._state

    async def login(self, email: str, password: str) -> Session:
        if not email.strip():
            raise DraftValidationError("email", "is required")
        if not password:
            raise DraftValidationError("password", "is required")
        logger.info("login_attempt")
        payload = await self.http.request(
            "POST",
            "/auth/login",
            json_body={"email": email.strip(), "password": password},
            report_auth_failure=False,
        )
        response = decode_object(payload, LoginResponse)
        if response is None:
            logger.warning("login_response_malformed")
            raise MalformedResponseError(
                code="MALFORMED_RESPONSE",
                message="Login response did not include a token",
                status_code=200,
                raw_payload=None,
            )
        self.tokens.set(response.token)
        identity = response.user or identity_from_claims(validate_token(response.token).claims)
        self._transition(Session(SessionStatus.AUTHENTICATED, identity))
        logger.info("login_success", extra={"role": identity.role if identity else None})
        return self._state

    async def register(self, name: str, email: str, password: str) -> str:
        for field, value in (("name", name.strip()), ("email", email.strip()), ("password", password)):
            if not value:
                raise DraftValidationError(field, "is required")
        logger.info("register_attempt")
        await self.http.request(
            "POST",
            "/auth/register",
            json_body={"name": name.strip(), "email": email.strip(), "password": password},
            report_auth_failure=False,
        )
        logger.info("register_success")
        return REGISTRATION_CONFIRMATION

    def logout(self) -> None:
        self.tokens.clear()
        self._transition(Session(SessionStatus.ANONYMOUS))
        logger.info("logout")

    def _on_auth_failure(self, error: AuthorizationError) -> None:
        if self._state.status is SessionStatus.ANONYMOUS:
            return
        logger.warning("session_rejected_by_server", extra={"status_code": error.status_code})
        self.logout()
