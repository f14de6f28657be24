from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import NotAuthenticatedError
from .session import Session, SessionController, SessionStatus

LOGIN_PATH = "/login"


class GuardOutcome(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    ADMIT = "admit"


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    redirect_to: str | None = None

    @property
    def admitted(self) -> bool:
        return self.outcome is GuardOutcome.ADMIT


def evaluate(session: Session, login_path: str = LOGIN_PATH) -> GuardDecision:
    # while the session is still unknown, never redirect
    if session.status is SessionStatus.UNKNOWN:
        return GuardDecision(GuardOutcome.LOADING)
    if session.status is SessionStatus.ANONYMOUS:
        return GuardDecision(GuardOutcome.REDIRECT, redirect_to=login_path)
    return GuardDecision(GuardOutcome.ADMIT)


class RouteGuard:
    def __init__(self, controller: SessionController, login_path: str = LOGIN_PATH) -> None:
        self.controller = controller
        self.login_path = login_path

    def check(self) -> GuardDecision:
        return evaluate(self.controller.state, self.login_path)

    def require(self, screen: str) -> Session:
        decision = self.check()
        if not decision.admitted:
            raise NotAuthenticatedError(f"{screen} requires an authenticated session ({decision.outcome.value})")
        return self.controller.state
