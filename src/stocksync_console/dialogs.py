from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DialogStatus(str, Enum):
    CLOSED = "closed"
    EDITING = "editing"
    SUBMITTING = "submitting"
    ERROR = "error"


class DialogMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"
    CONFIRM = "confirm"


class DialogStateError(RuntimeError):
    pass


@dataclass
class MutationDialog:
    """One create/edit/confirm dialog: closed -> editing -> submitting -> (closed | error)."""

    status: DialogStatus = DialogStatus.CLOSED
    mode: DialogMode | None = None
    target_id: str | None = None
    draft: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def is_open(self) -> bool:
        return self.status is not DialogStatus.CLOSED

    @property
    def is_submitting(self) -> bool:
        return self.status is DialogStatus.SUBMITTING

    def open(self, mode: DialogMode, draft: Mapping[str, Any] | None = None, target_id: str | None = None) -> None:
        if self.is_submitting:
            raise DialogStateError("Cannot reopen a dialog while it is submitting")
        self.status = DialogStatus.EDITING
        self.mode = mode
        self.target_id = target_id
        self.draft = dict(draft or {})
        self.error = None

    def set_field(self, key: str, value: Any) -> None:
        if self.status not in (DialogStatus.EDITING, DialogStatus.ERROR):
            raise DialogStateError(f"Cannot edit a dialog in state {self.status.value}")
        self.draft[key] = value

    def begin_submit(self) -> dict[str, Any]:
        if self.status not in (DialogStatus.EDITING, DialogStatus.ERROR):
            raise DialogStateError(f"Cannot submit a dialog in state {self.status.value}")
        self.status = DialogStatus.SUBMITTING
        self.error = None
        return dict(self.draft)

    def fail(self, message: str) -> None:
        if self.status is not DialogStatus.SUBMITTING:
            raise DialogStateError(f"Cannot fail a dialog in state {self.status.value}")
        self.status = DialogStatus.ERROR
        self.error = message

    def close(self) -> None:
        self.status = DialogStatus.CLOSED
        self.mode = None
        self.target_id = None
        self.draft = {}
        self.error = None

    def render(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "mode": self.mode.value if self.mode else None,
            "target_id": self.target_id,
            "draft": dict(self.draft),
            "error": self.error,
        }
