from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar, Generic, TypeVar

from ..dialogs import DialogMode, DialogStateError, MutationDialog
from ..exceptions import ApiError, DraftValidationError, MalformedResponseError
from ..filters import FilterSet
from ..http_client import HttpClient
from ..logging_utils import log_action
from ..models import Resource, decode_rows
from ..pagination import PaginationState, paginate
from ..ui_errors import failure_message
from ..view_state import resolve_state

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Resource)


def to_number(value: Any, field: str) -> int | float:
    """Coerce a form value to a number; blank counts as zero."""
    if isinstance(value, bool):
        raise DraftValidationError(field, "must be a number")
    if isinstance(value, (int, float)):
        return value
    text = str(value if value is not None else "").strip()
    if not text:
        return 0
    try:
        number = float(text)
    except ValueError as exc:
        raise DraftValidationError(field, "must be a number") from exc
    if number != number or number in (float("inf"), float("-inf")):
        raise DraftValidationError(field, "must be a number")
    return int(number) if number.is_integer() else number


def to_text(value: Any) -> str:
    return str(value if value is not None else "").strip()


class ListSynchronizer(Generic[R]):
    """Filtered snapshot of one remote collection.

    Every fetch gets a ticket; only the most recently issued ticket may apply
    its result, so a slow response never overwrites a newer one.
    """

    resource: ClassVar[str] = ""
    path: ClassVar[str] = ""
    model: ClassVar[type[Resource]] = Resource
    filter_keys: ClassVar[tuple[str, ...]] = ()
    filter_choices: ClassVar[Mapping[str, Iterable[str]]] = {}
    fetch_failed_message: ClassVar[str] = "Failed to fetch records"
    empty_message: ClassVar[str] = "No records to display."

    def __init__(self, http: HttpClient, *, page_size: int = 10) -> None:
        self.http = http
        self.filters = FilterSet(self.filter_keys, self.filter_choices)
        self.pagination = PaginationState(page=1, page_size=page_size)
        self.rows: list[R] = []
        self.loading = False
        self.error: str | None = None
        self.in_flight: set[str] = set()
        self.malformed = False
        self.dropped = 0
        self._issued = 0

    async def set_filter(self, key: str, value: str | None) -> bool:
        self.filters.set(key, value)
        self.pagination.page = 1
        return await self.fetch()

    async def fetch(self) -> bool:
        self._issued += 1
        ticket = self._issued
        self.loading = True
        params = self.filters.as_params()
        logger.debug("fetch_issued", extra={"resource": self.resource, "ticket": ticket, "params": params})
        body_malformed = False
        try:
            payload = await self.http.request("GET", self.path, params=params)
        except MalformedResponseError:
            payload = None
            body_malformed = True
        except ApiError as exc:
            if not self._is_current(ticket):
                return False
            self.error = failure_message(exc, self.fetch_failed_message)
            self.loading = False
            logger.info("fetch_failed", extra={"resource": self.resource, "status_code": exc.status_code})
            return False
        if not self._is_current(ticket):
            return False
        decoded = decode_rows(payload, self.model)
        self.rows = decoded.rows
        self.malformed = body_malformed or (payload is not None and decoded.malformed)
        self.dropped = decoded.dropped
        self.error = None
        self.loading = False
        return True

    def _is_current(self, ticket: int) -> bool:
        if ticket == self._issued:
            return True
        logger.debug("fetch_stale_discarded", extra={"resource": self.resource, "ticket": ticket, "latest": self._issued})
        return False

    def begin_action(self, target_id: str) -> bool:
        if target_id in self.in_flight:
            return False
        self.in_flight.add(target_id)
        return True

    def end_action(self, target_id: str) -> None:
        self.in_flight.discard(target_id)

    def is_busy(self, target_id: str) -> bool:
        return target_id in self.in_flight

    def visible_rows(self) -> list[R]:
        return list(self.rows)

    def page_rows(self) -> dict[str, Any]:
        return paginate(self.visible_rows(), self.pagination)

    def render(self) -> dict[str, Any]:
        page = self.page_rows()
        state = resolve_state(
            is_loading=self.loading,
            error=self.error,
            has_data=bool(page["rows"]),
            empty_message=self.empty_message,
        )
        page["rows"] = [row.model_dump(mode="json") for row in page["rows"]]
        return {
            "resource": self.resource,
            "filters": self.filters.snapshot(),
            "loading": self.loading,
            "error": self.error,
            "page": page,
            "in_flight": sorted(self.in_flight),
            "decode": {"malformed": self.malformed, "dropped": self.dropped},
            "view_state": state.render(),
        }


class EditableSynchronizer(ListSynchronizer[R]):
    """List synchronizer with a create dialog; writes are followed by a full re-fetch."""

    singular: ClassVar[str] = "record"
    create_failed_message: ClassVar[str] = ""

    def __init__(self, http: HttpClient, *, page_size: int = 10) -> None:
        super().__init__(http, page_size=page_size)
        self.editor = MutationDialog()

    def blank_draft(self) -> dict[str, Any]:
        return {}

    def encode_draft(self, draft: Mapping[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    def create_path(self) -> str:
        return self.path

    def open_create(self) -> None:
        self.editor.open(DialogMode.CREATE, self.blank_draft())

    def cancel_edit(self) -> None:
        if not self.editor.is_submitting:
            self.editor.close()

    async def submit(self) -> bool:
        if not self.editor.is_open:
            return False
        if self.editor.mode is DialogMode.EDIT and self.editor.target_id:
            return await self.update(self.editor.target_id, self.editor.draft)
        return await self.create(self.editor.draft)

    async def create(self, draft: Mapping[str, Any]) -> bool:
        if not self._claim_editor(DialogMode.CREATE, draft, None):
            return False
        return await self._submit_dialog(
            self.editor,
            "POST",
            self.create_path(),
            action="create",
            target_id=None,
            fallback=self.create_failed_message or f"Failed to add {self.singular}",
        )

    def _claim_editor(self, mode: DialogMode, draft: Mapping[str, Any], target_id: str | None) -> bool:
        if self.editor.is_submitting:
            return False
        same_dialog = self.editor.is_open and self.editor.mode is mode and self.editor.target_id == target_id
        if not same_dialog:
            self.editor.open(mode, draft, target_id=target_id)
        elif draft is not self.editor.draft:
            self.editor.draft = dict(draft)
        return True

    async def _submit_dialog(
        self,
        dialog: MutationDialog,
        method: str,
        path: str,
        *,
        action: str,
        target_id: str | None,
        fallback: str,
        encode: bool = True,
    ) -> bool:
        try:
            draft = dialog.begin_submit()
        except DialogStateError:
            return False
        try:
            body = self.encode_draft(draft) if encode else None
        except DraftValidationError as exc:
            dialog.fail(failure_message(exc, fallback))
            return False
        try:
            await self.http.request(method, path, json_body=body)
        except MalformedResponseError:
            # write bodies are never read; a 2xx is success whatever it carries
            pass
        except ApiError as exc:
            dialog.fail(failure_message(exc, fallback))
            log_action(logger, self.resource, action, "failure", target_id=target_id, status_code=exc.status_code)
            return False
        dialog.close()
        log_action(logger, self.resource, action, "success", target_id=target_id)
        await self.fetch()
        return True

    def render(self) -> dict[str, Any]:
        payload = super().render()
        payload["editor"] = self.editor.render()
        return payload


class CrudSynchronizer(EditableSynchronizer[R]):
    """Editable synchronizer with update and confirmed delete."""

    def __init__(self, http: HttpClient, *, page_size: int = 10) -> None:
        super().__init__(http, page_size=page_size)
        self.confirm = MutationDialog()

    def draft_from(self, row: R) -> dict[str, Any]:
        raise NotImplementedError

    def open_edit(self, row: R) -> None:
        self.editor.open(DialogMode.EDIT, self.draft_from(row), target_id=row.id)

    async def update(self, target_id: str, draft: Mapping[str, Any]) -> bool:
        if not self._claim_editor(DialogMode.EDIT, draft, target_id):
            return False
        return await self._submit_dialog(
            self.editor,
            "PUT",
            f"{self.path}/{target_id}",
            action="update",
            target_id=target_id,
            fallback=f"Failed to update {self.singular}",
        )

    def request_delete(self, target_id: str) -> None:
        self.confirm.open(DialogMode.CONFIRM, target_id=target_id)

    def cancel_delete(self) -> None:
        if not self.confirm.is_submitting:
            self.confirm.close()

    async def confirm_delete(self) -> bool:
        if not self.confirm.is_open or not self.confirm.target_id:
            return False
        return await self.delete(self.confirm.target_id)

    async def delete(self, target_id: str) -> bool:
        if self.confirm.is_submitting or not self.begin_action(target_id):
            return False
        try:
            if not (self.confirm.is_open and self.confirm.target_id == target_id):
                self.confirm.open(DialogMode.CONFIRM, target_id=target_id)
            return await self._submit_dialog(
                self.confirm,
                "DELETE",
                f"{self.path}/{target_id}",
                action="delete",
                target_id=target_id,
                fallback=f"Failed to delete {self.singular}",
                encode=False,
            )
        finally:
            self.end_action(target_id)

    def render(self) -> dict[str, Any]:
        payload = super().render()
        payload["confirm"] = self.confirm.render()
        return payload
