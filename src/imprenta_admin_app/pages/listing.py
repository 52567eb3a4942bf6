from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Sequence, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from imprenta_client_sdk import (
    ApiSession,
    ClientValidationError,
    ErrorCategory,
    Quote,
    QuoteListQuery,
    ValidationIssue,
)
from imprenta_client_sdk.clients.catalog import CrudClient

from ..services.errors import normalize_error
from ..ui.notification_center import NotificationCenter
from ..ui.pagination import PaginationState, goto_page, next_page, page_count, prev_page

RecordT = TypeVar("RecordT", bound=BaseModel)


class EditorMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


@dataclass
class EditorState:
    mode: EditorMode
    record_id: int | None = None
    values: dict[str, Any] = field(default_factory=dict)


def _validation_error_from_pydantic(exc: PydanticValidationError) -> ClientValidationError:
    issues = [
        ValidationIssue(".".join(str(part) for part in error["loc"]) or "payload", error["msg"])
        for error in exc.errors()
    ]
    return ClientValidationError(issues)


class CatalogListPage(Generic[RecordT]):
    """Table plus modal editor over one catalog resource (clients, materials, products, services, users)."""

    def __init__(
        self,
        client_factory: Callable[[], CrudClient],
        *,
        columns: Sequence[str],
        editable_fields: Sequence[str],
        notifications: NotificationCenter,
        page_size: int = 10,
        label: str = "Registro",
    ) -> None:
        self._client_factory = client_factory
        self.columns = tuple(columns)
        self.editable_fields = tuple(editable_fields)
        self.notifications = notifications
        self.label = label
        self.rows: list[RecordT] = []
        self.filter_text = ""
        self.pagination = PaginationState(page_size=page_size)
        self.editor: EditorState | None = None
        self.pending_delete: int | None = None
        self.loading = False

    def load(self) -> bool:
        self.loading = True
        try:
            self.rows = list(self._client_factory().list())
        except Exception as exc:
            self._report(exc, f"No se pudieron cargar los registros de {self.label.lower()}")
            return False
        finally:
            self.loading = False
        self._sync_pagination()
        return True

    def set_filter(self, text: str) -> None:
        self.filter_text = text or ""
        self.pagination.page = 1
        self._sync_pagination()

    def filtered_rows(self) -> list[RecordT]:
        needle = self.filter_text.strip().lower()
        if not needle:
            return list(self.rows)
        matches = []
        for row in self.rows:
            for column in self.columns:
                value = getattr(row, column, None)
                if value is not None and needle in str(value).lower():
                    matches.append(row)
                    break
        return matches

    def visible_rows(self) -> list[RecordT]:
        start = (self.pagination.page - 1) * self.pagination.page_size
        return self.filtered_rows()[start : start + self.pagination.page_size]

    def next_page(self) -> None:
        next_page(self.pagination)

    def prev_page(self) -> None:
        prev_page(self.pagination)

    def goto_page(self, page: int) -> None:
        goto_page(self.pagination, page)

    def open_create(self) -> EditorState:
        self.editor = EditorState(mode=EditorMode.CREATE, values={name: None for name in self.editable_fields})
        return self.editor

    def open_edit(self, record_id: int) -> EditorState | None:
        record = next((row for row in self.rows if getattr(row, "id", None) == record_id), None)
        if record is None:
            self.notifications.error(f"{self.label} no encontrado", category=ErrorCategory.NOT_FOUND)
            return None
        values = {name: getattr(record, name, None) for name in self.editable_fields}
        self.editor = EditorState(mode=EditorMode.EDIT, record_id=record_id, values=values)
        return self.editor

    def close_editor(self) -> None:
        self.editor = None

    def save(self) -> bool:
        editor = self.editor
        if editor is None:
            return False
        client = self._client_factory()
        payload = {key: value for key, value in editor.values.items() if value is not None}
        try:
            try:
                request = client.write_model.model_validate(payload)
            except PydanticValidationError as exc:
                raise _validation_error_from_pydantic(exc) from exc
            if editor.mode is EditorMode.CREATE:
                client.create(request)
            else:
                client.update(editor.record_id, request)
        except Exception as exc:
            self._report(exc, f"No se pudo guardar {self.label.lower()}")
            return False
        self.editor = None
        self.notifications.success(f"{self.label} guardado")
        return self.load()

    def request_delete(self, record_id: int) -> None:
        self.pending_delete = record_id

    def confirm_delete(self) -> bool:
        record_id = self.pending_delete
        self.pending_delete = None
        if record_id is None:
            return False
        try:
            self._client_factory().delete(record_id)
        except Exception as exc:
            self._report(exc, f"No se pudo eliminar {self.label.lower()}")
            return False
        self.notifications.success(f"{self.label} eliminado")
        return self.load()

    def _sync_pagination(self) -> None:
        self.pagination.total_pages = page_count(len(self.filtered_rows()), self.pagination.page_size)
        goto_page(self.pagination, self.pagination.page)

    def _report(self, exc: BaseException, fallback: str) -> None:
        error = normalize_error(exc, fallback)
        if error.category is ErrorCategory.AUTHORIZATION:
            return
        self.notifications.error(error.message, category=error.category, details=error.details)


def clients_page(session: ApiSession, notifications: NotificationCenter) -> CatalogListPage:
    return CatalogListPage(
        session.clients_client,
        columns=("name", "email", "phone"),
        editable_fields=("name", "email", "phone", "address"),
        notifications=notifications,
        label="Cliente",
    )


def materials_page(session: ApiSession, notifications: NotificationCenter) -> CatalogListPage:
    return CatalogListPage(
        session.materials_client,
        columns=("name", "unit"),
        editable_fields=("name", "unit", "unit_cost"),
        notifications=notifications,
        label="Material",
    )


def products_page(session: ApiSession, notifications: NotificationCenter) -> CatalogListPage:
    return CatalogListPage(
        session.products_client,
        columns=("name", "description"),
        editable_fields=("name", "description", "base_price"),
        notifications=notifications,
        label="Producto",
    )


def services_page(session: ApiSession, notifications: NotificationCenter) -> CatalogListPage:
    return CatalogListPage(
        session.services_client,
        columns=("name", "description"),
        editable_fields=("name", "description", "price"),
        notifications=notifications,
        label="Servicio",
    )


def users_page(session: ApiSession, notifications: NotificationCenter) -> CatalogListPage:
    return CatalogListPage(
        session.users_client,
        columns=("name", "email"),
        editable_fields=("name", "email", "role_id", "password"),
        notifications=notifications,
        label="Usuario",
    )


class QuoteListPage:
    """Server-paginated quote list; picking a row hands the id to the quote workspace."""

    def __init__(
        self,
        session: ApiSession,
        notifications: NotificationCenter,
        *,
        on_select: Callable[[int], Any] | None = None,
    ) -> None:
        self.session = session
        self.notifications = notifications
        self.query = QuoteListQuery()
        self.rows: list[Quote] = []
        self.pagination = PaginationState(page_size=self.query.limit)
        self._on_select = on_select

    def set_filters(self, **changes: Any) -> bool:
        if "page" not in changes:
            changes["page"] = 1
        try:
            self.query = QuoteListQuery.model_validate({**self.query.model_dump(), **changes})
        except PydanticValidationError as exc:
            self._report(_validation_error_from_pydantic(exc))
            return False
        return self.load()

    def load(self) -> bool:
        try:
            response = self.session.quotes_client().list_quotes(self.query)
        except Exception as exc:
            self._report(exc)
            return False
        self.rows = list(response.quotes)
        self.pagination = PaginationState(
            page=response.pagination.current_page,
            page_size=response.pagination.quotes_per_page,
            total_pages=max(1, response.pagination.total_pages),
        )
        return True

    def next_page(self) -> bool:
        if not self.pagination.has_next:
            return False
        return self.set_filters(page=self.pagination.page + 1)

    def prev_page(self) -> bool:
        if not self.pagination.has_prev:
            return False
        return self.set_filters(page=self.pagination.page - 1)

    def select(self, quote_id: int) -> Any:
        if self._on_select is None:
            return None
        return self._on_select(quote_id)

    def _report(self, exc: BaseException) -> None:
        error = normalize_error(exc, "No se pudieron cargar las cotizaciones")
        if error.category is ErrorCategory.AUTHORIZATION:
            return
        self.notifications.error(error.message, category=error.category, details=error.details)
