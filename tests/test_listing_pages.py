from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, ClassVar

import pytest

from imprenta_client_sdk import Client, ClientWrite, ErrorCategory, PaymentMethod, QuoteStatus, ServerError

from fakes import build_session, make_payment, make_quote
from imprenta_admin_app.pages.listing import CatalogListPage, EditorMode, QuoteListPage
from imprenta_admin_app.pages.payments_admin import PaymentsAdminPage
from imprenta_admin_app.ui.notification_center import NotificationCenter, NotificationLevel


@dataclass
class FakeClientsCrud:
    write_model: ClassVar[type] = ClientWrite
    rows: list[Client] = field(default_factory=list)
    created: list[ClientWrite] = field(default_factory=list)
    updated: list[tuple[int, ClientWrite]] = field(default_factory=list)
    deleted: list[int] = field(default_factory=list)
    fail_list: Exception | None = None

    def list(self) -> list[Client]:
        if self.fail_list:
            raise self.fail_list
        return list(self.rows)

    def create(self, request: ClientWrite) -> Client:
        self.created.append(request)
        row = Client(id=len(self.rows) + 1, **request.model_dump())
        self.rows.append(row)
        return row

    def update(self, record_id: int, request: ClientWrite) -> Client:
        self.updated.append((record_id, request))
        self.rows = [
            Client(id=record_id, **request.model_dump()) if row.id == record_id else row for row in self.rows
        ]
        return self.rows[record_id - 1]

    def delete(self, record_id: int) -> None:
        self.deleted.append(record_id)
        self.rows = [row for row in self.rows if row.id != record_id]


def _server_error() -> ServerError:
    return ServerError(code="HTTP_ERROR", message="boom", details=None, status_code=500, raw_payload={})


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def crud() -> FakeClientsCrud:
    names = ["Tipografía Central", "Rótulos del Norte", "Papelería Azul"] + [f"Cliente {n}" for n in range(1, 10)]
    return FakeClientsCrud(rows=[Client(id=idx, name=name) for idx, name in enumerate(names, start=1)])


@pytest.fixture
def page(crud: FakeClientsCrud, notifications: NotificationCenter) -> CatalogListPage:
    return CatalogListPage(
        lambda: crud,
        columns=("name", "email"),
        editable_fields=("name", "email", "phone"),
        notifications=notifications,
        page_size=5,
        label="Cliente",
    )


def test_catalog_paginates_and_filters(page: CatalogListPage) -> None:
    assert page.load() is True
    assert page.pagination.total_pages == 3
    assert len(page.visible_rows()) == 5

    page.goto_page(3)
    assert [row.id for row in page.visible_rows()] == [11, 12]
    page.next_page()
    assert page.pagination.page == 3

    page.set_filter("rótulos")
    assert page.pagination.page == 1
    assert page.pagination.total_pages == 1
    assert [row.name for row in page.visible_rows()] == ["Rótulos del Norte"]


def test_catalog_load_failure_notifies(page: CatalogListPage, crud: FakeClientsCrud, notifications) -> None:
    crud.fail_list = _server_error()

    assert page.load() is False

    [item] = notifications.active()
    assert item.level is NotificationLevel.ERROR
    assert item.message == "No se pudieron cargar los registros de cliente"
    assert item.category is ErrorCategory.TRANSPORT


def test_catalog_create_and_edit(page: CatalogListPage, crud: FakeClientsCrud, notifications) -> None:
    page.load()

    editor = page.open_create()
    assert editor.mode is EditorMode.CREATE
    editor.values.update(name="Imprenta Sur", email="sur@example.com")
    assert page.save() is True
    assert crud.created[0].name == "Imprenta Sur"
    assert page.editor is None
    assert len(page.rows) == 13

    editor = page.open_edit(2)
    assert editor.values["name"] == "Rótulos del Norte"
    editor.values["phone"] = "5555-2222"
    assert page.save() is True
    record_id, request = crud.updated[0]
    assert record_id == 2
    assert request.phone == "5555-2222"
    assert [item.message for item in notifications.active()] == ["Cliente guardado", "Cliente guardado"]


def test_catalog_invalid_payload_stays_in_editor(page: CatalogListPage, crud: FakeClientsCrud, notifications) -> None:
    page.load()
    editor = page.open_create()
    editor.values["name"] = ""

    assert page.save() is False

    assert page.editor is editor
    assert crud.created == []
    assert notifications.active()[0].category is ErrorCategory.VALIDATION


def test_catalog_delete_requires_confirmation(page: CatalogListPage, crud: FakeClientsCrud) -> None:
    page.load()

    page.request_delete(1)
    assert crud.deleted == []
    assert page.confirm_delete() is True

    assert crud.deleted == [1]
    assert all(row.id != 1 for row in page.rows)
    assert page.confirm_delete() is False


def test_quote_list_pages_through_server(notifications) -> None:
    session = build_session(*[make_quote(n, QuoteStatus.CREATED if n % 2 else QuoteStatus.ACCEPTED) for n in range(1, 13)])
    selected: list[int] = []
    quotes = QuoteListPage(session, notifications, on_select=selected.append)

    assert quotes.set_filters(limit=5) is True
    assert quotes.pagination.total_pages == 3
    assert [row.id for row in quotes.rows] == [1, 2, 3, 4, 5]

    assert quotes.next_page() is True
    assert quotes.pagination.page == 2
    assert quotes.rows[0].id == 6

    assert quotes.set_filters(status=QuoteStatus.ACCEPTED) is True
    assert quotes.query.page == 1
    assert all(row.status is QuoteStatus.ACCEPTED for row in quotes.rows)

    quotes.select(quotes.rows[0].id)
    assert selected == [2]


def test_quote_list_rejects_oversized_page(notifications) -> None:
    session = build_session(make_quote(1))
    quotes = QuoteListPage(session, notifications)

    assert quotes.set_filters(limit=500) is False

    assert session.quotes.list_calls == []
    assert notifications.active()[0].category is ErrorCategory.VALIDATION


@pytest.fixture
def payments_page(notifications):
    session = build_session(
        make_quote(1),
        make_quote(2, QuoteStatus.DELIVERED),
        payments={
            1: [make_payment(1, 1, "400.00", quote_status=QuoteStatus.FINISHED)],
            2: [
                make_payment(2, 2, "600.00", "TRANSFERENCIA", quote_status=QuoteStatus.DELIVERED),
                make_payment(3, 2, "400.00", quote_status=QuoteStatus.DELIVERED),
            ],
        },
    )
    return session, PaymentsAdminPage(session, notifications)


def test_payments_page_loads_and_summarizes(payments_page) -> None:
    _, page = payments_page

    assert page.load() is True

    stats = page.stats
    assert stats.count == 3
    assert stats.total_amount == Decimal("1400.00")
    assert stats.by_method[PaymentMethod.CASH] == Decimal("800.00")


def test_payments_page_filters_by_method(payments_page) -> None:
    session, page = payments_page

    assert page.set_filters(payment_method=PaymentMethod.TRANSFER) is True

    assert [row.id for row in page.rows] == [2]
    assert session.payments.list_calls[-1].payment_method is PaymentMethod.TRANSFER
    assert page.clear_filters() is True
    assert len(page.rows) == 3


def test_payments_page_rejects_inverted_dates(payments_page, notifications) -> None:
    session, page = payments_page

    assert page.set_filters(date_from=date(2026, 10, 5), date_to=date(2026, 10, 1)) is False

    assert session.payments.list_calls == []
    assert notifications.active()[0].category is ErrorCategory.VALIDATION


def test_payments_report_validates_range(payments_page, notifications) -> None:
    session, page = payments_page

    assert page.load_report(None, date(2026, 10, 31)) is None
    assert page.load_report(date(2025, 1, 1), date(2026, 10, 31)) is None
    assert session.payments.report_calls == []
    assert len(notifications.active()) == 2

    report = page.load_report(date(2026, 10, 1), date(2026, 10, 31))

    assert report.summary.count == 3
    assert report.summary.total_amount == Decimal("1400.00")


def test_payments_page_refuses_delete_for_delivered_quote(payments_page, notifications) -> None:
    session, page = payments_page
    page.load()

    assert page.request_delete(2) is False
    assert page.pending_delete is None

    assert page.request_delete(1) is True
    assert page.confirm_delete() is True
    assert session.payments.deleted == [1]
    assert [row.id for row in page.rows] == [2, 3]
    assert notifications.active()[-1].message == "Pago eliminado exitosamente"
