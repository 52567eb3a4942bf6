from .listing import (
    CatalogListPage,
    EditorMode,
    EditorState,
    QuoteListPage,
    clients_page,
    materials_page,
    products_page,
    services_page,
    users_page,
)
from .payments_admin import PaymentsAdminPage
from .quote_admin import QuoteAdminPage

__all__ = [
    "CatalogListPage",
    "EditorMode",
    "EditorState",
    "PaymentsAdminPage",
    "QuoteAdminPage",
    "QuoteListPage",
    "clients_page",
    "materials_page",
    "products_page",
    "services_page",
    "users_page",
]
