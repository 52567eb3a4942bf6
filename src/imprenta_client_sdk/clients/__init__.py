from .auth import AuthClient
from .catalog import (
    ClientsClient,
    CrudClient,
    MaterialsClient,
    ProductsClient,
    RolesClient,
    ServicesClient,
    UsersClient,
)
from .payments import PaymentsClient
from .quotes import QuotesClient

__all__ = [
    "AuthClient",
    "ClientsClient",
    "CrudClient",
    "MaterialsClient",
    "PaymentsClient",
    "ProductsClient",
    "QuotesClient",
    "RolesClient",
    "ServicesClient",
    "UsersClient",
]
