from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Mapping, TypeVar

from pydantic import BaseModel

from ..models import Role, User, UserWrite
from ..models_catalog import (
    Client,
    ClientWrite,
    Material,
    MaterialWrite,
    Product,
    ProductWrite,
    Service,
    ServiceWrite,
)
from .base import BaseClient, _coerce_model, _expect_list, _expect_object

RecordT = TypeVar("RecordT", bound=BaseModel)
WriteT = TypeVar("WriteT", bound=BaseModel)


@dataclass
class CrudClient(BaseClient, Generic[RecordT, WriteT]):
    """List/get/create/update/delete over one ``/<resource>`` collection."""

    resource: ClassVar[str] = ""
    record_model: ClassVar[type[BaseModel]]
    write_model: ClassVar[type[BaseModel]]

    def __post_init__(self) -> None:
        self.module = self.resource

    def list(self) -> list[RecordT]:
        data = self._request("GET", f"/{self.resource}", operation="list")
        return [self.record_model.model_validate(row) for row in _expect_list(data, self.resource)]

    def get(self, record_id: int) -> RecordT:
        data = self._request("GET", f"/{self.resource}/{record_id}", operation="get")
        return self.record_model.model_validate(_expect_object(data, self.resource))

    def create(self, payload: WriteT | Mapping[str, Any]) -> RecordT:
        request = _coerce_model(payload, self.write_model)
        data = self._request("POST", f"/{self.resource}", json_body=request.to_payload(), operation="create")
        return self.record_model.model_validate(_expect_object(data, self.resource))

    def update(self, record_id: int, payload: WriteT | Mapping[str, Any]) -> RecordT:
        request = _coerce_model(payload, self.write_model)
        data = self._request(
            "PUT",
            f"/{self.resource}/{record_id}",
            json_body=request.to_payload(),
            operation="update",
        )
        return self.record_model.model_validate(_expect_object(data, self.resource))

    def delete(self, record_id: int) -> None:
        self._request("DELETE", f"/{self.resource}/{record_id}", operation="delete")


@dataclass
class ClientsClient(CrudClient[Client, ClientWrite]):
    resource: ClassVar[str] = "clients"
    record_model: ClassVar[type[BaseModel]] = Client
    write_model: ClassVar[type[BaseModel]] = ClientWrite


@dataclass
class MaterialsClient(CrudClient[Material, MaterialWrite]):
    resource: ClassVar[str] = "materials"
    record_model: ClassVar[type[BaseModel]] = Material
    write_model: ClassVar[type[BaseModel]] = MaterialWrite


@dataclass
class ProductsClient(CrudClient[Product, ProductWrite]):
    resource: ClassVar[str] = "products"
    record_model: ClassVar[type[BaseModel]] = Product
    write_model: ClassVar[type[BaseModel]] = ProductWrite


@dataclass
class ServicesClient(CrudClient[Service, ServiceWrite]):
    resource: ClassVar[str] = "services"
    record_model: ClassVar[type[BaseModel]] = Service
    write_model: ClassVar[type[BaseModel]] = ServiceWrite


@dataclass
class UsersClient(CrudClient[User, UserWrite]):
    resource: ClassVar[str] = "users"
    record_model: ClassVar[type[BaseModel]] = User
    write_model: ClassVar[type[BaseModel]] = UserWrite


@dataclass
class RolesClient(BaseClient):
    module: str = "roles"

    def list(self) -> list[Role]:
        data = self._request("GET", "/roles", operation="list")
        return [Role.model_validate(row) for row in _expect_list(data, "roles")]
